"""Progress events for file parsing, published to independent subscribers.

A parse publishes events to a ProgressChannel. Consumers (CLI progress bar,
logs, metrics) attach either a plain callback or an asyncio.Queue and never
need to be wired into the parser itself. Publishing is fire-and-forget: a
failing subscriber is logged and skipped.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ProgressStage(Enum):
    """Stages of a parse: uploading -> parsing -> validating -> completed."""

    UPLOADING = "uploading"
    PARSING = "parsing"
    VALIDATING = "validating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ProgressStage.COMPLETED, ProgressStage.FAILED)

    def can_transition_to(self, target: "ProgressStage") -> bool:
        if self.is_terminal:
            return False
        if target == ProgressStage.FAILED or target == self:
            return True
        return _STAGE_SEQUENCE.index(target) == _STAGE_SEQUENCE.index(self) + 1


_STAGE_SEQUENCE = [
    ProgressStage.UPLOADING,
    ProgressStage.PARSING,
    ProgressStage.VALIDATING,
    ProgressStage.COMPLETED,
]


@dataclass(frozen=True)
class ProgressEvent:
    """One progress update for a single file."""

    stage: ProgressStage
    progress: float
    message: str
    current_line: int | None = None
    total_lines: int | None = None
    file_name: str | None = None


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressChannel:
    """Fan-out of progress events to callbacks and queues."""

    def __init__(self) -> None:
        self._callbacks: list[ProgressCallback] = []
        self._queues: list[asyncio.Queue] = []

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def open_queue(self, maxsize: int = 0) -> asyncio.Queue:
        """Return a queue that receives every published event.

        ``None`` is put on the queue when the channel is closed. When a
        bounded queue is full the event is dropped for that queue.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._queues.append(queue)
        return queue

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks) + len(self._queues)

    def publish(self, event: ProgressEvent) -> None:
        for callback in list(self._callbacks):
            try:
                callback(event)
            except Exception as e:
                logger.debug("Progress subscriber %r failed: %s", callback, e)

        for queue in self._queues:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.debug("Progress queue full, dropping %s event", event.stage.value)

    def close(self) -> None:
        """Signal end of stream to queue subscribers."""
        for queue in self._queues:
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                logger.debug("Progress queue full, end-of-stream marker dropped")
        self._queues.clear()


class ProgressReporter:
    """Per-parse progress state that enforces the stage sequence."""

    def __init__(self, channel: ProgressChannel | None, file_name: str | None = None):
        self._channel = channel
        self._file_name = file_name
        self.stage: ProgressStage | None = None

    def update(
        self,
        stage: ProgressStage,
        progress: float,
        message: str,
        current_line: int | None = None,
        total_lines: int | None = None,
    ) -> None:
        if self.stage is not None and not self.stage.can_transition_to(stage):
            logger.debug(
                "Ignoring progress stage %s after %s", stage.value, self.stage.value
            )
            return
        self.stage = stage

        if self._channel is None:
            return

        self._channel.publish(
            ProgressEvent(
                stage=stage,
                progress=min(max(progress, 0.0), 100.0),
                message=message,
                current_line=current_line,
                total_lines=total_lines,
                file_name=self._file_name,
            )
        )
