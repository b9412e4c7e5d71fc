"""Tests for the progress event channel."""

import asyncio

import pytest


class TestProgressStage:
    """Test stage transition rules."""

    def test_forward_sequence(self):
        from dna_trait_loader.progress import ProgressStage

        assert ProgressStage.UPLOADING.can_transition_to(ProgressStage.PARSING)
        assert ProgressStage.PARSING.can_transition_to(ProgressStage.VALIDATING)
        assert ProgressStage.VALIDATING.can_transition_to(ProgressStage.COMPLETED)

    def test_repeat_stage_allowed(self):
        from dna_trait_loader.progress import ProgressStage

        assert ProgressStage.PARSING.can_transition_to(ProgressStage.PARSING)

    def test_skip_and_backward_rejected(self):
        from dna_trait_loader.progress import ProgressStage

        assert not ProgressStage.UPLOADING.can_transition_to(ProgressStage.COMPLETED)
        assert not ProgressStage.VALIDATING.can_transition_to(ProgressStage.PARSING)

    def test_failed_from_any_active_stage(self):
        from dna_trait_loader.progress import ProgressStage

        for stage in (ProgressStage.UPLOADING, ProgressStage.PARSING, ProgressStage.VALIDATING):
            assert stage.can_transition_to(ProgressStage.FAILED)

    def test_terminal_stages(self):
        from dna_trait_loader.progress import ProgressStage

        assert ProgressStage.COMPLETED.is_terminal
        assert ProgressStage.FAILED.is_terminal
        assert not ProgressStage.COMPLETED.can_transition_to(ProgressStage.FAILED)
        assert not ProgressStage.FAILED.can_transition_to(ProgressStage.FAILED)


class TestProgressChannel:
    """Test fan-out to callbacks and queues."""

    def test_subscribe_and_unsubscribe(self):
        from dna_trait_loader.progress import ProgressChannel, ProgressEvent, ProgressStage

        channel = ProgressChannel()
        events = []
        unsubscribe = channel.subscribe(events.append)
        assert channel.subscriber_count == 1

        channel.publish(ProgressEvent(ProgressStage.PARSING, 10, "a"))
        unsubscribe()
        channel.publish(ProgressEvent(ProgressStage.PARSING, 20, "b"))

        assert [e.message for e in events] == ["a"]
        assert channel.subscriber_count == 0

    def test_failing_callback_is_isolated(self):
        from dna_trait_loader.progress import ProgressChannel, ProgressEvent, ProgressStage

        def broken(event):
            raise ValueError("boom")

        channel = ProgressChannel()
        events = []
        channel.subscribe(broken)
        channel.subscribe(events.append)

        channel.publish(ProgressEvent(ProgressStage.PARSING, 10, "still delivered"))

        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_full_queue_drops_events(self):
        from dna_trait_loader.progress import ProgressChannel, ProgressEvent, ProgressStage

        channel = ProgressChannel()
        queue = channel.open_queue(maxsize=1)

        channel.publish(ProgressEvent(ProgressStage.PARSING, 10, "kept"))
        channel.publish(ProgressEvent(ProgressStage.PARSING, 20, "dropped"))

        assert queue.qsize() == 1
        assert (await queue.get()).message == "kept"

    @pytest.mark.asyncio
    async def test_close_sends_end_marker(self):
        from dna_trait_loader.progress import ProgressChannel

        channel = ProgressChannel()
        queue = channel.open_queue()
        channel.close()

        assert await asyncio.wait_for(queue.get(), timeout=1) is None
        assert channel.subscriber_count == 0


class TestProgressReporter:
    """Test per-parse stage enforcement."""

    def test_clamps_progress(self):
        from dna_trait_loader.progress import ProgressChannel, ProgressReporter, ProgressStage

        channel = ProgressChannel()
        events = []
        channel.subscribe(events.append)
        reporter = ProgressReporter(channel, "f.txt")

        reporter.update(ProgressStage.UPLOADING, -5, "low")
        reporter.update(ProgressStage.PARSING, 150, "high")

        assert [e.progress for e in events] == [0.0, 100.0]
        assert events[0].file_name == "f.txt"

    def test_ignores_illegal_transition(self):
        from dna_trait_loader.progress import ProgressChannel, ProgressReporter, ProgressStage

        channel = ProgressChannel()
        events = []
        channel.subscribe(events.append)
        reporter = ProgressReporter(channel)

        reporter.update(ProgressStage.UPLOADING, 0, "start")
        reporter.update(ProgressStage.COMPLETED, 100, "skipped ahead")

        assert [e.stage for e in events] == [ProgressStage.UPLOADING]
        assert reporter.stage == ProgressStage.UPLOADING

    def test_no_channel_tracks_stage(self):
        from dna_trait_loader.progress import ProgressReporter, ProgressStage

        reporter = ProgressReporter(None)
        reporter.update(ProgressStage.UPLOADING, 0, "start")

        assert reporter.stage == ProgressStage.UPLOADING
