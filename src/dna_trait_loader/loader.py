"""Async orchestration of a full DNA file parse."""

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from .models import (
    DNASource,
    FileInfo,
    FileMetadata,
    LineError,
    ParseResult,
    ProcessingStatus,
    Variant,
)
from .parsers.format_detection import (
    FileFormat,
    detect_file_format,
    is_comment_line,
    is_header_line,
)
from .parsers.line_parser import parse_line
from .progress import ProgressChannel, ProgressReporter, ProgressStage

logger = logging.getLogger(__name__)

TOO_MANY_ERRORS_MESSAGE = "Too many parsing errors. Stopping processing."
WARNING_EXCERPT_LENGTH = 50
HIGH_INVALID_LINES_MESSAGE = (
    "High number of invalid lines ({invalid}/{total}). "
    "File may be corrupted or in unexpected format."
)
BYTE_ORDER_MARK = "\ufeff"


class DNAFileError(Exception):
    """Raised when a DNA file cannot be read."""

    pass


@dataclass
class LoadConfig:
    """Configuration for DNA file parsing and trait analysis."""

    max_errors: int = 100
    progress_interval: int = 1000
    illustrative_examples: bool = False
    normalize_alleles: bool = False
    knowledge_base_path: Path | None = None
    log_level: str = "INFO"
    # Share of rejected data lines above which a file-level warning is added
    invalid_line_ratio: float = 0.1


@dataclass
class _LineScan:
    variants: list[Variant]
    errors: list[str]
    warnings: list[str]
    chromosome_count: dict[str, int]
    genotype_distribution: dict[str, int]
    processed: int = 0
    aborted: bool = False
    cancelled: bool = False
    invalid_lines: int = 0
    total_data_lines: int = 0


async def read_dna_file(path: Path | str) -> tuple[str, int]:
    """Read a DNA export as UTF-8 text off the event loop.

    Returns:
        Tuple of (content, size in bytes)

    Raises:
        DNAFileError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(path)

    def _read() -> tuple[str, int]:
        data = path.read_bytes()
        return data.decode("utf-8-sig"), len(data)

    try:
        return await asyncio.to_thread(_read)
    except FileNotFoundError as e:
        raise DNAFileError(f"File not found: {path}") from e
    except UnicodeDecodeError as e:
        raise DNAFileError(f"File is not valid UTF-8 text: {path.name}") from e
    except OSError as e:
        raise DNAFileError(f"Failed to read file {path.name}: {e.strerror or e}") from e


def split_lines(content: str) -> list[tuple[int, str]]:
    """Return (line_number, trimmed line) for every non-empty line."""
    numbered = []
    for line_number, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if line:
            numbered.append((line_number, line))
    return numbered


def extract_metadata(lines: list[str], file_format: FileFormat) -> FileMetadata:
    """Detect the header row and count skipped comment/header lines."""
    metadata = FileMetadata(
        format=file_format.structural_format,
        delimiter=file_format.delimiter,
        total_lines=len(lines),
    )

    first_data_line = next((line for line in lines if not is_comment_line(line)), None)
    if first_data_line is not None:
        metadata.has_header = is_header_line(first_data_line)

    metadata.skipped_lines = sum(
        1 for line in lines if is_comment_line(line) or is_header_line(line)
    )
    return metadata


class DNAFileParser:
    """Parse 23andMe / AncestryDNA raw exports into validated variants.

    Per-line failures never escape: they are collected as errors or
    warnings on the ParseResult. File-level read failures become a failed
    ParseResult with a single error.
    """

    def __init__(
        self,
        config: LoadConfig | None = None,
        progress: ProgressChannel | None = None,
    ):
        self.config = config or LoadConfig()
        self.progress = progress

    async def parse_file(
        self, path: Path | str, cancel_event: asyncio.Event | None = None
    ) -> ParseResult:
        """Read and parse a DNA file."""
        path = Path(path)
        start = time.perf_counter()
        reporter = ProgressReporter(self.progress, path.name)
        reporter.update(ProgressStage.UPLOADING, 0, "Reading file...")

        try:
            content, file_size = await read_dna_file(path)
        except DNAFileError as e:
            logger.error("Unreadable DNA file %s: %s", path, e)
            reporter.update(ProgressStage.FAILED, 100, str(e))
            return self._failed_result(path.name, 0, str(e), time.perf_counter() - start)

        return await self._parse(
            content, path.name, file_size, start, reporter, cancel_event
        )

    async def parse_content(
        self,
        content: str,
        file_name: str,
        file_size: int | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ParseResult:
        """Parse already-read file content (e.g. an upload body)."""
        start = time.perf_counter()
        reporter = ProgressReporter(self.progress, file_name)
        reporter.update(ProgressStage.UPLOADING, 0, "Reading file...")
        if file_size is None:
            file_size = len(content.encode("utf-8"))
        content = content.removeprefix(BYTE_ORDER_MARK)
        return await self._parse(content, file_name, file_size, start, reporter, cancel_event)

    async def _parse(
        self,
        content: str,
        file_name: str,
        file_size: int,
        start: float,
        reporter: ProgressReporter,
        cancel_event: asyncio.Event | None,
    ) -> ParseResult:
        upload_date = datetime.now(UTC).isoformat()
        file_info = FileInfo(
            id=str(uuid4()),
            file_name=file_name,
            file_size=file_size,
            upload_date=upload_date,
        )
        file_info.transition_to(ProcessingStatus.PROCESSING)

        numbered = split_lines(content)
        lines = [line for _, line in numbered]

        reporter.update(ProgressStage.PARSING, 10, "Analyzing file format...")
        file_format = detect_file_format(lines, file_name)
        file_info.source = file_format.source
        reporter.update(ProgressStage.PARSING, 20, f"Detected {file_format.source.value} format")
        logger.info(
            "Parsing %s: %d lines, source=%s, delimiter=%r",
            file_name,
            len(lines),
            file_format.source.value,
            file_format.delimiter,
        )

        metadata = extract_metadata(lines, file_format)

        reporter.update(ProgressStage.PARSING, 30, "Parsing genetic variants...")
        scan = await self._scan_lines(
            numbered, file_format, file_name, upload_date, reporter, cancel_event
        )
        metadata.chromosome_count = scan.chromosome_count
        metadata.genotype_distribution = scan.genotype_distribution

        if scan.invalid_lines > scan.total_data_lines * self.config.invalid_line_ratio:
            scan.warnings.append(
                HIGH_INVALID_LINES_MESSAGE.format(
                    invalid=scan.invalid_lines, total=scan.total_data_lines
                )
            )
            logger.warning(
                "%s: %d of %d data lines rejected",
                file_name,
                scan.invalid_lines,
                scan.total_data_lines,
            )

        reporter.update(ProgressStage.VALIDATING, 80, "Validating data...")

        success = len(scan.variants) > 0
        file_info.total_variants = len(scan.variants)
        file_info.valid_variants = sum(1 for v in scan.variants if v.is_valid())
        file_info.errors = list(scan.errors)
        file_info.warnings = list(scan.warnings)
        file_info.transition_to(
            ProcessingStatus.COMPLETED if success else ProcessingStatus.FAILED
        )

        if success:
            reporter.update(
                ProgressStage.COMPLETED,
                100,
                f"Parsed {len(scan.variants)} variants successfully",
            )
        else:
            reporter.update(ProgressStage.FAILED, 100, "No valid variants found")

        elapsed = time.perf_counter() - start
        logger.info(
            "Parsed %s in %.2fs: %d variants, %d errors, %d warnings",
            file_name,
            elapsed,
            len(scan.variants),
            len(scan.errors),
            len(scan.warnings),
        )

        return ParseResult(
            success=success,
            file_info=file_info,
            variants=scan.variants,
            errors=scan.errors,
            warnings=scan.warnings,
            processing_time=elapsed,
            metadata=metadata,
        )

    async def _scan_lines(
        self,
        numbered: list[tuple[int, str]],
        file_format: FileFormat,
        file_name: str,
        upload_date: str,
        reporter: ProgressReporter,
        cancel_event: asyncio.Event | None,
    ) -> _LineScan:
        scan = _LineScan(
            variants=[],
            errors=[],
            warnings=[],
            chromosome_count={},
            genotype_distribution={},
        )
        total_data_lines = sum(
            1 for _, line in numbered if not (is_comment_line(line) or is_header_line(line))
        )
        scan.total_data_lines = total_data_lines
        interval = self.config.progress_interval

        for line_number, line in numbered:
            if is_comment_line(line) or is_header_line(line):
                continue

            outcome = parse_line(line, file_format.delimiter, file_name, line_number, upload_date)

            if isinstance(outcome, LineError):
                if len(scan.errors) >= self.config.max_errors:
                    scan.errors.append(TOO_MANY_ERRORS_MESSAGE)
                    scan.aborted = True
                    logger.warning(
                        "Aborting %s at line %d after %d errors",
                        file_name,
                        line_number,
                        self.config.max_errors,
                    )
                    break
                scan.errors.append(str(outcome))
                scan.invalid_lines += 1
            elif outcome.is_valid():
                scan.variants.append(outcome)
                scan.chromosome_count[outcome.chromosome] = (
                    scan.chromosome_count.get(outcome.chromosome, 0) + 1
                )
                scan.genotype_distribution[outcome.genotype] = (
                    scan.genotype_distribution.get(outcome.genotype, 0) + 1
                )
            else:
                scan.warnings.append(
                    f"Line {line_number}: Invalid variant data - "
                    f"{line[:WARNING_EXCERPT_LENGTH]}..."
                )
                scan.invalid_lines += 1

            scan.processed += 1

            if scan.processed % interval == 0:
                reporter.update(
                    ProgressStage.PARSING,
                    30 + (scan.processed / total_data_lines) * 50,
                    f"Processed {scan.processed} variants...",
                    scan.processed,
                    total_data_lines,
                )
                await asyncio.sleep(0)

                if cancel_event is not None and cancel_event.is_set():
                    scan.errors.append(f"Processing cancelled after {scan.processed} lines.")
                    scan.cancelled = True
                    logger.warning("Parse of %s cancelled at line %d", file_name, line_number)
                    break

        return scan

    def _failed_result(
        self, file_name: str, file_size: int, message: str, elapsed: float
    ) -> ParseResult:
        file_info = FileInfo(
            id=str(uuid4()),
            file_name=file_name,
            file_size=file_size,
            source=DNASource.UNKNOWN,
            upload_date=datetime.now(UTC).isoformat(),
            errors=[message],
        )
        file_info.transition_to(ProcessingStatus.FAILED)

        return ParseResult(
            success=False,
            file_info=file_info,
            variants=[],
            errors=[message],
            warnings=[],
            processing_time=elapsed,
            metadata=FileMetadata(),
        )


async def parse_many(
    paths: Iterable[Path | str],
    config: LoadConfig | None = None,
    progress: ProgressChannel | None = None,
) -> list[ParseResult]:
    """Parse several files concurrently, one task per file."""
    parser = DNAFileParser(config, progress)
    return list(await asyncio.gather(*(parser.parse_file(p) for p in paths)))
