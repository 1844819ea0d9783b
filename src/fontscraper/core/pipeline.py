"""Two-stage batch orchestration for turning renders into glyph records.

Stage 1 acquires and extracts every character, one at a time. Only once all
characters have been through stage 1 is the shared baseline calibrated, and
only then does stage 2 trace each character against it. Per-character
failures mark that record as error and never stop the batch.

Key components:
- BatchResult: Records, baseline and statistics of a finished batch
- BatchProcessor: Orchestrator running both stages
"""

import time
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from fontscraper.config import FontScraperSettings
from fontscraper.core.baseline import compute_baseline
from fontscraper.core.extractor import ForegroundExtractor
from fontscraper.core.tracer import OutlineTracer
from fontscraper.core.transform import SPACE, default_space_width
from fontscraper.domain import GlyphRecord, GlyphStatus, ProcessedCharacter
from fontscraper.exceptions import CharacterError
from fontscraper.io.source import ImageSource
from fontscraper.utils import BatchStats, ProcessingLogger

ProgressCallback = Callable[[int], None]
RecordCallback = Callable[[GlyphRecord], None]

UPPERCASE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE_CHARS = "abcdefghijklmnopqrstuvwxyz"
NUMBER_CHARS = "0123456789"
BASIC_PUNCT_CHARS = " !@#$%^&*()_+-=[]{};':\",./<>?"
DEFAULT_CHARSET = f"{UPPERCASE_CHARS}{LOWERCASE_CHARS}{NUMBER_CHARS}{BASIC_PUNCT_CHARS}"


def unique_chars(charset: str) -> list[str]:
    """Characters of a charset without repeats, in first-seen order."""
    return list(dict.fromkeys(charset))


@dataclass
class BatchResult:
    """Outcome of one batch.

    Attributes:
        records: One record per unique character, in charset order
        baseline: Shared baseline row used for vertical placement
        stats: Batch statistics
        processed: Extracted bitmaps of the characters that passed stage 1
    """

    records: list[GlyphRecord]
    baseline: int
    stats: BatchStats
    processed: dict[str, ProcessedCharacter] = field(default_factory=dict)

    def get(self, char: str) -> GlyphRecord | None:
        """Record for a character, or None if it was not in the batch."""
        for record in self.records:
            if record.char == char:
                return record
        return None

    @property
    def done(self) -> list[GlyphRecord]:
        return [r for r in self.records if r.status == GlyphStatus.DONE]

    @property
    def failed(self) -> list[GlyphRecord]:
        return [r for r in self.records if r.status == GlyphStatus.ERROR]

    @property
    def any_success(self) -> bool:
        return bool(self.done)


class BatchProcessor:
    """Runs the acquisition, calibration and tracing stages over a charset.

    Example:
        source = HttpImageSource(extract_base_url(url))
        processor = BatchProcessor(FontScraperSettings(), source)
        result = processor.process("AB ")
        for record in result.records:
            print(record.char, record.status)
    """

    def __init__(
        self,
        settings: FontScraperSettings,
        source: ImageSource,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the batch processor.

        Args:
            settings: Application settings
            source: Image source supplying one bitmap per character
            logger: Bound logger (module logger if None)
        """
        self.settings = settings
        self.source = source
        self.logger = logger or structlog.get_logger(__name__)
        self.extractor = ForegroundExtractor(settings.extraction)
        self.tracer = OutlineTracer(settings.tracing, settings.extraction)

    def process(
        self,
        charset: str,
        progress_callback: ProgressCallback | None = None,
        record_callback: RecordCallback | None = None,
    ) -> BatchResult:
        """Process every unique character of a charset.

        Args:
            charset: Characters to fetch; repeats are ignored
            progress_callback: Called with a percentage (0-100) that never decreases
            record_callback: Called with every replacement record, for live status display

        Returns:
            BatchResult with one record per unique character
        """
        processing_logger = ProcessingLogger(self.logger)
        stats = processing_logger.stats
        stats.start_time = time.time()

        chars = unique_chars(charset)
        records = [GlyphRecord(char=char) for char in chars]
        processing_logger.log_batch_start(len(chars))

        last_progress = 0

        def report(percent: int) -> None:
            nonlocal last_progress
            percent = max(last_progress, min(100, percent))
            last_progress = percent
            if progress_callback is not None:
                progress_callback(percent)

        def update(index: int, record: GlyphRecord) -> None:
            records[index] = record
            if record_callback is not None:
                record_callback(record)

        def fail(index: int, error: Exception) -> None:
            tb = None if isinstance(error, CharacterError) else traceback.format_exc()
            processing_logger.log_char_error(chars[index], error, traceback=tb)
            update(index, records[index].fail(str(error)))

        for index in range(len(records)):
            update(index, records[index])

        # Stage 1: acquisition and extraction
        extracted: list[tuple[int, ProcessedCharacter]] = []
        for index, char in enumerate(chars):
            processing_logger.log_char_start(char, stage="fetch")
            try:
                update(index, records[index].transition(GlyphStatus.FETCHING))
                pixels = self.source.fetch(char)
                update(index, records[index].transition(GlyphStatus.PROCESSING))
                processed = self.extractor.extract(pixels)
            except Exception as e:
                fail(index, e)
            else:
                processing_logger.log_char_extracted(
                    char, processed.width, processed.height, processed.max_y
                )
                extracted.append((index, processed))
            report(round((index + 1) / len(chars) * 50))

        max_ys = [p.max_y for _, p in extracted]
        baseline = compute_baseline(max_ys, fallback=self.settings.source.fallback_baseline)
        processing_logger.log_baseline(baseline, samples=sum(1 for y in max_ys if y != -1))

        # Stage 2: tracing against the shared baseline
        units_per_em = self.settings.font.units_per_em
        for position, (index, processed) in enumerate(extracted):
            char = chars[index]
            processing_logger.log_char_start(char, stage="trace")
            try:
                update(index, records[index].transition(GlyphStatus.CONVERTING))
                traced = self.tracer.trace(processed, baseline)
                advance_width = processed.width
                if char == SPACE:
                    advance_width = default_space_width(units_per_em)
                update(
                    index,
                    records[index].transition(
                        GlyphStatus.DONE,
                        outline=traced.outline,
                        visual_width=processed.width,
                        visual_height=processed.height,
                        advance_width=advance_width,
                        x_offset=0.0,
                        y_offset=traced.y_offset,
                        scale=1.0,
                        max_y=processed.max_y,
                    ),
                )
            except Exception as e:
                fail(index, e)
            else:
                processing_logger.log_char_complete(char, len(traced.outline), traced.y_offset)
            report(50 + round((position + 1) / len(extracted) * 50))

        report(100)
        stats.end_time = time.time()

        self.logger.info(
            "Batch complete",
            processed=stats.processed_count,
            errors=stats.error_count,
            empty=stats.empty_count,
            baseline=baseline,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return BatchResult(
            records=records,
            baseline=baseline,
            stats=stats,
            processed={chars[index]: processed for index, processed in extracted},
        )
