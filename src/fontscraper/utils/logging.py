"""Logging utilities for FontScraper."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class BatchStats:
    """Statistics from one batch run."""

    total_count: int = 0
    processed_count: int = 0
    empty_count: int = 0
    error_count: int = 0
    baseline: int | None = None
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"fontscraper_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("fontscraper")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking batch progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = BatchStats()

    def log_batch_start(self, total: int) -> None:
        """Log start of a batch."""
        self._logger.info("Starting batch", characters=total)
        self._stats.total_count = total

    def log_char_start(self, char: str, stage: str) -> None:
        """Log start of a pipeline stage for one character."""
        self._logger.debug("Processing character", char=char, stage=stage)

    def log_char_extracted(self, char: str, width: int, height: int, max_y: int) -> None:
        """Log a finished foreground extraction."""
        self._logger.debug(
            "Foreground extracted",
            char=char,
            width=width,
            height=height,
            max_y=max_y,
        )
        if max_y == -1:
            self._stats.empty_count += 1

    def log_baseline(self, baseline: int, samples: int) -> None:
        """Log the calibrated batch baseline."""
        self._logger.info("Baseline determined", baseline=baseline, samples=samples)
        self._stats.baseline = baseline

    def log_char_complete(
        self,
        char: str,
        rectangles: int,
        y_offset: int,
    ) -> None:
        """Log successful tracing of one character."""
        self._logger.info(
            "Character traced",
            char=char,
            rectangles=rectangles,
            y_offset=y_offset,
        )
        self._stats.processed_count += 1

    def log_char_error(
        self,
        char: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a per-character failure."""
        self._logger.error(
            "Character processing failed",
            char=char,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((char, str(error)))

    @property
    def stats(self) -> BatchStats:
        """Get current batch statistics."""
        return self._stats
