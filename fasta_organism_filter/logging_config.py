"""
Logging setup for filtering runs.

Console output is human-readable by default; ``format="json"`` writes one JSON object
per line instead, with any ``extra`` fields attached to the record. A level-counting
handler lets the command line report how many warnings a run produced.
"""

import json
import logging
import logging.handlers
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional

import psutil

from .config import LoggingConfig

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class JSONLineFormatter(logging.Formatter):
    """Format each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class LevelCountHandler(logging.Handler):
    """Counts records per level name; emits nothing."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.counts = Counter()

    def emit(self, record: logging.LogRecord) -> None:
        self.counts[record.levelname] += 1

    @property
    def warning_count(self) -> int:
        return self.counts["WARNING"]


_level_counter: Optional[LevelCountHandler] = None


def get_warning_count() -> int:
    """Number of warnings logged since the last setup_logging call."""
    if _level_counter is None:
        return 0
    return _level_counter.warning_count


def _formatter_for(config: LoggingConfig) -> logging.Formatter:
    if config.format.lower() == "json":
        return JSONLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure the root logger for a filtering run.

    Existing root handlers are replaced by the warning counter, a stdout handler,
    and a rotating file handler when ``config.log_file`` is set.
    """
    global _level_counter

    level = getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    _level_counter = LevelCountHandler()
    root_logger.addHandler(_level_counter)

    handlers = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            filename=config.log_file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter_for(config))
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug("Logging initialized at %s", config.level.upper())


def log_performance_metrics(logger: logging.Logger, operation: str, duration: float, **metrics):
    """
    Log the duration and resident memory of a completed operation.

    Args:
        logger: Logger instance
        operation: Operation name
        duration: Operation duration in seconds
        **metrics: Additional values attached to the record
    """
    memory_mb = psutil.Process().memory_info().rss / 1024 / 1024
    logger.info(
        "Performance: %s completed in %.1f seconds (%.0f MB resident)",
        operation, duration, memory_mb,
        extra={
            "operation": operation,
            "duration_seconds": duration,
            "memory_mb": memory_mb,
            **metrics
        }
    )


def log_filter_progress(logger: logging.Logger, percent_complete: float,
                        proteins_matched: Optional[int] = None):
    """
    Log progress through the input FASTA file.

    Args:
        logger: Logger instance
        percent_complete: Percent of the input file consumed
        proteins_matched: Number of proteins written so far (filter modes only)
    """
    if proteins_matched is None:
        message = f"Working: {percent_complete:.1f}% complete"
    else:
        message = f"Working: {percent_complete:.2f}% complete; {proteins_matched:,} proteins matched"

    logger.info(
        message,
        extra={
            "percent_complete": percent_complete,
            "proteins_matched": proteins_matched
        }
    )
