"""
Structured logging for TalentView.

Console and file output with JSON-rendered context, plus counters that
track bulk loads and view recomputation so a session can be summarized.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Logger wrapper with context rendering and load/recompute metrics.
    """

    def __init__(
        self,
        name: str = "talentview",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to a daily file
            enable_console: Write logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "loads_started": 0,
            "loads_applied": 0,
            "loads_discarded": 0,
            "requests_attempted": 0,
            "requests_successful": 0,
            "requests_failed": 0,
            "malformed_records": 0,
            "recomputes": 0,
            "errors_by_type": {},
            "collections": {},
        }

        # stdout is reserved for CLI output
        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"talentview_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_load_started(self):
        self.metrics["loads_started"] += 1

    def record_load_applied(self):
        self.metrics["loads_applied"] += 1

    def record_load_discarded(self):
        """A load finished after a newer one had already been applied."""
        self.metrics["loads_discarded"] += 1

    def record_request_attempt(self, collection: str):
        self.metrics["requests_attempted"] += 1
        stats = self.metrics["collections"].setdefault(
            collection, {"attempts": 0, "successes": 0}
        )
        stats["attempts"] += 1

    def record_request_success(self, collection: str):
        self.metrics["requests_successful"] += 1
        if collection in self.metrics["collections"]:
            self.metrics["collections"][collection]["successes"] += 1

    def record_request_failure(self, collection: str, error_type: str):
        self.metrics["requests_failed"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_malformed_record(self, count: int = 1):
        self.metrics["malformed_records"] += count

    def record_recompute(self):
        self.metrics["recomputes"] += 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-collection success rates."""
        metrics_copy = self.metrics.copy()
        for stats in metrics_copy["collections"].values():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(stats["successes"] / stats["attempts"], 3)
        return metrics_copy

    def log_metrics_summary(self):
        metrics = self.get_metrics()

        self.info("=== Session Metrics ===")
        self.info(
            f"Loads: {metrics['loads_applied']} applied, "
            f"{metrics['loads_discarded']} discarded of {metrics['loads_started']}"
        )
        self.info(
            f"Requests: {metrics['requests_successful']}/{metrics['requests_attempted']} "
            f"({metrics['requests_failed']} failed)"
        )
        for collection, stats in metrics["collections"].items():
            rate = stats.get("success_rate", 0) * 100
            self.info(f"  {collection}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")
        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")
        if metrics["malformed_records"]:
            self.info(f"Malformed records coerced: {metrics['malformed_records']}")
        self.info(f"Recomputes: {metrics['recomputes']}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "talentview",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the process-wide logger.

    Arguments only apply on first creation; later calls return the
    existing instance unchanged.
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Drop the process-wide logger so the next get_logger() builds a new one."""
    global _global_logger
    _global_logger = None
