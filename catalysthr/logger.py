"""
Structured logging system for Catalyst HR.

Provides centralized logging with console and file outputs, key/value
context on every message, and in-process metrics about pipeline activity
(stage transitions, notes, failures).
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring pipeline activity.
    """

    def __init__(
        self,
        name: str = "catalysthr",
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
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "transitions": 0,
            "advances": 0,
            "rejections": 0,
            "notes_added": 0,
            "reconfigurations": 0,
            "orphans_reassigned": 0,
            "failures": 0,
            "errors_by_type": {},
            "stage_entries": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"catalysthr_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_transition(self, new_stage: str, kind: str = "set"):
        """Record a stage change; kind is 'set', 'advance', 'reject' or 'orphan'."""
        self.metrics["transitions"] += 1
        if kind == "advance":
            self.metrics["advances"] += 1
        elif kind == "reject":
            self.metrics["rejections"] += 1
        elif kind == "orphan":
            self.metrics["orphans_reassigned"] += 1
        entries = self.metrics["stage_entries"]
        entries[new_stage] = entries.get(new_stage, 0) + 1

    def record_note(self):
        self.metrics["notes_added"] += 1

    def record_reconfiguration(self):
        self.metrics["reconfigurations"] += 1

    def record_failure(self, error_type: str):
        """Record a failed pipeline operation."""
        self.metrics["failures"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics_copy = dict(self.metrics)
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        metrics_copy["stage_entries"] = dict(self.metrics["stage_entries"])
        attempts = metrics_copy["transitions"] + metrics_copy["failures"]
        metrics_copy["success_rate"] = (
            round(metrics_copy["transitions"] / attempts, 3) if attempts else None
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Pipeline Session Metrics ===")
        self.info(
            f"Transitions: {metrics['transitions']} "
            f"(advances={metrics['advances']}, rejections={metrics['rejections']}, "
            f"orphans={metrics['orphans_reassigned']})"
        )
        self.info(f"Notes added: {metrics['notes_added']}")
        self.info(f"Failures: {metrics['failures']}")

        if metrics["stage_entries"]:
            self.info("Stage entries:")
            for stage, count in metrics["stage_entries"].items():
                self.info(f"  {stage}: {count}")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "catalysthr",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
