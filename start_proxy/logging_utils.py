"""Logging configuration for the launcher.

Records are rendered as runner workflow commands so that debug output is
folded away unless step debugging is on, and warnings/errors are annotated.
"""
import logging
import sys
from typing import Optional, TextIO

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_command_data(value: str) -> str:
    """Escape a workflow command payload."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandFormatter(logging.Formatter):
    """Format records as ``::debug::``/``::warning::``/``::error::`` commands."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        message = super().format(record)
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_command_data(message)}"


def setup_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Handler:
    """Attach a workflow command handler to the package logger."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))

    logger = logging.getLogger("start_proxy")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False
    return handler
