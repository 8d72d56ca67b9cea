"""Structured logging module for mp4batch.

Provides configurable logging with JSON format support, file rotation and
attribution of records to the input file being resolved.
"""

from mp4batch.logging.config import configure_logging
from mp4batch.logging.context import InputContextFilter, current_input, input_context
from mp4batch.logging.handlers import JSONFormatter

__all__ = [
    "InputContextFilter",
    "JSONFormatter",
    "configure_logging",
    "current_input",
    "input_context",
]
