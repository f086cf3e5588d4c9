"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_lyrics,
    validate_tolerance,
    validate_shift,
    validate_speed,
    validate_output_path,
    check_segment_order,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_lyrics",
    "validate_tolerance",
    "validate_shift",
    "validate_speed",
    "validate_output_path",
    "check_segment_order",
]
