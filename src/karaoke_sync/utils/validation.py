"""Validation utilities."""

import logging
import math
from pathlib import Path

from ..config import MAX_TOLERANCE
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_lyrics(raw_lyrics: str) -> str:
    """Validate raw lyric text supplied by the caller."""
    if raw_lyrics is None or not raw_lyrics.strip():
        raise ValidationError("Lyrics cannot be empty")
    return raw_lyrics


def validate_tolerance(tolerance: float) -> float:
    """Validate the onset window tolerance."""
    if not math.isfinite(tolerance) or not 0.0 <= tolerance <= MAX_TOLERANCE:
        raise ValidationError(
            f"Tolerance must be between 0 and {MAX_TOLERANCE} seconds"
        )
    return tolerance


def validate_shift(amount: float) -> float:
    """Validate a manual timing nudge."""
    if not math.isfinite(amount) or abs(amount) > 60.0:
        raise ValidationError("Shift must be between -60 and +60 seconds")
    return amount


def validate_speed(multiplier: float) -> float:
    """Validate a segment speed multiplier."""
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise ValidationError("Speed multiplier must be positive")
    return multiplier


def validate_output_path(path: str) -> Path:
    """Validate and normalize output path."""
    output_path = Path(path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Cannot create output directory: {e}")

    if output_path.suffix.lower() != ".json":
        logger.debug(f"Output path {output_path} has no .json suffix, adding one")
        output_path = output_path.with_suffix(".json")

    return output_path


def check_segment_order(segments) -> int:
    """Log segments that overlap or start before their predecessor.

    Segments are never reordered or trimmed here; each keeps its own timing.
    Returns the number of ordering problems found.
    """
    problems = 0
    prev = None
    for idx, seg in enumerate(segments):
        if seg.end_time <= seg.start_time:
            problems += 1
            logger.warning(
                "Segment %d has non-positive duration (%.2fs -> %.2fs)",
                idx + 1,
                seg.start_time,
                seg.end_time,
            )
        if prev is not None:
            if seg.start_time < prev.start_time:
                problems += 1
                logger.warning(
                    "Segment %d starts before previous segment (%.2fs < %.2fs)",
                    idx + 1,
                    seg.start_time,
                    prev.start_time,
                )
            elif seg.start_time < prev.end_time:
                problems += 1
                logger.debug(
                    "Segment %d overlaps previous segment by %.2fs",
                    idx + 1,
                    prev.end_time - seg.start_time,
                )
        prev = seg
    return problems
