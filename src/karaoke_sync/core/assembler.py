"""Assemble karaoke segments from line segments and the acoustic word stream."""

from typing import Any, List, Sequence

from ..config import MIN_SEGMENT_DURATION, TOLERANCE
from ..utils.logging import get_logger
from ..utils.validation import check_segment_order
from .distributor import distribute_word_times, distribution_method
from .models import AcousticWord, KaraokeSegment, LineSegment, segment_id
from .oracles import parse_acoustic_words, parse_line_segments

logger = get_logger(__name__)


def window_words(
    acoustic_words: Sequence[AcousticWord],
    start: float,
    end: float,
    tolerance: float = TOLERANCE,
) -> List[AcousticWord]:
    """Acoustic words whose onset lies in ``[start - tolerance, end + tolerance)``.

    Windows of neighbouring segments may share a boundary word.
    """
    lo = start - tolerance
    hi = end + tolerance
    return [w for w in acoustic_words if lo <= w.start < hi]


def assemble_segments(
    line_segments: Sequence[LineSegment],
    acoustic_words: Sequence[AcousticWord],
    tolerance: float = TOLERANCE,
    min_duration: float = MIN_SEGMENT_DURATION,
) -> List[KaraokeSegment]:
    """Build one KaraokeSegment per line segment, in input order.

    Each segment is timed independently; overlaps between segments are
    reported but left as the segmenter produced them.
    """
    check_segment_order(line_segments)

    result = []
    for i, seg in enumerate(line_segments):
        window = window_words(acoustic_words, seg.start_time, seg.end_time, tolerance)
        words = distribute_word_times(
            seg.words(), window, seg.start_time, seg.end_time, min_duration
        )
        logger.debug(
            f"{segment_id(i)}: {len(words)} words, {len(window)} onsets "
            f"({distribution_method(window)})"
        )
        karaoke_seg = KaraokeSegment(
            id=segment_id(i),
            text=seg.text,
            start_time=seg.start_time,
            end_time=seg.end_time,
            words=tuple(words),
        )
        karaoke_seg.validate()
        result.append(karaoke_seg)
    return result


def assemble_from_payloads(
    segmenter_output: str,
    aligner_response: Any = None,
    tolerance: float = TOLERANCE,
    min_duration: float = MIN_SEGMENT_DURATION,
) -> List[KaraokeSegment]:
    """Parse both oracle payloads and assemble.

    An unusable segmenter payload gives an empty list; a missing aligner
    response makes every line fall back to proportional timing.
    """
    line_segments = parse_line_segments(segmenter_output)
    if not line_segments:
        return []
    acoustic_words = parse_acoustic_words(aligner_response)
    if not acoustic_words:
        logger.info("No acoustic word timing available; using proportional timing")
    return assemble_segments(line_segments, acoustic_words, tolerance, min_duration)
