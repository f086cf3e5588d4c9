"""Word-level timing for a single lyric line.

Lyric words are mapped onto the acoustic word onsets that fall inside the
line's window by position, not by text: word ``i`` of ``n`` lands ``i/n`` of
the way through the acoustic onset sequence. When no onsets are available the
line span is split by character count instead.
"""

from typing import List, Sequence

import numpy as np

from ..config import MIN_SEGMENT_DURATION
from ..utils.logging import get_logger
from .models import AcousticWord, WordTiming

logger = get_logger(__name__)

METHOD_RHYTHM_ANCHOR = "rhythm_anchor"
METHOD_PROPORTIONAL = "proportional"


def distribute_word_times(
    lyric_words: Sequence[str],
    acoustic_words: Sequence[AcousticWord],
    seg_start: float,
    seg_end: float,
    min_duration: float = MIN_SEGMENT_DURATION,
) -> List[WordTiming]:
    """Assign start/end times to each lyric word of one line.

    Args:
        lyric_words: Whitespace tokens of the line, in order.
        acoustic_words: Onsets inside the line's tolerance window, ordered by start.
        seg_start: Line start from the segmenter.
        seg_end: Line end from the segmenter.
        min_duration: Floor for the line span in the proportional fallback.

    Returns:
        One WordTiming per lyric word, start times non-decreasing.
    """
    n = len(lyric_words)
    if n == 0:
        return []

    if acoustic_words:
        bounds = _rhythm_anchor_bounds(n, acoustic_words)
    else:
        bounds = _proportional_bounds(lyric_words, seg_start, seg_end, min_duration)

    return [
        WordTiming(text=word, start_time=bounds[i], end_time=bounds[i + 1])
        for i, word in enumerate(lyric_words)
    ]


def distribution_method(acoustic_words: Sequence[AcousticWord]) -> str:
    """Name of the path ``distribute_word_times`` takes for these onsets."""
    return METHOD_RHYTHM_ANCHOR if acoustic_words else METHOD_PROPORTIONAL


# ----------------------
# Rhythm-anchor mapping
# ----------------------
def _anchor_timeline(acoustic_words: Sequence[AcousticWord]) -> np.ndarray:
    """Onsets of every acoustic word plus the offset of the last one (m + 1 points)."""
    starts = [w.start for w in acoustic_words]
    starts.append(acoustic_words[-1].end)
    return np.asarray(starts, dtype=float)


def _rhythm_anchor_bounds(
    n: int, acoustic_words: Sequence[AcousticWord]
) -> List[float]:
    """Word boundaries 0..n resolved against the acoustic slot timeline."""
    m = len(acoustic_words)
    anchors = _anchor_timeline(acoustic_words)

    # Boundary k sits at fractional slot (k / n) * m; word i spans boundaries i, i+1
    positions = np.arange(n + 1, dtype=float) / n * m
    lo = np.minimum(np.floor(positions), m - 1).astype(int)
    times = anchors[lo] + (positions - lo) * (anchors[lo + 1] - anchors[lo])

    logger.debug(f"Rhythm-anchor mapping: {n} lyric words onto {m} onsets")
    return [float(t) for t in times]


# ----------------------
# Character-proportional fallback
# ----------------------
def _proportional_bounds(
    lyric_words: Sequence[str],
    seg_start: float,
    seg_end: float,
    min_duration: float,
) -> List[float]:
    """Word boundaries 0..n spaced by cumulative character count."""
    total_chars = max(1, sum(len(w) for w in lyric_words))
    duration = max(min_duration, seg_end - seg_start)

    bounds = [seg_start]
    cum = 0
    for word in lyric_words:
        cum += len(word)
        bounds.append(seg_start + (cum / total_chars) * duration)

    # Unclamped spans end exactly on the segment end, not one rounding step off
    if duration == seg_end - seg_start:
        bounds[-1] = seg_end

    logger.debug(
        f"Proportional fallback: {len(lyric_words)} words over {duration:.2f}s"
    )
    return bounds
