"""Playback and manual-editing helpers over assembled segments.

Segments are immutable; every edit returns a new segment.
"""

from dataclasses import replace
from typing import List, Sequence

from ..config import MIN_EDIT_DURATION
from .models import KaraokeSegment, WordTiming


def find_active_segment(segments: Sequence[KaraokeSegment], t: float) -> int:
    """Index of the first segment with start <= t < end, or -1."""
    for i, seg in enumerate(segments):
        if seg.start_time <= t < seg.end_time:
            return i
    return -1


def word_progress(word: WordTiming, t: float) -> float:
    """Fraction of the word highlighted at time ``t``, in [0, 1]."""
    duration = word.end_time - word.start_time
    if duration <= 0:
        return 1.0 if t >= word.start_time else 0.0
    return min(1.0, max(0.0, (t - word.start_time) / duration))


def shift_segment(segment: KaraokeSegment, amount: float) -> KaraokeSegment:
    """Move a segment and its words by ``amount`` seconds, clamped at zero."""
    new_start = max(0.0, segment.start_time + amount)
    new_end = max(new_start + MIN_EDIT_DURATION, segment.end_time + amount)
    words = tuple(
        replace(
            w,
            start_time=max(0.0, w.start_time + amount),
            end_time=max(0.0, w.end_time + amount),
        )
        for w in segment.words
    )
    return replace(segment, start_time=new_start, end_time=new_end, words=words)


def scale_segment(segment: KaraokeSegment, multiplier: float) -> KaraokeSegment:
    """Stretch or compress a segment around its start time."""
    duration = segment.end_time - segment.start_time
    if duration <= 0:
        duration = MIN_EDIT_DURATION
    new_duration = duration * multiplier
    start = segment.start_time

    words = []
    for w in segment.words:
        rel_start = (w.start_time - start) / duration
        rel_end = (w.end_time - start) / duration
        words.append(
            replace(
                w,
                start_time=start + rel_start * new_duration,
                end_time=start + rel_end * new_duration,
            )
        )
    return replace(segment, end_time=start + new_duration, words=tuple(words))


def replace_segment(
    segments: Sequence[KaraokeSegment], updated: KaraokeSegment
) -> List[KaraokeSegment]:
    """Copy of ``segments`` with the entry sharing ``updated.id`` swapped out."""
    ids = [seg.id for seg in segments]
    if updated.id not in ids:
        raise KeyError(updated.id)
    return [updated if seg.id == updated.id else seg for seg in segments]
