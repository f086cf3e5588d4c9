"""Confidence scoring for assembled karaoke segments.

Positional mapping degrades quietly when the aligner hears a very different
number of words than the line contains (missed held notes, breath noise).
This report flags those segments without touching the output timing.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..config import LOW_CONFIDENCE_RATIO, TOLERANCE
from .assembler import window_words
from .distributor import METHOD_PROPORTIONAL, distribution_method
from .models import AcousticWord, KaraokeSegment

PROPORTIONAL_CONFIDENCE = 0.5


@dataclass
class SegmentQuality:
    """Timing confidence for one segment."""

    segment_id: str
    method: str  # "rhythm_anchor" or "proportional"
    lyric_words: int
    acoustic_words: int
    confidence: float  # 0-1
    low_confidence: bool = False
    issues: List[str] = field(default_factory=list)


@dataclass
class SyncQualityReport:
    """Aggregated confidence for a sync result."""

    segments: List[SegmentQuality] = field(default_factory=list)

    @property
    def overall_confidence(self) -> float:
        if not self.segments:
            return 0.0
        return sum(s.confidence for s in self.segments) / len(self.segments)

    @property
    def low_confidence_ids(self) -> List[str]:
        return [s.segment_id for s in self.segments if s.low_confidence]

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            f"Timing confidence: {self.overall_confidence * 100:.0f}% "
            f"over {len(self.segments)} segments",
        ]
        flagged = [s for s in self.segments if s.low_confidence]
        if flagged:
            lines.append(f"Low confidence: {len(flagged)}")
            for s in flagged[:5]:
                lines.append(f"  - {s.segment_id}: {'; '.join(s.issues)}")
        return "\n".join(lines)


def assess_segment(
    segment: KaraokeSegment,
    window: Sequence[AcousticWord],
    low_confidence_ratio: float = LOW_CONFIDENCE_RATIO,
) -> SegmentQuality:
    """Score one segment given the onsets its words were mapped onto."""
    n = len(segment.words)
    m = len(window)
    method = distribution_method(window)
    issues = []

    if n == 0:
        confidence = 1.0
    elif method == METHOD_PROPORTIONAL:
        confidence = PROPORTIONAL_CONFIDENCE
        issues.append("no acoustic onsets in window")
    else:
        confidence = min(n, m) / max(n, m)
        if max(n, m) / min(n, m) > low_confidence_ratio:
            issues.append(f"{n} lyric words vs {m} acoustic onsets")

    if segment.end_time <= segment.start_time:
        issues.append(
            f"non-positive duration ({segment.start_time:.2f}s -> {segment.end_time:.2f}s)"
        )

    return SegmentQuality(
        segment_id=segment.id,
        method=method,
        lyric_words=n,
        acoustic_words=m,
        confidence=confidence,
        low_confidence=bool(issues),
        issues=issues,
    )


def assess_segments(
    segments: Sequence[KaraokeSegment],
    acoustic_words: Sequence[AcousticWord],
    tolerance: float = TOLERANCE,
    low_confidence_ratio: float = LOW_CONFIDENCE_RATIO,
) -> SyncQualityReport:
    """Score every segment, re-deriving each onset window the same way as assembly."""
    return SyncQualityReport(
        segments=[
            assess_segment(
                seg,
                window_words(acoustic_words, seg.start_time, seg.end_time, tolerance),
                low_confidence_ratio,
            )
            for seg in segments
        ]
    )
