"""Data models for line segments, acoustic words and karaoke output."""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class LineSegment:
    """One sung occurrence of a lyric line, as reported by the line segmenter."""

    text: str
    start_time: float
    end_time: float

    def words(self) -> List[str]:
        """Whitespace tokens of the lyric text, empty tokens discarded."""
        return self.text.split()


@dataclass(frozen=True)
class AcousticWord:
    """A word-onset event from the forced aligner.

    Only ``start`` and ``end`` take part in alignment; ``word`` is kept for
    debugging output.
    """

    word: str
    start: float
    end: float


@dataclass(frozen=True)
class WordTiming:
    """Timing for one lyric token."""

    text: str
    start_time: float
    end_time: float

    def validate(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError("WordTiming end_time must be >= start_time")


@dataclass(frozen=True)
class KaraokeSegment:
    """An assembled karaoke line: segment bounds plus per-word timing."""

    id: str
    text: str
    start_time: float
    end_time: float
    words: Tuple[WordTiming, ...] = field(default_factory=tuple)

    @property
    def word_texts(self) -> List[str]:
        return [w.text for w in self.words]

    def validate(self) -> None:
        for w in self.words:
            w.validate()
        for prev, cur in zip(self.words, self.words[1:]):
            if cur.start_time < prev.start_time:
                raise ValueError("Word start times must be non-decreasing")


def segment_id(index: int) -> str:
    """Sequence label for the segment at 0-based ``index``."""
    return f"seg_{index + 1}"
