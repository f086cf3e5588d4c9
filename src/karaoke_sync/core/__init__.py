"""Core alignment modules."""

from .models import AcousticWord, KaraokeSegment, LineSegment, WordTiming

__all__ = [
    "AcousticWord",
    "KaraokeSegment",
    "LineSegment",
    "WordTiming",
]
