"""karaoke_sync - word-level karaoke timing from line segments and word onsets."""

__version__ = "1.0.0"

from .core.models import AcousticWord, KaraokeSegment, LineSegment, WordTiming
from .core.distributor import distribute_word_times
from .core.assembler import assemble_segments, assemble_from_payloads
from .core.sync import KaraokeSyncService
from .exceptions import KaraokeSyncError, SyncFailedError

__all__ = [
    "__version__",
    "AcousticWord",
    "KaraokeSegment",
    "LineSegment",
    "WordTiming",
    "distribute_word_times",
    "assemble_segments",
    "assemble_from_payloads",
    "KaraokeSyncService",
    "KaraokeSyncError",
    "SyncFailedError",
]
