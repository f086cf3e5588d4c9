"""Boundary with the two upstream models.

The line segmenter returns a JSON array (often wrapped in a Markdown fence)
of ``{text, startTime, endTime}`` objects; the word aligner returns an object
with a ``words`` array of ``{word, start, end}``. Both are loosely typed, so
shapes are checked here and nothing malformed reaches the timing math.
"""

import json
import math
import re
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

from ..exceptions import SegmenterResponseError
from ..utils.logging import get_logger
from .models import AcousticWord, LineSegment

logger = get_logger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")


# ----------------------
# Line segmenter payload
# ----------------------
def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _line_segment_from_entry(index: int, entry: Any) -> LineSegment:
    if not isinstance(entry, dict):
        raise SegmenterResponseError(f"Entry {index} is not an object")
    text = entry.get("text")
    if not isinstance(text, str):
        raise SegmenterResponseError(f"Entry {index} has no text")
    start = _as_number(entry.get("startTime"))
    end = _as_number(entry.get("endTime"))
    if start is None or end is None:
        raise SegmenterResponseError(f"Entry {index} has invalid startTime/endTime")
    return LineSegment(text=text, start_time=start, end_time=end)


def load_line_segments(raw: str) -> List[LineSegment]:
    """Parse segmenter output, raising SegmenterResponseError on any defect."""
    if not isinstance(raw, str):
        raise SegmenterResponseError("Segmenter output is not text")
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as e:
        raise SegmenterResponseError(f"Segmenter output is not valid JSON: {e}")
    if not isinstance(data, list):
        raise SegmenterResponseError(
            f"Segmenter output is {type(data).__name__}, expected an array"
        )
    return [_line_segment_from_entry(i, entry) for i, entry in enumerate(data)]


def parse_line_segments(raw: str) -> List[LineSegment]:
    """Parse segmenter output; an unusable payload yields an empty list."""
    try:
        return load_line_segments(raw)
    except SegmenterResponseError as e:
        logger.warning(f"Discarding line segmenter output: {e}")
        return []


# ----------------------
# Word aligner payload
# ----------------------
def _acoustic_word_from_entry(entry: Any) -> Optional[AcousticWord]:
    if not isinstance(entry, dict):
        return None
    start = _as_number(entry.get("start"))
    end = _as_number(entry.get("end"))
    if start is None or end is None or end < start:
        return None
    word = entry.get("word")
    return AcousticWord(word=word if isinstance(word, str) else "", start=start, end=end)


def parse_acoustic_words(response: Any) -> List[AcousticWord]:
    """Extract the aligner's word list, ordered by onset.

    A missing response or missing ``words`` gives an empty list. Malformed
    entries are dropped and counted in a warning.
    """
    if response is None:
        return []
    if isinstance(response, dict):
        entries = response.get("words")
    else:
        entries = getattr(response, "words", None)
    if not entries:
        return []
    if not isinstance(entries, list):
        logger.warning("Aligner 'words' is not an array; ignoring acoustic timing")
        return []

    words = []
    dropped = 0
    for entry in entries:
        word = _acoustic_word_from_entry(entry)
        if word is None:
            dropped += 1
        else:
            words.append(word)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed aligner word(s)")

    # The aligner already emits onsets in order; a stable sort keeps that order
    return sorted(words, key=lambda w: w.start)


# ----------------------
# Request side
# ----------------------
def split_lyric_lines(raw_lyrics: str) -> List[str]:
    """Non-empty, trimmed lyric lines in order, repeats included."""
    return [line.strip() for line in raw_lyrics.splitlines() if line.strip()]


def build_segmenter_prompt(raw_lyrics: str) -> str:
    """Instruction text sent with the audio to the line segmenter."""
    lines = split_lyric_lines(raw_lyrics)
    numbered = "\n".join(f"{i + 1}. {line}" for i, line in enumerate(lines))
    return f"""You are a karaoke timing tool. Listen to the song and find when each lyric line below is sung.

RULES:
- Return exactly {len(lines)} entries, one per numbered line, in the same order.
- Repeated lines are separate entries; time each repetition where it is sung.
- Copy each line's text exactly; do not correct or translate it.
- startTime and endTime are seconds from the start of the audio, endTime > startTime.
- Entries must not overlap and must be in increasing startTime order.

LYRICS:
{numbered}

Return ONLY a JSON array of objects: {{"text": "...", "startTime": 0.0, "endTime": 0.0}}"""


# ----------------------
# Oracle interfaces
# ----------------------
class LineSegmenter(Protocol):
    """Multimodal model returning line segments for audio plus lyric text."""

    def segment(self, audio: bytes, prompt: str) -> str:
        """Returns the raw (possibly fenced) JSON text."""
        ...


class WordAligner(Protocol):
    """Forced aligner returning word onsets for the whole track."""

    def align(self, audio: bytes) -> Optional[dict]:
        """Returns an object with a ``words`` array, or None."""
        ...


class JsonFileSegmenter:
    """Replays a captured line segmenter response from disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def segment(self, audio: bytes, prompt: str) -> str:
        return self.path.read_text(encoding="utf-8")


class JsonFileAligner:
    """Replays a captured aligner response from disk.

    A bare JSON array is accepted as the ``words`` list.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def align(self, audio: bytes) -> Optional[dict]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, list):
            return {"words": data}
        return data
