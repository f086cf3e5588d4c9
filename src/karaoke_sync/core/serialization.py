"""JSON serialization for karaoke segments."""

import json
from typing import List, Sequence

from .models import KaraokeSegment, WordTiming


def segments_to_json(segments: Sequence[KaraokeSegment]) -> List[dict]:
    """Convert KaraokeSegment objects into JSON-serializable dicts."""
    data: List[dict] = []
    for seg in segments:
        data.append({
            "id": seg.id,
            "text": seg.text,
            "startTime": seg.start_time,
            "endTime": seg.end_time,
            "words": [
                {
                    "text": w.text,
                    "startTime": w.start_time,
                    "endTime": w.end_time,
                } for w in seg.words
            ]
        })
    return data


def segments_from_json(data: List[dict]) -> List[KaraokeSegment]:
    """Convert JSON data back into KaraokeSegment objects."""
    segments: List[KaraokeSegment] = []
    for item in data:
        words = tuple(
            WordTiming(
                text=w["text"],
                start_time=float(w["startTime"]),
                end_time=float(w["endTime"]),
            ) for w in item.get("words") or []
        )
        seg = KaraokeSegment(
            id=item["id"],
            text=item.get("text", ""),
            start_time=float(item["startTime"]),
            end_time=float(item["endTime"]),
            words=words,
        )
        seg.validate()
        segments.append(seg)
    return segments


def dumps_segments(segments: Sequence[KaraokeSegment], indent=None) -> str:
    """Serialize segments to the JSON text consumed by the renderer."""
    return json.dumps(segments_to_json(segments), ensure_ascii=False, indent=indent)


def save_segments_to_json(filepath: str, segments: Sequence[KaraokeSegment]) -> None:
    """Save segments to a JSON file."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(segments_to_json(segments), f, ensure_ascii=False, indent=2)


def load_segments_from_json(filepath: str) -> List[KaraokeSegment]:
    """Load segments from a JSON file."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return segments_from_json(data)
