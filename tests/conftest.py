"""Test configuration and fixtures.

Provides reusable fixtures for:
- Line segments and acoustic word streams
- Raw line segmenter payloads (plain and fenced)
- Captured oracle files on disk
"""

import json
import logging

import pytest

from karaoke_sync.core.models import AcousticWord, LineSegment


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't outlive a test."""
    yield
    logging.getLogger("karaoke_sync").handlers.clear()


# =============================================================================
# Segment / word fixtures
# =============================================================================


@pytest.fixture
def line_segments():
    return [
        LineSegment(text="Dòng thứ nhất", start_time=5.0, end_time=8.0),
        LineSegment(text="Dòng thứ hai", start_time=8.5, end_time=11.0),
        LineSegment(text="Dòng thứ nhất", start_time=12.0, end_time=15.0),
    ]


@pytest.fixture
def acoustic_words():
    return [
        AcousticWord(word="dong", start=5.1, end=5.6),
        AcousticWord(word="thu", start=5.8, end=6.4),
        AcousticWord(word="nhat", start=6.5, end=7.9),
        AcousticWord(word="dong", start=8.6, end=9.0),
        AcousticWord(word="thu", start=9.2, end=9.8),
        AcousticWord(word="hai", start=10.0, end=10.9),
    ]


@pytest.fixture
def segmenter_entries():
    return [
        {"text": "Dòng thứ nhất", "startTime": 5.0, "endTime": 8.0},
        {"text": "Dòng thứ hai", "startTime": 8.5, "endTime": 11.0},
        {"text": "Dòng thứ nhất", "startTime": 12.0, "endTime": 15.0},
    ]


@pytest.fixture
def segmenter_payload(segmenter_entries):
    return json.dumps(segmenter_entries, ensure_ascii=False)


@pytest.fixture
def fenced_payload(segmenter_payload):
    return f"```json\n{segmenter_payload}\n```"


@pytest.fixture
def aligner_response(acoustic_words):
    return {
        "words": [
            {"word": w.word, "start": w.start, "end": w.end} for w in acoustic_words
        ]
    }


@pytest.fixture
def raw_lyrics():
    return "Dòng thứ nhất\nDòng thứ hai\nDòng thứ nhất\n"


# =============================================================================
# Captured oracle files
# =============================================================================


@pytest.fixture
def segments_file(tmp_path, fenced_payload):
    path = tmp_path / "segments.json"
    path.write_text(fenced_payload, encoding="utf-8")
    return path


@pytest.fixture
def words_file(tmp_path, aligner_response):
    path = tmp_path / "words.json"
    path.write_text(json.dumps(aligner_response), encoding="utf-8")
    return path


@pytest.fixture
def lyrics_file(tmp_path, raw_lyrics):
    path = tmp_path / "lyrics.txt"
    path.write_text(raw_lyrics, encoding="utf-8")
    return path
