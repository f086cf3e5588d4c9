"""Test validation utilities."""

import pytest

from karaoke_sync.core.models import LineSegment
from karaoke_sync.exceptions import ValidationError
from karaoke_sync.utils.validation import (
    check_segment_order,
    validate_lyrics,
    validate_output_path,
    validate_shift,
    validate_speed,
    validate_tolerance,
)


class TestValidation:
    def test_validate_lyrics(self):
        assert validate_lyrics("line one\nline two") == "line one\nline two"
        for bad in ("", "   \n\t", None):
            with pytest.raises(ValidationError):
                validate_lyrics(bad)

    def test_validate_tolerance(self):
        assert validate_tolerance(0.0) == 0.0
        assert validate_tolerance(0.3) == 0.3
        for bad in (-0.1, 2.5, float("inf")):
            with pytest.raises(ValidationError):
                validate_tolerance(bad)

    def test_validate_shift(self):
        assert validate_shift(-1.5) == -1.5
        with pytest.raises(ValidationError):
            validate_shift(120.0)

    def test_validate_speed(self):
        assert validate_speed(0.5) == 0.5
        for bad in (0.0, -1.0, float("nan")):
            with pytest.raises(ValidationError):
                validate_speed(bad)

    def test_validate_output_path_creates_parent(self, tmp_path):
        path = validate_output_path(str(tmp_path / "out" / "song.json"))
        assert path.parent.exists()
        assert path.name == "song.json"

    def test_validate_output_path_adds_suffix(self, tmp_path):
        path = validate_output_path(str(tmp_path / "song"))
        assert path.suffix == ".json"


class TestCheckSegmentOrder:
    def test_ordered_segments(self):
        segs = [LineSegment("a", 0.0, 1.0), LineSegment("b", 1.0, 2.0)]
        assert check_segment_order(segs) == 0

    def test_counts_problems(self, caplog):
        caplog.set_level("WARNING", logger="karaoke_sync")
        segs = [
            LineSegment("a", 0.0, 2.0),
            LineSegment("b", 1.5, 3.0),   # overlap
            LineSegment("c", 1.0, 1.0),   # earlier start, zero length
        ]
        assert check_segment_order(segs) == 3
        assert "non-positive duration" in caplog.text
        assert "starts before previous segment" in caplog.text
