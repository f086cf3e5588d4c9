"""Tests for the karaoke sync service."""

import json
import threading

import pytest

from karaoke_sync.config import SyncConfig
from karaoke_sync.core.sync import KaraokeSyncService
from karaoke_sync.exceptions import (
    SYNC_FAILED_MESSAGE,
    OracleError,
    SyncFailedError,
    ValidationError,
)


class DummySegmenter:
    def __init__(self, output="[]", error=None, barrier=None, release=None):
        self.output = output
        self.error = error
        self.barrier = barrier
        self.release = release
        self.prompts = []

    def segment(self, audio, prompt):
        self.prompts.append(prompt)
        if self.barrier is not None:
            self.barrier.wait()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.output


class DummyAligner:
    def __init__(self, response=None, error=None, barrier=None):
        self.response = response
        self.error = error
        self.barrier = barrier
        self.calls = 0

    def align(self, audio):
        self.calls += 1
        if self.barrier is not None:
            self.barrier.wait()
        if self.error is not None:
            raise self.error
        return self.response


def test_sync_returns_segments(fenced_payload, aligner_response, raw_lyrics):
    segmenter = DummySegmenter(fenced_payload)
    aligner = DummyAligner(aligner_response)
    service = KaraokeSyncService(segmenter, aligner)

    segments = service.sync(b"audio", raw_lyrics)

    assert [s.id for s in segments] == ["seg_1", "seg_2", "seg_3"]
    assert [w.start_time for w in segments[0].words] == pytest.approx([5.1, 5.8, 6.5])
    assert aligner.calls == 1
    assert "Return exactly 3 entries" in segmenter.prompts[0]


def test_oracles_run_in_parallel(fenced_payload, aligner_response, raw_lyrics):
    # Each oracle blocks until the other has started
    barrier = threading.Barrier(2, timeout=5)
    service = KaraokeSyncService(
        DummySegmenter(fenced_payload, barrier=barrier),
        DummyAligner(aligner_response, barrier=barrier),
    )
    assert len(service.sync(b"audio", raw_lyrics)) == 3


def test_without_aligner_uses_proportional_timing(fenced_payload, raw_lyrics):
    service = KaraokeSyncService(DummySegmenter(fenced_payload))
    result = service.sync_with_report(b"audio", raw_lyrics)

    for seg in result.segments:
        assert seg.words[0].start_time == seg.start_time
        assert seg.words[-1].end_time == seg.end_time
    assert {q.method for q in result.quality.segments} == {"proportional"}


def test_segmenter_failure_raises_sync_failed(raw_lyrics, aligner_response):
    service = KaraokeSyncService(
        DummySegmenter(error=RuntimeError("503 from model")),
        DummyAligner(aligner_response),
    )
    with pytest.raises(SyncFailedError) as exc_info:
        service.sync(b"audio", raw_lyrics)

    assert isinstance(exc_info.value.__cause__, OracleError)
    assert "503 from model" in exc_info.value.reason
    assert str(exc_info.value) == SYNC_FAILED_MESSAGE
    assert exc_info.value.user_message == SYNC_FAILED_MESSAGE


def test_aligner_failure_raises_sync_failed(fenced_payload, raw_lyrics):
    service = KaraokeSyncService(
        DummySegmenter(fenced_payload),
        DummyAligner(error=ConnectionError("reset")),
    )
    with pytest.raises(SyncFailedError):
        service.sync(b"audio", raw_lyrics)


def test_timeout_raises_sync_failed(raw_lyrics):
    release = threading.Event()
    service = KaraokeSyncService(
        DummySegmenter("[]", release=release),
        config=SyncConfig(oracle_timeout=0.05),
    )
    try:
        with pytest.raises(SyncFailedError) as exc_info:
            service.sync(b"audio", raw_lyrics)
        assert "timed out" in exc_info.value.reason
    finally:
        release.set()


@pytest.mark.parametrize("output", ["null", "{}", "garbage", "[]"])
def test_unusable_segmenter_output_raises_sync_failed(output, raw_lyrics):
    service = KaraokeSyncService(DummySegmenter(output))
    with pytest.raises(SyncFailedError):
        service.sync(b"audio", raw_lyrics)


def test_empty_lyrics_rejected(fenced_payload):
    service = KaraokeSyncService(DummySegmenter(fenced_payload))
    with pytest.raises(ValidationError):
        service.sync(b"audio", "  \n ")


def test_line_count_mismatch_tolerated_by_default(
    fenced_payload, aligner_response, caplog
):
    caplog.set_level("WARNING", logger="karaoke_sync")
    service = KaraokeSyncService(
        DummySegmenter(fenced_payload), DummyAligner(aligner_response)
    )
    segments = service.sync(b"audio", "Dòng thứ nhất\nDòng thứ hai")

    assert len(segments) == 3
    assert "Line count mismatch" in caplog.text


def test_line_count_mismatch_fails_in_strict_mode(fenced_payload):
    service = KaraokeSyncService(
        DummySegmenter(fenced_payload),
        config=SyncConfig(strict_line_count=True),
    )
    with pytest.raises(SyncFailedError) as exc_info:
        service.sync(b"audio", "only one line")
    assert "3 segments for 1 lyric lines" in exc_info.value.reason


def test_sync_to_text_is_renderer_json(fenced_payload, aligner_response, raw_lyrics):
    service = KaraokeSyncService(
        DummySegmenter(fenced_payload), DummyAligner(aligner_response)
    )
    data = json.loads(service.sync_to_text(b"audio", raw_lyrics))

    assert [d["id"] for d in data] == ["seg_1", "seg_2", "seg_3"]
    assert set(data[0]) == {"id", "text", "startTime", "endTime", "words"}
    assert set(data[0]["words"][0]) == {"text", "startTime", "endTime"}
    assert data[0]["text"] == "Dòng thứ nhất"


def test_custom_tolerance_is_used(raw_lyrics):
    payload = json.dumps([{"text": "a b", "startTime": 1.0, "endTime": 2.0}])
    aligner = DummyAligner({"words": [{"word": "x", "start": 0.8, "end": 0.9},
                                      {"word": "y", "start": 1.5, "end": 1.9}]})

    wide = KaraokeSyncService(DummySegmenter(payload), aligner,
                              SyncConfig(tolerance=0.25)).sync(b"", "a b")
    narrow = KaraokeSyncService(DummySegmenter(payload), aligner,
                                SyncConfig(tolerance=0.0)).sync(b"", "a b")

    assert wide[0].words[0].start_time == 0.8
    assert narrow[0].words[0].start_time == 1.5


def test_report_flags_low_confidence(raw_lyrics, caplog):
    caplog.set_level("WARNING", logger="karaoke_sync")
    payload = json.dumps([{"text": "one", "startTime": 0.0, "endTime": 4.0}])
    words = [{"word": "w", "start": 0.5 * i, "end": 0.5 * i + 0.4} for i in range(6)]
    service = KaraokeSyncService(DummySegmenter(payload), DummyAligner({"words": words}))

    result = service.sync_with_report(b"", "one")

    assert result.quality.low_confidence_ids == ["seg_1"]
    assert "low timing confidence" in caplog.text
