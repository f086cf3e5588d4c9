"""Karaoke sync: run both models in parallel, then assemble word timing."""

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..config import SyncConfig
from ..exceptions import OracleError, SyncFailedError
from ..utils.logging import get_logger
from ..utils.validation import validate_lyrics
from .assembler import assemble_segments
from .models import KaraokeSegment
from .oracles import (
    LineSegmenter,
    WordAligner,
    build_segmenter_prompt,
    parse_acoustic_words,
    parse_line_segments,
    split_lyric_lines,
)
from .serialization import dumps_segments
from .sync_quality import SyncQualityReport, assess_segments

logger = get_logger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Assembled segments plus the out-of-band confidence report."""

    segments: List[KaraokeSegment]
    quality: SyncQualityReport


class KaraokeSyncService:
    """Runs one karaoke sync request per call; holds no per-request state."""

    def __init__(
        self,
        segmenter: LineSegmenter,
        aligner: Optional[WordAligner] = None,
        config: Optional[SyncConfig] = None,
    ):
        self.segmenter = segmenter
        self.aligner = aligner
        self.config = config or SyncConfig()

    def sync(self, audio: bytes, raw_lyrics: str) -> List[KaraokeSegment]:
        """Sync lyrics to audio, raising SyncFailedError if no result is possible."""
        return self.sync_with_report(audio, raw_lyrics).segments

    def sync_to_text(self, audio: bytes, raw_lyrics: str) -> str:
        """Sync and serialize to the JSON text handed to the renderer."""
        return dumps_segments(self.sync(audio, raw_lyrics))

    def sync_with_report(self, audio: bytes, raw_lyrics: str) -> SyncResult:
        validate_lyrics(raw_lyrics)
        lyric_lines = split_lyric_lines(raw_lyrics)
        prompt = build_segmenter_prompt(raw_lyrics)

        try:
            segmenter_output, aligner_response = self._call_oracles(audio, prompt)
        except OracleError as e:
            logger.error(f"Karaoke sync failed: {e}")
            raise SyncFailedError(str(e)) from e

        line_segments = parse_line_segments(segmenter_output)
        if not line_segments:
            raise SyncFailedError("line segmenter returned no usable segments")

        if len(line_segments) != len(lyric_lines):
            if self.config.strict_line_count:
                raise SyncFailedError(
                    f"line segmenter returned {len(line_segments)} segments "
                    f"for {len(lyric_lines)} lyric lines"
                )
            logger.warning(
                f"Line count mismatch: {len(line_segments)} segments for "
                f"{len(lyric_lines)} lyric lines; keeping segmenter order"
            )

        acoustic_words = parse_acoustic_words(aligner_response)
        segments = assemble_segments(
            line_segments,
            acoustic_words,
            tolerance=self.config.tolerance,
            min_duration=self.config.min_duration,
        )
        quality = assess_segments(
            segments,
            acoustic_words,
            tolerance=self.config.tolerance,
            low_confidence_ratio=self.config.low_confidence_ratio,
        )
        if quality.low_confidence_ids:
            logger.warning(
                f"{len(quality.low_confidence_ids)} segment(s) have low timing "
                f"confidence: {', '.join(quality.low_confidence_ids)}"
            )
        logger.info(
            f"Synced {len(segments)} segments "
            f"({len(acoustic_words)} acoustic words available)"
        )
        return SyncResult(segments=segments, quality=quality)

    def _call_oracles(self, audio: bytes, prompt: str) -> Tuple[str, Any]:
        """Dispatch segmenter and aligner together and wait for both."""
        executor = ThreadPoolExecutor(max_workers=2)
        try:
            futures: List[Future] = [
                executor.submit(self.segmenter.segment, audio, prompt)
            ]
            if self.aligner is not None:
                futures.append(executor.submit(self.aligner.align, audio))

            done, not_done = wait(
                futures,
                timeout=self.config.oracle_timeout,
                return_when=FIRST_EXCEPTION,
            )
            for future in done:
                exc = future.exception()
                if exc is not None:
                    raise OracleError(f"Upstream model call failed: {exc}") from exc
            if not_done:
                raise OracleError(
                    f"Upstream model call timed out after {self.config.oracle_timeout}s"
                )

            segmenter_output = futures[0].result()
            aligner_response = futures[1].result() if len(futures) > 1 else None
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if aligner_response is None:
            logger.info("Word aligner not configured or returned nothing")
        return segmenter_output, aligner_response
