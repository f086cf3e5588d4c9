"""Command-line interface using Click."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import SyncConfig
from .exceptions import KaraokeSyncError, SyncFailedError, ValidationError
from .core.oracles import (
    JsonFileAligner,
    JsonFileSegmenter,
    build_segmenter_prompt,
    parse_line_segments,
)
from .core.serialization import (
    dumps_segments,
    load_segments_from_json,
    save_segments_to_json,
)
from .core.sync import KaraokeSyncService
from .core.timeline import replace_segment, scale_segment, shift_segment
from .utils.logging import setup_logging
from .utils.validation import (
    validate_output_path,
    validate_shift,
    validate_speed,
    validate_tolerance,
)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Cannot read {path} as UTF-8 text: {e}") from e


def _lyrics_from_segments(segments_path: Path) -> str:
    """Fall back to the segmenter's own line texts when no lyric file is given."""
    segments = parse_line_segments(_read_text(segments_path))
    if not segments:
        raise SyncFailedError(f"no usable segments in {segments_path}")
    return "\n".join(seg.text for seg in segments)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """karaoke-sync - Word-level karaoke timing from line segments and word onsets."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('segments_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--words', 'words_json', type=click.Path(exists=True, dir_okay=False),
              help='Captured word aligner response (object with "words", or a bare array)')
@click.option('--lyrics', 'lyrics_txt', type=click.Path(exists=True, dir_okay=False),
              help='Lyric text, one line per sung line')
@click.option('-o', '--output', help='Output JSON path (default: stdout)')
@click.option('--tolerance', type=float, default=None,
              help='Onset window tolerance in seconds (default: 0.3)')
@click.option('--strict-line-count', is_flag=True,
              help='Fail when segment count differs from lyric line count')
@click.option('--report', is_flag=True, help='Print a timing confidence report')
@click.pass_context
def align(ctx, segments_json, words_json, lyrics_txt, output, tolerance,
          strict_line_count, report):
    """Assemble word timing from captured segmenter and aligner output."""
    logger = ctx.obj['logger']

    try:
        base = SyncConfig.from_env()
        config = SyncConfig(
            tolerance=validate_tolerance(tolerance) if tolerance is not None else base.tolerance,
            min_duration=base.min_duration,
            strict_line_count=strict_line_count or base.strict_line_count,
            low_confidence_ratio=base.low_confidence_ratio,
            oracle_timeout=base.oracle_timeout,
        )

        segments_path = Path(segments_json)
        if lyrics_txt:
            raw_lyrics = _read_text(Path(lyrics_txt))
        else:
            raw_lyrics = _lyrics_from_segments(segments_path)

        service = KaraokeSyncService(
            segmenter=JsonFileSegmenter(segments_path),
            aligner=JsonFileAligner(words_json) if words_json else None,
            config=config,
        )
        result = service.sync_with_report(b"", raw_lyrics)

        if output:
            output_path = validate_output_path(output)
            save_segments_to_json(str(output_path), result.segments)
            logger.info(f"✅ Wrote {len(result.segments)} segments to {output_path}")
        else:
            click.echo(dumps_segments(result.segments, indent=2))

        if report:
            click.echo(result.quality.summary())

    except SyncFailedError as e:
        logger.error(f"❌ {e.user_message} ({e.reason})")
        sys.exit(1)
    except KaraokeSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


@cli.command()
@click.argument('lyrics_txt', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def prompt(ctx, lyrics_txt):
    """Print the line segmenter prompt for a lyric file."""
    try:
        click.echo(build_segmenter_prompt(_read_text(Path(lyrics_txt))))
    except KaraokeSyncError as e:
        ctx.obj['logger'].error(f"❌ {e}")
        sys.exit(1)


@cli.command()
@click.argument('karaoke_json', type=click.Path(exists=True, dir_okay=False))
@click.argument('segment_id')
@click.option('--by', 'amount', type=float, default=0.0,
              help='Shift in seconds (negative = earlier)')
@click.option('--speed', type=float, default=1.0,
              help='Duration multiplier applied after shifting')
@click.option('-o', '--output', help='Output JSON path (default: overwrite input)')
@click.pass_context
def edit(ctx, karaoke_json, segment_id, amount, speed, output):
    """Nudge or stretch one segment of an assembled karaoke file."""
    logger = ctx.obj['logger']

    try:
        amount = validate_shift(amount)
        speed = validate_speed(speed)
        segments = load_segments_from_json(karaoke_json)
        match = [seg for seg in segments if seg.id == segment_id]
        if not match:
            raise ValidationError(f"Unknown segment id: {segment_id}")

        updated = match[0]
        if amount:
            updated = shift_segment(updated, amount)
        if speed != 1.0:
            updated = scale_segment(updated, speed)
        segments = replace_segment(segments, updated)

        output_path = validate_output_path(output) if output else Path(karaoke_json)
        save_segments_to_json(str(output_path), segments)
        logger.info(
            f"✅ {segment_id}: {updated.start_time:.2f}s -> {updated.end_time:.2f}s"
        )

    except KaraokeSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except (ValueError, KeyError) as e:
        logger.error(f"❌ Invalid karaoke file {karaoke_json}: {e}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
