"""Emit stage -- writes one book: its CUE sheet, chapter metadata, and M4B.

For each segment:
1. <stem>.cue -- CUE sheet with timecodes relative to the book start
2. a temporary FFMETADATA1 file -- global tags plus one [CHAPTER] per track
3. <stem>.m4b -- stream-copied from the source by ffmpeg with the new chapters

The temporary metadata file is removed on every exit path.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import click
from loguru import logger

from ..errors import EngineError
from ..ffmpeg import build_split_command, run_ffmpeg
from ..ffprobe import count_chapters
from ..models import RebasedTrack, Segment, SegmentResult, SegmentStatus, Timeline
from ..sanitize import sanitize_stem, strip_chapter_prefix
from ..timecode import ms_to_time, ms_to_wall_clock

if TYPE_CHECKING:
    from ..config import SplitterConfig

log = logger.bind(stage="emit")


@dataclass(frozen=True)
class BookName:
    title: str  # display title, used for tags and the CUE header
    stem: str  # output filename stem


def book_name(first_title: str, number: int) -> BookName:
    """Derive a book's display title and output stem from its first chapter title.

    Examples:
        ("3: Threats", 2) -> title "Threats", stem "Book-2-Threats"
        ("???", 4)        -> title "???", stem "Book-4"
    """
    title = strip_chapter_prefix(first_title)
    name = sanitize_stem(title)
    if not name:
        return BookName(title=title, stem=f"Book-{number}")
    return BookName(title=title, stem=f"Book-{number}-{name}")


def render_cue(book_title: str, media_name: str, rebased: tuple[RebasedTrack, ...]) -> str:
    """Render a CUE sheet for one book, tracks renumbered from 01."""
    lines = [
        f'TITLE "{book_title}"',
        f'FILE "{media_name}" MP4',
    ]
    for n, track in enumerate(rebased, start=1):
        lines.extend(
            [
                f"  TRACK {n:02d} AUDIO",
                f'    TITLE "{track.title}"',
                f"    INDEX 01 {ms_to_time(track.relative_start_ms)}",
            ]
        )
    return "\n".join(lines) + "\n"


def _escape_ffmetadata(value: str) -> str:
    """Escape FFMETADATA special characters (=, ;, #, backslash, newline)."""
    out = []
    for ch in value:
        if ch in "=;#\\\n":
            out.append("\\")
        out.append(ch)
    return "".join(out)


def render_ffmetadata(tags: dict[str, str], rebased: tuple[RebasedTrack, ...]) -> str:
    """Render an FFMETADATA1 file: header, global tags, one block per chapter."""
    lines = [";FFMETADATA1"]
    for key, value in tags.items():
        lines.append(f"{key}={_escape_ffmetadata(value)}")
    lines.append("")
    for track in rebased:
        lines.extend(
            [
                "[CHAPTER]",
                "TIMEBASE=1/1000",
                f"START={track.relative_start_ms}",
                f"END={track.relative_end_ms}",
                f"title={_escape_ffmetadata(track.title)}",
                "",
            ]
        )
    return "\n".join(lines)


def book_tags(name: BookName, segment: Segment, timeline: Timeline, genre: str) -> dict[str, str]:
    """Global tags for one book's FFMETADATA header."""
    tags = {
        "title": name.title,
        "album": name.title,
        "track": str(segment.number),
        "genre": genre,
    }
    if timeline.performer:
        tags["artist"] = timeline.performer
    return tags


def _verify_output(output: Path, segment: Segment, config: SplitterConfig) -> None:
    if not output.exists():
        raise EngineError(f"Output file not created: {output}")
    if output.stat().st_size == 0:
        raise EngineError(f"Output file is empty: {output}")
    if config.verify_output:
        chapters = count_chapters(output, config.ffprobe_bin)
        if chapters != segment.track_count:
            raise EngineError(
                f"Chapter count mismatch in {output.name}: "
                f"expected {segment.track_count}, got {chapters}"
            )


def emit_segment(
    source: Path,
    timeline: Timeline,
    segment: Segment,
    rebased: tuple[RebasedTrack, ...],
    output_dir: Path,
    config: SplitterConfig,
) -> SegmentResult:
    """Write the CUE sheet and M4B for one segment.

    Raises EngineError if ffmpeg fails or its output does not verify. The CUE
    sheet is written before ffmpeg runs and is kept either way.
    """
    first_title = timeline.track(segment.start_track).title
    name = book_name(first_title, segment.number)
    output_m4b = output_dir / f"{name.stem}.m4b"
    output_cue = output_dir / f"{name.stem}.cue"

    cue_text = render_cue(name.title, output_m4b.name, rebased)
    metadata_text = render_ffmetadata(book_tags(name, segment, timeline, config.genre), rebased)

    click.echo(
        f"  Book #{segment.number}: '{name.title}' "
        f"(tracks {segment.start_track}-{segment.end_track}, "
        f"{ms_to_wall_clock(segment.start_ms)} -> {ms_to_wall_clock(segment.end_ms)})"
    )

    if config.dry_run:
        cmd = build_split_command(
            source, Path("<metadata>"), segment.start_ms, segment.end_ms, output_m4b, config.ffmpeg_bin
        )
        log.info(f"[DRY-RUN] Would write {output_cue.name} and {output_m4b.name}")
        log.info(f"[DRY-RUN] Command: {' '.join(cmd)}")
        return SegmentResult(segment=segment, status=SegmentStatus.SKIPPED, output_path=output_m4b, cue_path=output_cue)

    output_cue.write_text(cue_text, encoding="utf-8")
    log.debug(f"Wrote {len(rebased)} tracks to {output_cue.name}")

    fd, tmp_name = tempfile.mkstemp(prefix="ffmetadata_", suffix=".txt", dir=config.temp_dir)
    metadata_file = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(metadata_text)
        cmd = build_split_command(
            source, metadata_file, segment.start_ms, segment.end_ms, output_m4b, config.ffmpeg_bin
        )
        log.info(f"Creating {output_m4b.name} with {len(rebased)} chapters")
        run_ffmpeg(cmd, timeout=config.engine_timeout)
        _verify_output(output_m4b, segment, config)
    finally:
        metadata_file.unlink(missing_ok=True)

    click.echo(f"  -> Created {output_m4b}")
    return SegmentResult(segment=segment, status=SegmentStatus.COMPLETED, output_path=output_m4b, cue_path=output_cue)
