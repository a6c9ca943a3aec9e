"""Parse stage -- turns CUE sheet text into an ordered Timeline.

The scanner carries a PendingTrack whose state moves
awaiting_track -> awaiting_title -> ready as TRACK and TITLE lines arrive.
An INDEX 01 line finalizes the record only in the ready state; a track that
reaches INDEX 01 without a title, or never reaches INDEX 01 at all, is
dropped from the Timeline and logged.
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from ..errors import EmptyTimelineError, TimelineOrderError
from ..models import ParserState, PendingTrack, Timeline, TrackMark
from ..timecode import time_to_ms

log = logger.bind(stage="parse")

_TRACK_RE = re.compile(r"^\s*TRACK\s+(\d+)\b", re.IGNORECASE)
_TITLE_RE = re.compile(r'^\s*TITLE\s+"(.*)"\s*$', re.IGNORECASE)
_PERFORMER_RE = re.compile(r'^\s*PERFORMER\s+"(.*)"\s*$', re.IGNORECASE)
_INDEX_RE = re.compile(r"^\s*INDEX\s+01\s+(\d+:\d{2}:\d{2})\s*$", re.IGNORECASE)


def parse_cue(text: str) -> Timeline:
    """Parse CUE sheet text into a Timeline.

    Raises EmptyTimelineError if no track survives, TimelineOrderError if a
    track starts before its predecessor, ParseError on a malformed timecode.
    """
    tracks: list[TrackMark] = []
    pending = PendingTrack()
    disc_title: str | None = None
    performer: str | None = None
    dropped = 0

    for lineno, line in enumerate(text.splitlines(), start=1):
        m = _TRACK_RE.match(line)
        if m:
            if pending.state != ParserState.AWAITING_TRACK:
                log.debug(f"Line {lineno}: track {pending.number} has no INDEX 01, dropped")
                dropped += 1
            pending = PendingTrack(number=int(m.group(1)))
            continue

        m = _TITLE_RE.match(line)
        if m:
            if pending.state == ParserState.AWAITING_TRACK:
                if disc_title is None and not tracks:
                    disc_title = m.group(1)
            else:
                pending = pending.with_title(m.group(1))
            continue

        m = _PERFORMER_RE.match(line)
        if m:
            if pending.state == ParserState.AWAITING_TRACK and not tracks and performer is None:
                performer = m.group(1)
            continue

        m = _INDEX_RE.match(line)
        if m:
            if pending.state == ParserState.READY:
                start_ms = time_to_ms(m.group(1))
                if tracks and start_ms < tracks[-1].start_ms:
                    raise TimelineOrderError(
                        f"Line {lineno}: track {pending.number} starts at {m.group(1)}, "
                        f"before track {tracks[-1].track_number}"
                    )
                tracks.append(TrackMark(pending.number, pending.title, start_ms))
            elif pending.state == ParserState.AWAITING_TITLE:
                log.debug(f"Line {lineno}: track {pending.number} has no TITLE, dropped")
                dropped += 1
            pending = PendingTrack()

    if pending.state != ParserState.AWAITING_TRACK:
        log.debug(f"Track {pending.number} has no INDEX 01 at end of sheet, dropped")
        dropped += 1

    if not tracks:
        raise EmptyTimelineError("No valid tracks found in CUE sheet")

    if dropped:
        log.warning(f"Dropped {dropped} incomplete track(s) from CUE sheet")
    log.info(f"Found {len(tracks)} tracks in CUE sheet")

    return Timeline(tracks=tuple(tracks), title=disc_title, performer=performer)


def read_cue(path: Path) -> str:
    """Read a CUE sheet, tolerating a UTF-8 byte-order mark."""
    return path.read_text(encoding="utf-8-sig")


def run(cue_path: Path) -> Timeline:
    log.info(f"Parsing CUE file: {cue_path.name}")
    return parse_cue(read_cue(cue_path))
