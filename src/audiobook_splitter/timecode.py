"""Conversions between CUE frame timecodes, milliseconds and ffmpeg wall-clock time.

CUE timecodes are MM:SS:FF with 75 frames per second. Converting milliseconds
back to frames truncates, so a round trip can lose up to one frame (~13.3 ms).
"""

import re

from .errors import ParseError
from .models import FRAMES_PER_SECOND

_TIMECODE_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})$")


def time_to_ms(timecode: str) -> int:
    """Convert MM:SS:FF to milliseconds."""
    match = _TIMECODE_RE.match(timecode.strip())
    if not match:
        raise ParseError(f"Malformed timecode: {timecode!r}")
    minutes, seconds, frames = (int(g) for g in match.groups())
    if seconds > 59 or frames >= FRAMES_PER_SECOND:
        raise ParseError(f"Timecode field out of range: {timecode!r}")
    return (minutes * 60 + seconds) * 1000 + round(frames * 1000 / FRAMES_PER_SECOND)


def ms_to_time(ms: int) -> str:
    """Convert milliseconds to MM:SS:FF (minutes are not wrapped into hours)."""
    total_seconds = ms // 1000
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    frames = (ms % 1000) * FRAMES_PER_SECOND // 1000
    return f"{minutes:02d}:{seconds:02d}:{frames:02d}"


def ms_to_wall_clock(ms: int) -> str:
    """Convert milliseconds to HH:MM:SS.mmm for ffmpeg -ss/-to."""
    total_seconds, millis = divmod(ms, 1000)
    total_minutes, seconds = divmod(total_seconds, 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def duration_to_timestamp(seconds: float) -> str:
    """Convert seconds to HH:MM:SS."""
    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    return f"{h:02d}:{m:02d}:{s:02d}"
