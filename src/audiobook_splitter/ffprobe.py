"""FFprobe subprocess wrappers for source and output inspection."""

import json
import subprocess
from pathlib import Path

from .errors import ProbeError


def _run_ffprobe(args: list[str], ffprobe_bin: str = "ffprobe") -> subprocess.CompletedProcess:
    """Run ffprobe with common flags."""
    return subprocess.run(
        [ffprobe_bin, "-v", "error"] + args,
        capture_output=True,
        text=True,
    )


def get_duration(file: Path, ffprobe_bin: str = "ffprobe") -> float:
    """Get duration in seconds."""
    result = _run_ffprobe([
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(file),
    ], ffprobe_bin)
    output = result.stdout.strip()
    if result.returncode != 0 or not output:
        raise ProbeError(f"ffprobe returned empty duration for {file}")
    try:
        return float(output)
    except ValueError:
        raise ProbeError(f"ffprobe returned unparseable duration {output!r} for {file}") from None


def get_duration_ms(file: Path, ffprobe_bin: str = "ffprobe") -> int:
    """Get duration in whole milliseconds (rounded)."""
    return round(get_duration(file, ffprobe_bin) * 1000)


def count_chapters(file: Path, ffprobe_bin: str = "ffprobe") -> int:
    """Count embedded chapters in an audio file."""
    result = _run_ffprobe(["-show_chapters", "-of", "json", str(file)], ffprobe_bin)
    if result.returncode != 0:
        return 0
    try:
        data = json.loads(result.stdout)
        return len(data.get("chapters", []))
    except (json.JSONDecodeError, AttributeError):
        return 0
