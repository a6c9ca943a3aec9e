"""FFmpeg subprocess wrapper for stream-copy segment extraction."""

import subprocess
from pathlib import Path

from loguru import logger

from .errors import EngineError
from .timecode import ms_to_wall_clock

log = logger.bind(stage="ffmpeg")


def build_split_command(
    source: Path,
    metadata_file: Path,
    start_ms: int,
    end_ms: int,
    output: Path,
    ffmpeg_bin: str = "ffmpeg",
) -> list[str]:
    """Build the ffmpeg command extracting [start_ms, end_ms) without re-encoding.

    Audio comes from the source, global tags and chapters from the FFMETADATA
    file, per-stream audio tags from the source. Embedded cover art (0:v) is
    carried over when present.

    -ss/-to are input options on the source so output timestamps start at 0
    and the FFMETADATA chapters are copied unshifted.
    """
    return [
        ffmpeg_bin,
        "-y",
        "-hide_banner",
        "-v",
        "error",
        "-ss",
        ms_to_wall_clock(start_ms),
        "-to",
        ms_to_wall_clock(end_ms),
        "-i",
        str(source),
        "-i",
        str(metadata_file),
        "-map",
        "0:a",
        "-map",
        "0:v?",
        "-map_metadata",
        "1",
        "-map_metadata:s:a",
        "0:s:a",
        "-map_chapters",
        "1",
        "-c",
        "copy",
        str(output),
    ]


def run_ffmpeg(cmd: list[str], timeout: int = 0) -> None:
    """Run an ffmpeg command, raising EngineError on failure.

    timeout is in seconds; 0 waits indefinitely.
    """
    log.debug(f"ffmpeg command: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout or None,
        )
    except subprocess.TimeoutExpired:
        raise EngineError(f"ffmpeg timed out after {timeout}s") from None
    except FileNotFoundError:
        raise EngineError(f"ffmpeg binary not found: {cmd[0]}") from None

    if result.returncode != 0:
        stderr = result.stderr[-500:]
        log.error(f"ffmpeg stderr: {stderr}")
        raise EngineError(
            f"ffmpeg exited with code {result.returncode}",
            returncode=result.returncode,
            stderr=stderr,
        )
