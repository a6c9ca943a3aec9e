"""Validation stage -- locates the source M4B and its CUE sheet before any parsing."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..errors import ValidationError
from ..models import CUE_EXTENSIONS, SOURCE_EXTENSIONS

log = logger.bind(stage="validate")

# Stems this tool writes: Book-<n> or Book-<n>-<name>
_EMITTED_STEM_RE = re.compile(r"^Book-\d+(-|$)")


@dataclass(frozen=True)
class SourcePair:
    media: Path
    cue: Path


def _files_with_extensions(directory: Path, extensions: frozenset[str]) -> list[Path]:
    return sorted(
        f for f in directory.iterdir()
        if f.is_file()
        and not f.name.startswith(".")
        and f.suffix.lower() in extensions
        and not _EMITTED_STEM_RE.match(f.stem)
    )


def find_source_pair(directory: Path) -> SourcePair:
    """Find exactly one .m4b and exactly one .cue with the same stem.

    Extensions are matched case-insensitively. Books written by an earlier run
    (Book-<n>*.m4b/.cue) are ignored so the split can be repeated in place. Raises ValidationError when the
    directory is missing, or when either file is absent or ambiguous.
    """
    if not directory.is_dir():
        raise ValidationError(f"Input directory not found: {directory}")

    media_files = _files_with_extensions(directory, SOURCE_EXTENSIONS)
    cue_files = _files_with_extensions(directory, CUE_EXTENSIONS)
    log.debug(f"Found {len(media_files)} m4b and {len(cue_files)} cue files in {directory}")

    if len(media_files) != 1 or len(cue_files) != 1:
        raise ValidationError(
            f"Directory must contain exactly one .m4b file and one .cue file "
            f"(found {len(media_files)} .m4b, {len(cue_files)} .cue): {directory}"
        )

    media, cue = media_files[0], cue_files[0]
    if media.stem != cue.stem:
        raise ValidationError(
            f"CUE sheet '{cue.name}' does not match source '{media.name}'"
        )

    return SourcePair(media=media, cue=cue)


def check_tools(*tools: str) -> None:
    """Raise ValidationError if any external tool is not on PATH."""
    missing = [t for t in tools if shutil.which(t) is None]
    if missing:
        raise ValidationError(f"Required tool(s) not found: {', '.join(missing)}")


def run(directory: Path, ffmpeg_bin: str = "ffmpeg", ffprobe_bin: str = "ffprobe") -> SourcePair:
    """Pre-flight checks: tools on PATH, then the source/CUE pair."""
    check_tools(ffmpeg_bin, ffprobe_bin)
    pair = find_source_pair(directory)
    log.info(f"Source M4B: {pair.media}")
    log.info(f"Source CUE: {pair.cue}")
    return pair
