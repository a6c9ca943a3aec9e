"""Shared fixtures: a three-chapter omnibus CUE sheet and its source directory."""

import pytest

from audiobook_splitter.models import Timeline, TrackMark

# Chapters start at 0, 10 and 20 minutes
SAMPLE_CUE = """\
PERFORMER "Jane Author"
TITLE "The Omnibus"
FILE "Omnibus.m4b" MP4
  TRACK 01 AUDIO
    TITLE "1: Beginnings"
    INDEX 01 00:00:00
  TRACK 02 AUDIO
    TITLE "2: Middles"
    INDEX 01 10:00:00
  TRACK 03 AUDIO
    TITLE "3: Threats"
    INDEX 01 20:00:00
"""

SAMPLE_DURATION_MS = 1_800_000


@pytest.fixture
def sample_cue() -> str:
    return SAMPLE_CUE


@pytest.fixture
def sample_timeline() -> Timeline:
    return Timeline(
        tracks=(
            TrackMark(1, "1: Beginnings", 0),
            TrackMark(2, "2: Middles", 600_000),
            TrackMark(3, "3: Threats", 1_200_000),
        ),
        title="The Omnibus",
        performer="Jane Author",
    )


@pytest.fixture
def omnibus_dir(tmp_path):
    """Directory holding Omnibus.m4b (fake bytes) and Omnibus.cue."""
    src = tmp_path / "omnibus"
    src.mkdir()
    (src / "Omnibus.m4b").write_bytes(b"\x00fake m4b")
    (src / "Omnibus.cue").write_text(SAMPLE_CUE)
    return src
