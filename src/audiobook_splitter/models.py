"""Core enums, constants, and type definitions for the audiobook splitter.

Enums:
    ParserState    -- Tagged state of the CUE line scanner (awaiting track,
                      awaiting title, ready to finalize on INDEX 01).
    SegmentStatus  -- Per-book emission outcome (completed, failed, skipped).

Value types are frozen dataclasses: nothing is mutated once a stage has
produced it, so the Timeline can be shared across emission workers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path


class ParserState(StrEnum):
    AWAITING_TRACK = "awaiting_track"
    AWAITING_TITLE = "awaiting_title"
    READY = "ready"


class SegmentStatus(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


# CD audio: 75 frames per second
FRAMES_PER_SECOND = 75

SOURCE_EXTENSIONS: frozenset[str] = frozenset({".m4b"})
CUE_EXTENSIONS: frozenset[str] = frozenset({".cue"})


@dataclass(frozen=True)
class TrackMark:
    """One chapter of the source: its CUE track number, title and absolute start."""

    track_number: int
    title: str
    start_ms: int


@dataclass(frozen=True)
class Timeline:
    """Ordered chapter marks parsed from a CUE sheet.

    ``title`` and ``performer`` come from the disc-level header lines that
    precede the first TRACK, when present.
    """

    tracks: tuple[TrackMark, ...]
    title: str | None = None
    performer: str | None = None

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def track(self, position: int) -> TrackMark:
        """Return the track at a 1-based timeline position."""
        if position < 1 or position > len(self.tracks):
            raise IndexError(f"track position {position} out of range 1..{len(self.tracks)}")
        return self.tracks[position - 1]


@dataclass(frozen=True)
class PendingTrack:
    """Partially scanned CUE track record.

    The scanner's state is derived from which fields have been captured, so
    it can never disagree with the data it holds.
    """

    number: int | None = None
    title: str | None = None

    @property
    def state(self) -> ParserState:
        if self.number is None:
            return ParserState.AWAITING_TRACK
        if self.title is None:
            return ParserState.AWAITING_TITLE
        return ParserState.READY

    def with_title(self, title: str) -> PendingTrack:
        return replace(self, title=title)


@dataclass(frozen=True)
class Segment:
    """A contiguous run of tracks destined for one output book.

    ``start_track``/``end_track`` are 1-based, inclusive timeline positions;
    ``start_ms``/``end_ms`` are absolute offsets into the source, half-open.
    """

    index: int
    start_track: int
    end_track: int
    start_ms: int
    end_ms: int

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def track_count(self) -> int:
        return self.end_track - self.start_track + 1


@dataclass(frozen=True)
class RebasedTrack:
    relative_start_ms: int
    relative_end_ms: int
    title: str


@dataclass(frozen=True)
class SegmentResult:
    """Outcome of emitting one segment."""

    segment: Segment
    status: SegmentStatus
    output_path: Path | None = None
    cue_path: Path | None = None
    error: str = ""


@dataclass
class SplitResult:
    """Result summary from a split run."""

    completed: int = 0
    failed: int = 0
    total: int = 0
    segments: list[SegmentResult] = field(default_factory=list)

    def record(self, result: SegmentResult) -> None:
        self.segments.append(result)
        if result.status == SegmentStatus.FAILED:
            self.failed += 1
        elif result.status == SegmentStatus.COMPLETED:
            self.completed += 1
