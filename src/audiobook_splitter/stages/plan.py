"""Plan stage -- partitions the Timeline into book Segments at user split points.

Split points are 1-based timeline positions naming the first track of each
book. The final book ends at the probed source duration, since a CUE sheet
records only chapter starts.
"""

from __future__ import annotations

from loguru import logger

from ..errors import InvalidSplitPointError, ValidationError
from ..models import Segment, Timeline
from ..timecode import ms_to_wall_clock

log = logger.bind(stage="plan")


def parse_split_points(raw: str) -> list[int]:
    """Parse a comma-separated list like "1,15,28" into integers.

    A malformed argument is a ValidationError, raised before any file is read.
    """
    tokens = [t.strip() for t in raw.split(",")]
    if not any(tokens):
        raise ValidationError("Split list is empty")
    points: list[int] = []
    for token in tokens:
        if not token.isdecimal():
            raise ValidationError(f"Invalid track number in split list: {token!r}")
        points.append(int(token))
    return points


def validate_split_points(splits: list[int], total_tracks: int) -> list[int]:
    """Validate and normalize split points.

    The list is deduplicated and sorted. Every value must lie in
    [1, total_tracks] and the first book must start at track 1, so that every
    track belongs to exactly one book. Returns the normalized list.
    """
    if not splits:
        raise InvalidSplitPointError("Split list is empty")

    out_of_range = [s for s in splits if s < 1 or s > total_tracks]
    if out_of_range:
        raise InvalidSplitPointError(
            f"Split point(s) {out_of_range} outside track range 1..{total_tracks}"
        )

    normalized = sorted(set(splits))
    if normalized[0] != 1:
        raise InvalidSplitPointError(
            f"First book must start at track 1, not {normalized[0]}"
        )
    return normalized


def plan_segments(timeline: Timeline, splits: list[int], total_duration_ms: int) -> list[Segment]:
    """Partition the Timeline into contiguous, non-overlapping Segments.

    Segment i covers tracks splits[i] .. splits[i+1]-1 and the half-open time
    range from its first track's start to the next segment's first track's
    start, or to total_duration_ms for the last segment.
    """
    total_tracks = len(timeline)
    points = validate_split_points(splits, total_tracks)

    last_start_ms = timeline.tracks[-1].start_ms
    if total_duration_ms < last_start_ms:
        raise InvalidSplitPointError(
            f"Source duration {ms_to_wall_clock(total_duration_ms)} ends before "
            f"the last chapter starts ({ms_to_wall_clock(last_start_ms)})"
        )

    bounds = points + [total_tracks + 1]
    num_books = len(points)
    segments: list[Segment] = []
    for i in range(num_books):
        start_track = bounds[i]
        end_track = bounds[i + 1] - 1
        start_ms = timeline.track(start_track).start_ms
        if i == num_books - 1:
            end_ms = total_duration_ms
        else:
            end_ms = timeline.track(bounds[i + 1]).start_ms
        segments.append(Segment(i, start_track, end_track, start_ms, end_ms))

    log.info(f"Planning to split into {num_books} book(s)")
    for seg in segments:
        log.debug(
            f"Book {seg.number}: tracks {seg.start_track}-{seg.end_track}, "
            f"{ms_to_wall_clock(seg.start_ms)} -> {ms_to_wall_clock(seg.end_ms)}"
        )
    return segments


def run(timeline: Timeline, splits: list[int], total_duration_ms: int) -> list[Segment]:
    return plan_segments(timeline, splits, total_duration_ms)
