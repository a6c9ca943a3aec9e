"""Rebase stage -- expresses a Segment's chapters relative to the Segment start."""

from __future__ import annotations

from loguru import logger

from ..models import RebasedTrack, Segment, Timeline

log = logger.bind(stage="rebase")


def rebase_segment(timeline: Timeline, segment: Segment) -> tuple[RebasedTrack, ...]:
    """Rebase the tracks of one Segment.

    Each track ends where the next track in the segment starts; the last one
    ends at segment.end_ms. The first track therefore starts at 0 and the last
    ends at segment.duration_ms.
    """
    marks = timeline.tracks[segment.start_track - 1 : segment.end_track]
    rebased = []
    for j, mark in enumerate(marks):
        if j + 1 < len(marks):
            absolute_end = marks[j + 1].start_ms
        else:
            absolute_end = segment.end_ms
        rebased.append(
            RebasedTrack(
                relative_start_ms=mark.start_ms - segment.start_ms,
                relative_end_ms=absolute_end - segment.start_ms,
                title=mark.title,
            )
        )
    log.debug(f"Book {segment.number}: rebased {len(rebased)} chapters")
    return tuple(rebased)


def run(timeline: Timeline, segment: Segment) -> tuple[RebasedTrack, ...]:
    return rebase_segment(timeline, segment)
