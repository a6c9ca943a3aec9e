"""Split runner -- orchestrates Parse -> Plan -> {Rebase -> Emit}* -> Done."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import click
from loguru import logger

from .config import SplitterConfig
from .errors import EngineError
from .ffprobe import get_duration_ms
from .models import Segment, SegmentResult, SegmentStatus, SplitResult, Timeline
from .stages import emit, parse, plan, rebase, validate
from .timecode import duration_to_timestamp

log = logger.bind(stage="runner")


class SplitRunner:
    """Splits one omnibus M4B into books.

    Validation, parse and plan failures propagate before any output exists.
    An EngineError on one book is logged and recorded, and the remaining
    books are still emitted.
    """

    def __init__(self, config: SplitterConfig) -> None:
        self.config = config

    def run(self, directory: Path, start_tracks: str) -> SplitResult:
        """Run the whole pipeline for an input directory and a split list."""
        splits = plan.parse_split_points(start_tracks)
        pair = validate.run(directory, self.config.ffmpeg_bin, self.config.ffprobe_bin)
        timeline = parse.run(pair.cue)

        total_ms = get_duration_ms(pair.media, self.config.ffprobe_bin)
        log.info(f"Source duration: {duration_to_timestamp(total_ms / 1000)} ({total_ms} ms)")

        segments = plan.run(timeline, splits, total_ms)

        output_dir = self.config.output_dir or pair.media.parent
        if not self.config.dry_run:
            self.config.ensure_dirs()

        click.echo(f"Splitting {pair.media.name} into {len(segments)} book(s)")
        if self.config.dry_run:
            click.echo("[DRY-RUN] No files will be written")

        result = self.emit_all(pair.media, timeline, segments, output_dir)
        self._display_summary(result)
        return result

    def emit_all(
        self,
        source: Path,
        timeline: Timeline,
        segments: list[Segment],
        output_dir: Path,
    ) -> SplitResult:
        """Rebase and emit every segment, sequentially or on a thread pool.

        Results are recorded in segment order regardless of completion order.
        """
        result = SplitResult(total=len(segments))
        max_workers = self._calculate_max_workers(len(segments))

        if max_workers <= 1:
            for segment in segments:
                result.record(self._emit_safe(source, timeline, segment, output_dir))
            return result

        log.info(f"Emitting {len(segments)} books with max_workers={max_workers}")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self._emit_safe, source, timeline, segment, output_dir)
                for segment in segments
            ]
            try:
                for future in futures:
                    result.record(future.result())
            except KeyboardInterrupt:
                log.warning("Interrupted; cancelling books not yet started")
                executor.shutdown(wait=False, cancel_futures=True)
                raise
        return result

    def _emit_safe(
        self,
        source: Path,
        timeline: Timeline,
        segment: Segment,
        output_dir: Path,
    ) -> SegmentResult:
        """Rebase and emit one segment, converting EngineError or OSError into a failed result."""
        rebased = rebase.run(timeline, segment)
        try:
            return emit.emit_segment(source, timeline, segment, rebased, output_dir, self.config)
        except (EngineError, OSError) as e:
            log.error(f"Book #{segment.number} failed: {e}")
            click.echo(f"  -> ERROR: failed to create book #{segment.number}: {e}")
            return SegmentResult(segment=segment, status=SegmentStatus.FAILED, error=str(e))

    def _calculate_max_workers(self, num_segments: int) -> int:
        """Worker count: configured value, or CPU-based when 0, capped by segment count."""
        configured = self.config.max_parallel_splits
        if configured > 0:
            workers = configured
        else:
            cpu_count = os.cpu_count() or 1
            workers = max(1, min(4, cpu_count // 2))
        return max(1, min(workers, num_segments))

    def _display_summary(self, result: SplitResult) -> None:
        click.echo(
            f"Total books: {result.total}, Created: {result.completed}, "
            f"Failed: {result.failed}"
        )
        if result.failed:
            click.echo(
                "WARNING: some books were not created; finished books were kept.",
                err=True,
            )
