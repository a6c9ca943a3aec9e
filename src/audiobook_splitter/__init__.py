"""Audiobook Splitter -- split an omnibus M4B into chaptered books using its CUE sheet.

Core modules:
    config    -- Splitter configuration via pydantic-settings (.env + env vars).
                 CLI flags passed as kwargs to SplitterConfig (no env pollution).
    cli       -- Click CLI entry point: audiobook-split <directory> <start_tracks>
    runner    -- Pipeline orchestration: parse -> plan -> {rebase -> emit}*.
                 Per-book ffmpeg failures are recorded and the run continues.
    timecode  -- CUE MM:SS:FF (75 fps) <-> milliseconds <-> HH:MM:SS.mmm
    ffprobe   -- Source duration and output chapter count via ffprobe. Raises
                 ProbeError when the duration cannot be read.
    ffmpeg    -- Stream-copy extraction command builder and runner
    sanitize  -- Filename stem sanitization and chapter-prefix stripping
    errors    -- Exception hierarchy; each error carries its CLI exit code
    models    -- Enums and frozen value types (TrackMark, Timeline, Segment, ...)

Subpackages:
    stages    -- Pipeline stages (validate, parse, plan, rebase, emit)
"""
