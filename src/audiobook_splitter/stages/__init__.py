"""Pipeline stages, run in order: validate -> parse -> plan -> {rebase -> emit}*

Stages:
    validate -- Pre-flight checks. Verifies ffmpeg and ffprobe are on PATH
                and that the input directory holds exactly one .m4b and one
                .cue with matching stems (extensions case-insensitive).
                Raises ValidationError before anything is parsed.
    parse    -- Scans the CUE sheet line by line with an explicit tagged
                state (awaiting track, awaiting title, ready). INDEX 01
                finalizes a track only when both its number and title were
                seen; incomplete tracks are dropped and logged. Captures the
                disc-level TITLE/PERFORMER header. Raises EmptyTimelineError
                on zero tracks and TimelineOrderError on decreasing starts.
    plan     -- Parses and validates the split list (sorted, duplicates
                collapsed, starts at 1, in range) and partitions the Timeline
                into Segments. The last Segment ends at the ffprobe duration.
    rebase   -- Re-expresses a Segment's chapters relative to its start:
                first chapter at 0, last ending at the Segment duration,
                chapters contiguous.
    emit     -- Derives the book name from the first chapter title, writes
                the book's CUE sheet, writes FFMETADATA1 chapters to a temp
                file, runs ffmpeg with -c copy for the Segment's time range
                (carrying cover art over), and verifies the output's chapter
                count. The temp file is removed in a finally block. Supports
                dry-run.
"""
