"""Exception hierarchy for the audiobook splitter.

Every error carries the process exit code the CLI reports for it. Validation,
parse and plan errors are fatal and raised before any output file exists;
EngineError is recovered per segment by the runner.
"""


class SplitterError(Exception):
    """Base exception for all splitter errors."""

    exit_code = 1


class ConfigError(SplitterError):
    """Invalid or missing configuration."""

    exit_code = 2


class ValidationError(SplitterError):
    """Bad arguments or missing/ambiguous input files."""

    exit_code = 2


class ParseError(SplitterError):
    """The CUE sheet could not be turned into a usable timeline."""

    exit_code = 3


class EmptyTimelineError(ParseError):
    """The CUE sheet produced zero chapters."""


class TimelineOrderError(ParseError):
    """A chapter starts before the chapter preceding it."""


class PlanError(SplitterError):
    """The timeline could not be partitioned into books."""

    exit_code = 4


class InvalidSplitPointError(PlanError):
    """The split list is empty, out of range, or leaves track 1 uncovered."""


class ProbeError(SplitterError):
    """ffprobe could not report the source duration."""

    exit_code = 4


class EngineError(SplitterError):
    """ffmpeg failed to produce one segment."""

    exit_code = 5

    def __init__(self, message: str, tool: str = "ffmpeg", returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr
