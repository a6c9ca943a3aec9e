"""Splitter configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SplitterConfig(BaseSettings):
    """All splitter configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Directories --
    output_dir: Path | None = None  # None = next to the source file
    log_dir: Path = Path.home() / ".local/state/audiobook-splitter"
    temp_dir: Path | None = None  # None = system temp dir

    # -- External tools --
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    engine_timeout: int = Field(default=0, ge=0)  # seconds, 0 = no limit

    # -- Parallel emission --
    max_parallel_splits: int = Field(default=1, ge=0)  # 0 = auto (CPU-based)

    # -- Behavior --
    dry_run: bool = False
    verbose: bool = False
    verify_output: bool = True
    allow_partial: bool = False
    log_level: str = "INFO"

    # -- Metadata --
    genre: str = "Audiobook"

    def ensure_dirs(self) -> None:
        """Create output, log and temp directories if they don't exist."""
        for d in (self.output_dir, self.log_dir, self.temp_dir):
            if d is not None:
                d.mkdir(parents=True, exist_ok=True)

    def setup_logging(self) -> None:
        """Configure loguru for the splitter."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<10} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "splitter.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
