"""CLI entry point for the audiobook splitter."""

import signal
import sys
from pathlib import Path

import click
from loguru import logger
from pydantic import ValidationError as SettingsValidationError

from .config import SplitterConfig
from .errors import ConfigError, EngineError, SplitterError
from .runner import SplitRunner

log = logger.bind(stage="cli")


def _raise_interrupt(signum, frame):
    """Turn SIGTERM into KeyboardInterrupt so finally blocks remove temp files."""
    raise KeyboardInterrupt


def _load_config(config_kwargs: dict) -> SplitterConfig:
    """Build SplitterConfig, reporting bad env/.env values as ConfigError."""
    try:
        return SplitterConfig(**config_kwargs)
    except SettingsValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from None


@click.command()
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.argument("start_tracks")
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where to write the books. Defaults to DIRECTORY.",
)
@click.option(
    "-j",
    "--jobs",
    type=int,
    default=None,
    help="Books to emit in parallel (0 = auto). Default: sequential.",
)
@click.option("--timeout", type=int, default=None, help="Per-book ffmpeg timeout in seconds.")
@click.option(
    "--dry-run", is_flag=True, help="Show what would happen without doing it."
)
@click.option(
    "--allow-partial",
    is_flag=True,
    help="Exit 0 even if some books failed to be created.",
)
@click.option("--no-verify", is_flag=True, help="Skip the chapter count check on created books.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .env file.",
)
def main(
    directory: Path,
    start_tracks: str,
    output_dir: Path | None,
    jobs: int | None,
    timeout: int | None,
    dry_run: bool,
    allow_partial: bool,
    no_verify: bool,
    verbose: bool,
    config_file: Path | None,
) -> None:
    """Split an omnibus M4B into several chaptered books using its CUE sheet.

    DIRECTORY must contain one .m4b file and one .cue file with the same name.
    START_TRACKS is a comma-separated ascending list of the track numbers that
    start each new book, e.g. '1,15,28'.
    """
    # Pass CLI flags as kwargs; unset flags fall through to env/.env
    config_kwargs: dict = {}
    if config_file is not None:
        config_kwargs["_env_file"] = config_file
    if output_dir is not None:
        config_kwargs["output_dir"] = output_dir
    if jobs is not None:
        config_kwargs["max_parallel_splits"] = jobs
    if timeout is not None:
        config_kwargs["engine_timeout"] = timeout
    if dry_run:
        config_kwargs["dry_run"] = True
    if allow_partial:
        config_kwargs["allow_partial"] = True
    if no_verify:
        config_kwargs["verify_output"] = False
    if verbose:
        config_kwargs["verbose"] = True
        config_kwargs["log_level"] = "DEBUG"

    try:
        config = _load_config(config_kwargs)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)
    config.setup_logging()

    log.info(f"Starting split: directory={directory} start_tracks={start_tracks} dry_run={config.dry_run}")

    previous_handler = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        result = SplitRunner(config).run(directory.resolve(), start_tracks)
    except SplitterError as e:
        log.error(str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        log.warning("Interrupted; books already created were kept")
        click.echo("Interrupted.", err=True)
        sys.exit(130)
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    if result.failed and not config.allow_partial:
        sys.exit(EngineError.exit_code)
