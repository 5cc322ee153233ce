"""CLI entry point for Lossy Music Mirror."""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from lossy_mirror import __version__
from lossy_mirror.app import Orchestrator, Outcome
from lossy_mirror.classifier import Classifier
from lossy_mirror.codecs import CODECS, lossy_codec_names
from lossy_mirror.config import DEFAULT_CONFIG_FILE, MirrorOptions, load_config, merge_config
from lossy_mirror.ffmpeg import check_ffmpeg_available, encode
from lossy_mirror.filesystem import LocalFilesystem
from lossy_mirror.logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="lossy-music-mirror",
    help="Mirror a lossless music library into a lossy-encoded copy.",
    invoke_without_command=True,
    no_args_is_help=True,
)


def _resolve_config_path(config: Optional[str]) -> Path | None:
    """Return the config file to read, falling back to ./lossy-mirror.toml."""
    if config is not None:
        path = Path(config)
        if not path.exists():
            typer.echo(f"Error: Config file not found: {path}", err=True)
            raise typer.Exit(code=1)
        return path
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def _build_options(config_path: Path | None, cli_overrides: dict[str, Any]) -> MirrorOptions:
    """Load the TOML config (if any) and merge CLI overrides on top."""
    file_config = load_config(config_path) if config_path is not None else {}
    return merge_config(file_config, cli_overrides)


def _build_orchestrator(console: Console) -> Orchestrator:
    """Wire the orchestrator to ffprobe, ffmpeg, and the local filesystem."""
    return Orchestrator(
        classifier=Classifier(),
        fs=LocalFilesystem(),
        encoder=encode,
        console=console,
        confirm=lambda message: typer.confirm(message, default=False),
    )


@app.command()
def run(
    output: Optional[str] = typer.Argument(None, help="The output directory path"),
    input_dir: Optional[str] = typer.Option(None, "--input", "-i", help="The input directory path [default: ./]"),
    codec: Optional[str] = typer.Option(None, "--codec", "-c", help=f"The output codec ({', '.join(lossy_codec_names())}) [default: vorbis]"),
    quality: Optional[int] = typer.Option(None, "--quality", "-q", help="Encoder quality, or bitrate for opus [default: per codec]"),
    delete: bool = typer.Option(False, "--delete", "-d", help="Delete output files without a lossless source"),
    no_ask: bool = typer.Option(False, "--no-ask", "-y", help="Delete without asking for confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be deleted and converted"),
    config: Optional[str] = typer.Option(None, "--config", help=f"Path to TOML config file (default: ./{DEFAULT_CONFIG_FILE})"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level [default: INFO]"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Transcode lossless files into the output directory."""
    if codec is not None and codec.lower() not in lossy_codec_names():
        typer.echo(
            f"Error: Invalid codec {codec!r}. Choose from: {', '.join(lossy_codec_names())}",
            err=True,
        )
        raise typer.Exit(code=2)

    config_path = _resolve_config_path(config)
    cli_overrides: dict[str, Any] = {
        "output_dir": output,
        "input_dir": input_dir,
        "codec": codec,
        "quality": quality,
        # An absent flag leaves the config file's value in place
        "delete_files": True if delete else None,
        "no_ask": True if no_ask else None,
        "dry_run": True if dry_run else None,
        "log_level": log_level,
        "log_file": log_file,
    }

    try:
        options = _build_options(config_path, cli_overrides)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logging(options.log_level, options.log_file)

    # Fail fast if ffmpeg is not installed
    try:
        check_ffmpeg_available()
    except RuntimeError as e:
        logger.error("%s", e)
        raise typer.Exit(code=1)

    logger.info("Lossy Music Mirror v%s", __version__)
    logger.info("Input: %s", options.input_dir)
    logger.info("Output: %s", options.output_dir)
    logger.info("Codec: %s (quality=%s)", options.codec.name, options.quality)
    if options.dry_run:
        logger.info("Dry-run mode: nothing will be deleted or encoded")

    orchestrator = _build_orchestrator(Console())
    outcome = orchestrator.run(options)

    if outcome is Outcome.VALIDATION_FAILED:
        raise typer.Exit(code=1)
    summary = orchestrator.last_summary
    if summary is not None and summary.failed:
        raise typer.Exit(code=1)


def format_codec_table() -> str:
    """Render the codec registry as a text table."""
    console = Console(file=StringIO(), force_terminal=False, width=100)

    table = Table(title="Supported codecs", show_header=True, header_style="bold")
    table.add_column("Codec", style="cyan")
    table.add_column("Type")
    table.add_column("Extension")
    table.add_column("Encoder")
    table.add_column("Mode")
    table.add_column("Range", justify="right")
    table.add_column("Default", justify="right")

    for c in CODECS:
        if c.is_lossless:
            table.add_row(c.name, "lossless", c.extension, "", "", "", "")
        else:
            table.add_row(
                c.name,
                "lossy",
                c.extension,
                c.encoder or "",
                c.encoder_mode.value if c.encoder_mode else "",
                f"{c.min_quality}-{c.max_quality}",
                str(c.default_quality),
            )

    console.print(table)
    output = console.file.getvalue()  # type: ignore[union-attr]
    return output


@app.command(name="codecs")
def codecs_cmd() -> None:
    """List supported input and output codecs."""
    typer.echo(format_codec_table())


@app.command()
def version() -> None:
    """Print version information."""
    typer.echo(f"lossy-music-mirror {__version__}")


if __name__ == "__main__":
    app()
