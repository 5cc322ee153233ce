"""Run options: loading, merging, and validation."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lossy_mirror.codecs import DEFAULT_CODEC, Codec, lossy_codec_names, resolve_codec

DEFAULT_CONFIG_FILE = Path("lossy-mirror.toml")


@dataclass(frozen=True)
class MirrorOptions:
    """Immutable options for one mirror run."""

    output_dir: Path
    input_dir: Path = Path(".")
    codec: Codec = DEFAULT_CODEC
    quality: int = DEFAULT_CODEC.default_quality  # type: ignore[assignment]
    delete_files: bool = False
    no_ask: bool = False
    dry_run: bool = False
    log_level: str = "INFO"
    log_file: Path | None = None


_DEFAULTS: dict[str, Any] = {
    "input_dir": ".",
    "codec": DEFAULT_CODEC.name,
    "delete_files": False,
    "no_ask": False,
    "dry_run": False,
    "log_level": "INFO",
}


def load_config(path: Path) -> dict[str, Any]:
    """Read a TOML config file and return a dict."""
    with path.open("rb") as f:
        return tomllib.load(f)


def merge_config(
    file_config: dict[str, Any],
    cli_overrides: dict[str, Any],
) -> MirrorOptions:
    """Merge defaults, file config, and CLI overrides into MirrorOptions.

    Priority: defaults < file config < CLI overrides. The quality falls back
    to the chosen codec's default. Raises ValueError for structural
    problems; quality range and input existence are checked later by
    validate_options.
    """
    merged: dict[str, Any] = {**_DEFAULTS}
    merged.update({k: v for k, v in file_config.items() if v is not None})
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    errors: list[str] = []
    if not merged.get("output_dir"):
        errors.append("output_dir is required")

    for key in ("output_dir", "input_dir", "log_file"):
        value = merged.get(key)
        if value is not None and not isinstance(value, (str, Path)):
            errors.append(f"{key} must be a path string (got {value!r})")

    codec_name = str(merged["codec"]).strip().lower()
    if codec_name not in lossy_codec_names():
        errors.append(
            f"codec must be one of {', '.join(lossy_codec_names())} (got {merged['codec']!r})"
        )

    if errors:
        raise ValueError("Configuration errors:\n  " + "\n  ".join(errors))

    codec = resolve_codec(codec_name)
    quality = merged.get("quality")
    if quality is None:
        quality = codec.default_quality

    log_file = merged.get("log_file")

    return MirrorOptions(
        output_dir=Path(merged["output_dir"]),
        input_dir=Path(merged["input_dir"]),
        codec=codec,
        quality=quality,
        delete_files=bool(merged["delete_files"]),
        no_ask=bool(merged["no_ask"]),
        dry_run=bool(merged["dry_run"]),
        log_level=str(merged["log_level"]),
        log_file=Path(log_file) if log_file else None,
    )


def validate_options(options: MirrorOptions) -> list[str]:
    """Return one message per violated rule; an empty list means valid."""
    errors: list[str] = []
    codec = options.codec
    quality = options.quality

    if isinstance(quality, bool) or not isinstance(quality, (int, float)):
        errors.append('argument "-q/--quality": The value must be a number')
    elif quality < codec.min_quality or quality > codec.max_quality:  # type: ignore[operator]
        errors.append(
            f'argument "-q/--quality": The value must be between '
            f"{codec.min_quality} and {codec.max_quality}"
        )
    elif quality % 1 != 0:
        errors.append("argument \"-q/--quality\": The value can't be a decimal")

    if not options.input_dir.is_dir():
        errors.append('argument "-i/--input": The value must be an existing directory')

    # Everything under the output root that is not a target encode gets pruned
    input_dir = options.input_dir.resolve()
    output_dir = options.output_dir.resolve()
    if output_dir == input_dir or output_dir in input_dir.parents:
        errors.append(
            'argument "output": The value can\'t be the input directory or one of its parents'
        )

    return errors
