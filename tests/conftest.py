"""Shared test fixtures for Lossy Music Mirror."""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from typing import Any

import pytest
import tomli_w
from rich.console import Console

from lossy_mirror.classifier import Classifier
from lossy_mirror.codecs import Codec
from lossy_mirror.ffmpeg import EncodeError

# What the fake probe reports for each extension
PROBE_NAMES_BY_EXTENSION: dict[str, str] = {
    ".flac": "flac",
    ".ape": "ape",
    ".m4a": "alac",
    ".wma": "wmalossless",
    ".wv": "wavpack",
    ".tta": "tta",
    ".ogg": "vorbis",
    ".mp3": "mp3",
    ".opus": "opus",
    ".wav": "pcm_s16le",
}


def fake_probe(path: Path) -> str | None:
    """Probe by extension, unless the file content names a codec ("codec=x")."""
    content = path.read_bytes()
    if content.startswith(b"codec="):
        return content[len(b"codec="):].decode().strip() or None
    return PROBE_NAMES_BY_EXTENSION.get(path.suffix.lower())


class FakeEncoder:
    """Records encode calls and writes a small file at the destination."""

    def __init__(self, fail_on: set[str] | None = None, events: list[Any] | None = None) -> None:
        self.calls: list[tuple[Path, Path, Codec, int]] = []
        self.fail_on = fail_on or set()
        self.events = events

    def __call__(self, source: Path, destination: Path, codec: Codec, quality: int) -> None:
        self.calls.append((source, destination, codec, quality))
        if self.events is not None:
            self.events.append(("encode", destination))
        if source.name in self.fail_on:
            destination.write_bytes(b"partial")
            raise EncodeError(source, 1, "Invalid data found when processing input")
        destination.write_bytes(f"codec={codec.probe_name}".encode())


def make_file(root: Path, relative: str, content: bytes = b"\x00" * 16) -> Path:
    """Create a file (and its parents) under root."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def make_console() -> Console:
    """A console writing into a StringIO, wide enough to never wrap paths."""
    return Console(file=StringIO(), force_terminal=False, width=500)


def console_text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[union-attr]


@pytest.fixture
def tmp_input_dir(tmp_path: Path) -> Path:
    """Create a temporary input directory."""
    d = tmp_path / "input"
    d.mkdir()
    return d


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory."""
    d = tmp_path / "output"
    d.mkdir()
    return d


@pytest.fixture
def classifier() -> Classifier:
    return Classifier(probe=fake_probe)


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def console() -> Console:
    return make_console()


@pytest.fixture
def sample_config_file(tmp_path: Path, tmp_input_dir: Path, tmp_output_dir: Path) -> Path:
    """Write a sample config TOML file and return its path."""
    config_path = tmp_path / "lossy-mirror.toml"
    data = {
        "input_dir": str(tmp_input_dir),
        "output_dir": str(tmp_output_dir),
        "codec": "mp3",
        "quality": 2,
    }
    config_path.write_bytes(tomli_w.dumps(data).encode())
    return config_path
