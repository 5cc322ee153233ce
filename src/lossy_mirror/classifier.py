"""Codec detection for individual files."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from lossy_mirror.codecs import Codec, codec_from_probe_name
from lossy_mirror.ffmpeg import probe_codec


class Classifier:
    """Classify files by probing their audio codec.

    Results are not cached: every call probes the file again.
    """

    def __init__(self, probe: Callable[[Path], str | None] = probe_codec) -> None:
        self._probe = probe

    def codec_of(self, path: Path) -> Codec | None:
        """Return the registered codec of path, or None for anything else."""
        return codec_from_probe_name(self._probe(path))

    def is_lossless(self, path: Path) -> bool | None:
        """True/False for a known codec, None if the codec is undetermined."""
        codec = self.codec_of(path)
        if codec is None:
            return None
        return codec.is_lossless


def same_codec(a: Codec | None, b: Codec | None) -> bool:
    """Compare two codecs by name."""
    if a is None or b is None:
        return False
    return a.name == b.name
