"""Filesystem primitives and directory walking."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from pathlib import Path


class LocalFilesystem:
    """Thin wrapper over pathlib so the engine can be handed a substitute."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def make_dir(self, path: Path) -> None:
        """Create path and any missing parents. No-op if it already exists."""
        if not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)

    def remove(self, path: Path) -> None:
        """Remove a file, or a directory together with its contents."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def list_entries(self, path: Path) -> list[Path]:
        """Return the entries directly inside path, sorted by name."""
        return sorted(path.iterdir())

    def relative_path(self, start: Path, path: Path) -> Path:
        return Path(os.path.relpath(path, start))

    def base_name(self, path: Path) -> str:
        """File name without its last extension."""
        return path.stem

    def extension(self, path: Path) -> str | None:
        """Lower-case extension without the dot, or None if there is none."""
        suffix = path.suffix
        return suffix[1:].lower() if suffix else None

    def walk(self, root: Path) -> Iterator[Path]:
        """Yield every regular file under root, depth-first.

        Files in a directory are yielded before its subdirectories are
        entered. Symlinked directories are not followed.
        """
        subdirs: list[Path] = []
        for entry in self.list_entries(root):
            if entry.is_dir() and not entry.is_symlink():
                subdirs.append(entry)
            elif entry.is_file():
                yield entry
        for subdir in subdirs:
            yield from self.walk(subdir)
