"""Transcode every lossless file of the input tree into the output tree."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from lossy_mirror.classifier import Classifier
from lossy_mirror.codecs import Codec
from lossy_mirror.config import MirrorOptions
from lossy_mirror.ffmpeg import EncodeError
from lossy_mirror.filesystem import LocalFilesystem

logger = logging.getLogger(__name__)

Encoder = Callable[[Path, Path, Codec, int], None]


@dataclass
class MirrorSummary:
    """Counters for one mirror pass."""

    total: int = 0
    converted: int = 0
    skipped: int = 0
    failed: int = 0


class MirrorDriver:
    """Walks the input tree and encodes lossless files that have no output yet."""

    def __init__(
        self,
        classifier: Classifier,
        fs: LocalFilesystem,
        encoder: Encoder,
        console: Console,
    ) -> None:
        self.classifier = classifier
        self.fs = fs
        self.encoder = encoder
        self.console = console

    def count_lossless_files(self, input_dir: Path) -> int:
        """Count the files under input_dir that probe as lossless."""
        return sum(1 for f in self.fs.walk(input_dir) if self.classifier.is_lossless(f))

    def output_path_for(self, source: Path, options: MirrorOptions) -> Path:
        """Mirror source's location under output_dir with the codec's extension."""
        relative_dir = self.fs.relative_path(options.input_dir, source.parent)
        file_name = f"{self.fs.base_name(source)}.{options.codec.extension}"
        return options.output_dir / relative_dir / file_name

    def mirror(self, options: MirrorOptions) -> MirrorSummary:
        """Run one mirror pass.

        The lossless files are counted in a first walk so the total is known
        before the first progress line. Existing outputs are never
        re-encoded. A failed encode is logged, its partial output removed,
        and the walk moves on to the next file.
        """
        summary = MirrorSummary(total=self.count_lossless_files(options.input_dir))
        logger.info(
            "Found %d lossless files in %s", summary.total, options.input_dir
        )

        counter = 0
        for source in self.fs.walk(options.input_dir):
            if not self.classifier.is_lossless(source):
                continue

            destination = self.output_path_for(source, options)
            counter += 1
            self._write(f"{counter}/{summary.total}: ", end="")

            if not options.dry_run:
                self.fs.make_dir(destination.parent)

            if self.fs.exists(destination):
                self._write(f"Skipping conversion to {destination} since it already exists")
                summary.skipped += 1
                continue

            if options.dry_run:
                self._write(f"Would convert {source} to {destination}")
                continue

            self._write(f"Converting {source} to {destination}")
            try:
                self.encoder(source, destination, options.codec, options.quality)
            except EncodeError as e:
                summary.failed += 1
                logger.error("%s", e)
                self._remove_partial(destination)
                continue
            except BaseException:
                # Interrupted mid-encode: never leave a file the next run would skip
                self._remove_partial(destination)
                raise
            summary.converted += 1

        return summary

    def _remove_partial(self, destination: Path) -> None:
        if self.fs.exists(destination):
            self.fs.remove(destination)
            logger.debug("Removed partial output %s", destination)

    def _write(self, text: str, end: str = "\n") -> None:
        self.console.print(text, end=end, markup=False, highlight=False, emoji=False, soft_wrap=True)
        self.console.file.flush()
