"""Top-level sequencing: validate, reconcile, confirm, delete, mirror."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from rich.console import Console

from lossy_mirror.classifier import Classifier
from lossy_mirror.config import MirrorOptions, validate_options
from lossy_mirror.filesystem import LocalFilesystem
from lossy_mirror.mirror import Encoder, MirrorDriver, MirrorSummary
from lossy_mirror.reconciler import compute_obsolete_files, delete_files

logger = logging.getLogger(__name__)

DELETE_PROMPT = "The files listed above will be deleted. Are you sure you want to continue?"


class Outcome(str, Enum):
    """How a run ended."""

    VALIDATION_FAILED = "validation_failed"
    ABORTED = "aborted"
    COMPLETED = "completed"


class Orchestrator:
    """Runs the reconcile-then-mirror sequence with injected collaborators."""

    def __init__(
        self,
        classifier: Classifier,
        fs: LocalFilesystem,
        encoder: Encoder,
        console: Console,
        confirm: Callable[[str], bool],
    ) -> None:
        self.classifier = classifier
        self.fs = fs
        self.console = console
        self.confirm = confirm
        self.driver = MirrorDriver(classifier, fs, encoder, console)
        self.last_summary: MirrorSummary | None = None
        self.deleted_count = 0

    def run(self, options: MirrorOptions) -> Outcome:
        """Validate options, optionally prune obsolete files, then mirror.

        Deletion always finishes before the first encode starts.
        """
        errors = validate_options(options)
        if errors:
            for message in errors:
                self._write(f"lossy-music-mirror: error: {message}")
            self._write("Validation failed.")
            return Outcome.VALIDATION_FAILED

        if options.delete_files:
            obsolete = compute_obsolete_files(
                options.input_dir,
                options.output_dir,
                options.codec,
                classifier=self.classifier,
                fs=self.fs,
            )
            logger.info("Found %d obsolete files in %s", len(obsolete), options.output_dir)

            if options.dry_run:
                for path in obsolete:
                    self._write(f"Would delete {path}")
            else:
                confirmed = True if options.no_ask else self.ask_user_for_delete(obsolete)
                if not confirmed:
                    self._write("Exiting.")
                    return Outcome.ABORTED
                self.deleted_count = delete_files(
                    obsolete, fs=self.fs, output_dir=options.output_dir
                )

        self.last_summary = self.driver.mirror(options)
        self._log_summary(self.last_summary, options)
        return Outcome.COMPLETED

    def ask_user_for_delete(self, files: list[Path]) -> bool:
        """List files and ask for confirmation. Nothing to delete means yes."""
        if not files:
            return True
        for path in files:
            self._write(str(path))
        return self.confirm(DELETE_PROMPT)

    def _log_summary(self, summary: MirrorSummary, options: MirrorOptions) -> None:
        label = "Dry Run Summary" if options.dry_run else "Mirror Summary"
        logger.info("--- %s ---", label)
        logger.info("Lossless files: %d", summary.total)
        logger.info("Converted: %d", summary.converted)
        logger.info("Skipped (already exist): %d", summary.skipped)
        logger.info("Failed: %d", summary.failed)
        if options.delete_files and not options.dry_run:
            logger.info("Deleted: %d", self.deleted_count)

    def _write(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
