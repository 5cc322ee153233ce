"""Find and delete output files that no longer have a lossless source."""

from __future__ import annotations

import logging
from pathlib import Path

from lossy_mirror.classifier import Classifier, same_codec
from lossy_mirror.codecs import Codec
from lossy_mirror.filesystem import LocalFilesystem

logger = logging.getLogger(__name__)


def compute_obsolete_files(
    input_dir: Path,
    output_dir: Path,
    target_codec: Codec,
    *,
    classifier: Classifier,
    fs: LocalFilesystem,
) -> list[Path]:
    """Return the output files that should be deleted, in walk order.

    An output file is kept only if it is encoded in target_codec and the
    corresponding input directory holds a lossless file with the same base
    name. Anything else under output_dir (other codecs, non-audio files,
    encodes whose source is gone) is obsolete.
    """
    if not fs.exists(output_dir):
        return []

    obsolete: list[Path] = []
    for file_path in fs.walk(output_dir):
        codec = classifier.codec_of(file_path)
        if codec is None or not same_codec(codec, target_codec):
            logger.debug("Obsolete (codec %s): %s", codec.name if codec else None, file_path)
            obsolete.append(file_path)
            continue

        relative_dir = fs.relative_path(output_dir, file_path.parent)
        input_subdir = input_dir / relative_dir
        matches = _files_with_base_name(input_subdir, fs.base_name(file_path), fs)

        if not any(classifier.is_lossless(m) for m in matches):
            logger.debug("Obsolete (no lossless source): %s", file_path)
            obsolete.append(file_path)

    return obsolete


def _files_with_base_name(
    directory: Path, base_name: str, fs: LocalFilesystem
) -> list[Path]:
    """Files directly in directory whose name minus extension is base_name."""
    if not fs.is_dir(directory):
        return []
    return [
        entry
        for entry in fs.list_entries(directory)
        if not fs.is_dir(entry) and fs.base_name(entry) == base_name
    ]


def delete_files(
    files: list[Path],
    *,
    fs: LocalFilesystem,
    output_dir: Path | None = None,
) -> int:
    """Delete files in order and return how many were removed.

    With output_dir set, directories emptied by the deletion are removed
    as well, up to but excluding output_dir. Filesystem errors propagate.
    """
    removed = 0
    for file_path in files:
        fs.remove(file_path)
        removed += 1
        logger.info("Deleted %s", file_path)
        if output_dir is not None:
            _prune_empty_parents(file_path.parent, output_dir, fs)
    return removed


def _prune_empty_parents(directory: Path, stop_at: Path, fs: LocalFilesystem) -> None:
    stop_at = stop_at.resolve()
    current = directory
    while current.resolve() != stop_at and stop_at in current.resolve().parents:
        if not fs.is_dir(current) or fs.list_entries(current):
            return
        fs.remove(current)
        logger.debug("Removed empty directory %s", current)
        current = current.parent
