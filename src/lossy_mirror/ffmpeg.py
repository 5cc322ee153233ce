"""Codec probing with ffprobe and transcoding with ffmpeg."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from lossy_mirror.codecs import Codec, EncoderMode

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECS = 30
PARTIAL_SUFFIX = ".part"


class EncodeError(RuntimeError):
    """Raised when ffmpeg fails to produce an output file."""

    def __init__(self, source: Path, returncode: int | None, stderr: str = "") -> None:
        self.source = source
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"ffmpeg failed on {source} (exit {returncode}): {detail}")


def check_ffmpeg_available() -> None:
    """Verify that ffmpeg and ffprobe are on PATH. Raises RuntimeError if not."""
    missing = [tool for tool in ("ffmpeg", "ffprobe") if shutil.which(tool) is None]
    if missing:
        raise RuntimeError(
            f"{' and '.join(missing)} not found on PATH. Install ffmpeg to continue."
        )


def probe_codec(file_path: Path) -> str | None:
    """Return the codec name of the first audio stream, or None.

    Anything ffprobe cannot read (non-audio files, corrupt files, timeouts)
    yields None rather than an error.
    """
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v", "error",
                "-select_streams", "a:0",
                "-show_entries", "stream=codec_name",
                "-of", "default=noprint_wrappers=1:nokey=1",
                str(file_path),
            ],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=PROBE_TIMEOUT_SECS,
        )
    except subprocess.TimeoutExpired:
        logger.debug("ffprobe timed out on %s", file_path)
        return None
    except OSError as e:
        logger.debug("ffprobe error on %s: %s", file_path, e)
        return None

    if result.returncode != 0:
        logger.debug("ffprobe exited %d on %s", result.returncode, file_path)
        return None

    lines = result.stdout.strip().splitlines()
    if not lines:
        return None
    return lines[0].strip() or None


def build_encode_args(
    source: Path, destination: Path, codec: Codec, quality: int
) -> list[str]:
    """Build the ffmpeg argument list for one transcode.

    The muxer is named explicitly so destination may carry any suffix.
    """
    if codec.encoder is None or codec.container is None:
        raise ValueError(f"{codec.name} is not a lossy codec")
    quality_flag = "-b:a" if codec.encoder_mode is EncoderMode.BITRATE else "-q:a"
    return [
        "ffmpeg",
        "-nostdin",
        "-hide_banner",
        "-loglevel", "error",
        "-y",
        "-i", str(source),
        "-c:a", codec.encoder,
        quality_flag, str(quality),
        "-vn",
        "-f", codec.container,
        str(destination),
    ]


def partial_path(destination: Path) -> Path:
    """Where encode writes before the output is complete."""
    return destination.with_name(destination.name + PARTIAL_SUFFIX)


def encode(source: Path, destination: Path, codec: Codec, quality: int) -> None:
    """Transcode source into destination. Blocks until ffmpeg exits.

    ffmpeg writes to a partial file that is renamed onto destination only
    once it exits cleanly, so an interrupted run never leaves a file under
    the final name. Raises EncodeError on a non-zero exit or if ffmpeg
    cannot be started.
    """
    tmp_path = partial_path(destination)
    args = build_encode_args(source, tmp_path, codec, quality)
    logger.debug("Running %s", " ".join(args))
    try:
        try:
            result = subprocess.run(
                args, stdin=subprocess.DEVNULL, capture_output=True, text=True
            )
        except OSError as e:
            raise EncodeError(source, None, str(e)) from e

        if result.returncode != 0:
            raise EncodeError(source, result.returncode, result.stderr)
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
