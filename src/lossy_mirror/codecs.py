"""Static catalog of supported audio codecs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EncoderMode(str, Enum):
    """How the numeric encoder parameter is interpreted."""

    QUALITY = "quality"
    BITRATE = "bitrate"


@dataclass(frozen=True)
class Codec:
    """An audio encoding format.

    Lossless codecs leave the encoder fields unset; lossy codecs always
    satisfy min_quality <= default_quality <= max_quality.
    """

    name: str
    is_lossless: bool
    extension: str
    probe_name: str
    encoder: str | None = None
    container: str | None = None
    encoder_mode: EncoderMode | None = None
    min_quality: int | None = None
    max_quality: int | None = None
    default_quality: int | None = None


FLAC = Codec(name="flac", is_lossless=True, extension="flac", probe_name="flac")
APE = Codec(name="ape", is_lossless=True, extension="ape", probe_name="ape")
ALAC = Codec(name="alac", is_lossless=True, extension="m4a", probe_name="alac")
WMA_LOSSLESS = Codec(
    name="wmalossless", is_lossless=True, extension="wma", probe_name="wmalossless"
)
WAVPACK = Codec(name="wavpack", is_lossless=True, extension="wv", probe_name="wavpack")
TTA = Codec(name="tta", is_lossless=True, extension="tta", probe_name="tta")

VORBIS = Codec(
    name="vorbis",
    is_lossless=False,
    extension="ogg",
    probe_name="vorbis",
    encoder="libvorbis",
    container="ogg",
    encoder_mode=EncoderMode.QUALITY,
    min_quality=0,
    max_quality=10,
    default_quality=3,
)
# LAME VBR scale: lower is better.
MP3 = Codec(
    name="mp3",
    is_lossless=False,
    extension="mp3",
    probe_name="mp3",
    encoder="libmp3lame",
    container="mp3",
    encoder_mode=EncoderMode.QUALITY,
    min_quality=0,
    max_quality=9,
    default_quality=4,
)
OPUS = Codec(
    name="opus",
    is_lossless=False,
    extension="opus",
    probe_name="opus",
    encoder="libopus",
    container="opus",
    encoder_mode=EncoderMode.BITRATE,
    min_quality=500,
    max_quality=256000,
    default_quality=64000,
)

LOSSLESS_CODECS: tuple[Codec, ...] = (FLAC, APE, ALAC, WMA_LOSSLESS, WAVPACK, TTA)
LOSSY_CODECS: tuple[Codec, ...] = (VORBIS, MP3, OPUS)
CODECS: tuple[Codec, ...] = LOSSLESS_CODECS + LOSSY_CODECS

DEFAULT_CODEC = VORBIS

_BY_NAME: dict[str, Codec] = {c.name: c for c in LOSSY_CODECS}
_BY_PROBE_NAME: dict[str, Codec] = {c.probe_name: c for c in CODECS}


def resolve_codec(name: str | None) -> Codec:
    """Map a user-facing codec name to a lossy codec, defaulting to Vorbis."""
    if not name:
        return DEFAULT_CODEC
    return _BY_NAME.get(name.strip().lower(), DEFAULT_CODEC)


def codec_from_probe_name(probe_name: str | None) -> Codec | None:
    """Return the codec ffprobe reported, or None if it is not registered."""
    if not probe_name:
        return None
    return _BY_PROBE_NAME.get(probe_name.strip().lower())


def lossy_codec_names() -> list[str]:
    """Names accepted by resolve_codec, in catalog order."""
    return [c.name for c in LOSSY_CODECS]
