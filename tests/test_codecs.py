"""Tests for the codec registry."""

from __future__ import annotations

import dataclasses

import pytest

from lossy_mirror.codecs import (
    ALAC,
    CODECS,
    DEFAULT_CODEC,
    FLAC,
    LOSSLESS_CODECS,
    LOSSY_CODECS,
    MP3,
    OPUS,
    VORBIS,
    EncoderMode,
    codec_from_probe_name,
    lossy_codec_names,
    resolve_codec,
)


def test_catalog_has_one_entry_per_format() -> None:
    names = [c.name for c in CODECS]
    assert len(names) == len(set(names)) == 9
    assert len(LOSSLESS_CODECS) == 6
    assert len(LOSSY_CODECS) == 3


@pytest.mark.parametrize("codec", LOSSY_CODECS, ids=lambda c: c.name)
def test_lossy_quality_range_contains_default(codec) -> None:
    assert codec.min_quality <= codec.default_quality <= codec.max_quality
    assert codec.encoder is not None
    assert not codec.is_lossless


@pytest.mark.parametrize("codec", LOSSLESS_CODECS, ids=lambda c: c.name)
def test_lossless_codecs_have_no_quality_range(codec) -> None:
    assert codec.is_lossless
    assert codec.encoder is None
    assert codec.min_quality is None
    assert codec.max_quality is None
    assert codec.default_quality is None


def test_lossless_extensions_and_probe_names() -> None:
    table = {c.name: (c.extension, c.probe_name) for c in LOSSLESS_CODECS}
    assert table == {
        "flac": ("flac", "flac"),
        "ape": ("ape", "ape"),
        "alac": ("m4a", "alac"),
        "wmalossless": ("wma", "wmalossless"),
        "wavpack": ("wv", "wavpack"),
        "tta": ("tta", "tta"),
    }


def test_lossy_codec_parameters() -> None:
    assert (VORBIS.extension, VORBIS.encoder, VORBIS.min_quality, VORBIS.max_quality, VORBIS.default_quality) == (
        "ogg", "libvorbis", 0, 10, 3,
    )
    assert (MP3.extension, MP3.encoder, MP3.min_quality, MP3.max_quality, MP3.default_quality) == (
        "mp3", "libmp3lame", 0, 9, 4,
    )
    assert (OPUS.extension, OPUS.encoder, OPUS.min_quality, OPUS.max_quality, OPUS.default_quality) == (
        "opus", "libopus", 500, 256000, 64000,
    )


def test_lossy_containers() -> None:
    assert (VORBIS.container, MP3.container, OPUS.container) == ("ogg", "mp3", "opus")


def test_encoder_modes() -> None:
    assert VORBIS.encoder_mode is EncoderMode.QUALITY
    assert MP3.encoder_mode is EncoderMode.QUALITY
    assert OPUS.encoder_mode is EncoderMode.BITRATE


def test_codec_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        VORBIS.default_quality = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("vorbis", VORBIS), ("mp3", MP3), ("opus", OPUS), ("MP3", MP3), (" opus ", OPUS)],
)
def test_resolve_codec_known_names(name: str, expected) -> None:
    assert resolve_codec(name) is expected


@pytest.mark.parametrize("name", [None, "", "aac", "flac"])
def test_resolve_codec_falls_back_to_vorbis(name) -> None:
    assert resolve_codec(name) is DEFAULT_CODEC is VORBIS


def test_codec_from_probe_name() -> None:
    assert codec_from_probe_name("flac") is FLAC
    assert codec_from_probe_name("alac") is ALAC
    assert codec_from_probe_name("opus") is OPUS


@pytest.mark.parametrize("probe_name", [None, "", "pcm_s16le", "aac", "mjpeg"])
def test_codec_from_probe_name_unknown(probe_name) -> None:
    assert codec_from_probe_name(probe_name) is None


def test_lossy_codec_names() -> None:
    assert lossy_codec_names() == ["vorbis", "mp3", "opus"]
