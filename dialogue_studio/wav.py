"""Wrap raw PCM from the TTS model in a WAV container, and decode its transport encoding."""

import base64
import binascii
import struct

from dialogue_studio.constants import (
    SAMPLE_RATE,
    CHANNELS,
    BITS_PER_SAMPLE,
    PCM_FORMAT_TAG,
)
from dialogue_studio.errors import MalformedTransportDataError

# RIFF descriptor, "fmt " sub-chunk and "data" sub-chunk header, little-endian
_HEADER_FORMAT = "<4sI4s4sIHHIIHH4sI"


def wav_header(
    data_size: int,
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    bits_per_sample: int = BITS_PER_SAMPLE,
) -> bytes:
    """Build the 44-byte canonical WAV header for a PCM payload of data_size bytes."""
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align

    return struct.pack(
        _HEADER_FORMAT,
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        data_size,
    )


def encode_wav(
    pcm: bytes,
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    bits_per_sample: int = BITS_PER_SAMPLE,
) -> bytes:
    """Return header + pcm. Any length is accepted, including zero."""
    return wav_header(len(pcm), sample_rate, channels, bits_per_sample) + bytes(pcm)


def decode_transport_encoding(data: str) -> bytes:
    """Decode base64 audio from the service into raw PCM bytes.

    Strict: characters outside the base64 alphabet or bad padding raise
    MalformedTransportDataError.
    """
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedTransportDataError(f"Audio data is not valid base64: {e}") from e


def encode_transport_encoding(data: bytes) -> str:
    """Inverse of decode_transport_encoding()."""
    return base64.b64encode(data).decode("ascii")


def pcm_duration_seconds(
    pcm: bytes,
    sample_rate: int = SAMPLE_RATE,
    channels: int = CHANNELS,
    bits_per_sample: int = BITS_PER_SAMPLE,
) -> float:
    """Playback length of a PCM buffer in seconds."""
    byte_rate = sample_rate * channels * bits_per_sample // 8
    return len(pcm) / byte_rate
