"""RIFF/WAVE reader: extracts the sample rate and 16-bit PCM samples.

File layout:
  Byte 0-3:   "RIFF"
  Byte 4-7:   RIFF size        uint32 LE
  Byte 8-11:  "WAVE"
  Byte 12-:   Chunks           id (4 bytes) + size (uint32 LE) + payload,
                               padded to an even length

Only the "fmt " and "data" chunks are read; all others are skipped.
"""

import struct
from dataclasses import dataclass

import numpy as np

RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
FMT_MIN_SIZE = 16

FORMAT_PCM = 1
SUPPORTED_BITS = 16

_AUDIO_FORMATS = {
    1: "PCM",
    2: "Microsoft ADPCM",
    6: "ITU G.711 a-law",
    7: "ITU G.711 mu-law",
    17: "IMA ADPCM",
    20: "ITU G.723 ADPCM (Yamaha)",
    49: "GSM 6.10",
    64: "ITU G.721 ADPCM",
    80: "MPEG",
    65536: "Experimental",
}


class WavFormatError(ValueError):
    """Raised when a file is not a readable 16-bit PCM WAVE file."""


@dataclass
class WavAudio:
    sample_rate: int
    channels: int
    bits_per_sample: int
    samples: np.ndarray  # int16, interleaved if channels > 1


def audio_format_name(code: int) -> str | None:
    """Return the codec name for a WAVE format code, or None if unknown."""
    return _AUDIO_FORMATS.get(code)


def read_wav(path) -> WavAudio:
    with open(path, "rb") as f:
        return parse_wav(f.read())


def parse_wav(data: bytes) -> WavAudio:
    """Parse a complete WAVE file held in memory."""
    if len(data) < RIFF_HEADER_SIZE:
        raise WavFormatError(f"File too short for a RIFF header ({len(data)} bytes)")
    if data[0:4] != RIFF_ID:
        raise WavFormatError("RIFF chunk ID invalid")
    if data[8:12] != WAVE_ID:
        raise WavFormatError("WAVE format ID invalid")

    fmt = None
    payload = None
    for chunk_id, body in _iter_chunks(data):
        if chunk_id == FMT_ID and fmt is None:
            fmt = _parse_fmt(body)
        elif chunk_id == DATA_ID and payload is None:
            payload = body

    if fmt is None:
        raise WavFormatError("fmt chunk missing")
    if payload is None:
        raise WavFormatError("data chunk missing")

    audio_format, channels, sample_rate, byte_rate, block_align, bits = fmt
    bytes_per_sample = bits // 8
    if channels * sample_rate * bytes_per_sample != byte_rate:
        raise WavFormatError("Byterate field mismatch")
    if channels * bytes_per_sample != block_align:
        raise WavFormatError("Blockalign field mismatch")
    if audio_format != FORMAT_PCM:
        name = audio_format_name(audio_format) or "unknown"
        raise WavFormatError(
            f"Unsupported audio format {audio_format} ({name}), only PCM is read"
        )
    if bits != SUPPORTED_BITS:
        raise WavFormatError(
            f"Unsupported sample width {bits} bits, only {SUPPORTED_BITS} is read"
        )
    if channels > 1:
        print(f"[wav] {channels} channels found, samples are used interleaved")

    usable = len(payload) - len(payload) % bytes_per_sample
    samples = np.frombuffer(payload[:usable], dtype="<i2").astype(np.int16)
    return WavAudio(sample_rate, channels, bits, samples)


def _iter_chunks(data: bytes):
    """Yield (id, payload) for each chunk after the RIFF header."""
    pos = RIFF_HEADER_SIZE
    while pos + CHUNK_HEADER_SIZE <= len(data):
        chunk_id = data[pos:pos + 4]
        (size,) = struct.unpack_from("<I", data, pos + 4)
        start = pos + CHUNK_HEADER_SIZE
        end = start + size
        if end > len(data):
            raise WavFormatError(
                f"Chunk {chunk_id!r} claims {size} bytes, "
                f"only {len(data) - start} remain"
            )
        yield chunk_id, data[start:end]
        pos = end + (size & 1)


def _parse_fmt(body: bytes):
    if len(body) < FMT_MIN_SIZE:
        raise WavFormatError(f"fmt chunk too short ({len(body)} bytes)")
    return struct.unpack_from("<HHIIHH", body, 0)
