import struct

import numpy as np
import pytest


def _chunk(chunk_id: bytes, body: bytes) -> bytes:
    pad = b"\x00" if len(body) % 2 else b""
    return chunk_id + struct.pack("<I", len(body)) + body + pad


def build_wav(samples, sample_rate=44100, channels=1, bits=16, audio_format=1,
              byte_rate=None, block_align=None, extra_chunks=(), data=None):
    bytes_per_sample = bits // 8
    if byte_rate is None:
        byte_rate = channels * sample_rate * bytes_per_sample
    if block_align is None:
        block_align = channels * bytes_per_sample
    fmt = struct.pack("<HHIIHH", audio_format, channels, sample_rate,
                      byte_rate, block_align, bits)
    if data is None:
        data = np.asarray(samples, dtype="<i2").tobytes()
    body = b"WAVE" + _chunk(b"fmt ", fmt)
    for chunk_id, payload in extra_chunks:
        body += _chunk(chunk_id, payload)
    body += _chunk(b"data", data)
    return b"RIFF" + struct.pack("<I", len(body)) + body


@pytest.fixture
def make_wav():
    return build_wav


@pytest.fixture
def tone():
    """Return ``seconds`` of a sine at ``freq`` Hz as int16 samples."""
    def _tone(freq, sample_rate, seconds=1.0, amplitude=10000):
        t = np.arange(int(sample_rate * seconds)) / sample_rate
        return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.int16)
    return _tone
