"""Recursive radix-2 FFT with a cached twiddle table.

The transform is decimation-in-time Cooley-Tukey: split into even and
odd samples, transform each half, then combine with one butterfly pass.
The butterflies at every recursion depth share a single table of N/2
rotation factors computed for the top-level length N; a sub-transform
of length L reads every (N / L)-th entry.  The table is rebuilt only
when a call arrives with a different top-level length.
"""

import threading

import numpy as np


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class TwiddleCache:
    """Holds the cos/sin rotation table for exactly one transform length."""

    def __init__(self):
        self._lock = threading.Lock()
        self._length = 0
        self._cos = np.empty(0)
        self._sin = np.empty(0)
        self.builds = 0

    @property
    def length(self) -> int:
        return self._length

    def table(self, length: int) -> tuple[np.ndarray, np.ndarray]:
        """Return (cos, sin) for ``length``, rebuilding if the key changed."""
        with self._lock:
            if length != self._length:
                half = length // 2
                theta = -2.0 * np.pi * np.arange(half) / length
                cos = np.cos(theta)
                sin = np.sin(theta)
                cos.setflags(write=False)
                sin.setflags(write=False)
                self._cos, self._sin = cos, sin
                self._length = length
                self.builds += 1
            return self._cos, self._sin


class FFTEngine:
    """Computes complex spectra and magnitude spectra of real frames."""

    def __init__(self, cache: TwiddleCache | None = None):
        self._cache = cache if cache is not None else TwiddleCache()

    @property
    def cache(self) -> TwiddleCache:
        return self._cache

    def transform(self, real, imag=None) -> tuple[np.ndarray, np.ndarray]:
        """Forward DFT of ``real`` + j*``imag``.

        Args:
            real: N real values, N a power of two.
            imag: N imaginary values, or None for a real-valued input.

        Returns:
            (real, imag) arrays of length N.
        """
        real = np.asarray(real, dtype=np.float64)
        n = len(real)
        if not is_power_of_two(n):
            raise ValueError(f"FFT length must be a power of two, got {n}")
        if imag is None:
            imag = np.zeros(n)
        else:
            imag = np.asarray(imag, dtype=np.float64)
            if len(imag) != n:
                raise ValueError(
                    f"Real and imaginary parts differ in length: {n} != {len(imag)}"
                )

        cos, sin = self._cache.table(n)
        return _fft(real, imag, cos, sin, n)

    def magnitude(self, real) -> np.ndarray:
        """Return sqrt(re^2 + im^2) per bin of the transform of ``real``."""
        re, im = self.transform(real)
        return np.sqrt(re * re + im * im)


def _fft(real, imag, cos, sin, top_length):
    length = len(real)
    if length < 2:
        return real, imag
    half = length // 2

    even_re, even_im = _fft(real[0::2], imag[0::2], cos, sin, top_length)
    odd_re, odd_im = _fft(real[1::2], imag[1::2], cos, sin, top_length)

    # Entry i of this level is entry i * stride of the top-level table
    stride = top_length // length
    t_re = cos[0:half * stride:stride]
    t_im = sin[0:half * stride:stride]

    prod_re = t_re * odd_re - t_im * odd_im
    prod_im = t_re * odd_im + t_im * odd_re

    out_re = np.empty(length)
    out_im = np.empty(length)
    out_re[:half] = even_re + prod_re
    out_im[:half] = even_im + prod_im
    out_re[half:] = even_re - prod_re
    out_im[half:] = even_im - prod_im
    return out_re, out_im
