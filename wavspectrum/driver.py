"""Spectrogram driver: slices overlapping frames and fills the image grid.

One frame of FRAME_SIZE samples is analysed every sample_rate /
HOP_DIVISOR samples (10 ms).  Each frame is windowed, transformed,
scaled to a PIXEL_HEIGHT column and written at the next x position.

Frames start at 0, hop, 2*hop, ... while
offset < sample_count - FRAME_SIZE - hop, so the last frame-length plus
one hop of the buffer is never analysed.  The image canvas is still
ceil(sample_count / hop) columns wide; columns past the last analysed
frame stay at intensity 0.
"""

import functools
import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from wavspectrum.fft_engine import FFTEngine
from wavspectrum.palette import Palette, build_palette
from wavspectrum.spectrum_mapper import PIXEL_HEIGHT, scale
from wavspectrum.window import build_window

FRAME_SIZE = 2048
HOP_DIVISOR = 100  # columns per second of audio


@functools.lru_cache(maxsize=1)
def _frame_window() -> np.ndarray:
    return build_window(FRAME_SIZE)


class OutputGrid:
    """Pixel grid handed to the image writer.

    ``intensities`` holds palette indices and ``pixels`` the resolved
    RGB colours, both indexed [y, x] with y = 0 at the top.
    """

    def __init__(self, canvas_width: int, height: int = PIXEL_HEIGHT):
        self.height = height
        self.canvas_width = canvas_width
        self.intensities = np.zeros((height, canvas_width), dtype=np.uint8)
        self.pixels = np.zeros((height, canvas_width, 3), dtype=np.uint8)
        self.width = 0  # columns written so far

    def write_column(self, x: int, column, palette: Palette):
        """Store one pixel column at ``x``, resolving colours via ``palette``."""
        if not 0 <= x < self.canvas_width:
            raise ValueError(f"Column {x} outside grid of width {self.canvas_width}")
        column = np.asarray(column)
        if len(column) != self.height:
            raise ValueError(
                f"Column has {len(column)} rows, grid height is {self.height}"
            )
        self.intensities[:, x] = column
        self.pixels[:, x] = palette[column]
        self.width = max(self.width, x + 1)


class SpectrogramDriver:
    """Renders a PCM sample buffer into an OutputGrid."""

    def __init__(self, engine: FFTEngine | None = None, workers: int = 1):
        """
        Args:
            engine:  FFT engine (and its twiddle cache) to use.  A new one
                     is created if None.
            workers: Threads used for frame analysis.  1 = serial.
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._engine = engine if engine is not None else FFTEngine()
        self._workers = workers
        self._window = _frame_window()

    @property
    def engine(self) -> FFTEngine:
        return self._engine

    @staticmethod
    def hop_size(sample_rate: int) -> float:
        if sample_rate < HOP_DIVISOR:
            raise ValueError(
                f"Sample rate must be at least {HOP_DIVISOR} Hz, got {sample_rate}"
            )
        return sample_rate / HOP_DIVISOR

    def frame_offsets(self, sample_count: int, sample_rate: int) -> list[int]:
        """Start index of every analysed frame, in output column order."""
        hop = self.hop_size(sample_rate)
        offsets = []
        # Non-integer hops accumulate as floats and truncate per frame
        offset = 0.0
        while offset < sample_count - FRAME_SIZE - hop:
            offsets.append(int(offset))
            offset += hop
        return offsets

    def analyse_frame(self, frame) -> np.ndarray:
        """Window, transform and scale one frame into a pixel column."""
        frame = _as_float_samples(frame)
        if len(frame) != FRAME_SIZE:
            raise ValueError(
                f"Frame has {len(frame)} samples, expected {FRAME_SIZE}"
            )
        # Non-numeric samples contribute nothing
        frame = np.where(np.isfinite(frame), frame, 0.0)
        magnitudes = self._engine.magnitude(frame * self._window)
        return scale(magnitudes, PIXEL_HEIGHT)

    def render(self, samples, sample_rate: int) -> OutputGrid:
        """Analyse ``samples`` and return the filled grid.

        Args:
            samples:     Signed PCM sample values, single channel.
            sample_rate: Sample rate in Hz, at least HOP_DIVISOR.
        """
        data = _as_float_samples(samples)
        count = len(data)
        hop = self.hop_size(sample_rate)
        grid = OutputGrid(math.ceil(count / hop), PIXEL_HEIGHT)
        palette = build_palette()
        offsets = self.frame_offsets(count, sample_rate)

        if self._workers > 1 and len(offsets) > 1:
            # Build the shared table before any worker can race on it
            self._engine.cache.table(FRAME_SIZE)
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                columns = pool.map(
                    lambda start: self.analyse_frame(data[start:start + FRAME_SIZE]),
                    offsets,
                )
                for x, column in enumerate(columns):
                    grid.write_column(x, column, palette)
        else:
            for x, start in enumerate(offsets):
                column = self.analyse_frame(data[start:start + FRAME_SIZE])
                grid.write_column(x, column, palette)

        return grid


def _as_float_samples(samples) -> np.ndarray:
    """Convert samples to float64; entries that are not numbers become NaN."""
    try:
        return np.asarray(samples, dtype=np.float64)
    except (TypeError, ValueError):
        return np.array([_to_float(v) for v in samples], dtype=np.float64)


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan
