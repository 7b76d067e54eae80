"""Cosine-lobe analysis window applied to every frame before the FFT.

Coefficient i of a window of length N is 1 - cos(2*pi*i / N).  This is
an un-normalised Hann curve: values run 0..2 rather than 0..1.  The
extra factor of two is part of the intensity calibration downstream,
so the curve must not be rescaled.
"""

import numpy as np


def build_window(size: int) -> np.ndarray:
    """Return the window coefficients for a frame of ``size`` samples."""
    if size < 1:
        raise ValueError(f"Window size must be positive, got {size}")
    phase = 2.0 * np.pi * np.arange(size) / size
    window = 1.0 - np.cos(phase)
    window.setflags(write=False)
    return window
