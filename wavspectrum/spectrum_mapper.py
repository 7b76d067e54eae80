"""Magnitude spectrum -> one column of 0-255 pixel intensities.

Per bin j (DC bin skipped):
    dBfs = 10 * log10(magnitude[j] * BLOCK_NORM)
    intensity = clamp(int(dBfs * DB_GAIN + DB_OFFSET), 0, 255)

The constants below are a fixed visual calibration, not derived from
any signal-processing reference.  Bin 1 lands on the bottom row and
higher bins move upward; row 0 is never written and stays 0.
"""

import numpy as np

PIXEL_HEIGHT = 1024

BLOCK_NORM = 0.5
DB_GAIN = 4.0
DB_OFFSET = -43.0

INTENSITY_MIN = 0
INTENSITY_MAX = 255


def scale(magnitudes, pixel_height: int = PIXEL_HEIGHT) -> np.ndarray:
    """Map a magnitude spectrum onto ``pixel_height`` intensities.

    Args:
        magnitudes: N non-negative bin magnitudes.
        pixel_height: rows in the output column, 1 <= pixel_height <= N.

    Returns:
        np.ndarray of int, shape (pixel_height,), values 0-255.
        Index 0 is the top of the image.
    """
    magnitudes = np.asarray(magnitudes, dtype=np.float64)
    if pixel_height < 1 or pixel_height > len(magnitudes):
        raise ValueError(
            f"Pixel height must be in 1..{len(magnitudes)}, got {pixel_height}"
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        dbfs = 10.0 * np.log10(magnitudes[1:pixel_height] * BLOCK_NORM)
    dbfs = dbfs * DB_GAIN + DB_OFFSET

    # log10(0) = -inf and log10(<0) = nan both saturate to the floor
    dbfs = np.nan_to_num(dbfs, nan=INTENSITY_MIN, neginf=INTENSITY_MIN,
                         posinf=INTENSITY_MAX)
    levels = np.clip(np.trunc(dbfs), INTENSITY_MIN, INTENSITY_MAX).astype(int)

    column = np.zeros(pixel_height, dtype=int)
    column[1:] = levels[::-1]
    return column
