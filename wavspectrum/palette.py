"""Intensity -> RGB lookup for the spectrogram image.

Red ramps linearly with intensity.  Green and blue stay at zero up to
PALETTE_KNEE, then ramp together to 255, giving a black -> red ->
cyan-white gradient.  Channel values are truncated toward zero.
"""

from dataclasses import dataclass

import numpy as np

PALETTE_SIZE = 256
PALETTE_KNEE = 100


@dataclass(frozen=True, eq=False)
class Palette:
    """256 pre-resolved colours, indexed by intensity."""

    colours: np.ndarray  # uint8, shape (256, 3)

    def __len__(self) -> int:
        return len(self.colours)

    def __getitem__(self, intensity) -> np.ndarray:
        return self.colours[intensity]

    def rgb(self, intensity: int) -> tuple[int, int, int]:
        r, g, b = self.colours[intensity]
        return int(r), int(g), int(b)


def build_palette() -> Palette:
    levels = np.arange(PALETTE_SIZE)
    ramp = np.where(
        levels > PALETTE_KNEE,
        (levels - PALETTE_KNEE) / (PALETTE_SIZE - PALETTE_KNEE) * 255,
        0.0,
    )
    colours = np.empty((PALETTE_SIZE, 3), dtype=np.uint8)
    colours[:, 0] = levels
    colours[:, 1] = np.trunc(ramp)
    colours[:, 2] = colours[:, 1]
    colours.setflags(write=False)
    return Palette(colours)
