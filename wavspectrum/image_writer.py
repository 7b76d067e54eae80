"""PNG output for a rendered spectrogram grid, via Pillow."""

from pathlib import Path

from PIL import Image


def to_image(grid) -> Image.Image:
    """Return the grid's RGB pixels as a Pillow image (width x height)."""
    if grid.canvas_width == 0 or grid.height == 0:
        raise ValueError("Grid is empty, nothing to encode")
    return Image.fromarray(grid.pixels)


def write_png(grid, path) -> Path:
    """Encode ``grid`` as PNG at ``path``; returns the resolved path."""
    out_path = Path(path).expanduser().resolve()
    image = to_image(grid)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(out_path, format="PNG")
    return out_path
