"""WAV spectrogram renderer -- command-line entry point.

Reads a 16-bit PCM WAVE file, renders one 1024-row spectrogram column
per 10 ms of audio, and writes the result as a PNG.

Usage:
    wavspectrum INPUT.wav [-o OUTPUT.png] [--workers N]
    python -m wavspectrum INPUT.wav
"""

import argparse
import sys
import time
from pathlib import Path

from wavspectrum.driver import SpectrogramDriver
from wavspectrum.image_writer import write_png
from wavspectrum.wav_reader import read_wav

DEFAULT_OUTPUT_NAME = "spectrum.png"


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a WAV file as a spectrogram PNG")
    parser.add_argument("input", type=Path, help="16-bit PCM .wav file")
    parser.add_argument("-o", "--output", type=Path,
                        help=f"PNG to write (default: {DEFAULT_OUTPUT_NAME} "
                             "next to the input)")
    parser.add_argument("--workers", type=_positive_int, default=1,
                        help="Threads used for frame analysis (default: 1)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    input_path = args.input.expanduser()
    output_path = args.output or input_path.parent / DEFAULT_OUTPUT_NAME

    try:
        audio = read_wav(input_path)
        print(f"[spectrum] Loaded {input_path}: {len(audio.samples)} samples "
              f"at {audio.sample_rate} Hz")

        t0 = time.monotonic()
        driver = SpectrogramDriver(workers=args.workers)
        grid = driver.render(audio.samples, audio.sample_rate)
        elapsed = time.monotonic() - t0
        print(f"[spectrum] Rendered {grid.width} columns "
              f"({grid.canvas_width}x{grid.height} canvas) in {elapsed:.2f} s")

        written = write_png(grid, output_path)
    except (ValueError, OSError) as e:
        print(f"[spectrum] error: {e}", file=sys.stderr)
        return 1

    print(f"[spectrum] Wrote {written}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
