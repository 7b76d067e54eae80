"""Render PCM audio as a time/frequency spectrogram image."""

from wavspectrum.driver import FRAME_SIZE, OutputGrid, SpectrogramDriver
from wavspectrum.fft_engine import FFTEngine, TwiddleCache
from wavspectrum.palette import Palette, build_palette
from wavspectrum.spectrum_mapper import PIXEL_HEIGHT, scale
from wavspectrum.wav_reader import WavAudio, WavFormatError, parse_wav, read_wav
from wavspectrum.window import build_window

__version__ = "0.1.0"
