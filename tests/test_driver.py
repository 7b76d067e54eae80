import numpy as np
import pytest

from wavspectrum.driver import FRAME_SIZE, OutputGrid, SpectrogramDriver
from wavspectrum.fft_engine import FFTEngine, TwiddleCache
from wavspectrum.palette import build_palette


def test_one_second_at_44k1_stops_before_tail():
    n = 44100
    grid = SpectrogramDriver().render(np.zeros(n, dtype=np.int16), 44100)

    expected = len(range(0, n - FRAME_SIZE - 441, 441))
    assert expected == 95
    assert grid.width == expected
    assert grid.canvas_width == 100
    assert grid.height == 1024
    assert grid.intensities.shape == (1024, 100)
    assert grid.pixels.shape == (1024, 100, 3)
    assert not grid.intensities.any()


def test_tone_lands_on_its_bin_row(tone):
    bin_index = 100
    freq = bin_index * 44100 / FRAME_SIZE
    samples = tone(freq, 44100, seconds=0.1)

    grid = SpectrogramDriver().render(samples, 44100)

    assert grid.width > 0
    for x in range(grid.width):
        column = grid.intensities[:, x]
        assert column.argmax() == 1024 - bin_index
        assert column[0] == 0
    # columns past the analysed frames stay black
    assert not grid.pixels[:, grid.width:].any()


def test_pixels_resolved_through_palette(tone):
    samples = tone(3000, 8000, seconds=0.5)
    grid = SpectrogramDriver().render(samples, 8000)
    palette = build_palette()

    np.testing.assert_array_equal(grid.pixels, palette[grid.intensities])


def test_fractional_hop_offsets():
    driver = SpectrogramDriver()

    assert driver.hop_size(22050) == 220.5
    assert driver.frame_offsets(3000, 22050) == [0, 220, 441, 661]
    assert driver.frame_offsets(FRAME_SIZE, 44100) == []


def test_short_buffer_renders_empty_canvas():
    grid = SpectrogramDriver().render(np.zeros(1000), 44100)

    assert grid.width == 0
    assert grid.canvas_width == 3


def test_rejects_low_sample_rate():
    with pytest.raises(ValueError, match="at least 100 Hz"):
        SpectrogramDriver().render(np.zeros(4096), 99)


def test_non_numeric_samples_count_as_zero():
    rng = np.random.default_rng(5)
    clean = rng.integers(-2000, 2000, size=FRAME_SIZE + 4).astype(float)
    dirty = list(clean)
    for i, junk in zip((3, 500, 1200, 2049), (None, "abc", float("nan"), float("inf"))):
        dirty[i] = junk
        clean[i] = 0.0

    driver = SpectrogramDriver()
    from_dirty = driver.render(dirty, 100)
    from_clean = driver.render(clean, 100)

    assert from_dirty.width == 3
    np.testing.assert_array_equal(from_dirty.intensities, from_clean.intensities)


def test_analyse_frame_rejects_wrong_length():
    with pytest.raises(ValueError, match="expected 2048"):
        SpectrogramDriver().analyse_frame(np.zeros(1024))


def test_threaded_render_matches_serial():
    rng = np.random.default_rng(9)
    samples = rng.integers(-30000, 30000, size=FRAME_SIZE + 80 * 10, dtype=np.int16)

    serial = SpectrogramDriver().render(samples, 8000)
    threaded = SpectrogramDriver(workers=4).render(samples, 8000)

    assert serial.width == threaded.width == 9
    np.testing.assert_array_equal(serial.pixels, threaded.pixels)


def test_driver_builds_twiddles_once():
    cache = TwiddleCache()
    driver = SpectrogramDriver(engine=FFTEngine(cache), workers=2)
    driver.render(np.zeros(FRAME_SIZE + 80 * 5), 8000)

    assert cache.length == FRAME_SIZE
    assert cache.builds == 1


def test_rejects_zero_workers():
    with pytest.raises(ValueError):
        SpectrogramDriver(workers=0)


def test_grid_column_contract():
    grid = OutputGrid(canvas_width=2, height=4)
    palette = build_palette()

    grid.write_column(1, [0, 101, 255, 7], palette)
    assert grid.width == 2
    assert grid.pixels[1, 1].tolist() == [101, 1, 1]

    with pytest.raises(ValueError, match="outside grid"):
        grid.write_column(2, [0, 0, 0, 0], palette)
    with pytest.raises(ValueError, match="grid height"):
        grid.write_column(0, [0, 0, 0], palette)
