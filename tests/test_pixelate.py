"""Tests for block pixelation."""

from __future__ import annotations

import numpy as np
import pytest

from pixelguard.engine.errors import FilterConstructionFailure, InvalidImage
from pixelguard.engine.pixelate import Pixelator
from pixelguard.engine.raster import Image

from conftest import make_noise_image


def _blocks(length: int, scale: float) -> np.ndarray:
    return np.floor(np.arange(length) / scale).astype(int)


@pytest.mark.parametrize("sampling", ["center", "mean"])
def test_blocks_are_uniform(noise_image, sampling) -> None:
    out = Pixelator(sampling=sampling).pixelate(noise_image)
    scale = 10.0  # max(100, 100) / 10

    blocks = _blocks(100, scale)
    for by in np.unique(blocks):
        for bx in np.unique(blocks):
            tile = out.pixels[blocks == by][:, blocks == bx]
            assert (tile == tile[0, 0]).all()


def test_center_sampling_copies_a_pixel_of_the_block(noise_image) -> None:
    out = Pixelator().pixelate(noise_image)

    # Block 0 covers 0..9; its middle pixel is index 4.
    assert tuple(out.pixels[0, 0]) == tuple(noise_image.pixels[4, 4])
    assert tuple(out.pixels[55, 55]) == tuple(noise_image.pixels[54, 54])


def test_mean_sampling_averages_block() -> None:
    arr = np.zeros((10, 10, 3), dtype=np.uint8)
    arr[0, 0] = 100
    arr[:, 5:] = 50
    image = Image.from_array(arr)

    out = Pixelator(divisor=2, sampling="mean").pixelate(image)

    assert tuple(out.pixels[0, 0, :3]) == (4, 4, 4)  # 100 / 25 pixels
    assert tuple(out.pixels[9, 9, :3]) == (50, 50, 50)


@pytest.mark.parametrize("sampling", ["center", "mean"])
def test_pixelation_is_idempotent(sampling) -> None:
    pixelator = Pixelator(sampling=sampling)
    image = make_noise_image(73, 41, seed=3)  # fractional block size 7.3

    once = pixelator.pixelate(image)
    twice = pixelator.pixelate(once)

    assert np.array_equal(once.pixels, twice.pixels)


def test_fractional_block_size_partial_last_block() -> None:
    image = make_noise_image(23, 6, seed=1)
    out = Pixelator().pixelate(image)  # scale 2.3

    rows = _blocks(6, 2.3)
    assert rows.tolist() == [0, 0, 0, 1, 1, 2]
    assert tuple(out.pixels[5, 0]) == tuple(image.pixels[5, 1])
    assert out.size == image.size


def test_block_size_uses_longer_side() -> None:
    assert Pixelator().block_size(200, 50) == 20.0
    assert Pixelator().block_size(37, 81) == pytest.approx(8.1)


def test_tiny_image_smaller_than_block_count() -> None:
    image = make_noise_image(4, 3)

    out = Pixelator().pixelate(image)  # scale 0.4, every pixel its own block

    assert np.array_equal(out.pixels, image.pixels)


def test_float_image_keeps_dtype(gradient_image) -> None:
    out = Pixelator(sampling="mean").pixelate(gradient_image)

    assert out.dtype == np.float32
    assert out.size == gradient_image.size


def test_input_not_mutated(noise_image) -> None:
    before = noise_image.pixels.copy()

    Pixelator().pixelate(noise_image)

    assert np.array_equal(noise_image.pixels, before)


def test_empty_image_rejected() -> None:
    with pytest.raises(InvalidImage):
        Pixelator().pixelate(Image(np.zeros((0, 5, 4), dtype=np.uint8)))


@pytest.mark.parametrize("kwargs", [{"divisor": 0}, {"divisor": -3}, {"divisor": "ten"}, {"sampling": "median"}])
def test_bad_parameters_rejected(kwargs) -> None:
    with pytest.raises(FilterConstructionFailure):
        Pixelator(**kwargs)
