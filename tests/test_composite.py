"""Tests for mask-weighted blending."""

from __future__ import annotations

import numpy as np
import pytest

from pixelguard.engine.composite import Compositor
from pixelguard.engine.errors import DimensionMismatch, FilterConstructionFailure
from pixelguard.engine.raster import Image, Mask


def _solid(value, width=4, height=3, dtype=np.uint8) -> Image:
    return Image.from_array(np.full((height, width, 3), value, dtype=dtype))


def test_mask_selects_foreground_and_background() -> None:
    bg = _solid(10)
    fg = _solid(200)
    coverage = np.zeros((3, 4), dtype=np.float32)
    coverage[:, 2:] = 1.0

    out = Compositor().blend(bg, fg, Mask(coverage))

    assert (out.rgb[:, :2] == 10).all()
    assert (out.rgb[:, 2:] == 200).all()
    assert (out.pixels[:, :, 3] == 255).all()


def test_partial_coverage_interpolates() -> None:
    out = Compositor().blend(_solid(0), _solid(100), Mask(np.full((3, 4), 0.25)))

    assert (out.rgb == 25).all()


def test_float_images_blend_exactly_at_extremes() -> None:
    bg = _solid(0.1, dtype=np.float32)
    fg = _solid(0.9, dtype=np.float32)
    coverage = np.array([[0.0, 0.5, 1.0, 0.0]] * 3, dtype=np.float32)

    out = Compositor().blend(bg, fg, Mask(coverage))

    assert out.dtype == np.float32
    assert out.rgb[0, 0, 0] == np.float32(0.1)
    assert out.rgb[0, 2, 0] == np.float32(0.9)
    assert out.rgb[0, 1, 0] == pytest.approx(0.5)


def test_alpha_channel_is_blended() -> None:
    bg = Image(np.zeros((1, 1, 4), dtype=np.uint8))
    fg = Image(np.full((1, 1, 4), 200, dtype=np.uint8))

    out = Compositor().blend(bg, fg, Mask(np.full((1, 1), 0.5)))

    assert out.pixels[0, 0, 3] == 100


@pytest.mark.parametrize(
    "bg_size, fg_size, mask_size",
    [
        ((4, 3), (4, 3), (3, 3)),
        ((4, 3), (5, 3), (4, 3)),
        ((4, 2), (4, 3), (4, 3)),
    ],
)
def test_dimension_mismatch(bg_size, fg_size, mask_size) -> None:
    bg = _solid(0, *bg_size)
    fg = _solid(0, *fg_size)
    mask = Mask.blank(*mask_size)

    with pytest.raises(DimensionMismatch):
        Compositor().blend(bg, fg, mask)


def test_dtype_mismatch() -> None:
    with pytest.raises(FilterConstructionFailure):
        Compositor().blend(_solid(0), _solid(0.0, dtype=np.float32), Mask.blank(4, 3))
