"""Shared fixtures for the obscuration tests."""

from __future__ import annotations

import numpy as np
import pytest

from pixelguard.engine.locator import FaceLocator, StaticDetector
from pixelguard.engine.pipeline import ObscurationPipeline
from pixelguard.engine.raster import Image


def make_noise_image(width: int, height: int, seed: int = 0) -> Image:
    rng = np.random.default_rng(seed)
    rgb = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return Image.from_array(rgb)


@pytest.fixture
def noise_image() -> Image:
    """100x100 random RGB image; neighbouring pixels almost never match."""
    return make_noise_image(100, 100)


@pytest.fixture
def gradient_image() -> Image:
    xs = np.linspace(0.0, 1.0, 64, dtype=np.float32)
    ys = np.linspace(0.0, 1.0, 48, dtype=np.float32)
    r = np.tile(xs, (48, 1))
    g = np.tile(ys[:, None], (1, 64))
    b = (r + g) / 2.0
    return Image.from_array(np.stack([r, g, b], axis=2))


def static_pipeline(*boxes, **kwargs) -> ObscurationPipeline:
    return ObscurationPipeline(FaceLocator(StaticDetector(boxes)), **kwargs)
