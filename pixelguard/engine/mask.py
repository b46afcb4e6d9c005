import logging
import math
from functools import reduce
from typing import Iterable

import numpy as np

from pixelguard.engine.errors import FilterConstructionFailure, InvalidImage
from pixelguard.engine.raster import FaceRegion, Mask

logger = logging.getLogger(__name__)


class MaskBuilder:
    """Turns face boxes into a single coverage mask of soft-edged circles.

    Each face gets a two-stop radial gradient: full coverage out to
    ``min(w, h) / 1.5`` from the box centre, falling linearly to zero over
    ``feather`` pixels. Circles are stacked with source-over alpha, so
    overlapping faces add up instead of replacing each other.
    """

    def __init__(self, feather: float = 1.0):
        if not feather > 0 or not math.isfinite(feather):
            raise FilterConstructionFailure(f"Mask feather must be a positive number, got {feather!r}")
        self.feather = float(feather)

    def build(self, regions: Iterable[FaceRegion], width: int, height: int) -> Mask:
        if width <= 0 or height <= 0:
            raise InvalidImage(f"Mask needs a positive size, got {width}x{height}")

        blank = np.zeros((height, width), dtype=np.float32)
        coverage = reduce(self._composite, regions, blank)
        return Mask(coverage)

    def _composite(self, acc: np.ndarray, region: FaceRegion) -> np.ndarray:
        height, width = acc.shape
        cx, cy = region.center
        radius = region.radius
        outer = radius + self.feather
        logger.debug("Face circle at (%.1f, %.1f) radius %.2f", cx, cy, radius)

        # Only the circle's bounding square can change.
        x0 = max(0, math.floor(cx - outer))
        x1 = min(width, math.ceil(cx + outer) + 1)
        y0 = max(0, math.floor(cy - outer))
        y1 = min(height, math.ceil(cy + outer) + 1)
        if x0 >= x1 or y0 >= y1:
            return acc

        xs = np.arange(x0, x1, dtype=np.float32) - np.float32(cx)
        ys = np.arange(y0, y1, dtype=np.float32) - np.float32(cy)
        dist = np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2)
        circle = radial_coverage(dist, radius, self.feather)

        out = acc.copy()
        patch = out[y0:y1, x0:x1]
        out[y0:y1, x0:x1] = circle + patch * (1.0 - circle)
        return out


def radial_coverage(dist: np.ndarray, radius: float, feather: float = 1.0) -> np.ndarray:
    """Coverage of a gradient circle at the given distances from its centre."""
    return np.clip((radius + feather - dist) / feather, 0.0, 1.0).astype(np.float32)
