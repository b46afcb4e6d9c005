import logging

import numpy as np

from pixelguard.engine.errors import FilterConstructionFailure, InvalidImage
from pixelguard.engine.raster import Image

logger = logging.getLogger(__name__)

SAMPLING_MODES = ("center", "mean")


def _block_index(length: int, scale: float) -> np.ndarray:
    """Block number of every pixel along one axis (blocks of `scale` pixels)."""
    return np.floor(np.arange(length) / scale).astype(np.int64)


def _block_centres(blocks: np.ndarray) -> np.ndarray:
    """For every pixel, the index of the middle pixel of its block."""
    starts = np.searchsorted(blocks, blocks, side="left")
    ends = np.searchsorted(blocks, blocks, side="right")
    return (starts + ends - 1) // 2


def _block_means(pixels: np.ndarray, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
    row_starts = np.flatnonzero(np.diff(rows, prepend=-1))
    col_starts = np.flatnonzero(np.diff(cols, prepend=-1))

    data = pixels.astype(np.float64)
    sums = np.add.reduceat(np.add.reduceat(data, row_starts, axis=0), col_starts, axis=1)
    counts = np.outer(np.diff(np.append(row_starts, len(rows))), np.diff(np.append(col_starts, len(cols))))
    means = sums / counts[:, :, None]

    # Expand block means back to full resolution.
    row_ids = np.searchsorted(row_starts, np.arange(len(rows)), side="right") - 1
    col_ids = np.searchsorted(col_starts, np.arange(len(cols)), side="right") - 1
    full = means[row_ids][:, col_ids]

    if np.issubdtype(pixels.dtype, np.integer):
        info = np.iinfo(pixels.dtype)
        full = np.clip(np.rint(full), info.min, info.max)
    return full.astype(pixels.dtype)


class Pixelator:
    """Block-quantises an image with blocks of ``max(w, h) / divisor`` pixels.

    Args:
        divisor: How many blocks fit along the longer image side.
        sampling: ``"center"`` copies the middle pixel of each block,
            ``"mean"`` averages the block.
    """

    def __init__(self, divisor: float = 10.0, sampling: str = "center"):
        if sampling not in SAMPLING_MODES:
            raise FilterConstructionFailure(f"Unknown sampling mode {sampling!r}, expected one of {SAMPLING_MODES}")
        try:
            divisor = float(divisor)
        except (TypeError, ValueError) as e:
            raise FilterConstructionFailure(f"Invalid block divisor: {divisor!r}") from e
        if not divisor > 0 or not np.isfinite(divisor):
            raise FilterConstructionFailure(f"Block divisor must be positive, got {divisor}")
        self.divisor = divisor
        self.sampling = sampling

    def block_size(self, width: int, height: int) -> float:
        return max(width, height) / self.divisor

    def pixelate(self, image: Image) -> Image:
        if image.is_empty:
            raise InvalidImage(f"Cannot pixelate an empty image ({image.width}x{image.height})")

        scale = self.block_size(image.width, image.height)
        if not scale > 0:
            raise FilterConstructionFailure(f"Pixelation scale must be positive, got {scale}")
        logger.debug("Pixelating %dx%d image with block size %.3f", image.width, image.height, scale)

        rows = _block_index(image.height, scale)
        cols = _block_index(image.width, scale)

        if self.sampling == "mean":
            out = _block_means(image.pixels, rows, cols)
        else:
            out = image.pixels[_block_centres(rows)][:, _block_centres(cols)]
        return Image(out)
