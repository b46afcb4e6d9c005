import numpy as np

from pixelguard.engine.errors import DimensionMismatch, FilterConstructionFailure
from pixelguard.engine.raster import Image, Mask


class Compositor:
    """Blends a foreground over a background through a coverage mask."""

    def blend(self, background: Image, foreground: Image, mask: Mask) -> Image:
        """Per pixel and channel: ``foreground * m + background * (1 - m)``.

        Raises:
            DimensionMismatch: if the three inputs are not the same size.
            FilterConstructionFailure: if the two images differ in dtype.
        """
        if not (background.size == foreground.size == mask.size):
            raise DimensionMismatch(
                f"Cannot blend background {background.size}, foreground {foreground.size} "
                f"and mask {mask.size}"
            )
        if background.dtype != foreground.dtype:
            raise FilterConstructionFailure(
                f"Background and foreground dtypes differ: {background.dtype} vs {foreground.dtype}"
            )

        dtype = background.dtype
        m = mask.coverage[:, :, None]
        out = foreground.pixels.astype(np.float32) * m + background.pixels.astype(np.float32) * (1.0 - m)
        if np.issubdtype(dtype, np.integer):
            info = np.iinfo(dtype)
            out = np.clip(np.rint(out), info.min, info.max)
        out = out.astype(dtype)

        # Fully off and fully on pixels pass through untouched.
        out = np.where(m == 0.0, background.pixels, out)
        out = np.where(m == 1.0, foreground.pixels, out)
        return Image(out)
