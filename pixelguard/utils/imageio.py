from pathlib import Path

import cv2
import numpy as np

from pixelguard.engine.errors import InvalidImage
from pixelguard.engine.raster import Image

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".bmp", ".webp", ".tif", ".tiff"}


def load_image(path: str | Path) -> Image:
    """Read an image file into an RGBA Image (gray, BGR and BGRA files)."""
    path = Path(path)
    frame = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if frame is None:
        raise InvalidImage(f"Failed to read image: {path}")
    return Image.from_bgr(frame)


def save_image(path: str | Path, image: Image) -> Path:
    """Write `image` to `path`; alpha is kept only for formats that store it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    keep_alpha = path.suffix.lower() in {".png", ".webp", ".tif", ".tiff"}
    frame = image.to_bgr(keep_alpha=keep_alpha)
    if np.issubdtype(frame.dtype, np.floating):
        frame = (np.clip(frame, 0.0, 1.0) * 255.0).round().astype(np.uint8)

    if not cv2.imwrite(str(path), frame):
        raise OSError(f"Failed to write image: {path}")
    return path
