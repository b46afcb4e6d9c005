import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from pixelguard.engine.errors import InvalidImage

_SUPPORTED_KINDS = ("u", "f")


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True, order="C")
    out.flags.writeable = False
    return out


def _opaque_alpha(shape, dtype) -> np.ndarray:
    if np.issubdtype(dtype, np.integer):
        return np.full(shape, np.iinfo(dtype).max, dtype=dtype)
    return np.ones(shape, dtype=dtype)


@dataclass(frozen=True, eq=False)
class Image:
    """Read-only RGBA raster, shape (height, width, 4)."""

    pixels: np.ndarray

    def __post_init__(self):
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise InvalidImage(f"Pixel data must be a numpy array, got {type(arr).__name__}")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise InvalidImage(f"Expected (H, W, 4) RGBA pixels, got shape {arr.shape}")
        if arr.dtype.kind not in _SUPPORTED_KINDS or arr.dtype == np.float16:
            raise InvalidImage(f"Unsupported pixel dtype: {arr.dtype}")
        if arr.dtype.kind == "f" and arr.size and not np.isfinite(arr).all():
            raise InvalidImage("Pixel data contains NaN or infinite values")
        object.__setattr__(self, "pixels", _frozen(arr))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Image":
        """Build an RGBA image from a gray, RGB or RGBA array."""
        arr = np.asarray(arr)
        if arr.ndim == 2:
            arr = arr[:, :, None]
        if arr.ndim != 3:
            raise InvalidImage(f"Cannot interpret array of shape {arr.shape} as an image")

        channels = arr.shape[2]
        if channels == 1:
            rgb = np.repeat(arr, 3, axis=2)
        elif channels in (3, 4):
            rgb = arr[:, :, :3]
        else:
            raise InvalidImage(f"Unsupported channel count: {channels}")

        if channels == 4:
            return cls(arr)
        alpha = _opaque_alpha(arr.shape[:2] + (1,), arr.dtype)
        return cls(np.concatenate([rgb, alpha], axis=2))

    @classmethod
    def from_bgr(cls, frame: np.ndarray) -> "Image":
        """Build an image from an OpenCV frame (gray, BGR or BGRA)."""
        if frame is None:
            raise InvalidImage("Frame is None")
        frame = np.asarray(frame)
        if frame.ndim == 3 and frame.shape[2] == 3:
            frame = frame[:, :, ::-1]
        elif frame.ndim == 3 and frame.shape[2] == 4:
            frame = frame[:, :, [2, 1, 0, 3]]
        return cls.from_array(frame)

    def to_bgr(self, keep_alpha: bool = False) -> np.ndarray:
        """Return a writable OpenCV-ordered copy (BGR, or BGRA if keep_alpha)."""
        order = [2, 1, 0, 3] if keep_alpha else [2, 1, 0]
        return np.ascontiguousarray(self.pixels[:, :, order])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def dtype(self) -> np.dtype:
        return self.pixels.dtype

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return self.dtype == other.dtype and np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"Image(width={self.width}, height={self.height}, dtype={self.dtype})"


@dataclass(frozen=True, eq=False)
class Mask:
    """Single-channel coverage map in [0, 1], shape (height, width)."""

    coverage: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.coverage, dtype=np.float32)
        if arr.ndim != 2:
            raise InvalidImage(f"Mask must be 2-D, got shape {arr.shape}")
        object.__setattr__(self, "coverage", _frozen(np.clip(arr, 0.0, 1.0)))

    @classmethod
    def blank(cls, width: int, height: int) -> "Mask":
        return cls(np.zeros((height, width), dtype=np.float32))

    @property
    def width(self) -> int:
        return int(self.coverage.shape[1])

    @property
    def height(self) -> int:
        return int(self.coverage.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def __repr__(self):
        return f"Mask(width={self.width}, height={self.height})"


@dataclass(frozen=True)
class FaceRegion:
    """Axis-aligned face box in image coordinates (origin top-left, y down)."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if not all(math.isfinite(v) for v in (self.x, self.y, self.width, self.height)):
            raise ValueError(
                f"Face region needs finite coordinates, got "
                f"({self.x}, {self.y}, {self.width}, {self.height})"
            )
        if not self.width > 0 or not self.height > 0:
            raise ValueError(f"Face region needs positive size, got {self.width}x{self.height}")

    @classmethod
    def from_xywh(cls, box: Sequence[float]) -> "FaceRegion":
        x, y, w, h = (float(v) for v in box[:4])
        return cls(x, y, w, h)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    @property
    def radius(self) -> float:
        return min(self.width, self.height) / 1.5
