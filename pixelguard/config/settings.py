"""Pipeline configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

import cv2

DEFAULT_CASCADE = os.path.join(cv2.data.haarcascades, "haarcascade_frontalface_default.xml")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Tunable knobs for detection, masking and pixelation."""

    log_level: str = "INFO"

    block_divisor: float = 10.0
    pixel_sampling: str = "center"
    mask_feather: float = 1.0

    cascade_path: str = DEFAULT_CASCADE
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_face_size: int = 30
    equalize: bool = True

    parallel: bool = False


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """Build settings from the current environment (uncached)."""

    return Settings(
        log_level=os.getenv("PIXELGUARD_LOG_LEVEL", "INFO"),
        block_divisor=_env_float("PIXELGUARD_BLOCK_DIVISOR", 10.0),
        pixel_sampling=os.getenv("PIXELGUARD_PIXEL_SAMPLING", "center"),
        mask_feather=_env_float("PIXELGUARD_MASK_FEATHER", 1.0),
        cascade_path=os.getenv("PIXELGUARD_CASCADE_PATH", DEFAULT_CASCADE),
        scale_factor=_env_float("PIXELGUARD_SCALE_FACTOR", 1.1),
        min_neighbors=_env_int("PIXELGUARD_MIN_NEIGHBORS", 5),
        min_face_size=_env_int("PIXELGUARD_MIN_FACE_SIZE", 30),
        equalize=_env_bool("PIXELGUARD_EQUALIZE", True),
        parallel=_env_bool("PIXELGUARD_PARALLEL", False),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading the environment."""

    return load_settings()
