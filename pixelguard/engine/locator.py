import logging
import math
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from pixelguard.engine.errors import DetectionUnavailable
from pixelguard.engine.raster import FaceRegion, Image

logger = logging.getLogger(__name__)

BoxLike = Union[FaceRegion, Sequence[float]]


class FaceDetector(Protocol):
    """Anything that can find faces in an image."""

    def detect(self, image: Image) -> Iterable[BoxLike]:
        """Return face boxes as FaceRegion or (x, y, w, h) in image coordinates."""
        ...


class StaticDetector:
    """Detector that always reports the same boxes."""

    def __init__(self, regions: Iterable[BoxLike] = ()):
        self.regions = [r if isinstance(r, FaceRegion) else FaceRegion.from_xywh(r) for r in regions]

    def detect(self, image: Image) -> List[FaceRegion]:
        return list(self.regions)


def _to_region(box: BoxLike) -> Optional[FaceRegion]:
    """Parse one detector box. None means a zero or negative size box."""
    if isinstance(box, FaceRegion):
        return box
    try:
        if len(box) < 4:
            raise ValueError(f"expected 4 values, got {len(box)}")
        x, y, w, h = (float(v) for v in box[:4])
    except (TypeError, ValueError) as e:
        raise DetectionUnavailable(f"Detector returned a malformed face box {box!r}: {e}") from e

    if not all(math.isfinite(v) for v in (x, y, w, h)):
        raise DetectionUnavailable(f"Detector returned a non-finite face box {box!r}")
    if w <= 0 or h <= 0:
        return None
    return FaceRegion(x, y, w, h)


class FaceLocator:
    """Wraps a pluggable detector and normalises what it returns.

    Boxes with zero or negative size are dropped with a warning. Anything
    else that is not four finite numbers fails the image, since skipping it
    would leave a face unmasked.
    """

    def __init__(self, detector: FaceDetector):
        if detector is None:
            raise DetectionUnavailable("No face detector configured")
        self.detector = detector

    def detect(self, image: Image) -> List[FaceRegion]:
        if image.is_empty:
            return []
        try:
            raw = list(self.detector.detect(image))
        except DetectionUnavailable:
            raise
        except Exception as e:
            raise DetectionUnavailable(f"Face detector failed: {e}") from e

        regions = []
        for box in raw:
            region = _to_region(box)
            if region is None:
                logger.warning("Dropping degenerate face box %s", tuple(box))
                continue
            regions.append(region)
        return regions
