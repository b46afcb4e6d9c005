import os
from typing import List, Optional

import cv2
import numpy as np

from pixelguard.engine.errors import DetectionUnavailable
from pixelguard.engine.raster import FaceRegion, Image


def _gray_u8(image: Image) -> np.ndarray:
    rgb = image.rgb
    if rgb.dtype == np.uint8:
        data = rgb
    elif np.issubdtype(rgb.dtype, np.integer):
        data = (rgb.astype(np.float64) / np.iinfo(rgb.dtype).max * 255.0).round().astype(np.uint8)
    else:
        data = (np.clip(rgb, 0.0, 1.0) * 255.0).round().astype(np.uint8)
    return cv2.cvtColor(np.ascontiguousarray(data), cv2.COLOR_RGB2GRAY)


class HaarCascadeDetector:
    """Frontal face detection with an OpenCV Haar cascade."""

    def __init__(
        self,
        cascade_path: Optional[str] = None,
        *,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: int = 30,
        equalize: bool = True,
    ):
        if cascade_path is None:
            cascade_path = os.path.join(cv2.data.haarcascades, "haarcascade_frontalface_default.xml")
        if not os.path.isfile(cascade_path):
            raise DetectionUnavailable(f"Haar cascade not found: {cascade_path}")

        try:
            self.detector = cv2.CascadeClassifier(cascade_path)
        except (cv2.error, SystemError) as e:
            raise DetectionUnavailable(f"Failed to load Haar cascade: {cascade_path}") from e
        if self.detector.empty():
            raise DetectionUnavailable(f"Failed to load Haar cascade: {cascade_path}")

        self.cascade_path = cascade_path
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size
        self.equalize = equalize

    def detect(self, image: Image) -> List[FaceRegion]:
        gray = _gray_u8(image)
        # Equalize contrast before running the cascade
        if self.equalize:
            gray = cv2.equalizeHist(gray)

        faces = self.detector.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=(self.min_size, self.min_size),
        )
        return [FaceRegion(float(x), float(y), float(w), float(h)) for (x, y, w, h) in faces]
