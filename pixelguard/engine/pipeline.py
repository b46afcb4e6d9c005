from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pixelguard.config.settings import Settings, get_settings
from pixelguard.engine.composite import Compositor
from pixelguard.engine.errors import InvalidImage, ObscurationError
from pixelguard.engine.locator import FaceDetector, FaceLocator
from pixelguard.engine.mask import MaskBuilder
from pixelguard.engine.pixelate import Pixelator
from pixelguard.engine.raster import FaceRegion, Image, Mask
from pixelguard.utils.privacy import HaarCascadeDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObscurationResult:
    image: Image
    faces: List[FaceRegion]


class ObscurationPipeline:
    """Detect faces, pixelate them and leave everything else sharp."""

    def __init__(
        self,
        locator: FaceLocator,
        mask_builder: Optional[MaskBuilder] = None,
        pixelator: Optional[Pixelator] = None,
        compositor: Optional[Compositor] = None,
        *,
        parallel: bool = False,
    ):
        self.locator = locator
        self.mask_builder = mask_builder or MaskBuilder()
        self.pixelator = pixelator or Pixelator()
        self.compositor = compositor or Compositor()
        self.parallel = parallel

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        detector: Optional[FaceDetector] = None,
    ) -> "ObscurationPipeline":
        """Default pipeline: Haar cascade detector plus the configured stages."""
        settings = settings or get_settings()
        if detector is None:
            detector = HaarCascadeDetector(
                settings.cascade_path,
                scale_factor=settings.scale_factor,
                min_neighbors=settings.min_neighbors,
                min_size=settings.min_face_size,
                equalize=settings.equalize,
            )
        return cls(
            FaceLocator(detector),
            MaskBuilder(feather=settings.mask_feather),
            Pixelator(divisor=settings.block_divisor, sampling=settings.pixel_sampling),
            Compositor(),
            parallel=settings.parallel,
        )

    def _locate(self, image: Image) -> Tuple[List[FaceRegion], Mask]:
        faces = self.locator.detect(image)
        logger.info("Found %d face(s) in %dx%d image", len(faces), image.width, image.height)
        for face in faces:
            logger.debug("Face %s", face)
        return faces, self.mask_builder.build(faces, image.width, image.height)

    def process(self, image: Image) -> Image:
        """Return a copy of `image` with every detected face pixelated."""
        return self.run(image).image

    def run(self, image: Image) -> ObscurationResult:
        """Like `process`, but also report the faces that were masked.

        Any stage failure propagates; no partially masked image is returned.
        """
        if not isinstance(image, Image):
            raise InvalidImage(f"Expected an Image, got {type(image).__name__}")
        if image.is_empty:
            raise InvalidImage(f"Image has no pixels ({image.width}x{image.height})")

        try:
            if self.parallel:
                with ThreadPoolExecutor(max_workers=1) as pool:
                    pending = pool.submit(self.pixelator.pixelate, image)
                    faces, mask = self._locate(image)
                    pixelated = pending.result()
            else:
                faces, mask = self._locate(image)
                pixelated = self.pixelator.pixelate(image)
            output = self.compositor.blend(image, pixelated, mask)
        except ObscurationError as e:
            logger.error("Obscuration failed (%s): %s", type(e).__name__, e)
            raise
        return ObscurationResult(output, faces)


def obscure_faces(image: Image, detector: Optional[FaceDetector] = None) -> Image:
    """One-shot helper: build the default pipeline and process a single image."""
    return ObscurationPipeline.from_settings(detector=detector).process(image)
