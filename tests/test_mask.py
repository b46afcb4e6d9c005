"""Tests for face-mask construction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from pixelguard.engine.errors import FilterConstructionFailure, InvalidImage
from pixelguard.engine.mask import MaskBuilder, radial_coverage
from pixelguard.engine.raster import FaceRegion


def _distances(width: int, height: int, cx: float, cy: float) -> np.ndarray:
    ys, xs = np.mgrid[0:height, 0:width]
    return np.hypot(xs - cx, ys - cy)


def test_no_regions_gives_blank_mask() -> None:
    mask = MaskBuilder().build([], 30, 20)

    assert mask.size == (30, 20)
    assert not mask.coverage.any()


def test_single_face_profile() -> None:
    face = FaceRegion(40, 40, 20, 20)
    radius = face.radius
    mask = MaskBuilder().build([face], 100, 100)
    cov = mask.coverage
    dist = _distances(100, 100, 50, 50)

    assert cov[50, 50] == 1.0
    assert (cov[dist <= radius] == 1.0).all()
    assert (cov[dist >= radius + 1] == 0.0).all()
    band = (dist > radius) & (dist < radius + 1)
    assert band.any()
    assert np.allclose(cov[band], radius + 1 - dist[band], atol=1e-5)


def test_coverage_non_increasing_beyond_radius() -> None:
    face = FaceRegion(10, 10, 30, 30)
    cov = MaskBuilder().build([face], 60, 60).coverage
    cx, cy = face.center

    # Walk outwards along the row through the centre.
    row = cov[int(cy), int(math.ceil(cx)):]
    assert (np.diff(row) <= 0).all()
    assert row[-1] == 0.0


def test_overlapping_faces_union() -> None:
    a = FaceRegion(20, 20, 30, 30)
    b = FaceRegion(35, 25, 30, 30)
    builder = MaskBuilder()

    both = builder.build([a, b], 100, 80).coverage
    only_a = builder.build([a], 100, 80).coverage
    only_b = builder.build([b], 100, 80).coverage

    assert (both >= only_a).all()
    assert (both >= only_b).all()
    assert np.allclose(both, only_a + only_b * (1 - only_a), atol=1e-6)


def test_insertion_order_does_not_change_result() -> None:
    a = FaceRegion(5, 5, 12, 12)
    b = FaceRegion(12, 8, 12, 12)
    builder = MaskBuilder()

    assert np.allclose(builder.build([a, b], 40, 40).coverage, builder.build([b, a], 40, 40).coverage)


def test_region_partly_outside_image_is_clipped() -> None:
    mask = MaskBuilder().build([FaceRegion(-10, -10, 20, 20)], 16, 16)

    assert mask.coverage[0, 0] == 1.0
    assert mask.coverage[15, 15] == 0.0


def test_region_fully_outside_image_leaves_mask_blank() -> None:
    mask = MaskBuilder().build([FaceRegion(500, 500, 20, 20)], 16, 16)

    assert not mask.coverage.any()


def test_accepts_generator_of_regions() -> None:
    regions = (FaceRegion(x, 0, 8, 8) for x in (0, 20))

    mask = MaskBuilder().build(regions, 32, 8)

    assert mask.coverage[4, 4] == 1.0
    assert mask.coverage[4, 24] == 1.0


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
def test_non_positive_size_rejected(size) -> None:
    with pytest.raises(InvalidImage):
        MaskBuilder().build([], *size)


@pytest.mark.parametrize("feather", [0, -1.0, float("inf")])
def test_bad_feather_rejected(feather) -> None:
    with pytest.raises(FilterConstructionFailure):
        MaskBuilder(feather=feather)


def test_wider_feather_softens_edge() -> None:
    dist = np.array([10.0, 11.0, 12.0, 13.0])

    assert radial_coverage(dist, 10.0).tolist() == [1.0, 0.0, 0.0, 0.0]
    assert radial_coverage(dist, 10.0, feather=2.0).tolist() == [1.0, 0.5, 0.0, 0.0]
