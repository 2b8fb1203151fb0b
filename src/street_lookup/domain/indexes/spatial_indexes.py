import math
from collections.abc import Sequence

import numpy as np
from scipy.spatial import cKDTree

from street_lookup.app.protocols import SpatialIndex
from street_lookup.domain.entities.geography import Point


class EmptyIndexError(LookupError):
    """nearest() was asked of an index holding no points."""


class NonFiniteQueryError(ValueError):
    """nearest() was asked about an inf/nan coordinate."""


def _as_array(points: Sequence[Point]) -> np.ndarray:
    if not points:
        return np.empty((0, 2), dtype=float)
    return np.array([(p.lon, p.lat) for p in points], dtype=float)


def _check_query(n: int, lon: float, lat: float) -> None:
    if not n:
        raise EmptyIndexError("nearest() on an empty spatial index")
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise NonFiniteQueryError(f"query coordinates must be finite, got ({lon}, {lat})")


def _argmin_distance(xy: np.ndarray, lon: float, lat: float) -> int:
    # hypot keeps huge finite queries (e.g. 1e308) from overflowing; all-inf -> first point
    with np.errstate(over="ignore", invalid="ignore"):
        d = np.hypot(xy[:, 0] - lon, xy[:, 1] - lat)
    return int(np.argmin(d))


class KDTreeSpatialIndex(SpatialIndex):
    """Euclidean nearest neighbour in (lon, lat) space backed by scipy's cKDTree."""

    def __init__(self, points: Sequence[Point], *, leafsize: int = 16):
        self._points = list(points)
        self._xy = _as_array(self._points)
        self._tree = cKDTree(self._xy, leafsize=leafsize) if self._points else None

    def nearest(self, lon: float, lat: float) -> Point:
        _check_query(len(self._points), lon, lat)
        d, i = self._tree.query((lon, lat))
        if i >= len(self._points) or not np.isfinite(d):
            # cKDTree answers "no neighbour" once the distance overflows
            i = _argmin_distance(self._xy, lon, lat)
        return self._points[int(i)]

    def __len__(self) -> int:
        return len(self._points)


class BruteForceSpatialIndex(SpatialIndex):
    """Linear scan; ties resolve to the point supplied first."""

    def __init__(self, points: Sequence[Point]):
        self._points = list(points)
        self._xy = _as_array(self._points)

    def nearest(self, lon: float, lat: float) -> Point:
        _check_query(len(self._points), lon, lat)
        return self._points[_argmin_distance(self._xy, lon, lat)]

    def __len__(self) -> int:
        return len(self._points)
