import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, TypeVar

import numpy as np

from .errors import IncompatiblePointKindError, InvalidInputError


# Constants TSPLIB uses for GEO instances.
TSPLIB_PI = 3.141592
EARTH_RADIUS = 6378.388


class Point(ABC):
    order: int
    planar: bool = False

    @abstractmethod
    def distance_to(self, other: "Point") -> float:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def pairwise(cls, points: Sequence["Point"]) -> np.ndarray:
        """Full distance matrix; entry [i, j] equals points[i].distance_to(points[j])."""
        raise NotImplementedError


P = TypeVar("P", bound=Point)


@dataclass(frozen=True)
class EucPoint(Point):
    order: int
    x: float
    y: float
    rounded: bool = True

    planar = True

    def distance_to(self, other: Point) -> float:
        if not isinstance(other, EucPoint):
            raise IncompatiblePointKindError(
                f"cannot measure distance between {type(self).__name__} and {type(other).__name__}"
            )
        d = math.hypot(self.x - other.x, self.y - other.y)
        if self.rounded:
            return float(int(d + 0.5))
        return d

    @classmethod
    def pairwise(cls, points: Sequence["EucPoint"]) -> np.ndarray:
        xy = np.array([(p.x, p.y) for p in points], dtype=float)
        diff = xy[:, None, :] - xy[None, :, :]
        dist = np.hypot(diff[..., 0], diff[..., 1])
        if points and points[0].rounded:
            dist = np.floor(dist + 0.5)
        return dist


@dataclass(frozen=True)
class GeoPoint(Point):
    """Geographic point; latitude and longitude are in radians."""

    order: int
    latitude: float
    longitude: float

    @classmethod
    def from_degrees(cls, order: int, latitude: float, longitude: float) -> "GeoPoint":
        # TSPLIB writes DDD.MM, so 23 degrees 28 minutes is 23.28.
        return cls(order, _tsplib_radians(latitude), _tsplib_radians(longitude))

    def distance_to(self, other: Point) -> float:
        if not isinstance(other, GeoPoint):
            raise IncompatiblePointKindError(
                f"cannot measure distance between {type(self).__name__} and {type(other).__name__}"
            )
        q1 = math.cos(self.longitude - other.longitude)
        q2 = math.cos(self.latitude - other.latitude)
        q3 = math.cos(self.latitude + other.latitude)
        inner = min(1.0, max(-1.0, 0.5 * ((1.0 + q1) * q2 - (1.0 - q1) * q3)))
        return float(int(EARTH_RADIUS * math.acos(inner) + 1.0))

    @classmethod
    def pairwise(cls, points: Sequence["GeoPoint"]) -> np.ndarray:
        lat = np.array([p.latitude for p in points], dtype=float)
        lon = np.array([p.longitude for p in points], dtype=float)
        q1 = np.cos(lon[:, None] - lon[None, :])
        q2 = np.cos(lat[:, None] - lat[None, :])
        q3 = np.cos(lat[:, None] + lat[None, :])
        inner = np.clip(0.5 * ((1.0 + q1) * q2 - (1.0 - q1) * q3), -1.0, 1.0)
        return np.floor(EARTH_RADIUS * np.arccos(inner) + 1.0)


def _tsplib_radians(value: float) -> float:
    degrees = int(value)
    minutes = value - degrees
    return TSPLIB_PI * (degrees + 5.0 * minutes / 3.0) / 180.0


def distance(p: Point, q: Point) -> float:
    return p.distance_to(q)


def cross(o: EucPoint, a: EucPoint, b: EucPoint) -> float:
    """z-component of (a - o) x (b - o); positive when o -> a -> b turns left."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def convex_hull(points: Sequence[P], collinear: bool = True) -> List[P]:
    """
    Andrew's monotone chain, counter-clockwise from the lowest-leftmost point.

    With ``collinear`` the points lying on a hull edge are kept, otherwise
    only the corners are returned. Points sharing coordinates are placed
    together, right after the first of them. The input sequence is not
    modified.
    """
    if not points:
        raise InvalidInputError("cannot build the convex hull of an empty point list")
    for p in points:
        if not p.planar:
            raise IncompatiblePointKindError(
                f"the exact convex hull needs planar points, got {type(p).__name__}"
            )
    # The chains only see one point per location; a zero-length edge has no turn.
    twins: Dict[Tuple[float, float], List[P]] = {}
    for p in points:
        twins.setdefault((p.x, p.y), []).append(p)
    ordered = [twins[key][0] for key in sorted(twins)]
    if len(ordered) < 3:
        return [q for p in ordered for q in twins[(p.x, p.y)]]

    def bends_right(o, a, b) -> bool:
        turn = cross(o, a, b)
        return turn < 0 if collinear else turn <= 0

    hull: List[P] = []
    for p in ordered:
        while len(hull) > 1 and bends_right(hull[-2], hull[-1], p):
            hull.pop()
        hull.append(p)
    floor = len(hull)
    for p in reversed(ordered[:-1]):
        while len(hull) > floor and bends_right(hull[-2], hull[-1], p):
            hull.pop()
        hull.append(p)
    # The last point closes the loop back onto the first one.
    hull.pop()

    # A fully collinear input walks the same points twice.
    seen = set()
    unique = []
    for p in hull:
        if id(p) not in seen:
            seen.add(id(p))
            unique.append(p)
    return [q for p in unique for q in twins[(p.x, p.y)]]


def approximate_convex_hull(points: Sequence[P]) -> List[P]:
    """
    Triangle spanned by the diameter of the point set and the point farthest
    from both of its ends. Works for any point kind, no ordering required.
    """
    if not points:
        raise InvalidInputError("cannot build the convex hull of an empty point list")
    size = len(points)
    if size < 2:
        return [points[0]]
    best = -1.0
    i_far = j_far = 0
    for i in range(size):
        for j in range(size):
            if i == j:
                continue
            d = points[i].distance_to(points[j])
            if d > best:
                i_far, j_far, best = i, j, d
    pi, pj = points[i_far], points[j_far]
    if size == 2:
        return [pi, pj]
    k_far = 0
    best = -1.0
    for k in range(size):
        if k in (i_far, j_far):
            continue
        d = pi.distance_to(points[k]) + points[k].distance_to(pj)
        if d > best:
            k_far, best = k, d
    return [pi, pj, points[k_far]]
