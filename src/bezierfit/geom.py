"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from bezierfit.common import Point2D
from bezierfit.errors import DegenerateGeometryError, InvalidInputError


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to 2D vector handling."""

    @staticmethod
    def transform_point(
        affine_trafo: Sequence[Union[int, float]], point: Sequence[Union[int, float]]
    ) -> Point2D:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Point2D: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return Point2D(x_new, y_new)

    @staticmethod
    def difference(point_a: Sequence[float], point_b: Sequence[float]) -> Point2D:
        """Vector pointing from point_a to point_b."""
        return Point2D(point_b[0] - point_a[0], point_b[1] - point_a[1])

    @staticmethod
    def segment_vectors(vertices: Sequence[Point2D], closed: bool) -> Tuple[List[Point2D], List[float]]:
        """
        Direction vectors and lengths of the segments between consecutive vertices.

        A closed sequence has one more segment, from the last vertex back to the first.

        Returns:
            Tuple of (directions, lengths) with one entry per segment

        Raises:
            DegenerateGeometryError: If two consecutive vertices coincide
        """
        count = len(vertices)
        segment_count = count if closed else count - 1
        directions: List[Point2D] = []
        lengths: List[float] = []
        for i in range(segment_count):
            j = (i + 1) % count
            direction = GeomMath.difference(vertices[i], vertices[j])
            length = math.hypot(direction.x, direction.y)
            if length == 0:
                raise DegenerateGeometryError(i, tuple(vertices[i]))
            directions.append(direction)
            lengths.append(length)
        return directions, lengths

    @staticmethod
    def rotate(vec: Sequence[float], sin: float, cos: float) -> Point2D:
        """Rotate a vector about an angle which is given by its sine and cosine."""
        return Point2D(vec[0] * cos - vec[1] * sin, vec[0] * sin + vec[1] * cos)

    @staticmethod
    def rotate_angle(vec: Sequence[float], angle: float) -> Point2D:
        """Rotate a vector about the given angle (radians, counter-clockwise)."""
        return GeomMath.rotate(vec, math.sin(angle), math.cos(angle))

    @staticmethod
    def normalize(vec: Sequence[float]) -> Point2D:
        """Unit vector of the given vector; the zero vector stays zero."""
        norm = math.hypot(vec[0], vec[1])
        if norm == 0:
            return Point2D(0.0, 0.0)
        return Point2D(vec[0] / norm, vec[1] / norm)


###############################################################################
# BoundingBox
###############################################################################
@dataclass
class BoundingBox:
    """
    Represents an axis-aligned rectangular box with coordinates and dimensions.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        self._xmin = xmin
        self._ymin = ymin
        self._xmax = xmax
        self._ymax = ymax

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    def union(self, other: BoundingBox) -> BoundingBox:
        """Smallest box enclosing this and the other box."""
        return BoundingBox(
            xmin=min(self._xmin, other.xmin),
            ymin=min(self._ymin, other.ymin),
            xmax=max(self._xmax, other.xmax),
            ymax=max(self._ymax, other.ymax),
        )

    def expand(self, margin: float) -> BoundingBox:
        """Box grown by margin on every side."""
        return BoundingBox(self._xmin - margin, self._ymin - margin, self._xmax + margin, self._ymax + margin)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> BoundingBox:
        """Bounding box of a non-empty collection of (x, y) points."""
        xs = []
        ys = []
        for point in points:
            xs.append(float(point[0]))
            ys.append(float(point[1]))
        if not xs:
            raise InvalidInputError("Bounding box requires at least one point")
        return cls(xmin=min(xs), ymin=min(ys), xmax=max(xs), ymax=max(ys))
