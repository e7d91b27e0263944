"""Central module containing shared types and definitions for curve fitting."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, NamedTuple, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezierfit.errors import InvalidInputError

###############################################################################
# Types
###############################################################################


class Point2D(NamedTuple):
    """Immutable 2D point (or vector) with float coordinates."""

    x: float
    y: float

    @classmethod
    def from_any(cls, point: Union[Point2D, Sequence[float], NDArray[np.float64]]) -> Point2D:
        """Create a Point2D from a Point2D, an (x, y) sequence or a numpy array of two values.

        Raises:
            InvalidInputError: If the given value is not a list, tuple or array of
                exactly two numeric coordinates.
        """
        if isinstance(point, Point2D):
            return point
        if not isinstance(point, (list, tuple, np.ndarray)):
            raise InvalidInputError(f"A 2D point must be a list, tuple or array, got {type(point).__name__}")
        if len(point) != 2:
            raise InvalidInputError(f"A 2D point needs exactly two coordinates, got {len(point)}")
        try:
            return cls(float(point[0]), float(point[1]))
        except (TypeError, ValueError) as error:
            raise InvalidInputError(f"A 2D point needs numeric coordinates, got {point!r}") from error

    def distance(self, other: Sequence[float]) -> float:
        """Euclidean distance to another point."""
        return math.hypot(other[0] - self.x, other[1] - self.y)

    def is_finite(self) -> bool:
        """True if both coordinates are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y)


PointLike = Union[Point2D, Sequence[float], NDArray[np.float64]]


###############################################################################
# Enums and Consts
###############################################################################


class FitterKind(Enum):
    """Enum to define which fitter computes the control points of a path."""

    HOBBY = "hobby"
    NATURAL = "natural"
    CATMULL_ROM = "catmull_rom"


###############################################################################
# Functions
###############################################################################


def as_vertices(points: Iterable[PointLike]) -> Tuple[Point2D, ...]:
    """Copy a vertex sequence into an immutable tuple of finite Point2D values.

    Raises:
        InvalidInputError: If a vertex is malformed or has a non-finite coordinate.
    """
    vertices = tuple(Point2D.from_any(point) for point in points)
    for index, vertex in enumerate(vertices):
        if not vertex.is_finite():
            raise InvalidInputError(f"Vertex {index} has a non-finite coordinate: {tuple(vertex)}")
    return vertices


def format_number(value: float) -> str:
    """Format a coordinate for SVG path data.

    Integral values are written without decimals ("10" instead of "10.0"),
    all other values use the shortest representation that round-trips.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
