"""Natural cubic splines through a sequence of vertices, expressed as Bezier control points."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from bezierfit.common import Point2D, PointLike, as_vertices
from bezierfit.errors import InvalidInputError
from bezierfit.geom import GeomMath
from bezierfit.linear_solver import LinearSystemSolver

logger = logging.getLogger(__name__)


class CubicSplinePath:
    """Class to compute the control points of a C2-continuous natural cubic spline.

    Both coordinates are solved independently with the same tridiagonal solver
    that drives the Hobby curves.
    """

    @staticmethod
    def natural_controls_open(coords: Sequence[float]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        First and second control coordinates of an open natural spline, for one axis.

        Args:
            coords: The coordinates (x or y) of the n+1 vertices, n >= 2

        Returns:
            Tuple (first, second) of arrays with one entry per segment
        """
        coords = np.asarray(coords, dtype=np.float64)
        n = len(coords) - 1
        a = np.zeros(n, dtype=np.float64)
        b = np.zeros(n, dtype=np.float64)
        c = np.zeros(n, dtype=np.float64)
        d = np.zeros(n, dtype=np.float64)

        b[0] = 2
        c[0] = 1
        d[0] = coords[0] + 2 * coords[1]
        a[n - 1] = 2
        b[n - 1] = 7
        d[n - 1] = 8 * coords[n - 1] + coords[n]
        for i in range(1, n - 1):
            a[i] = 1
            b[i] = 4
            c[i] = 1
            d[i] = 4 * coords[i] + 2 * coords[i + 1]

        first = LinearSystemSolver.solve_tridiagonal(a, b, c, d)
        second = np.empty(n, dtype=np.float64)
        for i in range(n - 1):
            second[i] = 2 * coords[i + 1] - first[i + 1]
        second[n - 1] = (coords[n] + first[n - 1]) / 2
        return first, second

    @staticmethod
    def natural_controls_closed(coords: Sequence[float]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        First and second control coordinates of a closed natural spline, for one axis.

        Args:
            coords: The coordinates (x or y) of the n vertices, n >= 3

        Returns:
            Tuple (first, second) of arrays with one entry per segment (n segments)
        """
        coords = np.asarray(coords, dtype=np.float64)
        n = len(coords)
        a = np.ones(n, dtype=np.float64)
        b = np.full(n, 4.0, dtype=np.float64)
        c = np.ones(n, dtype=np.float64)
        d = np.empty(n, dtype=np.float64)
        for i in range(n):
            d[i] = 4 * coords[i] + 2 * coords[(i + 1) % n]
        a[0] = 0.0
        c[n - 1] = 0.0

        # the ones in the empty corners close the loop
        first = LinearSystemSolver.solve_cyclic(a, b, c, d, 1.0, 1.0)
        second = np.empty(n, dtype=np.float64)
        for i in range(n - 1):
            second[i] = 2 * coords[i + 1] - first[i + 1]
        second[n - 1] = 2 * coords[0] - first[0]
        return first, second

    @classmethod
    def controls(cls, vertices: Sequence[PointLike], closed: bool = False) -> Tuple[List[Point2D], List[Point2D]]:
        """
        Compute the control points of the natural cubic spline through the given vertices.

        Args:
            vertices: At least 3 vertices in path order
            closed: If True, the path returns from the last vertex to the first one

        Returns:
            Tuple of (start_control_points, end_control_points), one entry per segment.

        Raises:
            InvalidInputError: If there are fewer than 3 vertices
            DegenerateGeometryError: If two consecutive vertices coincide
            NumericalInstabilityError: If the linear system cannot be solved
        """
        points = as_vertices(vertices)
        if len(points) < 3:
            raise InvalidInputError(f"Spline controls need at least 3 vertices, got {len(points)}")
        GeomMath.segment_vectors(points, closed)
        logger.debug("Natural spline controls for %d vertices (closed=%s)", len(points), closed)

        xs = [point.x for point in points]
        ys = [point.y for point in points]
        if closed:
            first_x, second_x = cls.natural_controls_closed(xs)
            first_y, second_y = cls.natural_controls_closed(ys)
        else:
            first_x, second_x = cls.natural_controls_open(xs)
            first_y, second_y = cls.natural_controls_open(ys)

        start_controls = [Point2D(float(x), float(y)) for x, y in zip(first_x, first_y)]
        end_controls = [Point2D(float(x), float(y)) for x, y in zip(second_x, second_y)]
        return start_controls, end_controls
