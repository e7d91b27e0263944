"""Hobby curves: control points of a smooth Bezier path through a sequence of vertices.

The fitter computes the turning angle at every vertex, solves a (cyclic)
tridiagonal system for the departure angles of the curve at each vertex and
derives the control point distances from Hobby's velocity function (rho).
See John D. Hobby, "Smooth, easy to compute interpolating splines" (1986)
and B. Jackowski, "Typographers, programmers and mathematicians" (2013)
for the end conditions of open paths.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from bezierfit.common import Point2D, PointLike, as_vertices
from bezierfit.consts import DEFAULT_CURL
from bezierfit.errors import InvalidInputError
from bezierfit.geom import GeomMath
from bezierfit.linear_solver import LinearSystemSolver

logger = logging.getLogger(__name__)

_SQRT_5: float = math.sqrt(5.0)
_SQRT_8: float = math.sqrt(8.0)


class HobbyPath:
    """Class to compute the control points of a Hobby curve through given vertices."""

    @staticmethod
    def rho(a: float, b: float) -> float:
        """
        The velocity function of Hobby's algorithm.

        Args:
            a: Angle (radians) between the segment chord and the tangent at the point
            b: Angle (radians) between the segment chord and the tangent at the other point

        Returns:
            float: Distance between a point and its control point, as fraction of a third of the chord.
                rho(b, a) gives the distance for the other end.
        """
        sa = math.sin(a)
        sb = math.sin(b)
        ca = math.cos(a)
        cb = math.cos(b)
        num = 4 + _SQRT_8 * (sa - sb / 16) * (sb - sa / 16) * (ca - cb)
        den = 2 + (_SQRT_5 - 1) * ca + (3 - _SQRT_5) * cb
        return num / den

    @staticmethod
    def validate_curl(curl: float, closed: bool) -> None:
        """
        Check that curl is usable for the given topology.

        Raises:
            InvalidInputError: If curl is negative or not finite, or nonzero for a closed path
        """
        if not math.isfinite(curl) or curl < 0:
            raise InvalidInputError(f"curl must be a finite number >= 0, got {curl!r}")
        if closed and curl != 0:
            raise InvalidInputError(f"curl only applies to open paths, got curl={curl!r} for a closed path")

    @classmethod
    def controls(
        cls, vertices: Sequence[PointLike], closed: bool = False, curl: float = DEFAULT_CURL
    ) -> Tuple[List[Point2D], List[Point2D]]:
        """
        Compute the control points of the Hobby curve through the given vertices.

        Args:
            vertices: At least 3 vertices in path order
            closed: If True, the path returns from the last vertex to the first one
            curl: Curl ("omega") at both ends of an open path; must be 0 for closed paths

        Returns:
            Tuple of (start_control_points, end_control_points), one entry per segment.
            Segment i runs from vertex i to vertex i+1 (to vertex 0 for the last
            segment of a closed path).

        Raises:
            InvalidInputError: If there are fewer than 3 vertices or curl is invalid
            DegenerateGeometryError: If two consecutive vertices coincide
            NumericalInstabilityError: If the linear system cannot be solved
        """
        # pylint: disable=too-many-locals
        points = as_vertices(vertices)
        if len(points) < 3:
            raise InvalidInputError(f"Hobby controls need at least 3 vertices, got {len(points)}")
        cls.validate_curl(curl, closed)
        logger.debug("Hobby controls for %d vertices (closed=%s, curl=%r)", len(points), closed, curl)

        ds, dist = GeomMath.segment_vectors(points, closed)
        n = len(ds)  # number of segments

        def succ(i: int) -> int:
            return (i + 1) % n if closed else i + 1

        def pred(i: int) -> int:
            return (i + n - 1) % n if closed else i - 1

        # an open path has one row more than segments (one per vertex)
        size = n if closed else n + 1
        first = 0 if closed else 1

        # turning angles; gamma[0] (open) is not used and gamma[n] (open) stays 0
        gamma = np.zeros(size, dtype=np.float64)
        for i in range(first, n):
            k = pred(i)
            vec = GeomMath.rotate(ds[i], -ds[k].y / dist[k], ds[k].x / dist[k])
            gamma[i] = math.atan2(vec.y, vec.x)

        a = np.zeros(size, dtype=np.float64)
        b = np.zeros(size, dtype=np.float64)
        c = np.zeros(size, dtype=np.float64)
        d = np.zeros(size, dtype=np.float64)
        for i in range(first, n):
            j = succ(i)
            k = pred(i)
            a[i] = 1 / dist[k]
            b[i] = (2 * dist[k] + 2 * dist[i]) / (dist[k] * dist[i])
            c[i] = 1 / dist[i]
            d[i] = -(2 * gamma[i] * dist[i] + gamma[j] * dist[k]) / (dist[k] * dist[i])

        beta = np.empty(n, dtype=np.float64)
        if closed:
            # the wrap-around coefficients become the corners of the cyclic system
            s = a[0]
            a[0] = 0.0
            t = c[n - 1]
            c[n - 1] = 0.0
            alpha = LinearSystemSolver.solve_cyclic(a, b, c, d, s, t)
            for i in range(n):
                j = succ(i)
                beta[i] = -gamma[j] - alpha[j]
        else:
            # end conditions after Jackowski, curl weighs the curvature at the first and last vertex
            b[0] = 2 + curl
            c[0] = 2 * curl + 1
            d[0] = -c[0] * gamma[1]
            a[n] = 2 * curl + 1
            b[n] = 2 + curl
            d[n] = 0.0
            alpha = LinearSystemSolver.solve_tridiagonal(a, b, c, d)
            for i in range(n - 1):
                beta[i] = -gamma[i + 1] - alpha[i + 1]
            beta[n - 1] = -alpha[n]

        start_controls: List[Point2D] = []
        end_controls: List[Point2D] = []
        for i in range(n):
            j = (i + 1) % len(points)
            alpha_i = float(alpha[i])
            beta_i = float(beta[i])
            start_distance = cls.rho(alpha_i, beta_i) * dist[i] / 3
            end_distance = cls.rho(beta_i, alpha_i) * dist[i] / 3
            v = GeomMath.normalize(GeomMath.rotate_angle(ds[i], alpha_i))
            start_controls.append(Point2D(points[i].x + start_distance * v.x, points[i].y + start_distance * v.y))
            v = GeomMath.normalize(GeomMath.rotate_angle(ds[i], -beta_i))
            end_controls.append(Point2D(points[j].x - end_distance * v.x, points[j].y - end_distance * v.y))
        return start_controls, end_controls
