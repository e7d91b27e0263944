"""Catmull-Rom splines through a sequence of vertices, expressed as Bezier control points."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from bezierfit.common import Point2D, PointLike, as_vertices
from bezierfit.consts import DEFAULT_TENSION
from bezierfit.errors import InvalidInputError
from bezierfit.geom import GeomMath

logger = logging.getLogger(__name__)


class CatmullRomPath:
    """Class to compute the control points of a Catmull-Rom spline.

    The tangent at a vertex is parallel to the chord between its neighbours, so no
    linear system is needed. The ends of an open path use the end vertex itself as
    its missing neighbour.
    """

    @staticmethod
    def validate_tension(tension: float) -> None:
        """
        Check that tension is usable.

        Raises:
            InvalidInputError: If tension is not a finite number
        """
        if not math.isfinite(tension):
            raise InvalidInputError(f"tension must be a finite number, got {tension!r}")

    @classmethod
    def controls(
        cls, vertices: Sequence[PointLike], closed: bool = False, tension: float = DEFAULT_TENSION
    ) -> Tuple[List[Point2D], List[Point2D]]:
        """
        Compute the control points of the Catmull-Rom spline through the given vertices.

        Args:
            vertices: At least 3 vertices in path order
            closed: If True, the path returns from the last vertex to the first one
            tension: Scale of the tangents, 1.0 gives the uniform Catmull-Rom spline
                and 0.0 a polygon

        Returns:
            Tuple of (start_control_points, end_control_points), one entry per segment.

        Raises:
            InvalidInputError: If there are fewer than 3 vertices or tension is not finite
            DegenerateGeometryError: If two consecutive vertices coincide
        """
        points = as_vertices(vertices)
        if len(points) < 3:
            raise InvalidInputError(f"Catmull-Rom controls need at least 3 vertices, got {len(points)}")
        cls.validate_tension(tension)
        GeomMath.segment_vectors(points, closed)
        logger.debug("Catmull-Rom controls for %d vertices (closed=%s, tension=%r)", len(points), closed, tension)

        count = len(points)
        factor = tension / 6
        start_controls: List[Point2D] = []
        end_controls: List[Point2D] = []
        for i in range(count if closed else count - 1):
            p1 = points[i]
            p2 = points[(i + 1) % count]
            if closed:
                p0 = points[i - 1]
                p3 = points[(i + 2) % count]
            else:
                p0 = points[max(i - 1, 0)]
                p3 = points[min(i + 2, count - 1)]
            start_controls.append(Point2D(p1.x + (p2.x - p0.x) * factor, p1.y + (p2.y - p0.y) * factor))
            end_controls.append(Point2D(p2.x - (p3.x - p1.x) * factor, p2.y - (p3.y - p1.y) * factor))
        return start_controls, end_controls
