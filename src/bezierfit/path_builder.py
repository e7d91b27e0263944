"""Assembling fitted control points into paths of cubic Bezier curves."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Iterator, List, Sequence, Tuple, Union

from bezierfit.bezier import CubicBezierCurve
from bezierfit.catmull_rom import CatmullRomPath
from bezierfit.common import FitterKind, Point2D, PointLike, as_vertices
from bezierfit.consts import DEFAULT_CURL, DEFAULT_CURVE_INTERVALS, DEFAULT_TENSION
from bezierfit.errors import InvalidInputError
from bezierfit.geom import BoundingBox
from bezierfit.hobby import HobbyPath
from bezierfit.spline import CubicSplinePath

logger = logging.getLogger(__name__)


###############################################################################
# CurvePath
###############################################################################


class CurvePath(Sequence[CubicBezierCurve]):
    """An ordered, read-only sequence of cubic Bezier curves through a vertex sequence.

    Segment i runs from vertex i to vertex i+1; in a closed path the last segment
    runs from the last vertex back to vertex 0. Adjacent segments share the very
    same vertex value, so ``path[i].end_point == path[i + 1].start_point`` holds exactly.
    """

    def __init__(self, vertices: Sequence[PointLike], segments: Sequence[CubicBezierCurve], closed: bool = False):
        """
        Raises:
            InvalidInputError: If the segments do not connect the vertices in order, or their
                count does not fit the vertex count (n-1 open, n closed, 1 for two vertices).
        """
        self._vertices: Tuple[Point2D, ...] = tuple(Point2D.from_any(vertex) for vertex in vertices)
        self._segments: Tuple[CubicBezierCurve, ...] = tuple(segments)
        self._closed = bool(closed)
        self._check_topology()

    def _check_topology(self) -> None:
        count = len(self._vertices)
        expected = count if self._closed and count > 2 else max(count - 1, 0)
        if len(self._segments) != expected:
            raise InvalidInputError(
                f"{count} vertices (closed={self._closed}) need {expected} segments, got {len(self._segments)}"
            )
        for i, segment in enumerate(self._segments):
            j = (i + 1) % count
            if segment.start_point != self._vertices[i] or segment.end_point != self._vertices[j]:
                raise InvalidInputError(f"Segment {i} does not run from vertex {i} to vertex {j}")

    @property
    def vertices(self) -> Tuple[Point2D, ...]:
        """The vertices the path runs through."""
        return self._vertices

    @property
    def segments(self) -> Tuple[CubicBezierCurve, ...]:
        """The curves of the path in vertex order."""
        return self._segments

    @property
    def closed(self) -> bool:
        """bool: True if the last segment returns to the first vertex."""
        return self._closed

    def vertex_indices(self) -> List[Tuple[int, int]]:
        """Index pair (start vertex, end vertex) of every segment."""
        count = len(self._vertices)
        return [(i, (i + 1) % count) for i in range(len(self._segments))]

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index: Union[int, slice]) -> Union[CubicBezierCurve, Tuple[CubicBezierCurve, ...]]:
        return self._segments[index]

    def __iter__(self) -> Iterator[CubicBezierCurve]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurvePath):
            return NotImplemented
        return (
            self._closed == other.closed and self._vertices == other.vertices and self._segments == other.segments
        )

    def __hash__(self) -> int:
        return hash((self._closed, self._vertices, self._segments))

    def __repr__(self) -> str:
        return f"CurvePath(vertices={len(self._vertices)}, segments={len(self._segments)}, closed={self._closed})"

    @property
    def length(self) -> float:
        """float: The approximated arc length of the whole path."""
        return math.fsum(segment.length for segment in self._segments)

    def point_at(self, u: float) -> Point2D:
        """
        Get the path point at the arc length position u in [0, length].

        Positions outside the range are clamped to the path ends.
        """
        if not self._segments:
            raise InvalidInputError("An empty path has no points")
        remaining = max(0.0, u)
        for segment in self._segments:
            if remaining <= segment.length:
                return segment.point(remaining)
            remaining -= segment.length
        return self._segments[-1].end_point

    def bounds(self) -> BoundingBox:
        """Bounding box of the sampled curve points of all segments."""
        if not self._segments:
            raise InvalidInputError("An empty path has no bounds")
        box = self._segments[0].bounds()
        for segment in self._segments[1:]:
            box = box.union(segment.bounds())
        return box

    def to_path_string(self) -> str:
        """
        SVG path data of the whole path: 'M x0 y0 C ... C ... C ...'.

        Only the first segment emits a MoveTo; an empty path gives an empty string.
        """
        return " ".join(segment.to_path_string(move_to=(i == 0)) for i, segment in enumerate(self._segments))

    def to_dict(self) -> dict:
        """Convert the path to a dictionary."""
        return {
            "closed": self._closed,
            "vertices": [[vertex.x, vertex.y] for vertex in self._vertices],
            "segments": [segment.to_dict() for segment in self._segments],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CurvePath:
        """Create a CurvePath from a dictionary as written by to_dict."""
        if not isinstance(data, Mapping):
            raise InvalidInputError("Can only build a path from a mapping")
        for key in ("vertices", "segments"):
            if key not in data:
                raise InvalidInputError(f'Member "{key}" missing')
        segments = [CubicBezierCurve.from_dict(segment) for segment in data["segments"]]
        return cls(as_vertices(data["vertices"]), segments, bool(data.get("closed", False)))


###############################################################################
# CurvePathBuilder
###############################################################################


class CurvePathBuilder:
    """Builds a CurvePath through a vertex sequence with one of the fitters."""

    @staticmethod
    def straight_segment(
        start: Point2D, end: Point2D, curve_intervals: int = DEFAULT_CURVE_INTERVALS
    ) -> CubicBezierCurve:
        """A straight line as cubic curve: the control points coincide with the end points."""
        return CubicBezierCurve(start, end, start, end, curve_intervals)

    @classmethod
    def build(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        vertices: Sequence[PointLike],
        closed: bool = False,
        fitter_kind: Union[FitterKind, str] = FitterKind.HOBBY,
        curl: float = DEFAULT_CURL,
        curve_intervals: int = DEFAULT_CURVE_INTERVALS,
        tension: float = DEFAULT_TENSION,
    ) -> CurvePath:
        """
        Fit a smooth path of cubic Bezier curves through the vertices.

        Args:
            vertices: The vertices in path order
            closed: If True, add a segment from the last vertex back to the first one
            fitter_kind: A FitterKind or its value ("hobby", "natural", "catmull_rom")
            curl: Hobby curl at the ends of an open path; must be 0 for closed paths and the other fitters
            curve_intervals: Number of intervals of each segment's arc length sampling
            tension: Catmull-Rom tangent scale; must be 1.0 for the other fitters

        Returns:
            CurvePath: empty for fewer than 2 vertices, a single straight segment for
            exactly 2 vertices, else n-1 (open) or n (closed) segments

        Raises:
            InvalidInputError: For malformed vertices or an undefined fitter/curl/topology combination
            DegenerateGeometryError: If two consecutive vertices coincide
            NumericalInstabilityError: If the fitter's linear system cannot be solved
        """
        try:
            fitter_kind = FitterKind(fitter_kind)
        except ValueError as error:
            raise InvalidInputError(f"Unknown fitter kind {fitter_kind!r}") from error
        if fitter_kind is FitterKind.HOBBY:
            HobbyPath.validate_curl(curl, closed)
        elif curl != 0:
            raise InvalidInputError(f"curl only applies to Hobby curves, got curl={curl!r}")
        if fitter_kind is FitterKind.CATMULL_ROM:
            CatmullRomPath.validate_tension(tension)
        elif tension != DEFAULT_TENSION:
            raise InvalidInputError(f"tension only applies to Catmull-Rom splines, got tension={tension!r}")

        points = as_vertices(vertices)
        count = len(points)
        logger.debug("Building %s path through %d vertices (closed=%s)", fitter_kind.value, count, closed)

        if count < 2:
            return CurvePath(points, [], closed)
        if count == 2:
            return CurvePath(points, [cls.straight_segment(points[0], points[1], curve_intervals)], closed)

        if fitter_kind is FitterKind.HOBBY:
            start_controls, end_controls = HobbyPath.controls(points, closed, curl)
        elif fitter_kind is FitterKind.CATMULL_ROM:
            start_controls, end_controls = CatmullRomPath.controls(points, closed, tension)
        else:
            start_controls, end_controls = CubicSplinePath.controls(points, closed)

        segments: List[CubicBezierCurve] = []
        for i, (start_control, end_control) in enumerate(zip(start_controls, end_controls)):
            j = (i + 1) % count
            segments.append(CubicBezierCurve(points[i], points[j], start_control, end_control, curve_intervals))
        return CurvePath(points, segments, closed)
