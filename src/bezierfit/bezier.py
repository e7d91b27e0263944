"""Cubic Bezier curve segments: evaluation, arc length sampling, search and subdivision."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezierfit.common import Point2D, PointLike, format_number
from bezierfit.consts import (
    CLOSEST_T_EPSILON,
    CLOSEST_T_MAX_ITERATIONS,
    DEFAULT_ATOL,
    DEFAULT_CURVE_INTERVALS,
    DEFAULT_RTOL,
)
from bezierfit.errors import InvalidInputError
from bezierfit.geom import BoundingBox, GeomMath

_SERIALIZED_KEYS: Tuple[str, str, str, str] = ("startPoint", "endPoint", "startControlPoint", "endControlPoint")


class CubicBezierCurve:
    """A cubic Bezier curve given by its start point, end point and two control points.

    Instances are immutable: the four points cannot be changed in place. Every
    operation that moves points (translate, reverse, move_curve_point,
    with_points, ...) returns a new curve. The arc length sample cache is
    filled on construction and therefore always matches the points;
    recompute_arc_length() only re-samples with a different interval count.
    """

    START_POINT: int = 0
    START_CONTROL_POINT: int = 1
    END_CONTROL_POINT: int = 2
    END_POINT: int = 3

    def __init__(
        self,
        start_point: PointLike,
        end_point: PointLike,
        start_control_point: PointLike,
        end_control_point: PointLike,
        curve_intervals: int = DEFAULT_CURVE_INTERVALS,
    ):
        """Initialize the curve and sample its arc length.

        Args:
            start_point: The start point of the curve
            end_point: The end point of the curve
            start_control_point: The control point belonging to the start point
            end_control_point: The control point belonging to the end point
            curve_intervals: Number of linear intervals for the arc length sampling
        """
        self._start_point = Point2D.from_any(start_point)
        self._end_point = Point2D.from_any(end_point)
        self._start_control_point = Point2D.from_any(start_control_point)
        self._end_control_point = Point2D.from_any(end_control_point)

        self._curve_intervals: int = 0
        self._segment_cache: Tuple[Point2D, ...] = ()
        self._segment_lengths: Tuple[float, ...] = ()
        self._arc_length: float = 0.0
        self.recompute_arc_length(curve_intervals)

    ###########################################################################
    # Points
    ###########################################################################

    @property
    def start_point(self) -> Point2D:
        """Point2D: The start point of the curve."""
        return self._start_point

    @property
    def end_point(self) -> Point2D:
        """Point2D: The end point of the curve."""
        return self._end_point

    @property
    def start_control_point(self) -> Point2D:
        """Point2D: The control point next to the start point."""
        return self._start_control_point

    @property
    def end_control_point(self) -> Point2D:
        """Point2D: The control point next to the end point."""
        return self._end_control_point

    @property
    def control_points(self) -> NDArray[np.float64]:
        """Array of shape (4, 2) in Bernstein order: start, start control, end control, end."""
        return np.array(
            [self._start_point, self._start_control_point, self._end_control_point, self._end_point],
            dtype=np.float64,
        )

    def point_by_id(self, point_id: int) -> Point2D:
        """Get one of the four curve points by one of the START_POINT, START_CONTROL_POINT,
        END_CONTROL_POINT or END_POINT constants."""
        if point_id == self.START_POINT:
            return self._start_point
        if point_id == self.START_CONTROL_POINT:
            return self._start_control_point
        if point_id == self.END_CONTROL_POINT:
            return self._end_control_point
        if point_id == self.END_POINT:
            return self._end_point
        raise InvalidInputError(f"Invalid point ID '{point_id}'")

    ###########################################################################
    # Evaluation
    ###########################################################################

    def point_at(self, t: float) -> Point2D:
        """
        Get the curve point at the parameter t.

        t is expected in [0, 1] (0 is the start point, 1 the end point) but is not clamped.
        """
        p0, p1, p2, p3 = self._start_point, self._start_control_point, self._end_control_point, self._end_point
        omt = 1.0 - t
        omt2 = omt * omt
        omt3 = omt2 * omt
        t2 = t * t
        t3 = t2 * t
        x = omt3 * p0.x + 3.0 * omt2 * t * p1.x + 3.0 * omt * t2 * p2.x + t3 * p3.x
        y = omt3 * p0.y + 3.0 * omt2 * t * p1.y + 3.0 * omt * t2 * p2.y + t3 * p3.y
        return Point2D(x, y)

    def points_at(self, t: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """
        Evaluate the curve at many parameters at once.

        Returns:
            NDArray[np.float64] of shape (len(t), 2)
        """
        t = np.asarray(t, dtype=np.float64)
        points_array = self.control_points

        # Cubic Bezier basis functions
        omt = 1 - t
        omt2 = omt**2
        omt3 = omt2 * omt
        t2 = t**2
        t3 = t2 * t

        result = np.empty((len(t), 2), dtype=np.float64)
        result[:, 0] = (
            omt3 * points_array[0, 0]
            + 3 * omt2 * t * points_array[1, 0]
            + 3 * omt * t2 * points_array[2, 0]
            + t3 * points_array[3, 0]
        )
        result[:, 1] = (
            omt3 * points_array[0, 1]
            + 3 * omt2 * t * points_array[1, 1]
            + 3 * omt * t2 * points_array[2, 1]
            + t3 * points_array[3, 1]
        )
        return result

    def tangent_at(self, t: float) -> Point2D:
        """
        Get the (not normalized) tangent vector at the parameter t, i.e. the first derivative.
        """
        a, b, c, d = self._start_point, self._start_control_point, self._end_control_point, self._end_point
        t2 = t * t
        # (1-t)^2 = 1 - 2t + t^2
        nt2 = 1 - 2 * t + t2
        tx = -3 * a.x * nt2 + b.x * (3 * nt2 - 6 * (t - t2)) + c.x * (6 * (t - t2) - 3 * t2) + 3 * d.x * t2
        ty = -3 * a.y * nt2 + b.y * (3 * nt2 - 6 * (t - t2)) + c.y * (6 * (t - t2) - 3 * t2) + 3 * d.y * t2
        return Point2D(tx, ty)

    def perpendicular_at(self, t: float) -> Point2D:
        """Get the (not normalized) perpendicular vector at the parameter t."""
        tangent = self.tangent_at(t)
        return Point2D(tangent.y, -tangent.x)

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Polygonize the curve into `steps` line segments.

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the evenly (in t) spaced curve points
        """
        if steps < 1:
            raise InvalidInputError(f"steps must be at least 1, got {steps}")
        result = self.points_at(np.linspace(0.0, 1.0, steps + 1, dtype=np.float64))
        # first and last sample are the curve end points, bit for bit
        result[0] = self._start_point
        result[-1] = self._end_point
        return result

    ###########################################################################
    # Arc length
    ###########################################################################

    def recompute_arc_length(self, curve_intervals: Optional[int] = None) -> None:
        """
        Re-sample the curve and update the arc length cache.

        The curve is sampled at curve_intervals+1 evenly spaced parameters; the
        sampled points are stored in segment_cache, the distances between them in
        segment_lengths and their sum in length.

        Args:
            curve_intervals: New number of intervals; None keeps the current one.
        """
        if curve_intervals is None:
            curve_intervals = self._curve_intervals
        if curve_intervals < 1:
            raise InvalidInputError(f"curve_intervals must be at least 1, got {curve_intervals}")

        samples = self.polygonize(curve_intervals)
        deltas = np.diff(samples, axis=0)
        lengths = np.hypot(deltas[:, 0], deltas[:, 1])

        self._curve_intervals = curve_intervals
        self._segment_cache = tuple(Point2D(float(x), float(y)) for x, y in samples)
        self._segment_lengths = tuple(float(length) for length in lengths)
        self._arc_length = float(np.sum(lengths))

    @property
    def curve_intervals(self) -> int:
        """int: Number of intervals of the arc length sampling."""
        return self._curve_intervals

    @property
    def length(self) -> float:
        """float: The approximated arc length of the curve."""
        return self._arc_length

    @property
    def segment_cache(self) -> Tuple[Point2D, ...]:
        """The sampled curve points (curve_intervals+1 of them)."""
        return self._segment_cache

    @property
    def segment_lengths(self) -> Tuple[float, ...]:
        """The lengths of the sampled intervals."""
        return self._segment_lengths

    def convert_u2t(self, u: float) -> float:
        """Convert an arc length position u in [0, length] into a curve parameter t in [0, 1]."""
        if self._arc_length == 0:
            return 0.0
        return max(0.0, min(1.0, u / self._arc_length))

    def point(self, u: float) -> Point2D:
        """Get the curve point at the arc length position u in [0, length]."""
        return self.point_at(self.convert_u2t(u))

    def tangent(self, u: float) -> Point2D:
        """Get the (not normalized) tangent at the arc length position u in [0, length]."""
        return self.tangent_at(self.convert_u2t(u))

    def perpendicular(self, u: float) -> Point2D:
        """Get the (not normalized) perpendicular at the arc length position u in [0, length]."""
        return self.perpendicular_at(self.convert_u2t(u))

    def bounds(self) -> BoundingBox:
        """Bounding box approximated by the sampled curve points."""
        return BoundingBox.from_points(self._segment_cache)

    ###########################################################################
    # Search and subdivision
    ###########################################################################

    def closest_parameter(
        self,
        point: PointLike,
        epsilon: float = CLOSEST_T_EPSILON,
        max_iterations: int = CLOSEST_T_MAX_ITERATIONS,
    ) -> float:
        """
        Get the parameter t in [0, 1] whose curve point is closest to the given point.

        The curve is cut into curve_intervals linear steps; the interval around the
        closest sample is then searched again, until the curve points bracketing the
        interval are not farther apart than epsilon or max_iterations is reached.

        Args:
            point: The point to find the closest curve position for
            epsilon: Absolute distance (coordinate units) between the bracketing curve points
            max_iterations: Maximal number of refinements

        Returns:
            float: The best parameter t found
        """
        target = np.asarray(Point2D.from_any(point), dtype=np.float64)
        t_best, t_prev, t_next = 0.0, 0.0, 1.0
        iteration = 0
        while True:
            t_best, t_prev, t_next = self._locate_interval_by_distance(target, t_prev, t_next, self._curve_intervals)
            iteration += 1
            if iteration >= max_iterations or self.point_at(t_prev).distance(self.point_at(t_next)) <= epsilon:
                break
        return t_best

    def _locate_interval_by_distance(
        self, target: NDArray[np.float64], t_start: float, t_end: float, step_count: int
    ) -> Tuple[float, float, float]:
        """Return (t, t_prev, t_next) of the closest of step_count+1 samples in [t_start, t_end]."""
        t_diff = t_end - t_start
        steps = np.arange(step_count + 1, dtype=np.float64)
        samples = self.points_at(t_start + t_diff * (steps / step_count))
        distances = np.hypot(samples[:, 0] - target[0], samples[:, 1] - target[1])
        min_index = int(np.argmin(distances))
        return (
            t_start + t_diff * (min_index / step_count),
            t_start + t_diff * (max(0, min_index - 1) / step_count),
            t_start + t_diff * (min(step_count, min_index + 1) / step_count),
        )

    def subdivide(self, t_start: float, t_end: float) -> CubicBezierCurve:
        """
        Get the sub curve between the parameters t_start and t_end as a new curve.

        t_start > t_end is allowed and results in a reversed sub curve.
        """
        scale = (t_end - t_start) / 3.0
        start = self.point_at(t_start)
        end = self.point_at(t_end)
        start_tangent = self.tangent_at(t_start)
        end_tangent = self.tangent_at(t_end)
        start_control = Point2D(start.x + start_tangent.x * scale, start.y + start_tangent.y * scale)
        end_control = Point2D(end.x - end_tangent.x * scale, end.y - end_tangent.y * scale)
        return CubicBezierCurve(start, end, start_control, end_control, self._curve_intervals)

    ###########################################################################
    # Derived curves
    ###########################################################################

    def with_points(
        self,
        start_point: Optional[PointLike] = None,
        end_point: Optional[PointLike] = None,
        start_control_point: Optional[PointLike] = None,
        end_control_point: Optional[PointLike] = None,
    ) -> CubicBezierCurve:
        """New curve with the given points replaced; points passed as None are kept."""
        return CubicBezierCurve(
            self._start_point if start_point is None else start_point,
            self._end_point if end_point is None else end_point,
            self._start_control_point if start_control_point is None else start_control_point,
            self._end_control_point if end_control_point is None else end_control_point,
            self._curve_intervals,
        )

    def move_curve_point(self, point_id: int, amount: PointLike, move_control_point: bool = False) -> CubicBezierCurve:
        """
        New curve with one point moved by amount.

        Args:
            point_id: One of START_POINT, START_CONTROL_POINT, END_CONTROL_POINT or END_POINT
            amount: The (dx, dy) to move the point by
            move_control_point: Also move the control point of a moved start or end point
        """
        dx, dy = Point2D.from_any(amount)
        moved = self.point_by_id(point_id)
        moved = Point2D(moved.x + dx, moved.y + dy)
        if point_id == self.START_POINT:
            control = self._start_control_point
            if move_control_point:
                control = Point2D(control.x + dx, control.y + dy)
            return self.with_points(start_point=moved, start_control_point=control)
        if point_id == self.END_POINT:
            control = self._end_control_point
            if move_control_point:
                control = Point2D(control.x + dx, control.y + dy)
            return self.with_points(end_point=moved, end_control_point=control)
        if point_id == self.START_CONTROL_POINT:
            return self.with_points(start_control_point=moved)
        return self.with_points(end_control_point=moved)

    def transform_affine(self, affine_trafo: Sequence[Union[int, float]]) -> CubicBezierCurve:
        """New curve with all four points transformed by [a00, a01, a10, a11, b0, b1]."""
        return CubicBezierCurve(
            GeomMath.transform_point(affine_trafo, self._start_point),
            GeomMath.transform_point(affine_trafo, self._end_point),
            GeomMath.transform_point(affine_trafo, self._start_control_point),
            GeomMath.transform_point(affine_trafo, self._end_control_point),
            self._curve_intervals,
        )

    def translate(self, amount: PointLike) -> CubicBezierCurve:
        """New curve with all four points moved by amount."""
        dx, dy = Point2D.from_any(amount)
        return self.transform_affine((1, 0, 0, 1, dx, dy))

    def reverse(self) -> CubicBezierCurve:
        """New curve running the other way: start/end and their control points swapped."""
        return CubicBezierCurve(
            self._end_point,
            self._start_point,
            self._end_control_point,
            self._start_control_point,
            self._curve_intervals,
        )

    ###########################################################################
    # Comparison
    ###########################################################################

    def _points(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        return (self._start_point, self._end_point, self._start_control_point, self._end_control_point)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubicBezierCurve):
            return NotImplemented
        return self._points() == other._points()

    def __hash__(self) -> int:
        return hash(self._points())

    def approx_equal(self, other: CubicBezierCurve, rtol: float = DEFAULT_RTOL, atol: float = DEFAULT_ATOL) -> bool:
        """True if all four points of both curves agree within the given tolerances."""
        if not isinstance(other, CubicBezierCurve):
            return False
        return bool(np.allclose(self.control_points, other.control_points, rtol=rtol, atol=atol))

    def __repr__(self) -> str:
        return (
            f"CubicBezierCurve(start_point={tuple(self._start_point)}, end_point={tuple(self._end_point)}, "
            f"start_control_point={tuple(self._start_control_point)}, "
            f"end_control_point={tuple(self._end_control_point)})"
        )

    ###########################################################################
    # Export and serialization
    ###########################################################################

    def to_path_string(self, move_to: bool = True) -> str:
        """
        SVG path data of this curve: 'M x0 y0 C cx1 cy1 cx2 cy2 x1 y1'.

        Args:
            move_to: If False, omit the leading MoveTo (used when chaining segments)
        """
        cubic = " ".join(
            format_number(value)
            for value in (
                self._start_control_point.x,
                self._start_control_point.y,
                self._end_control_point.x,
                self._end_control_point.y,
                self._end_point.x,
                self._end_point.y,
            )
        )
        if not move_to:
            return f"C {cubic}"
        return f"M {format_number(self._start_point.x)} {format_number(self._start_point.y)} C {cubic}"

    def to_dict(self) -> dict:
        """Convert the curve to a dictionary of 2-element lists."""
        return {key: [point.x, point.y] for key, point in zip(_SERIALIZED_KEYS, self._points())}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CubicBezierCurve:
        """
        Create a curve from a dictionary with the keys startPoint, endPoint,
        startControlPoint and endControlPoint, each a 2-element numeric array.

        Raises:
            InvalidInputError: If data is no mapping, a key is missing or a value is malformed.
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError("Can only build a curve from a mapping")
        points = []
        for key in _SERIALIZED_KEYS:
            if key not in data or data[key] is None:
                raise InvalidInputError(f'Member "{key}" missing')
            try:
                point = Point2D.from_any(data[key])
            except (TypeError, ValueError) as error:
                raise InvalidInputError(f'Member "{key}" is not a 2-element numeric array') from error
            points.append(point)
        return cls(*points)

    def to_json(self, pretty: bool = False) -> str:
        """Convert the curve to a JSON string (see to_dict)."""
        return json.dumps(self.to_dict(), indent=2 if pretty else None)

    @classmethod
    def from_json(cls, json_string: str) -> CubicBezierCurve:
        """Parse a curve from a JSON string (see from_dict)."""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as error:
            raise InvalidInputError(f"Malformed JSON: {error}") from error
        return cls.from_dict(data)

    @classmethod
    def from_array(cls, points: Sequence[PointLike]) -> CubicBezierCurve:
        """Create a curve from [start_point, end_point, start_control_point, end_control_point]."""
        if len(points) != 4:
            raise InvalidInputError(f"Can only build from an array with four elements, got {len(points)}")
        return cls(points[0], points[1], points[2], points[3])


def main():
    """Main"""
    curve = CubicBezierCurve((0.0, 0.0), (200.0, 0.0), (50.0, 200.0), (150.0, -100.0))
    print(curve.to_path_string())
    print("length:", curve.length)
    print("closest t to (100, 50):", curve.closest_parameter((100.0, 50.0)))


if __name__ == "__main__":
    main()
