"""Test module for CubicBezierCurve in bezierfit.bezier

The tests are run using pytest.
These tests ensure that evaluation, arc length sampling, search,
subdivision, derived curves and serialization of cubic curves
remain working correctly after changes and refactoring.
"""

import json

import numpy as np
import pytest

from bezierfit.bezier import CubicBezierCurve
from bezierfit.common import Point2D
from bezierfit.errors import InvalidInputError


@pytest.fixture
def arch():
    """Symmetric arch from (0,0) to (10,0) with its highest point (5, 7.5) at t=0.5."""
    return CubicBezierCurve((0.0, 0.0), (10.0, 0.0), (0.0, 10.0), (10.0, 10.0))


@pytest.fixture
def line():
    """Straight line from (0,0) to (30,0) with evenly spaced control points, i.e. x = 30*t."""
    return CubicBezierCurve((0.0, 0.0), (30.0, 0.0), (10.0, 0.0), (20.0, 0.0))


###############################################################################
# Evaluation
###############################################################################


class TestEvaluation:
    """Test point, tangent and perpendicular evaluation."""

    def test_end_points(self, arch):
        """Test that t=0 and t=1 give the start and end point."""
        assert np.allclose(arch.point_at(0.0), arch.start_point, rtol=0, atol=1e-9)
        assert np.allclose(arch.point_at(1.0), arch.end_point, rtol=0, atol=1e-9)

    def test_mid_point(self, arch):
        """Test the Bernstein evaluation at t=0.5."""
        assert arch.point_at(0.5) == pytest.approx((5.0, 7.5))

    def test_points_at_matches_point_at(self, arch):
        """Test that the vectorized evaluation equals the scalar one."""
        ts = [0.0, 0.1, 0.25, 0.5, 0.8, 1.0]

        result = arch.points_at(ts)

        assert result.shape == (len(ts), 2)
        for row, t in zip(result, ts):
            assert np.allclose(row, arch.point_at(t), rtol=0, atol=1e-12), f"Mismatch at t={t}"

    def test_tangent_at_ends(self, arch):
        """Test that the end tangents point along the control point handles."""
        assert arch.tangent_at(0.0) == pytest.approx((0.0, 30.0))
        assert arch.tangent_at(1.0) == pytest.approx((0.0, -30.0))

    def test_perpendicular_at(self, arch):
        """Test that the perpendicular is the tangent turned clockwise."""
        tangent = arch.tangent_at(0.3)
        perpendicular = arch.perpendicular_at(0.3)

        assert perpendicular == pytest.approx((tangent.y, -tangent.x))
        assert tangent.x * perpendicular.x + tangent.y * perpendicular.y == pytest.approx(0.0, abs=1e-9)

    def test_polygonize_ends_are_exact(self, arch):
        """Test that polygonize starts and ends exactly on the curve end points."""
        samples = arch.polygonize(7)

        assert samples.shape == (8, 2)
        assert tuple(samples[0]) == tuple(arch.start_point)
        assert tuple(samples[-1]) == tuple(arch.end_point)

    def test_polygonize_invalid_steps(self, arch):
        """Test that less than one step is rejected."""
        with pytest.raises(InvalidInputError):
            arch.polygonize(0)


###############################################################################
# Arc length
###############################################################################


class TestArcLength:
    """Test the arc length sampling cache."""

    def test_straight_line_length(self):
        """Test the length of a straight line with control points on its end points."""
        curve = CubicBezierCurve((0.0, 0.0), (10.0, 0.0), (0.0, 0.0), (10.0, 0.0))

        assert curve.length == pytest.approx(10.0, abs=1e-9)

    def test_cache_sizes(self, arch):
        """Test the sizes of the cached samples and interval lengths."""
        assert arch.curve_intervals == 30
        assert len(arch.segment_cache) == 31
        assert len(arch.segment_lengths) == 30
        assert sum(arch.segment_lengths) == pytest.approx(arch.length)

    def test_recompute_is_idempotent(self, arch):
        """Test that recomputing twice without changes keeps the same values."""
        arch.recompute_arc_length()
        first_length = arch.length
        first_cache = arch.segment_cache

        arch.recompute_arc_length()

        assert arch.length == first_length
        assert arch.segment_cache == first_cache

    def test_recompute_with_more_intervals(self, arch):
        """Test that a finer sampling never gives a shorter polyline."""
        coarse = arch.length

        arch.recompute_arc_length(60)

        assert arch.curve_intervals == 60
        assert len(arch.segment_cache) == 61
        assert arch.length >= coarse

    def test_recompute_invalid_intervals(self, arch):
        """Test that less than one interval is rejected."""
        with pytest.raises(InvalidInputError):
            arch.recompute_arc_length(0)

    def test_convert_u2t_clamps(self, arch):
        """Test the conversion of arc length positions into parameters."""
        assert arch.convert_u2t(-1.0) == 0.0
        assert arch.convert_u2t(arch.length / 2) == pytest.approx(0.5)
        assert arch.convert_u2t(arch.length * 2) == 1.0

    def test_convert_u2t_zero_length(self):
        """Test that a curve collapsed to a point maps every position to t=0."""
        curve = CubicBezierCurve((1.0, 1.0), (1.0, 1.0), (1.0, 1.0), (1.0, 1.0))

        assert curve.length == 0.0
        assert curve.convert_u2t(5.0) == 0.0

    def test_point_by_arc_length(self, arch):
        """Test point(u) at both ends."""
        assert arch.point(0.0) == pytest.approx(tuple(arch.start_point))
        assert arch.point(arch.length) == pytest.approx(tuple(arch.end_point))
        assert arch.tangent(0.0) == pytest.approx(tuple(arch.tangent_at(0.0)))
        assert arch.perpendicular(0.0) == pytest.approx(tuple(arch.perpendicular_at(0.0)))

    def test_bounds(self, arch):
        """Test the bounding box of the sampled curve."""
        box = arch.bounds()

        assert box.xmin == pytest.approx(0.0)
        assert box.ymin == pytest.approx(0.0)
        assert box.xmax == pytest.approx(10.0)
        assert box.ymax == pytest.approx(7.5)


###############################################################################
# Search and subdivision
###############################################################################


class TestSearchAndSubdivision:
    """Test closest_parameter and subdivide."""

    def test_closest_parameter_middle(self, line):
        """Test the closest parameter of a point above the line center."""
        assert line.closest_parameter((15.0, 5.0)) == pytest.approx(0.5, abs=1e-9)

    def test_closest_parameter_beyond_ends(self, line):
        """Test that points beyond the ends map to t=0 and t=1."""
        assert line.closest_parameter((100.0, 0.0)) == pytest.approx(1.0)
        assert line.closest_parameter((-5.0, 0.0)) == pytest.approx(0.0)

    def test_closest_parameter_on_arch(self, arch):
        """Test that the found parameter lies close to the real foot point."""
        t = arch.closest_parameter((5.0, 20.0), epsilon=0.01, max_iterations=10)

        assert t == pytest.approx(0.5, abs=1e-3)

    def test_subdivide_full_range(self, arch):
        """Test that subdividing [0, 1] reproduces the curve."""
        sub = arch.subdivide(0.0, 1.0)

        assert sub.approx_equal(arch, rtol=0, atol=1e-9)

    def test_subdivide_reversed_range(self, arch):
        """Test that subdividing [1, 0] gives the reversed curve."""
        sub = arch.subdivide(1.0, 0.0)

        assert sub.approx_equal(arch.reverse(), rtol=0, atol=1e-9)

    def test_subdivide_half(self, arch):
        """Test that the first half follows the original curve with halved parameters."""
        sub = arch.subdivide(0.0, 0.5)

        for s in [0.0, 0.2, 0.5, 0.7, 1.0]:
            assert np.allclose(sub.point_at(s), arch.point_at(0.5 * s), rtol=0, atol=1e-9), f"Mismatch at s={s}"


###############################################################################
# Derived curves
###############################################################################


class TestDerivedCurves:
    """Test the methods returning new curves."""

    def test_points_are_read_only(self, arch):
        """Test that the curve points cannot be assigned."""
        with pytest.raises(AttributeError):
            arch.start_point = (1.0, 1.0)

    def test_point_by_id(self, arch):
        """Test the access by point ID."""
        assert arch.point_by_id(CubicBezierCurve.START_POINT) == (0.0, 0.0)
        assert arch.point_by_id(CubicBezierCurve.START_CONTROL_POINT) == (0.0, 10.0)
        assert arch.point_by_id(CubicBezierCurve.END_CONTROL_POINT) == (10.0, 10.0)
        assert arch.point_by_id(CubicBezierCurve.END_POINT) == (10.0, 0.0)
        with pytest.raises(InvalidInputError):
            arch.point_by_id(4)

    def test_control_points_order(self, arch):
        """Test that control_points uses Bernstein order."""
        assert arch.control_points.tolist() == [[0.0, 0.0], [0.0, 10.0], [10.0, 10.0], [10.0, 0.0]]

    def test_move_start_point_with_control(self, arch):
        """Test moving the start point together with its control point."""
        moved = arch.move_curve_point(CubicBezierCurve.START_POINT, (1.0, 2.0), move_control_point=True)

        assert moved.start_point == (1.0, 2.0)
        assert moved.start_control_point == (1.0, 12.0)
        assert moved.end_point == arch.end_point
        assert arch.start_point == (0.0, 0.0), "The original curve must stay unchanged"

    def test_move_end_point_without_control(self, arch):
        """Test moving the end point alone."""
        moved = arch.move_curve_point(CubicBezierCurve.END_POINT, (1.0, 2.0))

        assert moved.end_point == (11.0, 2.0)
        assert moved.end_control_point == arch.end_control_point

    def test_move_control_point(self, arch):
        """Test moving a control point."""
        moved = arch.move_curve_point(CubicBezierCurve.END_CONTROL_POINT, (-1.0, 0.0))

        assert moved.end_control_point == (9.0, 10.0)
        assert moved.length != arch.length

    def test_with_points(self, arch):
        """Test replacing some points and keeping the others."""
        changed = arch.with_points(end_point=(20.0, 0.0))

        assert changed.end_point == (20.0, 0.0)
        assert changed.start_control_point == arch.start_control_point
        assert changed.length > arch.length

    def test_translate(self, arch):
        """Test that translating moves all four points and keeps the length."""
        moved = arch.translate((5.0, -5.0))

        assert moved.control_points.tolist() == [[5.0, -5.0], [5.0, 5.0], [15.0, 5.0], [15.0, -5.0]]
        assert moved.length == pytest.approx(arch.length)

    def test_transform_affine_scale(self, arch):
        """Test that scaling by 2 doubles the length."""
        scaled = arch.transform_affine((2, 0, 0, 2, 0, 0))

        assert scaled.end_point == (20.0, 0.0)
        assert scaled.length == pytest.approx(2 * arch.length)

    def test_reverse(self, arch):
        """Test that the reversed curve runs the other way."""
        reversed_curve = arch.reverse()

        assert reversed_curve.start_point == arch.end_point
        assert reversed_curve.start_control_point == arch.end_control_point
        assert np.allclose(reversed_curve.point_at(0.25), arch.point_at(0.75), rtol=0, atol=1e-12)
        assert reversed_curve.reverse() == arch


###############################################################################
# Comparison
###############################################################################


class TestComparison:
    """Test equality, hashing and approximate comparison."""

    def test_equal_curves(self, arch):
        """Test that curves with equal points are equal and hash equally."""
        other = CubicBezierCurve((0, 0), (10, 0), (0, 10), (10, 10))

        assert other == arch
        assert hash(other) == hash(arch)

    def test_unequal_curves(self, arch):
        """Test that a moved curve is not equal but approximately equal for a large tolerance."""
        other = arch.translate((1e-6, 0.0))

        assert other != arch
        assert not other.approx_equal(arch)
        assert other.approx_equal(arch, rtol=0, atol=1e-5)

    def test_approx_equal_other_type(self, arch):
        """Test that comparing with another type is False."""
        assert not arch.approx_equal("curve")
        assert arch != "curve"


###############################################################################
# Export and serialization
###############################################################################


class TestSerialization:
    """Test path data export, dictionaries and JSON."""

    def test_path_string_integral(self):
        """Test that integral coordinates are written without decimals."""
        curve = CubicBezierCurve((0.0, 0.0), (10.0, 0.0), (0.0, 0.0), (10.0, 0.0))

        assert curve.to_path_string() == "M 0 0 C 0 0 10 0 10 0"

    def test_path_string_without_move_to(self):
        """Test the path data of a chained segment."""
        curve = CubicBezierCurve((0.0, 0.0), (10.0, 0.0), (0.0, 0.0), (10.0, 0.0))

        assert curve.to_path_string(move_to=False) == "C 0 0 10 0 10 0"

    def test_path_string_fractional(self):
        """Test that fractional coordinates keep their decimals."""
        curve = CubicBezierCurve((0.5, 1.25), (3.0, 4.0), (1.0, 2.0), (2.5, -3.0))

        assert curve.to_path_string() == "M 0.5 1.25 C 1 2 2.5 -3 3 4"

    def test_dict_round_trip(self, arch):
        """Test that from_dict restores a curve written by to_dict."""
        data = arch.to_dict()

        assert data == {
            "startPoint": [0.0, 0.0],
            "endPoint": [10.0, 0.0],
            "startControlPoint": [0.0, 10.0],
            "endControlPoint": [10.0, 10.0],
        }
        assert CubicBezierCurve.from_dict(data) == arch

    @pytest.mark.parametrize("key", ["startPoint", "endPoint", "startControlPoint", "endControlPoint"])
    def test_from_dict_missing_key(self, arch, key):
        """Test that every missing member is reported."""
        data = arch.to_dict()
        del data[key]

        with pytest.raises(InvalidInputError, match=key):
            CubicBezierCurve.from_dict(data)

    def test_from_dict_null_member(self, arch):
        """Test that a null member counts as missing."""
        data = arch.to_dict()
        data["endPoint"] = None

        with pytest.raises(InvalidInputError, match="endPoint"):
            CubicBezierCurve.from_dict(data)

    @pytest.mark.parametrize("value", [[1.0], [1.0, 2.0, 3.0], ["a", "b"], 5, {"x": 0, "y": 0}, "00"])
    def test_from_dict_malformed_member(self, arch, value):
        """Test that members which are no 2-element numeric arrays are rejected."""
        data = arch.to_dict()
        data["startPoint"] = value

        with pytest.raises(InvalidInputError):
            CubicBezierCurve.from_dict(data)

    def test_from_dict_no_mapping(self):
        """Test that only mappings are accepted."""
        with pytest.raises(InvalidInputError):
            CubicBezierCurve.from_dict([[0, 0], [1, 1], [0, 1], [1, 0]])

    def test_json_round_trip(self, arch):
        """Test that from_json restores a curve written by to_json."""
        text = arch.to_json(pretty=True)

        assert json.loads(text)["endControlPoint"] == [10.0, 10.0]
        assert CubicBezierCurve.from_json(text) == arch

    def test_from_json_malformed(self):
        """Test that broken JSON is reported as invalid input."""
        with pytest.raises(InvalidInputError):
            CubicBezierCurve.from_json('{"startPoint": [0, 0]')

    def test_from_array(self, arch):
        """Test building a curve from [start, end, start control, end control]."""
        curve = CubicBezierCurve.from_array([(0, 0), (10, 0), (0, 10), (10, 10)])

        assert curve == arch
        assert isinstance(curve.start_point, Point2D)

    def test_from_array_wrong_size(self):
        """Test that arrays without exactly four points are rejected."""
        with pytest.raises(InvalidInputError):
            CubicBezierCurve.from_array([(0, 0), (10, 0), (0, 10)])
