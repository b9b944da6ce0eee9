"""Tests for reductions involving quadratic and cubic Bezier curves."""
import math

import pytest

from intersect2d.core.intersect import (
    bezier2_bezier2,
    bezier2_bezier3,
    bezier3_bezier3,
    bezier3_self,
    circle_bezier2,
    circle_bezier3,
    ellipse_bezier2,
    ellipse_bezier3,
    line_bezier2,
    line_bezier3,
    segment_bezier2,
    segment_bezier3,
)
from intersect2d.core.primitives import Circle, CubicBezier, Ellipse, Line, Point, QuadraticBezier, Segment

ARCH = QuadraticBezier(((0, 0), (1, 2), (2, 0)))            # x = 2t, y = 4t(1 - t)
WAVE = CubicBezier(((0, 0), (1, 3), (2, -3), (3, 0)))       # x = 3t, y = 9t(1 - t)(1 - 2t)
# straight curves with a non-uniform (smoothstep) parametrisation
EASED3 = CubicBezier(((-2, 0), (-2, 0), (2, 0), (2, 0)))
EASED2 = QuadraticBezier(((-2, 0), (-2, 0), (2, 0)))
# top of the first WAVE lobe: y = sqrt(3)/2 at t = (3 - sqrt(3))/6
WAVE_TOP_T = (3.0 - math.sqrt(3.0)) / 6.0
WAVE_TOP = Point(3.0 * WAVE_TOP_T, math.sqrt(3.0) / 2.0)


def _sorted(points):
    ordered = sorted(points, key=lambda p: (round(p[0], 9), round(p[1], 9)))
    return [c for p in ordered for c in p]


def _assert_parameters_consistent(result, first, second, tol=1e-7):
    """Each reported parameter maps back onto its point; pass None for a line."""
    for p, (ta, tb) in zip(result, result.parameters):
        for curve, t in ((first, ta), (second, tb)):
            if curve is None:
                assert t is None
                continue
            if isinstance(curve, (Circle, Ellipse)):
                assert 0.0 <= t < 2.0 * math.pi
            else:
                assert 0.0 <= t <= 1.0
            q = curve.point_at(t)
            assert math.hypot(q.x - p.x, q.y - p.y) < tol


class TestLineBezier:
    """Test line_bezier2/3 and segment_bezier2/3."""

    def test_horizontal_line_crosses_arch_twice(self):
        result = line_bezier2(Line(0, 1, -0.5), ARCH)
        assert len(result) == 2
        for p in result:
            assert p.y == pytest.approx(0.5)
            assert 0.0 < p.x < 2.0
        assert _sorted(result) == pytest.approx(
            _sorted([(1 - math.sqrt(0.5), 0.5), (1 + math.sqrt(0.5), 0.5)]))

    def test_line_tangent_to_apex_reports_double_root_once(self):
        # y(t) = 4t(1 - t) peaks at exactly 1, so y = 1 touches the arch at t = 0.5
        result = line_bezier2(Line(0, 1, -1), ARCH)
        assert len(result) == 1
        assert result[0] == pytest.approx(Point(1.0, 1.0))

    def test_line_above_arch(self):
        assert len(line_bezier2(Line(0, 1, -2), ARCH)) == 0

    def test_line_through_cubic_three_times(self):
        result = line_bezier3(Line(0, 1, 0), WAVE)
        assert _sorted(result) == pytest.approx([0.0, 0.0, 1.5, 0.0, 3.0, 0.0], abs=1e-9)
        _assert_parameters_consistent(result, None, WAVE)

    def test_vertical_segment_against_arch(self):
        result = segment_bezier2(Segment((1, -1), (1, 2)), ARCH)
        assert len(result) == 1
        assert result[0] == pytest.approx(Point(1.0, 1.0))
        assert result.parameters[0] == pytest.approx((2.0 / 3.0, 0.5))

    def test_segment_too_short(self):
        assert len(segment_bezier2(Segment((1, -1), (1, 0.5)), ARCH)) == 0

    def test_segment_against_cubic(self):
        result = segment_bezier3(Segment((0, 0.5), (3, 0.5)), WAVE)
        assert len(result) == 2
        for p, (s, t) in zip(result, result.parameters):
            assert p.y == pytest.approx(0.5)
            assert s == pytest.approx(p.x / 3.0)
            tau = t
            assert 9 * tau * (1 - tau) * (1 - 2 * tau) == pytest.approx(0.5)

    def test_curve_on_line_is_degenerate(self):
        assert len(line_bezier3(Line(0, 1, 0), EASED3)) == 0

    def test_wrong_curve_type(self):
        with pytest.raises(TypeError):
            line_bezier2(Line(0, 1, 0), WAVE)


class TestConicBezier:
    """Test circle/ellipse against Bezier curves."""

    def test_circle_quadratic(self):
        result = circle_bezier2(Circle((0, 0), 1), EASED2)
        assert _sorted(result) == pytest.approx([-1.0, 0.0, 1.0, 0.0], abs=1e-9)
        _assert_parameters_consistent(result, Circle((0, 0), 1), EASED2)

    def test_circle_quadratic_parameters(self):
        result = circle_bezier2(Circle((0, 0), 1), EASED2)
        by_x = {round(p.x): params for p, params in zip(result, result.parameters)}
        assert by_x[-1] == pytest.approx((math.pi, 0.5))
        assert by_x[1] == pytest.approx((0.0, math.sqrt(0.75)))

    def test_circle_cubic_degree_six(self):
        result = circle_bezier3(Circle((0, 0), 1), EASED3)
        assert result.converged
        assert _sorted(result) == pytest.approx([-1.0, 0.0, 1.0, 0.0], abs=1e-9)
        for _, t in result.parameters:
            s = 3 * t * t - 2 * t ** 3
            assert s == pytest.approx(0.25) or s == pytest.approx(0.75)

    def test_circle_misses_curve(self):
        assert len(circle_bezier3(Circle((0, 5), 1), EASED3)) == 0

    def test_ellipse_quadratic(self):
        curve = QuadraticBezier(((-3, 0), (-3, 0), (3, 0)))
        result = ellipse_bezier2(Ellipse((0, 0), 2.0, 1.0), curve)
        assert _sorted(result) == pytest.approx([-2.0, 0.0, 2.0, 0.0], abs=1e-9)

    def test_ellipse_cubic(self):
        curve = CubicBezier(((-3, 0), (-3, 0), (3, 0), (3, 0)))
        result = ellipse_bezier3(Ellipse((0, 0), 2.0, 1.0), curve)
        assert result.converged
        assert _sorted(result) == pytest.approx([-2.0, 0.0, 2.0, 0.0], abs=1e-9)

    def test_rotated_ellipse_cubic_points_lie_on_both(self):
        ellipse = Ellipse((0.5, 0.2), 2.0, 0.8, 0.6)
        result = ellipse_bezier3(ellipse, WAVE)
        assert len(result) >= 1
        for p in result:
            u, v = ellipse.to_circle_frame(p)
            assert math.hypot(u, v) == pytest.approx(ellipse.a * ellipse.b, abs=1e-7)
        _assert_parameters_consistent(result, ellipse, WAVE)


class TestConicBezierTangency:
    """A conic touching a curve gives exactly one point at the double root."""

    def _assert_single_contact(self, result, point, t):
        assert result.converged
        assert len(result) == 1
        assert result[0] == pytest.approx(point, abs=1e-6)
        assert result.parameters[0][1] == pytest.approx(t, abs=1e-6)

    def test_circle_on_quadratic_apex(self):
        # |B(t) - C|^2 - 1 = 16 s^4 + 12 s^2 with s = t - 1/2
        result = circle_bezier2(Circle((1, 2), 1), ARCH)
        self._assert_single_contact(result, Point(1.0, 1.0), 0.5)
        assert result.parameters[0][0] == pytest.approx(1.5 * math.pi)

    def test_ellipse_on_quadratic_apex(self):
        result = ellipse_bezier2(Ellipse((1, 1.5), 1.0, 0.5), ARCH)
        self._assert_single_contact(result, Point(1.0, 1.0), 0.5)

    def test_circle_on_cubic_lobe(self):
        circle = Circle((WAVE_TOP.x, WAVE_TOP.y + 1.0), 1.0)
        self._assert_single_contact(circle_bezier3(circle, WAVE), WAVE_TOP, WAVE_TOP_T)

    def test_ellipse_on_cubic_lobe(self):
        ellipse = Ellipse((WAVE_TOP.x, WAVE_TOP.y + 0.5), 1.0, 0.5)
        self._assert_single_contact(ellipse_bezier3(ellipse, WAVE), WAVE_TOP, WAVE_TOP_T)

    def test_rotated_ellipse_on_cubic_lobe(self):
        # same contact with the ellipse's minor axis along the normal
        ellipse = Ellipse((WAVE_TOP.x, WAVE_TOP.y + 0.5), 0.5, 1.0, math.pi / 2)
        self._assert_single_contact(ellipse_bezier3(ellipse, WAVE), WAVE_TOP, WAVE_TOP_T)

    def test_circle_tangent_inside_cubic(self):
        circle = Circle((0.25012195121951225, -0.3885975609756098), 0.25)
        curve = CubicBezier(((-0.12, -0.52), (-0.2, -0.81), (0.94, -0.57), (0.34, -0.4)))
        result = circle_bezier3(circle, curve)
        near = [t for _, t in result.parameters if abs(t - 0.5) < 1e-3]
        assert len(near) == 1
        assert near[0] == pytest.approx(0.5, abs=1e-6)
        _assert_parameters_consistent(result, circle, curve)

    def test_parameters_are_plain_floats(self):
        result = circle_bezier3(Circle((WAVE_TOP.x, WAVE_TOP.y + 1.0), 1.0), WAVE)
        assert all(type(v) is float for pair in result.parameters for v in pair)


class TestBezierPairs:
    """Test the resultant-based Bezier/Bezier reductions."""

    def test_quadratic_pair(self):
        other = QuadraticBezier(((0, 2), (2, 1), (0, 0)))    # x = 2y - y^2, mirror of ARCH
        result = bezier2_bezier2(ARCH, other)
        assert _sorted(result) == pytest.approx([0.0, 0.0, 1.0, 1.0], abs=1e-7)
        _assert_parameters_consistent(result, ARCH, other)
        by_x = {round(p.x): params for p, params in zip(result, result.parameters)}
        assert by_x[0] == pytest.approx((0.0, 1.0), abs=1e-7)
        assert by_x[1] == pytest.approx((0.5, 0.5), abs=1e-7)

    def test_quadratic_pair_disjoint(self):
        lifted = QuadraticBezier(((0, 10), (1, 12), (2, 10)))
        assert len(bezier2_bezier2(ARCH, lifted)) == 0

    def test_quadratic_cubic_degree_six(self):
        flat = CubicBezier(((0, 0.5), (0, 0.5), (2, 0.5), (2, 0.5)))
        result = bezier2_bezier3(ARCH, flat)
        assert result.converged
        assert _sorted(result) == pytest.approx(
            _sorted([(1 - math.sqrt(0.5), 0.5), (1 + math.sqrt(0.5), 0.5)]), abs=1e-7)
        _assert_parameters_consistent(result, ARCH, flat)

    def test_cubic_pair_degree_nine(self):
        flat = CubicBezier(((0, 0.5), (0, 0.5), (3, 0.5), (3, 0.5)))
        result = bezier3_bezier3(WAVE, flat)
        assert result.converged
        assert len(result) == 2
        for p in result:
            tau = p.x / 3.0
            assert p.y == pytest.approx(0.5)
            assert 0.0 < tau < 0.5
            assert 9 * tau * (1 - tau) * (1 - 2 * tau) == pytest.approx(0.5, abs=1e-7)
        _assert_parameters_consistent(result, WAVE, flat)

    def test_cubic_pair_disjoint(self):
        lifted = CubicBezier(((0, 10), (1, 13), (2, 7), (3, 10)))
        assert len(bezier3_bezier3(WAVE, lifted)) == 0


class TestSelfIntersection:
    """Test bezier3_self."""

    def test_loop(self):
        curve = CubicBezier(((-1, 0), (2, 1), (-2, 1), (1, 0)))
        result = bezier3_self(curve)
        assert len(result) == 1
        t1, t2 = result.parameters[0]
        assert 0.0 < t1 < t2 < 1.0
        assert t1 == pytest.approx(0.5 - math.sqrt(3.0 / 28.0))
        assert t2 == pytest.approx(0.5 + math.sqrt(3.0 / 28.0))
        a, b = curve.point_at(t1), curve.point_at(t2)
        assert a == pytest.approx(b)
        assert result[0] == pytest.approx(Point(0.0, 3.0 / 7.0))

    def test_closed_curve_meets_itself_at_endpoints(self):
        result = bezier3_self(CubicBezier(((0, 0), (1, 1), (-1, 1), (0, 0))))
        assert len(result) == 1
        assert result[0] == pytest.approx(Point(0.0, 0.0))
        assert result.parameters[0] == pytest.approx((0.0, 1.0))

    def test_arch_has_no_loop(self):
        assert len(bezier3_self(CubicBezier(((0, 0), (1, 1), (2, 1), (3, 0))))) == 0

    def test_graph_of_function_has_no_loop(self):
        assert len(bezier3_self(WAVE)) == 0

    def test_loop_outside_unit_interval(self):
        # first half of the loop curve: the second crossing parameter is past 1
        curve = CubicBezier(((-1, 0), (0.5, 0.5), (0.25, 0.75), (0, 0.75)))
        result = bezier3_self(curve)
        assert len(result) == 0
