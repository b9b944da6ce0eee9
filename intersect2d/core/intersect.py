"""Intersection reductions for every ordered pair of primitives.

Each reduction turns its pair into a polynomial in one curve parameter,
hands it to the solver kernel, then validates and back-substitutes the real
roots. Circles and ellipses enter through the tangent half-angle
substitution x = tan(t/2); a vanishing leading coefficient in x means the
root sits at infinity, i.e. at t = pi.

All reductions accept an optional ``config`` keyword and return an owned
:class:`IntersectionResult`; degenerate configurations give an empty result.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Tuple, Type, Union

import numpy as np
from numpy.polynomial import polynomial as P

from .config import IntersectConfig
from .constants import EPS_COEFF
from .logging_utils import get_logger
from .polynomial import (
    as_coefficients,
    coefficient_scale,
    conic_circle_quartic,
    evaluate,
    half_angle_linear,
    is_negligible,
    sylvester_resultant,
    trim_leading,
)
from .primitives import (
    Circle,
    CubicBezier,
    Ellipse,
    Line,
    Point,
    QuadraticBezier,
    Segment,
    normalize_angle,
)
from .solvers import solve_quadratic, solve_real_roots
from .validation import IntersectionResult, ResultBuilder, clamp_unit

__all__ = [
    'line_line', 'line_segment', 'segment_segment',
    'line_circle', 'line_ellipse', 'segment_circle', 'segment_ellipse',
    'circle_circle', 'circle_ellipse', 'ellipse_ellipse',
    'line_bezier2', 'line_bezier3', 'segment_bezier2', 'segment_bezier3',
    'circle_bezier2', 'circle_bezier3', 'ellipse_bezier2', 'ellipse_bezier3',
    'bezier2_bezier2', 'bezier2_bezier3', 'bezier3_bezier3', 'bezier3_self',
    'intersect', 'self_intersect',
]

logger = get_logger('intersect2d.intersect')

Bezier = Union[QuadraticBezier, CubicBezier]


def _config(config: Optional[IntersectConfig]) -> IntersectConfig:
    return config if config is not None else IntersectConfig()


def _degenerate(reason: str) -> IntersectionResult:
    logger.debug("degenerate input: %s", reason)
    return IntersectionResult.empty()


def _cross(u, v) -> float:
    return u[0] * v[1] - u[1] * v[0]


def _require(curve, kind: Type, name: str) -> None:
    if not isinstance(curve, kind):
        raise TypeError(f"{name} expects a {kind.__name__}, got {type(curve).__name__}")


def _half_angle_roots(coeffs, cfg: IntersectConfig) -> Tuple[List[float], bool]:
    """Angles t in [0, 2*pi) solving a polynomial in x = tan(t/2)."""
    c = as_coefficients(coeffs)
    scale = coefficient_scale(c)
    if scale == 0.0:
        return [], True
    angles = []
    if is_negligible(c[-1], scale):
        angles.append(math.pi)
    result = solve_real_roots(c, cfg.solver)
    angles.extend(normalize_angle(2.0 * math.atan(x)) for x in result.roots)
    return angles, result.converged


# ---------------------------------------------------------------------------
# Lines and segments
# ---------------------------------------------------------------------------

def line_line(first: Line, second: Line, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Cramer's rule on the two implicit equations; parallel lines give nothing."""
    cfg = _config(config)
    det = first.a * second.b - second.a * first.b
    if is_negligible(det, abs(first.a * second.b) + abs(second.a * first.b)):
        return _degenerate("parallel or identical lines")
    x = (first.b * second.c - second.b * first.c) / det
    y = (second.a * first.c - first.a * second.c) / det
    builder = ResultBuilder(cfg.domain, (None, None))
    builder.add((x, y))
    return builder.build()


def line_segment(line: Line, segment: Segment, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    cfg = _config(config)
    if segment.is_degenerate:
        return _degenerate("zero-length segment")
    dx = segment.p2.x - segment.p1.x
    dy = segment.p2.y - segment.p1.y
    denom = line.a * dx + line.b * dy
    if is_negligible(denom, (abs(line.a) + abs(line.b)) * (abs(dx) + abs(dy))):
        return _degenerate("segment parallel to line")
    builder = ResultBuilder(cfg.domain, (None, 'unit'))
    t = builder.accept(1, -line.evaluate(segment.p1) / denom)
    if t is not None:
        builder.add(segment.point_at(t), None, t)
    return builder.build()


def segment_segment(first: Segment, second: Segment, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Both parameters from one 2x2 system; collinear overlap counts as degenerate."""
    cfg = _config(config)
    if first.is_degenerate or second.is_degenerate:
        return _degenerate("zero-length segment")
    d1 = (first.p2.x - first.p1.x, first.p2.y - first.p1.y)
    d2 = (second.p2.x - second.p1.x, second.p2.y - second.p1.y)
    w = (second.p1.x - first.p1.x, second.p1.y - first.p1.y)
    det = _cross(d1, d2)
    if is_negligible(det, math.hypot(*d1) * math.hypot(*d2)):
        return _degenerate("parallel segments")
    builder = ResultBuilder(cfg.domain, ('unit', 'unit'))
    s = builder.accept(0, _cross(w, d2) / det)
    t = builder.accept(1, _cross(w, d1) / det)
    if s is not None and t is not None:
        builder.add(first.point_at(s), s, t)
    return builder.build()


# ---------------------------------------------------------------------------
# Lines/segments against circles and ellipses
# ---------------------------------------------------------------------------

def _line_conic(line: Line, conic, cfg: IntersectConfig) -> IntersectionResult:
    if isinstance(conic, Circle):
        u, v = (conic.r, 0.0), (0.0, conic.r)
    else:
        u, v = conic.axes
    coeffs = half_angle_linear(line.evaluate(conic.center),
                               line.a * u[0] + line.b * u[1],
                               line.a * v[0] + line.b * v[1])
    angles, converged = _half_angle_roots(coeffs, cfg)
    builder = ResultBuilder(cfg.domain, (None, 'angle'))
    builder.converged = converged
    for t in angles:
        builder.add(conic.point_at(t), None, builder.accept(1, t))
    return builder.build()


def line_circle(line: Line, circle: Circle, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    cfg = _config(config)
    if circle.r == 0.0:
        return _degenerate("zero-radius circle")
    return _line_conic(line, circle, cfg)


def line_ellipse(line: Line, ellipse: Ellipse, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    cfg = _config(config)
    if ellipse.a == 0.0 or ellipse.b == 0.0:
        return _degenerate("flat ellipse")
    return _line_conic(line, ellipse, cfg)


def _segment_round(segment: Segment, p1: Point, p2: Point, radius: float,
                   conic, cfg: IntersectConfig) -> IntersectionResult:
    """Segment p1-p2 (already in the conic's circle frame) against a centred circle."""
    dx, dy = p2.x - p1.x, p2.y - p1.y
    roots = solve_quadratic(dx * dx + dy * dy,
                            2.0 * (dx * p1.x + dy * p1.y),
                            p1.x * p1.x + p1.y * p1.y - radius * radius)
    builder = ResultBuilder(cfg.domain, ('unit', 'angle'))
    for t in roots:
        s = builder.accept(0, t)
        if s is None:
            continue
        point = segment.point_at(s)
        builder.add(point, s, conic.angle_of(point))
    return builder.build()


def segment_circle(segment: Segment, circle: Circle, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Quadratic in the segment parameter for |p(t) - centre| = r."""
    cfg = _config(config)
    if segment.is_degenerate:
        return _degenerate("zero-length segment")
    if circle.r == 0.0:
        return _degenerate("zero-radius circle")
    c = circle.center
    p1 = Point(segment.p1.x - c.x, segment.p1.y - c.y)
    p2 = Point(segment.p2.x - c.x, segment.p2.y - c.y)
    return _segment_round(segment, p1, p2, circle.r, circle, cfg)


def segment_ellipse(segment: Segment, ellipse: Ellipse, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    cfg = _config(config)
    if segment.is_degenerate:
        return _degenerate("zero-length segment")
    if ellipse.a == 0.0 or ellipse.b == 0.0:
        return _degenerate("flat ellipse")
    p1 = ellipse.to_circle_frame(segment.p1)
    p2 = ellipse.to_circle_frame(segment.p2)
    return _segment_round(segment, p1, p2, ellipse.a * ellipse.b, ellipse, cfg)


# ---------------------------------------------------------------------------
# Circles and ellipses against each other
# ---------------------------------------------------------------------------

def circle_circle(first: Circle, second: Circle, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Quadratic in tan(t/2) of the second circle.

    The first circle is moved onto the unit circle; the second then has
    centre (a, b) and radius r, and a*cos(t) + b*sin(t) = c with
    c = (1 - a^2 - b^2 - r^2) / (2r).
    """
    cfg = _config(config)
    if first.r == 0.0 or second.r == 0.0:
        return _degenerate("zero-radius circle")
    a = (second.center.x - first.center.x) / first.r
    b = (second.center.y - first.center.y) / first.r
    r = second.r / first.r
    c = (1.0 - a * a - b * b - r * r) / (2.0 * r)
    angles, converged = _half_angle_roots([a - c, 2.0 * b, -a - c], cfg)
    builder = ResultBuilder(cfg.domain, ('angle', 'angle'))
    builder.converged = converged
    for t in angles:
        point = second.point_at(t)
        builder.add(point, first.angle_of(point), builder.accept(1, t))
    return builder.build()


def _conic_pair(first, offset, u, v, radius: float, second, cfg: IntersectConfig) -> IntersectionResult:
    angles, converged = _half_angle_roots(conic_circle_quartic(offset, u, v, radius), cfg)
    builder = ResultBuilder(cfg.domain, ('angle', 'angle'))
    builder.converged = converged
    for t in angles:
        point = second.point_at(t)
        builder.add(point, first.angle_of(point), builder.accept(1, t))
    return builder.build()


def circle_ellipse(circle: Circle, ellipse: Ellipse, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Quartic in tan(t/2) of the ellipse, measured from the circle centre."""
    cfg = _config(config)
    if circle.r == 0.0:
        return _degenerate("zero-radius circle")
    if ellipse.a == 0.0 or ellipse.b == 0.0:
        return _degenerate("flat ellipse")
    offset = (ellipse.center.x - circle.center.x, ellipse.center.y - circle.center.y)
    u, v = ellipse.axes
    return _conic_pair(circle, offset, u, v, circle.r, ellipse, cfg)


def ellipse_ellipse(first: Ellipse, second: Ellipse, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """The second ellipse, mapped into the frame where the first is a circle of radius a*b."""
    cfg = _config(config)
    if first.a == 0.0 or first.b == 0.0 or second.a == 0.0 or second.b == 0.0:
        return _degenerate("flat ellipse")
    u, v = second.axes
    return _conic_pair(first,
                       first.to_circle_frame(second.center),
                       first.to_circle_frame_vector(u),
                       first.to_circle_frame_vector(v),
                       first.a * first.b, second, cfg)


# ---------------------------------------------------------------------------
# Bezier curves against lines, segments and conics
# ---------------------------------------------------------------------------

def _line_curve(line: Line, curve: Bezier, cfg: IntersectConfig, segment: Optional[Segment] = None) -> IntersectionResult:
    cx, cy = curve.power_basis()
    poly = line.a * cx + line.b * cy
    poly[0] += line.c
    if coefficient_scale(trim_leading(poly)) == 0.0:
        return _degenerate("curve lies on the line")
    result = solve_real_roots(poly, cfg.solver)
    builder = ResultBuilder(cfg.domain, ('unit' if segment is not None else None, 'unit'))
    builder.converged = result.converged
    for root in result.roots:
        t = builder.accept(1, root)
        if t is None:
            continue
        point = curve.point_at(t)
        if segment is None:
            builder.add(point, None, t)
            continue
        s = builder.accept(0, segment.parameter_of(point))
        if s is not None:
            builder.add(point, s, t)
    return builder.build()


def line_bezier2(line: Line, curve: QuadraticBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, QuadraticBezier, 'line_bezier2')
    return _line_curve(line, curve, _config(config))


def line_bezier3(line: Line, curve: CubicBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, CubicBezier, 'line_bezier3')
    return _line_curve(line, curve, _config(config))


def _segment_curve(segment: Segment, curve: Bezier, cfg: IntersectConfig) -> IntersectionResult:
    # The implicit form of the supporting line has no division by (x1 - x2),
    # so vertical segments go through the same path.
    if segment.is_degenerate:
        return _degenerate("zero-length segment")
    return _line_curve(segment.supporting_line(), curve, cfg, segment=segment)


def segment_bezier2(segment: Segment, curve: QuadraticBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, QuadraticBezier, 'segment_bezier2')
    return _segment_curve(segment, curve, _config(config))


def segment_bezier3(segment: Segment, curve: CubicBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, CubicBezier, 'segment_bezier3')
    return _segment_curve(segment, curve, _config(config))


def _round_curve(conic, local: Bezier, radius: float, curve: Bezier, cfg: IntersectConfig) -> IntersectionResult:
    """``local`` is ``curve`` expressed in a frame where ``conic`` is a centred circle."""
    cx, cy = local.power_basis()
    poly = P.polyadd(P.polymul(cx, cx), P.polymul(cy, cy))
    poly[0] -= radius * radius
    result = solve_real_roots(poly, cfg.solver)
    builder = ResultBuilder(cfg.domain, ('angle', 'unit'))
    builder.converged = result.converged
    for root in result.roots:
        t = builder.accept(1, root)
        if t is None:
            continue
        point = curve.point_at(t)
        builder.add(point, conic.angle_of(point), t)
    return builder.build()


def _circle_curve(circle: Circle, curve: Bezier, cfg: IntersectConfig) -> IntersectionResult:
    if circle.r == 0.0:
        return _degenerate("zero-radius circle")
    c = circle.center
    local = curve.transformed(lambda p: Point(p.x - c.x, p.y - c.y))
    return _round_curve(circle, local, circle.r, curve, cfg)


def _ellipse_curve(ellipse: Ellipse, curve: Bezier, cfg: IntersectConfig) -> IntersectionResult:
    if ellipse.a == 0.0 or ellipse.b == 0.0:
        return _degenerate("flat ellipse")
    local = curve.transformed(ellipse.to_circle_frame)
    return _round_curve(ellipse, local, ellipse.a * ellipse.b, curve, cfg)


def circle_bezier2(circle: Circle, curve: QuadraticBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, QuadraticBezier, 'circle_bezier2')
    return _circle_curve(circle, curve, _config(config))


def circle_bezier3(circle: Circle, curve: CubicBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, CubicBezier, 'circle_bezier3')
    return _circle_curve(circle, curve, _config(config))


def ellipse_bezier2(ellipse: Ellipse, curve: QuadraticBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, QuadraticBezier, 'ellipse_bezier2')
    return _ellipse_curve(ellipse, curve, _config(config))


def ellipse_bezier3(ellipse: Ellipse, curve: CubicBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(curve, CubicBezier, 'ellipse_bezier3')
    return _ellipse_curve(ellipse, curve, _config(config))


# ---------------------------------------------------------------------------
# Bezier against Bezier
# ---------------------------------------------------------------------------

def _difference_rows(own: np.ndarray, other: np.ndarray) -> List[np.ndarray]:
    """Coefficients in t1 of X1(t1) - X2(t2), each a polynomial in t2."""
    rows = [np.array([k]) for k in own]
    rows[0] = P.polysub(rows[0], other)
    return rows


def _curve_scale(*curves: Bezier) -> float:
    return max([1.0] + [max(abs(p.x), abs(p.y)) for c in curves for p in c.control_points])


def _partner_parameter(ax: np.ndarray, ay: np.ndarray, point: Point,
                       cfg: IntersectConfig, scale: float) -> Optional[float]:
    """Parameter t1 of the first curve at a point already located on the second.

    The two equations X1(t1) = x and Y1(t1) = y are combined as
    lc(Y1)*eq_x - lc(X1)*eq_y, which cancels the top power of t1: linear for
    a quadratic first curve and the companion quadratic for a cubic one.
    Without real roots there is no valid pair. When the combination vanishes
    identically the equations are solved separately instead.
    """
    ex = ax.copy()
    ex[0] -= point.x
    ey = ay.copy()
    ey[0] -= point.y
    lead_x, lead_y = ex[-1], ey[-1]
    combo = lead_y * ex - lead_x * ey
    ref = max(abs(lead_x), abs(lead_y)) * max(coefficient_scale(ex), coefficient_scale(ey))
    if coefficient_scale(combo) > EPS_COEFF * ref:
        candidates = list(solve_real_roots(combo[:-1], cfg.solver).roots)
    else:
        candidates = []
        for eq in (ex, ey):
            if coefficient_scale(trim_leading(eq)) > 0.0:
                candidates.extend(solve_real_roots(eq, cfg.solver).roots)
    best = None
    for root in candidates:
        t1 = clamp_unit(root, cfg.domain.domain_tolerance)
        if t1 is None:
            continue
        residual = max(abs(evaluate(ex, t1)), abs(evaluate(ey, t1)))
        if best is None or residual < best[0]:
            best = (residual, t1)
    if best is None or best[0] > cfg.domain.match_tolerance * scale:
        return None
    return best[1]


def _bezier_pair(first: Bezier, second: Bezier, cfg: IntersectConfig) -> IntersectionResult:
    """Eliminate the first curve's parameter with a Sylvester resultant.

    The resultant is a polynomial in the second curve's parameter of degree
    deg1 * deg2 (4, 6 or 9). Its roots in [0, 1] are located on the second
    curve, then paired with a first-curve parameter in [0, 1].
    """
    ax, ay = first.power_basis()
    bx, by = second.power_basis()
    resultant = sylvester_resultant(_difference_rows(ax, bx), _difference_rows(ay, by))
    if resultant is None:
        return _degenerate("first curve collapses to a point")
    result = solve_real_roots(resultant, cfg.solver)
    builder = ResultBuilder(cfg.domain, ('unit', 'unit'))
    builder.converged = result.converged
    scale = _curve_scale(first, second)
    for root in result.roots:
        t2 = builder.accept(1, root)
        if t2 is None:
            continue
        point = second.point_at(t2)
        t1 = _partner_parameter(ax, ay, point, cfg, scale)
        if t1 is None:
            logger.debug("no first-curve parameter for t2=%.17g", t2)
            continue
        builder.add(point, t1, t2)
    return builder.build()


def bezier2_bezier2(first: QuadraticBezier, second: QuadraticBezier, *,
                    config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(first, QuadraticBezier, 'bezier2_bezier2')
    _require(second, QuadraticBezier, 'bezier2_bezier2')
    return _bezier_pair(first, second, _config(config))


def bezier2_bezier3(first: QuadraticBezier, second: CubicBezier, *,
                    config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(first, QuadraticBezier, 'bezier2_bezier3')
    _require(second, CubicBezier, 'bezier2_bezier3')
    return _bezier_pair(first, second, _config(config))


def bezier3_bezier3(first: CubicBezier, second: CubicBezier, *,
                    config: Optional[IntersectConfig] = None) -> IntersectionResult:
    _require(first, CubicBezier, 'bezier3_bezier3')
    _require(second, CubicBezier, 'bezier3_bezier3')
    return _bezier_pair(first, second, _config(config))


def bezier3_self(curve: CubicBezier, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Loop point of a cubic, without polynomial solving.

    With power-basis vectors A t^3 + B t^2 + C t + D and t1 = a - b,
    t2 = a + b, equality of the two positions gives
    a = -(A x C) / (2 (A x B)) and b^2 = -(3a^2 A_k + 2a B_k + C_k) / A_k.
    A loop exists when b^2 > 0 and both parameters lie in [0, 1].
    """
    _require(curve, CubicBezier, 'bezier3_self')
    cfg = _config(config)
    cx, cy = curve.power_basis()
    A, B, C = (cx[3], cy[3]), (cx[2], cy[2]), (cx[1], cy[1])
    axb = _cross(A, B)
    if is_negligible(axb, math.hypot(*A) * math.hypot(*B)):
        return _degenerate("no loop: A and B are parallel")
    a = -_cross(A, C) / (2.0 * axb)
    k = 0 if abs(A[0]) >= abs(A[1]) else 1
    b_sq = -(3.0 * a * a * A[k] + 2.0 * a * B[k] + C[k]) / A[k]
    builder = ResultBuilder(cfg.domain, ('unit', 'unit'))
    if b_sq <= 0.0:
        return builder.build()
    b = math.sqrt(b_sq)
    t1 = builder.accept(0, a - b)
    t2 = builder.accept(1, a + b)
    if t1 is not None and t2 is not None:
        builder.add(curve.point_at(t1), t1, t2)
    return builder.build()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_REDUCTIONS: Dict[Tuple[type, type], Callable[..., IntersectionResult]] = {
    (Line, Line): line_line,
    (Line, Segment): line_segment,
    (Segment, Segment): segment_segment,
    (Line, Circle): line_circle,
    (Line, Ellipse): line_ellipse,
    (Segment, Circle): segment_circle,
    (Segment, Ellipse): segment_ellipse,
    (Circle, Circle): circle_circle,
    (Circle, Ellipse): circle_ellipse,
    (Ellipse, Ellipse): ellipse_ellipse,
    (Line, QuadraticBezier): line_bezier2,
    (Line, CubicBezier): line_bezier3,
    (Segment, QuadraticBezier): segment_bezier2,
    (Segment, CubicBezier): segment_bezier3,
    (Circle, QuadraticBezier): circle_bezier2,
    (Circle, CubicBezier): circle_bezier3,
    (Ellipse, QuadraticBezier): ellipse_bezier2,
    (Ellipse, CubicBezier): ellipse_bezier3,
    (QuadraticBezier, QuadraticBezier): bezier2_bezier2,
    (QuadraticBezier, CubicBezier): bezier2_bezier3,
    (CubicBezier, CubicBezier): bezier3_bezier3,
}


def intersect(first, second, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Intersect any two primitives, in either order.

    Parameter pairs in the result always follow the argument order.
    Raises TypeError for unsupported primitive types.
    """
    key = (type(first), type(second))
    fn = _REDUCTIONS.get(key)
    if fn is not None:
        return fn(first, second, config=config)
    fn = _REDUCTIONS.get(key[::-1])
    if fn is not None:
        return fn(second, first, config=config).swapped()
    raise TypeError(f"cannot intersect {key[0].__name__} with {key[1].__name__}")


def self_intersect(curve, *, config: Optional[IntersectConfig] = None) -> IntersectionResult:
    """Self-intersection of a curve; only cubic Beziers can cross themselves."""
    if isinstance(curve, CubicBezier):
        return bezier3_self(curve, config=config)
    if isinstance(curve, (Line, Segment, Circle, Ellipse, QuadraticBezier)):
        return IntersectionResult.empty()
    raise TypeError(f"cannot self-intersect {type(curve).__name__}")
