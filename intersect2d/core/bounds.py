"""Axis-aligned bounding boxes used by callers as an intersection pre-filter.

The reductions never prune with these; a caller holding many primitives can
skip the exact query when two boxes do not overlap.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from numpy.polynomial import polynomial as P

from .primitives import Circle, CubicBezier, Ellipse, Line, Point, QuadraticBezier, Segment, as_point
from .solvers import solve_real_roots

__all__ = ['BoundingBox', 'bounding_box']


@dataclass(frozen=True)
class BoundingBox:
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_points(cls, points: Iterable) -> 'BoundingBox':
        pts = [as_point(p) for p in points]
        if not pts:
            raise ValueError("bounding box of an empty point set")
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def from_segment(cls, segment: Segment) -> 'BoundingBox':
        return cls.from_points((segment.p1, segment.p2))

    @classmethod
    def from_circle(cls, circle: Circle) -> 'BoundingBox':
        c, r = circle.center, circle.r
        return cls(c.x - r, c.y - r, c.x + r, c.y + r)

    @classmethod
    def from_ellipse(cls, ellipse: Ellipse) -> 'BoundingBox':
        """Exact extents: the half-widths are the norms of the rows of [u v]."""
        u, v = ellipse.axes
        hx = math.hypot(u.x, v.x)
        hy = math.hypot(u.y, v.y)
        c = ellipse.center
        return cls(c.x - hx, c.y - hy, c.x + hx, c.y + hy)

    @classmethod
    def from_bezier(cls, curve) -> 'BoundingBox':
        """Endpoints plus the interior extrema where dx/dt or dy/dt vanishes."""
        pts = [curve.control_points[0], curve.control_points[-1]]
        for coeffs in curve.power_basis():
            for t in solve_real_roots(P.polyder(coeffs)).roots:
                if 0.0 < t < 1.0:
                    pts.append(curve.point_at(t))
        return cls.from_points(pts)

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def contains(self, point, tolerance: float = 0.0) -> bool:
        x, y = point
        return (self.xmin - tolerance <= x <= self.xmax + tolerance
                and self.ymin - tolerance <= y <= self.ymax + tolerance)

    def overlaps(self, other: 'BoundingBox') -> bool:
        """Closed-interval overlap test; touching boxes overlap."""
        return not (self.xmax < other.xmin or other.xmax < self.xmin
                    or self.ymax < other.ymin or other.ymax < self.ymin)


def bounding_box(primitive) -> BoundingBox:
    """Bounding box of any bounded primitive; lines raise ValueError."""
    if isinstance(primitive, Point):
        return BoundingBox(primitive.x, primitive.y, primitive.x, primitive.y)
    if isinstance(primitive, Segment):
        return BoundingBox.from_segment(primitive)
    if isinstance(primitive, Circle):
        return BoundingBox.from_circle(primitive)
    if isinstance(primitive, Ellipse):
        return BoundingBox.from_ellipse(primitive)
    if isinstance(primitive, (QuadraticBezier, CubicBezier)):
        return BoundingBox.from_bezier(primitive)
    if isinstance(primitive, Line):
        raise ValueError("lines are unbounded")
    raise TypeError(f"no bounding box for {type(primitive).__name__}")
