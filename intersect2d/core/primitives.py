"""Immutable value types for the planar primitives.

Points are plain named tuples so they unpack like ``(x, y)`` pairs; every
other primitive is a frozen dataclass that coerces point-like fields on
construction and rejects invalid shapes with ``ValueError``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np
from numpy.polynomial import polynomial as P

from .polynomial import bezier_power_basis

__all__ = [
    'Point', 'as_point', 'normalize_angle', 'Line', 'Segment', 'Circle',
    'Ellipse', 'QuadraticBezier', 'CubicBezier',
]

TWO_PI = 2.0 * math.pi


class Point(NamedTuple):
    x: float
    y: float


def as_point(value) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


def normalize_angle(t: float) -> float:
    """Map an angle onto [0, 2*pi)."""
    t = math.fmod(t, TWO_PI)
    if t < 0.0:
        t += TWO_PI
    return 0.0 if t >= TWO_PI else t


@dataclass(frozen=True)
class Line:
    """Implicit line a*x + b*y + c = 0."""
    a: float
    b: float
    c: float

    def __post_init__(self):
        if self.a == 0.0 and self.b == 0.0:
            raise ValueError("line needs (a, b) != (0, 0)")

    @classmethod
    def from_points(cls, p, q) -> 'Line':
        (x1, y1), (x2, y2) = as_point(p), as_point(q)
        return cls(y2 - y1, x1 - x2, x2 * y1 - x1 * y2)

    @classmethod
    def from_gradient(cls, m: float, c: float) -> 'Line':
        """Line y = m*x + c."""
        return cls(m, -1.0, c)

    def evaluate(self, point) -> float:
        x, y = point
        return self.a * x + self.b * y + self.c

    @property
    def gradient(self) -> float:
        return -self.a / self.b if self.b != 0.0 else math.inf


@dataclass(frozen=True)
class Segment:
    p1: Point
    p2: Point

    def __post_init__(self):
        object.__setattr__(self, 'p1', as_point(self.p1))
        object.__setattr__(self, 'p2', as_point(self.p2))

    @property
    def is_degenerate(self) -> bool:
        return self.p1 == self.p2

    def point_at(self, t: float) -> Point:
        return Point(self.p1.x + t * (self.p2.x - self.p1.x),
                     self.p1.y + t * (self.p2.y - self.p1.y))

    def parameter_of(self, point) -> float:
        """Parameter of the orthogonal projection of ``point`` on the supporting line."""
        dx = self.p2.x - self.p1.x
        dy = self.p2.y - self.p1.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0.0:
            return 0.0
        return ((point[0] - self.p1.x) * dx + (point[1] - self.p1.y) * dy) / length_sq

    def supporting_line(self) -> Line:
        return Line.from_points(self.p1, self.p2)


@dataclass(frozen=True)
class Circle:
    center: Point
    r: float

    def __post_init__(self):
        object.__setattr__(self, 'center', as_point(self.center))
        if not self.r >= 0.0:
            raise ValueError(f"circle radius must be >= 0, got {self.r!r}")

    @classmethod
    def from_points(cls, p, q) -> 'Circle':
        """Circle having the segment p-q as a diameter."""
        (x1, y1), (x2, y2) = as_point(p), as_point(q)
        return cls(Point(0.5 * (x1 + x2), 0.5 * (y1 + y2)), 0.5 * math.hypot(x2 - x1, y2 - y1))

    @classmethod
    def from_three_points(cls, p, q, s) -> 'Circle':
        """Circumcircle of three points."""
        (ax, ay), (bx, by), (cx, cy) = as_point(p), as_point(q), as_point(s)
        d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
        if d == 0.0:
            raise ValueError("circumcircle is undefined for collinear points")
        a2 = ax * ax + ay * ay
        b2 = bx * bx + by * by
        c2 = cx * cx + cy * cy
        ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
        uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
        return cls(Point(ux, uy), math.hypot(ax - ux, ay - uy))

    def point_at(self, t: float) -> Point:
        return Point(self.center.x + self.r * math.cos(t), self.center.y + self.r * math.sin(t))

    def angle_of(self, point) -> float:
        return normalize_angle(math.atan2(point[1] - self.center.y, point[0] - self.center.x))


@dataclass(frozen=True)
class Ellipse:
    """Ellipse with semi-axes ``a`` (along ``rotation``) and ``b``."""
    center: Point
    a: float
    b: float
    rotation: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'center', as_point(self.center))
        if not (self.a >= 0.0 and self.b >= 0.0):
            raise ValueError(f"ellipse semi-axes must be >= 0, got a={self.a!r}, b={self.b!r}")

    @property
    def axes(self) -> Tuple[Point, Point]:
        """Vectors multiplying cos(t) and sin(t) in the parametrisation."""
        cr, sr = math.cos(self.rotation), math.sin(self.rotation)
        return Point(self.a * cr, self.a * sr), Point(-self.b * sr, self.b * cr)

    def point_at(self, t: float) -> Point:
        u, v = self.axes
        ct, st = math.cos(t), math.sin(t)
        return Point(self.center.x + u.x * ct + v.x * st, self.center.y + u.y * ct + v.y * st)

    def to_circle_frame(self, point) -> Point:
        """Affine map sending this ellipse onto the circle of radius a*b at the origin."""
        cr, sr = math.cos(self.rotation), math.sin(self.rotation)
        dx = point[0] - self.center.x
        dy = point[1] - self.center.y
        return Point(self.b * (dx * cr + dy * sr), self.a * (dy * cr - dx * sr))

    def to_circle_frame_vector(self, vec) -> Point:
        cr, sr = math.cos(self.rotation), math.sin(self.rotation)
        return Point(self.b * (vec[0] * cr + vec[1] * sr), self.a * (vec[1] * cr - vec[0] * sr))

    def angle_of(self, point) -> float:
        u, v = self.to_circle_frame(point)
        return normalize_angle(math.atan2(v, u))


class _Bezier:
    """Shared behaviour of the Bezier value types."""

    degree: int = 0

    def __post_init__(self):
        pts = tuple(as_point(p) for p in self.control_points)
        if len(pts) != self.degree + 1:
            raise ValueError(f"{type(self).__name__} needs {self.degree + 1} control points, got {len(pts)}")
        object.__setattr__(self, 'control_points', pts)

    @classmethod
    def from_points(cls, *points) -> '_Bezier':
        return cls(tuple(points))

    def power_basis(self) -> Tuple[np.ndarray, np.ndarray]:
        return bezier_power_basis(self.control_points)

    def point_at(self, t: float) -> Point:
        cx, cy = self.power_basis()
        return Point(float(P.polyval(t, cx)), float(P.polyval(t, cy)))

    def transformed(self, fn) -> '_Bezier':
        """Same curve type with ``fn`` applied to every control point (affine maps only)."""
        return type(self)(tuple(fn(p) for p in self.control_points))


@dataclass(frozen=True)
class QuadraticBezier(_Bezier):
    control_points: Tuple[Point, Point, Point]
    degree = 2


@dataclass(frozen=True)
class CubicBezier(_Bezier):
    control_points: Tuple[Point, Point, Point, Point]
    degree = 3
