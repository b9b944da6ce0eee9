"""Parameter-domain validation, deduplication and the intersection result type."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .config import DomainConfig
from .logging_utils import get_logger
from .primitives import Point, TWO_PI, normalize_angle

__all__ = ['IntersectionResult', 'clamp_unit', 'ResultBuilder']

logger = get_logger('intersect2d.validation')

ParamPair = Tuple[Optional[float], Optional[float]]


@dataclass(frozen=True)
class IntersectionResult:
    """Intersection points of one query, in root-processing order.

    Behaves as a sequence of points. ``parameters[i]`` holds the parameter of
    ``points[i]`` on the first and second primitive (``None`` for a line,
    an angle in [0, 2*pi) for circles and ellipses, [0, 1] otherwise).
    ``converged`` is False when the polynomial solver gave up and the points
    may be incomplete.
    """
    points: Tuple[Point, ...] = ()
    parameters: Tuple[ParamPair, ...] = ()
    converged: bool = True

    @classmethod
    def empty(cls) -> 'IntersectionResult':
        return cls()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def swapped(self) -> 'IntersectionResult':
        """Same intersections with the parameter pairs reported in reverse order."""
        return IntersectionResult(self.points, tuple((b, a) for a, b in self.parameters), self.converged)


def clamp_unit(t: float, tolerance: float) -> Optional[float]:
    """Clamp ``t`` onto [0, 1] when it lies within ``tolerance`` of it, else None."""
    if not math.isfinite(t) or t < -tolerance or t > 1.0 + tolerance:
        return None
    return min(1.0, max(0.0, t))


def _circular_distance(a: float, b: float) -> float:
    d = abs(a - b) % TWO_PI
    return min(d, TWO_PI - d)


class ResultBuilder:
    """Collects validated candidates for one reduction.

    ``kinds`` names the parameter kind of each side: 'unit' for segments and
    Bezier curves, 'angle' for circles and ellipses, None for lines.
    """

    def __init__(self, domain: DomainConfig, kinds: Tuple[Optional[str], Optional[str]]):
        self.domain = domain
        self.kinds = kinds
        self._points: List[Point] = []
        self._params: List[ParamPair] = []
        self.converged = True

    def accept(self, index: int, t: Optional[float]) -> Optional[float]:
        """Validate the parameter of side ``index``; None means rejected."""
        kind = self.kinds[index]
        if kind is None:
            return None
        if kind == 'angle':
            return normalize_angle(t)
        checked = clamp_unit(t, self.domain.domain_tolerance)
        if checked is None:
            logger.debug("parameter %.17g outside [0, 1], rejected", t)
        return checked

    def _same(self, lhs: ParamPair, rhs: ParamPair) -> bool:
        tol = self.domain.dedupe_tolerance
        for kind, a, b in zip(self.kinds, lhs, rhs):
            if a is None or b is None:
                continue
            dist = _circular_distance(a, b) if kind == 'angle' else abs(a - b)
            if dist > tol:
                return False
        return True

    def add(self, point, param_a: Optional[float] = None, param_b: Optional[float] = None) -> bool:
        """Record an accepted intersection unless it repeats an earlier one."""
        pair = (param_a, param_b)
        if any(self._same(pair, seen) for seen in self._params):
            return False
        self._points.append(Point(float(point[0]), float(point[1])))
        self._params.append(pair)
        return True

    def build(self) -> IntersectionResult:
        return IntersectionResult(tuple(self._points), tuple(self._params), self.converged)
