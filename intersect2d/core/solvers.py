"""Real-root solvers: closed forms up to degree four and Bairstow's method above.

Closed-form solvers return plain tuples of floats. ``solve_polynomial`` and
``solve_real_roots`` return a :class:`SolveResult` so that a Bairstow run
that fails to converge is distinguishable from a polynomial without real
roots.

Every root-count discriminant uses the same rule: it is zero when
``|D| <= EPS_DISCRIMINANT * scale`` where ``scale`` is the size of the terms
it was formed from. Rounding splits a double root into two real roots or a
complex pair a few ulps apart in D; both cases land inside that band and
come back as one root. Real roots closer than ``EPS_ROOT_MERGE`` (relative),
the root gap matching that band, are merged as well, which covers a double
root whose two copies were extracted into different factors.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import SolverConfig
from .constants import (
    ALPHA0_SEED,
    ALPHA1_SEED,
    EPS_COEFF,
    EPS_DISCRIMINANT,
    EPS_RESOLVENT,
    EPS_ROOT,
    EPS_ROOT_MERGE,
    GOLDEN_ANGLE,
    MAX_ITERATIONS,
    MAX_RESTARTS,
    RESTART_RADIUS_STEP,
)
from .logging_utils import get_logger
from .polynomial import as_coefficients, is_negligible, trim_leading

__all__ = [
    'SolveResult', 'cbrt', 'solve_linear', 'solve_quadratic', 'solve_cubic',
    'cubic_real_root', 'solve_quartic', 'solve_polynomial', 'solve_real_roots',
]

logger = get_logger('intersect2d.solvers')

Roots = Tuple[float, ...]


@dataclass(frozen=True)
class SolveResult:
    """Real roots of a polynomial plus the convergence status of the solve.

    ``converged`` is False only when Bairstow's method gave up on a quadratic
    factor; ``roots`` then holds the roots extracted before the failure.
    """
    roots: Roots
    converged: bool = True
    iterations: int = 0

    def __len__(self) -> int:
        return len(self.roots)

    def __iter__(self):
        return iter(self.roots)


def _discriminant_is_zero(d: float, scale: float) -> bool:
    return abs(d) <= EPS_DISCRIMINANT * scale


def _merge_close_roots(roots) -> Roots:
    """Collapse real roots closer than EPS_ROOT_MERGE onto their midpoint, keeping order."""
    kept = []
    for x in roots:
        x = float(x)
        for i, y in enumerate(kept):
            if abs(x - y) <= EPS_ROOT_MERGE * max(1.0, abs(x), abs(y)):
                kept[i] = 0.5 * (x + y)
                break
        else:
            kept.append(x)
    return tuple(kept)


def cbrt(x: float) -> float:
    """Real cube root, preserving sign."""
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def solve_linear(a: float, b: float) -> Roots:
    """Root of a*x + b = 0; empty when ``a`` vanishes."""
    if is_negligible(a, abs(b)):
        return ()
    return (-float(b) / float(a),)


def solve_quadratic(a: float, b: float, c: float) -> Roots:
    """Real roots of a*x^2 + b*x + c = 0.

    Two roots come back as ((-b - sqrt(D))/2a, (-b + sqrt(D))/2a), computed
    through q = -(b + sign(b)*sqrt(D))/2 to avoid cancellation. A negligible
    ``a`` degrades to the linear equation.
    """
    a, b, c = float(a), float(b), float(c)
    if is_negligible(a, max(abs(b), abs(c))):
        return solve_linear(b, c)
    disc = b * b - 4.0 * a * c
    if _discriminant_is_zero(disc, b * b + abs(4.0 * a * c)):
        return (-b / (2.0 * a),)
    if disc < 0.0:
        return ()
    sq = math.sqrt(disc)
    if math.copysign(1.0, b) > 0.0:
        q = -0.5 * (b + sq)
        return (q / a, c / q)
    q = -0.5 * (b - sq)
    return (c / q, q / a)


def solve_cubic(a0: float, a1: float, a2: float, a3: float) -> Roots:
    """Real roots of a0 + a1*x + a2*x^2 + a3*x^3 = 0 (ascending coefficients)."""
    a0, a1, a2, a3 = float(a0), float(a1), float(a2), float(a3)
    if is_negligible(a3, max(abs(a0), abs(a1), abs(a2))):
        return solve_quadratic(a2, a1, a0)
    a0, a1, a2 = a0 / a3, a1 / a3, a2 / a3
    q = (3.0 * a1 - a2 * a2) / 9.0
    r = (9.0 * a2 * a1 - 27.0 * a0 - 2.0 * a2 ** 3) / 54.0
    disc = q ** 3 + r * r
    shift = a2 / 3.0
    if _discriminant_is_zero(disc, abs(q) ** 3 + r * r):
        u = cbrt(r)
        if u == 0.0:
            return (-shift,)
        return (2.0 * u - shift, -u - shift)
    if disc > 0.0:
        sq = math.sqrt(disc)
        return (cbrt(r + sq) + cbrt(r - sq) - shift,)
    theta = math.acos(max(-1.0, min(1.0, r / math.sqrt(-q ** 3))))
    m = 2.0 * math.sqrt(-q)
    return _merge_close_roots(m * math.cos((theta + 2.0 * math.pi * k) / 3.0) - shift for k in range(3))


def cubic_real_root(a0: float, a1: float, a2: float, a3: float) -> float:
    """One real root of a cubic with non-zero leading coefficient.

    Used for the resolvent cubic in Ferrari's method, where any real root
    will do: the Cardano root when the discriminant is non-negative, the
    k = 0 trigonometric root otherwise.
    """
    a0, a1, a2 = a0 / a3, a1 / a3, a2 / a3
    q = (3.0 * a1 - a2 * a2) / 9.0
    r = (9.0 * a2 * a1 - 27.0 * a0 - 2.0 * a2 ** 3) / 54.0
    disc = q ** 3 + r * r
    shift = a2 / 3.0
    if disc >= 0.0 or _discriminant_is_zero(disc, abs(q) ** 3 + r * r):
        sq = math.sqrt(max(disc, 0.0))
        return cbrt(r + sq) + cbrt(r - sq) - shift
    theta = math.acos(max(-1.0, min(1.0, r / math.sqrt(-q ** 3))))
    return 2.0 * math.sqrt(-q) * math.cos(theta / 3.0) - shift


def solve_quartic(a0: float, a1: float, a2: float, a3: float, a4: float) -> Roots:
    """Real roots of a0 + a1*x + a2*x^2 + a3*x^3 + a4*x^4 = 0 by Ferrari's method.

    The quartic is split into two quadratic factors through one real root
    ``y1`` of the resolvent cubic. Each factor contributes two roots, one
    repeated root or nothing depending on the sign of its discriminant
    (D^2 for the first, E^2 for the second).
    """
    a0, a1, a2, a3, a4 = float(a0), float(a1), float(a2), float(a3), float(a4)
    if is_negligible(a4, max(abs(a0), abs(a1), abs(a2), abs(a3))):
        return solve_cubic(a0, a1, a2, a3)
    a0, a1, a2, a3 = a0 / a4, a1 / a4, a2 / a4, a3 / a4

    y1 = cubic_real_root(4.0 * a2 * a0 - a1 * a1 - a3 * a3 * a0, a1 * a3 - 4.0 * a0, -a2, 1.0)
    quarter = a3 * a3 / 4.0
    r_sq = quarter - a2 + y1
    # R itself, not R^2, is compared at EPS_ROOT relative
    if r_sq <= EPS_RESOLVENT * (quarter + abs(a2) + abs(y1)):
        big_r = 0.0
        front = 3.0 * quarter - 2.0 * a2
        radicand = y1 * y1 - 4.0 * a0
        back = 2.0 * math.sqrt(max(radicand, 0.0))
    else:
        big_r = math.sqrt(r_sq)
        front = 3.0 * quarter - r_sq - 2.0 * a2
        back = (4.0 * a3 * a2 - 8.0 * a1 - a3 ** 3) / (4.0 * big_r)

    roots = []
    scale = 3.0 * quarter + abs(r_sq) + 2.0 * abs(a2) + abs(back)
    for sq, base in ((front + back, -a3 / 4.0 + big_r / 2.0),
                     (front - back, -a3 / 4.0 - big_r / 2.0)):
        if _discriminant_is_zero(sq, scale):
            roots.append(base)
        elif sq > 0.0:
            half = math.sqrt(sq) / 2.0
            roots.extend((base + half, base - half))
    return _merge_close_roots(roots)


# ---------------------------------------------------------------------------
# Bairstow
# ---------------------------------------------------------------------------

def _restart_seed(attempt: int, alpha0: float, alpha1: float) -> Tuple[float, float]:
    """Seed for the given restart attempt.

    Attempt 0 is the configured seed. Later attempts place the trial
    complex-conjugate root pair r*exp(+-i*phi) on growing radii at golden
    angle steps, i.e. alpha1 = 2 r cos(phi), alpha0 = -r^2.
    """
    if attempt == 0:
        return alpha0, alpha1
    radius = RESTART_RADIUS_STEP * (attempt + 1)
    phi = attempt * GOLDEN_ANGLE
    return -radius * radius, 2.0 * radius * math.cos(phi)


def _synthetic_division(c: np.ndarray, alpha0: float, alpha1: float) -> Tuple[np.ndarray, np.ndarray]:
    """Divide by x^2 - alpha1*x - alpha0 and differentiate the remainder.

    ``d[2:]`` is the quotient and ``d[0], d[1]`` the remainder terms;
    ``delta`` carries their partial derivatives for the Newton correction.
    """
    n = c.size - 1
    d = np.zeros(n + 1)
    delta = np.zeros(n + 1)
    d[n] = c[n]
    d[n - 1] = c[n - 1] + alpha1 * d[n]
    for j in range(n - 2, -1, -1):
        d[j] = c[j] + alpha1 * d[j + 1] + alpha0 * d[j + 2]
    delta[n - 1] = d[n]
    delta[n - 2] = d[n - 1] + alpha1 * delta[n - 1]
    for j in range(n - 3, -1, -1):
        delta[j] = d[j + 1] + alpha1 * delta[j + 1] + alpha0 * delta[j + 2]
    return d, delta


def _iterate_factor(c: np.ndarray, alpha0: float, alpha1: float,
                    tolerance: float, max_iterations: int):
    """Newton iteration on one quadratic factor.

    Returns (alpha0, alpha1, quotient, iterations) on convergence and
    (None, iterations) when the iteration cap is hit, the correction matrix
    is singular or an iterate stops being finite.
    """
    for it in range(1, max_iterations + 1):
        d, delta = _synthetic_division(c, alpha0, alpha1)
        det = delta[1] * delta[1] - delta[0] * delta[2]
        if det == 0.0 or not math.isfinite(det):
            return None, it
        inc0 = (delta[1] * -d[0] - delta[0] * -d[1]) / det
        inc1 = (delta[1] * -d[1] - -d[0] * delta[2]) / det
        alpha0 += inc0
        alpha1 += inc1
        if not (math.isfinite(alpha0) and math.isfinite(alpha1)):
            return None, it
        if abs(inc0) <= tolerance * max(1.0, abs(alpha0)) and abs(inc1) <= tolerance * max(1.0, abs(alpha1)):
            d, _ = _synthetic_division(c, alpha0, alpha1)
            return (alpha0, alpha1, d[2:].copy()), it
    return None, max_iterations


def _factor_roots(alpha0: float, alpha1: float) -> Roots:
    """Real roots of x^2 - alpha1*x - alpha0."""
    disc = alpha1 * alpha1 + 4.0 * alpha0
    if _discriminant_is_zero(disc, alpha1 * alpha1 + abs(4.0 * alpha0)):
        return (float(alpha1) / 2.0,)
    if disc < 0.0:
        return ()
    sq = math.sqrt(disc)
    return (float(alpha1 + sq) / 2.0, float(alpha1 - sq) / 2.0)


def _solve_low_degree(c: np.ndarray) -> Roots:
    n = c.size - 1
    if n == 2:
        return solve_quadratic(c[2], c[1], c[0])
    if n == 1:
        return solve_linear(c[1], c[0])
    return ()


def solve_polynomial(coeffs: Sequence[float], tolerance: float = EPS_ROOT,
                     max_iterations: int = MAX_ITERATIONS, alpha0: float = ALPHA0_SEED,
                     alpha1: float = ALPHA1_SEED, max_restarts: int = MAX_RESTARTS) -> SolveResult:
    """Real roots of an arbitrary-degree polynomial by Bairstow's method.

    Parameters
    ----------
    coeffs : sequence of float
        Ascending coefficients; negligible leading terms are dropped.
    tolerance : float
        Convergence threshold on the (alpha0, alpha1) increments, relative to
        their magnitude once it exceeds one.
    max_iterations : int
        Iteration cap per attempt at one quadratic factor.
    alpha0, alpha1 : float
        Seed of the factor x^2 - alpha1*x - alpha0.
    max_restarts : int
        Extra attempts from perturbed seeds before giving up on a factor.

    Returns
    -------
    SolveResult
        Roots in factor extraction order. ``converged`` is False when a factor
        could not be extracted; the roots found up to that point are kept.
    """
    c = trim_leading(coeffs)
    if c.size == 0:
        logger.debug("identically zero polynomial, no isolated roots")
        return SolveResult(())
    c = c / c[-1]
    roots = []
    total = 0
    while c.size - 1 > 2:
        found = None
        for attempt in range(max_restarts + 1):
            seed0, seed1 = _restart_seed(attempt, alpha0, alpha1)
            found, used = _iterate_factor(c, seed0, seed1, tolerance, max_iterations)
            total += used
            if found is not None:
                break
            logger.debug("bairstow attempt %d on degree %d failed", attempt, c.size - 1)
        if found is None:
            logger.warning("bairstow did not converge on degree-%d factor after %d iterations; "
                           "returning %d partial root(s)", c.size - 1, total, len(roots))
            return SolveResult(_merge_close_roots(roots), converged=False, iterations=total)
        f0, f1, c = found
        roots.extend(_factor_roots(f0, f1))
    roots.extend(_solve_low_degree(c))
    return SolveResult(_merge_close_roots(roots), converged=True, iterations=total)


def solve_real_roots(coeffs: Sequence[float], config: Optional[SolverConfig] = None) -> SolveResult:
    """Dispatch on the effective degree: closed forms up to four, Bairstow above."""
    cfg = config or SolverConfig()
    c = trim_leading(as_coefficients(coeffs), EPS_COEFF)
    n = c.size - 1
    if n <= 0:
        return SolveResult(())
    if n == 1:
        return SolveResult(solve_linear(c[1], c[0]))
    if n == 2:
        return SolveResult(solve_quadratic(c[2], c[1], c[0]))
    if n == 3:
        return SolveResult(solve_cubic(*c))
    if n == 4:
        return SolveResult(solve_quartic(*c))
    return solve_polynomial(c, tolerance=cfg.tolerance, max_iterations=cfg.max_iterations,
                            alpha0=cfg.alpha0, alpha1=cfg.alpha1, max_restarts=cfg.max_restarts)
