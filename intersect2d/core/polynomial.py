"""Polynomial helpers shared by the solvers and the reductions.

Polynomials are numpy float64 arrays of coefficients in ascending degree
(``c[k]`` multiplies ``x**k``), the convention of ``numpy.polynomial``.
"""
from __future__ import annotations

from math import comb
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import polynomial as P

from .constants import EPS_COEFF

__all__ = [
    'as_coefficients', 'coefficient_scale', 'is_negligible', 'trim_leading',
    'degree', 'evaluate', 'bezier_power_basis', 'half_angle_linear',
    'conic_circle_quartic', 'sylvester_resultant',
]


def as_coefficients(coeffs) -> np.ndarray:
    return np.atleast_1d(np.asarray(coeffs, dtype=np.float64))


def coefficient_scale(coeffs) -> float:
    c = as_coefficients(coeffs)
    return float(np.max(np.abs(c))) if c.size else 0.0


def is_negligible(value: float, scale: float, eps: float = EPS_COEFF) -> bool:
    """True when ``value`` is zero relative to ``scale`` (exact zero always is)."""
    return value == 0.0 or abs(value) <= eps * scale


def trim_leading(coeffs, eps: float = EPS_COEFF) -> np.ndarray:
    """Drop highest-degree coefficients that vanish relative to the largest one.

    Returns an empty array for an identically zero polynomial.
    """
    c = as_coefficients(coeffs)
    scale = coefficient_scale(c)
    if scale == 0.0:
        return c[:0]
    n = c.size
    while n > 0 and is_negligible(c[n - 1], scale, eps):
        n -= 1
    return c[:n].copy()


def degree(coeffs, eps: float = EPS_COEFF) -> int:
    """Degree after trimming; -1 for the zero polynomial."""
    return trim_leading(coeffs, eps).size - 1


def evaluate(coeffs, x: float) -> float:
    return float(P.polyval(x, as_coefficients(coeffs)))


def bezier_power_basis(control_points: Sequence[Sequence[float]]) -> Tuple[np.ndarray, np.ndarray]:
    """Convert Bernstein control points to ascending power-basis coefficients.

    For a curve of degree n the coefficient of t^k is
    C(n, k) * sum_i (-1)^(k-i) C(k, i) P_i. For a cubic this gives
    A = -P0 + 3P1 - 3P2 + P3, B = 3P0 - 6P1 + 3P2, C = -3P0 + 3P1, D = P0,
    returned as [D, C, B, A].
    """
    pts = np.asarray(control_points, dtype=np.float64)
    n = pts.shape[0] - 1
    out = np.zeros((n + 1, 2), dtype=np.float64)
    for k in range(n + 1):
        acc = np.zeros(2, dtype=np.float64)
        for i in range(k + 1):
            acc += (-1) ** (k - i) * comb(k, i) * pts[i]
        out[k] = comb(n, k) * acc
    return out[:, 0].copy(), out[:, 1].copy()


def half_angle_linear(constant: float, cos_coeff: float, sin_coeff: float) -> np.ndarray:
    """``constant + cos_coeff*cos(t) + sin_coeff*sin(t)`` times ``1 + x^2``.

    With x = tan(t/2): cos t = (1 - x^2)/(1 + x^2) and sin t = 2x/(1 + x^2).
    """
    return np.array([constant + cos_coeff, 2.0 * sin_coeff, constant - cos_coeff],
                    dtype=np.float64)


def conic_circle_quartic(offset, u, v, radius: float) -> np.ndarray:
    """Quartic in x = tan(t/2) for |offset + u cos t + v sin t| = radius.

    The left side is a conic point relative to a circle centre. Multiplying
    the squared distance equation by (1 + x^2)^2 gives X^2 + Y^2 - r^2 W^2
    with X, Y the half-angle forms of each coordinate and W = 1 + x^2.

    Always five coefficients: an exactly zero x^4 term is the root t = pi
    and must stay visible to the caller.
    """
    X = half_angle_linear(offset[0], u[0], v[0])
    Y = half_angle_linear(offset[1], u[1], v[1])
    W = np.array([1.0, 0.0, 1.0])
    quartic = P.polysub(P.polyadd(P.polymul(X, X), P.polymul(Y, Y)),
                        (radius * radius) * P.polymul(W, W))
    out = np.zeros(5, dtype=np.float64)
    out[:quartic.size] = quartic
    return out


def _poly_degree_in_outer(rows: Sequence[np.ndarray]) -> int:
    """Highest index whose coefficient polynomial is not identically small."""
    scale = max((coefficient_scale(r) for r in rows), default=0.0)
    k = len(rows) - 1
    while k >= 0 and coefficient_scale(rows[k]) <= EPS_COEFF * scale:
        k -= 1
    return k


def _poly_determinant(matrix: List[List[Optional[np.ndarray]]]) -> np.ndarray:
    """Determinant of a square matrix of polynomial entries (``None`` is zero).

    Laplace expansion along successive rows, memoised on the set of columns
    still available, which is enough for the at most 6x6 Sylvester matrices
    built here.
    """
    n = len(matrix)
    memo = {}

    def minor(cols: Tuple[int, ...]) -> np.ndarray:
        row = n - len(cols)
        if row == n:
            return np.array([1.0])
        if cols in memo:
            return memo[cols]
        total = np.zeros(1)
        for idx, col in enumerate(cols):
            entry = matrix[row][col]
            if entry is None:
                continue
            term = P.polymul(entry, minor(cols[:idx] + cols[idx + 1:]))
            total = P.polyadd(total, term) if idx % 2 == 0 else P.polysub(total, term)
        memo[cols] = total
        return total

    return minor(tuple(range(n)))


def sylvester_resultant(f: Sequence, g: Sequence) -> Optional[np.ndarray]:
    """Eliminate the inner variable from two bivariate polynomials.

    ``f`` and ``g`` list, in ascending powers of the eliminated variable,
    the coefficient polynomials (ascending arrays in the kept variable).
    Returns the resultant as a polynomial in the kept variable, or None when
    neither input depends on the eliminated variable.
    """
    f = [as_coefficients(c) for c in f]
    g = [as_coefficients(c) for c in g]
    m = _poly_degree_in_outer(f)
    n = _poly_degree_in_outer(g)
    if m < 0 or n < 0:
        return np.zeros(1)
    if m == 0 and n == 0:
        return None
    if m == 0:
        return P.polypow(f[0], n)
    if n == 0:
        return P.polypow(g[0], m)
    size = m + n
    matrix: List[List[Optional[np.ndarray]]] = [[None] * size for _ in range(size)]
    for i in range(n):
        for k in range(m + 1):
            matrix[i][i + k] = f[m - k]
    for i in range(m):
        for k in range(n + 1):
            matrix[n + i][i + k] = g[n - k]
    return _poly_determinant(matrix)
