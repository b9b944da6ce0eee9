"""Public package API for the intersect2d kernel.

This facade provides a flat import surface on top of the implementation
package ``intersect2d.core``.

Example
-------
    from intersect2d import Circle, Segment, intersect

    hits = intersect(Segment((0, 0), (4, 0)), Circle((2, 0), 1))
    for point in hits:
        print(point.x, point.y)

The deeper modules (``intersect2d.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # Python 3.8+ runtime version export
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("intersect2d")  # populated when installed
except Exception:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_const = _imp('intersect2d.core.constants')
_conf = _imp('intersect2d.core.config')
_log = _imp('intersect2d.core.logging_utils')
_prim = _imp('intersect2d.core.primitives')
_poly = _imp('intersect2d.core.polynomial')
_solv = _imp('intersect2d.core.solvers')
_valid = _imp('intersect2d.core.validation')
_intx = _imp('intersect2d.core.intersect')
_bounds = _imp('intersect2d.core.bounds')

# Value types
Point = _prim.Point
Line = _prim.Line
Segment = _prim.Segment
Circle = _prim.Circle
Ellipse = _prim.Ellipse
QuadraticBezier = _prim.QuadraticBezier
CubicBezier = _prim.CubicBezier
IntersectionResult = _valid.IntersectionResult
BoundingBox = _bounds.BoundingBox
bounding_box = _bounds.bounding_box

# Configuration and logging
SolverConfig = _conf.SolverConfig
DomainConfig = _conf.DomainConfig
IntersectConfig = _conf.IntersectConfig
configure_logging = _log.configure_logging
get_logger = _log.get_logger

# Tolerances
EPS_ROOT = _const.EPS_ROOT
EPS_PARAM = _const.EPS_PARAM
EPS_DEDUPE = _const.EPS_DEDUPE

# Solver kernel
SolveResult = _solv.SolveResult
cbrt = _solv.cbrt
solve_quadratic = _solv.solve_quadratic
solve_cubic = _solv.solve_cubic
cubic_real_root = _solv.cubic_real_root
solve_quartic = _solv.solve_quartic
solve_polynomial = _solv.solve_polynomial
solve_real_roots = _solv.solve_real_roots

# Reductions
intersect = _intx.intersect
self_intersect = _intx.self_intersect
for _name in _intx.__all__:
    globals()[_name] = getattr(_intx, _name)
del _name

# Namespace submodules for exploratory users
constants = _const
polynomial = _poly
solvers = _solv

__all__ = [
    '__version__',
    # value types
    'Point', 'Line', 'Segment', 'Circle', 'Ellipse', 'QuadraticBezier', 'CubicBezier',
    'IntersectionResult', 'BoundingBox', 'bounding_box',
    # configuration / logging
    'SolverConfig', 'DomainConfig', 'IntersectConfig', 'configure_logging', 'get_logger',
    # tolerances
    'EPS_ROOT', 'EPS_PARAM', 'EPS_DEDUPE',
    # solvers
    'SolveResult', 'cbrt', 'solve_quadratic', 'solve_cubic', 'cubic_real_root',
    'solve_quartic', 'solve_polynomial', 'solve_real_roots',
    # submodules
    'constants', 'polynomial', 'solvers',
] + list(_intx.__all__)
