"""Central numerical tolerances and solver seeds.

This module centralizes the small numeric thresholds used by the solvers and
the reductions so they can be tuned consistently and referenced without
scattering literals across the code.
"""
from __future__ import annotations

import math

# Root-finding tolerances
EPS_ROOT: float = 1e-7                      # Bairstow increment tolerance, root separation scale
EPS_DISCRIMINANT: float = EPS_ROOT          # relative size under which a root-count discriminant counts as zero
EPS_RESOLVENT: float = EPS_ROOT ** 2        # same test on R^2 in Ferrari's method, i.e. on R at EPS_ROOT
EPS_ROOT_MERGE: float = math.sqrt(EPS_DISCRIMINANT)  # relative gap under which two real roots are one double root
EPS_COEFF: float = 1e-12                    # relative size under which a coefficient counts as zero

# Parameter-domain tolerances
EPS_PARAM: float = 1e-9     # slack accepted (then clamped) outside [0, 1]
EPS_DEDUPE: float = 1e-7    # parameters closer than this describe the same intersection
EPS_MATCH: float = 1e-6     # relative residual accepted when pairing Bezier parameters

# Bairstow iteration controls
MAX_ITERATIONS: int = 100
MAX_RESTARTS: int = 8
ALPHA0_SEED: float = -1.0
ALPHA1_SEED: float = 0.25
RESTART_RADIUS_STEP: float = 0.5                        # restart k tries roots of modulus STEP * (k + 1)
GOLDEN_ANGLE: float = math.pi * (3.0 - math.sqrt(5.0))  # argument step between restarts

__all__ = [
    'EPS_ROOT',
    'EPS_DISCRIMINANT',
    'EPS_RESOLVENT',
    'EPS_ROOT_MERGE',
    'EPS_COEFF',
    'EPS_PARAM',
    'EPS_DEDUPE',
    'EPS_MATCH',
    'MAX_ITERATIONS',
    'MAX_RESTARTS',
    'ALPHA0_SEED',
    'ALPHA1_SEED',
    'RESTART_RADIUS_STEP',
    'GOLDEN_ANGLE',
]
