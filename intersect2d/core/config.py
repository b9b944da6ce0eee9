"""Configuration objects for the solver kernel and the intersection reductions."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict

from .constants import (
    ALPHA0_SEED,
    ALPHA1_SEED,
    EPS_DEDUPE,
    EPS_MATCH,
    EPS_PARAM,
    EPS_ROOT,
    MAX_ITERATIONS,
    MAX_RESTARTS,
)


@dataclass
class SolverConfig:
    tolerance: float = EPS_ROOT
    max_iterations: int = MAX_ITERATIONS
    # Bairstow seed for the quadratic factor x^2 - alpha1*x - alpha0
    alpha0: float = ALPHA0_SEED
    alpha1: float = ALPHA1_SEED
    max_restarts: int = MAX_RESTARTS


@dataclass
class DomainConfig:
    domain_tolerance: float = EPS_PARAM
    dedupe_tolerance: float = EPS_DEDUPE
    match_tolerance: float = EPS_MATCH


@dataclass
class IntersectConfig:
    """Unified configuration.

    Attributes
    ----------
    solver : SolverConfig
        Tolerance, iteration cap and seeds of the polynomial solvers.
    domain : DomainConfig
        Parameter slack, deduplication and pairing tolerances of the
        back-substitution step.
    """
    solver: SolverConfig = field(default_factory=SolverConfig)
    domain: DomainConfig = field(default_factory=DomainConfig)

    @classmethod
    def from_overrides(cls, **overrides: Any) -> 'IntersectConfig':
        """Build a config from flat keyword overrides.

        Each key must name a field of either SolverConfig or DomainConfig,
        e.g. ``IntersectConfig.from_overrides(max_iterations=200, domain_tolerance=0.0)``.
        """
        solver_keys = {f.name for f in fields(SolverConfig)}
        domain_keys = {f.name for f in fields(DomainConfig)}
        solver_kw: Dict[str, Any] = {}
        domain_kw: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key in solver_keys:
                solver_kw[key] = value
            elif key in domain_keys:
                domain_kw[key] = value
            else:
                raise ValueError(f"unknown configuration key: {key!r}")
        return cls(solver=replace(SolverConfig(), **solver_kw),
                   domain=replace(DomainConfig(), **domain_kw))


__all__ = ['SolverConfig', 'DomainConfig', 'IntersectConfig']
