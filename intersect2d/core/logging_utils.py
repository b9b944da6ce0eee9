"""Logging utilities for intersect2d.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All intersect2d code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_ROOT_NAME = 'intersect2d'
_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_package_root() -> logging.Logger:
    """Ensure the 'intersect2d' logger carries a single stream handler.

    NullHandlers installed by the package facade are replaced so that
    configured levels actually produce output. Returns the package logger.
    """
    pkg_root = logging.getLogger(_ROOT_NAME)
    has_real = any(not isinstance(h, logging.NullHandler) for h in pkg_root.handlers)
    if not has_real:
        for h in list(pkg_root.handlers):
            if isinstance(h, logging.NullHandler):
                pkg_root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        pkg_root.addHandler(handler)
        # Do not propagate to the process root
        pkg_root.propagate = False
    return pkg_root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = getattr(logging, str(level).upper(), None)
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> logging.Logger:
    """Configure the 'intersect2d' logger family level.

    This does NOT modify the process root logger. Returns the package logger.
    """
    pkg_root = _ensure_package_root()
    pkg_root.setLevel(_to_level(level))
    return pkg_root


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'intersect2d' namespace.

    Names outside the namespace are prefixed with it. Without an explicit
    level the logger is left at NOTSET so it inherits whatever
    configure_logging() set on the package logger.
    """
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
