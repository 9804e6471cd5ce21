"""
StrideKit Configuration
=======================

Global runtime settings.

Provides:
- Default element type for views created without one
- Zero-initialization of default-constructed numeric buffers
- Debug checks (cross-source iterator assertions)

Usage:
    import stridekit as sk

    sk.set_default_dtype('int32')
    sk.set_zero_initialize(False)   # leave numeric buffers uninitialized

    # Or disable debug checks from the environment
    #   STRIDEKIT_DEBUG=0 python app.py
"""

from __future__ import annotations

import os
from typing import Any

import numpy as np

__all__ = [
    'get_config',
    'reset_config',
    'set_default_dtype',
    'set_zero_initialize',
    'set_debug_checks',
]


def _debug_from_env() -> bool:
    """Read ``STRIDEKIT_DEBUG``, falling back to the interpreter's debug flag."""
    value = os.environ.get('STRIDEKIT_DEBUG')
    if value is None:
        return __debug__
    return value.lower() not in ('0', 'false', 'no', 'off')


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration state.

    Attributes:
        default_dtype: numpy dtype used when no element type is given.
        zero_initialize: Zero-fill default-constructed numeric buffers.
        debug_checks: Verify that compared iterators share a source.
    """

    def __init__(self):
        self.default_dtype: np.dtype = np.dtype(np.float64)
        self.zero_initialize: bool = True
        self.debug_checks: bool = _debug_from_env()

    def __repr__(self) -> str:
        return (
            f"Config(default_dtype={self.default_dtype}, "
            f"zero_initialize={self.zero_initialize}, "
            f"debug_checks={self.debug_checks})"
        )


_config = _Config()


def get_config() -> _Config:
    """Get the global configuration object."""
    return _config


def reset_config():
    """Restore every setting to its default."""
    _config.__init__()


def set_default_dtype(dtype: Any):
    """
    Set the element type used when a view is created without one.

    Args:
        dtype: Anything ``numpy.dtype`` accepts
    """
    _config.default_dtype = np.dtype(dtype)


def set_zero_initialize(enabled: bool):
    """Enable or disable zero-filling of default-constructed numeric buffers."""
    _config.zero_initialize = bool(enabled)


def set_debug_checks(enabled: bool):
    """Enable or disable cross-source iterator assertions."""
    _config.debug_checks = bool(enabled)
