"""
StrideKit Errors
================

Exception taxonomy for the view engine.

Every error also derives from the closest builtin exception, so callers can
catch either ``OutOfRangeError`` or plain ``IndexError``.
"""

from __future__ import annotations

__all__ = [
    'StrideKitError',
    'InvalidArgumentError',
    'OutOfRangeError',
    'DomainError',
    'EmptyViewError',
]


class StrideKitError(Exception):
    """Base class for all StrideKit errors."""


# =============================================================================
# Argument Errors
# =============================================================================

class InvalidArgumentError(StrideKitError, ValueError):
    """
    Mismatched operand shapes, non-positive sizes, reshape size mismatch,
    non-uniform reshape plans and invalid skip/repeat/window counts.
    """


class OutOfRangeError(StrideKitError, IndexError):
    """An index, axis or sub-range argument outside valid bounds."""


# =============================================================================
# State Errors
# =============================================================================

class DomainError(StrideKitError, ValueError):
    """Operation disallowed for the element type, e.g. writing a readonly view."""


class EmptyViewError(StrideKitError, RuntimeError):
    """Operation requiring data invoked on an empty view."""
