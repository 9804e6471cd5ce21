"""
StrideKit: Strided N-Dimensional Views
======================================

StrideKit allocates N-dimensional buffers of any element type and derives
zero-copy views from them. Views are sliced, transposed, flipped, windowed,
subsampled, repeated or reshaped while sharing one reference-counted buffer.

Example:
    >>> import stridekit as sk
    >>> img = sk.from_iterable((4, 6), range(24), dtype='int32')
    >>> rows = img.skip_x(2)            # every other row
    >>> rows.shape
    Point(2, 6)
    >>> rows += 100                     # writes through to img
    >>> img.at((2, 0))
    112
"""

__version__ = "0.1.0"

from typing import Any, Callable, Iterable

# Core types
from .core import (
    Point,
    AcquireMode,
    SharedBuffer,
    View,
    ViewIterator,
    SubViews,
)

# Errors
from .errors import (
    StrideKitError,
    InvalidArgumentError,
    OutOfRangeError,
    DomainError,
    EmptyViewError,
)

# Configuration
from .config import (
    get_config,
    reset_config,
    set_default_dtype,
    set_zero_initialize,
    set_debug_checks,
)

import numpy as np
from .core.point import PointLike


# =============================================================================
# Factory Functions
# =============================================================================

def empty(ndim: int, readonly: bool = False) -> View:
    """Empty view of rank ``ndim``."""
    return View.empty(ndim, readonly=readonly)


def full(shape: PointLike, value: Any, dtype: Any = None) -> View:
    """
    View of ``shape`` with every element set to ``value``.

    Example:
        >>> sk.full((2, 3), 7, dtype='int64').to_numpy()
        array([[7, 7, 7],
               [7, 7, 7]])
    """
    return View(shape, dtype, fill=value)


def from_numpy(array: np.ndarray, mode: AcquireMode = AcquireMode.COPY, readonly: bool = False) -> View:
    """
    View over the elements of a numpy array.

    Args:
        array: Source array; ASSUME and REFERENCE require it to be C-contiguous
        mode: COPY (default) copies, ASSUME takes the array over, REFERENCE
            borrows it without ever releasing it
        readonly: Create a readonly view

    Returns:
        View with the array's shape and dtype
    """
    if not isinstance(array, np.ndarray):
        array = np.asarray(array)
    return View(array.shape, array.dtype, data=array, mode=mode, readonly=readonly)


def from_generator(shape: PointLike, fn: Callable[[], Any], dtype: Any = None) -> View:
    """View whose elements are produced by calling ``fn()`` once each, in row-major order."""
    return View(shape, dtype, generator=fn)


def from_iterable(shape: PointLike, items: Iterable[Any], dtype: Any = None) -> View:
    """View filled from ``items`` in row-major order; missing elements are default-constructed."""
    return View(shape, dtype, items=items)


__all__ = [
    # Core
    'Point',
    'AcquireMode',
    'SharedBuffer',
    'View',
    'ViewIterator',
    'SubViews',
    # Errors
    'StrideKitError',
    'InvalidArgumentError',
    'OutOfRangeError',
    'DomainError',
    'EmptyViewError',
    # Config
    'get_config',
    'reset_config',
    'set_default_dtype',
    'set_zero_initialize',
    'set_debug_checks',
    # Factories
    'empty',
    'full',
    'from_numpy',
    'from_generator',
    'from_iterable',
]
