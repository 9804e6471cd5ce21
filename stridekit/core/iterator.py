"""
StrideKit Core: Iterators
=========================

Random-access cursors over the elements (or trailing sub-views) of a view.

A ViewIterator holds its own buffer reference plus a copy of the view's
offset, shape and strides, so it stays valid after the view it came from is
cleared or collected. Positions are a flat row-major index decoded against
the walked axes.
"""

from __future__ import annotations
from typing import Any, Optional

from ..config import get_config
from ..errors import DomainError, InvalidArgumentError, OutOfRangeError
from .buffer import SharedBuffer
from .point import Point


class ViewIterator:
    """
    Random-access iterator over a view.

    With ``depth == 0`` the cursor yields elements. With ``depth == M > 0``
    it walks the leading ``N - M`` axes and yields rank-M sub-views.

    Supports the Python iterator protocol: ``next()`` returns the current
    item and then advances.

    Example:
        >>> v = View((2, 3), np.int32, items=range(6))
        >>> it = v.begin()
        >>> it += 4
        >>> it.get(), it.position
        (4, Point(1, 1))
        >>> v.end() - it
        2
    """

    def __init__(
        self,
        buffer: Optional[SharedBuffer],
        offset: int,
        shape: Point,
        strides: Point,
        readonly: bool = False,
        depth: int = 0,
        index: int = 0,
    ):
        if depth < 0 or depth > shape.ndim:
            raise InvalidArgumentError(f"ViewIterator: depth {depth} out of range for rank {shape.ndim}")
        self._buffer = buffer.acquire() if buffer is not None else None
        self._offset = offset
        self._shape = shape
        self._strides = strides
        self._readonly = readonly
        self._depth = depth
        self._outer = shape.high(shape.ndim - depth)
        self._total = self._outer.product() if buffer is not None else 0
        self._index = index

    def __del__(self):
        buffer = getattr(self, '_buffer', None)
        if buffer is not None:
            self._buffer = None
            buffer.release()

    def close(self):
        """Release the buffer reference early."""
        buffer = self._buffer
        self._buffer = None
        self._total = 0
        if buffer is not None:
            buffer.release()

    def copy(self) -> 'ViewIterator':
        return ViewIterator(
            self._buffer, self._offset, self._shape, self._strides,
            self._readonly, self._depth, self._index,
        )

    __copy__ = copy

    # =========================================================================
    # Position
    # =========================================================================

    @property
    def index(self) -> int:
        """Flat row-major index over the walked axes."""
        return self._index

    @property
    def position(self) -> Point:
        """Multi-index over the walked axes."""
        if self._total == 0:
            return Point.zeros(self._outer.ndim)
        return self._outer.unravel(self._index)

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def readonly(self) -> bool:
        return self._readonly

    def _address(self, index: int) -> int:
        if self._buffer is None or index < 0 or index >= self._total:
            raise OutOfRangeError(f"iterator index {index} out of range [0, {self._total})")
        position = self._outer.unravel(index)
        return self._offset + sum(p * s for p, s in zip(position, self._strides))

    # =========================================================================
    # Dereference
    # =========================================================================

    def _deref(self, index: int) -> Any:
        address = self._address(index)
        if self._depth == 0:
            return self._buffer.data[address]
        from .view import View
        return View._from_parts(
            self._buffer,
            address,
            self._shape.low(self._depth),
            self._strides.low(self._depth),
            self._readonly,
        )

    def get(self) -> Any:
        """Current element, or the current sub-view when depth > 0."""
        return self._deref(self._index)

    def set(self, value: Any):
        """Write ``value`` through the iterator."""
        if self._readonly:
            raise DomainError("set(value): iterator is readonly")
        if self._depth == 0:
            address = self._address(self._index)
            self._buffer.data[address] = value
        else:
            self._deref(self._index).set_to(value)

    def __getitem__(self, k: int) -> Any:
        return self._deref(self._index + k)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __iadd__(self, k: int) -> 'ViewIterator':
        self._index += k
        return self

    def __isub__(self, k: int) -> 'ViewIterator':
        self._index -= k
        return self

    def __add__(self, k: int) -> 'ViewIterator':
        if not isinstance(k, int):
            return NotImplemented
        result = self.copy()
        result._index += k
        return result

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, ViewIterator):
            self._check_same_source(other)
            return self._index - other._index
        if isinstance(other, int):
            result = self.copy()
            result._index -= other
            return result
        return NotImplemented

    # =========================================================================
    # Comparison
    # =========================================================================

    def _same_source(self, other: 'ViewIterator') -> bool:
        return (
            self._buffer is other._buffer
            and self._offset == other._offset
            and self._shape == other._shape
            and self._strides == other._strides
            and self._depth == other._depth
        )

    def _check_same_source(self, other: 'ViewIterator'):
        if get_config().debug_checks and not self._same_source(other):
            raise AssertionError("comparing iterators from different views")

    def __eq__(self, other) -> bool:
        if not isinstance(other, ViewIterator):
            return NotImplemented
        self._check_same_source(other)
        return self._index == other._index

    def __ne__(self, other) -> bool:
        if not isinstance(other, ViewIterator):
            return NotImplemented
        self._check_same_source(other)
        return self._index != other._index

    def __lt__(self, other: 'ViewIterator') -> bool:
        self._check_same_source(other)
        return self._index < other._index

    def __le__(self, other: 'ViewIterator') -> bool:
        self._check_same_source(other)
        return self._index <= other._index

    def __gt__(self, other: 'ViewIterator') -> bool:
        self._check_same_source(other)
        return self._index > other._index

    def __ge__(self, other: 'ViewIterator') -> bool:
        self._check_same_source(other)
        return self._index >= other._index

    __hash__ = None

    # =========================================================================
    # Python iterator protocol
    # =========================================================================

    def __iter__(self) -> 'ViewIterator':
        return self

    def __next__(self) -> Any:
        if self._index >= self._total:
            raise StopIteration
        value = self._deref(self._index)
        self._index += 1
        return value

    def __repr__(self) -> str:
        return f"ViewIterator(index={self._index}, total={self._total}, depth={self._depth})"


class SubViews:
    """Iterable over the rank-M trailing sub-views of a view."""

    def __init__(
        self,
        buffer: Optional[SharedBuffer],
        offset: int,
        shape: Point,
        strides: Point,
        readonly: bool,
        depth: int,
    ):
        self._buffer = buffer.acquire() if buffer is not None else None
        self._parts = (offset, shape, strides, readonly)
        self._depth = depth
        self._count = shape.high(shape.ndim - depth).product() if buffer is not None else 0

    def __del__(self):
        buffer = getattr(self, '_buffer', None)
        if buffer is not None:
            self._buffer = None
            buffer.release()

    def begin(self) -> ViewIterator:
        return ViewIterator(self._buffer, *self._parts, depth=self._depth, index=0)

    def end(self) -> ViewIterator:
        return ViewIterator(self._buffer, *self._parts, depth=self._depth, index=self._count)

    def __iter__(self) -> ViewIterator:
        return self.begin()

    def __len__(self) -> int:
        return self._count
