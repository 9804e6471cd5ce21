"""
StrideKit Core: Point
=====================

Fixed-size signed integer vector used as a shape, a stride or a multi-index.
"""

from __future__ import annotations
import operator
from typing import Iterable, Iterator, Optional, Tuple, Union

from ..errors import InvalidArgumentError, OutOfRangeError

PointLike = Union['Point', Iterable[int], int]


class Point:
    """
    An immutable integer point with elementwise arithmetic.

    A point of rank N plays three roles:
        - shape: all entries positive, or all zero for "no shape"
        - stride: any integers, negative for reversed axes, zero for repeats
        - multi-index: each entry in ``[0, shape[i])``

    Example:
        >>> p = Point([2, 3, 4])
        >>> p.removed(1)
        Point(2, 4)
        >>> p.contiguous_strides()
        Point(12, 4, 1)
    """

    __slots__ = ('_values',)

    def __init__(self, values: PointLike = (), ndim: Optional[int] = None):
        """
        Args:
            values: Point, iterable of ints, or a single int
            ndim: Expected rank. A single value is broadcast to every entry;
                any other length mismatch raises InvalidArgumentError.
        """
        if isinstance(values, Point):
            items = values._values
        else:
            try:
                items = (operator.index(values),)
            except TypeError:
                items = tuple(operator.index(v) for v in values)

        if ndim is not None and len(items) != ndim:
            if len(items) != 1:
                raise InvalidArgumentError(
                    f"Point expects {ndim} values, got {len(items)}"
                )
            items = items * ndim
        self._values: Tuple[int, ...] = items

    @classmethod
    def filled(cls, ndim: int, value: int = 0) -> 'Point':
        """Point of rank ``ndim`` with every entry set to ``value``."""
        return cls((value,) * ndim)

    @classmethod
    def zeros(cls, ndim: int) -> 'Point':
        return cls.filled(ndim, 0)

    # =========================================================================
    # Sequence protocol
    # =========================================================================

    @property
    def ndim(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __getitem__(self, n):
        if isinstance(n, slice):
            return Point(self._values[n])
        return self._values[n]

    def to_tuple(self) -> Tuple[int, ...]:
        return self._values

    def __eq__(self, other) -> bool:
        if isinstance(other, Point):
            return self._values == other._values
        if isinstance(other, (tuple, list)):
            return self._values == tuple(other)
        return NotImplemented

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"Point({', '.join(str(v) for v in self._values)})"

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def _combine(self, other, op, name: str) -> 'Point':
        if isinstance(other, Point):
            if other.ndim != self.ndim:
                raise InvalidArgumentError(
                    f"Point {name}: rank mismatch ({self.ndim} vs {other.ndim})"
                )
            return Point(tuple(op(a, b) for a, b in zip(self._values, other._values)))
        if isinstance(other, int):
            return Point(tuple(op(a, other) for a in self._values))
        return NotImplemented

    def _rcombine(self, other, op) -> 'Point':
        if isinstance(other, int):
            return Point(tuple(op(other, a) for a in self._values))
        return NotImplemented

    def __add__(self, other):
        return self._combine(other, operator.add, 'addition')

    def __sub__(self, other):
        return self._combine(other, operator.sub, 'subtraction')

    def __mul__(self, other):
        return self._combine(other, operator.mul, 'multiplication')

    def __floordiv__(self, other):
        return self._combine(other, operator.floordiv, 'division')

    def __radd__(self, other):
        return self._rcombine(other, operator.add)

    def __rsub__(self, other):
        return self._rcombine(other, operator.sub)

    def __rmul__(self, other):
        return self._rcombine(other, operator.mul)

    def __rfloordiv__(self, other):
        return self._rcombine(other, operator.floordiv)

    def __neg__(self) -> 'Point':
        return Point(tuple(-v for v in self._values))

    # =========================================================================
    # Structural helpers
    # =========================================================================

    def _check_index(self, n: int, limit: int, name: str):
        if n < 0 or n >= limit:
            raise OutOfRangeError(f"{name}: index {n} out of bounds for rank {self.ndim}")

    def removed(self, n: int) -> 'Point':
        """Point of rank N-1 without the entry at ``n``."""
        self._check_index(n, self.ndim, 'removed(n)')
        return Point(self._values[:n] + self._values[n + 1:])

    def inserted(self, n: int, value: int) -> 'Point':
        """Point of rank N+1 with ``value`` placed at ``n``."""
        self._check_index(n, self.ndim + 1, 'inserted(n, value)')
        return Point(self._values[:n] + (value,) + self._values[n:])

    def swapped(self, a: int, b: int) -> 'Point':
        self._check_index(a, self.ndim, 'swapped(a, b)')
        self._check_index(b, self.ndim, 'swapped(a, b)')
        values = list(self._values)
        values[a], values[b] = values[b], values[a]
        return Point(values)

    def high(self, m: int) -> 'Point':
        """The first ``m`` entries."""
        if m < 0 or m > self.ndim:
            raise OutOfRangeError(f"high(m): {m} out of bounds for rank {self.ndim}")
        return Point(self._values[:m])

    def low(self, m: int) -> 'Point':
        """The last ``m`` entries."""
        if m < 0 or m > self.ndim:
            raise OutOfRangeError(f"low(m): {m} out of bounds for rank {self.ndim}")
        return Point(self._values[self.ndim - m:])

    # =========================================================================
    # Shape helpers
    # =========================================================================

    def product(self) -> int:
        """Element count described by this point as a shape."""
        result = 1
        for v in self._values:
            result *= v
        return result

    def contiguous_strides(self) -> 'Point':
        """
        Row-major strides for this point as a shape.

        Strides for ``(..., a, b, c, d)`` are ``(..., b*c*d, c*d, d, 1)``.
        """
        if not self._values:
            return Point(())
        strides = [1]
        for dim in reversed(self._values[1:]):
            strides.append(strides[-1] * dim)
        return Point(tuple(reversed(strides)))

    def unravel(self, index: int) -> 'Point':
        """Row-major multi-index of flat ``index`` within this shape."""
        position = [0] * self.ndim
        for i in range(self.ndim - 1, -1, -1):
            index, position[i] = divmod(index, self._values[i])
        if position and index:
            position[0] += index * self._values[0]
        return Point(position)

    def ravel(self, position: PointLike) -> int:
        """Flat row-major index of ``position`` within this shape."""
        position = Point(position, self.ndim)
        index = 0
        for size, pos in zip(self._values, position):
            index = index * size + pos
        return index
