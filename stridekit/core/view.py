"""
StrideKit Core: View
====================

A strided window onto a SharedBuffer.

A view is (buffer, offset, shape, strides, readonly). The element at
multi-index I lives at::

    buffer.data[offset + sum(I[k] * strides[k])]

Every transform (slice, transpose, flip, skip, window, repeat, reshape)
returns a new view of the same buffer with recomputed shape, strides and
offset. Only clone(), set_to(), convert_to(), compound assignment and
apply() touch element data.
"""

from __future__ import annotations
import copy
import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

import numpy as np

from ..config import get_config
from ..errors import DomainError, EmptyViewError, InvalidArgumentError, OutOfRangeError
from . import strided
from .buffer import _UNSET, AcquireMode, SharedBuffer, resolve_element_type
from .iterator import SubViews, ViewIterator
from .point import Point, PointLike

logger = logging.getLogger(__name__)


def _replaced(point: Point, dim: int, value: int) -> Point:
    values = list(point)
    values[dim] = value
    return Point(values)


class View:
    """
    N-dimensional strided view with shared, reference-counted storage.

    The rank is fixed when the view is created. Views of the same buffer
    alias memory; writes through one are visible through the others.

    Example:
        >>> a = View((3, 4), np.int64, items=range(12))
        >>> a.strides
        Point(4, 1)
        >>> b = a.transpose()
        >>> b.shape, b.strides
        (Point(4, 3), Point(1, 4))
        >>> b[1, 2] = 100
        >>> a.at((2, 1))
        100
    """

    def __init__(
        self,
        shape: PointLike = (),
        dtype: Any = None,
        *,
        fill: Any = _UNSET,
        data: Any = None,
        mode: AcquireMode = AcquireMode.COPY,
        generator: Optional[Callable[[], Any]] = None,
        items: Optional[Any] = None,
        readonly: bool = False,
    ):
        """
        Create a view over a freshly allocated (or adopted) buffer.

        Args:
            shape: Length of each axis. Any zero entry gives an empty view.
            dtype: Element type (numpy dtype, dtype name, or any class)
            fill: Value copied into every element
            data: Caller-supplied array, acquired according to ``mode``
            mode: AcquireMode for ``data``
            generator: Called with no arguments once per element
            items: Iterable of elements in row-major order
            readonly: Create a readonly view
        """
        shape = Point(shape)
        if shape.ndim == 0:
            raise InvalidArgumentError("View: rank must be at least 1")
        if any(n < 0 for n in shape):
            raise InvalidArgumentError(f"View: shape entries cannot be negative, got {shape}")

        if any(n == 0 for n in shape):
            self._attach(None, 0, Point.zeros(shape.ndim), Point.zeros(shape.ndim), readonly)
            return

        buffer = SharedBuffer(
            shape.product(), dtype,
            fill=fill, data=data, mode=mode, generator=generator, items=items,
        )
        self._attach(buffer, 0, shape, shape.contiguous_strides(), readonly)

    def _attach(self, buffer: Optional[SharedBuffer], offset: int, shape: Point, strides: Point, readonly: bool):
        self._buffer = buffer.acquire() if buffer is not None else None
        self._offset = offset
        self._shape = shape
        self._strides = strides
        self._readonly = readonly

    @classmethod
    def _from_parts(
        cls,
        buffer: Optional[SharedBuffer],
        offset: int,
        shape: Point,
        strides: Point,
        readonly: bool,
    ) -> 'View':
        """Build a view over an existing buffer; the new view acquires it."""
        view = cls.__new__(cls)
        if buffer is None:
            view._attach(None, 0, Point.zeros(shape.ndim), Point.zeros(shape.ndim), readonly)
        else:
            view._attach(buffer, offset, shape, strides, readonly)
        return view

    @classmethod
    def empty(cls, ndim: int, readonly: bool = False) -> 'View':
        """Empty view of rank ``ndim``."""
        return cls(Point.zeros(ndim), readonly=readonly)

    def __del__(self):
        buffer = getattr(self, '_buffer', None)
        if buffer is not None:
            self._buffer = None
            buffer.release()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def shape(self) -> Point:
        return self._shape

    @property
    def strides(self) -> Point:
        return self._strides

    @property
    def offset(self) -> int:
        """Flat buffer index of the first element."""
        return self._offset

    @property
    def ndim(self) -> int:
        return self._shape.ndim

    @property
    def size(self) -> int:
        """Number of elements (0 for an empty view)."""
        if self._buffer is None:
            return 0
        return self._shape.product()

    @property
    def dtype(self) -> Optional[np.dtype]:
        """Element dtype, or None for an empty view."""
        return self._buffer.dtype if self._buffer is not None else None

    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def buffer(self) -> Optional[SharedBuffer]:
        return self._buffer

    @property
    def is_empty(self) -> bool:
        return self._buffer is None

    @property
    def is_continuous(self) -> bool:
        """True if the elements occupy a gap-free block of the buffer."""
        if self._buffer is None:
            return False
        span = sum(abs(s) * (n - 1) for n, s in zip(self._shape, self._strides))
        return span + 1 == self.size

    @property
    def is_aligned(self) -> bool:
        """
        True if a row-major walk visits memory in increasing order.

        Length-1 axes never move the address and are ignored.
        """
        if self._buffer is None:
            return False
        previous = None
        for n, s in zip(self._shape, self._strides):
            if n == 1:
                continue
            if s <= 0 or (previous is not None and s > previous):
                return False
            previous = s
        return True

    @property
    def is_unique(self) -> bool:
        """True if this view is the only holder of its buffer."""
        return self._buffer is not None and self._buffer.unique

    def length(self, dim: int) -> int:
        """Length of axis ``dim``."""
        self._check_dim(dim, 'length(dim)')
        return self._shape[dim]

    @property
    def width(self) -> int:
        return self.length(0)

    @property
    def height(self) -> int:
        return self.length(1)

    @property
    def depth(self) -> int:
        return self.length(2)

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _check_dim(self, dim: int, name: str):
        if dim < 0 or dim >= self.ndim:
            raise OutOfRangeError(f"{name}: dim {dim} out of bounds for rank {self.ndim}")

    def _check_nonempty(self, name: str):
        if self._buffer is None:
            raise EmptyViewError(f"{name}: view is empty")

    def _check_writable(self, name: str):
        if self._readonly:
            raise DomainError(f"{name}: view is readonly")

    def _check_same_shape(self, other: 'View', name: str):
        if other.shape != self._shape:
            raise InvalidArgumentError(
                f"{name}: shape mismatch ({self._shape} vs {other.shape})"
            )

    def _position(self, loc: PointLike, name: str) -> Point:
        self._check_nonempty(name)
        pos = Point(loc)
        if pos.ndim != self.ndim:
            raise InvalidArgumentError(
                f"{name}: expected {self.ndim} indices, got {pos.ndim}"
            )
        for dim, (p, n) in enumerate(zip(pos, self._shape)):
            if p < 0 or p >= n:
                raise OutOfRangeError(f"{name}: index {p} out of bounds for axis {dim} of length {n}")
        return pos

    def _operand(self) -> strided.Operand:
        return self._buffer.data, self._offset, self._strides.to_tuple()

    def _derive(self, offset: int, shape: Point, strides: Point) -> 'View':
        return View._from_parts(self._buffer, offset, shape, strides, self._readonly)

    # =========================================================================
    # Element access
    # =========================================================================

    def offset_of(self, loc: PointLike) -> int:
        """Flat buffer index of the element at ``loc``."""
        pos = self._position(loc, 'offset_of(loc)')
        return self._offset + sum(p * s for p, s in zip(pos, self._strides))

    def at(self, loc: PointLike) -> Any:
        """Element at multi-index ``loc``, with bounds checks on every axis."""
        offset = self.offset_of(loc)
        return self._buffer.data[offset]

    def __getitem__(self, key: Union[int, Tuple[int, ...]]) -> Any:
        return self.array_at(key)

    def __setitem__(self, key: Union[int, Tuple[int, ...]], value: Any):
        pos = Point(key)
        if pos.ndim == self.ndim:
            self._check_writable('__setitem__')
            offset = self.offset_of(pos)
            self._buffer.data[offset] = value
            return
        self.array_at(pos).set_to(value)

    def array_at(self, pos: PointLike) -> Any:
        """
        Fix the leading ``len(pos)`` axes.

        Returns:
            A rank ``N - M`` view, or the element when ``pos`` is a full index
        """
        pos = Point(pos)
        m = pos.ndim
        if m > self.ndim:
            raise InvalidArgumentError(f"array_at(pos): {m} indices for rank {self.ndim}")
        self._check_nonempty('array_at(pos)')
        offset = self._offset
        for dim in range(m):
            if pos[dim] < 0 or pos[dim] >= self._shape[dim]:
                raise OutOfRangeError(
                    f"array_at(pos): index {pos[dim]} out of bounds for axis {dim}"
                )
            offset += pos[dim] * self._strides[dim]
        if m == self.ndim:
            return self._buffer.data[offset]
        rest = self.ndim - m
        return self._derive(offset, self._shape.low(rest), self._strides.low(rest))

    # =========================================================================
    # Slicing
    # =========================================================================

    def slice(self, dim: int, n: int) -> Any:
        """
        Drop axis ``dim`` at position ``n``.

        Slicing a rank-1 view returns the element.
        """
        self._check_dim(dim, 'slice(dim, n)')
        if n < 0 or n >= self._shape[dim]:
            raise OutOfRangeError(f"slice(dim, n): n={n} out of bounds for axis {dim}")
        offset = self._offset + n * self._strides[dim]
        if self.ndim == 1:
            return self._buffer.data[offset]
        return self._derive(offset, self._shape.removed(dim), self._strides.removed(dim))

    def slice_x(self, n: int) -> Any:
        return self.slice(0, n)

    def slice_y(self, n: int) -> Any:
        return self.slice(1, n)

    def slice_z(self, n: int) -> Any:
        return self.slice(2, n)

    def slice_w(self, n: int) -> Any:
        return self.slice(3, n)

    def range(self, dim: int, n: int, length: int) -> 'View':
        """Restrict axis ``dim`` to ``length`` positions starting at ``n``."""
        self._check_dim(dim, 'range(dim, n, length)')
        if length <= 0 or n < 0 or n + length > self._shape[dim]:
            raise OutOfRangeError(
                f"range(dim, n, length): [{n}, {n + length}) exceeds axis {dim} "
                f"of length {self._shape[dim]}"
            )
        return self._derive(
            self._offset + n * self._strides[dim],
            _replaced(self._shape, dim, length),
            self._strides,
        )

    def range_x(self, n: int, length: int) -> 'View':
        return self.range(0, n, length)

    def range_y(self, n: int, length: int) -> 'View':
        return self.range(1, n, length)

    def range_z(self, n: int, length: int) -> 'View':
        return self.range(2, n, length)

    def range_w(self, n: int, length: int) -> 'View':
        return self.range(3, n, length)

    def subarray(self, loc: PointLike, size: PointLike) -> 'View':
        """Rectangular crop of ``size`` starting at ``loc``."""
        loc = Point(loc)
        size = Point(size)
        if loc.ndim != self.ndim or size.ndim != self.ndim:
            raise InvalidArgumentError(
                f"subarray(loc, size): expected rank {self.ndim}, got {loc.ndim} and {size.ndim}"
            )
        offset = self._offset
        for dim in range(self.ndim):
            if size[dim] <= 0 or loc[dim] < 0 or loc[dim] + size[dim] > self._shape[dim]:
                raise OutOfRangeError(
                    f"subarray(loc, size): [{loc[dim]}, {loc[dim] + size[dim]}) exceeds "
                    f"axis {dim} of length {self._shape[dim]}"
                )
            offset += loc[dim] * self._strides[dim]
        return self._derive(offset, size, self._strides)

    # =========================================================================
    # Transforms
    # =========================================================================

    def transpose(self, dim1: int = 0, dim2: int = 1) -> 'View':
        """Swap axes ``dim1`` and ``dim2``."""
        self._check_dim(dim1, 'transpose(dim1, dim2)')
        self._check_dim(dim2, 'transpose(dim1, dim2)')
        return self._derive(
            self._offset,
            self._shape.swapped(dim1, dim2),
            self._strides.swapped(dim1, dim2),
        )

    def t(self) -> 'View':
        return self.transpose(0, 1)

    def flip(self, dim: int) -> 'View':
        """Reverse axis ``dim``."""
        self._check_dim(dim, 'flip(dim)')
        if self._buffer is None:
            return self.share()
        step = self._strides[dim]
        return self._derive(
            self._offset + step * (self._shape[dim] - 1),
            self._shape,
            _replaced(self._strides, dim, -step),
        )

    def flip_x(self) -> 'View':
        return self.flip(0)

    def flip_y(self) -> 'View':
        return self.flip(1)

    def flip_z(self) -> 'View':
        return self.flip(2)

    def flip_w(self) -> 'View':
        return self.flip(3)

    def skip(self, dim: int, n: int, start: int = 0) -> 'View':
        """
        Keep every ``n``-th position of axis ``dim``, starting at ``start``.

        Args:
            dim: Axis to subsample
            n: Step, at least 1. A step past the end keeps one position.
            start: First kept position

        Returns:
            View with ``ceil((length - start) / n)`` positions along ``dim``
        """
        self._check_dim(dim, 'skip(dim, n, start)')
        if n < 1:
            raise InvalidArgumentError(f"skip(dim, n, start): n must be at least 1, got {n}")
        if self._buffer is None:
            raise OutOfRangeError("skip(dim, n, start): view is empty")
        length = self._shape[dim]
        if start < 0 or start >= length:
            raise OutOfRangeError(f"skip(dim, n, start): start {start} out of bounds")
        step = self._strides[dim]
        return self._derive(
            self._offset + step * start,
            _replaced(self._shape, dim, (length - start + n - 1) // n),
            _replaced(self._strides, dim, step * n),
        )

    def skip_x(self, n: int, start: int = 0) -> 'View':
        return self.skip(0, n, start)

    def skip_y(self, n: int, start: int = 0) -> 'View':
        return self.skip(1, n, start)

    def skip_z(self, n: int, start: int = 0) -> 'View':
        return self.skip(2, n, start)

    def skip_w(self, n: int, start: int = 0) -> 'View':
        return self.skip(3, n, start)

    def window(self, dim: int, n: int) -> 'View':
        """
        Sliding windows of length ``n`` along ``dim``.

        A trailing axis of length ``n`` is appended with the stride of
        ``dim``; axis ``dim`` shrinks to ``length - n + 1``.
        """
        self._check_nonempty('window(dim, n)')
        self._check_dim(dim, 'window(dim, n)')
        if n < 1:
            raise InvalidArgumentError(f"window(dim, n): n must be at least 1, got {n}")
        length = self._shape[dim]
        if n > length:
            raise OutOfRangeError(f"window(dim, n): n={n} exceeds axis {dim} of length {length}")
        shape = _replaced(self._shape, dim, length - n + 1).inserted(self.ndim, n)
        strides = self._strides.inserted(self.ndim, self._strides[dim])
        return self._derive(self._offset, shape, strides)

    def window_x(self, n: int) -> 'View':
        return self.window(0, n)

    def window_y(self, n: int) -> 'View':
        return self.window(1, n)

    def window_z(self, n: int) -> 'View':
        return self.window(2, n)

    def window_w(self, n: int) -> 'View':
        return self.window(3, n)

    def repeat(self, n: int) -> 'View':
        """Append a trailing axis of length ``n`` with stride 0."""
        self._check_nonempty('repeat(n)')
        if n < 1:
            raise InvalidArgumentError(f"repeat(n): n must be at least 1, got {n}")
        return self._derive(
            self._offset,
            self._shape.inserted(self.ndim, n),
            self._strides.inserted(self.ndim, 0),
        )

    def reshape(self, *shape) -> 'View':
        """
        View the same elements with a different shape.

        The current axes are merged into contiguous runs and the new shape
        is carved out of them innermost-first. Each new axis must divide the
        run it falls in; it cannot span two runs.

        Args:
            *shape: New shape, as separate ints or a single sequence

        Raises:
            EmptyViewError: if the view is empty
            InvalidArgumentError: on a size mismatch or a non-uniform split
        """
        if len(shape) == 1 and not isinstance(shape[0], int):
            shape = shape[0]
        new_shape = Point(shape)
        self._check_nonempty('reshape(shape)')
        if new_shape.ndim == 0 or any(n <= 0 for n in new_shape):
            raise InvalidArgumentError(f"reshape(shape): invalid shape {new_shape}")
        if new_shape.product() != self.size:
            raise InvalidArgumentError(
                f"reshape(shape): cannot reshape {self.size} elements into {new_shape}"
            )

        runs = strided.runs(self._shape, self._strides) or [(1, 1)]
        k = len(runs) - 1
        remaining, step = runs[k]
        new_strides: List[int] = [0] * new_shape.ndim
        for i in range(new_shape.ndim - 1, -1, -1):
            n = new_shape[i]
            if n == 1:
                new_strides[i] = step
                continue
            if remaining == 1:
                k -= 1
                remaining, step = runs[k]
            if remaining % n:
                raise InvalidArgumentError(
                    f"reshape(shape): dimensions not uniform, {new_shape} from {self._shape}"
                )
            new_strides[i] = step
            step *= n
            remaining //= n
        return self._derive(self._offset, new_shape, Point(new_strides))

    def as_condensed(self) -> 'View':
        """Same rank, with adjacent contiguous axes merged into the trailing ones."""
        if self._buffer is None:
            return self.share()
        shape, strides = strided.condense(self._shape, self._strides)
        return self._derive(self._offset, Point(shape), Point(strides))

    def as_aligned(self) -> 'View':
        """Same element set, reordered so strides are positive and non-increasing."""
        if self._buffer is None:
            return self.share()
        shape, strides, delta = strided.align(self._shape, self._strides)
        return self._derive(self._offset + delta, Point(shape), Point(strides))

    # =========================================================================
    # Aliasing and copies
    # =========================================================================

    def share(self) -> 'View':
        """Shallow alias of this view."""
        return View._from_parts(self._buffer, self._offset, self._shape, self._strides, self._readonly)

    def __copy__(self) -> 'View':
        return self.share()

    def take(self) -> 'View':
        """Move the buffer into a new view; this view becomes empty."""
        moved = self.share()
        self.clear()
        return moved

    def as_const(self) -> 'View':
        """Readonly alias of this view."""
        return View._from_parts(self._buffer, self._offset, self._shape, self._strides, True)

    def to_mutable(self) -> 'View':
        """
        Mutable version of this view.

        A mutable view is simply shared. A readonly view that is the sole
        holder of its buffer hands the buffer over and becomes empty;
        otherwise the elements are deep-copied.
        """
        if not self._readonly:
            return self.share()
        if self._buffer is None:
            return View.empty(self.ndim)
        if self.is_unique:
            mutable = View._from_parts(self._buffer, self._offset, self._shape, self._strides, False)
            self.clear()
            return mutable
        logger.debug("to_mutable(): copying %d shared elements", self.size)
        return self.clone()

    def clone(self) -> 'View':
        """Deep copy into a fresh contiguous, mutable buffer."""
        if self._buffer is None:
            return View.empty(self.ndim)
        flat = strided.gather(self._operand(), self._shape)
        if flat.dtype.hasobject:
            for i in range(flat.size):
                flat[i] = copy.copy(flat[i])
        buffer = SharedBuffer(flat.size, flat.dtype, data=flat, mode=AcquireMode.ASSUME)
        return View._from_parts(buffer, 0, self._shape, self._shape.contiguous_strides(), False)

    def __deepcopy__(self, memo) -> 'View':
        return self.clone()

    def clear(self):
        """Release the buffer and become empty. The rank is kept."""
        buffer = self._buffer
        self._buffer = None
        self._offset = 0
        self._shape = Point.zeros(self.ndim)
        self._strides = Point.zeros(self.ndim)
        if buffer is not None:
            buffer.release()

    # =========================================================================
    # Mutation
    # =========================================================================

    def _source_operand(self, source: 'View') -> strided.Operand:
        # Overlapping sources are read from a snapshot
        if source.buffer is self._buffer:
            return strided.gather(source._operand(), source.shape), 0, tuple(source.shape.contiguous_strides())
        return source._operand()

    def set_to(self, source: Any, mask: Optional['View'] = None):
        """
        Assign ``source`` to every element.

        Args:
            source: View of the same shape, or a scalar
            mask: Optional view of the same shape; only positions where it
                is non-zero are written

        Raises:
            DomainError: if this view is readonly
            InvalidArgumentError: if ``source`` or ``mask`` differ in shape
        """
        self._check_writable('set_to(source)')
        if isinstance(source, View):
            self._check_same_shape(source, 'set_to(source)')
        if mask is not None:
            self._check_same_shape(mask, 'set_to(source, mask)')
        if self._buffer is None:
            return

        mask_operand = self._source_operand(mask) if mask is not None else None
        if isinstance(source, View):
            strided.copy_into(self._operand(), self._source_operand(source), self._shape, mask_operand)
        else:
            strided.fill(self._operand(), source, self._shape, mask_operand)

    def _compound(self, other: Any, ufunc: np.ufunc, name: str) -> 'View':
        self._check_writable(name)
        if isinstance(other, View):
            self._check_same_shape(other, name)
        if self._buffer is None:
            return self
        rhs = self._source_operand(other) if isinstance(other, View) else other
        strided.combine(self._operand(), rhs, ufunc, self._shape)
        return self

    def __iadd__(self, other: Any) -> 'View':
        return self._compound(other, np.add, '+=')

    def __isub__(self, other: Any) -> 'View':
        return self._compound(other, np.subtract, '-=')

    def __imul__(self, other: Any) -> 'View':
        return self._compound(other, np.multiply, '*=')

    def __itruediv__(self, other: Any) -> 'View':
        return self._compound(other, np.true_divide, '/=')

    def apply(self, func: Callable[[Any], Any]):
        """Replace every element with ``func(element)``, in row-major order."""
        self._check_writable('apply(func)')
        if self._buffer is not None:
            strided.update(self._operand(), func, self._shape)

    def foreach(self, func: Callable[[Any], Any]):
        """Call ``func(element)`` for every element, in row-major order."""
        if self._buffer is not None:
            strided.visit(self._operand(), func, self._shape)

    def convert_to(self, dtype: Any, func: Optional[Callable[[Any], Any]] = None) -> 'View':
        """
        New mutable view whose elements are cast to ``dtype``.

        Args:
            dtype: Target element type
            func: Optional mapping applied to each element instead of a cast
        """
        if self._buffer is None:
            return View.empty(self.ndim)
        target, factory = resolve_element_type(dtype)
        if func is None:
            func = factory
        if func is None:
            flat = strided.gather(self._operand(), self._shape, target)
            buffer = SharedBuffer(flat.size, target, data=flat, mode=AcquireMode.ASSUME)
        else:
            flat = strided.gather(self._operand(), self._shape)
            buffer = SharedBuffer(flat.size, target, items=(func(v) for v in flat))
        return View._from_parts(buffer, 0, self._shape, self._shape.contiguous_strides(), False)

    def compress(self, m: int, func: Callable[[Any], Any], dtype: Any = None) -> 'View':
        """
        Reduce the trailing ``N - m`` axes with ``func``.

        Each element of the rank-``m`` result is ``func`` applied to the
        matching trailing sub-view (or element, when ``m == N``). The result
        keeps this view's element type unless ``dtype`` is given.
        """
        if m <= 0 or m > self.ndim:
            raise InvalidArgumentError(f"compress(m, func): m must be in [1, {self.ndim}], got {m}")
        if self._buffer is None:
            return View.empty(m)
        if dtype is None:
            dtype = self._buffer.element_type
        parts = self.subarrays(self.ndim - m)
        return View(self._shape.high(m), dtype, items=(func(part) for part in parts))

    def to_numpy(self) -> np.ndarray:
        """Contiguous numpy copy of the elements, shaped like this view."""
        if self._buffer is None:
            return np.empty(self._shape.to_tuple(), dtype=get_config().default_dtype)
        return strided.gather(self._operand(), self._shape).reshape(self._shape.to_tuple())

    # =========================================================================
    # Iteration
    # =========================================================================

    def _iterator(self, index: int, readonly: bool, depth: int = 0) -> ViewIterator:
        return ViewIterator(
            self._buffer, self._offset, self._shape, self._strides,
            readonly=readonly, depth=depth, index=index,
        )

    def begin(self) -> ViewIterator:
        return self._iterator(0, self._readonly)

    def end(self) -> ViewIterator:
        return self._iterator(self.size, self._readonly)

    def cbegin(self) -> ViewIterator:
        return self._iterator(0, True)

    def cend(self) -> ViewIterator:
        return self._iterator(self.size, True)

    def __iter__(self) -> Iterator[Any]:
        return self.begin()

    def __len__(self) -> int:
        return self.size

    def subarrays(self, m: int) -> SubViews:
        """Iterable over the rank-``m`` trailing sub-views (elements if ``m == 0``)."""
        if m < 0 or m > self.ndim:
            raise InvalidArgumentError(f"subarrays(m): m must be in [0, {self.ndim}], got {m}")
        return SubViews(self._buffer, self._offset, self._shape, self._strides, self._readonly, m)

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, View):
            return NotImplemented
        return (
            self._buffer is other._buffer
            and self._offset == other._offset
            and self._shape == other._shape
            and self._strides == other._strides
        )

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((id(self._buffer), self._offset, self._shape, self._strides))

    def __repr__(self) -> str:
        if self._buffer is None:
            return f"View(empty, ndim={self.ndim})"
        flags = ", readonly" if self._readonly else ""
        return (
            f"View(shape={self._shape.to_tuple()}, strides={self._strides.to_tuple()}, "
            f"offset={self._offset}, dtype={self.dtype}{flags})"
        )
