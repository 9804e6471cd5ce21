"""
StrideKit Core: SharedBuffer
============================

The reference-counted flat allocation every view reads and writes through.

A buffer is created once per logical allocation. Views and iterators call
``acquire()`` when they start holding it and ``release()`` when they let go;
the last release destroys the elements, but only for buffers that own their
memory.
"""

from __future__ import annotations
import copy
import itertools
import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple

import numpy as np

from ..config import get_config
from ..errors import InvalidArgumentError, StrideKitError

logger = logging.getLogger(__name__)

_UNSET = object()


class AcquireMode(Enum):
    """How a buffer takes hold of caller-supplied memory."""
    ASSUME = "assume"          # take ownership of the caller's array
    COPY = "copy"              # allocate and copy the caller's data
    REFERENCE = "reference"    # borrow, never released by the buffer


# =============================================================================
# Element Types
# =============================================================================

_NUMPY_BUILTINS = (bool, int, float, complex)


def resolve_element_type(element_type: Any = None) -> Tuple[np.dtype, Optional[Callable[[], Any]]]:
    """
    Map an element type to a numpy dtype plus an optional element factory.

    numpy dtypes, dtype names and the Python numeric builtins map to their
    numpy dtype. Any other class is stored in an object array and its
    constructor is used to default-construct elements.

    Returns:
        (dtype, factory) where factory is None for numeric element types
    """
    if element_type is None:
        return get_config().default_dtype, None
    if isinstance(element_type, np.dtype):
        return element_type, None
    if isinstance(element_type, type):
        if issubclass(element_type, np.generic) or element_type in _NUMPY_BUILTINS:
            return np.dtype(element_type), None
        if element_type is object:
            return np.dtype(object), None
        return np.dtype(object), element_type
    return np.dtype(element_type), None


# =============================================================================
# Shared Buffer
# =============================================================================

class SharedBuffer:
    """
    Flat, reference-counted element storage.

    The reference count is guarded by a lock, so holders may acquire and
    release from several threads. Element data itself is not synchronized.

    Example:
        >>> buf = SharedBuffer(6, np.int32, fill=7)
        >>> buf.acquire()
        >>> buf.data
        array([7, 7, 7, 7, 7, 7], dtype=int32)
        >>> buf.release()
        True
    """

    def __init__(
        self,
        size: int = 0,
        dtype: Any = None,
        *,
        fill: Any = _UNSET,
        data: Any = None,
        mode: AcquireMode = AcquireMode.COPY,
        generator: Optional[Callable[[], Any]] = None,
        items: Optional[Iterable[Any]] = None,
    ):
        """
        Args:
            size: Number of elements
            dtype: Element type (numpy dtype, dtype name, or any class)
            fill: Value copied into every element
            data: Caller-supplied array, handled according to ``mode``
            mode: Acquisition mode for ``data``
            generator: Called with no arguments once per element
            items: Iterable copied element by element; a short iterable
                leaves the tail default-constructed
        """
        if size < 0:
            raise InvalidArgumentError(f"SharedBuffer: size cannot be negative, got {size}")

        sources = sum(
            1 for given in (fill is not _UNSET, data is not None, generator is not None, items is not None)
            if given
        )
        if sources > 1:
            raise InvalidArgumentError("SharedBuffer: at most one initialization source may be given")

        self.size = size
        self.owned = True
        self._ref_count = 0
        self._lock = threading.Lock()

        if data is not None:
            self.dtype, self._factory = self._data_element_type(data, dtype)
            self._data = self._adopt(data, mode)
            self.owned = mode is not AcquireMode.REFERENCE
            logger.debug("adopted %d elements of %s (%s)", size, self.dtype, mode.value)
            return

        self.dtype, self._factory = resolve_element_type(dtype)
        if fill is not _UNSET:
            self._data = self._filled(fill)
        elif generator is not None:
            self._data = self._generated(generator)
        elif items is not None:
            self._data = self._copied(items)
        else:
            self._data = self._default_array(size)
        logger.debug("allocated %d elements of %s", size, self.dtype)

    # =========================================================================
    # Element construction
    # =========================================================================

    @staticmethod
    def _data_element_type(data: Any, dtype: Any) -> Tuple[np.dtype, Optional[Callable[[], Any]]]:
        if dtype is None:
            return np.asarray(data).dtype, None
        return resolve_element_type(dtype)

    def _construct_default(self) -> Any:
        return self._factory() if self._factory is not None else None

    def _default_array(self, size: int) -> np.ndarray:
        if self.dtype.hasobject:
            arr = np.empty(size, dtype=self.dtype)
            if self._factory is not None:
                for i in range(size):
                    arr[i] = self._factory()
            return arr
        if get_config().zero_initialize:
            return np.zeros(size, dtype=self.dtype)
        return np.empty(size, dtype=self.dtype)

    def _filled(self, value: Any) -> np.ndarray:
        if not self.dtype.hasobject:
            return np.full(self.size, value, dtype=self.dtype)
        arr = np.empty(self.size, dtype=self.dtype)
        for i in range(self.size):
            arr[i] = copy.copy(value)
        return arr

    def _generated(self, generator: Callable[[], Any]) -> np.ndarray:
        arr = np.empty(self.size, dtype=self.dtype)
        for i in range(self.size):
            arr[i] = generator()
        return arr

    def _copied(self, items: Iterable[Any]) -> np.ndarray:
        if self.dtype.hasobject:
            arr = np.empty(self.size, dtype=self.dtype)
        else:
            arr = self._default_array(self.size)
        count = 0
        for value in itertools.islice(items, self.size):
            arr[count] = value
            count += 1
        if self.dtype.hasobject:
            for i in range(count, self.size):
                arr[i] = self._construct_default()
        return arr

    def _adopt(self, data: Any, mode: AcquireMode) -> np.ndarray:
        if mode is AcquireMode.COPY:
            flat = np.asarray(data).reshape(-1)
            if flat.size < self.size:
                raise InvalidArgumentError(
                    f"SharedBuffer: data holds {flat.size} elements, need {self.size}"
                )
            return np.array(flat[:self.size], dtype=self.dtype, copy=True)

        if not isinstance(data, np.ndarray):
            data = np.asarray(data)
        if not data.flags.c_contiguous:
            raise InvalidArgumentError(f"SharedBuffer: {mode.value} requires C-contiguous data")
        if data.dtype != self.dtype:
            raise InvalidArgumentError(
                f"SharedBuffer: {mode.value} cannot reinterpret {data.dtype} as {self.dtype}"
            )
        if data.size < self.size:
            raise InvalidArgumentError(
                f"SharedBuffer: data holds {data.size} elements, need {self.size}"
            )
        return data.reshape(-1)

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def data(self) -> Optional[np.ndarray]:
        """The flat element array, or None once the buffer is destroyed."""
        return self._data

    @property
    def element_type(self) -> Any:
        """The element class for class-typed buffers, otherwise the dtype."""
        return self._factory if self._factory is not None else self.dtype

    def __getitem__(self, idx: int) -> Any:
        return self._data[idx]

    def __setitem__(self, idx: int, value: Any):
        self._data[idx] = value

    def __len__(self) -> int:
        return self.size

    # =========================================================================
    # Reference counting
    # =========================================================================

    @property
    def ref_count(self) -> int:
        return self._ref_count

    @property
    def unique(self) -> bool:
        """True when exactly one holder references this buffer."""
        return self._ref_count == 1

    @property
    def destroyed(self) -> bool:
        return self._data is None

    def acquire(self) -> 'SharedBuffer':
        """Register a new holder."""
        with self._lock:
            if self._data is None:
                raise StrideKitError("acquire(): buffer already destroyed")
            self._ref_count += 1
        return self

    def release(self) -> bool:
        """
        Drop one holder.

        Returns:
            True if this call released the last holder
        """
        with self._lock:
            if self._ref_count <= 0:
                raise StrideKitError("release(): buffer has no holders")
            self._ref_count -= 1
            if self._ref_count > 0:
                return False
            self._destroy()
        return True

    def _destroy(self):
        if self.owned and self.dtype.hasobject:
            for i in range(self.size):
                self._data[i] = None
        logger.debug("released %d elements of %s (owned=%s)", self.size, self.dtype, self.owned)
        self._data = None

    def __repr__(self) -> str:
        return (
            f"SharedBuffer(size={self.size}, dtype={self.dtype}, "
            f"owned={self.owned}, ref_count={self._ref_count})"
        )
