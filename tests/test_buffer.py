"""Tests for SharedBuffer allocation, acquisition modes and reference counting."""

import gc
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

import stridekit as sk
from stridekit import AcquireMode, SharedBuffer
from stridekit.core.buffer import resolve_element_type


class TestElementTypes:
    """Tests for element type resolution."""

    def test_numeric_types(self):
        assert resolve_element_type(np.int32) == (np.dtype(np.int32), None)
        assert resolve_element_type('float32') == (np.dtype(np.float32), None)
        assert resolve_element_type(float) == (np.dtype(float), None)

    def test_default_type(self):
        assert resolve_element_type(None)[0] == np.float64
        sk.set_default_dtype('int16')
        assert resolve_element_type(None)[0] == np.int16

    def test_class_types(self, tracked):
        dtype, factory = resolve_element_type(tracked)
        assert dtype == np.dtype(object)
        assert factory is tracked
        assert resolve_element_type(object) == (np.dtype(object), None)

    def test_buffer_element_type(self, tracked):
        assert SharedBuffer(2, np.int16).element_type == np.int16
        assert SharedBuffer(2, tracked).element_type is tracked


class TestBufferConstruction:
    """Tests for the element construction strategies."""

    def test_empty(self):
        buf = SharedBuffer()
        assert buf.size == 0
        assert len(buf) == 0

    def test_default_numeric_is_zeroed(self):
        buf = SharedBuffer(5, np.int32)
        np.testing.assert_array_equal(buf.data, np.zeros(5, dtype=np.int32))

    def test_uninitialized_numeric(self):
        sk.set_zero_initialize(False)
        buf = SharedBuffer(5, np.int32)
        assert buf.data.shape == (5,)

    def test_fill(self):
        buf = SharedBuffer(4, np.float32, fill=2.5)
        np.testing.assert_array_equal(buf.data, np.full(4, 2.5, dtype=np.float32))

    def test_generator_called_per_element(self):
        counter = iter(range(100))
        buf = SharedBuffer(6, np.int64, generator=lambda: next(counter))
        np.testing.assert_array_equal(buf.data, np.arange(6))

    def test_items_short_iterable(self):
        """A short iterable leaves the tail default-constructed."""
        buf = SharedBuffer(5, np.int64, items=[7, 8])
        np.testing.assert_array_equal(buf.data, [7, 8, 0, 0, 0])

    def test_items_long_iterable(self):
        buf = SharedBuffer(3, np.int64, items=range(100))
        np.testing.assert_array_equal(buf.data, [0, 1, 2])

    def test_class_default_construction(self, tracked):
        buf = SharedBuffer(4, tracked)
        assert tracked.created == 4
        assert all(isinstance(x, tracked) for x in buf.data)

    def test_class_fill_copies_per_element(self, tracked):
        proto = tracked(3)
        buf = SharedBuffer(3, tracked, fill=proto)
        assert tracked.created == 4
        assert all(x is not proto and x.value == 3 for x in buf.data)

    def test_class_short_items(self, tracked):
        buf = SharedBuffer(3, tracked, items=[tracked(1)])
        assert buf.data[0].value == 1
        assert buf.data[2].value == 0

    def test_negative_size_raises(self):
        with pytest.raises(sk.InvalidArgumentError):
            SharedBuffer(-1)

    def test_multiple_sources_raise(self):
        with pytest.raises(sk.InvalidArgumentError):
            SharedBuffer(3, fill=1, items=[1, 2, 3])


class TestAcquireModes:
    """Tests for adopting caller-supplied data."""

    def test_copy(self):
        src = np.arange(6, dtype=np.int64)
        buf = SharedBuffer(6, data=src, mode=AcquireMode.COPY)
        assert buf.owned
        src[0] = 99
        assert buf.data[0] == 0

    def test_copy_casts(self):
        buf = SharedBuffer(3, np.float32, data=[1, 2, 3], mode=AcquireMode.COPY)
        assert buf.dtype == np.float32
        np.testing.assert_array_equal(buf.data, [1.0, 2.0, 3.0])

    def test_assume_shares_memory(self):
        src = np.arange(6, dtype=np.int64)
        buf = SharedBuffer(6, data=src, mode=AcquireMode.ASSUME)
        assert buf.owned
        assert np.shares_memory(buf.data, src)

    def test_reference_is_not_owned(self):
        src = np.arange(6, dtype=np.int64)
        buf = SharedBuffer(6, data=src, mode=AcquireMode.REFERENCE)
        assert not buf.owned
        buf.data[1] = 42
        assert src[1] == 42

    def test_reference_keeps_objects_alive(self, tracked):
        src = np.empty(2, dtype=object)
        src[0], src[1] = tracked(1), tracked(2)
        buf = SharedBuffer(2, data=src, mode=AcquireMode.REFERENCE)
        buf.acquire()
        buf.release()
        assert src[0].value == 1
        assert tracked.alive == 2

    def test_assume_requires_contiguous(self):
        src = np.arange(12, dtype=np.int64)[::2]
        with pytest.raises(sk.InvalidArgumentError):
            SharedBuffer(6, data=src, mode=AcquireMode.ASSUME)

    def test_adopt_rejects_dtype_change(self):
        src = np.arange(6, dtype=np.int64)
        with pytest.raises(sk.InvalidArgumentError):
            SharedBuffer(6, np.float64, data=src, mode=AcquireMode.REFERENCE)

    def test_too_little_data_raises(self):
        with pytest.raises(sk.InvalidArgumentError):
            SharedBuffer(10, data=np.arange(4), mode=AcquireMode.COPY)


class TestReferenceCounting:
    """Tests for acquire/release and destruction."""

    def test_acquire_release(self):
        buf = SharedBuffer(3, np.int32)
        assert buf.ref_count == 0
        buf.acquire()
        assert buf.unique
        buf.acquire()
        assert buf.ref_count == 2
        assert not buf.unique
        assert buf.release() is False
        assert buf.release() is True
        assert buf.destroyed
        assert buf.data is None

    def test_release_without_holders_raises(self):
        buf = SharedBuffer(3)
        with pytest.raises(sk.StrideKitError):
            buf.release()

    def test_acquire_destroyed_raises(self):
        buf = SharedBuffer(3)
        buf.acquire()
        buf.release()
        with pytest.raises(sk.StrideKitError):
            buf.acquire()

    def test_destruction_drops_every_element(self, tracked):
        buf = SharedBuffer(5, tracked)
        buf.acquire()
        assert tracked.alive == 5
        buf.release()
        gc.collect()
        assert tracked.alive == 0

    def test_views_release_on_clear(self, tracked):
        view = sk.View((2, 3), tracked)
        alias = view.transpose()
        buf = view.buffer
        assert buf.ref_count == 2
        view.clear()
        assert tracked.alive == 6
        alias.clear()
        assert buf.destroyed
        assert tracked.alive == 0

    def test_concurrent_acquire_release(self):
        """The reference count stays exact under contention."""
        buf = SharedBuffer(8, np.int32)
        buf.acquire()

        def churn(_):
            for _ in range(1000):
                buf.acquire()
                buf.release()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(churn, range(8)))

        assert buf.ref_count == 1
        assert not buf.destroyed

    def test_views_shared_across_threads(self):
        view = sk.full((16, 16), 1, dtype=np.int64)

        def column_sum(i):
            col = view.slice_y(i).share()
            return int(col.to_numpy().sum())

        with ThreadPoolExecutor(max_workers=4) as pool:
            sums = list(pool.map(column_sum, range(16)))

        assert sums == [16] * 16
        assert view.buffer.ref_count == 1
