"""Tests for writes through views: set_to, compound assignment, apply and conversions."""

import numpy as np
import pytest

import stridekit as sk
from stridekit import View


class TestSetTo:
    """Tests for elementwise assignment."""

    def test_scalar(self, grid):
        grid.range_y(1, 2).set_to(0)
        np.testing.assert_array_equal(
            grid.to_numpy(), [[0, 0, 0, 3], [4, 0, 0, 7], [8, 0, 0, 11]]
        )

    def test_view_source(self, grid):
        dst = View((4, 3), np.int64)
        dst.set_to(grid.t())
        np.testing.assert_array_equal(dst.to_numpy(), grid.to_numpy().T)

    def test_flipped_source_same_buffer(self):
        v = sk.from_iterable(6, range(6), dtype=np.int64)
        v.set_to(v.flip_x())
        np.testing.assert_array_equal(v.to_numpy(), [5, 4, 3, 2, 1, 0])

    def test_mask(self, grid):
        mask = sk.from_iterable((3, 4), [1, 0] * 6, dtype=np.int8)
        grid.set_to(-1, mask)
        np.testing.assert_array_equal(
            grid.to_numpy(), [[-1, 1, -1, 3], [-1, 5, -1, 7], [-1, 9, -1, 11]]
        )

    def test_mask_with_view_source(self, grid):
        src = sk.full((3, 4), 100, dtype=np.int64)
        mask = sk.from_iterable((3, 4), range(12), dtype=np.int64)
        grid.set_to(src, mask)
        assert grid.at((0, 0)) == 0
        assert grid.at((2, 3)) == 100

    def test_repeated_destination_last_write_wins(self):
        base = View(3, np.int64)
        src = sk.from_iterable((3, 4), range(12), dtype=np.int64)
        base.repeat(4).set_to(src)
        np.testing.assert_array_equal(base.to_numpy(), [3, 7, 11])

    def test_shape_mismatch(self, grid):
        with pytest.raises(sk.InvalidArgumentError):
            grid.set_to(View((4, 3), np.int64))
        with pytest.raises(sk.InvalidArgumentError):
            grid.set_to(0, View((2, 2), np.int8))

    def test_readonly(self, grid):
        with pytest.raises(sk.DomainError):
            grid.as_const().set_to(grid)
        np.testing.assert_array_equal(grid.to_numpy().ravel(), np.arange(12))

    def test_empty_is_noop(self):
        v = sk.empty(2)
        v.set_to(5)
        v.set_to(sk.empty(2))
        assert v.is_empty


class TestCompoundAssignment:
    """Tests for +=, -=, *= and /=."""

    def test_add_scalar_through_view(self, grid):
        col = grid.slice_y(2)
        col += 10
        np.testing.assert_array_equal(grid.to_numpy()[:, 2], [12, 16, 20])
        assert grid.at((0, 0)) == 0

    def test_add_view(self, grid):
        grid += grid.flip_x()
        np.testing.assert_array_equal(
            grid.to_numpy(), np.arange(12).reshape(3, 4) + np.arange(12).reshape(3, 4)[::-1]
        )

    def test_sub_mul(self, grid):
        grid -= 1
        grid *= 2
        np.testing.assert_array_equal(grid.to_numpy().ravel(), (np.arange(12) - 1) * 2)

    def test_integer_division_truncates(self):
        v = sk.from_iterable(4, [7, -7, 9, 10], dtype=np.int32)
        v /= 2
        assert v.dtype == np.int32
        np.testing.assert_array_equal(v.to_numpy(), [3, -3, 4, 5])

    def test_float_division(self):
        v = sk.full(3, 1.0)
        v /= 4
        np.testing.assert_allclose(v.to_numpy(), [0.25, 0.25, 0.25])

    def test_compound_returns_same_view(self, grid):
        before = grid
        grid += 1
        assert grid is before

    def test_compound_errors(self, grid):
        ro = grid.as_const()
        with pytest.raises(sk.DomainError):
            ro += 1
        with pytest.raises(sk.InvalidArgumentError):
            grid += grid.t()


class TestApplyForeach:
    """Tests for per-element callbacks."""

    def test_apply(self, grid):
        grid.skip_y(2).apply(lambda x: x * x)
        np.testing.assert_array_equal(
            grid.to_numpy(), [[0, 1, 4, 3], [16, 5, 36, 7], [64, 9, 100, 11]]
        )

    def test_apply_readonly(self, grid):
        with pytest.raises(sk.DomainError):
            grid.as_const().apply(abs)

    def test_foreach_row_major(self, grid):
        seen = []
        grid.t().foreach(lambda x: seen.append(int(x)))
        assert seen == [0, 4, 8, 1, 5, 9, 2, 6, 10, 3, 7, 11]


class TestConversions:
    """Tests for convert_to, compress and to_numpy."""

    def test_convert_dtype(self, grid):
        f = grid.t().convert_to(np.float32)
        assert f.dtype == np.float32
        assert f.shape == (4, 3)
        assert f.strides == (3, 1)
        assert not f.readonly
        np.testing.assert_array_equal(f.to_numpy(), grid.to_numpy().T.astype(np.float32))

    def test_convert_with_func(self, grid):
        s = grid.convert_to(object, str)
        assert s.at((1, 1)) == '5'

    def test_convert_to_class(self, grid, tracked):
        t = grid.range_x(0, 1).convert_to(tracked)
        assert tracked.created == 4
        assert t.at((0, 3)).value == 3

    def test_compress_rows(self, grid):
        sums = grid.compress(1, lambda row: int(row.to_numpy().sum()), dtype=np.int64)
        assert sums.shape == (3,)
        np.testing.assert_array_equal(sums.to_numpy(), [6, 22, 38])

    def test_compress_full_rank(self, grid):
        doubled = grid.compress(2, lambda x: x * 2, dtype=np.int64)
        np.testing.assert_array_equal(doubled.to_numpy(), grid.to_numpy() * 2)

    def test_compress_keeps_element_type(self, grid):
        sums = grid.compress(1, lambda row: row.to_numpy().sum())
        assert sums.dtype == np.int64
        np.testing.assert_array_equal(sums.to_numpy(), [6, 22, 38])

    def test_compress_object_view(self):
        letters = View((2, 2), object, items="abcd")
        words = letters.compress(1, "".join)
        assert words.dtype == np.dtype(object)
        assert words.at((0,)) == "ab"
        assert words.at((1,)) == "cd"

    def test_compress_class_view(self, tracked):
        v = View((2, 3), tracked)
        firsts = v.compress(1, lambda row: row.at((0,)))
        assert firsts.buffer.element_type is tracked
        assert isinstance(firsts.at((1,)), tracked)

    def test_compress_invalid(self, grid):
        with pytest.raises(sk.InvalidArgumentError):
            grid.compress(0, len)
        with pytest.raises(sk.InvalidArgumentError):
            grid.compress(3, len)

    def test_to_numpy_is_copy(self, grid):
        arr = grid.to_numpy()
        arr[0, 0] = 99
        assert grid.at((0, 0)) == 0

    def test_to_numpy_empty(self):
        assert sk.empty(2).to_numpy().shape == (0, 0)
