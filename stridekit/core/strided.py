"""
StrideKit Core: Strided Kernels
===============================

Stride arithmetic and the elementwise loops that walk strided data.

Every loop follows the same plan:
1. Drop length-1 axes and merge adjacent axes that are contiguous for every
   operand, so the loop runs over as few axes as possible.
2. Walk the outer axes in row-major order.
3. Handle each innermost run as one numpy slice of the flat buffer.

Runs with a zero stride on the destination (repeated axes) are written one
element at a time so later writes win, matching a sequential walk.
"""

from __future__ import annotations
import itertools
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

# An operand of a kernel: (flat data, offset, strides)
Operand = Tuple[np.ndarray, int, Sequence[int]]


# =============================================================================
# Shape / Stride Arithmetic
# =============================================================================

def condense(shape: Sequence[int], strides: Sequence[int]) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Merge adjacent axes while keeping the rank.

    Axes merge right-to-left while ``size[run] * stride[run] == stride[i]``.
    Merged runs are right-aligned; the freed leading positions get length 1
    and the stride ``abs(size * stride)`` of the outermost run.

    Example:
        >>> condense((2, 3, 4), (12, 4, 1))
        ((1, 1, 24), (24, 24, 1))
        >>> condense((2, 3, 4), (-12, 4, 1))
        ((1, 2, 12), (24, -12, 1))
    """
    n = len(shape)
    if n == 0:
        return (), ()
    sizes = list(shape)
    steps = list(strides)
    j = n - 1
    for i in range(n - 2, -1, -1):
        if sizes[j] * steps[j] == strides[i]:
            sizes[j] *= shape[i]
        else:
            j -= 1
            sizes[j] = shape[i]
            steps[j] = strides[i]
    pad = abs(sizes[j] * steps[j])
    for k in range(j):
        sizes[k] = 1
        steps[k] = pad
    return tuple(sizes), tuple(steps)


def align(shape: Sequence[int], strides: Sequence[int]) -> Tuple[Tuple[int, ...], Tuple[int, ...], int]:
    """
    Reorder axes so a row-major walk visits memory in increasing order.

    Negative strides are negated, moving the base by ``stride * (size - 1)``,
    then axes are stably sorted by descending stride.

    Returns:
        (shape, strides, offset adjustment for the base)
    """
    sizes = list(shape)
    steps = list(strides)
    offset = 0
    for i in range(len(steps)):
        if steps[i] < 0:
            steps[i] = -steps[i]
            offset -= steps[i] * (sizes[i] - 1)
    for i in range(1, len(steps)):
        j = i
        while j > 0 and steps[j] > steps[j - 1]:
            steps[j], steps[j - 1] = steps[j - 1], steps[j]
            sizes[j], sizes[j - 1] = sizes[j - 1], sizes[j]
            j -= 1
    return tuple(sizes), tuple(steps), offset


def runs(shape: Sequence[int], strides: Sequence[int]) -> List[Tuple[int, int]]:
    """
    Condensed (size, stride) runs of a view, outermost first.

    Length-1 axes are dropped first since they never move the address.
    """
    result: List[Tuple[int, int]] = []
    for size, step in reversed(list(zip(shape, strides))):
        if size == 1:
            continue
        if result and result[-1][0] * result[-1][1] == step:
            inner_size, inner_step = result[-1]
            result[-1] = (inner_size * size, inner_step)
        else:
            result.append((size, step))
    result.reverse()
    return result


def loop_plan(shape: Sequence[int], *strides: Sequence[int]) -> Tuple[List[int], List[List[int]]]:
    """
    Jointly condensed loop shape for several operands of the same shape.

    Two axes merge only if they are contiguous for every operand.

    Returns:
        (sizes, per-operand strides), never empty
    """
    sizes: List[int] = []
    steps: List[List[int]] = [[] for _ in strides]
    for axis in range(len(shape) - 1, -1, -1):
        size = shape[axis]
        if size == 1:
            continue
        if sizes and all(sizes[-1] * st[-1] == s[axis] for st, s in zip(steps, strides)):
            sizes[-1] *= size
            continue
        sizes.append(size)
        for st, s in zip(steps, strides):
            st.append(s[axis])
    if not sizes:
        return [1], [[1] for _ in strides]
    sizes.reverse()
    for st in steps:
        st.reverse()
    return sizes, steps


# =============================================================================
# Run Access
# =============================================================================

def run_view(data: np.ndarray, offset: int, length: int, stride: int) -> np.ndarray:
    """
    1-D numpy view of ``length`` elements starting at ``offset``.

    A zero stride yields a readonly broadcast of the single element.
    """
    if stride == 0:
        return np.broadcast_to(data[offset:offset + 1], (length,))
    stop = offset + length * stride
    if stop < 0:
        stop = None
    return data[offset:stop:stride]


def iter_runs(sizes: Sequence[int], strides: Sequence[Sequence[int]], offsets: Sequence[int]) -> Iterator[List[int]]:
    """Yield the per-operand start offset of every innermost run."""
    outer = sizes[:-1]
    if not outer:
        yield list(offsets)
        return
    for pos in itertools.product(*(range(n) for n in outer)):
        yield [
            base + sum(p * s for p, s in zip(pos, st))
            for base, st in zip(offsets, strides)
        ]


def _mask_run(mask: Optional[Operand], offsets: List[int], length: int, stride: Optional[int]) -> Optional[np.ndarray]:
    if mask is None:
        return None
    return run_view(mask[0], offsets[-1], length, stride) != 0


# =============================================================================
# Kernels
# =============================================================================

def copy_into(dst: Operand, src: Operand, shape: Sequence[int], mask: Optional[Operand] = None):
    """Elementwise ``dst = src`` (where ``mask`` is non-zero)."""
    operands = [dst, src] + ([mask] if mask is not None else [])
    sizes, steps = loop_plan(shape, *(op[2] for op in operands))
    length = sizes[-1]
    d_step, s_step = steps[0][-1], steps[1][-1]
    m_step = steps[2][-1] if mask is not None else None
    d_data, s_data = dst[0], src[0]

    for offs in iter_runs(sizes, steps, [op[1] for op in operands]):
        values = run_view(s_data, offs[1], length, s_step)
        selected = _mask_run(mask, offs, length, m_step)
        if d_step == 0:
            for k in range(length):
                if selected is None or selected[k]:
                    d_data[offs[0]] = values[k]
            continue
        target = run_view(d_data, offs[0], length, d_step)
        if selected is None:
            target[...] = values
        else:
            target[selected] = values[selected]


def fill(dst: Operand, value: Any, shape: Sequence[int], mask: Optional[Operand] = None):
    """Elementwise ``dst = value`` (where ``mask`` is non-zero)."""
    operands = [dst] + ([mask] if mask is not None else [])
    sizes, steps = loop_plan(shape, *(op[2] for op in operands))
    length = sizes[-1]
    d_step = steps[0][-1]
    m_step = steps[1][-1] if mask is not None else None
    d_data = dst[0]

    for offs in iter_runs(sizes, steps, [op[1] for op in operands]):
        selected = _mask_run(mask, offs, length, m_step)
        if d_step == 0:
            if selected is None or selected.any():
                d_data[offs[0]] = value
            continue
        target = run_view(d_data, offs[0], length, d_step)
        if not d_data.dtype.hasobject:
            if selected is None:
                target[...] = value
            else:
                target[selected] = value
        else:
            # Object values may be sequences; assign one element at a time
            for k in range(length):
                if selected is None or selected[k]:
                    target[k] = value


def update(dst: Operand, func: Callable[[Any], Any], shape: Sequence[int]):
    """Elementwise ``dst = func(dst)`` in row-major order."""
    sizes, steps = loop_plan(shape, dst[2])
    length = sizes[-1]
    d_step = steps[0][-1]
    d_data = dst[0]
    for offs in iter_runs(sizes, steps, [dst[1]]):
        for k in range(length):
            idx = offs[0] + k * d_step
            d_data[idx] = func(d_data[idx])


def visit(src: Operand, func: Callable[[Any], Any], shape: Sequence[int]):
    """Call ``func(element)`` for every element in row-major order."""
    sizes, steps = loop_plan(shape, src[2])
    length = sizes[-1]
    s_step = steps[0][-1]
    for offs in iter_runs(sizes, steps, [src[1]]):
        for value in run_view(src[0], offs[0], length, s_step):
            func(value)


def combine(dst: Operand, other: Any, ufunc: np.ufunc, shape: Sequence[int]):
    """
    In-place ``dst = ufunc(dst, other)``.

    ``other`` is an Operand of the same shape or a scalar. Results are cast
    back to the destination type, so integer division truncates.
    """
    is_operand = isinstance(other, tuple)
    operands = [dst] + ([other] if is_operand else [])
    sizes, steps = loop_plan(shape, *(op[2] for op in operands))
    length = sizes[-1]
    d_step = steps[0][-1]
    o_step = steps[1][-1] if is_operand else None
    d_data = dst[0]

    for offs in iter_runs(sizes, steps, [op[1] for op in operands]):
        rhs = run_view(other[0], offs[1], length, o_step) if is_operand else other
        if d_step == 0:
            for k in range(length):
                value = rhs[k] if is_operand else rhs
                d_data[offs[0]] = ufunc(d_data[offs[0]], value)
            continue
        target = run_view(d_data, offs[0], length, d_step)
        ufunc(target, rhs, out=target, casting='unsafe')


def gather(src: Operand, shape: Sequence[int], dtype: Optional[np.dtype] = None) -> np.ndarray:
    """Contiguous 1-D copy of a strided operand in row-major order."""
    size = 1
    for n in shape:
        size *= n
    out = np.empty(size, dtype=dtype if dtype is not None else src[0].dtype)
    if size == 0:
        return out
    contiguous = [1] * len(shape)
    for i in range(len(shape) - 1, 0, -1):
        contiguous[i - 1] = contiguous[i] * shape[i]
    copy_into((out, 0, contiguous), src, shape)
    return out
