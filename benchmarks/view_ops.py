"""
StrideKit Benchmark Suite
=========================

Timings for view transforms and the strided copy kernels, with numpy
equivalents alongside for reference.

Usage:
    python -m benchmarks.view_ops
"""

import time
import numpy as np
from typing import Callable, Dict, Tuple

import stridekit as sk


Timing = Tuple[float, float]


def time_call(fn: Callable[[], object], repeat: int = 10, warmup: int = 3) -> Timing:
    """
    Time ``fn`` and return ``(median, best)`` in seconds.

    The median is reported instead of the mean, because the last release of a
    large buffer can land inside any single run.
    """
    for _ in range(warmup):
        fn()
    samples = np.empty(repeat)
    for i in range(repeat):
        start = time.perf_counter()
        fn()
        samples[i] = time.perf_counter() - start
    return float(np.median(samples)), float(samples.min())


def human_time(seconds: float) -> str:
    for unit, scale in (('s', 1.0), ('ms', 1e-3), ('us', 1e-6)):
        if seconds >= scale:
            return f"{seconds / scale:7.2f} {unit}"
    return f"{seconds / 1e-9:7.0f} ns"


def section(title: str):
    print(f"\n{title}\n{'-' * len(title)}")


# =============================================================================
# Benchmarks
# =============================================================================

def benchmark_transforms(size: int = 512) -> Dict[str, Timing]:
    """Transforms only rewrite shape/strides, so they should not scale with size."""
    section(f"Transforms ({size}x{size})")
    view = sk.View((size, size), np.float32)
    results = {}

    cases = {
        'transpose': lambda: view.t(),
        'flip': lambda: view.flip_x().flip_y(),
        'skip': lambda: view.skip_x(2).skip_y(3),
        'window': lambda: view.window_x(8).window_y(8),
        'reshape': lambda: view.reshape(size // 2, 2, size),
        'subarray': lambda: view.subarray((1, 1), (size - 2, size - 2)),
    }
    for name, fn in cases.items():
        median, best = time_call(fn, repeat=100)
        results[name] = (median, best)
        print(f"  {name:<12} median {human_time(median)}  best {human_time(best)}")
    return results


def benchmark_kernels(size: int = 512) -> Dict[str, Timing]:
    """Elementwise kernels against the numpy equivalent."""
    section(f"Kernels ({size}x{size})")
    src = sk.from_numpy(np.random.rand(size, size).astype(np.float32))
    dst = sk.View((size, size), np.float32)
    a = np.random.rand(size, size).astype(np.float32)
    b = np.empty_like(a)
    results = {}

    cases = {
        'copy contiguous': (lambda: dst.set_to(src), lambda: np.copyto(b, a)),
        'copy transposed': (lambda: dst.set_to(src.t()), lambda: np.copyto(b, a.T)),
        'copy flipped': (lambda: dst.set_to(src.flip_y()), lambda: np.copyto(b, a[:, ::-1])),
        'fill strided': (lambda: dst.skip_y(2).set_to(1.0), lambda: b[:, ::2].fill(1.0)),
        'add in place': (lambda: dst.__iadd__(src), lambda: np.add(b, a, out=b)),
        'clone': (lambda: src.t().clone(), lambda: np.ascontiguousarray(a.T)),
    }
    for name, (ours, ref) in cases.items():
        median, best = time_call(ours)
        ref_median, _ = time_call(ref)
        results[name] = (median, best)
        ratio = median / ref_median if ref_median > 0 else float('inf')
        print(f"  {name:<16} {human_time(median)}   numpy {human_time(ref_median)}   x{ratio:.1f}")
    return results


def run_all_benchmarks():
    print("StrideKit Benchmarks")
    benchmark_transforms()
    benchmark_kernels()


if __name__ == "__main__":
    run_all_benchmarks()
