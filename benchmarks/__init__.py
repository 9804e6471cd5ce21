"""Benchmark suite for StrideKit.

Benchmarks include:
- View transform overhead (shape/stride rewrites only)
- Strided copy, fill and compound-assignment kernels against numpy

Usage:
    python -m benchmarks.run_all
    python -m benchmarks.view_ops
"""

__all__ = [
    'run_all_benchmarks',
]


def run_all_benchmarks():
    """Run all benchmark scripts."""
    from .view_ops import run_all_benchmarks as run_view_ops
    run_view_ops()
