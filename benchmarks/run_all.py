#!/usr/bin/env python
"""Run all benchmarks.

Example:
    python -m benchmarks.run_all
"""

from . import run_all_benchmarks

if __name__ == '__main__':
    run_all_benchmarks()
