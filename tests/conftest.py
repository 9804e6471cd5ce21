"""Pytest configuration and fixtures."""

import numpy as np
import pytest

import stridekit as sk


@pytest.fixture(autouse=True)
def restore_config():
    """Reset global settings after every test."""
    yield
    sk.reset_config()


@pytest.fixture
def grid():
    """3x4 int64 view holding 0..11 in row-major order."""
    return sk.from_iterable((3, 4), range(12), dtype=np.int64)


@pytest.fixture
def cube():
    """2x3x4 int64 view holding 0..23 in row-major order."""
    return sk.from_iterable((2, 3, 4), range(24), dtype=np.int64)


@pytest.fixture
def square14():
    """14x14 int64 view holding 0..195 in row-major order."""
    return sk.from_iterable((14, 14), range(196), dtype=np.int64)


class Tracked:
    """Element type that records how many instances are alive."""

    alive = 0
    created = 0

    def __init__(self, value=0):
        self.value = value
        Tracked.alive += 1
        Tracked.created += 1

    def __copy__(self):
        return Tracked(self.value)

    def __del__(self):
        Tracked.alive -= 1


@pytest.fixture
def tracked():
    """The Tracked element class with its counters reset."""
    Tracked.alive = 0
    Tracked.created = 0
    return Tracked
