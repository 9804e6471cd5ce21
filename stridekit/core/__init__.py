"""Core view engine for StrideKit: points, shared buffers, views and iterators."""

from .point import Point
from .buffer import AcquireMode, SharedBuffer, resolve_element_type
from .iterator import SubViews, ViewIterator
from .view import View

__all__ = [
    'Point',
    'AcquireMode',
    'SharedBuffer',
    'resolve_element_type',
    'View',
    'ViewIterator',
    'SubViews',
]
