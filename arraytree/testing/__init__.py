"""Testing utilities for ArrayTree consumers."""

from .fixtures import (
    make_forest,
    make_cycle_records,
    make_orphan_records,
    reference_preorder,
    children_counts,
)

__all__ = [
    'make_forest',
    'make_cycle_records',
    'make_orphan_records',
    'reference_preorder',
    'children_counts',
]
