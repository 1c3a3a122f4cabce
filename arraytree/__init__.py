"""ArrayTree - ordered trees from flat adjacency lists.

ArrayTree turns a flat, unordered collection of parent-referencing rows
into an ordered, leveled pre-order traversal, with optional hierarchical
numbering and children/descendant counts, and renders it through simple
'{{token}}' templates (nested HTML lists by default).

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from arraytree import build_tree, render_tree

    rows = [{"id": "1", "parent": "0"}, {"id": "2", "parent": "1"}]
    tree = build_tree(rows, options=["NUMBER_NODES"])
    html = render_tree(rows)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

import logging

__version__ = "0.1.0"

from .core.errors import (
    TreeError,
    ConfigurationError,
    SchemaError,
    DuplicateIndexError,
    EmptySourceError,
    NoRootFoundError,
    OrphanError,
    CycleKind,
    CycleError,
    PhaseOrderError,
)
from .core.node import Node
from .core.store import NodeStore
from .core.numbering import Numberer, register_scheme
from .config import (
    TreeOption,
    LinkingStrategy,
    NumberingConfig,
    TreeConfig,
    ViewConfig,
    load_config,
)
from .tree import AdjacencyTree
from .render import TreeRenderer, View, RenderEvent, iter_render_events
from .api import (
    build_tree,
    sorted_nodes,
    number_nodes,
    render_tree,
    get_tree_stats,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Errors
    "TreeError",
    "ConfigurationError",
    "SchemaError",
    "DuplicateIndexError",
    "EmptySourceError",
    "NoRootFoundError",
    "OrphanError",
    "CycleKind",
    "CycleError",
    "PhaseOrderError",
    # Engine
    "Node",
    "NodeStore",
    "Numberer",
    "register_scheme",
    "AdjacencyTree",
    # Configuration
    "TreeOption",
    "LinkingStrategy",
    "NumberingConfig",
    "TreeConfig",
    "ViewConfig",
    "load_config",
    # Rendering
    "TreeRenderer",
    "View",
    "RenderEvent",
    "iter_render_events",
    # High-level API
    "build_tree",
    "sorted_nodes",
    "number_nodes",
    "render_tree",
    "get_tree_stats",
]
