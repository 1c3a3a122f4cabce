"""Core tree engine for ArrayTree.

This package contains the tree-construction and traversal engine:
the node arena, relation building, linearization and numbering.
"""

from .errors import (
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
from .options import TreeOption, LinkingStrategy
from .node import Node
from .store import NodeStore
from .relations import RelationBuilder
from .linearizer import Linearizer, follow_next
from .numbering import (
    Numberer,
    decimal,
    upper_latin,
    lower_latin,
    register_scheme,
    get_scheme,
)

__all__ = [
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
    "TreeOption",
    "LinkingStrategy",
    "Node",
    "NodeStore",
    "RelationBuilder",
    "Linearizer",
    "follow_next",
    "Numberer",
    "decimal",
    "upper_latin",
    "lower_latin",
    "register_scheme",
    "get_scheme",
]
