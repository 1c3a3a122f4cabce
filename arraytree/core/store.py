"""NodeStore: the arena that owns every node of a tree.

The store copies the flat source rows into Node objects kept in insertion
order and indexes them by the value of the index field. All later phases
work on integer arena ids handed out here.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .errors import DuplicateIndexError, EmptySourceError, NoRootFoundError, SchemaError
from .node import Node

logger = logging.getLogger(__name__)

# Structural fields exposed to templates, in addition to the row fields
STRUCTURAL_FIELDS = (
    "level",
    "children",
    "descendants",
    "child_number",
    "numbering",
    "next",
    "first_child",
    "last_child",
    "next_sibling",
)


def is_sentinel(value: Any, sentinel: Any) -> bool:
    """Check if a parent value is the root sentinel (same type and equal)."""
    return type(value) is type(sentinel) and value == sentinel


def has_field(row: Any, field: Any) -> bool:
    """Check if a row (mapping or sequence) has the given field or column."""
    if isinstance(row, Mapping):
        return field in row
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes)):
        return isinstance(field, int) and -len(row) <= field < len(row)
    return False


class NodeStore:
    """Flat collection of nodes with an index -> arena id mapping.

    Build it with NodeStore.build(); the constructor only creates an empty
    store for the given field names.
    """

    def __init__(self, index_field: Any, parent_field: Any, root_sentinel: Any = "0"):
        self.index_field = index_field
        self.parent_field = parent_field
        self.root_sentinel = root_sentinel
        self.nodes: List[Node] = []
        self._ids: Dict[Any, int] = {}
        self._first_root: Optional[int] = None

    @classmethod
    def build(cls,
              records: Optional[Sequence[Any]],
              index_field: Any,
              parent_field: Any,
              root_sentinel: Any = "0",
              next_field: Any = None) -> "NodeStore":
        """Create a store from source rows.

        Only the first row is checked for the required fields, the schema
        is assumed to be uniform.

        Args:
            records: Ordered source rows (mappings or sequences)
            index_field: Field holding the unique node index
            parent_field: Field holding the parent index or the root sentinel
            root_sentinel: Parent value marking a root
            next_field: Optional field holding a precomputed successor index

        Returns:
            NodeStore with one unlinked node per row

        Raises:
            EmptySourceError: If there are no rows
            SchemaError: If the first row lacks a required field
            DuplicateIndexError: If an index value repeats
        """
        if not records:
            raise EmptySourceError()

        verify_schema(records[0], index_field, parent_field, next_field)

        store = cls(index_field, parent_field, root_sentinel)
        for row in records:
            store._add(row)

        logger.debug("Built node store with %d nodes", len(store.nodes))
        return store

    def _add(self, row: Any) -> Node:
        index = row[self.index_field]
        if index in self._ids:
            raise DuplicateIndexError(self.index_field, index)

        node = Node(len(self.nodes), index, row[self.parent_field], row)
        self._ids[index] = node.node_id
        self.nodes.append(node)
        return node

    # Lookups

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        """Iterate nodes in source (insertion) order."""
        return iter(self.nodes)

    def node(self, node_id: Optional[int]) -> Optional[Node]:
        """Resolve an arena id to its node (None stays None)."""
        if node_id is None:
            return None
        return self.nodes[node_id]

    def contains(self, index: Any) -> bool:
        """Check if a node with the given index exists."""
        return index in self._ids

    def id_of(self, index: Any) -> Optional[int]:
        """Return the arena id of the node with the given index, or None."""
        return self._ids.get(index)

    def get(self, index: Any) -> Optional[Node]:
        """Return the node with the given index, or None."""
        node_id = self._ids.get(index)
        return None if node_id is None else self.nodes[node_id]

    def is_root(self, node: Node) -> bool:
        """Check if a node's parent is the root sentinel."""
        return is_sentinel(node.parent, self.root_sentinel)

    def roots(self) -> List[Node]:
        """Return all root nodes in source order."""
        return [node for node in self.nodes if self.is_root(node)]

    def first_root(self) -> Node:
        """Return the first root in source order.

        The traversal starts here, so output order depends on row order.

        Raises:
            NoRootFoundError: If no node is a root
        """
        if self._first_root is None:
            for node in self.nodes:
                if self.is_root(node):
                    self._first_root = node.node_id
                    break
            else:
                raise NoRootFoundError(self.root_sentinel)
        return self.nodes[self._first_root]

    def index_of(self, node_id: Optional[int]) -> Any:
        """Return the index value for an arena id (None stays None)."""
        if node_id is None:
            return None
        return self.nodes[node_id].index

    def metadata(self, node: Node) -> Dict[Any, Any]:
        """Return row fields merged with the structural fields of a node.

        Structural links are expressed as index values, not arena ids.
        """
        data = node.record_fields()
        data.update({
            "level": node.level,
            "children": node.children_count,
            "descendants": node.descendants_count,
            "child_number": node.child_number,
            "numbering": node.numbering,
            "next": self.index_of(node.next),
            "first_child": self.index_of(node.first_child),
            "last_child": self.index_of(node.last_child),
            "next_sibling": self.index_of(node.next_sibling),
        })
        return data

    # Resets

    def clear_linearization(self) -> None:
        """Return next, level and numbering of every node to their empty values."""
        for node in self.nodes:
            node.next = None
            node.level = 0
            node.numbering = None


def verify_schema(first_row: Any, index_field: Any, parent_field: Any,
                  next_field: Any = None) -> None:
    """Check that the first row carries the required fields.

    Raises:
        SchemaError: Naming the first missing field
    """
    if not has_field(first_row, index_field):
        raise SchemaError(index_field, "index")
    if not has_field(first_row, parent_field):
        raise SchemaError(parent_field, "parent")
    if next_field is not None and not has_field(first_row, next_field):
        raise SchemaError(next_field, "next")
