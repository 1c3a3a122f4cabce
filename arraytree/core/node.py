"""Node record for ArrayTree.

A Node is a data container kept in the NodeStore arena. Structural links
(first child, next sibling, next in pre-order, ...) are integer arena ids,
never object references, so the whole tree is a flat list that can be
inspected and reset without aliasing surprises.
"""

from typing import Any, Dict, Mapping, Optional


class Node:
    """One source row plus the structural state derived from it.

    The structural fields start empty and are filled by the build phases:

    - RelationBuilder sets parent_id, first_child, last_child, next_sibling,
      children_count, descendants_count and child_number
    - Linearizer sets level, numbering and next

    Navigation is done by the NodeStore, which resolves arena ids back to
    nodes. The node itself only knows ids.
    """

    __slots__ = (
        "node_id",
        "index",
        "parent",
        "record",
        "parent_id",
        "first_child",
        "last_child",
        "next_sibling",
        "children_count",
        "descendants_count",
        "level",
        "child_number",
        "numbering",
        "next",
    )

    def __init__(self, node_id: int, index: Any, parent: Any, record: Any):
        """Create an unlinked node.

        Args:
            node_id: Position of the node in the arena
            index: Value of the index field of the source row
            parent: Value of the parent field of the source row
            record: The source row itself
        """
        self.node_id = node_id
        self.index = index
        self.parent = parent
        self.record = record

        # relations
        self.parent_id: Optional[int] = None
        self.first_child: Optional[int] = None
        self.last_child: Optional[int] = None
        self.next_sibling: Optional[int] = None
        self.next: Optional[int] = None

        # statistics
        self.children_count = 0
        self.descendants_count = 0
        self.level = 0
        self.child_number = 0
        self.numbering: Optional[str] = None

    def identifier(self) -> Any:
        """Return the index value that identifies this node."""
        return self.index

    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return self.first_child is None

    def record_fields(self) -> Dict[Any, Any]:
        """Return the source row as a dictionary.

        Mapping rows are copied, sequence rows are keyed by column position.
        """
        if isinstance(self.record, Mapping):
            return dict(self.record)
        return dict(enumerate(self.record))

    def __str__(self) -> str:
        """String representation defaults to the index."""
        return str(self.index)

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}(index={self.index!r}, parent={self.parent!r}, "
            f"level={self.level}, children={self.children_count})"
        )

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same arena id and index."""
        if not isinstance(other, Node):
            return NotImplemented
        return self.node_id == other.node_id and self.index == other.index

    def __hash__(self) -> int:
        """Hash based on the index for use in sets and dicts."""
        return hash((self.node_id, self.index))
