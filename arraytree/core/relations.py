"""Child/sibling relation building for ArrayTree.

RelationBuilder makes one pass over the store in source order and links
every node to its parent: first child, last child and next sibling, plus
children counts, sibling ordinals for numbering and (optionally) descendant
counts. The pass does not order subtrees; that is the Linearizer's job.
"""

import logging
from typing import List, Set

from .errors import CycleError, CycleKind, OrphanError, PhaseOrderError
from .node import Node
from .options import TreeOption
from .store import NodeStore

logger = logging.getLogger(__name__)


class RelationBuilder:
    """Builds parent/child/sibling relations over a NodeStore."""

    def __init__(self, store: NodeStore, options: TreeOption = TreeOption.NONE):
        """Initialize the builder.

        Args:
            store: Store built from the source rows
            options: Tree options (descendant counting, numbering, debug)
        """
        self.store = store
        self.options = options
        self.count_descendants_enabled = bool(options & TreeOption.COUNT_DESCENDANTS)
        self.numbering_enabled = bool(options & TreeOption.NUMBER_NODES)
        self.debug = bool(options & TreeOption.DEBUG_MODE)
        self.is_linked = False

    def link(self) -> None:
        """Set first/last child, next sibling and counters for every node.

        Every node is checked, so a missing parent anywhere in the source is
        reported here.

        Raises:
            OrphanError: If a node references a parent that does not exist
            CycleError: If descendant counting finds a parent loop
            PhaseOrderError: If the store is empty
        """
        if self.is_linked:
            return
        if not len(self.store):
            raise PhaseOrderError("build", "The store has no nodes to link, build it first.")

        store = self.store
        previous_root = None

        for node in store:
            if store.is_root(node):
                if previous_root is not None:
                    previous_root.next_sibling = node.node_id
                    if self.numbering_enabled:
                        node.child_number = previous_root.child_number + 1
                elif self.numbering_enabled:
                    node.child_number = 1
                previous_root = node
                continue

            parent = store.get(node.parent)
            if parent is None:
                raise OrphanError(node.index, node.parent)

            node.parent_id = parent.node_id
            if parent.first_child is None:
                parent.first_child = node.node_id
                parent.last_child = node.node_id
                if self.numbering_enabled:
                    node.child_number = 1
            else:
                last_child = store.nodes[parent.last_child]
                last_child.next_sibling = node.node_id
                parent.last_child = node.node_id
                if self.numbering_enabled:
                    node.child_number = last_child.child_number + 1

            parent.children_count += 1

            if self.count_descendants_enabled:
                self.count_descendants(node)

        self.is_linked = True
        logger.debug("Linked %d nodes", len(store))

    def count_descendants(self, node: Node) -> None:
        """Increment the descendant count of every ancestor of a node.

        The walk keeps its own visited set, so a parent loop is detected
        without leaving marks on the nodes.

        Args:
            node: A non-root node that has just been linked

        Raises:
            CycleError: If the upward walk revisits a node
            OrphanError: If an ancestor references a missing parent
        """
        store = self.store
        visited: Set[int] = {node.node_id}
        branch: List = [node.index]
        current = node

        while not store.is_root(current):
            ancestor = store.get(current.parent)
            if ancestor is None:
                raise OrphanError(current.index, current.parent)

            if ancestor.node_id in visited:
                branch.append(ancestor.index)
                raise CycleError(
                    CycleKind.DESCENDANT_WALK,
                    ancestor.index,
                    branch if self.debug else None,
                )

            visited.add(ancestor.node_id)
            branch.append(ancestor.index)
            ancestor.descendants_count += 1
            current = ancestor
