"""Pre-order linearization for ArrayTree.

The Linearizer turns the child/sibling relations built by RelationBuilder
into the 'next' relation: a singly linked, depth-first, parent-before-children
visiting order that renderers iterate directly. While walking it assigns
levels and numbering and guards against closures in the tree.
"""

import logging
from typing import Iterator, List, Optional, Set, Tuple

from .errors import CycleError, CycleKind, PhaseOrderError
from .node import Node
from .numbering import Numberer
from .options import TreeOption
from .store import NodeStore

logger = logging.getLogger(__name__)


class Linearizer:
    """Builds the 'next' relation, levels and numbering over a linked store.

    Use linearize() to run the whole walk, or iterate steps() to receive
    each node as soon as its position is known (fused strategy).
    """

    def __init__(self,
                 store: NodeStore,
                 options: TreeOption = TreeOption.NONE,
                 numberer: Optional[Numberer] = None):
        """Initialize the linearizer.

        Args:
            store: Store already linked by RelationBuilder
            options: Tree options (numbering, debug)
            numberer: Numberer used when NUMBER_NODES is set (decimal if None)
        """
        self.store = store
        self.options = options
        self.numbering_enabled = bool(options & TreeOption.NUMBER_NODES)
        self.debug = bool(options & TreeOption.DEBUG_MODE)
        if numberer is None and self.numbering_enabled:
            numberer = Numberer()
        self.numberer = numberer
        self.levels = 0
        self.is_linearized = False

        # per-pass visited sets
        self._added: Set[int] = set()
        self._up_walked: Set[int] = set()

    def linearize(self) -> None:
        """Run the whole pre-order walk.

        Raises:
            CycleError: If the tree contains a closure
            NoRootFoundError: If there is no root node
        """
        if self.is_linearized:
            return
        for _ in self.steps():
            pass

    def steps(self) -> Iterator[Node]:
        """Walk the tree in pre-order, linking and yielding each node.

        The previous node's 'next' is set before a node is yielded, so a
        consumer can render while the relation is being built.

        Yields:
            Nodes in pre-order, starting from the first root

        Raises:
            CycleError: If the tree contains a closure
            NoRootFoundError: If there is no root node
        """
        if self.is_linearized:
            raise PhaseOrderError("linearize", "The tree is already linearized, follow the 'next' chain instead.")

        self._added.clear()
        self._up_walked.clear()
        self.levels = 0

        current = self.store.first_root()
        level = 0
        self._visit(current, level)
        yield current

        while True:
            next_id, level = self._advance(current, level)
            if next_id is None:
                break

            node = self.store.nodes[next_id]
            if node.node_id in self._added:
                raise CycleError(
                    CycleKind.RE_ADDED,
                    node.index,
                    [current.index, node.index] if self.debug else None,
                )

            self._visit(node, level)
            current.next = node.node_id
            yield node
            current = node

        current.next = None
        self._check_reached()
        self.is_linearized = True
        logger.debug("Linearized %d nodes over %d levels", len(self._added), self.levels + 1)

    def _visit(self, node: Node, level: int) -> None:
        self._added.add(node.node_id)
        node.level = level
        if level > self.levels:
            self.levels = level

        if self.numbering_enabled:
            parent = self.store.node(node.parent_id)
            node.numbering = self.numberer.format(
                level,
                node.child_number,
                parent.numbering if parent is not None else None,
            )

    def _advance(self, current: Node, level: int) -> Tuple[Optional[int], int]:
        """Return the arena id visited after current, and its level."""
        if current.first_child is not None:
            return current.first_child, level + 1

        if current.next_sibling is not None:
            return current.next_sibling, level

        # a single or last root without children: the walk is over
        if self.store.is_root(current):
            return None, level

        # climb until an ancestor has a next sibling
        self._up_walked.add(current.node_id)
        branch: List = [current.index]
        up = self.store.nodes[current.parent_id]
        level -= 1
        while True:
            branch.append(up.index)
            if up.node_id in self._up_walked:
                raise CycleError(CycleKind.UP_WALK, up.index, branch if self.debug else None)
            self._up_walked.add(up.node_id)

            if up.next_sibling is not None:
                return up.next_sibling, level

            if self.store.is_root(up):
                return None, level

            up = self.store.nodes[up.parent_id]
            level -= 1

    def _check_reached(self) -> None:
        """Fail if some nodes hang off a parent loop detached from every root."""
        if len(self._added) == len(self.store):
            return

        unreached = next(node for node in self.store if node.node_id not in self._added)

        # follow parents until the loop closes
        seen: Set[int] = set()
        branch: List = []
        node = unreached
        while node is not None and node.node_id not in seen:
            seen.add(node.node_id)
            branch.append(node.index)
            node = self.store.node(node.parent_id)

        detected_at = node.index if node is not None else unreached.index
        if node is not None:
            branch.append(node.index)

        raise CycleError(CycleKind.UNREACHED, detected_at, branch if self.debug else None)


def follow_next(store: NodeStore, start: Optional[Node] = None) -> Iterator[Node]:
    """Iterate an already linearized store along the 'next' relation.

    Args:
        store: Linearized store
        start: Node to start from (first root if None)

    Yields:
        Nodes in pre-order
    """
    node = start if start is not None else store.first_root()
    while node is not None:
        yield node
        node = store.node(node.next)
