"""Rendering a tree into templated text.

The walk over a tree is turned into a flat stream of render events
(open block, open item, content, close item, close block). TreeRenderer
maps each event to the matching part of a View and joins the results.

Example:
    >>> tree = AdjacencyTree(rows).linearize()
    >>> html = TreeRenderer(tree).render()
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, TextIO, Tuple

from ..core.node import Node
from .template import Replacer, ReplacerRegistry
from .view import View

logger = logging.getLogger(__name__)


class RenderEvent(Enum):
    """Structural events emitted while walking a tree."""
    BLOCK_OPEN = "block_open"
    ITEM_OPEN = "item_open"
    CONTENT = "content"
    ITEM_CLOSE = "item_close"
    BLOCK_CLOSE = "block_close"


EventTuple = Tuple[RenderEvent, int, Node]


def iter_render_events(tree) -> Iterator[EventTuple]:
    """Yield (event, level, node) tuples for a tree in pre-order.

    A block opens for the first node and whenever the level increases. An
    item stays open while the following node is deeper, so children are
    nested inside it. When the level drops, every deeper item and block is
    closed; at the end everything still open is closed. Close events carry
    the node that opened the element.

    Nodes are looked ahead by one, so with the fused strategy a node's
    'next' value is already set when its open events are emitted.

    Args:
        tree: AdjacencyTree (or any object with iter_nodes())

    Yields:
        (RenderEvent, level, node) tuples
    """
    items: List[Node] = []
    blocks: List[Tuple[int, Node]] = []

    def emit(node: Node, following: Optional[Node]) -> Iterator[EventTuple]:
        level = node.level
        if not blocks or level > blocks[-1][0]:
            blocks.append((level, node))
            yield RenderEvent.BLOCK_OPEN, level, node
        yield RenderEvent.ITEM_OPEN, level, node
        yield RenderEvent.CONTENT, level, node
        items.append(node)

        target = following.level if following is not None else -1
        while items and items[-1].level >= target:
            closing = items.pop()
            yield RenderEvent.ITEM_CLOSE, closing.level, closing
            if closing.level > target and blocks and blocks[-1][0] == closing.level:
                block_level, opener = blocks.pop()
                yield RenderEvent.BLOCK_CLOSE, block_level, opener

        # blocks deeper than the following node without open items
        while blocks and blocks[-1][0] > target:
            block_level, opener = blocks.pop()
            yield RenderEvent.BLOCK_CLOSE, block_level, opener

    pending: Optional[Node] = None
    for node in tree.iter_nodes():
        if pending is not None:
            yield from emit(pending, node)
        pending = node
    if pending is not None:
        yield from emit(pending, None)


class TreeRenderer:
    """Renders an AdjacencyTree through a View.

    Tokens resolve against node metadata first, then against replacers.

    Example:
        >>> renderer = TreeRenderer(tree)
        >>> renderer.add_replacer("%active%", lambda node: "active" if node.index == "3" else None)
        >>> print(renderer.render())
    """

    def __init__(self,
                 tree,
                 view: Optional[View] = None,
                 replacers: Optional[Mapping[str, Replacer]] = None):
        """Create a renderer.

        Args:
            tree: AdjacencyTree to render
            view: Templates (default view for the tree's field names if None)
            replacers: Token name -> Replacer
        """
        self.tree = tree
        self.view = view if view is not None else View.for_tree(tree)
        self.replacers = ReplacerRegistry(replacers)

    def add_replacer(self, key: str, func: Replacer) -> 'TreeRenderer':
        """Register a replacer for a token that is not a node field."""
        self.replacers.add(key, func)
        return self

    def iter_chunks(self) -> Iterator[str]:
        """Yield the rendered output piece by piece."""
        view = self.view
        store = self.tree.store
        metadata: Dict[int, Dict[Any, Any]] = {}

        def values(node: Node) -> Dict[Any, Any]:
            # kept while the element is open
            data = metadata.get(node.node_id)
            if data is None:
                data = metadata[node.node_id] = store.metadata(node)
            return data

        yield view.wrapper.start.render({})

        count = 0
        for event, level, node in iter_render_events(self.tree):
            templates = view.level(level)
            if event is RenderEvent.BLOCK_OPEN:
                template = templates.block.start
            elif event is RenderEvent.ITEM_OPEN:
                count += 1
                template = templates.item.start
            elif event is RenderEvent.CONTENT:
                template = templates.content
            elif event is RenderEvent.ITEM_CLOSE:
                template = templates.item.end
            else:
                template = templates.block.end
            yield template.render(values(node), node, self.replacers)

            if event is RenderEvent.ITEM_CLOSE or event is RenderEvent.BLOCK_CLOSE:
                metadata.pop(node.node_id, None)

        yield view.wrapper.end.render({})
        logger.debug("Rendered %d nodes", count)

    def render(self) -> str:
        """Render the whole tree to a string."""
        return "".join(self.iter_chunks())

    def write(self, stream: TextIO) -> int:
        """Write the rendered tree to a text stream.

        Returns:
            Number of characters written
        """
        written = 0
        for chunk in self.iter_chunks():
            written += stream.write(chunk)
        return written
