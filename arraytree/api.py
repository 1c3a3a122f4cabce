"""High-level API for ArrayTree.

This module provides simple, functional interfaces for common tree
operations. These functions wrap AdjacencyTree and TreeRenderer for ease
of use in simple cases.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .config import TreeConfig, ViewConfig
from .core.node import Node
from .core.numbering import DEFAULT_LEVEL
from .core.options import TreeOption
from .render.output import TreeRenderer
from .render.template import Replacer
from .render.view import View
from .tree import AdjacencyTree


def build_tree(records: Sequence[Any],
               config: Optional[TreeConfig] = None,
               **kwargs) -> AdjacencyTree:
    """Build, link and linearize a tree.

    Args:
        records: Ordered source rows (mappings or sequences)
        config: Tree configuration (defaults to TreeConfig())
        **kwargs: TreeConfig fields, e.g. parent_field="pid", options=["NUMBER_NODES"]

    Returns:
        Linearized AdjacencyTree

    Raises:
        ConfigurationError: If a keyword is not a TreeConfig field
        TreeError: If the records do not form a valid forest

    Example:
        >>> tree = build_tree(rows, parent_field="pid", root_sentinel=0)
        >>> [node.index for node in tree]
    """
    return AdjacencyTree(records, config=config, **kwargs).linearize()


def sorted_nodes(records: Sequence[Any], **kwargs) -> List[Node]:
    """Return the nodes of the records in pre-order.

    Args:
        records: Ordered source rows
        **kwargs: TreeConfig fields (see build_tree)

    Returns:
        Nodes, parents before children
    """
    return build_tree(records, **kwargs).to_sorted_sequence()


def number_nodes(records: Sequence[Any],
                 schemes: Optional[Mapping[Union[int, str], str]] = None,
                 delimiter: str = ".",
                 **kwargs) -> Dict[Any, str]:
    """Compute hierarchical numbering for every node.

    Args:
        records: Ordered source rows
        schemes: Level (int) or "default" -> scheme name
        delimiter: Separator between level symbols
        **kwargs: TreeConfig fields (see build_tree)

    Returns:
        Dictionary mapping each index to its numbering, in pre-order

    Example:
        >>> number_nodes(rows, schemes={"default": "decimal", 1: "upper_latin"})
        {'1': '1', '2': '1.A', '3': '1.B'}
    """
    options = TreeOption.parse(kwargs.pop("options", TreeOption.NONE))
    config = TreeConfig.numbered(
        level_schemes=dict(schemes or {DEFAULT_LEVEL: "decimal"}),
        delimiter=delimiter,
        options=options,
    )
    tree = build_tree(records, config=config, **kwargs)
    return {node.index: node.numbering for node in tree.to_sorted_sequence()}


def render_tree(records: Sequence[Any],
                view: Optional[Union[View, ViewConfig, Mapping]] = None,
                replacers: Optional[Mapping[str, Replacer]] = None,
                **kwargs) -> str:
    """Render records as nested templated text (HTML lists by default).

    Args:
        records: Ordered source rows
        view: View, ViewConfig or a mapping of custom settings for View.add()
        replacers: Token name -> function(node) returning the token value
        **kwargs: TreeConfig fields (see build_tree)

    Returns:
        Rendered string

    Example:
        >>> render_tree(rows, view={"level": {"content": "{{title}}"}})
    """
    tree = AdjacencyTree(records, **kwargs)
    if isinstance(view, View):
        tree_view = view
    elif isinstance(view, ViewConfig):
        tree_view = View.for_tree(tree, view)
    else:
        tree_view = View.for_tree(tree)
        if view:
            tree_view.add(view)
    return TreeRenderer(tree, tree_view, replacers).render()


def get_tree_stats(records: Sequence[Any], **kwargs) -> Dict[str, Any]:
    """Get statistics about a tree.

    Args:
        records: Ordered source rows
        **kwargs: TreeConfig fields (see build_tree)

    Returns:
        Dictionary with statistics:
        - nodes: Total node count
        - roots: Number of root nodes
        - levels: Number of levels (deepest level + 1)
        - leaves: Number of nodes without children
        - max_children: Largest number of direct children
        - max_descendants: Largest number of descendants
        - avg_children: Average children per non-leaf node
    """
    options = TreeOption.parse(kwargs.pop("options", TreeOption.NONE))
    tree = build_tree(records, options=options | TreeOption.COUNT_DESCENDANTS, **kwargs)
    store = tree.store

    leaves = 0
    max_children = 0
    max_descendants = 0
    for node in store:
        if node.is_leaf():
            leaves += 1
        max_children = max(max_children, node.children_count)
        max_descendants = max(max_descendants, node.descendants_count)

    branches = len(store) - leaves
    return {
        'nodes': len(store),
        'roots': len(store.roots()),
        'levels': tree.levels + 1,
        'leaves': leaves,
        'max_children': max_children,
        'max_descendants': max_descendants,
        'avg_children': (len(store) - len(store.roots())) / branches if branches else 0.0,
    }
