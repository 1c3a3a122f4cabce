#!/usr/bin/env python3
"""
Basic ArrayTree example: a site menu stored as flat database rows.

This example demonstrates:
- Building a tree from unordered parent-referencing rows
- Hierarchical numbering with a different scheme per level
- Rendering nested HTML lists with custom templates and a replacer
- Rejecting a source with a parent loop
"""

import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from arraytree import (
    AdjacencyTree,
    CycleError,
    TreeConfig,
    get_tree_stats,
    render_tree,
)

# Rows as they might come from "SELECT id, pid, title, url FROM menu"
MENU = [
    {"id": 4, "pid": 2, "title": "Tools", "url": "/products/tools"},
    {"id": 1, "pid": 0, "title": "Home", "url": "/"},
    {"id": 2, "pid": 1, "title": "Products", "url": "/products"},
    {"id": 5, "pid": 0, "title": "Contact", "url": "/contact"},
    {"id": 3, "pid": 1, "title": "About", "url": "/about"},
    {"id": 6, "pid": 2, "title": "Parts", "url": "/products/parts"},
]

CURRENT_URL = "/products/parts"


def print_outline():
    """Print the menu as a numbered outline."""
    config = TreeConfig.numbered(
        {"default": "decimal", 1: "upper_latin", 2: "lower_latin"},
        parent_field="pid",
        root_sentinel=0,
    )
    tree = AdjacencyTree(MENU, config=config)

    print("Menu outline:")
    print("-" * 50)
    for node in tree:
        print(f"{'    ' * node.level}{node.numbering:<8} {node.record['title']}")

    stats = get_tree_stats(MENU, parent_field="pid", root_sentinel=0)
    print(f"\n{stats['nodes']} nodes, {stats['roots']} roots, {stats['levels']} levels")


def print_html():
    """Render the menu as nested lists, marking the current page."""
    html = render_tree(
        MENU,
        view={
            "wrapper": '<nav class="menu">{{}}</nav>',
            "level": {
                "block": "<ul>{{}}</ul>",
                "item": "<li>{{}}</li>",
                "content": '<a href="{{url}}"{{%active%}}>{{title}}</a>',
            },
        },
        replacers={
            "%active%": lambda node: ' class="active"' if node.record["url"] == CURRENT_URL else None,
        },
        parent_field="pid",
        root_sentinel=0,
        strategy="fused",
    )
    print("\nHTML:")
    print("-" * 50)
    print(html)


def show_broken_source():
    """Two rows that are each other's parent never reach a root."""
    broken = MENU + [{"id": 7, "pid": 8}, {"id": 8, "pid": 7}]
    try:
        AdjacencyTree(broken, parent_field="pid", root_sentinel=0).linearize()
    except CycleError as e:
        print(f"\nRejected ({e.kind.value}): {e}")


def main():
    print_outline()
    print_html()
    show_broken_source()


if __name__ == "__main__":
    main()
