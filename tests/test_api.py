"""Tests for the high-level functional API."""

import sys
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from arraytree import (
    ConfigurationError,
    OrphanError,
    TreeOption,
    ViewConfig,
    View,
    build_tree,
    get_tree_stats,
    number_nodes,
    render_tree,
    sorted_nodes,
)

MENU = [
    {"id": 1, "pid": 0, "title": "Home", "url": "/"},
    {"id": 2, "pid": 1, "title": "Products", "url": "/products"},
    {"id": 3, "pid": 1, "title": "About", "url": "/about"},
    {"id": 4, "pid": 2, "title": "Tools", "url": "/products/tools"},
]
FIELDS = {"parent_field": "pid", "root_sentinel": 0}


class TestBuildAndSort(unittest.TestCase):

    def test_build_tree(self):
        tree = build_tree(MENU, **FIELDS)

        self.assertTrue(tree.is_linearized)
        self.assertEqual([node.index for node in tree], [1, 2, 4, 3])

    def test_sorted_nodes(self):
        nodes = sorted_nodes(MENU, **FIELDS)

        self.assertEqual([(n.index, n.level) for n in nodes], [(1, 0), (2, 1), (4, 2), (3, 1)])

    def test_unknown_keyword(self):
        with self.assertRaises(ConfigurationError):
            build_tree(MENU, parent="pid")

    def test_errors_propagate(self):
        with self.assertRaises(OrphanError):
            build_tree(MENU + [{"id": 5, "pid": 9}], **FIELDS)


class TestNumberNodes(unittest.TestCase):

    def test_decimal(self):
        self.assertEqual(
            number_nodes(MENU, **FIELDS),
            {1: "1", 2: "1.1", 4: "1.1.1", 3: "1.2"},
        )

    def test_schemes_and_delimiter(self):
        numbering = number_nodes(
            MENU, schemes={"default": "decimal", 1: "upper_latin"}, delimiter=" / ", **FIELDS
        )

        self.assertEqual(numbering[4], "1 / A / 1")
        self.assertEqual(numbering[3], "1 / B")

    def test_pre_order_keys(self):
        self.assertEqual(list(number_nodes(MENU, **FIELDS)), [1, 2, 4, 3])

    def test_extra_options_kept(self):
        numbering = number_nodes(MENU, options=["DEBUG_MODE"], **FIELDS)

        self.assertEqual(numbering[2], "1.1")


class TestRenderTree(unittest.TestCase):

    def test_mapping_view_and_replacer(self):
        html = render_tree(
            MENU,
            view={
                "wrapper": "<nav>{{}}</nav>",
                "level": {
                    "block": "<ul>{{}}</ul>",
                    "item": "<li>{{}}</li>",
                    "content": '<a class="{{%active%}}" href="{{url}}">{{title}}</a>',
                },
            },
            replacers={"%active%": lambda node: "active" if node.index == 3 else ""},
            **FIELDS,
        )

        self.assertEqual(
            html,
            '<nav><ul><li><a class="" href="/">Home</a>'
            '<ul><li><a class="" href="/products">Products</a>'
            '<ul><li><a class="" href="/products/tools">Tools</a></li></ul></li>'
            '<li><a class="active" href="/about">About</a></li></ul></li></ul></nav>',
        )

    def test_view_config(self):
        html = render_tree(MENU, view=ViewConfig(content="{{title}}"), **FIELDS)

        self.assertTrue(html.startswith('<div><ul data-level="0"><li data-next="2">Home'))

    def test_view_object(self):
        view = View().add({"level": {"content": "{{url}}"}})

        html = render_tree(MENU, view=view, **FIELDS)

        self.assertIn("/products/tools", html)

    def test_default_view_uses_field_names(self):
        html = render_tree(MENU[:1], **FIELDS)

        self.assertIn("node id: '1', parent id: '0'", html)

    def test_fused_strategy(self):
        self.assertEqual(
            render_tree(MENU, strategy="fused", **FIELDS),
            render_tree(MENU, **FIELDS),
        )


class TestTreeStats(unittest.TestCase):

    def test_stats(self):
        stats = get_tree_stats(MENU, **FIELDS)

        self.assertEqual(stats["nodes"], 4)
        self.assertEqual(stats["roots"], 1)
        self.assertEqual(stats["levels"], 3)
        self.assertEqual(stats["leaves"], 2)
        self.assertEqual(stats["max_children"], 2)
        self.assertEqual(stats["max_descendants"], 3)
        self.assertEqual(stats["avg_children"], 1.5)

    def test_stats_single_node(self):
        stats = get_tree_stats([{"id": "1", "parent": "0"}], options=TreeOption.NUMBER_NODES)

        self.assertEqual(stats["nodes"], 1)
        self.assertEqual(stats["levels"], 1)
        self.assertEqual(stats["leaves"], 1)
        self.assertEqual(stats["avg_children"], 0.0)


if __name__ == "__main__":
    unittest.main()
