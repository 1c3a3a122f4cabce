"""Unit tests for child/sibling relation building.

Tests first/last child and sibling links, children and descendant
counting, sibling ordinals and the errors raised for broken sources.
"""

import sys
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from arraytree.core import (
    NodeStore,
    RelationBuilder,
    TreeOption,
    OrphanError,
    CycleError,
    CycleKind,
    PhaseOrderError,
)
from arraytree.testing import make_cycle_records, make_orphan_records


def linked(records, options=TreeOption.NONE, **kwargs):
    store = NodeStore.build(records, "id", "parent", **kwargs)
    RelationBuilder(store, options).link()
    return store


SCENARIO = [
    {"id": "1", "parent": "0"},
    {"id": "2", "parent": "1"},
    {"id": "3", "parent": "1"},
    {"id": "4", "parent": "2"},
]


class TestLinks(unittest.TestCase):
    """Test first child, last child and next sibling."""

    def test_children_and_siblings(self):
        store = linked(SCENARIO)
        one, two, three, four = (store.get(i) for i in "1234")

        self.assertEqual(one.first_child, two.node_id)
        self.assertEqual(one.last_child, three.node_id)
        self.assertEqual(two.next_sibling, three.node_id)
        self.assertIsNone(three.next_sibling)
        self.assertEqual(two.first_child, four.node_id)
        self.assertTrue(three.is_leaf())
        self.assertTrue(four.is_leaf())

    def test_parent_ids(self):
        store = linked(SCENARIO)

        self.assertIsNone(store.get("1").parent_id)
        self.assertEqual(store.get("4").parent_id, store.id_of("2"))

    def test_children_counts_always_computed(self):
        store = linked(SCENARIO)

        counts = {node.index: node.children_count for node in store}
        self.assertEqual(counts, {"1": 2, "2": 1, "3": 0, "4": 0})

    def test_roots_are_chained_as_siblings(self):
        store = linked([
            {"id": "1", "parent": "0"},
            {"id": "2", "parent": "1"},
            {"id": "3", "parent": "0"},
            {"id": "4", "parent": "0"},
        ])

        self.assertEqual(store.get("1").next_sibling, store.id_of("3"))
        self.assertEqual(store.get("3").next_sibling, store.id_of("4"))
        self.assertIsNone(store.get("4").next_sibling)

    def test_children_before_parent_in_source(self):
        """Source order does not matter for linking."""
        store = linked([
            {"id": "3", "parent": "2"},
            {"id": "2", "parent": "1"},
            {"id": "1", "parent": "0"},
        ])

        self.assertEqual(store.get("1").first_child, store.id_of("2"))
        self.assertEqual(store.get("2").first_child, store.id_of("3"))

    def test_link_is_idempotent(self):
        store = NodeStore.build(SCENARIO, "id", "parent")
        builder = RelationBuilder(store, TreeOption.COUNT_DESCENDANTS)

        builder.link()
        builder.link()

        self.assertTrue(builder.is_linked)
        self.assertEqual(store.get("1").children_count, 2)
        self.assertEqual(store.get("1").descendants_count, 3)

    def test_link_empty_store(self):
        with self.assertRaises(PhaseOrderError):
            RelationBuilder(NodeStore("id", "parent")).link()


class TestChildNumbers(unittest.TestCase):
    """Test sibling ordinals used for numbering."""

    def test_ordinals_with_numbering(self):
        store = linked(SCENARIO + [{"id": "5", "parent": "0"}], TreeOption.NUMBER_NODES)

        numbers = {node.index: node.child_number for node in store}
        self.assertEqual(numbers, {"1": 1, "2": 1, "3": 2, "4": 1, "5": 2})

    def test_ordinals_without_numbering(self):
        store = linked(SCENARIO)

        self.assertTrue(all(node.child_number == 0 for node in store))


class TestDescendants(unittest.TestCase):
    """Test descendant count propagation."""

    def test_descendant_counts(self):
        store = linked(SCENARIO, TreeOption.COUNT_DESCENDANTS)

        counts = {node.index: node.descendants_count for node in store}
        self.assertEqual(counts, {"1": 3, "2": 1, "3": 0, "4": 0})

    def test_descendants_not_counted_by_default(self):
        store = linked(SCENARIO)

        self.assertEqual(store.get("1").descendants_count, 0)

    def test_parent_loop_detected(self):
        with self.assertRaises(CycleError) as ctx:
            linked(make_cycle_records(), TreeOption.COUNT_DESCENDANTS)

        error = ctx.exception
        self.assertEqual(error.kind, CycleKind.DESCENDANT_WALK)
        self.assertEqual(error.detected_at, "2")
        self.assertEqual(error.branch, ())

    def test_parent_loop_branch_in_debug_mode(self):
        options = TreeOption.COUNT_DESCENDANTS | TreeOption.DEBUG_MODE

        with self.assertRaises(CycleError) as ctx:
            linked(make_cycle_records(), options)

        self.assertEqual(ctx.exception.branch, ("2", "4", "2"))
        self.assertIn("[2].[4].[2]", str(ctx.exception))


class TestOrphans(unittest.TestCase):
    """Test nodes referencing missing parents."""

    def test_missing_parent(self):
        with self.assertRaises(OrphanError) as ctx:
            linked(make_orphan_records())

        self.assertEqual(ctx.exception.node, "2")
        self.assertEqual(ctx.exception.missing_parent, "99")
        self.assertIn("has no parent", str(ctx.exception))

    def test_missing_parent_after_valid_nodes(self):
        """Every node is checked, not only the first ones."""
        records = SCENARIO + [{"id": "9", "parent": "42"}]

        with self.assertRaises(OrphanError) as ctx:
            linked(records)

        self.assertEqual(ctx.exception.node, "9")


if __name__ == "__main__":
    unittest.main()
