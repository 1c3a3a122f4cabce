"""Test fixtures for ArrayTree consumers.

Generators for flat parent-referencing records (valid forests, parent
loops, missing parents) and a straightforward recursive pre-order used as
a reference when checking the engine's output.
"""

import random
from typing import Any, Dict, List, Optional, Tuple


def make_forest(n: int,
                roots: int = 1,
                seed: int = 0,
                shuffle: bool = True,
                index_field: str = "id",
                parent_field: str = "parent",
                root_sentinel: Any = "0") -> List[Dict[str, Any]]:
    """Generate an acyclic forest as flat records.

    Node i (1-based) gets a parent chosen among nodes 1..i-1, so the
    result never contains a loop. Indexes are strings to match the
    default root sentinel "0".

    Args:
        n: Number of nodes
        roots: Number of root nodes (the first `roots` nodes)
        seed: Random seed for parents and shuffling
        shuffle: Shuffle the rows after generating them
        index_field: Name of the index field
        parent_field: Name of the parent field
        root_sentinel: Parent value of the roots

    Returns:
        List of row dictionaries with index, parent and title fields
    """
    if n < 1:
        return []
    roots = max(1, min(roots, n))
    rng = random.Random(seed)

    records = []
    for i in range(1, n + 1):
        parent = root_sentinel if i <= roots else str(rng.randint(1, i - 1))
        records.append({
            index_field: str(i),
            parent_field: parent,
            "title": f"Node {i}",
        })

    if shuffle:
        rng.shuffle(records)
    return records


def make_cycle_records(index_field: str = "id",
                       parent_field: str = "parent") -> List[Dict[str, Any]]:
    """Records where nodes 2 and 4 are each other's parent: 2 -> 4 -> 2."""
    return [
        {index_field: "1", parent_field: "0"},
        {index_field: "2", parent_field: "4"},
        {index_field: "3", parent_field: "1"},
        {index_field: "4", parent_field: "2"},
    ]


def make_orphan_records(index_field: str = "id",
                        parent_field: str = "parent") -> List[Dict[str, Any]]:
    """Records where node 2 references the missing parent 99."""
    return [
        {index_field: "1", parent_field: "0"},
        {index_field: "2", parent_field: "99"},
    ]


def children_counts(records: List[Any],
                    index_field: Any = "id",
                    parent_field: Any = "parent") -> Dict[Any, int]:
    """Count direct children of every index by scanning all records."""
    counts = {row[index_field]: 0 for row in records}
    for row in records:
        if row[parent_field] in counts:
            counts[row[parent_field]] += 1
    return counts


def reference_preorder(records: List[Any],
                       index_field: Any = "id",
                       parent_field: Any = "parent",
                       root_sentinel: Any = "0",
                       numbering: bool = False) -> List[Tuple]:
    """Recursive pre-order of an acyclic forest.

    Roots and children keep their source order, the first root comes first.

    Args:
        records: Acyclic forest records
        index_field: Name of the index field
        parent_field: Name of the parent field
        root_sentinel: Parent value of the roots
        numbering: Also return decimal numbering strings

    Returns:
        List of (index, level) tuples, or (index, level, numbering) tuples
    """
    children: Dict[Any, List[Any]] = {}
    roots = []
    for row in records:
        parent = row[parent_field]
        if type(parent) is type(root_sentinel) and parent == root_sentinel:
            roots.append(row[index_field])
        else:
            children.setdefault(parent, []).append(row[index_field])

    result: List[Tuple] = []

    def visit(index: Any, level: int, label: Optional[str]) -> None:
        result.append((index, level, label) if numbering else (index, level))
        for number, child in enumerate(children.get(index, []), start=1):
            visit(child, level + 1, f"{label}.{number}" if numbering else None)

    for number, root in enumerate(roots, start=1):
        visit(root, 0, str(number) if numbering else None)
    return result
