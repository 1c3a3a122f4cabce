"""AdjacencyTree: the traversal driver of ArrayTree.

AdjacencyTree owns the source rows and a validated TreeConfig, runs the
build phases in order (store -> relations -> 'next' relation) and exposes
the resulting pre-order. It plays the role of an execution plan: the
configuration is checked before any work is done, and each phase runs its
prerequisites on demand.

Example:
    >>> rows = [{"id": "1", "parent": "0"}, {"id": "2", "parent": "1"}]
    >>> tree = AdjacencyTree(rows).linearize()
    >>> [node.index for node in tree]
    ['1', '2']
"""

import logging
from typing import Any, Iterator, List, Optional, Sequence, Union

from .config import NumberingConfig, TreeConfig
from .core.errors import ConfigurationError, PhaseOrderError
from .core.linearizer import Linearizer, follow_next
from .core.node import Node
from .core.numbering import DEFAULT_LEVEL, Numberer
from .core.options import LinkingStrategy, TreeOption
from .core.relations import RelationBuilder
from .core.store import NodeStore, has_field

logger = logging.getLogger(__name__)

OptionsLike = Union[TreeOption, int, str, Sequence[Union[TreeOption, int, str]]]


class AdjacencyTree:
    """Builds and traverses a tree from a flat parent-referencing collection.

    Phases:
        build()      copy rows into the NodeStore arena
        link()       first child, next sibling and counters
        linearize()  'next' relation, levels and numbering

    Each phase is a no-op when already done and returns self for chaining.
    Supplying a new source or changing options discards every derived node.
    """

    def __init__(self,
                 records: Optional[Sequence[Any]] = None,
                 config: Optional[TreeConfig] = None,
                 **overrides):
        """Create a tree driver.

        Args:
            records: Ordered source rows (mappings or sequences)
            config: Tree configuration (defaults to TreeConfig())
            **overrides: TreeConfig fields to replace, e.g. parent_field="pid"

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config = (config or TreeConfig()).with_overrides(**overrides)
        self.config = self._validated(config)
        self._records = records
        self._preconstructed = False
        self._reset()

    @staticmethod
    def _validated(config: TreeConfig) -> TreeConfig:
        errors = config.validate()
        if errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(errors)}", errors
            )
        return config

    def _reset(self) -> None:
        """Discard every derived node and phase result."""
        self._store: Optional[NodeStore] = None
        self._levels = 0
        self._sorted: Optional[List[Node]] = None
        self.is_base_built = False
        self.is_relation_built = False
        self.is_linearized = False

    # Preconstructed trees

    @classmethod
    def from_store(cls,
                   store: NodeStore,
                   levels: Optional[int] = None,
                   config: Optional[TreeConfig] = None) -> 'AdjacencyTree':
        """Wrap a NodeStore that is already linked and linearized.

        No phase is run and nothing is validated; the caller guarantees
        that the 'next' relation and levels are in place.

        Args:
            store: Linked and linearized store
            levels: Deepest level of the tree (computed from the nodes if None)
            config: Tree configuration (field names default to the store's)

        Returns:
            AdjacencyTree with all phases marked done
        """
        if config is None:
            config = TreeConfig(
                index_field=store.index_field,
                parent_field=store.parent_field,
                root_sentinel=store.root_sentinel,
            )
        tree = cls(config=config)
        tree._adopt(store, levels)
        return tree

    @classmethod
    def set_as_built(cls,
                     records: Sequence[Any],
                     index_field: Any,
                     parent_field: Any,
                     next_field: Any,
                     root_sentinel: Any = "0") -> 'AdjacencyTree':
        """Use rows whose pre-order successor is already stored in a field.

        Only the first row is checked. Optional 'level', 'children' and
        'numbering' columns are copied onto the nodes when present.

        Args:
            records: Rows already carrying the successor index
            index_field: Field holding the unique node index
            parent_field: Field holding the parent index or the root sentinel
            next_field: Field holding the index of the next node (None at the end)
            root_sentinel: Parent value marking a root

        Returns:
            AdjacencyTree with all phases marked done

        Raises:
            SchemaError: If the first row lacks one of the named fields
        """
        config = TreeConfig(
            index_field=index_field,
            parent_field=parent_field,
            root_sentinel=root_sentinel,
            next_field=next_field,
        )
        tree = cls(records, config=config)
        store = NodeStore.build(records, index_field, parent_field,
                                root_sentinel, next_field)

        for node in store:
            row = node.record
            node.next = store.id_of(row[next_field])
            if has_field(row, "level"):
                node.level = int(row["level"])
            if has_field(row, "children"):
                node.children_count = int(row["children"])
            if has_field(row, "numbering"):
                node.numbering = row["numbering"]

        tree._adopt(store, None)
        return tree

    def _adopt(self, store: NodeStore, levels: Optional[int]) -> None:
        self._store = store
        self._levels = levels if levels is not None else max(
            (node.level for node in store), default=0
        )
        self._preconstructed = True
        self.is_base_built = True
        self.is_relation_built = True
        self.is_linearized = True
        logger.debug("Using preconstructed tree with %d nodes", len(store))

    # Source

    def source(self,
               records: Sequence[Any],
               index_field: Any = None,
               parent_field: Any = None,
               root_sentinel: Any = None) -> 'AdjacencyTree':
        """Replace the source rows, keeping previous field names when not given.

        Returns:
            self, with every phase reset
        """
        overrides = {}
        if index_field is not None:
            overrides["index_field"] = index_field
        if parent_field is not None:
            overrides["parent_field"] = parent_field
        if root_sentinel is not None:
            overrides["root_sentinel"] = root_sentinel
        self.config = self._validated(self.config.with_overrides(**overrides))

        self._records = records
        self._preconstructed = False
        self._reset()
        return self

    @property
    def records(self) -> Optional[Sequence[Any]]:
        """The current source rows."""
        return self._records

    # Options

    @property
    def options(self) -> TreeOption:
        return self.config.options

    def has_option(self, option: OptionsLike) -> bool:
        """Check if all given option bits are set."""
        return self.config.has_option(TreeOption.parse(option))

    def add_options(self, options: OptionsLike) -> 'AdjacencyTree':
        """Set option bits."""
        return self._set_options(self.config.options | TreeOption.parse(options))

    def remove_options(self, options: OptionsLike) -> 'AdjacencyTree':
        """Clear option bits."""
        return self._set_options(self.config.options & ~TreeOption.parse(options))

    def clear_options(self) -> 'AdjacencyTree':
        """Clear every option bit."""
        return self._set_options(TreeOption.NONE)

    def set_numbering(self,
                      level_schemes: Optional[dict] = None,
                      delimiter: str = ".") -> 'AdjacencyTree':
        """Enable numbering with the given per-level schemes.

        Args:
            level_schemes: Level (int) or "default" -> scheme name
            delimiter: Separator between level symbols

        Raises:
            ConfigurationError: If a scheme name is unknown
        """
        numbering = NumberingConfig(
            level_schemes=dict(level_schemes or {DEFAULT_LEVEL: "decimal"}),
            delimiter=delimiter,
        )
        self.config = self._validated(self.config.with_overrides(
            options=self.config.options | TreeOption.NUMBER_NODES,
            numbering=numbering,
        ))
        self._discard_derived()
        return self

    def _set_options(self, options: TreeOption) -> 'AdjacencyTree':
        if options == self.config.options:
            return self
        self.config = self._validated(self.config.with_overrides(options=options))
        self._discard_derived()
        return self

    def _discard_derived(self) -> None:
        # a preconstructed tree has nothing to recompute from
        if not self._preconstructed:
            self._reset()

    # Phases

    def build(self) -> 'AdjacencyTree':
        """Copy the source rows into a new NodeStore.

        Raises:
            EmptySourceError: If there are no rows
            SchemaError: If the first row lacks a required field
            DuplicateIndexError: If an index value repeats
        """
        if self.is_base_built:
            return self

        config = self.config
        self._store = NodeStore.build(
            self._records,
            config.index_field,
            config.parent_field,
            config.root_sentinel,
        )
        self.is_base_built = True
        return self

    def link(self) -> 'AdjacencyTree':
        """Build child/sibling relations and counters.

        Raises:
            OrphanError: If a node references a missing parent
            CycleError: If descendant counting finds a parent loop
        """
        if self.is_relation_built:
            return self
        self.build()

        try:
            RelationBuilder(self._store, self.config.options).link()
        except Exception:
            # a half-linked store cannot be linked again
            self._store = None
            self.is_base_built = False
            raise
        self.is_relation_built = True
        return self

    def linearize(self) -> 'AdjacencyTree':
        """Build the 'next' relation, levels and numbering.

        Raises:
            CycleError: If the tree contains a closure
            NoRootFoundError: If no row is a root
        """
        if self.is_linearized:
            return self
        self.link()

        linearizer = self._linearizer()
        try:
            linearizer.linearize()
        except Exception:
            self._store.clear_linearization()
            raise
        self._finish(linearizer)
        return self

    def _numberer(self) -> Optional[Numberer]:
        if not self.config.has_option(TreeOption.NUMBER_NODES):
            return None
        return self.config.numbering.build()

    def _linearizer(self) -> Linearizer:
        logger.debug("Linearizing %d nodes (strategy: %s)",
                     len(self._store), self.config.strategy.value)
        return Linearizer(self._store, self.config.options, self._numberer())

    def _finish(self, linearizer: Linearizer) -> None:
        self._levels = linearizer.levels
        self.is_linearized = True

    # Access

    @property
    def store(self) -> NodeStore:
        """The NodeStore, built on first access."""
        self.build()
        return self._store

    @property
    def levels(self) -> int:
        """Deepest level of the linearized tree (roots are level 0)."""
        return self._levels

    def __len__(self) -> int:
        return len(self.store)

    def first_node(self) -> Node:
        """Return the first root, where every traversal starts.

        Raises:
            NoRootFoundError: If no row is a root
        """
        return self.store.first_root()

    def node(self, index: Any) -> Optional[Node]:
        """Return the node with the given index, or None."""
        return self.store.get(index)

    def metadata(self, node: Node) -> dict:
        """Return the row fields of a node merged with its structural fields."""
        return self.store.metadata(node)

    # Iteration

    def iter_nodes(self) -> Iterator[Node]:
        """Iterate nodes in pre-order.

        With the two-pass strategy the tree is fully linearized first. With
        the fused strategy nodes are yielded while the 'next' relation is
        built; stopping early leaves the tree un-linearized.

        Returns:
            Iterator over nodes, parents before children
        """
        if self.is_linearized:
            return follow_next(self._store, self._store.first_root())

        if self.config.strategy == LinkingStrategy.FUSED:
            self.link()
            return self._fused_walk(self._linearizer())

        self.linearize()
        return follow_next(self._store, self._store.first_root())

    def __iter__(self) -> Iterator[Node]:
        return self.iter_nodes()

    def _fused_walk(self, linearizer: Linearizer) -> Iterator[Node]:
        completed = False
        try:
            for node in linearizer.steps():
                yield node
            completed = True
        finally:
            if completed:
                self._finish(linearizer)
            else:
                self._store.clear_linearization()
                logger.debug("Fused walk stopped early, linearization discarded")

    def to_sorted_sequence(self) -> List[Node]:
        """Return nodes in pre-order following 'next' from the first root.

        Raises:
            PhaseOrderError: If the tree has not been linearized
        """
        if not self.is_linearized:
            raise PhaseOrderError(
                "linearize",
                "The tree is not linearized yet, call linearize() first."
            )
        if self._sorted is None:
            self._sorted = list(follow_next(self._store, self._store.first_root()))
        return self._sorted

    def get_as_list(self) -> List[Node]:
        """Run every phase and return the nodes in pre-order."""
        self.linearize()
        return self.to_sorted_sequence()

    def __repr__(self) -> str:
        phase = (
            "linearized" if self.is_linearized
            else "linked" if self.is_relation_built
            else "built" if self.is_base_built
            else "new"
        )
        return f"{self.__class__.__name__}({phase}, options={self.config.options!r})"
