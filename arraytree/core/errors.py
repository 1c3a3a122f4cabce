"""Exception hierarchy for ArrayTree.

Every error raised while building, linking, linearizing or rendering a tree
derives from TreeError. Structural errors are terminal: a malformed source
cannot be partially trusted, so nothing here is ever caught and retried
inside the library.
"""

from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple


class TreeError(Exception):
    """Base class for all ArrayTree errors."""
    pass


class ConfigurationError(TreeError):
    """Raised when a configuration, view template or numbering scheme is invalid."""

    def __init__(self, message: str, problems: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.problems: List[str] = list(problems or [])


class SchemaError(TreeError):
    """Raised when the first source row lacks a required field."""

    def __init__(self, field: Any, role: str, message: Optional[str] = None):
        self.field = field
        self.role = role
        super().__init__(
            message or f"The source has no {role} field {field!r}."
        )


class DuplicateIndexError(SchemaError):
    """Raised when two source rows share the same index value."""

    def __init__(self, field: Any, index: Any):
        self.index = index
        super().__init__(
            field, "index",
            f"The index field {field!r} is not unique: value {index!r} appears more than once."
        )


class EmptySourceError(TreeError):
    """Raised when the source collection has no rows."""

    def __init__(self):
        super().__init__("The source is empty.")


class NoRootFoundError(TreeError):
    """Raised when no row has its parent equal to the root sentinel."""

    def __init__(self, root_sentinel: Any):
        self.root_sentinel = root_sentinel
        super().__init__(
            f"No root node found: no row has parent == {root_sentinel!r} "
            f"(maybe a type mismatch, e.g. '0' vs 0)."
        )


class OrphanError(TreeError):
    """Raised when a node references a parent that does not exist."""

    def __init__(self, node: Any, missing_parent: Any):
        self.node = node
        self.missing_parent = missing_parent
        super().__init__(
            f"Node (id: {node!r}) has no parent (id: {missing_parent!r})."
        )


class CycleKind(Enum):
    """Which walk detected a closure in the tree."""
    DESCENDANT_WALK = "descendant-walk"  # upward walk while counting descendants
    UP_WALK = "up-walk"                  # upward search for the next sibling
    RE_ADDED = "re-added"                # node linearized a second time
    UNREACHED = "unreached"              # parent loop detached from every root


def format_branch(branch: Iterable[Any]) -> str:
    """Format a branch of indexes as '[4].[2].[4]'."""
    return ".".join(f"[{index}]" for index in branch)


class CycleError(TreeError):
    """Raised when following parent, child or sibling links returns to a visited node.

    Attributes:
        kind: CycleKind naming the walk that found the closure
        detected_at: index of the node where the revisit happened
        branch: indexes visited by the walk, in order (only in debug mode)
    """

    _DESCRIPTIONS = {
        CycleKind.DESCENDANT_WALK: "node {at!r} appears twice while counting descendants",
        CycleKind.UP_WALK: "node {at!r} was used within the up-walk and is used again",
        CycleKind.RE_ADDED: "node {at!r} was added to the tree and is added again",
        CycleKind.UNREACHED: "node {at!r} is not reachable from any root, its parent chain is a loop",
    }

    def __init__(self, kind: CycleKind, detected_at: Any,
                 branch: Optional[Sequence[Any]] = None):
        self.kind = kind
        self.detected_at = detected_at
        self.branch: Tuple[Any, ...] = tuple(branch or ())
        message = "Closure in the tree ({}): {}.".format(
            kind.value, self._DESCRIPTIONS[kind].format(at=detected_at)
        )
        if self.branch:
            message += f" Branch: {format_branch(self.branch)}"
        super().__init__(message)


class PhaseOrderError(TreeError):
    """Raised when a phase result is requested before the phase has run."""

    def __init__(self, phase: str, message: Optional[str] = None):
        self.phase = phase
        super().__init__(message or f"The tree phase {phase!r} has not completed yet.")
