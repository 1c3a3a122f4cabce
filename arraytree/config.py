"""Configuration system for ArrayTree.

This module defines how users describe their source rows (which fields hold
the index and the parent, what marks a root), which optional computations to
run while building the tree, and the default templates used for rendering.

Settings can also be loaded from a TOML file:

    [tree]
    index_field = "id"
    parent_field = "parent_id"
    root_sentinel = 0
    options = ["NUMBER_NODES", "COUNT_DESCENDANTS"]
    strategy = "fused"

    [numbering]
    default = "decimal"
    delimiter = "."
    levels = { 1 = "upper_latin" }

    [view]
    wrapper = "<nav>{{}}</nav>"
    levels = { 0 = { block = "<ul class=\\"top\\">{{}}</ul>" } }
"""

import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .core.errors import ConfigurationError
from .core.numbering import DEFAULT_LEVEL, Numberer, get_scheme
from .core.options import LinkingStrategy, TreeOption


@dataclass
class NumberingConfig:
    """Configuration for hierarchical numbering."""

    # Level (int) or "default" -> scheme name
    level_schemes: Dict[Union[int, str], str] = field(
        default_factory=lambda: {DEFAULT_LEVEL: "decimal"}
    )
    delimiter: str = "."

    def validate(self) -> List[str]:
        """Validate numbering settings.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.delimiter, str):
            errors.append("numbering delimiter must be a string")
        for level, name in self.level_schemes.items():
            if level != DEFAULT_LEVEL and (not isinstance(level, int) or level < 0):
                errors.append(f"numbering level {level!r} must be 'default' or a non-negative int")
            if callable(name):
                continue
            try:
                get_scheme(name)
            except ConfigurationError as e:
                errors.append(str(e))
        return errors

    def build(self) -> Numberer:
        """Create the Numberer described by this configuration."""
        return Numberer(self.level_schemes, self.delimiter)


@dataclass
class TreeConfig:
    """Complete configuration for building a tree.

    This is the primary way users describe their source rows and pick the
    optional computations. AdjacencyTree validates it before any work.
    """

    # Source schema
    index_field: Any = "id"
    parent_field: Any = "parent"
    root_sentinel: Any = "0"
    next_field: Any = None  # only for precomputed trees

    # Computations
    options: TreeOption = TreeOption.NONE
    strategy: LinkingStrategy = LinkingStrategy.TWO_PASS

    # Numbering
    numbering: NumberingConfig = field(default_factory=NumberingConfig)

    def has_option(self, option: TreeOption) -> bool:
        """Check if all bits of an option are set."""
        return (self.options & option) == option

    @classmethod
    def numbered(cls,
                 level_schemes: Optional[Dict[Union[int, str], str]] = None,
                 delimiter: str = ".",
                 **kwargs) -> 'TreeConfig':
        """Create config that numbers nodes.

        Args:
            level_schemes: Scheme per level, e.g. {"default": "decimal", 1: "upper_latin"}
            delimiter: Separator between level symbols
            **kwargs: Other TreeConfig fields

        Returns:
            TreeConfig with NUMBER_NODES set
        """
        options = TreeOption.parse(kwargs.pop("options", TreeOption.NONE)) | TreeOption.NUMBER_NODES
        numbering = NumberingConfig(
            level_schemes=dict(level_schemes or {DEFAULT_LEVEL: "decimal"}),
            delimiter=delimiter,
        )
        return cls(options=options, numbering=numbering, **kwargs)

    @classmethod
    def counting(cls, **kwargs) -> 'TreeConfig':
        """Create config that counts children and descendants.

        Returns:
            TreeConfig with COUNT_CHILDREN and COUNT_DESCENDANTS set
        """
        options = TreeOption.parse(kwargs.pop("options", TreeOption.NONE))
        options |= TreeOption.COUNT_CHILDREN | TreeOption.COUNT_DESCENDANTS
        return cls(options=options, **kwargs)

    def with_overrides(self, **overrides) -> 'TreeConfig':
        """Return a copy with some fields replaced.

        Options may be given as flag names and the strategy as its value,
        e.g. with_overrides(options=["NUMBER_NODES"], strategy="fused").

        Raises:
            ConfigurationError: If a key is not a TreeConfig field or a value
                cannot be converted
        """
        if not overrides:
            return self

        known = {f.name for f in fields(self)}
        unknown = sorted(str(key) for key in overrides if key not in known)
        if unknown:
            raise ConfigurationError(
                f"Unknown tree settings: {', '.join(unknown)}", unknown
            )

        try:
            if "options" in overrides:
                overrides["options"] = TreeOption.parse(overrides["options"])
            if isinstance(overrides.get("strategy"), str):
                overrides["strategy"] = LinkingStrategy(overrides["strategy"])
        except ValueError as e:
            raise ConfigurationError(f"Invalid tree settings: {e}", [str(e)]) from e

        return replace(self, **overrides)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.index_field is None:
            errors.append("index_field is required")
        if self.parent_field is None:
            errors.append("parent_field is required")
        if self.index_field is not None and self.index_field == self.parent_field:
            errors.append("index_field and parent_field must differ")
        if self.next_field is not None and self.next_field in (self.index_field, self.parent_field):
            errors.append("next_field must differ from index_field and parent_field")

        if not isinstance(self.options, int):
            errors.append("options must be a TreeOption")
        if not isinstance(self.strategy, LinkingStrategy):
            errors.append("strategy must be a LinkingStrategy")

        if self.has_option(TreeOption.NUMBER_NODES):
            errors.extend(self.numbering.validate())

        return errors


@dataclass
class ViewConfig:
    """Default templates for rendering a tree.

    Element templates (wrapper, block, item) contain the empty splitter pair
    '{{}}' marking where their children go. Content templates are emitted as a
    whole. Tokens such as '{{title}}' are replaced with node values.
    """

    splitter_start: str = "{{"
    splitter_end: str = "}}"
    token_pattern: str = "[a-zA-Z0-9%_][a-zA-Z0-9%_]*"  # [allowed first symbol][next symbols]*

    wrapper: str = "<div>{{}}</div>"
    block: str = '<ul data-level="{{level}}">{{}}</ul>'
    item: str = '<li data-next="{{next}}">{{}}</li>'
    content: Optional[str] = None  # None: built from the index and parent fields

    # Per-level overrides: level -> {"block": ..., "item": ..., "content": ...}
    levels: Dict[int, Dict[str, str]] = field(default_factory=dict)

    def default_content(self, index_field: Any, parent_field: Any) -> str:
        """Return the content template, deriving it from field names if unset."""
        if self.content is not None:
            return self.content
        start, end = self.splitter_start, self.splitter_end
        return (
            f"<a href=\"#\">node id: '{start}{index_field}{end}', "
            f"parent id: '{start}{parent_field}{end}'</a>"
        )

    def validate(self) -> List[str]:
        """Validate view settings.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not self.splitter_start or not self.splitter_end:
            errors.append("splitters cannot be empty")
        marker = self.splitter_start + self.splitter_end
        templates = [("wrapper", self.wrapper), ("block", self.block), ("item", self.item)]
        for level, overrides in self.levels.items():
            if not isinstance(level, int) or level < 0:
                errors.append(f"view level {level!r} must be a non-negative int")
            for part in ("block", "item"):
                if part in overrides:
                    templates.append((f"level {level} {part}", overrides[part]))
        for name, template in templates:
            if template.count(marker) != 1:
                errors.append(f"{name} template must contain exactly one '{marker}'")
        return errors


def _int_keys(mapping: Mapping) -> Dict:
    """TOML keys are strings; turn digit keys into level ints."""
    return {int(k) if isinstance(k, str) and k.isdigit() else k: v for k, v in mapping.items()}


def _apply_toml(data: Dict[str, Any]) -> Tuple[TreeConfig, ViewConfig]:
    tree = data.get("tree", {})
    numbering = data.get("numbering", {})
    view = data.get("view", {})

    known_tree = {"index_field", "parent_field", "root_sentinel", "next_field", "options", "strategy"}
    unknown = sorted(set(tree) - known_tree)
    if unknown:
        raise ConfigurationError(f"Unknown [tree] settings: {', '.join(unknown)}", unknown)

    kwargs: Dict[str, Any] = {k: tree[k] for k in ("index_field", "parent_field", "root_sentinel", "next_field") if k in tree}
    try:
        if "options" in tree:
            kwargs["options"] = TreeOption.parse(tree["options"])
        if "strategy" in tree:
            kwargs["strategy"] = LinkingStrategy(tree["strategy"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid [tree] settings: {e}", [str(e)]) from e

    level_schemes: Dict[Union[int, str], str] = {DEFAULT_LEVEL: numbering.get("default", "decimal")}
    level_schemes.update(_int_keys(numbering.get("levels", {})))
    kwargs["numbering"] = NumberingConfig(
        level_schemes=level_schemes,
        delimiter=numbering.get("delimiter", "."),
    )

    view_kwargs = {k: v for k, v in view.items() if k != "levels"}
    try:
        view_config = ViewConfig(levels=_int_keys(view.get("levels", {})), **view_kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [view] settings: {e}", [str(e)]) from e

    return TreeConfig(**kwargs), view_config


def load_config(path: Union[str, Path]) -> Tuple[TreeConfig, ViewConfig]:
    """Load tree and view configuration from a TOML file.

    Args:
        path: Path of the TOML file

    Returns:
        (TreeConfig, ViewConfig) pair; missing tables keep their defaults

    Raises:
        ConfigurationError: If the file is not valid TOML or holds invalid settings
        FileNotFoundError: If the file does not exist
    """
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}", [str(e)]) from e

    tree_config, view_config = _apply_toml(data)

    problems = tree_config.validate() + view_config.validate()
    if problems:
        raise ConfigurationError(
            f"Invalid configuration in {path}: {'; '.join(problems)}", problems
        )
    return tree_config, view_config
