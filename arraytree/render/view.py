"""View settings for rendering a tree.

A view describes four kinds of elements:

    <nav>                       wrapper   around the whole tree
        <ul>                    block     one per run of siblings
            <li>                item      one per node
                <a href="#"></a>  content   inside the item
                <ul>...</ul>    nested block for the children
            </li>
        </ul>
    </nav>

Wrapper, block and item templates are split at the empty splitter pair
'{{}}' into a start and an end part. Block, item and content templates can
be set per level; levels without settings use the defaults.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..config import ViewConfig
from ..core.errors import ConfigurationError
from .template import TokenTemplate, split_template

_LEVEL_PARTS = ("block", "item", "content")


@dataclass
class ElementTemplate:
    """Start and end parts of a wrapper, block or item template."""
    start: TokenTemplate
    end: TokenTemplate


@dataclass
class LevelView:
    """Compiled templates of one tree level."""
    block: ElementTemplate
    item: ElementTemplate
    content: TokenTemplate


class View:
    """Wrapper plus default and per-level templates.

    Example:
        >>> view = View()
        >>> view.add({"wrapper": "<nav>{{}}</nav>", 1: {"block": "<ol>{{}}</ol>"}})
        >>> view.level(1).block.start.text
        '<ol>'
    """

    def __init__(self,
                 config: Optional[ViewConfig] = None,
                 index_field: Any = "id",
                 parent_field: Any = "parent"):
        """Create a view from settings.

        Args:
            config: Default templates and splitters (defaults to ViewConfig())
            index_field: Index field shown by the default content template
            parent_field: Parent field shown by the default content template

        Raises:
            ConfigurationError: If a template is malformed
        """
        config = config or ViewConfig()
        problems = config.validate()
        if problems:
            raise ConfigurationError(f"Invalid view: {'; '.join(problems)}", problems)

        self.splitter_start = config.splitter_start
        self.splitter_end = config.splitter_end
        self.token_pattern = config.token_pattern
        self._wrapper = config.wrapper
        self._defaults = {
            "block": config.block,
            "item": config.item,
            "content": config.default_content(index_field, parent_field),
        }
        self._custom_levels: Dict[int, Dict[str, str]] = {
            level: dict(parts) for level, parts in config.levels.items()
        }
        self._compile()

    @classmethod
    def for_tree(cls, tree, config: Optional[ViewConfig] = None) -> 'View':
        """Create a view whose default content shows the tree's field names."""
        return cls(config, tree.config.index_field, tree.config.parent_field)

    def _template(self, text: str) -> TokenTemplate:
        return TokenTemplate(text, self.splitter_start, self.splitter_end, self.token_pattern)

    def _element(self, text: str) -> ElementTemplate:
        start, end = split_template(text, self.splitter_start, self.splitter_end)
        return ElementTemplate(self._template(start), self._template(end))

    def _build_level(self, level: Optional[int]) -> LevelView:
        texts = dict(self._defaults)
        if level is not None:
            texts.update(self._custom_levels.get(level, {}))
        return LevelView(
            block=self._element(texts["block"]),
            item=self._element(texts["item"]),
            content=self._template(texts["content"]),
        )

    def _compile(self) -> None:
        # compile every configured template now so errors surface early
        self.wrapper = self._element(self._wrapper)
        self._levels: Dict[int, LevelView] = {
            level: self._build_level(level) for level in self._custom_levels
        }
        self._build_level(None)

    def level(self, level: int) -> LevelView:
        """Return the templates of a level, creating default ones on demand."""
        view = self._levels.get(level)
        if view is None:
            view = self._levels[level] = self._build_level(level)
        return view

    def add(self, custom: Mapping[Any, Any]) -> 'View':
        """Merge custom settings into the view.

        Keys:
            'splitter': {'start': ..., 'end': ...}
            'wrapper':  wrapper template
            'level':    default {'block', 'item', 'content'} templates
            <int>:      {'block', 'item', 'content'} templates of that level

        Returns:
            self

        Raises:
            ConfigurationError: If a key is unknown or a template is malformed
        """
        saved = (self.splitter_start, self.splitter_end, self._wrapper,
                 dict(self._defaults),
                 {level: dict(parts) for level, parts in self._custom_levels.items()})

        try:
            for key, value in custom.items():
                if key == "splitter":
                    self.splitter_start = value.get("start", self.splitter_start)
                    self.splitter_end = value.get("end", self.splitter_end)
                elif key == "wrapper":
                    self._wrapper = value
                elif key == "level":
                    self._defaults.update(self._level_parts(key, value))
                elif isinstance(key, int) and not isinstance(key, bool) and key >= 0:
                    self._custom_levels.setdefault(key, {}).update(self._level_parts(key, value))
                else:
                    raise ConfigurationError(f"Unknown view setting: {key!r}")
            self._compile()
        except ConfigurationError:
            (self.splitter_start, self.splitter_end, self._wrapper,
             self._defaults, self._custom_levels) = saved
            self._compile()
            raise
        return self

    @staticmethod
    def _level_parts(key: Any, value: Mapping[str, str]) -> Dict[str, str]:
        unknown = [part for part in value if part not in _LEVEL_PARTS]
        if unknown:
            raise ConfigurationError(
                f"Unknown view parts for {key!r}: {', '.join(map(str, unknown))}"
            )
        return dict(value)
