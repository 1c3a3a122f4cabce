"""Token substitution for ArrayTree templates.

A template is a string with tokens such as '{{title}}' or '{{%active%}}'.
Each token is resolved against the metadata of a node (row fields plus
structural fields), then against registered replacers, and finally falls
back to an empty string.

Example:
    >>> template = TokenTemplate('<a href="{{url}}">{{title}}</a>')
    >>> template.render({"url": "/home", "title": "Home"})
    '<a href="/home">Home</a>'
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Tuple

from cachetools import LRUCache

from ..core.errors import ConfigurationError
from ..core.node import Node

# Returns the token value for a node, or None when it cannot produce one
Replacer = Callable[[Node], Optional[str]]

DEFAULT_TOKEN_PATTERN = "[a-zA-Z0-9%_][a-zA-Z0-9%_]*"

# (splitter_start, splitter_end, token_pattern) -> compiled pattern
_pattern_cache: LRUCache = LRUCache(maxsize=128)


def compile_token_pattern(splitter_start: str = "{{",
                          splitter_end: str = "}}",
                          token_pattern: str = DEFAULT_TOKEN_PATTERN) -> Pattern:
    """Return the compiled token pattern for a splitter pair.

    Raises:
        ConfigurationError: If the token pattern is not a valid expression
    """
    key = (splitter_start, splitter_end, token_pattern)
    pattern = _pattern_cache.get(key)
    if pattern is None:
        try:
            pattern = re.compile(
                re.escape(splitter_start) + "(" + token_pattern + ")" + re.escape(splitter_end)
            )
        except re.error as e:
            raise ConfigurationError(f"Invalid token pattern {token_pattern!r}: {e}") from e
        _pattern_cache[key] = pattern
    return pattern


def split_template(text: str, splitter_start: str = "{{",
                   splitter_end: str = "}}") -> Tuple[str, str]:
    """Split an element template at its empty splitter pair.

    '<ul>{{}}</ul>' becomes ('<ul>', '</ul>').

    Raises:
        ConfigurationError: If the template has no or several split markers
    """
    marker = splitter_start + splitter_end
    parts = text.split(marker)
    if len(parts) != 2:
        raise ConfigurationError(
            f"The element template {text!r} must contain exactly one '{marker}'."
        )
    return parts[0], parts[1]


def _lookup(values: Mapping[Any, Any], token: str) -> Tuple[bool, Any]:
    if token in values:
        return True, values[token]
    # sequence rows are keyed by column number
    if token.isdigit() and int(token) in values:
        return True, values[int(token)]
    return False, None


class TokenTemplate:
    """A template string with '{{token}}' expressions."""

    def __init__(self,
                 text: str,
                 splitter_start: str = "{{",
                 splitter_end: str = "}}",
                 token_pattern: str = DEFAULT_TOKEN_PATTERN):
        self.text = text
        self.pattern = compile_token_pattern(splitter_start, splitter_end, token_pattern)

    def tokens(self) -> List[str]:
        """Return the token names used in this template, in order."""
        return self.pattern.findall(self.text)

    def render(self,
               values: Mapping[Any, Any],
               node: Optional[Node] = None,
               replacers: Optional[Mapping[str, Replacer]] = None) -> str:
        """Replace every token with its value.

        Args:
            values: Node metadata (row fields and structural fields)
            node: Node passed to replacers
            replacers: Token name -> Replacer, used for tokens missing from values

        Returns:
            Rendered string; unresolved tokens and None values become ''
        """
        def substitute(match) -> str:
            token = match.group(1)
            found, value = _lookup(values, token)
            if not found and replacers and node is not None:
                replacer = replacers.get(token)
                if replacer is not None:
                    value = replacer(node)
            return "" if value is None else str(value)

        return self.pattern.sub(substitute, self.text)

    def __repr__(self) -> str:
        return f"TokenTemplate({self.text!r})"


class ReplacerRegistry:
    """Named replacers for tokens that are not row or structural fields.

    Example:
        >>> registry = ReplacerRegistry()
        >>> registry.add("%active%", lambda node: "active" if node.index == 5 else None)
    """

    def __init__(self, replacers: Optional[Mapping[str, Replacer]] = None):
        self._replacers: Dict[str, Replacer] = {}
        for key, func in (replacers or {}).items():
            self.add(key, func)

    def add(self, key: str, func: Replacer) -> None:
        """Register a replacer for a token name.

        Raises:
            ConfigurationError: If func is not callable
        """
        if not callable(func):
            raise ConfigurationError(f"The replacer for {key!r} is not callable.")
        self._replacers[key] = func

    def get(self, key: str) -> Optional[Replacer]:
        return self._replacers.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._replacers

    def __len__(self) -> int:
        return len(self._replacers)

    def __bool__(self) -> bool:
        return bool(self._replacers)
