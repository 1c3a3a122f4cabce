"""Hierarchical node numbering for ArrayTree.

A numbering scheme is a pure function of a 1-based ordinal returning the
symbol for that position ('1', 'A', 'a', ...). A Numberer picks a scheme per
level and joins the symbols of a node's ancestors: '1.2.1', 'A.1', 'B.c'.
"""

import string
from typing import Callable, Dict, Mapping, Optional, Union

from .errors import ConfigurationError

NumberScheme = Callable[[int], str]

DEFAULT_LEVEL = "default"


def decimal(ordinal: int) -> str:
    """Decimal numbering: 1, 2, 3, ..."""
    if ordinal < 1:
        raise ValueError(f"Numbering starts at 1, got {ordinal}")
    return str(ordinal)


def _latin(ordinal: int, alphabet: str) -> str:
    # bijective base-26: 1 -> A, 26 -> Z, 27 -> AA
    if ordinal < 1:
        raise ValueError(f"Numbering starts at 1, got {ordinal}")
    symbol = ""
    while ordinal > 0:
        ordinal, remainder = divmod(ordinal - 1, 26)
        symbol = alphabet[remainder] + symbol
    return symbol


def upper_latin(ordinal: int) -> str:
    """Upper latin numbering: A, B, ..., Z, AA, AB, ..."""
    return _latin(ordinal, string.ascii_uppercase)


def lower_latin(ordinal: int) -> str:
    """Lower latin numbering: a, b, ..., z, aa, ab, ..."""
    return _latin(ordinal, string.ascii_lowercase)


_SCHEMES: Dict[str, NumberScheme] = {
    "decimal": decimal,
    "upper_latin": upper_latin,
    "lower_latin": lower_latin,
}


def _normalize(name: str) -> str:
    """'UpperLatin', 'upper-latin' and 'upper_latin' all map to 'upper_latin'."""
    key = name.strip().replace("-", "_")
    if "_" not in key and not key.isupper():
        key = "".join(
            ("_" + ch.lower()) if ch.isupper() and i else ch.lower()
            for i, ch in enumerate(key)
        )
    return key.lower()


def register_scheme(name: str, scheme: NumberScheme) -> None:
    """Register a custom numbering scheme.

    Args:
        name: Scheme name used in level settings
        scheme: Pure function of a 1-based ordinal
    """
    if not callable(scheme):
        raise ConfigurationError(f"The numbering scheme {name!r} is not callable.")
    _SCHEMES[_normalize(name)] = scheme


def get_scheme(name: str) -> NumberScheme:
    """Look up a numbering scheme by name.

    Raises:
        ConfigurationError: If no scheme has this name
    """
    key = _normalize(name)
    if key not in _SCHEMES:
        raise ConfigurationError(
            f"Unknown numbering scheme: {name}. "
            f"Choose from: {', '.join(sorted(_SCHEMES))}"
        )
    return _SCHEMES[key]


def available_schemes():
    """Return the names of all registered schemes."""
    return sorted(_SCHEMES)


class Numberer:
    """Formats hierarchical numbering strings.

    Example:
        >>> numberer = Numberer({"default": "decimal", 1: "upper_latin"})
        >>> numberer.format(0, 2)
        '2'
        >>> numberer.format(1, 3, "2")
        '2.C'
    """

    def __init__(self,
                 level_schemes: Optional[Mapping[Union[int, str], Union[str, NumberScheme]]] = None,
                 delimiter: str = "."):
        """Initialize with per-level schemes.

        Args:
            level_schemes: Maps a level (int) or "default" to a scheme name or
                a scheme function. Missing "default" means decimal.
            delimiter: String placed between the symbols of successive levels

        Raises:
            ConfigurationError: If a scheme name is unknown
        """
        self.delimiter = delimiter
        self._schemes: Dict[Union[int, str], NumberScheme] = {DEFAULT_LEVEL: decimal}
        for level, scheme in (level_schemes or {}).items():
            self._schemes[level] = scheme if callable(scheme) else get_scheme(scheme)

    def scheme_for(self, level: int) -> NumberScheme:
        """Return the scheme of a level, falling back to the default scheme."""
        return self._schemes.get(level, self._schemes[DEFAULT_LEVEL])

    def symbol(self, level: int, ordinal: int) -> str:
        """Return the symbol of one node at a level."""
        return self.scheme_for(level)(ordinal)

    def format(self, level: int, child_number: int,
               parent_numbering: Optional[str] = None) -> str:
        """Return the full numbering of a node.

        Args:
            level: Level of the node (root = 0)
            child_number: 1-based ordinal of the node among its siblings
            parent_numbering: Numbering of the parent, None at a root

        Returns:
            String like '1.2.1'
        """
        symbol = self.symbol(level, child_number)
        if parent_numbering is None:
            return symbol
        return parent_numbering + self.delimiter + symbol
