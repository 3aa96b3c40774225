"""To prevent circular dependencies, this module should never import anything else from flagset."""

import functools
import shlex
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING

# https://threeofwands.com/attra-iv-zero-overhead-frozen-attrs-classes/
if TYPE_CHECKING:
    from attrs import frozen
else:
    from attrs import define

    frozen = functools.partial(define, unsafe_hash=True)

QUOTES = ('"', "'")


def normalize_tokens(tokens: None | str | Iterable[str]) -> list[str]:
    if tokens is None:
        tokens = sys.argv[1:]  # Remove the executable
    elif isinstance(tokens, str):
        tokens = shlex.split(tokens)
    else:
        tokens = list(tokens)
    return tokens


def dash_prefix(token: str) -> str:
    if token.startswith("--"):
        return "--"
    elif token.startswith("-"):
        return "-"
    return ""


def strip_quotes(value: str) -> str:
    """Remove a single matching pair of surrounding double or single quotes."""
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def first_quote_index(s: str) -> int:
    """Index of the first double quote, falling back to the first single quote.

    Returns ``-1`` if neither is present.
    """
    index = s.find('"')
    if index == -1:
        index = s.find("'")
    return index
