"""Read/write access to a destination object by structural path."""

from collections.abc import MutableMapping, Sequence
from typing import Any


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, MutableMapping):
        return obj[key]
    return getattr(obj, key)


def get_path(obj: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` from ``obj``.

    Raises
    ------
    AttributeError, KeyError
        A segment of ``path`` does not exist.
    """
    for key in path:
        obj = _get(obj, key)
    return obj


def set_path(obj: Any, path: Sequence[str], value: Any) -> None:
    """Assign ``value`` to the field at ``path``.

    Raises
    ------
    AttributeError
        The field (or an intermediate group) is missing, or the owner is frozen.
    KeyError
        A mapping along the way lacks an intermediate key.
    """
    *head, key = path
    owner = get_path(obj, head)
    if owner is None:
        raise AttributeError(f"{'.'.join(head)} is None")
    if isinstance(owner, MutableMapping):
        owner[key] = value
    else:
        setattr(owner, key, value)
