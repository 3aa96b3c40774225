import re
from typing import Any, get_args

from flagset.exceptions import CoercionError
from flagset.types import Float64, Int64, UInt, UInt64

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)", re.IGNORECASE)

_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1
_UINT64_MAX = 2**64 - 1


def _bool(s: str) -> bool:
    # Only the exact literals; "yes", "1", "True" are rejected.
    if s == "true":
        return True
    elif s == "false":
        return False
    raise CoercionError(value=s, target_type=bool)


def _int(s: str) -> int:
    if not _SIGNED.fullmatch(s):
        raise CoercionError(value=s, target_type=int)
    return int(s)


def _int64(s: str) -> int:
    if not _SIGNED.fullmatch(s) or not _INT64_MIN <= (out := int(s)) <= _INT64_MAX:
        raise CoercionError(value=s, target_type=Int64)
    return out


def _uint(type_):
    def inner(s: str) -> int:
        if not _UNSIGNED.fullmatch(s) or (out := int(s)) > _UINT64_MAX:
            raise CoercionError(value=s, target_type=type_)
        return out

    return inner


def _float(type_):
    def inner(s: str) -> float:
        if not _FLOAT.fullmatch(s):
            raise CoercionError(value=s, target_type=type_)
        return float(s)

    return inner


_converters = {
    bool: _bool,
    int: _int,
    Int64: _int64,
    UInt: _uint(UInt),
    UInt64: _uint(UInt64),
    float: _float(float),
    Float64: _float(Float64),
    str: str,
}

_NUMERIC_TYPES = frozenset([int, Int64, UInt, UInt64, float, Float64])


def element_type(type_: Any) -> Any:
    """``int`` for ``list[int]``; scalar types are returned unchanged."""
    if args := get_args(type_):
        return args[0]
    return type_


def convert(type_: Any, value: str) -> Any:
    """Coerce a single string into a scalar ``type_``.

    For ``list[T]`` the element type ``T`` is used; appending is up to the caller.

    An empty string for a numeric type returns :obj:`None`, meaning "leave the
    destination untouched".

    Raises
    ------
    CoercionError
        ``value`` is not a valid literal for ``type_``.
    """
    type_ = element_type(type_)
    if value == "" and type_ in _NUMERIC_TYPES:
        return None
    try:
        converter = _converters[type_]
    except KeyError:
        raise CoercionError(msg=f"no converter for type {type_!r}", value=value, target_type=type_) from None
    return converter(value)


def zero_value(type_: Any) -> Any:
    """Value a destination is reset to when its flag fails to resolve."""
    if get_args(type_):
        return []
    return getattr(type_, "__supertype__", type_)()
