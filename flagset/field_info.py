import dataclasses
from collections.abc import Mapping
from typing import Any, Optional, get_type_hints

import attrs
from attrs import field
from docstring_parser import parse as docstring_parse

from flagset.annotations import is_attrs, is_dataclass, is_group
from flagset.exceptions import DescriptorError
from flagset.parameter import Parameter, get_parameters
from flagset.utils import frozen


@frozen(kw_only=True)
class FieldDescriptor:
    """A destination field, as seen by the flag model builder."""

    path: tuple[str, ...]
    """Attribute names leading from the destination object to this field."""

    parent_path: Optional[tuple[str, ...]] = None
    """``path`` of the enclosing group field; :obj:`None` for top-level fields."""

    hint: Any = str
    """Declared type with :obj:`~typing.Annotated` and :obj:`~typing.Optional` resolved."""

    tags: Mapping[str, str] = field(factory=dict, converter=lambda x: dict(x), hash=False)
    """Raw declaration strings (``short``, ``long``, ``command``, ...)."""

    @property
    def name(self) -> str:
        return self.path[-1]


def _field_names(cls) -> list[str]:
    if is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    elif is_attrs(cls):
        return [a.name for a in attrs.fields(cls)]
    raise DescriptorError(f"{cls!r} is neither a dataclass nor an attrs class.")


def _raw_annotations(cls) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to whatever the class recorded.
        if is_dataclass(cls):
            return {f.name: f.type for f in dataclasses.fields(cls)}
        return {a.name: a.type for a in attrs.fields(cls)}


def _docstring_descriptions(cls) -> dict[str, str]:
    if not cls.__doc__:
        return {}
    return {
        dparam.arg_name: dparam.description
        for dparam in docstring_parse(cls.__doc__).params
        if dparam.description
    }


def _walk(cls, parent_path: Optional[tuple[str, ...]]) -> list[FieldDescriptor]:
    out = []
    annotations = _raw_annotations(cls)
    descriptions = _docstring_descriptions(cls)
    for name in _field_names(cls):
        hint, parameters = get_parameters(annotations.get(name, str))
        tags = Parameter.combine(*parameters).tags()
        if "description" not in tags and name in descriptions:
            tags["description"] = descriptions[name]

        path = (parent_path or ()) + (name,)
        out.append(FieldDescriptor(path=path, parent_path=parent_path, hint=hint, tags=tags))

        if is_group(hint):
            out.extend(_walk(hint, path))
    return out


def get_field_descriptors(cls) -> list[FieldDescriptor]:
    """Depth-first list of field descriptors for a dataclass or attrs class.

    Fields of a nested group class immediately follow the group's own field,
    so parents always come before their children.

    Parameters
    ----------
    cls: type
        A :func:`~dataclasses.dataclass` or ``attrs`` class.

    Raises
    ------
    DescriptorError
        ``cls`` is not a supported class.

    Returns
    -------
    list[FieldDescriptor]
    """
    if not is_group(cls):
        raise DescriptorError(f"{cls!r} is neither a dataclass nor an attrs class.")
    return _walk(cls, None)
