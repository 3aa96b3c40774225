from dataclasses import dataclass, field
from typing import Annotated

import pytest

from flagset import (
    DuplicateNameError,
    FieldDescriptor,
    FlagNameError,
    Parameter,
    UnsupportedTypeError,
    get_field_descriptors,
)
from flagset.flag import build_flags, check_flags, descriptor_to_flag
from flagset.types import UInt64


@dataclass
class Sub:
    name: Annotated[str, Parameter(short="n", long="name")] = ""


@dataclass
class Other:
    name: Annotated[str, Parameter(short="n", long="name")] = ""


@dataclass
class Root:
    name: Annotated[str, Parameter(short="n", long="name")] = ""
    ignored: str = ""
    sub: Sub = field(default_factory=Sub)
    other: Annotated[Other, Parameter(command="alt")] = field(default_factory=Other)


def test_build_flags_ids_follow_descriptors():
    flags = build_flags(get_field_descriptors(Root))
    # ``ignored`` (id 1) is not a flag, but ids are not renumbered.
    assert [x.id for x in flags] == [0, 2, 3, 4, 5]
    assert [x.kind for x in flags] == ["arg", "command", "arg", "command", "arg"]


def test_build_flags_commands():
    flags = build_flags(get_field_descriptors(Root))
    assert flags[1].command == "sub"
    assert flags[1].value_type is Sub
    assert flags[3].command == "alt"


def test_build_flags_parent_ids():
    flags = build_flags(get_field_descriptors(Root))
    assert [x.parent_id for x in flags] == [-1, -1, 2, -1, 4]


def test_same_names_in_different_scopes_are_allowed():
    # Would raise otherwise.
    build_flags(get_field_descriptors(Root))


def test_descriptor_to_flag_cleans_names():
    descriptor = FieldDescriptor(
        path=("foo",),
        hint=list[UInt64],
        tags={
            "short": " f ",
            "long": "foo bar!",
            "env": " FOO ",
            "default": " 1,2 ",
            "delimiter": ", ",
            "required": "true",
            "description": "  Foo.  ",
        },
    )
    flag = descriptor_to_flag(descriptor, 7)
    assert flag.id == 7
    assert flag.name == "foo"
    assert flag.short == "f"
    assert flag.long == "foobar"
    assert flag.env == "FOO"
    assert flag.default == "1,2"
    assert flag.delimiter == ", "
    assert flag.required is True
    assert flag.description == "Foo."
    assert flag.is_list
    assert not flag.is_bool
    assert flag.display_name == "-f"


@pytest.mark.parametrize("required", ["false", "True", "yes", ""])
def test_descriptor_to_flag_required_literal(required):
    descriptor = FieldDescriptor(path=("foo",), hint=str, tags={"long": "foo", "required": required})
    assert descriptor_to_flag(descriptor, 0).required is False


def test_check_flags_duplicate_short():
    @dataclass
    class Dup:
        a: Annotated[str, Parameter(short="a")] = ""
        b: Annotated[str, Parameter(short="a")] = ""

    with pytest.raises(DuplicateNameError) as e:
        build_flags(get_field_descriptors(Dup))
    assert str(e.value) == "short argument a in b field is already defined in a field"


def test_check_flags_duplicate_long():
    @dataclass
    class Dup:
        a: Annotated[str, Parameter(long="alpha")] = ""
        b: Annotated[int, Parameter(long="alpha")] = 0

    with pytest.raises(DuplicateNameError) as e:
        build_flags(get_field_descriptors(Dup))
    assert str(e.value) == "long argument alpha in b field is already defined in a field"


def test_check_flags_duplicate_command():
    @dataclass
    class Dup:
        a: Annotated[Sub, Parameter(command="run")] = field(default_factory=Sub)
        b: Annotated[Other, Parameter(command="run")] = field(default_factory=Other)

    with pytest.raises(DuplicateNameError) as e:
        build_flags(get_field_descriptors(Dup))
    assert str(e.value) == "command run in b field is already defined in a field"


def test_check_flags_duplicate_in_nested_scope():
    @dataclass
    class Nested:
        a: Annotated[str, Parameter(long="same")] = ""
        b: Annotated[str, Parameter(long="same")] = ""

    @dataclass
    class Top:
        same: Annotated[str, Parameter(long="same")] = ""
        nested: Nested = field(default_factory=Nested)

    with pytest.raises(DuplicateNameError):
        build_flags(get_field_descriptors(Top))


def test_check_flags_short_too_long():
    @dataclass
    class Bad:
        a: Annotated[str, Parameter(short="ab")] = ""

    with pytest.raises(FlagNameError) as e:
        build_flags(get_field_descriptors(Bad))
    assert str(e.value) == "short argument ab in a field must be one character long"


@pytest.mark.parametrize("hint", [dict, list[dict], bytes, tuple[int, ...], set[str]])
def test_check_flags_unsupported_type(hint):
    flag = descriptor_to_flag(FieldDescriptor(path=("a",), hint=hint, tags={"long": "a"}), 0)
    errors = check_flags([flag])
    assert len(errors) == 1
    assert isinstance(errors[0], UnsupportedTypeError)
    assert str(errors[0]).startswith("invalid type ")


def test_check_flags_collects_everything():
    flags = [
        descriptor_to_flag(FieldDescriptor(path=("a",), hint=bytes, tags={"short": "xy"}), 0),
        descriptor_to_flag(FieldDescriptor(path=("b",), hint=str, tags={"long": "b"}), 1),
        descriptor_to_flag(FieldDescriptor(path=("c",), hint=str, tags={"long": "b"}), 2),
    ]
    errors = check_flags(flags)
    assert [type(x) for x in errors] == [FlagNameError, UnsupportedTypeError, DuplicateNameError]
