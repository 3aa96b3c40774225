from dataclasses import dataclass, field
from typing import Annotated

from flagset import Parameter, get_field_descriptors
from flagset.command import build_commands, locate_commands
from flagset.flag import build_flags


@dataclass
class Leaf:
    b: Annotated[str, Parameter(short="b")] = ""


@dataclass
class Foo:
    b: Annotated[str, Parameter(short="b")] = ""
    foo: Leaf = field(default_factory=Leaf)
    bar: Leaf = field(default_factory=Leaf)


@dataclass
class Baz:
    b: Annotated[str, Parameter(short="b")] = ""


@dataclass
class Root:
    foo: Foo = field(default_factory=Foo)
    baz: Baz = field(default_factory=Baz)


def _locate(tokens):
    commands = build_commands(build_flags(get_field_descriptors(Root)))
    locate_commands(commands, tokens)
    return commands


def _ranges(commands):
    return {(x.command, x.parent_id): (x.arg_id, x.index_from, x.index_to) for x in commands}


def test_build_commands_declaration_order():
    commands = build_commands(build_flags(get_field_descriptors(Root)))
    assert [(x.id, x.command, x.parent_id) for x in commands] == [
        (0, "foo", -1),
        (1, "foo", 0),
        (2, "bar", 0),
        (3, "baz", -1),
    ]


def test_locate_commands_none_found():
    commands = _locate(["app", "-b", "x"])
    assert all(not x.found for x in commands)
    assert all(x.index_to == -1 for x in commands)


def test_locate_commands_single_to_end():
    commands = _locate(["app", "baz", "-b", "x"])
    assert _ranges(commands)[("baz", -1)] == (1, 1, 4)


def test_locate_commands_nested_same_name():
    # ``app foo -b foo -b``: the second ``foo`` is the nested command.
    commands = _locate(["app", "foo", "-b", "1", "foo", "-b", "2"])
    ranges = _ranges(commands)
    assert ranges[("foo", -1)] == (1, 1, 4)
    assert ranges[("foo", 0)] == (4, 4, 7)
    assert ranges[("bar", 0)] == (-1, -1, -1)


def test_locate_commands_closes_at_next_located():
    commands = _locate(["foo", "-b", "1", "bar", "-b", "2"])
    ranges = _ranges(commands)
    # ``bar`` isn't the command declared directly after ``foo``, so ``foo`` is
    # closed by the post-scan pass at the next located command.
    assert ranges[("foo", -1)] == (0, 0, 3)
    assert ranges[("bar", 0)] == (3, 3, 6)


def test_locate_commands_nested_before_parent_is_ignored():
    commands = _locate(["bar", "foo"])
    ranges = _ranges(commands)
    assert ranges[("bar", 0)] == (-1, -1, -1)
    assert ranges[("foo", -1)] == (1, 1, 2)


def test_locate_commands_owns():
    commands = _locate(["app", "baz", "-b", "x"])
    baz = commands[3]
    assert not baz.owns(1)  # The command token itself.
    assert baz.owns(2)
    assert baz.owns(3)
    assert not baz.owns(4)
