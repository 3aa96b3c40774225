"""Flag model: turns field descriptors into :class:`Flag` records."""

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Literal, Optional

from attrs import define, field

from flagset.annotations import is_group
from flagset.exceptions import DuplicateNameError, FlagNameError, FlagSetError, UnsupportedTypeError
from flagset.types import SUPPORTED_TYPES

if TYPE_CHECKING:
    from flagset.arg import Arg
    from flagset.field_info import FieldDescriptor

FlagKind = Literal["arg", "command"]
ValueSource = Literal["", "arg", "env", "default"]

_INVALID_NAME_CHARACTERS = re.compile(r"[^a-zA-Z0-9\-_.]+")


@define(kw_only=True)
class Flag:
    """A declared destination: either a bindable argument or a nested command."""

    id: int
    name: str
    """Field name; segments of :meth:`FlagSet.flag_by_name` lookups."""

    path: tuple[str, ...]
    parent_path: Optional[tuple[str, ...]] = None

    short: str = ""
    long: str = ""
    command: str = ""
    description: str = ""
    required: bool = False
    env: str = ""
    delimiter: str = ""
    default: str = ""
    value_type: Any = str
    kind: FlagKind = "arg"

    ###########
    # Runtime #
    ###########
    value_by: ValueSource = ""
    args: list["Arg"] = field(factory=list)
    error: Optional[FlagSetError] = None
    parent_id: int = -1
    command_id: int = -1

    @property
    def is_list(self) -> bool:
        return isinstance(self.value_type, type(list[str]))

    @property
    def is_bool(self) -> bool:
        return self.value_type is bool or self.value_type == list[bool]

    @property
    def is_str(self) -> bool:
        return self.value_type is str or self.value_type == list[str]

    @property
    def display_name(self) -> str:
        """``-s`` if a short name exists, otherwise ``--long``."""
        if self.short:
            return f"-{self.short}"
        elif self.long:
            return f"--{self.long}"
        return ""

    def matches(self, name: str) -> bool:
        return bool(name) and (name == self.short or name == self.long)


def _clean_name(s: str) -> str:
    return _INVALID_NAME_CHARACTERS.sub("", s.strip())


def descriptor_to_flag(descriptor: "FieldDescriptor", id: int) -> Flag:
    tags = descriptor.tags
    flag = Flag(
        id=id,
        name=descriptor.name,
        path=descriptor.path,
        parent_path=descriptor.parent_path,
        short=_clean_name(tags.get("short", "")),
        long=_clean_name(tags.get("long", "")),
        command=_clean_name(tags.get("command", "")),
        description=tags.get("description", "").strip(),
        required=tags.get("required") == "true",
        env=tags.get("env", "").strip(),
        delimiter=tags.get("delimiter", ""),
        default=tags.get("default", "").strip(),
        value_type=descriptor.hint,
    )

    if is_group(flag.value_type):
        flag.kind = "command"
        if not flag.command:
            flag.command = flag.name.lower()

    return flag


def check_flags(flags: Sequence[Flag]) -> list[FlagSetError]:
    """Check flag declarations for duplicate names and unsupported types.

    Names only need to be unique within the same parent scope.

    Returns
    -------
    list[FlagSetError]
        Every problem found, in declaration order.
    """
    errors = []
    shorts: dict[tuple[Any, str], Flag] = {}
    longs: dict[tuple[Any, str], Flag] = {}
    commands: dict[tuple[Any, str], Flag] = {}

    for flag in flags:
        scope = flag.parent_path
        if flag.short:
            if (other := shorts.get((scope, flag.short))) is not None:
                errors.append(
                    DuplicateNameError(
                        flag=flag,
                        kind="short argument",
                        name=flag.short,
                        field_name=flag.name,
                        other_field_name=other.name,
                    )
                )
            elif len(flag.short) > 1:
                errors.append(FlagNameError(flag=flag, name=flag.short, field_name=flag.name))
            else:
                shorts[scope, flag.short] = flag
        if flag.long:
            if (other := longs.get((scope, flag.long))) is not None:
                errors.append(
                    DuplicateNameError(
                        flag=flag,
                        kind="long argument",
                        name=flag.long,
                        field_name=flag.name,
                        other_field_name=other.name,
                    )
                )
            else:
                longs[scope, flag.long] = flag
        if flag.command:
            if (other := commands.get((scope, flag.command))) is not None:
                errors.append(
                    DuplicateNameError(
                        flag=flag,
                        kind="command",
                        name=flag.command,
                        field_name=flag.name,
                        other_field_name=other.name,
                    )
                )
            else:
                commands[scope, flag.command] = flag

        if flag.kind == "arg" and flag.value_type not in SUPPORTED_TYPES:
            errors.append(UnsupportedTypeError(flag=flag, target_type=flag.value_type))

    return errors


def build_flags(descriptors: Sequence["FieldDescriptor"]) -> list[Flag]:
    """Convert field descriptors into flags.

    Fields that declare neither a short nor a long name and are not commands
    are not flags and are skipped; ids still follow descriptor order.

    Raises
    ------
    FlagSetError
        The first declaration problem found by :func:`check_flags`.
    """
    flags = []
    for i, descriptor in enumerate(descriptors):
        flag = descriptor_to_flag(descriptor, i)
        if not flag.short and not flag.long and flag.kind != "command":
            continue
        flags.append(flag)

    if errors := check_flags(flags):
        raise errors[0]

    by_path = {flag.path: flag for flag in flags}
    for flag in flags:
        if flag.parent_path is not None and (parent := by_path.get(flag.parent_path)) is not None:
            flag.parent_id = parent.id

    return flags
