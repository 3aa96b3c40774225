from typing import TYPE_CHECKING, Any, Optional

from attrs import define, field

from flagset.annotations import get_hint_name
from flagset.types import SCALAR_TYPES

if TYPE_CHECKING:
    from flagset.arg import Arg
    from flagset.flag import Flag


__all__ = [
    "AssignmentError",
    "CoercionError",
    "DescriptorError",
    "DuplicateNameError",
    "FlagNameError",
    "FlagSetError",
    "MissingArgumentError",
    "MissingCommandError",
    "MissingValueError",
    "UnsupportedTypeError",
]


class DescriptorError(Exception):
    """The destination object (or its class) cannot be turned into field descriptors."""

    # This doesn't derive from FlagSetError since this is a developer error
    # rather than a runtime error.


@define(kw_only=True)
class FlagSetError(Exception):
    """Root exception for flag declaration and resolution errors."""

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    flag: Optional["Flag"] = None
    """
    :class:`Flag` the error belongs to.
    """

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return ""


########################
# Construction errors. #
########################


@define(kw_only=True)
class DuplicateNameError(FlagSetError):
    """The same short, long or command name is declared twice within one scope."""

    kind: str
    """One of ``"short argument"``, ``"long argument"`` or ``"command"``."""

    name: str
    field_name: str
    other_field_name: str

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"{self.kind} {self.name} in {self.field_name} field is already defined in {self.other_field_name} field"


@define(kw_only=True)
class FlagNameError(FlagSetError):
    """A flag name is malformed (e.g. a short name longer than one character)."""

    name: str
    field_name: str

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"short argument {self.name} in {self.field_name} field must be one character long"


@define(kw_only=True)
class UnsupportedTypeError(FlagSetError):
    """A flag is declared with a value type that cannot be coerced."""

    target_type: Any = None

    def __str__(self):
        if self.msg is not None:
            return self.msg
        supported = ", ".join(get_hint_name(x) for x in SCALAR_TYPES)
        return f"invalid type {get_hint_name(self.target_type)}. Supported types: {supported} and lists of them"


####################
# Per-token errors #
####################


@define(kw_only=True)
class MissingValueError(FlagSetError):
    """A value-taking flag was given without a value (e.g. ``--int`` or ``--bool=``)."""

    arg: "Arg"

    def __str__(self):
        if self.msg is not None:
            return self.msg
        return f"argument {self.arg.dash}{self.arg.name} needs a value"


@define(kw_only=True)
class CoercionError(FlagSetError):
    """A string could not be converted into the flag's value type."""

    value: str = ""
    """
    Input string that couldn't be coerced.
    """

    target_type: Any = None
    """
    Intended type to coerce into.
    """

    source: str = field(default="arg")
    """Where ``value`` came from: ``"arg"``, ``"env"`` or ``"default"``."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        msg = f"failed to parse '{self.value}' as {get_hint_name(self.target_type)}"
        if self.flag is not None and self.source == "env":
            msg += f" from environment variable {self.flag.env}"
        return msg


###################
# Per-flag errors #
###################


@define(kw_only=True)
class AssignmentError(FlagSetError):
    """The destination field of a flag cannot be written."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        assert self.flag is not None
        return f"flag {self.flag.name} can't be set"


@define(kw_only=True)
class MissingCommandError(FlagSetError):
    """A required command was not provided."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        assert self.flag is not None
        return f"command {self.flag.command} is required"


@define(kw_only=True)
class MissingArgumentError(FlagSetError):
    """A required argument was not provided."""

    command: str = ""
    """Name of the enclosing command, if any."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        assert self.flag is not None
        message = f"argument {self.flag.display_name} is required"
        if self.command:
            message += f" for {self.command} command"
        return message
