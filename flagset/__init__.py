# Don't manually change, bump alongside pyproject.toml.
__version__ = "0.1.0"

__all__ = [
    "Arg",
    "AssignmentError",
    "CoercionError",
    "Command",
    "DescriptorError",
    "DuplicateNameError",
    "ErrorPanel",
    "FieldDescriptor",
    "Flag",
    "FlagNameError",
    "FlagSet",
    "FlagSetError",
    "MissingArgumentError",
    "MissingCommandError",
    "MissingValueError",
    "Parameter",
    "UnsupportedTypeError",
    "convert",
    "get_field_descriptors",
    "parse",
    "types",
]

from flagset import types
from flagset._convert import convert
from flagset.arg import Arg
from flagset.command import Command
from flagset.core import FlagSet, parse
from flagset.exceptions import (
    AssignmentError,
    CoercionError,
    DescriptorError,
    DuplicateNameError,
    FlagNameError,
    FlagSetError,
    MissingArgumentError,
    MissingCommandError,
    MissingValueError,
    UnsupportedTypeError,
)
from flagset.field_info import FieldDescriptor, get_field_descriptors
from flagset.flag import Flag
from flagset.panel import ErrorPanel
from flagset.parameter import Parameter
