import os
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Optional

from flagset._convert import convert, zero_value
from flagset._destination import get_path, set_path
from flagset.annotations import is_group
from flagset.arg import Arg, segment_args
from flagset.command import Command, build_commands, locate_commands
from flagset.exceptions import (
    AssignmentError,
    CoercionError,
    DescriptorError,
    FlagSetError,
    MissingArgumentError,
    MissingCommandError,
    MissingValueError,
)
from flagset.field_info import FieldDescriptor, get_field_descriptors
from flagset.flag import Flag, ValueSource, build_flags
from flagset.utils import normalize_tokens

if TYPE_CHECKING:
    from rich.console import Console


class FlagSet:
    """Binds command line tokens onto a destination object.

    Resolution happens entirely during construction:

    1. field descriptors → :class:`Flag` records (structural problems raise here);
    2. locate commands in ``args``;
    3. classify every token into an :class:`Arg`;
    4. match args to flags, coerce and write values (argument > environment > default);
    5. check required flags.

    Problems found in steps 4 and 5 never raise; they are collected and
    available from :meth:`errors`.

    Parameters
    ----------
    flags: Any
        Destination object; a dataclass or ``attrs`` instance.
        Nested group fields must already hold instances.
    args: None | str | Iterable[str]
        Tokens to parse. Defaults to ``sys.argv[1:]``.
        A string is split with :func:`shlex.split`.
    descriptors: Sequence[FieldDescriptor] | None
        Pre-built field descriptors. Extracted from ``type(flags)`` if not provided.
    """

    def __init__(
        self,
        flags: Any,
        args: None | str | Iterable[str] = None,
        *,
        descriptors: Optional[Sequence[FieldDescriptor]] = None,
    ):
        if flags is None:
            raise DescriptorError("flags are required")

        if descriptors is None:
            if isinstance(flags, type) or not is_group(type(flags)):
                raise DescriptorError("flags must be a dataclass or attrs instance")
            descriptors = get_field_descriptors(type(flags))

        self.destination = flags
        self.tokens: list[str] = list(normalize_tokens(args))
        self._flags: list[Flag] = build_flags(descriptors)
        self._flags_by_id: dict[int, Flag] = {flag.id: flag for flag in self._flags}
        self._args: list[Arg] = []
        self._commands: list[Command] = []
        self._commands_parsed = False
        self._args_parsed = False
        self._resolved = False
        self._written: set[int] = set()

        self.resolve()

    def __repr__(self):
        return f"{type(self).__name__}(flags={len(self._flags)}, tokens={self.tokens!r})"

    ###########
    # Parsing #
    ###########
    def parse_commands(self) -> None:
        if self._commands_parsed:
            return

        self._commands = build_commands(self._flags)
        locate_commands(self._commands, self.tokens)
        for command in self._commands:
            self._flags_by_id[command.flag_id].command_id = command.id

        self._commands_parsed = True

    def parse_args(self) -> None:
        """Classify tokens and match them to flags.

        Calling this more than once is a no-op.
        """
        if self._args_parsed:
            return
        self.parse_commands()

        self._args = segment_args(self.tokens, self._commands)

        for flag in self._flags:
            if flag.kind == "command":
                command = self._commands[flag.command_id]
                if command.found:
                    flag.args = [arg for arg in self._args if arg.command_id == command.id]
                continue

            if flag.parent_id != -1:
                # Only look inside the parent command's own tokens so a flag
                # never leaks across sibling commands (``app cmd1 --foo cmd2 --foo``).
                candidates = self._flags_by_id[flag.parent_id].args
            else:
                candidates = [arg for arg in self._args if arg.command_id == -1]

            for arg in candidates:
                # Don't break: every occurrence is kept so the last one can win.
                # Positional tokens match by bare name too (i.e. ``app verbose``).
                if arg.kind != "arg" or not flag.matches(arg.name):
                    continue
                arg = self._replace_arg(arg.evolve(flag_id=flag.id))
                flag.command_id = arg.command_id
                flag.args.append(arg)

        self._args_parsed = True

    def _replace_arg(self, arg: Arg) -> Arg:
        """Store an evolved :class:`Arg` everywhere the previous version is referenced."""
        self._args[arg.id] = arg
        for flag in self._flags:
            for i, existing in enumerate(flag.args):
                if existing.id == arg.id:
                    flag.args[i] = arg
        return arg

    ##############
    # Resolution #
    ##############
    def resolve(self) -> None:
        """Resolve every flag's value. Calling this more than once is a no-op."""
        if self._resolved:
            return
        self.parse_args()

        for flag in self._flags:
            if flag.kind == "arg":
                self._resolve_from_args(flag)

        for flag in self._flags:
            if flag.kind == "arg" and flag.value_by != "arg":
                self._resolve_fallback(flag)

        self._check_required()
        self._resolved = True

    def _resolve_from_args(self, flag: Flag) -> None:
        for arg in list(flag.args):
            flag.value_by = "arg"  # Blocks environment variables and defaults.

            # ``-b`` / ``--bool`` but not ``--bool=``
            if flag.is_bool and arg.value == "" and not arg.unset:
                arg = arg.evolve(value="true")

            error: Optional[FlagSetError] = None
            if arg.value == "":
                if (flag.is_bool and arg.unset) or (flag.is_str and not arg.unset):
                    error = MissingValueError(flag=flag, arg=arg)
                elif not flag.is_bool and not flag.is_str:
                    error = MissingValueError(flag=flag, arg=arg)

            if error is None:
                error = self._set_values(flag, self._split(flag, arg.value), source="arg")

            self._replace_arg(arg.evolve(error=error))

        if any(arg.error is not None for arg in flag.args):
            self._unset(flag)

    def _resolve_fallback(self, flag: Flag) -> None:
        value: str
        source: ValueSource
        if flag.env and flag.env in os.environ:
            value, source = os.environ[flag.env], "env"
        elif flag.default:
            value, source = flag.default, "default"
        else:
            return

        flag.value_by = source
        flag.error = self._set_values(flag, self._split(flag, value), source=source)

    @staticmethod
    def _split(flag: Flag, value: str) -> list[str]:
        if not (flag.is_list and flag.delimiter):
            return [value]
        return [x for x in (v.strip() for v in value.split(flag.delimiter)) if x]

    def _set_values(self, flag: Flag, values: Iterable[str], *, source: str) -> Optional[FlagSetError]:
        """Coerce and write each of ``values``; returns the last error encountered."""
        error = None
        for value in values:
            try:
                self._set(flag, value)
            except CoercionError as e:
                e.flag, e.source = flag, source
                error = e
            except AssignmentError as e:
                error = e
        return error

    def _set(self, flag: Flag, value: str) -> None:
        converted = convert(flag.value_type, value)
        if converted is None:
            return

        if flag.is_list:
            if flag.id not in self._written:
                self._write(flag, [])
            get_path(self.destination, flag.path).append(converted)
        else:
            self._write(flag, converted)

    def _write(self, flag: Flag, value: Any) -> None:
        try:
            set_path(self.destination, flag.path, value)
        except (AttributeError, KeyError) as e:
            raise AssignmentError(flag=flag) from e
        self._written.add(flag.id)

    def _unset(self, flag: Flag) -> None:
        try:
            self._write(flag, zero_value(flag.value_type))
        except AssignmentError as e:
            flag.error = e

    def _check_required(self) -> None:
        for flag in self._flags:
            if not flag.required or flag.args:
                continue

            if flag.kind == "command":
                flag.error = MissingCommandError(flag=flag)
                continue

            command = ""
            if (parent := self._flags_by_id.get(flag.parent_id)) is not None:
                command = parent.command
                if not parent.args:
                    # The enclosing command wasn't invoked, so its arguments can't be required.
                    continue
            flag.error = MissingArgumentError(flag=flag, command=command)

    ###########
    # Queries #
    ###########
    def flag_by_name(self, name: str) -> Optional[Flag]:
        """Look up a flag by field name; nested fields are separated by dots (i.e. ``foo.bar``)."""
        if not name:
            return None

        result = None
        parent_id = -1
        for segment in name.split("."):
            result = next((x for x in self._flags if x.parent_id == parent_id and x.name == segment), None)
            if result is None:
                return None
            parent_id = result.id
        return result

    def flag_args(self, name: str) -> list[str]:
        """Input strings associated with a flag.

        For arguments, the value of each occurrence (i.e. ``["foo", "bar"]`` for ``-f=foo -f=bar``).
        For commands, the command name followed by the rest of its tokens
        (i.e. ``["command", "-f=true", "--bar=baz", "qux"]`` for ``command -f --bar=baz qux``).
        """
        flag = self.flag_by_name(name)
        if flag is None:
            return []

        if flag.kind == "arg":
            return [arg.value for arg in flag.args]
        return [arg.to_cli() for arg in flag.args if arg.kind != "argval"]

    def flags(self) -> list[Flag]:
        return self._flags

    @property
    def args(self) -> list[Arg]:
        """Every classified token, in input order."""
        return self._args

    @property
    def commands(self) -> list[Command]:
        return self._commands

    def unnamed_args(self) -> list[str]:
        """Top-level positional tokens (no dash prefix, not consumed as a value)."""
        return [arg.raw for arg in self._args if arg.unnamed and arg.command_id == -1]

    def errors(self) -> list[FlagSetError]:
        """Flag and argument errors, in flag declaration order."""
        out = []
        for flag in self._flags:
            if flag.error is not None:
                out.append(flag.error)
            # Command flags share their tokens with nested flags; report each error once.
            out.extend(arg.error for arg in flag.args if arg.error is not None and arg.flag_id == flag.id)
        return out

    def print_errors(self, console: Optional["Console"] = None) -> bool:
        """Display every error in a :class:`~rich.panel.Panel`.

        Parameters
        ----------
        console: ~rich.console.Console | None
            Defaults to a console writing to stderr.

        Returns
        -------
        bool
            ``True`` if there was anything to display.
        """
        from flagset.panel import ErrorPanel

        errors = self.errors()
        if not errors:
            return False

        if console is None:
            from rich.console import Console

            console = Console(stderr=True)

        for error in errors:
            console.print(ErrorPanel(error))
        return True


def parse(flags: Any, args: None | str | Iterable[str] = None) -> FlagSet:
    """Resolve ``args`` onto ``flags``; shorthand for :class:`FlagSet`."""
    return FlagSet(flags, args)
