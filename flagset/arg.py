"""Classification of raw tokens into :class:`Arg` records."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal, Optional

from attrs import evolve, field, frozen

from flagset.utils import dash_prefix, first_quote_index, strip_quotes

if TYPE_CHECKING:
    from flagset.command import Command
    from flagset.exceptions import FlagSetError

ArgKind = Literal["command", "arg", "argval"]


@frozen(kw_only=True)
class Arg:
    """One raw input token after classification."""

    id: int
    """Position in the raw token list."""

    raw: str
    kind: ArgKind = "arg"
    dash: str = ""
    name: str = ""
    value: str = ""

    has_eq: bool = False
    """Value was supplied as ``--name=value``."""

    unset: bool = False
    """Value was explicitly empty (``--name=``, ``--name=""``)."""

    unnamed: bool = False
    """Positional token (no dash prefix)."""

    index_from: int = 0
    index_to: int = 0
    command_id: int = -1
    flag_id: int = -1

    parent_id: int = -1
    """For ``argval`` tokens, the id of the flag token that consumed it."""

    error: Optional["FlagSetError"] = field(default=None, eq=False, hash=False)

    def evolve(self, **kwargs) -> "Arg":
        return evolve(self, **kwargs)

    def to_cli(self) -> str:
        """Reconstruct this token the way a command sees it (``--name=value``)."""
        if self.kind != "arg":
            return self.name
        out = self.dash + self.name
        if self.value:
            out += f"={self.value}"
        return out


def _split_value(arg: Arg) -> Arg:
    """Handle ``-n=value`` / ``--name=value`` forms."""
    name = arg.raw.lstrip("-").strip()
    index_eq = name.find("=")
    index_quote = first_quote_index(name)
    # Avoids treating ``"a=b"`` as ``name=value``.
    if index_eq > -1 and (index_eq < index_quote or index_quote == -1):
        name, value = name.split("=", 1)
        value = strip_quotes(value)
        return arg.evolve(name=name, value=value, has_eq=True, unset=not value)
    return arg.evolve(name=name)


def segment_args(tokens: Sequence[str], commands: Sequence["Command"]) -> list[Arg]:
    """Classify every token exactly once.

    ``commands`` must already be located (see :func:`flagset.command.locate_commands`).
    """
    args = []
    for index, token in enumerate(tokens):
        arg = Arg(id=index, raw=token, index_from=index, index_to=index + 1)
        for command in commands:
            if index == command.arg_id:
                arg = arg.evolve(
                    kind="command",
                    name=token,
                    flag_id=command.flag_id,
                    command_id=command.id,
                    index_from=command.index_from,
                    index_to=command.index_to,
                )
                break
            elif command.owns(index):
                arg = arg.evolve(command_id=command.id)
                break
        args.append(arg)

    for index, arg in enumerate(args):
        if arg.kind != "arg":
            continue

        dash = dash_prefix(arg.raw)
        if not dash:
            args[index] = arg.evolve(name=arg.raw.strip(), unnamed=True)
            continue

        arg = _split_value(arg.evolve(dash=dash))
        if not arg.has_eq and index + 1 < len(args):
            # ``--name value``
            next_arg = args[index + 1]
            if next_arg.kind == "arg" and not next_arg.raw.startswith("-"):
                value = strip_quotes(next_arg.raw)
                arg = arg.evolve(value=value, index_to=next_arg.index_to)
                args[index + 1] = next_arg.evolve(kind="argval", value=value, parent_id=arg.id)
        args[index] = arg

    return args
