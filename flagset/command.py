"""Locating declared commands in the raw token list."""

from collections.abc import Sequence

from attrs import define

from flagset.flag import Flag


@define(kw_only=True)
class Command:
    """A declared command and the token range it owns in the input.

    ``arg_id``, ``index_from`` and ``index_to`` are ``-1`` while the command has
    not been found in the input.  The range is half-open: ``[index_from, index_to)``.
    """

    id: int
    command: str
    flag_id: int
    parent_id: int = -1
    arg_id: int = -1
    index_from: int = -1
    index_to: int = -1

    @property
    def found(self) -> bool:
        return self.arg_id != -1

    def owns(self, index: int) -> bool:
        """Whether token ``index`` lies strictly after the command token, within its range."""
        return self.index_from < index and self.index_to >= index + 1


def build_commands(flags: Sequence[Flag]) -> list[Command]:
    """One :class:`Command` per command flag, in declaration order."""
    commands = []
    command_id_by_flag_id = {}
    flags_by_path = {flag.path: flag for flag in flags}
    for flag in flags:
        if flag.kind != "command":
            continue
        command = Command(id=len(commands), command=flag.command, flag_id=flag.id)
        command_id_by_flag_id[flag.id] = command.id

        if flag.parent_path is not None and (parent := flags_by_path.get(flag.parent_path)) is not None:
            # Nested commands always come after their parent.
            command.parent_id = command_id_by_flag_id.get(parent.id, -1)

        commands.append(command)
    return commands


def locate_commands(commands: Sequence[Command], tokens: Sequence[str]) -> None:
    """Find each command's occurrence in ``tokens`` and compute its range.

    A nested command only matches once some command has already been found
    earlier in the input.  Declaration order (parents before children) is what
    keeps a nested command from matching before its parent; it is a heuristic,
    not a full scope-tree walk.
    """
    for index, token in enumerate(tokens):
        for i, command in enumerate(commands):
            # Checking ``found`` prevents a nested command that shares its parent's
            # name from stealing the parent's token (i.e. ``app foo -b foo -b``).
            if command.found or command.command != token:
                continue

            if command.parent_id != -1 and not any(x.found and x.arg_id < index for x in commands):
                continue

            command.arg_id = command.index_from = index
            if i > 0 and commands[i - 1].found:
                commands[i - 1].index_to = index
            break

    for i, command in enumerate(commands):
        if not command.found or command.index_to != -1:
            continue
        command.index_to = next(
            (x.index_from for x in commands[i + 1 :] if x.index_from != -1),
            len(tokens),
        )
