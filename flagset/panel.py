"""Rich rendering of resolution errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.panel import Panel


def error_title(error: Exception) -> str:
    """``Error: --port`` for a flag error, ``Error: serve`` for a command error, else ``Error``."""
    flag = getattr(error, "flag", None)
    if flag is None:
        return "Error"
    name = flag.display_name or flag.command
    return f"Error: {name}" if name else "Error"


def ErrorPanel(error: Exception, style: str = "red") -> "Panel":  # noqa: N802
    """Render a single error in a rounded :class:`~rich.panel.Panel`.

    .. code-block:: text

        ╭─ Error: --port ──────────────────────────╮
        │ argument --port is required              │
        ╰──────────────────────────────────────────╯

    Parameters
    ----------
    error: Exception
        Usually a :class:`~flagset.FlagSetError`; its ``flag`` names the panel.
    style: str
        Rich style for the panel border.
    """
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    return Panel(
        Text(str(error), "default"),
        title=Text(error_title(error)),
        style=style,
        box=box.ROUNDED,
        expand=True,
        title_align="left",
    )
