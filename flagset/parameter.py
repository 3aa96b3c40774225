from typing import Any, Optional, get_args

from attrs import field

from flagset.annotations import is_annotated, resolve_optional
from flagset.utils import frozen

TAG_NAMES = ("short", "long", "command", "description", "required", "env", "delimiter", "default")


def _required_converter(value: None | bool | str) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return "true" if value else "false"


@frozen
class Parameter:
    """Flag declaration for an individual field with :obj:`~typing.Annotated`.

    Every attribute is a raw tag string; ``None`` means "not provided".

    Example usage:

    .. code-block:: python

        from dataclasses import dataclass
        from typing import Annotated

        from flagset import FlagSet, Parameter


        @dataclass
        class Flags:
            verbose: Annotated[bool, Parameter(short="v", long="verbose")] = False
            name: Annotated[str, Parameter(long="name", env="APP_NAME", default="world")] = ""


        flags = Flags()
        FlagSet(flags, ["--verbose", "--name", "bob"])

    .. code-block:: console

        >>> flags
        Flags(verbose=True, name='bob')
    """

    short: Optional[str] = field(default=None, kw_only=True)
    long: Optional[str] = field(default=None, kw_only=True)
    command: Optional[str] = field(default=None, kw_only=True)
    description: Optional[str] = field(default=None, kw_only=True)
    required: Optional[str] = field(default=None, converter=_required_converter, kw_only=True)
    env: Optional[str] = field(default=None, kw_only=True)
    delimiter: Optional[str] = field(default=None, kw_only=True)
    default: Optional[str] = field(default=None, kw_only=True)

    @classmethod
    def combine(cls, *parameters: Optional["Parameter"]) -> "Parameter":
        """Returns a new Parameter with combined values of all provided ``parameters``.

        Parameters
        ----------
        `*parameters`: Optional[Parameter]
             Ordered from least-to-highest attribute priority.
        """
        filtered = [x for x in parameters if x is not None]
        if len(filtered) == 1:
            return filtered[0]

        kwargs = {}
        for parameter in filtered:
            kwargs.update(parameter.tags())
        return cls(**kwargs)

    def tags(self) -> dict[str, str]:
        """Provided attributes as a raw tag mapping."""
        out = {}
        for name in TAG_NAMES:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


def get_parameters(hint: Any) -> tuple[Any, list[Parameter]]:
    """At root level, checks for :class:`Parameter` annotations.

    Returns
    -------
    hint
        Annotation hint with :obj:`Annotated` and :obj:`Optional` resolved.
    list[Parameter]
        List of parameters discovered.
    """
    parameters = []
    hint = resolve_optional(hint)
    if is_annotated(hint):
        inner = get_args(hint)
        hint = resolve_optional(inner[0])
        parameters.extend(x for x in inner[1:] if isinstance(x, Parameter))

    return hint, parameters
