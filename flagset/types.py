"""Sized numeric types for flag declarations.

Plain :obj:`int` and :obj:`float` are accepted as well; the aliases below add
range checking (``Int64``, ``UInt``, ``UInt64``) or are purely descriptive
(``Float64``).

.. code-block:: python

    @dataclass
    class Flags:
        port: Annotated[UInt, Parameter(short="p", long="port")] = 0
"""

from typing import NewType

__all__ = [
    "Float64",
    "Int64",
    "UInt",
    "UInt64",
    "SCALAR_TYPES",
    "SUPPORTED_TYPES",
]

Float64 = NewType("Float64", float)
Int64 = NewType("Int64", int)
UInt = NewType("UInt", int)
UInt64 = NewType("UInt64", int)

SCALAR_TYPES = (bool, float, Float64, int, Int64, UInt, UInt64, str)

SUPPORTED_TYPES = frozenset([*SCALAR_TYPES, *(list[x] for x in SCALAR_TYPES)])
