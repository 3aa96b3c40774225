import pytest
from rich.console import Console

from flagset import FlagSet


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def assert_bind():
    """Bind ``cmd`` onto a fresh ``cls()`` and compare resulting attributes.

    Fails if the resolution reported any error.
    """

    def inner(cls, cmd, **expected):
        flags = cls()
        flagset = FlagSet(flags, cmd)
        assert flagset.errors() == []
        for name, value in expected.items():
            actual = getattr(flags, name)
            assert actual == value, f"{name}: {actual!r} != {value!r}"
            assert type(actual) is type(value)
        return flagset

    return inner
