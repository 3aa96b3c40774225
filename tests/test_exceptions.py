from dataclasses import dataclass, field
from typing import Annotated

from flagset import CoercionError, ErrorPanel, FlagSet, MissingArgumentError, Parameter
from flagset.panel import error_title
from flagset.types import UInt64


@dataclass
class Serve:
    port: Annotated[UInt64, Parameter(long="port", required=True)] = UInt64(0)


@dataclass
class App:
    count: Annotated[int, Parameter(short="c", long="count")] = 0
    serve: Annotated[Serve, Parameter(required=True)] = field(default_factory=Serve)


def _panel(message, title="Error"):
    return (
        f"╭─ {title} " + "─" * (65 - len(title)) + "╮\n"
        f"│ {message:<66} │\n"
        "╰────────────────────────────────────────────────────────────────────╯\n"
    )


def test_exception_msg_override():
    error = CoercionError(msg="custom", value="x", target_type=int)
    assert str(error) == "custom"


def test_exception_coercion_without_flag():
    error = CoercionError(value="x", target_type=UInt64, source="env")
    assert str(error) == "failed to parse 'x' as UInt64"


def test_exception_missing_argument_without_command():
    flagset = FlagSet(App(), [])
    error = MissingArgumentError(flag=flagset.flag_by_name("count"))
    assert str(error) == "argument -c is required"


def test_error_title():
    flagset = FlagSet(App(), "-c x")
    count_error, serve_error = flagset.errors()
    assert error_title(count_error) == "Error: -c"
    assert error_title(serve_error) == "Error: serve"
    assert error_title(CoercionError(value="x", target_type=int)) == "Error"
    assert error_title(ValueError("boom")) == "Error"


def test_error_panel(console):
    with console.capture() as capture:
        console.print(ErrorPanel(CoercionError(value="x", target_type=int)))
    assert capture.get() == _panel("failed to parse 'x' as int")


def test_print_errors(console):
    flagset = FlagSet(App(), "-c x serve")
    with console.capture() as capture:
        assert flagset.print_errors(console) is True

    assert capture.get() == _panel("failed to parse 'x' as int", "Error: -c") + _panel(
        "argument --port is required for serve command", "Error: --port"
    )


def test_print_errors_nothing_to_print(console):
    flagset = FlagSet(App(), "-c 1 serve --port 1")
    with console.capture() as capture:
        assert flagset.print_errors(console) is False
    assert capture.get() == ""


def test_print_errors_default_console_is_stderr(capfd):
    flagset = FlagSet(App(), "-c x")
    assert flagset.print_errors() is True

    captured = capfd.readouterr()
    assert "failed to parse 'x' as int" in captured.err
    assert captured.out == ""
