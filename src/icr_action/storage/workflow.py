"""GitHub Actions workflow commands, written to stdout."""

from collections.abc import Iterator
from contextlib import contextmanager


def _escape_data(value: str) -> str:
    return (
        value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    )


def command(name: str, message: str = "") -> str:
    """Format a workflow command line such as ``::warning::message``."""
    return f"::{name}::{_escape_data(message)}"


def warning(message: str) -> None:
    print(command("warning", message), flush=True)


def error(message: str) -> None:
    print(command("error", message), flush=True)


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold everything printed inside the block under ``title``."""
    print(command("group", title), flush=True)
    try:
        yield
    finally:
        print(command("endgroup"), flush=True)
