"""Sinks for step outputs consumed by the invoking workflow."""

import uuid
from abc import abstractmethod
from pathlib import Path

import structlog


class OutputSink:
    """Somewhere to put named outputs of the step."""

    @abstractmethod
    def set_output(self, name: str, value: str) -> None: ...


class GitHubOutputSink(OutputSink):
    """Append outputs to the file GitHub names in ``$GITHUB_OUTPUT``.

    Single-line values are written as ``name=value``.  Anything with a
    newline is written in heredoc form, ``name<<DELIM``, value, ``DELIM``,
    with a random delimiter that is checked not to occur in the value.
    GitHub drops the line break before the closing delimiter, so one is
    always added after the value to keep it verbatim.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._logger = structlog.get_logger(__name__)

    @staticmethod
    def _delimiter(value: str) -> str:
        while True:
            delim = f"ghadelimiter_{uuid.uuid4()}"
            if delim not in value:
                return delim

    def format_output(self, name: str, value: str) -> str:
        if "\n" not in value and "\r" not in value:
            return f"{name}={value}\n"
        delim = self._delimiter(value)
        return f"{name}<<{delim}\n{value}\n{delim}\n"

    def set_output(self, name: str, value: str) -> None:
        with self._path.open("a", encoding="utf-8") as f:
            f.write(self.format_output(name, value))
        self._logger.debug(f"Wrote output '{name}'", path=str(self._path))


class LoggingOutputSink(OutputSink):
    """Log outputs, for runs outside GitHub Actions."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def set_output(self, name: str, value: str) -> None:
        self._logger.info(f"Output '{name}'", value=value)


class MemoryOutputSink(OutputSink):
    """Keep outputs in a dict, remembering every write."""

    def __init__(self) -> None:
        self.outputs: dict[str, str] = {}
        self.writes: list[tuple[str, str]] = []

    def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        self.writes.append((name, value))
