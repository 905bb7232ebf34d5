"""Console output for release steps.

Steps report through ConsoleProtocol rather than print() or logging.
RichConsole writes to stderr so commands printing a value (``lpkg version``)
keep stdout clean; MockConsole records every line for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Line label and rich style per kind of message.
_MARKERS: dict[Style, tuple[str, str]] = {
    Style.SUCCESS: ("ok:", "green"),
    Style.ERROR: ("error:", "red bold"),
    Style.WARNING: ("warning:", "yellow"),
    Style.INFO: ("info:", "cyan"),
    Style.DIM: ("", "dim"),
    Style.DEFAULT: ("", ""),
}


def _label(style: Style, message: str) -> str:
    label = _MARKERS[style][0]
    return f"{label} {message}" if label else message


class ConsoleProtocol(Protocol):
    """Styled output sink injected into release steps and commands."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class RichConsole:
    def __init__(self, *, stderr: bool = True) -> None:
        # rich is only needed once something is printed
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)

    def _emit(self, style: Style, message: str) -> None:
        from rich.markup import escape

        label, rich_style = _MARKERS[style]
        self._console.print(f"[{rich_style}]{label}[/{rich_style}] {escape(message)}")

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = _MARKERS[style][1]
        self._console.print(message, style=rich_style or None, markup=False)

    def success(self, message: str) -> None:
        self._emit(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._emit(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._emit(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._emit(Style.INFO, message)


@dataclass
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Records labelled lines instead of printing them."""

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def _record(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(_label(style, message), style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._record(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._record(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._record(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._record(Style.INFO, message)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains substring."""
        return [o for o in self.outputs if substring in o.message]
