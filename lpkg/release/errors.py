"""Error variants for the release flow.

Every release operation stops at the first failure and returns one of these
values; nothing is retried or rolled back beyond the scoped cleanup the
archive builder performs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lpkg.core.config import ConfigurationError
from lpkg.platform.process import ProcessError

__all__ = [
    "ConfigurationError",
    "DownloadError",
    "ExternalCommandError",
    "NotFoundError",
    "PackagingError",
]


@dataclass(frozen=True, slots=True)
class NotFoundError:
    """A metadata file is missing or does not contain the expected field."""

    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class ExternalCommandError:
    """An invoked tool exited non-zero (or could not be started)."""

    command: tuple[str, ...]
    returncode: int
    detail: str = ""

    @classmethod
    def from_process(cls, error: ProcessError) -> ExternalCommandError:
        return cls(command=error.command, returncode=error.returncode, detail=error.detail)

    @property
    def message(self) -> str:
        return f"{' '.join(self.command)} failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class DownloadError:
    """A built package could not be fetched."""

    url: str
    status: int
    message: str


PackagingError = ConfigurationError | NotFoundError | ExternalCommandError | DownloadError
