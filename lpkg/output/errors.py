"""Error presentation and exit code mapping for release errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpkg.core.errors import ErrorCode
from lpkg.output.console import Style
from lpkg.release.errors import (
    ConfigurationError,
    DownloadError,
    ExternalCommandError,
    NotFoundError,
    PackagingError,
)

if TYPE_CHECKING:
    from lpkg.output.console import ConsoleProtocol

__all__ = ["print_packaging_error", "packaging_error_exit_code"]


def print_packaging_error(error: PackagingError, console: ConsoleProtocol) -> None:
    """Print a release error with its hint or detail, if any."""
    match error:
        case ConfigurationError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case NotFoundError(path=path, message=message):
            console.error(message)
            console.print(str(path), Style.DIM)
        case ExternalCommandError(detail=detail):
            console.error(error.message)
            if detail.strip():
                console.print(detail.rstrip(), Style.DIM)
        case DownloadError(url=url, status=status, message=message):
            if status:
                console.error(f"download failed: HTTP {status} {message}")
            else:
                console.error(f"download failed: {message}")
            console.print(url, Style.DIM)


def packaging_error_exit_code(error: PackagingError) -> int:
    """Get the process exit code for a release error."""
    match error:
        case ConfigurationError():
            return int(ErrorCode.CONFIG_ERROR)
        case NotFoundError():
            return int(ErrorCode.NOT_FOUND)
        case ExternalCommandError(returncode=rc) if rc > 0:
            # Surface the tool's own exit status.
            return rc
        case ExternalCommandError():
            return int(ErrorCode.COMMAND_ERROR)
        case DownloadError():
            return int(ErrorCode.NETWORK_ERROR)
    return int(ErrorCode.USER_ERROR)
