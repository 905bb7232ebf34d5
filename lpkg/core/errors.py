"""Exit codes for CLI commands.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments, unknown target)
- 2: Configuration error (missing environment, invalid lpkg.toml)
- 3: External command failed (git, tar, upload script...)
- 4: Network error (package download failed)
- 5: Metadata or input file not found
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    COMMAND_ERROR = 3
    NETWORK_ERROR = 4
    NOT_FOUND = 5
