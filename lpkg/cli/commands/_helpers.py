"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from lpkg.core.result import Err, Result
from lpkg.output.errors import packaging_error_exit_code, print_packaging_error
from lpkg.release.errors import PackagingError

if TYPE_CHECKING:
    from lpkg.cli.context import CLIContext


def exit_on_error[T](result: Result[T, PackagingError], ctx: CLIContext) -> T:
    """Return the value of result, or print the error and exit.

    Replaces the common pattern:
        match result:
            case Err(e):
                print_packaging_error(e, ctx.console)
                raise typer.Exit(code=packaging_error_exit_code(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_packaging_error(result.error, ctx.console)
        raise typer.Exit(code=packaging_error_exit_code(result.error))
    return result.value
