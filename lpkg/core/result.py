"""Ok/Err result values.

Release operations return a Result instead of raising; the first Err stops
the operation and is rendered by the CLI:

    match resolve_version(settings, release_time=now):
        case Ok(resolved):
            typer.echo(resolved.version)
        case Err(error):
            print_packaging_error(error, console)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
