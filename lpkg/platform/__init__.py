"""Process execution layer."""

from .process import ProcessError, overlay_env, run_silent

__all__ = [
    "ProcessError",
    "overlay_env",
    "run_silent",
]
