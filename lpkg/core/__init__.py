"""Core types: results, exit codes, configuration."""

from .config import ConfigurationError, ReleaseConfig, VersionSettings, load_release_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigurationError",
    "ReleaseConfig",
    "VersionSettings",
    "load_release_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
