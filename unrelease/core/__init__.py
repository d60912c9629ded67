"""Core domain types and logic."""

from .config import RetractConfig, load_config
from .errors import ErrorCode, RetractError, error_code
from .result import Err, Ok, Result, is_err, is_ok
from .version import Version, normalize

__all__ = [
    # config
    "RetractConfig",
    "load_config",
    # errors
    "ErrorCode",
    "RetractError",
    "error_code",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # version
    "Version",
    "normalize",
]
