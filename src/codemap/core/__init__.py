"""Core module exports."""

from codemap.core.errors import (
    CodeMapError,
    ConfigError,
    ErrorCode,
    GrammarError,
    InvalidArgumentError,
)
from codemap.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "CodeMapError",
    "ConfigError",
    "ErrorCode",
    "GrammarError",
    "InvalidArgumentError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
