"""codemap error types with typed error codes.

Error code ranges:
- 1xxx: Call arguments
- 2xxx: Config
- 3xxx: Grammar / language

Only argument and config errors ever reach a caller of
``get_file_token_scores``. Grammar errors are raised inside the registry,
logged once, and converted into a permanently "unsupported" language.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Arguments (1xxx)
    ROOT_NOT_FOUND = 1001
    ROOT_NOT_DIRECTORY = 1002
    BAD_FILE_LIST = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Grammar (3xxx)
    GRAMMAR_LOAD_FAILED = 3001
    QUERY_COMPILE_FAILED = 3002


@dataclass(eq=False)
class CodeMapError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'ROOT_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class InvalidArgumentError(CodeMapError):
    """Invalid call-level arguments."""

    @classmethod
    def root_not_found(cls, root: str) -> "InvalidArgumentError":
        return cls(
            code=ErrorCode.ROOT_NOT_FOUND,
            message=f"Root directory does not exist: {root}",
            details={"root": root},
        )

    @classmethod
    def root_not_directory(cls, root: str) -> "InvalidArgumentError":
        return cls(
            code=ErrorCode.ROOT_NOT_DIRECTORY,
            message=f"Root is not a directory: {root}",
            details={"root": root},
        )

    @classmethod
    def bad_file_list(cls, reason: str) -> "InvalidArgumentError":
        return cls(
            code=ErrorCode.BAD_FILE_LIST,
            message=f"Invalid file path list: {reason}",
            details={"reason": reason},
        )


class ConfigError(CodeMapError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class GrammarError(CodeMapError):
    """Grammar load or tag-query compile failure for one language."""

    @classmethod
    def load_failed(cls, language: str, reason: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_LOAD_FAILED,
            message=f"Failed to load grammar for {language}: {reason}",
            details={"language": language, "reason": reason},
        )

    @classmethod
    def query_compile_failed(cls, language: str, reason: str) -> "GrammarError":
        return cls(
            code=ErrorCode.QUERY_COMPILE_FAILED,
            message=f"Failed to compile tag query for {language}: {reason}",
            details={"language": language, "reason": reason},
        )

