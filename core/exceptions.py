"""
Typed exceptions for the registry validation gate.

Two families:
- Entry-level errors (PathTraversalError, JSONLoadError) are raised by the
  safe I/O primitives and turned into findings by their callers.
- FatalError and its subclasses abort the whole run.
"""

from typing import Optional

from core.constants import ErrorCode


class RegistryError(Exception):
    """Base exception for the validation gate."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class PathTraversalError(RegistryError):
    """A path segment would escape its root directory."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.PATH_TRAVERSAL, details)


class JSONLoadError(RegistryError):
    """
    Reading or parsing a file failed.

    code is one of PAYLOAD_TOO_LARGE, UNSAFE_KEY, PARSE_ERROR, READ_ERROR.
    """
    pass


class FatalError(RegistryError):
    """Condition that aborts the run instead of failing a single entry."""
    pass


class SchemaLoadError(FatalError):
    """A schema document is missing or cannot be compiled."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.SCHEMA_LOAD_ERROR, details)


class RateLimitExceededError(FatalError):
    """Too many tokens, projects or contracts in one submission."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.RATE_LIMIT_EXCEEDED, details)
