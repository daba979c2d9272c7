"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from WhiskerUserError.

Programming errors and bugs should NOT inherit from WhiskerUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class WhiskerUserError(Exception):
    """
    Base class for all user-facing errors in whisker.

    These errors indicate problems that the user can fix:
    malformed templates, missing data in strict mode, unreadable files, etc.
    """
    pass


class ParseError(WhiskerUserError):
    """Template syntax error with the position of the offending tag."""

    def __init__(self, message: str, line: int, column: int, position: int = -1):
        super().__init__(f"{message} at {line}:{column}")
        self.reason = message
        self.line = line
        self.column = column
        self.position = position


class RenderError(WhiskerUserError):
    """Error raised while rendering a parsed template."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class MissingKeyError(RenderError):
    """A path could not be resolved while strict mode is on."""

    def __init__(self, path: str):
        super().__init__(f"Unknown key '{path}' (strict mode)")
        self.path = path


class RecursionLimitError(RenderError):
    """Nested partial or lambda expansion went deeper than allowed."""

    def __init__(self, what: str, depth: int):
        super().__init__(f"Maximum nesting depth {depth} exceeded while rendering {what}")
        self.what = what
        self.depth = depth


class LoaderError(WhiskerUserError):
    """Template source could not be found or read."""
    pass


class ConfigError(WhiskerUserError):
    """Invalid whisker.yaml contents."""
    pass


__all__ = [
    "WhiskerUserError",
    "ParseError",
    "RenderError",
    "MissingKeyError",
    "RecursionLimitError",
    "LoaderError",
    "ConfigError",
]
