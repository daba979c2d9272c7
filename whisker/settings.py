"""
Render settings.

Resolved once per render call and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

DEFAULT_MAX_PARTIAL_DEPTH = 100


def html_escape(text: str) -> str:
    # Apostrophes are left alone to keep common HTML source expectations.
    return (
        text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
    )


def no_escape(text: str) -> str:
    return text


@dataclass(frozen=True)
class RenderSettings:
    """
    Options that influence a single render call.

    Attributes:
        escape: Function applied to the output of escaped interpolation tags
        strict: Raise MissingKeyError for unresolvable paths instead of rendering nothing
        skip_recursive_lookup: Resolve the first path segment only in the innermost frame
        max_partial_depth: Limit for nested partial and lambda expansions
    """
    escape: Callable[[str], str] = html_escape
    strict: bool = False
    skip_recursive_lookup: bool = False
    max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH

    def merged(self, **overrides) -> RenderSettings:
        """Returns a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


__all__ = ["RenderSettings", "html_escape", "no_escape", "DEFAULT_MAX_PARTIAL_DEPTH"]
