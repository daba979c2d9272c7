"""
Shared types for value resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


class Missing:
    """Marker for a path that could not be resolved. Always falsy."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Missing()

# (container, key) -> value or MISSING
ValueGetter = Callable[[Any, str], Any]

# value -> is the value truthy for sections
TruthyCheck = Callable[[Any], bool]


@dataclass(frozen=True)
class ValueGetterRule:
    """Getter used for values that are instances of `type`."""
    type: type
    getter: ValueGetter


@dataclass(frozen=True)
class TruthyRule:
    """Truthiness check used for values that are instances of `type`."""
    type: type
    check: TruthyCheck


__all__ = ["Missing", "MISSING", "ValueGetter", "TruthyCheck", "ValueGetterRule", "TruthyRule"]
