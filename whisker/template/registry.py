"""
Central registry of value adapters for the renderer.

Knows how to read a named member out of each supported view shape
(mappings, sequences, plain objects), how to decide whether a value counts
as truthy for a section, and which loaders supply templates and partials.
Custom view types plug in through register_value_getter/register_truthy_check.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Collection, Iterator, Mapping, Sequence
from typing import Any, List, Optional, Tuple

from .types import MISSING, TruthyCheck, TruthyRule, ValueGetter, ValueGetterRule
from ..errors import RenderError, WhiskerUserError
from ..loaders import StringLoader, TemplateLoader
from ..settings import RenderSettings

logger = logging.getLogger(__name__)

# Values of these types have no members a template may look up
_SCALAR_TYPES = (str, bytes, bytearray, bool, int, float, complex, type(None))


def _scalar_getter(obj: Any, key: str) -> Any:
    return MISSING


def _mapping_getter(obj: Mapping, key: str) -> Any:
    if key in obj:
        return obj[key]
    return MISSING


def _sequence_getter(obj: Sequence, key: str) -> Any:
    if key.isdigit():
        index = int(key)
        if index < len(obj):
            return obj[index]
        return MISSING
    # Named tuples expose their fields as attributes
    if hasattr(obj, "_fields"):
        return _attribute_getter(obj, key)
    return MISSING


def _attribute_getter(obj: Any, key: str) -> Any:
    if not key or key.startswith("_"):
        return MISSING
    try:
        return getattr(obj, key)
    except AttributeError:
        return MISSING


def required_arity(func: Any) -> int:
    """
    Counts the positional parameters a callable needs.

    Zero means the callable is a plain zero-argument accessor; anything
    else marks a lambda expecting the raw section text.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 0
    count = 0
    for param in signature.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD) and param.default is param.empty:
            count += 1
    return count


def is_callable_value(value: Any) -> bool:
    """Callables found in the view, classes excluded."""
    return callable(value) and not isinstance(value, type)


def is_accessor(value: Any) -> bool:
    """
    Zero-argument bound methods of view objects.

    They read like attributes: the result is the value itself and is never
    parsed as a template, unlike callables stored in the view as values.
    """
    return inspect.ismethod(value) and required_arity(value) == 0


def call_value(func: Any, name: str, *args: Any) -> Any:
    """
    Invokes a view callable.

    Raises:
        RenderError: Wrapping any non-whisker exception raised by the callable
    """
    try:
        return func(*args)
    except WhiskerUserError:
        raise
    except Exception as e:
        raise RenderError(f"Callable '{name}' raised {type(e).__name__}: {e}", cause=e) from e


class TemplateRegistry:
    """
    Registry of value getters, truthy checks and loaders.

    Rules registered by the user take priority over built-in ones; within
    each group the first rule whose type matches the value decides.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        template_loader: Optional[TemplateLoader] = None,
        partial_loader: Optional[TemplateLoader] = None,
    ):
        self.settings = settings or RenderSettings()
        self.template_loader: TemplateLoader = template_loader or StringLoader()
        self.partial_loader = partial_loader

        self.value_getters: List[ValueGetterRule] = []
        self.truthy_checks: List[TruthyRule] = []
        self._builtin_getters: List[ValueGetterRule] = []
        self._builtin_truthy_checks: List[TruthyRule] = []
        self.enumerable_types: Tuple[type, ...] = ()

        self._register_builtins()

    def _register_builtins(self) -> None:
        """Registers the adapters for Python's built-in data shapes."""
        self._builtin_getters = [
            ValueGetterRule(_SCALAR_TYPES, _scalar_getter),  # type: ignore[arg-type]
            ValueGetterRule(Mapping, _mapping_getter),
            ValueGetterRule(Sequence, _sequence_getter),
            ValueGetterRule(object, _attribute_getter),
        ]
        self._builtin_truthy_checks = [
            TruthyRule(bool, lambda v: v),
            TruthyRule(str, lambda v: len(v) > 0),
            TruthyRule((int, float), lambda v: v != 0),  # type: ignore[arg-type]
            TruthyRule(Mapping, lambda v: True),
            TruthyRule((list, tuple, set, frozenset), lambda v: len(v) > 0),  # type: ignore[arg-type]
        ]

    def register_value_getter(self, type_: type, getter: ValueGetter) -> None:
        """
        Registers a getter for values of the given type.

        Args:
            type_: Type (or tuple of types) the getter handles
            getter: Function (obj, key) returning the member or MISSING
        """
        self.value_getters.insert(0, ValueGetterRule(type_, getter))
        logger.debug(f"Registered value getter for {type_!r}")

    def register_truthy_check(self, type_: type, check: TruthyCheck) -> None:
        """Registers a section truthiness check for values of the given type."""
        self.truthy_checks.insert(0, TruthyRule(type_, check))
        logger.debug(f"Registered truthy check for {type_!r}")

    def register_enumerable(self, type_: type) -> None:
        """Marks an iterable type whose instances a section renders once per element."""
        self.enumerable_types = self.enumerable_types + (type_,)
        logger.debug(f"Registered enumerable type {type_!r}")

    def get_value(self, obj: Any, key: str) -> Any:
        """
        Reads `key` from `obj` with the first matching getter.

        Returns:
            The member value or MISSING
        """
        for rule in self._iter_getters():
            if isinstance(obj, rule.type):
                return rule.getter(obj, key)
        return MISSING

    def is_truthy(self, value: Any) -> bool:
        """Section truthiness: None, MISSING, False and empty values are falsy."""
        if value is None or value is MISSING:
            return False
        for rule in self.truthy_checks + self._builtin_truthy_checks:
            if isinstance(value, rule.type):
                return bool(rule.check(value))
        return True

    def is_enumerable(self, value: Any) -> bool:
        """
        Values a section renders once per element.

        Collections (lists, tuples, sets, ranges, dict views), iterators and
        generators, plus registered types. Strings and mappings are single
        values, and so is any other object that merely defines __iter__
        (a pydantic model iterates its fields but is one record).
        """
        if self.enumerable_types and isinstance(value, self.enumerable_types):
            return True
        if isinstance(value, (str, bytes, bytearray, Mapping)):
            return False
        return isinstance(value, (Collection, Iterator))

    def _iter_getters(self) -> List[ValueGetterRule]:
        return self.value_getters + self._builtin_getters


__all__ = [
    "TemplateRegistry",
    "required_arity",
    "is_callable_value",
    "is_accessor",
    "call_value",
]
