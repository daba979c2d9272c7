"""
Context stack for template rendering.

Holds the view scopes currently in effect, innermost last, and resolves
dotted paths against them.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from .registry import TemplateRegistry, call_value, is_callable_value, required_arity
from .types import MISSING
from ..settings import RenderSettings


class ContextStack:
    """
    Ordered stack of view values.

    A frame is pushed when a section renders its body against a value
    (a single truthy value or one element of a list) and popped when the
    body is done.
    """

    def __init__(self, view: Any, registry: TemplateRegistry, settings: Optional[RenderSettings] = None):
        self.registry = registry
        self.settings = settings or registry.settings
        self._frames: List[Any] = [view]

    def push(self, value: Any) -> None:
        self._frames.append(value)

    def pop(self) -> Any:
        if len(self._frames) == 1:
            raise IndexError("Cannot pop the root view")
        return self._frames.pop()

    def unwind(self, size: int) -> None:
        """Pops frames until only `size` remain."""
        while len(self._frames) > max(size, 1):
            self._frames.pop()

    @contextmanager
    def frame(self, value: Any) -> Iterator[None]:
        """Pushes `value` for the duration of the with-block."""
        self.push(value)
        try:
            yield
        finally:
            self.pop()

    @property
    def top(self) -> Any:
        return self._frames[-1]

    def __len__(self) -> int:
        return len(self._frames)

    def lookup(self, path: str) -> Any:
        """
        Resolves a dotted path without invoking a callable found at the end of it.

        The first segment is searched innermost-first and the first frame that
        has it wins. The remaining segments are resolved strictly inside that
        value: once `a` is found, a missing `a.b` is MISSING even if an outer
        frame has its own `a.b`. Zero-argument callables met on the way are
        invoked and their results used.

        Returns:
            The resolved value or MISSING
        """
        path = path.strip()
        if path == ".":
            return self.top

        first, *rest = path.split(".")
        value = self._find_in_frames(first)
        for segment in rest:
            if value is MISSING:
                break
            value = self.invoke(value, path)
            value = self.registry.get_value(value, segment)
        return value

    def invoke(self, value: Any, name: str) -> Any:
        """Calls `value` if it is a zero-argument callable, otherwise returns it unchanged."""
        if is_callable_value(value) and required_arity(value) == 0:
            return call_value(value, name)
        return value

    def _find_in_frames(self, name: str) -> Any:
        if self.settings.skip_recursive_lookup:
            frames = [self.top]
        else:
            frames = list(reversed(self._frames))
        for frame in frames:
            value = self.registry.get_value(frame, name)
            if value is not MISSING:
                return value
        return MISSING


__all__ = ["ContextStack"]
