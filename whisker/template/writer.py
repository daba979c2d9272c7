"""
Template writer.

Walks a parsed node tuple against a context stack and produces the output
text. Sections are index ranges inside the tuple; partials and lambda
results are parsed through the shared cache and rendered in place.

Sections and partials are expanded on an explicit work stack instead of
through nested calls, so arbitrarily deep section nesting and partial
recursion up to max_partial_depth never exhaust the interpreter stack.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterator, List, Mapping, Optional, Union

from .cache import TemplateCache
from .context import ContextStack
from .nodes import PartialNode, SectionNode, TemplateAST, TextNode, VariableNode
from .registry import TemplateRegistry, call_value, is_accessor, is_callable_value, required_arity
from .tokens import DEFAULT_TAGS, Tags
from .types import MISSING
from ..errors import MissingKeyError, RecursionLimitError, RenderError
from ..settings import RenderSettings

logger = logging.getLogger(__name__)


@dataclass
class RenderState:
    """Mutable state of one render call."""
    stack: ContextStack
    partials: Mapping[str, str]
    settings: RenderSettings
    depth: int = 0


@dataclass
class _Cursor:
    """Next node to render inside ast[index:end]."""
    ast: TemplateAST
    index: int
    end: int


# A cursor to advance, or an action run once it reaches the top of the work stack
WorkItem = Union[_Cursor, Callable[[], Any]]


def indent_lines(text: str, indent: str) -> str:
    """Prefixes every line of `text` with `indent`."""
    return "".join(indent + line for line in text.splitlines(keepends=True))


class TemplateWriter:
    """
    Renders parsed templates.

    Holds no state between calls apart from the template cache it shares
    with its owner.
    """

    def __init__(self, registry: TemplateRegistry, cache: TemplateCache):
        self.registry = registry
        self.cache = cache

    def render(
        self,
        ast: TemplateAST,
        view: Any,
        partials: Optional[Mapping[str, str]] = None,
        settings: Optional[RenderSettings] = None,
    ) -> str:
        """
        Renders a parsed template against a view.

        Args:
            ast: Parsed template
            view: Root context value
            partials: Partial name -> template source for this call
            settings: Render settings; the registry defaults when omitted

        Returns:
            Rendered text

        Raises:
            RenderError: In strict mode on an unknown path, when the nesting
                limit is exceeded or when a view callable fails.
                Nothing rendered so far is returned in that case.
        """
        settings = settings or self.registry.settings
        state = RenderState(
            stack=ContextStack(view, self.registry, settings),
            partials=partials or {},
            settings=settings,
        )
        out: List[str] = []
        try:
            self._walk(ast, 0, len(ast), state, out)
        except RecursionError as e:
            # Only lambda output nests through calls; everything else is iterative
            raise RenderError(
                "Lambda expansions nested deeper than the interpreter allows; "
                "lower max_partial_depth",
                cause=e,
            ) from e
        return "".join(out)

    # ======= Node walking =======

    def _walk(self, ast: TemplateAST, start: int, end: int, state: RenderState, out: List[str]) -> None:
        """Renders ast[start:end] into `out`."""
        work: List[WorkItem] = [_Cursor(ast, start, end)]
        frames = len(state.stack)
        depth = state.depth
        try:
            while work:
                item = work[-1]
                if not isinstance(item, _Cursor):
                    work.pop()
                    item()
                    continue
                if item.index >= item.end:
                    work.pop()
                    continue

                node = item.ast[item.index]
                if isinstance(node, SectionNode):
                    item.index = node.end
                    self._enter_section(item.ast, node, state, out, work)
                    continue

                item.index += 1
                if isinstance(node, TextNode):
                    out.append(node.text)
                elif isinstance(node, VariableNode):
                    self._render_variable(node, state, out)
                elif isinstance(node, PartialNode):
                    self._enter_partial(node, state, work)
                # Comments and delimiter changes produce no output
        finally:
            # A lambda may catch an error from its render callback and go on
            state.stack.unwind(frames)
            state.depth = depth

    def _render_variable(self, node: VariableNode, state: RenderState, out: List[str]) -> None:
        value = self._lookup(node.name, state)
        if is_accessor(value):
            value = state.stack.invoke(value, node.name)
        elif is_callable_value(value):
            if required_arity(value) != 0:
                raise RenderError(f"Lambda '{node.name}' takes arguments and can only be used as a section")
            result = call_value(value, node.name)
            if result is None:
                return
            # Lambda results are templates themselves, always with default delimiters
            text = self._render_text(self._to_str(result), DEFAULT_TAGS, state, f"lambda '{node.name}'")
            out.append(state.settings.escape(text) if node.escape else text)
            return

        if value is MISSING or value is None:
            return
        text = self._to_str(value)
        out.append(state.settings.escape(text) if node.escape else text)

    def _enter_section(
        self,
        ast: TemplateAST,
        node: SectionNode,
        state: RenderState,
        out: List[str],
        work: List[WorkItem],
    ) -> None:
        """Schedules the body of a section on the work stack once per context value."""
        value = self._lookup(node.name, state)

        if is_callable_value(value):
            if required_arity(value) == 0:
                value = state.stack.invoke(value, node.name)
            elif node.inverted:
                # A lambda is always truthy
                return
            else:
                self._render_lambda_section(node, value, state, out)
                return

        if self.registry.is_enumerable(value):
            value = list(value)

        truthy = self.registry.is_truthy(value)
        if node.inverted:
            if not truthy:
                work.append(_Cursor(ast, node.start, node.end))
            return
        if not truthy or node.start == node.end:
            return

        stack = state.stack
        items = value if isinstance(value, list) else [value]
        # Reversed, so the first element ends up on top
        for item in reversed(items):
            work.append(stack.pop)
            work.append(_Cursor(ast, node.start, node.end))
            work.append(partial(stack.push, item))

    def _render_lambda_section(self, node: SectionNode, func: Any, state: RenderState, out: List[str]) -> None:
        """
        Calls a section lambda with the raw body text and renders what it returns.

        Lambdas taking two arguments also receive a render function bound to
        the current context and the section's delimiters.
        """
        label = f"lambda '{node.name}'"

        def render_text(text: str) -> str:
            return self._render_text(text, node.tags, state, label)

        arity = required_arity(func)
        if arity == 1:
            result = call_value(func, node.name, node.raw)
        elif arity == 2:
            result = call_value(func, node.name, node.raw, render_text)
        else:
            raise RenderError(f"Lambda '{node.name}' must take one or two arguments, takes {arity}")

        if result is None:
            return
        out.append(render_text(self._to_str(result)))

    def _enter_partial(self, node: PartialNode, state: RenderState, work: List[WorkItem]) -> None:
        source = self._load_partial(node.name, state)
        if source is None:
            logger.warning(f"Partial '{node.name}' not found, rendering nothing")
            return
        if node.indent:
            source = indent_lines(source, node.indent)

        self._check_depth(state, f"partial '{node.name}'")
        # Partials never inherit the caller's delimiters
        ast = self.cache.get_or_parse(source, DEFAULT_TAGS)
        state.depth += 1
        work.append(partial(self._ascend, state))
        work.append(_Cursor(ast, 0, len(ast)))

    # ======= Helpers =======

    def _render_text(self, text: str, tags: Tags, state: RenderState, label: str) -> str:
        """Parses and renders a template produced at render time under the current stack."""
        with self._descend(state, label):
            ast = self.cache.get_or_parse(text, tags)
            parts: List[str] = []
            self._walk(ast, 0, len(ast), state, parts)
        return "".join(parts)

    def _lookup(self, name: str, state: RenderState) -> Any:
        value = state.stack.lookup(name)
        if value is MISSING and state.settings.strict:
            raise MissingKeyError(name)
        return value

    def _load_partial(self, name: str, state: RenderState) -> Optional[str]:
        if name in state.partials:
            return state.partials[name]
        loader = self.registry.partial_loader
        if loader is not None:
            logger.debug(f"Loading partial '{name}' through {type(loader).__name__}")
            return loader.load(name)
        return None

    @staticmethod
    def _check_depth(state: RenderState, what: str) -> None:
        limit = state.settings.max_partial_depth
        if state.depth >= limit:
            raise RecursionLimitError(what, limit)

    @staticmethod
    def _ascend(state: RenderState) -> None:
        state.depth -= 1

    @contextmanager
    def _descend(self, state: RenderState, what: str) -> Iterator[None]:
        self._check_depth(state, what)
        state.depth += 1
        try:
            yield
        finally:
            state.depth -= 1

    @staticmethod
    def _to_str(value: Any) -> str:
        return value if isinstance(value, str) else str(value)


__all__ = ["TemplateWriter", "RenderState", "indent_lines"]
