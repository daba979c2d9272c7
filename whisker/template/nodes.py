"""
Parsed template nodes.

A parsed template is a flat, index-addressed tuple of immutable nodes.
Sections do not own their children: a SectionNode points at the slice
of the tuple that forms its body, so a parsed template can be cached
and shared between threads as is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .tokens import DEFAULT_TAGS, Tags


@dataclass(frozen=True)
class TemplateNode:
    """Base class for all template nodes."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Literal text, written to the output as is.

    Standalone-line trimming has already been applied by the lexer.
    """
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """Interpolation tag: {{name}} (escaped), {{{name}}} or {{&name}} (raw)."""
    name: str
    escape: bool = True


@dataclass(frozen=True)
class SectionNode(TemplateNode):
    """
    Section {{#name}}...{{/name}} or inverted section {{^name}}...{{/name}}.

    Attributes:
        name: Dotted path of the section value
        inverted: True for {{^name}}
        start: Index of the first body node
        end: Index right after the last body node (start == end for an empty body)
        raw: Unrendered body source, handed to lambdas
        tags: Delimiters active at the opening tag
    """
    name: str
    inverted: bool
    start: int
    end: int
    raw: str = ""
    tags: Tags = DEFAULT_TAGS


@dataclass(frozen=True)
class PartialNode(TemplateNode):
    """
    Partial tag {{>name}}.

    `indent` is the leading whitespace of a standalone partial tag; every
    line of the partial is prefixed with it.
    """
    name: str
    indent: str = ""


@dataclass(frozen=True)
class CommentNode(TemplateNode):
    """Comment tag {{!text}}. Renders nothing."""
    text: str = ""


@dataclass(frozen=True)
class DelimiterNode(TemplateNode):
    """Delimiter change {{=<% %>=}}. Renders nothing."""
    tags: Tags = DEFAULT_TAGS


# Alias for a parsed template
TemplateAST = Tuple[TemplateNode, ...]


__all__ = [
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "SectionNode",
    "PartialNode",
    "CommentNode",
    "DelimiterNode",
    "TemplateAST",
]
