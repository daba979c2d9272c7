"""
Mustache template engine core: lexer, parser, cache, context resolution and writer.
"""

from __future__ import annotations

from .cache import TemplateCache
from .context import ContextStack
from .lexer import TemplateLexer, tokenize_template
from .nodes import (
    TemplateNode, TemplateAST, TextNode, VariableNode, SectionNode,
    PartialNode, CommentNode, DelimiterNode,
)
from .parser import TemplateParser, parse_template
from .registry import TemplateRegistry
from .tokens import DEFAULT_TAGS, Tags, Token, TokenType
from .types import MISSING
from .writer import TemplateWriter

__all__ = [
    "TemplateCache",
    "ContextStack",
    "TemplateLexer",
    "tokenize_template",
    "TemplateNode",
    "TemplateAST",
    "TextNode",
    "VariableNode",
    "SectionNode",
    "PartialNode",
    "CommentNode",
    "DelimiterNode",
    "TemplateParser",
    "parse_template",
    "TemplateRegistry",
    "DEFAULT_TAGS",
    "Tags",
    "Token",
    "TokenType",
    "MISSING",
    "TemplateWriter",
]
