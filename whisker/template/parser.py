"""
Template parser.

Turns the token sequence into a flat node tuple. Sections are tracked with
a stack of open tags; when a closing tag arrives, the placeholder of the
matching opener is replaced by a SectionNode that records its body range.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, cast

from .lexer import TemplateLexer
from .nodes import (
    CommentNode, DelimiterNode, PartialNode, SectionNode,
    TemplateAST, TemplateNode, TextNode, VariableNode,
)
from .tokens import DEFAULT_TAGS, Tags, Token, TokenType
from ..errors import ParseError

logger = logging.getLogger(__name__)


class TemplateParser:
    """
    Builds a TemplateAST from lexer tokens.

    The source text is needed to capture the raw body of every section,
    which is what lambdas receive.
    """

    def __init__(self, tokens: List[Token], source: str):
        self.tokens = tokens
        self.source = source

    def parse(self) -> TemplateAST:
        """
        Parses the whole token sequence.

        Returns:
            Tuple of nodes

        Raises:
            ParseError: On a closing tag without opener, a mismatched closing
                tag or a section left open at the end of the template
        """
        nodes: List[Optional[TemplateNode]] = []
        open_sections: List[Tuple[Token, int]] = []

        for token in self.tokens:
            kind = token.type
            if kind == TokenType.TEXT:
                nodes.append(TextNode(token.value))
            elif kind == TokenType.VARIABLE:
                nodes.append(VariableNode(token.name, escape=True))
            elif kind == TokenType.UNESCAPED:
                nodes.append(VariableNode(token.name, escape=False))
            elif kind in (TokenType.SECTION_OPEN, TokenType.INVERTED_OPEN):
                # Placeholder until the closing tag tells us where the body ends
                open_sections.append((token, len(nodes)))
                nodes.append(None)
            elif kind == TokenType.SECTION_CLOSE:
                self._close_section(token, open_sections, nodes)
            elif kind == TokenType.PARTIAL:
                nodes.append(PartialNode(token.name, token.indent))
            elif kind == TokenType.COMMENT:
                nodes.append(CommentNode(token.name))
            elif kind == TokenType.SET_DELIMITERS:
                nodes.append(DelimiterNode(Tags.parse(token.name)))
            elif kind == TokenType.EOF:
                break

        if open_sections:
            opener, _ = open_sections[-1]
            raise self._error(f"Unclosed section '{opener.name}'", opener)

        return tuple(cast(List[TemplateNode], nodes))

    def _close_section(
        self,
        token: Token,
        open_sections: List[Tuple[Token, int]],
        nodes: List[Optional[TemplateNode]],
    ) -> None:
        if not open_sections:
            raise self._error(f"Unopened section '{token.name}'", token)

        opener, index = open_sections.pop()
        if opener.name != token.name:
            raise self._error(
                f"Unclosed section '{opener.name}' (opened at {opener.line}:{opener.column}), "
                f"found closing tag for '{token.name}'",
                token,
            )

        nodes[index] = SectionNode(
            name=opener.name,
            inverted=opener.type == TokenType.INVERTED_OPEN,
            start=index + 1,
            end=len(nodes),
            raw=self.source[opener.end:token.position],
            tags=opener.tags,
        )

    @staticmethod
    def _error(message: str, token: Token) -> ParseError:
        return ParseError(message, token.line, token.column, token.position)


def parse_template(text: str, tags: Tags = DEFAULT_TAGS) -> TemplateAST:
    """
    Tokenizes and parses a template.

    Args:
        text: Template source
        tags: Delimiters active at the start of the template

    Returns:
        Parsed node tuple

    Raises:
        ParseError: On any syntax error
    """
    tokens = TemplateLexer(text, tags).tokenize()
    ast = TemplateParser(tokens, text).parse()
    logger.debug(f"Parsed template -> {len(ast)} nodes")
    return ast


__all__ = ["TemplateParser", "parse_template"]
