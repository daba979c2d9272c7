"""
Lexical analyzer for Mustache templates.

Scans the template text left to right and splits it into literal text runs
and tags. The active delimiter pair can be changed from inside the template
with a `{{=<% %>=}}` directive; the change applies to the very next tag.

Standalone tags (sections, comments, partials and delimiter changes that are
the only content on their line) take the surrounding whitespace and the line
terminator with them, so the literal output never sees those lines.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .tokens import (
    DEFAULT_TAGS, NAMED_TYPES, STANDALONE_TYPES, SYMBOL_TYPES,
    Tags, Token, TokenType,
)
from ..errors import ParseError

logger = logging.getLogger(__name__)


class TemplateLexer:
    """
    Template lexer.

    Keeps the current position, line and column, and the delimiter pair
    that is active at the current position.
    """

    def __init__(self, text: str, tags: Tags = DEFAULT_TAGS):
        self.text = text
        self.tags = tags
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Tokenizes the whole source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: On an unterminated or malformed tag
        """
        tokens: List[Token] = []

        while self.position < self.length:
            start = self.text.find(self.tags.open, self.position)
            if start == -1:
                self._emit_text(tokens, self.length)
                break
            self._scan_tag(tokens, start)

        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column, end=self.position))
        logger.debug(f"Tokenized template of length {self.length} into {len(tokens)} tokens")
        return tokens

    def _scan_tag(self, tokens: List[Token], start: int) -> None:
        """Reads one tag starting at `start` together with the text before it."""
        tags = self.tags
        inner = start + len(tags.open)
        symbol = self.text[inner:inner + 1]
        if symbol not in SYMBOL_TYPES:
            symbol = ""
        token_type = SYMBOL_TYPES.get(symbol, TokenType.VARIABLE)

        # Triple mustache and delimiter changes carry their own closing mark
        if symbol == "{":
            closer = "}" + tags.close
        elif symbol == "=":
            closer = "=" + tags.close
        else:
            closer = tags.close

        content_start = inner + len(symbol)
        close_at = self.text.find(closer, content_start)
        if close_at == -1:
            self._emit_text(tokens, start)
            raise ParseError(f"Unclosed tag, expected {closer!r}", self.line, self.column, start)
        end = close_at + len(closer)
        content = self.text[content_start:close_at]

        bounds = None
        if token_type in STANDALONE_TYPES:
            bounds = self._standalone_bounds(start, end)

        indent = ""
        if bounds is not None:
            line_start, _ = bounds
            self._emit_text(tokens, line_start)
            indent = self.text[line_start:start]
            self._advance(start - self.position)
        else:
            self._emit_text(tokens, start)

        name = content.strip()
        if token_type in NAMED_TYPES and not name:
            raise ParseError(f"Empty name in {token_type.name.lower()} tag", self.line, self.column, start)

        if token_type == TokenType.SET_DELIMITERS:
            new_tags = self._parse_delimiters(content, start)
            name = str(new_tags)
        else:
            new_tags = None

        tokens.append(Token(
            token_type,
            self.text[start:end],
            start,
            self.line,
            self.column,
            end=end,
            symbol=symbol,
            name=name,
            indent=indent,
            standalone=bounds is not None,
            tags=tags,
        ))

        self._advance(end - self.position)
        if bounds is not None:
            self._advance(bounds[1] - self.position)
        if new_tags is not None:
            logger.debug(f"Delimiters changed from '{tags}' to '{new_tags}' at {start}")
            self.tags = new_tags

    def _standalone_bounds(self, start: int, end: int) -> Optional[Tuple[int, int]]:
        """
        Checks whether the tag at [start, end) is alone on its line.

        Returns:
            (line_start, next_line_start) of the line to elide, or None
        """
        line_start = self.text.rfind("\n", 0, start) + 1
        # Something earlier on this line was already consumed as a tag
        if line_start < self.position:
            return None
        if self.text[line_start:start].strip(" \t"):
            return None

        line_end = self.text.find("\n", end)
        if line_end == -1:
            tail = self.text[end:]
            stop = self.length
        else:
            tail = self.text[end:line_end]
            if tail.endswith("\r"):
                tail = tail[:-1]
            stop = line_end + 1
        if tail.strip(" \t"):
            return None
        return line_start, stop

    def _parse_delimiters(self, content: str, start: int) -> Tags:
        try:
            return Tags.parse(content)
        except ValueError as e:
            raise ParseError(f"Invalid delimiter change: {e}", self.line, self.column, start)

    def _emit_text(self, tokens: List[Token], stop: int) -> None:
        """Emits the text between the current position and `stop`, if any."""
        if stop <= self.position:
            return
        value = self.text[self.position:stop]
        tokens.append(Token(TokenType.TEXT, value, self.position, self.line, self.column, end=stop))
        self._advance(len(value))

    def _advance(self, count: int) -> None:
        """
        Moves the position forward, keeping line and column up to date.
        """
        for _ in range(count):
            if self.position >= self.length:
                break
            if self.text[self.position] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1


def tokenize_template(text: str, tags: Tags = DEFAULT_TAGS) -> List[Token]:
    """
    Convenience wrapper around TemplateLexer.

    Args:
        text: Template source
        tags: Delimiters active at the start of the template

    Returns:
        List of tokens

    Raises:
        ParseError: On a lexical error
    """
    return TemplateLexer(text, tags).tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
