"""
Lexical types.

Defines delimiter pairs, token types and the token record produced by the lexer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class Tags:
    """Open/close delimiter pair, `{{ }}` by default."""
    open: str = "{{"
    close: str = "}}"

    @classmethod
    def parse(cls, spec: str) -> Tags:
        """
        Builds a delimiter pair from a space separated string such as "<% %>".

        Raises:
            ValueError: If the string does not hold exactly two valid delimiters
        """
        parts = spec.split()
        if len(parts) != 2:
            raise ValueError(f"Expected two space separated delimiters, got {spec!r}")
        for part in parts:
            if "=" in part:
                raise ValueError(f"Delimiter must not contain '=': {part!r}")
        return cls(parts[0], parts[1])

    def __str__(self) -> str:
        return f"{self.open} {self.close}"


DEFAULT_TAGS = Tags()


class TokenType(enum.Enum):
    """Token types of a Mustache template."""
    TEXT = "TEXT"
    VARIABLE = "VARIABLE"                # {{name}}
    UNESCAPED = "UNESCAPED"              # {{{name}}} / {{&name}}
    SECTION_OPEN = "SECTION_OPEN"        # {{#name}}
    INVERTED_OPEN = "INVERTED_OPEN"      # {{^name}}
    SECTION_CLOSE = "SECTION_CLOSE"      # {{/name}}
    PARTIAL = "PARTIAL"                  # {{>name}}
    COMMENT = "COMMENT"                  # {{!text}}
    SET_DELIMITERS = "SET_DELIMITERS"    # {{=<% %>=}}
    EOF = "EOF"


SYMBOL_TYPES = {
    "#": TokenType.SECTION_OPEN,
    "^": TokenType.INVERTED_OPEN,
    "/": TokenType.SECTION_CLOSE,
    ">": TokenType.PARTIAL,
    "!": TokenType.COMMENT,
    "&": TokenType.UNESCAPED,
    "{": TokenType.UNESCAPED,
    "=": TokenType.SET_DELIMITERS,
}

# Tags that may occupy a line on their own and take the line with them
STANDALONE_TYPES = frozenset({
    TokenType.SECTION_OPEN,
    TokenType.INVERTED_OPEN,
    TokenType.SECTION_CLOSE,
    TokenType.PARTIAL,
    TokenType.COMMENT,
    TokenType.SET_DELIMITERS,
})

# Tags whose content is a name that cannot be empty
NAMED_TYPES = frozenset({
    TokenType.VARIABLE,
    TokenType.UNESCAPED,
    TokenType.SECTION_OPEN,
    TokenType.INVERTED_OPEN,
    TokenType.SECTION_CLOSE,
    TokenType.PARTIAL,
})


@dataclass(frozen=True)
class Token:
    """
    Token with position information for precise error reporting.
    """
    type: TokenType
    value: str           # Raw source span
    position: int        # Offset of the first character in the source
    line: int            # Line number (1-based)
    column: int          # Column number (1-based)
    end: int = -1        # Offset right after the tag
    symbol: str = ""
    name: str = ""
    indent: str = ""
    standalone: bool = False
    tags: Tags = DEFAULT_TAGS

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = [
    "Tags",
    "DEFAULT_TAGS",
    "TokenType",
    "Token",
    "SYMBOL_TYPES",
    "STANDALONE_TYPES",
    "NAMED_TYPES",
]
