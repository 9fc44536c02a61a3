"""
Comment stripping and tokenization of Jink source text.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from jinklsp.jink_language import IDENTIFIER_PATTERN, KEYWORDS

# Strings come first so that comment markers inside them are left alone
_COMMENT_OR_STRING_PATTERN = re.compile(r'"(?:[^"\\\n]|\\.)*"|//[^\n]*|/\*[\s\S]*?\*/')


def _blank(match: re.Match[str]) -> str:
    if match.group(0).startswith('"'):
        return match.group(0)
    # Newlines survive so that line numbers after a block comment stay valid
    return re.sub(r"[^\r\n]", " ", match.group(0))


def strip_comments(text: str) -> str:
    """
    Replace line and block comments with whitespace of equal length.

    Offsets into the returned text are valid offsets into the original text.
    """
    return _COMMENT_OR_STRING_PATTERN.sub(_blank, text)


class TokenKind(Enum):
    STRING = "string"
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    ARROW = "arrow"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    offset: int


_TOKEN_PATTERN = re.compile(
    r'(?P<string>"(?:[^"\\]|\\.)*")'
    rf"|(?P<keyword>\b(?:{'|'.join(KEYWORDS)})\b)"
    rf"|(?P<identifier>\b{IDENTIFIER_PATTERN}\b)"
    r"|(?P<arrow>->)"
    r"|(?P<punctuation>[{}();=.,:\[\]+\-*/%<>&|!^~])"
)


def tokenize(text: str) -> Iterator[Token]:
    """Yield the significant tokens of a comment-free text; whitespace and numbers are skipped."""
    for match in _TOKEN_PATTERN.finditer(text):
        kind = TokenKind(match.lastgroup)
        yield Token(kind, match.group(0), match.start())
