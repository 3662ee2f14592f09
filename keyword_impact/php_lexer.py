"""A small PHP tokenizer that keeps only what name analysis needs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    INLINE_HTML = "inline_html"
    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    VARIABLE = "variable"
    NAME = "name"
    QUALIFIED_NAME = "qualified_name"
    FULLY_QUALIFIED_NAME = "fully_qualified_name"
    STRING = "string"
    NUMBER = "number"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """A lexeme together with its offset in the source text."""

    kind: TokenKind
    value: str
    offset: int


_IDENT = r"[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*"

_MULTI_PUNCT = (
    "<<=", ">>=", "**=", "...", "<=>", "===", "!==", "??=", "?->",
    "::", "->", "=>", "++", "--", "==", "!=", "<>", "<=", ">=", "&&", "||",
    "??", "+=", "-=", "*=", "/=", ".=", "%=", "&=", "|=", "^=", "<<", ">>",
    "**", "#[",
)

_PHP_LEXEME = re.compile(
    r"(?P<ws>\s+)"
    r"|(?P<close>\?>(?:\r?\n)?)"
    r"|(?P<line_comment>(?://|\#(?!\[))(?:(?!\?>)[^\n])*)"
    r"|(?P<block_comment>/\*.*?(?:\*/|\Z))"
    r"|(?P<heredoc><<<[ \t]*([\"']?)(" + _IDENT + r")\2\r?\n)"
    r"|(?P<string>'(?:[^'\\]|\\.)*(?:'|\Z)"
    r"|\"(?:[^\"\\]|\\.)*(?:\"|\Z)"
    r"|`(?:[^`\\]|\\.)*(?:`|\Z))"
    r"|(?P<variable>\$" + _IDENT + r")"
    r"|(?P<name>\\?" + _IDENT + r"(?:\\" + _IDENT + r")*)"
    r"|(?P<number>0[xX][0-9a-fA-F_]+|0[bB][01_]+"
    r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?"
    r"|\.\d[\d_]*(?:[eE][+-]?\d+)?)"
    r"|(?P<punct>" + "|".join(re.escape(p) for p in _MULTI_PUNCT) + r"|.)",
    re.DOTALL,
)

_OPEN_TAG = re.compile(r"<\?(?:php(?=\s|\Z)|=)?", re.IGNORECASE)


def _name_kind(value: str) -> TokenKind:
    if value.startswith("\\"):
        return TokenKind.FULLY_QUALIFIED_NAME
    if "\\" in value:
        return TokenKind.QUALIFIED_NAME
    return TokenKind.NAME


def _heredoc_end(source: str, start: int, label: str) -> int:
    closing = re.compile(r"^[ \t]*" + re.escape(label) + r"\b", re.MULTILINE)
    found = closing.search(source, start)
    return found.end() if found else len(source)


def _lex_php(source: str, pos: int, tokens: list[Token]) -> int:
    """Lex PHP code from ``pos``; return the position after the close tag."""
    while pos < len(source):
        match = _PHP_LEXEME.match(source, pos)
        group = match.lastgroup
        start, end = match.start(), match.end()
        if group == "close":
            tokens.append(Token(TokenKind.CLOSE_TAG, "?>", start))
            return end
        if group == "heredoc":
            end = _heredoc_end(source, end, match.group(3))
            tokens.append(Token(TokenKind.STRING, source[start:end], start))
        elif group == "string":
            tokens.append(Token(TokenKind.STRING, match.group(), start))
        elif group == "variable":
            tokens.append(Token(TokenKind.VARIABLE, match.group(), start))
        elif group == "name":
            tokens.append(Token(_name_kind(match.group()), match.group(), start))
        elif group == "number":
            tokens.append(Token(TokenKind.NUMBER, match.group(), start))
        elif group == "punct":
            tokens.append(Token(TokenKind.PUNCTUATION, match.group(), start))
        pos = end
    return pos


def tokenize(source: str) -> list[Token]:
    """Split PHP source into tokens; whitespace and comments are dropped."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        tag = _OPEN_TAG.search(source, pos)
        html_end = tag.start() if tag else len(source)
        if html_end > pos:
            tokens.append(Token(TokenKind.INLINE_HTML, source[pos:html_end], pos))
        if tag is None:
            break
        tokens.append(Token(TokenKind.OPEN_TAG, tag.group(), tag.start()))
        pos = _lex_php(source, tag.end(), tokens)
    return tokens