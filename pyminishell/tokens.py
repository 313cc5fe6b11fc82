"""Splitting an input line into shell tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_OPERATOR_CHARS = frozenset("|<>")
_SPACE_CHARS = frozenset(" \t\n")
_QUOTE_CHARS = frozenset("'\"")


class TokenType(enum.Enum):
    """Kinds of tokens the lexer produces."""

    WORD = enum.auto()
    PIPE = enum.auto()
    REDIR_IN = enum.auto()
    REDIR_OUT = enum.auto()
    APPEND = enum.auto()
    HEREDOC = enum.auto()
    DOUBLE_QUOTE = enum.auto()
    SINGLE_QUOTE = enum.auto()


_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.APPEND, TokenType.HEREDOC}
)

_SYMBOLS = {
    TokenType.PIPE: "|",
    TokenType.REDIR_IN: "<",
    TokenType.REDIR_OUT: ">",
    TokenType.APPEND: ">>",
    TokenType.HEREDOC: "<<",
}


@dataclass
class Token:
    """One token; words carry their text, a here-document its collected body."""

    kind: TokenType
    value: str | None = None
    heredoc: str | None = None


class UnclosedQuoteError(ValueError):
    """Raised when a quote is opened and never closed."""

    def __init__(self, message: str = "minishell: syntax error: unclosed quote") -> None:
        super().__init__(message)


def is_redirection(kind: TokenType) -> bool:
    """Return True for <, >, >> and <<."""
    return kind in _REDIRECTIONS


def is_operator(kind: TokenType) -> bool:
    """Return True for a pipe or any redirection."""
    return kind is TokenType.PIPE or is_redirection(kind)


def operator_symbol(kind: TokenType) -> str:
    """Return the text of an operator, or an empty string for other kinds."""
    return _SYMBOLS.get(kind, "")


def _read_operator(line: str, i: int) -> tuple[Token, int]:
    pair = line[i : i + 2]
    if pair == "<<":
        return Token(TokenType.HEREDOC), i + 2
    if pair == ">>":
        return Token(TokenType.APPEND), i + 2
    char = line[i]
    if char == "|":
        return Token(TokenType.PIPE), i + 1
    if char == "<":
        return Token(TokenType.REDIR_IN), i + 1
    return Token(TokenType.REDIR_OUT), i + 1


def _read_word(line: str, i: int) -> tuple[Token, int]:
    start = i
    quote = ""
    while i < len(line):
        char = line[i]
        if not quote and (char in _SPACE_CHARS or char in _OPERATOR_CHARS):
            break
        if not quote and char in _QUOTE_CHARS:
            quote = char
        elif char == quote:
            quote = ""
        i += 1
    if quote:
        raise UnclosedQuoteError()
    return Token(TokenType.WORD, line[start:i]), i


def tokenize(line: str) -> list[Token]:
    """Split a line into word and operator tokens; quoted text stays in its word."""
    tokens: list[Token] = []
    i = 0
    while i < len(line):
        while i < len(line) and line[i] in _SPACE_CHARS:
            i += 1
        if i >= len(line):
            break
        if line[i] in _OPERATOR_CHARS:
            token, i = _read_operator(line, i)
        else:
            token, i = _read_word(line, i)
        tokens.append(token)
    return tokens