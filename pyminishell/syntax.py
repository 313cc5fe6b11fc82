"""Checking a token list for syntax errors and collecting here-documents."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .heredoc import read_heredoc
from .tokens import Token, TokenType, is_operator, is_redirection, operator_symbol


def syntax_error_message(token: Token | None) -> str:
    """Return the message for an unexpected token; None stands for end of line."""
    if token is None:
        text = "newline"
    elif token.kind is TokenType.WORD:
        text = token.value or ""
    else:
        text = operator_symbol(token.kind)
    return f"minishell: syntax error near unexpected token `{text}'"


class ShellSyntaxError(Exception):
    """Raised for a malformed pipeline; ``token`` is the offending token."""

    def __init__(self, token: Token | None) -> None:
        self.token = token
        super().__init__(syntax_error_message(token))


def validate_syntax(
    tokens: Sequence[Token],
    heredoc: Callable[[str], str] = read_heredoc,
) -> None:
    """Raise ShellSyntaxError if the tokens do not form a valid pipeline.

    Here-documents met on the way are read at once through ``heredoc``,
    which gets the delimiter; the body is stored on the ``<<`` token.
    """
    if not tokens:
        return
    if tokens[0].kind is TokenType.PIPE:
        raise ShellSyntaxError(tokens[0])
    prev: Token | None = None
    i = 0
    while i < len(tokens):
        current = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None
        if (
            current.kind is TokenType.HEREDOC
            and following is not None
            and following.kind is TokenType.WORD
        ):
            current.heredoc = heredoc(following.value or "")
            prev = following
            i += 2
            continue
        if prev is not None and is_operator(prev.kind) and is_operator(current.kind):
            raise ShellSyntaxError(current)
        if is_redirection(current.kind) and (
            following is None or following.kind is not TokenType.WORD
        ):
            raise ShellSyntaxError(following)
        prev = current
        i += 1
    if prev is not None and is_operator(prev.kind):
        raise ShellSyntaxError(None)