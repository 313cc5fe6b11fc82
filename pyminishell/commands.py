"""Grouping tokens into the commands of a pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from .tokens import Token, TokenType, is_redirection, operator_symbol

MISSING_TARGET = "MISSING_FILE"


@dataclass
class Redirection:
    """One redirection: its kind, its target word and any here-document body."""

    kind: TokenType
    target: str
    heredoc: str | None = None

    @property
    def symbol(self) -> str:
        """The operator as written: <, >, >> or <<."""
        return operator_symbol(self.kind)


@dataclass
class Command:
    """One stage of a pipeline: its argument vector and its redirections."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        """The command name, or None when the stage has only redirections."""
        return self.args[0] if self.args else None


def _walk(tokens: Iterable[Token]) -> Iterator[tuple[Token, Token | None]]:
    """Yield each word alone and each redirection with the token after it."""
    it = iter(tokens)
    for token in it:
        if is_redirection(token.kind):
            yield token, next(it, None)
        elif token.kind is TokenType.WORD:
            yield token, None


def command_words(tokens: Iterable[Token]) -> list[str]:
    """Return the argument words, leaving out redirection targets.

    Words are split again on spaces, so a word that expanded to several
    space-separated parts becomes several arguments; empty parts vanish.
    """
    words = [
        token.value or ""
        for token, _ in _walk(tokens)
        if token.kind is TokenType.WORD
    ]
    return [part for word in words for part in word.split(" ") if part]


def redirections_of(tokens: Iterable[Token]) -> list[Redirection]:
    """Return the redirections in the order they were written."""
    redirections: list[Redirection] = []
    for token, target in _walk(tokens):
        if not is_redirection(token.kind):
            continue
        if target is not None and target.kind is TokenType.WORD and target.value is not None:
            name = target.value
        else:
            name = MISSING_TARGET
        redirections.append(Redirection(token.kind, name, token.heredoc))
    return redirections


def _segments(tokens: Sequence[Token]) -> Iterator[list[Token]]:
    current: list[Token] = []
    for token in tokens:
        if token.kind is TokenType.PIPE:
            yield current
            current = []
        else:
            current.append(token)
    if current:
        yield current


def build_commands(tokens: Sequence[Token]) -> list[Command]:
    """Split the tokens at pipes and build one Command for each stage."""
    return [
        Command(command_words(segment), redirections_of(segment))
        for segment in _segments(tokens)
    ]