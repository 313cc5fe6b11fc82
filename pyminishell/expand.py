"""Variable expansion and quote removal for word tokens."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .tokens import Token, TokenType


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def _lookup(env: Any, name: str) -> str:
    value = env.get(name)
    return value if value is not None else ""


def _expand_quotes_and_vars(value: str, env: Any, exit_status: int) -> str | None:
    parts: list[str] = []
    produced = False
    quote = ""
    i = 0
    while i < len(value):
        char = value[i]
        if char == "'" and quote != '"':
            quote = "" if quote == "'" else "'"
            i += 1
        elif char == '"' and quote != "'":
            quote = "" if quote == '"' else '"'
            i += 1
        elif char == "$" and quote != "'":
            start = i + 1
            if value[start : start + 1] == "?":
                parts.append(str(exit_status))
                i = start + 1
            else:
                i = start
                while i < len(value) and _is_name_char(value[i]):
                    i += 1
                parts.append(_lookup(env, value[start:i]))
            produced = True
        else:
            parts.append(char)
            produced = True
            i += 1
    return "".join(parts) if produced else None


def expand_word(value: str, env: Any, exit_status: int) -> str:
    """Expand $NAME and $? and drop quotes from one word.

    ``env`` needs a ``get`` method. A word that yields nothing at all,
    such as ``''``, is returned as written.
    """
    expanded = _expand_quotes_and_vars(value, env, exit_status)
    if expanded is None:
        return value
    if value.startswith('"') and value.endswith('"'):
        return expanded.strip('"')
    if value.startswith("'") and value.endswith("'"):
        return expanded.strip("'")
    return expanded


def expand_tokens(tokens: Iterable[Token], env: Any, exit_status: int) -> Iterable[Token]:
    """Expand every word token in place and return the tokens."""
    for token in tokens:
        if token.kind is TokenType.WORD and token.value is not None:
            token.value = expand_word(token.value, env, exit_status)
    return tokens