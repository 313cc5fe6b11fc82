"""Collecting the body of a here-document."""

from __future__ import annotations

from collections.abc import Callable

PROMPT = "> "


def read_heredoc(
    delimiter: str, input_fn: Callable[[str], str | None] = input
) -> str:
    """Read lines until the delimiter or end of input and return them as text.

    ``input_fn`` is called with the prompt; returning None or raising
    EOFError ends the document. Every kept line ends with a newline.
    """
    lines: list[str] = []
    while True:
        try:
            line = input_fn(PROMPT)
        except EOFError:
            break
        if line is None or line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)