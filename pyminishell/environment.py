"""The shell's variable table and command lookup along PATH."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping, Sequence


class InvalidIdentifierError(ValueError):
    """Raised when export or unset is given a name that is not allowed."""

    def __init__(self, command: str, text: str) -> None:
        self.command = command
        self.text = text
        super().__init__(f"minishell: {command}: {text}: not a valid identifier")


def _key_part(text: str) -> str:
    return text.split("=", 1)[0]


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def is_valid_export_identifier(text: str) -> bool:
    """Return True if the name before any '=' may be exported.

    The name starts with a letter or '_', holds letters, digits and '_',
    and may hold one '+' only when an '=' follows somewhere.
    """
    key = _key_part(text)
    if not key or not (_is_alpha(key[0]) or key[0] == "_"):
        return False
    if any(not (_is_alnum(c) or c in "_+") for c in key):
        return False
    pluses = key.count("+")
    if pluses > 1:
        return False
    if pluses == 1 and "=" not in text:
        return False
    return True


def is_valid_unset_identifier(text: str) -> bool:
    """Return True if the name may be given to unset."""
    return is_valid_export_identifier(text) and "+" not in text and "=" not in text


def _atoi(text: str) -> int:
    stripped = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not ("0" <= char <= "9"):
            break
        digits += char
    return sign * int(digits) if digits else 0


class Environment:
    """Ordered shell variables; a variable without a value is exported only by name."""

    def __init__(self) -> None:
        self._vars: dict[str, str | None] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Environment:
        """Build an environment holding every pair of ``mapping`` in order."""
        env = cls()
        for key, value in mapping.items():
            env._vars[key] = value
        return env

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None if unset or without a value."""
        return self._vars.get(key)

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield (key, value) pairs in order; value is None for bare names."""
        yield from self._vars.items()

    def export(self, assignment: str) -> None:
        """Apply one export argument: NAME, NAME=value or NAME+=value."""
        if not is_valid_export_identifier(assignment):
            eq = assignment.find("=")
            shown = assignment if eq < 0 else assignment[: eq + 1]
            raise InvalidIdentifierError("export", shown)
        key = _key_part(assignment)
        if key.endswith("+"):
            self._append(assignment)
        elif key in self._vars:
            self.change_value(assignment)
        elif "=" not in assignment:
            self._vars[assignment] = None
        else:
            self._vars[key] = assignment.split("=", 1)[1]

    def _append(self, assignment: str) -> None:
        key_plus, value = assignment.split("=", 1)
        key = key_plus[:-1]
        if key in self._vars:
            current = self._vars[key]
            self._vars[key] = value if current is None else current + value
        else:
            self._vars[key] = ""

    def change_value(self, assignment: str) -> None:
        """Set an existing variable from NAME=value; unknown names are ignored."""
        if "=" not in assignment:
            return
        key, value = assignment.split("=", 1)
        if key in self._vars:
            self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove ``key``; an empty environment is left alone."""
        if not self._vars:
            return
        if not is_valid_unset_identifier(key):
            raise InvalidIdentifierError("unset", key)
        self._vars.pop(key, None)

    def to_envp(self) -> list[str]:
        """Return NAME=value strings for every variable that has a value."""
        return [f"{k}={v}" for k, v in self._vars.items() if v is not None]

    def bump_shell_level(self) -> None:
        """Raise SHLVL by one if it is set, restarting above 999."""
        current = self.get("SHLVL")
        level = _atoi(current) if current is not None else 0
        if level < 0:
            level = 0
        if level > 999:
            level = 1
        self.change_value(f"SHLVL={level + 1}")


def resolve_command(name: str | None, envp: Sequence[str]) -> str | None:
    """Find an executable for ``name`` along the PATH entry of ``envp``.

    A name holding '/' is taken as it is, but only when PATH is set and
    not empty. Returns None when nothing executable is found.
    """
    path_entry = next((entry for entry in envp if entry.startswith("PATH=")), None)
    if path_entry is None or name is None:
        return None
    directories = [d for d in path_entry.split("=", 1)[1].split(":") if d]
    for directory in directories:
        candidate = name if "/" in name else f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None