"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import TextIO

from .commands import Command
from .environment import Environment, InvalidIdentifierError

BUILTIN_NAMES = frozenset({"echo", "pwd", "export", "unset", "env", "exit"})


class ShellExit(Exception):
    """Raised by the exit builtin; ``status`` is the shell's exit status."""

    def __init__(self, status: int = 0) -> None:
        self.status = status
        super().__init__(f"exit {status}")


def is_builtin(command: Command) -> bool:
    """Return True if the command is run by the shell itself."""
    return command.name in BUILTIN_NAMES


def echo(args: Sequence[str], out: TextIO) -> None:
    """Write the first argument and a newline; with -n, the second without one."""
    first = args[0] if args else None
    if first == "-n":
        if len(args) > 1:
            out.write(args[1])
        return
    if first is not None:
        out.write(first)
    out.write("\n")


def env_builtin(env: Environment, out: TextIO) -> None:
    """Write NAME=value for every variable that has a value."""
    for key, value in env.items():
        if value is not None:
            out.write(f"{key}={value}\n")


def export(env: Environment, args: Sequence[str], out: TextIO, err: TextIO) -> None:
    """List the variables, or apply each argument; bad names are reported and skipped."""
    if not args:
        for key, value in env.items():
            if value is None:
                out.write(f"declare -x {key}\n")
            else:
                out.write(f'declare -x {key}="{value}"\n')
        return
    for assignment in args:
        try:
            env.export(assignment)
        except InvalidIdentifierError as exc:
            err.write(f"{exc}\n")


def pwd(out: TextIO, err: TextIO) -> None:
    """Write the current directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        err.write(f"minishell: pwd: {exc.strerror or exc}\n")
        return
    out.write(f"{cwd}\n")


def unset(env: Environment, args: Sequence[str], err: TextIO) -> None:
    """Remove each named variable; bad names are reported and skipped."""
    for key in args:
        try:
            env.unset(key)
        except InvalidIdentifierError as exc:
            err.write(f"{exc}\n")


def exit_shell(out: TextIO) -> None:
    """Announce the exit and raise ShellExit with status 0."""
    out.write("exit\n")
    raise ShellExit(0)


def run_builtin(command: Command, env: Environment, out: TextIO, err: TextIO) -> None:
    """Run a builtin command; raise ValueError if it is not one."""
    args = command.args[1:]
    handlers: dict[str, Callable[[], None]] = {
        "echo": lambda: echo(args, out),
        "pwd": lambda: pwd(out, err),
        "export": lambda: export(env, args, out, err),
        "unset": lambda: unset(env, args, err),
        "env": lambda: env_builtin(env, out),
        "exit": lambda: exit_shell(out),
    }
    handler = handlers.get(command.name or "")
    if handler is None:
        raise ValueError(f"{command.name!r} is not a builtin")
    handler()