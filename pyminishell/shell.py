"""The interactive read-parse-run loop and the command entry point."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable
from typing import TextIO

from .builtins import ShellExit
from .commands import build_commands
from .environment import Environment
from .executor import Executor
from .expand import expand_tokens
from .heredoc import read_heredoc
from .syntax import ShellSyntaxError, validate_syntax
from .tokens import UnclosedQuoteError, tokenize

PROMPT = "minishell> "
EOF_BANNER = "\033[1A\033[2Kminishell> exit\n"
USAGE = "Usage: ./minishell\n"


class Shell:
    """Reads lines, parses them into pipelines and runs them against one environment."""

    def __init__(
        self,
        env: Environment | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        input_fn: Callable[[str], str | None] | None = None,
    ) -> None:
        self.env = Environment.from_mapping(os.environ) if env is None else env
        self.out = sys.stdout if out is None else out
        self.err = sys.stderr if err is None else err
        self.input_fn = input if input_fn is None else input_fn
        self.exit_status = 0
        self._executor = Executor(self.env, self.out, self.err)

    def _read_heredoc(self, delimiter: str) -> str:
        return read_heredoc(delimiter, self.input_fn)

    def _report(self, message: str) -> None:
        self.err.write(message + "\n")
        self.err.flush()

    def run_line(self, line: str) -> int:
        """Parse and run one input line; return the current exit status.

        Syntax errors are reported on ``err`` and nothing is run.
        ShellExit raised by ``exit`` propagates.
        """
        try:
            tokens = tokenize(line)
        except UnclosedQuoteError as exc:
            self._report(str(exc))
            return self.exit_status
        expand_tokens(tokens, self.env, self.exit_status)
        if not tokens:
            return self.exit_status
        try:
            validate_syntax(tokens, self._read_heredoc)
        except ShellSyntaxError as exc:
            self._report(str(exc))
            return self.exit_status
        self.exit_status = self._executor.run(build_commands(tokens))
        return self.exit_status

    def loop(self) -> int:
        """Prompt and run lines until end of input or ``exit``; return the status."""
        while True:
            try:
                line = self.input_fn(PROMPT)
            except EOFError:
                line = None
            except KeyboardInterrupt:
                self.out.write("\n")
                self.out.flush()
                continue
            if line is None:
                self.out.write(EOF_BANNER)
                self.out.flush()
                return self.exit_status
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status
            except KeyboardInterrupt:
                self.out.write("\n")
                self.out.flush()


def _setup_signals() -> None:
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def _enable_line_editing() -> None:
    try:
        import readline  # noqa: F401  (gives input() editing and history)
    except ImportError:
        pass


def main(argv: list[str] | None = None) -> int:
    """Start the interactive shell; extra arguments are a usage error."""
    args = sys.argv[1:] if argv is None else argv
    if args:
        sys.stderr.write(USAGE)
        return 1
    env = Environment.from_mapping(os.environ)
    env.bump_shell_level()
    _setup_signals()
    _enable_line_editing()
    return Shell(env).loop()


if __name__ == "__main__":
    sys.exit(main())