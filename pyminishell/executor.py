"""Running parsed commands: builtins in the shell, programs as child processes."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import tempfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import IO, TextIO, Union

from .builtins import ShellExit, is_builtin, run_builtin
from .commands import Command
from .environment import Environment, resolve_command
from .tokens import TokenType

_Upstream = Union[IO[bytes], int, None]


def format_error(subject: str, message: str, name: str | None = None) -> str:
    """Return ``minishell: `` followed by ``name``, ``subject`` and ``message``."""
    return f"minishell: {name or ''}{subject}{message}"


class RedirectionError(OSError):
    """Raised when a redirection target cannot be opened."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(format_error(target, f": {reason}"))

    def __str__(self) -> str:
        return format_error(self.target, f": {self.reason}")


@dataclass
class Streams:
    """The standard input and output a command's redirections leave it with."""

    stdin: IO[bytes] | None = None
    stdout: IO[bytes] | None = None

    def close(self) -> None:
        """Close every stream that was opened."""
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()

    def __enter__(self) -> Streams:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _create_opener(path: str, flags: int) -> int:
    return os.open(path, flags, 0o644)


def _heredoc_stream(body: str | None) -> IO[bytes]:
    stream = tempfile.TemporaryFile()
    stream.write((body or "").encode())
    stream.seek(0)
    return stream


def open_redirections(command: Command) -> Streams:
    """Open the command's redirections in order; a later one replaces an earlier one.

    Output files are created even when a later redirection replaces them.
    Raises RedirectionError, closing whatever was opened, if a file fails.
    """
    streams = Streams()
    for redirection in command.redirections:
        try:
            if redirection.kind is TokenType.REDIR_IN:
                opened = open(redirection.target, "rb")
            elif redirection.kind is TokenType.REDIR_OUT:
                opened = open(redirection.target, "wb", opener=_create_opener)
            elif redirection.kind is TokenType.APPEND:
                opened = open(redirection.target, "ab", opener=_create_opener)
            elif redirection.kind is TokenType.HEREDOC:
                opened = _heredoc_stream(redirection.heredoc)
            else:
                continue
        except OSError as exc:
            streams.close()
            raise RedirectionError(redirection.target, exc.strerror or str(exc)) from exc
        if redirection.kind in (TokenType.REDIR_IN, TokenType.HEREDOC):
            if streams.stdin is not None:
                streams.stdin.close()
            streams.stdin = opened
        else:
            if streams.stdout is not None:
                streams.stdout.close()
            streams.stdout = opened
    return streams


def _close(stream: _Upstream) -> None:
    if stream is not None and not isinstance(stream, int):
        stream.close()


def _spool(data: bytes) -> IO[bytes]:
    stream = tempfile.TemporaryFile()
    stream.write(data)
    stream.seek(0)
    return stream


def _exit_status(code: int) -> int:
    return code if code >= 0 else 128 - code


def _process_env(envp: Sequence[str]) -> dict[str, str]:
    return dict(entry.split("=", 1) for entry in envp if "=" in entry)


class Executor:
    """Runs pipelines against one environment, writing to ``out`` and ``err``."""

    def __init__(
        self,
        env: Environment,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.env = env
        self.out = sys.stdout if out is None else out
        self.err = sys.stderr if err is None else err
        self._started = False

    def run(self, commands: Iterable[Command]) -> int:
        """Run one pipeline and return the status of its last stage.

        On the first run OLDPWD is removed from the environment. A builtin
        alone or at the end of a pipeline runs in the shell and may change
        the environment; earlier builtins work on a copy. ShellExit from
        ``exit`` in such a position propagates.
        """
        stages = list(commands)
        if not self._started:
            self._started = True
            self.env.unset("OLDPWD")
        if not stages:
            return 0
        envp = self.env.to_envp()
        processes: list[subprocess.Popen[bytes]] = []
        try:
            upstream: _Upstream = None
            for command in stages[:-1]:
                upstream = self._middle_stage(command, envp, upstream, processes)
            status, last = self._last_stage(
                stages[-1], envp, upstream, len(stages) == 1, processes
            )
            if last is not None:
                if last.stdout is not None:
                    data = last.stdout.read()
                    last.stdout.close()
                    self.out.write(data.decode(errors="replace"))
                    self.out.flush()
                status = _exit_status(last.wait())
        finally:
            for process in processes:
                process.wait()
        return status

    def _report(self, message: str) -> None:
        self.err.write(message + "\n")
        self.err.flush()

    def _locate(self, command: Command, envp: Sequence[str]) -> str | None:
        if command.name is None:
            return None
        path = resolve_command(command.name, envp)
        if path is None and not is_builtin(command):
            self._report(format_error(command.name, ": command not found"))
        return path

    def _output_target(self) -> int:
        try:
            fd = self.out.fileno()
        except (AttributeError, OSError, ValueError):
            return subprocess.PIPE
        self.out.flush()
        return fd

    def _error_target(self) -> int | None:
        try:
            fd = self.err.fileno()
        except (AttributeError, OSError, ValueError):
            return None
        self.err.flush()
        return fd

    def _spawn(
        self,
        command: Command,
        path: str,
        envp: Sequence[str],
        stdin: _Upstream,
        stdout: IO[bytes] | int,
    ) -> subprocess.Popen[bytes] | None:
        try:
            return subprocess.Popen(
                command.args,
                executable=path,
                env=_process_env(envp),
                stdin=stdin,
                stdout=stdout,
                stderr=self._error_target(),
            )
        except OSError as exc:
            self._report(format_error(path, f": {exc.strerror or exc}"))
            return None

    def _captured_builtin(self, command: Command) -> str:
        scratch = Environment.from_mapping(dict(self.env.items()))
        buffer = io.StringIO()
        try:
            run_builtin(command, scratch, buffer, self.err)
        except ShellExit:
            pass
        return buffer.getvalue()

    def _builtin_here(self, command: Command, stdout: IO[bytes] | None) -> None:
        buffer = io.StringIO()
        try:
            run_builtin(command, self.env, buffer, self.err)
        finally:
            text = buffer.getvalue()
            if stdout is not None:
                stdout.write(text.encode())
            else:
                self.out.write(text)
                self.out.flush()

    def _middle_stage(
        self,
        command: Command,
        envp: Sequence[str],
        upstream: _Upstream,
        processes: list[subprocess.Popen[bytes]],
    ) -> _Upstream:
        try:
            path = self._locate(command, envp)
            try:
                streams = open_redirections(command)
            except RedirectionError as exc:
                self._report(str(exc))
                return subprocess.DEVNULL
            with streams:
                if command.name is None:
                    return subprocess.DEVNULL
                if is_builtin(command):
                    data = self._captured_builtin(command).encode()
                    if streams.stdout is not None:
                        streams.stdout.write(data)
                        return subprocess.DEVNULL
                    return _spool(data)
                if path is None:
                    return subprocess.DEVNULL
                if os.path.isdir(path):
                    self._report(format_error(path, ": is a directory"))
                    return subprocess.DEVNULL
                stdin = streams.stdin if streams.stdin is not None else upstream
                stdout = streams.stdout if streams.stdout is not None else subprocess.PIPE
                process = self._spawn(command, path, envp, stdin, stdout)
                if process is None:
                    return subprocess.DEVNULL
                processes.append(process)
                if streams.stdout is not None or process.stdout is None:
                    return subprocess.DEVNULL
                return process.stdout
        finally:
            _close(upstream)

    def _last_stage(
        self,
        command: Command,
        envp: Sequence[str],
        upstream: _Upstream,
        alone: bool,
        processes: list[subprocess.Popen[bytes]],
    ) -> tuple[int, subprocess.Popen[bytes] | None]:
        try:
            path = self._locate(command, envp)
            if command.name is not None and path is None and not is_builtin(command):
                return 127, None
            try:
                streams = open_redirections(command)
            except RedirectionError as exc:
                self._report(str(exc))
                return 1, None
            with streams:
                if command.name is None:
                    return 0, None
                if is_builtin(command):
                    self._builtin_here(command, streams.stdout)
                    return 0, None
                assert path is not None
                if os.path.isdir(path):
                    if alone:
                        self._report(format_error(command.name, ": command not found"))
                    else:
                        self._report(format_error(path, ": is a directory"))
                    return 126, None
                stdin = streams.stdin if streams.stdin is not None else upstream
                stdout = streams.stdout if streams.stdout is not None else self._output_target()
                process = self._spawn(command, path, envp, stdin, stdout)
                if process is None:
                    return 1, None
                processes.append(process)
                return 0, process
        finally:
            _close(upstream)