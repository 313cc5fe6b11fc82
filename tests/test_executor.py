import io
import os

import pytest

from pyminishell.builtins import ShellExit
from pyminishell.commands import Command, Redirection
from pyminishell.environment import Environment
from pyminishell.executor import (
    Executor,
    RedirectionError,
    format_error,
    open_redirections,
)
from pyminishell.tokens import TokenType


@pytest.fixture
def env():
    return Environment.from_mapping({"PATH": os.environ.get("PATH", "/usr/bin:/bin")})


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


def make_executor(env, streams):
    out, err = streams
    return Executor(env, out=out, err=err)


def test_format_error_without_name():
    assert format_error("ls", ": command not found") == "minishell: ls: command not found"


def test_format_error_with_name():
    assert (
        format_error("1x", ": not a valid identifier", "export: ")
        == "minishell: export: 1x: not a valid identifier"
    )


def test_open_redirections_truncates_output(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old content")
    command = Command(["cat"], [Redirection(TokenType.REDIR_OUT, str(target))])
    with open_redirections(command) as opened:
        opened.stdout.write(b"new")
        assert opened.stdin is None
    assert target.read_text() == "new"


def test_open_redirections_appends(tmp_path):
    target = tmp_path / "log.txt"
    target.write_text("first\n")
    command = Command(["cat"], [Redirection(TokenType.APPEND, str(target))])
    with open_redirections(command) as opened:
        opened.stdout.write(b"second\n")
    assert target.read_text() == "first\nsecond\n"


def test_open_redirections_missing_input_raises(tmp_path):
    missing = tmp_path / "missing"
    command = Command(["cat"], [Redirection(TokenType.REDIR_IN, str(missing))])
    with pytest.raises(RedirectionError) as info:
        open_redirections(command)
    assert info.value.target == str(missing)
    assert str(info.value).startswith(f"minishell: {missing}: ")


def test_open_redirections_heredoc_body():
    command = Command(["cat"], [Redirection(TokenType.HEREDOC, "EOF", "a\nb\n")])
    with open_redirections(command) as opened:
        assert opened.stdin.read() == b"a\nb\n"


def test_later_output_redirection_wins(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    command = Command(
        ["cat"],
        [
            Redirection(TokenType.REDIR_OUT, str(first)),
            Redirection(TokenType.REDIR_OUT, str(second)),
        ],
    )
    with open_redirections(command) as opened:
        assert opened.stdout.name == str(second)
    assert first.exists()


def test_empty_pipeline_returns_zero(env, streams):
    assert make_executor(env, streams).run([]) == 0


def test_builtin_echo_writes_to_out(env, streams):
    out, _ = streams
    status = make_executor(env, streams).run([Command(["echo", "hello"])])
    assert status == 0
    assert out.getvalue() == "hello\n"


def test_builtin_output_redirected_to_file(env, streams, tmp_path):
    out, _ = streams
    target = tmp_path / "echo.txt"
    command = Command(["echo", "hello"], [Redirection(TokenType.REDIR_OUT, str(target))])
    make_executor(env, streams).run([command])
    assert target.read_text() == "hello\n"
    assert out.getvalue() == ""


def test_unknown_command_is_reported(env, streams):
    _, err = streams
    status = make_executor(env, streams).run([Command(["nosuchcmd-xyz"])])
    assert status == 127
    assert err.getvalue() == "minishell: nosuchcmd-xyz: command not found\n"


def test_external_command_reads_heredoc(env, streams):
    out, _ = streams
    command = Command(["cat"], [Redirection(TokenType.HEREDOC, "EOF", "a\nb\n")])
    status = make_executor(env, streams).run([command])
    assert status == 0
    assert out.getvalue() == "a\nb\n"


def test_builtin_piped_into_program(env, streams):
    out, _ = streams
    make_executor(env, streams).run([Command(["echo", "hello"]), Command(["cat"])])
    assert out.getvalue() == "hello\n"


def test_pipeline_between_files(env, streams, tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("round trip\n")
    target = tmp_path / "out.txt"
    commands = [
        Command(["cat"], [Redirection(TokenType.REDIR_IN, str(source))]),
        Command(["cat"], [Redirection(TokenType.REDIR_OUT, str(target))]),
    ]
    status = make_executor(env, streams).run(commands)
    assert status == 0
    assert target.read_text() == source.read_text()


def test_builtin_before_pipe_leaves_env_alone(env, streams):
    make_executor(env, streams).run([Command(["export", "X=1"]), Command(["cat"])])
    assert "X" not in env


def test_builtin_at_end_changes_env(env, streams, tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("data\n")
    commands = [
        Command(["cat"], [Redirection(TokenType.REDIR_IN, str(source))]),
        Command(["export", "X=1"]),
    ]
    make_executor(env, streams).run(commands)
    assert env.get("X") == "1"


def test_oldpwd_removed_only_on_first_run(env, streams):
    env.export("OLDPWD=/somewhere")
    executor = make_executor(env, streams)
    executor.run([Command(["env"])])
    assert "OLDPWD" not in env
    env.export("OLDPWD=/elsewhere")
    executor.run([Command(["env"])])
    assert env.get("OLDPWD") == "/elsewhere"


def test_exit_raises_shell_exit(env, streams):
    out, _ = streams
    with pytest.raises(ShellExit) as info:
        make_executor(env, streams).run([Command(["exit"])])
    assert info.value.status == 0
    assert out.getvalue() == "exit\n"


def test_redirection_only_creates_file(env, streams, tmp_path):
    target = tmp_path / "created"
    command = Command([], [Redirection(TokenType.REDIR_OUT, str(target))])
    status = make_executor(env, streams).run([command])
    assert status == 0
    assert target.read_text() == ""


def test_failed_redirection_skips_command(env, streams, tmp_path):
    out, err = streams
    missing = tmp_path / "missing"
    command = Command(["echo", "hi"], [Redirection(TokenType.REDIR_IN, str(missing))])
    status = make_executor(env, streams).run([command])
    assert status == 1
    assert out.getvalue() == ""
    assert err.getvalue().startswith(f"minishell: {missing}: ")


def test_directory_as_command(env, streams, tmp_path):
    _, err = streams
    status = make_executor(env, streams).run([Command([str(tmp_path)])])
    assert status == 126
    assert err.getvalue() == f"minishell: {tmp_path}: command not found\n"