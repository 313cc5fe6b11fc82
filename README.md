# pyminishell

A small interactive command shell. It reads a line, splits it into words and
operators, expands variables, checks the syntax and then runs the pipeline.
Built-in commands run inside the shell. Other commands are found through
`PATH` and run as child processes.

## Features

- Words may be quoted with single or double quotes. An unclosed quote is
  reported as `minishell: syntax error: unclosed quote`.
- `$NAME` expands to the value of a variable, or to nothing if it is unset.
  `$?` expands to the exit status of the last pipeline. Nothing is expanded
  inside single quotes. After expansion, a word is split again on spaces.
- Pipes (`|`) and the redirections `<`, `>`, `>>` and `<<` (here-document).
  When a command has several input or output redirections, the last one wins.
  Every output file named along the way is still created.
- Syntax errors are reported like
  ``minishell: syntax error near unexpected token `|'``. Nothing on that line
  is run.
- Built-in commands:
  - `echo ARG` prints its first argument followed by a newline.
    `echo -n ARG` prints the argument with no newline.
  - `pwd` prints the current directory.
  - `export` with no arguments lists every variable as `declare -x NAME="value"`.
    `export NAME`, `export NAME=value` and `export NAME+=value` add a variable,
    set one, or append to one.
  - `unset NAME` removes a variable.
  - `env` prints `NAME=value` for every variable that has a value.
  - `exit` prints `exit` and ends the shell with status 0.
- A command that cannot be found prints `minishell: NAME: command not found`,
  and the status becomes 127.
- When the shell starts, `SHLVL` goes up by one if it is set. If the value is
  above 999, it starts again at 1. `OLDPWD` is removed before the first
  command runs.

## Installation

```
pip install .
```

## Usage

```
pyminishell
```

The prompt is `minishell> `. For example:

```
minishell> echo hello
hello
minishell> export GREETING=hi
minishell> echo $GREETING
hi
minishell> ls | wc -l > count.txt
minishell> cat << END
> first line
> END
first line
minishell> exit
exit
```

Ctrl-D at the prompt ends the session, and so does `exit`. Ctrl-C drops the
current line and shows a new prompt. The shell takes no arguments. If it is
given any, it prints `Usage: ./minishell` and exits with status 1.

## Using it from Python

`pyminishell.shell.Shell` runs one line with `Shell.run_line(line)`, which
returns the exit status. It runs the whole interactive loop with
`Shell.loop()`. It takes an `Environment`, output and error streams, and an
input function (default `input`) that is also used to read here-documents.
`pyminishell.shell.main` is the command's entry point.

The parts it is built from can also be used on their own:

- `pyminishell.tokens.tokenize(line)` returns a list of `Token`s and raises
  `UnclosedQuoteError`.
- `pyminishell.expand.expand_tokens(tokens, env, exit_status)` expands words
  in place, and `expand_word` expands a single word.
- `pyminishell.syntax.validate_syntax(tokens, heredoc)` raises
  `ShellSyntaxError`. It collects here-document bodies through `heredoc`,
  which defaults to `pyminishell.heredoc.read_heredoc`.
- `pyminishell.commands.build_commands(tokens)` returns `Command` objects,
  each holding `args` and `redirections`.
- `pyminishell.environment.Environment` holds the variables in order. It has
  `export`, `unset`, `change_value`, `to_envp` and `bump_shell_level`.
  `resolve_command(name, envp)` searches `PATH`.
- `pyminishell.builtins.run_builtin(command, env, out, err)` runs a builtin.
  The `exit` builtin raises `ShellExit`.
- `pyminishell.executor.Executor(env, out, err).run(commands)` runs a pipeline
  and returns the status of its last stage. `open_redirections(command)`
  raises `RedirectionError` when a file cannot be opened.

## What it does not do

- There is no `cd` builtin, so the shell cannot change its own working
  directory.
- `exit` takes no status argument and always ends with status 0. Builtins
  always leave the status at 0.
- `echo` prints only its first argument (or the second, after `-n`).
- There is no globbing, no `;`, `&&` or `||`, no background jobs, and no
  history saved to a file.

## Running the tests

```
pip install ".[test]"
pytest
```