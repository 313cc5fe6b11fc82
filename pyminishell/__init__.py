"""An interactive command shell with pipes, redirections, here-documents, variable expansion and built-ins."""

__version__ = "0.1.0"
__all__ = [
    "builtins",
    "commands",
    "environment",
    "executor",
    "expand",
    "heredoc",
    "shell",
    "syntax",
    "tokens",
]