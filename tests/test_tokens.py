import pytest

from pyminishell.tokens import (
    Token,
    TokenType,
    UnclosedQuoteError,
    is_operator,
    is_redirection,
    operator_symbol,
    tokenize,
)


def kinds(tokens):
    return [token.kind for token in tokens]


def values(tokens):
    return [token.value for token in tokens]


def test_simple_pipeline():
    tokens = tokenize("ls -l | wc")
    assert kinds(tokens) == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
    ]
    assert values(tokens) == ["ls", "-l", None, "wc"]


def test_all_operators():
    tokens = tokenize("<< >> < > |")
    assert kinds(tokens) == [
        TokenType.HEREDOC,
        TokenType.APPEND,
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
        TokenType.PIPE,
    ]


def test_operators_split_words_without_spaces():
    tokens = tokenize("a>b")
    assert kinds(tokens) == [TokenType.WORD, TokenType.REDIR_OUT, TokenType.WORD]
    assert values(tokens) == ["a", None, "b"]


def test_quoted_text_keeps_spaces_and_quotes():
    tokens = tokenize('echo "a b"')
    assert values(tokens) == ["echo", '"a b"']


def test_operators_inside_quotes_are_literal():
    tokens = tokenize("echo 'a|b>c'")
    assert kinds(tokens) == [TokenType.WORD, TokenType.WORD]
    assert tokens[1].value == "'a|b>c'"


def test_adjacent_quotes_form_one_word():
    tokens = tokenize("a\"b c\"'d'")
    assert len(tokens) == 1
    assert tokens[0].value == "a\"b c\"'d'"


@pytest.mark.parametrize("line", ["", "   ", "\t \n"])
def test_blank_lines_give_no_tokens(line):
    assert tokenize(line) == []


@pytest.mark.parametrize("line", ["echo 'abc", 'echo "abc', "a\"b'c"])
def test_unclosed_quote_raises(line):
    with pytest.raises(UnclosedQuoteError) as info:
        tokenize(line)
    assert str(info.value) == "minishell: syntax error: unclosed quote"


def test_tabs_separate_words():
    assert values(tokenize("a\tb")) == ["a", "b"]


def test_is_redirection():
    redirections = {kind for kind in TokenType if is_redirection(kind)}
    assert redirections == {
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
        TokenType.APPEND,
        TokenType.HEREDOC,
    }


def test_is_operator_adds_pipe():
    operators = {kind for kind in TokenType if is_operator(kind)}
    assert operators == {kind for kind in TokenType if is_redirection(kind)} | {
        TokenType.PIPE
    }
    assert not is_operator(TokenType.WORD)


def test_operator_symbol_round_trips_through_tokenize():
    for kind in (
        TokenType.PIPE,
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
        TokenType.APPEND,
        TokenType.HEREDOC,
    ):
        assert kinds(tokenize(operator_symbol(kind))) == [kind]
    assert operator_symbol(TokenType.WORD) == ""


def test_token_defaults():
    token = Token(TokenType.PIPE)
    assert token.value is None and token.heredoc is None