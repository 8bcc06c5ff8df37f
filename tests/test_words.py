import pytest

from minish.words import (
    QuoteError,
    compare_var_name,
    split_groups,
    squeeze_spaces,
    strip_quote,
)


def test_split_groups_plain_words():
    assert split_groups("echo hello world") == ["echo", "hello", "world"]


def test_split_groups_keeps_quoted_spaces():
    assert split_groups('echo "a b" c') == ["echo", '"a b"', "c"]


def test_split_groups_other_quote_inside():
    assert split_groups("\"it's\" x") == ["\"it's\"", "x"]


def test_split_groups_empty_text():
    assert split_groups("") == [""]


@pytest.mark.parametrize("text", ['echo "unclosed', "echo 'abc", "'"])
def test_split_groups_unclosed_quote(text):
    with pytest.raises(QuoteError):
        split_groups(text)


@pytest.mark.parametrize(
    "text", ["a b c", 'x "y z" w', "a  b", "trailing ", "'q q'\"r r\""]
)
def test_split_groups_join_round_trip(text):
    assert " ".join(split_groups(text)) == text


def test_squeeze_spaces_collapses_and_trims():
    assert squeeze_spaces("  echo   hi  ") == "echo hi"


def test_squeeze_spaces_keeps_quoted_runs():
    assert squeeze_spaces('echo "a   b"   c') == 'echo "a   b" c'


def test_squeeze_spaces_only_spaces():
    assert squeeze_spaces("     ") == ""


@pytest.mark.parametrize("text", ["  a   b ", "x 'y   z'  w", "plain"])
def test_squeeze_spaces_is_idempotent(text):
    once = squeeze_spaces(text)
    assert squeeze_spaces(once) == once
    assert not once.startswith(" ")
    assert not once.endswith(" ")


def test_strip_quote_removes_quote_chars():
    assert strip_quote("'abc'", 0, 5, "'") == "abc"


def test_strip_quote_without_quote():
    assert strip_quote("hello", 1, 3, None) == "ell"


def test_strip_quote_start_past_end():
    assert strip_quote("abc", 3, 2, None) == ""


def test_strip_quote_keeps_other_quote():
    assert strip_quote("\"it's\"", 0, 6, '"') == "it's"


def test_compare_var_name_equal():
    assert compare_var_name("USER", "USER") == 0


def test_compare_var_name_prefix_of_text():
    assert compare_var_name("US", "USER") < 0


def test_compare_var_name_text_shorter():
    assert compare_var_name("USER", "US") > 0


def test_compare_var_name_differing_char():
    assert compare_var_name("USER", "USXR") == ord("E") - ord("X")