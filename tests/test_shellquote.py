import pytest

from dotcore.shellquote import maybe_shell_quote, shell_quote_args


@pytest.mark.parametrize(
    ("s", "expected"),
    [
        (r"", r"''"),
        (r"'", r"\'"),
        (r"''", r"\'\'"),
        (r"'a'", r"\''a'\'"),
        ("\\", r"'\\'"),
        (r"\a", r"'\\a'"),
        (r"$a", r"'$a'"),
        (r"a", r"a"),
        (r"a/b", r"a/b"),
        (r"a b", r"'a b'"),
        (r"--arg", r"--arg"),
        (r"--arg=value", r"--arg=value"),
    ],
)
def test_maybe_shell_quote(s, expected):
    assert maybe_shell_quote(s) == expected


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        ([], ""),
        (["foo"], "foo"),
        (["foo", "bar baz"], "foo 'bar baz'"),
    ],
)
def test_shell_quote_args(args, expected):
    assert shell_quote_args(args) == expected