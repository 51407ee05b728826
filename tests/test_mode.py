import pytest

from dotcore.mode import InvalidModeError, Mode, parse_mode


@pytest.mark.parametrize("mode", list(Mode))
def test_parse_mode_round_trip(mode):
    assert parse_mode(str(mode)) is mode


def test_parse_mode_names():
    assert parse_mode("file") is Mode.FILE
    assert parse_mode("symlink") is Mode.SYMLINK


@pytest.mark.parametrize("s", ["", "File", "dir", "symlinks"])
def test_parse_mode_invalid(s):
    with pytest.raises(InvalidModeError) as excinfo:
        parse_mode(s)
    assert str(excinfo.value) == "invalid mode: " + s
    assert excinfo.value.value == s


def test_invalid_mode_error_is_value_error():
    with pytest.raises(ValueError):
        parse_mode("bogus")