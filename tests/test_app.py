import pytest
from blessed.keyboard import Keystroke

from gommits.app import main, translate_key
from gommits.state import KeyMsg, KeyType


@pytest.mark.parametrize(
    "name, expected",
    [
        ("KEY_ENTER", KeyType.ENTER),
        ("KEY_ESCAPE", KeyType.ESC),
        ("KEY_TAB", KeyType.TAB),
        ("KEY_BACKSPACE", KeyType.BACKSPACE),
        ("KEY_DELETE", KeyType.BACKSPACE),
    ],
)
def test_named_keys(name, expected):
    assert translate_key(Keystroke("\x1b", code=1, name=name)) == KeyMsg(expected)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("\r", KeyType.ENTER),
        ("\n", KeyType.ENTER),
        ("\t", KeyType.TAB),
        ("\x7f", KeyType.BACKSPACE),
        ("\x1b", KeyType.ESC),
        ("\x03", KeyType.CTRL_C),
    ],
)
def test_raw_keys(raw, expected):
    assert translate_key(Keystroke(raw)) == KeyMsg(expected)


def test_alt_tab():
    assert translate_key(Keystroke("\x1b\t")) == KeyMsg(KeyType.TAB, alt=True)


def test_printable_text_becomes_runes():
    assert translate_key(Keystroke("p")) == KeyMsg(KeyType.RUNES, runes="p")
    assert translate_key("b") == KeyMsg(KeyType.RUNES, runes="b")


def test_empty_and_unknown_keys_are_ignored():
    assert translate_key(Keystroke("")) is None
    assert translate_key(Keystroke("\x1b[A", code=1, name="KEY_UP")) is None
    assert translate_key(Keystroke("\x01")) is None


def test_main_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    assert "gommits" in capsys.readouterr().out


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2