import pytest

from docgrep.utils.textspan import build_line_starts, char_to_line_col, context_window, utf8_len


def test_line_starts_and_char_to_line_col() -> None:
    text = "John\nDoe\n\n"
    line_starts = build_line_starts(text)
    assert line_starts == (0, 5, 9, 10)
    assert char_to_line_col(0, line_starts) == (0, 0)
    assert char_to_line_col(5, line_starts) == (1, 0)
    assert char_to_line_col(9, line_starts) == (2, 0)
    with pytest.raises(ValueError):
        char_to_line_col(-1, line_starts)


def test_utf8_len() -> None:
    assert utf8_len("abc") == 3
    assert utf8_len("é") == 2
    assert utf8_len("日本") == 6
    assert utf8_len("a😀b", 1, 2) == 4
    assert utf8_len("a😀b", 2) == 1


def test_context_window() -> None:
    assert context_window("0123456789", 4, 6, 2) == ("23", "67")
    assert context_window("0123456789", 1, 2, 5) == ("0", "23456")
    assert context_window("0123456789", 0, 10, 3) == ("", "")
    assert context_window("abc", 1, 1, 0) == ("", "")


def test_context_window_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        context_window("abc", 0, 1, -1)
    with pytest.raises(ValueError):
        context_window("abc", 2, 1, 1)
    with pytest.raises(ValueError):
        context_window("abc", 0, 4, 1)
