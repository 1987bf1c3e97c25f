"""
tests/cli/tui/test_tui_keys.py - 키 입력 정규화 테스트
"""

import pytest
from prompt_toolkit.keys import Keys

from cli.tui.keys import is_printable, key_text, normalize_key


class TestNormalizeKey:
    """normalize_key 테스트"""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            (Keys.Escape, "esc"),
            (Keys.ControlC, "ctrl+c"),
            (Keys.ControlM, "enter"),
            (Keys.ControlI, "tab"),
            (Keys.BackTab, "shift+tab"),
            (Keys.ControlH, "backspace"),
            (Keys.Up, "up"),
            (Keys.PageDown, "pgdown"),
            (Keys.ControlR, "ctrl+r"),
            (Keys.ControlU, "ctrl+u"),
        ],
    )
    def test_special(self, key, expected):
        """특수 키"""
        assert normalize_key(key) == expected

    def test_characters(self):
        """일반 문자와 space / DEL"""
        assert normalize_key("j") == "j"
        assert normalize_key("G") == "G"
        assert normalize_key(" ") == "space"
        assert normalize_key("\x7f") == "backspace"

    def test_ignored(self):
        """내부 키는 무시"""
        assert normalize_key(Keys.CPRResponse) == ""
        assert normalize_key(Keys.Ignore) == ""

    def test_unknown_uses_data(self):
        """알 수 없는 이름은 출력 가능한 데이터 한 글자"""
        assert normalize_key("<weird>", "가") == "가"
        assert normalize_key("<weird>", "") == "<weird>"


class TestPrintable:
    """텍스트 입력 판정 테스트"""

    def test_is_printable(self):
        """한 글자와 space 만"""
        assert is_printable("a")
        assert is_printable("space")
        assert not is_printable("enter")
        assert not is_printable("\x01")

    def test_key_text(self):
        """space 는 공백 문자"""
        assert key_text("space") == " "
        assert key_text("x") == "x"
