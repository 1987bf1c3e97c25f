"""
cli/tui/keys.py - 키 입력 정규화

prompt_toolkit 의 KeyPress 를 "enter", "esc", "ctrl+c" 같은 이름으로 바꿉니다.
"""

from __future__ import annotations

from prompt_toolkit.keys import Keys

BACK_KEYS = frozenset({"esc", "backspace"})
QUIT_KEYS = frozenset({"q", "ctrl+c"})
MODAL_CLOSE_KEYS = frozenset({"esc", "backspace", "q", "ctrl+c"})
WARNINGS_DISMISS_KEYS = frozenset({"enter", "space", "q", "esc"})

_SPECIAL: dict[str, str] = {
    Keys.Escape.value: "esc",
    Keys.ControlC.value: "ctrl+c",
    Keys.ControlM.value: "enter",
    Keys.ControlJ.value: "enter",
    Keys.ControlI.value: "tab",
    Keys.BackTab.value: "shift+tab",
    Keys.ControlH.value: "backspace",
    Keys.Up.value: "up",
    Keys.Down.value: "down",
    Keys.Left.value: "left",
    Keys.Right.value: "right",
    Keys.PageUp.value: "pgup",
    Keys.PageDown.value: "pgdown",
    Keys.Home.value: "home",
    Keys.End.value: "end",
    Keys.Delete.value: "delete",
}

# 화면에 의미 없는 내부 키
_IGNORED = frozenset({Keys.CPRResponse.value, Keys.Vt100MouseEvent.value, Keys.Ignore.value})


def normalize_key(key: Keys | str, data: str = "") -> str:
    """KeyPress.key 를 키 이름으로 변환 (무시할 키는 빈 문자열)"""
    name = key.value if isinstance(key, Keys) else key
    if name in _IGNORED:
        return ""
    if name in _SPECIAL:
        return _SPECIAL[name]
    if name == " ":
        return "space"
    if name == "\x7f":
        return "backspace"
    if name.startswith("c-") and len(name) == 3:
        return f"ctrl+{name[2]}"
    if len(name) == 1:
        return name
    return data if len(data) == 1 and data.isprintable() else name


def is_printable(key: str) -> bool:
    """텍스트 입력으로 쓸 수 있는 키 (한 글자 또는 space)"""
    return key == "space" or (len(key) == 1 and key.isprintable())


def key_text(key: str) -> str:
    return " " if key == "space" else key
