"""
cli/tui/views/confirm.py - 확인 모달

y 를 누르면 모달을 닫고 on_confirm 이 돌려준 Cmd 를 실행합니다.
n 은 취소이며, esc/q 등 닫기 키는 내비게이션 컨트롤러가 처리합니다.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rich.text import Text

from cli.i18n import t

from ..cmd import Cmd, emit
from ..messages import HideModalMsg, KeyMsg
from ..view import View


class ConfirmView(View):
    def __init__(self, prompt: str, on_confirm: Callable[[], list[Cmd]]):
        self.prompt = prompt
        self.on_confirm = on_confirm

    @property
    def title(self) -> str:
        return t("tui.confirm_title")

    def init(self) -> list[Cmd]:
        return []

    def update(self, msg: Any) -> list[Cmd]:
        if not isinstance(msg, KeyMsg):
            return []
        if msg.key in ("y", "Y"):
            return [emit(HideModalMsg()), *self.on_confirm()]
        if msg.key in ("n", "N"):
            return [emit(HideModalMsg())]
        return []

    def render(self) -> Text:
        text = Text(self.prompt + "\n\n", style="bold")
        text.append(t("tui.confirm_hint"), style="dim")
        return text
