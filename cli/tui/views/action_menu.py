"""
cli/tui/views/action_menu.py - 리소스 작업 메뉴 모달

선택한 리소스에 실행할 수 있는 작업을 보여줍니다.
j/k 로 이동하고 enter 또는 작업 단축키로 실행합니다.

확인 수준:
    NONE        바로 실행
    SIMPLE      y 실행 · n 취소
    DANGEROUS   리소스 식별자(긴 경우 끝 6글자)를 입력하고 enter
                입력 중에는 닫기 키도 입력으로 전달되며, esc 는 입력만 취소합니다.

실행은 on_run 콜백이 돌려준 Cmd 로 위임하고 모달은 닫습니다.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rich.console import Group
from rich.text import Text

from cli.i18n import t
from core.actions import Action, ConfirmLevel, confirm_matches, confirm_suffix
from core.dao.types import Resource

from ..cmd import Cmd, emit
from ..messages import HideModalMsg, KeyMsg
from ..view import TableCursor, TextInput, View


class ActionMenu(View):
    def __init__(self, resource: Resource, actions: list[Action], on_run: Callable[[Action], list[Cmd]]):
        self.resource = resource
        self.actions = list(actions)
        self.on_run = on_run
        self.cursor = TableCursor()
        self.pending: Action | None = None
        self.token = ""
        self.token_input = TextInput(prompt="> ", limit=64)

    @property
    def title(self) -> str:
        return t("tui.actions_title", name=self.resource.get_name())

    def init(self) -> list[Cmd]:
        return []

    def has_active_input(self) -> bool:
        return self.token_input.active

    def select(self, action: Action) -> list[Cmd]:
        if action.confirm is ConfirmLevel.NONE:
            return self._run(action)
        self.pending = action
        if action.confirm is ConfirmLevel.DANGEROUS:
            self.token = action.token_for(self.resource)
            self.token_input.clear()
            self.token_input.focus()
        return []

    def cancel(self) -> None:
        self.pending = None
        self.token = ""
        self.token_input.blur()
        self.token_input.clear()

    def _run(self, action: Action) -> list[Cmd]:
        self.cancel()
        return [emit(HideModalMsg()), *self.on_run(action)]

    def update(self, msg: Any) -> list[Cmd]:
        if not isinstance(msg, KeyMsg):
            return []
        key = msg.key

        if self.pending is not None and self.token_input.active:
            if key == "enter":
                if confirm_matches(self.token, self.token_input.value):
                    return self._run(self.pending)
                return []
            if key == "esc":
                self.cancel()
                return []
            self.token_input.handle_key(key)
            return []

        if self.pending is not None:
            if key in ("y", "Y"):
                return self._run(self.pending)
            if key in ("n", "N"):
                self.cancel()
            return []

        if key == "enter":
            if not self.actions:
                return []
            return self.select(self.actions[self.cursor.cursor])
        if self.cursor.handle_key(key, len(self.actions)):
            return []
        for index, action in enumerate(self.actions):
            if key == action.shortcut:
                self.cursor.set(index, len(self.actions))
                return self.select(action)
        return []

    def render(self) -> Group:
        if not self.actions:
            return Group(Text(t("tui.no_actions"), style="dim"))

        body = Text()
        for index, action in enumerate(self.actions):
            style = "reverse" if index == self.cursor.cursor else ""
            body.append(f"[{action.shortcut}] ", style="cyan")
            body.append(f"{action.name}\n", style=style)
        parts: list[Any] = [body]

        if self.pending is not None and self.pending.confirm is ConfirmLevel.DANGEROUS:
            suffix = confirm_suffix(self.token)
            parts.append(Text(t("tui.action_danger", action=self.pending.name, token=self.token), style="bold red"))
            parts.append(Text(t("tui.action_type_confirm", suffix=suffix)))
            matched = confirm_matches(self.token, self.token_input.value)
            parts.append(Text(self.token_input.render(), style="green" if matched else "yellow"))
        elif self.pending is not None:
            prompt = t("tui.action_confirm", action=self.pending.name, name=self.resource.get_id())
            parts.append(Text(prompt, style="bold"))
            parts.append(Text(t("tui.confirm_hint"), style="dim"))
        else:
            parts.append(Text(t("tui.actions_hint"), style="dim"))
        return Group(*parts)

    def status_line(self) -> str:
        if self.pending is None:
            return t("tui.actions_hint")
        if self.token_input.active:
            return t("tui.action_type_confirm", suffix=confirm_suffix(self.token))
        return t("tui.confirm_hint")
