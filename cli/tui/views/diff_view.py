"""
cli/tui/views/diff_view.py - 두 리소스 비교 화면

두 리소스의 원본 데이터(raw)를 키 정렬 JSON 으로 만들어 unified diff 로 보여줍니다.
"""

from __future__ import annotations

import difflib
import json
from typing import Any

from rich.console import Group
from rich.text import Text

from cli.i18n import t
from core.dao.types import Resource

from ..cmd import Cmd
from ..messages import KeyMsg
from ..view import View


def _to_lines(resource: Resource) -> list[str]:
    data = resource.raw()
    if data is None:
        data = {"Id": resource.get_id(), "Name": resource.get_name(), "Arn": resource.get_arn(), "Tags": resource.get_tags()}
    return json.dumps(data, indent=2, sort_keys=True, default=str, ensure_ascii=False).splitlines()


def diff_lines(left: Resource, right: Resource) -> list[str]:
    """unified diff 줄 목록 (같으면 빈 리스트)"""
    return list(
        difflib.unified_diff(
            _to_lines(left),
            _to_lines(right),
            fromfile=left.get_name(),
            tofile=right.get_name(),
            lineterm="",
        )
    )


def _style(line: str) -> str:
    if line.startswith(("+++", "---")):
        return "bold"
    if line.startswith("@@"):
        return "cyan"
    if line.startswith("+"):
        return "green"
    if line.startswith("-"):
        return "red"
    return ""


class DiffView(View):
    def __init__(self, left: Resource, right: Resource, kind: str = ""):
        self.left = left
        self.right = right
        self.kind = kind
        self.lines = diff_lines(left, right)
        self.offset = 0

    def quits_to_back(self) -> bool:
        return True

    @property
    def title(self) -> str:
        return f"{self.left.get_name()} ↔ {self.right.get_name()}"

    def init(self) -> list[Cmd]:
        return []

    def _page(self) -> int:
        return max(1, self.height - 1)

    def update(self, msg: Any) -> list[Cmd]:
        if not isinstance(msg, KeyMsg):
            return []
        max_offset = max(0, len(self.lines) - self._page())
        moves = {"j": 1, "down": 1, "k": -1, "up": -1, "pgdown": self._page(), "pgup": -self._page()}
        if msg.key in moves:
            self.offset = max(0, min(self.offset + moves[msg.key], max_offset))
        elif msg.key in ("g", "home"):
            self.offset = 0
        elif msg.key in ("G", "end"):
            self.offset = max_offset
        return []

    def render(self) -> Group:
        header = Text(f"{self.kind}: " if self.kind else "", style="bold cyan")
        header.append(self.title, style="bold")
        if not self.lines:
            return Group(header, Text(t("tui.no_differences"), style="green"))
        body = Text()
        for line in self.lines[self.offset : self.offset + self._page() - 1]:
            body.append(line + "\n", style=_style(line))
        return Group(header, body)

    def status_line(self) -> str:
        return t("tui.scroll_hint")
