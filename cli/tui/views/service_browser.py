"""
cli/tui/views/service_browser.py - 서비스 목록 화면

등록된 서비스를 카테고리 순서로 나열하고, 선택하면 기본 리소스 목록으로 이동합니다.
"/" 로 서비스명/표시명/별칭 필터를 입력합니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rich.console import Group
from rich.table import Table
from rich.text import Text

from cli.i18n import get_lang, t

from ..cmd import Cmd, emit
from ..messages import FilterMsg, KeyMsg, NavigateMsg
from ..view import TableCursor, TextInput, TUIContext, View


@dataclass(frozen=True)
class ServiceRow:
    category: str
    service: str
    display_name: str
    aliases: tuple[str, ...]
    resources: tuple[str, ...]

    def matches(self, text: str) -> bool:
        needle = text.lower()
        return (
            needle in self.service.lower()
            or needle in self.display_name.lower()
            or any(needle in a.lower() for a in self.aliases)
        )


class ServiceBrowser(View):
    """서비스 목록"""

    def __init__(self, ctx: TUIContext):
        self.ctx = ctx
        self.rows: list[ServiceRow] = []
        self.filtered: list[ServiceRow] = []
        self.filter = TextInput(prompt="/", limit=40)
        self.cursor = TableCursor()

    @property
    def title(self) -> str:
        return t("tui.services_title")

    def init(self) -> list[Cmd]:
        registry = self.ctx.registry
        ko = get_lang() == "ko"
        self.rows = [
            ServiceRow(
                category=category.name_ko if ko else category.name,
                service=service,
                display_name=registry.display_name(service),
                aliases=tuple(registry.aliases_for_service(service)),
                resources=tuple(registry.list_resources(service)),
            )
            for category in registry.list_services_by_category()
            for service in category.services
        ]
        self._apply_filter()
        return []

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self.cursor.visible_rows = max(1, height - 4)

    def has_active_input(self) -> bool:
        return self.filter.active

    def selected(self) -> ServiceRow | None:
        if not self.filtered:
            return None
        return self.filtered[self.cursor.cursor]

    def _apply_filter(self) -> None:
        text = self.filter.value
        self.filtered = [r for r in self.rows if r.matches(text)] if text else list(self.rows)
        self.cursor.set(self.cursor.cursor, len(self.filtered))

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, FilterMsg):
            self.filter.value = msg.text
            self._apply_filter()
            return []
        if not isinstance(msg, KeyMsg):
            return []

        key = msg.key
        if self.filter.active:
            if key == "enter":
                self.filter.blur()
            elif key == "esc":
                self.filter.blur()
                self.filter.clear()
                self._apply_filter()
            elif self.filter.handle_key(key):
                self._apply_filter()
            return []

        if key == "/":
            self.filter.focus()
            return []
        if key == "c":
            self.filter.clear()
            self._apply_filter()
            return []
        if key in ("enter", "l", "right"):
            row = self.selected()
            if row is None or not row.resources:
                return []
            from .resource_browser import ResourceBrowser

            view = ResourceBrowser(self.ctx, row.service)
            return [emit(NavigateMsg(view))]
        self.cursor.handle_key(key, len(self.filtered))
        return []

    def render(self) -> Group:
        table = Table(expand=True, box=None, header_style="bold cyan", pad_edge=False)
        table.add_column("CATEGORY", width=20, no_wrap=True)
        table.add_column("SERVICE", width=18, no_wrap=True)
        table.add_column("NAME", ratio=1, no_wrap=True)
        table.add_column("RESOURCES", ratio=1, no_wrap=True)
        table.add_column("ALIASES", width=16, no_wrap=True)

        for index in self.cursor.window(len(self.filtered)):
            row = self.filtered[index]
            style = "reverse" if index == self.cursor.cursor else ""
            table.add_row(
                row.category,
                row.service,
                row.display_name,
                ", ".join(row.resources),
                ", ".join(row.aliases),
                style=style,
            )

        header = Text(f"{self.title} ({len(self.filtered)}/{len(self.rows)})", style="bold")
        parts: list[Any] = [header]
        if self.filter.active or self.filter.value:
            parts.append(Text(self.filter.render(), style="yellow"))
        parts.append(table)
        if not self.filtered:
            parts.append(Text(t("tui.no_matches"), style="dim"))
        return Group(*parts)

    def status_line(self) -> str:
        return t("tui.services_hint")
