"""
cli/tui/views/selector.py - 리전/프로파일 선택 모달

항목 목록을 비동기로 불러와 다중 선택을 받습니다.
space 로 선택을 토글하고 enter 로 확정합니다(선택이 없으면 커서 항목).
"/" 로 필터를 입력하며, 필터 입력 중에는 닫기 키가 필터로 전달됩니다.

확정 결과는 RegionsSelectedMsg / ProfilesSelectedMsg 로 전달되고,
내비게이션 컨트롤러가 모달 스택을 비운 뒤 반영합니다.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

from rich.console import Group
from rich.text import Text

from cli.i18n import t
from core.auth.session import list_profiles
from core.context import ENV_ONLY_ID, SDK_DEFAULT_ID, ProfileSelection
from core.exceptions import format_error_for_user
from core.region.availability import get_available_regions
from core.region.data import REGION_NAMES

from ..cmd import Cmd, emit
from ..messages import ItemsLoaded, KeyMsg, ProfilesSelectedMsg, RegionsSelectedMsg
from ..view import TableCursor, TextInput, TUIContext, View

logger = logging.getLogger(__name__)


class MultiSelector(View):
    """다중 선택 목록 베이스

    하위 클래스는 load_items() (워커 스레드에서 실행), label(), confirm() 을 구현합니다.
    """

    def __init__(self, ctx: TUIContext, selected: list[str] | None = None):
        self.ctx = ctx
        self.items: list[str] = []
        self.selected: list[str] = list(selected or [])
        self.filter = TextInput(prompt="/", limit=40)
        self.cursor = TableCursor()
        self.loading = False
        self.error: Exception | None = None

    @abstractmethod
    def load_items(self) -> list[str]: ...

    @abstractmethod
    def confirm(self, chosen: list[str]) -> Any: ...

    def label(self, item: str) -> str:
        return item

    def init(self) -> list[Cmd]:
        self.loading = True
        load = self.load_items

        def _load() -> ItemsLoaded:
            try:
                return ItemsLoaded(tuple(load()))
            except Exception as e:
                logger.warning(f"선택 항목 조회 실패 [{type(self).__name__}]: {e}")
                return ItemsLoaded(error=e)

        return [self.result(_load)]

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self.cursor.visible_rows = max(3, min(15, height - 8))

    def has_active_input(self) -> bool:
        return self.filter.active

    def visible_items(self) -> list[str]:
        text = self.filter.value.lower()
        if not text:
            return self.items
        return [i for i in self.items if text in i.lower() or text in self.label(i).lower()]

    def toggle(self, item: str) -> None:
        if item in self.selected:
            self.selected.remove(item)
        else:
            self.selected.append(item)

    def chosen(self) -> list[str]:
        """확정할 항목 (목록 순서 유지)"""
        visible = self.visible_items()
        if self.selected:
            order = {item: index for index, item in enumerate(self.items)}
            return sorted(self.selected, key=lambda i: order.get(i, len(order)))
        if visible:
            return [visible[self.cursor.cursor]]
        return []

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, ItemsLoaded):
            self.loading = False
            self.error = msg.error
            self.items = list(msg.items)
            # 목록에 없는 기존 선택은 그대로 유지 (확정 시 뒤에 붙음)
            self.cursor.set(0, len(self.items))
            return []
        if not isinstance(msg, KeyMsg):
            return []

        key = msg.key
        visible = self.visible_items()
        if self.filter.active:
            if key in ("enter", "esc"):
                self.filter.blur()
                if key == "esc":
                    self.filter.clear()
            elif self.filter.handle_key(key):
                self.cursor.set(0, len(self.visible_items()))
            return []

        if key == "/":
            self.filter.focus()
            return []
        if key == "space":
            if visible:
                self.toggle(visible[self.cursor.cursor])
            return []
        if key == "a":
            self.selected = [] if set(visible) <= set(self.selected) else list(dict.fromkeys(self.selected + visible))
            return []
        if key == "enter":
            chosen = self.chosen()
            if not chosen:
                return []
            return [emit(self.confirm(chosen))]
        self.cursor.handle_key(key, len(visible))
        return []

    def render(self) -> Group:
        parts: list[Any] = []
        if self.filter.active or self.filter.value:
            parts.append(Text(self.filter.render(), style="yellow"))
        if self.loading:
            parts.append(Text(t("tui.loading"), style="yellow"))
        if self.error is not None:
            parts.append(Text(format_error_for_user(self.error), style="red"))

        visible = self.visible_items()
        body = Text()
        for index in self.cursor.window(len(visible)):
            item = visible[index]
            mark = "[x]" if item in self.selected else "[ ]"
            style = "reverse" if index == self.cursor.cursor else ""
            body.append(f"{mark} {self.label(item)}\n", style=style)
        parts.append(body)
        parts.append(Text(t("tui.selector_hint", count=len(self.selected)), style="dim"))
        return Group(*parts)


class RegionSelector(MultiSelector):
    def __init__(self, ctx: TUIContext):
        super().__init__(ctx, ctx.app.get_regions())

    @property
    def title(self) -> str:
        return t("tui.select_regions")

    def load_items(self) -> list[str]:
        return get_available_regions(self.ctx.app.get_selection())

    def label(self, item: str) -> str:
        name = REGION_NAMES.get(item, "")
        return f"{item:<16} {name}" if name else item

    def confirm(self, chosen: list[str]) -> RegionsSelectedMsg:
        return RegionsSelectedMsg(tuple(chosen))


class ProfileSelector(MultiSelector):
    def __init__(self, ctx: TUIContext):
        super().__init__(ctx, [s.id for s in ctx.app.get_selections()])

    @property
    def title(self) -> str:
        return t("tui.select_profiles")

    def load_items(self) -> list[str]:
        return [SDK_DEFAULT_ID, ENV_ONLY_ID, *list_profiles()]

    def label(self, item: str) -> str:
        return ProfileSelection.from_id(item).display_name

    def confirm(self, chosen: list[str]) -> ProfilesSelectedMsg:
        return ProfilesSelectedMsg(tuple(ProfileSelection.from_id(i) for i in chosen))
