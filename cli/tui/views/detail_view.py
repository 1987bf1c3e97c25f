"""
cli/tui/views/detail_view.py - 리소스 상세 화면

렌더러의 detail() 결과를 스크롤해서 보여줍니다.
ctrl+r 은 get() 으로 다시 조회하며, 새 리소스가 Mergeable 이면
목록 조회에서만 얻을 수 있던 필드를 이전 리소스에서 이어받습니다.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Group
from rich.text import Text

from cli.i18n import t
from core.dao.types import DAO, Mergeable, Operation, Resource, unwrap_resource
from core.render import BaseRenderer

from ..cmd import Cmd, emit
from ..messages import ErrorMsg, FlashMsg, KeyMsg, NavigateMsg, ResourceLoaded
from ..view import TUIContext, View
from .drilldown import find_navigation, view_for_navigation

logger = logging.getLogger(__name__)


class DetailView(View):
    def __init__(
        self,
        ctx: TUIContext,
        resource: Resource,
        dao: DAO,
        renderer: BaseRenderer,
        service: str,
        resource_type: str,
    ):
        self.ctx = ctx
        self.resource = resource
        self.dao = dao
        self.renderer = renderer
        self.service = service
        self.resource_type = resource_type
        self.offset = 0
        self.loading = False
        self._lines: list[Text] = []
        self._rebuild()

    def quits_to_back(self) -> bool:
        return True

    @property
    def title(self) -> str:
        return f"{self.service}/{self.resource_type}: {self.resource.get_name()}"

    def _rebuild(self) -> None:
        self._lines = list(self.renderer.detail(self.resource).split("\n"))
        self.offset = min(self.offset, self._max_offset())

    def _page(self) -> int:
        return max(1, self.height - 1)

    def _max_offset(self) -> int:
        return max(0, len(self._lines) - self._page())

    def init(self) -> list[Cmd]:
        return []

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self.offset = min(self.offset, self._max_offset())

    def can_refresh(self) -> bool:
        return not self.loading and self.dao.supports(Operation.GET)

    def refresh(self) -> list[Cmd]:
        if not self.can_refresh():
            return []
        self.loading = True
        dao = self.dao
        resource_id = self.resource.get_id()

        def _get() -> ResourceLoaded:
            try:
                return ResourceLoaded(dao.get(resource_id))
            except Exception as e:
                logger.warning(f"리소스 재조회 실패 [{self.service}/{self.resource_type}] {resource_id}: {e}")
                return ResourceLoaded(error=e)

        return [self.result(_get)]

    def _on_loaded(self, payload: ResourceLoaded) -> list[Cmd]:
        self.loading = False
        if payload.error is not None or payload.resource is None:
            return [emit(ErrorMsg(payload.error))] if payload.error is not None else []
        fresh = payload.resource
        if isinstance(unwrap_resource(fresh), Mergeable):
            unwrap_resource(fresh).merge_from(self.resource)
        self.resource = fresh
        self._rebuild()
        return [emit(FlashMsg(t("tui.refreshed")))]

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, ResourceLoaded):
            return self._on_loaded(msg)
        if not isinstance(msg, KeyMsg):
            return []

        key = msg.key
        nav = find_navigation(self.renderer.navigations(self.resource), key)
        if nav is not None:
            return [emit(NavigateMsg(view_for_navigation(self.ctx, nav, self.resource)))]

        if key == "ctrl+r":
            return self.refresh()
        moves = {"j": 1, "down": 1, "k": -1, "up": -1, "pgdown": self._page(), "ctrl+d": self._page() // 2}
        moves.update({"pgup": -self._page(), "ctrl+u": -(self._page() // 2), "space": self._page()})
        if key in moves:
            self.offset = max(0, min(self.offset + moves[key], self._max_offset()))
        elif key in ("g", "home"):
            self.offset = 0
        elif key in ("G", "end"):
            self.offset = self._max_offset()
        return []

    def render(self) -> Group:
        visible = self._lines[self.offset : self.offset + self._page()]
        body = Text("\n").join(visible)
        position = Text(
            f"{self.offset + 1}-{self.offset + len(visible)}/{len(self._lines)}"
            + (f" {t('tui.loading')}" if self.loading else ""),
            style="dim",
        )
        return Group(body, position)

    def status_line(self) -> str:
        hints = [t("tui.detail_hint")]
        hints.extend(f"{nav.key}:{nav.label}" for nav in self.renderer.navigations(self.resource))
        return "  ".join(hints)
