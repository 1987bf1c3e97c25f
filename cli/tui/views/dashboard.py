"""
cli/tui/views/dashboard.py - 대시보드

현재 선택(프로파일/계정/리전)과 주요 리소스 개수를 패널로 보여줍니다.
패널마다 목록을 병렬로 조회하며, 상태 컬럼(STATE/STATUS)이 있으면 상태별 개수를,
없으면 앞쪽 리소스 이름을 요약으로 표시합니다.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cli.i18n import t
from core.dao.types import RequestContext
from core.exceptions import format_error_for_user

from ..cmd import Cmd, emit
from ..messages import KeyMsg, NavigateMsg, PanelLoaded
from ..view import TableCursor, TUIContext, View

logger = logging.getLogger(__name__)

DASHBOARD_PANELS: tuple[tuple[str, str], ...] = (
    ("ec2", "instances"),
    ("s3", "buckets"),
    ("lambda", "functions"),
    ("cloudformation", "stacks"),
    ("cloudwatch", "log-groups"),
)

_STATE_COLUMNS = ("STATE", "STATUS")
_MAX_HIGHLIGHTS = 3


@dataclass
class PanelState:
    service: str
    resource_type: str
    loading: bool = True
    count: int = 0
    highlights: tuple[str, ...] = ()
    error: Exception | None = None

    @property
    def key(self) -> str:
        return f"{self.service}/{self.resource_type}"


class Dashboard(View):
    def __init__(self, ctx: TUIContext):
        self.ctx = ctx
        self.panels = [
            PanelState(service, resource_type)
            for service, resource_type in DASHBOARD_PANELS
            if ctx.registry.has_resource(service, resource_type)
        ]
        self.cursor = TableCursor()
        self._generation = 0

    @property
    def title(self) -> str:
        return t("tui.dashboard_title")

    def init(self) -> list[Cmd]:
        return self.refresh()

    def can_refresh(self) -> bool:
        # 진행 중인 조회는 세대 번호로 무효화
        return True

    def refresh(self) -> list[Cmd]:
        self._generation += 1
        cmds = []
        for panel in self.panels:
            panel.loading = True
            panel.error = None
            cmds.append(self.result(self._loader(panel.service, panel.resource_type)))
        return cmds

    def _loader(self, service: str, resource_type: str):
        registry = self.ctx.registry
        request_ctx = RequestContext(self.ctx.app, page_size=self.ctx.config.page_size)
        key = f"{service}/{resource_type}"
        generation = self._generation

        def _load() -> PanelLoaded:
            try:
                resources = registry.create_dao(request_ctx, service, resource_type).list()
            except Exception as e:
                logger.warning(f"대시보드 패널 조회 실패 [{key}]: {e}")
                return PanelLoaded(key, error=e, generation=generation)

            renderer = registry.create_renderer(service, resource_type)
            state_column = next((c for c in renderer.columns() if c.name in _STATE_COLUMNS), None)
            if state_column is not None:
                counts = Counter(state_column.getter(r) for r in resources)
                highlights = tuple(f"{state} {count}" for state, count in counts.most_common(_MAX_HIGHLIGHTS))
            else:
                highlights = tuple(r.get_name() for r in resources[:_MAX_HIGHLIGHTS])
            return PanelLoaded(key, len(resources), highlights, generation=generation)

        return _load

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, PanelLoaded):
            if msg.generation != self._generation:
                logger.debug(f"이전 대시보드 조회 결과 무시 [{msg.key}]: 세대 {msg.generation}, 현재 {self._generation}")
                return []
            for panel in self.panels:
                if panel.key == msg.key:
                    panel.loading = False
                    panel.count = msg.count
                    panel.highlights = msg.highlights
                    panel.error = msg.error
            return []
        if not isinstance(msg, KeyMsg):
            return []

        if msg.key == "ctrl+r":
            return self.refresh()
        if msg.key in ("enter", "l", "right"):
            if not self.panels:
                return []
            panel = self.panels[self.cursor.cursor]
            from .resource_browser import ResourceBrowser

            return [emit(NavigateMsg(ResourceBrowser(self.ctx, panel.service, panel.resource_type)))]
        self.cursor.handle_key(msg.key, len(self.panels))
        return []

    def _render_context(self) -> Panel:
        app = self.ctx.app
        account_ids = app.get_account_ids()
        lines = Text()
        for selection in app.get_selections():
            lines.append(f"{t('tui.profile')}: ", style="dim")
            lines.append(selection.display_name, style="bold")
            account_id = account_ids.get(selection.id, "")
            if account_id:
                lines.append(f"  ({account_id})", style="cyan")
            lines.append("\n")
        lines.append(f"{t('tui.regions')}: ", style="dim")
        lines.append(", ".join(app.get_regions()) or "-", style="bold")
        if app.read_only:
            lines.append("\nREAD-ONLY", style="bold yellow")
        return Panel(lines, title=t("tui.context_title"), title_align="left", border_style="cyan")

    def render(self) -> Group:
        table = Table(expand=True, box=None, header_style="bold cyan", pad_edge=False)
        table.add_column("RESOURCE", width=28, no_wrap=True)
        table.add_column("COUNT", width=8, justify="right")
        table.add_column("SUMMARY", ratio=1, no_wrap=True)
        for index, panel in enumerate(self.panels):
            style = "reverse" if index == self.cursor.cursor else ""
            if panel.loading:
                count, summary = "…", Text(t("tui.loading"), style="yellow")
            elif panel.error is not None:
                count, summary = "!", Text(format_error_for_user(panel.error), style="red")
            else:
                count, summary = str(panel.count), Text(", ".join(panel.highlights), style="dim")
            table.add_row(panel.key, count, summary, style=style)
        return Group(self._render_context(), table)

    def status_line(self) -> str:
        return t("tui.dashboard_hint")
