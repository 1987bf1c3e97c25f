"""
cli/tui/views/log_view.py - CloudWatch Logs 실시간 보기

로그 그룹의 새 이벤트를 주기적으로 조회해 아래에 덧붙입니다.
폴링은 tick -> LogPoll -> 조회 -> LogEventsLoaded -> tick 체인으로 이어지며,
화면이 현재 뷰가 아니면 결과가 전달되지 않아 체인이 멈추고 init() 에서 다시 시작합니다.

키:
    space   일시정지/재개
    G       끝으로 이동 (자동 스크롤)
    j/k     스크롤 (자동 스크롤 해제)
    c       화면 비우기
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Group
from rich.text import Text

from cli.i18n import t
from core.context import ProfileSelection
from core.dao.types import RequestContext
from core.resources.logs import LogEvent, LogEventFetcher

from ..cmd import Cmd, emit, tick
from ..messages import ErrorMsg, KeyMsg, LogEventsLoaded, LogPoll, ViewResultMsg
from ..view import TUIContext, View

logger = logging.getLogger(__name__)

POLL_INTERVAL = 2.0
MAX_EVENTS = 1000


class LogView(View):
    def __init__(
        self,
        ctx: TUIContext,
        log_group: str,
        region: str = "",
        selection: ProfileSelection | None = None,
        since_seconds: int = 300,
    ):
        self.ctx = ctx
        self.log_group = log_group
        request_ctx = RequestContext(ctx.app, region=region, selection=selection)
        self.fetcher = LogEventFetcher(request_ctx, log_group, since_seconds)
        self.events: list[LogEvent] = []
        self.paused = False
        self.follow = True
        self.offset = 0
        self.error: Exception | None = None
        self.generation = 0

    def quits_to_back(self) -> bool:
        return True

    @property
    def title(self) -> str:
        return t("tui.log_title", group=self.log_group)

    def init(self) -> list[Cmd]:
        # 뒤로 가기로 돌아올 때 이전 체인을 끊고 새로 시작
        self.generation += 1
        return self._fetch()

    def _fetch(self) -> list[Cmd]:
        fetcher = self.fetcher
        generation = self.generation

        def _run() -> LogEventsLoaded:
            try:
                return LogEventsLoaded(tuple(fetcher.fetch()), generation=generation)
            except Exception as e:
                logger.warning(f"로그 이벤트 조회 실패 [{fetcher.log_group}]: {e}")
                return LogEventsLoaded(error=e, generation=generation)

        return [self.result(_run)]

    def _schedule(self) -> list[Cmd]:
        return [tick(POLL_INTERVAL, ViewResultMsg(self, LogPoll(self.generation)))]

    def _on_loaded(self, payload: LogEventsLoaded) -> list[Cmd]:
        if payload.generation != self.generation:
            return []
        if payload.error is not None:
            self.error = payload.error
            self.paused = True
            return [emit(ErrorMsg(payload.error))]
        self.error = None
        if payload.events:
            self.events.extend(payload.events)
            del self.events[:-MAX_EVENTS]
            if self.follow:
                self.offset = self._max_offset()
        return [] if self.paused else self._schedule()

    def _page(self) -> int:
        return max(1, self.height - 1)

    def _max_offset(self) -> int:
        return max(0, len(self.events) - self._page())

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, LogEventsLoaded):
            return self._on_loaded(msg)
        if isinstance(msg, LogPoll):
            if msg.generation != self.generation or self.paused:
                return []
            return self._fetch()
        if not isinstance(msg, KeyMsg):
            return []

        key = msg.key
        if key == "space":
            self.paused = not self.paused
            if not self.paused:
                self.generation += 1
                return self._fetch()
            return []
        if key == "c":
            self.events = []
            self.offset = 0
        elif key in ("G", "end"):
            self.follow = True
            self.offset = self._max_offset()
        elif key in ("g", "home"):
            self.follow = False
            self.offset = 0
        elif key in ("j", "down", "k", "up"):
            delta = 1 if key in ("j", "down") else -1
            self.offset = max(0, min(self.offset + delta, self._max_offset()))
            self.follow = self.offset == self._max_offset()
        return []

    def render(self) -> Group:
        header = Text(self.title, style="bold")
        if self.paused:
            header.append(f" {t('tui.paused')}", style="yellow")
        elif self.follow:
            header.append(f" {t('tui.following')}", style="green")

        body = Text()
        for event in self.events[self.offset : self.offset + self._page() - 1]:
            when = datetime.fromtimestamp(event.timestamp / 1000, tz=timezone.utc).strftime("%H:%M:%S")
            body.append(f"{when} ", style="cyan")
            body.append(f"{event.stream[-20:]:<20} ", style="dim")
            body.append(event.message + "\n")
        if not self.events:
            body.append(t("tui.waiting_logs"), style="dim")
        return Group(header, body)

    def status_line(self) -> str:
        return t("tui.log_hint")
