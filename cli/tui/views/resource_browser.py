"""
cli/tui/views/resource_browser.py - 리소스 목록 화면

서비스의 리소스 종류를 탭으로 보여주고, 선택한 종류의 목록을 비동기로 조회합니다.

키:
    /               텍스트 필터 입력 (enter 확정, esc 취소)
    ctrl+r          새로고침
    c               필터/태그 필터/정렬 해제
    m               비교 대상 표시 (esc 로 해제)
    d, enter        상세 보기 (표시된 리소스가 있으면 비교)
    a               작업 메뉴 (읽기 전용 모드에서는 허용된 작업만)
    D               삭제 (확인 필요, 읽기 전용 모드에서는 차단)
    tab, shift+tab  리소스 종류 전환
    1-9             리소스 종류 탭 선택
    j/k, g/G, ...   커서 이동

렌더러가 제공하는 하위 리소스 이동 키(Navigation)는 위 키보다 먼저 처리됩니다.

단일 대상(리전 1개, 프로파일 1개)이고 DAO가 페이지 조회를 지원하면 첫 페이지만
불러오고, 커서가 목록 끝 LOAD_MORE_THRESHOLD 줄 안으로 들어오면 다음 페이지를
이어 붙입니다. 팬아웃 목록은 한 번에 모두 불러옵니다.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Group
from rich.table import Table
from rich.text import Text

from cli.i18n import t
from core.actions import DELETE_ACTION, Action, available_actions, execute_action
from core.context import ProfileSelection
from core.dao.types import (
    DAO,
    Operation,
    ProfiledResource,
    RegionalResource,
    RequestContext,
    Resource,
    get_resource_profile,
    get_resource_region,
    same_resource,
    unwrap_resource,
)
from core.exceptions import (
    PartialFanoutFailure,
    ReadOnlyError,
    UnsupportedOperationError,
    ValidationError,
    format_error_for_user,
)
from core.registry.wrappers import PaginatedDAOWrapper
from core.render import Column

from ..cmd import Cmd, emit
from ..filters import apply_filters
from ..messages import (
    ActionCompleted,
    DiffMsg,
    ErrorMsg,
    FilterMsg,
    FlashMsg,
    KeyMsg,
    NavigateMsg,
    PageLoaded,
    ResourcesLoaded,
    ShowModalMsg,
    SortMsg,
    TagFilterMsg,
)
from ..view import MODAL_WIDTH_CONFIRM, Modal, TableCursor, TextInput, TUIContext, View
from .action_menu import ActionMenu
from .confirm import ConfirmView
from .detail_view import DetailView
from .diff_view import DiffView
from .drilldown import find_navigation, view_for_navigation

logger = logging.getLogger(__name__)

# 제목/탭/필터/헤더 줄
_CHROME_LINES = 4

# 커서가 목록 끝에서 이 줄 수 안에 들어오면 다음 페이지 조회
LOAD_MORE_THRESHOLD = 10


class ResourceBrowser(View):
    """리소스 목록

    Args:
        ctx: 공유 의존성
        service: 서비스명
        resource_type: 리소스 종류 (비어 있으면 기본 리소스)
        filters: 상위 리소스가 전달한 필터 (하위 리소스 목록)
        region / selection: 대상 오버라이드 (하위 리소스는 상위 리소스의 출처)
        parent_name: 제목에 표시할 상위 리소스 이름
    """

    def __init__(
        self,
        ctx: TUIContext,
        service: str,
        resource_type: str = "",
        filters: dict[str, str] | None = None,
        region: str = "",
        selection: ProfileSelection | None = None,
        parent_name: str = "",
    ):
        self.ctx = ctx
        self.service = service
        registry = ctx.registry
        self.resource_type = resource_type or registry.default_resource(service)
        if registry.is_sub_resource(service, self.resource_type):
            self.resource_types = [self.resource_type]
        else:
            self.resource_types = registry.list_resources(service) or [self.resource_type]
        self.filters = dict(filters or {})
        self.region = region
        self.selection = selection
        self.parent_name = parent_name
        self.renderer = registry.create_renderer(service, self.resource_type)

        self.dao: DAO | None = None
        self.resources: list[Resource] = []
        self.visible: list[Resource] = []
        self.loading = False
        self.error: Exception | None = None
        self.truncated = False
        self.partial_failure: PartialFanoutFailure | None = None
        self.next_token = ""
        self.loading_more = False
        self._seen_tokens: set[str] = set()

        self.filter = TextInput(prompt="/", limit=60)
        self.tag_filter = ""
        self.sort_column = ""
        self.sort_ascending = True
        self.mark: Resource | None = None
        self.cursor = TableCursor()
        self._request_id = 0

    @property
    def title(self) -> str:
        name = f"{self.ctx.registry.display_name(self.service)} / {self.resource_type}"
        if self.parent_name:
            name += f" [{self.parent_name}]"
        return name

    # =========================================================================
    # 조회
    # =========================================================================

    def request_context(self) -> RequestContext:
        return RequestContext(
            self.ctx.app,
            region=self.region,
            selection=self.selection,
            filters=self.filters,
            page_size=self.ctx.config.page_size,
        )

    def init(self) -> list[Cmd]:
        return self.load()

    def load(self) -> list[Cmd]:
        self._request_id += 1
        request_id = self._request_id
        self.loading = True
        self.loading_more = False
        self.error = None

        registry = self.ctx.registry
        request_ctx = self.request_context()
        service, resource_type = self.service, self.resource_type

        def _fetch() -> ResourcesLoaded:
            try:
                dao = registry.create_dao(request_ctx, service, resource_type)
                if isinstance(dao, PaginatedDAOWrapper) and dao.is_paginated:
                    page, next_token = dao.list_page(request_ctx.page_size, "")
                    return ResourcesLoaded(resources=list(page), dao=dao, next_token=next_token, request_id=request_id)
                resources = dao.list()
            except Exception as e:
                logger.warning(f"목록 조회 실패 [{service}/{resource_type}]: {e}")
                return ResourcesLoaded(error=e, request_id=request_id)
            return ResourcesLoaded(
                resources=list(resources),
                dao=dao,
                partial_failure=getattr(resources, "partial_failure", None),
                truncated=getattr(resources, "truncated", False),
                request_id=request_id,
            )

        return [self.result(_fetch)]

    def should_load_more(self) -> bool:
        if not self.next_token or self.loading or self.loading_more or self.dao is None:
            return False
        if not self.visible:
            return False
        return self.cursor.cursor >= len(self.visible) - LOAD_MORE_THRESHOLD

    def load_more(self) -> list[Cmd]:
        """다음 페이지 조회 (결과는 현재 목록 뒤에 붙음)"""
        dao = self.dao
        if not isinstance(dao, PaginatedDAOWrapper) or not self.next_token:
            return []
        self.loading_more = True
        request_id = self._request_id
        token = self.next_token
        page_size = self.ctx.config.page_size
        label = f"{self.service}/{self.resource_type}"

        def _fetch_page() -> PageLoaded:
            try:
                page, next_token = dao.list_page(page_size, token)
            except Exception as e:
                logger.warning(f"다음 페이지 조회 실패 [{label}]: {e}")
                return PageLoaded(error=e, request_id=request_id)
            return PageLoaded(resources=list(page), next_token=next_token, request_id=request_id)

        return [self.result(_fetch_page)]

    def can_refresh(self) -> bool:
        # 진행 중인 조회는 요청 ID 로 무효화
        return True

    def refresh(self) -> list[Cmd]:
        return self.load()

    def _on_loaded(self, payload: ResourcesLoaded) -> list[Cmd]:
        if payload.request_id != self._request_id:
            logger.debug(f"이전 목록 조회 결과 무시: 요청 {payload.request_id}, 현재 {self._request_id}")
            return []

        self.loading = False
        self.next_token = ""
        self._seen_tokens = set()
        if payload.error is not None:
            self.error = payload.error
            self.resources = []
            self.partial_failure = None
            self._apply()
            return [emit(ErrorMsg(payload.error))]

        self.dao = payload.dao
        self.resources = list(payload.resources)
        self.truncated = payload.truncated
        self.partial_failure = payload.partial_failure
        self._set_next_token(payload.next_token)
        if self.mark is not None and not any(same_resource(self.mark, r) for r in self.resources):
            self.mark = None
        self._apply()

        if self.partial_failure is not None:
            return [emit(ErrorMsg(self.partial_failure))]
        return []

    def _on_page_loaded(self, payload: PageLoaded) -> list[Cmd]:
        if payload.request_id != self._request_id:
            logger.debug(f"이전 페이지 조회 결과 무시: 요청 {payload.request_id}, 현재 {self._request_id}")
            return []

        self.loading_more = False
        if payload.error is not None:
            # 같은 오류가 커서 이동마다 반복되지 않도록 이어서 불러오기 중단 (ctrl+r 로 재조회)
            self.next_token = ""
            return [emit(ErrorMsg(payload.error))]

        self.resources.extend(payload.resources)
        self._set_next_token(payload.next_token)
        self._apply()
        return []

    def _set_next_token(self, token: str) -> None:
        if token and token in self._seen_tokens:
            logger.warning(f"같은 페이지 토큰이 반복되어 이어서 불러오기 중단 [{self.service}/{self.resource_type}]")
            token = ""
        if token:
            self._seen_tokens.add(token)
        self.next_token = token

    def _on_action_completed(self, payload: ActionCompleted) -> list[Cmd]:
        if payload.error is not None:
            return [emit(ErrorMsg(payload.error))]
        if payload.action.operation == DELETE_ACTION.operation:
            text = t("tui.deleted", name=payload.resource_id)
        else:
            text = t("tui.action_done", action=payload.action.name, name=payload.resource_id)
        return [emit(FlashMsg(text)), *self.load()]

    # =========================================================================
    # 필터 / 정렬
    # =========================================================================

    def _apply(self) -> None:
        visible = apply_filters(self.resources, self.filter.value, self.tag_filter)
        column = self._sort_column()
        if column is not None:
            visible = sorted(visible, key=lambda r: column.getter(r).lower(), reverse=not self.sort_ascending)
        self.visible = visible
        self.cursor.set(self.cursor.cursor, len(self.visible))

    def _sort_column(self) -> Column | None:
        if not self.sort_column:
            return None
        for column in self._all_columns():
            if column.name.lower() == self.sort_column.lower():
                return column
        return None

    def set_sort(self, column: str, ascending: bool = True) -> list[Cmd]:
        if column and not any(c.name.lower() == column.lower() for c in self._all_columns()):
            names = ", ".join(c.name for c in self._all_columns())
            return [emit(ErrorMsg(ValidationError("sort", column, names)))]
        self.sort_column = column
        self.sort_ascending = ascending
        self._apply()
        return []

    def clear_filters(self) -> None:
        self.filter.clear()
        self.tag_filter = ""
        self.sort_column = ""
        self.sort_ascending = True
        self._apply()

    # =========================================================================
    # 선택 / 이동
    # =========================================================================

    def selected(self) -> Resource | None:
        if not self.visible:
            return None
        return self.visible[self.cursor.cursor]

    def has_active_input(self) -> bool:
        return self.filter.active

    def on_back(self) -> bool:
        if self.mark is not None:
            self.mark = None
            return True
        return False

    def select_resource_type(self, resource_type: str) -> list[Cmd]:
        if resource_type == self.resource_type:
            return []
        self.resource_type = resource_type
        self.renderer = self.ctx.registry.create_renderer(self.service, resource_type)
        self.dao = None
        self.resources = []
        self.visible = []
        self.mark = None
        self.sort_column = ""
        self.truncated = False
        self.partial_failure = None
        self.next_token = ""
        self.cursor.set(0, 0)
        return self.load()

    def _cycle_resource_type(self, delta: int) -> list[Cmd]:
        if len(self.resource_types) < 2:
            return []
        index = self.resource_types.index(self.resource_type) if self.resource_type in self.resource_types else 0
        return self.select_resource_type(self.resource_types[(index + delta) % len(self.resource_types)])

    def open_selected(self) -> list[Cmd]:
        current = self.selected()
        if current is None:
            return []
        if self.mark is not None and not same_resource(self.mark, current):
            view = DiffView(self.mark, current, f"{self.service}/{self.resource_type}")
            self.mark = None
            return [emit(NavigateMsg(view))]
        if self.dao is None:
            return []
        view = DetailView(self.ctx, current, self.dao, self.renderer, self.service, self.resource_type)
        return [emit(NavigateMsg(view))]

    def _find(self, name: str) -> Resource | None:
        for resource in self.resources:
            if resource.get_name() == name or unwrap_resource(resource).get_id() == name:
                return resource
        return None

    def diff(self, left_name: str, right_name: str) -> list[Cmd]:
        left = self._find(left_name) if left_name else self.selected()
        right = self._find(right_name)
        missing = left_name if left is None else right_name
        if left is None or right is None:
            return [emit(ErrorMsg(ValidationError("diff", missing, t("tui.diff_expected"))))]
        return [emit(NavigateMsg(DiffView(left, right, f"{self.service}/{self.resource_type}")))]

    # =========================================================================
    # 작업 (삭제 포함)
    # =========================================================================

    def open_actions(self) -> list[Cmd]:
        """작업 메뉴 모달 (읽기 전용 모드면 허용된 작업만 표시)"""
        current = self.selected()
        if current is None or self.dao is None:
            return []
        actions = available_actions(self.dao, current, read_only=self.ctx.app.read_only)
        menu = ActionMenu(current, actions, lambda action: self.run_action(current, action))
        return [emit(ShowModalMsg(Modal(menu, MODAL_WIDTH_CONFIRM)))]

    def confirm_delete(self) -> list[Cmd]:
        current = self.selected()
        if current is None or self.dao is None:
            return []
        if self.ctx.app.read_only:
            return [emit(ErrorMsg(ReadOnlyError(self.service, self.resource_type, Operation.DELETE.value)))]
        if not self.dao.supports(Operation.DELETE):
            error = UnsupportedOperationError(self.service, self.resource_type, Operation.DELETE.value)
            return [emit(ErrorMsg(error))]

        prompt = t("tui.confirm_delete", kind=f"{self.service}/{self.resource_type}", name=current.get_name())
        confirm = ConfirmView(prompt, lambda: self.run_action(current, DELETE_ACTION))
        return [emit(ShowModalMsg(Modal(confirm, MODAL_WIDTH_CONFIRM)))]

    def run_action(self, resource: Resource, action: Action) -> list[Cmd]:
        dao = self.dao
        if dao is None:
            return []
        resource_id = resource.get_id()
        read_only = self.ctx.app.read_only
        label = f"{self.service}/{self.resource_type}"

        def _run() -> ActionCompleted:
            try:
                execute_action(dao, action, resource, read_only=read_only)
            except Exception as e:
                logger.warning(f"작업 실패 [{label}] {action.name} {resource_id}: {e}")
                return ActionCompleted(action, resource_id, e)
            return ActionCompleted(action, resource_id)

        return [self.result(_run)]

    # =========================================================================
    # 명령 입력 제안
    # =========================================================================

    def tag_keys(self) -> list[str]:
        return sorted({k for r in self.resources for k in r.get_tags()})

    def tag_values(self, key: str) -> list[str]:
        lowered = key.lower()
        return sorted({v for r in self.resources for k, v in r.get_tags().items() if k.lower() == lowered})

    def resource_names(self) -> list[str]:
        return sorted({r.get_name() for r in self.resources})

    # =========================================================================
    # 메시지 처리
    # =========================================================================

    def update(self, msg: Any) -> list[Cmd]:
        if isinstance(msg, KeyMsg):
            return self._handle_key(msg.key)
        if isinstance(msg, ResourcesLoaded):
            return self._on_loaded(msg)
        if isinstance(msg, PageLoaded):
            return self._on_page_loaded(msg)
        if isinstance(msg, ActionCompleted):
            return self._on_action_completed(msg)
        if isinstance(msg, FilterMsg):
            self.filter.value = msg.text
            self._apply()
            return []
        if isinstance(msg, TagFilterMsg):
            self.tag_filter = msg.filter
            self._apply()
            return []
        if isinstance(msg, SortMsg):
            return self.set_sort(msg.column, msg.ascending)
        if isinstance(msg, DiffMsg):
            return self.diff(msg.left, msg.right)
        return []

    def _handle_key(self, key: str) -> list[Cmd]:
        if self.filter.active:
            if key == "enter":
                self.filter.blur()
            elif key == "esc":
                self.filter.blur()
                self.filter.clear()
                self._apply()
            elif self.filter.handle_key(key):
                self._apply()
            return []

        current = self.selected()
        if current is not None:
            nav = find_navigation(self.renderer.navigations(current), key)
            if nav is not None:
                return [emit(NavigateMsg(view_for_navigation(self.ctx, nav, current)))]

        if key == "/":
            self.filter.focus()
            return []
        if key == "ctrl+r":
            return self.refresh()
        if key == "c":
            self.clear_filters()
            return []
        if key == "m":
            if current is not None:
                self.mark = None if same_resource(self.mark, current) else current
            return []
        if key in ("d", "enter"):
            return self.open_selected()
        if key == "a":
            return self.open_actions()
        if key == "D":
            return self.confirm_delete()
        if key == "tab":
            return self._cycle_resource_type(1)
        if key == "shift+tab":
            return self._cycle_resource_type(-1)
        if len(key) == 1 and key in "123456789":
            index = int(key) - 1
            if index < len(self.resource_types):
                return self.select_resource_type(self.resource_types[index])
            return []

        if self.cursor.handle_key(key, len(self.visible)) and self.should_load_more():
            return self.load_more()
        return []

    # =========================================================================
    # 렌더링
    # =========================================================================

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self.cursor.visible_rows = max(1, height - _CHROME_LINES)
        self.cursor.set(self.cursor.cursor, len(self.visible))

    def _origin_column(self) -> Column | None:
        if not self.resources:
            return None
        first = self.resources[0]
        if isinstance(first, ProfiledResource):
            return Column("ORIGIN", 28, lambda r: f"{get_resource_profile(r)}/{get_resource_region(r)}", 0)
        if isinstance(first, RegionalResource):
            return Column("REGION", 16, get_resource_region, 0)
        return None

    def _all_columns(self) -> list[Column]:
        columns = self.renderer.columns()
        origin = self._origin_column()
        return [origin, *columns] if origin is not None else columns

    def _fit_columns(self) -> list[Column]:
        """폭에 맞게 우선순위가 높은 컬럼부터 선택 (표시 순서는 유지)"""
        columns = self._all_columns()
        budget = self.width - 2
        chosen: set[int] = set()
        used = 0
        for index in sorted(range(len(columns)), key=lambda i: columns[i].priority):
            width = columns[index].width + 1
            if chosen and used + width > budget:
                continue
            chosen.add(index)
            used += width
        return [c for i, c in enumerate(columns) if i in chosen]

    def _render_tabs(self) -> Text:
        tabs = Text()
        for index, resource_type in enumerate(self.resource_types, start=1):
            style = "bold reverse" if resource_type == self.resource_type else "dim"
            label = f" {index}:{resource_type} " if index <= 9 else f" {resource_type} "
            tabs.append(label, style=style)
            tabs.append(" ")
        return tabs

    def _render_header(self) -> Text:
        header = Text(self.title, style="bold")
        header.append(f" ({len(self.visible)}/{len(self.resources)})", style="cyan")
        if self.loading:
            header.append(f" {t('tui.loading')}", style="yellow")
        if self.truncated:
            header.append(f" {t('tui.truncated')}", style="yellow")
        if self.loading_more:
            header.append(f" {t('tui.loading_more')}", style="yellow")
        elif self.next_token:
            header.append(f" {t('tui.more_available')}", style="cyan")
        if self.tag_filter:
            header.append(f" tag:{self.tag_filter}", style="magenta")
        if self.sort_column:
            arrow = "↑" if self.sort_ascending else "↓"
            header.append(f" sort:{self.sort_column}{arrow}", style="magenta")
        if self.mark is not None:
            header.append(f" {t('tui.marked', name=self.mark.get_name())}", style="magenta")
        return header

    def render(self) -> Group:
        parts: list[Any] = [self._render_header()]
        if len(self.resource_types) > 1:
            parts.append(self._render_tabs())
        if self.filter.active or self.filter.value:
            parts.append(Text(self.filter.render(), style="yellow"))

        if self.error is not None:
            parts.append(Text(format_error_for_user(self.error), style="red"))
            return Group(*parts)

        columns = self._fit_columns()
        table = Table(expand=True, box=None, header_style="bold cyan", pad_edge=False)
        for column in columns:
            table.add_column(column.name, min_width=min(column.width, 12), max_width=column.width, no_wrap=True)
        for index in self.cursor.window(len(self.visible)):
            resource = self.visible[index]
            style = "reverse" if index == self.cursor.cursor else ""
            if same_resource(self.mark, resource):
                style = f"{style} bold magenta".strip()
            table.add_row(*(column.getter(resource) for column in columns), style=style)
        parts.append(table)

        if not self.visible and not self.loading:
            parts.append(Text(t("tui.no_resources"), style="dim"))
        return Group(*parts)

    def status_line(self) -> str:
        hints = [t("tui.browser_hint")]
        current = self.selected()
        if current is not None:
            hints.extend(f"{nav.key}:{nav.label}" for nav in self.renderer.navigations(current))
        return "  ".join(hints)
