"""
cli/tui/app.py - 내비게이션 컨트롤러

현재 뷰, 뒤로 가기 스택, 모달 스택, 명령 모드 입력을 단독으로 소유하고
모든 화면 전환을 결정합니다.

상태:
    NORMAL      현재 뷰가 키를 받음 (전역 키 먼저)
    COMMAND     ":" 명령 입력 중
    MODAL       최상위 모달이 키를 받음
    WARNINGS    시작 경고 화면 (한 번만 표시)

메시지는 타입 -> 핸들러 테이블로 처리하며, 테이블에 없는 타입은
UnhandledMessageError 로 즉시 드러납니다. 핸들러는 상태를 바꾸고 후속 Cmd 목록을 반환합니다.

Example:
    app = NavigatorApp(app_ctx, registry, config, StartupPath("ec2", "instances"))
    cmds = app.init()
    cmds = app.update(KeyMsg("j"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any

from rich.align import Align
from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from cli.i18n import t
from core.auth.session import init_context, refresh_context_data
from core.config import NavConfig, settings
from core.context import AppContext
from core.dao.types import RequestContext
from core.exceptions import (
    NotRegisteredError,
    PartialFanoutFailure,
    RefreshTimeoutError,
    UnhandledMessageError,
    ValidationError,
    format_error_for_user,
)
from core.refresh import RefreshCoordinator, RefreshDoneMsg, RefreshKind
from core.registry import Registry
from core.resources.tagging import TAG_FILTER

from .cmd import Cmd, emit, tick
from .command import Command, CommandInput, CommandKind, parse_command
from .keys import BACK_KEYS, MODAL_CLOSE_KEYS, QUIT_KEYS, WARNINGS_DISMISS_KEYS
from .messages import (
    ClearStatusMsg,
    DiffMsg,
    ErrorMsg,
    FilterMsg,
    FlashMsg,
    HideModalMsg,
    KeyMsg,
    NavigateMsg,
    ProfilesSelectedMsg,
    QuitMsg,
    RegionsSelectedMsg,
    ResizeMsg,
    ShowModalMsg,
    SortMsg,
    StartupResourceMsg,
    TagFilterMsg,
    ViewResultMsg,
)
from .view import (
    MODAL_WIDTH_HELP,
    MODAL_WIDTH_SELECTOR,
    DiffProvider,
    Modal,
    Refreshable,
    TUIContext,
    TagProvider,
    View,
    captures_input,
)
from .views import (
    Dashboard,
    DetailView,
    HelpView,
    ProfileSelector,
    RegionSelector,
    ResourceBrowser,
    ServiceBrowser,
    render_warnings,
)

logger = logging.getLogger(__name__)

ERROR_CLEAR_SECONDS = settings.ERROR_CLEAR_SECONDS
FLASH_CLEAR_SECONDS = settings.FLASH_CLEAR_SECONDS

# 헤더/상태 표시줄
STATUS_ROWS = 2


@dataclass(frozen=True)
class StartupPath:
    """시작 경로 (한 번만 사용)

    Attributes:
        service: 서비스 또는 별칭
        resource_type: 리소스 종류 (비어 있으면 기본 리소스)
        resource_id: 바로 상세 화면을 열 리소스 ID
    """

    service: str
    resource_type: str = ""
    resource_id: str = ""


class AppState(Enum):
    NORMAL = "normal"
    COMMAND = "command"
    MODAL = "modal"
    WARNINGS = "warnings"


class NavigatorApp:
    """내비게이션 컨트롤러

    Args:
        app_ctx: 선택 상태
        registry: 리소스 레지스트리
        config: 런타임 설정
        startup_path: 시작 경로
        coordinator: 비동기 갱신 코디네이터 (테스트에서 주입)
    """

    def __init__(
        self,
        app_ctx: AppContext,
        registry: Registry,
        config: NavConfig,
        startup_path: StartupPath | None = None,
        coordinator: RefreshCoordinator | None = None,
    ):
        self.ctx = TUIContext(app_ctx, registry, config)
        self.app_ctx = app_ctx
        self.registry = registry
        self.config = config
        self.coordinator = coordinator or RefreshCoordinator(timeout=config.aws_init_timeout)
        self.max_stack_size = config.max_stack_size

        self.current: View | None = None
        self.stack: list[View] = []
        self.modals: list[Modal] = []
        self.command = CommandInput(registry)

        self.width = 80
        self.height = 24
        self.ready = False
        self.quitting = False

        self.status = ""
        self.status_level = ""
        self.status_seq = 0
        self.profile_error: Exception | None = None

        self.warnings: list[str] = list(config.warnings) + app_ctx.get_warnings()
        self.show_warnings = bool(self.warnings)
        self.warnings_shown = self.show_warnings

        self.startup_path = startup_path
        self._pending_resource: StartupPath | None = None

        self._handlers = {
            KeyMsg: self._on_key,
            ResizeMsg: self._on_resize,
            QuitMsg: self._on_quit,
            ErrorMsg: self._on_error,
            FlashMsg: self._on_flash,
            ClearStatusMsg: self._on_clear_status,
            NavigateMsg: self._on_navigate,
            ShowModalMsg: self._on_show_modal,
            HideModalMsg: self._on_hide_modal,
            RegionsSelectedMsg: self._on_regions_selected,
            ProfilesSelectedMsg: self._on_profiles_selected,
            StartupResourceMsg: self._on_startup_resource,
            ViewResultMsg: self._on_view_result,
            RefreshDoneMsg: self._on_refresh_done,
            FilterMsg: self._to_current,
            TagFilterMsg: self._to_current,
            SortMsg: self._to_current,
            DiffMsg: self._to_current,
        }

    # =========================================================================
    # 상태
    # =========================================================================

    @property
    def state(self) -> AppState:
        if self.show_warnings:
            return AppState.WARNINGS
        if self.command.active:
            return AppState.COMMAND
        if self.modals:
            return AppState.MODAL
        return AppState.NORMAL

    @property
    def body_height(self) -> int:
        return max(1, self.height - STATUS_ROWS)

    # =========================================================================
    # 시작
    # =========================================================================

    def init(self) -> list[Cmd]:
        """시작 화면 결정과 AWS 컨텍스트 초기화 요청"""
        view = self._initial_view()
        self.current = view
        cmds = view.init()
        view.resize(self.width, self.body_height)
        cmds.append(self.coordinator.dispatch(RefreshKind.CONTEXT_INIT, partial(init_context, self.app_ctx)))
        return cmds

    def _initial_view(self) -> View:
        path, self.startup_path = self.startup_path, None
        if path is not None and path.service:
            text = f"{path.service}/{path.resource_type}" if path.resource_type else path.service
            try:
                service, resource_type = self.registry.parse_service_resource(text)
            except NotRegisteredError as e:
                self._add_warning(format_error_for_user(e))
            else:
                if path.resource_id:
                    self._pending_resource = StartupPath(service, resource_type, path.resource_id)
                return ResourceBrowser(self.ctx, service, resource_type)

        startup_view = self.config.startup.view
        if startup_view == "dashboard":
            return Dashboard(self.ctx)
        if startup_view and startup_view != "services":
            try:
                service, resource_type = self.registry.parse_service_resource(startup_view)
                return ResourceBrowser(self.ctx, service, resource_type)
            except NotRegisteredError as e:
                self._add_warning(f"startup.view: {format_error_for_user(e)}")
        return ServiceBrowser(self.ctx)

    def _fetch_resource(self, path: StartupPath) -> Cmd:
        """리소스 단건 조회 후 StartupResourceMsg"""
        registry = self.registry
        request_ctx = RequestContext(self.app_ctx, page_size=self.config.page_size)

        def _run() -> StartupResourceMsg:
            try:
                dao = registry.create_dao(request_ctx, path.service, path.resource_type)
                resource = dao.get(path.resource_id)
            except Exception as e:
                logger.warning(f"리소스 조회 실패 [{path.service}/{path.resource_type}] {path.resource_id}: {e}")
                return StartupResourceMsg(path.service, path.resource_type, path.resource_id, error=e)
            return StartupResourceMsg(path.service, path.resource_type, path.resource_id, resource, dao)

        return _run

    # =========================================================================
    # 내비게이션
    # =========================================================================

    def navigate(self, view: View, clear_stack: bool = False) -> list[Cmd]:
        """view 로 전환 (clear_stack 이면 뒤로 가기 스택 비움)"""
        if clear_stack:
            self.stack.clear()
        elif self.current is not None:
            self.stack.append(self.current)
            # 가장 오래된 항목부터 제거
            overflow = len(self.stack) - self.max_stack_size
            if overflow > 0:
                del self.stack[:overflow]
        self.current = view
        cmds = view.init()
        view.resize(self.width, self.body_height)
        return cmds

    def back(self) -> list[Cmd]:
        """직전 화면으로 (스택이 비어 있으면 무시)"""
        if not self.stack:
            return []
        self.current = self.stack.pop()
        cmds = self.current.init()
        self.current.resize(self.width, self.body_height)
        return cmds

    def show_modal(self, modal: Modal) -> list[Cmd]:
        self.modals.append(modal)
        self._resize_modal(modal)
        return modal.content.init()

    def hide_modal(self) -> list[Cmd]:
        if self.modals:
            self.modals.pop()
        return []

    def _resize_modal(self, modal: Modal) -> None:
        # 테두리와 여백 제외
        modal.content.resize(min(modal.width, self.width) - 4, max(1, self.body_height - 4))

    def quit(self) -> list[Cmd]:
        self.quitting = True
        return []

    # =========================================================================
    # 메시지 처리
    # =========================================================================

    def update(self, msg: Any) -> list[Cmd]:
        handler = self._handlers.get(type(msg))
        if handler is None:
            raise UnhandledMessageError(msg)
        return handler(msg) or []

    def _to_current(self, msg: Any) -> list[Cmd]:
        if self.current is None:
            return []
        return self.current.update(msg)

    def _on_quit(self, msg: QuitMsg) -> list[Cmd]:
        return self.quit()

    def _on_navigate(self, msg: NavigateMsg) -> list[Cmd]:
        return self.navigate(msg.view, msg.clear_stack)

    def _on_show_modal(self, msg: ShowModalMsg) -> list[Cmd]:
        return self.show_modal(msg.modal)

    def _on_hide_modal(self, msg: HideModalMsg) -> list[Cmd]:
        return self.hide_modal()

    def _on_resize(self, msg: ResizeMsg) -> list[Cmd]:
        self.width = msg.width
        self.height = msg.height
        self.ready = True
        if self.current is not None:
            self.current.resize(self.width, self.body_height)
        for modal in self.modals:
            self._resize_modal(modal)
        self.command.resize(self.width)
        return []

    def _on_view_result(self, msg: ViewResultMsg) -> list[Cmd]:
        target = msg.view
        if target is self.current or (self.modals and self.modals[-1].content is target):
            return target.update(msg.payload)
        logger.debug(f"현재 뷰가 아닌 결과 폐기: {type(target).__name__} / {type(msg.payload).__name__}")
        return []

    # -------------------------------------------------------------------------
    # 상태 표시
    # -------------------------------------------------------------------------

    def _set_status(self, text: str, level: str) -> list[Cmd]:
        self.status_seq += 1
        self.status = text
        self.status_level = level
        delay = ERROR_CLEAR_SECONDS if level == "error" else FLASH_CLEAR_SECONDS
        return [tick(delay, ClearStatusMsg(self.status_seq))]

    def _on_error(self, msg: ErrorMsg) -> list[Cmd]:
        error = msg.error
        if isinstance(error, PartialFanoutFailure):
            # 부분 결과는 화면에 남아 있으므로 경고
            text = t("tui.partial_failure", failed=len(error.failures), total=error.total, first=error.failures[0])
            return self._set_status(text, "warning")
        level = "warning" if isinstance(error, RefreshTimeoutError) else "error"
        return self._set_status(format_error_for_user(error), level)

    def _on_flash(self, msg: FlashMsg) -> list[Cmd]:
        return self._set_status(msg.text, msg.level)

    def _on_clear_status(self, msg: ClearStatusMsg) -> list[Cmd]:
        if msg.seq == self.status_seq:
            self.status = ""
            self.status_level = ""
        return []

    def _add_warning(self, text: str) -> list[Cmd]:
        """시작 경고 추가 (경고 화면을 이미 닫았으면 상태 표시줄로)"""
        if self.warnings_shown and not self.show_warnings:
            return self._set_status(text, "warning")
        self.warnings.append(text)
        self.show_warnings = True
        self.warnings_shown = True
        return []

    # -------------------------------------------------------------------------
    # 키 입력
    # -------------------------------------------------------------------------

    def _on_key(self, msg: KeyMsg) -> list[Cmd]:
        key = msg.key
        if not key:
            return []

        state = self.state
        if state is AppState.WARNINGS:
            # 첫 화면 크기 이벤트 전에는 닫기 키도 무시
            if self.ready and key in WARNINGS_DISMISS_KEYS:
                self.show_warnings = False
            return []
        if state is AppState.COMMAND:
            return self._on_command_key(key)
        if state is AppState.MODAL:
            top = self.modals[-1]
            if key in MODAL_CLOSE_KEYS and not captures_input(top.content):
                return self.hide_modal()
            return top.content.update(msg)
        return self._on_normal_key(msg)

    def _on_normal_key(self, msg: KeyMsg) -> list[Cmd]:
        view = self.current
        if view is None:
            return []
        if captures_input(view):
            return view.update(msg)

        key = msg.key
        if key in BACK_KEYS:
            if view.on_back():
                return []
            return self.back()
        if key in QUIT_KEYS:
            if view.quits_to_back() and self.stack:
                return self.back()
            return self.quit()
        if key == "?":
            return self.show_modal(Modal(HelpView(), MODAL_WIDTH_HELP))
        if key == ":":
            tag_provider = view if isinstance(view, TagProvider) else None
            diff_provider = view if isinstance(view, DiffProvider) else None
            self.command.activate(tag_provider, diff_provider)
            return []
        if key == "R":
            return self.show_modal(Modal(RegionSelector(self.ctx), MODAL_WIDTH_SELECTOR))
        if key == "P":
            return self.show_modal(Modal(ProfileSelector(self.ctx), MODAL_WIDTH_SELECTOR))
        return view.update(msg)

    def _on_command_key(self, key: str) -> list[Cmd]:
        if key == "esc":
            self.command.deactivate()
            return []
        if key == "enter":
            line = self.command.value
            self.command.deactivate()
            try:
                command = parse_command(line, self.registry)
            except (NotRegisteredError, ValidationError) as e:
                return self._set_status(format_error_for_user(e), "error")
            return self.execute(command)
        self.command.handle_key(key)
        return []

    def execute(self, command: Command) -> list[Cmd]:
        """해석된 명령 실행"""
        kind = command.kind
        if kind is CommandKind.QUIT:
            return self.quit()
        if kind is CommandKind.HOME:
            return self.navigate(Dashboard(self.ctx), clear_stack=True)
        if kind is CommandKind.SERVICES:
            return self.navigate(ServiceBrowser(self.ctx), clear_stack=True)
        if kind is CommandKind.NAVIGATE:
            cmds = self.navigate(ResourceBrowser(self.ctx, command.service, command.resource_type))
            if command.resource_id:
                cmds.append(self._fetch_resource(StartupPath(command.service, command.resource_type, command.resource_id)))
            return cmds
        if kind is CommandKind.TAG_SEARCH:
            filters = {TAG_FILTER: command.text} if command.text else None
            browser = ResourceBrowser(
                self.ctx, command.service, command.resource_type, filters=filters, parent_name=command.text
            )
            return self.navigate(browser)
        if kind is CommandKind.FILTER:
            return self._to_current(FilterMsg(command.text))
        if kind is CommandKind.TAG_FILTER:
            return self._to_current(TagFilterMsg(command.text))
        if kind is CommandKind.SORT:
            return self._to_current(SortMsg(command.text, command.ascending))
        if kind is CommandKind.DIFF:
            return self._to_current(DiffMsg(command.left, command.right))
        return []

    # -------------------------------------------------------------------------
    # 리전/프로파일 선택
    # -------------------------------------------------------------------------

    def _refresh_current(self) -> list[Cmd]:
        view = self.current
        if isinstance(view, Refreshable) and view.can_refresh():
            return view.refresh()
        return []

    def _on_regions_selected(self, msg: RegionsSelectedMsg) -> list[Cmd]:
        self.modals.clear()
        if not msg.regions:
            return []
        self.app_ctx.set_regions(list(msg.regions))
        logger.info(f"리전 변경: {', '.join(msg.regions)}")
        cmds = self._set_status(t("tui.regions_changed", regions=", ".join(msg.regions)), "success")
        return cmds + self._refresh_current()

    def _on_profiles_selected(self, msg: ProfilesSelectedMsg) -> list[Cmd]:
        self.modals.clear()
        if not msg.selections:
            return []
        self.app_ctx.set_selections(list(msg.selections))
        self.profile_error = None
        logger.info(f"프로파일 변경: {', '.join(s.display_name for s in msg.selections)}")
        return [self.coordinator.dispatch(RefreshKind.PROFILE_REFRESH, partial(refresh_context_data, self.app_ctx))]

    # -------------------------------------------------------------------------
    # 비동기 결과
    # -------------------------------------------------------------------------

    def _on_refresh_done(self, msg: RefreshDoneMsg) -> list[Cmd]:
        if not self.coordinator.accept(msg):
            return []
        if msg.kind is RefreshKind.CONTEXT_INIT:
            return self._apply_context_init(msg)
        return self._apply_profile_refresh(msg)

    def _apply_context_init(self, msg: RefreshDoneMsg) -> list[Cmd]:
        cmds: list[Cmd] = []
        if msg.error is not None:
            cmds += self._add_warning(format_error_for_user(msg.error))
        else:
            result = msg.result
            for selection_id, account_id in result.account_ids.items():
                self.app_ctx.set_account_id(selection_id, account_id)
            for warning in result.warnings:
                cmds += self._add_warning(warning)
            for error in result.imds_errors:
                logger.info(error)
            if result.region and not self.app_ctx.get_region():
                self.app_ctx.set_regions([result.region])
                cmds += self._refresh_current()

        if self._pending_resource is not None:
            cmds.append(self._fetch_resource(self._pending_resource))
            self._pending_resource = None
        return cmds

    def _apply_profile_refresh(self, msg: RefreshDoneMsg) -> list[Cmd]:
        if msg.error is not None:
            self.profile_error = msg.error
            return self._set_status(format_error_for_user(msg.error), "error")

        result = msg.result
        for selection_id, account_id in result.account_ids.items():
            self.app_ctx.set_account_id(selection_id, account_id)
        if result.region and not self.app_ctx.is_multi_region():
            self.app_ctx.set_regions([result.region])

        cmds: list[Cmd] = []
        if result.error is not None:
            self.profile_error = result.error
            cmds += self._set_status(format_error_for_user(result.error), "error")
        return cmds + self._refresh_current()

    def _on_startup_resource(self, msg: StartupResourceMsg) -> list[Cmd]:
        if msg.error is not None or msg.resource is None or msg.dao is None:
            return self._set_status(t("tui.resource_not_found", id=msg.resource_id), "warning")
        renderer = self.registry.create_renderer(msg.service, msg.resource_type)
        view = DetailView(self.ctx, msg.resource, msg.dao, renderer, msg.service, msg.resource_type)
        return self.navigate(view)

    # =========================================================================
    # 렌더링
    # =========================================================================

    def _render_header(self) -> Text:
        app = self.app_ctx
        header = Text(" awsnav ", style="bold white on blue")
        header.append(" " + ", ".join(s.display_name for s in app.get_selections()), style="bold")
        account_id = app.get_account_id()
        if account_id:
            header.append(f" ({account_id})", style="cyan")
        header.append(f" | {', '.join(app.get_regions()) or '-'}")
        if app.read_only:
            header.append(" ")
            header.append(" READ-ONLY ", style="bold black on yellow")
        if self.coordinator.is_refreshing(RefreshKind.CONTEXT_INIT):
            header.append(f" {t('tui.aws_initializing')}", style="yellow")
        elif self.coordinator.is_refreshing(RefreshKind.PROFILE_REFRESH):
            header.append(f" {t('tui.refreshing_profile')}", style="yellow")
        elif self.profile_error is not None:
            header.append(f" {t('tui.profile_error')}", style="red")
        if self.current is not None:
            header.append(f" | {self.current.title}", style="dim")
        header.truncate(self.width)
        return header

    def _render_footer(self) -> Text:
        if self.command.active:
            footer = Text(self.command.input.render(), style="bold")
            footer.append(self.command.render_suggestions(), style="dim")
            return footer
        if self.status:
            styles = {"error": "bold red", "warning": "yellow", "success": "green"}
            return Text(self.status, style=styles.get(self.status_level, ""))
        view = self.modals[-1].content if self.modals else self.current
        footer = Text(view.status_line() if view is not None else "", style="dim")
        footer.truncate(self.width)
        return footer

    def _render_body(self) -> RenderableType:
        if self.show_warnings:
            return render_warnings(self.warnings, self.ready, self.width)
        if self.modals:
            top = self.modals[-1]
            panel = Panel(
                top.content.render(),
                title=top.content.title,
                title_align="left",
                border_style="cyan",
                width=min(top.width, self.width),
            )
            return Align.center(panel, vertical="middle")
        if self.current is None:
            return Text("")
        return self.current.render()

    def render(self) -> RenderableType:
        layout = Layout()
        layout.split_column(
            Layout(self._render_header(), size=1),
            Layout(self._render_body(), name="body"),
            Layout(self._render_footer(), size=1),
        )
        return layout

    def close(self) -> None:
        self.coordinator.close()
