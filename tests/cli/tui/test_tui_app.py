"""
tests/cli/tui/test_tui_app.py - 내비게이션 컨트롤러 테스트

AWS 컨텍스트 조회(init_context / refresh_context_data)는 monkeypatch 로 대체하고
Cmd 는 drain() 으로 동기 실행합니다.
"""

import io

import pytest
from conftest import FakeDAO, drain
from rich.console import Console

import cli.tui.app as app_module
from cli.i18n import t
from cli.tui.app import ERROR_CLEAR_SECONDS, FLASH_CLEAR_SECONDS, AppState, NavigatorApp, StartupPath
from cli.tui.cmd import Tick
from cli.tui.messages import (
    ClearStatusMsg,
    ErrorMsg,
    FlashMsg,
    KeyMsg,
    NavigateMsg,
    ProfilesSelectedMsg,
    RegionsSelectedMsg,
    ResizeMsg,
    ResourcesLoaded,
    ViewResultMsg,
)
from cli.tui.view import Modal
from cli.tui.views import (
    Dashboard,
    DetailView,
    HelpView,
    ProfileSelector,
    RegionSelector,
    ResourceBrowser,
    ServiceBrowser,
)
from core.auth.session import ContextInitResult, ProfileRefreshResult
from core.config import NavConfig, StartupConfig
from core.context import SDK_DEFAULT_ID, AppContext, ProfileSelection
from core.exceptions import PartialFanoutFailure, RefreshTimeoutError, UnhandledMessageError
from core.refresh import RefreshCoordinator
from core.registry import RegistryEntry
from core.resources.tagging import TAG_FILTER, TAG_SEARCH_RESOURCE, TAG_SEARCH_SERVICE


@pytest.fixture
def context_result(monkeypatch):
    """init_context 대체 (반환값을 테스트에서 바꿀 수 있음)"""
    result = ContextInitResult()
    monkeypatch.setattr(app_module, "init_context", lambda app: result)
    return result


@pytest.fixture
def refresh_result(monkeypatch):
    result = ProfileRefreshResult()
    monkeypatch.setattr(app_module, "refresh_context_data", lambda app: result)
    return result


@pytest.fixture
def make_app(app_ctx, registry, nav_config, context_result, refresh_result):
    """NavigatorApp 생성 헬퍼 (코디네이터는 테스트 후 정리)"""
    created = []

    def _make(startup_path=None, config=None, ctx=None):
        app = NavigatorApp(
            ctx if ctx is not None else app_ctx,
            registry,
            config if config is not None else nav_config,
            startup_path,
            coordinator=RefreshCoordinator(timeout=2.0),
        )
        created.append(app)
        return app

    yield _make
    for app in created:
        app.close()


def started(app):
    """init 후 첫 화면 크기 이벤트까지 처리"""
    drain(app, app.init())
    app.update(ResizeMsg(100, 30))
    return app


def press(app, *names):
    """키를 순서대로 전달하고 후속 Cmd 까지 실행"""
    emitted = []
    for name in names:
        emitted += drain(app, app.update(KeyMsg(name)))
    return emitted


# =============================================================================
# 시작
# =============================================================================


class TestStartup:
    """시작 화면 결정 테스트"""

    def test_default_service_browser(self, make_app):
        """기본은 서비스 목록"""
        app = started(make_app())
        assert isinstance(app.current, ServiceBrowser)
        assert app.state is AppState.NORMAL
        assert app.stack == []

    def test_config_startup_view(self, make_app):
        """설정의 시작 화면"""
        app = started(make_app(config=NavConfig(startup=StartupConfig(view="dashboard"))))
        assert isinstance(app.current, Dashboard)

        app = started(make_app(config=NavConfig(startup=StartupConfig(view="fw"))))
        assert (app.current.service, app.current.resource_type) == ("fake", "widgets")

    def test_startup_path_alias(self, make_app):
        """시작 경로는 별칭/기본 리소스 적용"""
        app = started(make_app(StartupPath("fk")))
        assert isinstance(app.current, ResourceBrowser)
        assert (app.current.service, app.current.resource_type) == ("fake", "items")
        assert len(app.current.resources) == 3

    def test_startup_path_resource_opens_detail(self, make_app):
        """리소스 ID 가 있으면 컨텍스트 초기화 후 상세 화면"""
        app = started(make_app(StartupPath("fake", "items", "i-002")))
        assert isinstance(app.current, DetailView)
        assert app.current.resource.get_name() == "web-2"
        assert isinstance(app.stack[-1], ResourceBrowser)

    def test_startup_resource_not_found(self, make_app):
        """없는 리소스는 상태 표시줄 경고"""
        app = started(make_app(StartupPath("fake", "items", "i-999")))
        assert isinstance(app.current, ResourceBrowser)
        assert app.status == t("tui.resource_not_found", id="i-999")
        assert app.status_level == "warning"

    def test_unknown_startup_path_warns(self, make_app):
        """등록되지 않은 시작 경로는 경고 화면과 서비스 목록"""
        app = started(make_app(StartupPath("nothing")))
        assert isinstance(app.current, ServiceBrowser)
        assert app.state is AppState.WARNINGS
        assert "nothing" in app.warnings[0]


class TestContextInit:
    """컨텍스트 초기화 결과 반영 테스트"""

    def test_account_ids_and_warnings(self, make_app, context_result):
        """계정 ID 반영, 경고는 경고 화면으로"""
        context_result.account_ids[SDK_DEFAULT_ID] = "123456789012"
        context_result.warnings.append("프로파일을 찾을 수 없습니다")
        app = started(make_app())

        assert app.app_ctx.get_account_id() == "123456789012"
        assert app.warnings == ["프로파일을 찾을 수 없습니다"]
        assert app.state is AppState.WARNINGS

    def test_region_fallback(self, make_app, context_result):
        """선택된 리전이 없으면 결정된 리전 사용"""
        context_result.region = "us-west-2"
        app = started(make_app(ctx=AppContext()))
        assert app.app_ctx.get_regions() == ["us-west-2"]

    def test_region_kept(self, make_app, context_result):
        """이미 선택된 리전은 유지"""
        context_result.region = "us-west-2"
        app = started(make_app())
        assert app.app_ctx.get_regions() == ["ap-northeast-2"]

    def test_failure_becomes_warning(self, make_app, monkeypatch):
        """초기화 실패는 경고"""

        def _fail(app):
            raise RuntimeError("자격 증명 없음")

        monkeypatch.setattr(app_module, "init_context", _fail)
        app = started(make_app())
        assert app.warnings == ["자격 증명 없음"]


class TestWarnings:
    """시작 경고 화면 테스트"""

    def test_dismiss_requires_resize(self, make_app):
        """첫 화면 크기 이벤트 전에는 닫기 키 무시"""
        app = make_app(config=NavConfig(warnings=["설정 오류 [x]"]))
        drain(app, app.init())
        assert app.state is AppState.WARNINGS

        app.update(KeyMsg("enter"))
        assert app.state is AppState.WARNINGS

        app.update(ResizeMsg(100, 30))
        app.update(KeyMsg("enter"))
        assert app.state is AppState.NORMAL

    def test_q_only_dismisses(self, make_app):
        """경고 화면에서 q 는 종료가 아니라 닫기, 그 외 키는 무시"""
        app = started(make_app(config=NavConfig(warnings=["w"])))
        app.update(KeyMsg("j"))
        assert app.state is AppState.WARNINGS
        app.update(KeyMsg("q"))
        assert app.state is AppState.NORMAL
        assert not app.quitting

    def test_late_warning_goes_to_status(self, make_app):
        """경고 화면을 닫은 뒤의 경고는 상태 표시줄"""
        app = started(make_app(config=NavConfig(warnings=["w"])))
        app.update(KeyMsg("esc"))
        app._add_warning("늦은 경고")
        assert app.state is AppState.NORMAL
        assert (app.status, app.status_level) == ("늦은 경고", "warning")


# =============================================================================
# 내비게이션
# =============================================================================


class TestNavigation:
    """뒤로 가기 스택 테스트"""

    def test_navigate_and_back(self, make_app):
        """이동은 스택에 쌓고 뒤로 가기는 복원"""
        app = started(make_app())
        root = app.current
        browser = ResourceBrowser(app.ctx, "fake", "items")

        drain(app, app.update(NavigateMsg(browser)))
        assert app.current is browser
        assert app.stack == [root]

        press(app, "esc")
        assert app.current is root
        assert app.stack == []
        assert app.back() == []

    def test_stack_bounded(self, make_app):
        """스택 상한을 넘으면 가장 오래된 항목부터 제거"""
        app = started(make_app(config=NavConfig(max_stack_size=3)))
        views = [Dashboard(app.ctx) for _ in range(5)]
        for view in views:
            app.navigate(view)
        assert len(app.stack) == 3
        assert app.stack == views[1:4]

    def test_clear_stack(self, make_app):
        """clear_stack 이동"""
        app = started(make_app())
        app.navigate(Dashboard(app.ctx))
        app.navigate(ServiceBrowser(app.ctx), clear_stack=True)
        assert app.stack == []

    def test_quit_at_root(self, make_app):
        """루트에서 q 는 종료"""
        app = started(make_app())
        press(app, "q")
        assert app.quitting

    def test_q_in_leaf_view_goes_back(self, make_app):
        """상세 화면의 q 는 뒤로 가기"""
        app = started(make_app(StartupPath("fake", "items", "i-001")))
        assert isinstance(app.current, DetailView)
        press(app, "q")
        assert isinstance(app.current, ResourceBrowser)
        assert not app.quitting

    def test_q_follows_view_capability(self, make_app):
        """q 의 뒤로 가기 여부는 뷰가 결정"""

        class _LeafDashboard(Dashboard):
            def quits_to_back(self) -> bool:
                return True

        app = started(make_app(StartupPath("fake")))
        app.navigate(_LeafDashboard(app.ctx))
        press(app, "q")
        assert isinstance(app.current, ResourceBrowser)
        assert not app.quitting

        app.navigate(Dashboard(app.ctx))
        press(app, "q")
        assert app.quitting

    def test_back_clears_view_state_first(self, make_app):
        """뷰가 해제할 상태(비교 표시)가 있으면 뒤로 가지 않음"""
        app = started(make_app(StartupPath("fake")))
        app.navigate(ResourceBrowser(app.ctx, "fake", "widgets"))
        press(app, "1")
        press(app, "m")
        assert app.current.mark is not None

        press(app, "esc")
        assert app.current.mark is None
        assert len(app.stack) == 1

    def test_input_capture(self, make_app):
        """필터 입력 중에는 q 도 입력"""
        app = started(make_app(StartupPath("fake")))
        press(app, "/", "q")
        assert not app.quitting
        assert app.current.filter.value == "q"

    def test_stale_view_result_discarded(self, make_app):
        """현재 뷰가 아닌 뷰의 결과는 버림"""
        app = started(make_app(StartupPath("fake")))
        old = app.current
        app.navigate(Dashboard(app.ctx))

        result = ResourcesLoaded(resources=[], request_id=old._request_id)
        assert app.update(ViewResultMsg(old, result)) == []
        assert len(old.resources) == 3

    def test_back_restores_in_reverse_order(self, make_app):
        """여러 번 이동 후 뒤로 가기는 역순 복원"""
        app = started(make_app())
        root = app.current
        views = [Dashboard(app.ctx) for _ in range(3)]
        for view in views:
            app.navigate(view)

        for expected in [views[1], views[0], root]:
            app.back()
            assert app.current is expected
        assert app.stack == []

    def test_unhandled_message(self, make_app):
        """처리되지 않은 메시지 타입"""
        app = make_app()
        with pytest.raises(UnhandledMessageError):
            app.update(object())


class TestModals:
    """모달 테스트"""

    def test_help(self, make_app):
        """? 는 도움말, esc 로 닫기"""
        app = started(make_app())
        press(app, "?")
        assert app.state is AppState.MODAL
        assert isinstance(app.modals[-1].content, HelpView)

        press(app, "esc")
        assert app.state is AppState.NORMAL

    def test_selector_filter_captures_close_keys(self, make_app):
        """선택 모달의 필터 입력 중 esc 는 필터 해제"""
        app = started(make_app())
        # 선택 화면의 항목 조회(AWS)는 실행하지 않음
        app.update(KeyMsg("R"))
        selector = app.modals[-1].content
        assert isinstance(selector, RegionSelector)

        app.update(KeyMsg("/"))
        app.update(KeyMsg("esc"))
        assert app.modals

        app.update(KeyMsg("esc"))
        assert not app.modals

    def test_delete_confirm_flow(self, make_app, store):
        """삭제 확인 모달"""
        app = started(make_app(StartupPath("fake")))
        press(app, "D")
        assert app.state is AppState.MODAL

        emitted = press(app, "y")

        assert store.deleted == ["i-001"]
        assert app.state is AppState.NORMAL
        assert FlashMsg(t("tui.deleted", name="i-001")) in emitted
        assert len(app.current.resources) == 2

    def test_nested_modals(self, make_app):
        """모달 위 모달은 닫기 키 한 번에 하나씩"""
        app = started(make_app())
        first, second = HelpView(), HelpView()
        app.show_modal(Modal(first))
        app.show_modal(Modal(second))

        press(app, "esc")
        assert app.modals[-1].content is first
        assert app.state is AppState.MODAL

        press(app, "esc")
        assert app.modals == []
        assert app.state is AppState.NORMAL

    def test_profile_selector(self, make_app):
        """P 는 프로파일 선택"""
        app = started(make_app())
        app.update(KeyMsg("P"))
        assert isinstance(app.modals[-1].content, ProfileSelector)


# =============================================================================
# 명령 모드
# =============================================================================


class TestCommandMode:
    """: 명령 테스트"""

    def test_navigate_command(self, make_app):
        """:fw 는 리소스 목록으로 이동"""
        app = started(make_app())
        press(app, ":")
        assert app.state is AppState.COMMAND

        press(app, "f", "w", "enter")

        assert app.state is AppState.NORMAL
        assert (app.current.service, app.current.resource_type) == ("fake", "widgets")
        assert len(app.stack) == 1

    def test_navigate_with_resource_id(self, make_app):
        """:fake/items/i-003 은 상세 화면까지"""
        app = started(make_app())
        press(app, ":", *"fake/items/i-003", "enter")
        assert isinstance(app.current, DetailView)
        assert app.current.resource.get_name() == "batch"

    def test_unknown_command(self, make_app):
        """해석 실패는 오류 표시"""
        app = started(make_app())
        press(app, ":", "x", "y", "z", "enter")
        assert app.status_level == "error"
        assert isinstance(app.current, ServiceBrowser)

    def test_escape_cancels(self, make_app):
        """esc 는 취소"""
        app = started(make_app())
        press(app, ":", "q", "esc")
        assert app.state is AppState.NORMAL
        assert not app.quitting

    def test_home_and_services_clear_stack(self, make_app):
        """:home / :services 는 스택 초기화"""
        app = started(make_app(StartupPath("fake")))
        press(app, ":", *"home", "enter")
        assert isinstance(app.current, Dashboard)
        assert app.stack == []

        press(app, ":", *"services", "enter")
        assert isinstance(app.current, ServiceBrowser)
        assert app.stack == []

    def test_quit(self, make_app):
        """:q"""
        app = started(make_app())
        press(app, ":", "q", "enter")
        assert app.quitting

    def test_filter_sort_forwarded(self, make_app):
        """filter / tag / sort 는 현재 뷰로"""
        app = started(make_app(StartupPath("fake")))
        press(app, ":", *"tag env", "enter")
        press(app, ":", *"sort desc NAME", "enter")
        assert [r.get_name() for r in app.current.visible] == ["web-2", "web-1"]

    def test_diff_command(self, make_app):
        """:diff 는 비교 화면"""
        app = started(make_app(StartupPath("fake")))
        press(app, ":", *"diff web-1 batch", "enter")
        assert app.current.title == "web-1 ↔ batch"

    def test_tag_suggestions_from_current_view(self, make_app):
        """현재 뷰가 태그 제안을 제공"""
        app = started(make_app(StartupPath("fake")))
        press(app, ":", *"tag t", "tab")
        assert app.command.value == "tag team"

    def test_tag_search_command(self, make_app, registry, store):
        """:tags k=v 는 태그 필터를 넘긴 태그 검색 목록으로 이동"""
        seen = []

        def _factory(ctx):
            seen.append(ctx.get_filter(TAG_FILTER))
            return FakeDAO(ctx, store, TAG_SEARCH_RESOURCE)

        registry.register_custom(TAG_SEARCH_SERVICE, TAG_SEARCH_RESOURCE, RegistryEntry(_factory))
        app = started(make_app())

        press(app, ":", *"tags env=prod", "enter")

        assert isinstance(app.current, ResourceBrowser)
        assert (app.current.service, app.current.resource_type) == (TAG_SEARCH_SERVICE, TAG_SEARCH_RESOURCE)
        assert seen == ["env=prod"]
        assert len(app.current.resources) == 3

    def test_tag_search_not_registered(self, make_app):
        """태그 검색 리소스가 없으면 오류 표시"""
        app = started(make_app())
        press(app, ":", *"tags env", "enter")
        assert app.status_level == "error"
        assert isinstance(app.current, ServiceBrowser)


# =============================================================================
# 선택 변경 / 비동기 갱신
# =============================================================================


class TestSelectionChanges:
    """리전/프로파일 변경 테스트"""

    def test_regions_selected_refreshes_view(self, make_app, store):
        """리전 변경 후 현재 뷰 새로고침"""
        app = started(make_app(StartupPath("fake")))
        store.add("us-east-1", "i-100", "east")

        drain(app, app.update(RegionsSelectedMsg(("ap-northeast-2", "us-east-1"))))

        assert app.app_ctx.get_regions() == ["ap-northeast-2", "us-east-1"]
        assert app.status == t("tui.regions_changed", regions="ap-northeast-2, us-east-1")
        assert len(app.current.resources) == 4

    def test_region_change_during_load_reloads(self, make_app, store):
        """조회 중 리전을 바꾸면 새 리전으로 다시 조회하고 이전 결과는 버림"""
        app = started(make_app(StartupPath("fake")))
        browser = app.current
        store.add("us-east-1", "i-100", "east-only")

        in_flight = browser.load()
        assert browser.loading

        cmds = app.update(RegionsSelectedMsg(("us-east-1",)))
        assert any(not isinstance(cmd, Tick) for cmd in cmds)
        drain(app, cmds)
        drain(app, in_flight)

        assert app.current is browser
        assert not browser.loading
        assert [r.get_name() for r in browser.resources] == ["east-only"]

    def test_empty_selection_ignored(self, make_app):
        """빈 선택은 무시"""
        app = started(make_app())
        assert app.update(RegionsSelectedMsg(())) == []
        assert app.app_ctx.get_regions() == ["ap-northeast-2"]

    def test_profiles_selected(self, make_app, refresh_result):
        """프로파일 변경 후 계정 ID 재조회"""
        refresh_result.account_ids["dev"] = "111111111111"
        app = started(make_app())

        drain(app, app.update(ProfilesSelectedMsg((ProfileSelection.named("dev"),))))

        assert app.app_ctx.get_selections() == [ProfileSelection.named("dev")]
        assert app.app_ctx.get_account_id("dev") == "111111111111"
        assert app.profile_error is None

    def test_profile_refresh_error(self, make_app, refresh_result):
        """부분 실패는 오류 표시"""
        refresh_result.error = RuntimeError("dev: 자격 증명 만료")
        app = started(make_app())

        drain(app, app.update(ProfilesSelectedMsg((ProfileSelection.named("dev"),))))

        assert app.profile_error is refresh_result.error
        assert app.status_level == "error"

    def test_stale_refresh_discarded(self, make_app, refresh_result):
        """이전 요청의 결과는 반영하지 않음"""
        refresh_result.account_ids["dev"] = "111111111111"
        app = started(make_app())
        (first,) = app.update(ProfilesSelectedMsg((ProfileSelection.named("dev"),)))
        (second,) = app.update(ProfilesSelectedMsg((ProfileSelection.named("dev"),)))

        assert app.update(first()) == []
        assert app.app_ctx.get_account_id("dev") == ""

        drain(app, app.update(second()))
        assert app.app_ctx.get_account_id("dev") == "111111111111"


# =============================================================================
# 상태 표시줄 / 렌더링
# =============================================================================


class TestStatus:
    """상태 표시줄 테스트"""

    def test_flash_clears_by_sequence(self, make_app):
        """나중 메시지가 있으면 이전 타이머는 지우지 않음"""
        app = started(make_app())
        (timer,) = app.update(FlashMsg("첫 번째"))
        assert isinstance(timer, Tick)
        assert timer.seconds == FLASH_CLEAR_SECONDS
        app.update(FlashMsg("두 번째"))

        app.update(ClearStatusMsg(1))
        assert app.status == "두 번째"
        app.update(ClearStatusMsg(2))
        assert app.status == ""

    def test_error_level(self, make_app):
        """오류는 더 오래 표시"""
        app = started(make_app())
        (timer,) = app.update(ErrorMsg(RuntimeError("boom")))
        assert (app.status, app.status_level) == ("boom", "error")
        assert timer.seconds == ERROR_CLEAR_SECONDS

    def test_refresh_timeout_is_warning(self, make_app):
        """갱신 시간 초과는 경고 수준"""
        app = started(make_app())
        app.update(ErrorMsg(RefreshTimeoutError("profile_refresh", 5.0)))
        assert app.status_level == "warning"

    def test_partial_fanout_failure_is_warning(self, make_app):
        """일부 대상 실패는 실패 대상과 함께 경고 수준"""
        app = started(make_app())
        failure = PartialFanoutFailure(["(sdk default)/us-east-1: 권한 없음"], total=2)
        app.update(ErrorMsg(failure))
        assert app.status_level == "warning"
        assert app.status == t("tui.partial_failure", failed=1, total=2, first="(sdk default)/us-east-1: 권한 없음")


class TestRender:
    """렌더링 테스트"""

    def _text(self, app):
        console = Console(file=io.StringIO(), width=100, height=30, color_system=None)
        console.print(app.render())
        return console.file.getvalue()

    def test_header_and_body(self, make_app, context_result):
        """헤더에 선택 상태, 본문에 현재 뷰"""
        context_result.account_ids[SDK_DEFAULT_ID] = "123456789012"
        app = started(make_app(StartupPath("fake")))
        app.app_ctx.read_only = True

        output = self._text(app)

        assert "awsnav" in output
        assert "123456789012" in output
        assert "READ-ONLY" in output
        assert "web-1" in output

    def test_warnings_screen(self, make_app):
        """경고 화면"""
        app = started(make_app(config=NavConfig(warnings=["설정 오류 [navigation]"])))
        assert "설정 오류 [navigation]" in self._text(app)
