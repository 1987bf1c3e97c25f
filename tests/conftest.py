"""
tests/conftest.py - pytest 공통 픽스처

AWS 환경 격리, 테스트용 레지스트리/DAO, Cmd 동기 실행 헬퍼를 제공합니다.

Usage:
    def test_something(registry, tui_ctx):
        view = ResourceBrowser(tui_ctx, "fake", "items")
        drain(view, view.init())
"""

import sys
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from cli.i18n import set_lang  # noqa: E402
from cli.tui.cmd import Tick  # noqa: E402
from cli.tui.messages import ViewResultMsg  # noqa: E402
from cli.tui.view import TUIContext, View  # noqa: E402
from core.auth.session import clear_session_cache  # noqa: E402
from core.config import NavConfig, set_config  # noqa: E402
from core.context import AppContext  # noqa: E402
from core.dao.types import BaseDAO, BaseResource, Operation  # noqa: E402
from core.region.availability import clear_region_cache  # noqa: E402
from core.registry import Registry, RegistryEntry, reset_registry  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """테스트 환경 설정 (실제 AWS 설정 파일/자격 증명 차단)"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_PROFILE", raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws_config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws_credentials"))
    monkeypatch.delenv("AWSNAV_CONFIG", raising=False)
    monkeypatch.delenv("AWSNAV_READ_ONLY", raising=False)

    clear_session_cache()
    clear_region_cache()
    reset_registry()
    set_config(None)
    set_lang("ko")

    yield

    clear_session_cache()
    clear_region_cache()
    reset_registry()
    set_config(None)
    set_lang("ko")


# =============================================================================
# 테스트용 DAO
# =============================================================================


class FakeStore:
    """리전별 리소스 저장소

    Attributes:
        resources: 리전 -> 리소스 목록
        failing: list() 호출이 실패할 리전
        deleted: delete() 로 삭제된 ID
        list_calls: list() 가 호출된 (리전, 프로파일 ID)
    """

    def __init__(self):
        self.resources: dict[str, list[BaseResource]] = {}
        self.failing: set[str] = set()
        self.deleted: list[str] = []
        self.list_calls: list[tuple[str, str]] = []

    def add(self, region: str, resource_id: str, name: str = "", tags: dict | None = None, **data):
        resource = BaseResource(id=resource_id, name=name, tags=dict(tags or {}), data={"Id": resource_id, **data})
        self.resources.setdefault(region, []).append(resource)
        return resource


class FakeDAO(BaseDAO):
    """FakeStore 기반 DAO (리전별 목록)"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})

    def __init__(self, ctx, store: FakeStore, resource_type: str = "items"):
        super().__init__("fake", resource_type)
        self.ctx = ctx
        self.store = store

    def list(self):
        region = self.ctx.effective_region
        self.store.list_calls.append((region, self.ctx.effective_selection.id))
        if region in self.store.failing:
            raise RuntimeError(f"{region} 조회 실패")
        return list(self.store.resources.get(region, []))

    def get(self, resource_id: str):
        for resource in self.store.resources.get(self.ctx.effective_region, []):
            if resource.get_id() == resource_id:
                return resource
        raise KeyError(resource_id)

    def delete(self, resource_id: str) -> None:
        self.store.deleted.append(resource_id)
        resources = self.store.resources.get(self.ctx.effective_region, [])
        self.store.resources[self.ctx.effective_region] = [r for r in resources if r.get_id() != resource_id]


# =============================================================================
# 픽스처
# =============================================================================


@pytest.fixture
def store():
    """ap-northeast-2 에 리소스 3개가 있는 저장소"""
    s = FakeStore()
    s.add("ap-northeast-2", "i-001", "web-1", {"env": "prod", "team": "core"}, State="running")
    s.add("ap-northeast-2", "i-002", "web-2", {"env": "dev"}, State="stopped")
    s.add("ap-northeast-2", "i-003", "batch", {}, State="running")
    return s


@pytest.fixture
def registry(store):
    """fake 서비스만 등록된 레지스트리

    - fake/items, fake/widgets: 일반 리소스
    - fake/parts: 하위 리소스
    - 별칭 fk -> fake/items
    """
    reg = Registry(
        aliases={"fk": "fake/items", "fw": "fake/widgets"},
        display_names={"fake": "Fake Service"},
        categories=[{"name": "Test", "name_ko": "테스트", "services": ["fake"]}],
    )
    reg.register_custom("fake", "items", RegistryEntry(lambda ctx: FakeDAO(ctx, store, "items")))
    reg.register_custom("fake", "widgets", RegistryEntry(lambda ctx: FakeDAO(ctx, store, "widgets")))
    reg.register_custom("fake", "parts", RegistryEntry(lambda ctx: FakeDAO(ctx, store, "parts"), sub_resource=True))
    return reg


@pytest.fixture
def app_ctx():
    return AppContext(regions=["ap-northeast-2"])


@pytest.fixture
def nav_config():
    return NavConfig()


@pytest.fixture
def tui_ctx(app_ctx, registry, nav_config):
    return TUIContext(app_ctx, registry, nav_config)


# =============================================================================
# 헬퍼
# =============================================================================


def drain(target, cmds, limit: int = 100) -> list:
    """Tick 을 제외한 Cmd 를 동기 실행하고 결과 메시지를 target 으로 전달

    target 이 View 이면 자신에게 돌아오는 ViewResultMsg 의 페이로드만 전달하고
    나머지 메시지(NavigateMsg, ErrorMsg 등)는 반환합니다.
    target 이 NavigatorApp 이면 모든 메시지를 update 로 전달합니다.

    Returns:
        발생한 메시지 목록 (실행 순서)
    """
    pending = list(cmds)
    emitted = []
    steps = 0
    while pending and steps < limit:
        cmd = pending.pop(0)
        steps += 1
        if isinstance(cmd, Tick):
            continue
        msg = cmd()
        if msg is None:
            continue
        if isinstance(target, View):
            if isinstance(msg, ViewResultMsg) and msg.view is target:
                pending.extend(target.update(msg.payload) or [])
            else:
                emitted.append(msg)
        else:
            emitted.append(msg)
            pending.extend(target.update(msg) or [])
    return emitted
