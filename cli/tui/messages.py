"""
cli/tui/messages.py - 메시지 타입

메시지 루프를 오가는 모든 메시지는 불변 데이터클래스입니다.

분류:
- 입력/시스템: KeyMsg, ResizeMsg, QuitMsg
- 상태 표시: ErrorMsg, FlashMsg, ClearStatusMsg
- 내비게이션: NavigateMsg, ShowModalMsg, HideModalMsg
- 선택 변경: RegionsSelectedMsg, ProfilesSelectedMsg
- 뷰 결과: ViewResultMsg (발신 뷰가 현재 뷰일 때만 전달) 와 그 페이로드
- 명령 결과: FilterMsg, TagFilterMsg, SortMsg, DiffMsg (현재 뷰로 전달)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.actions import Action
    from core.context import ProfileSelection
    from core.dao.types import DAO, Resource
    from core.exceptions import PartialFanoutFailure

    from .view import Modal, View


# =============================================================================
# 입력 / 시스템
# =============================================================================


@dataclass(frozen=True)
class KeyMsg:
    """정규화된 키 이름 (예: "enter", "esc", "ctrl+c", "j", "shift+tab")"""

    key: str


@dataclass(frozen=True)
class ResizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class QuitMsg:
    pass


# =============================================================================
# 상태 표시
# =============================================================================


@dataclass(frozen=True)
class ErrorMsg:
    error: Exception


@dataclass(frozen=True)
class FlashMsg:
    """짧게 표시되는 알림

    Attributes:
        text: 메시지
        level: "success" 또는 "warning"
    """

    text: str
    level: str = "success"


@dataclass(frozen=True)
class ClearStatusMsg:
    """seq 가 현재 상태 표시 번호와 같을 때만 지움"""

    seq: int


# =============================================================================
# 내비게이션
# =============================================================================


@dataclass(frozen=True, eq=False)
class NavigateMsg:
    view: View
    clear_stack: bool = False


@dataclass(frozen=True, eq=False)
class ShowModalMsg:
    modal: Modal


@dataclass(frozen=True)
class HideModalMsg:
    pass


@dataclass(frozen=True)
class RegionsSelectedMsg:
    regions: tuple[str, ...]


@dataclass(frozen=True)
class ProfilesSelectedMsg:
    selections: tuple[ProfileSelection, ...]


@dataclass(frozen=True, eq=False)
class StartupResourceMsg:
    """시작 경로의 리소스 단건 조회 결과"""

    service: str
    resource_type: str
    resource_id: str
    resource: Resource | None = None
    dao: DAO | None = None
    error: Exception | None = None


# =============================================================================
# 뷰 결과
# =============================================================================


@dataclass(frozen=True, eq=False)
class ViewResultMsg:
    """뷰가 시작한 비동기 작업의 결과

    view 가 현재 뷰이거나 최상위 모달 내용일 때만 전달되고, 아니면 버려집니다.
    """

    view: View
    payload: Any


@dataclass(frozen=True, eq=False)
class ResourcesLoaded:
    """목록 조회 결과 (request_id 가 뷰의 최신 요청과 다르면 버려짐)"""

    resources: list = field(default_factory=list)
    dao: DAO | None = None
    partial_failure: PartialFanoutFailure | None = None
    truncated: bool = False
    next_token: str = ""
    error: Exception | None = None
    request_id: int = 0


@dataclass(frozen=True, eq=False)
class PageLoaded:
    """다음 페이지 조회 결과 (목록을 다시 불러왔으면 request_id 불일치로 버려짐)"""

    resources: list = field(default_factory=list)
    next_token: str = ""
    error: Exception | None = None
    request_id: int = 0


@dataclass(frozen=True, eq=False)
class ResourceLoaded:
    resource: Resource | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class ActionCompleted:
    """리소스 작업(삭제 포함) 실행 결과"""

    action: Action
    resource_id: str
    error: Exception | None = None


@dataclass(frozen=True)
class LogPoll:
    """폴링 타이머 (generation 이 다르면 이전 폴링 체인)"""

    generation: int = 0


@dataclass(frozen=True)
class LogEventsLoaded:
    events: tuple = ()
    error: Exception | None = None
    generation: int = 0


@dataclass(frozen=True)
class ItemsLoaded:
    """선택 화면 항목 목록"""

    items: tuple[str, ...] = ()
    error: Exception | None = None


@dataclass(frozen=True)
class PanelLoaded:
    """대시보드 패널 조회 결과"""

    key: str
    count: int = 0
    highlights: tuple[str, ...] = ()
    error: Exception | None = None
    generation: int = 0


# =============================================================================
# 명령 결과 (현재 뷰로 전달)
# =============================================================================


@dataclass(frozen=True)
class FilterMsg:
    text: str


@dataclass(frozen=True)
class TagFilterMsg:
    filter: str


@dataclass(frozen=True)
class SortMsg:
    """column 이 비어 있으면 정렬 해제"""

    column: str
    ascending: bool = True


@dataclass(frozen=True)
class DiffMsg:
    """left 가 비어 있으면 커서 위치 리소스와 비교"""

    left: str
    right: str
