"""
core/dao/types.py - 리소스/DAO 계약

리소스 종류별 데이터 어댑터(DAO)가 구현해야 하는 인터페이스와,
팬아웃 결과에 출처(리전/프로파일)를 붙이는 리소스 래퍼를 정의합니다.

주요 구성 요소:
- Resource: 공통 리소스 인터페이스 (get_id, get_name, get_arn, get_tags, raw)
- BaseResource: 딕셔너리 기반 기본 구현
- RegionalResource / ProfiledResource: 출처 태그 래퍼 (ID에 출처 접두사)
- DAO / PaginatedDAO / BaseDAO: 데이터 어댑터 계약
- RequestContext: DAO 팩토리에 전달되는 불변 호출 컨텍스트
- ResourceList: 부분 실패/잘림 정보를 담는 리스트

Example:
    class InstanceDAO(BaseDAO):
        def __init__(self, ctx: RequestContext):
            super().__init__("ec2", "instances")
            self.ctx = ctx

        def list(self) -> list[Resource]:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.context import AppContext, ProfileSelection
    from core.actions import Action
    from core.exceptions import PartialFanoutFailure

# =============================================================================
# 리소스
# =============================================================================


@runtime_checkable
class Resource(Protocol):
    """공통 리소스 인터페이스"""

    def get_id(self) -> str: ...

    def get_name(self) -> str: ...

    def get_arn(self) -> str: ...

    def get_tags(self) -> dict[str, str]: ...

    def raw(self) -> Any: ...


@runtime_checkable
class Mergeable(Protocol):
    """Get으로 새로 조회한 리소스가 List 전용 필드를 이어받을 수 있는 리소스"""

    def merge_from(self, previous: Resource) -> None: ...


@dataclass
class BaseResource:
    """딕셔너리 기반 기본 리소스

    Attributes:
        id: 리소스 ID
        name: 표시 이름 (없으면 ID)
        arn: ARN
        tags: 태그 딕셔너리
        data: API 원본 응답
    """

    id: str
    name: str = ""
    arn: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    data: Any = None

    def get_id(self) -> str:
        return self.id

    def get_name(self) -> str:
        return self.name or self.id

    def get_arn(self) -> str:
        return self.arn

    def get_tags(self) -> dict[str, str]:
        return self.tags

    def raw(self) -> Any:
        return self.data


def tags_to_dict(tags: list[dict[str, str]] | None) -> dict[str, str]:
    """AWS [{"Key": k, "Value": v}] 형식 태그를 딕셔너리로 변환"""
    return {t.get("Key", ""): t.get("Value", "") for t in tags or [] if t.get("Key")}


class RegionalResource:
    """리전 출처가 붙은 리소스

    멀티 리전 병합 목록에서 ID가 겹치지 않도록 "region:id" 를 ID로 사용합니다.
    """

    def __init__(self, resource: Resource, region: str):
        self.resource = resource
        self.region = region

    def get_id(self) -> str:
        return f"{self.region}:{self.resource.get_id()}"

    def get_name(self) -> str:
        return self.resource.get_name()

    def get_arn(self) -> str:
        return self.resource.get_arn()

    def get_tags(self) -> dict[str, str]:
        return self.resource.get_tags()

    def raw(self) -> Any:
        return self.resource.raw()

    def __repr__(self) -> str:
        return f"RegionalResource({self.get_id()!r})"


class ProfiledResource:
    """프로파일/계정/리전 출처가 붙은 리소스

    ID는 "profile:region:id" 형식입니다.
    """

    def __init__(self, resource: Resource, profile: str, account_id: str, region: str):
        # 리전 래퍼는 벗겨내고 원본을 감쌈
        self.resource = resource.resource if isinstance(resource, RegionalResource) else resource
        self.profile = profile
        self.account_id = account_id
        self.region = region

    def get_id(self) -> str:
        return f"{self.profile}:{self.region}:{self.resource.get_id()}"

    def get_name(self) -> str:
        return self.resource.get_name()

    def get_arn(self) -> str:
        return self.resource.get_arn()

    def get_tags(self) -> dict[str, str]:
        return self.resource.get_tags()

    def raw(self) -> Any:
        return self.resource.raw()

    def __repr__(self) -> str:
        return f"ProfiledResource({self.get_id()!r})"


def unwrap_resource(resource: Resource) -> Resource:
    """출처 래퍼를 모두 벗겨 원본 리소스 반환"""
    while isinstance(resource, (RegionalResource, ProfiledResource)):
        resource = resource.resource
    return resource


def get_resource_region(resource: Resource) -> str:
    """출처 리전 (래핑되지 않았으면 빈 문자열)"""
    if isinstance(resource, (RegionalResource, ProfiledResource)):
        return resource.region
    return ""


def get_resource_profile(resource: Resource) -> str:
    """출처 프로파일 ID (래핑되지 않았으면 빈 문자열)"""
    if isinstance(resource, ProfiledResource):
        return resource.profile
    return ""


def get_resource_account_id(resource: Resource) -> str:
    if isinstance(resource, ProfiledResource):
        return resource.account_id
    return ""


def same_resource(a: Resource | None, b: Resource | None) -> bool:
    """출처 래퍼와 무관하게 같은 리소스인지 비교"""
    if a is None or b is None:
        return False
    if get_resource_region(a) != get_resource_region(b) or get_resource_profile(a) != get_resource_profile(b):
        return False
    return unwrap_resource(a).get_id() == unwrap_resource(b).get_id()


class ResourceList(list):
    """List 결과

    Attributes:
        partial_failure: 일부 팬아웃 대상이 실패했을 때의 PartialFanoutFailure
        truncated: 페이지/항목 상한에 걸려 잘렸는지 여부
    """

    def __init__(self, items=(), partial_failure: PartialFanoutFailure | None = None, truncated: bool = False):
        super().__init__(items)
        self.partial_failure = partial_failure
        self.truncated = truncated

    @property
    def partial_errors(self) -> list[str]:
        """실패한 팬아웃 대상의 "대상: 에러" 목록"""
        return self.partial_failure.failures if self.partial_failure is not None else []

    @property
    def is_partial(self) -> bool:
        return self.partial_failure is not None


# =============================================================================
# 호출 컨텍스트
# =============================================================================


@dataclass(frozen=True)
class RequestContext:
    """DAO 팩토리에 전달되는 호출 컨텍스트

    region/selection 이 비어 있으면 AppContext의 선택(첫 번째 리전/프로파일)을
    사용합니다. 명시적으로 지정되면 팬아웃 없이 해당 대상만 조회합니다.

    Attributes:
        app: 애플리케이션 선택 상태
        region: 리전 오버라이드
        selection: 프로파일 오버라이드
        filters: 상위 리소스가 전달한 필터 (예: {"StackName": "web"})
        page_size: 페이지 크기 힌트
    """

    app: AppContext
    region: str = ""
    selection: ProfileSelection | None = None
    filters: Mapping[str, str] = field(default_factory=dict)
    page_size: int = 100

    @property
    def effective_region(self) -> str:
        return self.region or self.app.get_region()

    @property
    def effective_selection(self) -> ProfileSelection:
        return self.selection or self.app.get_selection()

    @property
    def has_explicit_target(self) -> bool:
        return bool(self.region) or self.selection is not None

    def with_region(self, region: str) -> RequestContext:
        return replace(self, region=region)

    def with_profile(self, selection: ProfileSelection) -> RequestContext:
        return replace(self, selection=selection)

    def with_filter(self, name: str, value: str) -> RequestContext:
        filters = dict(self.filters)
        filters[name] = value
        return replace(self, filters=filters)

    def get_filter(self, name: str) -> str:
        return self.filters.get(name, "")


# =============================================================================
# DAO
# =============================================================================


class Operation(Enum):
    """DAO 작업 종류"""

    LIST = "list"
    GET = "get"
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


class DAO(ABC):
    """데이터 어댑터 계약"""

    @property
    @abstractmethod
    def service_name(self) -> str: ...

    @property
    @abstractmethod
    def resource_type(self) -> str: ...

    @abstractmethod
    def list(self) -> list[Resource]:
        """전체 목록 조회"""

    @abstractmethod
    def get(self, resource_id: str) -> Resource:
        """단건 조회"""

    @abstractmethod
    def delete(self, resource_id: str) -> None:
        """삭제"""

    @abstractmethod
    def supports(self, op: Operation) -> bool:
        """작업 지원 여부"""

    def actions(self) -> tuple[Action, ...]:
        """리소스 작업 메뉴에 표시할 작업 (삭제 제외)"""
        return ()

    def run_action(self, operation: str, resource_id: str) -> None:
        """actions() 가 선언한 작업 실행"""
        from core.exceptions import UnsupportedOperationError

        raise UnsupportedOperationError(self.service_name, self.resource_type, operation)


class PaginatedDAO(DAO):
    """페이지 단위 조회를 지원하는 DAO"""

    @abstractmethod
    def list_page(self, page_size: int, page_token: str = "") -> tuple[list[Resource], str]:
        """한 페이지 조회

        Args:
            page_size: 페이지 크기 힌트 (API가 무시할 수 있음)
            page_token: 이전 페이지의 다음 토큰 (첫 페이지는 빈 문자열)

        Returns:
            (리소스 목록, 다음 토큰) - 마지막 페이지면 다음 토큰은 빈 문자열
        """

    def list(self) -> list[Resource]:
        resources, _ = self.list_page(100, "")
        return resources


class BaseDAO(DAO):
    """기본 DAO

    기본 지원 작업은 LIST 뿐입니다. get/delete 를 구현하는 하위 클래스는
    _SUPPORTED 에 해당 작업을 함께 선언합니다. 리소스 작업은 _ACTIONS 에
    선언하고 run_action 을 구현합니다.
    """

    _SUPPORTED = frozenset({Operation.LIST})
    _ACTIONS: tuple[Action, ...] = ()

    def __init__(self, service: str, resource_type: str):
        self._service = service
        self._resource_type = resource_type

    @property
    def service_name(self) -> str:
        return self._service

    @property
    def resource_type(self) -> str:
        return self._resource_type

    def supports(self, op: Operation) -> bool:
        return op in self._SUPPORTED

    def actions(self) -> tuple[Action, ...]:
        return self._ACTIONS

    def get(self, resource_id: str) -> Resource:
        from core.exceptions import UnsupportedOperationError

        raise UnsupportedOperationError(self._service, self._resource_type, Operation.GET.value)

    def delete(self, resource_id: str) -> None:
        from core.exceptions import UnsupportedOperationError

        raise UnsupportedOperationError(self._service, self._resource_type, Operation.DELETE.value)


class BasePaginatedDAO(BaseDAO, PaginatedDAO):
    """페이지 조회 기본 DAO"""

    def list(self) -> list[Resource]:
        return PaginatedDAO.list(self)


DAOFactory = Callable[[RequestContext], DAO]
