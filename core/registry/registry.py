"""
core/registry/registry.py - 리소스 레지스트리

(service, resource) 쌍을 DAO 팩토리/렌더러 팩토리로 해석합니다.
두 단계 우선순위(OVERRIDE > BASE), 별칭, 기본 리소스, 카테고리 메타데이터를 관리합니다.

등록은 시작 시 단일 스레드에서 수행하고, 이후 조회는 여러 스레드에서 동시에 안전합니다.
별칭 목록 같은 파생 값은 최초 조회 시 한 번만 계산해 캐시합니다.

Example:
    registry = Registry()
    registry.register(RegistryTier.BASE, "ec2", "instances", RegistryEntry(InstanceDAO, InstanceRenderer))

    service, resource, found = registry.resolve_alias("sg")  # ("ec2", "security-groups", True)
    dao = registry.create_dao(RequestContext(app), "ec2", "instances")
    resources = dao.list()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from core.dao.types import DAO, DAOFactory, RequestContext
from core.exceptions import NotRegisteredError
from core.parallel.executor import FanoutTarget, build_targets
from core.render import BaseRenderer, RendererFactory

from .defaults import (
    DEFAULT_ALIASES,
    DEFAULT_DISPLAY_NAMES,
    DEFAULT_RESOURCES,
    SERVICE_CATEGORIES,
    SUB_RESOURCES,
)
from .wrappers import FetchPolicy, MultiplexDAOWrapper, PaginatedDAOWrapper

logger = logging.getLogger(__name__)


class RegistryTier(Enum):
    """등록 우선순위 단계"""

    OVERRIDE = "override"  # 직접 작성한 구현 (우선)
    BASE = "base"  # 생성/기본 구현


@dataclass(frozen=True)
class RegistryEntry:
    """레지스트리 항목

    Attributes:
        dao_factory: RequestContext -> DAO
        renderer_factory: () -> Renderer (None이면 BaseRenderer)
        sub_resource: 상위 리소스에서 이동해야만 접근 가능한지 여부
    """

    dao_factory: DAOFactory | None
    renderer_factory: RendererFactory | None = None
    sub_resource: bool = False


@dataclass(frozen=True)
class ServiceCategory:
    """서비스 목록 화면의 카테고리"""

    name: str
    name_ko: str
    services: tuple[str, ...]


class Registry:
    """리소스 레지스트리

    Attributes:
        policy: create_dao 가 만드는 래퍼의 팬아웃/페이지 상한
    """

    def __init__(
        self,
        aliases: dict[str, str] | None = None,
        display_names: dict[str, str] | None = None,
        categories: list[dict] | None = None,
        policy: FetchPolicy | None = None,
    ):
        self._lock = threading.RLock()
        self._tiers: dict[RegistryTier, dict[tuple[str, str], RegistryEntry]] = {
            RegistryTier.OVERRIDE: {},
            RegistryTier.BASE: {},
        }
        self._services: dict[str, list[str]] = {}
        self._aliases = dict(DEFAULT_ALIASES if aliases is None else aliases)
        self._display_names = dict(DEFAULT_DISPLAY_NAMES if display_names is None else display_names)
        self._categories = [
            ServiceCategory(c["name"], c.get("name_ko", c["name"]), tuple(c["services"]))
            for c in (SERVICE_CATEGORIES if categories is None else categories)
        ]
        self._user_defaults: dict[str, str] = {}
        self._sub_resources: set[str] = set(SUB_RESOURCES)
        self.policy = policy or FetchPolicy()

        # 별칭은 초기화 후 변경되지 않으므로 최초 조회 시 캐시
        self._alias_list_cache: list[str] | None = None
        self._service_aliases_cache: dict[str, list[str]] | None = None

    # =========================================================================
    # 등록
    # =========================================================================

    def register(self, tier: RegistryTier, service: str, resource_type: str, entry: RegistryEntry) -> None:
        """항목 등록 (같은 단계에 같은 키를 다시 등록하면 교체)"""
        with self._lock:
            self._tiers[tier][(service, resource_type)] = entry
            resources = self._services.setdefault(service, [])
            if resource_type not in resources:
                resources.append(resource_type)
            if entry.sub_resource:
                self._sub_resources.add(f"{service}/{resource_type}")
        logger.debug(f"레지스트리 등록 [{tier.value}]: {service}/{resource_type}")

    def register_custom(self, service: str, resource_type: str, entry: RegistryEntry) -> None:
        self.register(RegistryTier.OVERRIDE, service, resource_type, entry)

    def register_generated(self, service: str, resource_type: str, entry: RegistryEntry) -> None:
        self.register(RegistryTier.BASE, service, resource_type, entry)

    # =========================================================================
    # 조회
    # =========================================================================

    def get(self, service: str, resource_type: str) -> RegistryEntry | None:
        """항목 조회 (OVERRIDE 우선, 없으면 None)"""
        key = (service, resource_type)
        with self._lock:
            entry = self._tiers[RegistryTier.OVERRIDE].get(key)
            if entry is None:
                entry = self._tiers[RegistryTier.BASE].get(key)
            return entry

    def resolve(self, service: str, resource_type: str) -> RegistryEntry:
        """항목 조회

        Raises:
            NotRegisteredError: 어느 단계에도 없는 경우
        """
        entry = self.get(service, resource_type)
        if entry is None:
            raise NotRegisteredError(service, resource_type)
        return entry

    def has_resource(self, service: str, resource_type: str) -> bool:
        return self.get(service, resource_type) is not None

    def has_service(self, service: str) -> bool:
        with self._lock:
            return service in self._services

    # =========================================================================
    # 별칭
    # =========================================================================

    def resolve_alias(self, token: str) -> tuple[str, str, bool]:
        """별칭 해석 (대소문자 구분, 정확히 일치)

        Returns:
            (service, resource 또는 "", found) - 별칭이 아니면 (token, "", False)
        """
        with self._lock:
            target = self._aliases.get(token)
        if target is None:
            return token, "", False
        service, _, resource = target.partition("/")
        return service, resource, True

    def aliases(self) -> list[str]:
        """자기 자신을 가리키지 않는 별칭 목록 (정렬)"""
        with self._lock:
            if self._alias_list_cache is None:
                self._alias_list_cache = sorted(a for a, target in self._aliases.items() if a != target)
            return list(self._alias_list_cache)

    def aliases_for_service(self, service: str) -> list[str]:
        """서비스(또는 그 리소스)를 가리키는 별칭 목록 (정렬)"""
        with self._lock:
            if self._service_aliases_cache is None:
                cache: dict[str, list[str]] = {}
                for alias, target in self._aliases.items():
                    cache.setdefault(target.partition("/")[0], []).append(alias)
                for values in cache.values():
                    values.sort()
                self._service_aliases_cache = cache
            return list(self._service_aliases_cache.get(service, []))

    # =========================================================================
    # 카탈로그
    # =========================================================================

    def display_name(self, service: str) -> str:
        with self._lock:
            return self._display_names.get(service, service)

    def list_services(self) -> list[str]:
        """등록된 서비스 목록 (정렬)"""
        with self._lock:
            return sorted(self._services)

    def list_services_by_category(self) -> list[ServiceCategory]:
        """카테고리별 서비스 (등록된 서비스만, 카테고리 순서 유지)

        어느 카테고리에도 속하지 않는 등록 서비스는 마지막 "Other" 카테고리로 모읍니다.
        """
        with self._lock:
            result = []
            categorized: set[str] = set()
            for category in self._categories:
                services = tuple(s for s in category.services if s in self._services)
                categorized.update(category.services)
                if services:
                    result.append(ServiceCategory(category.name, category.name_ko, services))
            others = tuple(sorted(s for s in self._services if s not in categorized))
            if others:
                result.append(ServiceCategory("Other", "기타", others))
            return result

    def is_sub_resource(self, service: str, resource_type: str) -> bool:
        with self._lock:
            return f"{service}/{resource_type}" in self._sub_resources

    def list_resources(self, service: str) -> list[str]:
        """서비스의 리소스 종류 (정렬, 하위 리소스 제외)"""
        with self._lock:
            return sorted(r for r in self._services.get(service, []) if not self.is_sub_resource(service, r))

    def default_resource(self, service: str) -> str:
        """기본 리소스: 사용자 설정 > 내장 기본값 > 알파벳순 첫 번째 > ""

        사용자 설정과 내장 기본값은 실제로 등록된 경우에만 사용합니다.
        """
        with self._lock:
            user_default = self._user_defaults.get(service, "")
        if user_default and self.has_resource(service, user_default):
            return user_default
        builtin = DEFAULT_RESOURCES.get(service, "")
        if builtin and self.has_resource(service, builtin):
            return builtin
        resources = self.list_resources(service)
        return resources[0] if resources else ""

    def set_default_resource(self, service: str, resource_type: str) -> None:
        with self._lock:
            self._user_defaults[service] = resource_type

    def set_user_defaults(self, defaults: dict[str, str]) -> None:
        """설정 파일의 defaults 섹션 적용"""
        for service, resource_type in defaults.items():
            self.set_default_resource(service, resource_type)

    def parse_service_resource(self, text: str) -> tuple[str, str]:
        """ "service[/resource]" 해석 (별칭, 기본 리소스 적용)

        Raises:
            NotRegisteredError: 해석 결과가 등록되지 않은 경우
        """
        text = text.strip()
        service, _, resource = text.partition("/")
        alias_service, alias_resource, found = self.resolve_alias(service)
        if found:
            service = alias_service
            if not resource:
                resource = alias_resource
        if not resource:
            resource = self.default_resource(service)
        if not resource or not self.has_resource(service, resource):
            raise NotRegisteredError(service, resource)
        return service, resource

    # =========================================================================
    # 팩토리
    # =========================================================================

    def targets_for(self, ctx: RequestContext) -> list[FanoutTarget]:
        """호출 컨텍스트의 팬아웃 대상 (명시적 대상이 있으면 하나)"""
        if ctx.has_explicit_target:
            return [FanoutTarget(ctx.effective_region, ctx.effective_selection)]
        regions = ctx.app.get_regions() or [ctx.effective_region]
        return build_targets(regions, ctx.app.get_selections())

    def create_dao(self, ctx: RequestContext, service: str, resource_type: str) -> DAO:
        """래핑된 DAO 생성

        선택이 여러 (리전, 프로파일)에 걸치면 MultiplexDAOWrapper,
        아니면 PaginatedDAOWrapper 로 감쌉니다. 이미 래핑된 DAO는 다시 감싸지 않습니다.

        Raises:
            NotRegisteredError: 등록되지 않았거나 DAO 팩토리가 없는 경우
        """
        entry = self.resolve(service, resource_type)
        if entry.dao_factory is None:
            raise NotRegisteredError(service, resource_type)

        targets = self.targets_for(ctx)
        if len(targets) > 1:
            return MultiplexDAOWrapper(entry.dao_factory, ctx, targets, service, resource_type, self.policy)

        target = targets[0]
        delegate = entry.dao_factory(ctx.with_region(target.region).with_profile(target.selection))
        if isinstance(delegate, (PaginatedDAOWrapper, MultiplexDAOWrapper)):
            return delegate
        return PaginatedDAOWrapper(delegate, self.policy)

    def create_renderer(self, service: str, resource_type: str) -> BaseRenderer:
        """렌더러 생성 (팩토리가 없으면 BaseRenderer)

        Raises:
            NotRegisteredError: 등록되지 않은 경우
        """
        entry = self.resolve(service, resource_type)
        if entry.renderer_factory is None:
            return BaseRenderer(service, resource_type)
        return entry.renderer_factory()


# =============================================================================
# 기본 레지스트리
# =============================================================================

_default_registry: Registry | None = None
_default_lock = threading.Lock()


def get_registry() -> Registry:
    """내장 어댑터가 등록된 기본 레지스트리 (최초 호출 시 생성)"""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                from core.resources import register_builtin

                registry = Registry()
                register_builtin(registry)
                _default_registry = registry
    return _default_registry


def reset_registry() -> None:
    """기본 레지스트리 초기화 (테스트용)"""
    global _default_registry
    with _default_lock:
        _default_registry = None
