"""
core/registry/wrappers.py - DAO 래핑 계층

레지스트리가 만든 원본 DAO를 감싸 페이지 처리와
멀티 리전/프로파일 팬아웃을 일관된 계약으로 맞춥니다.

주요 구성 요소:
- FetchPolicy: 팬아웃/페이지 상한 설정
- PaginatedDAOWrapper: 단일 대상 DAO의 페이지 처리 정규화
- MultiplexDAOWrapper: (리전 x 프로파일) 팬아웃, 출처 태그, 결정적 병합

공통 계약:
    list() / list_page(page_size, page_token) / get(id) / delete(id) / run_action(op, id) /
    supports(op) / actions() / for_resource(resource)

Note:
    팬아웃 분기는 각자 페이지를 끝까지(상한 내에서) 소진한 뒤 병합합니다.
    따라서 MultiplexDAOWrapper.list_page 는 전체 병합 결과를 한 페이지로 반환합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.config import NavConfig, settings
from core.context import ProfileSelection
from core.dao.types import (
    DAO,
    DAOFactory,
    Operation,
    PaginatedDAO,
    ProfiledResource,
    RegionalResource,
    RequestContext,
    Resource,
    ResourceList,
    get_resource_profile,
    get_resource_region,
)
from core.exceptions import PartialFanoutFailure, TotalFanoutFailure
from core.parallel.decorators import DEFAULT_RETRY_CONFIG, RetryConfig
from core.parallel.executor import FanoutExecutor, FanoutTarget, ParallelConfig

if TYPE_CHECKING:
    from core.actions import Action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchPolicy:
    """팬아웃/페이지 상한

    Attributes:
        max_fetches: 동시 팬아웃 분기 수
        fanout_timeout: 팬아웃 전체 시간 제한 (초)
        page_size: 페이지 크기 힌트
        max_pages: list() 가 소진할 최대 페이지 수
        max_items: list() 가 모을 최대 항목 수
        retry_config: List 분기 재시도 설정
    """

    max_fetches: int = settings.MAX_CONCURRENT_FETCHES
    fanout_timeout: float = settings.MULTI_REGION_FETCH_TIMEOUT
    page_size: int = settings.PAGE_SIZE
    max_pages: int = settings.MAX_LIST_PAGES
    max_items: int = settings.MAX_LIST_ITEMS
    retry_config: RetryConfig = field(default_factory=lambda: DEFAULT_RETRY_CONFIG)

    @classmethod
    def from_config(cls, config: NavConfig) -> FetchPolicy:
        return cls(
            max_fetches=config.max_fetches,
            fanout_timeout=config.multi_region_fetch_timeout,
            page_size=config.page_size,
            max_pages=config.max_list_pages,
            max_items=config.max_list_items,
        )


class PaginatedDAOWrapper(DAO):
    """단일 대상 DAO의 페이지 처리 정규화

    - 페이지 지원 DAO: list_page 는 그대로 전달, list 는 상한 내에서 끝까지 소진
    - 페이지 미지원 DAO: list_page 는 전체 목록을 한 페이지로, 다음 토큰은 빈 문자열
    """

    def __init__(self, delegate: DAO, policy: FetchPolicy | None = None):
        self.delegate = delegate
        self.policy = policy or FetchPolicy()

    @property
    def service_name(self) -> str:
        return self.delegate.service_name

    @property
    def resource_type(self) -> str:
        return self.delegate.resource_type

    @property
    def is_paginated(self) -> bool:
        return isinstance(self.delegate, PaginatedDAO)

    def list_page(self, page_size: int, page_token: str = "") -> tuple[list[Resource], str]:
        if isinstance(self.delegate, PaginatedDAO):
            return self.delegate.list_page(page_size, page_token)
        if page_token:
            return [], ""
        return self.delegate.list(), ""

    def list(self) -> ResourceList:
        if not isinstance(self.delegate, PaginatedDAO):
            return ResourceList(self.delegate.list())

        label = f"{self.service_name}/{self.resource_type}"
        result = ResourceList()
        token = ""
        seen_tokens: set[str] = set()
        pages = 0
        while True:
            resources, next_token = self.delegate.list_page(self.policy.page_size, token)
            pages += 1
            result.extend(resources)

            if not next_token:
                break
            if next_token in seen_tokens:
                logger.warning(f"같은 페이지 토큰이 반복되어 조회 중단 [{label}]")
                break
            if pages >= self.policy.max_pages or len(result) >= self.policy.max_items:
                logger.warning(
                    f"목록 상한 도달 [{label}]: {pages}페이지, {len(result)}개 (max_pages={self.policy.max_pages}, "
                    f"max_items={self.policy.max_items})"
                )
                result.truncated = True
                break
            seen_tokens.add(next_token)
            token = next_token

        if len(result) > self.policy.max_items:
            del result[self.policy.max_items :]
            result.truncated = True
        return result

    def get(self, resource_id: str) -> Resource:
        return self.delegate.get(resource_id)

    def delete(self, resource_id: str) -> None:
        self.delegate.delete(resource_id)

    def supports(self, op: Operation) -> bool:
        return self.delegate.supports(op)

    def actions(self) -> tuple[Action, ...]:
        return self.delegate.actions()

    def run_action(self, operation: str, resource_id: str) -> None:
        self.delegate.run_action(operation, resource_id)

    def for_resource(self, resource: Resource) -> PaginatedDAOWrapper:
        return self


class MultiplexDAOWrapper(DAO):
    """(리전 x 프로파일) 팬아웃 DAO

    list 는 모든 대상에 동시에 실행하고, 결과에 출처를 붙여 대상 순서
    (리전 순서, 그 안에서 프로파일 순서)로 병합합니다.
    일부 대상 실패는 ResourceList.partial_failure 로, 전체 실패는 TotalFanoutFailure 로 알립니다.

    get / delete / run_action 은 항상 하나의 대상에만 실행하며 재시도하지 않습니다.
    """

    def __init__(
        self,
        factory: DAOFactory,
        ctx: RequestContext,
        targets: list[FanoutTarget],
        service: str,
        resource_type: str,
        policy: FetchPolicy | None = None,
    ):
        if not targets:
            raise ValueError("targets must not be empty")
        self.factory = factory
        self.ctx = ctx
        self.targets = list(targets)
        self.policy = policy or FetchPolicy()
        self._service = service
        self._resource_type = resource_type
        self._multi_profile = len({t.selection for t in self.targets}) > 1
        self._delegates: dict[FanoutTarget, PaginatedDAOWrapper] = {}

    @property
    def service_name(self) -> str:
        return self._service

    @property
    def resource_type(self) -> str:
        return self._resource_type

    @property
    def primary(self) -> FanoutTarget:
        return self.targets[0]

    def _delegate(self, target: FanoutTarget) -> PaginatedDAOWrapper:
        wrapper = self._delegates.get(target)
        if wrapper is None:
            target_ctx = self.ctx.with_region(target.region).with_profile(target.selection)
            delegate = self.factory(target_ctx)
            wrapper = delegate if isinstance(delegate, PaginatedDAOWrapper) else PaginatedDAOWrapper(delegate, self.policy)
            self._delegates[target] = wrapper
        return wrapper

    def _tag(self, resource: Resource, target: FanoutTarget) -> Resource:
        if self._multi_profile:
            account_id = self.ctx.app.get_account_id(target.selection.id)
            return ProfiledResource(resource, target.selection.id, account_id, target.region)
        return RegionalResource(resource, target.region)

    def list(self) -> ResourceList:
        label = f"{self._service}/{self._resource_type}"
        executor = FanoutExecutor(
            ParallelConfig(
                max_workers=min(self.policy.max_fetches, 100),
                retry_config=self.policy.retry_config,
                timeout=self.policy.fanout_timeout,
            )
        )
        result = executor.execute(lambda target: self._delegate(target).list(), self.targets, label=label)

        merged = ResourceList()
        failures: list[str] = []
        # results 는 targets 순서
        for target, task in zip(self.targets, result.results):
            if task.success:
                data = task.data or []
                merged.extend(self._tag(r, target) for r in data)
                if getattr(data, "truncated", False):
                    merged.truncated = True
            elif task.error is not None:
                failures.append(f"{target}: {task.error.message}")

        if failures:
            if not result.has_any_success():
                logger.error(f"팬아웃 전체 실패 [{label}]: {len(failures)}개 대상")
                raise TotalFanoutFailure(failures)
            logger.warning(f"팬아웃 부분 실패 [{label}]: {len(failures)}/{len(self.targets)}개 대상")
            merged.partial_failure = PartialFanoutFailure(failures, len(self.targets))
        return merged

    def list_page(self, page_size: int, page_token: str = "") -> tuple[list[Resource], str]:
        if page_token:
            return [], ""
        return self.list(), ""

    def _resolve_target(self, resource_id: str) -> tuple[FanoutTarget, str]:
        """출처 접두사("profile:region:id" / "region:id")가 있는 ID에서 대상 결정"""
        regions = {t.region for t in self.targets}
        if self._multi_profile:
            parts = resource_id.split(":", 2)
            if len(parts) == 3 and parts[1] in regions:
                for target in self.targets:
                    if target.identifier == parts[0] and target.region == parts[1]:
                        return target, parts[2]
        else:
            region, sep, rest = resource_id.partition(":")
            if sep and region in regions:
                for target in self.targets:
                    if target.region == region:
                        return target, rest
        return self.primary, resource_id

    def get(self, resource_id: str) -> Resource:
        target, raw_id = self._resolve_target(resource_id)
        return self._tag(self._delegate(target).get(raw_id), target)

    def delete(self, resource_id: str) -> None:
        target, raw_id = self._resolve_target(resource_id)
        logger.info(f"리소스 삭제 [{self._service}/{self._resource_type}] {target}: {raw_id}")
        self._delegate(target).delete(raw_id)

    def supports(self, op: Operation) -> bool:
        return self._delegate(self.primary).supports(op)

    def actions(self) -> tuple[Action, ...]:
        return self._delegate(self.primary).actions()

    def run_action(self, operation: str, resource_id: str) -> None:
        target, raw_id = self._resolve_target(resource_id)
        logger.info(f"리소스 작업 [{self._service}/{self._resource_type}] {target}: {operation} {raw_id}")
        self._delegate(target).run_action(operation, raw_id)

    def for_resource(self, resource: Resource) -> PaginatedDAOWrapper:
        """리소스 출처에 해당하는 단일 대상 DAO"""
        region = get_resource_region(resource) or self.primary.region
        profile = get_resource_profile(resource)
        selection = ProfileSelection.from_id(profile) if profile else self.primary.selection
        for target in self.targets:
            if target.region == region and target.selection == selection:
                return self._delegate(target)
        return self._delegate(FanoutTarget(region, selection))
