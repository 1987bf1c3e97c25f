"""
tests/core/registry/test_registry_wrappers.py - DAO 래핑 계층 테스트
"""

import threading

import pytest

from conftest import FakeDAO
from core.actions import Action
from core.context import AppContext, ProfileSelection
from core.dao.types import (
    BasePaginatedDAO,
    BaseResource,
    Operation,
    ProfiledResource,
    RegionalResource,
    RequestContext,
)
from core.exceptions import PartialFanoutFailure, TotalFanoutFailure
from core.parallel import NO_RETRY, build_targets
from core.registry import FetchPolicy, MultiplexDAOWrapper, PaginatedDAOWrapper


class PagedDAO(BasePaginatedDAO):
    """고정 페이지를 반환하는 DAO

    pages: 토큰 -> (리소스 ID 목록, 다음 토큰)
    """

    def __init__(self, pages):
        super().__init__("paged", "things")
        self.pages = pages
        self.requests = []

    def list_page(self, page_size, page_token=""):
        self.requests.append((page_size, page_token))
        ids, next_token = self.pages[page_token]
        return [BaseResource(id=i) for i in ids], next_token


def _ids(resources):
    return [r.get_id() for r in resources]


class TestPaginatedDAOWrapper:
    """PaginatedDAOWrapper 테스트"""

    def test_exhausts_pages(self):
        """마지막 페이지까지 소진"""
        dao = PagedDAO({"": (["a", "b"], "t1"), "t1": (["c"], "t2"), "t2": (["d"], "")})
        result = PaginatedDAOWrapper(dao, FetchPolicy(page_size=2)).list()
        assert _ids(result) == ["a", "b", "c", "d"]
        assert not result.truncated
        assert dao.requests == [(2, ""), (2, "t1"), (2, "t2")]

    def test_repeated_token_stops(self):
        """같은 토큰이 반복되면 중단"""
        dao = PagedDAO({"": (["a"], "t1"), "t1": (["b"], "t1")})
        result = PaginatedDAOWrapper(dao).list()
        assert _ids(result) == ["a", "b"]
        assert len(dao.requests) == 2

    def test_max_pages_truncates(self):
        """페이지 상한"""
        dao = PagedDAO({"": (["a"], "t1"), "t1": (["b"], "t2"), "t2": (["c"], "")})
        result = PaginatedDAOWrapper(dao, FetchPolicy(max_pages=2)).list()
        assert _ids(result) == ["a", "b"]
        assert result.truncated

    def test_max_items_truncates(self):
        """항목 상한 (초과분 제거)"""
        dao = PagedDAO({"": (["a", "b", "c"], "t1"), "t1": (["d"], "")})
        result = PaginatedDAOWrapper(dao, FetchPolicy(max_items=2)).list()
        assert _ids(result) == ["a", "b"]
        assert result.truncated

    def test_list_page_passthrough(self):
        """페이지 DAO 의 list_page 는 그대로 전달"""
        dao = PagedDAO({"t1": (["c"], "t2")})
        resources, token = PaginatedDAOWrapper(dao).list_page(10, "t1")
        assert _ids(resources) == ["c"]
        assert token == "t2"

    def test_non_paginated(self, store):
        """페이지 미지원 DAO 는 한 페이지"""
        ctx = RequestContext(AppContext(regions=["ap-northeast-2"]))
        wrapper = PaginatedDAOWrapper(FakeDAO(ctx, store))
        assert not wrapper.is_paginated
        resources, token = wrapper.list_page(1)
        assert len(resources) == 3
        assert token == ""
        assert wrapper.list_page(1, "next") == ([], "")

    def test_delegates_operations(self, store):
        """get/delete/supports 위임"""
        ctx = RequestContext(AppContext(regions=["ap-northeast-2"]))
        wrapper = PaginatedDAOWrapper(FakeDAO(ctx, store))
        assert wrapper.get("i-002").get_name() == "web-2"
        wrapper.delete("i-002")
        assert store.deleted == ["i-002"]
        assert wrapper.supports(Operation.DELETE)
        assert wrapper.service_name == "fake"


class TestMultiplexDAOWrapper:
    """MultiplexDAOWrapper 테스트"""

    def _wrapper(self, store, regions, selections=None, app=None, dao_class=FakeDAO):
        app = app or AppContext(regions=regions, selections=selections)
        ctx = RequestContext(app)
        targets = build_targets(app.get_regions(), app.get_selections())
        policy = FetchPolicy(retry_config=NO_RETRY, fanout_timeout=5)
        return MultiplexDAOWrapper(lambda c: dao_class(c, store), ctx, targets, "fake", "items", policy)

    def test_empty_targets(self, store):
        """대상이 없으면 에러"""
        ctx = RequestContext(AppContext())
        with pytest.raises(ValueError):
            MultiplexDAOWrapper(lambda c: FakeDAO(c, store), ctx, [], "fake", "items")

    def test_merge_in_target_order(self, store):
        """리전 순서대로 병합, 리전 출처 태그"""
        store.add("us-east-1", "i-100", "east")
        wrapper = self._wrapper(store, ["us-east-1", "ap-northeast-2"])

        result = wrapper.list()

        assert _ids(result) == ["us-east-1:i-100", "ap-northeast-2:i-001", "ap-northeast-2:i-002", "ap-northeast-2:i-003"]
        assert all(isinstance(r, RegionalResource) for r in result)
        assert not result.is_partial

    def test_merge_order_independent_of_completion(self, store):
        """먼저 끝난 대상과 무관하게 대상 순서로 병합"""
        store.add("us-east-1", "i-100", "east")
        seoul_done = threading.Event()
        finished = []

        class _SlowEastDAO(FakeDAO):
            def list(self):
                region = self.ctx.effective_region
                if region == "us-east-1":
                    assert seoul_done.wait(5)
                resources = super().list()
                finished.append(region)
                if region == "ap-northeast-2":
                    seoul_done.set()
                return resources

        wrapper = self._wrapper(store, ["us-east-1", "ap-northeast-2"], dao_class=_SlowEastDAO)

        result = wrapper.list()

        assert finished == ["ap-northeast-2", "us-east-1"]
        assert _ids(result)[0] == "us-east-1:i-100"
        assert _ids(result)[1:] == ["ap-northeast-2:i-001", "ap-northeast-2:i-002", "ap-northeast-2:i-003"]

    def test_multi_profile_tags(self, store):
        """여러 프로파일이면 프로파일/계정 출처"""
        app = AppContext(
            regions=["ap-northeast-2"],
            selections=[ProfileSelection.named("dev"), ProfileSelection.named("prod")],
        )
        app.set_account_id("prod", "222222222222")
        wrapper = self._wrapper(store, [], app=app)

        result = wrapper.list()

        assert len(result) == 6
        assert all(isinstance(r, ProfiledResource) for r in result)
        assert result[0].get_id() == "dev:ap-northeast-2:i-001"
        assert result[3].get_id() == "prod:ap-northeast-2:i-001"
        assert result[3].account_id == "222222222222"
        assert sorted(call[1] for call in store.list_calls) == ["dev", "prod"]

    def test_partial_failure(self, store):
        """일부 대상 실패는 PartialFanoutFailure 로 첨부"""
        store.failing.add("us-east-1")
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])

        result = wrapper.list()

        assert len(result) == 3
        assert result.is_partial
        assert result.partial_errors[0].startswith("(sdk default)/us-east-1: ")
        assert isinstance(result.partial_failure, PartialFanoutFailure)
        assert result.partial_failure.total == 2

    def test_total_failure(self, store):
        """모든 대상 실패"""
        store.failing.update({"ap-northeast-2", "us-east-1"})
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])

        with pytest.raises(TotalFanoutFailure) as exc_info:
            wrapper.list()

        assert len(exc_info.value.failures) == 2

    def test_list_page_single_page(self, store):
        """list_page 는 병합 결과 전체를 한 페이지로"""
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])
        resources, token = wrapper.list_page(1)
        assert len(resources) == 3
        assert token == ""
        assert wrapper.list_page(1, "x") == ([], "")

    def test_get_resolves_region_prefix(self, store):
        """리전 접두사로 대상 결정"""
        store.add("us-east-1", "i-100", "east")
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])

        resource = wrapper.get("us-east-1:i-100")

        assert resource.get_id() == "us-east-1:i-100"
        assert resource.get_name() == "east"

    def test_unprefixed_id_uses_primary(self, store):
        """접두사가 없으면 첫 번째 대상"""
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])
        target, raw_id = wrapper._resolve_target("i-001")
        assert target.region == "ap-northeast-2"
        assert raw_id == "i-001"

    def test_resolve_profiled_id(self, store):
        """프로파일 접두사로 대상 결정"""
        wrapper = self._wrapper(
            store,
            ["ap-northeast-2", "us-east-1"],
            [ProfileSelection.named("dev"), ProfileSelection.named("prod")],
        )
        target, raw_id = wrapper._resolve_target("prod:us-east-1:i-9")
        assert (target.identifier, target.region, raw_id) == ("prod", "us-east-1", "i-9")

    def test_delete_routes_to_target(self, store):
        """삭제는 출처 대상에만"""
        wrapper = self._wrapper(store, ["us-east-1", "ap-northeast-2"])
        wrapper.delete("ap-northeast-2:i-003")
        assert store.deleted == ["i-003"]
        assert [r.get_id() for r in store.resources["ap-northeast-2"]] == ["i-001", "i-002"]

    def test_run_action_routes_to_target(self, store):
        """작업은 출처 대상에만, 작업 목록은 기본 대상 기준"""
        ran = []

        class _ActionDAO(FakeDAO):
            _ACTIONS = (Action("Start", "s", "Start"),)

            def run_action(self, operation, resource_id):
                ran.append((self.ctx.effective_region, operation, resource_id))

        wrapper = self._wrapper(store, ["us-east-1", "ap-northeast-2"], dao_class=_ActionDAO)
        assert [a.name for a in wrapper.actions()] == ["Start"]
        wrapper.run_action("Start", "ap-northeast-2:i-003")
        assert ran == [("ap-northeast-2", "Start", "i-003")]

        single = PaginatedDAOWrapper(_ActionDAO(RequestContext(AppContext(regions=["us-east-1"])), store))
        single.run_action("Start", "i-9")
        assert ran[-1] == ("us-east-1", "Start", "i-9")

    def test_for_resource(self, store):
        """리소스 출처의 단일 대상 DAO"""
        wrapper = self._wrapper(store, ["ap-northeast-2", "us-east-1"])
        resource = RegionalResource(BaseResource(id="i-1"), "us-east-1")
        single = wrapper.for_resource(resource)
        assert isinstance(single, PaginatedDAOWrapper)
        assert single.delegate.ctx.effective_region == "us-east-1"
