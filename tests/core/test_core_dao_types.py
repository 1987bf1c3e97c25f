"""
tests/core/test_core_dao_types.py - 리소스/DAO 계약 테스트
"""

import pytest

from core.context import AppContext, ProfileSelection
from core.dao.types import (
    BaseDAO,
    BasePaginatedDAO,
    BaseResource,
    Operation,
    ProfiledResource,
    RegionalResource,
    RequestContext,
    ResourceList,
    get_resource_account_id,
    get_resource_profile,
    get_resource_region,
    same_resource,
    tags_to_dict,
    unwrap_resource,
)
from core.exceptions import PartialFanoutFailure, UnsupportedOperationError


class TestBaseResource:
    """BaseResource 테스트"""

    def test_name_falls_back_to_id(self):
        """이름이 없으면 ID"""
        assert BaseResource(id="i-1").get_name() == "i-1"
        assert BaseResource(id="i-1", name="web").get_name() == "web"

    def test_tags_to_dict(self):
        """AWS 태그 목록 변환 (빈 키 무시)"""
        tags = tags_to_dict([{"Key": "env", "Value": "prod"}, {"Key": "", "Value": "x"}, {"Key": "team"}])
        assert tags == {"env": "prod", "team": ""}
        assert tags_to_dict(None) == {}


class TestProvenanceWrappers:
    """출처 래퍼 테스트"""

    def test_regional_id(self):
        """리전 접두사"""
        wrapped = RegionalResource(BaseResource(id="i-1", name="web", tags={"a": "b"}), "us-east-1")
        assert wrapped.get_id() == "us-east-1:i-1"
        assert wrapped.get_name() == "web"
        assert wrapped.get_tags() == {"a": "b"}
        assert get_resource_region(wrapped) == "us-east-1"
        assert get_resource_profile(wrapped) == ""

    def test_profiled_unwraps_regional(self):
        """프로파일 래퍼는 리전 래퍼를 벗겨냄"""
        inner = BaseResource(id="i-1")
        wrapped = ProfiledResource(RegionalResource(inner, "us-east-1"), "dev", "111111111111", "us-east-1")
        assert wrapped.resource is inner
        assert wrapped.get_id() == "dev:us-east-1:i-1"
        assert get_resource_account_id(wrapped) == "111111111111"
        assert unwrap_resource(wrapped) is inner

    def test_same_resource(self):
        """출처와 원본 ID 비교"""
        a = RegionalResource(BaseResource(id="i-1"), "us-east-1")
        b = RegionalResource(BaseResource(id="i-1"), "us-east-1")
        c = RegionalResource(BaseResource(id="i-1"), "eu-west-1")
        assert same_resource(a, b)
        assert not same_resource(a, c)
        assert not same_resource(a, None)


class TestResourceList:
    """ResourceList 테스트"""

    def test_partial(self):
        """부분 실패 표시"""
        failure = PartialFanoutFailure(["x: boom"], total=2)
        result = ResourceList([1, 2], partial_failure=failure, truncated=True)
        assert list(result) == [1, 2]
        assert result.is_partial
        assert result.partial_errors == ["x: boom"]
        assert result.truncated
        assert not ResourceList().is_partial


class TestRequestContext:
    """RequestContext 테스트"""

    def test_effective_target_from_app(self):
        """오버라이드가 없으면 앱 선택"""
        app = AppContext(regions=["ap-northeast-2", "us-east-1"], selections=[ProfileSelection.named("dev")])
        ctx = RequestContext(app)
        assert ctx.effective_region == "ap-northeast-2"
        assert ctx.effective_selection == ProfileSelection.named("dev")
        assert not ctx.has_explicit_target

    def test_with_overrides(self):
        """리전/프로파일/필터 오버라이드는 새 인스턴스"""
        app = AppContext(regions=["ap-northeast-2"])
        base = RequestContext(app)
        ctx = base.with_region("us-east-1").with_profile(ProfileSelection.named("prod")).with_filter("StackName", "web")
        assert ctx.effective_region == "us-east-1"
        assert ctx.effective_selection.id == "prod"
        assert ctx.get_filter("StackName") == "web"
        assert ctx.has_explicit_target
        assert base.get_filter("StackName") == ""
        assert not base.has_explicit_target


class _ListOnly(BaseDAO):
    def __init__(self):
        super().__init__("svc", "things")

    def list(self):
        return []


class _Pages(BasePaginatedDAO):
    def __init__(self):
        super().__init__("svc", "pages")
        self.calls = []

    def list_page(self, page_size, page_token=""):
        self.calls.append((page_size, page_token))
        return [BaseResource(id="a")], "next"


class TestBaseDAO:
    """BaseDAO 테스트"""

    def test_supports_defaults(self):
        """기본 지원 작업은 LIST 뿐"""
        dao = _ListOnly()
        assert dao.supports(Operation.LIST)
        assert not dao.supports(Operation.GET)
        assert not dao.supports(Operation.DELETE)
        assert not dao.supports(Operation.CREATE)
        assert dao.service_name == "svc"
        assert dao.resource_type == "things"

    def test_unimplemented_get_delete(self):
        """구현하지 않은 get/delete"""
        dao = _ListOnly()
        with pytest.raises(UnsupportedOperationError):
            dao.get("x")
        with pytest.raises(UnsupportedOperationError):
            dao.delete("x")

    def test_paginated_list_is_first_page(self):
        """페이지 DAO 의 list 는 첫 페이지"""
        dao = _Pages()
        assert [r.get_id() for r in dao.list()] == ["a"]
        assert dao.calls == [(100, "")]
