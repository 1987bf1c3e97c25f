"""
core/resources/tagging.py - 태그 검색 (Resource Groups Tagging API)

- tagging/resources: get_resources (페이지 조회, ResourcesPerPage 최대 100)

서비스와 관계없이 태그가 붙은 리소스를 ARN 단위로 조회합니다.
명령 모드의 `:tags [key[=value]]` 가 TAG_FILTER 필터와 함께 이 리소스 목록을 엽니다.
여러 리전을 선택했으면 다른 리소스와 같이 리전별로 팬아웃됩니다.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.dao.types import BaseResource, RequestContext, unwrap_resource
from core.render import BaseRenderer, Column, DetailBuilder, SummaryField, name_column, tags_column

from .base import AWSPaginatedDAO

TAG_SEARCH_SERVICE = "tagging"
TAG_SEARCH_RESOURCE = "resources"
TAG_FILTER = "TagFilter"

_API_MAX_PER_PAGE = 100


@dataclass(frozen=True)
class ParsedARN:
    """ARN 구성 요소 (arn:partition:service:region:account:resource)"""

    service: str = ""
    region: str = ""
    account_id: str = ""
    resource_type: str = ""
    resource_id: str = ""


def parse_arn(arn: str) -> ParsedARN:
    """ARN 분해

    리소스 부분은 "type/id", "type:id", "id" 형식을 모두 지원합니다.
    ARN 형식이 아니면 전체를 resource_id 로 돌려줍니다.
    """
    parts = arn.split(":", 5)
    if len(parts) < 6 or parts[0] != "arn":
        return ParsedARN(resource_id=arn)
    _, _, service, region, account_id, resource = parts
    for sep in ("/", ":"):
        if sep in resource:
            resource_type, _, resource_id = resource.partition(sep)
            return ParsedARN(service, region, account_id, resource_type, resource_id)
    return ParsedARN(service, region, account_id, "", resource)


def parse_tag_filter(text: str) -> list[dict]:
    """ "key" / "key=value" -> get_resources TagFilters (빈 문자열이면 필터 없음)"""
    text = text.strip()
    if not text:
        return []
    key, sep, value = text.partition("=")
    tag_filter: dict = {"Key": key.strip()}
    if sep:
        tag_filter["Values"] = [value.strip()]
    return [tag_filter]


def tagged_from_api(mapping: dict) -> BaseResource:
    arn = mapping.get("ResourceARN", "")
    tags = {t.get("Key", ""): t.get("Value", "") for t in mapping.get("Tags", [])}
    parsed = parse_arn(arn)
    return BaseResource(
        id=arn,
        name=tags.get("Name", "") or parsed.resource_id,
        arn=arn,
        tags=tags,
        data={
            "ResourceARN": arn,
            "Service": parsed.service,
            "ResourceType": parsed.resource_type,
            "ResourceId": parsed.resource_id,
            "Region": parsed.region,
            "AccountId": parsed.account_id,
        },
    )


class TaggedResourceDAO(AWSPaginatedDAO):
    """태그가 붙은 리소스 (조회 전용)"""

    client_name = "resourcegroupstaggingapi"

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, TAG_SEARCH_SERVICE, TAG_SEARCH_RESOURCE)

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs: dict = {"ResourcesPerPage": max(1, min(page_size, _API_MAX_PER_PAGE))}
        tag_filters = parse_tag_filter(self.ctx.get_filter(TAG_FILTER))
        if tag_filters:
            kwargs["TagFilters"] = tag_filters
        if page_token:
            kwargs["PaginationToken"] = page_token
        response = self.call("get_resources", **kwargs)
        resources = [tagged_from_api(m) for m in response.get("ResourceTagMappingList", [])]
        return resources, response.get("PaginationToken", "")


def _field(resource, key: str) -> str:
    return (unwrap_resource(resource).raw() or {}).get(key, "")


class TaggedResourceRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            TAG_SEARCH_SERVICE,
            TAG_SEARCH_RESOURCE,
            [
                name_column(30),
                Column("SERVICE", 16, lambda r: _field(r, "Service"), 1),
                Column("TYPE", 20, lambda r: _field(r, "ResourceType"), 2),
                Column("RESOURCE ID", 30, lambda r: _field(r, "ResourceId"), 3),
                tags_column(40, 4),
            ],
        )

    def detail(self, resource):
        d = DetailBuilder()
        d.title("Tagged Resource", resource.get_name())
        d.section("Basic Information")
        d.field("ARN", _field(resource, "ResourceARN"))
        d.field("Service", _field(resource, "Service"))
        d.field("Resource Type", _field(resource, "ResourceType"))
        d.field("Resource ID", _field(resource, "ResourceId"))
        d.field("Region", _field(resource, "Region"))
        d.field("Account", _field(resource, "AccountId"))
        d.tags(resource.get_tags())
        return d.build()

    def summary_fields(self, resource):
        return [
            SummaryField("Service", _field(resource, "Service")),
            SummaryField("Resource", _field(resource, "ResourceId")),
        ]
