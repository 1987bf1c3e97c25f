"""
core/resources/s3.py - S3 버킷

list_buckets 는 리전과 무관하게 계정의 전체 버킷을 반환합니다.
응답에 BucketRegion 이 있으면 버킷 리전으로 표시합니다.
"""

from __future__ import annotations

from core.dao.types import BaseResource, Operation, RequestContext, tags_to_dict, unwrap_resource
from core.exceptions import APICallError, is_not_found
from core.render import BaseRenderer, Column, DetailBuilder, format_age, name_column

from .base import AWSDAO


class BucketResource(BaseResource):
    """S3 버킷

    단건 조회(get_bucket_location)에는 생성 시각이 없으므로 목록 결과에서 이어받습니다.
    """

    def merge_from(self, previous) -> None:
        created = (unwrap_resource(previous).raw() or {}).get("CreationDate")
        if created and isinstance(self.data, dict):
            self.data.setdefault("CreationDate", created)


def bucket_from_api(data: dict, tags: dict[str, str] | None = None) -> BucketResource:
    name = data.get("Name", "")
    return BucketResource(id=name, name=name, arn=f"arn:aws:s3:::{name}", tags=tags or {}, data=data)


class BucketDAO(AWSDAO):
    """S3 버킷 (페이지 미지원)"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "s3", "buckets")

    def list(self):
        response = self.call("list_buckets")
        return [bucket_from_api(bucket) for bucket in response.get("Buckets", [])]

    def get(self, resource_id: str):
        location = self.call("get_bucket_location", Bucket=resource_id)
        data = {
            "Name": resource_id,
            "BucketRegion": location.get("LocationConstraint") or "us-east-1",
        }
        try:
            tags = tags_to_dict(self.call("get_bucket_tagging", Bucket=resource_id).get("TagSet"))
        except APICallError as e:
            # 태그가 없는 버킷은 NoSuchTagSet
            if e.error_code != "NoSuchTagSet" and not is_not_found(e):
                raise
            tags = {}
        return bucket_from_api(data, tags)

    def delete(self, resource_id: str) -> None:
        self.call("delete_bucket", Bucket=resource_id)


class BucketRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "s3",
            "buckets",
            [
                name_column(45),
                Column("REGION", 16, lambda r: (unwrap_resource(r).raw() or {}).get("BucketRegion", ""), 1),
                Column("AGE", 6, lambda r: format_age((unwrap_resource(r).raw() or {}).get("CreationDate")), 2),
            ],
        )

    def detail(self, resource):
        data = unwrap_resource(resource).raw() or {}
        d = DetailBuilder()
        d.title("S3 Bucket", resource.get_name())
        d.section("Basic Information")
        d.field("Name", data.get("Name"))
        d.field("ARN", resource.get_arn())
        d.field("Region", data.get("BucketRegion"))
        d.field("Created", data.get("CreationDate"))
        d.tags(resource.get_tags())
        return d.build()
