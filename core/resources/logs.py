"""
core/resources/logs.py - CloudWatch Logs 로그 그룹 / 로그 스트림

- cloudwatch/log-groups: describe_log_groups (페이지 조회)
- cloudwatch/log-streams: describe_log_streams (하위 리소스, LogGroupName 필터 필수)

로그 그룹 목록에서 s 키로 스트림, t 키로 로그 보기 화면으로 이동합니다.
로그 보기 화면은 LogEventFetcher 로 새 이벤트를 가져옵니다.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone

from core.dao.types import BaseResource, Operation, RequestContext, unwrap_resource
from core.exceptions import APICallError
from core.render import BaseRenderer, Column, DetailBuilder, Navigation, format_age, name_column

from .base import AWSDAO, AWSPaginatedDAO

LOG_GROUP_FILTER = "LogGroupName"
_LOG_GROUP_FILTER_HINT = "로그 그룹 목록에서 s 키로 이동하세요"

# describe_log_groups / describe_log_streams 의 limit 최대값
_API_MAX_LIMIT = 50


def _raw(resource) -> dict:
    return unwrap_resource(resource).raw() or {}


def _from_millis(value):
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _size(value) -> str:
    if not value:
        return "0 B"
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


# =============================================================================
# 로그 그룹
# =============================================================================


def log_group_from_api(data: dict) -> BaseResource:
    name = data.get("logGroupName", "")
    return BaseResource(id=name, name=name, arn=data.get("arn", ""), data=data)


class LogGroupDAO(AWSPaginatedDAO):
    client_name = "logs"
    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudwatch", "log-groups")

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs = {"limit": max(1, min(page_size, _API_MAX_LIMIT))}
        if page_token:
            kwargs["nextToken"] = page_token
        response = self.call("describe_log_groups", **kwargs)
        resources = [log_group_from_api(group) for group in response.get("logGroups", [])]
        return resources, response.get("nextToken", "")

    def get(self, resource_id: str):
        response = self.call("describe_log_groups", logGroupNamePrefix=resource_id)
        for group in response.get("logGroups", []):
            if group.get("logGroupName") == resource_id:
                return log_group_from_api(group)
        raise APICallError("cloudwatch", "describe_log_groups", "ResourceNotFoundException", resource_id)

    def delete(self, resource_id: str) -> None:
        self.call("delete_log_group", logGroupName=resource_id)


class LogGroupRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudwatch",
            "log-groups",
            [
                name_column(50),
                Column("RETENTION", 10, _retention, 1),
                Column("STORED", 10, lambda r: _size(_raw(r).get("storedBytes")), 2),
                Column("AGE", 6, lambda r: format_age(_from_millis(_raw(r).get("creationTime"))), 3),
            ],
        )

    def detail(self, resource):
        data = _raw(resource)
        d = DetailBuilder()
        d.title("Log Group", resource.get_name())
        d.section("Basic Information")
        d.field("Name", data.get("logGroupName"))
        d.field("ARN", data.get("arn"))
        d.field("Retention", _retention(resource))
        d.field("Stored", _size(data.get("storedBytes")))
        d.field("Created", _from_millis(data.get("creationTime")))
        d.field("KMS Key", data.get("kmsKeyId"))
        d.field("Class", data.get("logGroupClass"))
        return d.build()

    def navigations(self, resource):
        return [
            Navigation("t", "Tail", view_type="log", filter_field=LOG_GROUP_FILTER, filter_value=resource.get_name()),
            Navigation("s", "Streams", "cloudwatch", "log-streams", LOG_GROUP_FILTER, resource.get_name()),
        ]


def _retention(resource) -> str:
    days = _raw(resource).get("retentionInDays")
    return f"{days}d" if days else "Never"


# =============================================================================
# 로그 스트림
# =============================================================================


class LogStreamDAO(AWSPaginatedDAO):
    """로그 스트림 (마지막 이벤트 시각 내림차순)"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})

    client_name = "logs"

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudwatch", "log-streams")

    def list_page(self, page_size: int, page_token: str = ""):
        group = self.require_filter(LOG_GROUP_FILTER, _LOG_GROUP_FILTER_HINT)
        kwargs = {
            "logGroupName": group,
            "orderBy": "LastEventTime",
            "descending": True,
            "limit": max(1, min(page_size, _API_MAX_LIMIT)),
        }
        if page_token:
            kwargs["nextToken"] = page_token
        response = self.call("describe_log_streams", **kwargs)
        resources = [
            BaseResource(id=s.get("logStreamName", ""), name=s.get("logStreamName", ""), arn=s.get("arn", ""), data=s)
            for s in response.get("logStreams", [])
        ]
        return resources, response.get("nextToken", "")

    def get(self, resource_id: str):
        group = self.require_filter(LOG_GROUP_FILTER, _LOG_GROUP_FILTER_HINT)
        response = self.call("describe_log_streams", logGroupName=group, logStreamNamePrefix=resource_id)
        for s in response.get("logStreams", []):
            if s.get("logStreamName") == resource_id:
                return BaseResource(id=resource_id, name=resource_id, arn=s.get("arn", ""), data=s)
        raise APICallError("cloudwatch", "describe_log_streams", "ResourceNotFoundException", resource_id)

    def delete(self, resource_id: str) -> None:
        group = self.require_filter(LOG_GROUP_FILTER, _LOG_GROUP_FILTER_HINT)
        self.call("delete_log_stream", logGroupName=group, logStreamName=resource_id)


class LogStreamRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudwatch",
            "log-streams",
            [
                name_column(60),
                Column("LAST EVENT", 10, lambda r: format_age(_from_millis(_raw(r).get("lastEventTimestamp"))), 1),
                Column("AGE", 6, lambda r: format_age(_from_millis(_raw(r).get("creationTime"))), 2),
            ],
        )


# =============================================================================
# 로그 이벤트
# =============================================================================


@dataclass(frozen=True)
class LogEvent:
    timestamp: int
    stream: str
    message: str


class LogEventFetcher(AWSDAO):
    """로그 그룹의 새 이벤트 조회 (로그 보기 화면용)

    fetch() 를 반복 호출하면 마지막으로 본 시각 이후의 이벤트만 반환합니다.
    """

    client_name = "logs"

    def __init__(self, ctx: RequestContext, log_group: str, since_seconds: int = 300):
        super().__init__(ctx, "cloudwatch", "log-events")
        self.log_group = log_group
        self.last_timestamp = int((time.time() - since_seconds) * 1000)
        self._seen: set[str] = set()

    def list(self):
        return []

    def fetch(self, limit: int = 200) -> list[LogEvent]:
        response = self.call(
            "filter_log_events",
            logGroupName=self.log_group,
            startTime=self.last_timestamp,
            limit=limit,
        )
        events = []
        for e in response.get("events", []):
            # 같은 밀리초의 이벤트는 다음 조회에도 포함되므로 ID로 중복 제거
            event_id = e.get("eventId", "")
            if event_id in self._seen:
                continue
            self._seen.add(event_id)
            events.append(LogEvent(e.get("timestamp", 0), e.get("logStreamName", ""), e.get("message", "").rstrip("\n")))
            self.last_timestamp = max(self.last_timestamp, e.get("timestamp", 0))
        return events
