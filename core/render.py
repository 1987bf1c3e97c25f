"""
core/render.py - 리소스 렌더러 계약

리소스 종류별로 목록 컬럼, 상세 화면, 요약 필드, 하위 리소스 이동(내비게이션)을
제공하는 렌더러 인터페이스와 기본 구현을 정의합니다.
렌더링 결과는 rich 렌더러블(Text, Table)입니다.

주요 구성 요소:
- Column / SummaryField / Navigation: 렌더링 명세
- BaseRenderer: 기본 렌더러 (ID/NAME 컬럼)
- DetailBuilder: 상세 화면 텍스트 빌더
- format_age / state_style: 표시 헬퍼
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from rich.text import Text

from core.dao.types import Resource, unwrap_resource


@dataclass(frozen=True)
class Column:
    """목록 컬럼

    Attributes:
        name: 헤더
        width: 폭 힌트
        getter: 리소스 -> 셀 문자열
        priority: 작을수록 중요 (좁은 화면에서 먼저 표시)
    """

    name: str
    width: int
    getter: Callable[[Resource], str]
    priority: int = 0


@dataclass(frozen=True)
class SummaryField:
    label: str
    value: str
    style: str = ""


@dataclass(frozen=True)
class Navigation:
    """하위 리소스 이동 단축키

    Attributes:
        key: 단축키 (예: "e")
        label: 표시 이름 (예: "Events")
        service: 대상 서비스
        resource: 대상 리소스 종류
        filter_field: 하위 리소스 DAO에 전달할 필터 이름
        filter_value: 현재 리소스에서 추출한 필터 값
        view_type: 리소스 목록 대신 열 전용 화면 ("log": 로그 보기)
    """

    key: str
    label: str
    service: str = ""
    resource: str = ""
    filter_field: str = ""
    filter_value: str = ""
    view_type: str = ""


def name_column(width: int = 40) -> Column:
    return Column("NAME", width, lambda r: r.get_name(), 0)


def id_column(width: int = 30) -> Column:
    return Column("ID", width, lambda r: unwrap_resource(r).get_id(), 1)


def tags_column(width: int = 30, priority: int = 9) -> Column:
    def _tags(r: Resource) -> str:
        return ", ".join(f"{k}={v}" for k, v in sorted(r.get_tags().items()))

    return Column("TAGS", width, _tags, priority)


class BaseRenderer:
    """기본 렌더러

    등록 항목에 렌더러 팩토리가 없을 때도 사용합니다.
    """

    def __init__(self, service: str, resource: str, columns: list[Column] | None = None):
        self.service = service
        self.resource = resource
        self._columns = columns or [name_column(), id_column()]

    def columns(self) -> list[Column]:
        return list(self._columns)

    def row(self, resource: Resource) -> list[str]:
        return [col.getter(resource) for col in self._columns]

    def detail(self, resource: Resource) -> Text:
        d = DetailBuilder()
        d.title(f"{self.service}/{self.resource}", resource.get_name())
        d.section("Basic Information")
        d.field("ID", unwrap_resource(resource).get_id())
        d.field("Name", resource.get_name())
        d.field("ARN", resource.get_arn())
        d.tags(resource.get_tags())
        d.raw(resource.raw())
        return d.build()

    def summary_fields(self, resource: Resource) -> list[SummaryField]:
        fields = [SummaryField("ID", unwrap_resource(resource).get_id())]
        name = resource.get_name()
        if name and name != fields[0].value:
            fields.append(SummaryField("Name", name))
        return fields

    def navigations(self, resource: Resource) -> list[Navigation]:
        return []


RendererFactory = Callable[[], BaseRenderer]


class DetailBuilder:
    """상세 화면 텍스트 빌더

    Example:
        d = DetailBuilder()
        d.title("EC2 Instance", "web-1")
        d.section("Basic Information")
        d.field("State", "running", state_style("running"))
        return d.build()
    """

    LABEL_WIDTH = 24

    def __init__(self) -> None:
        self._text = Text()

    def title(self, kind: str, name: str) -> DetailBuilder:
        self._text.append(f"{kind}: ", style="bold cyan")
        self._text.append(f"{name}\n", style="bold")
        return self

    def section(self, name: str) -> DetailBuilder:
        self._text.append(f"\n{name}\n", style="bold underline")
        return self

    def field(self, label: str, value: Any, style: str = "") -> DetailBuilder:
        if value in (None, ""):
            return self
        self._text.append(f"  {label + ':':<{self.LABEL_WIDTH}}", style="dim")
        self._text.append(f"{value}\n", style=style)
        return self

    def line(self, text: str, style: str = "") -> DetailBuilder:
        self._text.append(f"{text}\n", style=style)
        return self

    def tags(self, tags: dict[str, str]) -> DetailBuilder:
        if not tags:
            return self
        self.section("Tags")
        for key in sorted(tags):
            self.field(key, tags[key])
        return self

    def raw(self, data: Any) -> DetailBuilder:
        if data is None:
            return self
        self.section("Raw")
        self._text.append(json.dumps(data, indent=2, default=str, ensure_ascii=False) + "\n", style="dim")
        return self

    def build(self) -> Text:
        return self._text


def format_age(value: datetime | None, now: datetime | None = None) -> str:
    """경과 시간을 짧은 문자열로 (예: "42s", "5m", "3h", "12d", "4mo", "2y")"""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    seconds = int((now - value).total_seconds())
    if seconds < 60:
        return f"{max(seconds, 0)}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    days = seconds // 86400
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{days // 30}mo"
    return f"{days // 365}y"


def state_style(value: str) -> str:
    """상태 값에 대응하는 rich 스타일"""
    lowered = value.lower()
    if lowered in ("running", "available", "active", "healthy", "in-use"):
        return "green"
    if lowered in ("stopped", "stopping", "deleting", "pending", "starting", "creating"):
        return "yellow"
    if lowered in ("terminated", "failed", "error", "unhealthy", "deleted"):
        return "red"
    if "FAILED" in value or "ROLLBACK" in value:
        return "red"
    if "IN_PROGRESS" in value:
        return "yellow"
    if value.endswith("_COMPLETE"):
        return "green"
    return ""
