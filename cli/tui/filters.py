"""
cli/tui/filters.py - 목록 필터

텍스트 필터와 태그 필터 조건을 판정합니다.

태그 필터 형식 (키/값 모두 대소문자 무시):
    "env=prod"  키 env 의 값이 정확히 prod
    "env~pro"   키 env 의 값에 pro 포함
    "env"       키 env 존재
    ""          태그가 하나라도 있음
"""

from __future__ import annotations

from core.dao.types import Resource, unwrap_resource


def matches_tag_filter(tags: dict[str, str], tag_filter: str) -> bool:
    """태그 필터 일치 여부"""
    if not tag_filter:
        return bool(tags)

    lowered = {k.lower(): v.lower() for k, v in tags.items()}

    if "=" in tag_filter:
        key, _, value = tag_filter.partition("=")
        actual = lowered.get(key.strip().lower())
        return actual is not None and actual == value.strip().lower()

    if "~" in tag_filter:
        key, _, value = tag_filter.partition("~")
        actual = lowered.get(key.strip().lower())
        return actual is not None and value.strip().lower() in actual

    return tag_filter.strip().lower() in lowered


def matches_text_filter(resource: Resource, text: str) -> bool:
    """이름 또는 ID 에 text 포함 여부 (대소문자 무시)"""
    if not text:
        return True
    needle = text.lower()
    return needle in resource.get_name().lower() or needle in unwrap_resource(resource).get_id().lower()


def apply_filters(resources: list[Resource], text: str = "", tag_filter: str = "") -> list[Resource]:
    """텍스트/태그 필터 적용 (빈 필터는 무시)"""
    result = resources
    if tag_filter:
        result = [r for r in result if matches_tag_filter(r.get_tags(), tag_filter)]
    if text:
        result = [r for r in result if matches_text_filter(r, text)]
    return result
