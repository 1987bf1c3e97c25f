"""
cli/tui/views/drilldown.py - 하위 리소스 이동

렌더러의 Navigation 을 실제 화면으로 바꿉니다.
하위 화면은 상위 리소스의 출처(리전/프로파일)를 그대로 대상으로 삼습니다.
"""

from __future__ import annotations

from core.context import ProfileSelection
from core.dao.types import Resource, get_resource_profile, get_resource_region
from core.render import Navigation

from ..view import TUIContext, View

LOG_VIEW = "log"


def origin_of(resource: Resource) -> tuple[str, ProfileSelection | None]:
    """리소스 출처 (리전, 프로파일) - 래핑되지 않았으면 ("", None)"""
    profile = get_resource_profile(resource)
    selection = ProfileSelection.from_id(profile) if profile else None
    return get_resource_region(resource), selection


def find_navigation(navigations: list[Navigation], key: str) -> Navigation | None:
    for nav in navigations:
        if nav.key == key:
            return nav
    return None


def view_for_navigation(ctx: TUIContext, nav: Navigation, resource: Resource) -> View:
    """Navigation 대상 화면 생성"""
    region, selection = origin_of(resource)

    if nav.view_type == LOG_VIEW:
        from .log_view import LogView

        return LogView(ctx, nav.filter_value, region=region, selection=selection)

    from .resource_browser import ResourceBrowser

    filters = {nav.filter_field: nav.filter_value} if nav.filter_field else {}
    return ResourceBrowser(
        ctx,
        nav.service,
        nav.resource,
        filters=filters,
        region=region,
        selection=selection,
        parent_name=resource.get_name(),
    )
