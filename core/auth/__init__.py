"""
core/auth - AWS 자격 증명과 세션

사용 예시:
    from core.auth import get_session, fetch_account_id
    from core.context import ProfileSelection

    session = get_session(ProfileSelection.named("dev"), "ap-northeast-2")
    account_id = fetch_account_id(ProfileSelection.named("dev"))
"""

from .session import (
    ContextInitResult,
    ProfileRefreshResult,
    clear_session_cache,
    fetch_account_id,
    get_session,
    init_context,
    list_profiles,
    refresh_context_data,
    resolve_region,
)

__all__: list[str] = [
    "ContextInitResult",
    "ProfileRefreshResult",
    "clear_session_cache",
    "fetch_account_id",
    "get_session",
    "init_context",
    "list_profiles",
    "refresh_context_data",
    "resolve_region",
]
