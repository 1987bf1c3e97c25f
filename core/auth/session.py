"""
core/auth/session.py - 프로파일 선택별 boto3 세션과 컨텍스트 조회

ProfileSelection(SDK 기본 / 명명 프로파일 / 환경변수 전용)에 맞는
boto3 Session을 만들고, 리전과 계정 ID를 조회합니다.

init_context / refresh_context_data 는 백그라운드 스레드에서 실행되므로
AppContext를 직접 수정하지 않고 결과 데이터만 반환합니다.
결과 반영은 메시지 루프 스레드에서 수행합니다.

주요 구성 요소:
- get_session: (선택, 리전)별 캐시된 boto3 Session
- list_profiles: ~/.aws/config 의 프로파일 목록
- fetch_account_id: STS get_caller_identity 로 계정 ID 조회
- init_context: 시작 시 기본 리전/계정 ID 조회
- refresh_context_data: 프로파일/리전 변경 후 리전/계정 ID 재조회
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.context import ProfileMode, ProfileSelection
from core.exceptions import format_error_for_user
from core.parallel.client import get_client
from core.parallel.decorators import RetryConfig, with_retry

if TYPE_CHECKING:
    from core.context import AppContext

logger = logging.getLogger(__name__)

_sessions: dict[tuple[str, str], boto3.Session] = {}
_session_lock = threading.Lock()

# 계정 ID 동시 조회 상한
MAX_ACCOUNT_LOOKUPS = 10


# =============================================================================
# 세션
# =============================================================================


def _create_session(selection: ProfileSelection, region: str | None) -> boto3.Session:
    if selection.mode is ProfileMode.NAMED:
        return boto3.Session(profile_name=selection.profile_name, region_name=region)
    if selection.mode is ProfileMode.ENV_ONLY:
        # 설정 파일을 무시하고 환경변수/IMDS 자격 증명만 사용
        core_session = botocore.session.Session()
        core_session.set_config_variable("config_file", os.devnull)
        core_session.set_config_variable("credentials_file", os.devnull)
        return boto3.Session(botocore_session=core_session, region_name=region)
    return boto3.Session(region_name=region)


def get_session(selection: ProfileSelection, region: str | None = None) -> boto3.Session:
    """(선택, 리전)별 캐시된 boto3 Session 조회

    Args:
        selection: 프로파일 선택
        region: 리전 (None이면 프로파일/환경 기본값)

    Returns:
        boto3 Session
    """
    key = (selection.id, region or "")
    with _session_lock:
        session = _sessions.get(key)
        if session is None:
            session = _create_session(selection, region)
            _sessions[key] = session
        return session


def clear_session_cache() -> None:
    """세션 캐시 초기화 (프로파일 변경 시)"""
    with _session_lock:
        _sessions.clear()


def list_profiles() -> list[str]:
    """~/.aws/config, ~/.aws/credentials 의 프로파일 목록 (정렬)"""
    try:
        return sorted(boto3.Session().available_profiles)
    except BotoCoreError as e:
        logger.warning(f"프로파일 목록 조회 실패: {e}")
        return []


def resolve_region(selection: ProfileSelection) -> str:
    """선택의 기본 리전 (설정 파일/환경변수), 없으면 빈 문자열"""
    return get_session(selection).region_name or ""


@with_retry(RetryConfig(max_retries=2, base_delay=0.3))
def fetch_account_id(selection: ProfileSelection, region: str | None = None) -> str:
    """STS get_caller_identity 로 계정 ID 조회"""
    session = get_session(selection, region)
    sts = get_client(session, "sts", region_name=region or session.region_name or settings.DEFAULT_REGION)
    return sts.get_caller_identity()["Account"]


# =============================================================================
# 컨텍스트 조회
# =============================================================================


@dataclass
class ContextInitResult:
    """시작 시 컨텍스트 조회 결과

    Attributes:
        region: 결정된 기본 리전 (이미 선택된 리전이 있으면 빈 문자열)
        account_ids: 프로파일 ID -> 계정 ID
        warnings: 사용자에게 보여줄 경고
        imds_errors: 로그로만 남길 리전 탐지 오류 (EC2 외 환경에서 정상)
    """

    region: str = ""
    account_ids: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    imds_errors: list[str] = field(default_factory=list)


@dataclass
class ProfileRefreshResult:
    """프로파일/리전 변경 후 재조회 결과 (부분 결과 + 첫 번째 에러)"""

    region: str = ""
    account_ids: dict[str, str] = field(default_factory=dict)
    error: Exception | None = None


def init_context(app: AppContext) -> ContextInitResult:
    """기본 리전과 기본 프로파일의 계정 ID 조회

    Args:
        app: 애플리케이션 컨텍스트 (읽기 전용으로 사용)

    Returns:
        ContextInitResult
    """
    result = ContextInitResult()
    selection = app.get_selection()

    region = app.get_region()
    if not region:
        try:
            region = resolve_region(selection)
        except (BotoCoreError, ValueError) as e:
            # ProfileNotFound 등은 사용자 경고
            result.warnings.append(f"리전 조회 실패 [{selection.display_name}]: {e}")
        if not region:
            result.imds_errors.append("기본 리전을 찾을 수 없어 기본값을 사용합니다")
            region = settings.DEFAULT_REGION
        result.region = region

    try:
        account_id = fetch_account_id(selection, region)
        result.account_ids[selection.id] = account_id
        logger.info(f"AWS 컨텍스트 초기화: {selection.display_name} / {region} / {account_id}")
    except (ClientError, BotoCoreError) as e:
        result.warnings.append(f"계정 ID 조회 실패 [{selection.display_name}]: {format_error_for_user(e)}")

    return result


def refresh_context_data(app: AppContext) -> ProfileRefreshResult:
    """선택된 모든 프로파일의 계정 ID 재조회

    단일 리전 모드에서는 기본 프로파일의 리전도 다시 결정합니다.
    일부 프로파일이 실패해도 성공한 결과는 반환하며, 첫 번째 에러(선택 순서 기준)를 함께 담습니다.
    """
    result = ProfileRefreshResult()
    selections = app.get_selections()

    if len(app.get_regions()) <= 1:
        try:
            result.region = resolve_region(selections[0])
        except (BotoCoreError, ValueError) as e:
            result.error = e
            return result

    region = result.region or app.get_region() or settings.DEFAULT_REGION
    workers = min(MAX_ACCOUNT_LOOKUPS, len(selections))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="account-id") as executor:
        futures = [(selection, executor.submit(fetch_account_id, selection, region)) for selection in selections]
        for selection, future in futures:
            try:
                result.account_ids[selection.id] = future.result()
            except (ClientError, BotoCoreError, ValueError) as e:
                logger.warning(f"계정 ID 조회 실패 [{selection.display_name}]: {e}")
                if result.error is None:
                    result.error = e

    return result
