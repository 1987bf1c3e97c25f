"""
core/region/availability.py - 가용 리전 조회

EC2.describe_regions()로 계정에서 활성화된 리전을 조회합니다.
리전 선택 화면에서 사용하며, 조회 실패 시 정적 목록으로 대체합니다.

Usage:
    from core.region.availability import get_available_regions

    regions = get_available_regions(ProfileSelection.sdk_default())
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from core.auth.session import get_session
from core.config import settings
from core.parallel.client import get_client

from .data import ALL_REGIONS, COMMON_REGIONS

if TYPE_CHECKING:
    from core.context import ProfileSelection

logger = logging.getLogger(__name__)

# 캐시 TTL (초) - 리전 목록은 자주 변경되지 않음
DEFAULT_CACHE_TTL = 3600


@dataclass
class _CacheEntry:
    regions: list[str]
    timestamp: float

    def is_expired(self, ttl: float) -> bool:
        return time.time() - self.timestamp > ttl


_cache: dict[str, _CacheEntry] = {}
_cache_lock = threading.Lock()


def get_available_regions(selection: ProfileSelection, cache_ttl: float = DEFAULT_CACHE_TTL) -> list[str]:
    """활성화된 리전 목록 (옵트인 미완료 리전 제외)

    Args:
        selection: 조회에 사용할 프로파일 선택
        cache_ttl: 캐시 TTL (초)

    Returns:
        order_regions 순서의 리전 코드 리스트
    """
    with _cache_lock:
        entry = _cache.get(selection.id)
        if entry and not entry.is_expired(cache_ttl):
            return list(entry.regions)

    try:
        session = get_session(selection)
        ec2 = get_client(session, "ec2", region_name=session.region_name or settings.DEFAULT_REGION)
        response = ec2.describe_regions(AllRegions=True)
        regions = [
            r["RegionName"]
            for r in response.get("Regions", [])
            if r.get("OptInStatus", "opt-in-not-required") in ("opt-in-not-required", "opted-in")
        ]
    except (ClientError, BotoCoreError) as e:
        logger.warning(f"리전 목록 조회 실패, 기본 목록 사용: {e}")
        return order_regions(ALL_REGIONS)

    ordered = order_regions(regions)
    with _cache_lock:
        _cache[selection.id] = _CacheEntry(regions=ordered, timestamp=time.time())
    return list(ordered)


def order_regions(regions: list[str]) -> list[str]:
    """주요 리전을 앞에, 나머지는 알파벳순으로 정렬"""
    common = [r for r in COMMON_REGIONS if r in regions]
    rest = sorted(r for r in set(regions) if r not in COMMON_REGIONS)
    return common + rest


def clear_region_cache() -> None:
    with _cache_lock:
        _cache.clear()
