"""
core/context.py - 애플리케이션 선택 상태

선택된 리전/프로파일, 프로파일별 계정 ID, 시작 경고, 읽기 전용 여부 등
프로세스 전역 선택 상태를 담는 AppContext를 정의합니다.

쓰기는 메시지 루프 스레드의 핸들러에서만 수행하고(단일 작성자),
백그라운드 작업은 스냅샷(get_regions, get_selections 등)만 읽습니다.

주요 구성 요소:
- ProfileMode / ProfileSelection: 자격 증명 선택 (SDK 기본, 명명 프로파일, 환경변수/IMDS)
- AppContext: 잠금으로 보호되는 선택 상태
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

SDK_DEFAULT_ID = "__sdk_default__"
ENV_ONLY_ID = "__env_only__"


class ProfileMode(Enum):
    """자격 증명 모드"""

    SDK_DEFAULT = "sdk_default"  # 기본 자격 증명 체인 (~/.aws/config 포함)
    NAMED = "named"  # ~/.aws/config 의 명명 프로파일
    ENV_ONLY = "env_only"  # 환경변수/IMDS 만 사용 (설정 파일 무시)


@dataclass(frozen=True)
class ProfileSelection:
    """프로파일 선택

    Attributes:
        mode: 자격 증명 모드
        profile_name: NAMED 모드일 때의 프로파일명
    """

    mode: ProfileMode = ProfileMode.SDK_DEFAULT
    profile_name: str = ""

    @classmethod
    def sdk_default(cls) -> ProfileSelection:
        return cls(ProfileMode.SDK_DEFAULT)

    @classmethod
    def env_only(cls) -> ProfileSelection:
        return cls(ProfileMode.ENV_ONLY)

    @classmethod
    def named(cls, profile_name: str) -> ProfileSelection:
        return cls(ProfileMode.NAMED, profile_name)

    @classmethod
    def from_id(cls, selection_id: str) -> ProfileSelection:
        """id() 결과에서 복원"""
        if selection_id in ("", SDK_DEFAULT_ID):
            return cls.sdk_default()
        if selection_id == ENV_ONLY_ID:
            return cls.env_only()
        return cls.named(selection_id)

    @property
    def id(self) -> str:
        """안정적인 식별자 (계정 ID 맵의 키)"""
        if self.mode is ProfileMode.NAMED:
            return self.profile_name
        if self.mode is ProfileMode.ENV_ONLY:
            return ENV_ONLY_ID
        return SDK_DEFAULT_ID

    @property
    def display_name(self) -> str:
        if self.mode is ProfileMode.NAMED:
            return self.profile_name
        if self.mode is ProfileMode.ENV_ONLY:
            return "(env/IMDS)"
        return "(sdk default)"

    @property
    def is_named(self) -> bool:
        return self.mode is ProfileMode.NAMED

    def __str__(self) -> str:
        return self.display_name


class AppContext:
    """프로세스 전역 선택 상태

    리전과 프로파일 순서는 팬아웃 결과 병합 순서를 결정합니다.

    Example:
        ctx = AppContext(regions=["ap-northeast-2"])
        ctx.set_selections([ProfileSelection.named("dev")])
        ctx.set_account_id("dev", "123456789012")
    """

    def __init__(
        self,
        regions: list[str] | None = None,
        selections: list[ProfileSelection] | None = None,
        read_only: bool = False,
    ):
        self._lock = threading.RLock()
        self._regions: list[str] = _dedup(regions or [])
        self._selections: list[ProfileSelection] = _dedup(selections or [ProfileSelection.sdk_default()])
        self._account_ids: dict[str, str] = {}
        self._warnings: list[str] = []
        self._read_only = read_only

    # -------------------------------------------------------------------------
    # 리전
    # -------------------------------------------------------------------------

    def get_regions(self) -> list[str]:
        with self._lock:
            return list(self._regions)

    def get_region(self) -> str:
        """첫 번째(기본) 리전, 없으면 빈 문자열"""
        with self._lock:
            return self._regions[0] if self._regions else ""

    def set_regions(self, regions: list[str]) -> None:
        with self._lock:
            self._regions = _dedup(regions)

    def add_region(self, region: str) -> None:
        """리전 추가 (이미 있으면 무시)"""
        with self._lock:
            if region and region not in self._regions:
                self._regions.append(region)

    def is_multi_region(self) -> bool:
        with self._lock:
            return len(self._regions) > 1

    # -------------------------------------------------------------------------
    # 프로파일
    # -------------------------------------------------------------------------

    def get_selections(self) -> list[ProfileSelection]:
        with self._lock:
            return list(self._selections)

    def get_selection(self) -> ProfileSelection:
        """첫 번째(기본) 프로파일 선택"""
        with self._lock:
            return self._selections[0] if self._selections else ProfileSelection.sdk_default()

    def set_selections(self, selections: list[ProfileSelection]) -> None:
        with self._lock:
            self._selections = _dedup(selections) or [ProfileSelection.sdk_default()]
            # 선택 해제된 프로파일의 계정 ID 제거
            live = {s.id for s in self._selections}
            self._account_ids = {k: v for k, v in self._account_ids.items() if k in live}

    def is_multi_profile(self) -> bool:
        with self._lock:
            return len(self._selections) > 1

    # -------------------------------------------------------------------------
    # 계정 ID
    # -------------------------------------------------------------------------

    def get_account_id(self, selection_id: str | None = None) -> str:
        with self._lock:
            if selection_id is None:
                selection_id = self.get_selection().id
            return self._account_ids.get(selection_id, "")

    def get_account_ids(self) -> dict[str, str]:
        with self._lock:
            return dict(self._account_ids)

    def set_account_id(self, selection_id: str, account_id: str) -> None:
        with self._lock:
            if account_id:
                self._account_ids[selection_id] = account_id
            else:
                self._account_ids.pop(selection_id, None)

    # -------------------------------------------------------------------------
    # 경고 / 읽기 전용
    # -------------------------------------------------------------------------

    def add_warning(self, warning: str) -> None:
        with self._lock:
            self._warnings.append(warning)
        logger.warning(warning)

    def get_warnings(self) -> list[str]:
        with self._lock:
            return list(self._warnings)

    def clear_warnings(self) -> None:
        with self._lock:
            self._warnings.clear()

    @property
    def read_only(self) -> bool:
        return self._read_only

    @read_only.setter
    def read_only(self, value: bool) -> None:
        self._read_only = value

    def __repr__(self) -> str:
        return f"AppContext(regions={self.get_regions()}, selections={[s.id for s in self.get_selections()]})"


def _dedup(items):
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen
