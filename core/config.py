"""
core/config.py - 애플리케이션 설정

YAML 설정 파일(~/.config/awsnav/config.yaml)과 환경변수를 읽어
내비게이터의 타임아웃, 동시성, 스택 깊이, 시작 화면 등을 구성합니다.
설정 파일은 읽기 전용이며 애플리케이션이 저장하지 않습니다.

주요 구성 요소:
- Settings: 불변 기본값 상수
- NavConfig: 설정 파일에서 로드한 런타임 설정
- LogConfig: 로깅 설정 (환경변수 기반)
- load_config / get_config: 설정 로드 및 전역 조회
- is_valid_region / is_valid_profile_name / is_valid_account_id: 입력 검증

설정 파일 예시:
    timeouts:
      aws_init: 5s
      multi_region_fetch: 30s
    concurrency:
      max_fetches: 50
    navigation:
      max_stack_size: 100
    pagination:
      page_size: 100
      max_pages: 50
      max_items: 10000
    startup:
      view: dashboard
      regions: [ap-northeast-2, us-east-1]
      profiles: [dev]
    defaults:
      ec2: security-groups
"""

from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# =============================================================================
# 기본값
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """애플리케이션 기본값 (불변)"""

    DEFAULT_REGION: str = "us-east-1"
    AWS_INIT_TIMEOUT: float = 5.0
    MULTI_REGION_FETCH_TIMEOUT: float = 30.0
    MAX_CONCURRENT_FETCHES: int = 50
    MAX_STACK_SIZE: int = 100
    PAGE_SIZE: int = 100
    MAX_LIST_PAGES: int = 50
    MAX_LIST_ITEMS: int = 10000
    ERROR_CLEAR_SECONDS: float = 3.0
    FLASH_CLEAR_SECONDS: float = 2.0
    CONFIG_ENV_VAR: str = "AWSNAV_CONFIG"
    READ_ONLY_ENV_VAR: str = "AWSNAV_READ_ONLY"


settings = Settings()

# 리전: ap-northeast-2, us-gov-west-1, cn-north-1 등
_REGION_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d+$")
# 계정 ID: 12자리 숫자
_ACCOUNT_ID_PATTERN = re.compile(r"^\d{12}$")
# 프로파일명: 영숫자와 일부 기호
_PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.@+=,/:-]+$")


def is_valid_region(region: str) -> bool:
    """리전 코드 형식 검증"""
    return bool(_REGION_PATTERN.match(region))


def is_valid_account_id(account_id: str) -> bool:
    """12자리 AWS 계정 ID 형식 검증"""
    return bool(_ACCOUNT_ID_PATTERN.match(account_id))


def is_valid_profile_name(name: str) -> bool:
    """프로파일명 형식 검증 (길이 1~128)"""
    return 0 < len(name) <= 128 and bool(_PROFILE_NAME_PATTERN.match(name))


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환 (알 수 없는 값은 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(name: str, default: int) -> int:
    """환경변수를 int로 변환 (변환 실패 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_default_profile() -> str | None:
    """AWS_PROFILE 또는 AWS_DEFAULT_PROFILE 환경변수"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


def get_default_region() -> str | None:
    """AWS_REGION 또는 AWS_DEFAULT_REGION 환경변수"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")


def get_version() -> str:
    """설치된 패키지 버전 (미설치 개발 환경은 '0.0.0-dev')"""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("awsnav")
    except PackageNotFoundError:
        return "0.0.0-dev"


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정

    Attributes:
        level: 로그 레벨 이름
        format: 로그 포맷
        date_format: 시간 포맷
    """

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL, LOG_FORMAT 환경변수에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
        )


# =============================================================================
# 설정 파일
# =============================================================================

_DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h)?$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}


def parse_duration(value: Any) -> float:
    """기간 값을 초 단위로 변환

    Args:
        value: 숫자(초) 또는 "500ms", "5s", "1m", "1h" 형식 문자열

    Returns:
        초 단위 실수

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    if isinstance(value, bool):
        raise ValueError(f"잘못된 기간 값: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _DURATION_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"잘못된 기간 값: {value!r}")
    return float(match.group(1)) * _DURATION_UNITS[match.group(2)]


@dataclass
class StartupConfig:
    """시작 화면과 초기 선택

    Attributes:
        view: "dashboard", "services" 또는 "service[/resource]" (빈 값은 서비스 목록)
        regions: 초기 리전 목록
        profiles: 초기 프로파일 목록
    """

    view: str = ""
    regions: list[str] = field(default_factory=list)
    profiles: list[str] = field(default_factory=list)


@dataclass
class NavConfig:
    """런타임 설정

    0 이하이거나 형식이 잘못된 값은 기본값으로 대체되며,
    그 내용은 warnings에 누적되어 시작 경고 화면에 표시됩니다.
    """

    aws_init_timeout: float = settings.AWS_INIT_TIMEOUT
    multi_region_fetch_timeout: float = settings.MULTI_REGION_FETCH_TIMEOUT
    max_fetches: int = settings.MAX_CONCURRENT_FETCHES
    max_stack_size: int = settings.MAX_STACK_SIZE
    page_size: int = settings.PAGE_SIZE
    max_list_pages: int = settings.MAX_LIST_PAGES
    max_list_items: int = settings.MAX_LIST_ITEMS
    startup: StartupConfig = field(default_factory=StartupConfig)
    defaults: dict[str, str] = field(default_factory=dict)
    source: Path | None = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> NavConfig:
        """YAML 딕셔너리에서 설정 생성"""
        config = cls(source=source)

        timeouts = _section(data, "timeouts", config.warnings)
        config.aws_init_timeout = _positive(
            timeouts, "aws_init", settings.AWS_INIT_TIMEOUT, parse_duration, config.warnings, "timeouts"
        )
        config.multi_region_fetch_timeout = _positive(
            timeouts,
            "multi_region_fetch",
            settings.MULTI_REGION_FETCH_TIMEOUT,
            parse_duration,
            config.warnings,
            "timeouts",
        )

        concurrency = _section(data, "concurrency", config.warnings)
        config.max_fetches = _positive(
            concurrency, "max_fetches", settings.MAX_CONCURRENT_FETCHES, int, config.warnings, "concurrency"
        )

        navigation = _section(data, "navigation", config.warnings)
        config.max_stack_size = _positive(
            navigation, "max_stack_size", settings.MAX_STACK_SIZE, int, config.warnings, "navigation"
        )

        pagination = _section(data, "pagination", config.warnings)
        config.page_size = _positive(pagination, "page_size", settings.PAGE_SIZE, int, config.warnings, "pagination")
        config.max_list_pages = _positive(
            pagination, "max_pages", settings.MAX_LIST_PAGES, int, config.warnings, "pagination"
        )
        config.max_list_items = _positive(
            pagination, "max_items", settings.MAX_LIST_ITEMS, int, config.warnings, "pagination"
        )

        startup = _section(data, "startup", config.warnings)
        config.startup = StartupConfig(
            view=str(startup.get("view") or "").strip(),
            regions=_string_list(startup, "regions", config.warnings, is_valid_region),
            profiles=_string_list(startup, "profiles", config.warnings, is_valid_profile_name),
        )

        defaults = data.get("defaults") or {}
        if isinstance(defaults, dict):
            config.defaults = {str(k): str(v) for k, v in defaults.items() if v}
        else:
            config.warnings.append("설정 오류 [defaults]: 매핑이어야 합니다")

        return config


def _section(data: dict[str, Any], name: str, warnings: list[str]) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        warnings.append(f"설정 오류 [{name}]: 매핑이어야 합니다")
        return {}
    return value


def _positive(section, key, default, convert, warnings, prefix):
    if key not in section or section[key] is None:
        return default
    raw = section[key]
    try:
        value = convert(raw)
    except (TypeError, ValueError):
        warnings.append(f"설정 오류 [{prefix}.{key}]: 잘못된 값 {raw!r}, 기본값 {default} 사용")
        return default
    if value <= 0:
        warnings.append(f"설정 오류 [{prefix}.{key}]: 0보다 커야 합니다, 기본값 {default} 사용")
        return default
    return value


def _string_list(section, key, warnings, validator) -> list[str]:
    raw = section.get(key) or []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        warnings.append(f"설정 오류 [startup.{key}]: 목록이어야 합니다")
        return []
    result = []
    for item in raw:
        text = str(item).strip()
        if not validator(text):
            warnings.append(f"설정 오류 [startup.{key}]: 잘못된 값 '{text}' 무시")
            continue
        if text not in result:
            result.append(text)
    return result


def get_config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    """설정 파일 경로 결정

    우선순위: 명시적 경로 > AWSNAV_CONFIG 환경변수 > ~/.config/awsnav/config.yaml
    """
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.environ.get(settings.CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "awsnav" / "config.yaml"


def read_config_file(path: Path) -> NavConfig:
    """설정 파일 읽기

    Raises:
        ConfigError: 파일을 읽을 수 없거나 YAML 형식이 잘못된 경우
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(path), "파일을 읽을 수 없습니다", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(str(path), "YAML 형식이 잘못되었습니다", cause=e) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "최상위 항목은 매핑이어야 합니다")
    return NavConfig.from_dict(data, source=path)


def load_config(explicit: str | os.PathLike[str] | None = None) -> NavConfig:
    """설정 로드 (실패해도 기본값으로 계속 진행)

    파일이 없으면 기본값을 사용합니다. 명시적으로 지정한 파일이 없거나
    파일 형식이 잘못되면 기본값을 사용하고 경고를 남깁니다.

    Args:
        explicit: --config 로 지정한 경로

    Returns:
        NavConfig
    """
    path = get_config_path(explicit)
    if not path.exists():
        config = NavConfig()
        if explicit or os.environ.get(settings.CONFIG_ENV_VAR):
            config.warnings.append(f"설정 파일을 찾을 수 없습니다: {path}")
        logger.debug(f"설정 파일 없음, 기본값 사용: {path}")
        return config

    try:
        config = read_config_file(path)
    except ConfigError as e:
        logger.warning(f"설정 파일 로드 실패, 기본값 사용: {e}")
        return NavConfig(warnings=[str(e)])

    for warning in config.warnings:
        logger.warning(warning)
    logger.debug(f"설정 로드 완료: {path}")
    return config


# =============================================================================
# 전역 설정
# =============================================================================

_config: NavConfig | None = None
_config_lock = threading.Lock()


def get_config() -> NavConfig:
    """현재 설정 조회 (최초 호출 시 기본 경로에서 로드)"""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def set_config(config: NavConfig | None) -> None:
    """전역 설정 교체 (None이면 다음 조회 시 다시 로드)"""
    global _config
    with _config_lock:
        _config = config
