"""
core/parallel/decorators.py - AWS API 에러 분류 및 재시도 유틸리티

팬아웃 분기와 컨텍스트 조회(STS 등)에서 사용하는 에러 분류,
재시도 가능 여부 판단, 지수 백오프 재시도를 제공합니다.

주요 구성 요소:
- RetryConfig: 재시도 설정 (지수 백오프 + 지터)
- categorize_error: 예외를 ErrorCategory로 분류
- get_error_code: 예외에서 에러 코드 추출
- is_retryable: 재시도 가능 여부 판단
- with_retry: 재시도 데코레이터

Note:
    삭제(Delete) 같은 변경 작업에는 재시도를 적용하지 않습니다.
"""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, TypeVar

from core.exceptions import RefreshTimeoutError, is_access_denied, is_not_found, is_throttling

from .types import ErrorCategory

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class RetryConfig:
    """재시도 설정

    Attributes:
        max_retries: 최대 재시도 횟수 (0이면 재시도 안함)
        base_delay: 기본 대기 시간 (초)
        max_delay: 최대 대기 시간 (초)
        exponential_base: 지수 백오프 밑수
        jitter: 지터 사용 여부
    """

    max_retries: int = 3
    base_delay: float = 0.5
    max_delay: float = 8.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """재시도 대기 시간 (attempt는 0부터)"""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        if self.jitter:
            # Full jitter: [0, delay]
            delay = random.uniform(0, delay)
        return delay


# List 분기 기본 재시도
DEFAULT_RETRY_CONFIG = RetryConfig()

# 재시도 없음 (Get/Delete)
NO_RETRY = RetryConfig(max_retries=0)

# 재시도 가능한 AWS 에러 코드
RETRYABLE_ERROR_CODES: set[str] = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
    "ServiceUnavailable",
    "ServiceUnavailableException",
    "InternalError",
    "InternalServiceError",
    "RequestTimeout",
    "RequestTimeoutException",
    "SlowDown",
}

_EXPIRED_TOKEN_CODES = {"ExpiredToken", "ExpiredTokenException", "RequestExpired"}
_INVALID_REQUEST_CODES = {"InvalidParameterValue", "InvalidParameterCombination", "MissingParameter"}


def categorize_error(error: Exception) -> ErrorCategory:
    """예외를 ErrorCategory로 분류

    Args:
        error: 분류할 예외

    Returns:
        에러 카테고리
    """
    if isinstance(error, (FutureTimeoutError, RefreshTimeoutError)):
        return ErrorCategory.TIMEOUT
    if is_throttling(error):
        return ErrorCategory.THROTTLING
    if is_access_denied(error):
        return ErrorCategory.ACCESS_DENIED
    if is_not_found(error):
        return ErrorCategory.NOT_FOUND

    response = getattr(error, "response", None)
    if response is not None:
        error_code = response.get("Error", {}).get("Code", "")
        if "Timeout" in error_code:
            return ErrorCategory.TIMEOUT
        if error_code in _EXPIRED_TOKEN_CODES:
            return ErrorCategory.EXPIRED_TOKEN
        if error_code in _INVALID_REQUEST_CODES:
            return ErrorCategory.INVALID_REQUEST
        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
        if status >= 500:
            return ErrorCategory.SERVICE_ERROR

    if isinstance(error, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(error, (ConnectionError, OSError)):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN


def get_error_code(error: Exception) -> str:
    """예외에서 에러 코드 추출 (ClientError가 아니면 클래스명)"""
    response = getattr(error, "response", None)
    if response is not None:
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code
    return error.__class__.__name__


def is_retryable(error: Exception) -> bool:
    """재시도 가능한 에러인지 확인

    RETRYABLE_ERROR_CODES에 포함된 에러 코드이거나 네트워크 에러인 경우 True.
    """
    response = getattr(error, "response", None)
    if response is not None:
        error_code = response.get("Error", {}).get("Code", "")
        return error_code in RETRYABLE_ERROR_CODES

    return isinstance(error, (ConnectionError, TimeoutError, OSError))


def with_retry(config: RetryConfig | None = None) -> Callable[[F], F]:
    """재시도 가능한 에러에 대해 지수 백오프로 재시도하는 데코레이터

    Example:
        @with_retry(RetryConfig(max_retries=2))
        def fetch_account_id(session):
            return session.client("sts").get_caller_identity()["Account"]
    """
    retry_config = config or DEFAULT_RETRY_CONFIG

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(retry_config.max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_retryable(e) or attempt >= retry_config.max_retries:
                        raise
                    delay = retry_config.get_delay(attempt)
                    logger.debug(f"{func.__name__} 시도 {attempt + 1} 실패 ({get_error_code(e)}), {delay:.2f}초 후 재시도")
                    time.sleep(delay)
            raise RuntimeError("unreachable")

        return wrapper  # type: ignore[return-value]

    return decorator
