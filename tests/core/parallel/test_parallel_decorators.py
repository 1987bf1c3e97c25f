"""
tests/core/parallel/test_parallel_decorators.py - 에러 분류 및 재시도 테스트
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from core.exceptions import RefreshTimeoutError
from core.parallel import ErrorCategory, RetryConfig, with_retry
from core.parallel.decorators import categorize_error, get_error_code, is_retryable


def _client_error(code: str, status: int = 400) -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": code}, "ResponseMetadata": {"HTTPStatusCode": status}},
        "ListBuckets",
    )


class TestRetryConfig:
    """RetryConfig 테스트"""

    def test_exponential_delay(self):
        """지수 증가와 상한"""
        config = RetryConfig(base_delay=1.0, max_delay=5.0, jitter=False)
        assert config.get_delay(0) == 1.0
        assert config.get_delay(1) == 2.0
        assert config.get_delay(2) == 4.0
        assert config.get_delay(5) == 5.0

    def test_jitter_bounded(self):
        """지터는 [0, delay] 범위"""
        config = RetryConfig(base_delay=1.0, max_delay=5.0)
        for attempt in range(5):
            assert 0 <= config.get_delay(attempt) <= 5.0


class TestCategorizeError:
    """에러 분류 테스트"""

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (_client_error("ThrottlingException"), ErrorCategory.THROTTLING),
            (_client_error("AccessDenied"), ErrorCategory.ACCESS_DENIED),
            (_client_error("NoSuchBucket"), ErrorCategory.NOT_FOUND),
            (_client_error("ExpiredToken"), ErrorCategory.EXPIRED_TOKEN),
            (_client_error("InvalidParameterValue"), ErrorCategory.INVALID_REQUEST),
            (_client_error("InternalFailure", 503), ErrorCategory.SERVICE_ERROR),
            (RefreshTimeoutError("context_init", 5.0), ErrorCategory.TIMEOUT),
            (TimeoutError("slow"), ErrorCategory.TIMEOUT),
            (ConnectionError("reset"), ErrorCategory.NETWORK),
            (RuntimeError("boom"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categories(self, error, category):
        """카테고리 매핑"""
        assert categorize_error(error) is category

    def test_error_code(self):
        """에러 코드 추출"""
        assert get_error_code(_client_error("AccessDenied")) == "AccessDenied"
        assert get_error_code(ValueError("x")) == "ValueError"


class TestIsRetryable:
    """재시도 가능 판단 테스트"""

    def test_retryable_codes(self):
        """스로틀링/일시 장애 코드"""
        assert is_retryable(_client_error("Throttling"))
        assert is_retryable(_client_error("SlowDown"))
        assert not is_retryable(_client_error("AccessDenied"))

    def test_network_errors(self):
        """네트워크 예외는 재시도, 일반 예외는 불가"""
        assert is_retryable(ConnectionError("reset"))
        assert is_retryable(OSError("io"))
        assert not is_retryable(RuntimeError("boom"))


class TestWithRetry:
    """with_retry 데코레이터 테스트"""

    def test_retries_until_success(self):
        """재시도 후 성공"""
        func = MagicMock(side_effect=[_client_error("Throttling"), "ok"])
        func.__name__ = "fetch"
        wrapped = with_retry(RetryConfig(max_retries=2, base_delay=0.001, jitter=False))(func)
        assert wrapped() == "ok"
        assert func.call_count == 2

    def test_non_retryable_raises(self):
        """재시도 불가능한 에러는 즉시 전파"""
        func = MagicMock(side_effect=_client_error("AccessDenied"))
        func.__name__ = "fetch"
        wrapped = with_retry(RetryConfig(max_retries=3, base_delay=0.001))(func)
        with pytest.raises(ClientError):
            wrapped()
        assert func.call_count == 1

    def test_exhausted_raises_last_error(self):
        """재시도 소진 시 마지막 에러 전파"""
        func = MagicMock(side_effect=ConnectionError("reset"))
        func.__name__ = "fetch"
        wrapped = with_retry(RetryConfig(max_retries=1, base_delay=0.001, jitter=False))(func)
        with pytest.raises(ConnectionError):
            wrapped()
        assert func.call_count == 2
