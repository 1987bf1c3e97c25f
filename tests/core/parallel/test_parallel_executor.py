"""
tests/core/parallel/test_parallel_executor.py - 팬아웃 실행기 테스트
"""

import threading
import time

import pytest
from botocore.exceptions import ClientError

from core.context import ProfileSelection
from core.parallel import (
    ErrorCategory,
    FanoutExecutor,
    FanoutTarget,
    ParallelConfig,
    ParallelExecutionResult,
    RetryConfig,
    TaskError,
    TaskResult,
    build_targets,
)

FAST_RETRY = RetryConfig(max_retries=2, base_delay=0.001, max_delay=0.002, jitter=False)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "DescribeInstances")


class TestBuildTargets:
    """대상 목록 생성 테스트"""

    def test_region_major_order(self):
        """리전 우선, 프로파일 순서"""
        dev = ProfileSelection.named("dev")
        prod = ProfileSelection.named("prod")
        targets = build_targets(["ap-northeast-2", "us-east-1"], [dev, prod])
        assert [(t.region, t.identifier) for t in targets] == [
            ("ap-northeast-2", "dev"),
            ("ap-northeast-2", "prod"),
            ("us-east-1", "dev"),
            ("us-east-1", "prod"),
        ]

    def test_target_str(self):
        """표시 문자열"""
        target = FanoutTarget("us-east-1", ProfileSelection.named("dev"))
        assert str(target) == "dev/us-east-1"


class TestParallelConfig:
    """ParallelConfig 테스트"""

    def test_invalid_workers(self):
        """1 미만은 에러"""
        with pytest.raises(ValueError):
            ParallelConfig(max_workers=0)

    def test_workers_capped(self):
        """100 초과는 100으로 제한"""
        assert ParallelConfig(max_workers=500).max_workers == 100


class TestFanoutExecutor:
    """FanoutExecutor 테스트"""

    def test_empty_targets(self):
        """대상이 없으면 빈 결과"""
        result = FanoutExecutor().execute(lambda t: t.region, [])
        assert result.total_count == 0

    def test_results_follow_target_order(self):
        """완료 순서와 무관하게 대상 순서"""
        regions = ["r-slow", "r-mid", "r-fast"]
        delays = {"r-slow": 0.05, "r-mid": 0.02, "r-fast": 0.0}

        def work(target):
            time.sleep(delays[target.region])
            return [target.region]

        targets = build_targets(regions, [ProfileSelection.sdk_default()])
        result = FanoutExecutor(ParallelConfig(max_workers=3)).execute(work, targets)

        assert [r.region for r in result.results] == regions
        assert result.get_flat_data() == regions

    def test_partial_failure(self):
        """일부 분기 실패"""

        def work(target):
            if target.region == "bad":
                raise RuntimeError("boom")
            return target.region

        targets = build_targets(["good", "bad"], [ProfileSelection.sdk_default()])
        result = FanoutExecutor().execute(work, targets)

        assert result.success_count == 1
        assert result.error_count == 1
        error = result.get_errors()[0]
        assert error.region == "bad"
        assert error.error_code == "RuntimeError"
        assert error.retries == 0

    def test_timeout_marks_unfinished(self):
        """시간 제한 내에 끝나지 않은 분기는 TIMEOUT"""
        release = threading.Event()

        def work(target):
            if target.region == "hang":
                release.wait(2)
            return target.region

        targets = build_targets(["ok", "hang"], [ProfileSelection.sdk_default()])
        try:
            result = FanoutExecutor(ParallelConfig(max_workers=2, timeout=0.1)).execute(work, targets)
        finally:
            release.set()

        assert result.results[0].success
        assert not result.results[1].success
        assert result.results[1].error.category is ErrorCategory.TIMEOUT
        assert result.results[1].error.error_code == "FanoutTimeout"

    def test_retryable_error_retried(self):
        """재시도 가능한 에러는 재시도 후 성공"""
        calls = {"n": 0}

        def work(target):
            calls["n"] += 1
            if calls["n"] < 3:
                raise _client_error("ThrottlingException")
            return "ok"

        targets = build_targets(["ap-northeast-2"], [ProfileSelection.sdk_default()])
        result = FanoutExecutor(ParallelConfig(retry_config=FAST_RETRY)).execute(work, targets)

        assert result.success_count == 1
        assert calls["n"] == 3

    def test_non_retryable_error_not_retried(self):
        """재시도 불가능한 에러는 즉시 실패"""
        calls = {"n": 0}

        def work(target):
            calls["n"] += 1
            raise _client_error("AccessDenied")

        targets = build_targets(["ap-northeast-2"], [ProfileSelection.sdk_default()])
        result = FanoutExecutor(ParallelConfig(retry_config=FAST_RETRY)).execute(work, targets)

        assert calls["n"] == 1
        assert result.get_errors()[0].category is ErrorCategory.ACCESS_DENIED

    def test_retries_exhausted(self):
        """재시도 소진 시 마지막 시도 번호 기록"""

        def work(target):
            raise ConnectionError("reset")

        targets = build_targets(["ap-northeast-2"], [ProfileSelection.sdk_default()])
        result = FanoutExecutor(ParallelConfig(retry_config=FAST_RETRY)).execute(work, targets)

        error = result.get_errors()[0]
        assert error.category is ErrorCategory.NETWORK
        assert error.retries == 2


class TestParallelExecutionResult:
    """ParallelExecutionResult 테스트"""

    def _result(self):
        return ParallelExecutionResult(
            results=[
                TaskResult("dev", "ap-northeast-2", True, data=[1, 2]),
                TaskResult("dev", "us-east-1", True, data=3),
                TaskResult(
                    "dev",
                    "eu-west-1",
                    False,
                    error=TaskError("dev", "eu-west-1", ErrorCategory.ACCESS_DENIED, "AccessDenied", "no"),
                ),
            ]
        )

    def test_counts(self):
        """성공/실패 집계"""
        result = self._result()
        assert result.total_count == 3
        assert result.has_any_success()
        assert result.has_any_failure()
        assert not result.has_failures_only()

    def test_flat_data(self):
        """리스트 데이터 평탄화"""
        assert self._result().get_flat_data() == [1, 2, 3]

    def test_error_summary(self):
        """에러 요약"""
        summary = self._result().get_error_summary()
        assert summary.startswith("총 1개 작업 실패")
        assert "[access_denied] 1개: dev/eu-west-1" in summary
        assert ParallelExecutionResult().get_error_summary() == ""
