"""
core/parallel/executor.py - 팬아웃 실행기

하나의 논리 작업을 여러 (리전, 프로파일) 대상에 동시에 실행하고
대상 순서대로 결과를 모읍니다. ThreadPoolExecutor 기반이며,
동시 실행 수 상한, 전체 시간 제한, 지수 백오프 재시도를 지원합니다.

주요 구성 요소:
- FanoutTarget: 단일 (리전, 프로파일) 대상
- ParallelConfig: 팬아웃 설정 (워커 수, 재시도, 시간 제한)
- FanoutExecutor: 팬아웃 실행기
- build_targets: 리전 x 프로파일 대상 목록 생성

Example:
    from core.parallel import FanoutExecutor, ParallelConfig, build_targets

    targets = build_targets(["ap-northeast-2", "us-east-1"], [ProfileSelection.named("dev")])
    executor = FanoutExecutor(ParallelConfig(max_workers=50, timeout=30))
    result = executor.execute(lambda target: dao_for(target).list(), targets, label="ec2/instances")

    for task in result.results:  # 대상 순서 유지
        ...
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ALL_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from .decorators import NO_RETRY, RetryConfig, categorize_error, get_error_code, is_retryable
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

if TYPE_CHECKING:
    from core.context import ProfileSelection

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _clear_exception_chain(e: BaseException) -> None:
    """traceback + chained exception 메모리 누수 방지"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


@dataclass(frozen=True)
class FanoutTarget:
    """단일 팬아웃 대상

    Attributes:
        region: 리전
        selection: 프로파일 선택
    """

    region: str
    selection: ProfileSelection

    @property
    def identifier(self) -> str:
        return self.selection.id

    def __str__(self) -> str:
        return f"{self.selection.display_name}/{self.region}"


def build_targets(regions: list[str], selections: list[ProfileSelection]) -> list[FanoutTarget]:
    """리전 x 프로파일 대상 목록 생성

    병합 순서를 따르도록 리전 순서 우선, 그 안에서 프로파일 순서로 정렬합니다.
    """
    return [FanoutTarget(region, selection) for region in regions for selection in selections]


@dataclass
class ParallelConfig:
    """팬아웃 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (1~100)
        retry_config: 재시도 설정 (None이면 재시도 안함)
        timeout: 전체 팬아웃 시간 제한 (초, None이면 무제한)
    """

    max_workers: int = 20
    retry_config: RetryConfig | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > 100:
            self.max_workers = 100


class FanoutExecutor:
    """팬아웃 실행기

    특징:
    - 동시 실행 수 상한 (max_workers)
    - 전체 시간 제한: 끝나지 않은 분기는 TIMEOUT 실패로 기록
    - 재시도 가능한 에러는 지수 백오프 재시도
    - 결과는 대상 목록 순서 (완료 순서와 무관)
    """

    def __init__(self, config: ParallelConfig | None = None):
        self.config = config or ParallelConfig()
        self._retry_config = self.config.retry_config or NO_RETRY

    def execute(
        self,
        func: Callable[[FanoutTarget], T],
        targets: list[FanoutTarget],
        label: str = "fanout",
    ) -> ParallelExecutionResult[T]:
        """모든 대상에 작업 실행

        Args:
            func: (target) -> T 함수
            targets: 대상 목록
            label: 로깅용 작업 이름

        Returns:
            ParallelExecutionResult[T] (results는 targets 순서)
        """
        if not targets:
            logger.warning(f"실행할 대상이 없습니다 [{label}]")
            return ParallelExecutionResult()

        workers = min(self.config.max_workers, len(targets))
        logger.debug(f"팬아웃 시작 [{label}]: {len(targets)}개 대상, max_workers={workers}")
        start_time = time.monotonic()

        results: list[TaskResult[T] | None] = [None] * len(targets)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout")
        try:
            futures = {
                executor.submit(self._execute_with_retry, func, target, start_time): index
                for index, target in enumerate(targets)
            }
            done, not_done = wait(futures, timeout=self.config.timeout, return_when=ALL_COMPLETED)

            for future in done:
                index = futures[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.error(f"분기 실행 중 예외 [{targets[index]}]: {e}")
                    _clear_exception_chain(e)
                    results[index] = self._failure(targets[index], e, 0, start_time)

            for future in not_done:
                future.cancel()
                index = futures[future]
                target = targets[index]
                logger.warning(f"분기 시간 초과 [{label}] {target}: {self.config.timeout}초")
                results[index] = TaskResult(
                    identifier=target.identifier,
                    region=target.region,
                    success=False,
                    error=TaskError(
                        identifier=target.identifier,
                        region=target.region,
                        category=ErrorCategory.TIMEOUT,
                        error_code="FanoutTimeout",
                        message=f"{self.config.timeout:.0f}초 내에 완료되지 않음",
                    ),
                    duration_ms=(time.monotonic() - start_time) * 1000,
                )
        finally:
            # 시간 초과된 분기를 기다리지 않음
            executor.shutdown(wait=False, cancel_futures=True)

        exec_result = ParallelExecutionResult(results=tuple(r for r in results if r is not None))
        total_time = (time.monotonic() - start_time) * 1000
        logger.debug(
            f"팬아웃 완료 [{label}]: 성공 {exec_result.success_count}, 실패 {exec_result.error_count}, 총 {total_time:.0f}ms"
        )
        return exec_result

    def _execute_with_retry(
        self,
        func: Callable[[FanoutTarget], T],
        target: FanoutTarget,
        start_time: float,
    ) -> TaskResult[T]:
        """지수 백오프 재시도를 포함한 단일 분기 실행

        재시도 불가능한 에러는 즉시 실패 결과로 반환합니다.
        """
        for attempt in range(self._retry_config.max_retries + 1):
            try:
                data = func(target)
                return TaskResult(
                    identifier=target.identifier,
                    region=target.region,
                    success=True,
                    data=data,
                    duration_ms=(time.monotonic() - start_time) * 1000,
                )
            except Exception as e:
                if not is_retryable(e) or attempt >= self._retry_config.max_retries:
                    _clear_exception_chain(e)
                    return self._failure(target, e, attempt, start_time)

                delay = self._retry_config.get_delay(attempt)
                logger.debug(f"[{target}] 시도 {attempt + 1} 실패, {delay:.2f}초 후 재시도...")
                time.sleep(delay)

        raise RuntimeError("unreachable")

    @staticmethod
    def _failure(target: FanoutTarget, error: Exception, retries: int, start_time: float) -> TaskResult:
        return TaskResult(
            identifier=target.identifier,
            region=target.region,
            success=False,
            error=TaskError(
                identifier=target.identifier,
                region=target.region,
                category=categorize_error(error),
                error_code=get_error_code(error),
                message=str(error),
                retries=retries,
                original_exception=error,
            ),
            duration_ms=(time.monotonic() - start_time) * 1000,
        )
