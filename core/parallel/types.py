"""
core/parallel/types.py - 팬아웃 실행 결과 타입

주요 구성 요소:
- ErrorCategory: 에러 분류
- TaskError: 대상별 실패 정보
- TaskResult: 대상별 실행 결과
- ParallelExecutionResult: 전체 실행 결과 (대상 순서 유지)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """에러 분류"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


_RETRYABLE_CATEGORIES = {ErrorCategory.THROTTLING, ErrorCategory.NETWORK, ErrorCategory.TIMEOUT}


@dataclass
class TaskError:
    """대상별 실패 정보

    Attributes:
        identifier: 프로파일 ID
        region: 리전
        category: 에러 분류
        error_code: 에러 코드
        message: 에러 메시지
        retries: 재시도 횟수
        original_exception: 원본 예외
    """

    identifier: str
    region: str
    category: ErrorCategory
    error_code: str
    message: str
    retries: int = 0
    original_exception: Exception | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def is_retryable(self) -> bool:
        return self.category in _RETRYABLE_CATEGORIES

    def __str__(self) -> str:
        return f"[{self.identifier}/{self.region}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """대상별 실행 결과"""

    identifier: str
    region: str
    success: bool
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0

    def __str__(self) -> str:
        status = "OK" if self.success else "FAIL"
        return f"[{self.identifier}/{self.region}] {status} ({self.duration_ms:.0f}ms)"


@dataclass
class ParallelExecutionResult(Generic[T]):
    """전체 실행 결과

    results 는 대상 목록 순서를 따릅니다 (완료 순서가 아님).
    """

    results: tuple[TaskResult[T], ...] | list[TaskResult[T]] = field(default_factory=tuple)

    @property
    def successful(self) -> list[TaskResult[T]]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[TaskResult[T]]:
        return [r for r in self.results if not r.success]

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def error_count(self) -> int:
        return len(self.failed)

    def has_any_success(self) -> bool:
        return self.success_count > 0

    def has_any_failure(self) -> bool:
        return self.error_count > 0

    def has_failures_only(self) -> bool:
        return self.total_count > 0 and self.success_count == 0

    def get_data(self) -> list[T]:
        return [r.data for r in self.successful if r.data is not None]

    def get_flat_data(self) -> list[Any]:
        flat: list[Any] = []
        for data in self.get_data():
            if isinstance(data, list):
                flat.extend(data)
            else:
                flat.append(data)
        return flat

    def get_errors(self) -> list[TaskError]:
        return [r.error for r in self.failed if r.error is not None]

    def get_errors_by_category(self) -> dict[ErrorCategory, list[TaskError]]:
        grouped: dict[ErrorCategory, list[TaskError]] = {}
        for error in self.get_errors():
            grouped.setdefault(error.category, []).append(error)
        return grouped

    def get_error_summary(self) -> str:
        errors = self.get_errors()
        if not errors:
            return ""
        lines = [f"총 {len(errors)}개 작업 실패"]
        for category, items in self.get_errors_by_category().items():
            targets = ", ".join(f"{e.identifier}/{e.region}" for e in items)
            lines.append(f"  [{category.value}] {len(items)}개: {targets}")
        return "\n".join(lines)
