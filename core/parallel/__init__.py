"""
core/parallel - 팬아웃 처리 모듈

하나의 작업을 여러 리전/프로파일에 동시에 실행하고 대상 순서대로 병합합니다.

주요 구성 요소:
- FanoutExecutor: 동시 실행 수/시간 제한/재시도가 있는 팬아웃 실행기
- build_targets: 리전 x 프로파일 대상 목록
- get_client: 재시도가 설정된 boto3 client

Example:
    from core.parallel import FanoutExecutor, ParallelConfig, build_targets

    targets = build_targets(ctx.get_regions(), ctx.get_selections())
    result = FanoutExecutor(ParallelConfig(max_workers=50)).execute(collect, targets)

    if result.has_any_failure():
        print(result.get_error_summary())
"""

from .client import get_client
from .decorators import DEFAULT_RETRY_CONFIG, NO_RETRY, RetryConfig, with_retry
from .executor import FanoutExecutor, FanoutTarget, ParallelConfig, build_targets
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "FanoutExecutor",
    "FanoutTarget",
    "ParallelConfig",
    "build_targets",
    # Client
    "get_client",
    # Retry
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "NO_RETRY",
    "with_retry",
    # Types
    "ErrorCategory",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
