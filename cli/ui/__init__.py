# cli/ui - 콘솔 출력과 로깅 (rich)
"""
콘솔 출력 모듈

TUI 밖에서 쓰는 콘솔 출력과 로깅 핸들러 구성
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    get_console,
    print_error,
    print_success,
    print_warning,
    setup_logging,
)

__all__: list[str] = [
    "console",
    "get_console",
    "setup_logging",
    # 표준 출력 심볼
    "SYMBOL_SUCCESS",
    "SYMBOL_ERROR",
    "SYMBOL_WARNING",
    # 메시지 출력
    "print_success",
    "print_error",
    "print_warning",
]
