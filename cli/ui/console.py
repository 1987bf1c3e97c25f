"""
cli/ui/console.py - Rich 콘솔과 로깅 설정

일관된 콘솔 출력과, TUI 실행 여부에 따른 로깅 핸들러 구성을 담당합니다.

TUI 가 터미널을 점유하는 동안에는 로그가 화면을 깨뜨리지 않도록
--log-file 이 주어진 경우에만 파일로 기록하고, 아니면 NullHandler 로 버립니다.
TUI 밖(인자 검증 오류 등)에서는 RichHandler 로 콘솔에 출력합니다.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from core.config import LogConfig

# botocore 노이즈 로그 제한
_NOISY_LOGGERS = (
    "botocore",
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "boto3",
    "urllib3",
)
for _name in _NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=False,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()


def setup_logging(log_file: str | Path | None = None, tui: bool = True, config: LogConfig | None = None) -> None:
    """루트 로거 핸들러 구성

    Args:
        log_file: 로그 파일 경로 (TUI 실행 중 유일한 로그 출력처)
        tui: TUI 실행 여부
        config: 로그 레벨/포맷 (None이면 환경변수에서 로드)
    """
    config = config or LogConfig.from_env()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))
    elif tui:
        handler = logging.NullHandler()
    else:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level, logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

# 상태 심볼
SYMBOL_SUCCESS = "✓"  # 완료
SYMBOL_ERROR = "✗"  # 에러
SYMBOL_WARNING = "!"  # 경고


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")
