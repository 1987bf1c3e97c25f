"""
cli/tui/views/warnings.py - 시작 경고 화면

시작 중 발생한 치명적이지 않은 문제(설정 오류, 자격 증명 경고 등)를 모아 한 번 보여줍니다.
첫 화면 크기 이벤트를 받기 전에는 닫기 안내 대신 대기 안내를 표시합니다.
"""

from __future__ import annotations

from rich.align import Align
from rich.panel import Panel
from rich.text import Text

from cli.i18n import t


def render_warnings(warnings: list[str], ready: bool, width: int = 80) -> Align:
    body = Text()
    for warning in warnings:
        body.append("• ", style="yellow")
        body.append(f"{warning}\n")
    body.append("\n")
    body.append(t("tui.warnings_dismiss") if ready else t("tui.warnings_wait"), style="dim")
    panel = Panel(
        body,
        title=t("tui.warnings_title", count=len(warnings)),
        border_style="yellow",
        width=min(width, 100),
    )
    return Align.center(panel, vertical="middle")
