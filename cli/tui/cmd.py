"""
cli/tui/cmd.py - 후속 작업(Cmd)

메시지 핸들러는 상태를 직접 바꾸는 대신 0개 이상의 Cmd 를 반환합니다.
Cmd 는 인자 없는 호출 가능 객체로, 런타임의 워커 스레드에서 실행되어
메시지 하나(또는 None)를 반환하고 그 메시지는 다시 큐로 들어갑니다.

Cmd 안에서 발생한 예외는 런타임이 ErrorMsg 로 변환합니다.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

Cmd = Callable[[], Any]


def emit(msg: Any) -> Cmd:
    """즉시 메시지를 반환하는 Cmd"""

    def _emit():
        return msg

    return _emit


class Tick:
    """seconds 후 메시지를 반환하는 Cmd (타이머)

    런타임은 워커를 점유하지 않도록 데몬 타이머로 실행하며,
    직접 호출하면 sleep 후 메시지를 반환합니다.
    """

    def __init__(self, seconds: float, msg: Any):
        self.seconds = seconds
        self.msg = msg

    def __call__(self) -> Any:
        time.sleep(self.seconds)
        return self.msg

    def __repr__(self) -> str:
        return f"Tick({self.seconds}, {type(self.msg).__name__})"


def tick(seconds: float, msg: Any) -> Tick:
    return Tick(seconds, msg)
