"""
cli/tui/runtime.py - 메시지 루프

단일 스레드 협력형 루프입니다.

    키 입력 스레드 ─┐
    Cmd 워커 풀 ────┼─> 메시지 큐 ─> NavigatorApp.update() ─> Cmd 목록 ─> 워커 풀
    타이머 ────────┘                        │
                                             └─> rich Live 렌더링

메시지는 도착 순서대로 하나씩 끝까지 처리되고, 상태 변경은 이 루프 스레드에서만 일어납니다.
Cmd 안에서 발생한 예외는 ErrorMsg 로 바뀌어 다시 큐로 들어갑니다.
터미널 크기 변경은 큐 대기 시간마다 console.size 를 비교해 ResizeMsg 로 만듭니다.
"""

from __future__ import annotations

import logging
import queue
import select
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from prompt_toolkit.input import Input, create_input
from rich.console import Console
from rich.live import Live

from .app import NavigatorApp
from .cmd import Cmd, Tick
from .keys import normalize_key
from .messages import ErrorMsg, KeyMsg, ResizeMsg

logger = logging.getLogger(__name__)

# 큐 대기 시간 (크기 변경 확인 주기)
POLL_INTERVAL = 0.2
# 단독 esc 판정 대기 시간
KEY_TIMEOUT = 0.05


class Runtime:
    """NavigatorApp 실행기

    Args:
        app: 내비게이션 컨트롤러
        console: 출력 콘솔
        max_workers: Cmd 워커 수
    """

    def __init__(self, app: NavigatorApp, console: Console, max_workers: int = 16):
        self.app = app
        self.console = console
        self.queue: queue.Queue[Any] = queue.Queue()
        self.pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cmd")
        self._stop = threading.Event()

    def send(self, msg: Any) -> None:
        self.queue.put(msg)

    # =========================================================================
    # Cmd 실행
    # =========================================================================

    def run_cmds(self, cmds: list[Cmd]) -> None:
        for cmd in cmds:
            if isinstance(cmd, Tick):
                timer = threading.Timer(cmd.seconds, self.send, (cmd.msg,))
                timer.daemon = True
                timer.start()
            else:
                self.pool.submit(self._run_cmd, cmd)

    def _run_cmd(self, cmd: Cmd) -> None:
        try:
            msg = cmd()
        except Exception as e:
            logger.warning(f"Cmd 실행 실패: {e}", exc_info=True)
            msg = ErrorMsg(e)
        if msg is not None and not self._stop.is_set():
            self.send(msg)

    def dispatch(self, msg: Any) -> None:
        self.run_cmds(self.app.update(msg))

    # =========================================================================
    # 키 입력
    # =========================================================================

    def _read_keys(self, key_input: Input) -> None:
        fileno = key_input.fileno()
        while not self._stop.is_set():
            try:
                readable, _, _ = select.select([fileno], [], [], KEY_TIMEOUT)
            except (OSError, ValueError):
                # 입력이 닫힘
                return
            presses = key_input.read_keys() if readable else key_input.flush_keys()
            for press in presses:
                key = normalize_key(press.key, press.data)
                if key:
                    self.send(KeyMsg(key))

    # =========================================================================
    # 루프
    # =========================================================================

    def run(self) -> None:
        """종료 요청까지 루프 실행 (터미널은 항상 복원)"""
        key_input = create_input()
        size = self.console.size
        try:
            with key_input.raw_mode(), Live(console=self.console, screen=True, auto_refresh=False) as live:
                reader = threading.Thread(target=self._read_keys, args=(key_input,), name="key-reader", daemon=True)
                reader.start()

                self.run_cmds(self.app.init())
                self.dispatch(ResizeMsg(size.width, size.height))
                live.update(self.app.render(), refresh=True)

                while not self.app.quitting:
                    try:
                        msg = self.queue.get(timeout=POLL_INTERVAL)
                    except queue.Empty:
                        msg = None

                    current = self.console.size
                    if current != size:
                        size = current
                        self.dispatch(ResizeMsg(size.width, size.height))
                    if msg is not None:
                        self.dispatch(msg)
                    live.update(self.app.render(), refresh=True)
        finally:
            self._stop.set()
            self.pool.shutdown(wait=False, cancel_futures=True)
            self.app.close()
            logger.info("내비게이터 종료")
