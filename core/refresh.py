"""
core/refresh.py - 비동기 갱신 조정자

컨텍스트 초기화, 프로파일/리전 변경 후 재조회 같은 백그라운드 작업의
결과 중 오래된(최신 요청이 아닌) 결과를 걸러냅니다.

동작:
    1. dispatch() 가 공유 카운터를 증가시키고 그 값을 해당 종류의 "현재 ID"로 기록
    2. 작업은 요청 ID를 캡처한 채 시간 제한 내에서 실행되어 RefreshDoneMsg 를 만듦
    3. 메시지 루프가 accept() 로 ID를 비교: 불일치면 폐기(디버그 로그), 일치면 반영

시간 초과는 RefreshTimeoutError 를 담은 일반 실패 결과가 되며,
이후 늦게 끝난 원래 작업의 결과는 무시됩니다.

Example:
    coordinator = RefreshCoordinator(timeout=5.0)
    cmd = coordinator.dispatch(RefreshKind.CONTEXT_INIT, lambda: init_context(app))
    ...
    msg = cmd()  # 워커 스레드에서 실행
    if coordinator.accept(msg):
        apply(msg.result)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.config import settings
from core.exceptions import RefreshTimeoutError, StaleRefreshDiscarded

logger = logging.getLogger(__name__)


class RefreshKind(Enum):
    """갱신 작업 종류 (종류별로 최신 요청 하나만 유효)"""

    CONTEXT_INIT = "context_init"
    PROFILE_REFRESH = "profile_refresh"


@dataclass(frozen=True)
class RefreshDoneMsg:
    """갱신 작업 완료 메시지

    Attributes:
        kind: 작업 종류
        request_id: dispatch 시점에 캡처한 요청 ID
        result: 작업 반환값 (실패 시 None)
        error: 실패 원인
    """

    kind: RefreshKind
    request_id: int
    result: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RefreshCoordinator:
    """종류별 최신 요청 ID 관리

    요청 ID는 모든 종류가 공유하는 단조 증가 카운터에서 발급합니다.
    작업마다 데몬 스레드를 따로 띄우므로, 시간 초과 후에도 멈춰 있는 작업이
    이후 요청의 실행을 막지 않습니다.
    """

    def __init__(self, timeout: float = settings.AWS_INIT_TIMEOUT):
        self.timeout = timeout
        self._lock = threading.Lock()
        self._counter = 0
        self._current: dict[RefreshKind, int] = {}
        self._pending: set[RefreshKind] = set()
        self._closed = False

    def next_id(self, kind: RefreshKind) -> int:
        """새 요청 ID 발급 및 현재 ID로 기록"""
        with self._lock:
            self._counter += 1
            self._current[kind] = self._counter
            self._pending.add(kind)
            return self._counter

    def current_id(self, kind: RefreshKind) -> int:
        with self._lock:
            return self._current.get(kind, 0)

    def is_refreshing(self, kind: RefreshKind) -> bool:
        with self._lock:
            return kind in self._pending

    def dispatch(
        self,
        kind: RefreshKind,
        operation: Callable[[], Any],
        timeout: float | None = None,
    ) -> Callable[[], RefreshDoneMsg]:
        """갱신 작업을 실행하는 Cmd 생성

        요청 ID는 호출 시점(메시지 루프 스레드)에 발급되고,
        반환된 Cmd 는 워커 스레드에서 실행되어 RefreshDoneMsg 를 반환합니다.
        """
        request_id = self.next_id(kind)
        limit = self.timeout if timeout is None else timeout
        logger.debug(f"갱신 요청 [{kind.value}] #{request_id}")

        def _run() -> RefreshDoneMsg:
            outcome: dict[str, Any] = {}

            def _target() -> None:
                try:
                    outcome["result"] = operation()
                except Exception as e:
                    outcome["error"] = e

            worker = threading.Thread(target=_target, name=f"refresh-{kind.value}-{request_id}", daemon=True)
            worker.start()
            worker.join(limit)

            if worker.is_alive():
                # 원래 작업은 계속 실행되지만 결과는 버려짐
                logger.warning(f"갱신 시간 초과 [{kind.value}] #{request_id}: {limit}초")
                return RefreshDoneMsg(kind, request_id, error=RefreshTimeoutError(kind.value, limit))
            if "error" in outcome:
                logger.warning(f"갱신 실패 [{kind.value}] #{request_id}: {outcome['error']}")
                return RefreshDoneMsg(kind, request_id, error=outcome["error"])
            return RefreshDoneMsg(kind, request_id, result=outcome.get("result"))

        return _run

    def accept(self, msg: RefreshDoneMsg) -> bool:
        """완료 메시지가 최신 요청의 결과인지 확인

        최신이면 진행 중 표시를 해제하고 True, 오래된 결과나 close() 이후 도착한
        결과면 로그만 남기고 False.
        """
        with self._lock:
            if self._closed:
                logger.debug(f"종료 후 도착한 갱신 결과 무시 [{msg.kind.value}] #{msg.request_id}")
                return False
            current = self._current.get(msg.kind, 0)
            if msg.request_id != current:
                stale = StaleRefreshDiscarded(msg.kind.value, msg.request_id, current)
                logger.debug(str(stale))
                return False
            self._pending.discard(msg.kind)
            return True

    def close(self) -> None:
        """이후 도착하는 결과를 모두 무시"""
        with self._lock:
            self._closed = True
            self._pending.clear()
