"""
cli/tui/view.py - 뷰 계약과 공용 위젯

모든 화면(서비스 목록, 리소스 목록, 상세, 비교, 로그, 대시보드, 선택, 도움말)은
View 를 구현하고, 필요에 따라 Refreshable / InputCapture 프로토콜을 추가로 구현합니다.

뷰는 내비게이션 컨트롤러가 단독으로 소유합니다(현재 뷰, 뒤로 가기 스택, 모달 스택).
뷰가 다른 화면으로 이동하려면 NavigateMsg 를 반환하는 Cmd 를 돌려줍니다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from rich.console import RenderableType

from .cmd import Cmd
from .keys import is_printable, key_text
from .messages import ViewResultMsg

if TYPE_CHECKING:
    from core.config import NavConfig
    from core.context import AppContext
    from core.registry import Registry


@dataclass
class TUIContext:
    """뷰가 공유하는 의존성

    Attributes:
        app: 선택 상태 (리전/프로파일/계정 ID)
        registry: 리소스 레지스트리
        config: 설정
    """

    app: AppContext
    registry: Registry
    config: NavConfig


class View(ABC):
    """화면 계약"""

    width: int = 80
    height: int = 24

    @abstractmethod
    def init(self) -> list[Cmd]:
        """표시될 때마다 호출 (뒤로 가기로 돌아올 때 포함)"""

    @abstractmethod
    def update(self, msg: Any) -> list[Cmd]:
        """키 입력과 뷰 결과 처리"""

    @abstractmethod
    def render(self) -> RenderableType: ...

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def status_line(self) -> str:
        return ""

    def on_back(self) -> bool:
        """뒤로 가기 전에 뷰가 먼저 해제할 상태가 있으면 처리하고 True"""
        return False

    def quits_to_back(self) -> bool:
        """q 가 종료 대신 뒤로 가기인 말단 화면이면 True"""
        return False

    @property
    def title(self) -> str:
        return type(self).__name__

    def result(self, fn: Callable[[], Any]) -> Cmd:
        """fn 결과를 이 뷰로 돌아오는 ViewResultMsg 로 감싼 Cmd"""

        def _run():
            return ViewResultMsg(self, fn())

        return _run


@runtime_checkable
class Refreshable(Protocol):
    def can_refresh(self) -> bool: ...

    def refresh(self) -> list[Cmd]: ...


@runtime_checkable
class InputCapture(Protocol):
    def has_active_input(self) -> bool: ...


@runtime_checkable
class TagProvider(Protocol):
    """명령 모드 태그 제안 제공 (tag 키 / 값)"""

    def tag_keys(self) -> list[str]: ...

    def tag_values(self, key: str) -> list[str]: ...


@runtime_checkable
class DiffProvider(Protocol):
    """명령 모드 diff 대상 이름 제공"""

    def resource_names(self) -> list[str]: ...


def captures_input(view: View | None) -> bool:
    return isinstance(view, InputCapture) and view.has_active_input()


@dataclass(eq=False)
class Modal:
    """오버레이 화면

    Attributes:
        content: 모달 내용 뷰
        width: 모달 폭
    """

    content: View
    width: int = 60


# 모달 폭 기본값
MODAL_WIDTH_SELECTOR = 50
MODAL_WIDTH_HELP = 70
MODAL_WIDTH_CONFIRM = 60


# =============================================================================
# 공용 위젯
# =============================================================================


class TextInput:
    """한 줄 텍스트 입력 (커서는 항상 끝)"""

    def __init__(self, prompt: str = "", value: str = "", limit: int = 100):
        self.prompt = prompt
        self.value = value
        self.limit = limit
        self.active = False

    def focus(self) -> None:
        self.active = True

    def blur(self) -> None:
        self.active = False

    def clear(self) -> None:
        self.value = ""

    def handle_key(self, key: str) -> bool:
        """입력 키 처리 (값이 바뀌었으면 True)"""
        if key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                return True
            return False
        if key == "ctrl+u":
            changed = bool(self.value)
            self.value = ""
            return changed
        if is_printable(key) and len(self.value) < self.limit:
            self.value += key_text(key)
            return True
        return False

    def render(self) -> str:
        cursor = "█" if self.active else ""
        return f"{self.prompt}{self.value}{cursor}"


class TableCursor:
    """목록 커서와 스크롤 위치"""

    def __init__(self) -> None:
        self.cursor = 0
        self.offset = 0
        self.visible_rows = 10

    def set(self, index: int, count: int) -> None:
        if count <= 0:
            self.cursor = 0
            self.offset = 0
            return
        self.cursor = max(0, min(index, count - 1))
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.visible_rows:
            self.offset = self.cursor - self.visible_rows + 1

    def move(self, delta: int, count: int) -> None:
        self.set(self.cursor + delta, count)

    def handle_key(self, key: str, count: int) -> bool:
        """이동 키 처리 (처리했으면 True)"""
        half = max(1, self.visible_rows // 2)
        moves = {
            "j": 1,
            "down": 1,
            "k": -1,
            "up": -1,
            "pgdown": half,
            "ctrl+d": half,
            "pgup": -half,
            "ctrl+u": -half,
        }
        if key in moves:
            self.move(moves[key], count)
            return True
        if key in ("g", "home"):
            self.set(0, count)
            return True
        if key in ("G", "end"):
            self.set(count - 1, count)
            return True
        return False

    def window(self, count: int) -> range:
        return range(self.offset, min(count, self.offset + self.visible_rows))
