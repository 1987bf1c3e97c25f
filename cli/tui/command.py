"""
cli/tui/command.py - 명령 모드(:) 입력과 해석

명령 한 줄을 아래 중 하나로 해석합니다.

    ""/home/dashboard       -> HOME (대시보드, 스택 초기화)
    services/browse         -> SERVICES (서비스 목록, 스택 초기화)
    q/quit                  -> QUIT
    filter <text>           -> FILTER (현재 목록 텍스트 필터, 인자 없으면 해제)
    tag <k=v|k~v|k>         -> TAG_FILTER (인자 없으면 해제)
    tags [k=v|k]            -> TAG_SEARCH (서비스와 관계없이 태그로 리소스 검색)
    sort [asc|desc] <col>   -> SORT (인자 없으면 해제)
    diff a [b]              -> DIFF
    service[/resource[/id]] -> NAVIGATE (별칭, 기본 리소스, 접두사 일치 적용)

Example:
    command = parse_command("sg", registry)
    # Command(kind=NAVIGATE, service="ec2", resource_type="security-groups")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from core.exceptions import NotRegisteredError, ValidationError
from core.resources.tagging import TAG_SEARCH_RESOURCE, TAG_SEARCH_SERVICE

from .view import DiffProvider, TagProvider, TextInput

if TYPE_CHECKING:
    from core.registry import Registry

logger = logging.getLogger(__name__)

BUILTIN_COMMANDS = ("dashboard", "diff", "filter", "home", "quit", "services", "sort", "tag", "tags")

# 제안 목록에 한 번에 보여줄 개수
MAX_SHOWN_SUGGESTIONS = 5


class CommandKind(Enum):
    NAVIGATE = "navigate"
    FILTER = "filter"
    TAG_FILTER = "tag"
    TAG_SEARCH = "tags"
    SORT = "sort"
    DIFF = "diff"
    HOME = "home"
    SERVICES = "services"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    """해석된 명령

    Attributes:
        kind: 명령 종류
        service / resource_type / resource_id: NAVIGATE 대상
        text: FILTER / TAG_FILTER / TAG_SEARCH 인자, SORT 컬럼
        ascending: SORT 방향
        left / right: DIFF 대상 이름
    """

    kind: CommandKind
    service: str = ""
    resource_type: str = ""
    resource_id: str = ""
    text: str = ""
    ascending: bool = True
    left: str = ""
    right: str = ""


def _argument(line: str, name: str) -> str | None:
    """ "name" 또는 "name <args>" 이면 인자 문자열, 아니면 None"""
    if line == name:
        return ""
    if line.startswith(name + " "):
        return line[len(name) + 1 :].strip()
    return None


def parse_command(line: str, registry: Registry) -> Command:
    """명령 한 줄 해석

    Raises:
        ValidationError: diff 인자가 없는 경우
        NotRegisteredError: 서비스/리소스를 찾을 수 없는 경우 (tags 는 태그 검색 리소스 미등록)
    """
    line = line.strip()

    if line in ("", "home", "dashboard"):
        return Command(CommandKind.HOME)
    if line in ("q", "quit"):
        return Command(CommandKind.QUIT)
    if line in ("services", "browse"):
        return Command(CommandKind.SERVICES)

    arg = _argument(line, "filter")
    if arg is not None:
        return Command(CommandKind.FILTER, text=arg)

    arg = _argument(line, "tags")
    if arg is not None:
        if not registry.has_resource(TAG_SEARCH_SERVICE, TAG_SEARCH_RESOURCE):
            raise NotRegisteredError(TAG_SEARCH_SERVICE, TAG_SEARCH_RESOURCE)
        return Command(
            CommandKind.TAG_SEARCH, service=TAG_SEARCH_SERVICE, resource_type=TAG_SEARCH_RESOURCE, text=arg
        )

    arg = _argument(line, "tag")
    if arg is not None:
        return Command(CommandKind.TAG_FILTER, text=arg)

    arg = _argument(line, "sort")
    if arg is not None:
        ascending = True
        column = arg
        if arg.startswith("desc "):
            ascending = False
            column = arg[5:]
        elif arg.startswith("asc "):
            column = arg[4:]
        return Command(CommandKind.SORT, text=column.strip(), ascending=ascending)

    arg = _argument(line, "diff")
    if arg is not None:
        parts = arg.split()
        if not parts:
            raise ValidationError("diff", arg, "diff <name> [name]")
        if len(parts) == 1:
            return Command(CommandKind.DIFF, right=parts[0])
        return Command(CommandKind.DIFF, left=parts[0], right=parts[1])

    return _parse_navigate(line, registry)


def _parse_navigate(line: str, registry: Registry) -> Command:
    parts = line.split("/", 2)
    service = parts[0]
    resource_type = parts[1] if len(parts) > 1 else ""
    resource_id = parts[2] if len(parts) > 2 else ""

    alias_service, alias_resource, found = registry.resolve_alias(service)
    if found:
        service = alias_service
        if alias_resource and not resource_type:
            resource_type = alias_resource

    if not resource_type:
        resource_type = registry.default_resource(service)

    if not registry.has_resource(service, resource_type):
        # 접두사 일치 (예: "cloudf" -> "cloudformation", "ec2/sec" -> "ec2/security-groups")
        for candidate in registry.list_services():
            if not candidate.startswith(service):
                continue
            service = candidate
            if not resource_type or not registry.has_resource(service, resource_type):
                prefix = parts[1] if len(parts) > 1 else ""
                matches = [r for r in registry.list_resources(service) if prefix and r.startswith(prefix)]
                resource_type = matches[0] if matches else registry.default_resource(service)
            break

    if not registry.has_resource(service, resource_type):
        raise NotRegisteredError(service, resource_type)
    return Command(CommandKind.NAVIGATE, service=service, resource_type=resource_type, resource_id=resource_id)


# =============================================================================
# 명령 입력
# =============================================================================


class CommandInput:
    """명령 모드 입력 상태

    tab / shift+tab 으로 제안 목록을 순환합니다.
    태그/비교 제안은 현재 뷰가 제공자(TagProvider / DiffProvider)일 때만 나옵니다.
    """

    def __init__(self, registry: Registry):
        self.registry = registry
        self.input = TextInput(prompt=":", limit=80)
        self.suggestions: list[str] = []
        # 현재 입력창에 채워진 제안 위치 (-1: 없음)
        self.index = -1
        self.tag_provider: TagProvider | None = None
        self.diff_provider: DiffProvider | None = None
        self.width = 80

    @property
    def active(self) -> bool:
        return self.input.active

    @property
    def value(self) -> str:
        return self.input.value

    def activate(self, tag_provider: TagProvider | None = None, diff_provider: DiffProvider | None = None) -> None:
        self.input.clear()
        self.input.focus()
        self.suggestions = []
        self.index = -1
        self.tag_provider = tag_provider
        self.diff_provider = diff_provider

    def resize(self, width: int) -> None:
        self.width = width

    def deactivate(self) -> None:
        self.input.blur()
        self.suggestions = []

    def handle_key(self, key: str) -> None:
        """편집/제안 키 처리 (enter / esc 는 호출자가 처리)"""
        if key in ("tab", "shift+tab"):
            if not self.suggestions:
                self.suggestions = self.get_suggestions()
                self.index = -1
            if not self.suggestions:
                return
            if key == "tab":
                self.index = (self.index + 1) % len(self.suggestions)
            else:
                self.index = (self.index - 1) % len(self.suggestions) if self.index >= 0 else len(self.suggestions) - 1
            self.input.value = self.suggestions[self.index]
            return
        if self.input.handle_key(key):
            self.suggestions = self.get_suggestions()
            self.index = -1

    def get_suggestions(self) -> list[str]:
        text = self.input.value

        if text.startswith("tag "):
            return self._tag_suggestions("tag", text[4:], ("=", "~"))
        if text.startswith("tags "):
            return self._tag_suggestions("tags", text[5:], ("=",))
        if text.startswith("diff "):
            return self._diff_suggestions(text[5:])

        if "/" in text:
            service, _, prefix = text.partition("/")
            alias_service, _, found = self.registry.resolve_alias(service)
            target = alias_service if found else service
            return [f"{service}/{r}" for r in self.registry.list_resources(target) if r.startswith(prefix)]

        suggestions = [c for c in BUILTIN_COMMANDS if c.startswith(text)]
        if self.diff_provider is None and "diff" in suggestions:
            suggestions.remove("diff")
        suggestions += [s for s in self.registry.list_services() if s.startswith(text)]
        suggestions += [a for a in self.registry.aliases() if a.startswith(text)]
        return sorted(set(suggestions))

    def _tag_suggestions(self, command: str, part: str, separators: tuple[str, ...]) -> list[str]:
        if self.tag_provider is None:
            return []
        for sep in separators:
            if sep in part:
                key, _, value_prefix = part.partition(sep)
                return [
                    f"{command} {key}{sep}{v}"
                    for v in self.tag_provider.tag_values(key)
                    if v.lower().startswith(value_prefix.lower())
                ]
        return [f"{command} {k}" for k in self.tag_provider.tag_keys() if k.lower().startswith(part.lower())]

    def _diff_suggestions(self, part: str) -> list[str]:
        if self.diff_provider is None:
            return []
        names = self.diff_provider.resource_names()
        first, sep, second = part.partition(" ")
        if sep:
            return [f"diff {first} {n}" for n in names if n != first and n.lower().startswith(second.lower())]
        return [f"diff {n}" for n in names if n.lower().startswith(first.lower())]

    def render_suggestions(self) -> str:
        if not self.suggestions or not self.input.value:
            return ""
        shown = self.suggestions[:MAX_SHOWN_SUGGESTIONS]
        text = " | ".join(shown)
        if len(self.suggestions) > MAX_SHOWN_SUGGESTIONS:
            text += " ..."
        rendered = f" → {text}"
        room = max(0, self.width - len(self.input.render()) - 1)
        return rendered if len(rendered) <= room else rendered[: max(0, room - 1)] + "…"
