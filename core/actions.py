"""
core/actions.py - 리소스 작업 (액션 메뉴)

DAO가 선언한 리소스별 작업(시작/중지, 드리프트 감지 등)과 삭제를
같은 경로로 실행합니다.

주요 구성 요소:
- ConfirmLevel: 실행 전 확인 수준 (없음 / y,n 확인 / 식별자 입력)
- Action: 작업 정의 (이름, 단축키, 작업명, 확인 수준, 읽기 전용 허용 여부)
- available_actions(): 리소스에 표시할 작업 목록 (읽기 전용 모드면 허용 작업만)
- execute_action(): 읽기 전용/지원 여부를 다시 확인한 뒤 실행

Example:
    actions = available_actions(dao, resource, read_only=app.read_only)
    execute_action(dao, actions[0], resource, read_only=app.read_only)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from core.dao.types import DAO, Operation, Resource, unwrap_resource
from core.exceptions import ReadOnlyError, UnsupportedOperationError

logger = logging.getLogger(__name__)

# 식별자 입력 확인에 필요한 최소 글자 수 (긴 식별자는 끝 글자만 입력)
MIN_CONFIRM_CHARS = 6


class ConfirmLevel(Enum):
    """실행 전 확인 수준"""

    NONE = 0
    SIMPLE = 1
    DANGEROUS = 2


@dataclass(frozen=True)
class Action:
    """리소스 작업 정의

    Attributes:
        name: 메뉴 표시 이름
        shortcut: 메뉴 안의 단축키
        operation: 작업명 (DAO.run_action 에 전달, 삭제는 Operation.DELETE.value)
        confirm: 확인 수준
        read_only: 읽기 전용 모드에서도 허용되는 작업인지 여부
        when: 리소스별 표시 조건 (None 이면 항상 표시)
        confirm_token: DANGEROUS 확인에 입력할 문자열 (None 이면 리소스 ID)
    """

    name: str
    shortcut: str
    operation: str
    confirm: ConfirmLevel = ConfirmLevel.NONE
    read_only: bool = False
    when: Callable[[Resource], bool] | None = None
    confirm_token: Callable[[Resource], str] | None = None

    def applies_to(self, resource: Resource) -> bool:
        return self.when is None or self.when(unwrap_resource(resource))

    def token_for(self, resource: Resource) -> str:
        original = unwrap_resource(resource)
        if self.confirm_token is not None:
            return self.confirm_token(original)
        return original.get_id()


DELETE_ACTION = Action("Delete", "D", Operation.DELETE.value, ConfirmLevel.DANGEROUS)


def confirm_suffix(token: str) -> str:
    """확인을 위해 입력해야 하는 문자열

    빈 토큰은 "CONFIRM", MIN_CONFIRM_CHARS 이하면 전체, 더 길면 끝 MIN_CONFIRM_CHARS 글자.
    """
    if not token:
        return "CONFIRM"
    if len(token) <= MIN_CONFIRM_CHARS:
        return token
    return token[-MIN_CONFIRM_CHARS:]


def confirm_matches(token: str, text: str) -> bool:
    return text == confirm_suffix(token)


def available_actions(dao: DAO, resource: Resource, read_only: bool = False) -> list[Action]:
    """리소스에 표시할 작업 목록

    DAO가 선언한 작업 뒤에, 삭제를 지원하면 DELETE_ACTION 을 붙입니다.
    읽기 전용 모드에서는 read_only 로 표시된 작업만 남습니다.
    """
    actions = [action for action in dao.actions() if action.applies_to(resource)]
    if dao.supports(Operation.DELETE) and not any(a.operation == DELETE_ACTION.operation for a in actions):
        actions.append(DELETE_ACTION)
    if read_only:
        actions = [action for action in actions if action.read_only]
    return actions


def execute_action(dao: DAO, action: Action, resource: Resource, read_only: bool = False) -> None:
    """작업 실행

    메뉴가 이미 걸러낸 작업이라도 읽기 전용/지원 여부를 다시 확인합니다.
    변경 작업은 재시도하지 않습니다.

    Raises:
        ReadOnlyError: 읽기 전용 모드에서 허용되지 않는 작업
        UnsupportedOperationError: DAO가 지원하지 않는 작업
    """
    label = f"{dao.service_name}/{dao.resource_type}"
    if read_only and not action.read_only:
        logger.info(f"읽기 전용 모드에서 작업 차단 [{label}]: {action.name}")
        raise ReadOnlyError(dao.service_name, dao.resource_type, action.operation)

    resource_id = resource.get_id()
    logger.info(f"작업 실행 [{label}] {action.name}: {resource_id}")
    if action.operation == Operation.DELETE.value:
        if not dao.supports(Operation.DELETE):
            raise UnsupportedOperationError(dao.service_name, dao.resource_type, action.operation)
        dao.delete(resource_id)
        return
    dao.run_action(action.operation, resource_id)
