"""
core/exceptions.py - 통합 예외 계층 구조

내비게이터 전체에서 사용되는 예외 클래스들을 정의합니다.
메시지 루프 밖으로 예외가 새어나가지 않도록, 핸들러는 이 예외들을
ErrorMsg 데이터로 변환하여 상태 표시줄에 보여줍니다.

예외 계층 구조:
    NavError (베이스)
    ├── RegistryError (레지스트리 조회)
    │   └── NotRegisteredError
    ├── AdapterError (DAO 호출)
    │   ├── APICallError
    │   ├── UnsupportedOperationError
    │   └── ReadOnlyError
    ├── FanoutError (멀티 리전/프로파일 팬아웃)
    │   ├── PartialFanoutFailure
    │   └── TotalFanoutFailure
    ├── RefreshError (비동기 갱신)
    │   ├── StaleRefreshDiscarded
    │   └── RefreshTimeoutError
    ├── ConfigError (설정 관련)
    ├── ValidationError (입력 검증)
    └── UnhandledMessageError (알 수 없는 메시지 타입)

Usage:
    from core.exceptions import APICallError, NotRegisteredError

    try:
        entry = registry.resolve("ec2", "instances")
    except NotRegisteredError as e:
        return ErrorMsg(error=e)
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class NavError(Exception):
    """내비게이터 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 레지스트리 관련 예외
# =============================================================================


class RegistryError(NavError):
    """레지스트리 조회 관련 예외"""


class NotRegisteredError(RegistryError):
    """등록되지 않은 (service, resource) 조회

    사용자 입력 오타 등에서 흔히 발생하므로 치명적이지 않은
    상태 표시줄 메시지로만 보여줍니다.
    """

    def __init__(self, service: str, resource_type: str = ""):
        target = f"{service}/{resource_type}" if resource_type else service
        super().__init__(f"등록되지 않은 리소스: {target}")
        self.service = service
        self.resource_type = resource_type
        self.details.update({"service": service, "resource_type": resource_type})


# =============================================================================
# 어댑터(DAO) 호출 관련 예외
# =============================================================================


class AdapterError(NavError):
    """DAO 호출 관련 예외"""

    def __init__(
        self,
        service: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"어댑터 오류 [{service}]: {message}"
        super().__init__(full_message, cause)
        self.service = service
        self.details["service"] = service


class UnsupportedOperationError(AdapterError):
    """DAO가 지원하지 않는 작업 요청"""

    def __init__(self, service: str, resource_type: str, operation: str):
        super().__init__(service, f"{resource_type}에서 {operation} 작업을 지원하지 않습니다")
        self.resource_type = resource_type
        self.operation = operation
        self.details.update({"resource_type": resource_type, "operation": operation})


class ReadOnlyError(AdapterError):
    """읽기 전용 모드에서 변경 작업 요청"""

    def __init__(self, service: str, resource_type: str, operation: str):
        super().__init__(service, f"읽기 전용 모드에서는 {resource_type} {operation} 작업을 할 수 없습니다")
        self.resource_type = resource_type
        self.operation = operation
        self.details.update({"resource_type": resource_type, "operation": operation})


class APICallError(AdapterError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(service=service, message=message, cause=cause)
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update({"operation": operation, "error_code": error_code})

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> APICallError:
        """botocore.exceptions.ClientError로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            client_error: ClientError 예외

        Returns:
            APICallError 인스턴스
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


# =============================================================================
# 팬아웃 관련 예외
# =============================================================================


class FanoutError(NavError):
    """멀티 리전/프로파일 팬아웃 관련 예외

    Attributes:
        failures: "대상 식별자: 에러 메시지" 형식의 실패 목록
    """

    def __init__(self, message: str, failures: list[str] | None = None):
        super().__init__(message)
        self.failures = list(failures or [])
        self.details["failures"] = self.failures


class PartialFanoutFailure(FanoutError):
    """일부 대상만 실패 (부분 결과는 유효)"""

    def __init__(self, failures: list[str], total: int):
        super().__init__(f"{total}개 대상 중 {len(failures)}개 실패", failures)
        self.total = total


class TotalFanoutFailure(FanoutError):
    """모든 대상 실패"""

    def __init__(self, failures: list[str]):
        summary = "; ".join(failures[:3])
        super().__init__(f"모든 대상 조회 실패: {summary}", failures)


# =============================================================================
# 비동기 갱신 관련 예외
# =============================================================================


class RefreshError(NavError):
    """비동기 갱신 관련 예외"""


class StaleRefreshDiscarded(RefreshError):
    """최신 요청이 아닌 갱신 결과

    사용자에게는 보이지 않고 디버그 로그로만 남습니다.
    """

    def __init__(self, kind: str, request_id: int, current_id: int):
        super().__init__(f"오래된 갱신 결과 폐기 [{kind}]: 요청 {request_id}, 현재 {current_id}")
        self.kind = kind
        self.request_id = request_id
        self.current_id = current_id


class RefreshTimeoutError(RefreshError):
    """갱신 작업 시간 초과"""

    def __init__(self, kind: str, timeout: float):
        super().__init__(f"갱신 시간 초과 [{kind}]: {timeout:.0f}초")
        self.kind = kind
        self.timeout = timeout
        self.details.update({"kind": kind, "timeout": timeout})


# =============================================================================
# 설정/입력 관련 예외
# =============================================================================


class ConfigError(NavError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class ValidationError(NavError):
    """입력 검증 오류"""

    def __init__(
        self,
        field: str,
        value: Any,
        expected: str,
        cause: Exception | None = None,
    ):
        message = f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'"
        super().__init__(message, cause)
        self.field = field
        self.value = value
        self.expected = expected
        self.details.update(
            {
                "field": field,
                "value": str(value),
                "expected": expected,
            }
        )


class UnhandledMessageError(NavError):
    """디스패치 테이블에 없는 메시지 타입"""

    def __init__(self, msg: object):
        super().__init__(f"처리되지 않은 메시지 타입: {type(msg).__name__}")
        self.msg_type = type(msg).__name__


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

_ACCESS_DENIED_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedAccess",
    "UnauthorizedOperation",
}

_THROTTLING_CODES = {
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
}

_NOT_FOUND_CODES = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NoSuchEntity",
    "NoSuchBucket",
    "InvalidInstanceID.NotFound",
    "InvalidGroup.NotFound",
    "ValidationError",
}


def _error_code_of(error: Exception) -> str | None:
    if isinstance(error, APICallError):
        return error.error_code
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code", "")
    return None


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        액세스 거부 오류이면 True
    """
    return _error_code_of(error) in _ACCESS_DENIED_CODES


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        스로틀링 오류이면 True
    """
    return _error_code_of(error) in _THROTTLING_CODES


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        리소스 없음 오류이면 True
    """
    if isinstance(error, NotRegisteredError):
        return True
    return _error_code_of(error) in _NOT_FOUND_CODES


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, NavError):
        return str(error)

    # boto3 ClientError
    if hasattr(error, "response"):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
            "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        }

        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
