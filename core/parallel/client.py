"""
core/parallel/client.py - boto3 client 생성 헬퍼

대화형 화면에서 쓰기 좋게 짧은 타임아웃과 adaptive 재시도가 설정된
boto3 client를 생성합니다. 팬아웃 분기 수만큼 연결 풀을 확보합니다.

Example:
    from core.parallel.client import get_client

    ec2 = get_client(session, "ec2", region_name="ap-northeast-2")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_MODE: RetryMode = "adaptive"
DEFAULT_CONNECT_TIMEOUT = 5  # 초
DEFAULT_READ_TIMEOUT = 20  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 50  # concurrency.max_fetches 기본값
USER_AGENT_EXTRA = "awsnav"


def build_client_config(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
) -> Config:
    """botocore Config 생성"""
    return Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
        user_agent_extra=USER_AGENT_EXTRA,
    )


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    **kwargs: Any,
) -> Any:
    """재시도/타임아웃이 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, s3, logs 등)
        region_name: 리전 (None이면 세션 기본값)
        **kwargs: build_client_config 인자 또는 session.client() 추가 인자

    Returns:
        boto3 client
    """
    config_keys = ("max_attempts", "retry_mode", "connect_timeout", "read_timeout", "max_pool_connections")
    config = build_client_config(**{k: kwargs.pop(k) for k in config_keys if k in kwargs})

    if "config" in kwargs:
        config = config.merge(kwargs.pop("config"))

    # boto3-stubs는 Literal 서비스명을 요구
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
