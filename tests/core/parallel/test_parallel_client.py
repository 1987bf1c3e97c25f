"""
tests/core/parallel/test_parallel_client.py - boto3 client 생성 테스트
"""

import boto3
from botocore.config import Config

from core.parallel.client import (
    DEFAULT_MAX_POOL_CONNECTIONS,
    DEFAULT_RETRY_MODE,
    USER_AGENT_EXTRA,
    build_client_config,
    get_client,
)


class TestBuildClientConfig:
    """build_client_config 테스트"""

    def test_defaults(self):
        """adaptive 재시도와 연결 풀"""
        config = build_client_config()
        assert config.retries == {"max_attempts": 3, "mode": DEFAULT_RETRY_MODE}
        assert config.max_pool_connections == DEFAULT_MAX_POOL_CONNECTIONS
        assert config.user_agent_extra == USER_AGENT_EXTRA


class TestGetClient:
    """get_client 테스트"""

    def test_region_and_config(self):
        """리전과 설정 적용"""
        client = get_client(boto3.Session(), "ec2", region_name="us-east-1", read_timeout=7)
        assert client.meta.region_name == "us-east-1"
        assert client.meta.config.read_timeout == 7
        assert client.meta.config.retries["mode"] == "adaptive"

    def test_extra_config_merged(self):
        """추가 Config 병합"""
        client = get_client(boto3.Session(), "s3", region_name="us-east-1", config=Config(signature_version="s3v4"))
        assert client.meta.config.signature_version == "s3v4"
        assert client.meta.config.user_agent_extra == USER_AGENT_EXTRA
