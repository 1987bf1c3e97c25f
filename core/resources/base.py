"""
core/resources/base.py - boto3 기반 DAO 공통 기능

RequestContext 의 대상(리전/프로파일)으로 boto3 클라이언트를 만들고,
botocore ClientError 를 APICallError 로 변환하는 공통 베이스를 제공합니다.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from core.auth.session import get_session
from core.dao.types import BaseDAO, PaginatedDAO, RequestContext
from core.exceptions import APICallError, ValidationError
from core.parallel.client import get_client

logger = logging.getLogger(__name__)


class AWSDAO(BaseDAO):
    """boto3 클라이언트를 사용하는 DAO 베이스

    Attributes:
        ctx: 호출 컨텍스트
        client_name: boto3 클라이언트 서비스명 (예: "logs")
    """

    client_name: str = ""

    def __init__(self, ctx: RequestContext, service: str, resource_type: str):
        super().__init__(service, resource_type)
        self.ctx = ctx
        self._client: Any = None

    @property
    def region(self) -> str:
        return self.ctx.effective_region

    @property
    def client(self) -> Any:
        if self._client is None:
            session = get_session(self.ctx.effective_selection, self.region or None)
            self._client = get_client(session, self.client_name or self.service_name, region_name=self.region or None)
        return self._client

    def call(self, operation: str, **kwargs) -> dict[str, Any]:
        """API 호출 (ClientError -> APICallError)"""
        try:
            return getattr(self.client, operation)(**kwargs)
        except ClientError as e:
            raise APICallError.from_client_error(self.service_name, operation, e) from e

    def require_filter(self, name: str, hint: str) -> str:
        """하위 리소스의 상위 필터 값 (없으면 ValidationError)"""
        value = self.ctx.get_filter(name)
        if not value:
            raise ValidationError(name, "", hint)
        return value


class AWSPaginatedDAO(AWSDAO, PaginatedDAO):
    """페이지 조회를 지원하는 boto3 DAO 베이스"""

    def list(self):
        resources, _ = self.list_page(self.ctx.page_size, "")
        return resources
