"""
tests/core/resources/test_resources_lambda.py - Lambda 함수 어댑터 테스트
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from core.actions import available_actions, execute_action
from core.context import AppContext
from core.dao.types import BaseResource, RequestContext
from core.exceptions import APICallError, UnsupportedOperationError
from core.resources.lambda_ import INVOKE_DRY_RUN, FunctionDAO, FunctionRenderer, function_from_api
from core.resources.logs import LOG_GROUP_FILTER


@pytest.fixture
def dao():
    dao = FunctionDAO(RequestContext(AppContext(regions=["ap-northeast-2"])))
    dao._client = MagicMock()
    return dao


def _function(name: str) -> dict:
    return {
        "FunctionName": name,
        "FunctionArn": f"arn:aws:lambda:ap-northeast-2:123456789012:function:{name}",
        "Runtime": "python3.12",
        "MemorySize": 128,
        "Timeout": 30,
        "Handler": "app.handler",
    }


class TestFunctionDAO:
    """FunctionDAO 테스트"""

    def test_list_page(self, dao):
        """MaxItems 상한과 NextMarker"""
        dao._client.list_functions.return_value = {"Functions": [_function("api")], "NextMarker": "m1"}

        resources, token = dao.list_page(100)

        assert [r.get_name() for r in resources] == ["api"]
        assert token == "m1"
        dao._client.list_functions.assert_called_once_with(MaxItems=50)

    def test_list_page_marker(self, dao):
        """다음 페이지는 Marker 전달"""
        dao._client.list_functions.return_value = {"Functions": []}
        resources, token = dao.list_page(10, "m1")
        assert resources == []
        assert token == ""
        dao._client.list_functions.assert_called_once_with(MaxItems=10, Marker="m1")

    def test_get_reads_configuration_and_tags(self, dao):
        """Configuration 과 Tags"""
        dao._client.get_function.return_value = {"Configuration": _function("api"), "Tags": {"team": "core"}}
        resource = dao.get("api")
        assert resource.get_arn().endswith(":function:api")
        assert resource.get_tags() == {"team": "core"}

    def test_client_error_converted(self, dao):
        """ClientError -> APICallError"""
        dao._client.get_function.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "not found"}}, "GetFunction"
        )
        with pytest.raises(APICallError) as exc_info:
            dao.get("missing")
        assert exc_info.value.error_code == "ResourceNotFoundException"

    def test_delete(self, dao):
        """삭제"""
        dao.delete("api")
        dao._client.delete_function.assert_called_once_with(FunctionName="api")

    def test_dry_run_invoke(self, dao):
        """드라이런 호출은 읽기 전용 모드에서도 허용"""
        resource = function_from_api(_function("api"))
        (action,) = available_actions(dao, resource, read_only=True)
        assert action.operation == INVOKE_DRY_RUN

        execute_action(dao, action, resource, read_only=True)

        dao._client.invoke.assert_called_once_with(FunctionName="api", InvocationType="DryRun")

    def test_unknown_action(self, dao):
        """정의되지 않은 작업명"""
        with pytest.raises(UnsupportedOperationError):
            dao.run_action("Publish", "api")


class TestFunctionRenderer:
    """FunctionRenderer 테스트"""

    def test_row(self):
        """함수 행"""
        row = FunctionRenderer().row(function_from_api(_function("api")))
        assert row[:5] == ["api", "python3.12", "128", "30s", "app.handler"]

    def test_log_navigation(self):
        """t: /aws/lambda/<이름> 로그 보기"""
        (navigation,) = FunctionRenderer().navigations(BaseResource(id="api", name="api"))
        assert navigation.key == "t"
        assert navigation.view_type == "log"
        assert navigation.filter_field == LOG_GROUP_FILTER
        assert navigation.filter_value == "/aws/lambda/api"

    def test_detail_environment(self):
        """환경변수 섹션"""
        data = {**_function("api"), "Environment": {"Variables": {"STAGE": "prod"}}}
        text = FunctionRenderer().detail(function_from_api(data)).plain
        assert "Environment" in text
        assert "STAGE:" in text
