"""
core/resources/lambda_.py - Lambda 함수

- lambda/functions: list_functions (페이지 조회, MaxItems 최대 50)

함수 목록에서 t 키로 함수 로그 그룹(/aws/lambda/<이름>)의 로그 보기로 이동합니다.
함수 작업: 드라이런 호출 (읽기 전용 모드에서도 허용)
"""

from __future__ import annotations

from core.actions import Action
from core.dao.types import BaseResource, Operation, RequestContext, unwrap_resource
from core.render import (
    BaseRenderer,
    Column,
    DetailBuilder,
    Navigation,
    SummaryField,
    name_column,
    state_style,
)

from .base import AWSPaginatedDAO
from .logs import LOG_GROUP_FILTER

_API_MAX_ITEMS = 50
INVOKE_DRY_RUN = "InvokeFunctionDryRun"


def _raw(resource) -> dict:
    return unwrap_resource(resource).raw() or {}


def function_from_api(data: dict) -> BaseResource:
    name = data.get("FunctionName", "")
    return BaseResource(id=name, name=name, arn=data.get("FunctionArn", ""), data=data)


class FunctionDAO(AWSPaginatedDAO):
    """Lambda 함수"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})
    _ACTIONS = (Action("Invoke (dry run)", "i", INVOKE_DRY_RUN, read_only=True),)

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "lambda", "functions")

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs = {"MaxItems": max(1, min(page_size, _API_MAX_ITEMS))}
        if page_token:
            kwargs["Marker"] = page_token
        response = self.call("list_functions", **kwargs)
        resources = [function_from_api(fn) for fn in response.get("Functions", [])]
        return resources, response.get("NextMarker", "")

    def get(self, resource_id: str):
        response = self.call("get_function", FunctionName=resource_id)
        resource = function_from_api(response.get("Configuration", {}))
        resource.tags = dict(response.get("Tags", {}))
        return resource

    def delete(self, resource_id: str) -> None:
        self.call("delete_function", FunctionName=resource_id)

    def run_action(self, operation: str, resource_id: str) -> None:
        if operation == INVOKE_DRY_RUN:
            # 권한/파라미터 검증만 하고 실제로 실행하지 않음
            self.call("invoke", FunctionName=resource_id, InvocationType="DryRun")
            return
        super().run_action(operation, resource_id)


class FunctionRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "lambda",
            "functions",
            [
                name_column(40),
                Column("RUNTIME", 14, lambda r: _raw(r).get("Runtime", ""), 1),
                Column("MEMORY", 8, lambda r: str(_raw(r).get("MemorySize", "")), 2),
                Column("TIMEOUT", 8, lambda r: f"{_raw(r).get('Timeout', '')}s", 3),
                Column("HANDLER", 30, lambda r: _raw(r).get("Handler", ""), 4),
                Column("MODIFIED", 26, lambda r: _raw(r).get("LastModified", ""), 5),
            ],
        )

    def detail(self, resource):
        data = _raw(resource)
        state = data.get("State", "")
        d = DetailBuilder()
        d.title("Lambda Function", resource.get_name())
        d.section("Basic Information")
        d.field("Name", data.get("FunctionName"))
        d.field("ARN", data.get("FunctionArn"))
        d.field("State", state, state_style(state))
        d.field("Runtime", data.get("Runtime"))
        d.field("Handler", data.get("Handler"))
        d.field("Description", data.get("Description"))
        d.field("Last Modified", data.get("LastModified"))

        d.section("Configuration")
        d.field("Memory", f"{data.get('MemorySize')} MB" if data.get("MemorySize") else "")
        d.field("Timeout", f"{data.get('Timeout')}s" if data.get("Timeout") else "")
        d.field("Role", data.get("Role"))
        d.field("Architectures", ", ".join(data.get("Architectures", [])))
        d.field("Package Type", data.get("PackageType"))

        variables = data.get("Environment", {}).get("Variables", {})
        if variables:
            d.section("Environment")
            for key in sorted(variables):
                d.field(key, variables[key])

        d.tags(resource.get_tags())
        return d.build()

    def summary_fields(self, resource):
        data = _raw(resource)
        return [
            SummaryField("Function", resource.get_name()),
            SummaryField("Runtime", data.get("Runtime", "")),
        ]

    def navigations(self, resource):
        return [
            Navigation(
                "t",
                "Logs",
                view_type="log",
                filter_field=LOG_GROUP_FILTER,
                filter_value=f"/aws/lambda/{resource.get_name()}",
            ),
        ]
