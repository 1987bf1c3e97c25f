"""
core/resources/cloudformation.py - CloudFormation 스택과 하위 리소스

- cloudformation/stacks: describe_stacks (페이지 조회)
- cloudformation/events: describe_stack_events (하위 리소스, StackName 필터 필수)
- cloudformation/resources: list_stack_resources (하위 리소스, StackName 필터 필수)
- cloudformation/outputs: describe_stacks 의 Outputs (하위 리소스, StackName 필터 필수)

스택 목록에서 e/r/o 키로 하위 리소스로 이동합니다.
스택 작업: 드리프트 감지 (읽기 전용 모드에서도 허용)
"""

from __future__ import annotations

from core.actions import Action
from core.dao.types import BaseResource, Operation, RequestContext, tags_to_dict, unwrap_resource
from core.exceptions import APICallError
from core.render import (
    BaseRenderer,
    Column,
    DetailBuilder,
    Navigation,
    SummaryField,
    format_age,
    name_column,
    state_style,
    tags_column,
)

from .base import AWSDAO, AWSPaginatedDAO

STACK_FILTER = "StackName"
DETECT_DRIFT = "DetectStackDrift"
_STACK_FILTER_HINT = "스택 목록에서 e/r/o 키로 이동하세요"


def _raw(resource) -> dict:
    return unwrap_resource(resource).raw() or {}


# =============================================================================
# 스택
# =============================================================================


def stack_from_api(data: dict) -> BaseResource:
    return BaseResource(
        id=data.get("StackName", ""),
        name=data.get("StackName", ""),
        arn=data.get("StackId", ""),
        tags=tags_to_dict(data.get("Tags")),
        data=data,
    )


class StackDAO(AWSPaginatedDAO):
    """CloudFormation 스택 (삭제 완료 스택 제외)"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})
    _ACTIONS = (Action("Detect drift", "f", DETECT_DRIFT, read_only=True),)

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudformation", "stacks")

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs = {"NextToken": page_token} if page_token else {}
        response = self.call("describe_stacks", **kwargs)
        resources = [
            stack_from_api(stack)
            for stack in response.get("Stacks", [])
            if stack.get("StackStatus") != "DELETE_COMPLETE"
        ]
        return resources, response.get("NextToken", "")

    def get(self, resource_id: str):
        stacks = self.call("describe_stacks", StackName=resource_id).get("Stacks", [])
        if not stacks:
            raise APICallError("cloudformation", "describe_stacks", "ValidationError", resource_id)
        return stack_from_api(stacks[0])

    def delete(self, resource_id: str) -> None:
        self.call("delete_stack", StackName=resource_id)

    def run_action(self, operation: str, resource_id: str) -> None:
        if operation == DETECT_DRIFT:
            self.call("detect_stack_drift", StackName=resource_id)
            return
        super().run_action(operation, resource_id)


def _drift(resource) -> str:
    return _raw(resource).get("DriftInformation", {}).get("StackDriftStatus", "")


class StackRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudformation",
            "stacks",
            [
                name_column(35),
                Column("STATUS", 28, lambda r: _raw(r).get("StackStatus", ""), 1),
                Column("DRIFT", 12, _drift, 2),
                Column("CREATED", 10, lambda r: format_age(_raw(r).get("CreationTime")), 3),
                Column("UPDATED", 10, lambda r: format_age(_raw(r).get("LastUpdatedTime")), 4),
                tags_column(30, 5),
            ],
        )

    def detail(self, resource):
        data = _raw(resource)
        status = data.get("StackStatus", "")
        d = DetailBuilder()
        d.title("CloudFormation Stack", resource.get_name())

        d.section("Basic Information")
        d.field("Stack Name", data.get("StackName"))
        d.field("Stack ID", data.get("StackId"))
        d.field("Status", status, state_style(status))
        d.field("Status Reason", data.get("StackStatusReason"))
        d.field("Description", data.get("Description"))

        d.section("Timestamps")
        d.field("Created", data.get("CreationTime"))
        d.field("Age", format_age(data.get("CreationTime")))
        d.field("Last Updated", data.get("LastUpdatedTime"))

        if data.get("DriftInformation"):
            d.section("Drift Information")
            d.field("Drift Status", _drift(resource))

        d.section("Configuration")
        if "EnableTerminationProtection" in data:
            d.field("Termination Protection", "Enabled" if data["EnableTerminationProtection"] else "Disabled")
        if data.get("DisableRollback"):
            d.field("Rollback", "Disabled")
        d.field("IAM Role", data.get("RoleARN"))
        d.field("Capabilities", ", ".join(data.get("Capabilities", [])))

        parameters = data.get("Parameters", [])
        if parameters:
            d.section("Parameters")
            for p in parameters:
                d.field(p.get("ParameterKey", ""), p.get("ParameterValue", ""))

        d.tags(resource.get_tags())
        return d.build()

    def summary_fields(self, resource):
        status = _raw(resource).get("StackStatus", "")
        return [
            SummaryField("Stack", resource.get_name()),
            SummaryField("Status", status, state_style(status)),
        ]

    def navigations(self, resource):
        name = resource.get_name()
        return [
            Navigation("e", "Events", "cloudformation", "events", STACK_FILTER, name),
            Navigation("r", "Resources", "cloudformation", "resources", STACK_FILTER, name),
            Navigation("o", "Outputs", "cloudformation", "outputs", STACK_FILTER, name),
        ]


# =============================================================================
# 하위 리소스
# =============================================================================


class StackEventDAO(AWSPaginatedDAO):
    """스택 이벤트 (최신순)"""

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudformation", "events")

    def list_page(self, page_size: int, page_token: str = ""):
        stack_name = self.require_filter(STACK_FILTER, _STACK_FILTER_HINT)
        kwargs = {"StackName": stack_name}
        if page_token:
            kwargs["NextToken"] = page_token
        response = self.call("describe_stack_events", **kwargs)
        resources = [
            BaseResource(
                id=event.get("EventId", ""),
                name=event.get("LogicalResourceId", ""),
                data=event,
            )
            for event in response.get("StackEvents", [])
        ]
        return resources, response.get("NextToken", "")


class StackEventRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudformation",
            "events",
            [
                Column("TIME", 10, lambda r: format_age(_raw(r).get("Timestamp")), 0),
                Column("LOGICAL ID", 30, lambda r: r.get_name(), 0),
                Column("TYPE", 35, lambda r: _raw(r).get("ResourceType", ""), 2),
                Column("STATUS", 28, lambda r: _raw(r).get("ResourceStatus", ""), 1),
                Column("REASON", 50, lambda r: _raw(r).get("ResourceStatusReason", ""), 3),
            ],
        )

    def detail(self, resource):
        data = _raw(resource)
        status = data.get("ResourceStatus", "")
        d = DetailBuilder()
        d.title("Stack Event", resource.get_name())
        d.section("Event")
        d.field("Stack", data.get("StackName"))
        d.field("Timestamp", data.get("Timestamp"))
        d.field("Logical ID", data.get("LogicalResourceId"))
        d.field("Physical ID", data.get("PhysicalResourceId"))
        d.field("Type", data.get("ResourceType"))
        d.field("Status", status, state_style(status))
        d.field("Reason", data.get("ResourceStatusReason"))
        return d.build()


class StackResourceDAO(AWSPaginatedDAO):
    """스택이 만든 리소스"""

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudformation", "resources")

    def list_page(self, page_size: int, page_token: str = ""):
        stack_name = self.require_filter(STACK_FILTER, _STACK_FILTER_HINT)
        kwargs = {"StackName": stack_name}
        if page_token:
            kwargs["NextToken"] = page_token
        response = self.call("list_stack_resources", **kwargs)
        resources = [
            BaseResource(
                id=summary.get("LogicalResourceId", ""),
                name=summary.get("LogicalResourceId", ""),
                data=summary,
            )
            for summary in response.get("StackResourceSummaries", [])
        ]
        return resources, response.get("NextToken", "")


class StackResourceRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudformation",
            "resources",
            [
                Column("LOGICAL ID", 30, lambda r: r.get_name(), 0),
                Column("PHYSICAL ID", 40, lambda r: _raw(r).get("PhysicalResourceId", ""), 1),
                Column("TYPE", 35, lambda r: _raw(r).get("ResourceType", ""), 2),
                Column("STATUS", 24, lambda r: _raw(r).get("ResourceStatus", ""), 1),
            ],
        )


class StackOutputDAO(AWSDAO):
    """스택 출력값 (페이지 미지원)"""

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "cloudformation", "outputs")

    def list(self):
        stack_name = self.require_filter(STACK_FILTER, _STACK_FILTER_HINT)
        stacks = self.call("describe_stacks", StackName=stack_name).get("Stacks", [])
        outputs = stacks[0].get("Outputs", []) if stacks else []
        return [
            BaseResource(id=output.get("OutputKey", ""), name=output.get("OutputKey", ""), data=output)
            for output in outputs
        ]


class StackOutputRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "cloudformation",
            "outputs",
            [
                Column("KEY", 30, lambda r: r.get_name(), 0),
                Column("VALUE", 50, lambda r: _raw(r).get("OutputValue", ""), 0),
                Column("EXPORT", 30, lambda r: _raw(r).get("ExportName", ""), 2),
                Column("DESCRIPTION", 40, lambda r: _raw(r).get("Description", ""), 3),
            ],
        )
