"""
core/resources/ec2.py - EC2 인스턴스 / 보안 그룹

- ec2/instances: describe_instances (페이지 조회), 시작/중지/재부팅 작업
- ec2/security-groups: describe_security_groups (페이지 조회)
"""

from __future__ import annotations

from core.actions import Action, ConfirmLevel
from core.dao.types import BaseResource, Operation, RequestContext, tags_to_dict, unwrap_resource
from core.exceptions import APICallError
from core.render import (
    BaseRenderer,
    Column,
    DetailBuilder,
    SummaryField,
    format_age,
    name_column,
    state_style,
    tags_column,
)

from .base import AWSPaginatedDAO


def _clamp(page_size: int, low: int, high: int) -> int:
    return max(low, min(page_size, high))


def _field(resource, key: str, default=""):
    data = unwrap_resource(resource).raw() or {}
    return data.get(key, default)


# =============================================================================
# 인스턴스
# =============================================================================


def instance_from_api(data: dict) -> BaseResource:
    tags = tags_to_dict(data.get("Tags"))
    return BaseResource(
        id=data.get("InstanceId", ""),
        name=tags.get("Name", ""),
        tags=tags,
        data=data,
    )


def _instance_state(resource) -> str:
    return (resource.raw() or {}).get("State", {}).get("Name", "")


# 작업명 -> boto3 메서드
_INSTANCE_OPERATIONS = {
    "StartInstances": "start_instances",
    "StopInstances": "stop_instances",
    "RebootInstances": "reboot_instances",
}


class InstanceDAO(AWSPaginatedDAO):
    """EC2 인스턴스"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})
    _ACTIONS = (
        Action("Start", "s", "StartInstances", ConfirmLevel.SIMPLE, when=lambda r: _instance_state(r) == "stopped"),
        Action("Stop", "S", "StopInstances", ConfirmLevel.SIMPLE, when=lambda r: _instance_state(r) == "running"),
        Action("Reboot", "r", "RebootInstances", ConfirmLevel.SIMPLE, when=lambda r: _instance_state(r) == "running"),
    )

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "ec2", "instances")

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs = {"MaxResults": _clamp(page_size, 5, 1000)}
        if page_token:
            kwargs["NextToken"] = page_token
        response = self.call("describe_instances", **kwargs)
        resources = [
            instance_from_api(instance)
            for reservation in response.get("Reservations", [])
            for instance in reservation.get("Instances", [])
        ]
        return resources, response.get("NextToken", "")

    def get(self, resource_id: str):
        response = self.call("describe_instances", InstanceIds=[resource_id])
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                return instance_from_api(instance)
        raise APICallError("ec2", "describe_instances", "InvalidInstanceID.NotFound", resource_id)

    def delete(self, resource_id: str) -> None:
        self.call("terminate_instances", InstanceIds=[resource_id])

    def run_action(self, operation: str, resource_id: str) -> None:
        method = _INSTANCE_OPERATIONS.get(operation)
        if method is None:
            super().run_action(operation, resource_id)
            return
        self.call(method, InstanceIds=[resource_id])


class InstanceRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "ec2",
            "instances",
            [
                name_column(30),
                Column("INSTANCE ID", 20, lambda r: unwrap_resource(r).get_id(), 1),
                Column("STATE", 12, lambda r: _field(r, "State", {}).get("Name", ""), 0),
                Column("TYPE", 12, lambda r: _field(r, "InstanceType"), 2),
                Column("PRIVATE IP", 15, lambda r: _field(r, "PrivateIpAddress"), 3),
                Column("AZ", 16, lambda r: _field(r, "Placement", {}).get("AvailabilityZone", ""), 4),
                Column("AGE", 6, lambda r: format_age(_field(r, "LaunchTime", None)), 5),
                tags_column(30, 9),
            ],
        )

    def detail(self, resource):
        data = unwrap_resource(resource).raw() or {}
        state = data.get("State", {}).get("Name", "")
        d = DetailBuilder()
        d.title("EC2 Instance", resource.get_name())
        d.section("Basic Information")
        d.field("Instance ID", data.get("InstanceId"))
        d.field("State", state, state_style(state))
        d.field("Instance Type", data.get("InstanceType"))
        d.field("AMI", data.get("ImageId"))
        d.field("Platform", data.get("PlatformDetails"))
        d.field("Launch Time", data.get("LaunchTime"))

        d.section("Network")
        d.field("VPC", data.get("VpcId"))
        d.field("Subnet", data.get("SubnetId"))
        d.field("Availability Zone", data.get("Placement", {}).get("AvailabilityZone"))
        d.field("Private IP", data.get("PrivateIpAddress"))
        d.field("Public IP", data.get("PublicIpAddress"))
        groups = ", ".join(g.get("GroupId", "") for g in data.get("SecurityGroups", []))
        d.field("Security Groups", groups)

        d.tags(resource.get_tags())
        return d.build()

    def summary_fields(self, resource):
        data = unwrap_resource(resource).raw() or {}
        state = data.get("State", {}).get("Name", "")
        return [
            SummaryField("ID", data.get("InstanceId", "")),
            SummaryField("Name", resource.get_name()),
            SummaryField("State", state, state_style(state)),
            SummaryField("Type", data.get("InstanceType", "")),
        ]


# =============================================================================
# 보안 그룹
# =============================================================================


def security_group_from_api(data: dict) -> BaseResource:
    return BaseResource(
        id=data.get("GroupId", ""),
        name=data.get("GroupName", ""),
        arn=data.get("SecurityGroupArn", ""),
        tags=tags_to_dict(data.get("Tags")),
        data=data,
    )


class SecurityGroupDAO(AWSPaginatedDAO):
    """EC2 보안 그룹"""

    _SUPPORTED = frozenset({Operation.LIST, Operation.GET, Operation.DELETE})

    def __init__(self, ctx: RequestContext):
        super().__init__(ctx, "ec2", "security-groups")

    def list_page(self, page_size: int, page_token: str = ""):
        kwargs = {"MaxResults": _clamp(page_size, 5, 1000)}
        if page_token:
            kwargs["NextToken"] = page_token
        response = self.call("describe_security_groups", **kwargs)
        resources = [security_group_from_api(sg) for sg in response.get("SecurityGroups", [])]
        return resources, response.get("NextToken", "")

    def get(self, resource_id: str):
        response = self.call("describe_security_groups", GroupIds=[resource_id])
        groups = response.get("SecurityGroups", [])
        if not groups:
            raise APICallError("ec2", "describe_security_groups", "InvalidGroup.NotFound", resource_id)
        return security_group_from_api(groups[0])

    def delete(self, resource_id: str) -> None:
        self.call("delete_security_group", GroupId=resource_id)


def _rule_summary(permission: dict) -> str:
    protocol = permission.get("IpProtocol", "")
    if protocol == "-1":
        ports = "all"
    else:
        from_port, to_port = permission.get("FromPort"), permission.get("ToPort")
        ports = f"{from_port}" if from_port == to_port else f"{from_port}-{to_port}"
    sources = [r.get("CidrIp", "") for r in permission.get("IpRanges", [])]
    sources += [r.get("CidrIpv6", "") for r in permission.get("Ipv6Ranges", [])]
    sources += [p.get("GroupId", "") for p in permission.get("UserIdGroupPairs", [])]
    return f"{protocol}/{ports} <- {', '.join(s for s in sources if s) or '-'}"


class SecurityGroupRenderer(BaseRenderer):
    def __init__(self):
        super().__init__(
            "ec2",
            "security-groups",
            [
                name_column(30),
                Column("GROUP ID", 22, lambda r: unwrap_resource(r).get_id(), 1),
                Column("VPC", 22, lambda r: _field(r, "VpcId"), 2),
                Column("IN", 4, lambda r: str(len(_field(r, "IpPermissions", []))), 3),
                Column("OUT", 4, lambda r: str(len(_field(r, "IpPermissionsEgress", []))), 4),
                Column("DESCRIPTION", 40, lambda r: _field(r, "Description"), 5),
            ],
        )

    def detail(self, resource):
        data = unwrap_resource(resource).raw() or {}
        d = DetailBuilder()
        d.title("Security Group", resource.get_name())
        d.section("Basic Information")
        d.field("Group ID", data.get("GroupId"))
        d.field("Group Name", data.get("GroupName"))
        d.field("VPC", data.get("VpcId"))
        d.field("Description", data.get("Description"))
        d.field("Owner", data.get("OwnerId"))

        d.section("Inbound Rules")
        for permission in data.get("IpPermissions", []):
            d.line(f"  {_rule_summary(permission)}")
        d.section("Outbound Rules")
        for permission in data.get("IpPermissionsEgress", []):
            d.line(f"  {_rule_summary(permission)}")

        d.tags(resource.get_tags())
        return d.build()
