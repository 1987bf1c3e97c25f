"""
core/resources - 내장 boto3 리소스 어댑터

코어는 DAO/렌더러 계약만 사용하며 아래 구현의 내부를 알지 못합니다.

Usage:
    from core.registry import Registry
    from core.resources import register_builtin

    registry = Registry()
    register_builtin(registry)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import cloudformation, ec2, lambda_, logs, s3, tagging

if TYPE_CHECKING:
    from core.registry.registry import Registry


def register_builtin(registry: Registry) -> None:
    """내장 어댑터를 OVERRIDE 단계에 등록"""
    from core.registry.registry import RegistryEntry

    builtins = [
        ("ec2", "instances", ec2.InstanceDAO, ec2.InstanceRenderer, False),
        ("ec2", "security-groups", ec2.SecurityGroupDAO, ec2.SecurityGroupRenderer, False),
        ("s3", "buckets", s3.BucketDAO, s3.BucketRenderer, False),
        ("cloudformation", "stacks", cloudformation.StackDAO, cloudformation.StackRenderer, False),
        ("cloudformation", "events", cloudformation.StackEventDAO, cloudformation.StackEventRenderer, True),
        ("cloudformation", "resources", cloudformation.StackResourceDAO, cloudformation.StackResourceRenderer, True),
        ("cloudformation", "outputs", cloudformation.StackOutputDAO, cloudformation.StackOutputRenderer, True),
        ("cloudwatch", "log-groups", logs.LogGroupDAO, logs.LogGroupRenderer, False),
        ("cloudwatch", "log-streams", logs.LogStreamDAO, logs.LogStreamRenderer, True),
        ("lambda", "functions", lambda_.FunctionDAO, lambda_.FunctionRenderer, False),
        ("tagging", "resources", tagging.TaggedResourceDAO, tagging.TaggedResourceRenderer, False),
    ]
    for service, resource_type, dao_class, renderer_class, sub_resource in builtins:
        registry.register_custom(service, resource_type, RegistryEntry(dao_class, renderer_class, sub_resource))


__all__: list[str] = ["register_builtin"]
