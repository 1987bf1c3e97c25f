"""
core/dao - 리소스 데이터 어댑터 계약
"""

from .types import (
    DAO,
    BaseDAO,
    BasePaginatedDAO,
    BaseResource,
    DAOFactory,
    Mergeable,
    Operation,
    PaginatedDAO,
    ProfiledResource,
    RegionalResource,
    RequestContext,
    Resource,
    ResourceList,
    get_resource_account_id,
    get_resource_profile,
    get_resource_region,
    same_resource,
    tags_to_dict,
    unwrap_resource,
)

__all__: list[str] = [
    "DAO",
    "BaseDAO",
    "BasePaginatedDAO",
    "BaseResource",
    "DAOFactory",
    "Mergeable",
    "Operation",
    "PaginatedDAO",
    "ProfiledResource",
    "RegionalResource",
    "RequestContext",
    "Resource",
    "ResourceList",
    "get_resource_account_id",
    "get_resource_profile",
    "get_resource_region",
    "same_resource",
    "tags_to_dict",
    "unwrap_resource",
]
