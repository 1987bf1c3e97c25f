"""
core/registry - 리소스 레지스트리와 DAO 래핑 계층

Usage:
    from core.registry import get_registry

    registry = get_registry()
    service, resource = registry.parse_service_resource("sg")
    dao = registry.create_dao(RequestContext(app), service, resource)
"""

from .registry import (
    Registry,
    RegistryEntry,
    RegistryTier,
    ServiceCategory,
    get_registry,
    reset_registry,
)
from .wrappers import FetchPolicy, MultiplexDAOWrapper, PaginatedDAOWrapper

__all__: list[str] = [
    "FetchPolicy",
    "MultiplexDAOWrapper",
    "PaginatedDAOWrapper",
    "Registry",
    "RegistryEntry",
    "RegistryTier",
    "ServiceCategory",
    "get_registry",
    "reset_registry",
]
