from rolestrategy.api.client import RoleStrategyClient
from rolestrategy.api.schemas import MatchingItem, PermissionTemplate, RoleAssignment, RoleInfo, SIDEntry, SidType
from rolestrategy.core import (
    ClientConfig,
    ResponseDecodeError,
    RoleStrategyError,
    RoleStrategyHTTPError,
    RoleType,
)

__all__ = [
    "ClientConfig",
    "MatchingItem",
    "PermissionTemplate",
    "ResponseDecodeError",
    "RoleAssignment",
    "RoleInfo",
    "RoleStrategyClient",
    "RoleStrategyError",
    "RoleStrategyHTTPError",
    "RoleType",
    "SIDEntry",
    "SidType",
]
