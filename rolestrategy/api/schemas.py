from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class SidType(str, Enum):
    """Known SID kinds. Decoded entries keep whatever kind the server sent."""

    USER = "USER"
    GROUP = "GROUP"
    # Legacy entries the plugin could not classify as user or group.
    EITHER = "EITHER"


def _empty_list_if_null(value: Any) -> Any:
    return [] if value is None else value


def _empty_dict_if_null(value: Any) -> Any:
    return {} if value is None else value


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SIDEntry(_Payload):
    type: str = ""
    sid: str = ""


class PermissionTemplate(_Payload):
    name: str = ""
    permission_ids: Dict[str, bool] = Field(default_factory=dict, alias="permissionIds")
    is_used: bool = Field(default=False, alias="isUsed")
    sids: List[SIDEntry] = Field(default_factory=list)

    @field_validator("permission_ids", mode="before")
    @classmethod
    def permissions_or_empty(cls, value: Any) -> Any:
        return _empty_dict_if_null(value)

    @field_validator("sids", mode="before")
    @classmethod
    def sids_or_empty(cls, value: Any) -> Any:
        return _empty_list_if_null(value)


class RoleInfo(_Payload):
    # getRole answers 200 {} for an unknown role name.
    permission_ids: Dict[str, bool] = Field(default_factory=dict, alias="permissionIds")
    sids: List[SIDEntry] = Field(default_factory=list)
    pattern: Optional[str] = None
    template: Optional[str] = None

    @field_validator("permission_ids", mode="before")
    @classmethod
    def permissions_or_empty(cls, value: Any) -> Any:
        return _empty_dict_if_null(value)

    @field_validator("sids", mode="before")
    @classmethod
    def sids_or_empty(cls, value: Any) -> Any:
        return _empty_list_if_null(value)


class RoleAssignment(_Payload):
    name: str = ""
    type: str = ""
    roles: List[str] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def roles_or_empty(cls, value: Any) -> Any:
        return _empty_list_if_null(value)


class MatchingItem(_Payload):
    name: str


# getAllRoles values are passed through as received.
AllRoles = Dict[str, Any]

ALL_ROLES_ADAPTER: TypeAdapter[AllRoles] = TypeAdapter(AllRoles)
ROLE_ASSIGNMENTS_ADAPTER: TypeAdapter[List[RoleAssignment]] = TypeAdapter(List[RoleAssignment])
MATCHING_ITEMS_ADAPTER: TypeAdapter[List[MatchingItem]] = TypeAdapter(List[MatchingItem])
