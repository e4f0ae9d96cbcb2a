from __future__ import annotations

from enum import Enum
from typing import Union


STRATEGY_PREFIX = "role-strategy/strategy"
DEFAULT_BASE_URL = "http://localhost:8080/jenkins"
DEFAULT_MAX_MATCHES = 10


class RoleType(str, Enum):
    GLOBAL = "globalRoles"
    PROJECT = "projectRoles"
    AGENT = "slaveRoles"

    @classmethod
    def parse(cls, value: str) -> "RoleType":
        """
        Resolve a role type from its wire tag or short name.
        Accepted short names: global, project (or item), agent (or slave).
        """
        key = value.strip()
        for member in cls:
            if member.value == key:
                return member

        alias = _ALIASES.get(key.lower())
        if alias is None:
            known = ", ".join(sorted(_ALIASES))
            raise ValueError(f"Unknown role type '{value}'. Expected one of: {known}")
        return alias


_ALIASES = {
    "global": RoleType.GLOBAL,
    "project": RoleType.PROJECT,
    "item": RoleType.PROJECT,
    "agent": RoleType.AGENT,
    "slave": RoleType.AGENT,
}


RoleTypeLike = Union[RoleType, str]


def role_type_value(role_type: RoleTypeLike) -> str:
    # Unknown strings pass through untouched; the server decides what they mean.
    if isinstance(role_type, RoleType):
        return role_type.value
    return str(role_type)
