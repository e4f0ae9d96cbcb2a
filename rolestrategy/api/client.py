from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, TypeVar, Union

import requests
from pydantic import TypeAdapter, ValidationError

from rolestrategy.api.encoding import Params, encode_bool, encode_form, join_names, set_optional
from rolestrategy.api.schemas import (
    ALL_ROLES_ADAPTER,
    MATCHING_ITEMS_ADAPTER,
    ROLE_ASSIGNMENTS_ADAPTER,
    AllRoles,
    MatchingItem,
    PermissionTemplate,
    RoleAssignment,
    RoleInfo,
)
from rolestrategy.api.transport import RequestBuilder
from rolestrategy.core.config import ClientConfig
from rolestrategy.core.errors import ResponseDecodeError, RoleStrategyHTTPError
from rolestrategy.core.types import (
    DEFAULT_MAX_MATCHES,
    STRATEGY_PREFIX,
    RoleType,
    RoleTypeLike,
    role_type_value,
)


T = TypeVar("T")

PermissionIds = Union[str, Iterable[str]]

_TEMPLATE_ADAPTER: TypeAdapter[PermissionTemplate] = TypeAdapter(PermissionTemplate)
_ROLE_ADAPTER: TypeAdapter[RoleInfo] = TypeAdapter(RoleInfo)


class RoleStrategyClient:
    """
    Client for the Role Strategy plugin's REST endpoints.

    Every call issues exactly one request and returns on the first response.
    Writes return None on HTTP 200, reads return decoded models; anything else
    raises RoleStrategyHTTPError. Transport errors from requests propagate as-is.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.builder = RequestBuilder(config, self.session)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def connect(cls, base_url: str, username: str, api_token: str, **kwargs: Any) -> "RoleStrategyClient":
        session = kwargs.pop("session", None)
        return cls(ClientConfig(base_url=base_url, username=username, api_token=api_token, **kwargs), session)

    # Templates

    def add_template(self, name: str, permission_ids: PermissionIds, overwrite: bool = False) -> None:
        params: Params = {
            "name": name,
            "permissionIds": join_names(permission_ids),
            "overwrite": encode_bool(overwrite),
        }
        # The only write that reports the response body on failure.
        self._post("addTemplate", params, operation="add template", include_body=True)

    def remove_templates(self, names: Iterable[str], force: bool = False) -> None:
        params: Params = {
            "names": join_names(names),
            "force": encode_bool(force),
        }
        self._post("removeTemplates", params, operation="remove templates")

    def get_template(self, name: str) -> PermissionTemplate:
        return self._get("getTemplate", {"name": name}, _TEMPLATE_ADAPTER, operation="get template")

    # Roles

    def add_role(
        self,
        role_type: RoleTypeLike,
        role_name: str,
        permission_ids: PermissionIds,
        overwrite: bool = False,
        pattern: Optional[str] = None,
        template: Optional[str] = None,
    ) -> None:
        params: Params = {
            "type": role_type_value(role_type),
            "roleName": role_name,
            "permissionIds": join_names(permission_ids),
            "overwrite": encode_bool(overwrite),
        }
        set_optional(params, "pattern", pattern)
        set_optional(params, "template", template)
        self._post("addRole", params, operation="add role")

    def remove_roles(self, role_type: RoleTypeLike, role_names: Iterable[str]) -> None:
        params: Params = {
            "type": role_type_value(role_type),
            "roleNames": join_names(role_names),
        }
        self._post("removeRoles", params, operation="remove roles")

    def get_role(self, role_type: RoleTypeLike, role_name: str) -> RoleInfo:
        params: Params = {"type": role_type_value(role_type), "roleName": role_name}
        return self._get("getRole", params, _ROLE_ADAPTER, operation="get role")

    def get_all_roles(self, role_type: RoleTypeLike) -> AllRoles:
        params: Params = {"type": role_type_value(role_type)}
        return self._get("getAllRoles", params, ALL_ROLES_ADAPTER, operation="get all roles")

    def get_role_names(self, role_type: RoleTypeLike) -> List[str]:
        """Names of every role of the given type. Order is whatever the server sent."""
        return list(self.get_all_roles(role_type).keys())

    def get_global_role_names(self) -> List[str]:
        return self.get_role_names(RoleType.GLOBAL)

    def get_project_role_names(self) -> List[str]:
        return self.get_role_names(RoleType.PROJECT)

    # Assignments

    def assign_user_role(self, role_type: RoleTypeLike, role_name: str, user: str) -> None:
        self._change_assignment("assign", role_type, role_name, user, group=False)

    def assign_group_role(self, role_type: RoleTypeLike, role_name: str, group: str) -> None:
        self._change_assignment("assign", role_type, role_name, group, group=True)

    def unassign_user_role(self, role_type: RoleTypeLike, role_name: str, user: str) -> None:
        self._change_assignment("unassign", role_type, role_name, user, group=False)

    def unassign_group_role(self, role_type: RoleTypeLike, role_name: str, group: str) -> None:
        self._change_assignment("unassign", role_type, role_name, group, group=True)

    def delete_user(self, role_type: RoleTypeLike, user: str) -> None:
        self._delete_sid(role_type, user, group=False)

    def delete_group(self, role_type: RoleTypeLike, group: str) -> None:
        self._delete_sid(role_type, group, group=True)

    def get_role_assignments(self, role_type: RoleTypeLike) -> List[RoleAssignment]:
        params: Params = {"type": role_type_value(role_type)}
        return self._get(
            "getRoleAssignments", params, ROLE_ASSIGNMENTS_ADAPTER, operation="get role assignments"
        )

    # Pattern lookups

    def get_matching_jobs(self, pattern: str, max_jobs: int = DEFAULT_MAX_MATCHES) -> List[MatchingItem]:
        params: Params = {"pattern": pattern, "maxJobs": str(int(max_jobs))}
        return self._get("getMatchingJobs", params, MATCHING_ITEMS_ADAPTER, operation="get matching jobs")

    def get_matching_agents(self, pattern: str, max_agents: int = DEFAULT_MAX_MATCHES) -> List[MatchingItem]:
        params: Params = {"pattern": pattern, "maxAgents": str(int(max_agents))}
        return self._get(
            "getMatchingAgents", params, MATCHING_ITEMS_ADAPTER, operation="get matching agents"
        )

    # Lifecycle

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RoleStrategyClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[override]
        self.close()

    # Internals

    def _change_assignment(
        self, action: str, role_type: RoleTypeLike, role_name: str, sid: str, *, group: bool
    ) -> None:
        kind = "group" if group else "user"
        params: Params = {
            "type": role_type_value(role_type),
            "roleName": role_name,
            kind: sid,
        }
        endpoint = f"{action}{kind.capitalize()}Role"
        self._post(endpoint, params, operation=f"{action} {kind}")

    def _delete_sid(self, role_type: RoleTypeLike, sid: str, *, group: bool) -> None:
        endpoint = "deleteGroup" if group else "deleteUser"
        # The plugin reads the identifier from 'user' on both endpoints.
        params: Params = {"type": role_type_value(role_type), "user": sid}
        self._post(endpoint, params, operation=endpoint)

    def _post(self, endpoint: str, params: Params, *, operation: str, include_body: bool = False) -> None:
        prepared = self.builder.build("POST", f"{STRATEGY_PREFIX}/{endpoint}", body=encode_form(params))
        response = self.builder.send(prepared)
        try:
            self._check_status(response, operation, include_body=include_body)
        finally:
            response.close()

    def _get(self, endpoint: str, params: Params, adapter: TypeAdapter[T], *, operation: str) -> T:
        prepared = self.builder.build("GET", f"{STRATEGY_PREFIX}/{endpoint}", params=params)
        response = self.builder.send(prepared)
        try:
            self._check_status(response, operation)
            try:
                return adapter.validate_json(response.content)
            except ValidationError as exc:
                raise ResponseDecodeError(operation, _first_error(exc)) from exc
        finally:
            response.close()

    def _check_status(self, response: requests.Response, operation: str, *, include_body: bool = False) -> None:
        if response.status_code == 200:
            return
        self.logger.warning("%s failed with HTTP %s %s", operation, response.status_code, response.reason)
        raise RoleStrategyHTTPError(operation, response, include_body=include_body)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
