from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, List, Optional

import requests

from rolestrategy.api.client import RoleStrategyClient
from rolestrategy.core.config import ClientConfig
from rolestrategy.core.errors import RoleStrategyError
from rolestrategy.core.types import DEFAULT_MAX_MATCHES, RoleType


def setup_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def parse_role_type(raw: str) -> RoleType:
    try:
        return RoleType.parse(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def split_names(raw: str) -> List[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


def build_config(args: argparse.Namespace) -> ClientConfig:
    config = ClientConfig.from_env()
    overrides = {}
    if args.url:
        overrides["base_url"] = args.url
    if args.user:
        overrides["username"] = args.user
    if args.token:
        overrides["api_token"] = args.token
    if args.timeout is not None:
        overrides["timeout_seconds"] = max(0.1, args.timeout)
    if args.insecure:
        overrides["verify_tls"] = False
    return replace(config, **overrides) if overrides else config


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="role-strategy",
        description="Manage Jenkins Role Strategy templates, roles and assignments",
    )
    parser.add_argument("--url", type=str, default=None, help="Jenkins base URL (default: $JENKINS_URL)")
    parser.add_argument("--user", type=str, default=None, help="Jenkins user name (default: $JENKINS_USER)")
    parser.add_argument("--token", type=str, default=None, help="Jenkins API token (default: $JENKINS_API_TOKEN)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("--debug", action="store_true", help="Enable verbose logs")

    commands = parser.add_subparsers(dest="command", required=True)

    cmd = commands.add_parser("add-template", help="Create or overwrite a permission template")
    cmd.add_argument("name")
    cmd.add_argument("permission_ids", help="Comma-separated permission ids")
    cmd.add_argument("--overwrite", action="store_true")

    cmd = commands.add_parser("remove-templates", help="Delete one or more templates")
    cmd.add_argument("names", type=split_names, help="Comma-separated template names")
    cmd.add_argument("--force", action="store_true", help="Remove templates even if roles use them")

    cmd = commands.add_parser("add-role", help="Create or overwrite a role")
    cmd.add_argument("role_type", type=parse_role_type)
    cmd.add_argument("role_name")
    cmd.add_argument("permission_ids", help="Comma-separated permission ids")
    cmd.add_argument("--overwrite", action="store_true")
    cmd.add_argument("--pattern", default=None, help="Item or agent name pattern")
    cmd.add_argument("--template", default=None, help="Template the role derives from")

    cmd = commands.add_parser("remove-roles", help="Delete one or more roles")
    cmd.add_argument("role_type", type=parse_role_type)
    cmd.add_argument("role_names", type=split_names, help="Comma-separated role names")

    for name, verb in (("assign", "Grant"), ("unassign", "Revoke")):
        cmd = commands.add_parser(name, help=f"{verb} a role for a user or group")
        cmd.add_argument("role_type", type=parse_role_type)
        cmd.add_argument("role_name")
        cmd.add_argument("sid")
        cmd.add_argument("--group", action="store_true", help="Treat SID as a group")

    cmd = commands.add_parser("delete-sid", help="Remove a user or group from every role")
    cmd.add_argument("role_type", type=parse_role_type)
    cmd.add_argument("sid")
    cmd.add_argument("--group", action="store_true", help="Treat SID as a group")

    cmd = commands.add_parser("get-template", help="Show a permission template")
    cmd.add_argument("name")

    cmd = commands.add_parser("get-role", help="Show a role")
    cmd.add_argument("role_type", type=parse_role_type)
    cmd.add_argument("role_name")

    cmd = commands.add_parser("get-all-roles", help="Show every role of a type")
    cmd.add_argument("role_type", type=parse_role_type)

    cmd = commands.add_parser("get-assignments", help="Show SID to role assignments")
    cmd.add_argument("role_type", type=parse_role_type)

    for name, noun in (("matching-jobs", "jobs"), ("matching-agents", "agents")):
        cmd = commands.add_parser(name, help=f"List {noun} matching a pattern")
        cmd.add_argument("pattern")
        cmd.add_argument("--max", type=int, default=DEFAULT_MAX_MATCHES, dest="max_items")

    cmd = commands.add_parser("role-names", help="List role names of a type")
    cmd.add_argument("role_type", type=parse_role_type)

    return parser


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def run_command(client: RoleStrategyClient, args: argparse.Namespace) -> Any:
    command = args.command

    if command == "add-template":
        return client.add_template(args.name, args.permission_ids, overwrite=args.overwrite)
    if command == "remove-templates":
        return client.remove_templates(args.names, force=args.force)
    if command == "add-role":
        return client.add_role(
            args.role_type,
            args.role_name,
            args.permission_ids,
            overwrite=args.overwrite,
            pattern=args.pattern,
            template=args.template,
        )
    if command == "remove-roles":
        return client.remove_roles(args.role_type, args.role_names)
    if command == "assign":
        if args.group:
            return client.assign_group_role(args.role_type, args.role_name, args.sid)
        return client.assign_user_role(args.role_type, args.role_name, args.sid)
    if command == "unassign":
        if args.group:
            return client.unassign_group_role(args.role_type, args.role_name, args.sid)
        return client.unassign_user_role(args.role_type, args.role_name, args.sid)
    if command == "delete-sid":
        if args.group:
            return client.delete_group(args.role_type, args.sid)
        return client.delete_user(args.role_type, args.sid)
    if command == "get-template":
        return client.get_template(args.name)
    if command == "get-role":
        return client.get_role(args.role_type, args.role_name)
    if command == "get-all-roles":
        return client.get_all_roles(args.role_type)
    if command == "get-assignments":
        return client.get_role_assignments(args.role_type)
    if command == "matching-jobs":
        return client.get_matching_jobs(args.pattern, args.max_items)
    if command == "matching-agents":
        return client.get_matching_agents(args.pattern, args.max_items)
    if command == "role-names":
        return client.get_role_names(args.role_type)

    raise ValueError(f"Unsupported command '{command}'")


def main(argv: Optional[List[str]] = None, session: Optional[requests.Session] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.debug)
    logger = logging.getLogger("role_strategy_cli")

    config = build_config(args)
    with RoleStrategyClient(config, session=session) as client:
        try:
            result = run_command(client, args)
        except (RoleStrategyError, requests.RequestException) as exc:
            logger.error("%s", exc)
            return 1

    if result is None:
        logger.info("%s ok", args.command)
    else:
        sys.stdout.write(json.dumps(_to_jsonable(result), indent=2, ensure_ascii=True) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
