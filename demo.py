from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import requests

# Ensure the package is importable when running directly.
sys.path.append(str(Path(__file__).resolve().parent))

from rolestrategy.api.client import RoleStrategyClient
from rolestrategy.cli import build_config, setup_logging
from rolestrategy.core.errors import RoleStrategyError
from rolestrategy.core.types import RoleType


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Role Strategy walkthrough")
    parser.add_argument("--url", type=str, default=None, help="Jenkins base URL (default: $JENKINS_URL)")
    parser.add_argument("--user", type=str, default=None, help="Jenkins user name (default: $JENKINS_USER)")
    parser.add_argument("--token", type=str, default=None, help="Jenkins API token (default: $JENKINS_API_TOKEN)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("--role", type=str, default="dev-lead", help="Global role to create")
    parser.add_argument("--assignee", type=str, default="alice", help="User to assign to the role")
    parser.add_argument("--debug", action="store_true", help="Enable verbose logs")
    return parser


def run_walkthrough(client: RoleStrategyClient, role_name: str, assignee: str, logger: logging.Logger) -> int:
    try:
        client.add_template("developer", ["hudson.model.Item.Read", "hudson.model.Item.Build"], overwrite=True)
        logger.info("Template 'developer' saved")

        client.add_role(RoleType.GLOBAL, role_name, "hudson.model.Hudson.Administer", overwrite=True)
        logger.info("Role '%s' saved", role_name)

        client.assign_user_role(RoleType.GLOBAL, role_name, assignee)
        logger.info("Assigned '%s' to '%s'", assignee, role_name)

        role = client.get_role(RoleType.GLOBAL, role_name)
        logger.info("Role | permissions=%s sids=%s", sorted(role.permission_ids), [s.sid for s in role.sids])

        for assignment in client.get_role_assignments(RoleType.GLOBAL):
            logger.info("Assignment | %s (%s) -> %s", assignment.name, assignment.type, assignment.roles)

        logger.info("Global roles: %s", client.get_global_role_names())
        logger.info("Project roles: %s", client.get_project_role_names())
    except (RoleStrategyError, requests.RequestException) as exc:
        logger.error("Walkthrough stopped: %s", exc)
        return 1

    return 0


def main(argv: Optional[List[str]] = None, session: Optional[requests.Session] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    setup_logging(args.debug)
    logger = logging.getLogger("RoleStrategyDemo")

    config = build_config(args)
    logger.info("Connecting to %s as %s", config.base_url, config.username or "<anonymous>")

    with RoleStrategyClient(config, session=session) as client:
        return run_walkthrough(client, args.role, args.assignee, logger)


if __name__ == "__main__":
    sys.exit(main())
