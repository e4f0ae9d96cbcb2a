from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from rolestrategy.core.types import DEFAULT_BASE_URL


_FALSE_VALUES = {"0", "false", "no", "off"}


def normalize_base_url(url: Optional[str]) -> str:
    base = (url or "").strip() or DEFAULT_BASE_URL
    if not base.endswith("/"):
        base += "/"
    return base


@dataclass(slots=True, frozen=True)
class ClientConfig:
    base_url: str
    username: str
    api_token: str = field(repr=False)
    timeout_seconds: Optional[float] = None
    verify_tls: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

    @staticmethod
    def from_env() -> "ClientConfig":
        raw_timeout = os.getenv("JENKINS_TIMEOUT_SECONDS", "").strip()
        raw_verify = os.getenv("JENKINS_VERIFY_TLS", "true").strip().lower()

        return ClientConfig(
            base_url=os.getenv("JENKINS_URL", DEFAULT_BASE_URL),
            username=os.getenv("JENKINS_USER", ""),
            api_token=os.getenv("JENKINS_API_TOKEN", ""),
            timeout_seconds=float(raw_timeout) if raw_timeout else None,
            verify_tls=raw_verify not in _FALSE_VALUES,
        )
