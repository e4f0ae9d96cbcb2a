from __future__ import annotations

from typing import Optional

import requests


class RoleStrategyError(Exception):
    """Base class for every error raised by this package."""


class RoleStrategyHTTPError(RoleStrategyError, requests.HTTPError):
    """The server answered with a status other than 200."""

    def __init__(
        self,
        operation: str,
        response: requests.Response,
        *,
        include_body: bool = False,
    ):
        self.operation = operation
        self.status_code = int(response.status_code)
        self.reason = response.reason or ""
        self.body: Optional[str] = response.text if include_body else None

        message = f"{operation} failed: {self.status_code} {self.reason}".rstrip()
        if self.body is not None:
            message = f"{message}: {self.body}"
        super().__init__(message, response=response)


class ResponseDecodeError(RoleStrategyError, ValueError):
    """A 200 response whose body is not the JSON shape the operation expects."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: could not decode response body: {detail}")
