from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.auth import HTTPBasicAuth

from rolestrategy.api.encoding import Params
from rolestrategy.core.config import ClientConfig


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class RequestBuilder:
    """
    Turns (method, path, body) into an authenticated request for one Jenkins
    instance and sends it through a shared requests.Session.
    """

    def __init__(self, config: ClientConfig, session: requests.Session):
        self.config = config
        self.session = session
        self.logger = logging.getLogger(__name__)

    def url_for(self, path: str) -> str:
        # base_url always ends with '/', so a leading '/' on path would double it.
        return self.config.base_url + path.lstrip("/")

    def build(
        self,
        method: str,
        path: str,
        *,
        body: Optional[str] = None,
        params: Optional[Params] = None,
    ) -> requests.PreparedRequest:
        headers = {}
        if body:
            headers["Content-Type"] = FORM_CONTENT_TYPE

        request = requests.Request(
            method=method,
            url=self.url_for(path),
            params=params or None,
            data=body or None,
            headers=headers,
            # Credentials go out as UTF-8 bytes.
            auth=HTTPBasicAuth(self.config.username.encode("utf-8"), self.config.api_token.encode("utf-8")),
        )
        return self.session.prepare_request(request)

    def send(self, prepared: requests.PreparedRequest) -> requests.Response:
        self.logger.debug("%s %s", prepared.method, prepared.url)
        settings = self.session.merge_environment_settings(
            prepared.url, {}, None, self.config.verify_tls, None
        )
        response = self.session.send(prepared, timeout=self.config.timeout_seconds, **settings)
        self.logger.debug("%s %s -> %s", prepared.method, prepared.url, response.status_code)
        return response
