import io
import json
import os
import sys
from http.client import responses as HTTP_REASONS

import pytest
import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rolestrategy.api.client import RoleStrategyClient
from rolestrategy.core.config import ClientConfig


BASE_URL = "http://jenkins.local/jenkins"
PREFIX = f"{BASE_URL}/role-strategy/strategy"


class RecordingAdapter(HTTPAdapter):
    """Answers from a queue of canned responses and keeps every request it saw."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.send_kwargs = []
        self._replies = []
        self.error = None

    def reply(self, status=200, body=b"", reason=None, content_type=None):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            content_type = content_type or "application/json"
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._replies.append((status, body, reason, content_type))

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        self.send_kwargs.append({"timeout": timeout, "verify": verify})
        if self.error is not None:
            raise self.error

        status, body, reason, content_type = self._replies.pop(0) if self._replies else (200, b"", None, None)
        response = requests.Response()
        response.status_code = status
        response.reason = reason if reason is not None else HTTP_REASONS.get(status, "")
        response.headers = CaseInsensitiveDict({"Content-Type": content_type or "text/plain"})
        response.raw = io.BytesIO(body)
        response._content = body
        response._content_consumed = True
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    @property
    def last(self):
        return self.sent[-1]


@pytest.fixture()
def adapter():
    return RecordingAdapter()


@pytest.fixture()
def session(adapter):
    http = requests.Session()
    http.trust_env = False
    http.mount("http://", adapter)
    http.mount("https://", adapter)
    try:
        yield http
    finally:
        http.close()


@pytest.fixture()
def config():
    return ClientConfig(base_url=BASE_URL, username="admin", api_token="secret-token")


@pytest.fixture()
def client(config, session):
    return RoleStrategyClient(config, session=session)
