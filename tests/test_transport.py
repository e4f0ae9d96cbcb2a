import base64
import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rolestrategy.api.transport import FORM_CONTENT_TYPE, RequestBuilder
from rolestrategy.core.config import ClientConfig


def _basic(user: str, token: str) -> str:
    return "Basic " + base64.b64encode(f"{user}:{token}".encode("utf-8")).decode("ascii")


@pytest.fixture()
def builder(config, session):
    return RequestBuilder(config, session)


def test_post_carries_form_body_and_basic_auth(builder):
    prepared = builder.build("POST", "role-strategy/strategy/addRole", body="type=globalRoles")

    assert prepared.method == "POST"
    assert prepared.url == "http://jenkins.local/jenkins/role-strategy/strategy/addRole"
    assert prepared.body == "type=globalRoles"
    assert prepared.headers["Content-Type"] == FORM_CONTENT_TYPE
    assert prepared.headers["Authorization"] == _basic("admin", "secret-token")


def test_get_without_body_has_no_content_type(builder):
    prepared = builder.build("GET", "role-strategy/strategy/getAllRoles", params={"type": "projectRoles"})

    assert prepared.url == "http://jenkins.local/jenkins/role-strategy/strategy/getAllRoles?type=projectRoles"
    assert prepared.body is None
    assert "Content-Type" not in prepared.headers
    assert prepared.headers["Authorization"] == _basic("admin", "secret-token")


def test_leading_slash_on_path_does_not_double(builder):
    assert builder.url_for("/role-strategy/strategy/getRole") == builder.url_for("role-strategy/strategy/getRole")


def test_base_url_with_or_without_slash_targets_same_url(session):
    plain = RequestBuilder(ClientConfig("http://ci/jenkins", "u", "t"), session)
    slashed = RequestBuilder(ClientConfig("http://ci/jenkins/", "u", "t"), session)

    assert plain.build("GET", "x/y").url == slashed.build("GET", "x/y").url == "http://ci/jenkins/x/y"


def test_send_uses_transport_default_timeout(builder, adapter):
    builder.send(builder.build("GET", "role-strategy/strategy/getAllRoles"))

    assert adapter.send_kwargs[-1]["timeout"] is None
    assert adapter.send_kwargs[-1]["verify"] is True


def test_send_forwards_configured_timeout_and_tls(session, adapter):
    config = ClientConfig("http://ci", "u", "t", timeout_seconds=7.5, verify_tls=False)
    builder = RequestBuilder(config, session)

    builder.send(builder.build("GET", "ping"))

    assert adapter.send_kwargs[-1] == {"timeout": 7.5, "verify": False}


def test_transport_errors_propagate(builder, adapter):
    adapter.error = requests.ConnectionError("dns failure")

    with pytest.raises(requests.ConnectionError, match="dns failure"):
        builder.send(builder.build("GET", "ping"))


def test_non_latin1_credentials_are_sent_as_utf8(session):
    builder = RequestBuilder(ClientConfig("http://ci", "用户", "tök"), session)

    prepared = builder.build("POST", "role-strategy/strategy/deleteUser", body="type=globalRoles&user=bob")

    assert prepared.headers["Authorization"] == _basic("用户", "tök")
