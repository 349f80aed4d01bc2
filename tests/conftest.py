"""Shared fixtures for the Paylink client tests."""

import json
from unittest.mock import Mock

import pytest
import requests

from paylink_payments import MerchantClient, PartnerClient

TOKEN = "token-abc"


def build_response(status_code=200, payload=None, text=None):
    """Build a real ``requests.Response`` carrying ``payload`` as JSON."""
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = "" if payload is None else json.dumps(payload)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def session():
    """A mocked session whose authentication call succeeds."""
    mock_session = Mock(spec=requests.Session)
    mock_session.post.return_value = build_response(200, {"id_token": TOKEN})
    return mock_session


@pytest.fixture
def merchant_client(session):
    return MerchantClient.test(session=session)


@pytest.fixture
def partner_client(session):
    return PartnerClient.test("PROFILE-1", "partner-key", session=session)
