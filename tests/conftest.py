"""Shared fixtures for wiremock-testkit tests."""

from unittest.mock import Mock

import pytest
import requests

from fake_wiremock import ASGIAdapter, FakeWireMock, WIREMOCK_URL
from wiremock_testkit import RunningTest, WireMockClient


@pytest.fixture
def fake_wiremock():
    """Fresh fake WireMock server."""
    return FakeWireMock()


@pytest.fixture
def wiremock_session(fake_wiremock):
    """requests Session routed to the fake server."""
    session = requests.Session()
    session.mount(WIREMOCK_URL, ASGIAdapter(fake_wiremock.app))

    yield session

    session.close()


@pytest.fixture
def client(wiremock_session):
    """WireMockClient talking to the fake server."""
    return WireMockClient(WIREMOCK_URL, session=wiremock_session)


@pytest.fixture
def running_test():
    return RunningTest('tests/test_example.py::test_example')


@pytest.fixture
def make_response():
    """Factory for canned requests.Response objects."""
    def _make(status_code: int, body: str = '') -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response._content = body.encode('utf-8')
        response.encoding = 'utf-8'
        return response

    return _make


@pytest.fixture
def mock_session():
    """Session double; set request.return_value or request.side_effect per test."""
    return Mock(spec=requests.Session)
