"""
wiremock-testkit Propagation Middleware

Moves the test id between the ambient context and HTTP headers:
- TestIDMiddleware: inbound, ASGI (FastAPI, Starlette, ...)
- TestIDAdapter: outbound, requests transport adapter
- TestIDTransport / AsyncTestIDTransport: outbound, httpx transports

Propagation is best-effort. A missing header or an empty context never
fails a request; the request simply goes through unchanged.
"""

import logging
from typing import Optional

import httpx
import requests
from requests.adapters import HTTPAdapter

from .identity import TEST_ID_HEADER, get_test_id, set_test_id, reset_test_id

logger = logging.getLogger("wiremock_testkit.propagation")

# ASGI header names are lowercase bytes
_HEADER_KEY = TEST_ID_HEADER.lower().encode('latin-1')


def _scope_test_id(scope) -> str:
    for name, value in scope.get('headers', []):
        if name.lower() == _HEADER_KEY:
            return value.decode('latin-1').strip()
    return ""


class TestIDMiddleware:
    """
    ASGI middleware binding the incoming test id header to the request context.

    Handlers (and anything they call, including outbound clients using
    TestIDAdapter or TestIDTransport) see the token through get_test_id().

    Example:
        app = FastAPI()
        app.add_middleware(TestIDMiddleware)
    """

    __test__ = False

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope['type'] not in ('http', 'websocket'):
            await self.app(scope, receive, send)
            return

        test_id = _scope_test_id(scope)
        if not test_id:
            await self.app(scope, receive, send)
            return

        logger.debug(f"Inbound {scope.get('path', '')} for test {test_id}")
        token = set_test_id(test_id)
        try:
            await self.app(scope, receive, send)
        finally:
            reset_test_id(token)


class TestIDAdapter(HTTPAdapter):
    """
    requests transport adapter stamping the ambient test id on every request.

    Example:
        session = requests.Session()
        mount_test_id_adapter(session)
        with use_test_id(test):
            session.get(url)
    """

    __test__ = False

    def send(self, request, *args, **kwargs):
        test_id = get_test_id()
        if test_id:
            request.headers[TEST_ID_HEADER] = test_id
        return super().send(request, *args, **kwargs)


def mount_test_id_adapter(session: requests.Session, **adapter_kwargs) -> requests.Session:
    """
    Mount TestIDAdapter on a session for http:// and https:// URLs.

    Args:
        session: Session to configure
        **adapter_kwargs: Passed to HTTPAdapter (pool sizes, max_retries, ...)

    Returns:
        The same session
    """
    adapter = TestIDAdapter(**adapter_kwargs)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _stamp_httpx_request(request: httpx.Request):
    test_id = get_test_id()
    if test_id:
        request.headers[TEST_ID_HEADER] = test_id


class TestIDTransport(httpx.BaseTransport):
    """
    httpx transport wrapping another transport and stamping the ambient test id.

    Example:
        client = httpx.Client(transport=TestIDTransport())
    """

    __test__ = False

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self.transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        _stamp_httpx_request(request)
        return self.transport.handle_request(request)

    def close(self) -> None:
        self.transport.close()


class AsyncTestIDTransport(httpx.AsyncBaseTransport):
    """Async counterpart of TestIDTransport."""

    __test__ = False

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        _stamp_httpx_request(request)
        return await self.transport.handle_async_request(request)

    async def aclose(self) -> None:
        await self.transport.aclose()
