"""
wiremock-testkit Propagation Module

Carries a per-test identity token through the call context and HTTP headers.

This module provides:
- Test id generation and the RunningTest handle
- Context helpers (bind, derive, read)
- Header helpers for outgoing requests
- Inbound ASGI middleware and outbound requests/httpx transports
- A logging filter exposing the test id
"""

from .identity import (
    TEST_ID_HEADER,
    RunningTest,
    create_test_id,
    get_test_id,
    set_test_id,
    reset_test_id,
    use_test_id,
    context_for_test,
    request_for_test,
    headers_for_test,
    TestIDLogFilter
)
from .middleware import (
    TestIDMiddleware,
    TestIDAdapter,
    TestIDTransport,
    AsyncTestIDTransport,
    mount_test_id_adapter
)

__all__ = [
    # Test identity
    'TEST_ID_HEADER',
    'RunningTest',
    'create_test_id',
    'get_test_id',
    'set_test_id',
    'reset_test_id',
    'use_test_id',
    'context_for_test',
    'request_for_test',
    'headers_for_test',
    'TestIDLogFilter',

    # Middleware
    'TestIDMiddleware',
    'TestIDAdapter',
    'TestIDTransport',
    'AsyncTestIDTransport',
    'mount_test_id_adapter',
]
