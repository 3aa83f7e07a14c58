"""
wiremock-testkit

Test-support client for WireMock: per-test stub mappings, request
verification, and test id propagation across HTTP boundaries.
"""

from .admin import WireMockClient, StubRegistry, RegisteredStub
from .common import (
    ClientConfig,
    WireMockError,
    TransportError,
    UnexpectedStatusError,
    DecodeError,
    ValidationError
)
from .propagation import (
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
    TestIDLogFilter,
    TestIDMiddleware,
    TestIDAdapter,
    TestIDTransport,
    AsyncTestIDTransport,
    mount_test_id_adapter
)

__all__ = [
    # Admin client
    'WireMockClient',
    'StubRegistry',
    'RegisteredStub',
    'ClientConfig',

    # Errors
    'WireMockError',
    'TransportError',
    'UnexpectedStatusError',
    'DecodeError',
    'ValidationError',

    # Propagation
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
    'TestIDMiddleware',
    'TestIDAdapter',
    'TestIDTransport',
    'AsyncTestIDTransport',
    'mount_test_id_adapter',
]

__version__ = '1.0.0'
