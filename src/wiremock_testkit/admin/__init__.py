"""
wiremock-testkit Admin Module

Client for the WireMock admin API and the per-test stub registry.
"""

from .client import WireMockClient, ADMIN_PATH, MAPPINGS_PATH
from .registry import StubRegistry, RegisteredStub

__all__ = [
    'WireMockClient',
    'ADMIN_PATH',
    'MAPPINGS_PATH',
    'StubRegistry',
    'RegisteredStub',
]
