"""
wiremock-testkit Common Utilities

Errors, configuration and payload helpers shared across wiremock-testkit modules.
"""

from .errors import (
    WireMockError,
    TransportError,
    UnexpectedStatusError,
    DecodeError,
    ValidationError,
    body_snippet
)
from .config import ClientConfig, DEFAULT_BASE_URL
from .utils import serialize_payload, extract_stub_id

__all__ = [
    'WireMockError',
    'TransportError',
    'UnexpectedStatusError',
    'DecodeError',
    'ValidationError',
    'ClientConfig',
    'DEFAULT_BASE_URL',
    'serialize_payload',
    'extract_stub_id',
    'body_snippet'
]
