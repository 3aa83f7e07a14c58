"""
wiremock-testkit Configuration

Connection settings for the WireMock admin client.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "http://localhost:8080"

ENV_BASE_URL = "WIREMOCK_URL"
ENV_TIMEOUT = "WIREMOCK_TIMEOUT"
ENV_VERIFY_SSL = "WIREMOCK_VERIFY_SSL"

_FALSE_VALUES = ('0', 'false', 'no', 'off')


@dataclass
class ClientConfig:
    """Configuration for a WireMockClient."""

    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # Seconds; None waits forever
    verify_ssl: bool = True

    def __post_init__(self):
        self.base_url = self.base_url.rstrip('/')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ClientConfig':
        """
        Build configuration from environment variables.

        Reads WIREMOCK_URL, WIREMOCK_TIMEOUT and WIREMOCK_VERIFY_SSL. Unset
        variables keep their defaults.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Raises:
            ValueError: If WIREMOCK_TIMEOUT is not a number

        Example:
            config = ClientConfig.from_env()
            client = WireMockClient.from_config(config)
        """
        environ = os.environ if environ is None else environ

        timeout = None
        raw_timeout = environ.get(ENV_TIMEOUT, '').strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ValueError(
                    f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}"
                ) from e

        verify_ssl = environ.get(ENV_VERIFY_SSL, '').strip().lower() not in _FALSE_VALUES

        return cls(
            base_url=environ.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
            timeout=timeout,
            verify_ssl=verify_ssl
        )
