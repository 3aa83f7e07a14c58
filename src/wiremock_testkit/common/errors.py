"""
wiremock-testkit Errors

Exception hierarchy raised by the admin client.

Every remote call fails in one of three ways, each with its own type so
callers can tell them apart:
- TransportError: the server could not be reached
- UnexpectedStatusError: the server answered with the wrong status code
- DecodeError: the server answered but the body could not be understood

ValidationError covers payloads that cannot be sent at all.
"""

from typing import Optional

BODY_SNIPPET_LIMIT = 500


def body_snippet(body: Optional[str], limit: int = BODY_SNIPPET_LIMIT) -> str:
    """
    Shorten a response body for use in error messages.

    Args:
        body: Response body text
        limit: Maximum number of characters to keep

    Returns:
        The body, truncated with a marker if it was longer than limit
    """
    if not body:
        return ""
    if len(body) <= limit:
        return body
    return f"{body[:limit]}... ({len(body) - limit} more chars)"


class WireMockError(Exception):
    """Base class for all wiremock-testkit errors."""


class TransportError(WireMockError):
    """Request never produced a response (connection refused, timeout, ...)."""


class UnexpectedStatusError(WireMockError):
    """
    Server was reachable but answered with an unexpected status code.

    The status code and the response body are kept on the exception so
    failures can be diagnosed without re-running the test.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        method: Optional[str] = None,
        url: Optional[str] = None
    ):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url

        target = f"{method} {url}: " if method and url else ""
        super().__init__(
            f"{target}bad response status: {status_code}, response: {body_snippet(body)}"
        )


class DecodeError(WireMockError):
    """Response body was not the JSON document the admin API promises."""

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(f"{message}, response: {body_snippet(body)}" if body else message)


class ValidationError(WireMockError):
    """Stub definition or request criteria cannot be serialized or identified."""
