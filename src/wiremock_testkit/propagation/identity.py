"""
wiremock-testkit Test Identity

Generates a unique token per running test and carries it through the
ambient call context and HTTP headers, so requests seen by the mock
server (or by logs) can be attributed to the test that issued them.

The header name and the context variable below are the only carriers of
the token; every reader and writer in this package goes through them.
"""

import logging
import uuid
import warnings
import weakref
from contextlib import contextmanager
from contextvars import ContextVar, Context, Token, copy_context
from dataclasses import dataclass, field
from typing import Iterator, List, MutableMapping, Optional, Union

import pytest

TEST_ID_HEADER = "X-Wiremock-Test-ID"

_test_id_var: ContextVar[str] = ContextVar("wiremock_test_id", default="")

logger = logging.getLogger("wiremock_testkit.propagation")


def new_test_uid() -> str:
    return uuid.uuid4().hex


def _warn_unreported(test_id: str, failures: List[str]):
    # Runs when a RunningTest is garbage collected or at interpreter exit
    if failures:
        message = f"[{test_id}] failures were recorded but never reported: " + "; ".join(failures)
        logger.error(message)
        warnings.warn(message, RuntimeWarning)


@dataclass(eq=False)
class RunningTest:
    """
    Handle for one executing test.

    Two handles never share a uid, even when their names are identical, so
    tests running in parallel against the same mock server stay apart.
    The handle also decides what a failure means for the test: fatal()
    aborts it, error() records the failure and lets it continue.

    Recorded failures must be reported with check_failures() (the pytest
    plugin does it for the wiremock_test fixture). A handle dropped with
    failures still pending logs them and emits a RuntimeWarning.

    Example:
        test = RunningTest(request.node.nodeid)
        client.stub_for_test(test, stub)
        ...
        client.clear_for_test(test)
        test.check_failures()
    """

    name: str
    uid: str = field(default_factory=new_test_uid)
    failures: List[str] = field(default_factory=list)

    def __post_init__(self):
        weakref.finalize(self, _warn_unreported, self.test_id, self.failures)

    @property
    def test_id(self) -> str:
        """Token identifying this test in contexts and headers."""
        return create_test_id(self)

    def fatal(self, message: str):
        """Abort the test immediately."""
        logger.error(f"[{self.test_id}] {message}")
        pytest.fail(message, pytrace=False)

    def error(self, message: str):
        """Record a failure without stopping the test."""
        logger.warning(f"[{self.test_id}] {message}")
        self.failures.append(message)

    def check_failures(self):
        """Fail the test if error() was called at least once."""
        if self.failures:
            pytest.fail(self.pop_failures(), pytrace=False)

    def pop_failures(self) -> str:
        """Return the recorded failures as one message and mark them reported."""
        message = "\n".join(self.failures)
        self.failures.clear()
        return message


TestRef = Union[RunningTest, str]


def create_test_id(test: RunningTest) -> str:
    """Build the propagation token for a test: '<name>:<uid>'."""
    return f"{test.name}:{test.uid}"


def _resolve_test_id(test: TestRef) -> str:
    if isinstance(test, RunningTest):
        return create_test_id(test)
    return test


def set_test_id(test: TestRef) -> Token:
    """Bind a token to the current context. Pass the result to reset_test_id()."""
    return _test_id_var.set(_resolve_test_id(test))


def reset_test_id(token: Token) -> None:
    _test_id_var.reset(token)


@contextmanager
def use_test_id(test: TestRef) -> Iterator[str]:
    """
    Bind a test's token to the current context for the duration of a block.

    Example:
        with use_test_id(test):
            session.get(service_url)  # sent with X-Wiremock-Test-ID
    """
    token = set_test_id(test)
    try:
        yield _test_id_var.get()
    finally:
        reset_test_id(token)


def context_for_test(test: TestRef, ctx: Optional[Context] = None) -> Context:
    """
    Derive a context carrying the test's token.

    Args:
        test: RunningTest or an already built token
        ctx: Context to derive from (defaults to a copy of the current one)

    Returns:
        A new Context; ctx itself is left untouched

    Example:
        ctx = context_for_test(test)
        ctx.run(call_service)
    """
    derived = ctx.copy() if ctx is not None else copy_context()
    derived.run(_test_id_var.set, _resolve_test_id(test))
    return derived


def get_test_id(ctx: Optional[Context] = None) -> str:
    """
    Read the token carried by a context.

    Args:
        ctx: Context to read (defaults to the current one)

    Returns:
        The token, or '' if the context carries none (this is not an error)
    """
    if ctx is None:
        return _test_id_var.get()
    return ctx.get(_test_id_var, "")


def request_for_test(request, test: TestRef):
    """
    Stamp the test's token on an outgoing request in place.

    Works with requests.Request, requests.PreparedRequest and httpx.Request.

    Returns:
        The same request object
    """
    headers_for_test(request.headers, test)
    return request


def headers_for_test(headers: MutableMapping[str, str], test: TestRef) -> MutableMapping[str, str]:
    """
    Set the test id header in a headers mapping.

    Plain dicts are case-sensitive, so any existing spelling of the header
    is replaced rather than duplicated.
    """
    header_lower = TEST_ID_HEADER.lower()
    for key in [k for k in headers if k.lower() == header_lower and k != TEST_ID_HEADER]:
        del headers[key]
    headers[TEST_ID_HEADER] = _resolve_test_id(test)
    return headers


class TestIDLogFilter(logging.Filter):
    """Adds the current test id to log records as record.test_id."""

    __test__ = False

    def filter(self, record: logging.LogRecord) -> bool:
        record.test_id = get_test_id() or "-"
        return True
