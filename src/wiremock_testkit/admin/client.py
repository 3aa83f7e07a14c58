"""
wiremock-testkit Admin Client

Synchronous client for the WireMock admin API with per-test stub bookkeeping.

Features:
- Register, delete and reset stub mappings
- Count and verify received requests
- Track which stubs each test registered and remove only those
- Build per-test endpoints so parallel tests never share a URL
"""

import logging
from typing import Any, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from ..common import (
    ClientConfig,
    DEFAULT_BASE_URL,
    WireMockError,
    TransportError,
    UnexpectedStatusError,
    DecodeError,
    ValidationError,
    serialize_payload,
    extract_stub_id,
    body_snippet
)
from ..propagation import RunningTest
from .registry import StubRegistry, RegisteredStub

ADMIN_PATH = "__admin"
MAPPINGS_PATH = f"{ADMIN_PATH}/mappings"


class WireMockClient:
    """
    Client for a WireMock server's admin API.

    Library calls raise WireMockError subclasses. The *_for_test variants
    report failures through the RunningTest instead: setup and teardown
    errors abort the test, count mismatches are recorded and the test goes on.

    Each client owns its stub registry, so independent clients never see
    each other's bookkeeping.

    Example:
        client = WireMockClient('http://localhost:8080')
        client.stub_for_test(test, {
            'request': {'method': 'GET', 'url': '/users/1'},
            'response': {'status': 200, 'body': '{"id": 1}'}
        })
        ...
        client.verify_for_test(test, {'method': 'GET', 'url': '/users/1'}, 1)
        client.clear_for_test(test)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        verify_ssl: bool = True
    ):
        """
        Initialize admin client.

        Args:
            base_url: WireMock server URL, e.g. 'http://localhost:8080'
            session: Optional requests Session (will create one if None)
            timeout: Request timeout in seconds (None waits forever)
            verify_ssl: Whether to verify SSL certificates
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        self._owns_session = session is None
        self.session = session or self._create_session()

        self.stubs = StubRegistry()
        self.logger = logging.getLogger("wiremock_testkit.admin")

    @classmethod
    def from_config(cls, config: ClientConfig, session: Optional[requests.Session] = None) -> 'WireMockClient':
        """Create a client from a ClientConfig."""
        return cls(
            base_url=config.base_url,
            session=session,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl
        )

    @property
    def url(self) -> str:
        """Base URL of the WireMock server."""
        return self.base_url

    def _create_session(self) -> requests.Session:
        """Create HTTP session without retries; every admin call is a single round trip."""
        session = requests.Session()

        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        expected_status: int = 200
    ) -> requests.Response:
        """
        Send one admin API request.

        Args:
            method: HTTP method
            path: Path below the base URL, without leading slash
            payload: Optional stub/criteria to send as JSON
            expected_status: Status code meaning success

        Returns:
            The response

        Raises:
            ValidationError: If payload cannot be serialized
            TransportError: If no response was received
            UnexpectedStatusError: If the status code is not expected_status
        """
        url = f"{self.base_url}/{path}"
        body = serialize_payload(payload) if payload is not None else None

        self.logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                data=body,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except requests.RequestException as e:
            self.logger.warning(f"{method} {url} failed: {e}")
            raise TransportError(f"{method} {url}: request error: {e}") from e

        if response.status_code != expected_status:
            self.logger.warning(f"{method} {url} returned {response.status_code}")
            raise UnexpectedStatusError(response.status_code, response.text, method=method, url=url)

        return response

    def _created_stub_id(self, response: requests.Response) -> str:
        """Read the id WireMock assigned to a newly created mapping."""
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"stub request: read json error: {e}", response.text) from e

        stub_id = extract_stub_id(data) if isinstance(data, dict) else None
        if not stub_id:
            raise DecodeError("stub request: created mapping has no id", response.text)
        return stub_id

    # Stub mappings

    def stub_for(self, stub: Any) -> str:
        """
        Create a new stub mapping.

        Args:
            stub: Mapping definition (dict or object with to_dict())

        Returns:
            The stub id: the definition's own id, else the one assigned by the server

        Raises:
            DecodeError: If the server created the mapping but returned no id for it.
                The error keeps the response body, so the mapping can still be found.
        """
        stub_id = extract_stub_id(stub)
        response = self._request('POST', MAPPINGS_PATH, payload=stub, expected_status=201)

        if not stub_id:
            try:
                stub_id = self._created_stub_id(response)
            except DecodeError:
                # The mapping exists on the server but cannot be deleted by id
                self.logger.warning(
                    f"Stub mapping created without a readable id, it will not be cleaned up: "
                    f"{body_snippet(response.text)}"
                )
                raise

        self.logger.debug(f"Created stub {stub_id}")
        return stub_id

    def stub_for_test(self, test: RunningTest, stub: Any):
        """
        Create a stub mapping owned by a test.

        The stub is remembered so clear_for_test() can delete it. Any error
        aborts the test.
        """
        try:
            stub_id = self.stub_for(stub)
        except WireMockError as e:
            test.fatal(f"stub request error: {e}")
        else:
            self.stubs.add(test.uid, RegisteredStub(stub_id=stub_id, definition=stub))

    def clear(self):
        """Delete all stub mappings on the server. The stub registry is left as is."""
        self._request('DELETE', MAPPINGS_PATH)

    def clear_for_test(self, test: RunningTest):
        """
        Delete every stub mapping registered by a test.

        The first failed delete aborts the test; remaining stubs are not
        deleted. Does nothing if the test registered no stubs.
        """
        registered = self.stubs.pop(test.uid)

        for stub in registered:
            try:
                self.delete_stub_by_id(stub.stub_id)
            except WireMockError as e:
                test.fatal(f"delete stub error: {e}")
                return

        if registered:
            self.logger.debug(f"Deleted {len(registered)} stubs of {test.test_id}")

    def delete_stub_by_id(self, stub_id: str):
        """Delete one stub mapping by its id."""
        if not stub_id:
            raise ValidationError("delete stub by id: empty id")
        self._request('DELETE', f"{MAPPINGS_PATH}/{stub_id}")

    def delete_stub(self, stub: Any):
        """Delete the stub mapping a definition was registered as."""
        stub_id = extract_stub_id(stub)
        if not stub_id:
            raise ValidationError(f"delete stub: {type(stub).__name__} has no id")
        self.delete_stub_by_id(stub_id)

    def reset(self):
        """Restore stub mappings to the defaults defined in the server's backing store."""
        self._request('POST', f"{MAPPINGS_PATH}/reset")

    def reset_all_scenarios(self):
        """Move every scenario back to its start state."""
        self._request('POST', f"{ADMIN_PATH}/scenarios/reset")

    # Request verification

    def count_requests(self, criteria: Any) -> int:
        """
        Count received requests matching criteria.

        Args:
            criteria: Request pattern (dict or object with to_dict())

        Returns:
            Number of matching requests

        Raises:
            DecodeError: If the response is not a JSON object with an integer 'count'
        """
        response = self._request('POST', f"{ADMIN_PATH}/requests/count", payload=criteria)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"count requests: read json error: {e}", response.text) from e

        count = data.get('count') if isinstance(data, dict) else None
        # bool is an int subclass but never a valid count
        if isinstance(count, bool) or not isinstance(count, int):
            raise DecodeError(
                f"count requests: expected integer 'count', got {count!r}",
                response.text
            )

        return count

    def verify(self, criteria: Any, expected_count: int) -> bool:
        """Check whether exactly expected_count requests matched criteria."""
        return self.count_requests(criteria) == expected_count

    def verify_for_test(self, test: RunningTest, criteria: Any, expected_count: int) -> bool:
        """
        Check the number of matching requests within a test.

        Errors talking to the server abort the test. A count mismatch is
        recorded on the test, which keeps running.

        Returns:
            True if the count matched
        """
        try:
            actual_count = self.count_requests(criteria)
        except WireMockError as e:
            test.fatal(f"get count requests error: {e}")
            return False

        if actual_count != expected_count:
            test.error(
                f"number of requests does not match, expected {expected_count}, actual {actual_count}"
            )
            return False
        return True

    # Per-test endpoints

    def build_test_endpoint(self, test: RunningTest, api_path: str) -> Tuple[str, str]:
        """
        Build a URL namespaced to a test.

        Args:
            test: Test owning the endpoint
            api_path: Path with or without a leading '/'

        Returns:
            (endpoint, expected_path): full URL for the service under test,
            and the path a stub should match

        Example:
            endpoint, path = client.build_test_endpoint(test, 'users')
            # path == '/<uid>/users', endpoint == base_url + path
        """
        api_path = '/' + api_path.lstrip('/')
        expected_path = f"/{test.uid}{api_path}"
        return f"{self.base_url}{expected_path}", expected_path
