"""
wiremock-testkit Stub Registry

Remembers which stub mappings each test registered so a test can remove
its own stubs without touching those of tests sharing the same server.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class RegisteredStub:
    """A stub definition together with the id WireMock knows it by."""

    stub_id: str
    definition: Any


class StubRegistry:
    """
    Thread-safe mapping of test uid to the stubs that test registered.

    An entry appears on the first add() for a test and disappears as a
    whole on pop(). Each stub belongs to exactly one test.
    """

    def __init__(self):
        self._stubs: Dict[str, List[RegisteredStub]] = {}
        self._lock = threading.Lock()

    def add(self, test_uid: str, stub: RegisteredStub):
        with self._lock:
            self._stubs.setdefault(test_uid, []).append(stub)

    def pop(self, test_uid: str) -> List[RegisteredStub]:
        """Remove and return a test's stubs in registration order ([] if none)."""
        with self._lock:
            return self._stubs.pop(test_uid, [])

    def get(self, test_uid: str) -> List[RegisteredStub]:
        """Return a copy of a test's stubs without removing them."""
        with self._lock:
            return list(self._stubs.get(test_uid, []))

    def __contains__(self, test_uid: str) -> bool:
        with self._lock:
            return test_uid in self._stubs

    def __len__(self) -> int:
        with self._lock:
            return len(self._stubs)
