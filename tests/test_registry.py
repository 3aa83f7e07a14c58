"""
Tests for wiremock-testkit Stub Registry
"""

from concurrent.futures import ThreadPoolExecutor

from wiremock_testkit.admin import RegisteredStub, StubRegistry


def _stub(stub_id):
    return RegisteredStub(stub_id=stub_id, definition={'id': stub_id})


class TestStubRegistry:
    """Test StubRegistry bookkeeping."""

    def test_entry_created_on_first_add(self):
        registry = StubRegistry()

        assert 'test-1' not in registry

        registry.add('test-1', _stub('a'))

        assert 'test-1' in registry
        assert len(registry) == 1

    def test_keeps_registration_order(self):
        registry = StubRegistry()

        registry.add('test-1', _stub('a'))
        registry.add('test-1', _stub('b'))
        registry.add('test-1', _stub('c'))

        assert [s.stub_id for s in registry.get('test-1')] == ['a', 'b', 'c']

    def test_pop_removes_whole_entry(self):
        registry = StubRegistry()
        registry.add('test-1', _stub('a'))
        registry.add('test-1', _stub('b'))

        popped = registry.pop('test-1')

        assert [s.stub_id for s in popped] == ['a', 'b']
        assert 'test-1' not in registry
        assert registry.pop('test-1') == []

    def test_tests_are_isolated(self):
        registry = StubRegistry()
        registry.add('test-1', _stub('a'))
        registry.add('test-2', _stub('b'))

        registry.pop('test-1')

        assert [s.stub_id for s in registry.get('test-2')] == ['b']

    def test_get_returns_copy(self):
        registry = StubRegistry()
        registry.add('test-1', _stub('a'))

        registry.get('test-1').append(_stub('b'))

        assert len(registry.get('test-1')) == 1

    def test_get_unknown_test(self):
        assert StubRegistry().get('missing') == []

    def test_concurrent_adds(self):
        """Parallel registrations never lose stubs."""
        registry = StubRegistry()

        def register(i):
            registry.add(f"test-{i % 4}", _stub(str(i)))

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(register, range(400)))

        assert len(registry) == 4
        assert sum(len(registry.get(f"test-{i}")) for i in range(4)) == 400
