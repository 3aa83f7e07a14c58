"""
Tests for the wiremock-testkit pytest plugin
"""

import pytest

CONFTEST = 'pytest_plugins = ["wiremock_testkit.pytest_plugin"]'


@pytest.fixture
def plugin_pytester(pytester, monkeypatch):
    monkeypatch.delenv('WIREMOCK_URL', raising=False)
    monkeypatch.delenv('WIREMOCK_TIMEOUT', raising=False)
    pytester.makeconftest(CONFTEST)
    return pytester


def test_wiremock_test_bound_to_context(plugin_pytester):
    plugin_pytester.makepyfile("""
        from wiremock_testkit import get_test_id

        def test_bound(wiremock_test):
            assert get_test_id() == wiremock_test.test_id
            assert wiremock_test.name.endswith('::test_bound')

        def test_unbound():
            assert get_test_id() == ''
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(passed=2)


def test_recorded_failures_fail_the_test(plugin_pytester):
    plugin_pytester.makepyfile("""
        def test_soft_failures(wiremock_test):
            wiremock_test.error('expected 2, actual 1')
            wiremock_test.error('expected 5, actual 0')
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(['*expected 2, actual 1*', '*expected 5, actual 0*'])


def test_recorded_failures_kept_when_test_also_fails(plugin_pytester):
    plugin_pytester.makepyfile("""
        def test_soft_then_hard(wiremock_test):
            wiremock_test.error('expected 2, actual 1')
            assert 1 == 2
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(['*wiremock_test failures*', '*expected 2, actual 1*'])


def test_verify_mismatch_fails_the_test(plugin_pytester):
    """A count mismatch from verify_for_test marks the test FAILED, not errored."""
    plugin_pytester.makepyfile("""
        from unittest.mock import Mock

        import pytest

        from wiremock_testkit import WireMockClient

        @pytest.fixture(scope='session')
        def wiremock_client():
            response = Mock(status_code=200, text='{"count": 0}')
            response.json.return_value = {'count': 0}
            return WireMockClient('http://wiremock', session=Mock(**{'request.return_value': response}))

        def test_mismatch(wiremock_client, wiremock_test):
            assert wiremock_client.verify_for_test(wiremock_test, {'url': '/x'}, 2) is False
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(['*number of requests does not match, expected 2, actual 0*'])


def test_default_config(plugin_pytester):
    plugin_pytester.makepyfile("""
        def test_config(wiremock_config, wiremock_client):
            assert wiremock_config.base_url == 'http://localhost:8080'
            assert wiremock_client.url == 'http://localhost:8080'
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(passed=1)


def test_url_resolution_order(plugin_pytester, monkeypatch):
    """Command line beats ini file beats environment."""
    monkeypatch.setenv('WIREMOCK_URL', 'http://from-env:1')
    plugin_pytester.makeini("""
        [pytest]
        wiremock_url = http://from-ini:2/
        wiremock_timeout = 4
    """)
    plugin_pytester.makepyfile("""
        def test_config(wiremock_config):
            print('URL=' + wiremock_config.base_url)
            print('TIMEOUT=' + str(wiremock_config.timeout))
    """)

    result = plugin_pytester.runpytest('-s')
    result.stdout.fnmatch_lines(['*URL=http://from-ini:2*', '*TIMEOUT=4.0*'])

    result = plugin_pytester.runpytest('-s', '--wiremock-url', 'http://from-cli:3')
    result.stdout.fnmatch_lines(['*URL=http://from-cli:3*'])


def test_invalid_ini_timeout(plugin_pytester):
    plugin_pytester.makeini("""
        [pytest]
        wiremock_timeout = soon
    """)
    plugin_pytester.makepyfile("""
        def test_config(wiremock_config):
            pass
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*wiremock_timeout must be a number of seconds, got 'soon'*"])


def test_environment_url(plugin_pytester, monkeypatch):
    monkeypatch.setenv('WIREMOCK_URL', 'http://from-env:1')
    plugin_pytester.makepyfile("""
        def test_config(wiremock_config):
            assert wiremock_config.base_url == 'http://from-env:1'
    """)

    result = plugin_pytester.runpytest()

    result.assert_outcomes(passed=1)


def test_wiremock_fixture_clears_test_stubs(plugin_pytester):
    """The wiremock fixture deletes the test's stubs at teardown."""
    plugin_pytester.makeconftest(CONFTEST + """

import pytest
from unittest.mock import Mock

from wiremock_testkit import WireMockClient

CLEARED = []


@pytest.fixture(scope='session')
def wiremock_client():
    client = WireMockClient('http://wiremock', session=Mock())
    client.clear_for_test = CLEARED.append
    return client


def pytest_sessionfinish(session):
    print('CLEARED=%d' % len(CLEARED))
""")
    plugin_pytester.makepyfile("""
        def test_uses_wiremock(wiremock, wiremock_test):
            assert wiremock.url == 'http://wiremock'
    """)

    result = plugin_pytester.runpytest('-s')

    result.assert_outcomes(passed=1)
    result.stdout.fnmatch_lines(['*CLEARED=1*'])
