"""
wiremock-testkit pytest Plugin

Fixtures wiring WireMockClient and RunningTest into pytest.

Enable it from a conftest.py:

    pytest_plugins = ["wiremock_testkit.pytest_plugin"]

Server URL resolution: --wiremock-url, then the wiremock_url ini key, then
the WIREMOCK_URL environment variable, then http://localhost:8080.
"""

from dataclasses import replace

import pytest

from .admin import WireMockClient
from .common import ClientConfig
from .propagation import RunningTest, set_test_id, reset_test_id


def pytest_addoption(parser):
    group = parser.getgroup('wiremock')
    group.addoption(
        '--wiremock-url',
        action='store',
        dest='wiremock_url',
        default=None,
        help='WireMock server URL (default: wiremock_url ini value, $WIREMOCK_URL or http://localhost:8080)'
    )
    parser.addini('wiremock_url', 'WireMock server URL', default='')
    parser.addini('wiremock_timeout', 'Timeout in seconds for WireMock admin requests', default='')


@pytest.fixture(scope='session')
def wiremock_config(pytestconfig) -> ClientConfig:
    """Client configuration resolved from command line, ini file and environment."""
    config = ClientConfig.from_env()

    ini_timeout = pytestconfig.getini('wiremock_timeout')
    if ini_timeout:
        try:
            timeout = float(ini_timeout)
        except ValueError as e:
            raise pytest.UsageError(
                f"wiremock_timeout must be a number of seconds, got {ini_timeout!r}"
            ) from e
        config = replace(config, timeout=timeout)

    base_url = pytestconfig.getoption('wiremock_url') or pytestconfig.getini('wiremock_url')
    if base_url:
        config = replace(config, base_url=base_url)

    return config


@pytest.fixture(scope='session')
def wiremock_client(wiremock_config):
    """WireMockClient shared by every test of the session."""
    client = WireMockClient.from_config(wiremock_config)
    yield client
    client.close()


@pytest.fixture
def wiremock_test(request):
    """
    RunningTest for the current test, bound to the context while it runs.

    Failures recorded with error() (e.g. by verify_for_test) fail the test
    once its body has run. Failures recorded during teardown fail teardown.
    """
    test = RunningTest(request.node.nodeid)
    token = set_test_id(test)
    yield test
    reset_test_id(token)
    test.check_failures()


@pytest.fixture
def wiremock(wiremock_client, wiremock_test):
    """Shared client; stubs the test registered with stub_for_test are deleted afterwards."""
    yield wiremock_client
    wiremock_client.clear_for_test(wiremock_test)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Fail the test body's report with the failures its wiremock_test recorded."""
    outcome = yield
    report = outcome.get_result()

    if report.when != 'call':
        return
    test = getattr(item, 'funcargs', {}).get('wiremock_test')
    if not isinstance(test, RunningTest) or not test.failures:
        return

    message = test.pop_failures()
    if report.failed:
        report.sections.append(('wiremock_test failures', message))
    else:
        report.outcome = 'failed'
        report.longrepr = message
