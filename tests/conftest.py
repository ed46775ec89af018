"""Pytest fixtures and configuration.

Provides shared fixtures for router, executor and request builder tests.
"""
import sys
from pathlib import Path
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from corda_rest_adapter.credentials import Credentials, StaticCredentialResolver  # noqa: E402
from corda_rest_adapter.parameters import RecordParameterSource  # noqa: E402
from corda_rest_adapter.transport import MockTransport  # noqa: E402

BASE_URL = "http://localhost:10006/api/rest/v1"


@pytest.fixture
def credentials() -> Credentials:
    """Credentials used across tests ("u:p" -> dTpw)."""
    return Credentials(base_url=BASE_URL, username="u", password="p")


@pytest.fixture
def resolver(credentials: Credentials) -> StaticCredentialResolver:
    return StaticCredentialResolver(credentials)


@pytest.fixture
def transport() -> MockTransport:
    """Mock transport answering every call with an empty JSON object."""
    return MockTransport(response={"ok": True})


@pytest.fixture
def make_source():
    """Factory for parameter sources.

    Example:
        def test_x(make_source):
            source = make_source("flowExecution", "getFlowStatus", records=[{"runId": "1"}])
    """
    def _make(resource, operation, records=None, **parameters):
        parameters["resource"] = resource
        parameters["operation"] = operation
        return RecordParameterSource(parameters, records or [{}])
    return _make
