"""
Test fixtures for the Account Portal test suite.

  - upstream: A fake account backend that records every request it receives
  - upstream_client: UpstreamClient wired to the fake backend via httpx.MockTransport
  - client: Async HTTP test client for the app, with the upstream dependency overridden
  - authenticated_client: Same client, sending a bearer token
  - account_record: A valid merged account + customer record

No real network is touched. Tests that must prove "no backend call was made"
assert on upstream.requests being empty.
"""

import copy

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from account_portal.dependencies import get_upstream_client
from account_portal.main import app
from account_portal.upstream import UpstreamClient


TEST_TOKEN = "test-token"
ACCOUNT_ID = "12345678901"

ACCOUNT_RECORD = {
    "accountId": 12345678901,
    "activeStatus": "Y",
    "currentBalance": 1250.5,
    "creditLimit": 5000.0,
    "cashCreditLimit": 1000.0,
    "openDate": "2019-03-15",
    "expirationDate": "2027-03-31",
    "reissueDate": "2024-03-15",
    "currentCycleCredit": 200.0,
    "currentCycleDebit": 450.25,
    "groupId": "DEFAULT",
    "customerId": 100000001,
    "firstName": "Jane",
    "middleName": "Q",
    "lastName": "Public",
    "ssn": "123456789",
    "ficoScore": 742,
    "dateOfBirth": "1985-07-04",
    "addressLine1": "100 Main St",
    "addressLine2": "Apt 4",
    "city": "Springfield",
    "stateCode": "IL",
    "zipCode": "62701",
    "countryCode": "USA",
    "phoneNumber1": "2175550123",
    "phoneNumber2": None,
    "governmentIssuedId": "D123-4567-8901",
    "eftAccountId": "EFT0001",
    "primaryCardHolderIndicator": "Y",
}


class FakeUpstream:
    """
    Stand-in for the account backend.

    Register outcomes per (method, path) with respond() or fail(); any
    request without a registered outcome gets a 404.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._outcomes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def respond(self, method: str, path: str, status_code: int = 200, **kwargs) -> None:
        self._outcomes[(method, path)] = httpx.Response(status_code, **kwargs)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self._outcomes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._outcomes.get((request.method, request.url.path))
        if outcome is None:
            return httpx.Response(404, json={"error": "Not found"})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def account_record():
    return copy.deepcopy(ACCOUNT_RECORD)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest_asyncio.fixture
async def upstream_client(upstream):
    """UpstreamClient whose HTTP traffic goes to the fake backend."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(upstream.handler),
        base_url="http://upstream.test",
    )
    client = UpstreamClient(http_client)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(upstream_client):
    """
    Async HTTP test client with the fake backend injected.

    This overrides the get_upstream_client dependency so every route talks
    to the fake backend instead of a real one.
    """
    app.dependency_overrides[get_upstream_client] = lambda: upstream_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client):
    """Test client that sends a bearer token on every request."""
    client.headers["Authorization"] = f"Bearer {TEST_TOKEN}"
    return client
