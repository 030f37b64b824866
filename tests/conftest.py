"""Pytest fixtures for Lockstep SDK tests."""

from typing import Any

import pytest

from lockstep import AsyncLockstepApi, LockstepApi


@pytest.fixture
def api_key() -> str:
    """Return a test API key."""
    return "test_api_key_12345"


@pytest.fixture
def bearer_token() -> str:
    """Return a test JWT bearer token."""
    return "test.jwt.token"


@pytest.fixture
def base_url() -> str:
    """Return the production server URL without trailing slash."""
    return "https://api.lockstep.io"


@pytest.fixture
def invoice_id() -> str:
    """Return a test invoice ID."""
    return "9f4a3c2e-1b7d-4e8a-9c0f-2d6b5a1e3f70"


@pytest.fixture
def payment_id() -> str:
    """Return a test payment ID."""
    return "0c7e1f2a-5d3b-4a69-8e21-7b9f4c6d8a15"


@pytest.fixture
def sync_client(api_key: str):
    """Create a sync LockstepApi for testing."""
    client = LockstepApi.with_environment("prd").with_api_key(api_key)
    yield client
    client.close()


@pytest.fixture
async def async_client(api_key: str):
    """Create an async LockstepApi for testing."""
    client = AsyncLockstepApi.with_environment("prd").with_api_key(api_key)
    yield client
    await client.close()


@pytest.fixture
def mock_invoice(invoice_id: str) -> dict[str, Any]:
    """Return mock invoice data."""
    return {
        "groupKey": "6a1d4b3c-0e2f-4a5b-8c7d-9e0f1a2b3c4d",
        "invoiceId": invoice_id,
        "companyId": "c0a8012e-0000-4000-8000-000000000001",
        "customerId": "c0a8012e-0000-4000-8000-000000000002",
        "erpKey": "INV-1001",
        "invoiceTypeCode": "AR Invoice",
        "invoiceStatusCode": "Open",
        "currencyCode": "USD",
        "totalAmount": 1250.5,
        "outstandingBalanceAmount": 250.5,
        "invoiceDate": "2023-09-01",
        "paymentDueDate": "2023-10-01",
        "isVoided": False,
        "inDispute": False,
    }


@pytest.fixture
def mock_payment(payment_id: str) -> dict[str, Any]:
    """Return mock payment data."""
    return {
        "groupKey": "6a1d4b3c-0e2f-4a5b-8c7d-9e0f1a2b3c4d",
        "paymentId": payment_id,
        "companyId": "c0a8012e-0000-4000-8000-000000000001",
        "erpKey": "PMT-77",
        "paymentType": "AR Payment",
        "tenderType": "Check",
        "isOpen": True,
        "paymentDate": "2023-09-15",
        "paymentAmount": 1000.0,
        "unappliedAmount": 250.0,
        "currencyCode": "USD",
        "applications": [
            {
                "paymentAppliedId": "a1",
                "invoiceId": "9f4a3c2e-1b7d-4e8a-9c0f-2d6b5a1e3f70",
                "paymentAppliedAmount": 750.0,
            }
        ],
    }


@pytest.fixture
def mock_problem() -> dict[str, Any]:
    """Return a mock problem details error body."""
    return {
        "type": "https://tools.ietf.org/html/rfc7231#section-6.5.4",
        "title": "Not Found",
        "status": 404,
        "detail": "Invoice not found",
        "traceId": "00-4bf92f3577b34da6a3ce929d0e0e4736-00",
    }
