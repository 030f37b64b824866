"""Tests for AsyncLockstepApi (asynchronous)."""

import asyncio
import json

import httpx
import pytest
import respx
from httpx import Response

from lockstep import AsyncLockstepApi
from lockstep.exceptions import LockstepNotFoundError
from lockstep.models import PaymentModel


class TestAsyncClient:
    """Test async client lifecycle and configuration."""

    @pytest.mark.asyncio
    async def test_context_manager(self, api_key: str):
        """Test client works as async context manager."""
        async with AsyncLockstepApi.with_environment("sbx", api_key=api_key) as client:
            assert client.server_url == "https://api.sbx.lockstep.io/"
            assert client.api_key == api_key

    @pytest.mark.asyncio
    async def test_setters_shared_with_sync_client(self, bearer_token: str):
        """Test the fluent setters behave the same on the async client."""
        async with AsyncLockstepApi(api_key="k").with_bearer_token(bearer_token) as client:
            assert client.api_key is None
            assert client.build_headers()["Authorization"] == f"Bearer {bearer_token}"


class TestAsyncHeaderHook:
    """Test the header hook on the async dispatcher."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_coroutine_hook_awaited_and_replaces_headers(self, base_url: str):
        """Test an async hook is awaited and its result sent as-is."""
        route = respx.get(f"{base_url}/api/v1/Status").mock(
            return_value=Response(200, json={"loggedIn": True})
        )
        received = []

        async def hook(headers):
            await asyncio.sleep(0)
            received.append(dict(headers))
            return {"Authorization": "Bearer refreshed"}

        async with AsyncLockstepApi(api_key="k", header_hook=hook) as client:
            response = await client.status.ping()

        assert response.value.logged_in is True
        assert received[0]["ApiKey"] == "k"
        headers = route.calls.last.request.headers
        assert headers["Authorization"] == "Bearer refreshed"
        assert "ApiKey" not in headers
        assert "SdkName" not in headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_plain_function_hook(self, base_url: str):
        """Test a plain function hook is accepted by the async client."""
        route = respx.get(f"{base_url}/api/v1/Status").mock(
            return_value=Response(200, json={"loggedIn": True})
        )

        def hook(headers):
            return {**headers, "X-Tenant": "acme"}

        async with AsyncLockstepApi(header_hook=hook) as client:
            await client.status.ping()

        headers = route.calls.last.request.headers
        assert headers["X-Tenant"] == "acme"
        assert headers["SdkName"] == "Python"

    @pytest.mark.asyncio
    @respx.mock
    async def test_coroutine_hook_can_remove_header(self, base_url: str, bearer_token: str):
        """Test a header an async hook sets to None is left off the request."""
        route = respx.get(f"{base_url}/api/v1/Status").mock(
            return_value=Response(200, json={"loggedIn": True})
        )

        async def hook(headers):
            return {**headers, "Authorization": None}

        async with AsyncLockstepApi(bearer_token=bearer_token, header_hook=hook) as client:
            await client.status.ping()

        headers = route.calls.last.request.headers
        assert "Authorization" not in headers
        assert headers["SdkName"] == "Python"

    @pytest.mark.asyncio
    @respx.mock
    async def test_hook_called_once_per_request(self, base_url: str):
        """Test the hook runs for every request."""
        respx.get(f"{base_url}/api/v1/Status").mock(
            return_value=Response(200, json={"loggedIn": True})
        )
        calls = []

        async def hook(headers):
            calls.append(headers)
            return headers

        async with AsyncLockstepApi(header_hook=hook) as client:
            await asyncio.gather(client.status.ping(), client.status.ping())

        assert len(calls) == 2


class TestAsyncPaymentEndpoints:
    """Test payment endpoints."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_retrieve_payment(
        self,
        async_client: AsyncLockstepApi,
        base_url: str,
        payment_id: str,
        mock_payment: dict,
    ):
        """Test retrieving a payment."""
        route = respx.get(f"{base_url}/api/v1/Payments/{payment_id}").mock(
            return_value=Response(200, json=mock_payment)
        )

        response = await async_client.payments.retrieve_payment(payment_id)

        assert isinstance(response.value, PaymentModel)
        assert response.value.unapplied_amount == 250.0
        assert route.calls.last.request.headers["ApiKey"] == async_client.api_key
        assert "include" not in route.calls.last.request.url.params

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_payments(
        self, async_client: AsyncLockstepApi, base_url: str, mock_payment: dict
    ):
        """Test creating payments."""
        route = respx.post(f"{base_url}/api/v1/Payments").mock(
            return_value=Response(200, json=[mock_payment])
        )

        response = await async_client.payments.create_payments(
            [PaymentModel(company_id="c1", payment_amount=1000.0, tender_type="Check")]
        )

        assert json.loads(route.calls.last.request.content) == [
            {"companyId": "c1", "tenderType": "Check", "paymentAmount": 1000.0}
        ]
        assert response.value[0].payment_id == mock_payment["paymentId"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_missing_payment(
        self,
        async_client: AsyncLockstepApi,
        base_url: str,
        payment_id: str,
        mock_problem: dict,
    ):
        """Test a 404 is reported through the envelope."""
        respx.delete(f"{base_url}/api/v1/Payments/{payment_id}").mock(
            return_value=Response(404, json=mock_problem)
        )

        response = await async_client.payments.delete_payment(payment_id)

        assert response.status_code == 404
        assert response.error.detail == "Invoice not found"

    @pytest.mark.asyncio
    @respx.mock
    async def test_retrieve_payment_pdf(
        self, async_client: AsyncLockstepApi, base_url: str, payment_id: str
    ):
        """Test the PDF is returned as bytes."""
        respx.get(f"{base_url}/api/v1/Payments/{payment_id}/pdf").mock(
            return_value=Response(200, content=b"%PDF-1.7")
        )

        response = await async_client.payments.retrieve_payment_pdf(payment_id)

        assert response.value == b"%PDF-1.7"

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_payment_detail_view(
        self, async_client: AsyncLockstepApi, base_url: str
    ):
        """Test the payment detail view."""
        route = respx.get(f"{base_url}/api/v1/Payments/views/detail").mock(
            return_value=Response(
                200, json={"records": [{"customerName": "Acme Corp"}], "totalCount": 1}
            )
        )

        response = await async_client.payments.query_payment_detail_view(
            filter="paymentAmount gt 100", include="Customer"
        )

        assert response.value.records[0].customer_name == "Acme Corp"
        params = route.calls.last.request.url.params
        assert params["filter"] == "paymentAmount gt 100"
        assert params["include"] == "Customer"

    @pytest.mark.asyncio
    @respx.mock
    async def test_iter_payments(self, async_client: AsyncLockstepApi, base_url: str):
        """Test async pagination stops on a short page."""
        route = respx.get(f"{base_url}/api/v1/Payments/query").mock(
            side_effect=[
                Response(
                    200,
                    json={"records": [{"erpKey": "P-1"}, {"erpKey": "P-2"}]},
                ),
                Response(200, json={"records": []}),
            ]
        )

        payments = []
        async for payment in async_client.payments.iter_payments(page_size=2):
            payments.append(payment)

        assert [payment.erp_key for payment in payments] == ["P-1", "P-2"]
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_iter_payments_raises_on_error(
        self, async_client: AsyncLockstepApi, base_url: str, mock_problem: dict
    ):
        """Test async pagination raises the typed error for a failed page."""
        respx.get(f"{base_url}/api/v1/Payments/query").mock(
            return_value=Response(404, json=mock_problem)
        )

        with pytest.raises(LockstepNotFoundError):
            async for _ in async_client.payments.iter_payments():
                pass


class TestAsyncOtherEndpoints:
    """Test invoices, contacts and attachments on the async client."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_invoice_summary_view(
        self, async_client: AsyncLockstepApi, base_url: str
    ):
        """Test the invoice summary view."""
        respx.get(f"{base_url}/api/v1/Invoices/views/summary").mock(
            return_value=Response(
                200,
                json={"records": [{"invoiceNumber": "INV-1", "outstandingBalance": 10.0}]},
            )
        )

        response = await async_client.invoices.query_invoice_summary_view()

        assert response.value.records[0].outstanding_balance == 10.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_update_contact(self, async_client: AsyncLockstepApi, base_url: str):
        """Test a partial contact update."""
        route = respx.patch(f"{base_url}/api/v1/Contacts/ct-1").mock(
            return_value=Response(200, json={"contactId": "ct-1", "title": "Controller"})
        )

        response = await async_client.contacts.update_contact("ct-1", {"title": "Controller"})

        assert response.value.title == "Controller"
        assert json.loads(route.calls.last.request.content) == {"title": "Controller"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_attachment_from_bytes(
        self, async_client: AsyncLockstepApi, base_url: str
    ):
        """Test uploading raw bytes with a filename."""
        route = respx.post(f"{base_url}/api/v1/Attachments").mock(
            return_value=Response(201, json=[{"attachmentId": "att-2"}])
        )

        response = await async_client.attachments.upload_attachment(
            "Payments", "pmt-1", b"col1,col2\n", filename="remittance.csv"
        )

        request = route.calls.last.request
        request.read()
        assert b'filename="remittance.csv"' in request.content
        assert "attachmentType" not in request.url.params
        assert response.status_code == 201
        assert response.value[0].attachment_id == "att-2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_propagates(
        self, async_client: AsyncLockstepApi, base_url: str
    ):
        """Test timeouts are raised, not wrapped."""
        respx.get(f"{base_url}/api/v1/Status").mock(side_effect=httpx.ReadTimeout)

        with pytest.raises(httpx.ReadTimeout):
            await async_client.status.ping()
