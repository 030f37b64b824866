"""Asynchronous Lockstep Platform API client."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

import httpx

from lockstep.client_base import (
    AsyncPaginatedIterator,
    BaseLockstepApi,
    ClientConfig,
    build_blob_response,
    build_query_params,
    build_response,
    coerce_headers,
    prepare_attachment,
    query_options,
    serialize_body,
)
from lockstep.models import (
    ActionResultModel,
    AtRiskInvoiceSummaryModel,
    AttachmentModel,
    CompanyModel,
    ContactModel,
    FetchResult,
    InvoiceModel,
    InvoiceSummaryModel,
    PaymentDetailHeaderModel,
    PaymentDetailModel,
    PaymentModel,
    PaymentSummaryModel,
    PaymentSummaryTotalsModel,
    StatusModel,
    SummaryFetchResult,
    TransactionModel,
)
from lockstep.response import LockstepResponse

logger = logging.getLogger(__name__)


class AsyncLockstepApi(BaseLockstepApi):
    """Asynchronous client for the Lockstep Platform API.

    Every call returns a LockstepResponse; non-2xx statuses are reported
    through the envelope, not raised. Transport failures raise httpx errors.
    The header hook may be a plain function or a coroutine function.
    """

    def __init__(self, **options: Any) -> None:
        """Initialize async Lockstep client.

        Args:
            **options: Configuration accepted by BaseLockstepApi
        """
        super().__init__(**options)
        self.client = httpx.AsyncClient(timeout=self.timeout)

        self.attachments = AsyncAttachmentsClient(self)
        self.companies = AsyncCompaniesClient(self)
        self.contacts = AsyncContactsClient(self)
        self.invoices = AsyncInvoicesClient(self)
        self.payments = AsyncPaymentsClient(self)
        self.status = AsyncStatusClient(self)
        self.transactions = AsyncTransactionsClient(self)

    async def __aenter__(self) -> AsyncLockstepApi:
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def get_headers(self) -> dict[str, str]:
        """Get the headers for a request, after the header hook if one is set.

        The hook's result is awaited before the request is sent.
        """
        headers = self.build_headers()
        if self.header_hook is None:
            return headers

        result = self.header_hook(headers)
        if inspect.isawaitable(result):
            result = await result
        return coerce_headers(result)

    async def _send(
        self,
        method: str,
        path: str,
        options: Mapping[str, Any] | None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request to the server.

        Args:
            method: HTTP method
            path: API path, resolved against the server URL
            options: Query options; unset (None) options are left out
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response, whatever its status
        """
        method = method.upper()
        url = self._url(path)
        headers = await self.get_headers()

        logger.debug("%s %s", method, url)
        response = await self.client.request(
            method=method,
            url=url,
            params=build_query_params(options),
            headers=headers,
            **kwargs,
        )
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    async def request(
        self,
        method: str,
        path: str,
        options: Mapping[str, Any] | None = None,
        body: Any = None,
        model: Any = None,
    ) -> LockstepResponse[Any]:
        """Make a request and parse the JSON response.

        Args:
            method: HTTP method
            path: API path
            options: Query options
            body: JSON body (pydantic models are dumped by alias)
            model: Type to validate a successful payload against

        Returns:
            Response envelope
        """
        json_body = serialize_body(body)
        kwargs: dict[str, Any] = {} if json_body is None else {"json": json_body}
        response = await self._send(method, path, options, **kwargs)
        return build_response(response, model)

    async def file_upload(
        self,
        method: str,
        path: str,
        options: Mapping[str, Any] | None,
        file: Path | str | BinaryIO | bytes,
        filename: str | None = None,
        model: Any = None,
    ) -> LockstepResponse[Any]:
        """Upload a file as multipart form data and parse the JSON response.

        The file is read fully into memory before sending.

        Args:
            method: HTTP method
            path: API path
            options: Query options
            file: File path, file-like object or raw bytes
            filename: Optional filename override
            model: Type to validate a successful payload against

        Returns:
            Response envelope
        """
        fname, file_bytes, content_type = prepare_attachment(file, filename)
        response = await self._send(
            method, path, options, files={"file": (fname, file_bytes, content_type)}
        )
        return build_response(response, model)

    async def request_blob(
        self,
        method: str,
        path: str,
        options: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> LockstepResponse[bytes]:
        """Make a request and return the response body as raw bytes.

        Args:
            method: HTTP method
            path: API path
            options: Query options
            body: JSON body

        Returns:
            Response envelope whose value is the body bytes, whatever the status
        """
        json_body = serialize_body(body)
        kwargs: dict[str, Any] = {} if json_body is None else {"json": json_body}
        response = await self._send(method, path, options, **kwargs)
        return build_blob_response(response)


class AsyncAttachmentsClient:
    """Files attached to records such as invoices, payments and companies."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def retrieve_attachment(
        self, attachment_id: str, include: str | None = None
    ) -> LockstepResponse[AttachmentModel]:
        """Retrieve an attachment.

        Args:
            attachment_id: Lockstep Platform ID of the attachment
            include: Collections to include; none are currently available

        Returns:
            Response envelope with the attachment
        """
        return await self.client.request(
            "GET",
            f"/api/v1/Attachments/{attachment_id}",
            {"include": include},
            model=AttachmentModel,
        )

    async def update_attachment(
        self, attachment_id: str, body: Mapping[str, Any]
    ) -> LockstepResponse[AttachmentModel]:
        """Apply a partial update to an attachment."""
        return await self.client.request(
            "PATCH", f"/api/v1/Attachments/{attachment_id}", body=body, model=AttachmentModel
        )

    async def archive_attachment(self, attachment_id: str) -> LockstepResponse[ActionResultModel]:
        """Flag an attachment as archived; the file itself is kept."""
        return await self.client.request(
            "DELETE", f"/api/v1/Attachments/{attachment_id}", model=ActionResultModel
        )

    async def download_attachment(self, attachment_id: str) -> LockstepResponse[bytes]:
        """Download the contents of an attachment.

        Args:
            attachment_id: Lockstep Platform ID of the attachment

        Returns:
            Response envelope with the file bytes
        """
        return await self.client.request_blob(
            "GET", f"/api/v1/Attachments/{attachment_id}/download"
        )

    async def upload_attachment(
        self,
        table_name: str,
        object_id: str,
        file: Path | str | BinaryIO | bytes,
        attachment_type: str | None = None,
        filename: str | None = None,
    ) -> LockstepResponse[list[AttachmentModel]]:
        """Upload a file and attach it to a record.

        Args:
            table_name: Type of record to attach to, e.g. ``Invoices``
            object_id: Lockstep Platform ID of the record
            file: File path, file-like object or raw bytes
            attachment_type: Type of the attachment
            filename: Optional filename override

        Returns:
            Response envelope with the created attachments
        """
        return await self.client.file_upload(
            "POST",
            "/api/v1/Attachments",
            {
                "tableName": table_name,
                "objectId": object_id,
                "attachmentType": attachment_type,
            },
            file,
            filename=filename,
            model=list[AttachmentModel],
        )

    async def query_attachments(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[AttachmentModel]]:
        """Query attachments using the Searchlight query language."""
        return await self.client.request(
            "GET",
            "/api/v1/Attachments/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[AttachmentModel],
        )


class AsyncCompaniesClient:
    """Companies: customers, vendors and the account's own companies."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def retrieve_company(
        self, company_id: str, include: str | None = None
    ) -> LockstepResponse[CompanyModel]:
        """Retrieve a company.

        Args:
            company_id: Lockstep Platform ID of the company; not the ERP key
            include: Collections to include, e.g. ``Contacts,Notes``

        Returns:
            Response envelope with the company
        """
        return await self.client.request(
            "GET", f"/api/v1/Companies/{company_id}", {"include": include}, model=CompanyModel
        )

    async def update_company(
        self, company_id: str, body: Mapping[str, Any]
    ) -> LockstepResponse[CompanyModel]:
        """Apply a partial update to a company.

        Args:
            company_id: Lockstep Platform ID of the company
            body: Fields to change

        Returns:
            Response envelope with the updated company
        """
        return await self.client.request(
            "PATCH", f"/api/v1/Companies/{company_id}", body=body, model=CompanyModel
        )

    async def delete_company(self, company_id: str) -> LockstepResponse[ActionResultModel]:
        """Disable a company."""
        return await self.client.request(
            "DELETE", f"/api/v1/Companies/{company_id}", model=ActionResultModel
        )

    async def create_companies(
        self, body: list[CompanyModel]
    ) -> LockstepResponse[list[CompanyModel]]:
        """Create one or more companies.

        Args:
            body: Companies to create

        Returns:
            Response envelope with the created companies
        """
        return await self.client.request(
            "POST", "/api/v1/Companies", body=body, model=list[CompanyModel]
        )

    async def query_companies(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[CompanyModel]]:
        """Query companies using the Searchlight query language.

        Args:
            filter: Filter expression
            include: Collections to include
            order: Sort order
            page_size: Records per page (server default 200)
            page_number: Page number (server default 0)

        Returns:
            Response envelope with one page of companies
        """
        return await self.client.request(
            "GET",
            "/api/v1/Companies/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[CompanyModel],
        )


class AsyncContactsClient:
    """Contacts: people working at a company."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def retrieve_contact(
        self, contact_id: str, include: str | None = None
    ) -> LockstepResponse[ContactModel]:
        """Retrieve a contact."""
        return await self.client.request(
            "GET", f"/api/v1/Contacts/{contact_id}", {"include": include}, model=ContactModel
        )

    async def update_contact(
        self, contact_id: str, body: Mapping[str, Any]
    ) -> LockstepResponse[ContactModel]:
        """Apply a partial update to a contact."""
        return await self.client.request(
            "PATCH", f"/api/v1/Contacts/{contact_id}", body=body, model=ContactModel
        )

    async def delete_contact(self, contact_id: str) -> LockstepResponse[ActionResultModel]:
        """Delete a contact."""
        return await self.client.request(
            "DELETE", f"/api/v1/Contacts/{contact_id}", model=ActionResultModel
        )

    async def create_contacts(
        self, body: list[ContactModel]
    ) -> LockstepResponse[list[ContactModel]]:
        """Create one or more contacts."""
        return await self.client.request(
            "POST", "/api/v1/Contacts", body=body, model=list[ContactModel]
        )

    async def query_contacts(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[ContactModel]]:
        """Query contacts using the Searchlight query language."""
        return await self.client.request(
            "GET",
            "/api/v1/Contacts/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[ContactModel],
        )


class AsyncInvoicesClient:
    """Invoices: bills sent from one company to another."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def retrieve_invoice(
        self, invoice_id: str, include: str | None = None
    ) -> LockstepResponse[InvoiceModel]:
        """Retrieve an invoice, optionally including nested data sets.

        Args:
            invoice_id: Lockstep Platform ID of the invoice; not the ERP key
            include: Collections to include. Available: Addresses, Lines,
                Payments, Notes, Attachments, Company, Customer, CustomFields,
                CreditMemos

        Returns:
            Response envelope with the invoice
        """
        return await self.client.request(
            "GET", f"/api/v1/Invoices/{invoice_id}", {"include": include}, model=InvoiceModel
        )

    async def update_invoice(
        self, invoice_id: str, body: Mapping[str, Any]
    ) -> LockstepResponse[InvoiceModel]:
        """Apply a partial update to an invoice.

        Only the fields present in ``body`` are changed.

        Args:
            invoice_id: Lockstep Platform ID of the invoice
            body: Fields to change

        Returns:
            Response envelope with the updated invoice
        """
        return await self.client.request(
            "PATCH", f"/api/v1/Invoices/{invoice_id}", body=body, model=InvoiceModel
        )

    async def delete_invoice(self, invoice_id: str) -> LockstepResponse[ActionResultModel]:
        """Delete an invoice.

        Args:
            invoice_id: Lockstep Platform ID of the invoice

        Returns:
            Response envelope with the action result
        """
        return await self.client.request(
            "DELETE", f"/api/v1/Invoices/{invoice_id}", model=ActionResultModel
        )

    async def create_invoices(
        self, body: list[InvoiceModel]
    ) -> LockstepResponse[list[InvoiceModel]]:
        """Create one or more invoices.

        Args:
            body: Invoices to create

        Returns:
            Response envelope with the created invoices
        """
        return await self.client.request(
            "POST", "/api/v1/Invoices", body=body, model=list[InvoiceModel]
        )

    async def query_invoices(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[InvoiceModel]]:
        """Query invoices using the Searchlight query language.

        Args:
            filter: Filter expression
            include: Collections to include
            order: Sort order
            page_size: Records per page (server default 200)
            page_number: Page number (server default 0)

        Returns:
            Response envelope with one page of invoices
        """
        return await self.client.request(
            "GET",
            "/api/v1/Invoices/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[InvoiceModel],
        )

    def iter_invoices(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int = ClientConfig.DEFAULT_PAGE_SIZE,
    ) -> AsyncPaginatedIterator[InvoiceModel]:
        """Iterate over every invoice matching a query, page by page.

        Raises:
            LockstepAPIError: If fetching a page fails
        """
        return AsyncPaginatedIterator(
            self.client,
            "/api/v1/Invoices/query",
            {"filter": filter, "include": include, "order": order},
            InvoiceModel,
            page_size=page_size,
        )

    async def retrieve_invoice_pdf(self, invoice_id: str) -> LockstepResponse[bytes]:
        """Retrieve a PDF rendering of an invoice."""
        return await self.client.request_blob("GET", f"/api/v1/Invoices/{invoice_id}/pdf")

    async def query_invoice_summary_view(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[InvoiceSummaryModel]]:
        """Query the invoice summary view."""
        return await self.client.request(
            "GET",
            "/api/v1/Invoices/views/summary",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[InvoiceSummaryModel],
        )

    async def query_at_risk_invoice_summary_view(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[AtRiskInvoiceSummaryModel]]:
        """Query the at-risk invoice summary view."""
        return await self.client.request(
            "GET",
            "/api/v1/Invoices/views/at-risk-summary",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[AtRiskInvoiceSummaryModel],
        )


class AsyncPaymentsClient:
    """Payments: money sent from one company to another."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def retrieve_payment(
        self, payment_id: str, include: str | None = None
    ) -> LockstepResponse[PaymentModel]:
        """Retrieve a payment, optionally including nested data sets.

        Args:
            payment_id: Lockstep Platform ID of the payment; not the ERP key
            include: Collections to include. Available: Applications, Notes,
                Attachments, CustomFields

        Returns:
            Response envelope with the payment
        """
        return await self.client.request(
            "GET", f"/api/v1/Payments/{payment_id}", {"include": include}, model=PaymentModel
        )

    async def update_payment(
        self, payment_id: str, body: Mapping[str, Any]
    ) -> LockstepResponse[PaymentModel]:
        """Apply a partial update to a payment.

        Args:
            payment_id: Lockstep Platform ID of the payment
            body: Fields to change

        Returns:
            Response envelope with the updated payment
        """
        return await self.client.request(
            "PATCH", f"/api/v1/Payments/{payment_id}", body=body, model=PaymentModel
        )

    async def delete_payment(self, payment_id: str) -> LockstepResponse[ActionResultModel]:
        """Delete a payment."""
        return await self.client.request(
            "DELETE", f"/api/v1/Payments/{payment_id}", model=ActionResultModel
        )

    async def create_payments(
        self, body: list[PaymentModel]
    ) -> LockstepResponse[list[PaymentModel]]:
        """Create one or more payments.

        Args:
            body: Payments to create

        Returns:
            Response envelope with the created payments
        """
        return await self.client.request(
            "POST", "/api/v1/Payments", body=body, model=list[PaymentModel]
        )

    async def query_payments(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[PaymentModel]]:
        """Query payments using the Searchlight query language."""
        return await self.client.request(
            "GET",
            "/api/v1/Payments/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[PaymentModel],
        )

    def iter_payments(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int = ClientConfig.DEFAULT_PAGE_SIZE,
    ) -> AsyncPaginatedIterator[PaymentModel]:
        """Iterate over every payment matching a query, page by page."""
        return AsyncPaginatedIterator(
            self.client,
            "/api/v1/Payments/query",
            {"filter": filter, "include": include, "order": order},
            PaymentModel,
            page_size=page_size,
        )

    async def retrieve_payment_pdf(self, payment_id: str) -> LockstepResponse[bytes]:
        """Retrieve a PDF rendering of a payment.

        Args:
            payment_id: Lockstep Platform ID of the payment

        Returns:
            Response envelope with the PDF bytes
        """
        return await self.client.request_blob("GET", f"/api/v1/Payments/{payment_id}/pdf")

    async def query_payment_summary_view(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[SummaryFetchResult[PaymentSummaryModel, PaymentSummaryTotalsModel]]:
        """Query the payment summary view, with totals across all pages."""
        return await self.client.request(
            "GET",
            "/api/v1/Payments/views/summary",
            query_options(filter, include, order, page_size, page_number),
            model=SummaryFetchResult[PaymentSummaryModel, PaymentSummaryTotalsModel],
        )

    async def retrieve_payment_detail_header(self) -> LockstepResponse[PaymentDetailHeaderModel]:
        """Retrieve group level payment totals."""
        return await self.client.request(
            "GET", "/api/v1/Payments/views/detail-header", model=PaymentDetailHeaderModel
        )

    async def query_payment_detail_view(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[PaymentDetailModel]]:
        """Query the payment detail view."""
        return await self.client.request(
            "GET",
            "/api/v1/Payments/views/detail",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[PaymentDetailModel],
        )


class AsyncStatusClient:
    """API status."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def ping(self) -> LockstepResponse[StatusModel]:
        """Check that the API is reachable and the credentials are valid.

        Returns:
            Response envelope with the server status and caller identity
        """
        return await self.client.request("GET", "/api/v1/Status", model=StatusModel)


class AsyncTransactionsClient:
    """Transactions: invoices, credit memos and payments in a common shape."""

    def __init__(self, client: AsyncLockstepApi) -> None:
        self.client = client

    async def query_transactions(
        self,
        filter: str | None = None,
        include: str | None = None,
        order: str | None = None,
        page_size: int | None = None,
        page_number: int | None = None,
    ) -> LockstepResponse[FetchResult[TransactionModel]]:
        """Query transactions using the Searchlight query language.

        Args:
            filter: Filter expression
            include: Collections to include
            order: Sort order
            page_size: Records per page (server default 200)
            page_number: Page number (server default 0)

        Returns:
            Response envelope with one page of transactions
        """
        return await self.client.request(
            "GET",
            "/api/v1/Transactions/query",
            query_options(filter, include, order, page_size, page_number),
            model=FetchResult[TransactionModel],
        )
