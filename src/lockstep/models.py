"""Data models for the Lockstep Platform API.

Field names follow Python conventions; the API's camelCase names are used as
aliases, so payloads from the server validate directly and models dump back
to the wire format with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")
S = TypeVar("S")


class LockstepModel(BaseModel):
    """Base model for all Lockstep payloads.

    Unknown fields are kept so that attributes added server-side survive a
    retrieve/update round trip.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ActionResultModel(LockstepModel):
    """Result of an action that has no other payload, such as a delete."""

    messages: list[str] | None = None


class ErrorResult(LockstepModel):
    """Problem details returned by the API on a failed request."""

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    trace_id: str | None = None
    errors: dict[str, Any] | None = None


class FetchResult(LockstepModel, Generic[T]):
    """One page of results from a query endpoint."""

    records: list[T] | None = None
    total_count: int | None = None
    page_size: int | None = None
    page_number: int | None = None


class SummaryFetchResult(LockstepModel, Generic[T, S]):
    """One page of results together with totals computed across all pages."""

    records: list[T] | None = None
    total_count: int | None = None
    page_size: int | None = None
    page_number: int | None = None
    summary: S | None = None


class StatusModel(LockstepModel):
    """Status of the API and the identity of the caller."""

    user_name: str | None = None
    account_name: str | None = None
    account_company_id: str | None = None
    user_id: str | None = None
    group_key: str | None = None
    logged_in: bool | None = None
    error_message: str | None = None
    roles: list[str] | None = None
    last_logged_in: datetime | None = None
    api_key_id: str | None = None
    user_status: str | None = None
    environment: str | None = None
    version: str | None = None
    onboarding_scheduled: bool | None = None
    dependencies: dict[str, Any] | None = None


class NoteModel(LockstepModel):
    """A note attached to a record."""

    note_id: str | None = None
    group_key: str | None = None
    table_key: str | None = None
    object_key: str | None = None
    note_text: str | None = None
    note_type: str | None = None
    is_archived: bool | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    created_user_name: str | None = None
    recipient_name: str | None = None


class AttachmentModel(LockstepModel):
    """A file attached to a record."""

    attachment_id: str | None = None
    group_key: str | None = None
    table_key: str | None = None
    object_key: str | None = None
    file_name: str | None = None
    file_ext: str | None = None
    attachment_type_id: str | None = None
    is_archived: bool | None = None
    origin_attachment_id: str | None = None
    view_internal: bool | None = None
    view_external: bool | None = None
    erp_key: str | None = None
    app_enrollment_id: str | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    attachment_type: str | None = None


class CompanyModel(LockstepModel):
    """A customer, vendor or the account's own company."""

    company_id: str | None = None
    company_name: str | None = None
    erp_key: str | None = None
    company_type: str | None = None
    company_status: str | None = None
    parent_company_id: str | None = None
    enterprise_id: str | None = None
    group_key: str | None = None
    is_active: bool | None = None
    default_currency_code: str | None = None
    company_logo_url: str | None = None
    primary_contact_id: str | None = None
    address1: str | None = None
    address2: str | None = None
    address3: str | None = None
    city: str | None = None
    state_region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone_number: str | None = None
    fax_number: str | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    modified: datetime | None = None
    modified_user_id: str | None = None
    tax_id: str | None = None
    duns_number: str | None = None
    ap_email_address: str | None = None
    ar_email_address: str | None = None
    domain_name: str | None = None
    app_enrollment_id: str | None = None
    notes: list[NoteModel] | None = None
    attachments: list[AttachmentModel] | None = None
    contacts: list[ContactModel] | None = None


class ContactModel(LockstepModel):
    """A person working at a company."""

    contact_id: str | None = None
    company_id: str | None = None
    group_key: str | None = None
    erp_key: str | None = None
    contact_name: str | None = None
    contact_code: str | None = None
    title: str | None = None
    role_code: str | None = None
    email_address: str | None = None
    phone: str | None = None
    fax: str | None = None
    address1: str | None = None
    address2: str | None = None
    address3: str | None = None
    city: str | None = None
    state_region: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    is_active: bool | None = None
    webpage_url: str | None = None
    picture_url: str | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    modified: datetime | None = None
    modified_user_id: str | None = None
    app_enrollment_id: str | None = None
    notes: list[NoteModel] | None = None
    attachments: list[AttachmentModel] | None = None


class InvoiceModel(LockstepModel):
    """A bill sent from one company to another.

    The creator of the invoice is identified by ``company_id`` and the
    recipient by ``customer_id``.
    """

    group_key: str | None = None
    invoice_id: str | None = None
    company_id: str | None = None
    customer_id: str | None = None
    erp_key: str | None = None
    purchase_order_code: str | None = None
    reference_code: str | None = None
    salesperson_code: str | None = None
    salesperson_name: str | None = None
    invoice_type_code: str | None = None
    invoice_status_code: str | None = None
    terms_code: str | None = None
    special_terms: str | None = None
    currency_code: str | None = None
    total_amount: float | None = None
    sales_tax_amount: float | None = None
    discount_amount: float | None = None
    outstanding_balance_amount: float | None = None
    invoice_date: date | None = None
    discount_date: date | None = None
    posted_date: date | None = None
    invoice_closed_date: date | None = None
    payment_due_date: date | None = None
    imported_date: date | None = None
    primary_origination_address_id: str | None = None
    primary_bill_to_address_id: str | None = None
    primary_ship_to_address_id: str | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    modified: datetime | None = None
    modified_user_id: str | None = None
    app_enrollment_id: str | None = None
    is_voided: bool | None = None
    in_dispute: bool | None = None
    currency_rate: float | None = None
    base_currency_total_amount: float | None = None
    base_currency_outstanding_balance_amount: float | None = None
    notes: list[NoteModel] | None = None
    attachments: list[AttachmentModel] | None = None
    company: CompanyModel | None = None
    customer: CompanyModel | None = None


class InvoiceSummaryModel(LockstepModel):
    """Invoice data shaped for the invoice summary view."""

    group_key: str | None = None
    customer_id: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    customer_name: str | None = None
    status: str | None = None
    payment_due_date: date | None = None
    invoice_amount: float | None = None
    outstanding_balance: float | None = None
    invoice_type_code: str | None = None
    newest_activity: date | None = None
    days_past_due: int | None = None
    payment_numbers: list[str] | None = None
    payment_ids: list[str] | None = None
    base_currency_code: str | None = None
    invoice_currency_code: str | None = None


class AtRiskInvoiceSummaryModel(LockstepModel):
    """Invoice data shaped for the at-risk invoice summary view."""

    report_date: date | None = None
    group_key: str | None = None
    customer_id: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    customer_name: str | None = None
    status: str | None = None
    payment_due_date: date | None = None
    invoice_amount: float | None = None
    outstanding_balance: float | None = None
    invoice_type_code: str | None = None
    newest_activity: date | None = None
    days_past_due: int | None = None
    payment_numbers: list[str] | None = None
    payment_ids: list[str] | None = None


class PaymentAppliedModel(LockstepModel):
    """The application of part of a payment to an invoice."""

    group_key: str | None = None
    payment_applied_id: str | None = None
    invoice_id: str | None = None
    payment_id: str | None = None
    erp_key: str | None = None
    apply_to_invoice_date: date | None = None
    payment_applied_amount: float | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    modified: datetime | None = None
    modified_user_id: str | None = None
    app_enrollment_id: str | None = None


class PaymentModel(LockstepModel):
    """Money sent from one company to another.

    A single payment may cover several invoices; the split is described by
    ``applications``. ``unapplied_amount`` is non-zero (and ``is_open`` true)
    while part of the payment has not yet been applied to an invoice.
    """

    group_key: str | None = None
    payment_id: str | None = None
    company_id: str | None = None
    erp_key: str | None = None
    erp_update_status: int | None = None
    erp_update_action: int | None = None
    payment_type: str | None = None
    tender_type: str | None = None
    is_open: bool | None = None
    memo_text: str | None = None
    payment_date: date | None = None
    post_date: date | None = None
    payment_amount: float | None = None
    unapplied_amount: float | None = None
    currency_code: str | None = None
    bank_account_id: str | None = None
    reference_code: str | None = None
    created: datetime | None = None
    created_user_id: str | None = None
    modified: datetime | None = None
    modified_user_id: str | None = None
    app_enrollment_id: str | None = None
    is_voided: bool | None = None
    in_dispute: bool | None = None
    currency_rate: float | None = None
    base_currency_payment_amount: float | None = None
    base_currency_unapplied_amount: float | None = None
    service_fabric_status: str | None = None
    source_modified_date: datetime | None = None
    applications: list[PaymentAppliedModel] | None = None
    notes: list[NoteModel] | None = None
    attachments: list[AttachmentModel] | None = None


class PaymentSummaryModel(LockstepModel):
    """Payment data shaped for the payment summary view."""

    group_key: str | None = None
    payment_id: str | None = None
    erp_key: str | None = None
    payment_type: str | None = None
    tender_type: str | None = None
    payment_date: date | None = None
    payment_amount: float | None = None
    unapplied_amount: float | None = None
    currency_code: str | None = None
    reference_code: str | None = None
    customer_name: str | None = None
    customer_id: str | None = None
    is_open: bool | None = None
    invoice_count: int | None = None
    total_payments_applied: float | None = None
    invoice_list: list[str] | None = None
    invoice_id_list: list[str] | None = None
    base_currency_code: str | None = None
    base_currency_payment_amount: float | None = None
    base_currency_unapplied_amount: float | None = None


class PaymentSummaryTotalsModel(LockstepModel):
    """Totals across all payments matched by a summary query."""

    total_payments_count: int | None = None
    total_payments_amount: float | None = None
    unapplied_count: int | None = None
    unapplied_amount: float | None = None
    total_invoices_paid: int | None = None


class PaymentDetailModel(LockstepModel):
    """Payment data shaped for the payment detail view."""

    group_key: str | None = None
    payment_id: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    memo_text: str | None = None
    reference_code: str | None = None
    primary_contact: str | None = None
    email: str | None = None
    payment_amount: float | None = None
    unapplied_amount: float | None = None
    payment_type: str | None = None
    payment_date: date | None = None
    post_date: date | None = None
    phone: str | None = None
    fax: str | None = None
    address1: str | None = None
    address2: str | None = None
    address3: str | None = None
    city: str | None = None
    state_region: str | None = None
    postal_code: str | None = None
    country_code: str | None = None
    currency_code: str | None = None
    base_currency_code: str | None = None
    base_currency_payment_amount: float | None = None
    base_currency_unapplied_amount: float | None = None


class PaymentDetailHeaderModel(LockstepModel):
    """Group level payment totals."""

    group_key: str | None = None
    base_currency_code: str | None = None
    customer_count: int | None = None
    amount_collected: float | None = None
    unapplied_amount: float | None = None
    paid_invoice_count: int | None = None
    open_invoice_count: int | None = None


class TransactionModel(LockstepModel):
    """An invoice, credit memo or payment seen through a common shape."""

    group_key: str | None = None
    base_currency_code: str | None = None
    reference_number: str | None = None
    transaction_id: str | None = None
    transaction_status: str | None = None
    transaction_type: str | None = None
    transaction_sub_type: str | None = None
    transaction_date: date | None = None
    due_date: date | None = None
    days_past_due: int | None = None
    currency_code: str | None = None
    transaction_amount: float | None = None
    outstanding_amount: float | None = None
    base_currency_transaction_amount: float | None = None
    base_currency_outstanding_amount: float | None = None
    transaction_detail_count: int | None = None
    supports_erp_pdf_retrieval: bool | None = None
    transaction_customer_id: str | None = None


CompanyModel.model_rebuild()
