"""CSV export and plain-text invoice rendering for payment logs."""
from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from checkout_admin.schemas.payment_logs import PaymentLogRead
from checkout_admin.services.enrichment import BillingContact, placeholder_email

CSV_HEADERS = (
    "S.No",
    "App ID",
    "App Name",
    "Email",
    "Message",
    "Payment Period",
    "Amount",
    "Currency",
    "Tax Amount",
    "Invoice ID",
    "Transaction ID",
    "Payment Mode",
    "Payment Source",
    "Refund Status",
    "IP Address",
    "Last Payment Date",
    "Claim To",
    "Subscription Type",
    "Product Name",
    "Product ID",
)

DEFAULT_CURRENCY = "USD"
RULE = "=" * 80
DIVIDER = "-" * 80


def _text(value: object, default: str = "") -> str:
    return str(value) if value else default


def _number(value: float | None) -> Decimal:
    # Decimal keeps the DECIMAL(10,2) text form and still counts as numeric,
    # so QUOTE_NONNUMERIC leaves it bare.
    return Decimal(f"{value or 0:.2f}")


def csv_row(index: int, row: PaymentLogRead) -> list[object]:
    return [
        index,
        _text(row.app_id),
        _text(row.app_name),
        _text(row.email),
        _text(row.message),
        _text(row.payment_period),
        _number(row.amount),
        _text(row.currency, DEFAULT_CURRENCY),
        _number(row.tax_amount),
        _text(row.invoice_id),
        _text(row.transaction_id),
        _text(row.payment_mode),
        _text(row.payment_source),
        _text(row.refund_status, "No"),
        _text(row.ip_address),
        _text(row.last_payment_date),
        _text(row.claim_to),
        _text(row.subscription_type),
        _text(row.product_name),
        _text(row.product_id),
    ]


def render_csv(rows: Sequence[PaymentLogRead]) -> str:
    """Header unquoted; text cells always quoted; S.No and amounts bare numbers."""
    output = io.StringIO()
    output.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for index, row in enumerate(rows, 1):
        writer.writerow(csv_row(index, row))
    return output.getvalue()


def export_filename(day: date) -> str:
    return f"payment-logs-{day.isoformat()}.csv"


def _money(currency: str, amount: float) -> str:
    return f"{currency} {amount:.2f}"


def render_invoice(row: PaymentLogRead, contact: BillingContact | None) -> str:
    currency = row.currency or DEFAULT_CURRENCY
    subtotal = row.amount or 0.0
    tax = row.tax_amount or 0.0
    email = (contact.email if contact else None) or placeholder_email(row.user_id)
    name = (contact.full_name if contact else None) or "N/A"

    lines = [
        "",
        RULE,
        "                                    INVOICE",
        RULE,
        "",
        f"Invoice ID:          {_text(row.invoice_id, 'N/A')}",
        f"Invoice Date:        {row.last_payment_date}",
        f"Transaction ID:      {_text(row.transaction_id, 'N/A')}",
        "",
        DIVIDER,
        "                              CUSTOMER DETAILS",
        DIVIDER,
        "",
        f"Customer Name:       {name}",
        f"Customer Email:      {email}",
        f"Product ID:          {_text(row.product_id, 'N/A')}",
        f"User ID:             {_text(row.user_id, 'N/A')}",
        "",
        DIVIDER,
        "                              ORDER DETAILS",
        DIVIDER,
        "",
        f"Product:             {_text(row.product_name, 'N/A')}",
        f"Description:         {_text(row.message, 'N/A')}",
        f"Subscription Period: {_text(row.payment_period, 'N/A')}",
        f"Payment Method:      {_text(row.payment_mode, 'N/A')}",
        f"Payment Source:      {_text(row.payment_source, 'N/A')}",
        "",
        DIVIDER,
        "                              PAYMENT SUMMARY",
        DIVIDER,
        "",
        f"Subtotal:            {_money(currency, subtotal)}",
        f"Tax:                 {_money(currency, tax)}",
        "                    " + "-" * 37,
        f"Total:               {_money(currency, subtotal + tax)}",
        "",
        RULE,
        "                          Thank you for your business!",
        RULE,
        "",
    ]
    return "\n".join(lines)


def invoice_filename(row: PaymentLogRead) -> str:
    return f"invoice-{row.invoice_id or row.id}.txt"
