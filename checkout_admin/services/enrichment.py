"""Best-effort billing contact and plan enrichment for payment-log rows."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkout_admin.config import settings
from checkout_admin.models.checkout import BillingAddress, Plan
from checkout_admin.schemas.payment_logs import PaymentLogRead

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingContact:
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def full_name(self) -> str | None:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return None


def placeholder_email(user_id: str | int | None) -> str:
    return f"user{user_id if user_id is not None else ''}@{settings.placeholder_email_domain}"


def _contact_from(address: BillingAddress) -> BillingContact:
    return BillingContact(
        email=address.email,
        first_name=address.first_name,
        last_name=address.last_name,
    )


def fetch_billing_contacts(
    db: Session, user_ids: Sequence[str]
) -> dict[tuple[str | None, str | None], BillingContact]:
    """Load billing contacts keyed by (user_id, product_id); first row wins."""
    if not user_ids:
        return {}
    stmt = (
        select(BillingAddress)
        .where(BillingAddress.user_id.in_(user_ids))
        .order_by(BillingAddress.id.asc())
    )
    contacts: dict[tuple[str | None, str | None], BillingContact] = {}
    for address in db.scalars(stmt):
        contacts.setdefault((address.user_id, address.product_id), _contact_from(address))
    return contacts


def fetch_billing_contact(
    db: Session, user_id: str | None, product_id: str | None
) -> BillingContact | None:
    """Single-row lookup used by the detail and invoice views. Never raises."""
    if user_id is None:
        return None
    stmt = (
        select(BillingAddress)
        .where(
            BillingAddress.user_id == user_id,
            BillingAddress.product_id == product_id,
        )
        .order_by(BillingAddress.id.asc())
        .limit(1)
    )
    try:
        address = db.scalars(stmt).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not fetch billing address: %s", exc)
        return None
    return _contact_from(address) if address else None


def _fetch_plan_names(db: Session, plan_ids: Sequence[int]) -> dict[int, str]:
    if not plan_ids:
        return {}
    stmt = select(Plan.id, Plan.plan_name).where(Plan.id.in_(plan_ids))
    return {plan_id: name for plan_id, name in db.execute(stmt)}


def apply_placeholders(rows: Sequence[PaymentLogRead]) -> None:
    for row in rows:
        if not row.email:
            row.email = placeholder_email(row.user_id)


def enrich_payment_logs(db: Session, rows: Sequence[PaymentLogRead]) -> None:
    """Attach email, customer_name and plan_name in place.

    Lookup failures are logged and leave placeholder values; they never fail
    the request.
    """
    user_ids = sorted({row.user_id for row in rows if row.user_id is not None})
    plan_ids = sorted({row.plan_id for row in rows if row.plan_id is not None})

    contacts: dict[tuple[str | None, str | None], BillingContact] = {}
    try:
        contacts = fetch_billing_contacts(db, user_ids)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not fetch billing emails: %s", exc)

    plan_names: dict[int, str] = {}
    try:
        plan_names = _fetch_plan_names(db, plan_ids)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not fetch plan names: %s", exc)

    for row in rows:
        contact = contacts.get((row.user_id, row.app_id))
        row.email = (contact.email if contact else None) or placeholder_email(row.user_id)
        row.customer_name = contact.full_name if contact else None
        if row.plan_id is not None:
            row.plan_name = plan_names.get(row.plan_id)
