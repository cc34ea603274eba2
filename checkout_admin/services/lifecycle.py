"""Subscription lifecycle actions: cancel, renewal charge and end-date update.

Every action first appends a ``PaymentComment`` audit row and commits it on
its own. The follow-up effect (billing call or end-date update) runs after
that commit, so a failed effect leaves the comment in place.
"""
from __future__ import annotations

import logging
import time

from sqlalchemy.orm import Session

from checkout_admin.errors import ExternalServiceFailure, InvalidInput
from checkout_admin.models.checkout import PaymentComment, WorkType
from checkout_admin.schemas.subscriptions import (
    CancelRequest,
    RenewalChargeRequest,
    RenewalChargeResponse,
    UpdateEndDateRequest,
)
from checkout_admin.services.billing_client import BillingAPIError, BillingClient
from checkout_admin.services.common import data_store_guard, parse_date
from checkout_admin.services.subscriptions import Subscriptions

logger = logging.getLogger(__name__)


FAILED_CHARGE_STATUSES = {"error", "fail", "failed", "failure", "false", "0"}


def _now() -> int:
    return int(time.time())


def charge_succeeded(status: object) -> bool:
    """A missing status counts as submitted; booleans are taken as-is."""
    if status is None:
        return True
    if isinstance(status, bool):
        return status
    return str(status).strip().lower() not in FAILED_CHARGE_STATUSES


class Lifecycle:
    @staticmethod
    def record_comment(
        db: Session,
        product_id: str,
        comment: str,
        admin_user: str,
        work_type: WorkType,
    ) -> PaymentComment:
        entry = PaymentComment(
            product_id=product_id,
            comment=comment or "",
            addedon=_now(),
            adminuser=admin_user,
            work_type=work_type.value,
        )
        with data_store_guard(db, "Error saving comment"):
            db.add(entry)
            db.commit()
            db.refresh(entry)
        logger.info(
            "Recorded %s comment",
            work_type.value,
            extra={"work_type": work_type.value, "product_id": product_id},
        )
        return entry

    @staticmethod
    def cancel(
        db: Session,
        payload: CancelRequest,
        admin_user: str,
        client: BillingClient | None = None,
        notify_billing: bool = False,
    ) -> str:
        Lifecycle.record_comment(
            db, payload.product_id, payload.comment, admin_user, WorkType.cancel
        )
        if notify_billing:
            client = client or BillingClient()
            try:
                client.cancel_subscription(
                    payload.product_id,
                    payload.user_id,
                    payload.product_name,
                    payload.comment,
                    payload.cancelled_type,
                )
            except BillingAPIError as exc:
                logger.warning(
                    "Billing cancel for %s did not complete: %s",
                    payload.product_id,
                    exc,
                    extra={"work_type": WorkType.cancel.value},
                )
        return "Subscription cancelled successfully"

    @staticmethod
    def charge_renewal(
        db: Session,
        payload: RenewalChargeRequest,
        admin_user: str,
        client: BillingClient | None = None,
    ) -> RenewalChargeResponse:
        Lifecycle.record_comment(
            db, payload.product_id, payload.comment, admin_user, WorkType.renewal
        )
        client = client or BillingClient()
        try:
            result = client.charge_renewal(payload.product_id, payload.product_name)
        except BillingAPIError as exc:
            raise ExternalServiceFailure(
                "Renewal charge failed; the comment was saved"
            ) from exc
        status = result.get("status")
        succeeded = charge_succeeded(status)
        if not succeeded:
            logger.warning(
                "Billing declined renewal charge: %s",
                status,
                extra={"work_type": WorkType.renewal.value, "product_id": payload.product_id},
            )
        return RenewalChargeResponse(
            success=succeeded,
            status=status,
            message=str(result.get("message") or "Renewal charge submitted"),
        )

    @staticmethod
    def update_end_date(
        db: Session, payload: UpdateEndDateRequest, admin_user: str
    ) -> str:
        new_end_date = parse_date(payload.new_end_date, "newEndDate")
        with data_store_guard(db, "Error updating end date"):
            subscription = Subscriptions.get_record(db, payload.subscription_id)
        current = subscription.subscription_end_date
        if current is not None and new_end_date < current:
            raise InvalidInput(
                "newEndDate cannot be earlier than the current end date",
                field="newEndDate",
            )
        Lifecycle.record_comment(
            db, payload.product_id, payload.comment, admin_user, WorkType.update_end_date
        )
        with data_store_guard(db, "Error updating end date"):
            subscription.subscription_end_date = new_end_date
            db.commit()
        return "End date updated successfully"


lifecycle = Lifecycle()
