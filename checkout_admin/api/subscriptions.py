"""Subscription report and lifecycle action routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from checkout_admin.api.deps import (
    acting_admin,
    get_db,
    get_settings,
    require_admin,
    subscription_filters,
)
from checkout_admin.config import Settings
from checkout_admin.schemas.common import ERROR_RESPONSES, ActionResponse
from checkout_admin.schemas.payment_logs import ProductListResponse
from checkout_admin.schemas.subscriptions import (
    CancelRequest,
    PlanListResponse,
    RenewalChargeRequest,
    RenewalChargeResponse,
    SubscriptionDetailResponse,
    SubscriptionListResponse,
    UpdateEndDateRequest,
)
from checkout_admin.services.billing_client import BillingClient
from checkout_admin.services.common import data_store_guard
from checkout_admin.services.filters import SubscriptionFilters
from checkout_admin.services.lifecycle import lifecycle
from checkout_admin.services.report_source import subscription_report
from checkout_admin.services.subscriptions import subscriptions

router = APIRouter(
    prefix="/subscriptions",
    tags=["subscriptions"],
    dependencies=[Depends(require_admin)],
    responses=ERROR_RESPONSES,
)


def get_billing_client() -> BillingClient:
    return BillingClient()


@router.get("", response_model=SubscriptionListResponse)
def list_subscriptions(
    page: int = Query(default=1),
    limit: int = Query(default=10),
    filters: SubscriptionFilters = Depends(subscription_filters),
    db: Session = Depends(get_db),
    s: Settings = Depends(get_settings),
):
    return subscription_report(
        db, filters, page, limit, fallback_enabled=s.report_fallback_enabled
    )


@router.get("/plans/list", response_model=PlanListResponse)
def list_plans(
    product_name: str | None = Query(default=None, alias="productName"),
    db: Session = Depends(get_db),
):
    with data_store_guard(db, "Error fetching plans"):
        return PlanListResponse(data=subscriptions.plans(db, product_name))


@router.get("/products/list", response_model=ProductListResponse)
def list_products(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching products"):
        return ProductListResponse(data=subscriptions.products(db))


@router.post("/cancel", response_model=ActionResponse)
def cancel_subscription(
    payload: CancelRequest,
    db: Session = Depends(get_db),
    admin_user: str = Depends(acting_admin),
    client: BillingClient = Depends(get_billing_client),
    s: Settings = Depends(get_settings),
):
    message = lifecycle.cancel(
        db, payload, admin_user, client, notify_billing=s.billing_cancel_enabled
    )
    return ActionResponse(message=message)


@router.post("/renewal-charge", response_model=RenewalChargeResponse)
def charge_renewal(
    payload: RenewalChargeRequest,
    db: Session = Depends(get_db),
    admin_user: str = Depends(acting_admin),
    client: BillingClient = Depends(get_billing_client),
):
    return lifecycle.charge_renewal(db, payload, admin_user, client)


@router.post("/update-end-date", response_model=ActionResponse)
def update_end_date(
    payload: UpdateEndDateRequest,
    db: Session = Depends(get_db),
    admin_user: str = Depends(acting_admin),
):
    return ActionResponse(message=lifecycle.update_end_date(db, payload, admin_user))


@router.get("/{subscription_id}", response_model=SubscriptionDetailResponse)
def get_subscription(subscription_id: int, db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching subscription"):
        row = subscriptions.get(db, subscription_id)
    return SubscriptionDetailResponse(data=row)
