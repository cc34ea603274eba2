from fastapi import Depends, Header, HTTPException, Query, Request

from checkout_admin.config import Settings
from checkout_admin.db import get_db
from checkout_admin.services.auth import AdminIdentity, decode_access_token
from checkout_admin.services.filters import PaymentLogFilters, SubscriptionFilters

__all__ = [
    "get_db",
    "get_settings",
    "require_admin",
    "acting_admin",
    "payment_log_filters",
    "subscription_filters",
]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip()
    return None


def require_admin(
    request: Request,
    authorization: str | None = Header(default=None),
    s: Settings = Depends(get_settings),
) -> AdminIdentity:
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    identity = decode_access_token(token, s)
    request.state.actor_id = identity.id
    return identity


def acting_admin(
    identity: AdminIdentity = Depends(require_admin),
    s: Settings = Depends(get_settings),
) -> str:
    return identity.acting_name(s.default_admin_user)


def payment_log_filters(
    search_by_app_id: str | None = Query(default=None, alias="searchByAppId"),
    search_by_app_id_or_transaction: str | None = Query(
        default=None, alias="searchByAppIdOrTransaction"
    ),
    search_date: str | None = Query(default=None, alias="searchDate"),
    subscription_type: str | None = Query(default=None, alias="subscriptionType"),
    product_id: str | None = Query(default=None, alias="productId"),
    subscription_period: str | None = Query(default=None, alias="subscriptionPeriod"),
    addons: str | None = Query(default=None),
    payment_mode: str | None = Query(default=None, alias="paymentMode"),
    payment_source: str | None = Query(default=None, alias="paymentSource"),
    claimed_user: str | None = Query(default=None, alias="claimedUser"),
    language: str | None = Query(default=None),
) -> PaymentLogFilters:
    return PaymentLogFilters(
        search_by_app_id=search_by_app_id,
        search_by_app_id_or_transaction=search_by_app_id_or_transaction,
        search_date=search_date,
        subscription_type=subscription_type,
        product_id=product_id,
        subscription_period=subscription_period,
        addons=addons,
        payment_mode=payment_mode,
        payment_source=payment_source,
        claimed_user=claimed_user,
        language=language,
    )


def subscription_filters(
    product_name: str | None = Query(default=None, alias="productName"),
    product_id: str | None = Query(default=None, alias="productId"),
    plan_name: str | None = Query(default=None, alias="planName"),
    period: str | None = Query(default=None),
    payment_method: str | None = Query(default=None, alias="paymentMethod"),
    start_date: str | None = Query(default=None, alias="startDate"),
    renewal_date: str | None = Query(default=None, alias="renewalDate"),
) -> SubscriptionFilters:
    return SubscriptionFilters(
        product_name=product_name,
        product_id=product_id,
        plan_name=plan_name,
        period=period,
        payment_method=payment_method,
        start_date=start_date,
        renewal_date=renewal_date,
    )
