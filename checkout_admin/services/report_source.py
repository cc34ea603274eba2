"""Report sources for the listing endpoints.

``LiveReportSource`` answers from the checkout database. ``SyntheticReportSource``
builds deterministic rows of the same shape and is only used, when enabled,
after the live source has raised ``DataStoreUnavailable``. A response comes
entirely from one source or the other.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from typing import Protocol

from sqlalchemy.orm import Session

from checkout_admin.errors import DataStoreUnavailable
from checkout_admin.metrics import REPORT_FALLBACKS
from checkout_admin.models.checkout import PaymentLog, Subscription
from checkout_admin.schemas.common import Pagination
from checkout_admin.schemas.payment_logs import PaymentLogListResponse
from checkout_admin.schemas.subscriptions import SubscriptionListResponse
from checkout_admin.services.common import (
    data_store_guard,
    pagination,
    report_timezone,
    today,
    validate_page,
)
from checkout_admin.services.enrichment import apply_placeholders, enrich_payment_logs
from checkout_admin.services.filters import (
    FilterSet,
    PaymentLogFilters,
    SubscriptionFilters,
    build_payment_log_filters,
    build_subscription_filters,
)
from checkout_admin.services.payment_logs import (
    PaymentLogs,
    shape_payment_log,
    summarize,
)
from checkout_admin.services.subscriptions import (
    Subscriptions,
    derive_status,
    shape_subscription,
)

logger = logging.getLogger(__name__)


class ReportSource(Protocol):
    degraded: bool

    def payment_logs(
        self, filters: FilterSet, page: int, limit: int
    ) -> PaymentLogListResponse: ...

    def subscriptions(
        self, filters: FilterSet, page: int, limit: int
    ) -> SubscriptionListResponse: ...


class LiveReportSource:
    degraded = False

    def __init__(self, db: Session, tz: tzinfo | None = None) -> None:
        self.db = db
        self.tz = tz or report_timezone()

    def payment_logs(
        self, filters: FilterSet, page: int, limit: int
    ) -> PaymentLogListResponse:
        with data_store_guard(self.db, "Error fetching payment logs"):
            total = PaymentLogs.count(self.db, filters)
            summary = PaymentLogs.summary(self.db, filters)
            rows = PaymentLogs.page(self.db, filters, page, limit, self.tz)
        enrich_payment_logs(self.db, rows)
        return PaymentLogListResponse(
            data=rows,
            summary=summary,
            pagination=Pagination(**pagination(page, limit, total)),
        )

    def subscriptions(
        self, filters: FilterSet, page: int, limit: int
    ) -> SubscriptionListResponse:
        with data_store_guard(self.db, "Error fetching subscriptions"):
            total = Subscriptions.count(self.db, filters)
            rows = Subscriptions.page(self.db, filters, page, limit, today(self.tz))
        return SubscriptionListResponse(
            data=rows,
            pagination=Pagination(**pagination(page, limit, total)),
        )


# ── Synthetic rows ───────────────────────────────────────

SYNTHETIC_ROW_COUNT = 25
_SYNTHETIC_EPOCH = 1704067200  # 2024-01-01T00:00:00Z
_PRODUCTS = ("App Builder", "Website Builder", "Chatbot")
_METHODS = ("stripe", "paypal", "razorpay")
_SOURCES = ("web", "ios", "android")
_PERIODS = ("monthly", "yearly")
_END_OFFSETS = (None, -10, 3, 7, 8, 30)


def synthetic_payment_logs() -> list[PaymentLog]:
    logs = []
    for index in range(SYNTHETIC_ROW_COUNT, 0, -1):
        term = index % 3 + 1
        logs.append(
            PaymentLog(
                id=index,
                product_id=f"demo-app-{index:03d}",
                product_name=_PRODUCTS[index % len(_PRODUCTS)],
                user_id=str(1000 + index),
                order_id=f"ORD-{index:05d}",
                description="Sample payment",
                subscription_period=_PERIODS[index % len(_PERIODS)],
                net_amount=Decimal("9.99") + index,
                currency="USD",
                tax_amount=Decimal("0.00"),
                invoice_id=f"INV-{index:05d}",
                transaction_id=f"txn_{index:08d}",
                payment_method=_METHODS[index % len(_METHODS)],
                payment_source=_SOURCES[index % len(_SOURCES)],
                payment_country="us",
                payment_terms=term,
                addedon=_SYNTHETIC_EPOCH + index * 3600,
            )
        )
    return logs


def synthetic_subscriptions(current: date) -> list[Subscription]:
    subs = []
    for index in range(SYNTHETIC_ROW_COUNT, 0, -1):
        offset = _END_OFFSETS[index % len(_END_OFFSETS)]
        subs.append(
            Subscription(
                id=index,
                product_id=f"demo-app-{index:03d}",
                product_name=_PRODUCTS[index % len(_PRODUCTS)],
                user_id=str(1000 + index),
                subscription_id=f"sub_{index:08d}",
                subscription_period=_PERIODS[index % len(_PERIODS)],
                subscription_start_date=current - timedelta(days=365),
                subscription_end_date=(
                    None if offset is None else current + timedelta(days=offset)
                ),
                plan_price=Decimal("9.99") + index,
                currency="USD",
                payment_method=_METHODS[index % len(_METHODS)],
            )
        )
    return subs


class SyntheticReportSource:
    """Deterministic sample rows; filters are not applied."""

    degraded = True

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz or report_timezone()

    def payment_logs(
        self, filters: FilterSet, page: int, limit: int
    ) -> PaymentLogListResponse:
        logs = synthetic_payment_logs()
        summary = summarize(
            [(log.payment_terms, float(log.net_amount)) for log in logs]
        )
        offset = (page - 1) * limit
        rows = [shape_payment_log(log, self.tz) for log in logs[offset:offset + limit]]
        apply_placeholders(rows)
        return PaymentLogListResponse(
            data=rows,
            summary=summary,
            pagination=Pagination(**pagination(page, limit, len(logs))),
            degraded=True,
        )

    def subscriptions(
        self, filters: FilterSet, page: int, limit: int
    ) -> SubscriptionListResponse:
        current = today(self.tz)
        subs = synthetic_subscriptions(current)
        offset = (page - 1) * limit
        rows = [
            shape_subscription(sub, None, derive_status(sub.subscription_end_date, current))
            for sub in subs[offset:offset + limit]
        ]
        return SubscriptionListResponse(
            data=rows,
            pagination=Pagination(**pagination(page, limit, len(subs))),
            degraded=True,
        )


# ── Orchestration ────────────────────────────────────────


def _fall_back(report: str, exc: DataStoreUnavailable) -> SyntheticReportSource:
    REPORT_FALLBACKS.labels(report).inc()
    logger.warning(
        "Serving synthetic %s rows: %s", report, exc.message, exc_info=exc.__cause__
    )
    return SyntheticReportSource()


def payment_log_report(
    db: Session,
    filters: PaymentLogFilters,
    page: int,
    limit: int,
    *,
    fallback_enabled: bool = False,
    source: ReportSource | None = None,
) -> PaymentLogListResponse:
    validate_page(page, limit)
    filter_set = build_payment_log_filters(filters)
    if filter_set:
        logger.debug(
            "Payment log report filters %s bound to %s",
            filters.as_dict(),
            filter_set.params,
        )
    source = source or LiveReportSource(db)
    try:
        return source.payment_logs(filter_set, page, limit)
    except DataStoreUnavailable as exc:
        if not fallback_enabled:
            raise
        return _fall_back("payment_logs", exc).payment_logs(filter_set, page, limit)


def subscription_report(
    db: Session,
    filters: SubscriptionFilters,
    page: int,
    limit: int,
    *,
    fallback_enabled: bool = False,
    source: ReportSource | None = None,
) -> SubscriptionListResponse:
    validate_page(page, limit)
    filter_set = build_subscription_filters(filters)
    if filter_set:
        logger.debug("Subscription report filters bound to %s", filter_set.params)
    source = source or LiveReportSource(db)
    try:
        return source.subscriptions(filter_set, page, limit)
    except DataStoreUnavailable as exc:
        if not fallback_enabled:
            raise
        return _fall_back("subscriptions", exc).subscriptions(filter_set, page, limit)
