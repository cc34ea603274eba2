"""Translate dashboard filter parameters into SQL predicates.

Each predicate is a SQLAlchemy expression carrying its own bound values; the
builder also records those values in order so the report entry points can log
exactly what a report was filtered by.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import tzinfo
from typing import Any

from sqlalchemy import Select, String, and_, cast, or_
from sqlalchemy.sql.elements import ColumnElement

from checkout_admin.models.checkout import PaymentLog, Plan, Subscription
from checkout_admin.services.common import day_bounds

SUBSCRIPTION_TYPE_CODES = {"new": 1, "trial": 1, "renewal": 2, "upgrade": 3}

CLAIMED = "claimed"
UNCLAIMED = "unclaimed"


@dataclass(frozen=True)
class PaymentLogFilters:
    search_by_app_id: str | None = None
    search_by_app_id_or_transaction: str | None = None
    search_date: str | None = None
    subscription_type: str | None = None
    product_id: str | None = None
    subscription_period: str | None = None
    addons: str | None = None
    payment_mode: str | None = None
    payment_source: str | None = None
    claimed_user: str | None = None
    language: str | None = None

    def as_dict(self) -> dict[str, str]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }


@dataclass(frozen=True)
class SubscriptionFilters:
    product_name: str | None = None
    product_id: str | None = None
    plan_name: str | None = None
    period: str | None = None
    payment_method: str | None = None
    start_date: str | None = None
    renewal_date: str | None = None


@dataclass
class FilterSet:
    clauses: list[ColumnElement[bool]] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    def add(self, clause: ColumnElement[bool], *values: Any) -> None:
        self.clauses.append(clause)
        self.params.extend(values)

    def apply(self, query: Select[Any]) -> Select[Any]:
        if not self.clauses:
            return query
        return query.where(and_(*self.clauses))

    def __bool__(self) -> bool:
        return bool(self.clauses)


def _contains(value: str) -> str:
    return f"%{value}%"


def subscription_type_code(label: str | None) -> int | None:
    if not label:
        return None
    return SUBSCRIPTION_TYPE_CODES.get(label.strip().lower())


def build_payment_log_filters(
    filters: PaymentLogFilters, tz: tzinfo | None = None
) -> FilterSet:
    result = FilterSet()

    if filters.search_by_app_id:
        pattern = _contains(filters.search_by_app_id)
        result.add(
            or_(PaymentLog.product_id.like(pattern), PaymentLog.order_id.like(pattern)),
            pattern,
            pattern,
        )
    if filters.search_by_app_id_or_transaction:
        pattern = _contains(filters.search_by_app_id_or_transaction)
        result.add(
            or_(
                PaymentLog.product_id.like(pattern),
                PaymentLog.transaction_id.like(pattern),
            ),
            pattern,
            pattern,
        )
    if filters.search_date:
        start, end = day_bounds(filters.search_date, tz)
        result.add(
            and_(PaymentLog.addedon >= start, PaymentLog.addedon < end), start, end
        )
    if filters.subscription_type:
        code = subscription_type_code(filters.subscription_type)
        if code is not None:
            result.add(PaymentLog.payment_terms == code, code)
    if filters.product_id:
        # The dashboard's product picker submits product names.
        result.add(PaymentLog.product_name == filters.product_id, filters.product_id)
    if filters.subscription_period:
        result.add(
            PaymentLog.subscription_period == filters.subscription_period,
            filters.subscription_period,
        )
    if filters.addons:
        pattern = _contains(filters.addons)
        result.add(PaymentLog.addon_type.like(pattern), pattern)
    if filters.payment_mode:
        result.add(PaymentLog.payment_method == filters.payment_mode, filters.payment_mode)
    if filters.payment_source:
        result.add(
            PaymentLog.payment_source == filters.payment_source, filters.payment_source
        )
    if filters.claimed_user:
        if filters.claimed_user == CLAIMED:
            result.add(
                and_(PaymentLog.claim_user.is_not(None), PaymentLog.claim_user != "")
            )
        elif filters.claimed_user == UNCLAIMED:
            result.add(or_(PaymentLog.claim_user.is_(None), PaymentLog.claim_user == ""))
        else:
            result.add(PaymentLog.claim_user == filters.claimed_user, filters.claimed_user)
    if filters.language:
        result.add(PaymentLog.payment_country == filters.language, filters.language)

    return result


def build_subscription_filters(filters: SubscriptionFilters) -> FilterSet:
    result = FilterSet()
    substring_columns = (
        (filters.product_name, Subscription.product_name),
        (filters.product_id, Subscription.product_id),
        (filters.plan_name, Plan.plan_name),
        (filters.period, Subscription.subscription_period),
        (filters.payment_method, Subscription.payment_method),
        (filters.start_date, cast(Subscription.subscription_start_date, String)),
        (filters.renewal_date, cast(Subscription.subscription_end_date, String)),
    )
    for value, column in substring_columns:
        if value:
            pattern = _contains(value)
            result.add(column.like(pattern), pattern)
    return result
