"""Subscription listing with a derived display status."""
from __future__ import annotations

from datetime import date

from sqlalchemy import case, func, literal, select
from sqlalchemy.orm import Session

from checkout_admin.errors import NotFound
from checkout_admin.models.checkout import Plan, Product, Subscription
from checkout_admin.schemas.payment_logs import ProductOption
from checkout_admin.schemas.subscriptions import PlanRead, SubscriptionRead
from checkout_admin.services.common import expiring_soon_cutoff, to_float, today
from checkout_admin.services.filters import FilterSet

STATUS_UNKNOWN = "Unknown"
STATUS_EXPIRED = "Expired"
STATUS_EXPIRING_SOON = "Expiring Soon"
STATUS_ACTIVE = "Active"


def derive_status(end_date: date | None, current: date) -> str:
    """Python twin of ``status_expression`` for rows built outside SQL."""
    if end_date is None:
        return STATUS_UNKNOWN
    if end_date < current:
        return STATUS_EXPIRED
    if end_date <= expiring_soon_cutoff(current):
        return STATUS_EXPIRING_SOON
    return STATUS_ACTIVE


def status_expression(current: date):
    # Order matters: a null end date must win before any comparison.
    end = Subscription.subscription_end_date
    return case(
        (end.is_(None), literal(STATUS_UNKNOWN)),
        (end < current, literal(STATUS_EXPIRED)),
        (end <= expiring_soon_cutoff(current), literal(STATUS_EXPIRING_SOON)),
        else_=literal(STATUS_ACTIVE),
    )


def _with_plan(stmt):
    return stmt.outerjoin(Plan, Plan.id == Subscription.plan_id)


def shape_subscription(
    sub: Subscription, plan_name: str | None, status: str
) -> SubscriptionRead:
    return SubscriptionRead(
        id=sub.id,
        product_name=sub.product_name,
        product_id=sub.product_id,
        user_id=sub.user_id,
        subscription_period=sub.subscription_period,
        subscription_id=sub.subscription_id,
        subscription_start_date=sub.subscription_start_date,
        subscription_end_date=sub.subscription_end_date,
        plan_price=None if sub.plan_price is None else to_float(sub.plan_price),
        currency=sub.currency,
        plan_id=sub.plan_id,
        payment_method=sub.payment_method,
        plan_name=plan_name,
        status=status,
    )


class Subscriptions:
    @staticmethod
    def count(db: Session, filters: FilterSet) -> int:
        stmt = _with_plan(select(func.count()).select_from(Subscription))
        return int(db.scalar(filters.apply(stmt)) or 0)

    @staticmethod
    def page(
        db: Session,
        filters: FilterSet,
        page: int,
        limit: int,
        current: date | None = None,
    ) -> list[SubscriptionRead]:
        current = current or today()
        stmt = _with_plan(
            select(
                Subscription,
                Plan.plan_name,
                status_expression(current).label("status"),
            ).select_from(Subscription)
        )
        stmt = (
            filters.apply(stmt)
            .order_by(Subscription.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return [
            shape_subscription(sub, plan_name, status)
            for sub, plan_name, status in db.execute(stmt)
        ]

    @staticmethod
    def get(db: Session, subscription_id: int, current: date | None = None) -> SubscriptionRead:
        current = current or today()
        stmt = _with_plan(
            select(
                Subscription,
                Plan.plan_name,
                status_expression(current).label("status"),
            ).select_from(Subscription)
        ).where(Subscription.id == subscription_id)
        row = db.execute(stmt).first()
        if not row:
            raise NotFound("Subscription not found")
        sub, plan_name, status = row
        return shape_subscription(sub, plan_name, status)

    @staticmethod
    def get_record(db: Session, subscription_id: int) -> Subscription:
        sub = db.get(Subscription, subscription_id)
        if not sub:
            raise NotFound("Subscription not found")
        return sub

    @staticmethod
    def plans(db: Session, product_name: str | None = None) -> list[PlanRead]:
        stmt = select(Plan)
        if product_name:
            stmt = stmt.where(Plan.product_name == product_name)
        stmt = stmt.order_by(Plan.plan_name.asc())
        return [PlanRead.model_validate(plan) for plan in db.scalars(stmt)]

    @staticmethod
    def products(db: Session) -> list[ProductOption]:
        stmt = select(Product).where(Product.status == 1).order_by(Product.name.asc())
        return [ProductOption.model_validate(p) for p in db.scalars(stmt)]


subscriptions = Subscriptions()
