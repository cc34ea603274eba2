"""ORM mappings for the checkout platform tables read by the dashboard.

The upstream checkout system owns these tables. The dashboard reads them and
writes only ``appypie_payment_comment`` rows and subscription end dates.
"""
import enum
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from checkout_admin.db import Base

# ── Enums ────────────────────────────────────────────────


class PaymentTerm(int, enum.Enum):
    new = 1
    renewal = 2
    upgrade = 3


class WorkType(str, enum.Enum):
    cancel = "cancel"
    renewal = "renewal"
    update_end_date = "update_end_date"


# ── Payments ─────────────────────────────────────────────


class PaymentLog(Base):
    __tablename__ = "appypie_payment_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str | None] = mapped_column(String(100), index=True)
    product_name: Mapped[str | None] = mapped_column(String(255))
    user_id: Mapped[str | None] = mapped_column(String(64), index=True)
    order_id: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)
    subscription_period: Mapped[str | None] = mapped_column(String(50))
    net_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    plan_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    currency: Mapped[str | None] = mapped_column(String(10))
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    invoice_id: Mapped[str | None] = mapped_column(String(100))
    transaction_id: Mapped[str | None] = mapped_column(String(255), index=True)
    payment_method: Mapped[str | None] = mapped_column(String(50))
    payment_source: Mapped[str | None] = mapped_column(String(50))
    refund_status: Mapped[str | None] = mapped_column(String(20))
    ip_address: Mapped[str | None] = mapped_column(String(50))
    payment_country: Mapped[str | None] = mapped_column(String(10))
    payment_terms: Mapped[int | None] = mapped_column(Integer)
    customer_payment_type: Mapped[str | None] = mapped_column(String(50))
    addon_type: Mapped[str | None] = mapped_column(String(255))
    claim_user: Mapped[str | None] = mapped_column(String(100))
    plan_id: Mapped[int | None] = mapped_column(Integer)
    coupon_code: Mapped[str | None] = mapped_column(String(100))
    discount_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    addedon: Mapped[int | None] = mapped_column(Integer, index=True)


class BillingAddress(Base):
    __tablename__ = "appypie_billing_address"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str | None] = mapped_column(String(64), index=True)
    product_id: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255))
    first_name: Mapped[str | None] = mapped_column(String(120))
    last_name: Mapped[str | None] = mapped_column(String(120))
    address: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(120))
    state: Mapped[str | None] = mapped_column(String(120))
    zip: Mapped[str | None] = mapped_column(String(20))


class PaymentComment(Base):
    __tablename__ = "appypie_payment_comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(String(100), nullable=False)
    comment: Mapped[str] = mapped_column(Text, default="")
    addedon: Mapped[int] = mapped_column(Integer, nullable=False)
    adminuser: Mapped[str] = mapped_column(String(120), nullable=False)
    work_type: Mapped[str] = mapped_column(String(40), nullable=False)


# ── Subscriptions ────────────────────────────────────────


class Subscription(Base):
    __tablename__ = "appypie_subscription"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str | None] = mapped_column(String(100), index=True)
    product_name: Mapped[str | None] = mapped_column(String(255))
    user_id: Mapped[str | None] = mapped_column(String(64))
    plan_id: Mapped[int | None] = mapped_column(Integer)
    subscription_id: Mapped[str | None] = mapped_column(String(255))
    subscription_period: Mapped[str | None] = mapped_column(String(50))
    subscription_start_date: Mapped[date | None] = mapped_column(Date)
    subscription_end_date: Mapped[date | None] = mapped_column(Date)
    plan_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    currency: Mapped[str | None] = mapped_column(String(10))
    payment_method: Mapped[str | None] = mapped_column(String(50))
    is_cancelled: Mapped[bool] = mapped_column(Boolean, default=False)
    is_trial: Mapped[bool] = mapped_column(Boolean, default=False)


# ── Catalog ──────────────────────────────────────────────


class Product(Base):
    __tablename__ = "appypie_product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[int] = mapped_column(Integer, default=1)


class Plan(Base):
    __tablename__ = "appypie_plan"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    identifire: Mapped[str | None] = mapped_column(String(120))
    product_name: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[int] = mapped_column(Integer, default=1)
    sortorder: Mapped[int] = mapped_column(Integer, default=0)


class AddonPlan(Base):
    __tablename__ = "appypie_addon_plan"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    identifire: Mapped[str | None] = mapped_column(String(120))
    product_name: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[int] = mapped_column(Integer, default=1)
    sortorder: Mapped[int] = mapped_column(Integer, default=0)


class Pricing(Base):
    __tablename__ = "appypie_pricing"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_period: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[int] = mapped_column(Integer, default=1)


class Country(Base):
    __tablename__ = "appypie_country"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    country: Mapped[str] = mapped_column(String(10), nullable=False)
    currency_code: Mapped[str | None] = mapped_column("currencyCode", String(10))
    currency_sign: Mapped[str | None] = mapped_column("currencySign", String(10))
    status: Mapped[int] = mapped_column(Integer, default=1)
    sort_order: Mapped[int] = mapped_column("sortOrder", Integer, default=0)


# ── Dashboard admins ─────────────────────────────────────


class AdminUser(Base):
    __tablename__ = "checkout_dashboard"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    username: Mapped[str | None] = mapped_column(String(120))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
