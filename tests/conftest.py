import os
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

# Set environment variables before any package import reads them
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-checkout-admin-suite"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["REPORT_TIMEZONE"] = "UTC"
os.environ["PLACEHOLDER_EMAIL_DOMAIN"] = "appypie.com"
os.environ["REPORT_FALLBACK_ENABLED"] = "false"
os.environ["BILLING_CANCEL_ENABLED"] = "false"
os.environ["BILLING_API_URL"] = "https://billing.test/api"

from checkout_admin.config import settings  # noqa: E402
from checkout_admin.db import Base, Database  # noqa: E402
from checkout_admin.main import create_app  # noqa: E402
from checkout_admin.models import (  # noqa: E402
    AdminUser,
    BillingAddress,
    PaymentLog,
    Plan,
    Subscription,
)
from checkout_admin.services.auth import hash_password, issue_access_token  # noqa: E402


def _test_database() -> Database:
    return Database(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def database():
    db = _test_database()
    Base.metadata.create_all(db.engine)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture()
def db_session(database):
    """Session sharing the single in-memory connection used by the app."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app_settings():
    return replace(settings, report_fallback_enabled=False, billing_cancel_enabled=False)


@pytest.fixture()
def app(database, app_settings):
    return create_app(app_settings, database)


@pytest.fixture()
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


# ============ Auth Fixtures ============


@pytest.fixture()
def admin_user(db_session):
    user = AdminUser(
        email="ops@checkout.io",
        password=hash_password("correct-horse"),
        name="Ops Admin",
        username="ops",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def auth_token(admin_user, app_settings):
    return issue_access_token(admin_user, app_settings)


@pytest.fixture()
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


# ============ Data Factories ============


@pytest.fixture()
def make_payment_log(db_session):
    def _make(**kwargs) -> PaymentLog:
        values = {
            "product_id": "app-001",
            "product_name": "App Builder",
            "user_id": "501",
            "order_id": "ORD-1",
            "description": "Monthly plan",
            "subscription_period": "monthly",
            "net_amount": Decimal("10.00"),
            "currency": "USD",
            "tax_amount": Decimal("1.00"),
            "payment_method": "stripe",
            "payment_source": "web",
            "payment_country": "us",
            "payment_terms": 1,
            "addedon": 1704067200,
        }
        values.update(kwargs)
        log = PaymentLog(**values)
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


@pytest.fixture()
def make_subscription(db_session):
    def _make(**kwargs) -> Subscription:
        values = {
            "product_id": "app-001",
            "product_name": "App Builder",
            "user_id": "501",
            "subscription_id": "sub_001",
            "subscription_period": "monthly",
            "subscription_start_date": date(2024, 1, 1),
            "plan_price": Decimal("19.99"),
            "currency": "USD",
            "payment_method": "stripe",
        }
        values.update(kwargs)
        sub = Subscription(**values)
        db_session.add(sub)
        db_session.commit()
        db_session.refresh(sub)
        return sub

    return _make


@pytest.fixture()
def make_billing_address(db_session):
    def _make(**kwargs) -> BillingAddress:
        values = {
            "user_id": "501",
            "product_id": "app-001",
            "email": "owner@shop.io",
            "first_name": "Grace",
            "last_name": "Hopper",
        }
        values.update(kwargs)
        address = BillingAddress(**values)
        db_session.add(address)
        db_session.commit()
        db_session.refresh(address)
        return address

    return _make


@pytest.fixture()
def make_plan(db_session):
    def _make(**kwargs) -> Plan:
        values = {
            "plan_name": "Gold",
            "identifire": "gold",
            "product_name": "App Builder",
            "status": 1,
            "sortorder": 1,
        }
        values.update(kwargs)
        plan = Plan(**values)
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan

    return _make
