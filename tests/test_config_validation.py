"""Tests for configuration validation and health checks."""

from __future__ import annotations

import os
from dataclasses import replace
from unittest.mock import patch

from checkout_admin.config import (
    LEGACY_BILLING_SECRET_IV,
    LEGACY_BILLING_SECRET_KEY,
    Settings,
    validate_settings,
)


def _configured(**overrides: object) -> Settings:
    base = Settings(
        database_url="mysql+pymysql://report:pw@db.internal:3306/checkout",
        jwt_secret="a" * 32,
        billing_secret_key="rotated-key",
        billing_secret_iv="rotated-iv",
    )
    return replace(base, **overrides)


class TestValidateSettings:
    def test_missing_jwt_secret(self) -> None:
        warnings = validate_settings(_configured(jwt_secret=""))
        assert any("JWT_SECRET is not set" in w for w in warnings)

    def test_short_jwt_secret(self) -> None:
        warnings = validate_settings(_configured(jwt_secret="short"))
        assert any("shorter than 32" in w for w in warnings)

    def test_legacy_billing_secrets_flagged(self) -> None:
        warnings = validate_settings(
            _configured(
                billing_secret_key=LEGACY_BILLING_SECRET_KEY,
                billing_secret_iv=LEGACY_BILLING_SECRET_IV,
            )
        )
        assert any("BILLING_SECRET_KEY" in w for w in warnings)

    def test_localhost_database_in_production(self) -> None:
        s = _configured(database_url="mysql+pymysql://root:@localhost:3306/checkout")
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            warnings = validate_settings(s)
        assert any("localhost" in w for w in warnings)

    def test_localhost_database_outside_production(self) -> None:
        s = _configured(database_url="mysql+pymysql://root:@localhost:3306/checkout")
        with patch.dict(os.environ, {"ENVIRONMENT": "dev"}):
            assert validate_settings(s) == []

    def test_no_warnings_when_configured(self) -> None:
        assert validate_settings(_configured()) == []


class TestHealthCheck:
    def test_liveness_always_ok(self, client) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_readiness_checks_database(self, client) -> None:
        resp = client.get("/health/ready")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "checks": {"database": "ok"}}

    def test_health_needs_no_token(self, client) -> None:
        assert client.get("/health/ready").status_code != 401

    def test_metrics_exposed(self, client, auth_headers) -> None:
        client.get("/api/payment-logs", headers=auth_headers)
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "checkout_admin_http_requests_total" in resp.text
