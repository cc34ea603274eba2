"""API tests for the payment-log listing, detail and filter options."""

import math
from decimal import Decimal

import pytest

from checkout_admin.models import AddonPlan, Country, Pricing, Product


@pytest.fixture()
def mixed_logs(make_payment_log):
    logs = [
        make_payment_log(payment_terms=1, net_amount=Decimal("10.00"), payment_method="stripe"),
        make_payment_log(payment_terms=2, net_amount=Decimal("20.50"), payment_method="stripe"),
        make_payment_log(payment_terms=2, net_amount=None, plan_price=Decimal("5.25"), payment_method="paypal"),
        make_payment_log(payment_terms=3, net_amount=Decimal("7.00"), payment_method="stripe", claim_user="ops"),
        make_payment_log(payment_terms=None, customer_payment_type="Gift", net_amount=Decimal("99.00"), claim_user=""),
        make_payment_log(payment_terms=2, net_amount=None, plan_price=None, payment_method="stripe", claim_user="ada"),
    ]
    return logs


class TestListPaymentLogs:
    def test_requires_auth(self, client):
        resp = client.get("/api/payment-logs")
        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False

    def test_summary_identities(self, client, auth_headers, mixed_logs):
        resp = client.get("/api/payment-logs", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        summary = body["summary"]
        assert summary["trial"] == {"count": 1, "amount": 10.0}
        assert summary["renewal"] == {"count": 3, "amount": 25.75}
        assert summary["upgrade"] == {"count": 1, "amount": 7.0}
        parts = [summary[k] for k in ("trial", "renewal", "upgrade")]
        assert summary["total"]["count"] == sum(p["count"] for p in parts)
        assert abs(summary["total"]["amount"] - sum(p["amount"] for p in parts)) < 0.01
        assert body["degraded"] is False

    def test_pagination_totals(self, client, auth_headers, mixed_logs):
        resp = client.get("/api/payment-logs?page=2&limit=4", headers=auth_headers)
        body = resp.json()
        assert body["pagination"] == {
            "currentPage": 2,
            "totalPages": math.ceil(6 / 4),
            "totalItems": 6,
            "itemsPerPage": 4,
        }
        assert len(body["data"]) == 2

    def test_rows_are_newest_first(self, client, auth_headers, mixed_logs):
        body = client.get("/api/payment-logs", headers=auth_headers).json()
        ids = [row["id"] for row in body["data"]]
        assert ids == sorted(ids, reverse=True)

    def test_row_shape(self, client, auth_headers, mixed_logs):
        body = client.get("/api/payment-logs", headers=auth_headers).json()
        rows = {row["id"]: row for row in body["data"]}
        fallback_price = rows[mixed_logs[2].id]
        assert fallback_price["amount"] == 5.25
        assert fallback_price["subscription_type"] == "Renewal"
        assert fallback_price["device_selection"] == "desktop"
        assert fallback_price["refund_status"] == "No"
        assert fallback_price["last_payment_date"] == "01 Jan 2024, 12:00 AM"
        assert fallback_price["has_invoice"] is False
        assert fallback_price["has_signed_agreement"] is False
        assert fallback_price["email"] == "user501@appypie.com"
        assert rows[mixed_logs[4].id]["subscription_type"] == "Gift"

    def test_renewal_and_stripe_scenario(self, client, auth_headers, mixed_logs):
        resp = client.get(
            "/api/payment-logs?subscriptionType=renewal&paymentMode=stripe",
            headers=auth_headers,
        )
        body = resp.json()
        assert {row["id"] for row in body["data"]} == {mixed_logs[1].id, mixed_logs[5].id}
        assert all(row["payment_mode"] == "stripe" for row in body["data"])
        assert all(row["subscription_type"] == "Renewal" for row in body["data"])
        assert body["summary"]["renewal"]["count"] == 2
        assert body["summary"]["renewal"]["amount"] == 20.5

    def test_empty_result(self, client, auth_headers, mixed_logs):
        body = client.get(
            "/api/payment-logs?paymentMode=bitcoin", headers=auth_headers
        ).json()
        assert body["data"] == []
        assert body["pagination"]["totalPages"] == 0
        assert body["pagination"]["totalItems"] == 0
        for bucket in ("trial", "renewal", "upgrade", "total"):
            assert body["summary"][bucket] == {"count": 0, "amount": 0.0}

    def test_claimed_partition(self, client, auth_headers, mixed_logs):
        claimed = client.get(
            "/api/payment-logs?claimedUser=claimed", headers=auth_headers
        ).json()["data"]
        unclaimed = client.get(
            "/api/payment-logs?claimedUser=unclaimed", headers=auth_headers
        ).json()["data"]
        claimed_ids = {row["id"] for row in claimed}
        unclaimed_ids = {row["id"] for row in unclaimed}
        assert claimed_ids.isdisjoint(unclaimed_ids)
        assert claimed_ids | unclaimed_ids == {log.id for log in mixed_logs}
        assert all(row["claim_to"] for row in claimed)
        assert all(not row["claim_to"] for row in unclaimed)

    def test_claimed_by_name(self, client, auth_headers, mixed_logs):
        rows = client.get(
            "/api/payment-logs?claimedUser=ada", headers=auth_headers
        ).json()["data"]
        assert [row["id"] for row in rows] == [mixed_logs[5].id]

    def test_search_date(self, client, auth_headers, make_payment_log):
        inside = make_payment_log(addedon=1704153600 + 10)
        make_payment_log(addedon=1704153600 - 1)
        make_payment_log(addedon=1704153600 + 86400)
        rows = client.get(
            "/api/payment-logs?searchDate=2024-01-02", headers=auth_headers
        ).json()["data"]
        assert [row["id"] for row in rows] == [inside.id]

    def test_bad_search_date(self, client, auth_headers):
        resp = client.get("/api/payment-logs?searchDate=yesterday", headers=auth_headers)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "invalid_input"
        assert body["details"][0]["field"] == "searchDate"

    @pytest.mark.parametrize("query", ["page=0", "limit=0", "limit=501", "page=abc"])
    def test_bad_paging(self, client, auth_headers, query):
        resp = client.get(f"/api/payment-logs?{query}", headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_enrichment_on_page(
        self, client, auth_headers, make_payment_log, make_billing_address, make_plan
    ):
        plan = make_plan(plan_name="Platinum")
        log = make_payment_log(plan_id=plan.id)
        make_billing_address(email="first@shop.io")
        make_billing_address(email="second@shop.io")
        row = client.get("/api/payment-logs", headers=auth_headers).json()["data"][0]
        assert row["id"] == log.id
        assert row["email"] == "first@shop.io"
        assert row["customer_name"] == "Grace Hopper"
        assert row["plan_name"] == "Platinum"


class TestPaymentLogDetail:
    def test_detail(self, client, auth_headers, make_payment_log, make_billing_address):
        log = make_payment_log(invoice_id="INV-9")
        make_billing_address(first_name="Grace", last_name=None)
        resp = client.get(f"/api/payment-logs/{log.id}", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["id"] == log.id
        assert data["has_invoice"] is True
        assert data["email"] == "owner@shop.io"
        assert data["customer_name"] is None

    def test_detail_not_found(self, client, auth_headers):
        resp = client.get("/api/payment-logs/999", headers=auth_headers)
        assert resp.status_code == 404
        body = resp.json()
        assert body["error"] == "not_found"
        assert "request_id" in body


class TestFilterOptions:
    @pytest.fixture()
    def catalog(self, db_session, make_payment_log, make_plan):
        db_session.add_all(
            [
                Product(name="Website Builder", status=1),
                Product(name="App Builder", status=1),
                Product(name="Retired", status=0),
                Pricing(plan_period="yearly", status=1),
                Pricing(plan_period="monthly", status=1),
                Country(country="in", currency_code="INR", currency_sign="₹", sort_order=1),
                Country(country="us", currency_code="USD", currency_sign="$", sort_order=2),
            ]
        )
        db_session.commit()
        make_plan(plan_name="Gold", sortorder=2)
        make_plan(plan_name="Silver", sortorder=1)
        make_payment_log(payment_terms=1, payment_method="paypal", claim_user="ops", addon_type="seo")
        make_payment_log(payment_terms=3, payment_method="stripe", payment_country="in")
        make_payment_log(payment_terms=7, payment_source="InApp-iOS")

    def test_all_filters(self, client, auth_headers, catalog):
        resp = client.get("/api/payment-logs/filters/all", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [p["name"] for p in data["products"]] == ["App Builder", "Website Builder"]
        assert [p["name"] for p in data["plans"]] == ["Silver", "Gold"]
        assert data["addons"] == [
            {"id": 1, "name": "seo", "identifier": None, "productName": None}
        ]
        assert data["subscriptionTypes"] == [
            {"value": "new", "label": "New"},
            {"value": "upgrade", "label": "Upgrade"},
            {"value": "7", "label": "Type 7"},
        ]
        assert {"value": "paypal", "label": "PayPal"} in data["paymentModes"]
        assert {"value": "InApp-iOS", "label": "In-App (iOS)"} in data["paymentSources"]
        assert data["subscriptionPeriods"] == [
            {"value": "monthly", "label": "Monthly"},
            {"value": "yearly", "label": "Yearly"},
        ]
        languages = {lang["value"]: lang for lang in data["languages"]}
        assert languages["in"]["label"] == "India (INR)"
        assert languages["in"]["currencyCode"] == "INR"
        assert data["claimedUsers"][:2] == [
            {"value": "claimed", "label": "All Claimed"},
            {"value": "unclaimed", "label": "Unclaimed"},
        ]
        assert {"value": "ops", "label": "ops"} in data["claimedUsers"]
        assert [c["code"] for c in data["currencies"]] == ["INR", "USD"]

    def test_addon_plans_take_precedence(self, client, auth_headers, db_session, catalog):
        db_session.add(AddonPlan(plan_name="Extra Pages", identifire="pages", status=1))
        db_session.commit()
        rows = client.get("/api/payment-logs/addons/list", headers=auth_headers).json()["data"]
        assert [row["name"] for row in rows] == ["Extra Pages"]

    @pytest.mark.parametrize(
        "path",
        [
            "products",
            "addons",
            "subscription-types",
            "payment-modes",
            "payment-sources",
            "subscription-periods",
            "languages",
            "claimed-users",
        ],
    )
    def test_option_lists(self, client, auth_headers, catalog, path):
        resp = client.get(f"/api/payment-logs/{path}/list", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]
