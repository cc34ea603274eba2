"""Tests for pagination, timestamp and label helpers."""

from __future__ import annotations

import math
from datetime import date, timezone
from zoneinfo import ZoneInfo

import pytest

from checkout_admin.errors import InvalidInput
from checkout_admin.services.common import (
    country_name,
    day_bounds,
    format_label,
    format_period_label,
    format_timestamp,
    pagination,
    parse_date,
    validate_page,
)


class TestFormatTimestamp:
    @pytest.mark.parametrize("value", [None, 0])
    def test_missing_timestamp(self, value):
        assert format_timestamp(value, timezone.utc) == "-"

    def test_midnight_is_twelve_am(self):
        assert format_timestamp(1704067200, timezone.utc) == "01 Jan 2024, 12:00 AM"

    def test_noon_is_twelve_pm(self):
        assert format_timestamp(1704067200 + 12 * 3600 + 30 * 60, timezone.utc) == (
            "01 Jan 2024, 12:30 PM"
        )

    def test_hour_is_not_zero_padded(self):
        assert format_timestamp(1704067200 + 13 * 3600 + 5 * 60, timezone.utc) == (
            "01 Jan 2024, 1:05 PM"
        )

    def test_uses_given_timezone(self):
        assert format_timestamp(1704067200, ZoneInfo("Asia/Kolkata")) == (
            "01 Jan 2024, 5:30 AM"
        )


class TestDates:
    def test_day_bounds(self):
        assert day_bounds("2024-01-02", timezone.utc) == (1704153600, 1704240000)

    def test_parse_date_accepts_datetime_text(self):
        assert parse_date("2024-03-05T10:00:00", "newEndDate") == date(2024, 3, 5)

    @pytest.mark.parametrize("value", ["", "tomorrow", "2024-13-01", "2024-02-30"])
    def test_parse_date_rejects_garbage(self, value):
        with pytest.raises(InvalidInput):
            parse_date(value, "newEndDate")


class TestPagination:
    @pytest.mark.parametrize("total,limit", [(0, 10), (1, 10), (10, 10), (11, 10), (501, 500)])
    def test_total_pages_is_ceiling(self, total, limit):
        result = pagination(1, limit, total)
        assert result["totalPages"] == math.ceil(total / limit)
        assert result["totalItems"] == total
        assert result["itemsPerPage"] == limit
        assert result["currentPage"] == 1

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 501), (-3, 10)])
    def test_invalid_page_or_limit(self, page, limit):
        with pytest.raises(InvalidInput):
            validate_page(page, limit, max_page_size=500)

    def test_valid_page(self):
        validate_page(3, 500, max_page_size=500)


class TestLabels:
    def test_special_labels(self):
        assert format_label("paypal") == "PayPal"
        assert format_label("InApp-iOS") == "In-App (iOS)"

    def test_fallback_capitalises_first_letter(self):
        assert format_label("applePay") == "ApplePay"
        assert format_label(None) == ""

    def test_period_labels(self):
        assert format_period_label("oneTime") == "One Time"
        assert format_period_label("biennial") == "Biennial"

    def test_country_name(self):
        assert country_name("IN") == "India"
        assert country_name("zz") == "ZZ"
