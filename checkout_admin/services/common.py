"""Shared service utilities: pagination, timestamp and label formatting."""
from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from checkout_admin.config import settings
from checkout_admin.errors import DataStoreUnavailable, InvalidInput

MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

SECONDS_PER_DAY = 86400

# Display labels for payment modes/sources that do not title-case cleanly.
SPECIAL_LABELS = {
    "ios": "iOS",
    "android": "Android",
    "web": "Web",
    "paypal": "PayPal",
    "stripe": "Stripe",
    "razorpay": "Razorpay",
    "ccavenue": "CCAvenue",
    "ebanx": "Ebanx",
    "InApp-iOS": "In-App (iOS)",
    "InApp-Android": "In-App (Android)",
    "app": "App",
    "Manual": "Manual",
    "manually": "Manual",
}

PERIOD_LABELS = {
    "monthly": "Monthly",
    "yearly": "Yearly",
    "oneTime": "One Time",
    "lifetime": "Lifetime",
    "quarterly": "Quarterly",
    "half-yearly": "Half Yearly",
    "weekly": "Weekly",
}

COUNTRY_NAMES = {
    "ae": "United Arab Emirates", "ar": "Argentina", "at": "Austria",
    "au": "Australia", "as": "American Samoa", "be": "Belgium", "br": "Brazil",
    "ca": "Canada", "ch": "Switzerland", "cl": "Chile", "cn": "China",
    "co": "Colombia", "de": "Germany", "dk": "Denmark", "es": "Spain",
    "fi": "Finland", "fr": "France", "gb": "United Kingdom", "gr": "Greece",
    "hk": "Hong Kong", "id": "Indonesia", "ie": "Ireland", "il": "Israel",
    "in": "India", "it": "Italy", "jp": "Japan", "kr": "South Korea",
    "mx": "Mexico", "my": "Malaysia", "nl": "Netherlands", "no": "Norway",
    "nz": "New Zealand", "pe": "Peru", "ph": "Philippines", "pk": "Pakistan",
    "pl": "Poland", "pt": "Portugal", "ro": "Romania", "ru": "Russia",
    "sa": "Saudi Arabia", "se": "Sweden", "sg": "Singapore", "th": "Thailand",
    "tr": "Turkey", "tw": "Taiwan", "ua": "Ukraine", "us": "United States",
    "vn": "Vietnam", "za": "South Africa",
}


def report_timezone(name: str | None = None) -> tzinfo:
    name = name or settings.report_timezone
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def today(tz: tzinfo | None = None) -> date:
    return datetime.now(tz or report_timezone()).date()


def format_timestamp(timestamp: int | None, tz: tzinfo | None = None) -> str:
    """Render epoch seconds as ``DD Mon YYYY, h:mm AM/PM``; ``-`` when absent."""
    if not timestamp:
        return "-"
    moment = datetime.fromtimestamp(int(timestamp), tz or report_timezone())
    hours = moment.hour
    ampm = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return (
        f"{moment.day:02d} {MONTHS[moment.month - 1]} {moment.year}, "
        f"{display_hours}:{moment.minute:02d} {ampm}"
    )


def day_bounds(value: str, tz: tzinfo | None = None) -> tuple[int, int]:
    """Half-open epoch-second range covering the calendar day ``YYYY-MM-DD``."""
    day = parse_date(value, "searchDate")
    start = datetime(day.year, day.month, day.day, tzinfo=tz or report_timezone())
    start_epoch = int(start.timestamp())
    return start_epoch, start_epoch + SECONDS_PER_DAY


def parse_date(value: str, field: str) -> date:
    text = (value or "").strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise InvalidInput(
            f"{field} must be a date in YYYY-MM-DD format", field=field
        ) from exc


def format_label(value: str | None) -> str:
    if not value:
        return ""
    return SPECIAL_LABELS.get(value) or value[0].upper() + value[1:]


def format_period_label(value: str | None) -> str:
    if not value:
        return ""
    return PERIOD_LABELS.get(value) or value[0].upper() + value[1:]


def country_name(code: str) -> str:
    return COUNTRY_NAMES.get(code.lower()) or code.upper()


def to_float(value: Decimal | float | int | None) -> float:
    if value is None:
        return 0.0
    return float(value)


def validate_page(page: int, limit: int, max_page_size: int | None = None) -> None:
    max_page_size = max_page_size or settings.report_max_page_size
    if page < 1:
        raise InvalidInput("page must be 1 or greater", field="page")
    if limit < 1 or limit > max_page_size:
        raise InvalidInput(
            f"limit must be between 1 and {max_page_size}", field="limit"
        )


def pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    return {
        "currentPage": page,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "totalItems": total,
        "itemsPerPage": limit,
    }


def expiring_soon_cutoff(day: date) -> date:
    return day + timedelta(days=7)


@contextmanager
def data_store_guard(db: Session, message: str) -> Iterator[None]:
    """Re-raise driver and ORM failures as ``DataStoreUnavailable``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreUnavailable(message) from exc
