"""Payment-log queries: counts, summary buckets, pages, detail and filter options."""
from __future__ import annotations

from datetime import tzinfo

from sqlalchemy import Numeric, case, cast, func, select
from sqlalchemy.orm import Session

from checkout_admin.errors import NotFound
from checkout_admin.models.checkout import (
    AddonPlan,
    Country,
    PaymentLog,
    PaymentTerm,
    Plan,
    Pricing,
    Product,
)
from checkout_admin.schemas.common import FilterOption
from checkout_admin.schemas.payment_logs import (
    CatalogOption,
    CurrencyOption,
    FilterOptions,
    LanguageOption,
    PaymentLogRead,
    PaymentLogSummary,
    ProductOption,
    SummaryBucket,
)
from checkout_admin.services.common import (
    country_name,
    format_label,
    format_period_label,
    format_timestamp,
    to_float,
)
from checkout_admin.services.enrichment import (
    enrich_payment_logs,
    fetch_billing_contact,
    placeholder_email,
)
from checkout_admin.services.filters import CLAIMED, UNCLAIMED, FilterSet

TERM_LABELS = {1: "New", 2: "Renewal", 3: "Upgrade"}
TERM_VALUES = {1: "new", 2: "renewal", 3: "upgrade"}

_SUMMARY_BUCKETS = (
    ("trial", PaymentTerm.new),
    ("renewal", PaymentTerm.renewal),
    ("upgrade", PaymentTerm.upgrade),
)


def subscription_type_label(term: int | None, fallback: str | None) -> str | None:
    return TERM_LABELS.get(term, fallback) if term is not None else fallback


def _amount(log: PaymentLog) -> float | None:
    value = log.net_amount if log.net_amount is not None else log.plan_price
    return None if value is None else float(value)


def shape_payment_log(log: PaymentLog, tz: tzinfo | None = None) -> PaymentLogRead:
    return PaymentLogRead(
        id=log.id,
        app_id=log.product_id,
        app_name=log.product_name,
        user_id=log.user_id,
        message=log.description,
        payment_period=log.subscription_period,
        amount=_amount(log),
        currency=log.currency,
        tax_amount=None if log.tax_amount is None else float(log.tax_amount),
        invoice_id=log.invoice_id,
        transaction_id=log.transaction_id,
        payment_mode=log.payment_method,
        payment_source=log.payment_source,
        refund_status=log.refund_status if log.refund_status is not None else "No",
        ip_address=log.ip_address,
        last_payment_date=format_timestamp(log.addedon, tz),
        claim_to=log.claim_user,
        subscription_type=subscription_type_label(
            log.payment_terms, log.customer_payment_type
        ),
        product_name=log.product_name,
        product_id=log.product_id,
        addon_name=log.addon_type,
        language=log.payment_country,
        claimed_user=log.claim_user,
        plan_id=log.plan_id,
        coupon_code=log.coupon_code,
        discount_amount=(
            None if log.discount_amount is None else float(log.discount_amount)
        ),
        has_invoice=bool(log.invoice_id),
    )


def summarize(rows: list[tuple[int, float]]) -> PaymentLogSummary:
    """Build summary buckets from (term, amount) pairs; used for in-memory rows."""
    summary = PaymentLogSummary()
    for name, term in _SUMMARY_BUCKETS:
        bucket = getattr(summary, name)
        for row_term, amount in rows:
            if row_term == term:
                bucket.count += 1
                bucket.amount = round(bucket.amount + amount, 2)
    return _with_total(summary)


def _with_total(summary: PaymentLogSummary) -> PaymentLogSummary:
    buckets = [getattr(summary, name) for name, _ in _SUMMARY_BUCKETS]
    summary.total = SummaryBucket(
        count=sum(b.count for b in buckets),
        amount=round(sum(b.amount for b in buckets), 2),
    )
    return summary


class PaymentLogs:
    @staticmethod
    def count(db: Session, filters: FilterSet) -> int:
        stmt = filters.apply(select(func.count()).select_from(PaymentLog))
        return int(db.scalar(stmt) or 0)

    @staticmethod
    def summary(db: Session, filters: FilterSet) -> PaymentLogSummary:
        amount = cast(
            func.coalesce(PaymentLog.net_amount, PaymentLog.plan_price, 0),
            Numeric(10, 2),
        )
        columns = []
        for name, term in _SUMMARY_BUCKETS:
            matches = PaymentLog.payment_terms == term.value
            columns.append(func.sum(case((matches, 1), else_=0)).label(f"{name}_count"))
            columns.append(
                func.sum(case((matches, amount), else_=0)).label(f"{name}_amount")
            )
        row = db.execute(filters.apply(select(*columns).select_from(PaymentLog))).one()
        values = row._mapping
        summary = PaymentLogSummary()
        for name, _ in _SUMMARY_BUCKETS:
            setattr(
                summary,
                name,
                SummaryBucket(
                    count=int(values[f"{name}_count"] or 0),
                    amount=round(to_float(values[f"{name}_amount"]), 2),
                ),
            )
        return _with_total(summary)

    @staticmethod
    def page(
        db: Session,
        filters: FilterSet,
        page: int,
        limit: int,
        tz: tzinfo | None = None,
    ) -> list[PaymentLogRead]:
        stmt = (
            filters.apply(select(PaymentLog))
            .order_by(PaymentLog.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return [shape_payment_log(log, tz) for log in db.scalars(stmt)]

    @staticmethod
    def export_rows(
        db: Session, filters: FilterSet, tz: tzinfo | None = None
    ) -> list[PaymentLogRead]:
        """Every filtered row, newest first, enriched; no pagination."""
        stmt = filters.apply(select(PaymentLog)).order_by(PaymentLog.id.desc())
        rows = [shape_payment_log(log, tz) for log in db.scalars(stmt)]
        enrich_payment_logs(db, rows)
        return rows

    @staticmethod
    def get_log(db: Session, log_id: int) -> PaymentLog:
        log = db.get(PaymentLog, log_id)
        if not log:
            raise NotFound("Payment log not found")
        return log

    @staticmethod
    def get(db: Session, log_id: int, tz: tzinfo | None = None) -> PaymentLogRead:
        log = PaymentLogs.get_log(db, log_id)
        row = shape_payment_log(log, tz)
        contact = fetch_billing_contact(db, log.user_id, log.product_id)
        row.email = (contact.email if contact else None) or placeholder_email(log.user_id)
        row.customer_name = contact.full_name if contact else None
        return row

    # ── Filter options ───────────────────────────────────

    @staticmethod
    def products(db: Session) -> list[ProductOption]:
        stmt = select(Product).where(Product.status == 1).order_by(Product.name.asc())
        return [ProductOption.model_validate(p) for p in db.scalars(stmt)]

    @staticmethod
    def plans(db: Session) -> list[CatalogOption]:
        stmt = select(Plan).where(Plan.status == 1).order_by(Plan.sortorder.asc())
        return [
            CatalogOption(
                id=plan.id,
                name=plan.plan_name,
                identifier=plan.identifire,
                product_name=plan.product_name,
            )
            for plan in db.scalars(stmt)
        ]

    @staticmethod
    def addons(db: Session) -> list[CatalogOption]:
        stmt = (
            select(AddonPlan)
            .where(AddonPlan.status == 1)
            .order_by(AddonPlan.sortorder.asc())
        )
        addons = [
            CatalogOption(
                id=addon.id,
                name=addon.plan_name,
                identifier=addon.identifire,
                product_name=addon.product_name,
            )
            for addon in db.scalars(stmt)
        ]
        if addons:
            return addons
        names = _distinct_values(db, PaymentLog.addon_type)
        return [CatalogOption(id=index, name=name) for index, name in enumerate(names, 1)]

    @staticmethod
    def subscription_types(db: Session) -> list[FilterOption]:
        stmt = (
            select(PaymentLog.payment_terms)
            .where(PaymentLog.payment_terms.is_not(None))
            .distinct()
            .order_by(PaymentLog.payment_terms)
        )
        return [
            FilterOption(
                value=TERM_VALUES.get(term, str(term)),
                label=TERM_LABELS.get(term, f"Type {term}"),
            )
            for term in db.scalars(stmt)
        ]

    @staticmethod
    def payment_modes(db: Session) -> list[FilterOption]:
        return [
            FilterOption(value=v, label=format_label(v))
            for v in _distinct_values(db, PaymentLog.payment_method)
        ]

    @staticmethod
    def payment_sources(db: Session) -> list[FilterOption]:
        return [
            FilterOption(value=v, label=format_label(v))
            for v in _distinct_values(db, PaymentLog.payment_source)
        ]

    @staticmethod
    def subscription_periods(db: Session) -> list[FilterOption]:
        stmt = (
            select(Pricing.plan_period)
            .where(Pricing.status == 1)
            .distinct()
            .order_by(Pricing.plan_period.asc())
        )
        periods = list(db.scalars(stmt))
        if not periods:
            periods = _distinct_values(db, PaymentLog.subscription_period)
        return [FilterOption(value=p, label=format_period_label(p)) for p in periods]

    @staticmethod
    def countries(db: Session) -> list[Country]:
        stmt = (
            select(Country)
            .where(Country.status == 1)
            .order_by(Country.sort_order.asc())
        )
        return list(db.scalars(stmt))

    @staticmethod
    def languages(db: Session) -> list[LanguageOption]:
        """Payment countries seen in the log, labelled with their currency."""
        currency_by_code = {
            c.country.lower(): c for c in PaymentLogs.countries(db)
        }
        options = []
        for value in _distinct_values(db, PaymentLog.payment_country):
            country = currency_by_code.get(value.lower())
            name = country_name(value)
            code = (country.currency_code if country else None) or ""
            options.append(
                LanguageOption(
                    value=value,
                    label=f"{name} ({code})" if code else name,
                    currency_code=code,
                    currency_sign=(country.currency_sign if country else None) or "",
                )
            )
        return options

    @staticmethod
    def currencies(db: Session) -> list[CurrencyOption]:
        seen: dict[str, CurrencyOption] = {}
        for country in PaymentLogs.countries(db):
            if country.currency_code and country.currency_code not in seen:
                seen[country.currency_code] = CurrencyOption(
                    code=country.currency_code, sign=country.currency_sign or ""
                )
        return list(seen.values())

    @staticmethod
    def claimed_users(db: Session) -> list[FilterOption]:
        options = [
            FilterOption(value=CLAIMED, label="All Claimed"),
            FilterOption(value=UNCLAIMED, label="Unclaimed"),
        ]
        options.extend(
            FilterOption(value=v, label=v)
            for v in _distinct_values(db, PaymentLog.claim_user)
        )
        return options

    @staticmethod
    def filter_options(db: Session) -> FilterOptions:
        return FilterOptions(
            products=PaymentLogs.products(db),
            plans=PaymentLogs.plans(db),
            addons=PaymentLogs.addons(db),
            subscription_types=PaymentLogs.subscription_types(db),
            payment_modes=PaymentLogs.payment_modes(db),
            payment_sources=PaymentLogs.payment_sources(db),
            subscription_periods=PaymentLogs.subscription_periods(db),
            languages=PaymentLogs.languages(db),
            claimed_users=PaymentLogs.claimed_users(db),
            currencies=PaymentLogs.currencies(db),
        )


def _distinct_values(db: Session, column) -> list[str]:
    stmt = (
        select(column)
        .where(column.is_not(None), column != "")
        .distinct()
        .order_by(column.asc())
    )
    return list(db.scalars(stmt))


payment_logs = PaymentLogs()
