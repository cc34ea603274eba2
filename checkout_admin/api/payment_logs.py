"""Payment-log report, export, invoice and filter-option routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from starlette.responses import Response

from checkout_admin.api.deps import (
    get_db,
    get_settings,
    payment_log_filters,
    require_admin,
)
from checkout_admin.config import Settings
from checkout_admin.schemas.common import ERROR_RESPONSES
from checkout_admin.schemas.payment_logs import (
    CatalogListResponse,
    FilterOptionsResponse,
    LanguageListResponse,
    OptionListResponse,
    PaymentLogDetailResponse,
    PaymentLogListResponse,
    ProductListResponse,
)
from checkout_admin.services.common import data_store_guard, today
from checkout_admin.services.enrichment import fetch_billing_contact
from checkout_admin.services.exports import (
    export_filename,
    invoice_filename,
    render_csv,
    render_invoice,
)
from checkout_admin.services.filters import PaymentLogFilters, build_payment_log_filters
from checkout_admin.services.payment_logs import payment_logs, shape_payment_log
from checkout_admin.services.report_source import payment_log_report

router = APIRouter(
    prefix="/payment-logs",
    tags=["payment-logs"],
    dependencies=[Depends(require_admin)],
    responses=ERROR_RESPONSES,
)


@router.get("", response_model=PaymentLogListResponse)
def list_payment_logs(
    page: int = Query(default=1),
    limit: int = Query(default=10),
    filters: PaymentLogFilters = Depends(payment_log_filters),
    db: Session = Depends(get_db),
    s: Settings = Depends(get_settings),
):
    return payment_log_report(
        db, filters, page, limit, fallback_enabled=s.report_fallback_enabled
    )


@router.get("/filters/all", response_model=FilterOptionsResponse)
def filter_options(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching filter options"):
        options = payment_logs.filter_options(db)
    return FilterOptionsResponse(data=options)


@router.get("/export")
def export_payment_logs(
    filters: PaymentLogFilters = Depends(payment_log_filters),
    db: Session = Depends(get_db),
) -> Response:
    filter_set = build_payment_log_filters(filters)
    with data_store_guard(db, "Error exporting payment logs"):
        rows = payment_logs.export_rows(db, filter_set)
    return Response(
        content=render_csv(rows),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={export_filename(today())}"
        },
    )


@router.get("/invoice/{log_id}")
def download_invoice(log_id: int, db: Session = Depends(get_db)) -> Response:
    with data_store_guard(db, "Error generating invoice"):
        log = payment_logs.get_log(db, log_id)
    row = shape_payment_log(log)
    contact = fetch_billing_contact(db, log.user_id, log.product_id)
    return Response(
        content=render_invoice(row, contact),
        media_type="text/plain",
        headers={
            "Content-Disposition": f"attachment; filename={invoice_filename(row)}"
        },
    )


# ── Per-option lists ─────────────────────────────────────


@router.get("/products/list", response_model=ProductListResponse)
def list_products(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching products"):
        return ProductListResponse(data=payment_logs.products(db))


@router.get("/addons/list", response_model=CatalogListResponse)
def list_addons(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching addons"):
        return CatalogListResponse(data=payment_logs.addons(db))


@router.get("/subscription-types/list", response_model=OptionListResponse)
def list_subscription_types(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching subscription types"):
        return OptionListResponse(data=payment_logs.subscription_types(db))


@router.get("/payment-modes/list", response_model=OptionListResponse)
def list_payment_modes(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching payment modes"):
        return OptionListResponse(data=payment_logs.payment_modes(db))


@router.get("/payment-sources/list", response_model=OptionListResponse)
def list_payment_sources(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching payment sources"):
        return OptionListResponse(data=payment_logs.payment_sources(db))


@router.get("/subscription-periods/list", response_model=OptionListResponse)
def list_subscription_periods(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching subscription periods"):
        return OptionListResponse(data=payment_logs.subscription_periods(db))


@router.get("/languages/list", response_model=LanguageListResponse)
def list_languages(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching languages"):
        return LanguageListResponse(data=payment_logs.languages(db))


@router.get("/claimed-users/list", response_model=OptionListResponse)
def list_claimed_users(db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching claimed users"):
        return OptionListResponse(data=payment_logs.claimed_users(db))


@router.get("/{log_id}", response_model=PaymentLogDetailResponse)
def get_payment_log(log_id: int, db: Session = Depends(get_db)):
    with data_store_guard(db, "Error fetching payment log"):
        row = payment_logs.get(db, log_id)
    return PaymentLogDetailResponse(data=row)
