from pydantic import BaseModel, ConfigDict, Field

from checkout_admin.schemas.common import FilterOption, Pagination

# ── Rows ─────────────────────────────────────────────────


class PaymentLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    app_id: str | None = None
    app_name: str | None = None
    user_id: str | None = None
    message: str | None = None
    payment_period: str | None = None
    amount: float | None = None
    currency: str | None = None
    tax_amount: float | None = None
    invoice_id: str | None = None
    transaction_id: str | None = None
    payment_mode: str | None = None
    payment_source: str | None = None
    device_selection: str = "desktop"
    refund_status: str = "No"
    ip_address: str | None = None
    last_payment_date: str = "-"
    claim_to: str | None = None
    subscription_type: str | None = None
    product_name: str | None = None
    product_id: str | None = None
    addon_name: str | None = None
    language: str | None = None
    claimed_user: str | None = None
    plan_id: int | None = None
    plan_name: str | None = None
    coupon_code: str | None = None
    discount_amount: float | None = None
    has_invoice: bool = False
    has_signed_agreement: bool = False
    email: str | None = None
    customer_name: str | None = None


# ── Summary ──────────────────────────────────────────────


class SummaryBucket(BaseModel):
    count: int = 0
    amount: float = 0.0


class PaymentLogSummary(BaseModel):
    trial: SummaryBucket = Field(default_factory=SummaryBucket)
    upgrade: SummaryBucket = Field(default_factory=SummaryBucket)
    renewal: SummaryBucket = Field(default_factory=SummaryBucket)
    total: SummaryBucket = Field(default_factory=SummaryBucket)


# ── Responses ────────────────────────────────────────────


class PaymentLogListResponse(BaseModel):
    success: bool = True
    data: list[PaymentLogRead]
    summary: PaymentLogSummary
    pagination: Pagination
    degraded: bool = False


class PaymentLogDetailResponse(BaseModel):
    success: bool = True
    data: PaymentLogRead


# ── Filter options ───────────────────────────────────────


class ProductOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str


class CatalogOption(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    id: int
    name: str
    identifier: str | None = None
    product_name: str | None = Field(default=None, alias="productName")


class LanguageOption(FilterOption):
    model_config = ConfigDict(populate_by_name=True)
    currency_code: str = Field(default="", alias="currencyCode")
    currency_sign: str = Field(default="", alias="currencySign")


class CurrencyOption(BaseModel):
    code: str
    sign: str = ""


class FilterOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    products: list[ProductOption] = Field(default_factory=list)
    plans: list[CatalogOption] = Field(default_factory=list)
    addons: list[CatalogOption] = Field(default_factory=list)
    subscription_types: list[FilterOption] = Field(
        default_factory=list, alias="subscriptionTypes"
    )
    payment_modes: list[FilterOption] = Field(default_factory=list, alias="paymentModes")
    payment_sources: list[FilterOption] = Field(
        default_factory=list, alias="paymentSources"
    )
    subscription_periods: list[FilterOption] = Field(
        default_factory=list, alias="subscriptionPeriods"
    )
    languages: list[LanguageOption] = Field(default_factory=list)
    claimed_users: list[FilterOption] = Field(default_factory=list, alias="claimedUsers")
    currencies: list[CurrencyOption] = Field(default_factory=list)


class FilterOptionsResponse(BaseModel):
    success: bool = True
    data: FilterOptions


class ProductListResponse(BaseModel):
    success: bool = True
    data: list[ProductOption]


class CatalogListResponse(BaseModel):
    success: bool = True
    data: list[CatalogOption]


class OptionListResponse(BaseModel):
    success: bool = True
    data: list[FilterOption]


class LanguageListResponse(BaseModel):
    success: bool = True
    data: list[LanguageOption]
