from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from checkout_admin.schemas.common import Pagination

# ── Rows ─────────────────────────────────────────────────


class SubscriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_name: str | None = None
    product_id: str | None = None
    user_id: str | None = None
    subscription_period: str | None = None
    subscription_id: str | None = None
    subscription_start_date: date | None = None
    subscription_end_date: date | None = None
    plan_price: float | None = None
    currency: str | None = None
    plan_id: int | None = None
    payment_method: str | None = None
    plan_name: str | None = None
    status: str


class SubscriptionListResponse(BaseModel):
    success: bool = True
    data: list[SubscriptionRead]
    pagination: Pagination
    degraded: bool = False


class SubscriptionDetailResponse(BaseModel):
    success: bool = True
    data: SubscriptionRead


class PlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    plan_name: str
    product_name: str | None = None


class PlanListResponse(BaseModel):
    success: bool = True
    data: list[PlanRead]


# ── Lifecycle actions ────────────────────────────────────


class _ActionRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )
    subscription_id: int
    product_id: str = Field(min_length=1, max_length=100)
    comment: str = Field(default="", max_length=5000)


class CancelRequest(_ActionRequest):
    user_id: str = Field(min_length=1, max_length=64)
    product_name: str | None = Field(default=None, max_length=255)
    cancelled_type: str | None = Field(default=None, max_length=50)


class RenewalChargeRequest(_ActionRequest):
    user_id: str | None = Field(default=None, max_length=64)
    product_name: str | None = Field(default=None, max_length=255)


class UpdateEndDateRequest(_ActionRequest):
    new_end_date: str = Field(min_length=1, max_length=32)


class RenewalChargeResponse(BaseModel):
    success: bool = True
    status: bool | int | str | None = None
    message: str
