"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and value objects.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    product_id: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class BuyerSchema(BaseModel):
    is_first_order_eligible: bool = False


class VolumeTierSchema(BaseModel):
    min_quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Pricing Request Schemas
# ---------------------------------------------------------------------------
class PricingQuoteRequest(BaseModel):
    raw_subtotal: float | None = Field(default=None, ge=0)
    items: list[LineItemSchema] | None = None
    coupon_code: str | None = None
    payment_method: Literal["online", "cod"] = "online"
    gift_wrap: bool = False
    buyer: BuyerSchema = Field(default_factory=BuyerSchema)

    @model_validator(mode="after")
    def subtotal_or_items(self):
        if self.raw_subtotal is None and self.items is None:
            raise ValueError("Either raw_subtotal or items is required")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "raw_subtotal": 1000,
                    "coupon_code": "SAVE50",
                    "payment_method": "online",
                    "gift_wrap": False,
                    "buyer": {"is_first_order_eligible": True},
                }
            ]
        }
    }


class EvaluateCouponRequest(BaseModel):
    coupon_code: str | None = None
    subtotal: float = Field(ge=0)
    buyer: BuyerSchema = Field(default_factory=BuyerSchema)


class VolumeQuoteRequest(BaseModel):
    base_price: float = Field(ge=0)
    tiers: list[VolumeTierSchema] = Field(default_factory=list)
    quantity: int | None = Field(default=None, ge=0)
    with_tax: bool = False


# ---------------------------------------------------------------------------
# Checkout Session Request Schemas
# ---------------------------------------------------------------------------
class StartCheckoutRequest(BaseModel):
    customer_id: str | None = None
    items: list[LineItemSchema] = Field(min_length=1)
    first_order_eligible: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "items": [{"product_id": "prod-001", "unit_price": 499.0, "quantity": 2}],
                    "first_order_eligible": True,
                }
            ]
        }
    }


class UpdateCheckoutCartRequest(BaseModel):
    items: list[LineItemSchema]


class ApplyCouponRequest(BaseModel):
    coupon_code: str


class SelectPaymentMethodRequest(BaseModel):
    payment_method: Literal["online", "cod"]


class SetGiftWrapRequest(BaseModel):
    gift_wrap: bool


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PricingResultResponse(BaseModel):
    raw_subtotal: float
    discount_amount: int
    discount_source: str
    discount_label: str | None = None
    coupon_code: str | None = None
    coupon_free_shipping: bool = False
    effective_subtotal: int
    tax_on_goods: int
    shipping_fee: int
    shipping_deferred: bool
    cod_surcharge: int
    gift_wrap_fee: int
    online_fee: int
    online_fee_tax: int
    processing_fee: int
    total: int
    payment_method: str
    currency: str
    gst_rate: float
    online_fee_rate: float
    online_fee_gst_rate: float


class CouponApplicationResponse(BaseModel):
    code: str
    amount: int
    free_shipping: bool
    description: str | None = None


class EvaluateCouponResponse(BaseModel):
    coupon: CouponApplicationResponse | None = None


class VolumeQuoteResponse(BaseModel):
    normalized_quantity: int
    slab: str
    unit_price_ex_gst: float
    unit_price: float
    gst_rate: float
    over_limit: bool


class CheckoutIdResponse(BaseModel):
    checkout_id: str


class CheckoutPricingResponse(BaseModel):
    checkout_id: str
    status: str
    applied_coupon: CouponApplicationResponse | None = None
    pricing: PricingResultResponse


class StatusResponse(BaseModel):
    status: str = "ok"
