"""FastAPI routes for the Checkout domain — pricing quotes and checkout sessions."""

import json
from decimal import Decimal

from fastapi import APIRouter
from protean.utils.globals import current_domain

from checkout.api.schemas import (
    ApplyCouponRequest,
    CheckoutIdResponse,
    CheckoutPricingResponse,
    CouponApplicationResponse,
    EvaluateCouponRequest,
    EvaluateCouponResponse,
    PricingQuoteRequest,
    PricingResultResponse,
    SelectPaymentMethodRequest,
    SetGiftWrapRequest,
    StartCheckoutRequest,
    StatusResponse,
    UpdateCheckoutCartRequest,
    VolumeQuoteRequest,
    VolumeQuoteResponse,
)
from checkout.pricing.eligibility import BuyerContext
from checkout.pricing.engine import get_pricing_engine
from checkout.pricing.tiers import CartSnapshot, VolumeTier, quote_volume_window
from checkout.session.coupons import ApplyCheckoutCoupon, ClearCheckoutCoupon
from checkout.session.management import (
    SelectPaymentMethod,
    SetGiftWrap,
    StartCheckout,
    SubmitCheckout,
    UpdateCheckoutCart,
)
from checkout.session.session import CheckoutSession


def _pricing_response(result) -> PricingResultResponse:
    return PricingResultResponse(**result.to_dict(), processing_fee=result.processing_fee)


def _coupon_response(coupon) -> CouponApplicationResponse | None:
    if coupon is None:
        return None
    return CouponApplicationResponse(**coupon.to_dict())


def _items_json(items) -> str:
    return json.dumps([item.model_dump() for item in items])


# ---------------------------------------------------------------------------
# Pricing Router
# ---------------------------------------------------------------------------
pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


@pricing_router.post("/quote", response_model=PricingResultResponse)
async def quote(body: PricingQuoteRequest) -> PricingResultResponse:
    """Price a checkout without opening a session.

    ``raw_subtotal`` wins when both it and ``items`` are sent.
    """
    if body.raw_subtotal is not None:
        raw_subtotal = body.raw_subtotal
    else:
        raw_subtotal = CartSnapshot.from_dicts(item.model_dump() for item in body.items).subtotal()

    result = get_pricing_engine().price(
        raw_subtotal,
        coupon_code=body.coupon_code,
        payment_method=body.payment_method,
        gift_wrap=body.gift_wrap,
        buyer=BuyerContext(is_first_order_eligible=body.buyer.is_first_order_eligible),
    )
    return _pricing_response(result)


@pricing_router.post("/coupons/evaluate", response_model=EvaluateCouponResponse)
async def evaluate_coupon(body: EvaluateCouponRequest) -> EvaluateCouponResponse:
    coupon = get_pricing_engine().evaluate_coupon(
        body.coupon_code,
        body.subtotal,
        BuyerContext(is_first_order_eligible=body.buyer.is_first_order_eligible),
    )
    return EvaluateCouponResponse(coupon=_coupon_response(coupon))


@pricing_router.post("/volume-quote", response_model=VolumeQuoteResponse)
async def volume_quote(body: VolumeQuoteRequest) -> VolumeQuoteResponse:
    tiers = sorted(
        (VolumeTier(min_quantity=t.min_quantity, unit_price=Decimal(str(t.unit_price))) for t in body.tiers),
        key=lambda tier: tier.min_quantity,
    )
    volume = quote_volume_window(
        body.base_price,
        tiers,
        body.quantity,
        gst_rate=get_pricing_engine().config.gst_rate,
        with_tax=body.with_tax,
    )
    return VolumeQuoteResponse(**volume.to_dict())


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkouts", tags=["checkouts"])


@checkout_router.post("", status_code=201, response_model=CheckoutIdResponse)
async def start_checkout(body: StartCheckoutRequest) -> CheckoutIdResponse:
    command = StartCheckout(
        customer_id=body.customer_id,
        line_items=_items_json(body.items),
        first_order_eligible=body.first_order_eligible,
    )
    result = current_domain.process(command, asynchronous=False)
    return CheckoutIdResponse(checkout_id=result)


@checkout_router.get("/{checkout_id}/pricing", response_model=CheckoutPricingResponse)
async def get_checkout_pricing(checkout_id: str) -> CheckoutPricingResponse:
    session = current_domain.repository_for(CheckoutSession).get(checkout_id)
    return CheckoutPricingResponse(
        checkout_id=str(session.id),
        status=session.status,
        applied_coupon=_coupon_response(session.applied_coupon),
        pricing=_pricing_response(session.pricing),
    )


@checkout_router.put("/{checkout_id}/cart", response_model=StatusResponse)
async def update_checkout_cart(checkout_id: str, body: UpdateCheckoutCartRequest) -> StatusResponse:
    command = UpdateCheckoutCart(checkout_id=checkout_id, line_items=_items_json(body.items))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{checkout_id}/coupon", response_model=StatusResponse)
async def apply_checkout_coupon(checkout_id: str, body: ApplyCouponRequest) -> StatusResponse:
    command = ApplyCheckoutCoupon(checkout_id=checkout_id, coupon_code=body.coupon_code)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.delete("/{checkout_id}/coupon", response_model=StatusResponse)
async def clear_checkout_coupon(checkout_id: str) -> StatusResponse:
    current_domain.process(ClearCheckoutCoupon(checkout_id=checkout_id), asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{checkout_id}/payment-method", response_model=StatusResponse)
async def select_payment_method(checkout_id: str, body: SelectPaymentMethodRequest) -> StatusResponse:
    command = SelectPaymentMethod(checkout_id=checkout_id, payment_method=body.payment_method)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{checkout_id}/gift-wrap", response_model=StatusResponse)
async def set_gift_wrap(checkout_id: str, body: SetGiftWrapRequest) -> StatusResponse:
    command = SetGiftWrap(checkout_id=checkout_id, gift_wrap=body.gift_wrap)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{checkout_id}/submit", response_model=StatusResponse)
async def submit_checkout(checkout_id: str) -> StatusResponse:
    current_domain.process(SubmitCheckout(checkout_id=checkout_id), asynchronous=False)
    return StatusResponse()
