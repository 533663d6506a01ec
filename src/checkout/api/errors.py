"""Exception handlers for pricing errors.

Coupon errors are ``ValidationError`` subclasses, so Protean's handlers
would already answer 400. This handler keeps the same ``{"error": ...}``
shape and adds the reason and required minimum the storefront displays.
Amounts the engine cannot price are answered with 400 as well.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from checkout.pricing.errors import CouponError, InvalidInput


async def coupon_error_handler(request: Request, exc: CouponError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(
        status_code=400,
        content={
            "error": exc.messages,
            "reason": exc.reason.value,
            "code": exc.code,
            "required_minimum": exc.required_minimum,
        },
    )


async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=400, content={"error": str(exc)})


def register_pricing_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CouponError, coupon_error_handler)
    app.add_exception_handler(InvalidInput, invalid_input_handler)
