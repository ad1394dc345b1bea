"""Coupon validation endpoint."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from horizontas.api.errors import to_http_exception
from horizontas.domain.coupons import validate_coupon
from horizontas.domain.errors import CouponError

router = APIRouter(prefix="/coupons", tags=["coupons"])


class ValidateCouponRequest(BaseModel):
    code: str = ""


@router.post("/validate")
def post_validate_coupon(body: ValidateCouponRequest) -> dict:
    """Check a code. Safe to repeat; nothing is reserved or consumed."""
    try:
        coupon = validate_coupon(body.code)
    except CouponError as exc:
        raise to_http_exception(exc) from exc
    return {"code": coupon.code, "discount_percent": str(coupon.discount_percent)}
