from typing import Any, Optional
from pydantic import BaseModel, validator


def _string_or_none(v: Any) -> Optional[str]:
    # Checkout pages post whatever they have; anything that is not a string
    # is treated as absent instead of failing request validation.
    return v if isinstance(v, str) else None


class OrderCreateRequest(BaseModel):
    plan: Optional[str] = None
    email: Optional[str] = None

    @validator("plan", "email", pre=True)
    def lenient_strings(cls, v: Any) -> Optional[str]:
        return _string_or_none(v)

class OrderResponse(BaseModel):
    success: bool = True
    orderId: str
    amount: int  # Amount in smallest currency unit (e.g., paise)
    currency: str
    razorpayKeyId: str
    siteName: str
    planDescription: str
    siteImage: str
    customerEmail: str = ""

class PaymentVerificationRequest(BaseModel):
    # Optional so an incomplete confirmation reaches the domain check
    # instead of failing request validation.
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None

    @validator(
        "razorpay_order_id",
        "razorpay_payment_id",
        "razorpay_signature",
        "email",
        "name",
        pre=True,
    )
    def lenient_strings(cls, v: Any) -> Optional[str]:
        return _string_or_none(v)

class VerifyPaymentResponse(BaseModel):
    success: bool = True
    memberId: Optional[str] = None
    successUrl: str
