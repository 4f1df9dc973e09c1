from typing import Optional
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from app.api.deps import get_payment_service
from app.core.exceptions import AuthenticityError, ClientInputError
from app.schemas.common import ErrorResponse
from app.schemas.payment import (
    OrderCreateRequest,
    OrderResponse,
    PaymentVerificationRequest,
    VerifyPaymentResponse,
)
from app.services.payment_service import PaymentService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/create-order",
    response_model=OrderResponse,
    responses={500: {"model": ErrorResponse}},
)
async def create_order(
    request: Optional[OrderCreateRequest] = Body(default=None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create a Razorpay order for a membership plan.

    Accepts: plan (unknown plans fall back to monthly), optional email
    Returns: orderId plus everything the checkout widget needs
    """
    request = request or OrderCreateRequest()
    try:
        return await service.create_order(request.plan, request.email)
    except Exception as e:
        logger.error(f"Error creating Razorpay order: {str(e)}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create order")


@router.post(
    "/verify-payment",
    response_model=VerifyPaymentResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def verify_payment(
    request: Optional[PaymentVerificationRequest] = Body(default=None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Verify a completed Razorpay checkout and sync the Ghost member.

    - 400 when payment ids are missing or the signature does not match
    - 200 once the signature is valid, even if Ghost could not be updated
    """
    request = request or PaymentVerificationRequest()
    try:
        return await service.verify_and_sync(request)
    except (ClientInputError, AuthenticityError) as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception as e:
        logger.error(f"Error verifying Razorpay payment: {str(e)}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to verify payment")
