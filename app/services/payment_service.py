import razorpay
import time
import logging
from typing import Optional
from starlette.concurrency import run_in_threadpool
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import (
    InvalidSignatureError,
    MissingPaymentInformationError,
    UpstreamGatewayError,
    UpstreamPlatformError,
)
from app.core.pricing import resolve_plan
from app.core.security import verify_payment_signature
from app.schemas.payment import OrderResponse, PaymentVerificationRequest, VerifyPaymentResponse
from app.services.membership_service import MembershipService

logger = logging.getLogger(__name__)

class PaymentService:
    def __init__(
        self,
        settings: Settings = default_settings,
        membership: Optional[MembershipService] = None,
        client: Optional[razorpay.Client] = None,
    ):
        self.settings = settings
        self.key_id = settings.RAZORPAY_KEY_ID
        self.key_secret = settings.RAZORPAY_KEY_SECRET
        self.membership = membership or MembershipService(settings)

        if client is not None:
            self.client = client
        elif self.key_id and self.key_secret:
            self.client = razorpay.Client(auth=(self.key_id, self.key_secret))
        else:
            self.client = None
            logger.warning("Razorpay keys not set. Payment operations will fail.")

    async def create_order(self, plan: Optional[str], email: Optional[str] = None) -> OrderResponse:
        if not self.client:
            raise UpstreamGatewayError("Razorpay client not initialized")

        selected_plan = resolve_plan(plan)
        email = email or ""

        data = {
            "amount": selected_plan.amount,
            "currency": selected_plan.currency,
            "receipt": f"receipt_{int(time.time() * 1000)}",
            "payment_capture": 1,
            "notes": {
                "plan": selected_plan.id,
                "email": email,
            },
        }

        try:
            # The SDK is blocking; keep it off the event loop.
            order = await run_in_threadpool(self.client.order.create, data=data)
            order_id = order["id"]
        except Exception as e:
            raise UpstreamGatewayError(str(e)) from e

        logger.info(f"Order created: {order_id} for plan: {plan}")

        return OrderResponse(
            orderId=order_id,
            amount=selected_plan.amount,
            currency=selected_plan.currency,
            razorpayKeyId=self.key_id,
            siteName=self.settings.SITE_NAME,
            planDescription=selected_plan.description,
            siteImage=self.settings.SITE_LOGO,
            customerEmail=email,
        )

    async def verify_and_sync(self, confirmation: PaymentVerificationRequest) -> VerifyPaymentResponse:
        """
        Verifies a checkout signature and records the member on Ghost.

        Raises MissingPaymentInformationError / InvalidSignatureError for requests
        that must be rejected. Once the signature checks out the payment is
        treated as successful: any failure while syncing the member is logged
        and reported as success without a memberId.
        """
        payment_id = confirmation.razorpay_payment_id
        order_id = confirmation.razorpay_order_id
        signature = confirmation.razorpay_signature

        # 1. Presence check
        if not payment_id or not order_id or not signature:
            raise MissingPaymentInformationError()

        # 2. Verify Signature
        if not verify_payment_signature(order_id, payment_id, signature, self.key_secret):
            logger.warning(f"Invalid signature for payment {payment_id}")
            raise InvalidSignatureError()

        success_url = self.settings.SUCCESS_URL

        # 3. Create or update the member
        try:
            member = await self.membership.sync_member(confirmation.email, confirmation.name, payment_id)
        except UpstreamPlatformError as e:
            logger.error(f"Error with Ghost API for payment {payment_id}: {e}")
            return VerifyPaymentResponse(successUrl=success_url)
        except Exception as e:
            # The charge is already captured; a bad member record must not undo that.
            logger.exception(f"Error processing member for payment {payment_id}: {e}")
            return VerifyPaymentResponse(successUrl=success_url)

        return VerifyPaymentResponse(
            memberId=member.id if member else None,
            successUrl=success_url,
        )
