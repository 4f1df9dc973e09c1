import logging
from unittest.mock import AsyncMock, Mock

import pytest

from app.core.config import Settings
from app.core.exceptions import (
    GhostAPIError,
    InvalidSignatureError,
    MissingPaymentInformationError,
    PaymentConfigurationError,
    UpstreamGatewayError,
)
from app.schemas.member import Member
from app.schemas.payment import PaymentVerificationRequest
from app.services.payment_service import PaymentService
from tests.mocks import sign


@pytest.fixture
def membership():
    membership = Mock()
    membership.sync_member = AsyncMock(return_value=Member(id="member_1", email="reader@example.com"))
    return membership


@pytest.fixture
def service(test_settings, membership, razorpay_client):
    return PaymentService(test_settings, membership=membership, client=razorpay_client)


def confirmation(**overrides):
    data = {
        "razorpay_order_id": "order_abc",
        "razorpay_payment_id": "pay_123",
        "razorpay_signature": sign("order_abc", "pay_123"),
        "email": "reader@example.com",
        "name": "Reader",
    }
    data.update(overrides)
    return PaymentVerificationRequest(**data)


@pytest.mark.asyncio
async def test_create_order_for_yearly_plan(service, razorpay_client):
    result = await service.create_order("yearly", "reader@example.com")

    assert result.success is True
    assert result.orderId == "order_abc"
    assert (result.amount, result.currency) == (9900, "INR")
    assert result.planDescription == "Yearly membership"
    assert result.razorpayKeyId == "rzp_test_key"
    assert result.siteName == "The Daily Brief"
    assert result.siteImage == "https://brief.example.com/logo.png"
    assert result.customerEmail == "reader@example.com"

    data = razorpay_client.order.create.call_args.kwargs["data"]
    assert data["amount"] == 9900
    assert data["currency"] == "INR"
    assert data["payment_capture"] == 1
    assert data["receipt"].startswith("receipt_")


@pytest.mark.asyncio
async def test_unknown_plan_is_billed_monthly(service, razorpay_client):
    result = await service.create_order("platinum")

    assert (result.amount, result.currency) == (900, "INR")
    assert result.customerEmail == ""
    assert razorpay_client.order.create.call_args.kwargs["data"]["amount"] == 900


@pytest.mark.asyncio
async def test_gateway_failure_raises_upstream_error(service, razorpay_client):
    razorpay_client.order.create.side_effect = Exception("Authentication failed")

    with pytest.raises(UpstreamGatewayError):
        await service.create_order("monthly")


@pytest.mark.asyncio
async def test_create_order_without_keys(membership):
    service = PaymentService(Settings(RAZORPAY_KEY_ID="", RAZORPAY_KEY_SECRET=""), membership=membership)

    assert service.client is None
    with pytest.raises(UpstreamGatewayError):
        await service.create_order("monthly")


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["razorpay_order_id", "razorpay_payment_id", "razorpay_signature"])
@pytest.mark.parametrize("value", [None, ""])
async def test_missing_payment_information(service, membership, field, value):
    with pytest.raises(MissingPaymentInformationError) as excinfo:
        await service.verify_and_sync(confirmation(**{field: value}))

    assert str(excinfo.value) == "Missing payment information"
    membership.sync_member.assert_not_awaited()


@pytest.mark.asyncio
async def test_tampered_signature_is_rejected(service, membership, caplog):
    signature = sign("order_abc", "pay_123")
    tampered = signature[:-1] + ("a" if signature[-1] != "a" else "b")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(InvalidSignatureError):
            await service.verify_and_sync(confirmation(razorpay_signature=tampered))

    membership.sync_member.assert_not_awaited()
    assert "pay_123" in caplog.text
    assert signature not in caplog.text
    assert tampered not in caplog.text


@pytest.mark.asyncio
async def test_signature_for_another_order_is_rejected(service):
    with pytest.raises(InvalidSignatureError):
        await service.verify_and_sync(confirmation(razorpay_signature=sign("order_other", "pay_123")))


@pytest.mark.asyncio
async def test_verified_payment_returns_member(service, membership):
    result = await service.verify_and_sync(confirmation())

    assert result.success is True
    assert result.memberId == "member_1"
    assert result.successUrl == "/membership-success/"
    membership.sync_member.assert_awaited_once_with("reader@example.com", "Reader", "pay_123")


@pytest.mark.asyncio
async def test_platform_failure_still_reports_success(service, membership, caplog):
    membership.sync_member.side_effect = GhostAPIError("Ghost is down")

    with caplog.at_level(logging.ERROR):
        result = await service.verify_and_sync(confirmation())

    assert result.success is True
    assert result.memberId is None
    assert result.successUrl == "/membership-success/"
    assert "Ghost is down" in caplog.text


@pytest.mark.asyncio
async def test_skipped_sync_reports_success_without_member(service, membership):
    membership.sync_member.return_value = None

    result = await service.verify_and_sync(confirmation(email=None))

    assert result.success is True
    assert result.memberId is None


@pytest.mark.asyncio
async def test_unexpected_sync_failure_still_reports_success(service, membership, caplog):
    membership.sync_member.side_effect = KeyError("id")

    with caplog.at_level(logging.ERROR):
        result = await service.verify_and_sync(confirmation())

    assert result.success is True
    assert result.memberId is None
    assert result.successUrl == "/membership-success/"
    assert "pay_123" in caplog.text


@pytest.mark.asyncio
async def test_missing_secret_is_not_a_client_error(membership, razorpay_client):
    service = PaymentService(
        Settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET=""),
        membership=membership,
        client=razorpay_client,
    )

    with pytest.raises(PaymentConfigurationError):
        await service.verify_and_sync(confirmation())
    membership.sync_member.assert_not_awaited()
