from typing import Optional


class BridgeError(Exception):
    """Base class for failures raised by the payment bridge."""


class ClientInputError(BridgeError, ValueError):
    """The caller sent an incomplete or malformed request. Safe to show."""


class MissingPaymentInformationError(ClientInputError):
    def __init__(self, message: str = "Missing payment information"):
        super().__init__(message)


class AuthenticityError(BridgeError, ValueError):
    """The request could not be proven to come from the payment gateway."""


class InvalidSignatureError(AuthenticityError):
    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class PaymentConfigurationError(BridgeError):
    """A required gateway credential is missing."""


class UpstreamGatewayError(BridgeError):
    """Razorpay rejected or failed a request."""


class UpstreamPlatformError(BridgeError):
    """The content platform (Ghost) rejected or failed a request."""


class GhostAPIError(UpstreamPlatformError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
