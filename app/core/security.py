import hmac
import hashlib
import time
from typing import Optional
from jose import jwt
from app.core.exceptions import PaymentConfigurationError

GHOST_TOKEN_TTL_SECONDS = 5 * 60


def generate_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Razorpay signs a checkout as HMAC-SHA256("<order_id>|<payment_id>") keyed
    with the account's key secret, hex encoded.
    """
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    if not secret:
        raise PaymentConfigurationError("Razorpay key secret is not configured")

    expected = generate_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def create_ghost_admin_token(admin_api_key: str, now: Optional[int] = None) -> str:
    """
    Build the short-lived JWT the Ghost Admin API expects.

    The admin key has the form "<id>:<hex secret>". The token is signed with the
    decoded secret, carries the key id as `kid`, and is scoped to "/admin/".
    """
    try:
        key_id, secret = admin_api_key.split(":", 1)
        signing_key = bytes.fromhex(secret)
    except ValueError:
        raise ValueError("GHOST_ADMIN_API_KEY must look like '<id>:<hex secret>'")

    iat = int(now if now is not None else time.time())
    claims = {
        "iat": iat,
        "exp": iat + GHOST_TOKEN_TTL_SECONDS,
        "aud": "/admin/",
    }
    return jwt.encode(claims, signing_key, algorithm="HS256", headers={"kid": key_id})
