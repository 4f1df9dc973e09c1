from functools import lru_cache
from app.core.config import settings
from app.services.membership_service import MembershipService
from app.services.payment_service import PaymentService

# One MembershipService per process so its per-email locks are shared by
# every request. PaymentService is cheap and rebuilt per request.

@lru_cache
def get_membership_service() -> MembershipService:
    return MembershipService(settings)

def get_payment_service() -> PaymentService:
    return PaymentService(settings, membership=get_membership_service())
