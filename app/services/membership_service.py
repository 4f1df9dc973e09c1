import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Dict, Optional
from app.core.config import Settings, settings as default_settings
from app.core.ghost import GhostAdminAPI, ghost
from app.schemas.member import Member

logger = logging.getLogger(__name__)


def email_filter(email: str) -> str:
    """Ghost NQL exact-match filter on email, with quotes escaped."""
    escaped = email.replace("\\", "\\\\").replace("'", "\\'")
    return f"email:'{escaped}'"


class MembershipService:
    def __init__(
        self,
        settings: Settings = default_settings,
        client_factory: Callable[[], GhostAdminAPI] = ghost.get_client,
    ):
        self.label = settings.MEMBER_LABEL
        self.client_factory = client_factory
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    @asynccontextmanager
    async def _email_lock(self, email: str):
        # Serializes lookup-then-write per email within this process.
        key = email.strip().lower()
        self._holders[key] = self._holders.get(key, 0) + 1
        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                self._locks.pop(key, None)

    async def sync_member(self, email: Optional[str], name: Optional[str], payment_id: str) -> Optional[Member]:
        """
        Create or update the Ghost member for a verified payment.

        Returns None when there is no email to key the member on. Raises
        UpstreamPlatformError when Ghost cannot be reached or rejects a call.
        """
        if not email:
            logger.warning(f"No email supplied for payment {payment_id}; skipping member sync")
            return None

        client = self.client_factory()
        async with self._email_lock(email):
            existing = await client.browse_members(filter=email_filter(email))
            if existing:
                member = await self._update_member(client, Member.model_validate(existing[0]), payment_id)
            else:
                member = await self._create_member(client, email, name, payment_id)

        logger.info(f"Successfully processed member: {email} for payment: {payment_id}")
        return member

    async def _update_member(self, client: GhostAdminAPI, member: Member, payment_id: str) -> Member:
        # Notes read "... Razorpay payment: <id>"; match whole ids only.
        if member.note and payment_id in member.note.split():
            logger.info(f"Payment {payment_id} already recorded on member {member.id}; leaving it unchanged")
            return member

        labels = member.label_names()
        if self.label not in labels:
            labels.append(self.label)

        updated = await client.edit_member(member.id, {
            "labels": labels,
            "note": f"{member.note or ''} Razorpay payment: {payment_id}",
        })
        return Member.model_validate(updated)

    async def _create_member(self, client: GhostAdminAPI, email: str, name: Optional[str], payment_id: str) -> Member:
        data = {
            "email": email,
            "subscribed": True,
            "labels": [self.label],
            "note": f"Razorpay customer: {payment_id}",
        }
        if name:
            data["name"] = name
        created = await client.add_member(data)
        return Member.model_validate(created)
