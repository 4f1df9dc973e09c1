import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_secret")
os.environ.setdefault("GHOST_API_URL", "https://ghost.example.com")
os.environ.setdefault("GHOST_ADMIN_API_KEY", "6489a1b2c3:" + "ab" * 32)

from app.core.config import Settings  # noqa: E402
from tests.mocks import GHOST_KEY_ID, GHOST_KEY_SECRET, KEY_SECRET  # noqa: E402


@pytest.fixture
def test_settings():
    return Settings(
        RAZORPAY_KEY_ID="rzp_test_key",
        RAZORPAY_KEY_SECRET=KEY_SECRET,
        GHOST_API_URL="https://ghost.example.com",
        GHOST_ADMIN_API_KEY=f"{GHOST_KEY_ID}:{GHOST_KEY_SECRET}",
        SITE_NAME="The Daily Brief",
        SITE_LOGO="https://brief.example.com/logo.png",
        SUCCESS_URL="/membership-success/",
        MEMBER_LABEL="razorpay-customer",
    )


@pytest.fixture
def razorpay_client():
    client = Mock()
    client.order.create.return_value = {"id": "order_abc", "amount": 9900, "currency": "INR"}
    return client


@pytest.fixture
def ghost_client():
    client = Mock()
    client.browse_members = AsyncMock(return_value=[])
    client.edit_member = AsyncMock()
    client.add_member = AsyncMock()
    return client
