"""
Root-level shared test fixtures.

Inherited by the core suite under tests/ and the TUI suite under
accessctl/tui/tests/.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from accessctl.client import PanelClient
from accessctl.config import reset_config
from accessctl.models import Envelope

CREDENTIALS_PAYLOAD = [
    {
        "id": 3,
        "name": "svc-bot",
        "enabled": True,
        "rateLimitPerMinute": 60,
        "lastUsedAt": "2026-10-01T12:30:00Z",
    },
    {
        "id": 5,
        "name": "reporting",
        "enabled": False,
        "rateLimitPerMinute": 0,
        "lastUsedAt": None,
    },
]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Reset the config singleton and drop ACCESSCTL_* vars between tests."""
    for key in [
        "ACCESSCTL_PANEL_URL",
        "ACCESSCTL_BASE_PATH",
        "ACCESSCTL_USERNAME",
        "ACCESSCTL_PASSWORD",
        "ACCESSCTL_TIMEOUT",
        "ACCESSCTL_VERIFY_TLS",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mock_client():
    """A mocked PanelClient whose endpoints all succeed."""
    client = MagicMock(spec=PanelClient)
    client.base_url = "http://127.0.0.1:2053"
    client.get_settings = AsyncMock(
        return_value=Envelope(
            success=True, obj={"apiTokenOnly": True, "apiDefaultRateLimit": 120}
        )
    )
    client.save_settings = AsyncMock(return_value=Envelope(success=True))
    client.list_credentials = AsyncMock(
        return_value=Envelope(success=True, obj=[dict(c) for c in CREDENTIALS_PAYLOAD])
    )
    client.create_credential = AsyncMock(
        return_value=Envelope(
            success=True,
            obj={"user": {"id": 7, "name": "new-bot", "enabled": True}, "token": "abc123"},
        )
    )
    client.set_enabled = AsyncMock(return_value=Envelope(success=True))
    client.rotate_token = AsyncMock(return_value=Envelope(success=True, obj={"token": "rot-456"}))
    client.delete_credential = AsyncMock(return_value=Envelope(success=True))
    client.update_rate = AsyncMock(return_value=Envelope(success=True))
    client.login = AsyncMock(return_value=Envelope(success=True))
    client.close = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client
