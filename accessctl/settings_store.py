"""
SettingsStore — the panel's global API policy.

Settings are fetched and overwritten as a unit. A save is only trusted once
a follow-up load confirms what the server accepted.
"""

from __future__ import annotations

import logging

import pydantic

from accessctl.client import PanelClient
from accessctl.errors import ValidationError
from accessctl.models import ApiSettings
from accessctl.notify import Notifier
from accessctl.session import AccessSession

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, client: PanelClient, session: AccessSession, notifier: Notifier) -> None:
        self.client = client
        self.session = session
        self.notifier = notifier

    async def load(self) -> bool:
        """Fetch settings and replace the local copy; keep it on failure."""
        with self.session.busy.hold("loading"):
            msg = await self.notifier.settle(self.client.get_settings(), "settings_load_failed")
        if msg is None:
            return False
        if not isinstance(msg.obj, dict):
            self.notifier.error("settings_load_failed", "response carried no settings")
            return False
        try:
            settings = ApiSettings.model_validate(msg.obj)
        except pydantic.ValidationError as e:
            self.notifier.error("settings_load_failed", "malformed settings payload")
            logger.debug("settings payload rejected: %s", e)
            return False
        self.session.settings = settings
        return True

    async def save(self, settings: ApiSettings) -> bool:
        """Send *settings*; on success reload to pick up server-normalized values."""
        if settings.default_rate_limit < 0:
            raise ValidationError("default rate limit must be a non-negative integer")

        with self.session.busy.hold("saving"):
            msg = await self.notifier.settle(
                self.client.save_settings(settings), "settings_update_failed"
            )
        if msg is None:
            return False
        self.notifier.success("settings_updated")
        await self.load()
        return True
