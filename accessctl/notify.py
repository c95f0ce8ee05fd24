"""
User-facing notices for credential operations.

MESSAGES mirrors the panel's message keys. Notifier forwards notices to
whatever front-end is attached (CLI printer, Textual toast) and logs them.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from accessctl.errors import RequestFailure
from accessctl.models import Envelope

logger = logging.getLogger(__name__)

# Message registry: key → text
MESSAGES: dict[str, str] = {
    "settings_loaded": "API settings loaded",
    "settings_load_failed": "Could not load API settings",
    "settings_updated": "API settings updated",
    "settings_update_failed": "Could not update API settings",
    "list_failed": "Could not load API users",
    "token_generated": "API user created",
    "create_failed": "Could not create API user",
    "user_enabled": "API user enabled",
    "user_disabled": "API user disabled",
    "toggle_failed": "Could not change API user status",
    "token_rotated": "Token rotated",
    "token_rotate_failed": "Could not rotate token",
    "user_deleted": "API user deleted",
    "delete_failed": "Could not delete API user",
    "rate_updated": "Rate limit updated",
    "rate_update_failed": "Could not update rate limit",
    "copy_success": "Token copied to clipboard",
    "delete_confirm_title": "Delete API user?",
    "delete_confirm_desc": "The user's token stops working immediately. This cannot be undone.",
}

NoticeCallback = Callable[[str, str], None]


class Notifier:
    """Dispatch success/error notices to a front-end callback."""

    def __init__(self, callback: NoticeCallback | None = None) -> None:
        self._callback = callback

    def success(self, key: str) -> None:
        text = MESSAGES.get(key, key)
        logger.info(text)
        self._emit("success", text)

    def error(self, key: str, detail: str = "") -> None:
        text = MESSAGES.get(key, key)
        if detail:
            text = f"{text}: {detail}"
        logger.warning(text)
        self._emit("error", text)

    def _emit(self, level: str, text: str) -> None:
        if self._callback is not None:
            self._callback(level, text)

    async def settle(self, call: Awaitable[Envelope], failure_key: str) -> Envelope | None:
        """Await a panel call; return the envelope on success, None on any failure.

        Transport failures and success=false envelopes are reported the same way.
        """
        try:
            msg = await call
        except RequestFailure as e:
            self.error(failure_key, str(e))
            return None
        if not msg.success:
            self.error(failure_key, msg.msg)
            return None
        return msg
