"""
CredentialController — the credential lifecycle state machine.

Orchestrates create / rotate / toggle / delete / rate-update against the
panel. Every successful mutation ends with a full registry reload; nothing
is patched locally from a mutation response. Freshly issued tokens go into
the session's single-slot RevealedSecret and nowhere else.

Operations on the same credential are not serialized: if two are in flight
at once, the last registry reload to complete wins.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from accessctl.client import PanelClient
from accessctl.errors import ValidationError
from accessctl.gate import ConfirmationGate
from accessctl.models import ApiSettings, Credential, Envelope
from accessctl.notify import MESSAGES, NoticeCallback, Notifier
from accessctl.registry import CredentialRegistry
from accessctl.session import AccessSession
from accessctl.settings_store import SettingsStore

logger = logging.getLogger(__name__)

Clipboard = Callable[[str], Any]


def validate_rate(rate: Any) -> int:
    """Return *rate* if it is a non-negative int, else raise ValidationError."""
    if isinstance(rate, bool) or not isinstance(rate, int) or rate < 0:
        raise ValidationError(f"rate must be a non-negative integer, got {rate!r}")
    return rate


def validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required")
    return name.strip()


def _created_id(msg: Envelope) -> int | None:
    obj = msg.obj if isinstance(msg.obj, dict) else {}
    user = obj.get("user") if isinstance(obj.get("user"), dict) else obj
    value = user.get("id")
    return value if isinstance(value, int) else None


class CredentialController:
    """Drives credential operations and owns the session's mutable state."""

    def __init__(
        self,
        client: PanelClient,
        session: AccessSession | None = None,
        gate: ConfirmationGate | None = None,
        notify: NoticeCallback | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.client = client
        self.session = session or AccessSession()
        self.gate = gate
        self.clipboard = clipboard
        self.notifier = Notifier(notify)
        self.settings = SettingsStore(client, self.session, self.notifier)
        self.registry = CredentialRegistry(client, self.session, self.notifier)

    # ── Loading ──────────────────────────────────────────────────────

    async def init(self) -> bool:
        """Load settings and the credential list concurrently.

        Returns True when both loads succeeded.
        """
        results = await asyncio.gather(self.settings.load(), self.registry.load())
        return all(results)

    async def load_settings(self) -> bool:
        return await self.settings.load()

    async def save_settings(self, settings: ApiSettings) -> bool:
        return await self.settings.save(settings)

    async def load_credentials(self) -> bool:
        return await self.registry.load()

    @property
    def credentials(self) -> list[Credential]:
        return self.session.credentials

    # ── Mutations ────────────────────────────────────────────────────

    async def create(self, name: str | None = None, rate: int | None = None) -> bool:
        """Create an API user from the pending form.

        *name*/*rate*, when given, are written into the form first. Invalid
        input raises ValidationError before the form is touched. On failure
        the form keeps its contents so the user can retry.
        """
        form = self.session.form
        candidate_name = validate_name(form.name if name is None else name)
        candidate_rate = validate_rate(form.rate if rate is None else rate)
        form.name, form.rate = candidate_name, candidate_rate

        with self.session.busy.hold("creating"):
            msg = await self.notifier.settle(
                self.client.create_credential(form.name, form.rate), "create_failed"
            )
        if msg is None:
            return False

        token = msg.token()
        if token:
            self.session.revealed.reveal(token, _created_id(msg))
        form.reset()
        self.notifier.success("token_generated")
        await self.registry.load()
        return True

    async def rotate(self, credential_id: int) -> bool:
        """Reissue the token for *credential_id* and reveal the new one."""
        msg = await self.notifier.settle(
            self.client.rotate_token(credential_id), "token_rotate_failed"
        )
        if msg is None:
            return False

        token = msg.token()
        if not token:
            self.notifier.error("token_rotate_failed", "response carried no token")
            return False

        self.session.revealed.reveal(token, credential_id)
        self.notifier.success("token_rotated")
        await self.registry.load()
        return True

    async def toggle(self, credential_id: int, enabled: bool) -> bool:
        """Enable or disable a credential. The local flag only changes via reload."""
        msg = await self.notifier.settle(
            self.client.set_enabled(credential_id, enabled), "toggle_failed"
        )
        if msg is None:
            return False
        self.notifier.success("user_enabled" if enabled else "user_disabled")
        await self.registry.load()
        return True

    async def delete(self, credential_id: int) -> bool:
        """Delete a credential after the confirmation gate agrees.

        Returns False without any request when the gate declines.
        """
        if self.gate is None:
            raise RuntimeError("delete requires a confirmation gate")

        body = MESSAGES["delete_confirm_desc"]
        existing = self.session.find(credential_id)
        if existing is not None:
            body = f"{existing.name} (#{existing.id})\n{body}"

        confirmed = await self.gate.confirm(MESSAGES["delete_confirm_title"], body)
        if not confirmed:
            logger.debug("Delete of API user %s declined", credential_id)
            return False

        msg = await self.notifier.settle(
            self.client.delete_credential(credential_id), "delete_failed"
        )
        if msg is None:
            return False
        self.notifier.success("user_deleted")
        await self.registry.load()
        return True

    async def update_rate(self, credential_id: int, rate: int) -> bool:
        """Set the per-minute limit. The stored value is whatever the reload returns."""
        validate_rate(rate)
        msg = await self.notifier.settle(
            self.client.update_rate(credential_id, rate), "rate_update_failed"
        )
        if msg is None:
            return False
        self.notifier.success("rate_updated")
        await self.registry.load()
        return True

    # ── Revealed secret ──────────────────────────────────────────────

    async def reveal_copy(self) -> bool:
        """Copy the visible secret to the clipboard. No-op when nothing is shown."""
        revealed = self.session.revealed
        if not revealed.visible or not revealed.value or self.clipboard is None:
            return False
        result = self.clipboard(revealed.value)
        if inspect.isawaitable(result):
            await result
        self.notifier.success("copy_success")
        return True

    def dismiss_reveal(self) -> None:
        self.session.revealed.dismiss()
