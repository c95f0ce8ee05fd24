"""
CredentialRegistry — the locally known list of API users.

The list is always replaced wholesale from the panel's /list endpoint; it is
never patched from the response of a mutation.
"""

from __future__ import annotations

import logging

import pydantic

from accessctl.client import PanelClient
from accessctl.models import Credential
from accessctl.notify import Notifier
from accessctl.session import AccessSession

logger = logging.getLogger(__name__)


class CredentialRegistry:
    def __init__(self, client: PanelClient, session: AccessSession, notifier: Notifier) -> None:
        self.client = client
        self.session = session
        self.notifier = notifier

    @property
    def credentials(self) -> list[Credential]:
        return self.session.credentials

    def get(self, credential_id: int) -> Credential | None:
        return self.session.find(credential_id)

    async def load(self) -> bool:
        """Fetch the full list and swap it in; leave the old list on any failure."""
        with self.session.busy.hold("loading"):
            msg = await self.notifier.settle(self.client.list_credentials(), "list_failed")
        if msg is None:
            return False

        raw = msg.obj or []
        if not isinstance(raw, list):
            self.notifier.error("list_failed", "unexpected list payload")
            return False
        try:
            credentials = [Credential.model_validate(item) for item in raw]
        except pydantic.ValidationError as e:
            self.notifier.error("list_failed", "malformed API user entry")
            logger.debug("list payload rejected: %s", e)
            return False

        self.session.credentials = credentials
        logger.debug("Loaded %d API users", len(credentials))
        return True
