"""
AccessSession — the state owned by one management session.

Settings, the credential registry, the pending create form, busy flags and
the revealed-secret slot live here rather than in module globals, so every
controller (and every test) works on its own isolated instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from accessctl.models import ApiSettings, BusyFlags, Credential, PendingForm, RevealedSecret


@dataclass
class AccessSession:
    settings: ApiSettings = field(default_factory=ApiSettings)
    credentials: list[Credential] = field(default_factory=list)
    form: PendingForm = field(default_factory=PendingForm)
    revealed: RevealedSecret = field(default_factory=RevealedSecret)
    busy: BusyFlags = field(default_factory=BusyFlags)

    def find(self, credential_id: int) -> Credential | None:
        for credential in self.credentials:
            if credential.id == credential_id:
                return credential
        return None
