"""
HTTP client for the panel's API-user management endpoints.

Wraps httpx.AsyncClient. Every call returns the panel's normalized
{success, msg, obj} envelope; transport errors, non-2xx statuses and
undecodable bodies are raised as RequestFailure.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pydantic

from accessctl.config import PanelConfig
from accessctl.errors import RequestFailure
from accessctl.models import ApiSettings, Envelope

logger = logging.getLogger(__name__)


class PanelClient:
    """Async client for the panel's /panel/api-users API."""

    def __init__(
        self,
        config: PanelConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or PanelConfig()
        self.base_url = self.config.url.rstrip("/")
        self.prefix = self.config.api_users_path
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.config.timeout,
            verify=self.config.verify_tls,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PanelClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(self, method: str, path: str, **kwargs: Any) -> Envelope:
        try:
            if method == "GET":
                resp = await self._client.get(path, **kwargs)
            else:
                resp = await self._client.post(path, **kwargs)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("%s %s -> HTTP %s", method, path, e.response.status_code)
            raise RequestFailure(
                f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise RequestFailure(str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise RequestFailure("invalid response body") from e

        try:
            return Envelope.model_validate(payload)
        except pydantic.ValidationError as e:
            raise RequestFailure("malformed response envelope") from e

    async def login(self, username: str, password: str) -> Envelope:
        """POST /login — open a panel session (cookie kept by the client)."""
        return await self._send(
            "POST",
            self.config.login_path,
            data={"username": username, "password": password},
        )

    async def get_settings(self) -> Envelope:
        """GET /settings — token-only policy and default rate limit."""
        return await self._send("GET", f"{self.prefix}/settings")

    async def save_settings(self, settings: ApiSettings) -> Envelope:
        """POST /settings — overwrite the API policy wholesale."""
        return await self._send("POST", f"{self.prefix}/settings", json=settings.to_wire())

    async def list_credentials(self) -> Envelope:
        """GET /list — every API user, without tokens."""
        return await self._send("GET", f"{self.prefix}/list")

    async def create_credential(self, name: str, rate: int) -> Envelope:
        """POST /create — returns the new user and its plaintext token."""
        return await self._send(
            "POST", f"{self.prefix}/create", json={"name": name, "rate": rate}
        )

    async def set_enabled(self, credential_id: int, enabled: bool) -> Envelope:
        """POST /enable/{id} or /disable/{id}."""
        action = "enable" if enabled else "disable"
        return await self._send("POST", f"{self.prefix}/{action}/{credential_id}")

    async def rotate_token(self, credential_id: int) -> Envelope:
        """POST /rotate/{id} — returns the reissued plaintext token."""
        return await self._send("POST", f"{self.prefix}/rotate/{credential_id}")

    async def delete_credential(self, credential_id: int) -> Envelope:
        """POST /delete/{id}."""
        return await self._send("POST", f"{self.prefix}/delete/{credential_id}")

    async def update_rate(self, credential_id: int, rate: int) -> Envelope:
        """POST /rate/{id} — set the per-minute limit (0 = use default)."""
        return await self._send(
            "POST", f"{self.prefix}/rate/{credential_id}", json={"rate": rate}
        )
