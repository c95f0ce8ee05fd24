"""Tests for the panel client — paths, bodies, envelope and failure handling."""

from __future__ import annotations

import json

import httpx
import pytest

from accessctl.client import PanelClient
from accessctl.config import PanelConfig
from accessctl.errors import RequestFailure
from accessctl.models import ApiSettings


def _client(handler, **config) -> PanelClient:
    return PanelClient(PanelConfig(**config), transport=httpx.MockTransport(handler))


class _Recorder:
    """MockTransport handler that records requests and replies with a fixed body."""

    def __init__(self, body=None, status: int = 200) -> None:
        self.requests: list[httpx.Request] = []
        self.body = {"success": True, "msg": "", "obj": None} if body is None else body
        self.status = status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_list_credentials(self):
        rec = _Recorder({"success": True, "obj": [{"id": 1, "name": "a"}]})
        client = _client(rec)
        msg = await client.list_credentials()
        assert msg.success is True
        assert msg.obj == [{"id": 1, "name": "a"}]
        assert rec.last.method == "GET"
        assert rec.last.url.path == "/panel/api-users/list"
        await client.close()

    @pytest.mark.asyncio
    async def test_base_path_prefix(self):
        rec = _Recorder()
        client = _client(rec, base_path="/hidden/")
        await client.list_credentials()
        assert rec.last.url.path == "/hidden/panel/api-users/list"
        await client.close()

    @pytest.mark.asyncio
    async def test_create_body(self):
        rec = _Recorder({"success": True, "obj": {"user": {"id": 7}, "token": "abc"}})
        client = _client(rec)
        msg = await client.create_credential("svc-bot", 60)
        assert rec.last.method == "POST"
        assert rec.last.url.path == "/panel/api-users/create"
        assert json.loads(rec.last.content) == {"name": "svc-bot", "rate": 60}
        assert msg.token() == "abc"
        await client.close()

    @pytest.mark.asyncio
    async def test_enable_and_disable_paths(self):
        rec = _Recorder()
        client = _client(rec)
        await client.set_enabled(3, True)
        assert rec.last.url.path == "/panel/api-users/enable/3"
        await client.set_enabled(3, False)
        assert rec.last.url.path == "/panel/api-users/disable/3"
        await client.close()

    @pytest.mark.asyncio
    async def test_rotate_delete_rate_paths(self):
        rec = _Recorder()
        client = _client(rec)
        await client.rotate_token(4)
        assert rec.last.url.path == "/panel/api-users/rotate/4"
        await client.delete_credential(4)
        assert rec.last.url.path == "/panel/api-users/delete/4"
        await client.update_rate(4, 15)
        assert rec.last.url.path == "/panel/api-users/rate/4"
        assert json.loads(rec.last.content) == {"rate": 15}
        await client.close()

    @pytest.mark.asyncio
    async def test_settings_round(self):
        rec = _Recorder({"success": True, "obj": {"apiTokenOnly": True, "apiDefaultRateLimit": 120}})
        client = _client(rec)
        await client.get_settings()
        assert rec.last.method == "GET"
        assert rec.last.url.path == "/panel/api-users/settings"

        await client.save_settings(ApiSettings(token_only=False, default_rate_limit=10))
        assert rec.last.method == "POST"
        assert json.loads(rec.last.content) == {"apiTokenOnly": False, "apiDefaultRateLimit": 10}
        await client.close()

    @pytest.mark.asyncio
    async def test_login_form_body(self):
        rec = _Recorder()
        client = _client(rec, base_path="/p/")
        await client.login("admin", "s3cret")
        assert rec.last.url.path == "/p/login"
        assert rec.last.content == b"username=admin&password=s3cret"
        await client.close()

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_is_returned(self):
        """success=false is a normal envelope at this layer."""
        client = _client(_Recorder({"success": False, "msg": "not found"}))
        msg = await client.delete_credential(99)
        assert msg.success is False
        assert msg.msg == "not found"
        await client.close()


class TestFailures:
    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        client = _client(handler)
        with pytest.raises(RequestFailure):
            await client.list_credentials()
        await client.close()

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        client = _client(_Recorder({"detail": "nope"}, status=500))
        with pytest.raises(RequestFailure) as excinfo:
            await client.get_settings()
        assert excinfo.value.status_code == 500
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>login</html>")

        client = _client(handler)
        with pytest.raises(RequestFailure):
            await client.list_credentials()
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_envelope(self):
        client = _client(_Recorder(["not", "an", "envelope"]))
        with pytest.raises(RequestFailure):
            await client.list_credentials()
        await client.close()


class TestContextManager:
    @pytest.mark.asyncio
    async def test_async_with_closes(self):
        async with _client(_Recorder()) as client:
            await client.list_credentials()
        assert client._client.is_closed
