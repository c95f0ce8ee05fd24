"""Tests for accessctl.config — environment-driven panel configuration."""

import pytest

from accessctl.config import PanelConfig, get_config, normalize_base_path, reset_config


class TestPanelConfig:
    def test_defaults(self):
        cfg = PanelConfig()
        assert cfg.url == "http://127.0.0.1:2053"
        assert cfg.base_path == "/"
        assert cfg.timeout == 10.0
        assert cfg.verify_tls is True
        assert cfg.has_login is False

    def test_api_users_path_root(self):
        assert PanelConfig().api_users_path == "/panel/api-users"

    def test_api_users_path_with_base_path(self):
        cfg = PanelConfig(base_path="secret-panel")
        assert cfg.api_users_path == "/secret-panel/panel/api-users"
        assert cfg.login_path == "/secret-panel/login"

    def test_has_login(self):
        assert PanelConfig(username="admin").has_login is True

    def test_frozen(self):
        cfg = PanelConfig()
        with pytest.raises(AttributeError):
            cfg.url = "http://other"  # type: ignore[misc]


class TestNormalizeBasePath:
    @pytest.mark.parametrize(
        "raw, expected",
        [("", "/"), ("/", "/"), ("abc", "/abc/"), ("/abc", "/abc/"), ("/abc/", "/abc/"), (" x/y ", "/x/y/")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_base_path(raw) == expected


class TestGetConfig:
    def test_singleton(self):
        assert get_config() is get_config()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ACCESSCTL_PANEL_URL", "https://panel.example.com:8443/")
        monkeypatch.setenv("ACCESSCTL_BASE_PATH", "admin")
        monkeypatch.setenv("ACCESSCTL_USERNAME", "root")
        monkeypatch.setenv("ACCESSCTL_PASSWORD", "pw")
        monkeypatch.setenv("ACCESSCTL_TIMEOUT", "2.5")
        monkeypatch.setenv("ACCESSCTL_VERIFY_TLS", "false")
        reset_config()

        cfg = get_config()
        assert cfg.url == "https://panel.example.com:8443"
        assert cfg.base_path == "/admin/"
        assert cfg.username == "root"
        assert cfg.password == "pw"
        assert cfg.timeout == 2.5
        assert cfg.verify_tls is False

    def test_reset(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("ACCESSCTL_USERNAME", "changed")
        reset_config()
        second = get_config()
        assert first is not second
        assert second.username == "changed"
