"""
Centralized configuration for accessctl.

All configuration is loaded from environment variables with sensible defaults.

Usage:
    from accessctl.config import get_config
    cfg = get_config()
    print(cfg.url)        # "http://127.0.0.1:2053"
    print(cfg.api_users_path)  # "/panel/api-users"
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def normalize_base_path(raw: str) -> str:
    """Return a base path with exactly one leading and one trailing slash."""
    stripped = raw.strip().strip("/")
    return f"/{stripped}/" if stripped else "/"


@dataclass(frozen=True)
class PanelConfig:
    """Connection parameters for the administrative panel."""

    url: str = "http://127.0.0.1:2053"
    base_path: str = "/"  # panel web base path, e.g. "/secret-panel/"
    username: str = ""
    password: str = ""
    timeout: float = 10.0
    verify_tls: bool = True

    @property
    def api_users_path(self) -> str:
        return f"{normalize_base_path(self.base_path)}panel/api-users"

    @property
    def login_path(self) -> str:
        return f"{normalize_base_path(self.base_path)}login"

    @property
    def has_login(self) -> bool:
        return bool(self.username)


# Singleton
_config: PanelConfig | None = None


def get_config() -> PanelConfig:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> PanelConfig:
    """Load configuration from environment variables."""
    return PanelConfig(
        url=os.environ.get("ACCESSCTL_PANEL_URL", "http://127.0.0.1:2053").rstrip("/"),
        base_path=normalize_base_path(os.environ.get("ACCESSCTL_BASE_PATH", "/")),
        username=os.environ.get("ACCESSCTL_USERNAME", ""),
        password=os.environ.get("ACCESSCTL_PASSWORD", ""),
        timeout=float(os.environ.get("ACCESSCTL_TIMEOUT", "10")),
        verify_tls=os.environ.get("ACCESSCTL_VERIFY_TLS", "true").strip().lower() in _TRUTHY,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
