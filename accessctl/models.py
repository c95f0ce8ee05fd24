"""
Data models for accessctl.

Wire payloads from the panel are pydantic models parsed from camelCase JSON.
Client-side session state (form, busy flags, revealed secret) is plain
dataclasses.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TOKEN_ONLY = True
DEFAULT_RATE_LIMIT = 120


class _PanelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ApiSettings(_PanelModel):
    """Global API policy: token-only enforcement and the default rate limit."""

    token_only: bool = Field(default=DEFAULT_TOKEN_ONLY, alias="apiTokenOnly")
    default_rate_limit: int = Field(default=DEFAULT_RATE_LIMIT, alias="apiDefaultRateLimit")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Credential(_PanelModel):
    """An API user as listed by the panel (metadata only — never includes a token)."""

    id: int
    name: str
    enabled: bool
    rate_limit_per_minute: int = 0
    last_used_at: datetime | None = None

    @field_validator("last_used_at", mode="before")
    @classmethod
    def _zero_time_is_none(cls, value: Any) -> Any:
        # Go serializes an unset time.Time as year 1.
        if isinstance(value, str) and value.startswith("0001-01-01"):
            return None
        return value

    @property
    def key(self) -> int:
        """Stable row key for table diffing."""
        return self.id

    def effective_rate(self, default: int) -> int:
        """Per-minute limit the server applies: own limit when set, else the default."""
        if self.rate_limit_per_minute > 0:
            return self.rate_limit_per_minute
        return max(default, 0)


class Envelope(BaseModel):
    """Normalized panel response."""

    success: bool = False
    msg: str = ""
    obj: Any = None

    def token(self) -> str | None:
        """Extract an issued token from a create/rotate response, if any."""
        if not isinstance(self.obj, dict):
            return None
        token = self.obj.get("token")
        if isinstance(token, str) and token:
            return token
        return None


@dataclass
class PendingForm:
    """Input for the create operation; reset after a successful create."""

    name: str = ""
    rate: int = 0

    def reset(self) -> None:
        self.name = ""
        self.rate = 0


@dataclass
class RevealedSecret:
    """Single-slot holder for a freshly issued token.

    Filled only from create/rotate responses and cleared on dismiss.
    The value is kept out of repr() and the object refuses to be pickled
    or copied.
    """

    value: str = field(default="", repr=False)
    visible: bool = False
    credential_id: int | None = None

    def reveal(self, value: str, credential_id: int | None = None) -> None:
        self.value = value
        self.credential_id = credential_id
        self.visible = True

    def dismiss(self) -> None:
        self.value = ""
        self.credential_id = None
        self.visible = False

    def __reduce_ex__(self, protocol: Any) -> Any:
        raise TypeError("revealed secrets cannot be serialized or copied")


@dataclass
class BusyFlags:
    """Per-operation-class in-flight indicators used to gate UI triggers."""

    loading: bool = False
    saving: bool = False
    creating: bool = False

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        """Set flag *name* for the duration of the block, clearing it on any exit."""
        if name not in ("loading", "saving", "creating"):
            raise ValueError(f"unknown busy flag: {name}")
        setattr(self, name, True)
        try:
            yield
        finally:
            setattr(self, name, False)

    @property
    def any(self) -> bool:
        return self.loading or self.saving or self.creating
