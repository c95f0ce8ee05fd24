"""
Custom Textual widgets for the accessctl TUI.

MessageDisplay — renders command output and notices with markup.
CredentialTable — the API user list, rebuilt from the registry on every refresh.
SecretBanner — one-time display of a freshly issued token.
StatusBar — bottom bar with connection state, busy flags and API policy.
"""

from __future__ import annotations

from textual.content import Content
from textual.markup import escape
from textual.widgets import DataTable, Static

from accessctl.models import ApiSettings, BusyFlags, Credential, RevealedSecret


class MessageDisplay(Static):
    """Renders a single line of console output with role-based styling.

    User and error lines are shown literally; system and success lines may
    carry markup.
    """

    def __init__(
        self,
        content: str = "",
        role: str = "system",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._role = role
        self._content = content
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if self._role == "user":
            return f"[cyan]> {escape(self._content)}[/cyan]"
        elif self._role == "error":
            return f"[red]{escape(self._content)}[/red]"
        elif self._role == "success":
            return f"[green]{self._content}[/green]"
        else:
            return f"[dim italic]{self._content}[/dim italic]"


class CredentialTable(DataTable):
    """Table of API users keyed by credential id."""

    COLUMNS = ("#", "User", "Status", "Rate/min", "Last used")

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.add_columns(*self.COLUMNS)

    @staticmethod
    def format_row(credential: Credential, default_rate: int) -> tuple[str, ...]:
        if credential.rate_limit_per_minute:
            rate = str(credential.rate_limit_per_minute)
        else:
            rate = f"{default_rate} (default)"
        last_used = (
            credential.last_used_at.strftime("%Y-%m-%d %H:%M")
            if credential.last_used_at
            else "never"
        )
        status = "enabled" if credential.enabled else "disabled"
        return (str(credential.id), credential.name, status, rate, last_used)

    def show(self, credentials: list[Credential], default_rate: int) -> None:
        """Replace every row with *credentials*."""
        self.clear()
        for credential in credentials:
            cells = self.format_row(credential, default_rate)
            self.add_row(*(escape(cell) for cell in cells), key=str(credential.key))


class SecretBanner(Static):
    """Shows a revealed token until it is dismissed.

    Hidden whenever the session's RevealedSecret is not visible.
    """

    DEFAULT_CSS = """
    SecretBanner {
        margin: 0 1;
        padding: 0 1;
        border: solid $warning;
        height: auto;
        display: none;
    }
    SecretBanner.-visible {
        display: block;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._value = ""
        self._credential_id: int | None = None
        super().__init__("", name=name, id=id, classes=classes)

    def _format(self) -> str:
        who = f" for #{self._credential_id}" if self._credential_id is not None else ""
        return (
            f"[bold]New token{who}[/bold] (store securely, shown once)\n"
            f"[yellow]{escape(self._value)}[/yellow]\n"
            "[dim]ctrl+y copy · escape dismiss[/dim]"
        )

    def show(self, revealed: RevealedSecret) -> None:
        if revealed.visible and revealed.value:
            self._value = revealed.value
            self._credential_id = revealed.credential_id
            self.update(Content.from_markup(self._format()))
            self.add_class("-visible")
        else:
            self._value = ""
            self._credential_id = None
            self.update("")
            self.remove_class("-visible")

    @property
    def visible_token(self) -> str:
        return self._value


class StatusBar(Static):
    """Bottom status bar showing connection state, busy flags and API policy."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._connected = False
        self._count = 0
        self._settings: ApiSettings | None = None
        self._busy: list[str] = []
        super().__init__(
            Content.from_markup(self._format()),
            name=name,
            id=id,
            classes=classes,
        )

    def _format(self) -> str:
        if self._connected:
            status = "[green]●[/green] connected"
        else:
            status = "[red]●[/red] disconnected"

        parts = [status, f"{self._count} API users"]

        if self._settings is not None:
            parts.append("token-only" if self._settings.token_only else "session access allowed")
            parts.append(f"default {self._settings.default_rate_limit}/min")

        if self._busy:
            parts.append(f"[yellow]{', '.join(self._busy)}...[/yellow]")

        return " | ".join(parts)

    def set_state(
        self,
        connected: bool,
        count: int = 0,
        settings: ApiSettings | None = None,
        busy: BusyFlags | None = None,
    ) -> None:
        self._connected = connected
        self._count = count
        self._settings = settings
        self._busy = []
        if busy is not None:
            self._busy = [
                flag for flag in ("loading", "saving", "creating") if getattr(busy, flag)
            ]
        self.update(Content.from_markup(self._format()))
