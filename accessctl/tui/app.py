"""
AccessApp — main Textual application for the accessctl TUI.

Shows the panel's API users, runs slash commands against the credential
controller and re-renders from session state after each one.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.markup import escape
from textual.widgets import Footer, Header, Input

from accessctl.client import PanelClient
from accessctl.config import PanelConfig, get_config
from accessctl.controller import CredentialController
from accessctl.errors import AccessError
from accessctl.session import AccessSession
from accessctl.tui.screens import ModalGate
from accessctl.tui.widgets import CredentialTable, MessageDisplay, SecretBanner, StatusBar

logger = logging.getLogger(__name__)

CSS_PATH = Path(__file__).parent / "theme.tcss"


class AccessApp(App):
    """Terminal console for panel API users."""

    TITLE = "accessctl"
    CSS_PATH = CSS_PATH

    BINDINGS = [
        Binding("ctrl+y", "copy_token", "Copy token", show=True),
        Binding("escape", "dismiss_token", "Hide token", show=True),
        Binding("ctrl+r", "reload", "Reload", show=True),
        Binding("ctrl+c", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        config: PanelConfig | None = None,
        client: PanelClient | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config or get_config()
        self.client = client or PanelClient(self.config)
        self.session = AccessSession()
        self.controller = CredentialController(
            self.client,
            self.session,
            gate=ModalGate(self),
            notify=self._on_notice,
            clipboard=self.copy_to_clipboard,
        )
        self._connected = False
        self._tasks: set[asyncio.Task] = set()

    def compose(self) -> ComposeResult:
        yield Header()
        yield CredentialTable(id="credentials")
        yield SecretBanner(id="secret")
        yield VerticalScroll(id="log")
        yield Input(placeholder="/help for commands", id="command-input")
        yield StatusBar(id="status-bar")
        yield Footer()

    @property
    def status_bar(self) -> StatusBar:
        return self.query_one("#status-bar", StatusBar)

    async def on_mount(self) -> None:
        """Log in if configured, then load settings and API users."""
        await self._connect()
        self.query_one("#command-input", Input).focus()

    async def _connect(self) -> None:
        try:
            if self.config.has_login:
                msg = await self.client.login(self.config.username, self.config.password)
                if not msg.success:
                    await self.write(f"Login failed: {msg.msg or 'rejected'}", role="error")
                    self.refresh_view()
                    return
            self._connected = await self.controller.init()
        except AccessError as e:
            await self.write(f"Cannot reach panel at {self.client.base_url}: {e}", role="error")
        self.refresh_view()

    def refresh_view(self) -> None:
        """Re-render every widget from the session."""
        session = self.session
        self.query_one("#credentials", CredentialTable).show(
            session.credentials, session.settings.default_rate_limit
        )
        self.query_one("#secret", SecretBanner).show(session.revealed)
        self.status_bar.set_state(
            self._connected,
            len(session.credentials),
            session.settings,
            session.busy,
        )

    def _on_notice(self, level: str, text: str) -> None:
        self.notify(escape(text), severity="error" if level == "error" else "information")

    async def write(self, text: str, role: str = "system") -> None:
        log = self.query_one("#log")
        await log.mount(MessageDisplay(content=text, role=role))
        log.scroll_end(animate=False)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run slash commands in the background so modals can take input."""
        text = event.value.strip()
        if not text:
            return
        self.query_one("#command-input", Input).value = ""

        if not text.startswith("/"):
            await self.write("Commands start with /. Type /help.", role="system")
            return

        await self.write(text, role="user")
        task = asyncio.create_task(self._run_command(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.refresh_view()

    async def _run_command(self, text: str) -> None:
        from accessctl.tui.commands import handle_command

        try:
            _, output = await handle_command(self, text)
            if output:
                await self.write(output)
        except AccessError as e:
            await self.write(str(e), role="error")
        finally:
            if self.is_running:
                self.refresh_view()

    async def action_copy_token(self) -> None:
        await self.controller.reveal_copy()

    def action_dismiss_token(self) -> None:
        self.controller.dismiss_reveal()
        self.refresh_view()

    async def action_reload(self) -> None:
        self._connected = await self.controller.init()
        self.refresh_view()

    async def on_unmount(self) -> None:
        """Clean up on exit."""
        for task in list(self._tasks):
            task.cancel()
        await self.client.close()
