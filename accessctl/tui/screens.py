"""
Confirmation modal and the gate that drives it.

ModalGate.confirm() pushes a ConfirmScreen and resolves once the user
picks an answer; the calling operation stays suspended until then.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.markup import escape
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

if TYPE_CHECKING:
    from textual.app import App


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog for destructive operations."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title: str, body: str) -> None:
        super().__init__()
        self.prompt_title = title
        self.prompt_body = body

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.prompt_title, id="confirm-title")
            yield Static(escape(self.prompt_body), id="confirm-body")
            with Horizontal(id="confirm-buttons"):
                yield Button("Cancel", id="confirm-no")
                yield Button("Delete", variant="error", id="confirm-yes")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_cancel(self) -> None:
        self.dismiss(False)


class ModalGate:
    """ConfirmationGate backed by a Textual modal."""

    def __init__(self, app: App) -> None:
        self.app = app

    async def confirm(self, title: str, body: str) -> bool:
        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

        def _resolve(result: bool | None) -> None:
            if not future.done():
                future.set_result(bool(result))

        self.app.push_screen(ConfirmScreen(title, body), callback=_resolve)
        return await future
