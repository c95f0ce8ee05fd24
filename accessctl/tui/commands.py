"""
Slash command registry for the accessctl TUI.

Every command maps onto one controller operation.
Returns (handled: bool, output: str | None).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.markup import escape

from accessctl.errors import ValidationError

if TYPE_CHECKING:
    from accessctl.tui.app import AccessApp

# Command registry: name → (handler_name, usage, description)
COMMANDS: dict[str, tuple[str, str, str]] = {
    "/list": ("cmd_list", "", "Reload API users"),
    "/create": ("cmd_create", "<name> (rate)", "Create an API user (token shown once)"),
    "/rotate": ("cmd_rotate", "<id>", "Rotate a user's token"),
    "/enable": ("cmd_enable", "<id>", "Enable an API user"),
    "/disable": ("cmd_disable", "<id>", "Disable an API user"),
    "/delete": ("cmd_delete", "<id>", "Delete an API user (asks first)"),
    "/rate": ("cmd_rate", "<id> <rate>", "Set per-minute limit (0 = default)"),
    "/settings": ("cmd_settings", "", "Reload and show API settings"),
    "/token-only": ("cmd_token_only", "on|off", "Require API tokens"),
    "/default-rate": ("cmd_default_rate", "<rate>", "Set the default per-minute limit"),
    "/copy": ("cmd_copy", "", "Copy the revealed token"),
    "/dismiss": ("cmd_dismiss", "", "Hide the revealed token"),
    "/help": ("cmd_help", "", "Show available commands"),
    "/quit": ("cmd_quit", "", "Exit the TUI"),
    "/exit": ("cmd_quit", "", "Exit the TUI"),
}


async def handle_command(app: AccessApp, text: str) -> tuple[bool, str | None]:
    """Try to handle text as a slash command.

    Returns (True, output) if handled, (False, None) if not a command.
    """
    parts = text.strip().split(None, 1)
    if not parts or not parts[0].startswith("/"):
        return False, None

    cmd = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    if cmd not in COMMANDS:
        return True, f"Unknown command: {escape(cmd)}. Type /help for available commands."

    handler_name, usage, _ = COMMANDS[cmd]
    handler = globals().get(handler_name)
    if handler is None:
        return True, f"Command {cmd} not implemented."

    try:
        output = await handler(app, args)
    except ValidationError as e:
        hint = f" Usage: {cmd} {usage}" if usage else ""
        return True, f"[red]{escape(str(e))}.[/red]{escape(hint)}"
    return True, output


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{what} must be an integer") from None


def _parse_id(args: str) -> int:
    if not args.strip():
        raise ValidationError("missing API user id")
    return _parse_int(args.split()[0], "id")


async def cmd_list(app: AccessApp, args: str) -> str:
    """Reload the registry."""
    if not await app.controller.load_credentials():
        return "[red]Could not load API users[/red]"
    return f"{len(app.controller.credentials)} API users."


async def cmd_create(app: AccessApp, args: str) -> str:
    """Create an API user; the token appears in the banner."""
    if app.session.busy.creating:
        return "A create is already in progress."

    words = args.split()
    rate = None
    if len(words) > 1:
        try:
            rate = int(words[-1])
            words = words[:-1]
        except ValueError:
            pass
    name = " ".join(words)
    shown = escape(name)

    ok = await app.controller.create(name, rate if rate is not None else 0)
    if not ok:
        return f"[red]Could not create {shown}[/red]"
    return f"Created {shown}. Copy the token now; it will not be shown again."


async def cmd_rotate(app: AccessApp, args: str) -> str:
    credential_id = _parse_id(args)
    if not await app.controller.rotate(credential_id):
        return f"[red]Token for #{credential_id} not rotated[/red]"
    return f"Token for #{credential_id} rotated. The previous token no longer works."


async def cmd_enable(app: AccessApp, args: str) -> str:
    credential_id = _parse_id(args)
    ok = await app.controller.toggle(credential_id, True)
    return f"#{credential_id} enabled." if ok else f"[red]#{credential_id} unchanged[/red]"


async def cmd_disable(app: AccessApp, args: str) -> str:
    credential_id = _parse_id(args)
    ok = await app.controller.toggle(credential_id, False)
    return f"#{credential_id} disabled." if ok else f"[red]#{credential_id} unchanged[/red]"


async def cmd_delete(app: AccessApp, args: str) -> str | None:
    credential_id = _parse_id(args)
    if await app.controller.delete(credential_id):
        return f"#{credential_id} deleted."
    if app.session.find(credential_id) is None:
        return f"[red]#{credential_id} not deleted[/red]"
    return None


async def cmd_rate(app: AccessApp, args: str) -> str:
    words = args.split()
    if len(words) != 2:
        raise ValidationError("expected an id and a rate")
    credential_id = _parse_int(words[0], "id")
    rate = _parse_int(words[1], "rate")
    if not await app.controller.update_rate(credential_id, rate):
        return f"[red]Rate for #{credential_id} unchanged[/red]"
    stored = app.session.find(credential_id)
    if stored is not None and stored.rate_limit_per_minute != rate:
        return f"Rate for #{credential_id} stored as {stored.rate_limit_per_minute}/min."
    return f"Rate for #{credential_id} set to {rate}/min."


def _describe_settings(app: AccessApp) -> str:
    settings = app.session.settings
    return (
        f"Token only: {'yes' if settings.token_only else 'no'}\n"
        f"Default rate: {settings.default_rate_limit}/min"
    )


async def cmd_settings(app: AccessApp, args: str) -> str:
    if not await app.controller.load_settings():
        return "[red]Could not load API settings[/red]"
    return _describe_settings(app)


async def cmd_token_only(app: AccessApp, args: str) -> str:
    value = args.strip().lower()
    if value not in ("on", "off"):
        raise ValidationError("expected on or off")
    if app.session.busy.saving:
        return "Settings are already being saved."
    changed = app.session.settings.model_copy(update={"token_only": value == "on"})
    if not await app.controller.save_settings(changed):
        return "[red]Settings unchanged[/red]"
    return _describe_settings(app)


async def cmd_default_rate(app: AccessApp, args: str) -> str:
    if not args.strip():
        raise ValidationError("missing rate")
    rate = _parse_int(args.split()[0], "rate")
    if app.session.busy.saving:
        return "Settings are already being saved."
    changed = app.session.settings.model_copy(update={"default_rate_limit": rate})
    if not await app.controller.save_settings(changed):
        return "[red]Settings unchanged[/red]"
    return _describe_settings(app)


async def cmd_copy(app: AccessApp, args: str) -> str:
    if await app.controller.reveal_copy():
        return "Token copied."
    return "No token to copy."


async def cmd_dismiss(app: AccessApp, args: str) -> str:
    app.controller.dismiss_reveal()
    return "Token hidden."


async def cmd_help(app: AccessApp, args: str) -> str:
    """Show available commands."""
    lines = ["[bold]Available Commands[/bold]", ""]
    for cmd, (_, usage, desc) in sorted(COMMANDS.items()):
        if cmd == "/exit":
            continue  # Skip alias
        lines.append(f"  {cmd + ' ' + usage:<28} {desc}")
    lines.append("")
    lines.append("Press ctrl+y to copy a revealed token, escape to hide it.")
    return "\n".join(lines)


async def cmd_quit(app: AccessApp, args: str) -> str:
    """Exit the TUI."""
    app.exit()
    return ""
