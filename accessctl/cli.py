"""
accessctl CLI — manage panel API users from the shell.

Usage:
    accessctl list                      # List API users
    accessctl create --name svc-bot     # Create a user and print its token once
    accessctl enable 3 / disable 3      # Toggle activation
    accessctl rotate 3                  # Reissue a token and print it once
    accessctl rate 3 60                 # Set per-minute limit (0 = default)
    accessctl delete 3 [--yes]          # Delete after confirmation
    accessctl settings [--token-only]   # Show or change API settings
    accessctl bootstrap                 # Apply settings, create a first user if none
    accessctl tui                       # Terminal UI
    accessctl version                   # Show version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace

from accessctl.errors import AccessError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="accessctl",
        description="Manage API users (tokens, activation, rate limits) of the admin panel.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--url", help="Panel URL (default: $ACCESSCTL_PANEL_URL)")
    parser.add_argument("--base-path", help="Panel web base path (default: $ACCESSCTL_BASE_PATH)")
    parser.add_argument("--username", help="Panel admin username (default: $ACCESSCTL_USERNAME)")
    parser.add_argument("--password", help="Panel admin password (default: $ACCESSCTL_PASSWORD)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List API users with status and rate limits")

    create_parser = subparsers.add_parser("create", help="Create an API user and print its token")
    create_parser.add_argument("--name", required=True, help="API user name")
    create_parser.add_argument(
        "--rate", type=int, default=0, help="Per-minute rate limit (0 = use default)"
    )

    for action, text in (("enable", "Enable an API user"), ("disable", "Disable an API user")):
        p = subparsers.add_parser(action, help=text)
        p.add_argument("id", type=int, help="API user id")

    rotate_parser = subparsers.add_parser("rotate", help="Rotate an API user's token")
    rotate_parser.add_argument("id", type=int, help="API user id")

    delete_parser = subparsers.add_parser("delete", help="Delete an API user")
    delete_parser.add_argument("id", type=int, help="API user id")
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    rate_parser = subparsers.add_parser("rate", help="Set per-minute rate limit (0 = default)")
    rate_parser.add_argument("id", type=int, help="API user id")
    rate_parser.add_argument("rate", type=int, help="Requests per minute")

    settings_parser = subparsers.add_parser("settings", help="Show or change API settings")
    token_group = settings_parser.add_mutually_exclusive_group()
    token_group.add_argument(
        "--token-only", dest="token_only", action="store_true", default=None,
        help="Require API tokens (deny session access to the API)",
    )
    token_group.add_argument(
        "--no-token-only", dest="token_only", action="store_false",
        help="Allow session access to the API",
    )
    settings_parser.add_argument("--default-rate", type=int, help="Default per-minute limit")

    bootstrap_parser = subparsers.add_parser(
        "bootstrap", help="Apply API settings and create a first user when none exist"
    )
    bootstrap_parser.add_argument("--name", default="api-root", help="Bootstrap user name")
    bootstrap_parser.add_argument("--rate", type=int, default=120, help="Bootstrap user limit")
    bootstrap_parser.add_argument("--default-rate", type=int, default=120, help="Default limit")
    bootstrap_parser.add_argument(
        "--no-token-only", dest="token_only", action="store_false", default=True,
        help="Leave session access to the API enabled",
    )

    subparsers.add_parser("tui", help="Start the terminal UI")
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from accessctl import __version__

        print(f"accessctl {__version__}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "tui":
        return _cmd_tui(args)

    return asyncio.run(_run(args))


def _panel_config(args: argparse.Namespace):
    from accessctl.config import get_config, normalize_base_path

    cfg = get_config()
    overrides = {}
    if args.url:
        overrides["url"] = args.url.rstrip("/")
    if args.base_path:
        overrides["base_path"] = normalize_base_path(args.base_path)
    if args.username:
        overrides["username"] = args.username
    if args.password:
        overrides["password"] = args.password
    return replace(cfg, **overrides) if overrides else cfg


def _print_notice(level: str, text: str) -> None:
    stream = sys.stderr if level == "error" else sys.stdout
    print(text, file=stream)


async def _run(args: argparse.Namespace) -> int:
    from accessctl.client import PanelClient
    from accessctl.controller import CredentialController
    from accessctl.gate import PromptGate, StaticGate

    cfg = _panel_config(args)
    gate = StaticGate(True) if getattr(args, "yes", False) else PromptGate()

    async with PanelClient(cfg) as client:
        controller = CredentialController(client, gate=gate, notify=_print_notice)
        try:
            if cfg.has_login and not await _login(client, cfg):
                return 1
            handler = _HANDLERS[args.command]
            ok = await handler(controller, args)
        except AccessError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0 if ok else 1


async def _login(client, cfg) -> bool:
    msg = await client.login(cfg.username, cfg.password)
    if not msg.success:
        print(f"Error: login failed: {msg.msg or 'rejected'}", file=sys.stderr)
        return False
    return True


def _print_secret(controller, label: str) -> None:
    revealed = controller.session.revealed
    if revealed.visible:
        print(f"{label} (store securely, shown once): {revealed.value}")
        controller.dismiss_reveal()


async def _cmd_list(controller, args: argparse.Namespace) -> bool:
    await controller.load_settings()
    if not await controller.load_credentials():
        return False

    users = controller.credentials
    if not users:
        print("No API users found.")
        return True

    default = controller.session.settings.default_rate_limit
    lines = [f"{'ID':<6} {'NAME':<24} {'ENABLED':<9} {'RATE/MIN':<10} {'LAST USED'}"]
    for u in users:
        rate = str(u.rate_limit_per_minute) if u.rate_limit_per_minute else f"{default} (default)"
        last_used = u.last_used_at.isoformat() if u.last_used_at else "never"
        lines.append(f"{u.id:<6} {u.name:<24} {str(u.enabled).lower():<9} {rate:<10} {last_used}")
    print("\n".join(lines))
    return True


async def _cmd_create(controller, args: argparse.Namespace) -> bool:
    ok = await controller.create(args.name, args.rate)
    if ok:
        _print_secret(controller, "Token")
    return ok


async def _cmd_enable(controller, args: argparse.Namespace) -> bool:
    return await controller.toggle(args.id, True)


async def _cmd_disable(controller, args: argparse.Namespace) -> bool:
    return await controller.toggle(args.id, False)


async def _cmd_rotate(controller, args: argparse.Namespace) -> bool:
    ok = await controller.rotate(args.id)
    if ok:
        _print_secret(controller, "New token")
    return ok


class _RecordingGate:
    """Remember the last answer so a declined delete exits cleanly."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.declined = False

    async def confirm(self, title: str, body: str) -> bool:
        answer = await self.inner.confirm(title, body)
        self.declined = not answer
        return answer


async def _cmd_delete(controller, args: argparse.Namespace) -> bool:
    await controller.load_credentials()
    gate = _RecordingGate(controller.gate)
    controller.gate = gate
    if await controller.delete(args.id):
        return True
    if gate.declined:
        print("Aborted.")
        return True
    return False


async def _cmd_rate(controller, args: argparse.Namespace) -> bool:
    return await controller.update_rate(args.id, args.rate)


async def _cmd_settings(controller, args: argparse.Namespace) -> bool:
    if not await controller.load_settings():
        return False

    current = controller.session.settings
    changes = {}
    if args.token_only is not None:
        changes["token_only"] = args.token_only
    if args.default_rate is not None:
        changes["default_rate_limit"] = args.default_rate

    if changes:
        if not await controller.save_settings(current.model_copy(update=changes)):
            return False
        current = controller.session.settings

    print(f"Token only:          {'yes' if current.token_only else 'no'}")
    print(f"Default rate/min:    {current.default_rate_limit}")
    return True


async def _cmd_bootstrap(controller, args: argparse.Namespace) -> bool:
    from accessctl.models import ApiSettings

    settings = ApiSettings(token_only=args.token_only, default_rate_limit=args.default_rate)
    if not await controller.save_settings(settings):
        return False
    if not await controller.load_credentials():
        return False

    if controller.credentials:
        print(f"API users already present ({len(controller.credentials)}); "
              "bootstrap user not created")
        return True

    if not await controller.create(args.name, args.rate):
        return False
    _print_secret(controller, "Token")
    print("API access bootstrapped.")
    return True


_HANDLERS = {
    "list": _cmd_list,
    "create": _cmd_create,
    "enable": _cmd_enable,
    "disable": _cmd_disable,
    "rotate": _cmd_rotate,
    "delete": _cmd_delete,
    "rate": _cmd_rate,
    "settings": _cmd_settings,
    "bootstrap": _cmd_bootstrap,
}


def _cmd_tui(args: argparse.Namespace) -> int:
    from accessctl.tui import check_textual

    if not check_textual():
        print("Error: textual is required. Install with: pip install accessctl[tui]")
        return 1

    from accessctl.tui.app import AccessApp

    AccessApp(config=_panel_config(args)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
