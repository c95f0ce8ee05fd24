"""
accessctl TUI — terminal console for managing panel API users.

Needs the optional `tui` extra:
    pip install accessctl[tui]
"""

from __future__ import annotations

from importlib.util import find_spec


def check_textual() -> bool:
    """True when the textual package can be imported."""
    return find_spec("textual") is not None
