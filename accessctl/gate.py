"""
Confirmation gates for destructive operations.

A gate exposes ``await gate.confirm(title, body) -> bool``. A negative answer
is a normal outcome, not an error.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class ConfirmationGate(Protocol):
    async def confirm(self, title: str, body: str) -> bool: ...


class StaticGate:
    """Always answers the same way (``--yes`` on the CLI, tests)."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer

    async def confirm(self, title: str, body: str) -> bool:
        return self.answer


class PromptGate:
    """Ask on the terminal. Only an explicit y/yes confirms."""

    def __init__(self, input_func=None) -> None:
        self._input = input_func or input

    async def confirm(self, title: str, body: str) -> bool:
        prompt = f"{title}\n{body}\n[y/N] "
        try:
            answer = await asyncio.to_thread(self._input, prompt)
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")
