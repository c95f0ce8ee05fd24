"""Tests for confirmation gates."""

from __future__ import annotations

import pytest

from accessctl.gate import PromptGate, StaticGate


class TestStaticGate:
    @pytest.mark.asyncio
    async def test_answers(self):
        assert await StaticGate(True).confirm("t", "b") is True
        assert await StaticGate(False).confirm("t", "b") is False


class TestPromptGate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["y", "Y", "yes", " yes "])
    async def test_affirmative(self, reply):
        assert await PromptGate(lambda prompt: reply).confirm("Delete?", "really") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "n", "no", "maybe"])
    async def test_negative(self, reply):
        assert await PromptGate(lambda prompt: reply).confirm("Delete?", "really") is False

    @pytest.mark.asyncio
    async def test_prompt_contains_title_and_body(self):
        seen = []

        def _input(prompt):
            seen.append(prompt)
            return "n"

        await PromptGate(_input).confirm("Delete API user?", "svc-bot (#3)")
        assert "Delete API user?" in seen[0]
        assert "svc-bot (#3)" in seen[0]

    @pytest.mark.asyncio
    async def test_eof_declines(self):
        def _input(prompt):
            raise EOFError

        assert await PromptGate(_input).confirm("t", "b") is False
