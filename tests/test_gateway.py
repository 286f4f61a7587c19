"""
Tests for the Groq gateway — message layout and retry behaviour.
"""

import asyncio
from types import SimpleNamespace

import pytest

from isg.llm import gateway as gateway_module
from isg.llm.gateway import LLMGateway
from isg.llm.prompt_builder import SYSTEM_PROMPT


def _completion(content, tokens=100):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=tokens),
    )


class ScriptedCompletions:
    """Replays completions (or raises exceptions) in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def gateway(monkeypatch):
    async def no_sleep(_seconds):
        return None

    monkeypatch.setattr(gateway_module.asyncio, "sleep", no_sleep)
    monkeypatch.setattr(gateway_module.settings, "llm_max_retries", 3)
    return LLMGateway(api_key="test-key")


def _script(gw, *outcomes):
    completions = ScriptedCompletions(*outcomes)
    gw.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return completions


def test_text_only_messages():
    messages = LLMGateway.build_messages("Analyze this")
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "Analyze this"}


def test_image_messages_are_multimodal():
    messages = LLMGateway.build_messages("Analyze this", image_url="https://example.com/a.jpg")
    parts = messages[1]["content"]
    assert parts[0] == {"type": "text", "text": "Analyze this"}
    assert parts[1]["image_url"]["url"] == "https://example.com/a.jpg"


def test_success_tracks_tokens(gateway):
    _script(gateway, _completion('{"ok": true}', tokens=250))
    result = asyncio.run(gateway.complete("prompt"))
    assert result == {"content": '{"ok": true}', "tokens_used": 250, "success": True}
    assert gateway.tokens_used == 250


def test_retries_after_error_and_empty_answer(gateway):
    completions = _script(gateway, RuntimeError("rate limited"), _completion("  "), _completion("{}"))
    result = asyncio.run(gateway.complete("prompt"))
    assert result["success"] is True
    assert result["content"] == "{}"
    assert len(completions.calls) == 3


def test_gives_up_after_max_retries(gateway):
    _script(gateway, RuntimeError("a"), RuntimeError("b"), RuntimeError("c"))
    result = asyncio.run(gateway.complete("prompt"))
    assert result["success"] is False
    assert result["error"] == "c"
    assert result["content"] == ""
