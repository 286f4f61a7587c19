"""
LLM Gateway — Groq chat completions for hazard analysis.

Only constructed when a Groq API key is configured. The Groq SDK is
synchronous, so every call runs in a worker thread; failed or empty
completions are retried with exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from groq import Groq

from isg.config import settings
from isg.llm.prompt_builder import SYSTEM_PROMPT

logger = logging.getLogger("isg.llm")

_MAX_BACKOFF_SECONDS = 8


class EmptyCompletionError(RuntimeError):
    """The model answered with no content."""


class LLMGateway:
    """Text (and optional image) in, raw completion text out."""

    def __init__(self, api_key: str | None = None) -> None:
        self.client = Groq(
            api_key=api_key or settings.groq_api_key,
            timeout=settings.llm_timeout,
        )
        self.model = settings.isg_model
        self.max_retries = max(1, settings.llm_max_retries)
        self._tokens_used = 0

    @property
    def tokens_used(self) -> int:
        """Tokens consumed by this gateway since start-up."""
        return self._tokens_used

    @staticmethod
    def build_messages(prompt: str, image_url: str | None = None) -> list[dict[str, Any]]:
        """System prompt plus a user turn; multimodal when a photo is attached."""
        user_content: Any = prompt
        if image_url:
            user_content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image_url}},
            ]
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_content},
        ]

    async def complete(self, prompt: str, image_url: str | None = None) -> dict[str, Any]:
        """
        Returns a dict with 'content', 'tokens_used', 'success' and, when all
        attempts failed, 'error'.
        """
        messages = self.build_messages(prompt, image_url)
        error: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                content, tokens = await asyncio.to_thread(self._create, messages)
            except Exception as e:
                error = e
                logger.warning(f"Groq attempt {attempt}/{self.max_retries} failed: {e}")
            else:
                return {"content": content, "tokens_used": tokens, "success": True}

            if attempt < self.max_retries:
                await asyncio.sleep(min(2 ** (attempt - 1), _MAX_BACKOFF_SECONDS))

        logger.error(f"Groq gave up after {self.max_retries} attempt(s): {error}")
        return {"content": "", "tokens_used": 0, "success": False, "error": str(error)}

    def _create(self, messages: list[dict[str, Any]]) -> tuple[str, int]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )
        tokens = response.usage.total_tokens if response.usage else 0
        self._tokens_used += tokens

        content = response.choices[0].message.content or ""
        if not content.strip():
            raise EmptyCompletionError(f"{self.model} returned an empty completion")
        return content, tokens
