from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from companion.ai.types import ChatMessage


class OpenAIProvider:
    api_key_env = "OPENAI_API_KEY"
    base_url_env = "OPENAI_BASE_URL"
    default_base_url: Optional[str] = None

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        temperature: float = 0.1,
        max_tokens: int = 2048,
        response_format: str = "",
    ):
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._response_format = response_format
        key = (api_key or os.getenv(self.api_key_env) or "").strip()
        if not key:
            raise RuntimeError(f"{self.api_key_env} is missing")

        # Retries stay with ResilientInvoker so the backoff schedule is the only one in play.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv(self.base_url_env) or self.default_base_url),
            timeout=timeout_s,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**create_kwargs)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
