from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from companion.ai.types import CompletionClient
from companion.core.errors import ModelInvocationError, RateLimitExceeded
from companion.core.policy import RetryPolicy
from companion.prompts.builder import to_messages

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429

Sleep = Callable[[float], Awaitable[None]]


def is_rate_limited(exc: BaseException) -> bool:
    status_code = getattr(exc, "status_code", None)
    if status_code is None:
        status_code = getattr(exc, "status", None)
    return status_code == RATE_LIMIT_STATUS


class ResilientInvoker:
    """Sends a prompt to the model, backing off exponentially on rate limits.

    Retry i (zero-based) waits policy.delay_ms(i). After max_retries retries a
    further rate limit raises RateLimitExceeded; any other provider error
    raises ModelInvocationError without retrying.
    """

    def __init__(
        self,
        client: CompletionClient,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._client = client
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def invoke(self, prompt: str) -> str:
        messages = to_messages(prompt)
        attempt = 0
        while True:
            try:
                return await self._client.complete(messages)
            except Exception as exc:
                if not is_rate_limited(exc):
                    logger.warning("model_invocation_failed attempt=%s: %s", attempt + 1, exc)
                    raise ModelInvocationError() from exc
                if attempt >= self._policy.max_retries:
                    logger.warning("model_rate_limit_exhausted attempts=%s", attempt + 1)
                    raise RateLimitExceeded(attempts=attempt + 1) from exc
                delay_ms = self._policy.delay_ms(attempt)
                logger.info(
                    "model_rate_limited retry=%s/%s delay_ms=%s",
                    attempt + 1,
                    self._policy.max_retries,
                    delay_ms,
                )
            await self._sleep(delay_ms / 1000)
            attempt += 1
