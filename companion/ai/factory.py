from companion.ai.config import AIConfig, load_ai_config
from companion.ai.types import CompletionClient

from companion.ai.providers.groq_provider import GroqProvider
from companion.ai.providers.openai_provider import OpenAIProvider


def get_completion_client(cfg: AIConfig | None = None) -> CompletionClient:
    cfg = cfg or load_ai_config()
    kwargs = dict(
        model=cfg.model,
        timeout_s=cfg.timeout_s,
        temperature=cfg.temperature,
        max_tokens=cfg.max_tokens,
        response_format=cfg.response_format,
    )

    if cfg.provider == "groq":
        return GroqProvider(**kwargs)

    if cfg.provider == "openai":
        return OpenAIProvider(**kwargs)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
