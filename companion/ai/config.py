import os
from dataclasses import dataclass

DEFAULT_MODELS = {
    "groq": "llama-3.1-8b-instant",
    "openai": "gpt-4o-mini",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    temperature: float = 0.1
    max_tokens: int = 2048
    timeout_s: float = 60.0
    response_format: str = ""


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "groq").strip().lower()
    model = (os.getenv("AI_MODEL") or DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(
        provider=provider,
        model=model,
        temperature=float(os.getenv("AI_TEMPERATURE", "0.1")),
        max_tokens=int(os.getenv("AI_MAX_TOKENS", "2048")),
        timeout_s=float(os.getenv("AI_TIMEOUT_S", "60")),
        response_format=(os.getenv("AI_RESPONSE_FORMAT") or "").strip().lower(),
    )
