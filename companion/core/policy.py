from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from companion.core.config import settings

_POLICY_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_POLICY_PATH = Path(__file__).resolve().parents[2] / "config" / "pipeline.yaml"

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 10_000
DEFAULT_TRUNCATION_MARKER = "..."
DEFAULT_BUDGETS: Mapping[str, int] = MappingProxyType(
    {
        "resume-analysis": 3000,
        "study-notes": 2000,
    }
)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")

    def delay_ms(self, retry_index: int) -> int:
        return self.base_delay_ms * (2**retry_index)


@dataclass(frozen=True)
class PromptBudgets:
    max_input_chars: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_BUDGETS))
    truncation_marker: str = DEFAULT_TRUNCATION_MARKER

    def budget_for(self, kind: str) -> int:
        try:
            return int(self.max_input_chars[kind])
        except KeyError as exc:
            raise ValueError(f"No prompt budget configured for kind '{kind}'") from exc


@dataclass(frozen=True)
class PipelinePolicy:
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    budgets: PromptBudgets = field(default_factory=PromptBudgets)


def _policy_path() -> Path:
    if settings.pipeline_config_path:
        return Path(settings.pipeline_config_path)
    return _DEFAULT_POLICY_PATH


def get_policy_config() -> dict[str, Any]:
    """Load pipeline policy from config/pipeline.yaml and cache it.

    A missing file yields an empty mapping so the built-in defaults apply.
    """
    global _POLICY_CONFIG_CACHE

    if _POLICY_CONFIG_CACHE is not None:
        return _POLICY_CONFIG_CACHE

    path = _policy_path()
    if not path.exists():
        _POLICY_CONFIG_CACHE = {}
        return _POLICY_CONFIG_CACHE

    import yaml

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read pipeline config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in pipeline config '{path}': {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid pipeline config '{path}': expected a top-level mapping.")

    _POLICY_CONFIG_CACHE = parsed
    return _POLICY_CONFIG_CACHE


def clear_policy_cache() -> None:
    global _POLICY_CONFIG_CACHE
    _POLICY_CONFIG_CACHE = None


def get_policy_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'retry.max_retries'."""
    if not path:
        return default

    current: Any = get_policy_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def load_pipeline_policy() -> PipelinePolicy:
    retry = RetryPolicy(
        max_retries=int(get_policy_value("retry.max_retries", DEFAULT_MAX_RETRIES)),
        base_delay_ms=int(get_policy_value("retry.base_delay_ms", DEFAULT_BASE_DELAY_MS)),
    )
    budgets = dict(DEFAULT_BUDGETS)
    configured = get_policy_value("prompts.max_input_chars", {})
    if isinstance(configured, dict):
        for kind, value in configured.items():
            budgets[str(kind)] = int(value)
    marker = get_policy_value("prompts.truncation_marker", DEFAULT_TRUNCATION_MARKER)
    return PipelinePolicy(
        retry=retry,
        budgets=PromptBudgets(max_input_chars=budgets, truncation_marker=str(marker)),
    )
