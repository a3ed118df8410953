from __future__ import annotations

from dataclasses import dataclass

from companion.ai.types import ChatMessage
from companion.core.policy import PromptBudgets
from companion.prompts.templates import TEMPLATES


@dataclass(frozen=True)
class Prompt:
    kind: str
    instruction_text: str
    embedded_text: str
    truncated: bool


class PromptBuilder:
    def __init__(self, budgets: PromptBudgets | None = None):
        self._budgets = budgets or PromptBudgets()

    @property
    def budgets(self) -> PromptBudgets:
        return self._budgets

    def truncate(self, kind: str, raw_text: str) -> tuple[str, bool]:
        limit = self._budgets.budget_for(kind)
        if len(raw_text) > limit:
            return raw_text[:limit] + self._budgets.truncation_marker, True
        return raw_text, False

    def compose(self, kind: str, raw_text: str) -> Prompt:
        try:
            template, schema = TEMPLATES[kind]
        except KeyError as exc:
            raise ValueError(f"Unknown artifact kind '{kind}'") from exc
        embedded, truncated = self.truncate(kind, raw_text)
        return Prompt(
            kind=kind,
            instruction_text=template.format(text=embedded, schema=schema),
            embedded_text=embedded,
            truncated=truncated,
        )

    def build(self, kind: str, raw_text: str) -> str:
        return self.compose(kind, raw_text).instruction_text


def to_messages(instruction_text: str) -> list[ChatMessage]:
    return [ChatMessage(role="user", content=instruction_text)]
