from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Literal

from companion.ai.invoker import ResilientInvoker
from companion.ai.types import CompletionClient
from companion.core.config import Settings, settings as default_settings
from companion.core.errors import ExtractionFailed
from companion.core.policy import PipelinePolicy, load_pipeline_policy
from companion.extraction.dispatcher import ExtractionDispatcher
from companion.extraction.models import ExtractionResult
from companion.extraction.strategies import OcrStrategy
from companion.prompts.builder import PromptBuilder
from companion.schemas.artifacts import ResumeAnalysisArtifact, StudyNotesArtifact
from companion.services.response_parser import parse_structured_reply
from companion.services.transcription import Transcriber, get_transcriber

logger = logging.getLogger(__name__)

RunStatus = Literal["success", "error"]


@dataclass(frozen=True)
class RunOutcome:
    run_id: str
    kind: str
    status: RunStatus
    latency_ms: int
    error_code: str | None = None
    source_strategy: str | None = None
    used_fallback: bool = False


OutcomeHook = Callable[[RunOutcome], None]


class SynthesisPipeline:
    """Upload -> extracted text -> prompt -> model reply -> structured artifact.

    Holds no per-request state, so one instance serves concurrent runs.
    """

    def __init__(
        self,
        *,
        dispatcher: ExtractionDispatcher,
        builder: PromptBuilder,
        invoker: ResilientInvoker,
        on_outcome: OutcomeHook | None = None,
        log_runs: bool = True,
        log_message_max_chars: int = 800,
    ):
        self._dispatcher = dispatcher
        self._builder = builder
        self._invoker = invoker
        self._on_outcome = on_outcome
        self._log_runs = log_runs
        self._log_message_max_chars = log_message_max_chars

    async def run(
        self, content: bytes, media_type: str, kind: str
    ) -> ResumeAnalysisArtifact | StudyNotesArtifact:
        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        extraction: ExtractionResult | None = None
        try:
            extraction = await asyncio.to_thread(self._dispatcher.extract, content, media_type)
            if not extraction.text.strip():
                raise ExtractionFailed("Could not extract text from the uploaded file")
            artifact = await self._synthesize(extraction.text, kind)
        except Exception as exc:
            self._emit(run_id, kind, started, extraction, error=exc)
            raise
        self._emit(run_id, kind, started, extraction)
        return artifact

    async def analyze_resume(self, content: bytes, media_type: str) -> ResumeAnalysisArtifact:
        return await self.run(content, media_type, "resume-analysis")

    async def generate_notes(self, content: bytes, media_type: str) -> StudyNotesArtifact:
        return await self.run(content, media_type, "study-notes")

    async def analyze_resume_text(self, resume_text: str) -> ResumeAnalysisArtifact:
        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        try:
            if not (resume_text or "").strip():
                raise ExtractionFailed("No resume text provided")
            artifact = await self._synthesize(resume_text, "resume-analysis")
        except Exception as exc:
            self._emit(run_id, "resume-analysis", started, None, error=exc)
            raise
        self._emit(run_id, "resume-analysis", started, None)
        return artifact

    async def generate_content(self, prompt: str) -> str:
        return await self._invoker.invoke(prompt)

    async def _synthesize(self, text: str, kind: str) -> ResumeAnalysisArtifact | StudyNotesArtifact:
        prompt = self._builder.build(kind, text)
        reply = await self._invoker.invoke(prompt)
        return parse_structured_reply(reply, kind)

    def _emit(
        self,
        run_id: str,
        kind: str,
        started: float,
        extraction: ExtractionResult | None,
        error: Exception | None = None,
    ) -> None:
        outcome = RunOutcome(
            run_id=run_id,
            kind=kind,
            status="error" if error is not None else "success",
            latency_ms=int((time.perf_counter() - started) * 1000),
            error_code=(getattr(error, "code", None) or "unexpected_error") if error is not None else None,
            source_strategy=extraction.source_strategy if extraction else None,
            used_fallback=extraction.used_fallback if extraction else False,
        )
        if self._log_runs:
            if error is None:
                logger.info(
                    "pipeline_run run_id=%s kind=%s status=success latency_ms=%s strategy=%s fallback=%s",
                    outcome.run_id,
                    outcome.kind,
                    outcome.latency_ms,
                    outcome.source_strategy,
                    outcome.used_fallback,
                )
            else:
                logger.warning(
                    "pipeline_run run_id=%s kind=%s status=error error_code=%s latency_ms=%s: %s",
                    outcome.run_id,
                    outcome.kind,
                    outcome.error_code,
                    outcome.latency_ms,
                    str(error)[: self._log_message_max_chars],
                )
        if self._on_outcome is None:
            return
        try:
            self._on_outcome(outcome)
        except Exception:  # outcome consumers must not break pipeline results
            logger.debug("pipeline_outcome_hook_failed run_id=%s", run_id, exc_info=True)


def build_pipeline(
    *,
    settings: Settings | None = None,
    policy: PipelinePolicy | None = None,
    client: CompletionClient | None = None,
    transcriber: Transcriber | None = None,
    on_outcome: OutcomeHook | None = None,
) -> SynthesisPipeline:
    cfg = settings or default_settings
    policy = policy or load_pipeline_policy()
    if client is None:
        from companion.ai.factory import get_completion_client

        client = get_completion_client()

    dispatcher = ExtractionDispatcher(
        ocr=OcrStrategy(language=cfg.ocr_language),
        transcriber=transcriber or get_transcriber(cfg),
    )
    return SynthesisPipeline(
        dispatcher=dispatcher,
        builder=PromptBuilder(policy.budgets),
        invoker=ResilientInvoker(client, policy.retry),
        on_outcome=on_outcome,
        log_runs=cfg.run_logging_enabled,
        log_message_max_chars=cfg.log_message_max_chars,
    )
