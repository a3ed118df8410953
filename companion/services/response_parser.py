from __future__ import annotations

import json
import logging
from typing import Any

from companion.core.errors import MalformedModelOutput
from companion.schemas.artifacts import ResumeAnalysisArtifact, StudyNotesArtifact, build_artifact

logger = logging.getLogger(__name__)


def extract_json_object(raw_reply: str) -> dict[str, Any]:
    """Decode the span from the first '{' to the last '}' of a model reply.

    Models often wrap the object in prose or code fences, so the span is taken
    greedily. Replies holding several separate objects will not decode.
    """
    text = raw_reply or ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise MalformedModelOutput("Model reply did not contain a JSON object")

    candidate = text[start : end + 1]
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("model_reply_json_invalid reply_len=%s: %s", len(text), exc)
        raise MalformedModelOutput(f"Model reply JSON could not be decoded: {exc.msg}") from exc

    if not isinstance(parsed, dict):
        raise MalformedModelOutput("Model reply JSON is not an object")
    return parsed


def parse_structured_reply(raw_reply: str, kind: str) -> ResumeAnalysisArtifact | StudyNotesArtifact:
    return build_artifact(kind, extract_json_object(raw_reply))
