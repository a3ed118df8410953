from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

ArtifactKind = Literal["resume-analysis", "study-notes"]
ARTIFACT_KINDS: tuple[str, ...] = ("resume-analysis", "study-notes")

Score = Annotated[int, Field(ge=0, le=100)]


class LenientModel(BaseModel):
    """Typed view over model output in which every field is optional.

    A value that does not fit its declared type or range is exposed as None
    instead of failing the whole artifact. Lists keep their conforming items.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_nonconforming(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as exc:
            if not isinstance(value, list):
                return None
            bad_items = _failed_item_indexes(exc)
        if not bad_items:
            return None
        kept = [item for index, item in enumerate(value) if index not in bad_items]
        try:
            return handler(kept)
        except ValidationError:
            return None


def _failed_item_indexes(exc: ValidationError) -> set[int]:
    indexes: set[int] = set()
    for error in exc.errors():
        index = next((part for part in error["loc"] if isinstance(part, int)), None)
        if index is None:
            # a whole-list constraint such as length; no single item to blame
            return set()
        indexes.add(index)
    return indexes


class CategoryScores(LenientModel):
    format: Score | None = None
    clarity: Score | None = None
    achievements: Score | None = None
    skills: Score | None = None
    keywords: Score | None = None


class SectionReview(LenientModel):
    score: Score | None = None
    feedback: str | None = None
    suggestions: list[str] | None = None


class SectionFeedback(LenientModel):
    summary: SectionReview | None = None
    experience: SectionReview | None = None
    education: SectionReview | None = None
    skills: SectionReview | None = None
    projects: SectionReview | None = None


class ResumeAnalysis(LenientModel):
    overall_score: Score | None = None
    category_scores: CategoryScores | None = None
    keyword_recommendations: list[str] | None = None
    section_feedback: SectionFeedback | None = None
    strengths: list[str] | None = None
    areas_for_improvement: list[str] | None = None
    overall_feedback: str | None = None


class KeyPoint(LenientModel):
    point: str | None = None
    explanation: str | None = None


class Definition(LenientModel):
    term: str | None = None
    definition: str | None = None


class Concept(LenientModel):
    concept: str | None = None
    description: str | None = None
    examples: list[str] | None = None


class QuizQuestion(LenientModel):
    question: str | None = None
    options: Annotated[list[str], Field(min_length=4, max_length=4)] | None = None
    correct_answer: Annotated[int, Field(ge=0, le=3)] | None = None
    explanation: str | None = None


class Flashcard(LenientModel):
    front: str | None = None
    back: str | None = None


class StudyNotes(LenientModel):
    title: str | None = None
    summary: str | None = None
    key_points: list[KeyPoint] | None = None
    definitions: list[Definition] | None = None
    concepts: list[Concept] | None = None
    quiz_questions: list[QuizQuestion] | None = None
    flashcards: list[Flashcard] | None = None
    study_tips: list[str] | None = None


class ResumeAnalysisArtifact(BaseModel):
    kind: Literal["resume-analysis"] = "resume-analysis"
    payload: dict[str, Any]
    content: ResumeAnalysis


class StudyNotesArtifact(BaseModel):
    kind: Literal["study-notes"] = "study-notes"
    payload: dict[str, Any]
    content: StudyNotes


StructuredArtifact = Annotated[
    Union[ResumeAnalysisArtifact, StudyNotesArtifact],
    Field(discriminator="kind"),
]


def build_artifact(kind: str, payload: dict[str, Any]) -> ResumeAnalysisArtifact | StudyNotesArtifact:
    if kind == "resume-analysis":
        return ResumeAnalysisArtifact(payload=payload, content=ResumeAnalysis.model_validate(payload))
    if kind == "study-notes":
        return StudyNotesArtifact(payload=payload, content=StudyNotes.model_validate(payload))
    raise ValueError(f"Unknown artifact kind '{kind}'. Supported: {', '.join(ARTIFACT_KINDS)}")
