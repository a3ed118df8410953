from .artifacts import (
    ARTIFACT_KINDS,
    ArtifactKind,
    ResumeAnalysis,
    ResumeAnalysisArtifact,
    StructuredArtifact,
    StudyNotes,
    StudyNotesArtifact,
    build_artifact,
)

__all__ = [
    "ARTIFACT_KINDS",
    "ArtifactKind",
    "ResumeAnalysis",
    "ResumeAnalysisArtifact",
    "StructuredArtifact",
    "StudyNotes",
    "StudyNotesArtifact",
    "build_artifact",
]
