"""Concrete implementations of the core interfaces."""

from digital_readiness_assessment.adapters.repositories import (
    InMemoryAssessmentRepository,
    InMemoryQuestionCatalog,
)

__all__ = ["InMemoryAssessmentRepository", "InMemoryQuestionCatalog"]
