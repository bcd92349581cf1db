"""Test fixtures for digital-readiness-assessment.

Provides a small Tier-2 catalog spanning all three pillars, in-memory
adapters, and a service wired to them.
"""

from collections.abc import Callable, Iterator

import pytest
import structlog

from digital_readiness_assessment.adapters.repositories import (
    InMemoryAssessmentRepository,
    InMemoryQuestionCatalog,
)
from digital_readiness_assessment.core.catalog import Option, Question, QuestionKind
from digital_readiness_assessment.core.services import AssessmentService

TIER2_TEMPLATE_ID = "tier2"
TIER1_TEMPLATE_ID = "tier1"

_TAGS = ("BASIC", "EMERGING", "ESTABLISHED", "WORLD_CLASS")

# (question_id, pillar, dimension)
TIER2_LAYOUT: list[tuple[str, str, str]] = [
    ("q_dig_1", "DIGITALIZATION", "DATA_FOUNDATION"),
    ("q_dig_2", "DIGITALIZATION", "DATA_FOUNDATION"),
    ("q_dig_3", "DIGITALIZATION", "DATA_GOVERNANCE"),
    ("q_tra_1", "TRANSFORMATION", "PROCESS_AUTOMATION"),
    ("q_tra_2", "TRANSFORMATION", "DIGITAL_CULTURE"),
    ("q_val_1", "VALUE_SCALING", "VALUE_TRACKING"),
    ("q_val_2", "VALUE_SCALING", "ECOSYSTEM"),
]

# Points: WORLD_CLASS 4 + ESTABLISHED 3 + EMERGING 2 | EMERGING 2 + BASIC 1 | ESTABLISHED 3 + EMERGING 2
MIXED_RESPONSES: dict[str, str] = {
    "q_dig_1": "WORLD_CLASS",
    "q_dig_2": "ESTABLISHED",
    "q_dig_3": "EMERGING",
    "q_tra_1": "EMERGING",
    "q_tra_2": "BASIC",
    "q_val_1": "ESTABLISHED",
    "q_val_2": "EMERGING",
}


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture()
def make_question() -> Callable[..., Question]:
    """Factory for single-choice questions with one option per maturity tag."""

    def _make(
        question_id: str,
        pillar: str,
        dimension: str,
        order: int = 0,
        scores: tuple[float | None, ...] = (1, 2, 3, 4),
        template_id: str = TIER2_TEMPLATE_ID,
    ) -> Question:
        options = tuple(
            Option(
                option_id=f"{question_id}_{tag.lower()}",
                question_id=question_id,
                label=tag.title(),
                value=tag,
                score=score,
            )
            for tag, score in zip(_TAGS, scores)
        )
        return Question(
            question_id=question_id,
            prompt=f"Prompt for {question_id}",
            pillar=pillar,
            dimension=dimension,
            section_id=pillar.lower(),
            order=order,
            kind=QuestionKind.SINGLE_CHOICE,
            template_id=template_id,
            options=options,
        )

    return _make


@pytest.fixture()
def tier2_questions(make_question: Callable[..., Question]) -> list[Question]:
    """Seven questions over three pillars and six dimensions."""
    return [
        make_question(question_id, pillar, dimension, order=index)
        for index, (question_id, pillar, dimension) in enumerate(TIER2_LAYOUT, start=1)
    ]


@pytest.fixture()
def mixed_responses() -> dict[str, str]:
    return dict(MIXED_RESPONSES)


@pytest.fixture()
def world_class_responses() -> dict[str, str]:
    return {question_id: "WORLD_CLASS" for question_id, _, _ in TIER2_LAYOUT}


@pytest.fixture()
def assessment_repo() -> InMemoryAssessmentRepository:
    return InMemoryAssessmentRepository()


@pytest.fixture()
def question_catalog(tier2_questions: list[Question]) -> InMemoryQuestionCatalog:
    return InMemoryQuestionCatalog(tier2_questions)


@pytest.fixture()
def assessment_service(
    assessment_repo: InMemoryAssessmentRepository,
    question_catalog: InMemoryQuestionCatalog,
) -> AssessmentService:
    return AssessmentService(
        assessment_repository=assessment_repo,
        question_catalog=question_catalog,
        tier2_template_id=TIER2_TEMPLATE_ID,
    )
