"""Abstract interfaces (Protocol classes) for the readiness assessment service.

The service depends on these interfaces, not concrete implementations, so
stores and catalogs are injected at construction time and can be swapped
for tests. Concrete in-memory implementations live in
``adapters/repositories.py``.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from digital_readiness_assessment.core.catalog import Question


class AssessmentType(str, enum.Enum):
    """Which calculator scores an assessment."""

    TIER1 = "TIER1"
    TIER2 = "TIER2"


class AssessmentStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    SCORED = "SCORED"


@dataclass(frozen=True)
class AssessmentRecord:
    """A stored assessment submission.

    ``responses`` and ``score`` are JSON text, the form they are persisted
    in; decode them with ``core.serialization``.

    Attributes:
        assessment_id: Unique assessment identifier.
        assessment_type: TIER1 or TIER2.
        template_id: Catalog the responses were given against.
        company_id: Owning company, used for team averages.
        user_id: Respondent.
        responses: Raw responses JSON.
        score: Score JSON, or None until scored.
        status: Lifecycle status.
        submitted_at: When the responses were submitted.
        scored_at: When the current score was computed.
    """

    assessment_id: uuid.UUID
    assessment_type: AssessmentType
    template_id: str
    company_id: str | None
    user_id: str | None
    responses: str
    score: str | None = None
    status: AssessmentStatus = AssessmentStatus.SUBMITTED
    submitted_at: datetime | None = None
    scored_at: datetime | None = None


@runtime_checkable
class IAssessmentRepository(Protocol):
    """Repository interface for stored assessments."""

    async def list(
        self,
        company_id: str | None = None,
        assessment_type: AssessmentType | None = None,
        user_id: str | None = None,
    ) -> list[AssessmentRecord]:
        """List assessments, optionally filtered, oldest submission first."""
        ...

    async def get(self, assessment_id: uuid.UUID) -> AssessmentRecord | None:
        """Retrieve an assessment by ID."""
        ...

    async def save(self, record: AssessmentRecord) -> AssessmentRecord:
        """Insert or replace an assessment, keyed by assessment_id."""
        ...


@runtime_checkable
class IQuestionCatalog(Protocol):
    """Accessor for question catalogs."""

    async def list_questions(self, template_id: str) -> list[Question]:
        """Return the questions of a template in catalog order."""
        ...
