"""In-memory adapters for the assessment repository and question catalog.

Each instance owns its own storage; nothing is shared at module level, so
two services built in one process never see each other's data. Used for
demos, local runs and tests; a database-backed adapter satisfies the same
Protocols in ``core/interfaces.py``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

import structlog

from digital_readiness_assessment.core.catalog import Question, parse_catalog
from digital_readiness_assessment.core.interfaces import (
    AssessmentRecord,
    AssessmentType,
)

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryAssessmentRepository:
    """Dict-backed assessment store keyed by assessment_id."""

    def __init__(self, records: Iterable[AssessmentRecord] = ()) -> None:
        """Initialise, optionally pre-seeded with records.

        Args:
            records: Records to load; a later duplicate id replaces an earlier one.
        """
        self._records: dict[uuid.UUID, AssessmentRecord] = {
            record.assessment_id: record for record in records
        }

    async def get(self, assessment_id: uuid.UUID) -> AssessmentRecord | None:
        """Retrieve an assessment by ID."""
        return self._records.get(assessment_id)

    async def save(self, record: AssessmentRecord) -> AssessmentRecord:
        """Insert or replace an assessment."""
        replaced = record.assessment_id in self._records
        self._records[record.assessment_id] = record
        logger.debug(
            "Assessment persisted",
            assessment_id=str(record.assessment_id),
            replaced=replaced,
        )
        return record

    async def list(
        self,
        company_id: str | None = None,
        assessment_type: AssessmentType | None = None,
        user_id: str | None = None,
    ) -> list[AssessmentRecord]:
        """List assessments matching every given filter, oldest submission first."""
        matches = [
            record
            for record in self._records.values()
            if (company_id is None or record.company_id == company_id)
            and (assessment_type is None or record.assessment_type is assessment_type)
            and (user_id is None or record.user_id == user_id)
        ]
        return sorted(matches, key=lambda record: record.submitted_at or _EPOCH)


class InMemoryQuestionCatalog:
    """Question catalog holding parsed questions grouped by template."""

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._by_template: dict[str, list[Question]] = {}
        for question in questions:
            self._by_template.setdefault(question.template_id, []).append(question)
        for template_questions in self._by_template.values():
            template_questions.sort(key=lambda q: q.order)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> InMemoryQuestionCatalog:
        """Build a catalog from raw catalog records, skipping malformed ones."""
        questions = parse_catalog(records)
        logger.info(
            "Question catalog loaded",
            question_count=len(questions),
        )
        return cls(questions)

    async def list_questions(self, template_id: str) -> list[Question]:
        """Return the questions of a template in catalog order."""
        return list(self._by_template.get(template_id, []))
