"""Service layer orchestrating readiness assessment submissions and reports.

Implements the caller side of the scoring engine:
    1. submit_tier1()       — score a quick assessment and store it
    2. submit_tier2()       — score a detailed assessment and store it
    3. update_assessment()  — rescore a revised answer set, replacing the score
    4. get_team_averages()  — average a company's Tier-2 results on demand
    5. compare_with_team()  — individual vs team gap analysis
    6. get_history()        — a respondent's scored assessments, oldest first

Stores and catalogs are injected through the Protocol interfaces in
``core/interfaces.py``; all fetching happens here, and the pure calculators
only ever see resolved data.
"""

import json
import uuid
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import structlog

from digital_readiness_assessment.core.interfaces import (
    AssessmentRecord,
    AssessmentStatus,
    AssessmentType,
    IAssessmentRepository,
    IQuestionCatalog,
)
from digital_readiness_assessment.core.models import (
    TeamAverages,
    TeamComparison,
    Tier1ScoreResult,
    Tier2ScoreResult,
)
from digital_readiness_assessment.core.policy import DEFAULT_POLICY, ScoringPolicy
from digital_readiness_assessment.core.recommendations import (
    Recommendation,
    get_explanation,
    get_recommendations,
)
from digital_readiness_assessment.core.serialization import (
    parse_responses,
    parse_tier1_result,
    parse_tier2_result,
)
from digital_readiness_assessment.core.team_averages import (
    compare_with_team,
    compute_team_averages,
)
from digital_readiness_assessment.core.tier1 import calculate_tier1_score
from digital_readiness_assessment.core.tier2 import (
    calculate_tier2_score,
    ensure_dimension_scores,
)

logger = structlog.get_logger(__name__)


class AssessmentNotFoundError(Exception):
    """Raised when no assessment exists for the requested id."""


class AssessmentTypeError(Exception):
    """Raised when an operation does not apply to the assessment's tier."""


class AssessmentService:
    """Orchestrates scoring, storage and team reporting for assessments.

    Depends on repository and catalog instances injected at construction time.
    Contains no framework-specific code.
    """

    def __init__(
        self,
        assessment_repository: IAssessmentRepository,
        question_catalog: IQuestionCatalog,
        tier2_template_id: str,
        policy: ScoringPolicy | None = None,
    ) -> None:
        """Initialise the service with its collaborators.

        Args:
            assessment_repository: Store for assessment submissions and scores.
            question_catalog: Accessor for question catalogs.
            tier2_template_id: Catalog template used for Tier-2 assessments.
            policy: Scoring policy; defaults to DEFAULT_POLICY.
        """
        self._assessment_repo = assessment_repository
        self._catalog = question_catalog
        self._tier2_template_id = tier2_template_id
        self._policy = policy or DEFAULT_POLICY

    async def submit_tier1(
        self,
        responses: Mapping[str, str],
        template_id: str,
        company_id: str | None = None,
        user_id: str | None = None,
    ) -> tuple[AssessmentRecord, Tier1ScoreResult]:
        """Score and store a Tier-1 submission.

        Args:
            responses: Mapping of question id to maturity tag.
            template_id: Tier-1 catalog template the answers belong to.
            company_id: Owning company.
            user_id: Respondent.

        Returns:
            The stored record and its score.
        """
        score = calculate_tier1_score(responses, self._policy)
        record = await self._store(
            AssessmentType.TIER1, template_id, company_id, user_id, responses, score.to_json()
        )
        logger.info(
            "Tier-1 assessment submitted",
            assessment_id=str(record.assessment_id),
            company_id=company_id,
            overall_score=score.overall_score,
        )
        return record, score

    async def submit_tier2(
        self,
        responses: Mapping[str, Any],
        company_id: str | None = None,
        user_id: str | None = None,
    ) -> tuple[AssessmentRecord, Tier2ScoreResult]:
        """Score and store a Tier-2 submission against the Tier-2 catalog.

        Args:
            responses: Mapping of question id to tag, option id or 0-5 points.
            company_id: Owning company.
            user_id: Respondent.

        Returns:
            The stored record and its score.
        """
        questions = await self._catalog.list_questions(self._tier2_template_id)
        score = calculate_tier2_score(responses, questions, self._policy)
        record = await self._store(
            AssessmentType.TIER2,
            self._tier2_template_id,
            company_id,
            user_id,
            responses,
            score.to_json(),
        )
        logger.info(
            "Tier-2 assessment submitted",
            assessment_id=str(record.assessment_id),
            company_id=company_id,
            normalized_shifted_score=score.normalized_shifted_score,
            unscored_count=len(score.unscored_question_ids),
        )
        return record, score

    async def update_assessment(
        self,
        assessment_id: uuid.UUID,
        responses: Mapping[str, Any],
    ) -> tuple[AssessmentRecord, Tier1ScoreResult | Tier2ScoreResult]:
        """Replace an assessment's answers and recompute its score.

        Args:
            assessment_id: Assessment to update.
            responses: The complete revised answer set.

        Returns:
            The replaced record and its new score.

        Raises:
            AssessmentNotFoundError: If the assessment does not exist.
        """
        existing = await self._get_or_raise(assessment_id)

        score: Tier1ScoreResult | Tier2ScoreResult
        if existing.assessment_type is AssessmentType.TIER1:
            score = calculate_tier1_score(responses, self._policy)
        else:
            questions = await self._catalog.list_questions(existing.template_id)
            score = calculate_tier2_score(responses, questions, self._policy)

        now = datetime.now(tz=timezone.utc)
        record = await self._assessment_repo.save(
            replace(
                existing,
                responses=json.dumps(dict(responses)),
                score=score.to_json(),
                status=AssessmentStatus.SCORED,
                submitted_at=now,
                scored_at=now,
            )
        )
        logger.info(
            "Assessment rescored",
            assessment_id=str(assessment_id),
            assessment_type=existing.assessment_type.value,
        )
        return record, score

    async def get_score(self, assessment_id: uuid.UUID) -> Tier1ScoreResult | Tier2ScoreResult | None:
        """Load an assessment's stored score, backfilling Tier-2 dimensions.

        Returns:
            The score, or None when the stored blob is missing or unusable.

        Raises:
            AssessmentNotFoundError: If the assessment does not exist.
        """
        record = await self._get_or_raise(assessment_id)
        if record.assessment_type is AssessmentType.TIER1:
            return parse_tier1_result(record.score)
        return await self._load_tier2(record)

    async def get_team_averages(self, company_id: str) -> TeamAverages | None:
        """Average every scored Tier-2 assessment of a company.

        Returns:
            TeamAverages, or None when the company has no usable Tier-2 score.
        """
        if not company_id:
            return None

        records = await self._assessment_repo.list(
            company_id=company_id,
            assessment_type=AssessmentType.TIER2,
        )
        if not records:
            return None

        questions = await self._catalog.list_questions(self._tier2_template_id)
        return compute_team_averages(records, questions, self._policy)

    async def compare_with_team(self, assessment_id: uuid.UUID) -> TeamComparison | None:
        """Compare one Tier-2 assessment with its company's team averages.

        Returns:
            TeamComparison, or None when the assessment has no usable score,
            no company, or the company has no team averages.

        Raises:
            AssessmentNotFoundError: If the assessment does not exist.
            AssessmentTypeError: If the assessment is not Tier-2.
        """
        record = await self._get_or_raise(assessment_id)
        if record.assessment_type is not AssessmentType.TIER2:
            raise AssessmentTypeError(
                f"Assessment {assessment_id} is {record.assessment_type.value}; "
                "team comparison requires a Tier-2 assessment."
            )
        if not record.company_id:
            return None

        score = await self._load_tier2(record)
        averages = await self.get_team_averages(record.company_id)
        if score is None or averages is None:
            return None
        return compare_with_team(score, averages)

    async def get_history(
        self,
        user_id: str,
        assessment_type: AssessmentType = AssessmentType.TIER2,
    ) -> list[tuple[AssessmentRecord, Tier1ScoreResult | Tier2ScoreResult]]:
        """Return a respondent's scored assessments of one tier, oldest first.

        Records whose score blob cannot be loaded are skipped.
        """
        records = await self._assessment_repo.list(user_id=user_id, assessment_type=assessment_type)
        history: list[tuple[AssessmentRecord, Tier1ScoreResult | Tier2ScoreResult]] = []
        for record in records:
            score = (
                parse_tier1_result(record.score)
                if assessment_type is AssessmentType.TIER1
                else parse_tier2_result(record.score)
            )
            if score is not None:
                history.append((record, score))
        return history

    def summarize(self, final_score: float) -> tuple[str, list[Recommendation]]:
        """Explanation and recommendations for a final 0-100 score."""
        return (
            get_explanation(final_score, self._policy),
            get_recommendations(final_score, self._policy),
        )

    async def _load_tier2(self, record: AssessmentRecord) -> Tier2ScoreResult | None:
        score = parse_tier2_result(record.score)
        if score is None or score.dimension_scores:
            return score
        questions = await self._catalog.list_questions(record.template_id)
        return ensure_dimension_scores(
            score, parse_responses(record.responses), questions, self._policy
        )

    async def _get_or_raise(self, assessment_id: uuid.UUID) -> AssessmentRecord:
        record = await self._assessment_repo.get(assessment_id)
        if record is None:
            raise AssessmentNotFoundError(f"Assessment {assessment_id} not found.")
        return record

    async def _store(
        self,
        assessment_type: AssessmentType,
        template_id: str,
        company_id: str | None,
        user_id: str | None,
        responses: Mapping[str, Any],
        score_json: str,
    ) -> AssessmentRecord:
        now = datetime.now(tz=timezone.utc)
        record = AssessmentRecord(
            assessment_id=uuid.uuid4(),
            assessment_type=assessment_type,
            template_id=template_id,
            company_id=company_id,
            user_id=user_id,
            responses=json.dumps(dict(responses)),
            score=score_json,
            status=AssessmentStatus.SCORED,
            submitted_at=now,
            scored_at=now,
        )
        return await self._assessment_repo.save(record)
