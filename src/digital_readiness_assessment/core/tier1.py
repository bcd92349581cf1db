"""Tier-1 quick assessment scoring.

Every response is a single maturity tag. Tags map to points
(BASIC=25, EMERGING=50, ESTABLISHED=75, WORLD_CLASS=100), the overall score
is the mean rounded half up, and the maturity label follows the policy
thresholds. Example: eight EMERGING, one BASIC and one ESTABLISHED answer give
500 points over 10 questions, an overall score of 50 and "Emerging".

Unrecognised tags score 0 but still count towards the number of questions,
so a malformed answer lowers the mean instead of disappearing.
"""

from collections.abc import Mapping

import structlog

from digital_readiness_assessment.core.catalog import MaturityValue
from digital_readiness_assessment.core.models import ScoreBreakdown, Tier1ScoreResult
from digital_readiness_assessment.core.policy import DEFAULT_POLICY, ScoringPolicy
from digital_readiness_assessment.core.utils import clamp, round_half_up_int

logger = structlog.get_logger(__name__)

_BREAKDOWN_FIELDS: dict[MaturityValue, str] = {
    MaturityValue.BASIC: "basic",
    MaturityValue.EMERGING: "emerging",
    MaturityValue.ESTABLISHED: "established",
    MaturityValue.WORLD_CLASS: "world_class",
}


def calculate_tier1_score(
    responses: Mapping[str, object],
    policy: ScoringPolicy | None = None,
) -> Tier1ScoreResult:
    """Score a Tier-1 response set.

    Args:
        responses: Mapping of question id to maturity tag (case-insensitive),
            bare or wrapped as ``{"value": tag}``.
        policy: Scoring policy; defaults to DEFAULT_POLICY.

    Returns:
        Tier1ScoreResult. An empty mapping yields the zero state
        (score 0, no questions, label 'Basic').
    """
    policy = policy or DEFAULT_POLICY
    if not isinstance(responses, Mapping):
        logger.warning("Tier-1 responses are not a mapping", responses_type=type(responses).__name__)
        responses = {}

    if not responses:
        return Tier1ScoreResult(
            overall_score=0,
            total_questions=0,
            score_breakdown=ScoreBreakdown(),
            maturity_level=policy.maturity_label(0),
        )

    counts: dict[str, int] = {name: 0 for name in _BREAKDOWN_FIELDS.values()}
    total_points = 0
    unrecognised: list[str] = []

    for question_id, raw_value in responses.items():
        if isinstance(raw_value, Mapping):
            # Same {"value": "EMERGING"} envelope Tier-2 accepts.
            raw_value = raw_value.get("value")
        maturity = MaturityValue.parse(raw_value)
        if maturity is None:
            unrecognised.append(str(question_id))
            continue
        total_points += policy.tier1_point_values.get(maturity, 0)
        counts[_BREAKDOWN_FIELDS[maturity]] += 1

    total_questions = len(responses)
    overall_score = round_half_up_int(clamp(total_points / total_questions))

    if unrecognised:
        logger.warning(
            "Unrecognised Tier-1 maturity tags scored as zero",
            question_ids=unrecognised,
        )

    result = Tier1ScoreResult(
        overall_score=overall_score,
        total_questions=total_questions,
        score_breakdown=ScoreBreakdown(**counts),
        maturity_level=policy.maturity_label(overall_score),
    )

    logger.debug(
        "Tier-1 scoring complete",
        overall_score=overall_score,
        total_questions=total_questions,
        maturity_level=result.maturity_level,
    )
    return result
