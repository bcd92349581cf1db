"""Tier-2 detailed assessment scoring.

Questions belong to one pillar (DIGITALIZATION, TRANSFORMATION, VALUE_SCALING)
and one dimension inside it; the dimension set comes from the catalog. Each
answered question awards 0-5 points:

    numeric answer        used as-is when it lies on the 0-5 scale
    tag / option answer   the matching option's own score when on the 0-5
                          scale, else the policy tag table (BASIC=1 .. WORLD_CLASS=4)

Scores are then built up in four stages:

    total raw            Σ points over every scored question
    weighted             Σ pillar (raw / max raw) × pillar weight       (0-1)
    normalised           weighted × 100, rounded half up                 (0-100)
    normalised-shifted   policy.final_transform(normalised)              (0-100)

A pillar's max raw score is 5 × the questions actually answered in it, so a
partially completed pillar is judged against what it could have reached.
Unanswered questions are left out of every denominator; answers to ids absent
from the catalog are left out and reported in ``unscored_question_ids``.

Iteration follows catalog order, never response order, so the result does not
depend on how the response mapping was built.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from digital_readiness_assessment.core.catalog import (
    MaturityValue,
    Question,
    index_questions,
    parse_question,
)
from digital_readiness_assessment.core.models import (
    DimensionScore,
    PillarScore,
    Tier2ScoreResult,
)
from digital_readiness_assessment.core.policy import DEFAULT_POLICY, ScoringPolicy
from digital_readiness_assessment.core.utils import (
    clamp,
    percentage,
    round_half_up,
    round_half_up_int,
)

logger = structlog.get_logger(__name__)


@dataclass
class _Tally:
    """Running raw/max totals for one pillar or dimension."""

    pillar: str
    raw: float = 0.0
    max_raw: float = 0.0
    questions: int = 0

    def add(self, points: float, max_points: float) -> None:
        self.raw += points
        self.max_raw += max_points
        self.questions += 1


def _on_scale(value: float, max_points: float) -> bool:
    # NaN and infinities fail the range check.
    return 0 <= value <= max_points


def _points_for(question: Question, raw_value: Any, policy: ScoringPolicy) -> float | None:
    """Points awarded for one answer, or None when the answer is unusable."""
    max_points = policy.tier2_max_points

    if isinstance(raw_value, Mapping):
        # Some clients submit {"value": "EMERGING"} rather than the bare tag.
        raw_value = raw_value.get("value")

    if isinstance(raw_value, bool):
        return None

    if isinstance(raw_value, (int, float)):
        return float(raw_value) if _on_scale(raw_value, max_points) else None

    if not isinstance(raw_value, str):
        return None

    option = question.find_option(raw_value)
    if option is not None and option.score is not None and _on_scale(option.score, max_points):
        return option.score

    maturity = option.maturity if option is not None else MaturityValue.parse(raw_value)
    if maturity is None:
        return None
    return policy.tier2_tag_points.get(maturity)


def _coerce_questions(questions: Iterable[Question | Mapping[str, Any]]) -> list[Question]:
    """Accept parsed Questions or raw catalog records; drop anything else."""
    if questions is None:
        return []
    if isinstance(questions, (str, bytes, Mapping)) or not isinstance(questions, Iterable):
        logger.warning("Question catalog is not a list", catalog_type=type(questions).__name__)
        return []

    parsed: list[Question] = []
    for item in questions:
        if isinstance(item, Question):
            parsed.append(item)
        elif isinstance(item, Mapping):
            question = parse_question(item)
            if question is not None:
                parsed.append(question)
    return sorted(index_questions(parsed).values(), key=lambda q: (q.order, q.question_id))


def _score_responses(
    responses: Mapping[str, Any],
    questions: list[Question],
    policy: ScoringPolicy,
) -> tuple[list[tuple[Question, float]], list[str]]:
    """Pair each answered catalog question with its points.

    Returns:
        (scored, unscored_ids): scored questions in catalog order, and the
        sorted ids of responses that could not be scored.
    """
    known_ids = {q.question_id for q in questions}
    unscored = sorted(str(qid) for qid in responses if qid not in known_ids)
    if unscored:
        logger.warning(
            "Responses reference questions missing from the catalog",
            question_ids=unscored,
        )

    scored: list[tuple[Question, float]] = []
    malformed: list[str] = []
    for question in questions:
        if question.question_id not in responses:
            continue
        points = _points_for(question, responses[question.question_id], policy)
        if points is None:
            malformed.append(question.question_id)
            continue
        scored.append((question, points))

    if malformed:
        logger.warning("Unusable Tier-2 answers skipped", question_ids=malformed)
        unscored = sorted(set(unscored) | set(malformed))

    return scored, unscored


def _dimension_scores(
    scored: list[tuple[Question, float]],
    policy: ScoringPolicy,
) -> list[DimensionScore]:
    tallies: dict[str, _Tally] = {}
    for question, points in scored:
        tally = tallies.setdefault(question.dimension, _Tally(pillar=question.pillar))
        tally.add(points, policy.tier2_max_points)

    return [
        DimensionScore(
            dimension=dimension,
            pillar=tally.pillar,
            dimension_score=round_half_up(tally.raw, 2),
            max_score=round_half_up(tally.max_raw, 2),
            percentage=percentage(tally.raw, tally.max_raw),
            question_count=tally.questions,
        )
        for dimension, tally in tallies.items()
    ]


def _pillar_tallies(
    scored: list[tuple[Question, float]],
    policy: ScoringPolicy,
) -> tuple[dict[str, _Tally], dict[str, set[str]]]:
    tallies: dict[str, _Tally] = {}
    dimensions: dict[str, set[str]] = {}
    for question, points in scored:
        tallies.setdefault(question.pillar, _Tally(pillar=question.pillar)).add(
            points, policy.tier2_max_points
        )
        dimensions.setdefault(question.pillar, set()).add(question.dimension)

    weight_order = {pillar: i for i, pillar in enumerate(policy.pillar_weights)}
    ordered = dict(
        sorted(
            tallies.items(),
            key=lambda item: (weight_order.get(item[0], len(weight_order)), item[0]),
        )
    )
    return ordered, dimensions


def calculate_tier2_score(
    responses: Mapping[str, Any],
    questions: Iterable[Question | Mapping[str, Any]],
    policy: ScoringPolicy | None = None,
) -> Tier2ScoreResult:
    """Score a Tier-2 response set against its question catalog.

    Args:
        responses: Mapping of question id to a tag, option id, or 0-5 number.
        questions: The catalog, as Questions or raw catalog records.
        policy: Scoring policy; defaults to DEFAULT_POLICY.

    Returns:
        Tier2ScoreResult with pillar and dimension breakdowns, the four
        calculation stages, maturity level and scenario label. An empty or
        fully unusable response set yields an all-zero result.
    """
    policy = policy or DEFAULT_POLICY
    if not isinstance(responses, Mapping):
        logger.warning("Tier-2 responses are not a mapping", responses_type=type(responses).__name__)
        responses = {}

    catalog = _coerce_questions(questions)
    scored, unscored = _score_responses(responses, catalog, policy)

    tallies, pillar_dimensions = _pillar_tallies(scored, policy)
    pillar_scores = [
        PillarScore(
            pillar=pillar,
            raw_score=round_half_up(tally.raw, 2),
            max_raw_score=round_half_up(tally.max_raw, 2),
            percentage=percentage(tally.raw, tally.max_raw),
            dimension_count=len(pillar_dimensions.get(pillar, ())),
        )
        for pillar, tally in tallies.items()
    ]

    total_raw = round_half_up(sum(tally.raw for tally in tallies.values()), 2)
    weighted = round_half_up(
        clamp(
            sum(
                (tally.raw / tally.max_raw) * policy.pillar_weights.get(pillar, 0.0)
                for pillar, tally in tallies.items()
                if tally.max_raw > 0
            ),
            0.0,
            1.0,
        ),
        4,
    )
    normalized = round_half_up_int(clamp(weighted * 100.0))
    shifted = round_half_up_int(clamp(policy.final_transform(normalized)))

    result = Tier2ScoreResult(
        pillar_scores=pillar_scores,
        dimension_scores=_dimension_scores(scored, policy),
        total_raw_score=total_raw,
        weighted_score=weighted,
        normalized_score=normalized,
        normalized_shifted_score=shifted,
        maturity_level=policy.maturity_label(shifted),
        scenario_simulated=policy.scenario(
            {p.pillar: p.percentage for p in pillar_scores if p.pillar in policy.pillar_weights}
        ),
        unscored_question_ids=unscored,
    )

    logger.info(
        "Tier-2 scoring complete",
        answered_count=len(scored),
        unscored_count=len(unscored),
        weighted_score=weighted,
        normalized_shifted_score=shifted,
        maturity_level=result.maturity_level,
    )
    return result


def ensure_dimension_scores(
    score: Tier2ScoreResult,
    responses: Mapping[str, Any] | None,
    questions: Iterable[Question | Mapping[str, Any]],
    policy: ScoringPolicy | None = None,
) -> Tier2ScoreResult:
    """Backfill dimension scores onto a result stored before they existed.

    Older stored results carry only pillar totals and the calculation stages.
    When ``score`` has no dimension scores, they are recomputed from the raw
    responses and the catalog; every other stored field is kept as stored.
    A result that already has dimension scores is returned unchanged, which
    makes the operation idempotent.

    Args:
        score: Stored Tier-2 result.
        responses: The raw responses the result was computed from, if kept.
        questions: The catalog, as Questions or raw catalog records.
        policy: Scoring policy; defaults to DEFAULT_POLICY.

    Returns:
        ``score`` itself, or a copy with ``dimension_scores`` filled in.
    """
    if score.dimension_scores:
        return score
    if not isinstance(responses, Mapping) or not responses:
        return score

    policy = policy or DEFAULT_POLICY
    catalog = _coerce_questions(questions)
    if not catalog:
        return score

    scored, _ = _score_responses(responses, catalog, policy)
    dimension_scores = _dimension_scores(scored, policy)
    if not dimension_scores:
        return score

    logger.info("Backfilled dimension scores", dimension_count=len(dimension_scores))
    return score.model_copy(update={"dimension_scores": dimension_scores})
