"""Company-level averaging of Tier-2 assessments.

Every completed assessment is one vote, whoever filled it in. Means cover the
displayed overall score, each pillar's raw score and percentage, each
dimension's score and percentage, and the four calculation stages.

A pillar or dimension mean is taken over the assessments that carry it, not
over every assessment in the company: sums are divided by the per-key count
rather than by the total assessment count. A dimension added to the catalog
later is therefore not dragged down by older results that never had it, and
an assessment that skipped a pillar neither raises nor lowers that pillar's
mean. The overall score and calculation stages do use the total count.

Stored results that predate dimension scoring are backfilled from their raw
responses first (see ``ensure_dimension_scores``).
"""

from collections.abc import Iterable, Mapping
from statistics import fmean
from typing import Any

import structlog

from digital_readiness_assessment.core.catalog import Question
from digital_readiness_assessment.core.models import (
    CalculationAverages,
    DimensionAverage,
    PillarAverage,
    ScoreGap,
    TeamAverages,
    TeamComparison,
    Tier2ScoreResult,
)
from digital_readiness_assessment.core.policy import ScoringPolicy
from digital_readiness_assessment.core.serialization import (
    parse_responses,
    parse_tier2_result,
)
from digital_readiness_assessment.core.tier2 import ensure_dimension_scores
from digital_readiness_assessment.core.utils import percentage

logger = structlog.get_logger(__name__)


def _usable_result(
    item: Any,
    questions: list[Question | Mapping[str, Any]],
    policy: ScoringPolicy | None,
) -> Tier2ScoreResult | None:
    """Turn one input item into a Tier2ScoreResult with dimension scores, if possible.

    Items may be results, bare score blobs, or stored assessments carrying
    ``score`` and ``responses`` blobs, either as attributes or as keys of a
    plain mapping.
    """
    if isinstance(item, Tier2ScoreResult):
        return item
    if isinstance(item, Mapping) and "score" in item:
        score_blob, responses_blob = item.get("score"), item.get("responses")
    elif item is None or isinstance(item, (str, bytes, Mapping)):
        return parse_tier2_result(item)
    else:
        score_blob = getattr(item, "score", None)
        responses_blob = getattr(item, "responses", None)

    result = (
        score_blob if isinstance(score_blob, Tier2ScoreResult) else parse_tier2_result(score_blob)
    )
    if result is None:
        return None
    responses = parse_responses(responses_blob)
    return ensure_dimension_scores(result, responses, questions, policy)


def _pillar_percentage(raw_score: float, max_raw_score: float, stored: float) -> float:
    # Blobs written before percentages were stored default the field to 0.
    if stored == 0.0 and raw_score > 0:
        return percentage(raw_score, max_raw_score)
    return stored


def compute_team_averages(
    results: Iterable[Any],
    questions: Iterable[Question | Mapping[str, Any]] = (),
    policy: ScoringPolicy | None = None,
) -> TeamAverages | None:
    """Average a company's Tier-2 results.

    Args:
        results: Tier2ScoreResult objects, stored score blobs, or stored
            assessments with ``score``/``responses`` blobs.
        questions: The Tier-2 catalog, used to backfill dimension scores.
        policy: Scoring policy used for backfilling.

    Returns:
        TeamAverages, or None when no item carries a usable score.
    """
    if isinstance(results, (str, bytes, Mapping)) or not isinstance(results, Iterable):
        logger.warning("Team results are not a list", results_type=type(results).__name__)
        return None

    # Materialised once; every backfill re-reads the catalog.
    catalog: list[Question | Mapping[str, Any]] = []
    if isinstance(questions, Iterable) and not isinstance(questions, (str, bytes, Mapping)):
        catalog = list(questions)
    scores = [
        score
        for score in (_usable_result(item, catalog, policy) for item in results)
        if score is not None
    ]
    if not scores:
        return None

    pillar_raw: dict[str, list[float]] = {}
    pillar_pct: dict[str, list[float]] = {}
    dimension_raw: dict[str, list[float]] = {}
    dimension_pct: dict[str, list[float]] = {}

    for score in scores:
        for pillar in score.pillar_scores:
            pillar_raw.setdefault(pillar.pillar, []).append(pillar.raw_score)
            pillar_pct.setdefault(pillar.pillar, []).append(
                _pillar_percentage(pillar.raw_score, pillar.max_raw_score, pillar.percentage)
            )
        for dimension in score.dimension_scores:
            dimension_raw.setdefault(dimension.dimension, []).append(dimension.dimension_score)
            dimension_pct.setdefault(dimension.dimension, []).append(dimension.percentage)

    averages = TeamAverages(
        overall_score=fmean(s.normalized_shifted_score for s in scores),
        pillar_averages={
            name: PillarAverage(raw_score=fmean(values), percentage=fmean(pillar_pct[name]))
            for name, values in pillar_raw.items()
        },
        dimension_averages={
            name: DimensionAverage(score=fmean(values), percentage=fmean(dimension_pct[name]))
            for name, values in dimension_raw.items()
        },
        calculation_averages=CalculationAverages(
            total_raw_score=fmean(s.total_raw_score for s in scores),
            weighted_score=fmean(s.weighted_score for s in scores),
            normalized_score=fmean(s.normalized_score for s in scores),
            normalized_shifted_score=fmean(s.normalized_shifted_score for s in scores),
        ),
        assessment_count=len(scores),
    )

    logger.info(
        "Team averages computed",
        assessment_count=averages.assessment_count,
        pillar_count=len(averages.pillar_averages),
        dimension_count=len(averages.dimension_averages),
        overall_score=averages.overall_score,
    )
    return averages


def compare_with_team(result: Tier2ScoreResult, averages: TeamAverages) -> TeamComparison:
    """Compare an individual result with its team averages.

    Gaps are ``individual - team`` in percentage points; a positive gap means
    the individual is ahead. Pillars and dimensions present on only one side
    are left out.

    Args:
        result: The individual's Tier-2 result.
        averages: Team averages for the individual's company.

    Returns:
        TeamComparison with overall, per-pillar and per-dimension gaps.
    """
    pillar_gaps = [
        ScoreGap(
            name=pillar.pillar,
            individual=pillar.percentage,
            team=averages.pillar_averages[pillar.pillar].percentage,
            gap=pillar.percentage - averages.pillar_averages[pillar.pillar].percentage,
        )
        for pillar in result.pillar_scores
        if pillar.pillar in averages.pillar_averages
    ]
    dimension_gaps = [
        ScoreGap(
            name=dimension.dimension,
            individual=dimension.percentage,
            team=averages.dimension_averages[dimension.dimension].percentage,
            gap=dimension.percentage - averages.dimension_averages[dimension.dimension].percentage,
        )
        for dimension in result.dimension_scores
        if dimension.dimension in averages.dimension_averages
    ]
    return TeamComparison(
        overall_individual=result.normalized_shifted_score,
        overall_team=averages.overall_score,
        overall_gap=result.normalized_shifted_score - averages.overall_score,
        pillar_gaps=pillar_gaps,
        dimension_gaps=dimension_gaps,
        assessment_count=averages.assessment_count,
    )
