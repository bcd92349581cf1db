"""Score result value objects.

All results are immutable Pydantic v2 models. They serialise with camelCase
aliases (``pillarScores``, ``maxRawScore``, ``normalizedShiftedScore``) because
stored assessments keep the score as an opaque JSON blob in that shape, and
older blobs must keep loading. Python code uses the snake_case names.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ScoreModel(BaseModel):
    """Base for frozen, camelCase-serialised score models."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> str:
        """Serialise to the stored-blob JSON shape (camelCase keys)."""
        return self.model_dump_json(by_alias=True)


# ---------------------------------------------------------------------------
# Tier-1
# ---------------------------------------------------------------------------


class ScoreBreakdown(ScoreModel):
    """Number of Tier-1 responses per maturity bucket."""

    basic: int = 0
    emerging: int = 0
    established: int = 0
    world_class: int = 0


class Tier1ScoreResult(ScoreModel):
    """Outcome of the Tier-1 quick assessment.

    Attributes:
        overall_score: Mean points across responses, rounded half up (0-100).
        total_questions: Number of responses scored, including unrecognised tags.
        score_breakdown: Response counts per maturity bucket.
        maturity_level: Label derived from overall_score.
    """

    overall_score: int = Field(0, ge=0, le=100)
    total_questions: int = Field(0, ge=0)
    score_breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    maturity_level: str = "Basic"


# ---------------------------------------------------------------------------
# Tier-2
# ---------------------------------------------------------------------------


class PillarScore(ScoreModel):
    """Raw and relative score of one pillar.

    Attributes:
        pillar: Pillar identifier, e.g. 'DIGITALIZATION'.
        raw_score: Sum of points for answered questions in the pillar.
        max_raw_score: Max points per question × answered questions.
        percentage: raw_score / max_raw_score on a 0-100 scale.
        dimension_count: Distinct dimensions answered in the pillar.
    """

    pillar: str
    raw_score: float = Field(ge=0)
    max_raw_score: float = Field(ge=0)
    percentage: float = Field(0.0, ge=0, le=100)
    dimension_count: int = Field(0, ge=0)


class DimensionScore(ScoreModel):
    """Raw and relative score of one dimension."""

    dimension: str
    pillar: str = "Unknown"
    dimension_score: float = Field(ge=0)
    max_score: float = Field(0.0, ge=0)
    percentage: float = Field(0.0, ge=0, le=100)
    question_count: int = Field(0, ge=0)


class Tier2ScoreResult(ScoreModel):
    """Outcome of the Tier-2 detailed assessment.

    The four calculation stages are kept side by side so reports can show how
    the final number was reached: total raw → weighted → normalised →
    normalised-shifted.
    """

    pillar_scores: list[PillarScore] = Field(default_factory=list)
    dimension_scores: list[DimensionScore] = Field(default_factory=list)
    total_raw_score: float = Field(0.0, ge=0)
    weighted_score: float = Field(0.0, ge=0, le=1)
    normalized_score: int = Field(0, ge=0, le=100)
    normalized_shifted_score: int = Field(0, ge=0, le=100)
    maturity_level: str = "Basic"
    scenario_simulated: str = ""
    unscored_question_ids: list[str] = Field(default_factory=list)

    def pillar(self, name: str) -> PillarScore | None:
        """Return the score for pillar ``name`` if it was assessed."""
        return next((p for p in self.pillar_scores if p.pillar == name), None)

    def dimension(self, name: str) -> DimensionScore | None:
        """Return the score for dimension ``name`` if it was assessed."""
        return next((d for d in self.dimension_scores if d.dimension == name), None)


# ---------------------------------------------------------------------------
# Team averages
# ---------------------------------------------------------------------------


class PillarAverage(ScoreModel):
    raw_score: float
    percentage: float


class DimensionAverage(ScoreModel):
    score: float
    percentage: float


class CalculationAverages(ScoreModel):
    total_raw_score: float
    weighted_score: float
    normalized_score: float
    normalized_shifted_score: float


class TeamAverages(ScoreModel):
    """Unweighted means across a company's completed Tier-2 assessments.

    Values share units with Tier2ScoreResult and are not re-rounded, so a
    single-assessment average equals that assessment's own values.
    """

    overall_score: float
    pillar_averages: dict[str, PillarAverage] = Field(default_factory=dict)
    dimension_averages: dict[str, DimensionAverage] = Field(default_factory=dict)
    calculation_averages: CalculationAverages
    assessment_count: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Gap analysis
# ---------------------------------------------------------------------------


class ScoreGap(ScoreModel):
    """Individual vs team percentage for one pillar or dimension."""

    name: str
    individual: float
    team: float
    gap: float


class TeamComparison(ScoreModel):
    """Individual result compared against team averages."""

    overall_individual: float
    overall_team: float
    overall_gap: float
    pillar_gaps: list[ScoreGap] = Field(default_factory=list)
    dimension_gaps: list[ScoreGap] = Field(default_factory=list)
    assessment_count: int
