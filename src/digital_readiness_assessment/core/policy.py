"""Scoring policy for the digital readiness calculators.

Collects every tunable constant the calculators depend on so that catalog or
policy changes never touch calculation code:

    Tier-1 point values     BASIC=25  EMERGING=50  ESTABLISHED=75  WORLD_CLASS=100
    Maturity thresholds     >=85 World Class, >=70 Established, >=50 Emerging, else Basic
    Tier-2 pillar weights   DIGITALIZATION 0.40, TRANSFORMATION 0.30, VALUE_SCALING 0.30
    Tier-2 point scale      0-5 per question; tag fallback BASIC=1 .. WORLD_CLASS=4

The maturity thresholds are deliberately not aligned with the Tier-1 point
values: a respondent who answers EMERGING everywhere scores 50 and lands in
"Emerging", but one answering ESTABLISHED everywhere (75) does not reach
"World Class".

The two policy hooks that turn numbers into display values, the final
normalised-score transform and the scenario label, are small objects so
either can be swapped without touching the weighting logic.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from digital_readiness_assessment.core.catalog import MaturityValue
from digital_readiness_assessment.core.utils import clamp, round_half_up_int

DIGITALIZATION = "DIGITALIZATION"
TRANSFORMATION = "TRANSFORMATION"
VALUE_SCALING = "VALUE_SCALING"

PILLARS: list[str] = [DIGITALIZATION, TRANSFORMATION, VALUE_SCALING]

# Pillar weights must sum to 1.0
PILLAR_WEIGHTS: dict[str, float] = {
    DIGITALIZATION: 0.40,
    TRANSFORMATION: 0.30,
    VALUE_SCALING: 0.30,
}

TIER1_POINT_VALUES: dict[MaturityValue, int] = {
    MaturityValue.BASIC: 25,
    MaturityValue.EMERGING: 50,
    MaturityValue.ESTABLISHED: 75,
    MaturityValue.WORLD_CLASS: 100,
}

TIER2_TAG_POINTS: dict[MaturityValue, float] = {
    MaturityValue.BASIC: 1.0,
    MaturityValue.EMERGING: 2.0,
    MaturityValue.ESTABLISHED: 3.0,
    MaturityValue.WORLD_CLASS: 4.0,
}

# Inclusive lower bounds, highest first.
MATURITY_THRESHOLDS: list[tuple[float, MaturityValue]] = [
    (85.0, MaturityValue.WORLD_CLASS),
    (70.0, MaturityValue.ESTABLISHED),
    (50.0, MaturityValue.EMERGING),
    (0.0, MaturityValue.BASIC),
]

_WEIGHT_TOLERANCE: float = 1e-9


class ScoringPolicyError(ValueError):
    """Raised when a ScoringPolicy is internally inconsistent."""


class FinalTransform(Protocol):
    """Maps the 0-100 normalised score to the score shown to end users."""

    def __call__(self, normalized_score: int) -> int: ...


class ScenarioClassifier(Protocol):
    """Chooses a descriptive scenario label from pillar percentages."""

    def __call__(self, pillar_percentages: Mapping[str, float]) -> str: ...


@dataclass(frozen=True)
class LinearShift:
    """Final transform ``score * scale + offset``, rounded half up and clamped to 0-100.

    With the default tag points (BASIC=1 .. WORLD_CLASS=4 out of 5) the
    normalised score of a uniform answer set runs 20..80; a scale of 1.25 maps
    that onto 25..100, the same span Tier-1 reports for the same answers.

    Attributes:
        scale: Multiplicative factor.
        offset: Additive shift applied after scaling.
    """

    scale: float = 1.25
    offset: float = 0.0

    def __call__(self, normalized_score: int) -> int:
        return round_half_up_int(clamp(normalized_score * self.scale + self.offset))


@dataclass(frozen=True)
class ScenarioRules:
    """Lookup rules for the Tier-2 scenario label.

    Evaluated in order:
        1. No scored pillar                          -> ``not_assessed``
        2. Every pillar >= ``leader_threshold``      -> ``leader``
        3. Pillar spread < ``balance_tolerance``     -> ``balanced``
        4. Otherwise the strongest pillar's entry in ``led_by`` (ties resolve
           to the earlier pillar in weight order), falling back to ``uneven``.

    Attributes:
        leader_threshold: Percentage every pillar must reach for ``leader``.
        balance_tolerance: Maximum max-min pillar spread still counted balanced.
        led_by: Label per strongest pillar.
    """

    leader_threshold: float = 70.0
    balance_tolerance: float = 15.0
    not_assessed: str = "Not Assessed"
    leader: str = "Scaling Leader"
    balanced: str = "Balanced Progression"
    uneven: str = "Uneven Progression"
    led_by: Mapping[str, str] = field(
        default_factory=lambda: {
            DIGITALIZATION: "Digitalization Led",
            TRANSFORMATION: "Transformation Led",
            VALUE_SCALING: "Value Scaling Led",
        }
    )

    def __call__(self, pillar_percentages: Mapping[str, float]) -> str:
        if not pillar_percentages:
            return self.not_assessed

        values = list(pillar_percentages.values())
        if min(values) >= self.leader_threshold:
            return self.leader
        if max(values) - min(values) < self.balance_tolerance:
            return self.balanced

        ordering = {pillar: i for i, pillar in enumerate(PILLARS)}
        strongest = max(
            pillar_percentages,
            key=lambda pillar: (
                pillar_percentages[pillar],
                -ordering.get(pillar, len(ordering)),
            ),
        )
        return self.led_by.get(strongest, self.uneven)


@dataclass(frozen=True)
class ScoringPolicy:
    """All constants and policy hooks used by the Tier-1 and Tier-2 calculators.

    Attributes:
        tier1_point_values: Points per maturity tag for Tier-1.
        maturity_thresholds: (inclusive lower bound, bucket) pairs, highest first.
        pillar_weights: Tier-2 pillar weights; must sum to 1.0.
        tier2_max_points: Maximum points a single Tier-2 question can award.
        tier2_tag_points: Tier-2 points for a tag whose option carries no usable score.
        final_transform: Normalised → normalised-shifted score.
        scenario: Pillar percentages → scenario label.

    Raises:
        ScoringPolicyError: If weights do not sum to 1.0, any weight or point
            value is negative, or the thresholds are not strictly descending.
    """

    tier1_point_values: Mapping[MaturityValue, int] = field(
        default_factory=lambda: dict(TIER1_POINT_VALUES)
    )
    maturity_thresholds: tuple[tuple[float, MaturityValue], ...] = tuple(MATURITY_THRESHOLDS)
    pillar_weights: Mapping[str, float] = field(default_factory=lambda: dict(PILLAR_WEIGHTS))
    tier2_max_points: float = 5.0
    tier2_tag_points: Mapping[MaturityValue, float] = field(
        default_factory=lambda: dict(TIER2_TAG_POINTS)
    )
    final_transform: FinalTransform = field(default_factory=LinearShift)
    scenario: ScenarioClassifier = field(default_factory=ScenarioRules)

    def __post_init__(self) -> None:
        validate_weights(self.pillar_weights)

        if self.tier2_max_points <= 0:
            raise ScoringPolicyError(
                f"tier2_max_points must be positive, got {self.tier2_max_points!r}"
            )
        for tag, points in self.tier2_tag_points.items():
            if not 0 <= points <= self.tier2_max_points:
                raise ScoringPolicyError(
                    f"Tier-2 points for {tag.value} must lie in 0..{self.tier2_max_points}, "
                    f"got {points!r}"
                )
        for tag, points in self.tier1_point_values.items():
            if points < 0:
                raise ScoringPolicyError(
                    f"Tier-1 points for {tag.value} must be non-negative, got {points!r}"
                )

        bounds = [bound for bound, _ in self.maturity_thresholds]
        if not bounds or any(a <= b for a, b in zip(bounds, bounds[1:])):
            raise ScoringPolicyError(
                f"maturity_thresholds must be strictly descending, got {bounds!r}"
            )

    def maturity_for(self, score: float) -> MaturityValue:
        """Map a final 0-100 score to its maturity bucket."""
        for threshold, bucket in self.maturity_thresholds:
            if score >= threshold:
                return bucket
        return self.maturity_thresholds[-1][1]

    def maturity_label(self, score: float) -> str:
        """Map a final 0-100 score to its display label, e.g. 'Emerging'."""
        return self.maturity_for(score).label


def validate_weights(weights: Mapping[str, float]) -> None:
    """Check pillar weights are non-negative and sum to 1.0.

    Raises:
        ScoringPolicyError: If the weights are unusable.
    """
    if not weights:
        raise ScoringPolicyError("pillar_weights must not be empty")
    for pillar, weight in weights.items():
        if weight < 0:
            raise ScoringPolicyError(f"Weight for {pillar!r} is negative: {weight}")
    total = sum(weights.values())
    if abs(total - 1.0) > _WEIGHT_TOLERANCE:
        raise ScoringPolicyError(f"pillar_weights must sum to 1.0, got {total}")


DEFAULT_POLICY: ScoringPolicy = ScoringPolicy()
