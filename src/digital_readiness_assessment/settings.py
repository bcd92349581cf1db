"""Service settings for the digital readiness assessment engine.

Every scoring constant can be overridden from the environment using the
DIGITAL_READINESS_ prefix, e.g.::

    DIGITAL_READINESS_PILLAR_WEIGHTS='{"DIGITALIZATION": 0.5, "TRANSFORMATION": 0.25, "VALUE_SCALING": 0.25}'
    DIGITAL_READINESS_FINAL_SHIFT_SCALE=1.0

``build_policy()`` turns the settings into the ScoringPolicy the calculators use.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from digital_readiness_assessment.core.catalog import MaturityValue
from digital_readiness_assessment.core.policy import (
    LinearShift,
    ScenarioRules,
    ScoringPolicy,
    ScoringPolicyError,
    validate_weights,
)


class Settings(BaseSettings):
    """Settings for the digital readiness assessment engine.

    Environment variable prefix: DIGITAL_READINESS_
    """

    service_name: str = "digital-readiness-assessment"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Catalog
    tier2_template_id: str = "tier2"

    # Tier-1 scoring
    tier1_point_values: dict[str, int] = {
        "BASIC": 25,
        "EMERGING": 50,
        "ESTABLISHED": 75,
        "WORLD_CLASS": 100,
    }
    # Inclusive lower bound per maturity bucket
    maturity_thresholds: dict[str, float] = {
        "WORLD_CLASS": 85.0,
        "ESTABLISHED": 70.0,
        "EMERGING": 50.0,
        "BASIC": 0.0,
    }

    # Tier-2 scoring
    pillar_weights: dict[str, float] = {
        "DIGITALIZATION": 0.40,
        "TRANSFORMATION": 0.30,
        "VALUE_SCALING": 0.30,
    }
    tier2_max_points_per_question: float = 5.0
    tier2_tag_points: dict[str, float] = {
        "BASIC": 1.0,
        "EMERGING": 2.0,
        "ESTABLISHED": 3.0,
        "WORLD_CLASS": 4.0,
    }
    final_shift_scale: float = 1.25
    final_shift_offset: float = 0.0
    scenario_leader_threshold: float = 70.0
    scenario_balance_tolerance: float = 15.0

    model_config = SettingsConfigDict(env_prefix="DIGITAL_READINESS_")

    @field_validator("pillar_weights")
    @classmethod
    def _weights_sum_to_one(cls, value: dict[str, float]) -> dict[str, float]:
        try:
            validate_weights(value)
        except ScoringPolicyError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("tier1_point_values", "maturity_thresholds", "tier2_tag_points")
    @classmethod
    def _known_maturity_tags(cls, value: dict[str, float]) -> dict[str, float]:
        unknown = [tag for tag in value if MaturityValue.parse(tag) is None]
        if unknown:
            raise ValueError(f"Unknown maturity tags: {unknown}")
        return value

    def build_policy(self) -> ScoringPolicy:
        """Build the ScoringPolicy described by these settings.

        Raises:
            ScoringPolicyError: If the configured values are inconsistent.
        """
        thresholds = sorted(
            (
                (bound, MaturityValue.parse(tag))
                for tag, bound in self.maturity_thresholds.items()
            ),
            key=lambda pair: pair[0],
            reverse=True,
        )
        return ScoringPolicy(
            tier1_point_values={
                MaturityValue.parse(tag): points
                for tag, points in self.tier1_point_values.items()
            },
            maturity_thresholds=tuple(thresholds),
            pillar_weights=dict(self.pillar_weights),
            tier2_max_points=self.tier2_max_points_per_question,
            tier2_tag_points={
                MaturityValue.parse(tag): points
                for tag, points in self.tier2_tag_points.items()
            },
            final_transform=LinearShift(
                scale=self.final_shift_scale,
                offset=self.final_shift_offset,
            ),
            scenario=ScenarioRules(
                leader_threshold=self.scenario_leader_threshold,
                balance_tolerance=self.scenario_balance_tolerance,
            ),
        )
