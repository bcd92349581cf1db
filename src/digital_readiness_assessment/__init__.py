"""Digital Readiness Assessment scoring engine.

Turns self-assessment survey responses into normalised maturity scores
(Tier-1 quick check and Tier-2 pillar/dimension assessment) and aggregates
completed Tier-2 assessments into company-level team averages.
"""

from digital_readiness_assessment.core.team_averages import (
    compare_with_team,
    compute_team_averages,
)
from digital_readiness_assessment.core.tier1 import calculate_tier1_score
from digital_readiness_assessment.core.tier2 import (
    calculate_tier2_score,
    ensure_dimension_scores,
)

__version__ = "0.1.0"

__all__ = [
    "calculate_tier1_score",
    "calculate_tier2_score",
    "compare_with_team",
    "compute_team_averages",
    "ensure_dimension_scores",
]
