"""Recommendation and explanation texts keyed by maturity bucket.

Reports pair a final score with a short explanation and a list of next steps.
Both are chosen by the same bucket thresholds as the maturity label, so the
text can never disagree with the label shown next to it.
"""

from dataclasses import dataclass

from digital_readiness_assessment.core.catalog import MaturityValue
from digital_readiness_assessment.core.policy import DEFAULT_POLICY, ScoringPolicy


@dataclass(frozen=True)
class Recommendation:
    """A single suggested next step.

    Attributes:
        title: Short initiative title.
        detail: One-line description shown under the title.
        priority: critical / high / medium / low.
    """

    title: str
    detail: str
    priority: str


EXPLANATIONS: dict[MaturityValue, str] = {
    MaturityValue.WORLD_CLASS: (
        "Your organization demonstrates world-class digital maturity across most areas."
    ),
    MaturityValue.ESTABLISHED: (
        "Your organization has established strong digital foundations with "
        "opportunities for optimization."
    ),
    MaturityValue.EMERGING: (
        "Your organization is emerging in digital maturity with clear areas for improvement."
    ),
    MaturityValue.BASIC: (
        "Your organization is in the early stages of digital transformation with "
        "significant opportunities ahead."
    ),
}

RECOMMENDATIONS: dict[MaturityValue, list[Recommendation]] = {
    MaturityValue.WORLD_CLASS: [
        Recommendation(
            title="Continue Innovation Leadership",
            detail="Continue to innovate and lead in digital transformation",
            priority="medium",
        ),
        Recommendation(
            title="Share Best Practices",
            detail="Share best practices across the organization",
            priority="low",
        ),
        Recommendation(
            title="Explore Advanced Automation",
            detail="Explore advanced AI and automation opportunities",
            priority="low",
        ),
    ],
    MaturityValue.ESTABLISHED: [
        Recommendation(
            title="Scale Digital Initiatives",
            detail="Focus on scaling successful digital initiatives",
            priority="high",
        ),
        Recommendation(
            title="Strengthen Data Governance",
            detail="Strengthen data governance and integration",
            priority="medium",
        ),
        Recommendation(
            title="Invest in Advanced Analytics",
            detail="Invest in advanced analytics capabilities",
            priority="medium",
        ),
    ],
    MaturityValue.EMERGING: [
        Recommendation(
            title="Build Digital Infrastructure",
            detail="Prioritize foundational digital infrastructure",
            priority="high",
        ),
        Recommendation(
            title="Develop Digital Skills",
            detail="Develop digital skills across teams",
            priority="high",
        ),
        Recommendation(
            title="Establish Data Governance",
            detail="Establish clear data governance frameworks",
            priority="medium",
        ),
    ],
    MaturityValue.BASIC: [
        Recommendation(
            title="Start Digital Transformation",
            detail="Begin with basic digital transformation initiatives",
            priority="critical",
        ),
        Recommendation(
            title="Establish Data Standards",
            detail="Focus on data standardization and integration",
            priority="high",
        ),
        Recommendation(
            title="Build Digital Culture",
            detail="Build digital culture and leadership support",
            priority="high",
        ),
    ],
}


def get_explanation(score: float, policy: ScoringPolicy | None = None) -> str:
    """Return the explanation paragraph for a final 0-100 score."""
    return EXPLANATIONS[(policy or DEFAULT_POLICY).maturity_for(score)]


def get_recommendations(score: float, policy: ScoringPolicy | None = None) -> list[Recommendation]:
    """Return the recommendations for a final 0-100 score, most urgent first."""
    return list(RECOMMENDATIONS[(policy or DEFAULT_POLICY).maturity_for(score)])
