"""Unit tests for the Tier-1 quick assessment calculator.

Tests cover:
- Empty input zero state
- Worked examples (4-question and 10-question)
- Round-half-up of the mean
- Unrecognised tags counted in the denominator at zero points
- Case-insensitive tag parsing
- Breakdown counts
- Score bounds over every canonical answer combination
"""

import itertools

import pytest

from digital_readiness_assessment.core.tier1 import calculate_tier1_score
from digital_readiness_assessment.core.utils import round_half_up_int

_POINTS = {"BASIC": 25, "EMERGING": 50, "ESTABLISHED": 75, "WORLD_CLASS": 100}


class TestEmptyInput:
    """Tests for the zero-state result."""

    def test_empty_mapping_returns_zero_state(self) -> None:
        result = calculate_tier1_score({})
        assert result.overall_score == 0
        assert result.total_questions == 0
        assert result.maturity_level == "Basic"
        breakdown = result.score_breakdown
        assert (breakdown.basic, breakdown.emerging, breakdown.established, breakdown.world_class) == (
            0,
            0,
            0,
            0,
        )


class TestWorkedExamples:
    """Known input/output pairs."""

    def test_four_question_example(self) -> None:
        """[50, 50, 25, 75] averages to 50 → Emerging."""
        result = calculate_tier1_score(
            {"q1": "EMERGING", "q2": "EMERGING", "q3": "BASIC", "q4": "ESTABLISHED"}
        )
        assert result.overall_score == 50
        assert result.total_questions == 4
        assert result.maturity_level == "Emerging"

    def test_ten_question_example(self) -> None:
        """8 EMERGING + 1 BASIC + 1 ESTABLISHED = 500 points / 10 = 50 → Emerging."""
        responses = {f"q{i}": "EMERGING" for i in range(8)}
        responses["q8"] = "BASIC"
        responses["q9"] = "ESTABLISHED"

        result = calculate_tier1_score(responses)

        assert result.overall_score == 50
        assert result.total_questions == 10
        assert result.maturity_level == "Emerging"
        assert result.score_breakdown.emerging == 8
        assert result.score_breakdown.basic == 1
        assert result.score_breakdown.established == 1
        assert result.score_breakdown.world_class == 0

    def test_all_world_class(self) -> None:
        result = calculate_tier1_score({"a": "WORLD_CLASS", "b": "WORLD_CLASS"})
        assert result.overall_score == 100
        assert result.maturity_level == "World Class"

    def test_all_established_is_established_not_world_class(self) -> None:
        """75 sits below the 85 World Class threshold."""
        result = calculate_tier1_score({"a": "ESTABLISHED", "b": "ESTABLISHED"})
        assert result.overall_score == 75
        assert result.maturity_level == "Established"


class TestRounding:
    """The mean rounds half up, not to even."""

    def test_half_rounds_up(self) -> None:
        """(50 + 75) / 2 = 62.5 → 63 (banker's rounding would give 62)."""
        result = calculate_tier1_score({"a": "EMERGING", "b": "ESTABLISHED"})
        assert result.overall_score == 63

    def test_below_half_rounds_down(self) -> None:
        """(25 + 25 + 50) / 3 = 33.33 → 33."""
        result = calculate_tier1_score({"a": "BASIC", "b": "BASIC", "c": "EMERGING"})
        assert result.overall_score == 33


class TestUnrecognisedTags:
    """Unknown tags score zero but still count as questions."""

    def test_unknown_tag_counts_in_denominator(self) -> None:
        """100 + 0 over 2 questions = 50."""
        result = calculate_tier1_score({"a": "WORLD_CLASS", "b": "NOT_A_LEVEL"})
        assert result.overall_score == 50
        assert result.total_questions == 2

    def test_unknown_tag_not_in_breakdown(self) -> None:
        result = calculate_tier1_score({"a": "WORLD_CLASS", "b": "NOT_A_LEVEL"})
        breakdown = result.score_breakdown
        assert breakdown.world_class == 1
        assert breakdown.basic + breakdown.emerging + breakdown.established == 0

    def test_non_string_value_scores_zero(self) -> None:
        result = calculate_tier1_score({"a": 3, "b": None, "c": "WORLD_CLASS"})  # type: ignore[dict-item]
        assert result.total_questions == 3
        assert result.overall_score == 33

    def test_only_unknown_tags_scores_zero(self) -> None:
        result = calculate_tier1_score({"a": "", "b": "maybe"})
        assert result.overall_score == 0
        assert result.maturity_level == "Basic"


class TestTagParsing:
    """Tags are matched case-insensitively."""

    @pytest.mark.parametrize(
        "tag",
        ["emerging", "Emerging", "EMERGING", " emerging "],
    )
    def test_case_insensitive(self, tag: str) -> None:
        result = calculate_tier1_score({"q": tag})
        assert result.overall_score == 50
        assert result.score_breakdown.emerging == 1

    def test_wrapped_value_answers(self) -> None:
        """{"value": tag} scores like the bare tag, as in Tier-2."""
        result = calculate_tier1_score(
            {
                "q1": {"value": "EMERGING"},
                "q2": "EMERGING",
                "q3": {"value": "basic"},
                "q4": "ESTABLISHED",
            }
        )
        assert result.overall_score == 50
        assert result.score_breakdown.emerging == 2
        assert result.score_breakdown.basic == 1

    def test_wrapped_value_without_tag_scores_zero(self) -> None:
        result = calculate_tier1_score({"a": {"label": "Emerging"}, "b": "WORLD_CLASS"})
        assert result.total_questions == 2
        assert result.overall_score == 50

    @pytest.mark.parametrize("responses", [None, ["EMERGING"], "EMERGING"])
    def test_non_mapping_responses_give_zero_state(self, responses: object) -> None:
        result = calculate_tier1_score(responses)  # type: ignore[arg-type]
        assert result.overall_score == 0
        assert result.total_questions == 0

    @pytest.mark.parametrize("tag", ["world_class", "World Class", "world-class"])
    def test_world_class_spellings(self, tag: str) -> None:
        result = calculate_tier1_score({"q": tag})
        assert result.overall_score == 100
        assert result.score_breakdown.world_class == 1


class TestScoreProperties:
    """Properties over every canonical three-answer combination."""

    @pytest.mark.parametrize("combo", list(itertools.product(_POINTS, repeat=3)))
    def test_score_is_rounded_mean_within_bounds(self, combo: tuple[str, str, str]) -> None:
        responses = {f"q{i}": tag for i, tag in enumerate(combo)}
        result = calculate_tier1_score(responses)

        expected = round_half_up_int(sum(_POINTS[tag] for tag in combo) / len(combo))
        assert result.overall_score == expected
        assert 25 <= result.overall_score <= 100

    def test_breakdown_sums_to_question_count(self) -> None:
        responses = {"a": "BASIC", "b": "EMERGING", "c": "ESTABLISHED", "d": "WORLD_CLASS"}
        breakdown = calculate_tier1_score(responses).score_breakdown
        assert (
            breakdown.basic + breakdown.emerging + breakdown.established + breakdown.world_class
        ) == 4

    def test_serialises_with_camel_case_keys(self) -> None:
        payload = calculate_tier1_score({"a": "WORLD_CLASS"}).model_dump(by_alias=True)
        assert payload["overallScore"] == 100
        assert payload["scoreBreakdown"]["worldClass"] == 1
        assert payload["maturityLevel"] == "World Class"
