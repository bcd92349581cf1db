"""Unit tests for question catalog parsing."""

import pytest

from digital_readiness_assessment.core.catalog import (
    UNKNOWN,
    MaturityValue,
    Option,
    QuestionKind,
    index_questions,
    parse_catalog,
    parse_question,
    sort_options,
)


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "id": "q1",
        "prompt": "How is data shared between teams?",
        "sectionId": "digitalization",
        "templateId": "tier2",
        "order": 3,
        "metadata": {"pillar": "DIGITALIZATION", "dimension": "DATA_FOUNDATION"},
        "options": [
            {"id": "q1_w", "value": "WORLD_CLASS", "label": "Real-time", "score": 4},
            {"id": "q1_b", "value": "BASIC", "label": "Email", "score": 1},
            {"id": "q1_e", "value": "EMERGING", "label": "Shared drive", "score": "2"},
        ],
    }
    record.update(overrides)
    return record


class TestMaturityValue:
    """Tag parsing and ordering."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("BASIC", MaturityValue.BASIC),
            ("established", MaturityValue.ESTABLISHED),
            ("World Class", MaturityValue.WORLD_CLASS),
            ("world-class", MaturityValue.WORLD_CLASS),
            (" EMERGING ", MaturityValue.EMERGING),
        ],
    )
    def test_parse(self, raw: str, expected: MaturityValue) -> None:
        assert MaturityValue.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["", "EXPERT", None, 3])
    def test_parse_rejects(self, raw: object) -> None:
        assert MaturityValue.parse(raw) is None

    def test_rank_is_ordinal(self) -> None:
        ranks = [m.rank for m in MaturityValue]
        assert ranks == [0, 1, 2, 3]

    def test_labels(self) -> None:
        assert MaturityValue.WORLD_CLASS.label == "World Class"
        assert MaturityValue.BASIC.label == "Basic"


class TestParseQuestion:
    """Raw catalog records become Questions."""

    def test_full_record(self) -> None:
        question = parse_question(_record())

        assert question is not None
        assert question.question_id == "q1"
        assert question.pillar == "DIGITALIZATION"
        assert question.dimension == "DATA_FOUNDATION"
        assert question.section_id == "digitalization"
        assert question.template_id == "tier2"
        assert question.order == 3
        assert question.kind is QuestionKind.SINGLE_CHOICE
        assert question.required is True

    def test_options_sorted_basic_first(self) -> None:
        question = parse_question(_record())
        assert [o.value for o in question.options] == ["BASIC", "EMERGING", "WORLD_CLASS"]

    def test_option_score_string_is_parsed(self) -> None:
        question = parse_question(_record())
        assert question.find_option("EMERGING").score == 2.0

    def test_metadata_as_json_string(self) -> None:
        question = parse_question(
            _record(metadata='{"pillar": "VALUE_SCALING", "dimension": "ECOSYSTEM"}')
        )
        assert question.pillar == "VALUE_SCALING"
        assert question.dimension == "ECOSYSTEM"

    @pytest.mark.parametrize("metadata", [None, "{not json", "[1, 2]", 17, {}])
    def test_missing_or_malformed_metadata_is_unknown(self, metadata: object) -> None:
        question = parse_question(_record(metadata=metadata))
        assert question is not None
        assert question.pillar == UNKNOWN
        assert question.dimension == UNKNOWN

    @pytest.mark.parametrize("record_id", [None, "", 12])
    def test_record_without_id_rejected(self, record_id: object) -> None:
        assert parse_question(_record(id=record_id)) is None

    def test_non_mapping_rejected(self) -> None:
        assert parse_question(["q1"]) is None  # type: ignore[arg-type]

    def test_malformed_options_dropped(self) -> None:
        question = parse_question(
            _record(options=[{"id": "x"}, "BASIC", {"value": "ESTABLISHED"}, {"value": ""}])
        )
        assert len(question.options) == 1
        option = question.options[0]
        assert option.value == "ESTABLISHED"
        assert option.option_id == "q1:ESTABLISHED"
        assert option.question_id == "q1"
        assert option.score is None

    @pytest.mark.parametrize("options", [5, 2.5, True, "BASIC", {"value": "BASIC"}, object()])
    def test_non_list_options_dropped(self, options: object) -> None:
        question = parse_question(_record(options=options))
        assert question is not None
        assert question.options == ()
        assert question.pillar == "DIGITALIZATION"

    def test_options_tuple_accepted(self) -> None:
        question = parse_question(_record(options=({"id": "t", "value": "BASIC"},)))
        assert [o.option_id for o in question.options] == ["t"]

    @pytest.mark.parametrize("label", [5, ["DIGITALIZATION"], {"name": "x"}, True])
    def test_non_string_metadata_labels_are_unknown(self, label: object) -> None:
        question = parse_question(_record(metadata={"pillar": label, "dimension": label}))
        assert question.pillar == UNKNOWN
        assert question.dimension == UNKNOWN

    @pytest.mark.parametrize("score", [10**400, "high", None, [1]])
    def test_unusable_option_score_is_none(self, score: object) -> None:
        question = parse_question(_record(options=[{"id": "o", "value": "BASIC", "score": score}]))
        assert question.options[0].score is None

    def test_kind_and_required(self) -> None:
        question = parse_question(_record(kind="scale", required=False))
        assert question.kind is QuestionKind.SCALE
        assert question.required is False

    def test_unknown_kind_defaults_to_single_choice(self) -> None:
        assert parse_question(_record(kind="SLIDER")).kind is QuestionKind.SINGLE_CHOICE

    def test_boolean_order_ignored(self) -> None:
        assert parse_question(_record(order=True)).order == 0


class TestFindOption:
    """Option lookup by id, tag or raw value."""

    def test_by_id(self) -> None:
        question = parse_question(_record())
        assert question.find_option("q1_w").value == "WORLD_CLASS"

    def test_by_tag_case_insensitive(self) -> None:
        question = parse_question(_record())
        assert question.find_option("basic").option_id == "q1_b"
        assert question.find_option("World Class").option_id == "q1_w"

    def test_non_canonical_value(self) -> None:
        question = parse_question(_record(options=[{"id": "o", "value": "Sometimes"}]))
        assert question.find_option("SOMETIMES").option_id == "o"

    def test_no_match(self) -> None:
        assert parse_question(_record()).find_option("ESTABLISHED") is None


class TestSortOptions:
    """Canonical ordering with unknown tags last."""

    def test_unknown_tags_last_in_original_order(self) -> None:
        options = [
            Option(option_id="a", question_id="q", label="", value="OTHER"),
            Option(option_id="b", question_id="q", label="", value="WORLD_CLASS"),
            Option(option_id="c", question_id="q", label="", value="MISC"),
            Option(option_id="d", question_id="q", label="", value="BASIC"),
        ]
        assert [o.option_id for o in sort_options(options)] == ["d", "b", "a", "c"]


class TestParseCatalog:
    """Whole-catalog parsing."""

    def test_sorted_by_order_and_bad_records_skipped(self) -> None:
        catalog = parse_catalog(
            [
                _record(id="late", order=9),
                _record(id=None),
                _record(id="early", order=1),
            ]
        )
        assert [q.question_id for q in catalog] == ["early", "late"]

    def test_index_keeps_first_duplicate(self) -> None:
        first = parse_question(_record(order=1))
        second = parse_question(_record(order=2))
        assert index_questions([first, second])["q1"] is first
