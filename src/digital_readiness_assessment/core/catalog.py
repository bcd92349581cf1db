"""Question catalog model for the digital readiness assessment.

A catalog is an ordered list of questions, each tagged with the pillar and
dimension it scores into (carried in the question's ``metadata``), and a set of
answer options. Every option carries a maturity tag drawn from the ordinal set
BASIC < EMERGING < ESTABLISHED < WORLD_CLASS and its own numeric score.

Catalog records arrive from an external store, so ``parse_question`` accepts
raw mappings and tolerates a missing or malformed ``metadata`` blob. Questions
without a pillar or dimension are filed under ``UNKNOWN``.
"""

import enum
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

UNKNOWN: str = "Unknown"


class MaturityValue(str, enum.Enum):
    """Ordinal maturity bucket carried by answer options."""

    BASIC = "BASIC"
    EMERGING = "EMERGING"
    ESTABLISHED = "ESTABLISHED"
    WORLD_CLASS = "WORLD_CLASS"

    @property
    def rank(self) -> int:
        """Position in the canonical ordering, BASIC first."""
        return _MATURITY_ORDER.index(self)

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'World Class'."""
        return MATURITY_LABELS[self]

    @classmethod
    def parse(cls, raw: object) -> "MaturityValue | None":
        """Parse a tag case-insensitively.

        Spaces and hyphens are read as underscores so that display labels
        ('World Class') resolve to the same bucket as tags ('WORLD_CLASS').

        Args:
            raw: Candidate tag. Non-string values never match.

        Returns:
            The matching MaturityValue, or None when unrecognised.
        """
        if not isinstance(raw, str):
            return None
        normalised = raw.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalised)
        except ValueError:
            return None


_MATURITY_ORDER: list[MaturityValue] = [
    MaturityValue.BASIC,
    MaturityValue.EMERGING,
    MaturityValue.ESTABLISHED,
    MaturityValue.WORLD_CLASS,
]

MATURITY_LABELS: dict[MaturityValue, str] = {
    MaturityValue.BASIC: "Basic",
    MaturityValue.EMERGING: "Emerging",
    MaturityValue.ESTABLISHED: "Established",
    MaturityValue.WORLD_CLASS: "World Class",
}


class QuestionKind(str, enum.Enum):
    """How a question is answered."""

    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    SCALE = "SCALE"
    TEXT = "TEXT"


@dataclass(frozen=True)
class Option:
    """A single answer option.

    Attributes:
        option_id: Unique option identifier.
        question_id: Identifier of the owning question.
        label: Text shown to the respondent.
        value: Maturity tag, usually one of the MaturityValue members.
        score: Points awarded for this option, or None when the catalog
            leaves scoring to the tag.
    """

    option_id: str
    question_id: str
    label: str
    value: str
    score: float | None = None

    @property
    def maturity(self) -> MaturityValue | None:
        """The option's tag as a MaturityValue, if it is a canonical one."""
        return MaturityValue.parse(self.value)


@dataclass(frozen=True)
class Question:
    """A single catalog question.

    Attributes:
        question_id: Unique identifier.
        prompt: Question text.
        pillar: Owning pillar (``metadata.pillar``), UNKNOWN when absent.
        dimension: Owning dimension (``metadata.dimension``), UNKNOWN when absent.
        section_id: Section the question is rendered in.
        order: Position within the catalog.
        kind: Answer kind.
        required: Whether a complete submission must answer it.
        template_id: Catalog/template the question belongs to.
        options: Answer options in canonical maturity order.
    """

    question_id: str
    prompt: str = ""
    pillar: str = UNKNOWN
    dimension: str = UNKNOWN
    section_id: str = ""
    order: int = 0
    kind: QuestionKind = QuestionKind.SINGLE_CHOICE
    required: bool = True
    template_id: str = ""
    options: tuple[Option, ...] = field(default_factory=tuple)

    def find_option(self, value: str) -> Option | None:
        """Return the option whose tag or id matches ``value``.

        Tags compare case-insensitively; ids compare exactly.
        """
        maturity = MaturityValue.parse(value)
        for option in self.options:
            if option.option_id == value:
                return option
            if maturity is not None and option.maturity is maturity:
                return option
            if option.value.strip().upper() == value.strip().upper():
                return option
        return None


def sort_options(options: Iterable[Option]) -> tuple[Option, ...]:
    """Order options BASIC → WORLD_CLASS; unknown tags keep their order, last."""
    unknown_rank = len(_MATURITY_ORDER)
    return tuple(
        sorted(
            options,
            key=lambda option: option.maturity.rank
            if option.maturity is not None
            else unknown_rank,
        )
    )


def _parse_metadata(raw: object, question_id: str) -> Mapping[str, Any]:
    """Decode ``metadata`` that may be a dict, a JSON string, or absent."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Question metadata is not valid JSON", question_id=question_id)
            return {}
        if isinstance(decoded, Mapping):
            return decoded
    logger.warning(
        "Question metadata has unexpected type",
        question_id=question_id,
        metadata_type=type(raw).__name__,
    )
    return {}


def _metadata_label(metadata: Mapping[str, Any], key: str, question_id: str) -> str:
    value = metadata.get(key)
    if value is None or value == "":
        return UNKNOWN
    if not isinstance(value, str):
        logger.warning(
            "Question metadata label is not a string",
            question_id=question_id,
            key=key,
            value_type=type(value).__name__,
        )
        return UNKNOWN
    return value


def _raw_options(raw: object, question_id: str) -> list[Any]:
    """Return the option records to parse; anything but a list-like is dropped."""
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        logger.warning(
            "Question options are not a list",
            question_id=question_id,
            options_type=type(raw).__name__,
        )
        return []
    return list(raw)


def _parse_score(raw: object) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, str)):
        try:
            return float(raw)
        except (ValueError, OverflowError):
            return None
    return None


def _parse_option(raw: Mapping[str, Any], question_id: str) -> Option | None:
    value = raw.get("value")
    if not isinstance(value, str) or not value:
        return None
    return Option(
        option_id=str(raw.get("id") or f"{question_id}:{value}"),
        question_id=str(raw.get("questionId") or question_id),
        label=str(raw.get("label") or ""),
        value=value,
        score=_parse_score(raw.get("score")),
    )


def _parse_kind(raw: object) -> QuestionKind:
    if isinstance(raw, str):
        try:
            return QuestionKind(raw.strip().upper())
        except ValueError:
            pass
    return QuestionKind.SINGLE_CHOICE


def parse_question(raw: Mapping[str, Any]) -> Question | None:
    """Build a Question from a raw catalog record.

    The record uses the catalog store's camelCase keys (``sectionId``,
    ``templateId``, ``metadata``, ``options``). Malformed options are dropped;
    a record without an ``id`` is rejected.

    Args:
        raw: One catalog record.

    Returns:
        The parsed Question, or None when the record has no usable id.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Catalog record is not a mapping", record_type=type(raw).__name__)
        return None

    question_id = raw.get("id")
    if not isinstance(question_id, str) or not question_id:
        logger.warning("Catalog record without id skipped")
        return None

    metadata = _parse_metadata(raw.get("metadata"), question_id)
    options = [
        option
        for option in (
            _parse_option(item, question_id)
            for item in _raw_options(raw.get("options"), question_id)
            if isinstance(item, Mapping)
        )
        if option is not None
    ]

    order = raw.get("order")
    return Question(
        question_id=question_id,
        prompt=str(raw.get("prompt") or ""),
        pillar=_metadata_label(metadata, "pillar", question_id),
        dimension=_metadata_label(metadata, "dimension", question_id),
        section_id=str(raw.get("sectionId") or ""),
        order=order if isinstance(order, int) and not isinstance(order, bool) else 0,
        kind=_parse_kind(raw.get("kind")),
        required=raw.get("required") is not False,
        template_id=str(raw.get("templateId") or ""),
        options=sort_options(options),
    )


def parse_catalog(records: Iterable[Mapping[str, Any]]) -> list[Question]:
    """Parse raw catalog records, skipping unusable ones, ordered by ``order``."""
    questions = [q for q in (parse_question(r) for r in records) if q is not None]
    return sorted(questions, key=lambda q: q.order)


def index_questions(questions: Iterable[Question]) -> dict[str, Question]:
    """Map question id → Question; the first occurrence of a duplicate id wins."""
    index: dict[str, Question] = {}
    for question in questions:
        index.setdefault(question.question_id, question)
    return index
