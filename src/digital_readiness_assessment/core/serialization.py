"""Defensive decoding of stored score and response blobs.

Stored assessments keep their score and raw responses as JSON text written by
earlier versions of the system. Anything that fails to decode or validate is
logged and reported as None; callers skip it rather than failing the report.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog
from pydantic import ValidationError

from digital_readiness_assessment.core.models import (
    ScoreModel,
    Tier1ScoreResult,
    Tier2ScoreResult,
)

logger = structlog.get_logger(__name__)

_ModelT = TypeVar("_ModelT", bound=ScoreModel)

Blob = str | bytes | Mapping[str, Any] | None


@dataclass(frozen=True)
class StoredAssessment:
    """A stored assessment as the persistence layer hands it over.

    Attributes:
        score: Score JSON (text or already-decoded mapping), or None if unscored.
        responses: Raw response JSON the score was computed from, if kept.
    """

    score: Blob
    responses: Blob = None


def decode_blob(blob: Blob, *, kind: str) -> Mapping[str, Any] | None:
    """Decode a JSON object blob.

    Args:
        blob: JSON text, bytes, an already-decoded mapping, or None.
        kind: What the blob holds, used in log events.

    Returns:
        The decoded mapping, or None when absent or not a JSON object.
    """
    if blob is None:
        return None
    if isinstance(blob, Mapping):
        return blob
    if isinstance(blob, (str, bytes)):
        if not blob.strip():
            return None
        try:
            decoded = json.loads(blob)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Stored blob is not valid JSON", kind=kind, error=str(exc))
            return None
        if isinstance(decoded, Mapping):
            return decoded
        logger.warning(
            "Stored blob is not a JSON object",
            kind=kind,
            decoded_type=type(decoded).__name__,
        )
        return None
    logger.warning("Stored blob has unexpected type", kind=kind, blob_type=type(blob).__name__)
    return None


def _has_any(data: Mapping[str, Any], *keys: str) -> bool:
    return any(data.get(key) is not None for key in keys)


def _parse_model(
    blob: Blob,
    model: type[_ModelT],
    kind: str,
    required: tuple[tuple[str, ...], ...] = (),
) -> _ModelT | None:
    data = decode_blob(blob, kind=kind)
    if data is None:
        return None
    # Model fields all default; presence of the key fields is checked here.
    missing = [keys[0] for keys in required if not _has_any(data, *keys)]
    if missing:
        logger.warning("Stored score lacks required fields", kind=kind, missing=missing)
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Stored score failed validation",
            kind=kind,
            error_count=exc.error_count(),
        )
        return None


_TIER1_REQUIRED: tuple[tuple[str, ...], ...] = (("overallScore", "overall_score"),)

# The displayed score plus at least one calculation stage.
_TIER2_REQUIRED: tuple[tuple[str, ...], ...] = (
    ("normalizedShiftedScore", "normalized_shifted_score"),
    (
        "weightedScore",
        "weighted_score",
        "normalizedScore",
        "normalized_score",
        "totalRawScore",
        "total_raw_score",
    ),
)


def parse_tier1_result(blob: Blob) -> Tier1ScoreResult | None:
    """Load a stored Tier-1 score, or None when unusable.

    A blob without ``overallScore`` is unusable.
    """
    return _parse_model(blob, Tier1ScoreResult, "tier1_score", _TIER1_REQUIRED)


def parse_tier2_result(blob: Blob) -> Tier2ScoreResult | None:
    """Load a stored Tier-2 score, or None when unusable.

    A blob must carry ``normalizedShiftedScore`` and at least one of the
    calculation stages (weighted, normalised, total raw); an empty object or
    a score of some other shape is unusable rather than a zero score.
    """
    return _parse_model(blob, Tier2ScoreResult, "tier2_score", _TIER2_REQUIRED)


def parse_responses(blob: Blob) -> dict[str, Any] | None:
    """Load a stored response mapping, or None when unusable.

    Keys are coerced to strings; JSON object keys always are, but mappings
    handed over already decoded may not be.
    """
    data = decode_blob(blob, kind="responses")
    if data is None:
        return None
    return {str(key): value for key, value in data.items()}
