# services/scoring_engine/scorer.py
# Answer extraction, aggregation and normalization shared by both scoring models.

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Mapping, Optional, Sequence, Tuple

from .models import DimensionSpec, LevelInfo, QuestionCatalog, QuestionType

logger = logging.getLogger(__name__)

DISPLAY_SCALE = 5
PERCENT_SCALE = 100


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Rounds half away from zero on the exact binary value, matching how the
    published scores were produced (toFixed / Math.round on non-negative input).
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _coerce_question_id(key: Any) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.strip().isdecimal():
        return int(key.strip())
    return None


def normalize_responses(responses: Optional[Mapping[Any, Any]]) -> Dict[int, Any]:
    """
    Returns the response map keyed by integer question id. JSON payloads
    arrive with string keys, so both "12" and 12 are accepted; other keys are dropped.
    """
    if not responses:
        return {}
    normalized = {}
    for key, value in responses.items():
        qid = _coerce_question_id(key)
        if qid is None:
            logger.debug("Ignoring response with non-numeric question id", extra={"key": repr(key)})
            continue
        normalized[qid] = value
    return normalized


def coerce_option_index(raw_value: Any) -> Optional[int]:
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        return int(raw_value) if raw_value.is_integer() else None
    if isinstance(raw_value, str):
        text = raw_value.strip()
        try:
            number = float(text)
        except ValueError:
            return None
        if math.isfinite(number) and number.is_integer():
            return int(number)
    return None


def coerce_number(raw_value: Any) -> Optional[float]:
    """Numeric value of a SCALE style answer, or None when it is not a finite number."""
    if raw_value is None or isinstance(raw_value, bool):
        return None
    try:
        number = float(raw_value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def resolve_answer(catalog: QuestionCatalog, question_id: int, raw_value: Any) -> float:
    """
    Resolves a stored answer into its point value.

    CHOICE answers hold the selected option's index and are always
    re-resolved through the catalog. Missing, malformed or out-of-range
    answers contribute 0 rather than raising.
    """
    if raw_value is None:
        return 0.0
    question = catalog.get_question(question_id)
    if question is None:
        return 0.0

    if question.type == QuestionType.CHOICE:
        index = coerce_option_index(raw_value)
        if index is None or index < 0 or index >= len(question.options):
            logger.debug("Unresolvable choice answer", extra={"question_id": question_id, "raw_value": repr(raw_value)})
            return 0.0
        return float(question.options[index].value)

    if question.type == QuestionType.SCALE:
        number = coerce_number(raw_value)
        return number if number is not None else 0.0

    # Open questions are never scored
    return 0.0


def aggregate(catalog: QuestionCatalog, responses: Mapping[int, Any],
              dimensions: Sequence[DimensionSpec]) -> Dict[str, float]:
    """Sums resolved answers per dimension, in catalog order."""
    totals = {}
    for dim in dimensions:
        totals[dim.name] = sum(resolve_answer(catalog, qid, responses.get(qid)) for qid in dim.questions)
    return totals


def count_unanswered(responses: Mapping[int, Any], dimensions: Sequence[DimensionSpec]) -> int:
    return sum(1 for dim in dimensions for qid in dim.questions if responses.get(qid) is None)


def normalize(raw_score: float, max_score: float, target_scale: int) -> float:
    """
    Scales a raw dimension total onto the 0-5 display scale (two decimals)
    or the 0-100 percentage scale (whole numbers). A zero maximum yields 0.
    """
    if max_score <= 0:
        return 0.0
    ratio = raw_score / max_score
    if target_scale == PERCENT_SCALE:
        return round_half_up(ratio * PERCENT_SCALE)
    return round_half_up(ratio * target_scale, 2)


def rank_dimensions(scores: Mapping[str, float]) -> List[Tuple[str, float]]:
    """Highest score first; equal scores keep catalog order."""
    return sorted(scores.items(), key=lambda item: item[1], reverse=True)


def map_level(score: float, bands: Sequence[Dict[str, Any]]) -> LevelInfo:
    """
    Maps a score onto ascending level bands. The first band whose upper bound
    covers the score wins, scores below the first band land in it, and the
    last band catches everything above its nominal maximum.
    """
    selected = bands[-1]
    for band in bands:
        if score <= band["max"]:
            selected = band
            break
    return LevelInfo(
        label=selected["label"],
        emoji=selected["emoji"],
        tags=list(selected["tags"]),
        percent=selected.get("percent"),
    )
