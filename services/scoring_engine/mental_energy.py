# services/scoring_engine/mental_energy.py
# Scoring for the 内耗 (mental energy drain) assessment. The four dimension
# maxima sum to 100, so the unweighted total is already on a 0-100 scale.

import logging
from typing import Dict, Any, Mapping

from .definitions import BEAT_PERCENT_BANDS, MENTAL_ENERGY_LEVELS, TOTAL_SCORE_MAX, TOTAL_SCORE_MIN
from .models import LevelInfo, MentalEnergyScores, QuestionCatalog
from .scorer import (
    PERCENT_SCALE,
    aggregate,
    count_unanswered,
    map_level,
    normalize,
    normalize_responses,
    rank_dimensions,
    round_half_up,
)

logger = logging.getLogger(__name__)


def calculate_dimension_scores(catalog: QuestionCatalog, responses: Mapping[int, Any]) -> Dict[str, float]:
    return aggregate(catalog, responses, catalog.dimensions)


def calculate_dimension_percentages(catalog: QuestionCatalog, dimension_scores: Mapping[str, float]) -> Dict[str, int]:
    return {
        dim.name: int(normalize(dimension_scores.get(dim.name, 0), dim.max_score, PERCENT_SCALE))
        for dim in catalog.dimensions
    }


def calculate_total_score(dimension_scores: Mapping[str, float]) -> int:
    total = int(round_half_up(sum(dimension_scores.values())))
    return min(max(total, TOTAL_SCORE_MIN), TOTAL_SCORE_MAX)


def calculate_beat_percent(total_score: float) -> int:
    """
    Share of people the user "beats", interpolated linearly inside the band
    the total falls into. Higher drain means a lower percentage.
    """
    score = min(max(total_score, TOTAL_SCORE_MIN), TOTAL_SCORE_MAX)
    band = BEAT_PERCENT_BANDS[-1]
    for candidate in BEAT_PERCENT_BANDS:
        if score <= candidate[1]:
            band = candidate
            break
    low, high, beat_at_low, beat_at_high = band
    position = (score - low) / (high - low) if score > low else 0.0
    beat = beat_at_low - position * (beat_at_low - beat_at_high)
    return int(round_half_up(beat))


def get_top_dimension(dimension_percentages: Mapping[str, int]) -> str:
    return rank_dimensions(dimension_percentages)[0][0]


def get_level_info(total_score: float) -> LevelInfo:
    return map_level(total_score, MENTAL_ENERGY_LEVELS)


def compute_scores(catalog: QuestionCatalog, responses: Mapping[Any, Any]) -> MentalEnergyScores:
    answers = normalize_responses(responses)

    unanswered = count_unanswered(answers, catalog.dimensions)
    if unanswered:
        logger.warning("Scoring mental energy assessment with unanswered questions",
                       extra={"unanswered_count": unanswered})

    dimension_scores = calculate_dimension_scores(catalog, answers)
    dimension_percentages = calculate_dimension_percentages(catalog, dimension_scores)
    total_score = calculate_total_score(dimension_scores)

    logger.debug("Computed mental energy scores",
                 extra={"total_score": total_score, "dimension_percentages": dimension_percentages})

    return MentalEnergyScores(
        dimension_scores=dimension_scores,
        dimension_percentages=dimension_percentages,
        total_score=total_score,
        level_info=get_level_info(total_score),
        beat_percent=calculate_beat_percent(total_score),
        top_dimension=get_top_dimension(dimension_percentages),
    )
