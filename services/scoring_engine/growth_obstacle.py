# services/scoring_engine/growth_obstacle.py
# Scoring for the 50-question growth obstacle assessment: eight belief
# dimensions, six behavior patterns and a 0-10 composite obstacle index.

import logging
from typing import Dict, Any, Mapping, Tuple

from .definitions import (
    BEHAVIOR_CORRELATIONS,
    BEHAVIOR_SHARE,
    BEHAVIOR_TOTAL_MAX,
    BELIEF_SHARE,
    BELIEF_WEIGHTS,
    BELIEF_WEIGHT_DIVISOR,
    CORRELATED_SEVERITY_BOOST,
    DEFAULT_DURATION_KEY,
    DEFAULT_LIFE_SATISFACTION,
    DEFAULT_SEVERITY_BOOST,
    DURATION_MULTIPLIERS,
    GROWTH_OBSTACLE_LEVELS,
    LIFE_SATISFACTION_QUESTION_ID,
    OVERALL_INDEX_CEILING,
    PATTERN_SEVERITY_LABELS,
    PATTERN_SEVERITY_THRESHOLDS,
    PATTERN_TYPE_CORRELATED,
    PATTERN_TYPE_MULTI_POINT,
    SATISFACTION_STEP,
    STUCK_DURATION_QUESTION_ID,
)
from .models import (
    BehaviorPatternScore,
    CoreObstacle,
    GrowthObstacleScores,
    LevelInfo,
    QuestionCatalog,
    SCALE_MAX,
    SCALE_MIN,
)
from .scorer import (
    DISPLAY_SCALE,
    aggregate,
    coerce_number,
    count_unanswered,
    map_level,
    normalize,
    normalize_responses,
    rank_dimensions,
    round_half_up,
)

logger = logging.getLogger(__name__)


def calculate_belief_scores(catalog: QuestionCatalog, responses: Mapping[int, Any]) -> Tuple[Dict[str, float], Dict[str, float]]:
    """Returns (raw totals, 0-5 display scores) for the eight belief dimensions."""
    raw = aggregate(catalog, responses, catalog.dimensions)
    display = {
        dim.name: normalize(raw[dim.name], dim.max_score, DISPLAY_SCALE)
        for dim in catalog.dimensions
    }
    return raw, display


def pattern_severity(score: float, max_score: float) -> str:
    mild, moderate = PATTERN_SEVERITY_THRESHOLDS.get(int(max_score), PATTERN_SEVERITY_THRESHOLDS[13])
    if score <= mild:
        return PATTERN_SEVERITY_LABELS[0]
    if score <= moderate:
        return PATTERN_SEVERITY_LABELS[1]
    return PATTERN_SEVERITY_LABELS[2]


def calculate_behavior_scores(catalog: QuestionCatalog, responses: Mapping[int, Any]) -> Dict[str, BehaviorPatternScore]:
    raw = aggregate(catalog, responses, catalog.behavior_patterns)
    return {
        pattern.name: BehaviorPatternScore(
            score=raw[pattern.name],
            level=pattern_severity(raw[pattern.name], pattern.max_score),
        )
        for pattern in catalog.behavior_patterns
    }


def duration_multiplier(raw_value: Any) -> float:
    """Multiplier for how long the user has felt stuck, keyed by the stored option index."""
    if raw_value is None or raw_value == "":
        key = DEFAULT_DURATION_KEY
    elif isinstance(raw_value, float) and raw_value.is_integer():
        key = str(int(raw_value))
    else:
        key = str(raw_value).strip()
    return DURATION_MULTIPLIERS.get(key, 1.0)


def resolve_life_satisfaction(raw_value: Any) -> float:
    """
    Life satisfaction on the 1-10 scale. Missing, zero or non-numeric answers
    fall back to 5; anything else is clamped into range. The clamp applies to
    scoring as well as report data, so an out-of-range answer can never push
    the satisfaction factor below 1.0 or above 1.18.
    """
    number = coerce_number(raw_value)
    if not number:
        return DEFAULT_LIFE_SATISFACTION
    return min(max(number, SCALE_MIN), SCALE_MAX)


def satisfaction_factor(raw_value: Any) -> float:
    return 1 + (SCALE_MAX - resolve_life_satisfaction(raw_value)) * SATISFACTION_STEP


def calculate_obstacle_index(belief_raw: Mapping[str, float], behavior_scores: Mapping[str, BehaviorPatternScore],
                             responses: Mapping[int, Any]) -> float:
    """
    Weighted belief share plus behavior share on a 0-10 scale, amplified by
    stuck duration and low life satisfaction, rounded to one decimal and
    capped at 10.
    """
    weighted_belief = sum(belief_raw.get(name, 0) * weight for name, weight in BELIEF_WEIGHTS.items())
    belief_percentage = weighted_belief / BELIEF_WEIGHT_DIVISOR

    behavior_total = sum(pattern.score for pattern in behavior_scores.values())
    behavior_percentage = behavior_total / BEHAVIOR_TOTAL_MAX

    base_index = (belief_percentage * BELIEF_SHARE + behavior_percentage * BEHAVIOR_SHARE) * 10
    multiplier = duration_multiplier(responses.get(STUCK_DURATION_QUESTION_ID))
    factor = satisfaction_factor(responses.get(LIFE_SATISFACTION_QUESTION_ID))

    final_index = min(round_half_up(base_index * multiplier * factor, 1), OVERALL_INDEX_CEILING)
    return max(final_index, 0.0)


def identify_core_obstacle(catalog: QuestionCatalog, belief_raw: Mapping[str, float],
                           behavior_scores: Mapping[str, BehaviorPatternScore]) -> CoreObstacle:
    """
    Picks the two strongest belief dimensions and the strongest behavior
    pattern, then checks whether that behavior is one the primary belief is
    known to drive.
    """
    top_beliefs = rank_dimensions(belief_raw)
    primary, primary_score = top_beliefs[0]
    secondary = top_beliefs[1][0] if len(top_beliefs) > 1 else None

    key_behavior = None
    if behavior_scores:
        key_behavior = rank_dimensions({name: p.score for name, p in behavior_scores.items()})[0][0]

    correlated = key_behavior in BEHAVIOR_CORRELATIONS.get(primary, [])
    primary_max = next(dim.max_score for dim in catalog.dimensions if dim.name == primary)

    return CoreObstacle(
        primary_belief=primary,
        primary_score=primary_score,
        primary_max_score=primary_max,
        secondary_belief=secondary,
        key_behavior=key_behavior,
        pattern_type=PATTERN_TYPE_CORRELATED if correlated else PATTERN_TYPE_MULTI_POINT,
        severity_boost=CORRELATED_SEVERITY_BOOST if correlated else DEFAULT_SEVERITY_BOOST,
    )


def get_level(index: float) -> LevelInfo:
    return map_level(index, GROWTH_OBSTACLE_LEVELS)


def compute_scores(catalog: QuestionCatalog, responses: Mapping[Any, Any]) -> GrowthObstacleScores:
    answers = normalize_responses(responses)

    unanswered = count_unanswered(answers, catalog.dimensions) + count_unanswered(answers, catalog.behavior_patterns)
    if unanswered:
        logger.warning("Scoring growth obstacle assessment with unanswered questions",
                       extra={"unanswered_count": unanswered})

    belief_raw, belief_scores = calculate_belief_scores(catalog, answers)
    behavior_scores = calculate_behavior_scores(catalog, answers)
    pattern_scores = {
        pattern.name: normalize(behavior_scores[pattern.name].score, pattern.max_score, DISPLAY_SCALE)
        for pattern in catalog.behavior_patterns
    }
    overall_index = calculate_obstacle_index(belief_raw, behavior_scores, answers)
    core_obstacle = identify_core_obstacle(catalog, belief_raw, behavior_scores)

    logger.debug("Computed growth obstacle scores",
                 extra={"overall_index": overall_index, "primary_belief": core_obstacle.primary_belief,
                        "key_behavior": core_obstacle.key_behavior})

    return GrowthObstacleScores(
        belief_raw=belief_raw,
        belief_scores=belief_scores,
        behavior_scores=behavior_scores,
        pattern_scores=pattern_scores,
        overall_index=overall_index,
        level=get_level(overall_index),
        core_obstacle=core_obstacle,
    )
