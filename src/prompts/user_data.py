# src/prompts/user_data.py
# Collects the answer labels, salient answers and sanitized free text that
# the report prompts are built from.

import logging
from typing import Dict, Any, Mapping, Optional

from services.scoring_engine.definitions import (
    AGE_GROUP_QUESTION_ID,
    CHANGE_EXPECTATION_QUESTION_ID,
    FOCUS_AREA_QUESTION_ID,
    LIFE_SATISFACTION_QUESTION_ID,
    STUCK_DURATION_QUESTION_ID,
)
from services.scoring_engine.growth_obstacle import resolve_life_satisfaction
from services.scoring_engine.models import GrowthObstacleScores, MentalEnergyScores, QuestionCatalog, QuestionType
from services.scoring_engine.scorer import coerce_option_index, normalize_responses, resolve_answer

from ..constants import HIGH_SCORE_THRESHOLD, NO_HIGH_SCORE_TEXT, UNANSWERED_CHOICE_TEXT, UNANSWERED_OPEN_TEXT
from ..core.config import AssessmentSettings, assessment_settings
from ..schemas.assessment import (
    BasicInfo,
    DetailedResponse,
    GrowthObstacleOpenResponses,
    GrowthObstacleUserData,
    MentalEnergyOpenResponses,
    MentalEnergyUserData,
)
from .sanitizer import sanitize_for_ai

logger = logging.getLogger(__name__)

GROWTH_OBSTACLE_OPEN_QUESTIONS = {
    "q48_limiting_voice": 48,
    "q49_fear": 49,
    "q50_ideal_future": 50,
}

MENTAL_ENERGY_OPEN_QUESTIONS = {
    "q36_breakdown": 36,
    "q37_vacation": 37,
    "q38_status": 38,
}


def get_answer_text(catalog: QuestionCatalog, responses: Mapping[int, Any], question_id: int) -> Any:
    """Label of the chosen option for CHOICE questions, the raw answer otherwise."""
    question = catalog.get_question(question_id)
    raw_value = responses.get(question_id)
    if question is not None and question.type == QuestionType.CHOICE:
        index = coerce_option_index(raw_value)
        if index is None or not 0 <= index < len(question.options):
            return UNANSWERED_CHOICE_TEXT
        return question.options[index].label
    return raw_value


def collect_detailed_responses(catalog: QuestionCatalog, responses: Mapping[int, Any]) -> Dict[int, DetailedResponse]:
    detailed = {}
    for question in catalog.questions:
        if question.type != QuestionType.CHOICE or responses.get(question.id) is None:
            continue
        detailed[question.id] = DetailedResponse(
            question=question.text,
            text=get_answer_text(catalog, responses, question.id),
            score=resolve_answer(catalog, question.id, responses[question.id]),
            max_score=question.max_value,
        )
    return detailed


def format_number(value: float) -> str:
    """Renders 3.0 as "3" and keeps fractional values as they are."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_high_score_summary(detailed: Mapping[int, DetailedResponse]) -> str:
    """Lists the answers that scored at least HIGH_SCORE_THRESHOLD points."""
    output = ""
    for question_id, entry in detailed.items():
        if entry.score >= HIGH_SCORE_THRESHOLD:
            output += f"\nQ{question_id}: {entry.question}\n"
            output += f"你的选择：{entry.text}\n"
            output += f"得分：{format_number(entry.score)}/{format_number(entry.max_score)}\n"
    return output or NO_HIGH_SCORE_TEXT


def _open_answers(responses: Mapping[int, Any], question_ids: Mapping[str, int], max_length: int) -> Dict[str, str]:
    answers = {}
    for field, question_id in question_ids.items():
        answers[field] = sanitize_for_ai(responses.get(question_id), max_length) or UNANSWERED_OPEN_TEXT
    return answers


def _choice_label(catalog: QuestionCatalog, responses: Mapping[int, Any], question_id: int, max_length: int) -> str:
    if responses.get(question_id) is None:
        return ""
    return sanitize_for_ai(get_answer_text(catalog, responses, question_id), max_length)


def build_growth_obstacle_user_data(catalog: QuestionCatalog, responses: Mapping[Any, Any],
                                    scores: GrowthObstacleScores,
                                    settings: Optional[AssessmentSettings] = None) -> GrowthObstacleUserData:
    settings = settings or assessment_settings
    answers = normalize_responses(responses)
    info_limit = settings.basic_info_max_length

    focus_area = _choice_label(catalog, answers, FOCUS_AREA_QUESTION_ID, info_limit)
    basic_info = BasicInfo(
        age_group=_choice_label(catalog, answers, AGE_GROUP_QUESTION_ID, info_limit),
        focus_areas=[focus_area] if focus_area else [],
        stuck_duration=_choice_label(catalog, answers, STUCK_DURATION_QUESTION_ID, info_limit),
        change_expectation=_choice_label(catalog, answers, CHANGE_EXPECTATION_QUESTION_ID,
                                         settings.change_expectation_max_length),
        life_satisfaction=resolve_life_satisfaction(answers.get(LIFE_SATISFACTION_QUESTION_ID)),
    )

    # Only belief and behavior questions carry points worth quoting back
    detailed = collect_detailed_responses(catalog, answers)
    scored_ids = {qid for dim in catalog.dimensions + catalog.behavior_patterns for qid in dim.questions}
    salient = {qid: entry for qid, entry in detailed.items() if qid in scored_ids}

    return GrowthObstacleUserData(
        basic_info=basic_info,
        scores=scores,
        open_responses=GrowthObstacleOpenResponses(
            **_open_answers(answers, GROWTH_OBSTACLE_OPEN_QUESTIONS, settings.open_answer_max_length)
        ),
        detailed_responses=detailed,
        high_score_summary=sanitize_for_ai(format_high_score_summary(salient),
                                           settings.high_score_summary_max_length),
    )


def build_mental_energy_user_data(catalog: QuestionCatalog, responses: Mapping[Any, Any],
                                  scores: MentalEnergyScores,
                                  settings: Optional[AssessmentSettings] = None) -> MentalEnergyUserData:
    settings = settings or assessment_settings
    answers = normalize_responses(responses)
    detailed = collect_detailed_responses(catalog, answers)

    return MentalEnergyUserData(
        scores=scores,
        open_responses=MentalEnergyOpenResponses(
            **_open_answers(answers, MENTAL_ENERGY_OPEN_QUESTIONS, settings.open_answer_max_length)
        ),
        detailed_responses=detailed,
        high_score_summary=sanitize_for_ai(format_high_score_summary(detailed),
                                           settings.high_score_summary_max_length),
    )
