import logging
from typing import Dict, List, Any, Mapping, Optional, Union

from services.scoring_engine.engine import AssessmentEngine, get_engine
from services.scoring_engine.models import GrowthObstacleScores, MentalEnergyScores, ScoringModel

from ..constants import PromptKind
from ..core.config import AssessmentSettings, assessment_settings
from ..prompts.formatter import (
    build_chat_messages,
    format_brief_report_prompt,
    format_growth_obstacle_prompt,
    format_mental_energy_prompt,
)
from ..prompts.user_data import build_growth_obstacle_user_data, build_mental_energy_user_data

logger = logging.getLogger(__name__)

Scores = Union[GrowthObstacleScores, MentalEnergyScores]

# (user data assembly, deep report template) per scoring model
DEEP_REPORT_BUILDERS = {
    ScoringModel.GROWTH_OBSTACLE: (build_growth_obstacle_user_data, format_growth_obstacle_prompt),
    ScoringModel.MENTAL_ENERGY_DRAIN: (build_mental_energy_user_data, format_mental_energy_prompt),
}


class AssessmentService:
    """
    Scores a submitted response map and prepares the chat messages for the
    report-writing model. Sending them is left to the caller.
    """
    def __init__(self, settings: Optional[AssessmentSettings] = None,
                 scoring_model: Optional[Union[str, ScoringModel]] = None):
        self.settings = settings or assessment_settings
        self.engine: AssessmentEngine = get_engine(scoring_model or self.settings.scoring_model,
                                                   self.settings.catalog_dir)

    @property
    def scoring_model(self) -> ScoringModel:
        return self.engine.scoring_model

    def score(self, responses: Mapping[Any, Any]) -> Scores:
        return self.engine.calculate_scores(responses)

    def build_user_data(self, responses: Mapping[Any, Any], scores: Optional[Scores] = None):
        build_data, _ = DEEP_REPORT_BUILDERS[self.scoring_model]
        if scores is None:
            scores = self.score(responses)
        return build_data(self.engine.catalog, responses, scores, self.settings)

    def build_report_prompt(self, responses: Mapping[Any, Any], scores: Optional[Scores] = None) -> str:
        _, format_prompt = DEEP_REPORT_BUILDERS[self.scoring_model]
        return format_prompt(self.build_user_data(responses, scores))

    def build_report_messages(self, responses: Mapping[Any, Any], scores: Optional[Scores] = None) -> List[Dict[str, str]]:
        prompt = self.build_report_prompt(responses, scores)
        logger.info("Prepared deep report prompt",
                    extra={"scoring_model": self.scoring_model.value, "prompt_length": len(prompt)})
        return build_chat_messages(prompt, PromptKind.DEEP_REPORT)

    def build_brief_report_messages(self, responses: Mapping[Any, Any],
                                    scores: Optional[GrowthObstacleScores] = None) -> List[Dict[str, str]]:
        """Messages for the short JSON guide, only offered for the growth obstacle assessment."""
        if self.scoring_model != ScoringModel.GROWTH_OBSTACLE:
            raise ValueError(f"Brief reports are not available for scoring model '{self.scoring_model.value}'")
        user_data = self.build_user_data(responses, scores)
        open_answers = list(user_data.open_responses.model_dump().values())
        prompt = format_brief_report_prompt(user_data.scores, open_answers)
        return build_chat_messages(prompt, PromptKind.BRIEF_REPORT)
