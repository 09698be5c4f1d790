import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Mapping, Optional, Union

from . import growth_obstacle, mental_energy
from .loader import get_catalog, resolve_scoring_model
from .models import (
    GrowthObstacleScores,
    LevelInfo,
    MentalEnergyScores,
    QuestionCatalog,
    ScoringModel,
)
from .scorer import resolve_answer

logger = logging.getLogger(__name__)


class AssessmentEngine(ABC):
    """
    Scores one questionnaire model. Subclasses bind a catalog to that
    model's composite and level algorithms.
    """
    scoring_model: ScoringModel

    def __init__(self, catalog: Optional[QuestionCatalog] = None, catalog_dir: Optional[str] = None):
        """
        Args:
            catalog: An already validated catalog. Loaded (and cached) from
                     the packaged YAML assets when omitted.
            catalog_dir: Directory to load the catalog from instead of the packaged assets.
        """
        self.catalog = catalog if catalog is not None else get_catalog(self.scoring_model, catalog_dir)

    def get_questions(self) -> List[Dict[str, Any]]:
        """Returns the question list in presentation order, as plain dictionaries."""
        return [q.model_dump(mode="json", exclude_none=True) for q in self.catalog.questions]

    def resolve(self, question_id: int, raw_value: Any) -> float:
        return resolve_answer(self.catalog, question_id, raw_value)

    @abstractmethod
    def calculate_scores(self, responses: Mapping[Any, Any]):
        """
        Scores a full response map for this model.
        This method must be implemented by subclasses.
        """
        pass

    @abstractmethod
    def map_level(self, score: float) -> LevelInfo:
        """Maps a composite score onto this model's level bands."""
        pass


class GrowthObstacleEngine(AssessmentEngine):
    scoring_model = ScoringModel.GROWTH_OBSTACLE

    def calculate_scores(self, responses: Mapping[Any, Any]) -> GrowthObstacleScores:
        return growth_obstacle.compute_scores(self.catalog, responses)

    def map_level(self, score: float) -> LevelInfo:
        return growth_obstacle.get_level(score)


class MentalEnergyDrainEngine(AssessmentEngine):
    scoring_model = ScoringModel.MENTAL_ENERGY_DRAIN

    def calculate_scores(self, responses: Mapping[Any, Any]) -> MentalEnergyScores:
        return mental_energy.compute_scores(self.catalog, responses)

    def map_level(self, score: float) -> LevelInfo:
        return mental_energy.get_level_info(score)


ENGINES = {
    ScoringModel.GROWTH_OBSTACLE: GrowthObstacleEngine,
    ScoringModel.MENTAL_ENERGY_DRAIN: MentalEnergyDrainEngine,
}


def get_engine(model: Union[str, ScoringModel], catalog_dir: Optional[str] = None) -> AssessmentEngine:
    """Builds the engine registered for a scoring model name."""
    scoring_model = resolve_scoring_model(model)
    logger.debug("Selecting scoring engine", extra={"scoring_model": scoring_model.value})
    return ENGINES[scoring_model](catalog_dir=catalog_dir)
