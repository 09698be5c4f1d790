from .engine import AssessmentEngine, GrowthObstacleEngine, MentalEnergyDrainEngine, get_engine
from .models import (
    CatalogValidationError,
    GrowthObstacleScores,
    MentalEnergyScores,
    ScoringModel,
    UnknownScoringModelError,
)
