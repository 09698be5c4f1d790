from enum import Enum
from typing import List, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


class ScoringModel(str, Enum):
    GROWTH_OBSTACLE = "growth_obstacle"
    MENTAL_ENERGY_DRAIN = "mental_energy_drain"


class QuestionType(str, Enum):
    SCALE = "SCALE"
    CHOICE = "CHOICE"
    OPEN = "OPEN"


# SCALE questions are answered on an implicit 1-10 range
SCALE_MIN = 1
SCALE_MAX = 10

# --- Catalog models (loaded from YAML) ---

class ChoiceOption(BaseModel):
    value: float
    label: str

class Question(BaseModel):
    id: int
    text: str
    type: QuestionType
    dimension: Optional[str] = None
    options: List[ChoiceOption] = Field(default_factory=list)
    placeholder: Optional[str] = None

    @property
    def max_value(self) -> float:
        """Highest score this question can contribute."""
        if self.type == QuestionType.CHOICE:
            return max((option.value for option in self.options), default=0)
        if self.type == QuestionType.SCALE:
            return SCALE_MAX
        return 0

class DimensionSpec(BaseModel):
    name: str
    max_score: float
    questions: List[int]

class QuestionCatalog(BaseModel):
    version: str
    name: str
    dimensions: List[DimensionSpec]
    behavior_patterns: List[DimensionSpec] = Field(default_factory=list)
    questions: List[Question]

    _questions_by_id: Dict[int, Question] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._questions_by_id = {q.id: q for q in self.questions}

    def get_question(self, question_id: int) -> Optional[Question]:
        return self._questions_by_id.get(question_id)

    def open_question_ids(self) -> List[int]:
        return [q.id for q in self.questions if q.type == QuestionType.OPEN]

# --- Score models (engine output) ---

class ScoresModel(BaseModel):
    """Immutable output record, serialised with camelCase keys for storage."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

class LevelInfo(ScoresModel):
    label: str
    emoji: str
    tags: List[str]
    percent: Optional[str] = None # Population share, only published for the energy model

class BehaviorPatternScore(ScoresModel):
    score: float
    level: str

class CoreObstacle(ScoresModel):
    primary_belief: str
    primary_score: float
    primary_max_score: float
    secondary_belief: Optional[str] = None
    key_behavior: Optional[str] = None
    pattern_type: str
    severity_boost: float

class GrowthObstacleScores(ScoresModel):
    belief_raw: Dict[str, float]
    belief_scores: Dict[str, float]
    behavior_scores: Dict[str, BehaviorPatternScore]
    pattern_scores: Dict[str, float]
    overall_index: float
    level: LevelInfo
    core_obstacle: CoreObstacle

class MentalEnergyScores(ScoresModel):
    dimension_scores: Dict[str, float]
    dimension_percentages: Dict[str, int]
    total_score: int
    level_info: LevelInfo
    beat_percent: int
    top_dimension: str

# Custom Error Classes
class CatalogValidationError(ValueError):
    """Raised when a question catalog is structurally valid YAML but inconsistent."""
    pass

class UnknownScoringModelError(ValueError):
    """Raised when a scoring model name does not match any registered engine."""
    pass
