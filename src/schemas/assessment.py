from typing import Dict, Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from services.scoring_engine.models import GrowthObstacleScores, MentalEnergyScores, ScoringModel

class AssessmentRequest(BaseModel):
    answers: Dict[str, Any]  # question_id → raw answer (option index, scale value or text)
    scoring_model: Optional[ScoringModel] = None

# --- Prompt input ---

class BasicInfo(BaseModel):
    age_group: str = ""
    focus_areas: List[str] = Field(default_factory=list)
    stuck_duration: str = ""
    change_expectation: str = ""
    life_satisfaction: float = 5

class DetailedResponse(BaseModel):
    question: str
    text: str
    score: float
    max_score: float

class GrowthObstacleOpenResponses(BaseModel):
    q48_limiting_voice: str
    q49_fear: str
    q50_ideal_future: str

class MentalEnergyOpenResponses(BaseModel):
    q36_breakdown: str
    q37_vacation: str
    q38_status: str

class GrowthObstacleUserData(BaseModel):
    basic_info: BasicInfo
    scores: GrowthObstacleScores
    open_responses: GrowthObstacleOpenResponses
    detailed_responses: Dict[int, DetailedResponse]
    high_score_summary: str

class MentalEnergyUserData(BaseModel):
    scores: MentalEnergyScores
    open_responses: MentalEnergyOpenResponses
    detailed_responses: Dict[int, DetailedResponse]
    high_score_summary: str

# --- Brief report (parsed model reply) ---

class RelapseWarning(BaseModel):
    signal: str
    strategy: str

class WeeklyPlan(BaseModel):
    week1: List[str]
    week2: List[str]
    week3: List[str]

class BriefReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: str
    immediate_actions: List[str] = Field(..., alias="immediateActions")
    plan_21_days: WeeklyPlan = Field(..., alias="plan21Days")
    relapse_warnings: List[RelapseWarning] = Field(..., alias="relapseWarnings")
