from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
import os

from services.scoring_engine.models import ScoringModel

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

class AssessmentSettings(BaseSettings):
    scoring_model: ScoringModel = ScoringModel.MENTAL_ENERGY_DRAIN
    catalog_dir: Optional[str] = None  # Defaults to the catalogs packaged with the engine
    log_level: str = "INFO"

    # Character limits applied before user text reaches a prompt
    basic_info_max_length: int = 50
    change_expectation_max_length: int = 100
    open_answer_max_length: int = 500
    high_score_summary_max_length: int = 2000

    model_config = SettingsConfigDict(env_prefix='ASSESSMENT_')

# Instantiate settings
assessment_settings = AssessmentSettings()
