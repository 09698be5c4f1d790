import json
import logging
import sys

import pytest
from pydantic import ValidationError

from services.scoring_engine.models import ScoringModel
from src.core.config import AssessmentSettings
from src.core.logging_config import CustomJsonFormatter, setup_logging


def test_defaults():
    settings = AssessmentSettings(_env_file=None)
    assert settings.scoring_model is ScoringModel.MENTAL_ENERGY_DRAIN
    assert settings.catalog_dir is None
    assert settings.basic_info_max_length == 50
    assert settings.change_expectation_max_length == 100
    assert settings.open_answer_max_length == 500
    assert settings.high_score_summary_max_length == 2000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ASSESSMENT_SCORING_MODEL", "growth_obstacle")
    monkeypatch.setenv("ASSESSMENT_OPEN_ANSWER_MAX_LENGTH", "120")
    monkeypatch.setenv("ASSESSMENT_LOG_LEVEL", "debug")
    settings = AssessmentSettings(_env_file=None)
    assert settings.scoring_model is ScoringModel.GROWTH_OBSTACLE
    assert settings.open_answer_max_length == 120
    assert settings.log_level == "debug"


def test_unknown_scoring_model_is_rejected(monkeypatch):
    monkeypatch.setenv("ASSESSMENT_SCORING_MODEL", "astrology")
    with pytest.raises(ValidationError):
        AssessmentSettings(_env_file=None)


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = [h for h in root.handlers if not isinstance(h.formatter, CustomJsonFormatter)]
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_installs_one_json_handler(clean_root_logger):
    setup_logging("debug")
    setup_logging("warning")
    json_handlers = [h for h in clean_root_logger.handlers if isinstance(h.formatter, CustomJsonFormatter)]
    assert len(json_handlers) == 1
    assert json_handlers[0].stream is sys.stderr
    assert clean_root_logger.level == logging.WARNING


def test_json_formatter_fields():
    formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
    record = logging.LogRecord("scoring", logging.INFO, __file__, 10, "scored", None, None)
    record.total_score = 42
    payload = json.loads(formatter.format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "scored"
    assert payload["total_score"] == 42
    assert payload["lineno"] == 10
    assert payload["timestamp"] == record.created
