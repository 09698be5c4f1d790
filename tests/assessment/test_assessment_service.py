import pytest

from services.scoring_engine.models import GrowthObstacleScores, MentalEnergyScores, ScoringModel
from src.constants import PromptKind
from src.prompts.formatter import SYSTEM_PERSONAS
from src.services.assessment import AssessmentService


@pytest.fixture
def growth_service(settings):
    return AssessmentService(settings=settings, scoring_model=ScoringModel.GROWTH_OBSTACLE)


@pytest.fixture
def energy_service(settings):
    return AssessmentService(settings=settings)


def test_default_model_comes_from_settings(energy_service):
    assert energy_service.scoring_model is ScoringModel.MENTAL_ENERGY_DRAIN
    assert isinstance(energy_service.score({}), MentalEnergyScores)


def test_explicit_model_overrides_settings(growth_service):
    assert growth_service.scoring_model is ScoringModel.GROWTH_OBSTACLE
    assert isinstance(growth_service.score({"6": 4}), GrowthObstacleScores)


def test_build_report_messages(energy_service):
    messages = energy_service.build_report_messages({"1": 3, "36": "昨晚又失眠了"})
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PERSONAS[PromptKind.DEEP_REPORT]
    assert "昨晚又失眠了" in messages[1]["content"]
    assert "内耗指数测评" in messages[1]["content"]


def test_report_prompt_reuses_given_scores(growth_service, mocker):
    scores = growth_service.score({"9": 4})
    spy = mocker.spy(growth_service.engine, "calculate_scores")
    prompt = growth_service.build_report_prompt({"9": 4}, scores)
    spy.assert_not_called()
    assert "成长阻碍探测器" in prompt


def test_build_brief_report_messages(growth_service):
    messages = growth_service.build_brief_report_messages({"48": "我不配", "9": 4})
    assert messages[0]["content"] == SYSTEM_PERSONAS[PromptKind.BRIEF_REPORT]
    assert "我不配" in messages[1]["content"]
    assert "核心卡点: 自我价值" in messages[1]["content"]


def test_brief_report_only_for_growth_model(energy_service):
    with pytest.raises(ValueError, match="Brief reports are not available"):
        energy_service.build_brief_report_messages({})


def test_open_answer_limit_follows_settings(settings):
    settings.open_answer_max_length = 4
    service = AssessmentService(settings=settings)
    data = service.build_user_data({"36": "一二三四五六"})
    assert data.open_responses.q36_breakdown == "一二三四"
