import pytest

from services.scoring_engine import (
    AssessmentEngine,
    GrowthObstacleEngine,
    GrowthObstacleScores,
    MentalEnergyDrainEngine,
    MentalEnergyScores,
    ScoringModel,
    UnknownScoringModelError,
    get_engine,
)


def test_get_engine_by_enum_and_name():
    assert isinstance(get_engine(ScoringModel.GROWTH_OBSTACLE), GrowthObstacleEngine)
    assert isinstance(get_engine("mental_energy_drain"), MentalEnergyDrainEngine)


def test_get_engine_unknown_model():
    with pytest.raises(UnknownScoringModelError):
        get_engine("enneagram")


def test_engines_share_cached_catalogs(growth_catalog):
    assert get_engine(ScoringModel.GROWTH_OBSTACLE).catalog is growth_catalog


def test_engine_accepts_explicit_catalog(energy_catalog):
    engine = MentalEnergyDrainEngine(catalog=energy_catalog)
    assert engine.catalog is energy_catalog


def test_calculate_scores_returns_model_specific_aggregate():
    assert isinstance(get_engine(ScoringModel.GROWTH_OBSTACLE).calculate_scores({}), GrowthObstacleScores)
    assert isinstance(get_engine(ScoringModel.MENTAL_ENERGY_DRAIN).calculate_scores({}), MentalEnergyScores)


def test_resolve_delegates_to_catalog():
    engine = get_engine(ScoringModel.GROWTH_OBSTACLE)
    assert engine.resolve(47, 4) == 5
    assert engine.resolve(47, 9) == 0


def test_map_level_per_model():
    assert get_engine(ScoringModel.GROWTH_OBSTACLE).map_level(5.5).label == "橙灯区 (中重度阻碍)"
    assert get_engine(ScoringModel.MENTAL_ENERGY_DRAIN).map_level(60).label == "中度内耗型"


def test_get_questions_for_presentation():
    questions = get_engine(ScoringModel.MENTAL_ENERGY_DRAIN).get_questions()
    assert len(questions) == 38
    assert questions[0]["type"] == "CHOICE"
    assert questions[0]["options"][0] == {"value": 0.0, "label": "秒选！跟着感觉走"}
    assert "options" in questions[0] and "placeholder" not in questions[0]
    assert questions[-1]["type"] == "OPEN"


def test_base_engine_is_abstract(growth_catalog):
    with pytest.raises(TypeError):
        AssessmentEngine(catalog=growth_catalog)
