import pytest

from services.scoring_engine.loader import get_catalog
from services.scoring_engine.models import ScoringModel, QuestionType
from src.core.config import AssessmentSettings


@pytest.fixture(scope="session")
def growth_catalog():
    """The packaged 50-question growth obstacle catalog."""
    return get_catalog(ScoringModel.GROWTH_OBSTACLE)


@pytest.fixture(scope="session")
def energy_catalog():
    """The packaged 38-question mental energy catalog."""
    return get_catalog(ScoringModel.MENTAL_ENERGY_DRAIN)


@pytest.fixture
def settings():
    """Settings built from defaults only, independent of the environment."""
    return AssessmentSettings(_env_file=None)


def max_option_index(question):
    """Index of the highest-value option of a choice question."""
    values = [option.value for option in question.options]
    return values.index(max(values))


@pytest.fixture
def answer_all():
    """Returns a builder that answers every choice question with the same option index."""
    def _answer_all(catalog, index):
        return {q.id: index for q in catalog.questions if q.type == QuestionType.CHOICE}
    return _answer_all


@pytest.fixture
def answer_max():
    """Returns a builder that picks the highest-value option for the given question ids."""
    def _answer_max(catalog, question_ids):
        return {qid: max_option_index(catalog.get_question(qid)) for qid in question_ids}
    return _answer_max
