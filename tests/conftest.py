import pytest

from mindcheck.catalog import QuestionCatalog
from mindcheck.questionnaire import AdaptiveQuestionnaire
from mindcheck.models.session import SessionContext


@pytest.fixture(scope="session")
def catalog():
    """Load the packaged question catalog once for the entire test session."""
    c = QuestionCatalog()
    c.load()
    return c


@pytest.fixture
def questionnaire(catalog):
    return AdaptiveQuestionnaire(catalog)


@pytest.fixture
def ctx(questionnaire):
    """Fresh session context with unset answers."""
    c = SessionContext(user_id="u1", session_id="s1")
    questionnaire.reset(c)
    return c
