"""conftest.py: Fixtures for the questionnaires app."""

import typing as t

import pytest

from questionnaires.backends import InMemoryQuestionnaireStore, StaticIdentityProvider
from questionnaires.builder import QuestionnaireBuilder
from questionnaires.models import AnswerOption, Question, Questionnaire


class FailingStore:
    """A store whose every call fails, by default like an unreachable server."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[str] = []
        self.error = error or ConnectionError("store unreachable")

    async def create(self, questionnaire: Questionnaire) -> Questionnaire:
        self.calls.append("create")
        raise self.error

    async def get_by_id(self, questionnaire_id: str) -> Questionnaire | None:
        self.calls.append("get_by_id")
        raise self.error

    async def update(self, questionnaire_id: str, questionnaire: Questionnaire) -> Questionnaire:
        self.calls.append("update")
        raise self.error

    async def delete(self, questionnaire_id: str) -> None:
        self.calls.append("delete")
        raise self.error

    async def list(self) -> t.List[Questionnaire]:
        self.calls.append("list")
        raise self.error


@pytest.fixture
def failing_store() -> FailingStore:
    """Provides a store that fails every call."""
    return FailingStore()


@pytest.fixture
def capital_question() -> Question:
    """Provides a single-answer question: exactly one correct option."""
    return Question(
        question_text="Which is the capital?",
        answer_options=[AnswerOption(label="Paris", is_correct=True), AnswerOption(label="London")],
    )


@pytest.fixture
def multi_answer_question() -> Question:
    """Provides a question with two correct options out of three."""
    return Question(
        question_text="Which letters are vowels?",
        answer_options=[
            AnswerOption(label="A", is_correct=True),
            AnswerOption(label="B", is_correct=True),
            AnswerOption(label="C"),
        ],
    )


@pytest.fixture
def no_correct_answer_question() -> Question:
    """Provides a question without any correct option."""
    return Question(
        question_text="Which colors do you like?",
        answer_options=[AnswerOption(label="Red"), AnswerOption(label="Green"), AnswerOption(label="Blue")],
    )


@pytest.fixture
def questionnaire(capital_question: Question) -> Questionnaire:
    """Provides a stored questionnaire with the capital question and a pass score of 1."""
    return Questionnaire(
        id="capitals",
        title="Capitals",
        description="Know your capitals.",
        questions=[capital_question],
        pass_score=1,
    )


@pytest.fixture
def store(questionnaire: Questionnaire) -> InMemoryQuestionnaireStore:
    """Provides an in-memory store seeded with the questionnaire."""
    return InMemoryQuestionnaireStore([questionnaire])


@pytest.fixture
def identity(user_id: str) -> StaticIdentityProvider:
    """Provides an identity provider acting as the test user."""
    return StaticIdentityProvider(user_id)


@pytest.fixture
def builder(store: InMemoryQuestionnaireStore) -> QuestionnaireBuilder:
    """Provides a builder with an empty draft."""
    return QuestionnaireBuilder(store)
