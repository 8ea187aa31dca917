"""
This conftest.py provides fixtures shared by all apps.
"""

import typing as t

import faker
import pytest
import structlog
from pytest import MonkeyPatch

from portal import settings


@pytest.fixture(autouse=True)
def clear_log_context() -> t.Iterator[None]:
    """Make sure no bound structlog context leaks from one test into the next."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def default_questionnaire_policies(monkeypatch: MonkeyPatch) -> None:
    """Pin the questionnaire policies to their defaults regardless of the environment."""
    monkeypatch.setattr(settings, "QUESTIONNAIRE_AUTO_CLAMP_PASS_SCORE", True)
    monkeypatch.setattr(settings, "QUESTIONNAIRE_DEDUPLICATE_PASSED_USERS", True)


class UserIdFactory:
    """Factory for user ids as handed out by the identity provider."""

    fake = faker.Faker()

    def __call__(self) -> str:
        return self.fake.uuid4()


@pytest.fixture
def user_id_factory() -> UserIdFactory:
    return UserIdFactory()


@pytest.fixture
def user_id(user_id_factory: UserIdFactory) -> str:
    """The id of the user the tests act as."""
    return user_id_factory()
