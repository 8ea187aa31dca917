import asyncio
import typing as t
from uuid import uuid4

import structlog

from .exceptions import NotFoundError
from .interfaces import IdentityProvider, QuestionnaireStore
from .models import Questionnaire

logger = structlog.get_logger(__name__)


class InMemoryQuestionnaireStore(QuestionnaireStore):
    """A process-local store for development and testing.

    Records are copied on the way in and out, so callers never share state with the store.
    Writes are serialized, and `update` keeps passed users that a concurrent writer
    added after the caller loaded its copy.
    """

    def __init__(self, questionnaires: t.Iterable[Questionnaire] = ()) -> None:
        """Initialize the store, optionally seeded. Seeded records without an id get one."""
        self._records: dict[str, Questionnaire] = {}
        self._lock = asyncio.Lock()
        for questionnaire in questionnaires:
            questionnaire_id = questionnaire.id or str(uuid4())
            self._records[questionnaire_id] = questionnaire.model_copy(update={"id": questionnaire_id}, deep=True)

    async def create(self, questionnaire: Questionnaire) -> Questionnaire:
        """Store a copy under a fresh id."""
        async with self._lock:
            questionnaire_id = str(uuid4())
            stored = questionnaire.model_copy(update={"id": questionnaire_id}, deep=True)
            self._records[questionnaire_id] = stored
        logger.debug("in_memory_store_created", questionnaire_id=questionnaire_id)
        return stored.model_copy(deep=True)

    async def get_by_id(self, questionnaire_id: str) -> Questionnaire | None:
        """Return a copy, or None."""
        stored = self._records.get(questionnaire_id)
        return stored.model_copy(deep=True) if stored else None

    async def update(self, questionnaire_id: str, questionnaire: Questionnaire) -> Questionnaire:
        """Replace the record, merging in passed users the caller has not seen."""
        async with self._lock:
            current = self._records.get(questionnaire_id)
            if current is None:
                raise NotFoundError(questionnaire_id)
            unseen = [user_id for user_id in current.passed_users if user_id not in questionnaire.passed_users]
            stored = questionnaire.model_copy(
                update={"id": questionnaire_id, "passed_users": [*questionnaire.passed_users, *unseen]}, deep=True
            )
            self._records[questionnaire_id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, questionnaire_id: str) -> None:
        """Remove the record."""
        async with self._lock:
            if self._records.pop(questionnaire_id, None) is None:
                raise NotFoundError(questionnaire_id)

    async def list(self) -> t.List[Questionnaire]:
        """Return copies of all records, in insertion order."""
        return [stored.model_copy(deep=True) for stored in self._records.values()]


class StaticIdentityProvider(IdentityProvider):
    """An identity provider that always answers with the same user."""

    def __init__(self, user_id: str) -> None:
        """Initialize with the user to act as."""
        self.user_id = user_id

    def current_user_id(self) -> str:
        """Return the configured user id."""
        return self.user_id
