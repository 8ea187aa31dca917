from typing import Protocol

from .models import Questionnaire

# ---- The Protocols ----


class QuestionnaireStore(Protocol):
    """Defines the interface for the remote store that persists questionnaires.

    Implementations may raise any exception on transport or server failure; callers
    in this app wrap those into `PersistenceError`. Concurrent `update` calls that
    add passed users must not lose each other's appends.
    """

    async def create(self, questionnaire: Questionnaire) -> Questionnaire:
        """Persists a questionnaire without an id and returns it with the id assigned by the store."""

    async def get_by_id(self, questionnaire_id: str) -> Questionnaire | None:
        """Returns the questionnaire, or None if the store has no questionnaire with that id."""

    async def update(self, questionnaire_id: str, questionnaire: Questionnaire) -> Questionnaire:
        """Replaces the stored questionnaire and returns the stored result."""

    async def list(self) -> list[Questionnaire]:
        """Returns all questionnaires."""

    async def delete(self, questionnaire_id: str) -> None:
        """Deletes the questionnaire."""


class IdentityProvider(Protocol):
    """Defines the interface for resolving the user the portal is acting for."""

    def current_user_id(self) -> str:
        """Returns the id of the current user."""
