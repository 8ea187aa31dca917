import structlog

from ..builder import QuestionnaireBuilder
from ..exceptions import NotFoundError
from ..interfaces import IdentityProvider, QuestionnaireStore
from ..models import Questionnaire, QuestionnaireSummary
from ..persistence import call_store
from .fill_session import FillSession

logger = structlog.get_logger(__name__)


class QuestionnaireService:
    """Entry point for the questionnaire screens: listing, authoring, filling, deleting."""

    def __init__(self, store: QuestionnaireStore, identity: IdentityProvider) -> None:
        """Initialize questionnaire service."""
        self.store = store
        self.identity = identity

    async def list_questionnaires(self) -> list[QuestionnaireSummary]:
        """List questionnaires with whether the current user has passed each one."""
        questionnaires = await call_store("list", self.store.list())
        user_id = self.identity.current_user_id()
        return [
            QuestionnaireSummary(
                id=questionnaire.id or "",
                title=questionnaire.title,
                description=questionnaire.description,
                passed=questionnaire.has_passed(user_id),
            )
            for questionnaire in questionnaires
        ]

    async def get_questionnaire(self, questionnaire_id: str) -> Questionnaire:
        """Fetch one questionnaire.

        Raises:
            NotFoundError: the store has no such questionnaire.
            PersistenceError: the store call failed.
        """
        questionnaire = await call_store(
            "load", self.store.get_by_id(questionnaire_id), questionnaire_id=questionnaire_id
        )
        if questionnaire is None:
            raise NotFoundError(questionnaire_id)
        return questionnaire

    async def delete_questionnaire(self, questionnaire_id: str) -> None:
        """Delete a questionnaire. No cascading side effects."""
        await call_store("delete", self.store.delete(questionnaire_id), questionnaire_id=questionnaire_id)
        logger.info("questionnaire_deleted", questionnaire_id=questionnaire_id)

    def new_builder(self) -> QuestionnaireBuilder:
        """Start authoring a new questionnaire."""
        return QuestionnaireBuilder(self.store)

    def fill_session(self, questionnaire_id: str) -> FillSession:
        """Start a fill session for the current user. Call `load()` on it next."""
        return FillSession(self.store, self.identity, questionnaire_id)
