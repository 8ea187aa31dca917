"""Lifecycle of one user filling in one questionnaire."""

from enum import StrEnum

import structlog

from ..evaluator import EvaluationOutcome, SubmissionEvaluator
from ..exceptions import NotFoundError, PersistenceError, SessionStateError
from ..fill import FillEngine
from ..interfaces import IdentityProvider, QuestionnaireStore
from ..models import Questionnaire
from ..persistence import call_store

logger = structlog.get_logger(__name__)


class FillSession:
    """A fill session: load the questionnaire, collect responses, submit once.

    NOT_STARTED -> LOADING -> READY -> PASSED | FAILED, with LOADING -> ERROR when the
    questionnaire cannot be loaded. PASSED, FAILED and ERROR are terminal; a new
    attempt needs a new session.
    """

    class Status(StrEnum):
        NOT_STARTED = "not started"
        LOADING = "loading"
        READY = "ready"
        PASSED = "passed"
        FAILED = "failed"
        ERROR = "error"

    def __init__(
        self,
        store: QuestionnaireStore,
        identity: IdentityProvider,
        questionnaire_id: str,
        *,
        evaluator: SubmissionEvaluator | None = None,
    ) -> None:
        """Initialize a session that has not loaded anything yet."""
        self.store = store
        self.identity = identity
        self.questionnaire_id = questionnaire_id
        self.evaluator = evaluator or SubmissionEvaluator(store)
        self.status = self.Status.NOT_STARTED
        self.error: NotFoundError | PersistenceError | None = None
        self.outcome: EvaluationOutcome | None = None
        self._engine: FillEngine | None = None

    @property
    def questionnaire(self) -> Questionnaire:
        """The loaded questionnaire."""
        return self.engine.questionnaire

    @property
    def engine(self) -> FillEngine:
        """The response-capturing engine. Only available while READY."""
        self._require(self.Status.READY)
        assert self._engine is not None
        return self._engine

    async def load(self) -> Questionnaire:
        """Fetch the questionnaire and get ready to collect responses.

        Raises:
            NotFoundError: the store has no such questionnaire. The session ends in ERROR.
            PersistenceError: the store call failed. The session ends in ERROR.
        """
        self._require(self.Status.NOT_STARTED)
        self.status = self.Status.LOADING
        try:
            questionnaire = await call_store(
                "load", self.store.get_by_id(self.questionnaire_id), questionnaire_id=self.questionnaire_id
            )
            if questionnaire is None:
                raise NotFoundError(self.questionnaire_id)
        except (NotFoundError, PersistenceError) as e:
            self.status = self.Status.ERROR
            self.error = e
            logger.warning(
                "questionnaire_fill_load_failed",
                questionnaire_id=self.questionnaire_id,
                not_found=isinstance(e, NotFoundError),
            )
            raise

        self._engine = FillEngine(questionnaire)
        self.status = self.Status.READY
        return questionnaire

    async def submit(self) -> EvaluationOutcome:
        """Evaluate the collected responses for the current user.

        A failure to record a pass does not fail the submit: it is reported on
        `outcome.persistence_error`.
        """
        engine = self.engine
        user_id = self.identity.current_user_id()
        outcome = await self.evaluator.evaluate(engine.questionnaire, engine.responses, user_id)
        self.outcome = outcome
        self.status = self.Status.PASSED if outcome.passed else self.Status.FAILED
        return outcome

    def _require(self, status: "FillSession.Status") -> None:
        if self.status != status:
            raise SessionStateError(f"The fill session is {self.status}, expected {status}.")
