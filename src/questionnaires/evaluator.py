"""This module contains the business logic for scoring questionnaire submissions."""

import typing as t
from dataclasses import dataclass

import structlog

from portal import settings

from .exceptions import NotFoundError, PersistenceError
from .interfaces import QuestionnaireStore
from .models import Question, Questionnaire, UserResponses
from .persistence import call_store

logger = structlog.get_logger(__name__)


# ---- Scoring ----


def is_answered_correctly(question: Question, selected: t.Iterable[str]) -> bool:
    """A question is correct iff the selected labels are exactly its correct labels.

    Order is irrelevant. A question without correct options is only correct when
    nothing is selected.
    """
    return frozenset(selected) == question.correct_labels


def count_correct(questionnaire: Questionnaire, responses: UserResponses) -> int:
    """Number of questions answered correctly. Unanswered questions count as an empty selection."""
    return sum(
        1 for question in questionnaire.questions if is_answered_correctly(question, responses.get(question.id, ()))
    )


@dataclass(frozen=True)
class EvaluationOutcome:
    """The result of evaluating one submission.

    `persistence_error` is set when the pass could not be recorded; the score is still valid and
    `questionnaire` is the one submitted, without the user added to `passed_users`.
    """

    correct_count: int
    passed: bool
    questionnaire: Questionnaire
    persistence_error: PersistenceError | None = None


# ---- The Evaluation Service Class ----


class SubmissionEvaluator:
    """Scores a submission and records the user in `passed_users` on a pass."""

    def __init__(self, store: QuestionnaireStore, *, deduplicate_passed_users: bool | None = None) -> None:
        """Initialize the evaluator.

        Args:
            store: Where a pass is persisted.
            deduplicate_passed_users: Skip the append when the user already passed.
                Defaults to settings.QUESTIONNAIRE_DEDUPLICATE_PASSED_USERS.
        """
        self.store = store
        self.deduplicate_passed_users = (
            settings.QUESTIONNAIRE_DEDUPLICATE_PASSED_USERS
            if deduplicate_passed_users is None
            else deduplicate_passed_users
        )

    async def evaluate(self, questionnaire: Questionnaire, responses: UserResponses, user_id: str) -> EvaluationOutcome:
        """Score the responses and, on a pass, persist the user as having passed.

        A fail neither changes nor persists anything. The pass threshold is inclusive.
        """
        correct_count = count_correct(questionnaire, responses)
        passed = correct_count >= questionnaire.pass_score
        logger.info(
            "questionnaire_evaluation_completed",
            questionnaire_id=questionnaire.id,
            user_id=user_id,
            correct_count=correct_count,
            pass_score=questionnaire.pass_score,
            passed=passed,
        )
        if not passed:
            return EvaluationOutcome(correct_count=correct_count, passed=False, questionnaire=questionnaire)

        if self.deduplicate_passed_users and questionnaire.has_passed(user_id):
            logger.info("questionnaire_already_passed", questionnaire_id=questionnaire.id, user_id=user_id)
            return EvaluationOutcome(correct_count=correct_count, passed=True, questionnaire=questionnaire)

        updated = questionnaire.model_copy(update={"passed_users": [*questionnaire.passed_users, user_id]}, deep=True)
        try:
            stored = await self._persist(updated)
        except PersistenceError as e:
            logger.error("passed_user_persist_failed", questionnaire_id=questionnaire.id, user_id=user_id)
            return EvaluationOutcome(
                correct_count=correct_count, passed=True, questionnaire=questionnaire, persistence_error=e
            )
        return EvaluationOutcome(correct_count=correct_count, passed=True, questionnaire=stored)

    async def _persist(self, questionnaire: Questionnaire) -> Questionnaire:
        if questionnaire.id is None:
            raise PersistenceError("Cannot record a pass on a questionnaire that was never saved.")
        try:
            return await call_store(
                "update", self.store.update(questionnaire.id, questionnaire), questionnaire_id=questionnaire.id
            )
        except NotFoundError as e:
            raise PersistenceError("The questionnaire no longer exists.", cause=e) from e
