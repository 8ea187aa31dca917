"""Presentation and response capture for filling in a questionnaire.

Each question is shown with the control its correct options call for: an exclusive
(radio-like) control when exactly one option is correct, a multi-choice (checkbox-like)
control otherwise. Responses are collected in memory and only consumed by a submit.
"""

from uuid import UUID

import structlog
from pydantic import BaseModel

from . import exceptions
from .models import Control, ExclusiveChoice, MultiChoice, Question, Questionnaire, UserResponses

logger = structlog.get_logger(__name__)


class OptionState(BaseModel):
    label: str
    selected: bool
    disabled: bool


class QuestionControl(BaseModel):
    """Everything needed to draw one question."""

    question_id: UUID
    question_text: str
    control: Control
    options: list[OptionState]


def render_question(question: Question, responses: UserResponses) -> QuestionControl:
    """Describe the control for a question given the responses so far.

    In a multi-choice control that has reached its cap, every unselected option is
    disabled. Selected options stay enabled so they can always be deselected.
    """
    control = question.control
    selected = responses.get(question.id, [])
    at_cap = isinstance(control, MultiChoice) and len(selected) >= control.cap
    return QuestionControl(
        question_id=question.id,
        question_text=question.question_text,
        control=control,
        options=[
            OptionState(label=label, selected=label in selected, disabled=at_cap and label not in selected)
            for label in question.labels
        ],
    )


class FillEngine:
    """Collects one user's responses to a questionnaire."""

    def __init__(self, questionnaire: Questionnaire) -> None:
        """Initialize with no responses."""
        self.questionnaire = questionnaire
        self.responses: UserResponses = {}
        self._questions = {question.id: question for question in questionnaire.questions}
        self._controls: dict[UUID, ExclusiveChoice | MultiChoice] = {
            question.id: question.control for question in questionnaire.questions
        }

    def render(self) -> list[QuestionControl]:
        """Describe every question, in order."""
        return [render_question(question, self.responses) for question in self.questionnaire.questions]

    def render_question(self, question_key: UUID | str) -> QuestionControl:
        """Describe one question."""
        return render_question(self._question(question_key), self.responses)

    def selected(self, question_key: UUID | str) -> list[str]:
        """The labels currently selected for a question."""
        return list(self.responses.get(self._question(question_key).id, []))

    def on_exclusive_select(self, question_key: UUID | str, option_label: str) -> bool:
        """Make `option_label` the only selection of an exclusive question.

        Returns:
            Whether the responses changed.
        """
        question = self._question(question_key)
        self._check_label(question, option_label)
        if not isinstance(self._controls[question.id], ExclusiveChoice):
            raise exceptions.ControlMismatchError(f"Question {question.id} allows more than one selection.")
        if self.responses.get(question.id) == [option_label]:
            return False
        self.responses[question.id] = [option_label]
        return True

    def on_option_toggle(self, question_key: UUID | str, option_label: str, selected: bool) -> bool:
        """Select or deselect a single option.

        Selecting on an exclusive question replaces the previous selection. Selecting
        on a multi-choice question that is at its cap does nothing.

        Returns:
            Whether the responses changed.
        """
        question = self._question(question_key)
        self._check_label(question, option_label)
        control = self._controls[question.id]
        current = self.responses.get(question.id, [])

        if not selected:
            if option_label not in current:
                return False
            self.responses[question.id] = [label for label in current if label != option_label]
            return True

        if isinstance(control, ExclusiveChoice):
            return self.on_exclusive_select(question.id, option_label)
        if option_label in current:
            return False
        if len(current) >= control.cap:
            logger.debug("questionnaire_option_disabled", question_id=str(question.id), cap=control.cap)
            return False
        self.responses[question.id] = [*current, option_label]
        return True

    def _question(self, question_key: UUID | str) -> Question:
        try:
            question_id = question_key if isinstance(question_key, UUID) else UUID(question_key)
        except ValueError as e:
            raise exceptions.UnknownQuestionError(f"{question_key!r} is not a question id.") from e
        question = self._questions.get(question_id)
        if question is None:
            raise exceptions.UnknownQuestionError(f"Question {question_id} is not part of this questionnaire.")
        return question

    def _check_label(self, question: Question, option_label: str) -> None:
        if option_label not in question.labels:
            raise exceptions.UnknownOptionError(f"Question {question.id} has no option {option_label!r}.")
