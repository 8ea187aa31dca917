import typing as t

import structlog

from . import exceptions
from .models import Question

if t.TYPE_CHECKING:
    from .builder import QuestionnaireBuilder

logger = structlog.get_logger(__name__)


class QuestionnaireEditor:
    """In-place editing of questions already added to a draft.

    At most one question is edited at a time. Edits go to a private copy and reach
    the draft only on a successful `commit_edit()`; a rejected commit leaves the
    session open so the caller can fix the question and retry. The session follows
    the question by id, so it survives other questions being added or removed.
    """

    def __init__(self, builder: "QuestionnaireBuilder") -> None:
        """Initialize the editor for the builder's draft."""
        self.builder = builder
        self.edited_question: Question | None = None

    @property
    def questions(self) -> list[Question]:
        """The draft's questions, as previewed."""
        return self.builder.draft.questions

    @property
    def is_editing(self) -> bool:
        """Whether an edit session is open."""
        return self.edited_question is not None

    @property
    def editing_index(self) -> int | None:
        """Current position of the edited question in the draft, or None."""
        if self.edited_question is None:
            return None
        return self._position_of(self.edited_question)

    def start_edit(self, index: int) -> Question:
        """Open an edit session on the question at `index`, replacing any open one."""
        question = self.builder.question_at(index)
        self.edited_question = question.model_copy(deep=True)
        return self.edited_question

    def update_edited_question_text(self, text: str) -> None:
        """Change the text of the edited question."""
        self._edited().question_text = text

    def update_edited_answer_label(self, option_index: int, text: str) -> None:
        """Change the label of one option of the edited question."""
        self._edited().answer_options[option_index].label = text

    def toggle_edited_answer_correctness(self, option_index: int) -> None:
        """Flip whether one option of the edited question is correct."""
        option = self._edited().answer_options[option_index]
        option.is_correct = not option.is_correct

    def commit_edit(self) -> Question:
        """Write the edited question back into the draft in place of the original.

        Raises:
            InvalidEditError: the text is blank or no option is marked correct.
            InvalidQuestionError: an option label is blank or duplicated.
            EditSessionError: the original question is no longer in the draft. The session is closed.
        """
        edited = self._edited()
        index = self._position_of(edited)
        if index is None:
            self.cancel_edit()
            raise exceptions.EditSessionError(f"Question {edited.id} is no longer part of the draft.")
        if not edited.question_text.strip() or not any(option.is_correct for option in edited.answer_options):
            raise exceptions.InvalidEditError("cannot save: no correct answer marked, or empty question text")

        committed = self.builder.edit_question(index, edited)
        logger.debug("questionnaire_draft_question_edited", question_id=str(committed.id), index=index)
        self.cancel_edit()
        return committed

    def cancel_edit(self) -> None:
        """Discard the open edit session, if any."""
        self.edited_question = None

    def remove_question(self, index: int) -> Question:
        """Remove a question from the draft, ending the edit session if it was the edited one."""
        removed = self.builder.remove_question(index)
        if self.edited_question is not None and removed.id == self.edited_question.id:
            self.cancel_edit()
        return removed

    def _position_of(self, question: Question) -> int | None:
        return next((i for i, q in enumerate(self.builder.draft.questions) if q.id == question.id), None)

    def _edited(self) -> Question:
        if self.edited_question is None:
            raise exceptions.EditSessionError("No question is being edited.")
        return self.edited_question
