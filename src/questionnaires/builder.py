"""Authoring of questionnaire drafts.

A `QuestionnaireBuilder` is an explicit in-memory session around one draft. The draft
is mutated locally and reaches the store only through `save()`, which persists it once
and resets the builder to an empty draft.
"""

import typing as t

import structlog
from pydantic import ValidationError as PydanticValidationError

from portal import settings

from . import exceptions
from .interfaces import QuestionnaireStore
from .models import AnswerOption, Question, Questionnaire
from .persistence import call_store

if t.TYPE_CHECKING:
    from .editor import QuestionnaireEditor

logger = structlog.get_logger(__name__)


def _build_question(**data: t.Any) -> Question:
    try:
        return Question.model_validate(data)
    except PydanticValidationError as e:
        raise exceptions.InvalidQuestionError(str(e)) from e


# ---- QuestionDraft ----


class QuestionDraft:
    """The "new question" card: a question being typed in before it is added to the draft.

    Starts with one blank option. Nothing is validated until `build()`.
    """

    def __init__(self) -> None:
        """Initialize an empty card."""
        self.question_text = ""
        self.answer_options: list[AnswerOption] = []
        self.reset()

    def reset(self) -> None:
        """Clear the card back to its initial state."""
        self.question_text = ""
        self.answer_options = [AnswerOption.model_construct(label="", is_correct=False)]

    def add_option(self) -> None:
        """Append a blank option."""
        self.answer_options.append(AnswerOption.model_construct(label="", is_correct=False))

    def set_option_label(self, index: int, text: str) -> None:
        """Change the label of an option."""
        self.answer_options[index].label = text

    def toggle_option_correctness(self, index: int) -> None:
        """Flip whether an option is marked correct."""
        self.answer_options[index].is_correct = not self.answer_options[index].is_correct

    def build(self) -> Question:
        """Validate the card into a `Question`."""
        return _build_question(
            question_text=self.question_text,
            answer_options=[option.model_dump() for option in self.answer_options],
        )


# ---- QuestionnaireBuilder ----


class QuestionnaireBuilder:
    def __init__(self, store: QuestionnaireStore, *, auto_clamp_pass_score: bool | None = None) -> None:
        """Initialize the builder with an empty draft.

        Args:
            store: Where `save()` creates the questionnaire.
            auto_clamp_pass_score: Re-clamp the pass score after every question change.
                Defaults to settings.QUESTIONNAIRE_AUTO_CLAMP_PASS_SCORE.
        """
        self.store = store
        self.auto_clamp_pass_score = (
            settings.QUESTIONNAIRE_AUTO_CLAMP_PASS_SCORE if auto_clamp_pass_score is None else auto_clamp_pass_score
        )
        self.draft = Questionnaire()

    # ---- Questions ----

    def add_question(
        self, question_text: str, answer_options: t.Sequence[AnswerOption | dict[str, t.Any]]
    ) -> Question:
        """Append a question to the draft.

        Whether any option is marked correct is not checked here; the editor enforces it.

        Raises:
            InvalidQuestionError: blank text, no options, or blank/duplicate labels.
        """
        options = [option.model_dump() if isinstance(option, AnswerOption) else option for option in answer_options]
        question = _build_question(question_text=question_text, answer_options=options)
        self.draft.questions.append(question)
        self._after_questions_changed()
        logger.debug("questionnaire_draft_question_added", question_id=str(question.id))
        return question

    def add_question_from_draft(self, question_draft: QuestionDraft) -> Question:
        """Append the question typed into a draft card and reset the card."""
        question = question_draft.build()
        self.draft.questions.append(question)
        self._after_questions_changed()
        question_draft.reset()
        return question

    def remove_question(self, index: int) -> Question:
        """Remove and return the question at `index`."""
        self._check_index(index)
        question = self.draft.questions.pop(index)
        self._after_questions_changed()
        return question

    def edit_question(self, index: int, updated_question: Question) -> Question:
        """Replace the question at `index` in place, keeping its id."""
        self._check_index(index)
        data = updated_question.model_dump()
        data["id"] = self.draft.questions[index].id
        replacement = _build_question(**data)
        self.draft.questions[index] = replacement
        self._after_questions_changed()
        return replacement

    def question_at(self, index: int) -> Question:
        """The question at `index`."""
        self._check_index(index)
        return self.draft.questions[index]

    def total_correct_answers(self) -> int:
        """The current upper bound for the pass score."""
        return self.draft.total_correct_answers()

    # ---- Metadata ----

    def set_title(self, text: str) -> None:
        """Set the draft title."""
        self.draft.title = text

    def set_description(self, text: str) -> None:
        """Set the draft description."""
        self.draft.description = text

    def set_pass_score(self, value: int) -> int:
        """Set the pass score, clamped into [0, total correct answers]. Returns the stored value."""
        self.draft.pass_score = max(0, min(value, self.total_correct_answers()))
        return self.draft.pass_score

    def editor(self) -> "QuestionnaireEditor":
        """A preview/editor bound to this draft."""
        from .editor import QuestionnaireEditor

        return QuestionnaireEditor(self)

    # ---- Save ----

    async def save(self) -> Questionnaire:
        """Persist the draft and reset the builder.

        Raises:
            MissingTitleOrDescriptionError: blank title or description.
            PassScoreOutOfBoundsError: pass score above the bound (only without auto-clamping).
            PersistenceError: the store call failed. The draft is kept for a retry.
        """
        self._validate_for_save()
        payload = self.draft.model_copy(update={"id": None}, deep=True)
        created = await call_store("create", self.store.create(payload), title=payload.title)
        logger.info(
            "questionnaire_saved",
            questionnaire_id=created.id,
            question_count=len(created.questions),
            pass_score=created.pass_score,
        )
        self.draft = Questionnaire()
        return created

    def _validate_for_save(self) -> None:
        missing = [name for name in ("title", "description") if not getattr(self.draft, name).strip()]
        if missing:
            raise exceptions.MissingTitleOrDescriptionError(f"The questionnaire needs a {' and a '.join(missing)}.")
        bound = self.total_correct_answers()
        if self.draft.pass_score > bound:
            raise exceptions.PassScoreOutOfBoundsError(
                f"Pass score {self.draft.pass_score} exceeds the {bound} correct answers available."
            )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.draft.questions):
            raise exceptions.QuestionIndexError(f"There is no question at position {index}.")

    def _after_questions_changed(self) -> None:
        if self.auto_clamp_pass_score:
            self.set_pass_score(self.draft.pass_score)
