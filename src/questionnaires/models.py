import typing as t
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON form uses the store's camelCase field names.

    Both `question_text` and `questionText` are accepted on input; dump with
    `by_alias=True` to produce the wire form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- Input controls ----


class ExclusiveChoice(BaseModel):
    """Radio-like control: selecting an option replaces the previous selection."""

    kind: t.Literal["exclusive"] = "exclusive"


class MultiChoice(BaseModel):
    """Checkbox-like control: at most `cap` options may be selected at once."""

    kind: t.Literal["multi"] = "multi"
    cap: int = Field(..., ge=0)


Control = t.Annotated[ExclusiveChoice | MultiChoice, Field(discriminator="kind")]


# ---- AnswerOption ----


class AnswerOption(CamelModel):
    label: str
    is_correct: bool = False

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, value: str) -> str:
        """Reject labels that are empty after trimming."""
        if not value.strip():
            raise ValueError("Answer option label must not be blank.")
        return value


# ---- Question ----


class Question(CamelModel):
    id: UUID = Field(default_factory=uuid4, description="Stable identity used to key responses.")
    question_text: str
    answer_options: list[AnswerOption] = Field(..., min_length=1)

    @field_validator("question_text")
    @classmethod
    def question_text_not_blank(cls, value: str) -> str:
        """Reject question texts that are empty after trimming."""
        if not value.strip():
            raise ValueError("Question text must not be blank.")
        return value

    @model_validator(mode="after")
    def labels_are_unique(self) -> t.Self:
        """Responses are sets of labels, so two options may not share one."""
        labels = [option.label for option in self.answer_options]
        if len(labels) != len(set(labels)):
            raise ValueError("Answer option labels must be unique within a question.")
        return self

    @property
    def correct_count(self) -> int:
        """Number of options marked correct."""
        return sum(1 for option in self.answer_options if option.is_correct)

    @property
    def correct_labels(self) -> frozenset[str]:
        """Labels of the options marked correct."""
        return frozenset(option.label for option in self.answer_options if option.is_correct)

    @property
    def labels(self) -> list[str]:
        """All option labels, in display order."""
        return [option.label for option in self.answer_options]

    @property
    def control(self) -> ExclusiveChoice | MultiChoice:
        """The input control for this question.

        Exactly one correct option makes it exclusive. Otherwise it is multi-choice,
        capped at the number of correct options, or at the option count when none is correct.
        """
        correct_count = self.correct_count
        if correct_count == 1:
            return ExclusiveChoice()
        return MultiChoice(cap=correct_count or len(self.answer_options))


# ---- Questionnaire ----


class Questionnaire(CamelModel):
    id: str | None = Field(None, description="Assigned by the store on create. None on a draft.")
    title: str = ""
    description: str = ""
    questions: list[Question] = Field(default_factory=list)
    pass_score: int = Field(0, ge=0)
    passed_users: list[str] = Field(default_factory=list, description="Append-only list of user ids that passed.")

    def total_correct_answers(self) -> int:
        """Sum of correct options over all questions; the upper bound of `pass_score`."""
        return sum(question.correct_count for question in self.questions)

    def has_passed(self, user_id: str) -> bool:
        """Whether the user is recorded as having passed."""
        return user_id in self.passed_users

    def get_question(self, question_id: UUID) -> Question | None:
        """Look up a question by its id."""
        return next((question for question in self.questions if question.id == question_id), None)


class QuestionnaireSummary(BaseModel):
    """A listing row: the questionnaire and whether the current user has passed it."""

    id: str
    title: str
    description: str
    passed: bool


# Question id -> selected labels, in selection order and without duplicates.
UserResponses = dict[UUID, list[str]]
