"""Custom exceptions for the questionnaires app."""


class QuestionnaireException(Exception):
    """Base exception for the questionnaires app."""


# ---- Validation: rejected before any store call, caller state preserved ----


class ValidationError(QuestionnaireException):
    """Raised when input is rejected locally; draft, edit and response state are left untouched."""


class InvalidQuestionError(ValidationError):
    """Raised when a question has blank text, no options, or blank/duplicate option labels."""


class QuestionIndexError(ValidationError):
    """Raised when a question index does not exist in the draft."""


class MissingTitleOrDescriptionError(ValidationError):
    """Raised when a draft is saved with a blank title or description."""


class PassScoreOutOfBoundsError(ValidationError):
    """Raised when a draft is saved with a pass score above its total of correct answers."""


class InvalidEditError(ValidationError):
    """Raised when an edited question has blank text or no correct answer marked."""


class UnknownQuestionError(ValidationError):
    """Raised when a response refers to a question that is not part of the questionnaire."""


class UnknownOptionError(ValidationError):
    """Raised when a response refers to an option label the question does not have."""


class ControlMismatchError(ValidationError):
    """Raised when an exclusive selection is made on a multi-choice question."""


# ---- Store failures ----


class PersistenceError(QuestionnaireException):
    """Raised when a store call fails. The underlying error is kept in `cause`."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize with a user-facing message and the underlying error."""
        super().__init__(message)
        self.cause = cause


class NotFoundError(QuestionnaireException):
    """Raised when the store has no questionnaire for the requested id."""

    def __init__(self, questionnaire_id: str) -> None:
        """Initialize with the id that could not be found."""
        super().__init__(f"Questionnaire {questionnaire_id} does not exist.")
        self.questionnaire_id = questionnaire_id


# ---- Wrong call order ----


class EditSessionError(QuestionnaireException):
    """Raised when an edit operation is called without an open edit session."""


class SessionStateError(QuestionnaireException):
    """Raised when a fill session operation is called in a state that does not allow it."""
