"""Questionnaire service layer."""

from .fill_session import FillSession
from .questionnaire_service import QuestionnaireService

__all__ = [
    "FillSession",
    "QuestionnaireService",
]
