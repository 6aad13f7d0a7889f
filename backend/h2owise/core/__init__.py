# backend/h2owise/core/__init__.py
"""
Core package for the H2OWISE water quiz service.
Exposes the request/response models and the scoring rules.
"""

from .schemas import (
    AnswerKey,
    Badge,
    Question,
    QuestionCreate,
    SubmitRequest,
    SubmitResponse,
    ScoreRecord,
    BadgesResponse,
    GenerateRequest,
    ErrorResponse,
)
from .scoring import assign_badge, score_answers

__all__ = [
    "AnswerKey",
    "Badge",
    "Question",
    "QuestionCreate",
    "SubmitRequest",
    "SubmitResponse",
    "ScoreRecord",
    "BadgesResponse",
    "GenerateRequest",
    "ErrorResponse",
    "assign_badge",
    "score_answers",
]
