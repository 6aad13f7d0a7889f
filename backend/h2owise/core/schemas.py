from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictInt

RowId = Union[int, str]


class Badge(str, Enum):
    GURU = "Water Guru"
    SAVER = "Water Saver"
    LEARNER = "Water Learner"


# ------------------------------------------------------------
# Question models
# ------------------------------------------------------------
class QuestionCreate(BaseModel):
    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)  # exactly 4 choices
    correct_index: StrictInt = Field(ge=0, le=3)


class Question(QuestionCreate):
    id: RowId


class AnswerKey(BaseModel):
    """The two columns of a stored question that scoring reads."""

    id: RowId
    correct_index: Optional[int] = None


# ------------------------------------------------------------
# Request models
# ------------------------------------------------------------
class SubmitRequest(BaseModel):
    answers: Dict[str, StrictInt]   # question id -> selected option index
    username: Optional[str] = None  # stored as "Anonymous" when missing


class GenerateRequest(BaseModel):
    topic: Optional[str] = None    # e.g. "water pollution"


# ------------------------------------------------------------
# Response models
# ------------------------------------------------------------
class SubmitResponse(BaseModel):
    score: int = Field(ge=0)
    badge: Badge


class ScoreRecord(BaseModel):
    id: RowId
    username: Optional[str] = None
    score: int
    badge: Optional[str] = None    # historical rows keep the label they were stored with


class BadgesResponse(BaseModel):
    username: str
    badges: List[str]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[Any] = None
