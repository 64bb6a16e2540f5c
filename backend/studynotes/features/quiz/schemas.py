"""
Quiz feature: Schemas for request/response models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class QuizState(str, Enum):
    UNGENERATED = "ungenerated"
    GENERATED = "generated"   # questions, no answers yet
    ANSWERED = "answered"     # every question has a selected answer
    GRADED = "graded"         # score set, final


class Quiz(BaseModel):
    id: str
    user_id: str
    note_id: str
    title: str
    total_questions: int
    score: int | None = None
    created_at: datetime


class QuizQuestion(BaseModel):
    id: str
    quiz_id: str
    position: int = 0
    question: str
    options: list[str]
    correct_answer: str
    user_answer: str | None = None
    is_correct: bool | None = None


class SubmitQuizRequest(BaseModel):
    """Selected answers keyed by question id."""
    answers: dict[str, str]


class QuestionView(BaseModel):
    """A question as shown to the user. Answers are revealed only once graded."""
    id: str
    question: str
    options: list[str]
    correct_answer: str | None = None
    user_answer: str | None = None
    is_correct: bool | None = None


class QuizView(BaseModel):
    state: QuizState
    quiz: Quiz | None = None
    questions: list[QuestionView] = []
