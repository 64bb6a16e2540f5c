"""
Generation feature: artifact kinds, result types and the quiz schema.
"""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

QUIZ_QUESTION_COUNT = 5
QUIZ_OPTION_COUNT = 4


class ArtifactKind(str, Enum):
    """Closed set of artifacts the generator can produce."""
    SUMMARY = "summary"
    QUIZ = "quiz"
    CHAT_REPLY = "chat_reply"


# ── Quiz structured output ───────────────────────────────

class GeneratedQuestion(BaseModel):
    """One multiple choice question as produced by the backend."""
    question: str
    options: list[str] = Field(min_length=QUIZ_OPTION_COUNT, max_length=QUIZ_OPTION_COUNT)
    correct_answer: str

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question text is empty")
        return v

    @model_validator(mode="after")
    def check_options(self) -> "GeneratedQuestion":
        if any(not opt.strip() for opt in self.options):
            raise ValueError("options must not be empty")
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be distinct")
        if self.correct_answer not in self.options:
            raise ValueError(f"correct_answer {self.correct_answer!r} is not one of the options")
        return self


class QuizPayload(BaseModel):
    """Validated `create_quiz` tool arguments."""
    questions: list[GeneratedQuestion] = Field(
        min_length=QUIZ_QUESTION_COUNT, max_length=QUIZ_QUESTION_COUNT
    )


# Function schema handed to the backend; the model must call it.
CREATE_QUIZ_TOOL = {
    "name": "create_quiz",
    "description": "Generate a quiz with multiple choice questions",
    "parameters": {
        "type": "object",
        "properties": {
            "questions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "question": {"type": "string"},
                        "options": {
                            "type": "array",
                            "items": {"type": "string"},
                            "minItems": QUIZ_OPTION_COUNT,
                            "maxItems": QUIZ_OPTION_COUNT,
                        },
                        "correct_answer": {"type": "string"},
                    },
                    "required": ["question", "options", "correct_answer"],
                },
                "minItems": QUIZ_QUESTION_COUNT,
                "maxItems": QUIZ_QUESTION_COUNT,
            },
        },
        "required": ["questions"],
    },
}


# ── Generator inputs / outputs ───────────────────────────

@dataclass
class ChatTurn:
    """A prior message in the conversation."""
    role: str  # user | assistant
    content: str


@dataclass
class ChatContext:
    """Extra input for chat replies: the transcript so far plus the new message."""
    message: str
    history: list[ChatTurn] = field(default_factory=list)


@dataclass
class SummaryResult:
    text: str
    kind: ArtifactKind = ArtifactKind.SUMMARY


@dataclass
class QuizResult:
    questions: list[GeneratedQuestion]
    kind: ArtifactKind = ArtifactKind.QUIZ


@dataclass
class ChatReplyResult:
    text: str
    kind: ArtifactKind = ArtifactKind.CHAT_REPLY


ArtifactResult = SummaryResult | QuizResult | ChatReplyResult
