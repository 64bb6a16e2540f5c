"""
Generation feature: the Artifact Generator.

One entry point, `ArtifactGenerator.generate(kind, source_text, extra)`, turns
a document's text into a summary, a quiz or a chat reply by calling the AI
backend once. Backend failures are classified into RateLimited /
QuotaExceeded / BackendUnavailable and raised as-is; nothing is retried and
nothing is persisted here.
"""

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError

from studynotes.core.exceptions import (
    AppBaseError,
    BackendUnavailable,
    InvalidArtifactShape,
    QuotaExceeded,
    RateLimited,
)
from studynotes.features.generation import prompts
from studynotes.features.generation.schemas import (
    CREATE_QUIZ_TOOL,
    ArtifactKind,
    ArtifactResult,
    ChatContext,
    ChatReplyResult,
    ChatTurn,
    QuizPayload,
    QuizResult,
    SummaryResult,
)

logger = logging.getLogger(__name__)


# ── Error classification ─────────────────────────────────

def _exception_chain(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code(exc: BaseException) -> int | None:
    """HTTP status carried by an SDK exception or anything it wraps."""
    for err in _exception_chain(exc):
        code = getattr(err, "status_code", None)
        if isinstance(code, int):
            return code
        code = getattr(getattr(err, "response", None), "status_code", None)
        if isinstance(code, int):
            return code
        code = getattr(err, "code", None)
        if isinstance(code, int):
            return code
    return None


def _is_insufficient_quota(exc: BaseException) -> bool:
    # OpenAI reports exhausted credits as 429 with code "insufficient_quota"
    return any(getattr(err, "code", None) == "insufficient_quota" for err in _exception_chain(exc))


def classify_backend_error(exc: BaseException) -> AppBaseError:
    """Map a backend exception to the failure taxonomy.

    429 → RateLimited, 402 (or insufficient_quota) → QuotaExceeded,
    everything else → BackendUnavailable.
    """
    status = _status_code(exc)
    if status == 402 or _is_insufficient_quota(exc):
        return QuotaExceeded(str(exc))
    if status == 429:
        return RateLimited(str(exc))
    if status is not None:
        return BackendUnavailable(f"AI backend returned HTTP {status}: {exc}")
    return BackendUnavailable(f"{type(exc).__name__}: {exc}")


def content_to_text(content: Any) -> str:
    """Flatten message content (plain string or list of content parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
            if not isinstance(part, dict) or part.get("type", "text") == "text"
        )
    return ""


# ── Generator ────────────────────────────────────────────

class ArtifactGenerator:
    """Produces study artifacts from document text via a chat model."""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    async def generate(
        self,
        kind: ArtifactKind,
        source_text: str,
        extra: ChatContext | None = None,
    ) -> ArtifactResult:
        """Generate one artifact.

        Args:
            kind: summary, quiz or chat_reply.
            source_text: Full text of the note.
            extra: Required for chat_reply (prior turns + new user message).

        Raises:
            InvalidArtifactShape: Quiz output violates the 5 x 4 shape.
            RateLimited / QuotaExceeded / BackendUnavailable: Backend failure.
        """
        match kind:
            case ArtifactKind.SUMMARY:
                return await self._generate_summary(source_text)
            case ArtifactKind.QUIZ:
                return await self._generate_quiz(source_text)
            case ArtifactKind.CHAT_REPLY:
                if extra is None:
                    raise ValueError("chat_reply generation needs a ChatContext")
                return await self._generate_reply(source_text, extra)
            case _:
                raise ValueError(f"Unknown artifact kind: {kind}")

    async def summarize(self, source_text: str) -> SummaryResult:
        return await self.generate(ArtifactKind.SUMMARY, source_text)

    async def generate_quiz(self, source_text: str) -> QuizResult:
        return await self.generate(ArtifactKind.QUIZ, source_text)

    async def reply(self, source_text: str, history: list[ChatTurn], message: str) -> ChatReplyResult:
        return await self.generate(
            ArtifactKind.CHAT_REPLY, source_text, ChatContext(message=message, history=history)
        )

    # ── Per-kind implementations ─────────────────────────

    async def _generate_summary(self, source_text: str) -> SummaryResult:
        messages = [
            SystemMessage(content=prompts.SUMMARY_SYSTEM_PROMPT),
            HumanMessage(content=prompts.build_summary_prompt(source_text)),
        ]
        response = await self._invoke(self.llm, messages, ArtifactKind.SUMMARY)
        text = content_to_text(response.content).strip()
        if not text:
            raise BackendUnavailable("AI backend returned an empty summary")
        return SummaryResult(text=text)

    def quiz_model(self) -> Any:
        """Chat model forced to answer with a `create_quiz` tool call."""
        return self.llm.with_structured_output(CREATE_QUIZ_TOOL, method="function_calling")

    async def _generate_quiz(self, source_text: str) -> QuizResult:
        messages = [
            SystemMessage(content=prompts.QUIZ_SYSTEM_PROMPT),
            HumanMessage(content=prompts.build_quiz_prompt(source_text)),
        ]
        raw = await self._invoke(self.quiz_model(), messages, ArtifactKind.QUIZ)
        if not isinstance(raw, dict):
            raise BackendUnavailable("No quiz generated")

        try:
            payload = QuizPayload.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Quiz output rejected: {e.error_count()} schema violation(s)")
            raise InvalidArtifactShape(str(e)) from e

        return QuizResult(questions=payload.questions)

    async def _generate_reply(self, source_text: str, context: ChatContext) -> ChatReplyResult:
        messages: list[BaseMessage] = [SystemMessage(content=prompts.build_chat_system_prompt(source_text))]
        for turn in context.history:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.content))
            elif turn.role == "assistant":
                messages.append(AIMessage(content=turn.content))
        messages.append(HumanMessage(content=context.message))

        response = await self._invoke(self.llm, messages, ArtifactKind.CHAT_REPLY)
        text = content_to_text(response.content).strip()
        if not text:
            raise BackendUnavailable("AI backend returned an empty reply")
        return ChatReplyResult(text=text)

    async def _invoke(self, runnable: Any, messages: list[BaseMessage], kind: ArtifactKind) -> Any:
        try:
            return await runnable.ainvoke(messages)
        except Exception as e:
            error = classify_backend_error(e)
            logger.error(f"❌ {kind.value} generation failed: {type(error).__name__} ({e})")
            raise error from e
