"""
Chat feature: one conversation per note, grounded in the note's full text.

The user message is stored before the backend is called, so a failed reply
leaves the question in the history and the conversation can be resumed with
`request_reply()`.
"""

import logging

from supabase import AsyncClient

from studynotes.core.exceptions import EmptyMessage, NoPendingMessage
from studynotes.core.storage import execute, first_row
from studynotes.features.chat.schemas import ChatMessage
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.generation.schemas import ChatTurn
from studynotes.features.notes.schemas import Note

logger = logging.getLogger(__name__)


async def load_history(db: AsyncClient, user_id: str, note_id: str) -> list[ChatMessage]:
    """All messages of a note, oldest first. created_at is the only ordering."""
    response = await execute(
        db.table("chat_messages")
        .select("*")
        .eq("note_id", note_id)
        .eq("user_id", user_id)
        .order("created_at")
    )
    return [ChatMessage(**row) for row in response.data]


class ChatSession:
    """Conversation state for one note, owned by the caller."""

    def __init__(self, db: AsyncClient, generator: ArtifactGenerator, user_id: str, note: Note):
        self.db = db
        self.generator = generator
        self.user_id = user_id
        self.note = note
        self.messages: list[ChatMessage] = []

    async def load(self) -> list[ChatMessage]:
        """Rehydrate the transcript from the store."""
        self.messages = await load_history(self.db, self.user_id, self.note.id)
        return self.messages

    @property
    def pending_message(self) -> ChatMessage | None:
        """The last message if it is a user message still waiting for a reply."""
        if self.messages and self.messages[-1].role == "user":
            return self.messages[-1]
        return None

    async def _insert(self, role: str, content: str) -> ChatMessage:
        response = await execute(
            self.db.table("chat_messages").insert({
                "user_id": self.user_id,
                "note_id": self.note.id,
                "role": role,
                "content": content,
            })
        )
        message = ChatMessage(**first_row(response))
        self.messages.append(message)
        return message

    async def append_user_message(self, text: str) -> ChatMessage:
        """Persist a user message immediately.

        Raises:
            EmptyMessage: Text is empty after trimming. Nothing is stored.
        """
        if not text or not text.strip():
            raise EmptyMessage()
        return await self._insert("user", text)

    async def request_reply(self) -> ChatMessage:
        """Ask the backend to answer the pending user message and store the reply.

        On a generation failure nothing is appended and the error propagates;
        the user message stays pending.
        """
        pending = self.pending_message
        if pending is None:
            raise NoPendingMessage()

        history = [ChatTurn(role=m.role, content=m.content) for m in self.messages[:-1]]
        result = await self.generator.reply(self.note.content, history, pending.content)

        reply = await self._insert("assistant", result.text)
        logger.info(f"💬 Reply stored for note {self.note.id} ({len(self.messages)} messages)")
        return reply

    async def send(self, text: str) -> tuple[ChatMessage, ChatMessage]:
        """Append a user message and get its reply."""
        user_message = await self.append_user_message(text)
        reply = await self.request_reply()
        return user_message, reply
