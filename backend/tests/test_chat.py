"""
Tests for note-grounded chat sessions.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage

from fakes import USER_ID, make_llm
from studynotes.core.exceptions import BackendUnavailable, EmptyMessage, NoPendingMessage, StorageError
from studynotes.features.chat.service import ChatSession, load_history
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.notes.schemas import Note


def open_session(fake_db, note_row, *replies) -> ChatSession:
    llm = make_llm()
    llm.ainvoke = AsyncMock(side_effect=[r if isinstance(r, Exception) else AIMessage(content=r) for r in replies])
    return ChatSession(fake_db, ArtifactGenerator(llm), USER_ID, Note(**note_row))


class TestChatSession:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_message_is_rejected(self, fake_db, note_row, text):
        session = open_session(fake_db, note_row)

        with pytest.raises(EmptyMessage):
            await session.send(text)

        assert fake_db.rows("chat_messages") == []
        session.generator.llm.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exchanges_alternate(self, fake_db, note_row):
        session = open_session(fake_db, note_row, "Light.", "Glucose.", "Chloroplasts.")
        await session.load()

        for question in ("What does it need?", "What does it make?", "Where does it happen?"):
            await session.send(question)

        history = await load_history(fake_db, USER_ID, note_row["id"])
        assert len(history) == 6
        assert [m.role for m in history] == ["user", "assistant"] * 3
        assert [m.content for m in history][-2:] == ["Where does it happen?", "Chloroplasts."]

    @pytest.mark.asyncio
    async def test_full_history_is_sent(self, fake_db, note_row):
        session = open_session(fake_db, note_row, "Light.", "Glucose.")
        await session.send("What does it need?")
        await session.send("What does it make?")

        messages = session.generator.llm.ainvoke.call_args.args[0]
        assert note_row["content"] in messages[0].content
        assert [m.content for m in messages[1:]] == ["What does it need?", "Light.", "What does it make?"]
        assert isinstance(messages[-1], HumanMessage)

    @pytest.mark.asyncio
    async def test_failed_reply_keeps_question_for_retry(self, fake_db, note_row):
        request = httpx.Request("POST", "https://ai.gateway.test/v1/chat/completions")
        outage = httpx.HTTPStatusError("HTTP 500", request=request, response=httpx.Response(500, request=request))
        session = open_session(fake_db, note_row, outage, "Oxygen.")

        with pytest.raises(BackendUnavailable):
            await session.send("What is released?")

        rows = fake_db.rows("chat_messages")
        assert [(r["role"], r["content"]) for r in rows] == [("user", "What is released?")]
        assert session.pending_message.content == "What is released?"

        reply = await session.request_reply()

        assert reply.content == "Oxygen."
        assert [r["role"] for r in fake_db.rows("chat_messages")] == ["user", "assistant"]
        assert session.pending_message is None

    @pytest.mark.asyncio
    async def test_retry_after_reload(self, fake_db, note_row):
        fake_db.add("chat_messages", {"user_id": USER_ID, "note_id": note_row["id"], "role": "user", "content": "Why green?"})
        session = open_session(fake_db, note_row, "Chlorophyll.")

        await session.load()
        reply = await session.request_reply()

        assert reply.role == "assistant"
        messages = session.generator.llm.ainvoke.call_args.args[0]
        assert messages[-1].content == "Why green?"

    @pytest.mark.asyncio
    async def test_nothing_pending(self, fake_db, note_row):
        session = open_session(fake_db, note_row, "Hi.")
        with pytest.raises(NoPendingMessage):
            await session.request_reply()

        await session.send("Hello")
        with pytest.raises(NoPendingMessage):
            await session.request_reply()

    @pytest.mark.asyncio
    async def test_storage_failure_on_user_message(self, fake_db, note_row):
        fake_db.fail_on("insert", "chat_messages")
        session = open_session(fake_db, note_row, "Never sent.")

        with pytest.raises(StorageError):
            await session.send("Hello")

        session.generator.llm.ainvoke.assert_not_awaited()
