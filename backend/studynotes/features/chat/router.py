"""
Chat feature: API routes for asking questions about a note.
"""

import logging

from fastapi import APIRouter, Depends
from supabase import AsyncClient

from studynotes.core.dependencies import get_current_user_id, get_db, get_generator
from studynotes.core.exceptions import StorageError
from studynotes.features.chat.schemas import ChatRequest, ChatResponse
from studynotes.features.chat.service import ChatSession, load_history
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.notes.service import NotesService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _open_session(
    db: AsyncClient, generator: ArtifactGenerator, user_id: str, note_id: str
) -> ChatSession:
    note = await NotesService(db).get_note(user_id, note_id)
    session = ChatSession(db, generator, user_id, note)
    await session.load()
    return session


@router.get("/{note_id}/chat")
async def get_history(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Conversation history of a note, oldest first."""
    try:
        messages = await load_history(db, user_id, note_id)
    except StorageError as e:
        logger.warning(f"Could not load chat for note {note_id}: {e.detail}")
        messages = []
    return {"data": messages}


@router.post("/{note_id}/chat", response_model=ChatResponse)
async def send_message(
    note_id: str,
    data: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
    generator: ArtifactGenerator = Depends(get_generator),
):
    """Ask a question; the answer is grounded in the note's text."""
    session = await _open_session(db, generator, user_id, note_id)
    user_message, reply = await session.send(data.message)
    return ChatResponse(user_message=user_message, reply=reply)


@router.post("/{note_id}/chat/retry", response_model=ChatResponse)
async def retry_reply(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
    generator: ArtifactGenerator = Depends(get_generator),
):
    """Answer the last unanswered question (after a failed reply)."""
    session = await _open_session(db, generator, user_id, note_id)
    reply = await session.request_reply()
    return ChatResponse(reply=reply)
