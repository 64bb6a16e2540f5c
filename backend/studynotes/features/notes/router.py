"""
Notes feature: API routes for uploading and managing study notes.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from supabase import AsyncClient

from studynotes.config import get_settings
from studynotes.core.dependencies import get_current_user_id, get_db
from studynotes.core.exceptions import StorageError
from studynotes.features.notes import extractor
from studynotes.features.notes.schemas import NoteStats
from studynotes.features.notes.service import NotesService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
async def upload_note(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Upload a PDF or TXT file; its text becomes a new note."""
    # Reject unsupported types before reading the body
    extractor.resolve_format(file.content_type, file.filename)

    file_bytes = await file.read()
    max_bytes = get_settings().MAX_UPLOAD_MB * 1024 * 1024
    if len(file_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {get_settings().MAX_UPLOAD_MB}MB.",
        )

    service = NotesService(db)
    note = await service.create_note(
        user_id=user_id,
        filename=file.filename or "untitled.txt",
        data=file_bytes,
        content_type=file.content_type,
    )
    return {"data": note}


@router.get("/")
async def list_notes(
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """List all notes of the current user, newest first."""
    service = NotesService(db)
    try:
        notes = await service.list_notes(user_id)
    except StorageError as e:
        logger.warning(f"Could not list notes for {user_id}: {e.detail}")
        notes = []
    return {"data": notes}


@router.get("/stats")
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Dashboard counters: notes, summaries, quizzes."""
    service = NotesService(db)
    try:
        stats = await service.get_stats(user_id)
    except StorageError as e:
        logger.warning(f"Could not count artifacts for {user_id}: {e.detail}")
        stats = NoteStats()
    return {"data": stats}


@router.get("/{note_id}")
async def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """One note with its text (null when unreadable, 404 when missing)."""
    service = NotesService(db)
    try:
        note = await service.get_note(user_id, note_id)
    except StorageError as e:
        logger.warning(f"Could not load note {note_id}: {e.detail}")
        note = None
    return {"data": note}


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Delete a note together with its summaries, quizzes and chat."""
    service = NotesService(db)
    await service.delete_note(user_id, note_id)
    return {"message": "Note deleted"}
