"""
Summaries feature: API routes.
"""

import logging

from fastapi import APIRouter, Depends
from supabase import AsyncClient

from studynotes.core.dependencies import get_current_user_id, get_db, get_generator
from studynotes.core.exceptions import StorageError
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.summaries.service import SummaryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{note_id}/summary")
async def generate_summary(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
    generator: ArtifactGenerator = Depends(get_generator),
):
    """Generate (or regenerate) the summary of a note."""
    service = SummaryService(db, generator)
    summary = await service.generate(user_id, note_id)
    return {"data": summary}


@router.get("/{note_id}/summary")
async def get_summary(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Current summary of a note (null when none or unreadable)."""
    service = SummaryService(db)
    try:
        summary = await service.get_latest(user_id, note_id)
    except StorageError as e:
        logger.warning(f"Could not load summary for note {note_id}: {e.detail}")
        summary = None
    return {"data": summary}
