"""
Quiz feature: API routes.

`notes_router` is mounted under /api/notes (per-note quiz), `router` under
/api/quizzes (actions on one quiz).
"""

import logging

from fastapi import APIRouter, Depends
from supabase import AsyncClient

from studynotes.core.dependencies import get_current_user_id, get_db, get_generator
from studynotes.core.exceptions import StorageError
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.quiz.schemas import QuizState, QuizView, SubmitQuizRequest
from studynotes.features.quiz.service import QuizService

logger = logging.getLogger(__name__)

notes_router = APIRouter()
router = APIRouter()


@notes_router.post("/{note_id}/quiz")
async def generate_quiz(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
    generator: ArtifactGenerator = Depends(get_generator),
):
    """Generate a new 5-question quiz for a note."""
    service = QuizService(db, generator)
    session = await service.generate(user_id, note_id)
    return {"data": session.view()}


@notes_router.get("/{note_id}/quiz")
async def get_latest_quiz(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Latest quiz of a note; answers are revealed only after grading."""
    service = QuizService(db)
    try:
        view = (await service.load_latest(user_id, note_id)).view()
    except StorageError as e:
        logger.warning(f"Could not load quiz for note {note_id}: {e.detail}")
        view = QuizView(state=QuizState.UNGENERATED)
    return {"data": view}


@notes_router.get("/{note_id}/quizzes")
async def list_quizzes(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Quiz history of a note with scores."""
    service = QuizService(db)
    try:
        quizzes = await service.list_quizzes(user_id, note_id)
    except StorageError as e:
        logger.warning(f"Could not list quizzes for note {note_id}: {e.detail}")
        quizzes = []
    return {"data": quizzes}


@router.post("/{quiz_id}/submit")
async def submit_quiz(
    quiz_id: str,
    data: SubmitQuizRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncClient = Depends(get_db),
):
    """Grade a quiz. Allowed once per quiz."""
    service = QuizService(db)
    session = await service.submit(user_id, quiz_id, data.answers)
    return {"data": session.view()}
