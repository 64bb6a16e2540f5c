"""
Notes feature: Schemas for request/response models.
"""

from pydantic import BaseModel
from datetime import datetime


class Note(BaseModel):
    """An uploaded document and its extracted text."""
    id: str
    user_id: str
    title: str
    content: str
    file_type: str
    file_size: int
    created_at: datetime


class NoteListItem(BaseModel):
    """Note without its text, for dashboard listings."""
    id: str
    title: str
    file_type: str
    file_size: int
    created_at: datetime


class NoteStats(BaseModel):
    """Dashboard counters for the current user."""
    notes: int = 0
    summaries: int = 0
    quizzes: int = 0
