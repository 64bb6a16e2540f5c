"""
Summaries feature: Schemas for request/response models.
"""

from pydantic import BaseModel
from datetime import datetime


class Summary(BaseModel):
    """An AI summary of one note. Immutable; regeneration adds a new row."""
    id: str
    user_id: str
    note_id: str
    content: str
    created_at: datetime
