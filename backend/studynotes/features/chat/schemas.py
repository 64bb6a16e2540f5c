"""
Chat feature: Schemas for request/response models.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One persisted turn. Append-only."""
    id: str
    user_id: str
    note_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    user_message: ChatMessage | None = None
    reply: ChatMessage
