"""
Summaries feature: generate and replay note summaries.
"""

import logging

from supabase import AsyncClient

from studynotes.core.storage import execute, first_row
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.notes.service import NotesService
from studynotes.features.summaries.schemas import Summary

logger = logging.getLogger(__name__)


class SummaryService:
    def __init__(self, db: AsyncClient, generator: ArtifactGenerator | None = None):
        self.db = db
        self.generator = generator
        self.notes = NotesService(db)

    async def generate(self, user_id: str, note_id: str) -> Summary:
        """Summarize a note and store the result as the new current summary.

        Generation happens first; a failed generation writes nothing.
        """
        note = await self.notes.get_note(user_id, note_id)
        result = await self.generator.summarize(note.content)

        insert_data = {
            "user_id": user_id,
            "note_id": note.id,
            "content": result.text,
        }
        response = await execute(self.db.table("summaries").insert(insert_data))
        summary = Summary(**first_row(response))
        logger.info(f"✅ Summary {summary.id} stored for note {note_id}")
        return summary

    async def get_latest(self, user_id: str, note_id: str) -> Summary | None:
        """The current summary: newest by created_at, or None."""
        response = await execute(
            self.db.table("summaries")
            .select("*")
            .eq("note_id", note_id)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(1)
        )
        row = first_row(response)
        return Summary(**row) if row else None
