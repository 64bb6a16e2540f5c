"""
Notes feature: Service layer for uploaded study documents.
"""

import logging

from supabase import AsyncClient

from studynotes.core.exceptions import NotFoundError
from studynotes.core.storage import execute, first_row
from studynotes.features.notes import extractor
from studynotes.features.notes.schemas import Note, NoteListItem, NoteStats

logger = logging.getLogger(__name__)


class NotesService:
    """Upload, read and delete notes. Every query is scoped to one user."""

    def __init__(self, db: AsyncClient):
        self.db = db

    async def create_note(
        self,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str | None,
    ) -> Note:
        """Extract text from an upload and store it as a note.

        The format is checked and the text extracted before anything is
        written, so a rejected upload leaves no row behind.
        """
        source_format = extractor.resolve_format(content_type, filename)
        content = await extractor.extract(data, source_format.value, filename)

        insert_data = {
            "user_id": user_id,
            "title": filename,
            "content": content,
            "file_type": source_format.value,
            "file_size": len(data),
        }
        result = await execute(self.db.table("notes").insert(insert_data))
        note = Note(**first_row(result))
        logger.info(f"✅ Note {note.id} created ({note.file_size} bytes)")
        return note

    async def list_notes(self, user_id: str) -> list[NoteListItem]:
        """List notes for a user, ordered by newest first."""
        result = await execute(
            self.db.table("notes")
            .select("id, title, file_type, file_size, created_at")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [NoteListItem(**row) for row in result.data]

    async def get_note(self, user_id: str, note_id: str) -> Note:
        """Get one note owned by the user.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        result = await execute(
            self.db.table("notes")
            .select("*")
            .eq("id", note_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        row = first_row(result)
        if row is None:
            raise NotFoundError("Note", note_id)
        return Note(**row)

    async def delete_note(self, user_id: str, note_id: str) -> None:
        """Hard delete. Summaries, quizzes and chat messages go with it (FK CASCADE)."""
        await self.get_note(user_id, note_id)
        await execute(
            self.db.table("notes").delete().eq("id", note_id).eq("user_id", user_id)
        )
        logger.info(f"🗑️ Note {note_id} deleted")

    async def get_stats(self, user_id: str) -> NoteStats:
        """Count notes, summaries and quizzes for the dashboard."""
        counts = {}
        for table in ("notes", "summaries", "quizzes"):
            result = await execute(
                self.db.table(table).select("id", count="exact", head=True).eq("user_id", user_id)
            )
            counts[table] = result.count or 0
        return NoteStats(**counts)
