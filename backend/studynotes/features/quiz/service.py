"""
Quiz feature: quiz lifecycle against the artifact store.

Multi-row writes go through two Postgres functions (see
supabase/migrations) so each runs in a single transaction:
  - create_quiz_with_questions: quiz row + all its questions
  - grade_quiz: every user_answer/is_correct + the score, only if ungraded
"""

import logging
from datetime import datetime, timezone

from supabase import AsyncClient

from studynotes.core.exceptions import AlreadyGraded, NotFoundError
from studynotes.core.storage import execute, first_row
from studynotes.features.generation.generator import ArtifactGenerator
from studynotes.features.notes.service import NotesService
from studynotes.features.quiz.schemas import Quiz, QuizQuestion
from studynotes.features.quiz.session import QuizSession

logger = logging.getLogger(__name__)


class QuizService:
    def __init__(self, db: AsyncClient, generator: ArtifactGenerator | None = None):
        self.db = db
        self.generator = generator
        self.notes = NotesService(db)

    async def generate(self, user_id: str, note_id: str) -> QuizSession:
        """Generate a quiz for a note and persist it with its questions.

        Nothing is written unless generation succeeds and the shape is valid.
        The store call is all-or-nothing; on StorageError no quiz exists.
        """
        note = await self.notes.get_note(user_id, note_id)
        result = await self.generator.generate_quiz(note.content)

        params = {
            "p_user_id": user_id,
            "p_note_id": note.id,
            "p_title": f"Quiz - {datetime.now(timezone.utc):%Y-%m-%d}",
            "p_questions": [q.model_dump() for q in result.questions],
        }
        response = await execute(self.db.rpc("create_quiz_with_questions", params))
        created = response.data

        session = QuizSession(
            quiz=Quiz(**created["quiz"]),
            questions=[QuizQuestion(**q) for q in created["questions"]],
        )
        logger.info(f"✅ Quiz {session.quiz.id} stored with {len(session.questions)} questions")
        return session

    async def _load_questions(self, quiz_id: str) -> list[QuizQuestion]:
        response = await execute(
            self.db.table("quiz_questions")
            .select("*")
            .eq("quiz_id", quiz_id)
            .order("position")
        )
        return [QuizQuestion(**row) for row in response.data]

    async def load_latest(self, user_id: str, note_id: str) -> QuizSession:
        """Rehydrate the newest quiz of a note (empty session if none)."""
        response = await execute(
            self.db.table("quizzes")
            .select("*")
            .eq("note_id", note_id)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(1)
        )
        row = first_row(response)
        if row is None:
            return QuizSession()
        quiz = Quiz(**row)
        return QuizSession(quiz=quiz, questions=await self._load_questions(quiz.id))

    async def get_session(self, user_id: str, quiz_id: str) -> QuizSession:
        response = await execute(
            self.db.table("quizzes")
            .select("*")
            .eq("id", quiz_id)
            .eq("user_id", user_id)
            .limit(1)
        )
        row = first_row(response)
        if row is None:
            raise NotFoundError("Quiz", quiz_id)
        quiz = Quiz(**row)
        return QuizSession(quiz=quiz, questions=await self._load_questions(quiz.id))

    async def list_quizzes(self, user_id: str, note_id: str) -> list[Quiz]:
        """All quizzes generated for a note, newest first."""
        response = await execute(
            self.db.table("quizzes")
            .select("*")
            .eq("note_id", note_id)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        return [Quiz(**row) for row in response.data]

    async def submit(self, user_id: str, quiz_id: str, answers: dict[str, str]) -> QuizSession:
        """Grade a quiz exactly once.

        Raises:
            AlreadyGraded: The quiz has a score (checked again inside the transaction).
            IncompleteQuiz: Not every question has an answer.
            InvalidAnswer: Unknown question id or an answer outside the options.
        """
        session = await self.get_session(user_id, quiz_id)
        if session.is_graded:
            raise AlreadyGraded(quiz_id)

        for question_id, answer in answers.items():
            session.select_answer(question_id, answer)
        grading = session.grade()

        params = {
            "p_quiz_id": quiz_id,
            "p_user_id": user_id,
            "p_score": grading.score,
            "p_answers": [
                {"id": a.question_id, "user_answer": a.user_answer, "is_correct": a.is_correct}
                for a in grading.answers
            ],
        }
        response = await execute(self.db.rpc("grade_quiz", params))
        if not response.data:
            # Another submit won the race inside the database
            raise AlreadyGraded(quiz_id)

        session.apply_grading(grading)
        logger.info(f"✅ Quiz {quiz_id} graded: {grading.score}/{session.quiz.total_questions}")
        return session
