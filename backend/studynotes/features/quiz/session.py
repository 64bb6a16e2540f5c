"""
Quiz feature: in-memory state of one quiz instance.

A QuizSession is rehydrated from the store, collects answer selections
locally and computes the grade. Persisting the grade is the service's job.
"""

from dataclasses import dataclass

from studynotes.core.exceptions import AlreadyGraded, IncompleteQuiz, InvalidAnswer, NotFoundError
from studynotes.features.quiz.schemas import Quiz, QuizQuestion, QuizState, QuestionView, QuizView


@dataclass
class GradedAnswer:
    question_id: str
    user_answer: str
    is_correct: bool


@dataclass
class Grading:
    score: int
    answers: list[GradedAnswer]


class QuizSession:
    """Ungenerated -> Generated -> Answered -> Graded."""

    def __init__(self, quiz: Quiz | None = None, questions: list[QuizQuestion] | None = None):
        self.quiz = quiz
        self.questions = sorted(questions or [], key=lambda q: q.position)
        self.selected: dict[str, str] = {}

    @property
    def is_graded(self) -> bool:
        return self.quiz is not None and self.quiz.score is not None

    @property
    def state(self) -> QuizState:
        if self.quiz is None:
            return QuizState.UNGENERATED
        if self.is_graded:
            return QuizState.GRADED
        if self.questions and all(q.id in self.selected for q in self.questions):
            return QuizState.ANSWERED
        return QuizState.GENERATED

    def _question(self, question_id: str) -> QuizQuestion:
        for q in self.questions:
            if q.id == question_id:
                return q
        raise InvalidAnswer(f"Unknown question {question_id}")

    def select_answer(self, question_id: str, answer: str) -> None:
        """Record a selection locally. Nothing is persisted."""
        if self.quiz is None:
            raise NotFoundError("Quiz", question_id)
        if self.is_graded:
            raise AlreadyGraded(self.quiz.id)
        question = self._question(question_id)
        if answer not in question.options:
            raise InvalidAnswer(f"{answer!r} is not an option of question {question_id}")
        self.selected[question_id] = answer

    def grade(self) -> Grading:
        """Score the selections with exact string matching.

        Raises:
            AlreadyGraded: The quiz already has a score.
            IncompleteQuiz: Some question has no selected answer.
        """
        if self.quiz is None:
            raise NotFoundError("Quiz", "")
        if self.is_graded:
            raise AlreadyGraded(self.quiz.id)

        answered = [q for q in self.questions if q.id in self.selected]
        missing = max(self.quiz.total_questions, len(self.questions)) - len(answered)
        if missing > 0:
            raise IncompleteQuiz(missing)

        answers = [
            GradedAnswer(
                question_id=q.id,
                user_answer=self.selected[q.id],
                is_correct=self.selected[q.id] == q.correct_answer,
            )
            for q in self.questions
        ]
        return Grading(score=sum(a.is_correct for a in answers), answers=answers)

    def apply_grading(self, grading: Grading) -> None:
        """Mirror a persisted grading into this session."""
        by_id = {a.question_id: a for a in grading.answers}
        for q in self.questions:
            graded = by_id[q.id]
            q.user_answer = graded.user_answer
            q.is_correct = graded.is_correct
        self.quiz.score = grading.score

    def view(self) -> QuizView:
        graded = self.is_graded
        questions = [
            QuestionView(
                id=q.id,
                question=q.question,
                options=q.options,
                correct_answer=q.correct_answer if graded else None,
                user_answer=q.user_answer if graded else self.selected.get(q.id),
                is_correct=q.is_correct if graded else None,
            )
            for q in self.questions
        ]
        return QuizView(state=self.state, quiz=self.quiz, questions=questions)
