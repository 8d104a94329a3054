"""Quiz attempt state and scoring.

A ``QuizSession`` walks an ordered list of questions, keeps one selected option
per question and computes the score when the attempt completes. It has no I/O;
``record_attempt`` layers the best-effort write of the result on top.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils import parse_question_body
from app.models.question import Question
from app.models.quiz_result import QuizResult
from app.schemas.question import OPTION_NUMBERS, is_option_number

logger = logging.getLogger(__name__)


class EmptyQuizError(ValueError):
    pass


@dataclass(frozen=True)
class ScoredQuestion:
    id: int
    correct_option: int
    title: str = ""


@dataclass(frozen=True)
class ResultRecord:
    user_id: int
    topic_id: int
    score: int
    total_questions: int


def scored_question(question: Question) -> ScoredQuestion:
    payload = parse_question_body(question.body)
    correct = payload.get("correct_option", 1)
    # Rows written before validation existed may carry anything here
    if not is_option_number(correct):
        correct = 1
    return ScoredQuestion(id=question.id, correct_option=correct, title=question.title)


def compute_score(questions: Sequence[ScoredQuestion], answers: Dict[int, int]) -> int:
    return sum(1 for q in questions if answers.get(q.id) == q.correct_option)


class QuizSession:
    def __init__(self, questions: Sequence[ScoredQuestion], user_id: int, topic_id: int):
        if not questions:
            raise EmptyQuizError("a quiz needs at least one question")
        self.questions: List[ScoredQuestion] = list(questions)
        self.user_id = user_id
        self.topic_id = topic_id
        self.current_index = 0
        self.answers: Dict[int, int] = {}
        self.score: Optional[int] = None

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def completed(self) -> bool:
        return self.score is not None

    @property
    def current_question(self) -> ScoredQuestion:
        return self.questions[self.current_index]

    def select_option(self, question_id: int, option_number: int) -> None:
        if self.completed:
            raise RuntimeError("the attempt is already completed")
        if not is_option_number(option_number):
            raise ValueError(f"option must be one of {OPTION_NUMBERS}")
        if question_id not in {q.id for q in self.questions}:
            raise KeyError(question_id)
        self.answers[question_id] = option_number

    def advance(self) -> None:
        if self.completed:
            return
        if self.current_index < self.total_questions - 1:
            self.current_index += 1
        else:
            self.complete()

    def retreat(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def complete(self) -> int:
        if self.score is None:
            self.score = compute_score(self.questions, self.answers)
        return self.score

    def is_correct(self, question_id: int) -> bool:
        question = next(q for q in self.questions if q.id == question_id)
        return self.answers.get(question_id) == question.correct_option

    @property
    def result(self) -> ResultRecord:
        if not self.completed:
            raise RuntimeError("the attempt is still in progress")
        return ResultRecord(
            user_id=self.user_id,
            topic_id=self.topic_id,
            score=self.score,
            total_questions=self.total_questions,
        )


async def record_attempt(db: AsyncSession, session: QuizSession) -> bool:
    """Persist a completed attempt once; failures are logged and swallowed."""
    record = session.result
    try:
        db.add(QuizResult(
            user_id=record.user_id,
            topic_id=record.topic_id,
            score=record.score,
            total_questions=record.total_questions,
        ))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Failed to save quiz result for user %s on topic %s", record.user_id, record.topic_id
        )
        return False
    return True
