import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import NotFoundError, ValidationError, field_error
from app.core.identity import Identity, require_roles
from app.db.session import get_db
from app.models.quiz_result import QuizResult
from app.routes.questions import questions_for_topic
from app.routes.topics import get_topic_or_404
from app.schemas.result import AttemptOutcome, AttemptSubmit, QuizResult as QuizResultSchema, QuizResultCreate
from app.services.quiz_session import QuizSession, record_attempt, scored_question
from app.services.reporting import results_for_user

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/results", response_model=List[QuizResultSchema])
async def list_my_results(
    identity: Identity = Depends(require_roles()),
    db: AsyncSession = Depends(get_db)
):
    return await results_for_user(db, identity.id)

@router.post("/results", status_code=status.HTTP_201_CREATED)
async def save_result(
    result_data: QuizResultCreate,
    identity: Identity = Depends(require_roles()),
    db: AsyncSession = Depends(get_db)
):
    """Store a result scored by the client."""
    if identity.is_super_admin:
        raise ValidationError("the super-admin account has no result history")
    await get_topic_or_404(db, result_data.topic_id)
    db.add(QuizResult(user_id=identity.id, **result_data.model_dump()))
    await db.commit()
    return {"ok": True}

@router.post("/topics/{topic_id}/attempts", response_model=AttemptOutcome)
async def submit_attempt(
    topic_id: int,
    attempt: AttemptSubmit,
    identity: Identity = Depends(require_roles()),
    db: AsyncSession = Depends(get_db)
):
    """Score a finished attempt on the server, then store it best-effort."""
    await get_topic_or_404(db, topic_id)
    # Present questions oldest first, the order they were authored in
    questions = list(reversed(await questions_for_topic(db, topic_id)))
    if not questions:
        raise NotFoundError("No questions available for this topic yet.")

    session = QuizSession([scored_question(q) for q in questions], identity.id, topic_id)
    known_ids = {q.id for q in session.questions}
    for question_id, option in attempt.answers.items():
        if question_id not in known_ids:
            raise ValidationError(
                "answer for a question outside this topic",
                field_error(f"answers.{question_id}", "unknown question"),
            )
        try:
            session.select_option(question_id, option)
        except ValueError as e:
            raise ValidationError(str(e), field_error(f"answers.{question_id}", str(e)))

    score = session.complete()
    saved = await record_attempt(db, session)
    return {
        "topic_id": topic_id,
        "score": score,
        "total_questions": session.total_questions,
        "percentage": round(score * 100.0 / session.total_questions, 2),
        "saved": saved,
        "correct": {q.id: session.is_correct(q.id) for q in session.questions},
    }
