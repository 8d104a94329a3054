import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.core.errors import NotFoundError, ValidationError, field_error
from app.core.identity import CONTENT_ROLES, Identity, require_roles
from app.db.session import get_db
from app.models.question import Answer, Question
from app.models.topic import Topic
from app.schemas.question import (
    Answer as AnswerSchema,
    AnswerWrite,
    Question as QuestionSchema,
    QuestionWrite,
)

router = APIRouter()
logger = logging.getLogger(__name__)

async def ensure_topic_exists(db: AsyncSession, topic_id: Optional[int]) -> None:
    if topic_id is None:
        return
    result = await db.execute(select(Topic.id).where(Topic.id == topic_id))
    if result.scalar_one_or_none() is None:
        raise ValidationError(
            "topic does not exist",
            field_error("topicId", f"Topic with ID {topic_id} does not exist"),
        )

async def get_question_or_404(db: AsyncSession, question_id: int) -> Question:
    result = await db.execute(select(Question).where(Question.id == question_id))
    question = result.scalar_one_or_none()
    if not question:
        raise NotFoundError(
            "Question not found",
            field_error("question_id", f"Question with ID {question_id} does not exist"),
        )
    return question

async def get_answer_or_404(db: AsyncSession, answer_id: int) -> Answer:
    result = await db.execute(select(Answer).where(Answer.id == answer_id))
    answer = result.scalar_one_or_none()
    if not answer:
        raise NotFoundError("Answer not found")
    return answer

async def questions_for_topic(db: AsyncSession, topic_id: Optional[int] = None) -> List[Question]:
    stmt = select(Question).order_by(Question.id.desc())
    if topic_id is not None:
        stmt = stmt.where(Question.topic_id == topic_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())

@router.get("/questions", response_model=List[QuestionSchema])
async def list_questions(
    topic_id: Optional[int] = Query(default=None, alias="topicId"),
    db: AsyncSession = Depends(get_db)
):
    return await questions_for_topic(db, topic_id)

@router.get("/questions/{question_id}", response_model=QuestionSchema)
async def get_question(question_id: int, db: AsyncSession = Depends(get_db)):
    return await get_question_or_404(db, question_id)

@router.post("/questions", status_code=status.HTTP_201_CREATED)
async def create_question(
    question_data: QuestionWrite,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    await ensure_topic_exists(db, question_data.topicId)
    question = Question(
        title=question_data.title,
        body=question_data.body,
        topic_id=question_data.topicId,
        # The super-admin has no users row to point at
        created_by=None if identity.is_super_admin else identity.id,
    )
    db.add(question)
    await db.commit()
    return {"id": question.id}

@router.put("/questions/{question_id}")
async def update_question(
    question_id: int,
    question_data: QuestionWrite,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    question = await get_question_or_404(db, question_id)
    await ensure_topic_exists(db, question_data.topicId)
    question.title = question_data.title
    question.body = question_data.body
    question.topic_id = question_data.topicId
    await db.commit()
    return {"ok": True}

@router.delete("/questions/{question_id}")
async def delete_question(
    question_id: int,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    await get_question_or_404(db, question_id)
    await db.execute(delete(Question).where(Question.id == question_id))
    await db.commit()
    return {"ok": True}

@router.get("/questions/{question_id}/answers", response_model=List[AnswerSchema])
async def list_answers(question_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Answer).where(Answer.question_id == question_id).order_by(Answer.id.asc())
    )
    return result.scalars().all()

@router.post("/questions/{question_id}/answers", status_code=status.HTTP_201_CREATED)
async def create_answer(
    question_id: int,
    answer_data: AnswerWrite,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    await get_question_or_404(db, question_id)
    answer = Answer(
        question_id=question_id,
        body=answer_data.body,
        is_correct=answer_data.is_correct,
        created_by=None if identity.is_super_admin else identity.id,
    )
    db.add(answer)
    await db.commit()
    return {"id": answer.id}

@router.put("/answers/{answer_id}")
async def update_answer(
    answer_id: int,
    answer_data: AnswerWrite,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    answer = await get_answer_or_404(db, answer_id)
    answer.body = answer_data.body
    answer.is_correct = answer_data.is_correct
    await db.commit()
    return {"ok": True}

@router.delete("/answers/{answer_id}")
async def delete_answer(
    answer_id: int,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    await get_answer_or_404(db, answer_id)
    await db.execute(delete(Answer).where(Answer.id == answer_id))
    await db.commit()
    return {"ok": True}
