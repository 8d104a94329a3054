import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.core.errors import NotFoundError, field_error
from app.core.identity import CONTENT_ROLES, Identity, require_roles
from app.db.session import get_db
from app.models.topic import Topic
from app.schemas.topic import Topic as TopicSchema, TopicCreate, TopicUpdate

router = APIRouter()
logger = logging.getLogger(__name__)

async def get_topic_or_404(db: AsyncSession, topic_id: int) -> Topic:
    result = await db.execute(select(Topic).where(Topic.id == topic_id))
    topic = result.scalar_one_or_none()
    if not topic:
        raise NotFoundError(
            "Topic not found",
            field_error("topic_id", f"Topic with ID {topic_id} does not exist"),
        )
    return topic

@router.get("/topics", response_model=List[TopicSchema])
async def list_topics(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Topic).order_by(Topic.id.desc()))
    return result.scalars().all()

@router.get("/topics/{topic_id}", response_model=TopicSchema)
async def get_topic(topic_id: int, db: AsyncSession = Depends(get_db)):
    return await get_topic_or_404(db, topic_id)

@router.post("/topics", status_code=status.HTTP_201_CREATED)
async def create_topic(
    topic_data: TopicCreate,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    topic = Topic(**topic_data.model_dump())
    db.add(topic)
    await db.commit()
    logger.info("User %s created topic %s", identity.id, topic.id)
    return {"id": topic.id}

@router.put("/topics/{topic_id}")
async def update_topic(
    topic_id: int,
    topic_data: TopicUpdate,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    topic = await get_topic_or_404(db, topic_id)
    # Fields left out of the request keep their stored values
    for field, value in topic_data.model_dump(exclude_unset=True).items():
        setattr(topic, field, value)
    await db.commit()
    return {"ok": True}

@router.delete("/topics/{topic_id}")
async def delete_topic(
    topic_id: int,
    identity: Identity = Depends(require_roles(*CONTENT_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    await get_topic_or_404(db, topic_id)
    # Questions, their answers and quiz results go with it (ON DELETE CASCADE)
    await db.execute(delete(Topic).where(Topic.id == topic_id))
    await db.commit()
    logger.info("User %s deleted topic %s", identity.id, topic_id)
    return {"ok": True}
