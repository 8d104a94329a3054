import logging
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncEngine
from app.core.utils import parse_question_body
from app.db.base import Base, Question, Topic
from app.db.session import AsyncSessionLocal, engine as default_engine

logger = logging.getLogger(__name__)

async def backfill_question_topics() -> int:
    """Copy ``topic_id`` out of JSON bodies for questions created before the column existed."""
    updated = 0
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Question.id, Question.body).where(Question.topic_id.is_(None)))
        rows = result.all()
        if not rows:
            return 0
        topic_ids = set((await db.execute(select(Topic.id))).scalars().all())
        for question_id, body in rows:
            topic_id = parse_question_body(body).get("topic_id")
            if isinstance(topic_id, int) and topic_id in topic_ids:
                await db.execute(update(Question).where(Question.id == question_id).values(topic_id=topic_id))
                updated += 1
        await db.commit()
    if updated:
        logger.info("Backfilled topic_id on %s questions", updated)
    return updated

async def init_db(engine: AsyncEngine = default_engine) -> None:
    """Create missing tables and repair legacy rows; run once before serving."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await backfill_question_topics()
