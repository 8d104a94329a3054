from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.quiz_result import QuizResult
from app.models.topic import Topic
from app.models.user import User

TOP_N = 20

# Mean of per-attempt percentages; zero-question attempts are NULL and skipped by AVG
_percent = QuizResult.score * 100.0 / func.nullif(QuizResult.total_questions, 0)


def _round_percent(value: Optional[float]) -> float:
    return round(float(value), 2) if value is not None else 0.0


async def results_for_user(db: AsyncSession, user_id: int) -> List[QuizResult]:
    result = await db.execute(
        select(QuizResult)
        .where(QuizResult.user_id == user_id)
        .order_by(QuizResult.taken_at.desc(), QuizResult.id.desc())
    )
    return list(result.scalars().all())


async def all_results(db: AsyncSession) -> List[dict]:
    result = await db.execute(
        select(QuizResult, User.email, User.username, Topic.title)
        .join(User, User.id == QuizResult.user_id)
        .join(Topic, Topic.id == QuizResult.topic_id)
        .order_by(QuizResult.taken_at.desc(), QuizResult.id.desc())
    )
    return [
        {
            "id": row.id,
            "user_id": row.user_id,
            "topic_id": row.topic_id,
            "score": row.score,
            "total_questions": row.total_questions,
            "taken_at": row.taken_at,
            "email": email,
            "username": username,
            "topic_title": title,
        }
        for row, email, username, title in result.all()
    ]


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def per_user_stats(db: AsyncSession, limit: int = TOP_N) -> List[dict]:
    attempts = func.count(QuizResult.id).label("attempts")
    result = await db.execute(
        select(QuizResult.user_id, User.email, User.username, attempts, func.avg(_percent))
        .join(User, User.id == QuizResult.user_id)
        .group_by(QuizResult.user_id, User.email, User.username)
        .order_by(attempts.desc(), QuizResult.user_id)
        .limit(limit)
    )
    return [
        {
            "user_id": user_id,
            "email": email,
            "username": username,
            "attempts": count,
            "averageScorePercent": _round_percent(average),
        }
        for user_id, email, username, count, average in result.all()
    ]


async def per_topic_stats(db: AsyncSession, limit: int = TOP_N) -> List[dict]:
    attempts = func.count(QuizResult.id).label("attempts")
    result = await db.execute(
        select(QuizResult.topic_id, Topic.title, attempts, func.avg(_percent))
        .join(Topic, Topic.id == QuizResult.topic_id)
        .group_by(QuizResult.topic_id, Topic.title)
        .order_by(attempts.desc(), QuizResult.topic_id)
        .limit(limit)
    )
    return [
        {
            "topic_id": topic_id,
            "title": title,
            "attempts": count,
            "averageScorePercent": _round_percent(average),
        }
        for topic_id, title, count, average in result.all()
    ]


async def global_stats(db: AsyncSession) -> dict:
    average = await db.execute(select(func.avg(_percent)))
    return {
        "usersCount": await _count(db, User),
        "resultsCount": await _count(db, QuizResult),
        "topicsCount": await _count(db, Topic),
        "averageScorePercent": _round_percent(average.scalar_one()),
        "byUser": await per_user_stats(db),
        "byTopic": await per_topic_stats(db),
    }
