import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.core.errors import NotFoundError, ValidationError
from app.core.identity import ROLE_ADMIN, Identity, require_roles, require_super_admin
from app.db.session import get_db
from app.models.quiz_result import QuizResult
from app.models.user import User
from app.schemas.auth import UserOut
from app.schemas.result import AdminQuizResult
from app.schemas.stats import Stats
from app.services.reporting import all_results, global_stats

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/users", response_model=List[UserOut])
async def list_users(
    identity: Identity = Depends(require_roles(ROLE_ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(User).order_by(User.id.desc()))
    return result.scalars().all()

@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    identity: Identity = Depends(require_roles(ROLE_ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    if user_id == identity.id:
        raise ValidationError("you cannot delete your own account")
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("User not found")
    # Results cascade; authored questions and answers keep created_by = NULL
    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()
    logger.info("User %s deleted user %s", identity.id, user_id)
    return {"ok": True}

@router.get("/admin/results", response_model=List[AdminQuizResult])
async def list_all_results(
    identity: Identity = Depends(require_roles(ROLE_ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    return await all_results(db)

@router.delete("/admin/results/{result_id}")
async def delete_result(
    result_id: int,
    identity: Identity = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(QuizResult.id).where(QuizResult.id == result_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Result not found")
    await db.execute(delete(QuizResult).where(QuizResult.id == result_id))
    await db.commit()
    return {"ok": True}

@router.get("/admin/stats", response_model=Stats)
async def stats(
    identity: Identity = Depends(require_roles(ROLE_ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    return await global_stats(db)
