import json
import secrets
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.user import User

async def generate_unique_reset_token(db: AsyncSession) -> str:
    """Generate a password-reset token not held by any other user."""
    while True:
        token = secrets.token_urlsafe(32)

        result = await db.execute(select(User.id).where(User.reset_token == token))
        if not result.scalar_one_or_none():
            return token

def parse_question_body(body: Optional[str]) -> dict:
    """Decode a question body; anything that is not a JSON object yields ``{}``."""
    if not body:
        return {}
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}
