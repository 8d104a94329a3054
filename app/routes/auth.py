import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, or_
from app.core.config import settings
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.identity import ROLE_ADMIN, ROLE_USER, SUPER_ADMIN_ID
from app.core.security import verify_password, get_password_hash, create_access_token
from app.core.utils import generate_unique_reset_token
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import (
    GoogleLogin,
    LoginRequest,
    LoginResponse,
    PasswordReset,
    PasswordResetRequest,
    SignupResponse,
    UserCreate,
)
from app.services.google import verify_google_credential
from app.services.mailer import send_password_reset

router = APIRouter()
logger = logging.getLogger(__name__)

def signup_role(requested) -> str:
    # Self-service signup can never mint an admin
    return "quiz_manager" if requested == "quiz_manager" else ROLE_USER

async def find_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

def login_payload(user_id: int, email: str, username, role: str) -> dict:
    return {
        "userId": user_id,
        "email": email,
        "username": username,
        "role": role,
        "access_token": create_access_token(data={"sub": str(user_id), "role": role}),
        "token_type": "bearer",
    }

@router.post("/auth/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(user: UserCreate, db: AsyncSession = Depends(get_db)):
    # Check if email or username is taken
    result = await db.execute(select(User).where(User.email == user.email))
    if result.scalar_one_or_none():
        raise ConflictError("email already exists")
    if user.username:
        result = await db.execute(select(User).where(User.username == user.username))
        if result.scalar_one_or_none():
            raise ConflictError("username already exists")

    password_hash, salt = get_password_hash(user.password)
    role = signup_role(user.role)
    db_user = User(
        email=user.email,
        username=user.username,
        password_hash=password_hash,
        salt=salt,
        role=role,
    )
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup
        await db.rollback()
        raise ConflictError("email or username already exists")

    logger.info("User %s signed up with role %s", db_user.id, role)
    return {"ok": True, "role": role}

@router.post("/auth/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    identifier = credentials.identifier
    if identifier == settings.SUPER_ADMIN_USERNAME and credentials.password == settings.SUPER_ADMIN_PASSWORD:
        return login_payload(SUPER_ADMIN_ID, settings.SUPER_ADMIN_USERNAME, settings.SUPER_ADMIN_USERNAME, ROLE_ADMIN)

    result = await db.execute(
        select(User).where(or_(User.email == identifier.lower(), User.username == identifier))
    )
    user = result.scalars().first()
    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("invalid credentials")

    return login_payload(user.id, user.email, user.username, user.role)

@router.post("/auth/google", response_model=LoginResponse)
async def google_login(payload: GoogleLogin, db: AsyncSession = Depends(get_db)):
    claims = await verify_google_credential(payload.credential)
    email = claims["email"].strip().lower()

    user = await find_user_by_email(db, email)
    if not user:
        user = User(email=email, username=None, role=ROLE_USER)
        db.add(user)
        try:
            await db.commit()
            logger.info("Created user %s from Google sign-in", user.id)
        except IntegrityError:
            # A concurrent first sign-in created the row
            await db.rollback()
            user = await find_user_by_email(db, email)
            if not user:
                raise

    return login_payload(user.id, user.email, user.username, user.role)

@router.post("/auth/request-reset")
async def request_password_reset(payload: PasswordResetRequest, db: AsyncSession = Depends(get_db)):
    email = payload.email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    # Same answer whether or not the account exists
    if user:
        user.reset_token = await generate_unique_reset_token(db)
        user.reset_expires = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        await db.commit()
        try:
            await send_password_reset(user.email, user.reset_token)
        except OSError:
            logger.exception("Could not send password reset email to user %s", user.id)
    return {"ok": True}

@router.post("/auth/reset")
async def reset_password(payload: PasswordReset, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.reset_token == payload.token))
    user = result.scalar_one_or_none()
    if not user or not user.reset_expires or user.reset_expires < datetime.utcnow():
        raise ValidationError("invalid or expired reset token")

    user.password_hash, user.salt = get_password_hash(payload.password)
    user.reset_token = None
    user.reset_expires = None
    await db.commit()
    return {"ok": True}
