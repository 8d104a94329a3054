import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import jwt
from passlib.hash import pbkdf2_sha512

from app.core.config import DEFAULT_SECRET_KEY, settings

ALGORITHM = "HS256"
PBKDF2_ROUNDS = 100000
SALT_BYTES = 16

logger = logging.getLogger(__name__)

def check_secret_key() -> None:
    """Refuse to sign tokens with the built-in key outside development."""
    if settings.SECRET_KEY and settings.SECRET_KEY != DEFAULT_SECRET_KEY:
        return
    if not settings.is_development:
        raise RuntimeError("SECRET_KEY must be set when ENV is not development")
    logger.warning("SECRET_KEY is not set; bearer tokens are signed with the development default")

def get_password_hash(password: str) -> Tuple[str, str]:
    """Return ``(password_hash, salt_hex)`` for a new password."""
    salt = secrets.token_bytes(SALT_BYTES)
    hasher = pbkdf2_sha512.using(rounds=PBKDF2_ROUNDS, salt=salt)
    return hasher.hash(password), salt.hex()

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    # passlib compares digests in constant time
    if not hashed_password:
        return False
    try:
        return pbkdf2_sha512.verify(plain_password, hashed_password)
    except ValueError:
        return False

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Raises ``jose.JWTError`` when the token is invalid or expired."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
