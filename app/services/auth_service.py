"""
Auth service: password hashing, identity tokens, and the register /
login flows built on top of them.

Tokens are HS256 JWTs whose ``sub`` claim carries the user id and whose
``exp`` claim closes a ``JWT_EXPIRE_HOURS`` validity window.  bcrypt is
used directly (no passlib wrapper).
"""
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.errors import ConflictError, InvalidCredentials
from app.models import User
from app.schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

# bcrypt silently ignores anything past 72 bytes; truncate explicitly so
# hashing and verification always see the same input.
BCRYPT_MAX_BYTES = 72

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"
INVALID_LOGIN_MESSAGE = "Invalid email or password"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of *password* for storage."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True when *plain* matches *hashed*; a malformed hash is False."""
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def issue_token(user_id: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=settings.JWT_EXPIRE_HOURS)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> int | None:
    """
    Return the user id bound to *token*, or None when the token is
    malformed, badly signed, expired, or carries no integer subject.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Register / login
# ---------------------------------------------------------------------------

def _public_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "created_at": user.created_at,
    }


async def register(db: AsyncSession, data: RegisterRequest) -> dict:
    """
    Create a user account and return its public representation.

    The pre-insert lookup gives a clean 400 in the common case; the
    unique constraints still catch two registrations racing each other.
    """
    existing = await db.execute(
        select(User.id).where(or_(User.email == data.email, User.username == data.username))
    )
    if existing.first() is not None:
        logger.info("Registration rejected: duplicate email or username")
        raise ConflictError(DUPLICATE_USER_MESSAGE)

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError(DUPLICATE_USER_MESSAGE)
    await db.refresh(user, ["created_at"])
    logger.info("Registered user id=%d", user.id)
    return _public_user(user)


async def login(db: AsyncSession, data: LoginRequest) -> dict:
    """
    Check *data* against the stored hash and return ``{user, token}``.

    Unknown email and wrong password raise the same error so the
    response never reveals which one was wrong.
    """
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(data.password, user.password_hash):
        raise InvalidCredentials(INVALID_LOGIN_MESSAGE)
    return {"user": _public_user(user), "token": issue_token(user.id)}
