"""
User service: reads and self-service edits for the User aggregate.

A user row has no separate owner column: its own id is the ownership
key, so edits start with an explicit ``caller_id == user_id`` guard
instead of folding the check into the statement filter.  Every read
selects ``USER_COLUMNS`` only, which never includes the password hash.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError, OwnershipError
from app.models import User
from app.schemas import UserPatch, UserUpdate
from app.services.common import changed_fields, paginate

logger = logging.getLogger(__name__)

USER_COLUMNS = (User.id, User.username, User.email, User.created_at)


def _require_self(user_id: int, caller_id: int, action: str) -> None:
    if user_id != caller_id:
        logger.info("User %d refused %s of user %d", caller_id, action, user_id)
        raise OwnershipError(f"You can only {action} your own user")


async def _update(db: AsyncSession, user_id: int, values: dict) -> None:
    try:
        result = await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
    except IntegrityError:
        raise ConflictError("User with this email or username already exists")
    if result.rowcount == 0:
        raise NotFoundError("User not found")


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_users(db: AsyncSession, page: int = 1, limit: int = 10) -> dict:
    """Return one page of users ordered by id."""
    return await paginate(db, select(*USER_COLUMNS).order_by(User.id), page, limit)


async def get_user(db: AsyncSession, user_id: int) -> dict:
    result = await db.execute(select(*USER_COLUMNS).where(User.id == user_id))
    row = result.mappings().first()
    if row is None:
        raise NotFoundError("User not found")
    return dict(row)


async def replace_user(db: AsyncSession, user_id: int, data: UserUpdate, caller_id: int) -> dict:
    _require_self(user_id, caller_id, "edit")
    await _update(db, user_id, data.model_dump())
    return await get_user(db, user_id)


async def update_user(db: AsyncSession, user_id: int, data: UserPatch, caller_id: int) -> dict:
    _require_self(user_id, caller_id, "edit")
    await _update(db, user_id, changed_fields(data))
    return await get_user(db, user_id)


async def delete_user(db: AsyncSession, user_id: int, caller_id: int) -> None:
    """
    Delete the caller's own account.

    Articles and comments are removed by the ON DELETE CASCADE foreign
    keys, not by the ORM.
    """
    _require_self(user_id, caller_id, "delete")
    result = await db.execute(
        delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("User not found")
    logger.info("Deleted user %d", user_id)
