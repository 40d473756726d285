"""
Helpers shared by the resource services: paginated reads, partial-update
payload extraction, and the existence checks that guard foreign-key
writes.
"""
import logging
import math

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import InvalidToken, NotFoundError, ValidationFailed
from app.models import Article, Category, User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

async def paginate(db: AsyncSession, query: Select, page: int, limit: int) -> dict:
    """
    Run *query* for one page and return the list envelope.

    Two SQL statements are issued:
    1. COUNT over the unordered query.
    2. The query itself with LIMIT/OFFSET applied.
    """
    count_q = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_q)).scalar_one()

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    return {
        "items": [dict(row) for row in result.mappings().all()],
        "total": total,
        "page": page,
        "limit": limit,
        "pages": math.ceil(total / limit) if total > 0 else 0,
    }


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------

def changed_fields(data: BaseModel) -> dict:
    """
    Return the fields the client actually supplied in a PATCH body.

    Explicit nulls are dropped (every column is NOT NULL).  A payload with
    nothing left is rejected so a PATCH can never turn into an empty write.
    """
    values = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not values:
        raise ValidationFailed("No fields to update")
    return values


# ---------------------------------------------------------------------------
# Referential checks
# ---------------------------------------------------------------------------

async def ensure_category_exists(db: AsyncSession, category_id: int) -> None:
    """Raise NotFoundError unless a category with *category_id* exists."""
    result = await db.execute(select(Category.id).where(Category.id == category_id))
    if result.first() is None:
        raise NotFoundError("Category not found")


async def ensure_article_exists(db: AsyncSession, article_id: int) -> None:
    """Raise NotFoundError unless an article with *article_id* exists."""
    result = await db.execute(select(Article.id).where(Article.id == article_id))
    if result.first() is None:
        raise NotFoundError("Article not found")


async def ensure_caller_exists(db: AsyncSession, user_id: int) -> None:
    """
    Raise InvalidToken when the verified caller no longer has a user row.

    Tokens stay valid after the account is deleted.  Every create that
    stamps the caller as owner calls this before inserting.
    """
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.first() is None:
        logger.info("Rejected write from deleted user %d", user_id)
        raise InvalidToken("Invalid or expired token")
