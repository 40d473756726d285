"""
Comment service: CRUD for comments, owned by the user who wrote them.

Writes follow the same rules as articles: ``article_id`` is checked for
existence before it is stored, and update/delete filter on both the
comment id and ``user_id == caller`` in one statement.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, OwnershipError
from app.models import Comment, User
from app.schemas import CommentCreate, CommentPatch
from app.services.common import changed_fields, ensure_article_exists, ensure_caller_exists, paginate

logger = logging.getLogger(__name__)


def _comment_query():
    return (
        select(
            Comment.id,
            Comment.content,
            Comment.article_id,
            Comment.user_id,
            User.username.label("user_name"),
            Comment.created_at,
        )
        .join(User, Comment.user_id == User.id)
    )


async def _update_owned(db: AsyncSession, comment_id: int, caller_id: int, values: dict) -> None:
    result = await db.execute(
        update(Comment)
        .where(Comment.id == comment_id, Comment.user_id == caller_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("User %d refused edit of comment %d", caller_id, comment_id)
        raise OwnershipError("You can only edit your own comments")


async def get_comments(db: AsyncSession, page: int = 1, limit: int = 10) -> dict:
    return await paginate(db, _comment_query().order_by(Comment.id), page, limit)


async def get_comments_by_article(
    db: AsyncSession, article_id: int, page: int = 1, limit: int = 10
) -> dict:
    q = _comment_query().where(Comment.article_id == article_id).order_by(Comment.id)
    return await paginate(db, q, page, limit)


async def get_comments_by_user(db: AsyncSession, user_id: int, page: int = 1, limit: int = 10) -> dict:
    q = _comment_query().where(Comment.user_id == user_id).order_by(Comment.id)
    return await paginate(db, q, page, limit)


async def get_comment(db: AsyncSession, comment_id: int) -> dict:
    result = await db.execute(_comment_query().where(Comment.id == comment_id))
    row = result.mappings().first()
    if row is None:
        raise NotFoundError("Comment not found")
    return dict(row)


async def add_comment(db: AsyncSession, data: CommentCreate, user_id: int) -> dict:
    """
    Attach a new comment by *user_id* to ``data.article_id``.

    Raises NotFoundError (and writes nothing) when the article does not
    exist.
    """
    await ensure_caller_exists(db, user_id)
    await ensure_article_exists(db, data.article_id)

    comment = Comment(content=data.content, article_id=data.article_id, user_id=user_id)
    db.add(comment)
    await db.flush()
    logger.info("User %d commented on article %d", user_id, data.article_id)
    return await get_comment(db, comment.id)


async def replace_comment(
    db: AsyncSession, comment_id: int, data: CommentCreate, caller_id: int
) -> dict:
    await ensure_article_exists(db, data.article_id)
    await _update_owned(db, comment_id, caller_id, data.model_dump())
    return await get_comment(db, comment_id)


async def update_comment(
    db: AsyncSession, comment_id: int, data: CommentPatch, caller_id: int
) -> dict:
    values = changed_fields(data)
    if "article_id" in values:
        await ensure_article_exists(db, values["article_id"])
    await _update_owned(db, comment_id, caller_id, values)
    return await get_comment(db, comment_id)


async def delete_comment(db: AsyncSession, comment_id: int, caller_id: int) -> None:
    result = await db.execute(
        delete(Comment)
        .where(Comment.id == comment_id, Comment.user_id == caller_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("User %d refused delete of comment %d", caller_id, comment_id)
        raise OwnershipError("You can only delete your own comments")
