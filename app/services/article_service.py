"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Reads select explicit columns joined with the category name and the
  submitter's username, so ORM identity-map state (and the password hash
  on ``User``) never leaks into a response.
- Update and delete are single conditional statements: the filter holds
  both the article id and ``submitter_id == caller``.  Zero affected rows
  means "not yours" and is reported as 403, whether or not the row exists.
- Every write that sets ``category_id`` is preceded by an existence check
  in the same transaction.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, OwnershipError
from app.models import Article, Category, User
from app.schemas import ArticleCreate, ArticlePatch
from app.services.common import changed_fields, ensure_caller_exists, ensure_category_exists, paginate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SORT_ORDERS = {
    "category": (Category.name, Article.id),
    "author": (User.username, Article.id),
}


def resolve_sort(sort: str | None) -> tuple:
    """
    Return the ORDER BY expressions for the ``sort`` query value.

    ``category`` and ``author`` order by the joined name (ties broken by
    id); anything else, including None, falls back to id ascending.
    """
    return _SORT_ORDERS.get(sort, (Article.id,))


def _article_query():
    return (
        select(
            Article.id,
            Article.title,
            Article.body,
            Article.category_id,
            Category.name.label("category_name"),
            Article.submitter_id,
            User.username.label("submitter_name"),
            Article.created_at,
        )
        .join(Category, Article.category_id == Category.id)
        .join(User, Article.submitter_id == User.id)
    )


async def _update_owned(db: AsyncSession, article_id: int, caller_id: int, values: dict) -> None:
    result = await db.execute(
        update(Article)
        .where(Article.id == article_id, Article.submitter_id == caller_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("User %d refused edit of article %d", caller_id, article_id)
        raise OwnershipError("You can only edit your own articles")


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_articles(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    sort: str | None = None,
) -> dict:
    """Return one page of articles in the order selected by *sort*."""
    q = _article_query().order_by(*resolve_sort(sort))
    return await paginate(db, q, page, limit)


async def get_articles_by_user(db: AsyncSession, user_id: int, page: int = 1, limit: int = 10) -> dict:
    q = _article_query().where(Article.submitter_id == user_id).order_by(Article.id)
    return await paginate(db, q, page, limit)


async def get_articles_by_category(
    db: AsyncSession, category_id: int, page: int = 1, limit: int = 10
) -> dict:
    q = _article_query().where(Article.category_id == category_id).order_by(Article.id)
    return await paginate(db, q, page, limit)


async def get_article(db: AsyncSession, article_id: int) -> dict:
    """Return the article identified by *article_id* or raise NotFoundError."""
    result = await db.execute(_article_query().where(Article.id == article_id))
    row = result.mappings().first()
    if row is None:
        raise NotFoundError("Article not found")
    return dict(row)


async def create_article(db: AsyncSession, data: ArticleCreate, submitter_id: int) -> dict:
    """
    Create an article submitted by *submitter_id*.

    The submitter always comes from the verified caller identity, never
    from the request body.
    """
    await ensure_caller_exists(db, submitter_id)
    await ensure_category_exists(db, data.category_id)

    article = Article(
        title=data.title,
        body=data.body,
        category_id=data.category_id,
        submitter_id=submitter_id,
    )
    db.add(article)
    await db.flush()
    logger.info("User %d created article %d", submitter_id, article.id)
    return await get_article(db, article.id)


async def replace_article(
    db: AsyncSession, article_id: int, data: ArticleCreate, caller_id: int
) -> dict:
    """Overwrite every editable field of an article the caller submitted."""
    await ensure_category_exists(db, data.category_id)
    await _update_owned(db, article_id, caller_id, data.model_dump())
    return await get_article(db, article_id)


async def update_article(
    db: AsyncSession, article_id: int, data: ArticlePatch, caller_id: int
) -> dict:
    """
    Change only the fields present in *data*.

    The category check runs only when ``category_id`` is part of the
    payload.
    """
    values = changed_fields(data)
    if "category_id" in values:
        await ensure_category_exists(db, values["category_id"])
    await _update_owned(db, article_id, caller_id, values)
    return await get_article(db, article_id)


async def delete_article(db: AsyncSession, article_id: int, caller_id: int) -> None:
    """Delete an article the caller submitted; its comments go with it."""
    result = await db.execute(
        delete(Article)
        .where(Article.id == article_id, Article.submitter_id == caller_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.info("User %d refused delete of article %d", caller_id, article_id)
        raise OwnershipError("You can only delete your own articles")
