"""
Category service: CRUD for categories.

Categories have no owner: any authenticated user may edit or delete
them.  A category that still has articles cannot be deleted; the
foreign key on ``articles.category_id`` refuses the DELETE and the
integrity error is reported as a conflict.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError
from app.models import Category
from app.schemas import CategoryCreate, CategoryPatch
from app.services.common import changed_fields, paginate

logger = logging.getLogger(__name__)

_CATEGORY_COLUMNS = (Category.id, Category.name, Category.description, Category.created_at)


async def _update(db: AsyncSession, category_id: int, values: dict) -> None:
    result = await db.execute(
        update(Category)
        .where(Category.id == category_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Category not found")


async def get_categories(db: AsyncSession, page: int = 1, limit: int = 10) -> dict:
    q = select(*_CATEGORY_COLUMNS).order_by(Category.id)
    return await paginate(db, q, page, limit)


async def get_category(db: AsyncSession, category_id: int) -> dict:
    result = await db.execute(select(*_CATEGORY_COLUMNS).where(Category.id == category_id))
    row = result.mappings().first()
    if row is None:
        raise NotFoundError("Category not found")
    return dict(row)


async def create_category(db: AsyncSession, data: CategoryCreate) -> dict:
    category = Category(name=data.name, description=data.description)
    db.add(category)
    await db.flush()
    return await get_category(db, category.id)


async def replace_category(db: AsyncSession, category_id: int, data: CategoryCreate) -> dict:
    await _update(db, category_id, data.model_dump())
    return await get_category(db, category_id)


async def update_category(db: AsyncSession, category_id: int, data: CategoryPatch) -> dict:
    await _update(db, category_id, changed_fields(data))
    return await get_category(db, category_id)


async def delete_category(db: AsyncSession, category_id: int) -> None:
    try:
        result = await db.execute(
            delete(Category)
            .where(Category.id == category_id)
            .execution_options(synchronize_session=False)
        )
    except IntegrityError:
        logger.info("Refused delete of category %d: still referenced", category_id)
        raise ConflictError("Category is referenced by existing articles")
    if result.rowcount == 0:
        raise NotFoundError("Category not found")
