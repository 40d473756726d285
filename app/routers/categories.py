from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.dependencies import PaginationParams, get_current_user_id
from app.schemas import ArticleResponse, CategoryCreate, CategoryPatch, CategoryResponse, Page
from app.services import article_service, category_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/categories", tags=["categories"])

@router.get("", response_model=Page[CategoryResponse])
async def list_categories(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await category_service.get_categories(db, pagination.page, pagination.limit)

@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)):
    return await category_service.get_category(db, category_id)

@router.get("/{category_id}/articles", response_model=Page[ArticleResponse])
async def list_category_articles(
    category_id: int = Path(gt=0),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles_by_category(
        db, category_id, pagination.page, pagination.limit
    )

# Categories are not owned: authentication is required, ownership is not.

@router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(
    data: CategoryCreate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await category_service.create_category(db, data)

@router.put("/{category_id}", response_model=CategoryResponse)
async def replace_category(
    data: CategoryCreate,
    category_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await category_service.replace_category(db, category_id, data)

@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    data: CategoryPatch,
    category_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await category_service.update_category(db, category_id, data)

@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await category_service.delete_category(db, category_id)
