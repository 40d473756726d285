from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.dependencies import PaginationParams, get_current_user_id
from app.schemas import ArticleCreate, ArticlePatch, ArticleResponse, CommentResponse, Page
from app.services import article_service, comment_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/articles", tags=["articles"])

@router.get("", response_model=Page[ArticleResponse])
async def list_articles(
    pagination: PaginationParams = Depends(),
    sort: str | None = Query(
        None,
        description="`category` orders by category name, `author` by submitter username.",
    ),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles(db, pagination.page, pagination.limit, sort)

@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)):
    return await article_service.get_article(db, article_id)

@router.get("/{article_id}/comments", response_model=Page[CommentResponse])
async def list_article_comments(
    article_id: int = Path(gt=0),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_comments_by_article(
        db, article_id, pagination.page, pagination.limit
    )

@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(
    data: ArticleCreate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.create_article(db, data, caller_id)

@router.put("/{article_id}", response_model=ArticleResponse)
async def replace_article(
    data: ArticleCreate,
    article_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.replace_article(db, article_id, data, caller_id)

@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    data: ArticlePatch,
    article_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.update_article(db, article_id, data, caller_id)

@router.delete("/{article_id}", status_code=204)
async def delete_article(
    article_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await article_service.delete_article(db, article_id, caller_id)
