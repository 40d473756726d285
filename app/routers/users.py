from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.dependencies import PaginationParams, get_current_user_id
from app.schemas import ArticleResponse, CommentResponse, Page, UserPatch, UserResponse, UserUpdate
from app.services import article_service, comment_service, user_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/users", tags=["users"])

@router.get("", response_model=Page[UserResponse])
async def list_users(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_users(db, pagination.page, pagination.limit)

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)):
    return await user_service.get_user(db, user_id)

@router.get("/{user_id}/articles", response_model=Page[ArticleResponse])
async def list_user_articles(
    user_id: int = Path(gt=0),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles_by_user(db, user_id, pagination.page, pagination.limit)

@router.get("/{user_id}/comments", response_model=Page[CommentResponse])
async def list_user_comments(
    user_id: int = Path(gt=0),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_comments_by_user(db, user_id, pagination.page, pagination.limit)

@router.put("/{user_id}", response_model=UserResponse)
async def replace_user(
    data: UserUpdate,
    user_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.replace_user(db, user_id, data, caller_id)

@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    data: UserPatch,
    user_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_user(db, user_id, data, caller_id)

@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await user_service.delete_user(db, user_id, caller_id)
