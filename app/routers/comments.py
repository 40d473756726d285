from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.dependencies import PaginationParams, get_current_user_id
from app.schemas import CommentCreate, CommentPatch, CommentResponse, Page
from app.services import comment_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/comments", tags=["comments"])

@router.get("", response_model=Page[CommentResponse])
async def list_comments(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_comments(db, pagination.page, pagination.limit)

@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int = Path(gt=0), db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comment(db, comment_id)

@router.post("", status_code=201, response_model=CommentResponse)
async def add_comment(
    data: CommentCreate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.add_comment(db, data, caller_id)

@router.put("/{comment_id}", response_model=CommentResponse)
async def replace_comment(
    data: CommentCreate,
    comment_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.replace_comment(db, comment_id, data, caller_id)

@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    data: CommentPatch,
    comment_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.update_comment(db, comment_id, data, caller_id)

@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: int = Path(gt=0),
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, comment_id, caller_id)
