from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.services import auth_service

router = APIRouter(prefix=settings.API_PREFIX, tags=["auth"])

@router.post("/register", status_code=201, response_model=RegisterResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.register(db, data)
    return {"message": "User registered successfully", "user": user}

@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await auth_service.login(db, data)
    return {"message": "Login successful", **result}
