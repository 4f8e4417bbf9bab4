"""
Registration and login API router
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import AuthResponse, LoginRequest, RegisterRequest
from app.api.services.user_manager import UserManager
from app.core.async_database import get_db

router = APIRouter()

user_manager = UserManager()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a USER or OWNER account and sign in"""
    return await user_manager.register(db, request)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await user_manager.login(db, request)
