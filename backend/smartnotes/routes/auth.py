"""
SmartNotesX Backend — Auth Route Handlers
===========================================

    POST /api/auth/register   public
    POST /api/auth/login      public
    GET  /api/auth/me         authenticated
    PUT  /api/auth/profile    authenticated
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import get_current_user, get_services
from smartnotes.models.user import User
from smartnotes.schemas.common import envelope
from smartnotes.schemas.user import LoginRequest, ProfileUpdate, RegisterRequest
from smartnotes.services import ServiceContainer

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Create a student account")
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.auth.register(db, body)
    return envelope(result, message="User registered successfully")


@router.post("/login", summary="Exchange credentials for a token")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.auth.login(db, body)
    return envelope(result, message="Login successful")


@router.get("/me", summary="Current user's profile")
async def me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.auth.profile(db, user))


@router.put("/profile", summary="Update name, branch, semester or avatar")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    profile = await services.auth.update_profile(db, user, body)
    return envelope(profile, message="Profile updated successfully")
