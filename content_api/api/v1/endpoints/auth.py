# content_api/api/v1/endpoints/auth.py
from fastapi import APIRouter, Body, Depends, Request

from content_api.api.deps import get_auth_service
from content_api.core.config import LOGIN_RATE_LIMIT
from content_api.core.rate_limiter import limiter
from content_api.models.response import ApiResponse
from content_api.models.user import User
from content_api.services.auth import AuthService

router = APIRouter(tags=["Authentication"])


# Path: /api/v1/auth/login
@router.post("/login", response_model=ApiResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,  # required by limiter
    login_in: User.Login = Body(...),
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.login(login_in.phone, login_in.password)


# Path: /api/v1/auth/logout
@router.post("/logout", response_model=ApiResponse)
async def logout(auth_service: AuthService = Depends(get_auth_service)):
    return await auth_service.logout()
