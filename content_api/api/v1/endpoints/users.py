# content_api/api/v1/endpoints/users.py
from fastapi import APIRouter, Body, Depends

from content_api.api.deps import get_user_service_v1
from content_api.core.security import get_current_user_id
from content_api.models.response import ApiResponse
from content_api.models.user import User
from content_api.services.v1.user import UserService

router = APIRouter(tags=["Users"])


@router.post("/register", response_model=ApiResponse)
async def register_user(
    user_in: User.Create = Body(...),
    user_service: UserService = Depends(get_user_service_v1),
):
    return await user_service.register(user_in)


@router.get("/me", response_model=ApiResponse)
async def read_users_me(
    user_id: int = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service_v1),
):
    return await user_service.profile(user_id)
