# content_api/api/v1/api.py
from fastapi import APIRouter

from content_api.api.v1.endpoints import articles, auth, users

api_router_v1 = APIRouter(prefix="/api/v1")

api_router_v1.include_router(auth.router, prefix="/auth")
api_router_v1.include_router(users.router, prefix="/users")
api_router_v1.include_router(articles.router, prefix="/articles")
