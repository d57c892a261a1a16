# content_api/api/deps.py
# Service providers: one factory per service, overridable via app.dependency_overrides.
from fastapi import Depends, Request

from content_api.cache.auth_cache import AuthCache, get_auth_cache
from content_api.core.security import get_client_ip, get_device_id
from content_api.dao.article import ArticleDao
from content_api.dao.user import UserDao
from content_api.services.auth import AuthService
from content_api.services.v1.article import ArticleService
from content_api.services.v1.user import UserService


def get_user_dao() -> UserDao:
    return UserDao()


def get_article_dao() -> ArticleDao:
    return ArticleDao()


def get_cache(request: Request) -> AuthCache:
    return getattr(request.app.state, "auth_cache", None) or get_auth_cache()


def get_auth_service(
    request: Request,
    user_dao: UserDao = Depends(get_user_dao),
    auth_cache: AuthCache = Depends(get_cache),
) -> AuthService:
    return AuthService(user_dao, auth_cache, device_id=get_device_id(request), client_ip=get_client_ip(request))


def get_user_service_v1(user_dao: UserDao = Depends(get_user_dao)) -> UserService:
    return UserService(user_dao)


def get_article_service_v1(article_dao: ArticleDao = Depends(get_article_dao)) -> ArticleService:
    return ArticleService(article_dao)
