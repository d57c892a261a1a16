# content_api/api/v1/endpoints/articles.py
from fastapi import APIRouter, Body, Depends, Path, Query

from content_api.api.deps import get_article_service_v1
from content_api.models.article import Article
from content_api.models.response import ApiResponse
from content_api.services.v1.article import ArticleService

router = APIRouter(tags=["Articles"])


@router.get("", response_model=ApiResponse, summary="List Articles")
async def list_articles(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    article_service: ArticleService = Depends(get_article_service_v1),
):
    return await article_service.list(page, size)


@router.get("/{article_id}", response_model=ApiResponse, summary="Get Article Details")
async def read_article(
    article_id: int = Path(..., ge=1),
    article_service: ArticleService = Depends(get_article_service_v1),
):
    return await article_service.detail(article_id)


@router.post("", response_model=ApiResponse, summary="Create Article")
async def create_article(
    article_in: Article.Create = Body(...),
    article_service: ArticleService = Depends(get_article_service_v1),
):
    return await article_service.add(article_in)


@router.put("/{article_id}", response_model=ApiResponse, summary="Update Article")
async def update_article(
    article_id: int = Path(..., ge=1),
    article_in: Article.Update = Body(...),
    article_service: ArticleService = Depends(get_article_service_v1),
):
    return await article_service.update(article_id, article_in)


@router.delete("/{article_id}", response_model=ApiResponse, summary="Delete Article")
async def delete_article(
    article_id: int = Path(..., ge=1),
    article_service: ArticleService = Depends(get_article_service_v1),
):
    return await article_service.delete(article_id)
