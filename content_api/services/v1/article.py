# content_api/services/v1/article.py
from loguru import logger
from pydantic import ValidationError

from content_api.core.result import ErrorKind
from content_api.dao.article import ArticleDao
from content_api.models.article import Article
from content_api.models.response import ApiResponse

MSG_NOT_FOUND = "article not found"


def validate_article_response(doc: dict) -> dict:
    """Stored document -> JSON-ready Article.Response."""
    article = Article.model_validate(doc)
    return Article.Response.model_validate(article.model_dump()).model_dump(mode="json")


class ArticleService:
    def __init__(self, article_dao: ArticleDao):
        self.article_dao = article_dao

    async def list(self, page: int = 1, size: int = 20) -> ApiResponse:
        found = await self.article_dao.list_page(page, size)
        total = await self.article_dao.count()
        if not found or not total:
            return ApiResponse.fail("failed to load articles")

        items = []
        for doc in found.value:
            try: items.append(validate_article_response(doc))
            except ValidationError as e: logger.error(f"Skipping article {doc.get('_id')} in list: {e}"); continue
        return ApiResponse.ok({"list": items, "total": total.value, "page": page, "size": size})

    async def detail(self, article_id: int) -> ApiResponse:
        found = await self.article_dao.get_by_id(article_id)
        if not found:
            return ApiResponse.fail("failed to load article")
        if not found.value:
            return ApiResponse.fail(MSG_NOT_FOUND)
        return ApiResponse.ok(validate_article_response(found.value))

    async def add(self, article_in: Article.Create) -> ApiResponse:
        inserted = await self.article_dao.add(article_in.model_dump())
        if not inserted:
            return ApiResponse.fail("failed to create article")
        logger.info(f"Article {inserted.value} created: {article_in.title}")
        return ApiResponse.ok({"id": inserted.value})

    async def update(self, article_id: int, article_in: Article.Update) -> ApiResponse:
        changes = article_in.model_dump(exclude_unset=True)
        if not changes:
            return ApiResponse.fail("no update data provided")

        updated = await self.article_dao.update_by_id(article_id, changes)
        if not updated:
            if updated.error == ErrorKind.INPUT_INVALID:
                return ApiResponse.fail("invalid update data")
            return ApiResponse.fail("failed to update article")
        if updated.value == 0:
            # modified_count is also 0 when nothing matched
            exists = await self.article_dao.get_by_id(article_id)
            if exists and not exists.value:
                return ApiResponse.fail(MSG_NOT_FOUND)
        return ApiResponse.ok({"modified": updated.value})

    async def delete(self, article_id: int) -> ApiResponse:
        deleted = await self.article_dao.delete_by_id(article_id)
        if not deleted:
            return ApiResponse.fail("failed to delete article")
        if deleted.value == 0:
            return ApiResponse.fail(MSG_NOT_FOUND)
        logger.info(f"Article {article_id} deleted")
        return ApiResponse.ok({"deleted": deleted.value})
