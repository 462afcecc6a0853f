"""
News Service
Business logic for news articles and their optional file upload
"""
import re
from typing import Dict, Optional

from kbcms.exceptions.exceptions import FileUploadError, NotFoundError
from kbcms.logging_logs.log_config import get_logger
from kbcms.orm.news_orm import NewsORM
from kbcms.storage.s3_uploader import S3Uploader, UploadFile
from kbcms.utils.constants import NEWS_UPLOAD_FOLDER, RESPONSE_MESSAGES
from kbcms.utils.pagination import get_pagination_params, to_list_pagination

logger = get_logger(__name__)

ARTICLE_NOT_FOUND = "ARTICLE_NOT_FOUND"


class NewsService:
    """Service for news article operations"""

    def __init__(self, news_orm: NewsORM, uploader: S3Uploader):
        self.news_orm = news_orm
        self.uploader = uploader

    def submit_news(self, body: Dict, file: Optional[UploadFile] = None) -> Dict:
        logger.info("Service::news@submitNews")
        data = dict(body)
        data["upload_file"] = None
        if file is not None:
            data["upload_file"] = self._upload(file)["url"]

        article = self.news_orm.create_news(data)
        return {
            "articleId": article["_id"],
            "title": article["title"],
            "status": article["status"],
            "hasQuiz": article["hasQuiz"],
            "quizCount": len(article["quizQuestions"]),
            "createdAt": article["createdAt"],
        }

    def get_news(self, query: Dict) -> Dict:
        logger.info("Service::news@getNews")
        page, limit = get_pagination_params(query.get("page"), query.get("limit"))

        filter_ = {"isActive": True}
        for field in ("category", "status", "type"):
            if query.get(field):
                filter_[field] = query[field]
        if query.get("author"):
            filter_["author"] = {"$regex": re.escape(query["author"]), "$options": "i"}
        if query.get("hasQuiz") is not None:
            filter_["hasQuiz"] = query["hasQuiz"] == "true"

        result = self.news_orm.get_news(limit, page, {"createdAt": -1}, filter_)
        return {
            "articles": result["data"],
            "pagination": to_list_pagination(result["pagination"]),
        }

    def get_news_by_id(self, article_id: str) -> Dict:
        logger.info("Service::news@getNewsById")
        article = self.news_orm.get_one_news({"_id": article_id, "isActive": True})
        if not article:
            raise NotFoundError(RESPONSE_MESSAGES["newsNotFound"], ARTICLE_NOT_FOUND)

        self.news_orm.increment_view_count({"_id": article["_id"]})
        article["viewCount"] = article.get("viewCount", 0) + 1
        return {"article": article}

    def update_news(self, article_id: str, body: Dict, file: Optional[UploadFile] = None) -> Dict:
        logger.info("Service::news@updateNews")
        patch = dict(body)
        if file is not None:
            # The previously stored object stays in the bucket
            result = self._upload(file)
            patch["upload_file"] = result["cdnUrl"] or result["url"]
            logger.info("File uploaded to S3 for update: %s", result["key"])

        article = self.news_orm.update_news({"_id": article_id, "isActive": True}, patch)
        if not article:
            raise NotFoundError(RESPONSE_MESSAGES["newsNotFound"], ARTICLE_NOT_FOUND)
        return {"article": article}

    def delete_news(self, article_id: str) -> None:
        logger.info("Service::news@deleteNews")
        if not self.news_orm.delete_one_news({"_id": article_id, "isActive": True}):
            raise NotFoundError(RESPONSE_MESSAGES["newsNotFound"], ARTICLE_NOT_FOUND)

    def _upload(self, file: UploadFile) -> Dict:
        try:
            return self.uploader.upload(file, NEWS_UPLOAD_FOLDER)
        except Exception as e:
            logger.error("Error uploading file to S3: %s (file=%s)", e, file.original_name)
            raise FileUploadError("File upload failed")
