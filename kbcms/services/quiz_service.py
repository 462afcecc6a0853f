"""Quiz Service"""
import re
from typing import Dict

from kbcms.exceptions.exceptions import NotFoundError
from kbcms.logging_logs.log_config import get_logger
from kbcms.orm.quiz_orm import QuizORM
from kbcms.utils.constants import RESPONSE_MESSAGES
from kbcms.utils.pagination import get_pagination_params, to_list_pagination

logger = get_logger(__name__)

QUIZ_NOT_FOUND = "QUIZ_NOT_FOUND"


class QuizService:
    """Service for standalone quiz operations"""

    def __init__(self, quiz_orm: QuizORM):
        self.quiz_orm = quiz_orm

    def submit_quiz(self, body: Dict) -> Dict:
        logger.info("Service::quiz@submitQuiz")
        quiz = self.quiz_orm.create_quiz(body)
        return {
            "quizId": quiz["_id"],
            "title": quiz["title"],
            "status": quiz["status"],
            "totalQuestions": quiz["totalQuestions"],
            "totalPoints": quiz["totalPoints"],
            "difficulty": quiz["difficulty"],
            "timeLimit": quiz["timeLimit"],
            "createdAt": quiz["createdAt"],
        }

    def get_quizzes(self, query: Dict) -> Dict:
        logger.info("Service::quiz@getQuizzes")
        page, limit = get_pagination_params(query.get("page"), query.get("limit"))

        filter_ = {"isActive": True}
        for field in ("category", "status", "difficulty"):
            if query.get(field):
                filter_[field] = query[field]
        if query.get("author"):
            filter_["author"] = {"$regex": re.escape(query["author"]), "$options": "i"}

        result = self.quiz_orm.find_quizzes(filter_, page=page, limit=limit)
        return {
            "quizzes": result["data"],
            "pagination": to_list_pagination(result["pagination"]),
        }

    def get_quiz_by_id(self, quiz_id: str) -> Dict:
        logger.info("Service::quiz@getQuizById")
        quiz = self.quiz_orm.find_quiz_by_id(quiz_id)
        if not quiz:
            raise NotFoundError(RESPONSE_MESSAGES["quizNotFound"], QUIZ_NOT_FOUND)
        return {"quiz": quiz}

    def update_quiz(self, quiz_id: str, body: Dict) -> Dict:
        logger.info("Service::quiz@updateQuiz")
        quiz = self.quiz_orm.update_quiz(quiz_id, body)
        if not quiz:
            raise NotFoundError(RESPONSE_MESSAGES["quizNotFound"], QUIZ_NOT_FOUND)
        return {"quiz": quiz}

    def delete_quiz(self, quiz_id: str) -> None:
        logger.info("Service::quiz@deleteQuiz")
        if not self.quiz_orm.delete_quiz(quiz_id):
            raise NotFoundError(RESPONSE_MESSAGES["quizNotFound"], QUIZ_NOT_FOUND)
