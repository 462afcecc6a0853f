"""News article document model"""
from typing import Dict, Optional

from kbcms.exceptions.exceptions import ValidationError
from kbcms.models.question import build_questions
from kbcms.utils.constants import STATUS_DRAFT, STATUS_PUBLISHED
from kbcms.utils.time_utils import utc_now


class NewsModel:
    """Defaults, pre-save hook and update preparation for ``newsDetails``"""

    UPDATABLE_FIELDS = (
        "title", "subTitle", "description", "category", "type", "content_url",
        "upload_file", "hasQuiz", "status", "author", "quizQuestions",
    )

    @staticmethod
    def build(data: Dict) -> Dict:
        """New article document from a validated request body"""
        now = utc_now()
        has_quiz = data.get("hasQuiz") is True
        doc = {
            "title": data.get("title"),
            "subTitle": data.get("subTitle"),
            "description": data.get("description"),
            "category": data.get("category"),
            "type": data.get("type"),
            "content_url": data.get("content_url") or None,
            "upload_file": data.get("upload_file"),
            "author": data.get("author"),
            "status": data.get("status") or STATUS_DRAFT,
            "hasQuiz": has_quiz,
            # Submitted questions are discarded unless the article carries a quiz
            "quizQuestions": build_questions(data.get("quizQuestions")) if has_quiz else [],
            "viewCount": 0,
            "likes": 0,
            "isActive": True,
            "publishedAt": None,
            "createdAt": now,
            "updatedAt": now,
        }
        return NewsModel.pre_save(doc)

    @staticmethod
    def pre_save(doc: Dict) -> Dict:
        if doc.get("status") == STATUS_PUBLISHED and not doc.get("publishedAt"):
            doc["publishedAt"] = utc_now()
        return doc

    @staticmethod
    def prepare_update(existing: Dict, patch: Dict) -> Dict:
        """``$set`` document for an update; raises ValidationError on a quiz flag without questions"""
        update = {key: patch[key] for key in NewsModel.UPDATABLE_FIELDS if key in patch}

        if "quizQuestions" in update:
            update["quizQuestions"] = build_questions(update["quizQuestions"])
        if "hasQuiz" in update:
            update["hasQuiz"] = update["hasQuiz"] is True

        has_quiz = update.get("hasQuiz", existing.get("hasQuiz", False))
        questions: Optional[list] = update.get("quizQuestions", existing.get("quizQuestions"))
        if not has_quiz:
            if "hasQuiz" in update or "quizQuestions" in update:
                update["quizQuestions"] = []
        elif not questions:
            raise ValidationError("Quiz questions are required when hasQuiz is true")

        merged = {
            "status": update.get("status", existing.get("status")),
            "publishedAt": existing.get("publishedAt"),
        }
        NewsModel.pre_save(merged)
        if merged["publishedAt"] != existing.get("publishedAt"):
            update["publishedAt"] = merged["publishedAt"]

        update["updatedAt"] = utc_now()
        return update
