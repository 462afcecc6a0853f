"""Quiz document model"""
from typing import Dict, List

from kbcms.models.question import build_questions
from kbcms.utils.constants import (
    DEFAULT_DIFFICULTY, DEFAULT_QUESTION_POINTS, DEFAULT_TIME_LIMIT, STATUS_DRAFT, STATUS_PUBLISHED
)
from kbcms.utils.time_utils import utc_now


def compute_totals(questions: List[Dict]) -> Dict:
    """totalQuestions and totalPoints; a question without points counts as 1"""
    return {
        "totalQuestions": len(questions),
        "totalPoints": sum(q.get("points") or DEFAULT_QUESTION_POINTS for q in questions),
    }


class QuizModel:
    """Defaults, pre-save hook and update preparation for ``quizDetails``"""

    UPDATABLE_FIELDS = (
        "title", "description", "category", "difficulty", "timeLimit",
        "status", "author", "questions",
    )

    @staticmethod
    def build(data: Dict) -> Dict:
        now = utc_now()
        doc = {
            "title": data.get("title"),
            "description": data.get("description"),
            "category": data.get("category"),
            "difficulty": data.get("difficulty") or DEFAULT_DIFFICULTY,
            "timeLimit": data.get("timeLimit") or DEFAULT_TIME_LIMIT,
            "questions": build_questions(data.get("questions"), DEFAULT_QUESTION_POINTS),
            "status": data.get("status") or STATUS_DRAFT,
            "author": data.get("author"),
            "attemptCount": 0,
            "isActive": True,
            "publishedAt": None,
            "createdAt": now,
            "updatedAt": now,
        }
        return QuizModel.pre_save(doc)

    @staticmethod
    def pre_save(doc: Dict) -> Dict:
        """Recompute totals and stamp publishedAt the first time the quiz is Published"""
        doc.update(compute_totals(doc.get("questions") or []))
        if doc.get("status") == STATUS_PUBLISHED and not doc.get("publishedAt"):
            doc["publishedAt"] = utc_now()
        return doc

    @staticmethod
    def prepare_update(existing: Dict, patch: Dict) -> Dict:
        update = {key: patch[key] for key in QuizModel.UPDATABLE_FIELDS if key in patch}
        if "questions" in update:
            update["questions"] = build_questions(update["questions"], DEFAULT_QUESTION_POINTS)

        merged = {
            "questions": update.get("questions", existing.get("questions") or []),
            "status": update.get("status", existing.get("status")),
            "publishedAt": existing.get("publishedAt"),
        }
        QuizModel.pre_save(merged)
        update["totalQuestions"] = merged["totalQuestions"]
        update["totalPoints"] = merged["totalPoints"]
        if merged["publishedAt"] != existing.get("publishedAt"):
            update["publishedAt"] = merged["publishedAt"]

        update["updatedAt"] = utc_now()
        return update
