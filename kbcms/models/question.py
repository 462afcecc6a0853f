"""Embedded quiz question sub-document"""
from typing import Dict, List, Optional

from bson import ObjectId

from kbcms.utils.json_utils import to_object_id


def _strings(values) -> List[str]:
    if not isinstance(values, list):
        return []
    return [v.strip() if isinstance(v, str) else v for v in values]


def build_question(data: Dict, default_points: Optional[int] = None) -> Dict:
    """Normalize one question and give it an ``_id``.

    ``default_points`` adds a ``points`` field (quiz questions only).
    """
    question = {
        "_id": to_object_id(data.get("_id")) or ObjectId(),
        "question": (data.get("question") or "").strip(),
        "options": _strings(data.get("options")),
        "correctAnswers": _strings(data.get("correctAnswers")),
    }
    if default_points is not None:
        points = data.get("points")
        question["points"] = points if isinstance(points, int) and not isinstance(points, bool) else default_points
    return question


def build_questions(items, default_points: Optional[int] = None) -> List[Dict]:
    if not isinstance(items, list):
        return []
    return [build_question(item, default_points) for item in items if isinstance(item, dict)]
