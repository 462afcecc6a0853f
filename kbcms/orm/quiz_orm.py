from typing import Dict, Optional

from kbcms.models.quiz_model import QuizModel
from kbcms.orm.base_orm import BaseORM


class QuizORM(BaseORM):
    """Data access for ``quizDetails``"""

    def __init__(self, collection):
        super().__init__(collection, QuizModel)

    def create_quiz(self, data: Dict) -> Dict:
        return self.create(QuizModel.build(data))

    def find_quizzes(self, filter_: Dict, page: int = 1, limit: int = 10, sort=None, select: str = "-__v") -> Dict:
        return self.find_many(filter_, select=select, sort=sort or {"createdAt": -1}, page=page, limit=limit)

    def find_quiz_by_id(self, quiz_id, select: str = "-__v") -> Optional[Dict]:
        return self.find_one({"_id": quiz_id, "isActive": True}, select)

    def update_quiz(self, quiz_id, patch: Dict) -> Optional[Dict]:
        return self.update({"_id": quiz_id, "isActive": True}, patch, "-__v")

    def delete_quiz(self, quiz_id) -> Optional[Dict]:
        return self.hard_delete_by_id(quiz_id)
