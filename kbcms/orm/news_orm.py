from typing import Dict, Optional

from kbcms.models.news_model import NewsModel
from kbcms.orm.base_orm import BaseORM


class NewsORM(BaseORM):
    """Data access for ``newsDetails``"""

    def __init__(self, collection):
        super().__init__(collection, NewsModel)

    def create_news(self, data: Dict) -> Dict:
        return self.create(NewsModel.build(data))

    def get_news(self, limit: int, page: int, sort: Dict, filter_: Dict, select: str = "-__v") -> Dict:
        return self.find_many(filter_, select=select, sort=sort, page=page, limit=limit)

    def get_one_news(self, filter_: Dict) -> Optional[Dict]:
        return self.find_one(filter_, "-__v")

    def increment_view_count(self, filter_: Dict) -> bool:
        return self.increment_counter(filter_, "viewCount")

    def update_news(self, filter_: Dict, patch: Dict) -> Optional[Dict]:
        return self.update(filter_, patch, "-__v")

    def delete_one_news(self, filter_: Dict) -> bool:
        return self.delete(filter_)
