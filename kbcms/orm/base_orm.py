"""
Base ORM
Common collection operations shared by the resource ORMs (DRY)
"""
from typing import Any, Dict, List, Optional, Union

from pymongo import ReturnDocument

from kbcms.logging_logs.log_config import get_logger
from kbcms.utils.json_utils import to_object_id
from kbcms.utils.pagination import build_pagination
from kbcms.utils.time_utils import utc_now

logger = get_logger(__name__)

Select = Union[str, Dict[str, int], None]


def to_projection(select: Select) -> Optional[Dict[str, int]]:
    """Convert a ``"-__v title"`` style select string into a projection"""
    if not select:
        return None
    if isinstance(select, dict):
        return select
    projection = {}
    for token in select.split():
        if token.startswith("-"):
            projection[token[1:]] = 0
        else:
            projection[token] = 1
    return projection or None


def to_sort(sort) -> Optional[List]:
    if not sort:
        return None
    if isinstance(sort, dict):
        return list(sort.items())
    return list(sort)


class BaseORM:
    """CRUD wrapper around one collection.

    ``model`` supplies ``prepare_update(existing, patch)``, the pre-save
    hook applied on every update.
    """

    def __init__(self, collection, model=None):
        self.collection = collection
        self.model = model

    @staticmethod
    def _normalize_filter(filter_: Optional[Dict]) -> Optional[Dict]:
        """Coerce a string ``_id`` into an ObjectId; None when it cannot match anything"""
        filter_ = dict(filter_ or {})
        if "_id" in filter_ and not isinstance(filter_["_id"], dict):
            object_id = to_object_id(filter_["_id"])
            if object_id is None:
                return None
            filter_["_id"] = object_id
        return filter_

    def create(self, doc: Dict) -> Dict:
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def find_many(self, filter_: Optional[Dict] = None, select: Select = None, sort=None,
                  page: int = 1, limit: int = 10, populate=None) -> Dict:
        """One page of documents plus pagination metadata"""
        # populate is accepted for call compatibility; documents hold no references
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return {"data": [], "pagination": build_pagination(page, limit, 0)}

        cursor = self.collection.find(filter_, to_projection(select))
        sort_spec = to_sort(sort)
        if sort_spec:
            cursor = cursor.sort(sort_spec)
        data = list(cursor.skip((page - 1) * limit).limit(limit))
        total = self.collection.count_documents(filter_)
        return {"data": data, "pagination": build_pagination(page, limit, total)}

    def find_all(self, filter_: Optional[Dict] = None, select: Select = None, sort=None) -> List[Dict]:
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return []
        cursor = self.collection.find(filter_, to_projection(select))
        sort_spec = to_sort(sort)
        if sort_spec:
            cursor = cursor.sort(sort_spec)
        return list(cursor)

    def find_one(self, filter_: Dict, select: Select = None) -> Optional[Dict]:
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return None
        return self.collection.find_one(filter_, to_projection(select))

    def find_by_id(self, doc_id: Any, select: Select = None) -> Optional[Dict]:
        return self.find_one({"_id": doc_id}, select)

    def update(self, filter_: Dict, patch: Dict, select: Select = None) -> Optional[Dict]:
        """Apply ``patch`` through the model hook; the updated document or None"""
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return None
        existing = self.collection.find_one(filter_)
        if existing is None:
            return None

        update = self.model.prepare_update(existing, patch) if self.model else dict(patch, updatedAt=utc_now())
        return self.collection.find_one_and_update(
            {"_id": existing["_id"]},
            {"$set": update},
            projection=to_projection(select),
            return_document=ReturnDocument.AFTER,
        )

    def upsert(self, filter_: Dict, patch: Dict, select: Select = None) -> Optional[Dict]:
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return None
        now = utc_now()
        return self.collection.find_one_and_update(
            filter_,
            {"$set": dict(patch, updatedAt=now), "$setOnInsert": {"createdAt": now}},
            projection=to_projection(select),
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, filter_: Dict) -> bool:
        """Soft delete: flips ``isActive``"""
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return False
        result = self.collection.update_one(filter_, {"$set": {"isActive": False, "updatedAt": utc_now()}})
        return result.matched_count > 0

    def hard_delete_by_id(self, doc_id: Any) -> Optional[Dict]:
        filter_ = self._normalize_filter({"_id": doc_id})
        if filter_ is None:
            return None
        return self.collection.find_one_and_delete(filter_)

    def count(self, filter_: Optional[Dict] = None) -> int:
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return 0
        return self.collection.count_documents(filter_)

    def increment_counter(self, filter_: Dict, field: str, amount: int = 1) -> bool:
        filter_ = self._normalize_filter(filter_)
        if filter_ is None:
            return False
        result = self.collection.update_one(filter_, {"$inc": {field: amount}})
        return result.modified_count > 0
