"""JSON serialization utilities for MongoDB ObjectId handling"""
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


def serialize_objectid(obj: Any) -> Any:
    """Convert ObjectId and datetime objects to JSON serializable format"""
    if isinstance(obj, ObjectId):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {key: serialize_objectid(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [serialize_objectid(item) for item in obj]
    return obj


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id from a URL or body; None when it is not a valid ObjectId"""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
