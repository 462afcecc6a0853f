"""
API Response Helper - DRY Principle
Standardizes all API responses into the {success, message, data} envelope
"""
from typing import Any, Optional

from kbcms.utils.json_utils import serialize_objectid


class APIResponse:
    @staticmethod
    def success(data: Any = None, message: Optional[str] = None, status_code: int = 200):
        """Standard success response"""
        response = {"success": True}
        if message:
            response["message"] = message
        if data is not None:
            response["data"] = serialize_objectid(data)
        return response, status_code
