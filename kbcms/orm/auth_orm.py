"""Data access for users, OTP sessions and schools"""
from typing import Dict, List, Optional

from kbcms.orm.base_orm import BaseORM
from kbcms.utils.time_utils import utc_now


class UserORM(BaseORM):
    def find_by_identifier(self, identifier_type: str, identifier: str) -> Optional[Dict]:
        return self.find_one({_identifier_field(identifier_type): identifier})

    def upsert_login(self, identifier_type: str, identifier: str, extra: Dict) -> Dict:
        """Create or refresh the user record after a successful OTP login"""
        patch = dict(extra)
        patch["lastLoginAt"] = utc_now()
        patch["isEmailVerified" if identifier_type == "email" else "isMobileVerified"] = True
        return self.upsert({_identifier_field(identifier_type): identifier}, patch)


class OTPSessionORM(BaseORM):
    def latest_for(self, identifier: str) -> Optional[Dict]:
        sessions = self.collection.find({"identifier": identifier}).sort("createdAt", -1).limit(1)
        return next(iter(sessions), None)

    def invalidate_open(self, identifier: str) -> int:
        result = self.collection.update_many(
            {"identifier": identifier, "isUsed": False},
            {"$set": {"isUsed": True}},
        )
        return result.modified_count

    def find_session(self, session_token: str, identifier: str) -> Optional[Dict]:
        return self.find_one({"sessionToken": session_token, "identifier": identifier})

    def record_failed_attempt(self, session_id) -> None:
        self.increment_counter({"_id": session_id}, "attempts")

    def mark_used(self, session_id) -> None:
        self.collection.update_one({"_id": session_id}, {"$set": {"isUsed": True, "usedAt": utc_now()}})


class SchoolORM(BaseORM):
    def list_active(self) -> List[Dict]:
        return self.find_all({"isActive": True}, select={"_id": 1, "name": 1}, sort={"name": 1})


def _identifier_field(identifier_type: str) -> str:
    return "email" if identifier_type == "email" else "mobileNumber"
