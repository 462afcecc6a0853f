"""
Auth Service
OTP login, profile and school listing
"""
import random
import re
import uuid
from datetime import timedelta
from typing import Dict, Optional

import bcrypt

from kbcms.config.settings import DUMMY_IDENTIFIERS, DUMMY_OTP
from kbcms.exceptions.exceptions import AppError, ForbiddenError, NotFoundError, OTPError, ValidationError
from kbcms.jwt.auth_middleware import blacklist_token
from kbcms.jwt.jwt_utils import TokenManager
from kbcms.logging_logs.log_config import get_logger
from kbcms.orm.auth_orm import OTPSessionORM, SchoolORM, UserORM
from kbcms.utils.constants import RESPONSE_MESSAGES
from kbcms.utils.json_utils import to_object_id
from kbcms.utils.time_utils import utc_now

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MOBILE_PATTERN = re.compile(r"^\+?\d{7,15}$")
OTP_LENGTH = 6
USER_NOT_FOUND = "USER_NOT_FOUND"

_random = random.SystemRandom()


def classify_identifier(identifier: str) -> str:
    """'email' or 'mobile'; raises ValidationError for anything else"""
    value = (identifier or "").strip()
    if EMAIL_PATTERN.match(value):
        return "email"
    if MOBILE_PATTERN.match(value.replace(" ", "").replace("-", "")):
        return "mobile"
    raise ValidationError("Invalid email or mobile number format")


def normalize_identifier(identifier: str, identifier_type: str) -> str:
    value = identifier.strip()
    if identifier_type == "email":
        return value.lower()
    return value.replace(" ", "").replace("-", "")


def generate_otp() -> str:
    return "".join(str(_random.randint(0, 9)) for _ in range(OTP_LENGTH))


def public_user(user: Dict) -> Dict:
    """User fields exposed to clients"""
    fields = (
        "email", "mobileNumber", "countryCode", "fullName", "age", "institution", "filePath",
        "isEmailVerified", "isMobileVerified", "lastLoginAt", "createdAt", "updatedAt",
    )
    result = {"id": str(user["_id"])}
    result.update({field: user.get(field) for field in fields if field in user})
    return result


class AuthService:
    """Service for OTP authentication and student profiles"""

    def __init__(self, user_orm: UserORM, session_orm: OTPSessionORM, school_orm: SchoolORM,
                 otp_sender, settings):
        self.user_orm = user_orm
        self.session_orm = session_orm
        self.school_orm = school_orm
        self.otp_sender = otp_sender
        self.settings = settings

    def _is_dummy(self, identifier: str) -> bool:
        return identifier in DUMMY_IDENTIFIERS and not self.settings.is_production

    def _hash_otp(self, otp: str) -> str:
        salt = bcrypt.gensalt(rounds=self.settings.OTP_HASH_ROUNDS)
        return bcrypt.hashpw(otp.encode("utf-8"), salt).decode("utf-8")

    def _issue_otp(self, identifier: str, identifier_type: str, country_code: Optional[str],
                   device_info: Optional[str]) -> Dict:
        dummy = self._is_dummy(identifier)
        otp = DUMMY_OTP if dummy else generate_otp()
        now = utc_now()
        session = {
            "sessionToken": str(uuid.uuid4()),
            "identifier": identifier,
            "identifierType": identifier_type,
            "countryCode": country_code,
            "deviceInfo": device_info,
            "otpHash": self._hash_otp(otp),
            "attempts": 0,
            "isUsed": False,
            "expiresAt": now + timedelta(seconds=self.settings.OTP_EXPIRY_SECONDS),
            "createdAt": now,
        }
        self.session_orm.create(session)

        response = {
            "sessionToken": session["sessionToken"],
            "identifierType": identifier_type,
            "expiresIn": self.settings.OTP_EXPIRY_SECONDS,
        }
        if dummy:
            logger.info("Dummy account %s; OTP delivery skipped", identifier)
            response["developmentInfo"] = {
                "isDummyAccount": True,
                "dummyOTP": DUMMY_OTP,
                "note": "This is a test account. In production, OTP would be sent normally.",
            }
        elif not self.otp_sender.send(identifier_type, identifier, otp, country_code):
            raise AppError("Failed to send OTP. Please try again.", 500, "OTP_DELIVERY_FAILED")
        return response

    def initiate_login(self, body: Dict) -> Dict:
        logger.info("Service::auth@initiateLogin")
        identifier_type = classify_identifier(body.get("identifier"))
        identifier = normalize_identifier(body["identifier"], identifier_type)

        response = self._issue_otp(identifier, identifier_type, body.get("countryCode"), body.get("deviceInfo"))
        return dict(message=RESPONSE_MESSAGES["otpSent"], **response)

    def resend_otp(self, body: Dict) -> Dict:
        logger.info("Service::auth@resendOTP")
        identifier_type = classify_identifier(body.get("identifier"))
        identifier = normalize_identifier(body["identifier"], identifier_type)

        previous = self.session_orm.latest_for(identifier)
        if not previous:
            raise NotFoundError("No login request found for this identifier. Please login first.", USER_NOT_FOUND)

        self.session_orm.invalidate_open(identifier)
        response = self._issue_otp(identifier, identifier_type, previous.get("countryCode"),
                                   previous.get("deviceInfo"))
        return dict(message=RESPONSE_MESSAGES["otpResent"], isResent=True, **response)

    def verify_otp_and_login(self, body: Dict) -> Dict:
        logger.info("Service::auth@verifyOTPAndLogin")
        identifier_type = classify_identifier(body.get("identifier"))
        identifier = normalize_identifier(body["identifier"], identifier_type)

        session = self.session_orm.find_session(body.get("sessionToken"), identifier)
        if not session or session.get("isUsed"):
            raise OTPError("Invalid or already used session", "INVALID_SESSION")
        if session["expiresAt"] < utc_now():
            raise OTPError("OTP has expired. Please request a new one.", "OTP_EXPIRED")
        if session.get("attempts", 0) >= self.settings.OTP_MAX_ATTEMPTS:
            raise OTPError("Too many failed attempts. Please request a new OTP.", "TOO_MANY_ATTEMPTS")

        if not bcrypt.checkpw(str(body.get("otp", "")).encode("utf-8"), session["otpHash"].encode("utf-8")):
            self.session_orm.record_failed_attempt(session["_id"])
            raise OTPError("Invalid OTP", "INVALID_OTP")

        self.session_orm.mark_used(session["_id"])
        extra = {}
        if session.get("countryCode"):
            extra["countryCode"] = session["countryCode"]
        if session.get("deviceInfo"):
            extra["deviceInfo"] = session["deviceInfo"]
        user = self.user_orm.upsert_login(identifier_type, identifier, extra)

        token = TokenManager.generate_token(user)
        logger.info("User %s logged in", user["_id"])
        return {"message": RESPONSE_MESSAGES["loginSuccess"], "token": token, "user": public_user(user)}

    def get_profile(self, user_id: str) -> Dict:
        logger.info("Service::auth@getProfile")
        user = self.user_orm.find_by_id(user_id)
        if not user:
            raise NotFoundError(RESPONSE_MESSAGES["userNotFound"], USER_NOT_FOUND)
        return {"user": public_user(user)}

    def logout(self, jti: str) -> None:
        logger.info("Service::auth@logout")
        blacklist_token(jti)

    def create_student_profile(self, body: Dict, current_user_id: str) -> Dict:
        logger.info("Service::auth@createStudentProfile")
        user_id = body.get("userId")
        if user_id != current_user_id:
            raise ForbiddenError("You can only update your own profile")
        if to_object_id(user_id) is None:
            raise NotFoundError(RESPONSE_MESSAGES["userNotFound"], USER_NOT_FOUND)

        patch = {
            "fullName": body.get("fullName"),
            "age": body.get("age"),
            "institution": body.get("institution"),
            "filePath": body.get("filePath") or None,
        }
        user = self.user_orm.update({"_id": user_id}, patch)
        if not user:
            raise NotFoundError(RESPONSE_MESSAGES["userNotFound"], USER_NOT_FOUND)

        profile = {key: user.get(key) for key in
                   ("fullName", "age", "institution", "filePath", "email", "mobileNumber", "updatedAt")}
        profile["id"] = str(user["_id"])
        return {"user": profile}

    def get_school_list(self) -> Dict:
        logger.info("Service::auth@getSchoolList")
        return {"schools": self.school_orm.list_active()}
