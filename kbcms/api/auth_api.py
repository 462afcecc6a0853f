"""
Auth API
OTP login flow, profile, logout and school list
"""
from flask_restful import Resource

from kbcms.exceptions.error_handler import handle_service_error
from kbcms.jwt.auth_middleware import token_required
from kbcms.jwt.jwt_utils import TokenManager
from kbcms.middlewares.form_data import get_request_body
from kbcms.middlewares.security import login_limiter, otp_verify_limiter, resend_otp_limiter
from kbcms.utils.api_response import APIResponse
from kbcms.utils.constants import RESPONSE_MESSAGES
from kbcms.utils.json_utils import serialize_objectid
from kbcms.validators.auth_validator import (
    validate_login, validate_resend_otp, validate_student_profile, validate_verify_otp
)


def _flat_success(result):
    return dict(success=True, **serialize_objectid(result)), 200


class AuthResource(Resource):
    def __init__(self, auth_service):
        self.auth_service = auth_service


class LoginAPI(AuthResource):
    decorators = [login_limiter]

    @validate_login
    def post(self):
        """Start an OTP login for an email or mobile number"""
        try:
            return _flat_success(self.auth_service.initiate_login(get_request_body()))
        except Exception as e:
            return handle_service_error(e, {"route": "login"})


class ResendOTPAPI(AuthResource):
    decorators = [resend_otp_limiter]

    @validate_resend_otp
    def post(self):
        try:
            return _flat_success(self.auth_service.resend_otp(get_request_body()))
        except Exception as e:
            return handle_service_error(e, {"route": "resend-otp"})


class VerifyOTPAPI(AuthResource):
    decorators = [otp_verify_limiter]

    @validate_verify_otp
    def post(self):
        try:
            return _flat_success(self.auth_service.verify_otp_and_login(get_request_body()))
        except Exception as e:
            return handle_service_error(e, {"route": "verify-otp"})


class ProfileAPI(AuthResource):
    @token_required
    def get(self):
        try:
            result = self.auth_service.get_profile(TokenManager.get_current_user_id())
            return APIResponse.success(result, RESPONSE_MESSAGES["profileRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"route": "profile"})


class LogoutAPI(AuthResource):
    @token_required
    def post(self):
        try:
            self.auth_service.logout(TokenManager.get_user_claims()["jti"])
            return APIResponse.success(message=RESPONSE_MESSAGES["logoutSuccess"])
        except Exception as e:
            return handle_service_error(e, {"route": "logout"})


class CreateProfileAPI(AuthResource):
    @validate_student_profile
    @token_required
    def post(self):
        try:
            result = self.auth_service.create_student_profile(get_request_body(), TokenManager.get_current_user_id())
            return APIResponse.success(result, RESPONSE_MESSAGES["profileSaved"])
        except Exception as e:
            return handle_service_error(e, {"route": "create-profile"})


class SchoolListAPI(AuthResource):
    def get(self):
        try:
            return APIResponse.success(self.auth_service.get_school_list(), RESPONSE_MESSAGES["schoolsRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"route": "schools"})
