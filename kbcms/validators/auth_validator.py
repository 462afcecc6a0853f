"""Authentication and profile validation rules"""
from kbcms.validators.rules import FieldRule, validate_request

_IDENTIFIER = FieldRule("identifier", "Identifier must be a valid email or mobile number", required=True,
                        required_message="Email or mobile number is required",
                        min_length=3, max_length=254, trim=True)

LOGIN_RULES = [
    _IDENTIFIER,
    FieldRule("countryCode", "Country code must be between 1 and 5 characters",
              min_length=1, max_length=5, trim=True),
    FieldRule("deviceInfo", "Device info must be a string", max_length=500, trim=True, escape=True),
]

RESEND_OTP_RULES = [_IDENTIFIER]

VERIFY_OTP_RULES = [
    FieldRule("sessionToken", "Session token must be a string", required=True,
              required_message="Session token is required", min_length=1, max_length=100, trim=True),
    FieldRule("otp", "OTP must be 4 to 6 digits", required=True, required_message="OTP is required",
              pattern=r"^\d{4,6}$", trim=True),
    _IDENTIFIER,
]

STUDENT_PROFILE_RULES = [
    FieldRule("userId", "User ID must be a string", required=True,
              required_message="User ID is required", min_length=1, max_length=50, trim=True),
    FieldRule("fullName", "Full name must be between 2 and 100 characters", required=True,
              required_message="Full name is required", min_length=2, max_length=100, trim=True, escape=True),
    FieldRule("age", "Age must be between 1 and 150", required=True, required_message="Age is required",
              kind="int", minimum=1, maximum=150),
    FieldRule("institution", "Institution must be between 2 and 200 characters", required=True,
              required_message="Institution is required", min_length=2, max_length=200, trim=True, escape=True),
    FieldRule("filePath", "File path must be a string", max_length=2048, trim=True),
]

validate_login = validate_request(LOGIN_RULES, name="Login")
validate_resend_otp = validate_request(RESEND_OTP_RULES, name="Resend OTP")
validate_verify_otp = validate_request(VERIFY_OTP_RULES, name="Verify OTP")
validate_student_profile = validate_request(STUDENT_PROFILE_RULES, name="Student profile")
