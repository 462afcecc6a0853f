"""Rate limiting for the OTP endpoints"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Bound to the application in create_app via init_app
limiter = Limiter(key_func=get_remote_address)


def _configured(key: str):
    return lambda: current_app.config[key]


login_limiter = limiter.limit(_configured("LOGIN_RATE_LIMIT"))
otp_verify_limiter = limiter.limit(_configured("OTP_VERIFY_RATE_LIMIT"))
resend_otp_limiter = limiter.limit(_configured("RESEND_OTP_RATE_LIMIT"))
