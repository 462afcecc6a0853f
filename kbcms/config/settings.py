"""Configuration settings - Configuration Layer (Environment Separated)"""
import os
from datetime import timedelta
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()


def safe_int_env(key: str, default: str) -> int:
    """Safely convert environment variable to int"""
    try:
        return int(os.getenv(key, default))
    except ValueError:
        return int(default)


def safe_bool_env(key: str, default: str) -> bool:
    """Read a true/false style environment variable"""
    return str(os.getenv(key, default)).strip().lower() in ("1", "true", "yes", "on")


MIB = 1024 * 1024

# Upload limits (Business Configuration)
MAX_UPLOAD_SIZE = 50 * MIB
MULTIPART_THRESHOLD = 100 * MIB
MULTIPART_PART_SIZE = 10 * MIB
MULTIPART_QUEUE_SIZE = 2

# Dummy OTP accounts, never honoured in production
DUMMY_IDENTIFIERS = {"1234567899", "abc@gmail.com"}
DUMMY_OTP = "1234"


class Settings:
    """Process configuration read from the environment.

    Every attribute can be overridden with keyword arguments, which is how
    tests build an isolated application.
    """

    def __init__(self, **overrides):
        self.APP_ENV = os.getenv("APP_ENV", os.getenv("NODE_ENV", "development")).lower()

        # MongoDB
        self.MONGO_URI = os.getenv("MONGO_URI", os.getenv("DB_URL", "mongodb://localhost:27017"))
        self.DB_NAME = os.getenv("DB_NAME", "kb_cms")
        self.MONGO_ENSURE_INDEXES = safe_bool_env("MONGO_ENSURE_INDEXES", "true")

        # JWT
        self.JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
        self.JWT_ACCESS_TOKEN_EXPIRES = safe_int_env("JWT_ACCESS_TOKEN_EXPIRES", "60")  # minutes

        # S3
        self.AWS_DEFAULT_REGION = os.getenv("AWS_DEFAULT_REGION", os.getenv("AWS_REGION", "us-east-1"))
        self.AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
        self.AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
        self.AWS_BUCKET = os.getenv("AWS_BUCKET")
        self.AWS_URL = os.getenv("AWS_URL")
        self.AWS_CDN_URL = os.getenv("AWS_CDN_URL")

        # OTP delivery
        self.SMTP_SERVER = os.getenv("SMTP_SERVER")
        self.SMTP_PORT = safe_int_env("SMTP_PORT", "587")
        self.SMTP_USERNAME = os.getenv("SMTP_USERNAME")
        self.SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
        self.SENDER_EMAIL = os.getenv("SENDER_EMAIL")
        self.SMS_API_URL = os.getenv("SMS_API_URL")
        self.SMS_API_TOKEN = os.getenv("SMS_API_TOKEN")
        self.SMS_TIMEOUT = safe_int_env("SMS_TIMEOUT", "15")

        # OTP policy
        self.OTP_EXPIRY_SECONDS = safe_int_env("OTP_EXPIRY_SECONDS", "600")
        self.OTP_MAX_ATTEMPTS = safe_int_env("OTP_MAX_ATTEMPTS", "5")
        self.OTP_HASH_ROUNDS = safe_int_env("OTP_HASH_ROUNDS", "10")

        # Rate limits (Flask-Limiter notation)
        self.LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "5 per 15 minutes")
        self.OTP_VERIFY_RATE_LIMIT = os.getenv("OTP_VERIFY_RATE_LIMIT", "10 per 15 minutes")
        self.RESEND_OTP_RATE_LIMIT = os.getenv("RESEND_OTP_RATE_LIMIT", "3 per 5 minutes")
        self.RATELIMIT_ENABLED = safe_bool_env("RATELIMIT_ENABLED", "true")
        self.RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FILE = os.getenv("LOG_FILE", os.path.join("logs", "kbcms.log"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def s3_url_base(self) -> str:
        """Public URL prefix for stored objects, always ending with a slash"""
        base = self.AWS_URL or f"https://{self.AWS_BUCKET}.s3.{self.AWS_DEFAULT_REGION}.amazonaws.com/"
        return base if base.endswith("/") else base + "/"

    @property
    def cdn_url_base(self) -> Optional[str]:
        if not self.AWS_CDN_URL:
            return None
        return self.AWS_CDN_URL if self.AWS_CDN_URL.endswith("/") else self.AWS_CDN_URL + "/"

    def flask_config(self) -> Dict:
        """Values copied onto ``app.config``"""
        return {
            "APP_ENV": self.APP_ENV,
            "JWT_SECRET_KEY": self.JWT_SECRET_KEY,
            "JWT_ACCESS_TOKEN_EXPIRES": timedelta(minutes=self.JWT_ACCESS_TOKEN_EXPIRES),
            "MAX_CONTENT_LENGTH": MAX_UPLOAD_SIZE,
            "LOGIN_RATE_LIMIT": self.LOGIN_RATE_LIMIT,
            "OTP_VERIFY_RATE_LIMIT": self.OTP_VERIFY_RATE_LIMIT,
            "RESEND_OTP_RATE_LIMIT": self.RESEND_OTP_RATE_LIMIT,
            "RATELIMIT_ENABLED": self.RATELIMIT_ENABLED,
            "RATELIMIT_STORAGE_URI": self.RATELIMIT_STORAGE_URI,
            "ERROR_404_HELP": False,
        }
