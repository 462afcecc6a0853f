"""
OTP Sender
Delivers one-time passwords by email (SMTP) or SMS (HTTP gateway)
"""
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

import requests

from kbcms.logging_logs.log_config import get_logger

logger = get_logger(__name__)


class OTPSender:
    """Sends OTP messages; returns True when the provider accepted the message"""

    def __init__(self, settings):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.sender_email = settings.SENDER_EMAIL
        self.sms_api_url = settings.SMS_API_URL
        self.sms_api_token = settings.SMS_API_TOKEN
        self.sms_timeout = settings.SMS_TIMEOUT
        self.expiry_minutes = max(1, settings.OTP_EXPIRY_SECONDS // 60)

    def send(self, identifier_type: str, identifier: str, otp: str, country_code: str = None) -> bool:
        if identifier_type == "email":
            return self.send_email(identifier, otp)
        return self.send_sms(identifier, otp, country_code)

    def send_email(self, email: str, otp: str) -> bool:
        if not self.smtp_server:
            logger.error("SMTP_SERVER is not configured; OTP email not sent")
            return False
        try:
            msg = MIMEMultipart('alternative')
            msg['From'] = self.sender_email
            msg['To'] = email
            msg['Subject'] = "Your login OTP"
            msg.attach(MIMEText(self._build_email_template(escape(otp)), 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.sender_email, email, msg.as_string())
            logger.info("OTP email sent to %s", email)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("OTP email to %s failed: %s", email, e)
            return False

    def send_sms(self, mobile: str, otp: str, country_code: str = None) -> bool:
        if not self.sms_api_url:
            logger.error("SMS_API_URL is not configured; OTP SMS not sent")
            return False
        payload = {
            "to": f"{country_code or ''}{mobile}",
            "message": f"Your login OTP is {otp}. It is valid for {self.expiry_minutes} minutes.",
        }
        headers = {
            "Authorization": f"Bearer {self.sms_api_token}",
            "accept": "application/json",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(self.sms_api_url, headers=headers, json=payload, timeout=self.sms_timeout)
            response.raise_for_status()
            logger.info("OTP SMS sent to %s", mobile)
            return True
        except requests.RequestException as e:
            logger.error("OTP SMS to %s failed: %s", mobile, e)
            return False

    def _build_email_template(self, otp: str) -> str:
        return f"""
        <html>
        <body style="font-family:Arial">
            <p>Use the code below to sign in:</p>
            <h2 style="letter-spacing:4px">{otp}</h2>
            <p>This code expires in {self.expiry_minutes} minutes. If you did not request it, ignore this email.</p>
        </body>
        </html>
        """
