"""Custom exceptions - SoC principle"""
from typing import Dict, List, Optional


class KBCMSError(Exception):
    """Base exception for the KB CMS backend"""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


# ============= APPLICATION ERRORS (mapped to responses) =============

class AppError(KBCMSError):
    """Known application error with an HTTP status and a type tag"""
    status = 500
    error_type = "INTERNAL_ERROR"

    def __init__(self, message: str, status: Optional[int] = None, error_type: Optional[str] = None):
        super().__init__(message)
        if status is not None:
            self.status = status
        if error_type is not None:
            self.error_type = error_type

    def to_response(self) -> Dict:
        return {"success": False, "error": self.message, "type": self.error_type}


class ValidationError(AppError):
    """Input validation error; may carry field level detail"""
    status = 400
    error_type = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_response(self) -> Dict:
        response = {"success": False, "message": self.message, "type": self.error_type}
        if self.errors:
            response["errors"] = self.errors
        return response


class NotFoundError(AppError):
    """Resource not found; the type tag names the resource"""
    status = 404
    error_type = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", error_type: str = "NOT_FOUND"):
        super().__init__(message, error_type=error_type)


class FileUploadError(AppError):
    """Object storage upload failed"""
    status = 500
    error_type = "FILE_UPLOAD_ERROR"

    def __init__(self, message: str = "File upload failed"):
        super().__init__(message)


class UnauthorizedError(AppError):
    """Missing, invalid, expired or revoked bearer credential"""
    status = 401
    error_type = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized access", error_type: str = "UNAUTHORIZED"):
        super().__init__(message, error_type=error_type)


class ForbiddenError(AppError):
    """Authenticated caller may not touch this resource"""
    status = 403
    error_type = "FORBIDDEN"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class OTPError(AppError):
    """OTP verification failed"""
    status = 400
    error_type = "INVALID_OTP"

    def __init__(self, message: str = "Invalid OTP", error_type: str = "INVALID_OTP"):
        super().__init__(message, error_type=error_type)


class InternalError(AppError):
    """Catch-all server error; ``detail`` is shown only in development"""
    status = 500
    error_type = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error", detail: str = "Something went wrong"):
        super().__init__(message)
        self.detail = detail

    def to_response(self) -> Dict:
        return {"success": False, "message": self.message, "error": self.detail, "type": self.error_type}


# ============= UPLOAD PIPELINE ERRORS =============

class UploadError(KBCMSError):
    """Base error raised by the object storage uploader"""
    pass


class MissingFileError(UploadError):
    def __init__(self, message: str = "No file provided for upload"):
        super().__init__(message)


class MissingFolderError(UploadError):
    def __init__(self, message: str = "Folder name is required"):
        super().__init__(message)


class MissingBucketError(UploadError):
    def __init__(self, message: str = "S3 bucket name not configured"):
        super().__init__(message)


class FileReadError(UploadError):
    def __init__(self, message: str = "Invalid file format - no buffer or path found"):
        super().__init__(message)
