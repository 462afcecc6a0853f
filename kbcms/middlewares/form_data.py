"""
Request body and multipart parsing
Normalizes JSON and multipart/form-data bodies into one dict for validators and handlers
"""
import json
from functools import wraps
from typing import Dict, Optional

from flask import g, request

from kbcms.logging_logs.log_config import get_logger
from kbcms.storage.s3_uploader import UploadFile
from kbcms.utils.constants import ALLOWED_UPLOAD_MIME_PREFIXES, BOOL_STRINGS

logger = get_logger(__name__)

UPLOAD_FIELD = "file"


def _raw_body() -> Dict:
    """Get request body from either JSON or form fields"""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    if request.form:
        return request.form.to_dict()
    data = request.get_json(silent=True, force=True)
    return data if isinstance(data, dict) else {}


def get_request_body() -> Dict:
    """Body for the current request; parsed once and cached on ``g``"""
    if "request_body" not in g:
        g.request_body = _raw_body()
    return g.request_body


def get_uploaded_file() -> Optional[UploadFile]:
    """Uploaded file accepted by ``parse_form_data``, if any"""
    return g.get("uploaded_file")


def _error(message: str, status: int = 400):
    return {"success": False, "error": message, "type": "VALIDATION_ERROR"}, status


def parse_form_data(f):
    """Decorator that decodes JSON-in-form fields and picks up the uploaded file"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        body = get_request_body()

        quiz_questions = body.get("quizQuestions")
        if quiz_questions and isinstance(quiz_questions, str):
            try:
                body["quizQuestions"] = json.loads(quiz_questions)
            except ValueError as e:
                logger.warning("Failed to parse quizQuestions JSON: %s", e)
                return _error("Invalid JSON format for quizQuestions")

        has_quiz = body.get("hasQuiz")
        if isinstance(has_quiz, str) and has_quiz.lower() in BOOL_STRINGS:
            body["hasQuiz"] = BOOL_STRINGS[has_quiz.lower()]

        storage = request.files.get(UPLOAD_FIELD)
        if storage is not None and storage.filename:
            mime_type = storage.mimetype or ""
            if not mime_type.startswith(ALLOWED_UPLOAD_MIME_PREFIXES):
                logger.warning("Rejected upload %s with type %s", storage.filename, mime_type)
                return _error("Only image and video files are allowed")
            g.uploaded_file = UploadFile.from_storage(storage)

        return f(*args, **kwargs)
    return decorated_function
