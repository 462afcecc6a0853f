"""
Declarative request validation
Field rules with wildcard paths, sanitizers and cross-field checks
"""
import html
import re
from functools import wraps
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from flask import g

from kbcms.exceptions.exceptions import ValidationError
from kbcms.logging_logs.log_config import get_logger
from kbcms.middlewares.form_data import get_request_body
from kbcms.utils.constants import BOOL_STRINGS

logger = get_logger(__name__)

_MISSING = object()
_INT_PATTERN = re.compile(r"^[+-]?\d+$")


class FieldRule:
    """One validated field.

    ``path`` is dotted and may contain ``*`` to match every item of a list,
    e.g. ``questions.*.options.*``. ``message`` is reported for any failed
    check other than presence; ``required_message`` for a missing or empty
    value on a required field.
    """

    def __init__(self, path: str, message: str, required: bool = False,
                 required_message: Optional[str] = None, kind: str = "string",
                 min_length: Optional[int] = None, max_length: Optional[int] = None,
                 min_items: Optional[int] = None, max_items: Optional[int] = None,
                 minimum: Optional[int] = None, maximum: Optional[int] = None,
                 choices: Optional[Sequence] = None, pattern: Optional[str] = None,
                 trim: bool = False, escape: bool = False):
        self.path = path
        self.parts = path.split(".")
        self.message = message
        self.required = required
        self.required_message = required_message or message
        self.kind = kind
        self.min_length = min_length
        self.max_length = max_length
        self.min_items = min_items
        self.max_items = max_items
        self.minimum = minimum
        self.maximum = maximum
        self.choices = choices
        self.pattern = re.compile(pattern) if pattern else None
        self.trim = trim
        self.escape = escape

    def check(self, value: Any) -> Optional[str]:
        """Return the first failing message, or None"""
        if value is _MISSING or value is None:
            return self.required_message if self.required else None
        if self.required and self.kind == "string" and value == "":
            return self.required_message

        if self.kind == "string":
            if not isinstance(value, str):
                return self.message
            if self.min_length is not None and len(value) < self.min_length:
                return self.message
            if self.max_length is not None and len(value) > self.max_length:
                return self.message
            if self.pattern and not self.pattern.match(value):
                return self.message
        elif self.kind == "boolean":
            if not isinstance(value, bool) and str(value).lower() not in BOOL_STRINGS:
                return self.message
        elif self.kind == "int":
            number = _to_int(value)
            if number is None:
                return self.message
            if self.minimum is not None and number < self.minimum:
                return self.message
            if self.maximum is not None and number > self.maximum:
                return self.message
        elif self.kind == "list":
            if not isinstance(value, list):
                return self.message
            if self.min_items is not None and len(value) < self.min_items:
                return self.message
            if self.max_items is not None and len(value) > self.max_items:
                return self.message

        if self.choices is not None and value not in self.choices:
            return self.message
        return None

    def sanitize(self, value: Any) -> Any:
        if self.kind == "string" and isinstance(value, str):
            if self.trim:
                value = value.strip()
            if self.escape:
                value = html.escape(value, quote=True)
        elif self.kind == "boolean" and not isinstance(value, bool):
            value = BOOL_STRINGS[str(value).lower()]
        elif self.kind == "int":
            value = _to_int(value)
        return value


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def _display(prefix: str, part: Any) -> str:
    if isinstance(part, int):
        return f"{prefix}[{part}]"
    return f"{prefix}.{part}" if prefix else part


def _resolve(container: Any, parts: List[str], prefix: str = "") -> Iterator[Tuple[str, Any, Any, Any]]:
    """Yield (field, container, key, value) for every location a path matches"""
    head, rest = parts[0], parts[1:]
    if head == "*":
        if not isinstance(container, list):
            return
        keys = range(len(container))
    else:
        if not isinstance(container, dict):
            return
        keys = [head]

    for key in keys:
        value = container[key] if head == "*" else container.get(key, _MISSING)
        field = _display(prefix, key)
        if rest:
            if value is _MISSING:
                continue
            yield from _resolve(value, rest, field)
        else:
            yield field, container, key, value


class RequestValidator:
    """Runs field rules over a request body, then cross-field checks"""

    def __init__(self, rules: Sequence[FieldRule], checks: Sequence[Callable[[Dict], Optional[str]]] = (),
                 name: str = "Request"):
        self.rules = rules
        self.checks = checks
        self.name = name

    def validate(self, body: Dict) -> Dict:
        """Validate and sanitize ``body`` in place; raises ValidationError"""
        errors = []
        matches = []
        for rule in self.rules:
            for field, container, key, value in _resolve(body, rule.parts):
                message = rule.check(value)
                if message:
                    errors.append({
                        "field": field,
                        "message": message,
                        "value": None if value is _MISSING else value,
                    })
                elif value is not _MISSING and value is not None:
                    matches.append((rule, container, key))

        if errors:
            logger.warning("%s validation failed: %s", self.name, errors)
            raise ValidationError("Validation failed", errors)

        for rule, container, key in matches:
            container[key] = rule.sanitize(container[key])

        for check in self.checks:
            message = check(body)
            if message:
                logger.warning("%s validation failed: %s", self.name, message)
                raise ValidationError(message)
        return body


def validate_request(rules: Sequence[FieldRule], checks: Sequence[Callable] = (), name: str = "Request"):
    """Decorator validating the request body before the handler runs"""
    validator = RequestValidator(rules, checks, name)

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            body = get_request_body()
            try:
                validator.validate(body)
            except ValidationError as e:
                return e.to_response(), e.status
            g.request_body = body
            return f(*args, **kwargs)
        return decorated_function
    return decorator


# ============= CROSS-FIELD CHECKS =============

def _is_true(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.lower() == "true")


def correct_answers_in_options(list_field: str) -> Callable[[Dict], Optional[str]]:
    def check(body: Dict) -> Optional[str]:
        questions = body.get(list_field)
        if not isinstance(questions, list):
            return None
        for i, question in enumerate(questions):
            if not isinstance(question, dict):
                continue
            answers = question.get("correctAnswers")
            options = question.get("options")
            if answers and options and any(answer not in options for answer in answers):
                return f"Correct answers must be from the provided options for question {i + 1}"
        return None
    return check


def unique_options(list_field: str) -> Callable[[Dict], Optional[str]]:
    def check(body: Dict) -> Optional[str]:
        questions = body.get(list_field)
        if not isinstance(questions, list):
            return None
        for i, question in enumerate(questions):
            options = question.get("options") if isinstance(question, dict) else None
            if options and len(set(options)) != len(options):
                return f"Options must be unique for question {i + 1}"
        return None
    return check


def quiz_required_when_has_quiz(body: Dict) -> Optional[str]:
    if _is_true(body.get("hasQuiz")) and not body.get("quizQuestions"):
        return "Quiz questions are required when hasQuiz is true"
    return None
