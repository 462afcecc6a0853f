"""Quiz validation rules"""
from kbcms.utils.constants import QUIZ_CATEGORIES, QUIZ_DIFFICULTIES, STATUSES
from kbcms.validators.rules import FieldRule, correct_answers_in_options, unique_options, validate_request

_DIFFICULTY_MESSAGE = "Difficulty must be Easy, Medium, or Hard"
_TIME_LIMIT_MESSAGE = "Time limit must be between 1 and 180 minutes"
_STATUS_MESSAGE = "Status must be either Draft or Published"

# Per-question rules; applied whenever ``questions`` is sent
QUESTION_RULES = [
    FieldRule("questions.*.question", "Question must be between 5 and 500 characters", required=True,
              required_message="Question text is required", min_length=5, max_length=500, trim=True, escape=True),
    FieldRule("questions.*.options", "Question must have between 2 and 6 options", required=True,
              kind="list", min_items=2, max_items=6),
    FieldRule("questions.*.options.*", "Option must be between 1 and 200 characters", required=True,
              required_message="Option cannot be empty", min_length=1, max_length=200, trim=True, escape=True),
    FieldRule("questions.*.correctAnswers", "At least one correct answer is required", required=True,
              kind="list", min_items=1),
    FieldRule("questions.*.correctAnswers.*", "Correct answer cannot be empty", required=True,
              trim=True, escape=True),
    FieldRule("questions.*.points", "Points must be between 1 and 10", kind="int", minimum=1, maximum=10),
]

QUIZ_SUBMISSION_RULES = [
    FieldRule("title", "Title must be between 3 and 200 characters", required=True,
              required_message="Title is required", min_length=3, max_length=200, trim=True, escape=True),
    FieldRule("description", "Description must be between 10 and 1000 characters", required=True,
              required_message="Description is required", min_length=10, max_length=1000, trim=True),
    FieldRule("category", "Invalid category", required=True,
              required_message="Category is required", choices=QUIZ_CATEGORIES),
    FieldRule("difficulty", _DIFFICULTY_MESSAGE, choices=QUIZ_DIFFICULTIES),
    FieldRule("timeLimit", _TIME_LIMIT_MESSAGE, kind="int", minimum=1, maximum=180),
    FieldRule("status", _STATUS_MESSAGE, required=True, required_message="Status is required", choices=STATUSES),
    FieldRule("author", "Author name must be between 2 and 100 characters", required=True,
              required_message="Author is required", min_length=2, max_length=100, trim=True, escape=True),
    FieldRule("questions", "At least one question is required", required=True, kind="list", min_items=1),
] + QUESTION_RULES

QUIZ_UPDATE_RULES = [
    FieldRule("title", "Title must be between 3 and 200 characters",
              min_length=3, max_length=200, trim=True, escape=True),
    FieldRule("description", "Description must be between 10 and 1000 characters",
              min_length=10, max_length=1000, trim=True),
    FieldRule("category", "Invalid category", choices=QUIZ_CATEGORIES),
    FieldRule("difficulty", _DIFFICULTY_MESSAGE, choices=QUIZ_DIFFICULTIES),
    FieldRule("timeLimit", _TIME_LIMIT_MESSAGE, kind="int", minimum=1, maximum=180),
    FieldRule("status", _STATUS_MESSAGE, choices=STATUSES),
    FieldRule("author", "Author name must be between 2 and 100 characters",
              min_length=2, max_length=100, trim=True, escape=True),
    FieldRule("questions", "At least one question is required", kind="list", min_items=1),
] + QUESTION_RULES

QUIZ_CHECKS = [correct_answers_in_options("questions"), unique_options("questions")]

validate_quiz_submission = validate_request(QUIZ_SUBMISSION_RULES, QUIZ_CHECKS, name="Quiz submission")
validate_quiz_update = validate_request(QUIZ_UPDATE_RULES, QUIZ_CHECKS, name="Quiz update")
