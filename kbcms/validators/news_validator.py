"""News article validation rules"""
from kbcms.utils.constants import NEWS_CATEGORIES, NEWS_TYPES, STATUSES
from kbcms.validators.rules import (
    FieldRule, correct_answers_in_options, quiz_required_when_has_quiz, validate_request
)


def _news_rules(required: bool):
    return [
        FieldRule("title", "Title must be between 3 and 200 characters", required=required,
                  required_message="Title is required", min_length=3, max_length=200, trim=True, escape=True),
        FieldRule("subTitle", "Subtitle must be between 3 and 300 characters", required=required,
                  required_message="Subtitle is required", min_length=3, max_length=300, trim=True, escape=True),
        FieldRule("description", "Description must be between 5 and 5000 characters", required=required,
                  required_message="Description is required", min_length=5, max_length=5000, trim=True),
        FieldRule("category", "Invalid category", required=required,
                  required_message="Category is required", choices=NEWS_CATEGORIES),
        FieldRule("type", "Invalid type", required=required,
                  required_message="Type is required", choices=NEWS_TYPES),
        FieldRule("hasQuiz", "hasQuiz must be a boolean", kind="boolean"),
        FieldRule("status", "Status must be either Draft or Published", required=required,
                  required_message="Status is required", choices=STATUSES),
        FieldRule("author", "Author name must be between 2 and 100 characters", required=required,
                  required_message="Author is required", min_length=2, max_length=100, trim=True, escape=True),
        FieldRule("content_url", "Content URL must be a string", max_length=2048, trim=True),
        FieldRule("quizQuestions", "Quiz questions must be an array", kind="list"),
        FieldRule("quizQuestions.*.question", "Quiz question must be between 5 and 500 characters",
                  required=True, required_message="Quiz question text is required",
                  min_length=5, max_length=500, trim=True, escape=True),
        FieldRule("quizQuestions.*.options", "Quiz question must have between 2 and 6 options",
                  required=True, kind="list", min_items=2, max_items=6),
        FieldRule("quizQuestions.*.options.*", "Quiz option must be between 1 and 200 characters",
                  required=True, required_message="Quiz option cannot be empty",
                  min_length=1, max_length=200, trim=True, escape=True),
        FieldRule("quizQuestions.*.correctAnswers", "At least one correct answer is required",
                  required=True, kind="list", min_items=1),
        FieldRule("quizQuestions.*.correctAnswers.*", "Correct answer cannot be empty",
                  required=True, trim=True, escape=True),
    ]


NEWS_SUBMISSION_RULES = _news_rules(required=True)
NEWS_UPDATE_RULES = _news_rules(required=False)

NEWS_CHECKS = [quiz_required_when_has_quiz, correct_answers_in_options("quizQuestions")]
NEWS_UPDATE_CHECKS = [correct_answers_in_options("quizQuestions")]

validate_news_submission = validate_request(NEWS_SUBMISSION_RULES, NEWS_CHECKS, name="News submission")
validate_news_update = validate_request(NEWS_UPDATE_RULES, NEWS_UPDATE_CHECKS, name="News update")
