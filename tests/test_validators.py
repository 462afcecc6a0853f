import pytest

from kbcms.exceptions.exceptions import ValidationError
from kbcms.validators.news_validator import NEWS_CHECKS, NEWS_SUBMISSION_RULES
from kbcms.validators.quiz_validator import QUIZ_CHECKS, QUIZ_SUBMISSION_RULES, QUIZ_UPDATE_RULES
from kbcms.validators.rules import FieldRule, RequestValidator


def news_validator():
    return RequestValidator(NEWS_SUBMISSION_RULES, NEWS_CHECKS)


def quiz_validator():
    return RequestValidator(QUIZ_SUBMISSION_RULES, QUIZ_CHECKS)


def test_valid_news_passes_and_is_sanitized(news_payload):
    body = dict(news_payload, title="  <b>Bold</b> title  ")
    news_validator().validate(body)
    assert body["title"] == "&lt;b&gt;Bold&lt;/b&gt; title"


def test_missing_required_fields_are_all_reported():
    with pytest.raises(ValidationError) as exc:
        news_validator().validate({})

    fields = {error["field"]: error["message"] for error in exc.value.errors}
    assert fields["title"] == "Title is required"
    assert fields["subTitle"] == "Subtitle is required"
    assert fields["category"] == "Category is required"
    assert fields["status"] == "Status is required"
    response = exc.value.to_response()
    assert response["message"] == "Validation failed"
    assert response["type"] == "VALIDATION_ERROR"


def test_length_and_enum_messages(news_payload):
    body = dict(news_payload, title="ab", category="Sports")
    with pytest.raises(ValidationError) as exc:
        news_validator().validate(body)

    errors = {e["field"]: e for e in exc.value.errors}
    assert errors["title"]["message"] == "Title must be between 3 and 200 characters"
    assert errors["title"]["value"] == "ab"
    assert errors["category"]["message"] == "Invalid category"


def test_wildcard_fields_use_indexed_names(news_payload):
    body = dict(news_payload, hasQuiz=True, quizQuestions=[
        {"question": "What is this?", "options": ["A", ""], "correctAnswers": ["A"]},
    ])
    with pytest.raises(ValidationError) as exc:
        news_validator().validate(body)

    assert exc.value.errors == [{
        "field": "quizQuestions[0].options[1]",
        "message": "Quiz option cannot be empty",
        "value": "",
    }]


def test_has_quiz_requires_questions(news_payload):
    body = dict(news_payload, hasQuiz=True)
    with pytest.raises(ValidationError) as exc:
        news_validator().validate(body)

    assert exc.value.message == "Quiz questions are required when hasQuiz is true"
    assert "errors" not in exc.value.to_response()


def test_correct_answer_must_be_an_option_news(news_payload):
    body = dict(news_payload, hasQuiz=True, quizQuestions=[
        {"question": "Pick the first", "options": ["A", "B"], "correctAnswers": ["A"]},
        {"question": "Pick the other", "options": ["A", "B"], "correctAnswers": ["C"]},
    ])
    with pytest.raises(ValidationError) as exc:
        news_validator().validate(body)
    assert exc.value.message == "Correct answers must be from the provided options for question 2"


def test_quiz_short_description_rejected(quiz_payload):
    body = dict(quiz_payload, description="too short")
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(body)
    assert exc.value.errors[0]["field"] == "description"
    assert exc.value.errors[0]["message"] == "Description must be between 10 and 1000 characters"


def test_quiz_options_bounds(quiz_payload):
    quiz_payload["questions"][0]["options"] = ["Only one"]
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(quiz_payload)
    assert exc.value.errors[0]["field"] == "questions[0].options"
    assert exc.value.errors[0]["message"] == "Question must have between 2 and 6 options"


def test_quiz_requires_questions(quiz_payload):
    quiz_payload["questions"] = []
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(quiz_payload)
    assert exc.value.errors[0]["message"] == "At least one question is required"


def test_quiz_unique_options(quiz_payload):
    quiz_payload["questions"][1]["options"] = ["Yes", "Yes"]
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(quiz_payload)
    assert exc.value.message == "Options must be unique for question 2"


def test_quiz_int_bounds_and_coercion(quiz_payload):
    quiz_payload["timeLimit"] = "45"
    quiz_validator().validate(quiz_payload)
    assert quiz_payload["timeLimit"] == 45

    quiz_payload["timeLimit"] = 181
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(quiz_payload)
    assert exc.value.errors[0]["message"] == "Time limit must be between 1 and 180 minutes"


def test_quiz_points_out_of_range(quiz_payload):
    quiz_payload["questions"][0]["points"] = 11
    with pytest.raises(ValidationError) as exc:
        quiz_validator().validate(quiz_payload)
    assert exc.value.errors[0]["field"] == "questions[0].points"


def test_update_rules_are_optional():
    body = {"status": "Published"}
    RequestValidator(QUIZ_UPDATE_RULES).validate(body)
    assert body == {"status": "Published"}

    with pytest.raises(ValidationError):
        RequestValidator(QUIZ_UPDATE_RULES).validate({"difficulty": "Impossible"})


def test_update_questions_follow_create_rules():
    body = {"questions": [{"question": "Bad question?", "options": ["A"], "correctAnswers": ["Z"], "points": 0}]}
    with pytest.raises(ValidationError) as exc:
        RequestValidator(QUIZ_UPDATE_RULES, QUIZ_CHECKS).validate(body)
    fields = {e["field"] for e in exc.value.errors}
    assert fields == {"questions[0].options", "questions[0].points"}

    with pytest.raises(ValidationError):
        RequestValidator(QUIZ_UPDATE_RULES, QUIZ_CHECKS).validate({"questions": []})


def test_update_questions_answers_must_be_options():
    body = {"questions": [{"question": "Which one?", "options": ["A", "B"], "correctAnswers": ["Z"]}]}
    with pytest.raises(ValidationError) as exc:
        RequestValidator(QUIZ_UPDATE_RULES, QUIZ_CHECKS).validate(body)
    assert str(exc.value) == "Correct answers must be from the provided options for question 1"


def test_boolean_rule_accepts_strings_and_converts():
    rule = FieldRule("flag", "flag must be a boolean", kind="boolean")
    body = {"flag": "false"}
    RequestValidator([rule]).validate(body)
    assert body["flag"] is False

    with pytest.raises(ValidationError):
        RequestValidator([rule]).validate({"flag": "maybe"})


def test_pattern_rule():
    rule = FieldRule("otp", "OTP must be 4 to 6 digits", required=True, pattern=r"^\d{4,6}$")
    RequestValidator([rule]).validate({"otp": "123456"})
    with pytest.raises(ValidationError):
        RequestValidator([rule]).validate({"otp": "12a4"})
