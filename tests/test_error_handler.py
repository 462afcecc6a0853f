from kbcms.exceptions.error_handler import handle_service_error
from kbcms.exceptions.exceptions import (
    FileUploadError, InternalError, NotFoundError, UnauthorizedError, ValidationError
)


def test_app_error_envelope(app):
    with app.app_context():
        body, status = handle_service_error(NotFoundError("Quiz not found", "QUIZ_NOT_FOUND"))
    assert status == 404
    assert body == {"success": False, "error": "Quiz not found", "type": "QUIZ_NOT_FOUND"}


def test_file_upload_error_is_500(app):
    with app.app_context():
        body, status = handle_service_error(FileUploadError())
    assert status == 500
    assert body["type"] == "FILE_UPLOAD_ERROR"


def test_validation_error_carries_field_errors(app):
    error = ValidationError(errors=[{"field": "title", "message": "Title is required", "value": None}])
    with app.app_context():
        body, status = handle_service_error(error)
    assert status == 400
    assert body["errors"][0]["field"] == "title"


def test_unexpected_error_detail_in_development(app):
    with app.app_context():
        body, status = handle_service_error(RuntimeError("database exploded"))
    assert status == 500
    assert body["type"] == "INTERNAL_ERROR"
    assert body["error"] == "database exploded"
    assert body["message"] == "An Error occurred please try again"


def test_unexpected_error_redacted_outside_development(app):
    app.config["APP_ENV"] = "production"
    with app.app_context():
        body, _ = handle_service_error(RuntimeError("database exploded"))
    assert body["error"] == "Something went wrong"


def test_unknown_route_and_method(client):
    missing = client.get("/does-not-exist")
    assert missing.status_code == 404
    assert missing.get_json()["type"] == "ROUTE_NOT_FOUND"

    wrong_method = client.patch("/news")
    assert wrong_method.status_code == 405


def test_health_check(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True


def test_internal_error_envelope(app):
    app.config["APP_ENV"] = "production"
    with app.app_context():
        body, status = handle_service_error(InternalError("An Error occurred please try again"))
    assert status == 500
    assert body == {
        "success": False,
        "message": "An Error occurred please try again",
        "error": "Something went wrong",
        "type": "INTERNAL_ERROR",
    }


def test_unauthorized_error_defaults():
    error = UnauthorizedError()
    assert error.status == 401
    assert error.to_response() == {"success": False, "error": "Unauthorized access", "type": "UNAUTHORIZED"}
