"""Quiz API"""
from flask import request
from flask_restful import Resource

from kbcms.exceptions.error_handler import handle_service_error
from kbcms.jwt.auth_middleware import token_required
from kbcms.middlewares.form_data import get_request_body
from kbcms.utils.api_response import APIResponse
from kbcms.utils.constants import RESPONSE_MESSAGES
from kbcms.validators.quiz_validator import validate_quiz_submission, validate_quiz_update


class CreateQuizAPI(Resource):
    def __init__(self, quiz_service):
        self.quiz_service = quiz_service

    @validate_quiz_submission
    @token_required
    def post(self):
        try:
            result = self.quiz_service.submit_quiz(get_request_body())
            return APIResponse.success(result, RESPONSE_MESSAGES["quizCreated"], 201)
        except Exception as e:
            return handle_service_error(e, {"route": "create-quiz"})


class QuizListAPI(Resource):
    def __init__(self, quiz_service):
        self.quiz_service = quiz_service

    def get(self):
        try:
            result = self.quiz_service.get_quizzes(request.args.to_dict())
            return APIResponse.success(result, RESPONSE_MESSAGES["quizRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"query": request.args.to_dict()})


class QuizDetailAPI(Resource):
    def __init__(self, quiz_service):
        self.quiz_service = quiz_service

    def get(self, quiz_id):
        try:
            result = self.quiz_service.get_quiz_by_id(quiz_id)
            return APIResponse.success(result, RESPONSE_MESSAGES["quizRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"quizId": quiz_id})

    @validate_quiz_update
    @token_required
    def put(self, quiz_id):
        try:
            result = self.quiz_service.update_quiz(quiz_id, get_request_body())
            return APIResponse.success(result, RESPONSE_MESSAGES["quizUpdated"])
        except Exception as e:
            return handle_service_error(e, {"quizId": quiz_id})

    @token_required
    def delete(self, quiz_id):
        """Permanently removes the quiz"""
        try:
            self.quiz_service.delete_quiz(quiz_id)
            return APIResponse.success(message=RESPONSE_MESSAGES["quizDeleted"])
        except Exception as e:
            return handle_service_error(e, {"quizId": quiz_id})
