"""
News API
Create, list, read, update and soft delete news articles
"""
from flask import request
from flask_restful import Resource

from kbcms.exceptions.error_handler import handle_service_error
from kbcms.jwt.auth_middleware import token_required
from kbcms.middlewares.form_data import get_request_body, get_uploaded_file, parse_form_data
from kbcms.utils.api_response import APIResponse
from kbcms.utils.constants import RESPONSE_MESSAGES
from kbcms.validators.news_validator import validate_news_submission, validate_news_update


class CreateNewsAPI(Resource):
    def __init__(self, news_service):
        self.news_service = news_service

    @parse_form_data
    @validate_news_submission
    @token_required
    def post(self):
        """Submit a news article with an optional image or video"""
        try:
            result = self.news_service.submit_news(get_request_body(), get_uploaded_file())
            return APIResponse.success(result, RESPONSE_MESSAGES["newsCreated"])
        except Exception as e:
            return handle_service_error(e, {"route": "create-news"})


class NewsListAPI(Resource):
    def __init__(self, news_service):
        self.news_service = news_service

    def get(self):
        try:
            result = self.news_service.get_news(request.args.to_dict())
            return APIResponse.success(result, RESPONSE_MESSAGES["newsRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"query": request.args.to_dict()})


class NewsDetailAPI(Resource):
    def __init__(self, news_service):
        self.news_service = news_service

    def get(self, article_id):
        """Fetch one article; counts as a view"""
        try:
            result = self.news_service.get_news_by_id(article_id)
            return APIResponse.success(result, RESPONSE_MESSAGES["newsRetrieved"])
        except Exception as e:
            return handle_service_error(e, {"articleId": article_id})

    @parse_form_data
    @validate_news_update
    @token_required
    def put(self, article_id):
        try:
            result = self.news_service.update_news(article_id, get_request_body(), get_uploaded_file())
            return APIResponse.success(result, RESPONSE_MESSAGES["newsUpdated"])
        except Exception as e:
            return handle_service_error(e, {"articleId": article_id})

    @token_required
    def delete(self, article_id):
        try:
            self.news_service.delete_news(article_id)
            return APIResponse.success(message=RESPONSE_MESSAGES["newsDeleted"])
        except Exception as e:
            return handle_service_error(e, {"articleId": article_id})
