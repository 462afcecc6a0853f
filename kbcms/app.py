"""Application factory and route table"""
from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_restful import Api

from kbcms.api.auth_api import (
    CreateProfileAPI, LoginAPI, LogoutAPI, ProfileAPI, ResendOTPAPI, SchoolListAPI, VerifyOTPAPI
)
from kbcms.api.news_api import CreateNewsAPI, NewsDetailAPI, NewsListAPI
from kbcms.api.quiz_api import CreateQuizAPI, QuizDetailAPI, QuizListAPI
from kbcms.config.settings import Settings
from kbcms.db.db_utils import ensure_indexes, get_collection, get_database, get_mongo_client
from kbcms.exceptions.error_handler import HTTP_ERRORS
from kbcms.external.otp_sender import OTPSender
from kbcms.logging_logs.log_config import get_logger, setup_logging
from kbcms.middlewares.security import limiter
from kbcms.orm.auth_orm import OTPSessionORM, SchoolORM, UserORM
from kbcms.orm.news_orm import NewsORM
from kbcms.orm.quiz_orm import QuizORM
from kbcms.services.auth_service import AuthService
from kbcms.services.news_service import NewsService
from kbcms.services.quiz_service import QuizService
from kbcms.storage.s3_uploader import S3Uploader, build_s3_client


class KBFlask(Flask):
    def add_api(self, settings, db, s3_client, otp_sender):
        api = Api(self, catch_all_404s=True, errors=HTTP_ERRORS)

        uploader = S3Uploader(s3_client, settings)
        news_service = NewsService(NewsORM(get_collection(db, "news")), uploader)
        quiz_service = QuizService(QuizORM(get_collection(db, "quiz")))
        auth_service = AuthService(
            UserORM(get_collection(db, "users")),
            OTPSessionORM(get_collection(db, "otp_sessions")),
            SchoolORM(get_collection(db, "schools")),
            otp_sender,
            settings,
        )
        self.extensions["kbcms"] = {
            "settings": settings,
            "db": db,
            "uploader": uploader,
            "news_service": news_service,
            "quiz_service": quiz_service,
            "auth_service": auth_service,
        }

        news = {"resource_class_kwargs": {"news_service": news_service}}
        quiz = {"resource_class_kwargs": {"quiz_service": quiz_service}}
        auth = {"resource_class_kwargs": {"auth_service": auth_service}}

        # Auth
        api.add_resource(LoginAPI, "/login", **auth)
        api.add_resource(ResendOTPAPI, "/resend-otp", **auth)
        api.add_resource(VerifyOTPAPI, "/verify-otp", **auth)
        api.add_resource(ProfileAPI, "/profile", **auth)
        api.add_resource(LogoutAPI, "/logout", **auth)
        api.add_resource(CreateProfileAPI, "/create-profile", **auth)
        api.add_resource(SchoolListAPI, "/schools", **auth)

        # News
        api.add_resource(CreateNewsAPI, "/create-news", **news)
        api.add_resource(NewsListAPI, "/news", **news)
        api.add_resource(NewsDetailAPI, "/news/<string:article_id>", **news)

        # Quiz
        api.add_resource(CreateQuizAPI, "/create-quiz", **quiz)
        api.add_resource(QuizListAPI, "/quiz", **quiz)
        api.add_resource(QuizDetailAPI, "/quiz/<string:quiz_id>", **quiz)
        return api


def create_app(settings=None, db=None, s3_client=None, otp_sender=None):
    """Build the application; every collaborator can be injected"""
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger = get_logger(__name__)

    app = KBFlask(__name__)
    app.config.update(settings.flask_config())

    CORS(app, supports_credentials=True)
    JWTManager(app)
    limiter.init_app(app)

    if db is None:
        db = get_database(get_mongo_client(settings.MONGO_URI), settings.DB_NAME)
        logger.info("Connected to MongoDB database %s", settings.DB_NAME)
    if settings.MONGO_ENSURE_INDEXES:
        ensure_indexes(db)

    app.add_api(
        settings,
        db,
        s3_client or build_s3_client(settings),
        otp_sender or OTPSender(settings),
    )

    @app.route("/")
    def health_check():
        return {"success": True, "message": "KB CMS API is running", "environment": settings.APP_ENV}

    logger.info("Application created (env=%s)", settings.APP_ENV)
    return app
