import mongomock
import pytest
from botocore.exceptions import ClientError

from kbcms.app import create_app
from kbcms.config.settings import Settings
from kbcms.db.db_utils import get_collection
from kbcms.jwt.jwt_utils import TokenManager
from kbcms.utils.time_utils import utc_now


class FakeS3Client:
    """Records S3 calls; failures can be switched on per call type"""

    def __init__(self):
        self.put_calls = []
        self.multipart_calls = []
        self.fail_put = False
        self.fail_multipart = False

    def put_object(self, **kwargs):
        self.put_calls.append(kwargs)
        if self.fail_put:
            raise ClientError({"Error": {"Code": "500", "Message": "put failed"}}, "PutObject")
        return {"ETag": '"fake-etag"'}

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None, Config=None, Callback=None):
        self.multipart_calls.append({"Bucket": bucket, "Key": key, "ExtraArgs": ExtraArgs, "Config": Config})
        if self.fail_multipart:
            raise ClientError({"Error": {"Code": "500", "Message": "multipart failed"}}, "UploadPart")
        data = fileobj.read()
        if Callback:
            Callback(len(data))


class FakeOTPSender:
    def __init__(self):
        self.sent = []
        self.succeed = True

    def send(self, identifier_type, identifier, otp, country_code=None):
        self.sent.append({"type": identifier_type, "identifier": identifier, "otp": otp})
        return self.succeed


def make_settings(**overrides):
    values = {
        "APP_ENV": "development",
        "LOG_FILE": "",
        "LOG_LEVEL": "WARNING",
        "RATELIMIT_ENABLED": False,
        "OTP_HASH_ROUNDS": 4,
        "MONGO_ENSURE_INDEXES": False,
        "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
        "AWS_BUCKET": "test-bucket",
        "AWS_DEFAULT_REGION": "ap-south-1",
        "AWS_URL": "https://test-bucket.example.com/",
        "AWS_CDN_URL": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def db():
    return mongomock.MongoClient()["kb_cms_test"]


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def otp_sender():
    return FakeOTPSender()


@pytest.fixture
def app(settings, db, s3_client, otp_sender):
    return create_app(settings=settings, db=db, s3_client=s3_client, otp_sender=otp_sender)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def create_user(db):

    def _create_user(email="student@example.com", mobile=None, **fields):
        now = utc_now()
        user = {"email": email, "isEmailVerified": True, "isMobileVerified": False,
                "createdAt": now, "updatedAt": now}
        if mobile:
            user["mobileNumber"] = mobile
        user.update(fields)
        user["_id"] = get_collection(db, "users").insert_one(user).inserted_id
        return user
    return _create_user


@pytest.fixture
def make_token(app):

    def _make_token(user):
        with app.app_context():
            return TokenManager.generate_token(user)
    return _make_token


@pytest.fixture
def auth_headers(create_user, make_token):
    user = create_user()
    return {"Authorization": f"Bearer {make_token(user)}"}


@pytest.fixture
def news_payload():
    return {
        "title": "New Science Lab Opens",
        "subTitle": "Students get a modern lab",
        "description": "The school opened a brand new lab this week.",
        "category": "Science",
        "type": "Text",
        "status": "Draft",
        "author": "Jane Doe",
    }


@pytest.fixture
def quiz_payload():
    return {
        "title": "Basic Science Quiz",
        "description": "A short quiz about basic science facts.",
        "category": "Science",
        "status": "Draft",
        "author": "Jane Doe",
        "questions": [
            {"question": "What is H2O?", "options": ["Water", "Salt"], "correctAnswers": ["Water"], "points": 2},
            {"question": "Is the sun a star?", "options": ["Yes", "No"], "correctAnswers": ["Yes"]},
        ],
    }
