from datetime import timedelta

import pytest
from bson import ObjectId

from kbcms.app import create_app
from kbcms.db.db_utils import get_collection
from kbcms.services.auth_service import classify_identifier
from kbcms.exceptions.exceptions import ValidationError
from kbcms.jwt.jwt_utils import TokenManager
from kbcms.utils.time_utils import utc_now
from tests.conftest import make_settings


def login(client, identifier):
    resp = client.post("/login", json={"identifier": identifier})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def verify(client, session_token, identifier, otp):
    return client.post("/verify-otp", json={"sessionToken": session_token, "identifier": identifier, "otp": otp})


@pytest.mark.parametrize("identifier, expected", [
    ("user@example.com", "email"),
    ("9876543210", "mobile"),
    ("+919876543210", "mobile"),
])
def test_classify_identifier(identifier, expected):
    assert classify_identifier(identifier) == expected


def test_classify_identifier_rejects_garbage():
    with pytest.raises(ValidationError):
        classify_identifier("not an identifier")


def test_login_sends_otp(client, otp_sender, db):
    body = login(client, "Student@Example.com")

    assert body["success"] is True
    assert body["message"] == "OTP sent successfully"
    assert body["identifierType"] == "email"
    assert body["expiresIn"] == 600
    assert "developmentInfo" not in body
    assert otp_sender.sent[0]["identifier"] == "student@example.com"
    assert len(otp_sender.sent[0]["otp"]) == 6

    session = get_collection(db, "otp_sessions").find_one({"sessionToken": body["sessionToken"]})
    assert session["otpHash"] != otp_sender.sent[0]["otp"]
    assert session["attempts"] == 0


def test_login_requires_identifier(client):
    resp = client.post("/login", json={})
    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "identifier"


def test_login_delivery_failure(client, otp_sender):
    otp_sender.succeed = False
    resp = client.post("/login", json={"identifier": "student@example.com"})
    assert resp.status_code == 500
    assert resp.get_json()["type"] == "OTP_DELIVERY_FAILED"


def test_dummy_account_gets_fixed_otp(client, otp_sender):
    body = login(client, "1234567899")

    assert body["developmentInfo"]["dummyOTP"] == "1234"
    assert otp_sender.sent == []

    resp = verify(client, body["sessionToken"], "1234567899", "1234")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["mobileNumber"] == "1234567899"
    assert resp.get_json()["user"]["isMobileVerified"] is True


def test_dummy_account_disabled_in_production(db, s3_client, otp_sender):
    app = create_app(settings=make_settings(APP_ENV="production"), db=db, s3_client=s3_client,
                     otp_sender=otp_sender)
    body = login(app.test_client(), "abc@gmail.com")

    assert "developmentInfo" not in body
    assert len(otp_sender.sent) == 1


def test_verify_and_profile_flow(client, otp_sender):
    body = login(client, "student@example.com")
    otp = otp_sender.sent[0]["otp"]

    resp = verify(client, body["sessionToken"], "student@example.com", otp)
    assert resp.status_code == 200
    result = resp.get_json()
    assert result["message"] == "Login successful"
    assert result["user"]["email"] == "student@example.com"
    assert result["user"]["isEmailVerified"] is True

    headers = {"Authorization": f"Bearer {result['token']}"}
    profile = client.get("/profile", headers=headers)
    assert profile.status_code == 200
    assert profile.get_json()["data"]["user"]["id"] == result["user"]["id"]

    # a session can only be used once
    reused = verify(client, body["sessionToken"], "student@example.com", otp)
    assert reused.status_code == 400
    assert reused.get_json()["type"] == "INVALID_SESSION"


def test_second_login_reuses_user(client, otp_sender, db):
    for _ in range(2):
        body = login(client, "student@example.com")
        verify(client, body["sessionToken"], "student@example.com", otp_sender.sent[-1]["otp"])
    assert get_collection(db, "users").count_documents({"email": "student@example.com"}) == 1


def test_wrong_otp_counts_attempts(client, otp_sender, db):
    body = login(client, "student@example.com")
    otp = otp_sender.sent[0]["otp"]
    wrong = "000000" if otp != "000000" else "111111"

    for _ in range(5):
        resp = verify(client, body["sessionToken"], "student@example.com", wrong)
        assert resp.status_code == 400
        assert resp.get_json()["type"] == "INVALID_OTP"

    locked = verify(client, body["sessionToken"], "student@example.com", otp)
    assert locked.get_json()["type"] == "TOO_MANY_ATTEMPTS"
    session = get_collection(db, "otp_sessions").find_one({"sessionToken": body["sessionToken"]})
    assert session["attempts"] == 5


def test_expired_otp(client, otp_sender, db):
    body = login(client, "student@example.com")
    get_collection(db, "otp_sessions").update_one(
        {"sessionToken": body["sessionToken"]},
        {"$set": {"expiresAt": utc_now() - timedelta(seconds=1)}},
    )
    resp = verify(client, body["sessionToken"], "student@example.com", otp_sender.sent[0]["otp"])
    assert resp.status_code == 400
    assert resp.get_json()["type"] == "OTP_EXPIRED"


def test_resend_otp(client, otp_sender):
    first = login(client, "student@example.com")

    resp = client.post("/resend-otp", json={"identifier": "student@example.com"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["isResent"] is True
    assert body["sessionToken"] != first["sessionToken"]

    stale = verify(client, first["sessionToken"], "student@example.com", otp_sender.sent[0]["otp"])
    assert stale.get_json()["type"] == "INVALID_SESSION"
    fresh = verify(client, body["sessionToken"], "student@example.com", otp_sender.sent[1]["otp"])
    assert fresh.status_code == 200


def test_resend_without_login(client):
    resp = client.post("/resend-otp", json={"identifier": "nobody@example.com"})
    assert resp.status_code == 404
    assert resp.get_json()["type"] == "USER_NOT_FOUND"


def test_profile_requires_token(client):
    resp = client.get("/profile")
    assert resp.status_code == 401
    assert resp.get_json()["type"] == "NO_AUTH_HEADER"


def test_invalid_token(client):
    resp = client.get("/profile", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401
    assert resp.get_json()["type"] == "INVALID_TOKEN"


def test_logout_blacklists_token(client, auth_headers):
    assert client.get("/profile", headers=auth_headers).status_code == 200

    resp = client.post("/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Logout successful"}

    after = client.get("/profile", headers=auth_headers)
    assert after.status_code == 401
    assert after.get_json()["type"] == "TOKEN_BLACKLISTED"


def test_create_profile(client, create_user, make_token):
    user = create_user()
    headers = {"Authorization": f"Bearer {make_token(user)}"}

    resp = client.post("/create-profile", json={
        "userId": str(user["_id"]),
        "fullName": "  Asha Rao ",
        "age": 19,
        "institution": "City College",
    }, headers=headers)

    assert resp.status_code == 200
    profile = resp.get_json()["data"]["user"]
    assert profile["fullName"] == "Asha Rao"
    assert profile["age"] == 19
    assert profile["filePath"] is None
    assert profile["email"] == "student@example.com"


def test_create_profile_for_other_user_forbidden(client, create_user, make_token):
    user = create_user()
    headers = {"Authorization": f"Bearer {make_token(user)}"}
    resp = client.post("/create-profile", json={
        "userId": str(ObjectId()), "fullName": "Someone Else", "age": 20, "institution": "City College",
    }, headers=headers)
    assert resp.status_code == 403


def test_create_profile_validation(client, auth_headers):
    resp = client.post("/create-profile", json={"userId": "x", "fullName": "A", "age": 0}, headers=auth_headers)
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.get_json()["errors"]}
    assert {"fullName", "age", "institution"} <= fields


def test_schools_sorted_and_active_only(client, db):
    get_collection(db, "schools").insert_many([
        {"name": "Zion High", "isActive": True, "city": "X"},
        {"name": "Alpha School", "isActive": True},
        {"name": "Closed School", "isActive": False},
    ])
    resp = client.get("/schools")
    assert resp.status_code == 200
    schools = resp.get_json()["data"]["schools"]
    assert [s["name"] for s in schools] == ["Alpha School", "Zion High"]
    assert set(schools[0]) == {"_id", "name"}


def test_expired_token(app, client, create_user):
    user = create_user()
    with app.app_context():
        token = TokenManager.generate_token(user, expires_delta=timedelta(seconds=-1))
    resp = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Token has expired", "type": "TOKEN_EXPIRED"}
