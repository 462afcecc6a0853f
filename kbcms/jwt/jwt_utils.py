from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity

STUDENT_USER_TYPE = "student"


class TokenManager:
    @staticmethod
    def generate_token(user, expires_delta=None):
        """Generate JWT access token for a user document"""
        additional_claims = {
            "email": user.get("email"),
            "mobileNumber": user.get("mobileNumber"),
            "userType": STUDENT_USER_TYPE,
        }

        kwargs = {"identity": str(user["_id"]), "additional_claims": additional_claims, "fresh": False}
        # Falls back to JWT_ACCESS_TOKEN_EXPIRES from the app config
        if expires_delta is not None:
            kwargs["expires_delta"] = expires_delta
        return create_access_token(**kwargs)

    @staticmethod
    def get_current_user_id():
        """Get current user id from JWT token"""
        return get_jwt_identity()

    @staticmethod
    def get_user_claims():
        """Get additional claims from JWT token"""
        return get_jwt()
