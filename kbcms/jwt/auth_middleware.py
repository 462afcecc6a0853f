from functools import wraps

from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException, NoAuthorizationError
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from kbcms.exceptions.exceptions import UnauthorizedError
from kbcms.logging_logs.log_config import get_logger

logger = get_logger(__name__)

# In-memory blacklist storage
blacklisted_tokens = set()


def blacklist_token(jti):
    blacklisted_tokens.add(jti)


def is_token_blacklisted(jti):
    """Check if token is blacklisted"""
    return jti in blacklisted_tokens


def _check_token():
    """Raise UnauthorizedError unless the request carries a live token"""
    try:
        verify_jwt_in_request()
    except NoAuthorizationError:
        raise UnauthorizedError("Missing Authorization Header", "NO_AUTH_HEADER")
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired", "TOKEN_EXPIRED")
    except InvalidTokenError:
        raise UnauthorizedError("Invalid token", "INVALID_TOKEN")
    except JWTExtendedException as e:
        logger.info("Rejected token: %s", e)
        raise UnauthorizedError()

    # Check if token is blacklisted
    if is_token_blacklisted(get_jwt()["jti"]):
        raise UnauthorizedError("Token has been invalidated", "TOKEN_BLACKLISTED")


def token_required(f):
    """Decorator to require JWT token for API endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            _check_token()
        except UnauthorizedError as e:
            return e.to_response(), e.status
        return f(*args, **kwargs)
    return decorated_function
