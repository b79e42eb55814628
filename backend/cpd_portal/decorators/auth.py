from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt
from cpd_portal.auth import AuthContext


def require_auth(fn):
    """Verify the bearer token and pass the caller's AuthContext as `auth`."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        kwargs['auth'] = AuthContext.from_claims(get_jwt())
        return fn(*args, **kwargs)
    return wrapper
