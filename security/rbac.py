from functools import wraps

from flask import g

from utils.errors import ForbiddenError, UnauthorizedError


def require_admin(fn):
    """Only accounts with ``is_admin`` set. Anonymous callers get 401, others 403."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = getattr(g, "user", None)
        if user is None:
            raise UnauthorizedError("Authentication required")
        if not user.is_admin:
            raise ForbiddenError("Admin access required")
        return fn(*args, **kwargs)
    return wrapper
