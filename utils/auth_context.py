from functools import wraps

from flask import g

from models import db
from models.user import User
from security.session import get_session_from_request
from utils.errors import UnauthorizedError


def _anonymous():
    g.user = None
    g.session = None


def load_current_user():
    claims = get_session_from_request()
    if claims is None:
        return _anonymous()

    user = db.session.get(User, claims.account_id)
    # token is bound to id and email; a mismatch means the account changed
    if user is None or user.email != claims.email:
        return _anonymous()

    g.session = claims
    g.user = user


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            raise UnauthorizedError("Authentication required")
        return fn(*args, **kwargs)
    return wrapper
