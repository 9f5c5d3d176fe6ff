from dataclasses import dataclass
from typing import Optional

from flask import current_app, request
from itsdangerous import BadData, URLSafeTimedSerializer


@dataclass(frozen=True)
class SessionClaims:
    account_id: int
    email: str


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(
        secret_key=current_app.config["SECRET_KEY"],
        salt=current_app.config.get("SESSION_TOKEN_SALT", "taskgate.session.v1"),
    )


def issue_session_token(account_id: int, email: str) -> str:
    """
    Signed, timestamped token bound to the account. Expiry is enforced on read;
    there is no server-side revocation.
    """
    return _serializer().dumps({"sub": account_id, "email": email})


def read_session_token(token: str) -> Optional[SessionClaims]:
    if not token:
        return None

    max_age = current_app.config.get("SESSION_LIFETIME_SECONDS", 7 * 24 * 60 * 60)
    try:
        data = _serializer().loads(token, max_age=max_age)
    except BadData:
        # covers expiry as well as signature mismatch
        return None

    if not isinstance(data, dict):
        return None
    sub = data.get("sub")
    email = data.get("email")
    if not isinstance(sub, int) or not isinstance(email, str):
        return None
    return SessionClaims(account_id=sub, email=email)


def get_session_from_request() -> Optional[SessionClaims]:
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "token")
    return read_session_token(request.cookies.get(cookie_name))


def set_session_cookie(resp, token: str):
    resp.set_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "token"),
        token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 7 * 24 * 60 * 60),
        path="/",
    )
    return resp


def clear_session_cookie(resp):
    resp.delete_cookie(current_app.config.get("AUTH_COOKIE_NAME", "token"), path="/")
    return resp
