from flask import Blueprint, request, jsonify, g

from security import auth_flow
from security.password_policy import is_valid_code, is_valid_email, validate_name, validate_password
from security.session import clear_session_cookie, set_session_cookie
from utils.audit import client_ip, log_event
from utils.auth_context import login_required


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _email_from(data: dict) -> str:
    email = data.get("email")
    return email.strip() if isinstance(email, str) else ""


@auth_bp.post("/signup")
def signup():
    data = request.get_json(silent=True) or {}
    email = _email_from(data)
    name = data.get("name")
    password = data.get("password")

    if not is_valid_email(email):
        return jsonify(error="Invalid email"), 400
    valid, errors = validate_name(name)
    if not valid:
        return jsonify(error="Invalid name", details=errors), 400
    valid, errors = validate_password(password)
    if not valid:
        return jsonify(error="Password does not meet policy", details=errors), 400

    name = (name.strip() or None) if isinstance(name, str) else None
    result = auth_flow.signup(email, name, password)
    log_event("SIGNUP", email=email)
    return jsonify(result), 201


@auth_bp.post("/resend")
def resend():
    data = request.get_json(silent=True) or {}
    email = _email_from(data)
    if not is_valid_email(email):
        return jsonify(error="Invalid email"), 400

    result = auth_flow.resend(email)
    log_event("VERIFICATION_RESEND", email=email)
    return jsonify(result), 200


@auth_bp.post("/verify")
def verify():
    data = request.get_json(silent=True) or {}
    email = _email_from(data)
    code = data.get("code")

    if not is_valid_email(email):
        return jsonify(error="Invalid email"), 400
    if not is_valid_code(code):
        return jsonify(error="Code must be exactly 6 digits"), 400

    result = auth_flow.verify(email, code)
    log_event("EMAIL_VERIFIED", email=email)
    return jsonify(result), 200


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = _email_from(data)
    password = data.get("password")

    if not email or not isinstance(password, str) or not password:
        return jsonify(error="email and password are required"), 400

    result = auth_flow.login(
        email,
        password,
        client_ip=client_ip(),
        user_agent=request.headers.get("User-Agent"),
    )

    resp = jsonify(message="Logged in successfully")
    set_session_cookie(resp, result.token)

    log_event("LOGIN_SUCCESS", user_id=result.user.id)
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(g.user.to_public_dict()), 200


@auth_bp.post("/logout")
def logout():
    # no server-side session state: logging out only drops the cookie
    user = getattr(g, "user", None)
    if user is not None:
        log_event("LOGOUT", user_id=user.id)

    resp = jsonify(message="Logged out")
    clear_session_cookie(resp)
    return resp, 200
