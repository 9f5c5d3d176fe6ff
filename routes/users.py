from flask import Blueprint, request, jsonify, g

from models import db
from security.password_policy import validate_name
from security.session import clear_session_cookie
from utils import accounts
from utils.audit import log_event
from utils.auth_context import login_required

users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.get("/me")
@login_required
def get_me():
    return jsonify(g.user.to_public_dict()), 200


@users_bp.patch("/me")
@login_required
def update_me():
    data = request.get_json(silent=True) or {}
    fields = {}

    if "name" in data:
        name = data.get("name")
        valid, errors = validate_name(name)
        if not valid:
            return jsonify(error="Invalid name", details=errors), 400
        fields["name"] = (name.strip() or None) if isinstance(name, str) else None

    accounts.update(g.user.id, **fields)
    log_event("PROFILE_UPDATE", user_id=g.user.id)
    return jsonify(g.user.to_public_dict()), 200


@users_bp.delete("/me")
@login_required
def delete_me():
    user_id = g.user.id
    db.session.delete(g.user)
    db.session.commit()
    log_event("ACCOUNT_DELETE", user_id=user_id)

    resp = jsonify(message="Account deleted")
    clear_session_cookie(resp)
    return resp, 200
