from flask import Blueprint, jsonify

from utils.emailer import latest_email_to, sent_emails

# only registered when MAILBOX_INSPECTION_ENABLED is set (local development)
mailbox_bp = Blueprint("mailbox", __name__, url_prefix="/email")


@mailbox_bp.get("/sent")
def list_sent():
    return jsonify([m.to_dict() for m in sent_emails()]), 200


@mailbox_bp.get("/sent/<path:email>")
def latest_sent(email):
    message = latest_email_to(email)
    if not message:
        return jsonify(message="No emails found for this address"), 404
    return jsonify(message.to_dict()), 200
