from flask import Blueprint, jsonify, g, request

from security import ip_allowlist
from security.rbac import require_admin
from utils.audit import log_event

ip_allowlist_bp = Blueprint("ip_allowlist", __name__, url_prefix="/ip-allowlist")


@ip_allowlist_bp.get("")
@require_admin
def list_ips():
    return jsonify([e.to_dict() for e in ip_allowlist.list_all()]), 200


@ip_allowlist_bp.post("")
@require_admin
def add_ip():
    data = request.get_json(silent=True) or {}
    ip = data.get("ip")
    label = data.get("label")

    if not isinstance(ip, str) or not ip.strip():
        return jsonify(error="ip is required"), 400
    if label is not None and (not isinstance(label, str) or len(label) > 120):
        return jsonify(error="Invalid label"), 400

    entry = ip_allowlist.add(ip, label)
    log_event("IP_ALLOW_ADD", user_id=g.user.id, target_ip=entry.ip)
    return jsonify(entry.to_dict()), 201


@ip_allowlist_bp.delete("/<ip>")
@require_admin
def remove_ip(ip):
    entry = ip_allowlist.deactivate(ip)
    log_event("IP_ALLOW_DEACTIVATE", user_id=g.user.id, target_ip=entry.ip)
    return jsonify(entry.to_dict()), 200


@ip_allowlist_bp.post("/<ip>/activate")
@require_admin
def activate_ip(ip):
    entry = ip_allowlist.activate(ip)
    log_event("IP_ALLOW_ACTIVATE", user_id=g.user.id, target_ip=entry.ip)
    return jsonify(entry.to_dict()), 200
