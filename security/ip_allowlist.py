"""IP allow-list gate for the login endpoint.

``is_allowed`` sits on the login path and fails closed: any storage error is
reported as "not allowed". Denied attempts are appended to a plain text log
on a best-effort basis.
"""
import ipaddress
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.ip_allow_entry import IpAllowEntry
from utils import clock
from utils.audit import escape_log_field
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.logging_config import get_logger

log = get_logger(__name__)


def normalize_ip(ip: str) -> Optional[str]:
    """Canonical text form of an address, or None if it is not an IP."""
    try:
        return str(ipaddress.ip_address((ip or "").strip()))
    except ValueError:
        return None


def is_allowed(ip: str) -> bool:
    key = normalize_ip(ip)
    if key is None:
        return False
    try:
        entry = IpAllowEntry.query.filter_by(ip=key).first()
    except SQLAlchemyError:
        db.session.rollback()
        log.exception("ip_allowlist_lookup_failed", ip=key)
        return False
    return bool(entry and entry.is_active)


def log_denied_attempt(ip: str, email: str, user_agent: Optional[str] = None) -> None:
    timestamp = clock.utcnow().isoformat() + "Z"
    ua = f" | UserAgent: {escape_log_field(user_agent)}" if user_agent else ""
    line = f"[{timestamp}] DENIED - IP: {escape_log_field(ip)} | Email: {escape_log_field(email)}{ua}\n"

    log.warning("login_ip_denied", ip=ip, email=email, user_agent=user_agent)

    path = current_app.config.get("DENIED_ATTEMPTS_LOG_PATH", "ip-denied-attempts.log")
    try:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line)
    except OSError:
        log.exception("denied_attempt_log_write_failed", path=path)


def _get_entry(ip: str) -> IpAllowEntry:
    key = normalize_ip(ip)
    entry = IpAllowEntry.query.filter_by(ip=key).first() if key else None
    if not entry:
        raise NotFoundError("IP not found in allow-list")
    return entry


def add(ip: str, label: Optional[str] = None) -> IpAllowEntry:
    key = normalize_ip(ip)
    if key is None:
        raise ValidationError("Invalid IP address")

    label = (label or "").strip() or None
    entry = IpAllowEntry(ip=key, label=label, is_active=True)
    db.session.add(entry)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("IP already in allow-list")

    log.info("ip_allowlist_added", ip=key, label=label)
    return entry


def deactivate(ip: str) -> IpAllowEntry:
    entry = _get_entry(ip)
    entry.is_active = False
    db.session.commit()
    log.info("ip_allowlist_deactivated", ip=entry.ip)
    return entry


def activate(ip: str) -> IpAllowEntry:
    entry = _get_entry(ip)
    entry.is_active = True
    db.session.commit()
    log.info("ip_allowlist_activated", ip=entry.ip)
    return entry


def list_all() -> List[IpAllowEntry]:
    return (
        IpAllowEntry.query
        .order_by(IpAllowEntry.created_at.desc(), IpAllowEntry.id.desc())
        .all()
    )

