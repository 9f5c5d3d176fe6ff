from flask import current_app

from models import db
from models.ip_allow_entry import IpAllowEntry
from security.ip_allowlist import normalize_ip


def seed_ip_allowlist() -> int:
    """Add IP_ALLOWLIST_SEED entries that are missing. Returns how many were added."""
    raw = current_app.config.get("IP_ALLOWLIST_SEED") or ""
    existing = {e.ip for e in IpAllowEntry.query.all()}

    added = 0
    for item in raw.split(","):
        key = normalize_ip(item)
        if key is None or key in existing:
            continue
        db.session.add(IpAllowEntry(ip=key, label="seed", is_active=True))
        existing.add(key)
        added += 1
    db.session.commit()
    return added
