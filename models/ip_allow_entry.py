from models.db import db
from utils import clock


class IpAllowEntry(db.Model):
    __tablename__ = "ip_allowlist"

    id = db.Column(db.Integer, primary_key=True)
    ip = db.Column(db.String(64), unique=True, nullable=False, index=True)
    label = db.Column(db.String(120), nullable=True)

    # soft delete: entries are deactivated, never removed
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=clock.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=clock.utcnow, onupdate=clock.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ip": self.ip,
            "label": self.label,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
