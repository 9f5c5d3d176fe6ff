from models.db import db
from utils import clock


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    # stored as given (trimmed only); lookups are case-sensitive
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=True)

    # absent until signup finishes hashing
    password_hash = db.Column(db.String(255), nullable=True)
    verified = db.Column(db.Boolean, default=False, nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)

    # abuse-control counters
    failed_login_count = db.Column(db.Integer, default=0, nullable=False)
    failed_verification_count = db.Column(db.Integer, default=0, nullable=False)
    blocked_until = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=clock.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=clock.utcnow, onupdate=clock.utcnow, nullable=False)

    verification_codes = db.relationship(
        "VerificationCode",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="VerificationCode.created_at",
    )
    tasks = db.relationship(
        "Task",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "verified": self.verified,
            "is_admin": self.is_admin,
            "created_at": self.created_at.isoformat(),
        }
