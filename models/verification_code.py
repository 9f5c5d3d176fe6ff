from models.db import db
from utils import clock


class VerificationCode(db.Model):
    __tablename__ = "verification_codes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # only the bcrypt hash of the 6-digit code is stored
    code_hash = db.Column(db.String(128), nullable=False)

    created_at = db.Column(db.DateTime, default=clock.utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    consumed_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User", back_populates="verification_codes")

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None
