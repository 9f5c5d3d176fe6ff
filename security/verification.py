"""Verification code store.

Codes are append-only: each signup or resend adds a row, a successful
verification stamps ``consumed_at``, and expired rows are simply ignored.
The newest unconsumed, unexpired row is the current code.
"""
import secrets
from datetime import timedelta
from typing import Optional

from flask import current_app

from models import db
from models.user import User
from models.verification_code import VerificationCode
from security.password import hash_secret, verify_secret
from utils import clock

CODE_MIN = 100000
CODE_MAX = 999999


def generate_code() -> str:
    """Uniform 6-digit code in [100000, 999999]."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def issue_code(user: User, commit: bool = True) -> str:
    """Store a hashed code for ``user`` and return the plaintext for delivery."""
    code = generate_code()
    now = clock.utcnow()
    ttl = current_app.config.get("VERIFICATION_CODE_TTL_SECONDS", 60)

    row = VerificationCode(
        user_id=user.id,
        code_hash=hash_secret(code),
        created_at=now,
        expires_at=now + timedelta(seconds=ttl),
    )
    db.session.add(row)
    if commit:
        db.session.commit()
    return code


def find_current_code(user: User) -> Optional[VerificationCode]:
    now = clock.utcnow()
    return (
        VerificationCode.query
        .filter(
            VerificationCode.user_id == user.id,
            VerificationCode.consumed_at.is_(None),
            VerificationCode.expires_at > now,
        )
        .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
        .first()
    )


def code_matches(row: VerificationCode, code: str) -> bool:
    return verify_secret(code, row.code_hash)


def mark_consumed(row: VerificationCode) -> None:
    # caller commits together with the account update
    row.consumed_at = clock.utcnow()
