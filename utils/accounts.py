"""Account record store.

Single-record reads and read-modify-write updates over the users table.
Pass ``commit=False`` to fold a write into a larger transaction.
"""
from typing import Optional

from models import db
from models.user import User
from utils.errors import NotFoundError

UPDATABLE_FIELDS = {
    "email",
    "name",
    "password_hash",
    "verified",
    "is_admin",
    "failed_login_count",
    "failed_verification_count",
    "blocked_until",
}


def find_by_email(email: str) -> Optional[User]:
    if not email:
        return None
    return User.query.filter_by(email=email).first()


def find_by_id(account_id: int) -> Optional[User]:
    return db.session.get(User, account_id)


def _apply(user: User, fields: dict) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown account fields: {', '.join(sorted(unknown))}")
    for name, value in fields.items():
        setattr(user, name, value)


def create(commit: bool = True, **fields) -> User:
    user = User()
    _apply(user, fields)
    db.session.add(user)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return user


def update(account_id: int, commit: bool = True, **fields) -> User:
    user = find_by_id(account_id)
    if not user:
        raise NotFoundError("User not found")
    _apply(user, fields)
    if commit:
        db.session.commit()
    return user


def increment_failed_verification(account_id: int) -> int:
    """Bump the counter in SQL (no read-then-write race). Returns the new value."""
    db.session.query(User).filter(User.id == account_id).update(
        {User.failed_verification_count: User.failed_verification_count + 1},
        synchronize_session=False,
    )
    db.session.commit()
    user = find_by_id(account_id)
    return user.failed_verification_count if user else 0
