from datetime import timedelta
from flask import current_app

from models.user import User
from utils import accounts, clock


def is_locked(user: User) -> tuple[bool, int]:
    """
    Returns (locked, seconds_remaining)
    """
    if not user.blocked_until:
        return False, 0

    now = clock.utcnow()
    if user.blocked_until <= now:
        return False, 0

    seconds = int((user.blocked_until - now).total_seconds())
    return True, max(seconds, 1)


def register_failure(user: User) -> tuple[int, bool]:
    """
    Increments the failed-login counter. Returns (fail_count, locked_now).

    Reaching the threshold locks the account and zeroes the counter in the
    same write, so fail_count is the post-increment value before the reset.
    """
    now = clock.utcnow()
    max_attempts = current_app.config.get("MAX_LOGIN_ATTEMPTS", 3)
    lock_minutes = current_app.config.get("LOCKOUT_MINUTES", 2)

    fail_count = (user.failed_login_count or 0) + 1

    locked_now = fail_count >= max_attempts
    if locked_now:
        fields = {"blocked_until": now + timedelta(minutes=lock_minutes), "failed_login_count": 0}
    else:
        fields = {"failed_login_count": fail_count}
    accounts.update(user.id, **fields)
    return fail_count, locked_now


def reset_attempts(user: User):
    """
    Clears failure counter and any lock after a successful login.
    """
    if user.failed_login_count == 0 and user.blocked_until is None:
        return
    accounts.update(user.id, failed_login_count=0, blocked_until=None)
