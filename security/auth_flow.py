"""Signup / resend / verify / login state machine.

Account state is derived from stored fields rather than kept explicitly:

- no row                        -> unregistered
- ``verified`` false            -> pending verification
  (locked for verification once ``failed_verification_count`` reaches the cap;
  only a resend clears it)
- ``verified`` true             -> verified
  (login refused while ``blocked_until`` is in the future)

Failures raise the errors from ``utils.errors``; the HTTP layer maps them to
status codes.
"""
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.user import User
from security import bruteforce, ip_allowlist, verification
from security.password import hash_secret, verify_secret
from security.session import issue_session_token
from utils import accounts
from utils.emailer import send_verification_email
from utils.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from utils.logging_config import get_logger

log = get_logger(__name__)

TOO_MANY_VERIFICATION_ATTEMPTS = "Too many failed verification attempts. Please request a new code."
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


def _max_verification_attempts() -> int:
    return int(current_app.config.get("MAX_VERIFICATION_ATTEMPTS", 5))


def _dispatch_code(user: User, code: str, name: Optional[str] = None) -> None:
    try:
        send_verification_email(user.email, code, name or user.name)
    except Exception:
        # the code is committed and in the mailbox log; delivery is best effort
        log.exception("verification_email_dispatch_failed", user_id=user.id)


def signup(email: str, name: Optional[str], password: str) -> dict:
    user = accounts.find_by_email(email)

    if user and user.verified:
        log.info("signup_rejected_verified", user_id=user.id)
        raise ConflictError("Email already exists and is verified")

    try:
        if user is None:
            user = accounts.create(
                commit=False,
                email=email,
                name=name,
                password_hash=hash_secret(password),
                verified=False,
            )
            created = True
        else:
            # existing unverified account keeps its original password
            created = False
        code = verification.issue_code(user, commit=False)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Email already exists")

    log.info("signup_code_issued", user_id=user.id, new_account=created)
    _dispatch_code(user, code, name)
    return {"message": "Verification code sent", "email": email}


def resend(email: str) -> dict:
    user = accounts.find_by_email(email)
    if not user:
        raise NotFoundError("User not found")
    if user.verified:
        raise ValidationError("Email already verified")

    accounts.update(user.id, commit=False, failed_verification_count=0)
    code = verification.issue_code(user, commit=False)
    db.session.commit()

    log.info("verification_code_resent", user_id=user.id)
    _dispatch_code(user, code)
    return {"message": "Verification code resent", "email": email}


def verify(email: str, code: str) -> dict:
    user = accounts.find_by_email(email)
    if not user:
        raise NotFoundError("User not found")
    if user.verified:
        raise ValidationError("Email already verified")

    max_attempts = _max_verification_attempts()

    # checked before touching the code store so a locked account always gets
    # the same answer
    if user.failed_verification_count >= max_attempts:
        log.info("verification_locked", user_id=user.id)
        raise ValidationError(TOO_MANY_VERIFICATION_ATTEMPTS)

    row = verification.find_current_code(user)
    if row is None:
        raise ValidationError("Verification code expired or not found")

    if not verification.code_matches(row, code):
        fail_count = accounts.increment_failed_verification(user.id)
        log.info("verification_failed", user_id=user.id, fail_count=fail_count)
        if fail_count >= max_attempts:
            raise ValidationError(TOO_MANY_VERIFICATION_ATTEMPTS)
        raise ValidationError("Invalid verification code")

    try:
        verification.mark_consumed(row)
        accounts.update(user.id, commit=False, verified=True, failed_verification_count=0)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        log.exception("verification_commit_failed", user_id=user.id)
        raise

    log.info("email_verified", user_id=user.id)
    return {"message": "Email verified successfully"}


def login(
    email: str,
    password: str,
    client_ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> LoginResult:
    # the gate runs before any account lookup so a disallowed network can
    # neither probe for accounts nor move the lockout counters
    if client_ip is not None and not ip_allowlist.is_allowed(client_ip):
        ip_allowlist.log_denied_attempt(client_ip, email, user_agent)
        raise ForbiddenError("Login not allowed from this IP address")

    user = accounts.find_by_email(email)
    if not user:
        log.info("login_failed", reason="unknown_email")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    locked, seconds_left = bruteforce.is_locked(user)
    if locked:
        log.info("login_locked", user_id=user.id, seconds_left=seconds_left)
        raise UnauthorizedError(
            f"Account locked. Try again in {seconds_left} seconds.",
            details={"retry_after_seconds": seconds_left},
        )

    if not user.verified:
        raise UnauthorizedError("Please verify your email first")

    if not verify_secret(password, user.password_hash):
        fail_count, locked_now = bruteforce.register_failure(user)
        log.info("login_failed", user_id=user.id, fail_count=fail_count, locked_now=locked_now)
        if locked_now:
            minutes = current_app.config.get("LOCKOUT_MINUTES", 2)
            raise UnauthorizedError(
                f"Too many failed attempts. Account locked for {minutes} minutes.",
                details={"lockout_minutes": minutes},
            )
        raise UnauthorizedError(INVALID_CREDENTIALS)

    bruteforce.reset_attempts(user)
    token = issue_session_token(user.id, user.email)
    log.info("login_succeeded", user_id=user.id)
    return LoginResult(token=token, user=user)
