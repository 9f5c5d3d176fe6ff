import smtplib
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from email.message import EmailMessage
from typing import Deque, List, Optional

from flask import current_app

from utils import clock
from utils.audit import escape_log_field
from utils.logging_config import get_logger

log = get_logger(__name__)

VERIFICATION_SUBJECT = "Verify Your Email - Task Manager"


@dataclass
class SentEmail:
    to: str
    subject: str
    body: str
    sent_at: datetime
    code: Optional[str] = None
    name: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["sent_at"] = self.sent_at.isoformat()
        return data


def _outbox() -> Deque[SentEmail]:
    outbox = current_app.extensions.get("mailbox")
    if outbox is None:
        maxlen = int(current_app.config.get("MAILBOX_MAX_MESSAGES", 100))
        outbox = current_app.extensions["mailbox"] = deque(maxlen=maxlen)
    return outbox


def sent_emails() -> List[SentEmail]:
    return list(_outbox())


def latest_email_to(email: str) -> Optional[SentEmail]:
    matches = [m for m in _outbox() if m.to == email]
    if not matches:
        return None
    return max(matches, key=lambda m: m.sent_at)


def send_email(to_email: str, subject: str, body: str):
    host = current_app.config.get("SMTP_HOST")
    port = current_app.config.get("SMTP_PORT", 587)
    username = current_app.config.get("SMTP_USERNAME")
    password = current_app.config.get("SMTP_PASSWORD")
    from_email = current_app.config.get("SMTP_FROM_EMAIL") or username
    use_tls = current_app.config.get("SMTP_USE_TLS", True)

    if not host or not from_email:
        return False, "Email not configured"

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(host, port, timeout=10) as server:
            if use_tls:
                server.starttls()
            if username and password:
                server.login(username, password)
            server.send_message(msg)
        return True, None
    except (smtplib.SMTPException, OSError) as exc:
        return False, str(exc)


def _append_mailbox_log(to_email: str, code: str, name: Optional[str]) -> None:
    timestamp = clock.utcnow().isoformat() + "Z"
    who = f" | Name: {escape_log_field(name)}" if name else ""
    line = (
        f"[{timestamp}] Email: {escape_log_field(to_email)}{who}"
        f" | Verification Code: {escape_log_field(code)}\n"
    )

    path = current_app.config.get("MAILBOX_LOG_PATH", "mailbox.log")
    try:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line)
    except OSError:
        log.exception("mailbox_log_write_failed", path=path)


def send_verification_email(to_email: str, code: str, name: Optional[str] = None) -> bool:
    """
    Deliver a verification code. Never raises: the code is already persisted,
    so delivery problems are logged and the caller carries on.
    Returns True when the message was handed to SMTP.
    """
    body = (
        f"Hello {name or ''}\n\n"
        f"Your verification code is: {code}\n\n"
        "Enter this code to verify your email address."
    )

    # holds plaintext codes, so only kept while /email/sent is exposed
    if current_app.config.get("MAILBOX_INSPECTION_ENABLED", False):
        _outbox().append(SentEmail(
            to=to_email,
            subject=VERIFICATION_SUBJECT,
            body=body,
            sent_at=clock.utcnow(),
            code=code,
            name=name,
        ))
    _append_mailbox_log(to_email, code, name)

    if not current_app.config.get("EMAIL_DELIVERY_ENABLED", False):
        log.info("verification_email_queued", to=to_email, delivery="disabled")
        return False

    ok, error = send_email(to_email, VERIFICATION_SUBJECT, body)
    if not ok:
        log.warning("email_delivery_failed", to=to_email, reason=error)
        return False

    log.info("verification_email_sent", to=to_email)
    return True
