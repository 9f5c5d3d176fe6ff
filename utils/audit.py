from flask import has_request_context, request

from utils.logging_config import get_logger

log = get_logger("audit")


def client_ip() -> str:
    # X-Forwarded-For is only honoured through ProxyFix (TRUSTED_PROXY_HOPS)
    return request.remote_addr or ""


def escape_log_field(value) -> str:
    """Make a value safe for one line of a plain text log: backslashes and
    non-printable characters (CR, LF, ...) are written as escape sequences."""
    out = []
    for ch in str(value):
        if ch == "\\":
            out.append("\\\\")
        elif ch.isprintable():
            out.append(ch)
        else:
            out.append(ch.encode("unicode_escape").decode("ascii"))
    return "".join(out)


def log_event(action: str, user_id=None, **metadata):
    """Emit an audit record (LOGIN_SUCCESS, IP_ALLOW_ADD, ...) with request context."""
    context = {"action": action, "user_id": user_id}
    if has_request_context():
        context["ip"] = client_ip()
        context["user_agent"] = (request.headers.get("User-Agent") or "")[:255] or None
    context.update(metadata)
    log.info("audit", **context)
