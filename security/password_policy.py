import re
from typing import List, Tuple

from flask import current_app, has_app_context

_CODE = re.compile(r"[0-9]{6}")

_DEFAULTS = {
    "PASSWORD_MIN_LEN": 6,
    "PASSWORD_MAX_LEN": 128,
}

EMAIL_MAX_LEN = 255
NAME_MAX_LEN = 120


def _cfg(name: str):
    if not has_app_context():
        return _DEFAULTS[name]
    return current_app.config.get(name, _DEFAULTS[name])


def is_valid_email(email) -> bool:
    if not isinstance(email, str) or not email or len(email) > EMAIL_MAX_LEN:
        return False
    if email.count("@") != 1 or any(ch.isspace() for ch in email):
        return False
    local, domain = email.split("@")
    return bool(local) and bool(domain)


def is_valid_code(code) -> bool:
    return isinstance(code, str) and _CODE.fullmatch(code) is not None


def validate_password(pw) -> Tuple[bool, List[str]]:
    errors: List[str] = []

    if not isinstance(pw, str):
        return False, ["Password must be a string"]

    min_len = int(_cfg("PASSWORD_MIN_LEN"))
    max_len = int(_cfg("PASSWORD_MAX_LEN"))

    if len(pw) < min_len:
        errors.append(f"Password must be at least {min_len} characters")
    if len(pw) > max_len:
        errors.append(f"Password must be at most {max_len} characters")

    return (len(errors) == 0), errors


def validate_name(name) -> Tuple[bool, List[str]]:
    if name is None:
        return True, []
    if not isinstance(name, str):
        return False, ["Name must be a string"]
    if len(name.strip()) > NAME_MAX_LEN:
        return False, [f"Name must be at most {NAME_MAX_LEN} characters"]
    return True, []
