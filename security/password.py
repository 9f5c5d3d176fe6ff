import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 12


def _rounds() -> int:
    if not has_app_context():
        return DEFAULT_ROUNDS
    return int(current_app.config.get("BCRYPT_ROUNDS", DEFAULT_ROUNDS))


def hash_secret(secret: str) -> str:
    """One-way hash for passwords and verification codes (salt embedded)."""
    if not isinstance(secret, str) or len(secret) == 0:
        raise ValueError("Secret must be a non-empty string")

    # bcrypt expects bytes
    salt = bcrypt.gensalt(rounds=_rounds())
    hashed = bcrypt.hashpw(secret.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_secret(secret: str, secret_hash: str) -> bool:
    if not secret or not secret_hash:
        return False
    try:
        return bcrypt.checkpw(
            secret.encode("utf-8"),
            secret_hash.encode("utf-8")
        )
    except ValueError:
        # malformed stored hash
        return False
