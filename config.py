import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as taskgate.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "taskgate.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie carrying the signed session token
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "token")

    # 7 days session lifetime
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", str(7 * 24 * 60 * 60)))
    SESSION_TOKEN_SALT = os.getenv("SESSION_TOKEN_SALT", "taskgate.session.v1")

    # Session/cookie security defaults
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", "false")  # set True when using HTTPS

    # Login lockout: 3 wrong passwords lock the account for 2 minutes
    MAX_LOGIN_ATTEMPTS = int(os.getenv("MAX_LOGIN_ATTEMPTS", "3"))
    LOCKOUT_MINUTES = int(os.getenv("LOCKOUT_MINUTES", "2"))

    # Email verification codes
    VERIFICATION_CODE_TTL_SECONDS = int(os.getenv("VERIFICATION_CODE_TTL_SECONDS", "60"))
    MAX_VERIFICATION_ATTEMPTS = int(os.getenv("MAX_VERIFICATION_ATTEMPTS", "5"))

    # Hashing cost
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Password policy
    PASSWORD_MIN_LEN = int(os.getenv("PASSWORD_MIN_LEN", "6"))
    PASSWORD_MAX_LEN = int(os.getenv("PASSWORD_MAX_LEN", "128"))

    # IP allow-list entries created at startup (comma separated)
    IP_ALLOWLIST_SEED = os.getenv("IP_ALLOWLIST_SEED", "127.0.0.1,::1")

    # Reverse proxies in front of the app. X-Forwarded-For is ignored unless
    # this is > 0; each trusted hop peels one address off the end of it.
    TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "0"))

    # Append-only backstop logs
    MAILBOX_LOG_PATH = os.getenv("MAILBOX_LOG_PATH", os.path.join(BASE_DIR, "mailbox.log"))
    DENIED_ATTEMPTS_LOG_PATH = os.getenv(
        "DENIED_ATTEMPTS_LOG_PATH",
        os.path.join(BASE_DIR, "ip-denied-attempts.log")
    )

    # Exposes /email/sent for local development
    MAILBOX_INSPECTION_ENABLED = _env_bool("MAILBOX_INSPECTION_ENABLED", "false")
    MAILBOX_MAX_MESSAGES = int(os.getenv("MAILBOX_MAX_MESSAGES", "100"))

    # Email (SMTP). Nothing leaves the process unless delivery is enabled.
    EMAIL_DELIVERY_ENABLED = _env_bool("EMAIL_DELIVERY_ENABLED", "false")
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "true")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "console")  # console | json

    # Basic app settings
    DEBUG = False
