from datetime import datetime, timedelta

import pytest

from app import create_app
from config import Config
from models import db
from security import ip_allowlist
from utils import clock


class TestingConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BCRYPT_ROUNDS = 4
    IP_ALLOWLIST_SEED = ""
    EMAIL_DELIVERY_ENABLED = False
    MAILBOX_INSPECTION_ENABLED = True
    LOG_LEVEL = "WARNING"


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def make_app(tmp_path):
    """Build an app on a fresh in-memory database; keyword args override config."""
    created = []

    def _make(**overrides):
        attrs = {
            "MAILBOX_LOG_PATH": str(tmp_path / "mailbox.log"),
            "DENIED_ATTEMPTS_LOG_PATH": str(tmp_path / "ip-denied-attempts.log"),
            **overrides,
        }
        app = create_app(type("_Config", (TestingConfig,), attrs))
        with app.app_context():
            db.create_all()
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_clock(monkeypatch):
    fc = FrozenClock(datetime(2026, 1, 15, 12, 0, 0))
    monkeypatch.setattr(clock, "utcnow", fc)
    return fc


@pytest.fixture
def allow_localhost(app):
    # the Flask test client connects from 127.0.0.1
    with app.app_context():
        ip_allowlist.add("127.0.0.1", "tests")


@pytest.fixture
def fixed_codes(monkeypatch):
    """Make verification codes predictable: 111111, 222222, ..."""
    from security import verification

    issued = []
    counter = iter(range(1, 10))

    def _next_code():
        code = str(next(counter)) * 6
        issued.append(code)
        return code

    monkeypatch.setattr(verification, "generate_code", _next_code)
    return issued

