from models import db
from models.user import User


def fetch_user(email: str) -> User:
    db.session.expire_all()
    return User.query.filter_by(email=email).first()


def last_code_for(app, email: str) -> str:
    sent = [m for m in app.extensions.get("mailbox", []) if m.to == email]
    assert sent, f"no verification email for {email}"
    return sent[-1].code


def register_and_login(app, client, email: str, password: str = "password123", admin: bool = False):
    """Sign up, verify, optionally promote, then log the test client in."""
    client.post("/auth/signup", json={"email": email, "name": email.split("@")[0], "password": password})
    with app.app_context():
        code = last_code_for(app, email)
    r = client.post("/auth/verify", json={"email": email, "code": code})
    assert r.status_code == 200

    if admin:
        with app.app_context():
            user = fetch_user(email)
            user.is_admin = True
            db.session.commit()

    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.get_json()
