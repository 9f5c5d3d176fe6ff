import sqlalchemy as sa
from flask import Flask, jsonify
from config import Config
from routes import health_bp, auth_bp, ip_allowlist_bp, tasks_bp, users_bp, mailbox_bp

from models import db
from models.ip_allow_entry import IpAllowEntry
from flask_migrate import Migrate
from werkzeug.middleware.proxy_fix import ProxyFix
from utils.seed import seed_ip_allowlist
from utils.auth_context import load_current_user
from utils.errors import AppError, ConflictError, ValidationError
from utils.logging_config import configure_logging, get_logger

log = get_logger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FORMAT", "console"))

    hops = int(app.config.get("TRUSTED_PROXY_HOPS", 0))
    if hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(ip_allowlist_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(users_bp)
    if app.config.get("MAILBOX_INSPECTION_ENABLED"):
        app.register_blueprint(mailbox_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Seed the allow-list once the schema exists (safe & idempotent)
    with app.app_context():
        if sa.inspect(db.engine).has_table(IpAllowEntry.__tablename__):
            added = seed_ip_allowlist()
            if added:
                log.info("ip_allowlist_seeded", added=added)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(AppError)
    def _app_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click
from utils import accounts
from security import ip_allowlist

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to admin by email (bootstrap)."""
        user = accounts.find_by_email(email.strip())
        if not user:
            click.echo("User not found")
            return

        if not user.is_admin:
            accounts.update(user.id, is_admin=True)

        click.echo(f"{user.email} promoted to admin")

    @app.cli.command("allow-ip")
    @click.argument("ip")
    @click.option("--label", default=None, help="Free-text note shown in the admin panel.")
    def allow_ip(ip, label):
        """Add an address to the login allow-list, or reactivate it."""
        try:
            entry = ip_allowlist.add(ip, label)
        except ConflictError:
            entry = ip_allowlist.activate(ip)
        except ValidationError as exc:
            click.echo(exc.message)
            return
        click.echo(f"{entry.ip} allowed")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
