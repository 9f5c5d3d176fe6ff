from .health import health_bp
from .auth import auth_bp
from .ip_allowlist import ip_allowlist_bp
from .tasks import tasks_bp
from .users import users_bp
from .mailbox import mailbox_bp
