from .db import db
from .user import User
from .verification_code import VerificationCode
from .ip_allow_entry import IpAllowEntry
from .task import Task
