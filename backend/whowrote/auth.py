from typing import Optional

from flask_login import UserMixin, current_user

from whowrote import game_store
from whowrote.models import Identity

ADMIN_SESSION_ID = 'admin'
STUDENT_PREFIX = 'student:'


class Account(UserMixin):
    """Flask-Login user wrapping an ``Identity``."""

    def __init__(self, identity: Identity, display_name: Optional[str] = None):
        self.identity = identity
        self.display_name = display_name

    def get_id(self):
        if self.identity.is_admin:
            return ADMIN_SESSION_ID
        return STUDENT_PREFIX + self.identity.username

    @classmethod
    def admin(cls) -> 'Account':
        return cls(Identity.admin())

    @classmethod
    def student(cls, username: str, display_name: Optional[str] = None) -> 'Account':
        return cls(Identity.student(username), display_name)

    @classmethod
    def from_session_id(cls, session_id: str) -> Optional['Account']:
        if session_id == ADMIN_SESSION_ID:
            return cls.admin()
        if not session_id.startswith(STUDENT_PREFIX):
            return None
        # A student session only counts while the user still exists (reset wipes users)
        user = game_store.load().find_user(session_id[len(STUDENT_PREFIX):])
        if user is None:
            return None
        return cls.student(user.username, user.display_name)


def current_identity() -> Optional[Identity]:
    if current_user.is_authenticated:
        return current_user.identity
    return None
