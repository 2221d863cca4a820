from flask import current_app, session
from flask_login import current_user, login_user, logout_user

from leaderboard import login_manager
from leaderboard.errors import Unauthenticated
from leaderboard.store import find_user


@login_manager.user_loader
def load_user(user_id):
    return find_user(user_id)


def is_logged_in() -> bool:
    return bool(current_user and current_user.is_authenticated)


def require_login():
    """Return the logged-in user or raise ``Unauthenticated``."""
    if not is_logged_in():
        raise Unauthenticated()
    return current_user._get_current_object()


def start_session(user) -> None:
    # Permanent so PERMANENT_SESSION_LIFETIME applies as the inactivity window
    session.permanent = True
    login_user(user)
    # Fresh session id on login; the pre-login id must not carry the identity
    current_app.session_interface.regenerate(session)


def end_session() -> None:
    # An emptied server-side session is deleted from the store on save
    logout_user()
    session.clear()
