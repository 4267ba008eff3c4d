# security.py — session par requête (g.user) + décorateurs d'accès
from functools import wraps

from flask import g, session, redirect, url_for, abort
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db
from models import User


def hash_password(password: str) -> str:
    return generate_password_hash(password)


_DUMMY_HASH = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = generate_password_hash("not-a-real-password")
    return _DUMMY_HASH


def verify_password(user: User | None, password: str) -> bool:
    # même coût de hash que le compte existe ou non
    stored = user.password_hash if user is not None else _dummy_hash()
    ok = check_password_hash(stored, password or "")
    return user is not None and bool(password) and ok


def start_session(user: User) -> None:
    session.clear()
    session["user_id"] = user.id
    session["session_version"] = user.session_version
    g.user = user


def end_session() -> None:
    session.clear()
    g.user = None


def load_current_user() -> None:
    """Relit l'utilisateur en base à chaque requête (rôle / mot de passe toujours à jour)."""
    g.user = None
    uid = session.get("user_id")
    if uid is None:
        return
    user = db.session.get(User, uid)
    if user is None or user.session_version != session.get("session_version"):
        session.clear()
        return
    g.user = user


def login_required(view):
    """Anonyme -> redirection vers le formulaire de connexion."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if g.get("user") is None:
            return redirect(url_for("auth.login_form"))
        return view(*args, **kwargs)
    return wrapped


def admin_required(view):
    """Anonyme -> login ; connecté mais pas admin -> 403."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = g.get("user")
        if user is None:
            return redirect(url_for("auth.login_form"))
        if not user.is_admin:
            abort(403)
        return view(*args, **kwargs)
    return wrapped
