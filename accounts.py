# accounts.py — opérations sur les comptes (connexion, création, suppression, mot de passe)
from flask import current_app
from sqlalchemy.exc import IntegrityError

from errors import (Conflict, Forbidden, InvalidCredentials, NotFound,
                    PersistenceError, ValidationError, check_length)
from extensions import db, commit
from models import User, ROLES, ROLE_USER, USERNAME_MAX
from security import hash_password, verify_password


def authenticate(username: str, password: str) -> User:
    # correspondance exacte : pas de strip ici
    username = username or ""
    user = User.query.filter_by(username=username).first() if username else None
    if not verify_password(user, password):
        current_app.logger.info("login failed for %r", username)
        raise InvalidCredentials()
    current_app.logger.info("login ok: %s (%s)", user.username, user.role)
    return user


def create_user(username: str, password: str, role: str | None = None) -> User:
    username = (username or "").strip()
    role = (role or ROLE_USER).strip().lower()
    if not username or not password:
        raise ValidationError("Username and password are required")
    check_length(username, USERNAME_MAX, "Username")
    if role not in ROLES:
        raise ValidationError(f"Unknown role {role!r}")
    if User.query.filter_by(username=username).first():
        raise Conflict(f"Username {username!r} is already taken")

    user = User(username=username, password_hash=hash_password(password), role=role)
    db.session.add(user)
    try:
        commit(f"add user {username}")
    except PersistenceError as e:
        # course entre le SELECT et l'INSERT : la contrainte UNIQUE tranche
        if isinstance(e.__cause__, IntegrityError):
            raise Conflict(f"Username {username!r} is already taken") from e
        raise
    current_app.logger.info("user created: %s (%s) id=%s", user.username, user.role, user.id)
    return user


def delete_user(user_id, acting_user: User) -> None:
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id")
    if user_id == acting_user.id:
        raise Forbidden("You cannot delete your own account")
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    db.session.delete(user)
    commit(f"delete user {user_id}")
    current_app.logger.info("user deleted: %s by %s", user.username, acting_user.username)


def change_password(user: User, old_password: str, new_password: str) -> None:
    if not verify_password(user, old_password):
        raise InvalidCredentials("Current password incorrect")
    if not new_password:
        raise ValidationError("New password must not be empty")
    user.password_hash = hash_password(new_password)
    user.session_version = (user.session_version or 0) + 1
    commit(f"change password {user.id}")
    current_app.logger.info("password changed for %s", user.username)
