# routes/bot.py — API JSON pour le bot : création de comptes par secret partagé
import hmac

from flask import Blueprint, request, jsonify, current_app

import accounts
from errors import AppError, Unauthorized, ValidationError
from models import ROLE_USER

bot_bp = Blueprint("bot", __name__)


def _check_secret():
    expected = current_app.config.get("BOT_API_SECRET") or ""
    given = request.headers.get(current_app.config["BOT_API_HEADER"], "")
    # pas de secret configuré -> API fermée
    if not expected or not hmac.compare_digest(given.encode(), expected.encode()):
        raise Unauthorized("Invalid bot secret")


@bot_bp.post("/add-user")
def add_user():
    try:
        _check_secret()
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        username, password = data.get("username"), data.get("password")
        if not isinstance(username, str) or not isinstance(password, str) \
                or not username.strip() or not password:
            raise ValidationError("username and password are required")
        # le rôle envoyé par l'appelant est ignoré
        user = accounts.create_user(username, password, ROLE_USER)
    except AppError as e:
        current_app.logger.warning("bot add-user refused (%s): %s", e.code, e.message)
        return jsonify({"ok": False, "error": e.code, "message": e.message}), e.status
    return jsonify({"ok": True, "id": user.id, "username": user.username, "role": user.role}), 201
