# routes/auth.py — connexion / déconnexion / changement de mot de passe
from flask import Blueprint, render_template, request, redirect, url_for, flash, g

import accounts
from errors import AppError, InvalidCredentials
from security import login_required, start_session, end_session

auth_bp = Blueprint("auth", __name__)


def _home_for(user):
    return url_for("admin.dashboard") if user.is_admin else url_for("library.folders")


@auth_bp.get("/")
def login_form():
    if g.get("user") is not None:
        return redirect(_home_for(g.user))
    return render_template("index.html", error="")


@auth_bp.post("/login")
def login():
    username = request.form.get("username", "")
    password = request.form.get("password", "")
    try:
        user = accounts.authenticate(username, password)
    except InvalidCredentials as e:
        end_session()
        return render_template("index.html", error=e.message, username=username), 401
    start_session(user)
    return redirect(_home_for(user))


@auth_bp.get("/logout")
def logout():
    end_session()
    return redirect(url_for("auth.login_form"))


@auth_bp.get("/change-password")
@login_required
def change_password_form():
    return render_template("change_password.html")


@auth_bp.post("/change-password")
@login_required
def change_password():
    try:
        accounts.change_password(g.user,
                                 request.form.get("old_password", ""),
                                 request.form.get("new_password", ""))
    except AppError as e:
        flash(e.message, "error")
        return render_template("change_password.html"), e.status
    # la version de session a changé : on ré-émet le cookie de ce navigateur
    start_session(g.user)
    flash("Password changed successfully", "success")
    return redirect(_home_for(g.user))
