# routes/admin.py — panneau d'administration (utilisateurs, dossiers, vidéos)
from flask import Blueprint, render_template, request, redirect, url_for, flash, g

import accounts
import catalog
from errors import AppError
from models import User, Video
from security import admin_required

admin_bp = Blueprint("admin", __name__)


def _run(action, success: str):
    """Exécute une écriture ; message flash (succès ou erreur) puis retour au panneau."""
    try:
        action()
    except AppError as e:
        flash(e.message, "error")
    else:
        flash(success, "success")
    return redirect(url_for("admin.dashboard"))


@admin_bp.get("")
@admin_required
def dashboard():
    users   = User.query.order_by(User.id.asc()).all()
    folders = catalog.list_folders()
    videos  = Video.query.order_by(Video.id.asc()).all()
    return render_template("admin.html", users=users, folders=folders, videos=videos)


@admin_bp.post("/add-user")
@admin_required
def add_user():
    f = request.form
    return _run(lambda: accounts.create_user(f.get("username"), f.get("password"), f.get("role")),
                f"User {f.get('username', '').strip()} added")


@admin_bp.post("/delete-user")
@admin_required
def delete_user():
    return _run(lambda: accounts.delete_user(request.form.get("id"), g.user), "User deleted")


@admin_bp.post("/add-folder")
@admin_required
def add_folder():
    name = request.form.get("name")
    return _run(lambda: catalog.add_folder(name), f"Folder {(name or '').strip()} added")


@admin_bp.post("/delete-folder")
@admin_required
def delete_folder():
    return _run(lambda: catalog.delete_folder(request.form.get("id")), "Folder deleted")


@admin_bp.post("/add-video")
@admin_required
def add_video():
    f = request.form
    return _run(lambda: catalog.add_video(f.get("title"), f.get("filename"), f.get("folder_id")),
                f"Video {(f.get('title') or '').strip()} added")


@admin_bp.post("/delete-video")
@admin_required
def delete_video():
    return _run(lambda: catalog.delete_video(request.form.get("id")), "Video deleted")
