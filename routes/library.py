# routes/library.py — navigation utilisateur (dossiers, vidéos d'un dossier, fichiers)
from flask import Blueprint, render_template, request, redirect, url_for, current_app, send_from_directory

import catalog
from errors import NotFound, ValidationError
from security import login_required

library_bp = Blueprint("library", __name__)


@library_bp.get("/videos")
@login_required
def folders():
    sort = (request.args.get("sort") or "az").lower()
    return render_template("folders.html", folders=catalog.list_folders(sort), sort=sort)


@library_bp.get("/videos/folder/<folder_id>")
@login_required
def folder(folder_id: str):
    # id négatif, non numérique ou inconnu -> retour à la liste
    try:
        f = catalog.get_folder(catalog.parse_id(folder_id, "folder"))
    except (NotFound, ValidationError):
        return redirect(url_for("library.folders"))
    videos = list(f.videos)
    return render_template("folder.html", folder=f, videos=videos, empty=not videos)


@library_bp.get("/media/<path:filename>")
@login_required
def media(filename: str):
    # send_from_directory refuse les chemins qui sortent de MEDIA_ROOT (404)
    return send_from_directory(current_app.config["MEDIA_ROOT"], filename)
