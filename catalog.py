# catalog.py — dossiers et vidéos (création, suppression en cascade, listes)
from flask import current_app
from sqlalchemy import func

from errors import NotFound, ValidationError, check_length
from extensions import db, commit
from models import Folder, Video, FOLDER_NAME_MAX, TITLE_MAX, FILENAME_MAX


def parse_id(raw, label: str) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} id")


def parse_folder_ref(raw) -> int | None:
    """'' / None / espaces -> None (vidéo non classée), sinon id entier d'un dossier existant."""
    if raw is None or str(raw).strip().lower() in ("", "null", "none"):
        return None
    folder_id = parse_id(raw, "folder")
    if db.session.get(Folder, folder_id) is None:
        raise ValidationError(f"Folder {folder_id} does not exist")
    return folder_id


def video_counts() -> dict:
    return dict(db.session.query(Video.folder_id, func.count(Video.id))
                .group_by(Video.folder_id).all())


def list_folders(sort: str = "az") -> list[dict]:
    q = Folder.query
    if sort == "za":
        q = q.order_by(Folder.name.desc(), Folder.id.desc())
    elif sort == "recent":
        q = q.order_by(Folder.created_at.desc(), Folder.id.desc())
    elif sort == "count":
        sub = (db.session.query(Video.folder_id, func.count(Video.id).label("c"))
               .group_by(Video.folder_id).subquery())
        q = q.outerjoin(sub, Folder.id == sub.c.folder_id) \
             .order_by(sub.c.c.is_(None).asc(), sub.c.c.desc(), Folder.name.asc())
    else:
        q = q.order_by(Folder.name.asc(), Folder.id.asc())

    counts = video_counts()
    return [{"id": f.id, "name": f.name, "created_at": f.created_at,
             "count": int(counts.get(f.id, 0))} for f in q.all()]


def get_folder(folder_id: int) -> Folder:
    folder = db.session.get(Folder, folder_id)
    if folder is None:
        raise NotFound(f"Folder {folder_id} not found")
    return folder


def add_folder(name: str) -> Folder:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Folder name is required")
    check_length(name, FOLDER_NAME_MAX, "Folder name")
    folder = Folder(name=name)
    db.session.add(folder)
    commit(f"add folder {name}")
    current_app.logger.info("folder created: %s id=%s", folder.name, folder.id)
    return folder


def delete_folder(raw_id) -> int:
    """Supprime le dossier et ses vidéos dans le même commit. Renvoie le nb de vidéos supprimées."""
    folder = get_folder(parse_id(raw_id, "folder"))
    removed = len(folder.videos)
    db.session.delete(folder)
    commit(f"delete folder {folder.id}")
    current_app.logger.info("folder deleted: %s id=%s (%d videos)", folder.name, folder.id, removed)
    return removed


def add_video(title: str, filename: str, folder_ref=None) -> Video:
    title = (title or "").strip()
    filename = (filename or "").strip()
    if not title or not filename:
        raise ValidationError("Title and filename are required")
    check_length(title, TITLE_MAX, "Title")
    check_length(filename, FILENAME_MAX, "Filename")
    video = Video(title=title, filename=filename, folder_id=parse_folder_ref(folder_ref))
    db.session.add(video)
    commit(f"add video {title}")
    current_app.logger.info("video created: %s (%s) folder=%s", video.title, video.filename, video.folder_id)
    return video


def delete_video(raw_id) -> None:
    video_id = parse_id(raw_id, "video")
    video = db.session.get(Video, video_id)
    if video is None:
        raise NotFound(f"Video {video_id} not found")
    db.session.delete(video)
    commit(f"delete video {video_id}")
    current_app.logger.info("video deleted: %s id=%s", video.title, video_id)
