# seed.py — compte administrateur initial + données de démo
# Usage : python seed.py   (réinitialise la base puis crée dossiers/vidéos de test)
import secrets

from flask import current_app

from extensions import db, commit
from models import User, Folder, Video, ROLE_ADMIN
from security import hash_password


def ensure_admin() -> User | None:
    """Crée l'administrateur par défaut s'il n'existe pas (mot de passe configuré ou aléatoire)."""
    username = current_app.config["ADMIN_USERNAME"]
    if User.query.filter_by(username=username).first():
        return None
    password = current_app.config.get("ADMIN_PASSWORD")
    generated = not password
    if generated:
        password = secrets.token_urlsafe(12)
    admin = User(username=username, password_hash=hash_password(password), role=ROLE_ADMIN)
    db.session.add(admin)
    commit("seed admin")
    if generated:
        current_app.logger.warning("admin account %r created with generated password: %s",
                                   username, password)
    else:
        current_app.logger.info("admin account %r created", username)
    return admin


DEMO = {
    "Lectures": [("Lecture 1", "lectures/l1.mp4"), ("Lecture 2", "lectures/l2.mp4")],
    "Tutorials": [("Getting started", "tutorials/start.mp4")],
}


def populate_demo() -> None:
    for name, videos in DEMO.items():
        folder = Folder(name=name)
        db.session.add(folder)
        for title, filename in videos:
            folder.videos.append(Video(title=title, filename=filename))
    db.session.add(Video(title="Welcome", filename="welcome.mp4"))
    commit("populate demo")


def reset_demo() -> None:
    """Réinitialise la base puis crée admin + données de démo (un seul admin, un seul mot de passe)."""
    db.drop_all()
    db.create_all()
    ensure_admin()
    populate_demo()


if __name__ == "__main__":
    from app import create_app

    # pas de seed au démarrage : reset_demo() s'en charge après le drop_all
    app = create_app({"SEED_ADMIN": False})
    with app.app_context():
        reset_demo()
        print("✅ Admin, dossiers et vidéos de test créés !")
