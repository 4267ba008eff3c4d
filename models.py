# models.py — schéma (User, Folder, Video)
from datetime import datetime
from extensions import db

ROLE_ADMIN = "admin"
ROLE_USER  = "user"
ROLES      = (ROLE_ADMIN, ROLE_USER)

# longueurs max des colonnes texte (vérifiées avant insertion, Postgres les impose)
USERNAME_MAX = 80
FOLDER_NAME_MAX = 160
TITLE_MAX = 200
FILENAME_MAX = 600


class User(db.Model):
    __tablename__ = "user"
    id              = db.Column(db.Integer, primary_key=True)
    username        = db.Column(db.String(USERNAME_MAX), unique=True, nullable=False)
    password_hash   = db.Column(db.String(255), nullable=False)
    role            = db.Column(db.String(10), nullable=False, default=ROLE_USER)
    # bumped on password change; sessions carrying an older value are dropped
    session_version = db.Column(db.Integer, nullable=False, default=1)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self):
        return f"<User {self.id} {self.username!r} {self.role}>"


class Folder(db.Model):
    __tablename__ = "folder"
    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(FOLDER_NAME_MAX), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    videos     = db.relationship("Video", backref="folder",
                                 cascade="all, delete-orphan", lazy=True,
                                 order_by="Video.id")


class Video(db.Model):
    __tablename__ = "video"
    id         = db.Column(db.Integer, primary_key=True)
    title      = db.Column(db.String(TITLE_MAX), nullable=False)
    filename   = db.Column(db.String(FILENAME_MAX), nullable=False)   # relatif à MEDIA_ROOT
    folder_id  = db.Column(db.Integer, db.ForeignKey("folder.id"), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
