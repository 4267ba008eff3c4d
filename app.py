# app.py — Flask + SQLAlchemy : site vidéo privé (comptes, dossiers, vidéos, API bot)
from __future__ import annotations
import os, secrets, logging

import click
from flask import Flask, render_template, g
from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.serving import run_simple

from errors import PersistenceError
from extensions import db, migrate


def _normalize_db_url(uri: str) -> str:
    if not uri:
        return uri
    if uri.startswith("postgres://"):
        uri = "postgresql://" + uri[len("postgres://"):]
    return uri


def _choose_db_uri(app: Flask) -> str:
    env_uri = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
    if env_uri:
        return _normalize_db_url(env_uri)
    os.makedirs(app.instance_path, exist_ok=True)
    sqlite_path = os.path.join(app.instance_path, "videosite.db").replace("\\", "/")
    return f"sqlite:///{sqlite_path}"


def _load_config(app: Flask, test_config: dict | None) -> None:
    app.config["SQLALCHEMY_DATABASE_URI"] = _choose_db_uri(app)
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    app.config["ADMIN_USERNAME"] = os.getenv("ADMIN_USERNAME", "admin")
    app.config["ADMIN_PASSWORD"] = os.getenv("ADMIN_PASSWORD")
    app.config["BOT_API_SECRET"] = os.getenv("BOT_API_SECRET")
    app.config["BOT_API_HEADER"] = os.getenv("BOT_API_HEADER", "X-Bot-Secret")
    app.config["MEDIA_ROOT"] = os.getenv("MEDIA_ROOT") or os.path.join(app.instance_path, "videos")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()
    app.config["SEED_ADMIN"] = True
    if test_config:
        app.config.update(test_config)

    if not app.config["SECRET_KEY"]:
        # clé éphémère : les sessions ne survivent pas à un redémarrage
        app.config["SECRET_KEY"] = secrets.token_hex(32)
        app.logger.warning("SECRET_KEY not set, using a random per-process key")

    if make_url(app.config["SQLALCHEMY_DATABASE_URI"]).get_backend_name() != "sqlite":
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "pool_pre_ping": True,
            "pool_recycle": 280,
            "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
            "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
            "pool_timeout": 30,
        }


def create_app(test_config: dict | None = None) -> Flask:
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True,
                static_folder="static", template_folder="templates")
    _load_config(app, test_config)
    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"], logging.INFO))

    try:
        url = make_url(app.config["SQLALCHEMY_DATABASE_URI"])
        app.logger.info("DB -> %s", url.render_as_string(hide_password=True))
    except Exception:
        app.logger.info("DB -> %s", app.config["SQLALCHEMY_DATABASE_URI"])

    db.init_app(app)
    migrate.init_app(app, db)

    with app.app_context():
        from models import User, Folder, Video  # noqa
        from seed import ensure_admin
        try:
            if db.engine.url.get_backend_name() == "sqlite":
                db.create_all()
            if app.config["SEED_ADMIN"]:
                ensure_admin()
        except (SQLAlchemyError, PersistenceError) as e:
            # base pas encore migrée : `flask db upgrade` doit rester possible
            db.session.rollback()
            app.logger.warning("DB warmup failed (run `flask db upgrade`?): %s", e)

    @app.teardown_appcontext
    def _shutdown_session(exc=None):
        db.session.remove()

    from security import load_current_user
    app.before_request(load_current_user)

    @app.context_processor
    def inject_user():
        return {"current_user": g.get("user")}

    # Blueprints
    from routes.auth import auth_bp
    from routes.admin import admin_bp
    from routes.library import library_bp
    from routes.bot import bot_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp,   url_prefix="/admin")
    app.register_blueprint(library_bp)
    app.register_blueprint(bot_bp,     url_prefix="/api")

    @app.errorhandler(403)
    def forbidden(e):
        return render_template("403.html"), 403

    # Debug DB
    from security import admin_required

    @app.route("/__db")
    @admin_required
    def __db():
        url_str = db.engine.url.render_as_string(hide_password=True)
        try:
            u = db.session.execute(text('select count(*) from "user"')).scalar_one()
            f = db.session.execute(text("select count(*) from folder")).scalar_one()
            v = db.session.execute(text("select count(*) from video")).scalar_one()
        except Exception as e:
            app.logger.exception("DB check failed")
            return {"url": url_str, "error": str(e)}, 500
        return {"url": url_str, "user_count": u, "folder_count": f, "video_count": v}, 200

    @app.cli.command("create-user")
    @click.argument("username")
    @click.option("--role", type=click.Choice(["admin", "user"]), default="user")
    @click.password_option()
    def create_user_cmd(username, role, password):
        """Crée un compte depuis la ligne de commande."""
        from accounts import create_user
        from errors import AppError
        try:
            user = create_user(username, password, role)
        except AppError as e:
            raise click.ClickException(e.message)
        click.echo(f"created {user.username} ({user.role}) id={user.id}")

    return app


if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", "0") in ("1", "true", "True")
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "0"))
    # app.run() remplace le port 0 par 5000 ; run_simple garde le port éphémère
    run_simple(host, port, create_app(), use_reloader=debug, use_debugger=debug)
