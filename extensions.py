# extensions.py — instances partagées (db, migrate) initialisées par create_app()
from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError

db = SQLAlchemy()
migrate = Migrate()


def commit(what: str) -> None:
    """Commit la session courante; en cas d'échec rollback + log, puis PersistenceError."""
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("DB commit failed (%s)", what)
        raise PersistenceError() from exc
