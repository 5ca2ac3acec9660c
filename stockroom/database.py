"""
Database instance and transaction helpers
"""

from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()


def init_db(app):
    """Bind the database and migrations to the Flask app"""
    db.init_app(app)
    migrate.init_app(app, db)
    return db


@contextmanager
def transaction():
    """Run a unit of work that commits once or rolls back entirely."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
