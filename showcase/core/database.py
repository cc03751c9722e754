import os
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text

# Single SQLAlchemy handle shared by every module; bound in Showcase.init_app
db = SQLAlchemy()


def utcnow():
    """Naive UTC timestamp, the format every model column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return uuid.uuid4().hex


class Database:

    @staticmethod
    def ensure_sqlite_dir(database_url):
        """Create the parent directory of a file-based SQLite URL."""
        prefix = 'sqlite:///'
        if not database_url or not database_url.startswith(prefix):
            return
        path = database_url[len(prefix):]
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    @staticmethod
    def init_db(app):
        """Create all tables for the registered models."""
        # Models must be imported so their tables land on db.metadata
        from . import models  # noqa: F401

        with app.app_context():
            db.create_all()
            print("Showcase database initialized successfully")

    @staticmethod
    def ping():
        """Return True when the database answers a trivial query."""
        try:
            db.session.execute(text('SELECT 1'))
            return True
        except Exception as e:
            print(f"Database ping failed: {e}")
            db.session.rollback()
            return False
