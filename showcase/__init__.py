"""
Showcase - Marketing Site Backend
=================================

Flask backend for a small-business marketing site with an admin-gated
content layer:
- Google OAuth sign-in with an admin email allowlist
- Projects portfolio with Cloudinary image galleries and tags
- Editable page copy (site settings)
- Public /health endpoint

Usage:
    from flask import Flask
    from showcase import Showcase

    app = Flask(__name__)
    showcase = Showcase(app)
"""

import os
from datetime import timedelta

from .core.config import Config
from .core.database import Database, db

__version__ = '0.1.0'

DEFAULT_FEATURES = {
    'auth': True,
    'projects': True,
    'tags': True,
    'site_settings': True,
    'media': True,
    'health': True,
}

CONFIG_DEFAULTS = (
    'SECRET_KEY', 'DB_DIR', 'GOOGLE_CLIENT_ID', 'GOOGLE_CLIENT_SECRET',
    'ADMIN_EMAILS', 'SESSION_TOKEN_COOKIE', 'SESSION_MAX_AGE_DAYS',
    'CLOUDINARY_URL', 'CLOUDINARY_PROJECTS_FOLDER', 'CORS_ORIGINS',
)


class Showcase:
    """Flask extension that wires the Showcase modules into a host app."""

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered_modules = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config_defaults(app)
        self._setup_database(app)

        from .modules.auth.utils import configure_oauth
        configure_oauth(app)

        self._setup_storage(app)
        self._setup_cors(app)
        self._register_modules(app)

        app.extensions['showcase'] = self

    def _apply_config_defaults(self, app):
        """Copy Config values into app.config without overriding host settings."""
        for key in CONFIG_DEFAULTS:
            if app.config.get(key) in (None, ''):
                app.config[key] = getattr(Config, key)

        # Flask ships SESSION_COOKIE_SECURE=False, so the environment can only turn it on
        if Config.SESSION_COOKIE_SECURE:
            app.config['SESSION_COOKIE_SECURE'] = True

        if not app.config.get('DATABASE_URL'):
            app.config['DATABASE_URL'] = os.getenv('DATABASE_URL') or \
                f"sqlite:///{os.path.join(app.config['DB_DIR'], 'showcase.db')}"

        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            app.config['SQLALCHEMY_DATABASE_URI'] = app.config['DATABASE_URL']
        app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
        app.config.setdefault('SESSION_COOKIE_HTTPONLY', True)
        app.config.setdefault('SESSION_COOKIE_SAMESITE', 'Lax')
        app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(
            days=int(app.config['SESSION_MAX_AGE_DAYS'])
        )

        if not app.config.get('SECRET_KEY'):
            print("Warning: FLASK_SECRET_KEY is not set; sessions cannot be signed")

    def _setup_database(self, app):
        Database.ensure_sqlite_dir(app.config['SQLALCHEMY_DATABASE_URI'])
        db.init_app(app)
        Database.init_db(app)

    def _setup_storage(self, app):
        from .core import storage

        with app.app_context():
            if storage.is_configured():
                storage.configure()
            else:
                print("Cloudinary not configured; image uploads are disabled")

    def _setup_cors(self, app):
        origins = app.config.get('CORS_ORIGINS') or ''
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(',') if o.strip()]
        if not origins:
            return

        from flask_cors import CORS
        CORS(app, resources={r'/api/*': {'origins': origins}}, supports_credentials=True)

    def _feature_enabled(self, name):
        features = self._config.get('features', {})
        return features.get(name, DEFAULT_FEATURES.get(name, False))

    def _register_modules(self, app):
        from .modules.auth import auth_bp
        from .modules.health import health_bp
        from .modules.media import media_bp
        from .modules.projects import projects_bp
        from .modules.site_settings import site_settings_bp
        from .modules.tags import tags_bp

        blueprints = [
            ('auth', auth_bp),
            ('projects', projects_bp),
            ('tags', tags_bp),
            ('site_settings', site_settings_bp),
            ('media', media_bp),
            ('health', health_bp),
        ]
        for name, blueprint in blueprints:
            if not self._feature_enabled(name):
                continue
            app.register_blueprint(blueprint)
            self._registered_modules.append(name)

    def get_registered_modules(self):
        return list(self._registered_modules)


__all__ = ['Showcase', 'Config', 'db']
